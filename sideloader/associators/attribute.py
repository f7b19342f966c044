import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, List

from .base import Associator

logger = logging.getLogger(__name__)


class AttributeAssociator(Associator):
    """
        Associator for in-memory records: plain objects or dicts.

        Base scopes are iterables of records or zero-argument callables
        returning one. There is no default fetch.
    """

    def resolve(self, base: Any) -> List[Any]:
        if base is None:
            return []
        if callable(base):
            base = base()
        return list(base)

    def paginate(self, base: Any, page: int, per_page: int) -> Any:
        records = self.resolve(base)
        start = (page - 1) * per_page
        return records[start:start + per_page]

    def read(self, record: Any, attribute: str) -> Any:
        if isinstance(record, Mapping):
            return record.get(attribute)
        return getattr(record, attribute, None)

    def write(self, record: Any, attribute: str, value: Any):
        if isinstance(record, MutableMapping):
            record[attribute] = value
        else:
            setattr(record, attribute, value)
