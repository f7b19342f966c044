import logging
from typing import Any, Callable, List, Optional

from sqlalchemy import inspect, select
from sqlalchemy.orm.attributes import set_committed_value
from sqlalchemy.sql import Select

from .base import Associator

logger = logging.getLogger(__name__)


class SqlAlchemyAssociator(Associator):
    """
        Associator for SQLAlchemy ORM models.

        Relations declared with ``model=`` and a ``foreign_key`` get a
        default fetch that selects the related rows for the whole parent
        batch with a single ``IN`` query:

            has_many/has_one: ``SELECT model WHERE model.<foreign_key> IN (parent ids)``
            belongs_to/to_one: ``SELECT model WHERE model.<primary_key> IN (parent foreign keys)``

        ``session`` is a Session or a scoped_session; it is used to execute
        selects and never committed. A Session is not thread-safe, so
        concurrent resolution falls back to sequential fetches.
    """

    thread_safe = False

    def __init__(self, session):
        self.session = session

    def default_fetch(self, node) -> Optional[Callable[[List[Any]], Any]]:
        if node.model is None or not node.foreign_key:
            return None

        model = node.model

        def fetch(parents: List[Any]) -> Select:
            if node.kind.foreign_key_on_parent:
                column = getattr(model, node.primary_key)
                keys = {self.read(parent, node.foreign_key) for parent in parents}
            else:
                column = getattr(model, node.foreign_key)
                keys = {self.read(parent, node.primary_key) for parent in parents}
            keys.discard(None)

            stmt = select(model).where(column.in_(list(keys)))
            return stmt.order_by(*inspect(model).primary_key)

        return fetch

    def resolve(self, base: Any) -> List[Any]:
        if isinstance(base, Select):
            logger.debug(f"Executing sideload select: {base}")
            return list(self.session.scalars(base).all())
        if base is None:
            return []
        return list(base)

    def paginate(self, base: Any, page: int, per_page: int) -> Any:
        if isinstance(base, Select):
            return base.limit(per_page).offset((page - 1) * per_page)
        records = self.resolve(base)
        start = (page - 1) * per_page
        return records[start:start + per_page]

    def write(self, record: Any, attribute: str, value: Any):
        state = inspect(record, raiseerr=False)
        if state is not None and attribute in state.mapper.relationships:
            # Populate without flagging the relationship as modified
            set_committed_value(record, attribute, value)
        else:
            setattr(record, attribute, value)

    def associate(self, parent: Any, child: Any, name: str, kind):
        if kind.is_collection:
            current = list(self._loaded_value(parent, name) or [])
            current.append(child)
            self.write(parent, name, current)
        else:
            self.write(parent, name, child)

    def _loaded_value(self, record: Any, attribute: str) -> Any:
        state = inspect(record, raiseerr=False)
        if state is not None and attribute in state.mapper.relationships:
            # Reading an unloaded relationship would emit a lazy load
            return state.dict.get(attribute)
        return getattr(record, attribute, None)
