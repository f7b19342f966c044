import logging
from typing import Any, List, Optional

from ..config import get_settings

logger = logging.getLogger(__name__)


class Scope:
    """
        An unresolved fetch request bound to the associator that can run it.

        Root scopes paginate by default. Sideloaded scopes are always built
        with ``default_paginate=False``: a page of parents gets all of its
        children.
    """

    def __init__(
        self,
        base: Any,
        associator,
        default_paginate: bool = True,
        namespace: Optional[str] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None
    ):
        self.base = base
        self.associator = associator
        self.default_paginate = default_paginate
        self.namespace = namespace
        self.page = page or 1
        self.per_page = per_page or get_settings().DEFAULT_PAGE_SIZE

    def __repr__(self) -> str:
        return f"<Scope namespace={self.namespace} paginate={self.default_paginate}>"

    def resolve(self) -> List[Any]:
        base = self.base
        if self.default_paginate:
            base = self.associator.paginate(base, self.page, self.per_page)

        records = self.associator.resolve(base)
        logger.debug(f"[{self.namespace}] resolved {len(records)} records")
        return records
