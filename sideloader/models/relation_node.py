import logging
from typing import Any, Callable, List, Optional, Sequence, TYPE_CHECKING

from .relation_kind import RelationKind
from .relation_options import RelationOptions
from ..errors import MisconfiguredRelationError

if TYPE_CHECKING:
    from .relation_tree import RelationTree
    from ..associators.base import Associator

logger = logging.getLogger(__name__)

FetchFn = Callable[[List[Any]], Any]
AssignFn = Callable[[List[Any], List[Any]], None]


class RelationNode:
    """
        A single declared relation: how to fetch the related records for a
        batch of parents and how to attach them back.

        Custom ``fetch``/``assign`` callbacks always win; otherwise the
        defaults offered by the associator (picked once, here) are used.
    """

    polymorphic = False

    def __init__(
        self,
        name: str,
        options: RelationOptions,
        associator: "Associator",
        target_tree: Optional["RelationTree"] = None
    ):
        self.name = name
        self.options = options
        self.kind: RelationKind = options.kind
        self.primary_key = options.primary_key
        self.foreign_key = options.foreign_key
        self.model = options.model
        self.associator = associator
        self.target_tree = target_tree
        self.tree_name: Optional[str] = None

        self.fetch_fn: Optional[FetchFn] = None
        self.assign_fn: Optional[AssignFn] = None

        self._default_fetch = associator.default_fetch(self)
        self._default_assign = associator.default_assign(self)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} kind={self.kind.value}>"

    def set_fetch(self, fn: FetchFn) -> FetchFn:
        """Install the fetch callback: parents -> unresolved scope"""
        self.fetch_fn = fn
        return fn

    def set_assign(self, fn: AssignFn) -> AssignFn:
        """Install the assign callback: (parents, children) -> None"""
        self.assign_fn = fn
        return fn

    @property
    def fetcher(self) -> Optional[FetchFn]:
        return self.fetch_fn or self._default_fetch

    @property
    def assigner(self) -> Optional[AssignFn]:
        return self.assign_fn or self._default_assign

    def register_relation(
        self,
        name: str,
        options: Optional[RelationOptions] = None,
        configure: Optional[Callable[["RelationNode"], None]] = None,
        **option_fields
    ) -> "RelationNode":
        """Declare a nested relation on this relation's target tree"""
        return self.target_tree.register_relation(name, options, configure, **option_fields)

    def missing_operations(self) -> List[str]:
        missing = []
        if self.fetcher is None:
            missing.append("fetch")
        if self.assigner is None:
            missing.append("assign")
        return missing

    def validate(self):
        missing = self.missing_operations()
        if missing:
            raise MisconfiguredRelationError(self.name, missing, self.tree_name)

    def fetch(self, parents: Sequence[Any]) -> Any:
        self.validate()
        return self.fetcher(list(parents))

    def assign(self, parents: Sequence[Any], children: Sequence[Any]):
        self.validate()
        self.assigner(list(parents), list(children))

    def associate(self, parent: Any, child: Any):
        self.associator.associate(parent, child, self.name, self.kind)
