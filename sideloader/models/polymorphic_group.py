import logging
from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence

from .relation_node import RelationNode
from .relation_options import RelationOptions
from ..errors import MisconfiguredRelationError

logger = logging.getLogger(__name__)


class PolymorphicGroup(RelationNode):
    """
        A relation whose concrete target depends on the parent record.

        An ``Office`` with a polymorphic ``organization`` that is either a
        ``Business`` or a ``Government``::

            group = offices.register_relation("organization", kind="belongs_to", polymorphic=True)
            group.group_by(lambda office: office.organization_type)
            group.register_group("Business", target=businesses, foreign_key="organization_id")
            group.register_group("Government", target=governments, foreign_key="organization_id")

        Branches are named after the group, so default association writes
        the public attribute (``organization``) rather than the branch key.
    """

    polymorphic = True

    def __init__(self, name: str, options: RelationOptions, associator):
        super().__init__(name, options, associator, target_tree=None)
        self.discriminator: Optional[Callable[[Any], Hashable]] = None
        self.groups: Dict[Hashable, RelationNode] = {}

    def group_by(self, fn: Callable[[Any], Hashable]) -> Callable[[Any], Hashable]:
        """Install the discriminator used to partition parents"""
        self.discriminator = fn
        return fn

    def register_group(
        self,
        key: Hashable,
        options: Optional[RelationOptions] = None,
        configure: Optional[Callable[[RelationNode], None]] = None,
        **option_fields
    ) -> RelationNode:
        """Declare the concrete relation used for parents classified as ``key``"""
        # Local import: relation_tree imports this module
        from .relation_tree import RelationTree

        base = self.options.merged(polymorphic=False)
        branch_options = base.merged(**option_fields) if options is None else options
        if branch_options.polymorphic:
            branch_options = branch_options.merged(polymorphic=False)

        target = branch_options.target
        if target is None:
            target = RelationTree(name=str(key), associator=self.associator)
        branch = RelationNode(self.name, branch_options, self.associator, target_tree=target)
        branch.tree_name = self.tree_name

        if configure:
            configure(branch)

        self.groups[key] = branch
        logger.debug(f"Registered polymorphic branch {self.name}[{key!r}]")
        return branch

    def register_relation(self, name, options=None, configure=None, **option_fields) -> RelationNode:
        return self.register_group(name, options, configure, **option_fields)

    def missing_operations(self) -> List[str]:
        return [] if self.discriminator else ["group_by"]

    def validate(self):
        missing = self.missing_operations()
        if missing:
            raise MisconfiguredRelationError(self.name, missing, self.tree_name)
        for branch in self.groups.values():
            branch.validate()

    def partition(self, parents: Sequence[Any]) -> Dict[Hashable, List[Any]]:
        """Group parents by discriminator value, keeping relative order"""
        partitions: Dict[Hashable, List[Any]] = {}
        for record in parents:
            partitions.setdefault(self.discriminator(record), []).append(record)
        return partitions

    def fetch(self, parents):
        raise TypeError(f"Polymorphic relation '{self.name}' is fetched per group")

    def assign(self, parents, children):
        raise TypeError(f"Polymorphic relation '{self.name}' is assigned per group")
