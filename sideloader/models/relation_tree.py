import logging
import itertools
from typing import Callable, Dict, Iterator, Optional, Set

from .relation_node import RelationNode
from .relation_options import RelationOptions
from .polymorphic_group import PolymorphicGroup
from ..associators.attribute import AttributeAssociator
from ..errors import SideloadConfigurationError

logger = logging.getLogger(__name__)

_tree_ids = itertools.count(1)


class RelationTree:
    """
        The relations declared for one entity type.

        Trees are built once at configuration time and only read during
        resolution. Nodes may point at any tree (including their own), so
        whole-graph walks key their visited sets on ``tree_id``.
    """

    def __init__(self, name: str = "base", associator=None):
        self.tree_id = next(_tree_ids)
        self.name = name
        self.associator = associator or AttributeAssociator()
        self.relations: Dict[str, RelationNode] = {}
        self.frozen = False

    def __repr__(self) -> str:
        return f"<RelationTree {self.name} id={self.tree_id} relations={list(self.relations)}>"

    def __contains__(self, name: str) -> bool:
        return name in self.relations

    def __iter__(self) -> Iterator[str]:
        return iter(self.relations)

    def __len__(self) -> int:
        return len(self.relations)

    def relation(self, name: str) -> Optional[RelationNode]:
        return self.relations.get(name)

    def register_relation(
        self,
        name: str,
        options: Optional[RelationOptions] = None,
        configure: Optional[Callable[[RelationNode], None]] = None,
        **option_fields
    ) -> RelationNode:
        """
            Declare a relation. Re-registering a name replaces it.

            ``configure`` receives the new node and is the place to install
            ``set_fetch``/``set_assign`` (or ``group_by``/``register_group``
            for polymorphic relations).
        """
        if self.frozen:
            raise SideloadConfigurationError(
                f"Cannot register '{name}' on frozen tree '{self.name}'"
            )

        if options is None:
            options = RelationOptions(**option_fields)
        elif option_fields:
            options = options.merged(**option_fields)

        if options.polymorphic:
            node = PolymorphicGroup(name, options, self.associator)
        else:
            target = options.target
            if target is None:
                target = RelationTree(name=name, associator=self.associator)
            node = RelationNode(name, options, self.associator, target_tree=target)
        node.tree_name = self.name

        if configure:
            configure(node)

        if name in self.relations:
            logger.warning(f"Relation '{name}' on '{self.name}' redeclared, replacing")
        self.relations[name] = node
        logger.debug(f"Registered relation {self.name}.{name} ({options.kind.value})")
        return node

    def _walk(self, visited: Set[int]) -> Iterator["RelationTree"]:
        if self.tree_id in visited:
            return
        visited.add(self.tree_id)
        yield self
        for node in self.relations.values():
            branches = node.groups.values() if node.polymorphic else [node]
            for branch in branches:
                if branch.target_tree is not None:
                    yield from branch.target_tree._walk(visited)

    def reachable_trees(self) -> Iterator["RelationTree"]:
        """This tree and every tree reachable from it, each once"""
        return self._walk(set())

    def validate(self):
        """Raise MisconfiguredRelationError for the first incomplete relation"""
        for tree in self.reachable_trees():
            for node in tree.relations.values():
                node.validate()

    def freeze(self):
        """Validate and close every reachable tree to further registration"""
        self.validate()
        for tree in self.reachable_trees():
            tree.frozen = True
        logger.info(f"Relation tree '{self.name}' frozen")


def register_relation(
    tree: RelationTree,
    name: str,
    options: Optional[RelationOptions] = None,
    configure: Optional[Callable[[RelationNode], None]] = None
) -> RelationNode:
    """Configuration-time registration; not safe once resolution has started"""
    return tree.register_relation(name, options, configure)
