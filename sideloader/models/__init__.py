from .relation_kind import RelationKind
from .relation_options import RelationOptions
from .relation_node import RelationNode
from .polymorphic_group import PolymorphicGroup
from .relation_tree import RelationTree, register_relation

__all__ = [
    "RelationKind",
    "RelationOptions",
    "RelationNode",
    "PolymorphicGroup",
    "RelationTree",
    "register_relation",
]
