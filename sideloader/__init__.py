from .errors import (
    SideloadError,
    SideloadConfigurationError,
    MisconfiguredRelationError,
    MissingSideloadError,
)
from .config import Settings, get_settings, configure, reset_settings
from .models import (
    RelationKind,
    RelationOptions,
    RelationNode,
    PolymorphicGroup,
    RelationTree,
    register_relation,
)
from .associators import Associator, AttributeAssociator, SqlAlchemyAssociator
from .resolution import Scope, Resolver, IncludeDirectiveCompiler, normalize_directive, flatten_directive
from .logging_config import setup_logging

__all__ = [
    "SideloadError",
    "SideloadConfigurationError",
    "MisconfiguredRelationError",
    "MissingSideloadError",
    "Settings",
    "get_settings",
    "configure",
    "reset_settings",
    "RelationKind",
    "RelationOptions",
    "RelationNode",
    "PolymorphicGroup",
    "RelationTree",
    "register_relation",
    "Associator",
    "AttributeAssociator",
    "SqlAlchemyAssociator",
    "Scope",
    "Resolver",
    "IncludeDirectiveCompiler",
    "normalize_directive",
    "flatten_directive",
    "setup_logging",
]
