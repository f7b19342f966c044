from .scope import Scope
from .directive import IncludeDirective, normalize_directive, merge_directives, flatten_directive
from .resolver import Resolver, PendingLoad
from .directive_compiler import IncludeDirectiveCompiler

__all__ = [
    "Scope",
    "IncludeDirective",
    "normalize_directive",
    "merge_directives",
    "flatten_directive",
    "Resolver",
    "PendingLoad",
    "IncludeDirectiveCompiler",
]
