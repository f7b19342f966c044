from collections.abc import Mapping
from typing import Any, Dict, Iterator, Tuple

IncludeDirective = Dict[str, "IncludeDirective"]


def normalize_directive(requested: Any) -> IncludeDirective:
    """
        Turn a requested-include description into nested dicts.

        Accepts nested mappings (``None`` values count as ``{}``) or an
        iterable of dotted paths such as ``["comments.author", "tags"]``.
    """
    if requested is None:
        return {}

    if isinstance(requested, Mapping):
        return {
            str(name): normalize_directive(nested)
            for name, nested in requested.items()
        }

    if isinstance(requested, str):
        raise TypeError("Pass a list of dotted paths, not a bare string")

    directive: IncludeDirective = {}
    for path in requested:
        node = directive
        for part in str(path).split("."):
            if part:
                node = node.setdefault(part, {})
    return directive


def merge_directives(target: IncludeDirective, other: Mapping) -> IncludeDirective:
    """Deep-merge ``other`` into ``target`` and return ``target``"""
    for name, nested in other.items():
        merge_directives(target.setdefault(name, {}), nested or {})
    return target


def flatten_directive(directive: Mapping, prefix: Tuple[str, ...] = ()) -> Iterator[str]:
    """Yield every dotted path of a directive, parents before children"""
    for name, nested in directive.items():
        path = prefix + (name,)
        yield ".".join(path)
        if nested:
            yield from flatten_directive(nested, path)
