import sys
import os
import json
import argparse
import importlib
import logging

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from sideloader import IncludeDirectiveCompiler, RelationTree, setup_logging

logger = logging.getLogger(__name__)


def load_tree(target: str) -> RelationTree:
    """Import ``package.module:attribute`` and return the RelationTree it names"""
    module_name, _, attribute = target.partition(":")
    if not attribute:
        raise ValueError(f"Expected 'module:attribute', got '{target}'")

    tree = getattr(importlib.import_module(module_name), attribute)
    if callable(tree) and not isinstance(tree, RelationTree):
        tree = tree()
    if not isinstance(tree, RelationTree):
        raise TypeError(f"{target} is not a RelationTree")
    return tree


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Describe the includable relations of a relation tree')
    parser.add_argument('target', help='Tree to describe, as module:attribute')
    parser.add_argument('--paths', action='store_true', help='Print flattened dotted paths instead of JSON')
    parser.add_argument('--check', nargs='*', metavar='PATH', help='Report which dotted include paths are unsupported')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)

    setup_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    tree = load_tree(args.target)
    tree.validate()
    compiler = IncludeDirectiveCompiler()

    if args.check is not None:
        unsupported = compiler.unsupported_paths(tree, args.check)
        for path in unsupported:
            print(f"unsupported: {path}")
        return 1 if unsupported else 0

    if args.paths:
        for path in compiler.include_paths(tree):
            print(path)
    else:
        print(json.dumps({tree.name: compiler.compile(tree)}, indent=2))
    return 0


if __name__ == '__main__':
    sys.exit(main())
