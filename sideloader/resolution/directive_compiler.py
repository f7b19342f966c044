import logging
from typing import Any, List, Optional, Set, Tuple

from .directive import IncludeDirective, flatten_directive, merge_directives, normalize_directive
from ..models import RelationNode, RelationTree

logger = logging.getLogger(__name__)


class IncludeDirectiveCompiler:
    """
        Describes everything that can be included from a relation tree.

        Given

            users:    {}
            comments: {author -> users}
            posts:    {comments -> comments, author -> users}

        ``compile(posts)`` returns
        ``{"comments": {"author": {}}, "author": {}}``.

        The visited set is shared across the whole walk and keyed on
        ``tree_id``: a tree seen before renders as ``{}``. Self-referencing
        and mutually referencing trees therefore terminate, and a tree
        reachable through several relations is expanded only under the
        first one in declaration order.
    """

    def compile(self, tree: RelationTree, visited: Optional[Set[int]] = None) -> IncludeDirective:
        if visited is None:
            visited = set()
        if tree.tree_id in visited:
            return {}
        visited.add(tree.tree_id)

        directive: IncludeDirective = {}
        for name, node in tree.relations.items():
            directive[name] = self._compile_node(node, visited)
        return directive

    def _compile_node(self, node: RelationNode, visited: Set[int]) -> IncludeDirective:
        if not node.polymorphic:
            if node.target_tree is None:
                return {}
            return self.compile(node.target_tree, visited)

        # Public shape only: branches merge under the group name
        merged: IncludeDirective = {}
        for branch in node.groups.values():
            if branch.target_tree is not None:
                merge_directives(merged, self.compile(branch.target_tree, visited))
        return merged

    def include_paths(self, tree: RelationTree) -> List[str]:
        """Flattened dotted paths of ``compile(tree)``"""
        return list(flatten_directive(self.compile(tree)))

    def unsupported_paths(self, tree: RelationTree, requested: Any) -> List[str]:
        """
            Dotted paths of ``requested`` that ``tree`` cannot resolve.

            Walks the request rather than the compiled directive, so deep
            paths through cyclic trees are checked correctly.
        """
        unsupported: List[str] = []
        self._check(tree, normalize_directive(requested), (), unsupported)
        if unsupported:
            logger.info(f"Unsupported includes on '{tree.name}': {unsupported}")
        return unsupported

    def _check(
        self,
        tree: Optional[RelationTree],
        requested: IncludeDirective,
        path: Tuple[str, ...],
        unsupported: List[str]
    ):
        for name, nested in requested.items():
            current = path + (name,)
            node = tree.relation(name) if tree is not None else None
            if node is None:
                unsupported.append(".".join(current))
                continue
            if not nested:
                continue

            if not node.polymorphic:
                self._check(node.target_tree, nested, current, unsupported)
                continue

            # A nested name is fine if any branch supports it
            for child_name, child_nested in nested.items():
                candidates = []
                for branch in node.groups.values():
                    missing: List[str] = []
                    self._check(branch.target_tree, {child_name: child_nested}, current, missing)
                    candidates.append(missing)
                if not candidates:
                    unsupported.append(".".join(current + (child_name,)))
                    continue
                unsupported.extend(min(candidates, key=len))
