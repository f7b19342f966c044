import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)


class Associator(ABC):
    """
        Storage-specific defaults for relations.

        One associator is injected into a RelationTree and shared by every
        node declared on it. Nodes ask it once, at construction, for default
        fetch/assign operations; a node's own callbacks always take
        precedence.

        ``thread_safe`` tells the resolver whether one associator may run
        fetches from several threads at once.
    """

    thread_safe = True

    def default_fetch(self, node) -> Optional[Callable[[List[Any]], Any]]:
        """Default fetch for ``node``, or None when the caller must supply one"""
        return None

    def default_assign(self, node) -> Optional[Callable[[List[Any], List[Any]], None]]:
        """
            Match children to parents on primary/foreign key.

            has_many/has_one: ``child.<foreign_key> == parent.<primary_key>``
            belongs_to/to_one: ``parent.<foreign_key> == child.<primary_key>``
        """
        if not node.foreign_key:
            return None

        def assign(parents: List[Any], children: List[Any]):
            if node.kind.foreign_key_on_parent:
                by_key = {}
                for child in children:
                    by_key.setdefault(self.read(child, node.primary_key), child)
                for parent in parents:
                    child = by_key.get(self.read(parent, node.foreign_key))
                    if child is not None:
                        self.associate(parent, child, node.name, node.kind)
                return

            grouped = {}
            for child in children:
                grouped.setdefault(self.read(child, node.foreign_key), []).append(child)
            for parent in parents:
                matches = grouped.get(self.read(parent, node.primary_key), [])
                if node.kind.is_collection:
                    # Reset so resolving twice does not duplicate children
                    self.write(parent, node.name, [])
                    for child in matches:
                        self.associate(parent, child, node.name, node.kind)
                elif matches:
                    self.associate(parent, matches[0], node.name, node.kind)

        return assign

    def associate(self, parent: Any, child: Any, name: str, kind):
        """Append to a collection for to-many kinds, otherwise set the attribute"""
        if kind.is_collection:
            collection = self.read(parent, name)
            if collection is None:
                collection = []
                self.write(parent, name, collection)
            collection.append(child)
        else:
            self.write(parent, name, child)

    @abstractmethod
    def resolve(self, base: Any) -> List[Any]:
        """Execute an unresolved base scope"""
        pass

    @abstractmethod
    def paginate(self, base: Any, page: int, per_page: int) -> Any:
        """Restrict a base scope to one page"""
        pass

    def read(self, record: Any, attribute: str) -> Any:
        return getattr(record, attribute, None)

    def write(self, record: Any, attribute: str, value: Any):
        setattr(record, attribute, value)
