import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple
from langfuse import observe
from langfuse import Langfuse

from .scope import Scope
from .directive import IncludeDirective, normalize_directive
from ..config import Settings, get_settings
from ..errors import MissingSideloadError, SideloadError
from ..models import PolymorphicGroup, RelationNode, RelationTree

logger = logging.getLogger(__name__)


@dataclass
class PendingLoad:
    """One fetch planned for a level: a relation (or polymorphic branch) and its parents"""
    relation: str
    node: RelationNode
    parents: List[Any]
    nested: IncludeDirective
    namespace: str
    path: Tuple[str, ...]
    group: Optional[PolymorphicGroup] = None
    group_key: Any = None

    @property
    def label(self) -> str:
        return ".".join(self.path)


class Resolver:
    """
        Resolves requested relations onto already-loaded parent records.

        Each level runs in three phases: every requested relation (and every
        polymorphic partition) is fetched, then all results are assigned,
        then nested requests recurse with the freshly assigned children as
        parents. A failed fetch therefore leaves its level unassigned, and
        the storage exception is re-raised as-is with ``sideload_path`` and
        ``sideload_namespace`` attached.

        With ``SIDELOAD_CONCURRENCY`` enabled the fetches of a level run in a
        thread pool. Sibling relations write distinct attributes on the
        parents, so assignment needs no locking. Levels whose associators are
        not ``thread_safe`` (a shared SQLAlchemy Session) fetch sequentially.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

        self.langfuse = None
        if self.settings.enable_langfuse:
            self.langfuse = Langfuse(
                public_key=self.settings.LANGFUSE_PUBLIC_KEY,
                secret_key=self.settings.LANGFUSE_SECRET_KEY,
                host=self.settings.LANGFUSE_HOST
            )

    @observe(
        name="sideload_resolve",
        as_type="span",
        capture_input=False,
        capture_output=False
    )
    def resolve(
        self,
        tree: RelationTree,
        parents: Sequence[Any],
        requested: Any,
        namespace: Optional[str] = None
    ) -> None:
        """
            Resolve ``requested`` against ``parents``, assigning in place.

            ``requested`` is a nested include mapping, e.g.
            ``{"comments": {"author": {}}}``.
        """
        parents = list(parents)
        directive = normalize_directive(requested)

        if self.langfuse:
            self.langfuse.update_current_span(
                input={"tree": tree.name, "parents": len(parents), "requested": directive}
            )

        logger.info(f"Resolving sideloads {list(directive)} on '{tree.name}' for {len(parents)} parents")
        fetches = self._resolve_level(tree, parents, directive, namespace, ())
        logger.info(f"Resolved sideloads on '{tree.name}' with {fetches} fetches")

        if self.langfuse:
            self.langfuse.update_current_span(output={"fetches": fetches})

    def resolve_scope(
        self,
        tree: RelationTree,
        base: Any,
        requested: Any,
        page: Optional[int] = None,
        per_page: Optional[int] = None
    ) -> List[Any]:
        """Resolve a paginated root scope, then sideload ``requested`` onto it"""
        scope = Scope(
            base,
            tree.associator,
            default_paginate=True,
            namespace=tree.name,
            page=page,
            per_page=per_page or self.settings.DEFAULT_PAGE_SIZE
        )
        records = scope.resolve()
        self.resolve(tree, records, requested)
        return records

    def _resolve_level(
        self,
        tree: RelationTree,
        parents: List[Any],
        requested: IncludeDirective,
        namespace: Optional[str],
        path: Tuple[str, ...]
    ) -> int:
        loads = self._plan(tree, parents, requested, namespace, path)
        if not loads:
            return 0

        results = self._fetch_all(loads)

        for load, children in zip(loads, results):
            load.node.assign(load.parents, children)

        fetches = len(loads)
        for load, children in zip(loads, results):
            if load.nested:
                fetches += self._resolve_level(
                    load.node.target_tree,
                    children,
                    self._nested_for(load),
                    load.relation,
                    load.path
                )
        return fetches

    def _plan(
        self,
        tree: RelationTree,
        parents: List[Any],
        requested: IncludeDirective,
        namespace: Optional[str],
        path: Tuple[str, ...]
    ) -> List[PendingLoad]:
        loads = []
        for name, nested in requested.items():
            node = self._lookup(tree, name, path)
            if node is None:
                continue
            node.validate()

            if not node.polymorphic:
                loads.append(PendingLoad(
                    relation=name,
                    node=node,
                    parents=parents,
                    nested=nested,
                    namespace=namespace or name,
                    path=path + (name,)
                ))
                continue

            for key, members in node.partition(parents).items():
                branch = node.groups.get(key)
                if branch is None:
                    logger.debug(f"No '{name}' group for {key!r}, skipping {len(members)} records")
                    continue
                loads.append(PendingLoad(
                    relation=name,
                    node=branch,
                    parents=members,
                    nested=nested,
                    namespace=name,
                    path=path + (name,),
                    group=node,
                    group_key=key
                ))
        return loads

    def _lookup(self, tree: RelationTree, name: str, path: Tuple[str, ...]) -> Optional[RelationNode]:
        node = tree.relation(name)
        if node is not None:
            return node

        if self.settings.RAISE_ON_MISSING_SIDELOAD:
            raise MissingSideloadError(name, tree.name, path)

        logger.warning(f"Ignoring unknown sideload '{'.'.join(path + (name,))}' on '{tree.name}'")
        return None

    def _nested_for(self, load: PendingLoad) -> IncludeDirective:
        """
            Nested includes under a polymorphic branch.

            A name declared only on a sibling branch is dropped for this
            branch; a name no branch declares is kept so the lookup reports it.
        """
        if load.group is None:
            return load.nested

        declared = set()
        for branch in load.group.groups.values():
            declared.update(branch.target_tree.relations)

        return {
            name: nested
            for name, nested in load.nested.items()
            if name in load.node.target_tree or name not in declared
        }

    def _fetch_all(self, loads: List[PendingLoad]) -> List[List[Any]]:
        if not self._concurrent(loads):
            return [self._fetch(load) for load in loads]

        workers = max(1, min(self.settings.SIDELOAD_MAX_WORKERS, len(loads)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="sideload") as executor:
            futures = [executor.submit(self._fetch, load) for load in loads]
            try:
                return [future.result() for future in futures]
            except Exception:
                for future in futures:
                    future.cancel()
                raise

    def _concurrent(self, loads: List[PendingLoad]) -> bool:
        if not self.settings.SIDELOAD_CONCURRENCY or len(loads) == 1:
            return False
        if not all(load.node.associator.thread_safe for load in loads):
            logger.debug("Associator is not thread-safe, fetching sequentially")
            return False
        return True

    def _fetch(self, load: PendingLoad) -> List[Any]:
        try:
            base = load.node.fetch(load.parents)
            scope = Scope(
                base,
                load.node.associator,
                default_paginate=False,
                namespace=load.namespace
            )
            return scope.resolve()
        except SideloadError:
            raise
        except Exception as e:
            logger.error(f"Sideload '{load.label}' (namespace={load.namespace}) failed: {e}")
            # Storage errors propagate unchanged, tagged with the failing branch
            e.sideload_path = load.label
            e.sideload_namespace = load.namespace
            raise
