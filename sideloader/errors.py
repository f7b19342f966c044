from typing import List, Optional, Sequence


class SideloadError(Exception):
    """Base class for all sideloading errors"""


class SideloadConfigurationError(SideloadError):
    """Raised when a relation tree is mutated or declared incorrectly"""


class MisconfiguredRelationError(SideloadConfigurationError):
    """
        A plain relation reached validation or resolution without a fetch
        or an assign operation.
    """

    def __init__(self, relation: str, missing: List[str], tree_name: Optional[str] = None):
        self.relation = relation
        self.missing = list(missing)
        self.tree_name = tree_name

        location = f" on '{tree_name}'" if tree_name else ""
        super().__init__(
            f"Relation '{relation}'{location} is missing: {', '.join(self.missing)}"
        )


class MissingSideloadError(SideloadError):
    """A requested relation name is not declared on the tree"""

    def __init__(self, relation: str, tree_name: Optional[str] = None, path: Sequence[str] = ()):
        self.relation = relation
        self.tree_name = tree_name
        self.path = ".".join(list(path) + [relation])

        super().__init__(
            f"Sideload '{self.path}' is not allowed on '{tree_name}'"
        )

