from typing import Any, Optional
from pydantic import BaseModel

from .relation_kind import RelationKind


class RelationOptions(BaseModel):
    """
        Declarative options for a single relation.
    """

    kind: RelationKind = RelationKind.HAS_MANY
    primary_key: str = "id"
    foreign_key: Optional[str] = None   # none: custom assign required
    polymorphic: bool = False
    target: Optional[Any] = None        # shared RelationTree of the related type
    model: Optional[Any] = None         # storage model for query-building associators

    def merged(self, **overrides) -> "RelationOptions":
        """Copy with the given fields replaced; an explicit None clears a field"""
        data = {name: getattr(self, name) for name in type(self).model_fields}
        data.update(overrides)
        return RelationOptions(**data)
