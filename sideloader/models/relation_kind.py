from enum import Enum


class RelationKind(str, Enum):
    """Multiplicity of a relation and which side carries the foreign key"""

    HAS_MANY = "has_many"
    HAS_ONE = "has_one"
    BELONGS_TO = "belongs_to"
    TO_MANY = "to_many"
    TO_ONE = "to_one"

    @property
    def is_collection(self) -> bool:
        return self in (RelationKind.HAS_MANY, RelationKind.TO_MANY)

    @property
    def foreign_key_on_parent(self) -> bool:
        # to_one is treated belongs_to-style
        return self in (RelationKind.BELONGS_TO, RelationKind.TO_ONE)
