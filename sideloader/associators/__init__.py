from .base import Associator
from .attribute import AttributeAssociator
from .sqlalchemy_associator import SqlAlchemyAssociator

__all__ = ["Associator", "AttributeAssociator", "SqlAlchemyAssociator"]
