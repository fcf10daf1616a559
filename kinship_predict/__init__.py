"""kinship_predict package: Family tree model and relationship prediction engine."""

from kinship_predict.app_hooks import AppHooks
from kinship_predict.person import Person, Sex
from kinship_predict.relationship import ParentChild, RelationshipType
from kinship_predict.union import Union, UnionMember

__all__ = [
    "AppHooks",
    "ParentChild",
    "Person",
    "RelationshipType",
    "Sex",
    "Union",
    "UnionMember",
]
