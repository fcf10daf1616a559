"""
relationship.py - kinship_predict parent-child edge modeling.

Module: kinship_predict.relationship
"""

__all__ = ['ParentChild', 'RelationshipType']

from enum import Enum
from typing import Optional

from kinship_predict.person import Sex


class RelationshipType(str, Enum):
    BIOLOGICAL = "Biological"
    ADOPTED = "Adopted"
    FOSTER = "Foster"
    STEP = "Step"

    @classmethod
    def parse(cls, value) -> "RelationshipType":
        if isinstance(value, RelationshipType):
            return value
        if value is None:
            return cls.BIOLOGICAL
        text = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == text or member.name.lower() == text:
                return member
        return cls.BIOLOGICAL


class ParentChild:
    """
    Directed parent -> child relationship.

    Attributes:
        parent_id (str): Parent person id.
        child_id (str): Child person id.
        relationship_type (RelationshipType): Biological, Adopted, Foster or Step.
        is_deleted (bool): Soft-delete flag.
        parent_name (Optional[str]): Parent display name, for explanations.
        child_name (Optional[str]): Child display name, for explanations.
        parent_sex (Sex): Parent sex as read with the edge; the parent may live in another tree.
    """
    __slots__ = ['parent_id', 'child_id', 'relationship_type', 'is_deleted',
                 'parent_name', 'child_name', 'parent_sex']

    def __init__(self, parent_id: str, child_id: str,
                 relationship_type=RelationshipType.BIOLOGICAL,
                 is_deleted: bool = False,
                 parent_name: Optional[str] = None,
                 child_name: Optional[str] = None,
                 parent_sex=Sex.UNKNOWN):
        self.parent_id : str = parent_id
        self.child_id : str = child_id
        self.relationship_type : RelationshipType = RelationshipType.parse(relationship_type)
        self.is_deleted : bool = is_deleted
        self.parent_name : Optional[str] = parent_name
        self.child_name : Optional[str] = child_name
        self.parent_sex : Sex = Sex.parse(parent_sex)

    @property
    def is_biological(self) -> bool:
        return self.relationship_type is RelationshipType.BIOLOGICAL

    def annotated(self, parent_name: Optional[str], child_name: Optional[str], parent_sex=None) -> "ParentChild":
        """Return a copy carrying the given display names and, when given, the parent's sex."""
        return ParentChild(self.parent_id, self.child_id, self.relationship_type,
                           self.is_deleted, parent_name, child_name,
                           self.parent_sex if parent_sex is None else parent_sex)

    def __str__(self) -> str:
        return f"ParentChild({self.parent_id} -> {self.child_id}, {self.relationship_type.value})"

    def __repr__(self) -> str:
        return f'[ {self.parent_id} -> {self.child_id} : {self.relationship_type.value} ]'
