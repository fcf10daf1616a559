"""
union.py - kinship_predict marriage/partnership modeling.

Module: kinship_predict.union
"""

__all__ = ['Union', 'UnionMember']

from datetime import date
from typing import List, Optional


class UnionMember:
    """Membership of one person in a union."""
    __slots__ = ['union_id', 'person_id', 'person_name', 'is_deleted']

    def __init__(self, union_id: str, person_id: str, person_name: Optional[str] = None, is_deleted: bool = False):
        self.union_id : str = union_id
        self.person_id : str = person_id
        self.person_name : Optional[str] = person_name
        self.is_deleted : bool = is_deleted

    def __repr__(self) -> str:
        return f'[ {self.union_id} : {self.person_id} ({self.person_name}) ]'


class Union:
    """Represents a marriage or partnership between two or more persons.

    Attributes:
        id (str): Union identifier.
        tree_id (Optional[str]): Owning tree identifier.
        start_date (Optional[date]): Start of the union.
        end_date (Optional[date]): End of the union; None means still open.
        is_deleted (bool): Soft-delete flag.
        members (List[UnionMember]): Member edges, each independently soft-deletable.
    """

    __slots__ = ['id', 'tree_id', 'start_date', 'end_date', 'is_deleted', 'members']

    def __init__(self, id: str, tree_id: Optional[str] = None,
                 start_date: Optional[date] = None, end_date: Optional[date] = None,
                 is_deleted: bool = False, members: List[UnionMember] = None):
        self.id : str = id
        self.tree_id : Optional[str] = tree_id
        self.start_date : Optional[date] = start_date
        self.end_date : Optional[date] = end_date
        self.is_deleted : bool = is_deleted
        self.members : List[UnionMember] = members if members is not None else []

    def add_member(self, person_id: str, person_name: Optional[str] = None, is_deleted: bool = False) -> UnionMember:
        member = UnionMember(self.id, person_id, person_name, is_deleted)
        self.members.append(member)
        return member

    @property
    def member_ids(self) -> List[str]:
        return [m.person_id for m in self.members]

    def other_members(self, person_id: str) -> List[UnionMember]:
        """Return the members excluding the given person.

        Args:
            person_id (str): The person to exclude.

        Returns:
            List[UnionMember]: Other members of the union.
        """
        return [m for m in self.members if m.person_id != person_id]

    def __str__(self) -> str:
        people_str = ', '.join(self.member_ids)
        return f"Union(id={self.id}, members=[{people_str}], start={self.start_date}, end={self.end_date})"

    def __repr__(self) -> str:
        return f'Union(id={self.id!r}, members={self.members!r})'
