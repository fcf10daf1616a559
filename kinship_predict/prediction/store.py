"""
Read contract between the prediction rules and the data-access layer.

The engine never writes. Every method returns only non-deleted rows; the
snapshot loader filters again so a lax store cannot leak soft-deleted data.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Protocol

from kinship_predict.person import Person
from kinship_predict.relationship import ParentChild
from kinship_predict.union import Union, UnionMember

logger = logging.getLogger(__name__)


class TreeStore(Protocol):
    """
    Protocol for the data-access layer the prediction rules read from.

    Methods:
        get_people(tree_id): Non-deleted people of the tree.
        get_parent_child_links(tree_id): Non-deleted edges touching the tree, with names.
        get_unions(tree_id): Non-deleted unions of the tree with non-deleted members.
        has_parent_link(parent_id, child_id): Whether parent -> child is recorded.
        count_biological_parents(child_id): Current biological parent edges of a child.
    """
    async def get_people(self, tree_id: str) -> List[Person]:
        ...

    async def get_parent_child_links(self, tree_id: str) -> List[ParentChild]:
        ...

    async def get_unions(self, tree_id: str) -> List[Union]:
        ...

    async def has_parent_link(self, parent_id: str, child_id: str) -> bool:
        ...

    async def count_biological_parents(self, child_id: str) -> int:
        ...


class InMemoryTreeStore:
    """
    TreeStore over plain model objects.

    Holds rows as given, soft-deleted ones included, and applies the same
    filtering a database-backed store would.

    Args:
        people: All Person rows, any tree.
        links: All ParentChild rows.
        unions: All Union rows with their members.
    """

    def __init__(self, people: Iterable[Person] = (), links: Iterable[ParentChild] = (), unions: Iterable[Union] = ()) -> None:
        self.people: Dict[str, Person] = {p.id: p for p in people}
        self.links: List[ParentChild] = list(links)
        self.unions: List[Union] = list(unions)

    def add_person(self, person: Person) -> Person:
        self.people[person.id] = person
        return person

    def add_link(self, link: ParentChild) -> ParentChild:
        self.links.append(link)
        return link

    def add_union(self, union: Union) -> Union:
        self.unions.append(union)
        return union

    def _live_person(self, person_id: str) -> Optional[Person]:
        person = self.people.get(person_id)
        if person is None or person.is_deleted:
            return None
        return person

    async def get_people(self, tree_id: str) -> List[Person]:
        return [p for p in self.people.values() if p.tree_id == tree_id and not p.is_deleted]

    async def get_parent_child_links(self, tree_id: str) -> List[ParentChild]:
        result = []
        for link in self.links:
            if link.is_deleted:
                continue
            parent = self._live_person(link.parent_id)
            child = self._live_person(link.child_id)
            if parent is None or child is None:
                continue
            if parent.tree_id != tree_id and child.tree_id != tree_id:
                continue
            result.append(link.annotated(parent.display_name, child.display_name, parent.sex))
        return result

    async def get_unions(self, tree_id: str) -> List[Union]:
        result = []
        for union in self.unions:
            if union.is_deleted or union.tree_id != tree_id:
                continue
            members = []
            for member in union.members:
                person = self._live_person(member.person_id)
                if member.is_deleted or person is None:
                    continue
                members.append(UnionMember(union.id, member.person_id, person.display_name))
            result.append(Union(union.id, union.tree_id, union.start_date, union.end_date, members=members))
        return result

    async def has_parent_link(self, parent_id: str, child_id: str) -> bool:
        return any(
            link.parent_id == parent_id and link.child_id == child_id and not link.is_deleted
            for link in self.links
        )

    async def count_biological_parents(self, child_id: str) -> int:
        return sum(
            1 for link in self.links
            if link.child_id == child_id and link.is_biological and not link.is_deleted
        )
