"""
Graph snapshot of one tree, shared by every prediction rule.

The snapshot is read once per scan and never mutated. Lookup tables are built
in the constructor; rules build their own working sets on top and discard
them when they return.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from kinship_predict.person import Person, Sex
from kinship_predict.relationship import ParentChild
from kinship_predict.union import Union

from .store import TreeStore

logger = logging.getLogger(__name__)


class TreeSnapshot:
    """
    In-memory view of a tree's people, parent-child edges and unions.

    Attributes:
        tree_id (str): Tree the snapshot was loaded for.
        people (Dict[str, Person]): Non-deleted people by id.
        links (Tuple[ParentChild, ...]): Non-deleted edges with at least one
            endpoint among `people` and no endpoint among the deleted people
            handed in. An endpoint in another tree is trusted to be live as
            the store returned it.
        unions (Tuple[Union, ...]): Non-deleted unions with live members.
    """

    def __init__(self, tree_id: str, people: Iterable[Person], links: Iterable[ParentChild], unions: Iterable[Union]) -> None:
        self.tree_id = tree_id
        self.people: Dict[str, Person] = {}
        deleted_ids = set()
        for person in people:
            if person.is_deleted:
                deleted_ids.add(person.id)
            else:
                self.people[person.id] = person

        self.links: Tuple[ParentChild, ...] = tuple(
            l for l in links
            if not l.is_deleted
            and l.parent_id not in deleted_ids and l.child_id not in deleted_ids
            and (l.parent_id in self.people or l.child_id in self.people)
        )

        live_unions = []
        for union in unions:
            if union.is_deleted:
                continue
            members = [m for m in union.members if not m.is_deleted and m.person_id in self.people]
            live_unions.append(Union(union.id, union.tree_id, union.start_date, union.end_date, members=members))
        self.unions: Tuple[Union, ...] = tuple(live_unions)

        self._parents: Dict[str, List[str]] = defaultdict(list)
        self._children: Dict[str, List[str]] = defaultdict(list)
        self._link_set = set()
        self._bio_count: Dict[str, int] = defaultdict(int)
        self._names: Dict[str, str] = {pid: p.display_name for pid, p in self.people.items()}
        self._sexes: Dict[str, Sex] = {pid: p.sex for pid, p in self.people.items()}
        for link in self.links:
            key = (link.parent_id, link.child_id)
            if key not in self._link_set:
                self._parents[link.child_id].append(link.parent_id)
                self._children[link.parent_id].append(link.child_id)
                self._link_set.add(key)
            if link.is_biological:
                self._bio_count[link.child_id] += 1
            # Edges may touch people of another tree; keep their names for explanations.
            if link.parent_name:
                self._names.setdefault(link.parent_id, link.parent_name)
            if link.child_name:
                self._names.setdefault(link.child_id, link.child_name)
            if link.parent_sex.is_known:
                self._sexes.setdefault(link.parent_id, link.parent_sex)

        self._unions_of: Dict[str, List[Union]] = defaultdict(list)
        for union in self.unions:
            for member in union.members:
                self._unions_of[member.person_id].append(union)

    def __len__(self) -> int:
        return len(self.people)

    def __repr__(self) -> str:
        return (f"TreeSnapshot(tree_id={self.tree_id!r}, people={len(self.people)}, "
                f"links={len(self.links)}, unions={len(self.unions)})")

    @property
    def is_trivial(self) -> bool:
        """Fewer than two people: nothing can be related."""
        return len(self.people) < 2

    def person(self, person_id: str) -> Optional[Person]:
        return self.people.get(person_id)

    def name(self, person_id: str) -> str:
        """Display name of a person, '?' if unknown."""
        return self._names.get(person_id) or "?"

    def sex(self, person_id: str) -> Sex:
        """Sex of a person of the tree or of a parent reached through an edge."""
        return self._sexes.get(person_id, Sex.UNKNOWN)

    def parents_of(self, child_id: str) -> List[str]:
        """Distinct recorded parents of a child, in edge order."""
        return list(self._parents.get(child_id, ()))

    def children_of(self, parent_id: str) -> List[str]:
        """Distinct recorded children of a parent, in edge order."""
        return list(self._children.get(parent_id, ()))

    def has_link(self, parent_id: str, child_id: str) -> bool:
        return (parent_id, child_id) in self._link_set

    def linked_either_way(self, a: str, b: str) -> bool:
        return self.has_link(a, b) or self.has_link(b, a)

    def biological_parent_count(self, child_id: str) -> int:
        return self._bio_count.get(child_id, 0)

    def unions_of(self, person_id: str) -> List[Union]:
        return list(self._unions_of.get(person_id, ()))

    def share_union(self, a: str, b: str) -> bool:
        """Whether two people are live members of a common union."""
        return any(b in union.member_ids for union in self._unions_of.get(a, ()))

    def children_by_parent_count(self, minimum: int = 2) -> Dict[str, List[str]]:
        """Children having at least `minimum` distinct parents, mapped to those parents."""
        return {child: list(parents) for child, parents in self._parents.items() if len(parents) >= minimum}

    def family_groups(self) -> Dict[str, List[Person]]:
        """People grouped by family id; people without one are left out."""
        groups: Dict[str, List[Person]] = defaultdict(list)
        for person in self.people.values():
            if person.family_id is not None:
                groups[person.family_id].append(person)
        return dict(groups)


async def load_snapshot(store: TreeStore, tree_id: str) -> TreeSnapshot:
    """
    Read a tree from the store into a TreeSnapshot.

    Store failures propagate to the caller unchanged.

    Args:
        store: Data-access layer implementing TreeStore.
        tree_id: Tree to load.

    Returns:
        TreeSnapshot: Immutable view of the tree.
    """
    people = await store.get_people(tree_id)
    links = await store.get_parent_child_links(tree_id)
    unions = await store.get_unions(tree_id)
    snapshot = TreeSnapshot(tree_id, people, links, unions)
    logger.debug(f"Loaded {snapshot!r}")
    return snapshot
