"""
Tests for the tree snapshot and the in-memory store.
"""
from __future__ import annotations

import pytest

from conftest import run, TREE_ID
from kinship_predict.person import Sex
from kinship_predict.relationship import RelationshipType
from kinship_predict.prediction.snapshot import TreeSnapshot, load_snapshot
from kinship_predict.prediction.store import InMemoryTreeStore


class TestInMemoryTreeStore:
    """Soft-delete filtering at every level."""

    def test_people_scoped_to_tree_and_live(self, mock_person):
        store = InMemoryTreeStore([
            mock_person("A"),
            mock_person("B", is_deleted=True),
            mock_person("C", tree_id="OTHER"),
        ])

        assert [p.id for p in run(store.get_people(TREE_ID))] == ["A"]

    def test_links_drop_deleted_edges_and_people(self, mock_person, link):
        store = InMemoryTreeStore(
            [mock_person("A", "Parent"), mock_person("B", "Child"), mock_person("D", is_deleted=True)],
            [link("A", "B"), link("A", "B", is_deleted=True), link("D", "B")],
        )

        links = run(store.get_parent_child_links(TREE_ID))

        assert [(l.parent_id, l.child_id) for l in links] == [("A", "B")]
        assert (links[0].parent_name, links[0].child_name) == ("Parent", "Child")

    def test_links_touching_tree_from_outside_are_kept(self, mock_person, link):
        store = InMemoryTreeStore(
            [mock_person("A"), mock_person("B", tree_id="OTHER"), mock_person("X", tree_id="OTHER")],
            [link("B", "A"), link("B", "X")],
        )

        assert [(l.parent_id, l.child_id) for l in run(store.get_parent_child_links(TREE_ID))] == [("B", "A")]

    def test_unions_drop_deleted_members(self, mock_person, union):
        u = union("U1", "A")
        u.add_member("B", is_deleted=True)
        u.add_member("C")
        store = InMemoryTreeStore(
            [mock_person("A", "Anna"), mock_person("B"), mock_person("C", is_deleted=True)],
            unions=[u, union("U2", "A", is_deleted=True)],
        )

        unions = run(store.get_unions(TREE_ID))

        assert [x.id for x in unions] == ["U1"]
        assert [(m.person_id, m.person_name) for m in unions[0].members] == [("A", "Anna")]

    def test_existence_and_biological_count(self, link):
        store = InMemoryTreeStore(links=[
            link("A", "C"),
            link("B", "C", RelationshipType.FOSTER),
            link("D", "C", is_deleted=True),
        ])

        assert run(store.has_parent_link("A", "C"))
        assert not run(store.has_parent_link("D", "C"))
        assert run(store.count_biological_parents("C")) == 1


class TestTreeSnapshot:
    """Tests for TreeSnapshot lookups."""

    def test_lookups(self, tree, sample_family):
        snapshot, _ = tree(*sample_family)

        assert len(snapshot) == 5
        assert snapshot.parents_of("C") == ["A", "B"]
        assert snapshot.children_of("A") == ["C", "D", "E"]
        assert snapshot.has_link("A", "E")
        assert not snapshot.has_link("B", "E")
        assert snapshot.linked_either_way("E", "A")
        assert snapshot.biological_parent_count("E") == 1
        assert snapshot.share_union("A", "B")
        assert not snapshot.share_union("A", "C")
        assert snapshot.name("B") == "Mariam Saleh"
        assert snapshot.name("missing") == "?"
        assert set(snapshot.children_by_parent_count(2)) == {"C", "D"}
        assert [p.id for p in snapshot.family_groups()["F1"]] == ["A", "B", "C", "D", "E"]

    def test_filters_raw_rows(self, mock_person, link, union):
        """Unfiltered input still yields a clean snapshot."""
        u = union("U1", "A", "B")
        u.add_member("D")
        snapshot = TreeSnapshot(
            TREE_ID,
            [mock_person("A"), mock_person("B"), mock_person("D", is_deleted=True)],
            [link("A", "B"), link("A", "B", is_deleted=True)],
            [u, union("U2", "A", "B", is_deleted=True)],
        )

        assert set(snapshot.people) == {"A", "B"}
        assert len(snapshot.links) == 1
        assert [x.id for x in snapshot.unions] == ["U1"]
        assert snapshot.unions[0].member_ids == ["A", "B"]

    def test_drops_edges_to_deleted_or_foreign_people(self, mock_person, link):
        snapshot = TreeSnapshot(
            TREE_ID,
            [mock_person("A"), mock_person("B"), mock_person("D", is_deleted=True)],
            [link("D", "B"), link("Q", "R"), link("X", "A"), link("A", "B")],
            [],
        )

        assert [(l.parent_id, l.child_id) for l in snapshot.links] == [("X", "A"), ("A", "B")]
        assert snapshot.parents_of("B") == ["A"]

    def test_sex_of_parent_from_another_tree(self, mock_person, link):
        snapshot = TreeSnapshot(
            TREE_ID,
            [mock_person("A", sex=Sex.MALE), mock_person("C")],
            [link("X", "C").annotated("Outsider", "C", Sex.FEMALE)],
            [],
        )

        assert snapshot.sex("A") is Sex.MALE
        assert snapshot.sex("X") is Sex.FEMALE
        assert snapshot.sex("C") is Sex.UNKNOWN
        assert snapshot.sex("nobody") is Sex.UNKNOWN

    def test_duplicate_edges_counted_once_in_lookups(self, mock_person, link):
        snapshot = TreeSnapshot(TREE_ID, [mock_person("A"), mock_person("B")], [link("A", "B"), link("A", "B")], [])

        assert snapshot.children_of("A") == ["B"]

    @pytest.mark.parametrize("count,trivial", [(0, True), (1, True), (2, False)])
    def test_trivial_tree(self, mock_person, count, trivial):
        snapshot = TreeSnapshot(TREE_ID, [mock_person(f"P{i}") for i in range(count)], [], [])

        assert snapshot.is_trivial is trivial

    def test_load_snapshot(self, mock_person, link, union):
        store = InMemoryTreeStore(
            [mock_person("A", sex=Sex.MALE), mock_person("B")],
            [link("A", "B")],
            [union("U1", "A", "B")],
        )

        snapshot = run(load_snapshot(store, TREE_ID))

        assert snapshot.tree_id == TREE_ID
        assert snapshot.person("A").sex is Sex.MALE
        assert snapshot.has_link("A", "B")
        assert len(snapshot.unions) == 1
