"""
Tests for the SQLAlchemy tree store against in-memory SQLite.
"""
from datetime import date

import pytest

from conftest import run, TREE_ID
from kinship_predict.person import Sex
from kinship_predict.relationship import RelationshipType
from kinship_predict.prediction.errors import DataAccessError
from kinship_predict.prediction.prediction import Prediction
from kinship_predict.prediction.snapshot import load_snapshot
from kinship_predict.prediction.sql_store import (
    ParentChildRow,
    PersonRow,
    SqlTreeStore,
    UnionMemberRow,
    UnionRow,
    create_schema,
    make_engine,
    make_session_maker,
)

DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def sample_rows():
    return [
        PersonRow(id="A", tree_id=TREE_ID, primary_name="Ahmad Khalil", sex="Male",
                  birth_date=date(1950, 1, 1), family_id="F1"),
        PersonRow(id="B", tree_id=TREE_ID, primary_name="Mariam Saleh", name_arabic="مريم صالح",
                  sex="Female", birth_date=date(1952, 1, 1), family_id="F1"),
        PersonRow(id="C", tree_id=TREE_ID, primary_name="Omar Ahmad", sex="Male",
                  birth_date=date(1975, 1, 1), family_id="F1"),
        PersonRow(id="D", tree_id=TREE_ID, primary_name="Huda Ahmad", sex="Female",
                  birth_date=date(1978, 1, 1), family_id="F1"),
        PersonRow(id="E", tree_id=TREE_ID, primary_name="Sami Ahmad", sex="Male",
                  birth_date=date(1980, 1, 1), family_id="F1"),
        PersonRow(id="G", tree_id=TREE_ID, primary_name="Ghost", is_deleted=True),
        PersonRow(id="X", tree_id="OTHER", primary_name="Outsider"),
        ParentChildRow(parent_id="A", child_id="C"),
        ParentChildRow(parent_id="B", child_id="C"),
        ParentChildRow(parent_id="A", child_id="D"),
        ParentChildRow(parent_id="B", child_id="D"),
        ParentChildRow(parent_id="A", child_id="E"),
        ParentChildRow(parent_id="G", child_id="E"),
        ParentChildRow(parent_id="X", child_id="E", relationship_type=RelationshipType.STEP.value),
        ParentChildRow(parent_id="B", child_id="E", is_deleted=True),
        UnionRow(id="U1", tree_id=TREE_ID, start_date=date(1972, 1, 1)),
        UnionRow(id="U2", tree_id=TREE_ID, is_deleted=True),
        UnionMemberRow(union_id="U1", person_id="A"),
        UnionMemberRow(union_id="U1", person_id="B"),
        UnionMemberRow(union_id="U1", person_id="G"),
        UnionMemberRow(union_id="U1", person_id="C", is_deleted=True),
        UnionMemberRow(union_id="U2", person_id="A"),
        UnionMemberRow(union_id="U2", person_id="D"),
    ]


async def open_store():
    store = SqlTreeStore.from_url(DATABASE_URL)
    await create_schema(store.engine)
    async with store.session_maker() as session:
        async with session.begin():
            session.add_all(sample_rows())
    return store


def query(method, *args):
    """Run one store query against a freshly seeded database."""
    async def scenario():
        store = await open_store()
        try:
            return await getattr(store, method)(*args)
        finally:
            await store.dispose()
    return run(scenario())


class TestSqlTreeStore:
    """Tests for SqlTreeStore over aiosqlite."""

    def test_reads_live_people(self):
        people = query("get_people", TREE_ID)

        assert [p.id for p in people] == ["A", "B", "C", "D", "E"]
        assert people[0].sex is Sex.MALE
        assert people[1].patronymic_name == "مريم صالح"
        assert people[2].birth_date == date(1975, 1, 1)

    def test_reads_live_links_with_names(self):
        links = query("get_parent_child_links", TREE_ID)

        assert [(l.parent_id, l.child_id) for l in links] == [
            ("A", "C"), ("B", "C"), ("A", "D"), ("B", "D"), ("A", "E"), ("X", "E"),
        ]
        assert links[0].parent_name == "Ahmad Khalil"
        assert links[0].child_name == "Omar Ahmad"
        assert links[1].parent_sex is Sex.FEMALE
        assert links[-1].relationship_type is RelationshipType.STEP

    def test_reads_live_unions_and_members(self):
        unions = query("get_unions", TREE_ID)

        assert [u.id for u in unions] == ["U1"]
        assert unions[0].member_ids == ["A", "B"]
        assert unions[0].start_date == date(1972, 1, 1)
        assert unions[0].members[1].person_name == "Mariam Saleh"

    def test_existence_and_biological_count(self):
        assert query("has_parent_link", "A", "E") is True
        assert query("has_parent_link", "B", "E") is False
        assert query("count_biological_parents", "C") == 2
        # A plus the edge from the deleted person; step and deleted edges do not count
        assert query("count_biological_parents", "E") == 2

    def test_snapshot_and_scan_over_sql(self):
        async def scenario():
            store = await open_store()
            try:
                snapshot = await load_snapshot(store, TREE_ID)
                result = await Prediction(store).scan(TREE_ID)
                return snapshot, result
            finally:
                await store.dispose()

        snapshot, result = run(scenario())
        assert len(snapshot) == 5
        assert snapshot.share_union("A", "B")
        assert snapshot.sex("X") is Sex.UNKNOWN
        # E already counts two biological parents in the store, so the spouse gap stays closed
        assert result.by_rule("spouse_child_gap") == []
        assert result.ok

    def test_shared_session_maker(self):
        async def scenario():
            engine = make_engine(DATABASE_URL)
            await create_schema(engine)
            session_maker = make_session_maker(engine)
            async with session_maker() as session:
                async with session.begin():
                    session.add_all(sample_rows())
            try:
                return await SqlTreeStore(session_maker).get_people("OTHER")
            finally:
                await engine.dispose()

        assert [p.id for p in run(scenario())] == ["X"]

    def test_query_failure_is_data_access_error(self):
        async def scenario():
            store = SqlTreeStore.from_url(DATABASE_URL)
            try:
                await store.get_people(TREE_ID)
            finally:
                await store.dispose()

        with pytest.raises(DataAccessError):
            run(scenario())
