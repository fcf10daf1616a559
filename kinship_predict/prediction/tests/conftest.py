"""
Pytest fixtures for prediction tests.
"""
from __future__ import annotations

import asyncio
from datetime import date as _date

import pytest

from kinship_predict.person import Person, Sex
from kinship_predict.relationship import ParentChild, RelationshipType
from kinship_predict.union import Union
from kinship_predict.prediction.config import PredictionConfig
from kinship_predict.prediction.snapshot import TreeSnapshot
from kinship_predict.prediction.store import InMemoryTreeStore

TREE_ID = "T1"


def run(coro):
    """Drive a coroutine to completion from a plain test function."""
    return asyncio.run(coro)


class StopAfter:
    """App hooks that request a stop after `calls` stop checks."""

    def __init__(self, calls: int = 0):
        self.calls = calls
        self.checks = 0
        self.steps = []

    def report_step(self, info="", target=None, reset_counter=False, plus_step=1):
        self.steps.append(info)

    def stop_requested(self) -> bool:
        self.checks += 1
        return self.checks > self.calls


@pytest.fixture
def mock_person():
    """Create a Person in the test tree."""
    def _create_person(person_id: str, name: str = "Test Person", sex=Sex.UNKNOWN,
                       birth_date=None, family_id=None, name_arabic=None,
                       tree_id: str = TREE_ID, is_deleted: bool = False) -> Person:
        if isinstance(birth_date, int):
            birth_date = _date(birth_date, 1, 1)
        return Person(person_id, primary_name=name, name_arabic=name_arabic, sex=sex,
                      birth_date=birth_date, family_id=family_id, tree_id=tree_id,
                      is_deleted=is_deleted)
    return _create_person


@pytest.fixture
def link():
    def _link(parent_id: str, child_id: str, relationship_type=RelationshipType.BIOLOGICAL,
              is_deleted: bool = False) -> ParentChild:
        return ParentChild(parent_id, child_id, relationship_type, is_deleted=is_deleted)
    return _link


@pytest.fixture
def union():
    def _union(union_id: str, *person_ids: str, start=None, end=None,
               tree_id: str = TREE_ID, is_deleted: bool = False) -> Union:
        if isinstance(start, int):
            start = _date(start, 1, 1)
        if isinstance(end, int):
            end = _date(end, 1, 1)
        u = Union(union_id, tree_id, start, end, is_deleted=is_deleted)
        for person_id in person_ids:
            u.add_member(person_id)
        return u
    return _union


@pytest.fixture
def tree():
    """Build (snapshot, store) for the test tree from people, links and unions."""
    def _tree(people=(), links=(), unions=()):
        store = InMemoryTreeStore(people, links, unions)
        snapshot = TreeSnapshot(
            TREE_ID,
            run(store.get_people(TREE_ID)),
            run(store.get_parent_child_links(TREE_ID)),
            run(store.get_unions(TREE_ID)),
        )
        return snapshot, store
    return _tree


@pytest.fixture
def default_config():
    """Default prediction configuration."""
    return PredictionConfig()


@pytest.fixture
def sample_family(mock_person, link, union):
    """
    A (male, 1950) and B (female, 1952) in an open union from 1972.
    C (1975) and D (1978) have both parents; E (1980) has only A.
    """
    people = [
        mock_person("A", "Ahmad Khalil", Sex.MALE, 1950, family_id="F1"),
        mock_person("B", "Mariam Saleh", Sex.FEMALE, 1952, family_id="F1"),
        mock_person("C", "Omar Ahmad", Sex.MALE, 1975, family_id="F1"),
        mock_person("D", "Huda Ahmad", Sex.FEMALE, 1978, family_id="F1"),
        mock_person("E", "Sami Ahmad", Sex.MALE, 1980, family_id="F1"),
    ]
    links = [
        link("A", "C"), link("B", "C"),
        link("A", "D"), link("B", "D"),
        link("A", "E"),
    ]
    unions = [union("U1", "A", "B", start=1972)]
    return people, links, unions
