"""
person.py - kinship_predict person modeling for family tree data.

This module provides the Person class and the Sex enumeration used by the
relationship prediction rules. It supports:
    - Holding the attributes the rules read (names, sex, birth date, family group)
    - Choosing the display name used in explanations
    - Choosing the name used for Arabic patronymic parsing

Module: kinship_predict.person
"""

__all__ = ['Person', 'Sex']

import logging
from datetime import date
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class Sex(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value) -> "Sex":
        """
        Coerce a stored sex value ('M', 'Female', 1, None, ...) to a Sex.

        Unrecognised values map to UNKNOWN rather than raising.
        """
        if isinstance(value, Sex):
            return value
        if value is None:
            return cls.UNKNOWN
        text = str(value).strip().lower()
        if text in ("m", "male", "0"):
            return cls.MALE
        if text in ("f", "female", "1"):
            return cls.FEMALE
        return cls.UNKNOWN

    @property
    def is_known(self) -> bool:
        return self is not Sex.UNKNOWN


class Person:
    """
    Represents a person in a family tree.

    Attributes:
        id (str): Unique person identifier.
        tree_id (Optional[str]): Owning tree identifier.
        primary_name (Optional[str]): Primary display name.
        name_arabic (Optional[str]): Arabic-script name variant.
        sex (Sex): Biological sex.
        birth_date (Optional[date]): Birth date, often unknown.
        family_id (Optional[str]): Family group identifier.
        is_deleted (bool): Soft-delete flag; deleted people are never read by rules.
    """
    __slots__ = ['id', 'tree_id',
                 'primary_name', 'name_arabic',
                 'sex', 'birth_date', 'family_id',
                 'is_deleted']

    def __init__(self, id: str,
                 primary_name: Optional[str] = None,
                 name_arabic: Optional[str] = None,
                 sex=Sex.UNKNOWN,
                 birth_date: Optional[date] = None,
                 family_id: Optional[str] = None,
                 tree_id: Optional[str] = None,
                 is_deleted: bool = False):
        self.id : str = id
        self.tree_id : Optional[str] = tree_id

        self.primary_name : Optional[str] = primary_name
        self.name_arabic : Optional[str] = name_arabic

        self.sex : Sex = Sex.parse(sex)
        self.birth_date : Optional[date] = birth_date
        self.family_id : Optional[str] = family_id

        self.is_deleted : bool = is_deleted

    @property
    def display_name(self) -> str:
        """Primary name used in explanation text, '?' when missing."""
        return self.primary_name or "?"

    @property
    def local_name(self) -> str:
        """Arabic name when present, else primary name, else '?'."""
        return self.name_arabic or self.primary_name or "?"

    @property
    def patronymic_name(self) -> str:
        """
        Name used for patronymic parsing.

        Prefers a non-blank Arabic name, falling back to the primary name.
        """
        if self.name_arabic and self.name_arabic.strip():
            return self.name_arabic
        return self.primary_name or ""

    def __str__(self) -> str:
        return f"Person(id={self.id}, name={self.primary_name})"

    def __repr__(self) -> str:
        return f'[ {self.id} : {self.primary_name} - {self.sex.value} - {self.birth_date} ]'
