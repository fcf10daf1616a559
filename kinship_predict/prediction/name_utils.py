"""
Name helpers for the patronymic rule.

Arabic names follow "Given Father Grandfather Family", so the second token of
a person's name is normally the given name of their father.
"""
from __future__ import annotations

from typing import Optional, Tuple

# Fixed orthographic substitutions applied before comparing name tokens.
ARABIC_SUBSTITUTIONS: Tuple[Tuple[str, str], ...] = (
    ("أ", "ا"),  # alef with hamza above -> alef
    ("إ", "ا"),  # alef with hamza below -> alef
    ("آ", "ا"),  # alef with madda -> alef
    ("ة", "ه"),  # teh marbuta -> heh
    ("ى", "ي"),  # alef maqsura -> yeh
)


def normalize_arabic(text: Optional[str]) -> str:
    """Normalize a name token for comparison. Empty string for None/blank."""
    if not text:
        return ""
    for variant, canonical in ARABIC_SUBSTITUTIONS:
        text = text.replace(variant, canonical)
    return text.strip().lower()


def name_tokens(name: Optional[str]) -> Tuple[str, ...]:
    """Split a name on whitespace, dropping empty tokens."""
    return tuple((name or "").split())


def parse_patronymic(name: Optional[str]) -> Tuple[str, str]:
    """
    Extract (given name, father-name token) from a full name, both normalized.

    Missing tokens come back as empty strings.

    >>> parse_patronymic("Ahmad Ali Hassan")
    ('ahmad', 'ali')
    """
    tokens = name_tokens(name)
    given = normalize_arabic(tokens[0]) if len(tokens) > 0 else ""
    father = normalize_arabic(tokens[1]) if len(tokens) > 1 else ""
    return given, father
