"""Prediction rules: heuristics that propose relationships missing from a family tree.

Built-in rules:
    - SpouseChildGapRule: Child linked to one union member but not the other (60-95)
    - MissingUnionRule: Co-parents with no union between them (70-99)
    - SiblingParentGapRule: Sibling missing the second parent of a union (70-90)
    - PatronymicNameRule: Arabic second-name token matches a given name (40-65)
    - AgeFamilyRule: Generation-sized age gap inside a family group (45-55)

Extensibility:
    Create custom rules by:
        1. Subclass BaseRule
        2. Implement async detect(snapshot, store) → list[PredictionCandidate]
        3. Use @register_rule decorator for automatic registration

Example:
    >>> from kinship_predict.prediction.rules import BaseRule, register_rule
    >>> @register_rule
    ... @dataclass
    ... class MyCustomRule(BaseRule):
    ...     rule_id: str = "my_rule"
    ...     async def detect(self, snapshot, store):
    ...         return []
"""

from .base import PredictionRule
from .base import BaseRule
from .base import register_rule
from .base import get_rule_registry
from .spouse_child_gap import SpouseChildGapRule
from .missing_union import MissingUnionRule
from .sibling_parent_gap import SiblingParentGapRule
from .patronymic_name import PatronymicNameRule
from .age_family import AgeFamilyRule

__all__ = [
    'PredictionRule',
    'BaseRule',
    'register_rule',
    'get_rule_registry',
    'SpouseChildGapRule',
    'MissingUnionRule',
    'SiblingParentGapRule',
    'PatronymicNameRule',
    'AgeFamilyRule',
]
