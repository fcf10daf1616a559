from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

PARENT_CHILD = "parent_child"
UNION = "union"
PREDICTED_TYPES: Tuple[str, ...] = (PARENT_CHILD, UNION)

Confidence = float  # 0 to 100

MIN_CONFIDENCE: Confidence = 0.0
MAX_CONFIDENCE: Confidence = 100.0


@dataclass(frozen=True)
class PredictionCandidate:
    """
    A relationship the tree is probably missing.

    Attributes:
        rule_id (str): Rule that produced the candidate (e.g. 'spouse_child_gap').
        predicted_type (str): 'parent_child' or 'union'.
        source_person_id (str): Proposed parent for parent_child, first co-parent for union.
        target_person_id (str): Child for parent_child, second co-parent for union.
        confidence (Confidence): Confidence from 0 to 100.
        explanation (str): Human-readable reason naming the people involved.
    """
    rule_id: str
    predicted_type: str
    source_person_id: str
    target_person_id: str
    confidence: Confidence
    explanation: str

    def __post_init__(self):
        if self.predicted_type not in PREDICTED_TYPES:
            raise ValueError(f"Unknown predicted type '{self.predicted_type}'")
        if not MIN_CONFIDENCE <= self.confidence <= MAX_CONFIDENCE:
            raise ValueError(f"Confidence {self.confidence} outside [0, 100]")

    @property
    def pair_key(self) -> Tuple[str, str, str]:
        """Key identifying the proposed relationship, independent of rule."""
        return (self.source_person_id, self.target_person_id, self.predicted_type)

    def with_confidence(self, confidence: Confidence, explanation: str = None) -> PredictionCandidate:
        return replace(self, confidence=confidence,
                       explanation=self.explanation if explanation is None else explanation)

    def to_dict(self) -> dict:
        return {
            "rule_id": self.rule_id,
            "predicted_type": self.predicted_type,
            "source_person_id": self.source_person_id,
            "target_person_id": self.target_person_id,
            "confidence": self.confidence,
            "explanation": self.explanation,
        }


def by_confidence(candidates, limit: int = None):
    """
    Sort candidates by confidence, highest first, keeping discovery order on ties.

    Args:
        candidates: Candidates to rank.
        limit: Optional maximum number of candidates to keep.
    """
    ranked = sorted(candidates, key=lambda c: c.confidence, reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


# Upper bound on the output of the rules that rank and truncate
MAX_RULE_OUTPUT = 200


def output_limit(max_candidates: Optional[int], ceiling: int = MAX_RULE_OUTPUT) -> int:
    """Configured cap, never above `ceiling`; None means `ceiling`."""
    if max_candidates is None:
        return ceiling
    return min(int(max_candidates), ceiling)
