"""
Helpers for callers that persist or review candidates.

The pipeline never merges candidates across rules. A review queue that wants
one row per proposed relationship can use merge_candidates(), which combines
agreeing rules with a noisy-OR: P = 1 - prod(1 - p_i).
"""
from __future__ import annotations

from collections import OrderedDict
from functools import reduce
from typing import Dict, Iterable, List

from .model import PredictionCandidate, by_confidence

HIGH = "High"
MEDIUM = "Medium"
LOW = "Low"

MERGED_CONFIDENCE_CAP = 99.0

RULE_DESCRIPTIONS: Dict[str, str] = {
    "spouse_child_gap": "Spouse not linked to children",
    "missing_union": "Co-parents without a union",
    "sibling_parent_gap": "Sibling missing second parent",
    "patronymic_name": "Arabic patronymic name match",
    "age_family": "Age gap and family membership",
}


def confidence_level(confidence: float) -> str:
    if confidence >= 85:
        return HIGH
    if confidence >= 60:
        return MEDIUM
    return LOW


def rule_description(rule_id: str) -> str:
    return RULE_DESCRIPTIONS.get(rule_id, rule_id)


def noisy_or(confidences: Iterable[float]) -> float:
    """Combine independent confidences (0-100) into one, capped at 99."""
    miss = reduce(lambda acc, c: acc * (1.0 - c / 100.0), confidences, 1.0)
    return min((1.0 - miss) * 100.0, MERGED_CONFIDENCE_CAP)


def merge_candidates(candidates: Iterable[PredictionCandidate]) -> List[PredictionCandidate]:
    """
    Merge candidates proposing the same (source, target, type).

    The highest-confidence candidate of each group keeps its rule and
    explanation; the explanation names the other rules that agreed.

    Returns:
        Merged candidates, highest confidence first
    """
    groups: "OrderedDict[tuple, List[PredictionCandidate]]" = OrderedDict()
    for candidate in candidates:
        groups.setdefault(candidate.pair_key, []).append(candidate)

    merged = []
    for group in groups.values():
        ranked = by_confidence(group)
        primary = ranked[0]
        if len(ranked) == 1:
            merged.append(primary)
            continue
        combined = round(noisy_or(c.confidence for c in ranked), 2)
        rule_ids = ", ".join(OrderedDict.fromkeys(c.rule_id for c in ranked))
        merged.append(primary.with_confidence(
            combined, explanation=f"{primary.explanation} (also matched by: {rule_ids})"
        ))
    return by_confidence(merged)


def summarize(candidates: Iterable[PredictionCandidate]) -> Dict[str, int]:
    """Count candidates per confidence level, plus a total."""
    counts = {"total": 0, HIGH: 0, MEDIUM: 0, LOW: 0}
    for candidate in candidates:
        counts["total"] += 1
        counts[confidence_level(candidate.confidence)] += 1
    return counts
