from __future__ import annotations

from dataclasses import dataclass
from typing import List, Set, Tuple

from kinship_predict.prediction.model import UNION, PredictionCandidate
from kinship_predict.prediction.snapshot import TreeSnapshot
from kinship_predict.prediction.store import TreeStore
from .base import BaseRule, register_rule


@register_rule
@dataclass
class MissingUnionRule(BaseRule):
    """
    Two people are recorded parents of the same child but share no union.

    Each unordered pair of co-parents is evaluated once, keyed with the lower
    id first, and yields a single union candidate. Confidence grows with the
    number of children the pair shares and gets a small boost when both sexes
    are recorded and differ.
    """
    rule_id: str = "missing_union"
    description: str = "Detects co-parents who share children but have no union between them"
    opposite_sex_boost: float = 5
    max_confidence: float = 99

    @staticmethod
    def shared_children_confidence(shared_children: int) -> float:
        if shared_children >= 3:
            return 95
        if shared_children == 2:
            return 90
        if shared_children == 1:
            return 80
        return 70

    def _opposite_sexes(self, snapshot: TreeSnapshot, a: str, b: str) -> bool:
        sex_a = snapshot.sex(a)
        sex_b = snapshot.sex(b)
        return sex_a.is_known and sex_b.is_known and sex_a != sex_b

    async def detect(self, snapshot: TreeSnapshot, store: TreeStore) -> List[PredictionCandidate]:
        candidates: List[PredictionCandidate] = []
        if snapshot.is_trivial:
            return candidates

        co_parented = snapshot.children_by_parent_count(2)
        checked: Set[Tuple[str, str]] = set()

        for idx, (child_id, parent_ids) in enumerate(co_parented.items()):
            if idx % 100 == 0:
                self._report_step(
                    info=f"Applying {self.rule_id} to child {child_id} ({idx + 1}/{len(co_parented)})",
                    target=len(co_parented),
                    reset_counter=(idx == 0),
                    plus_step=100,
                )

            for i in range(len(parent_ids)):
                for j in range(i + 1, len(parent_ids)):
                    parent_a, parent_b = sorted((parent_ids[i], parent_ids[j]))
                    if (parent_a, parent_b) in checked:
                        continue
                    checked.add((parent_a, parent_b))

                    self._check_stop()
                    if snapshot.share_union(parent_a, parent_b):
                        continue

                    shared = len(set(snapshot.children_of(parent_a)) & set(snapshot.children_of(parent_b)))
                    confidence = self.shared_children_confidence(shared)
                    if self._opposite_sexes(snapshot, parent_a, parent_b):
                        confidence = min(confidence + self.opposite_sex_boost, self.max_confidence)

                    candidates.append(self._candidate(
                        UNION,
                        source_person_id=parent_a,
                        target_person_id=parent_b,
                        confidence=confidence,
                        explanation=(f"{snapshot.name(parent_a)} and {snapshot.name(parent_b)} are both parents of "
                                     f"{shared} child(ren) but have no union"),
                    ))

        return candidates
