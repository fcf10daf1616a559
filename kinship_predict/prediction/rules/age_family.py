from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from kinship_predict.prediction.date_utils import age_gap_years
from kinship_predict.prediction.model import PARENT_CHILD, PredictionCandidate, by_confidence, output_limit
from kinship_predict.prediction.snapshot import TreeSnapshot
from kinship_predict.prediction.store import TreeStore
from .base import BaseRule, register_rule


@register_rule
@dataclass
class AgeFamilyRule(BaseRule):
    """
    Two members of the same family group born a generation apart.

    The weakest signal of the set and the one producing the most pairs, so
    output is ranked and truncated to max_candidates, never more than 200.
    """
    rule_id: str = "age_family"
    description: str = "Detects potential parent-child links based on age gaps and shared family membership"
    min_age_gap: float = 15
    max_age_gap: float = 50
    ideal_age_gap_min: float = 20
    ideal_age_gap_max: float = 40
    ideal_confidence: float = 55
    base_confidence: float = 45
    max_candidates: Optional[int] = 200

    async def detect(self, snapshot: TreeSnapshot, store: TreeStore) -> List[PredictionCandidate]:
        candidates: List[PredictionCandidate] = []
        if snapshot.is_trivial:
            return candidates

        groups = snapshot.family_groups()

        for idx, (family_id, members) in enumerate(groups.items()):
            if idx % 100 == 0:
                self._report_step(
                    info=f"Applying {self.rule_id} to family {family_id} ({idx + 1}/{len(groups)})",
                    target=len(groups),
                    reset_counter=(idx == 0),
                    plus_step=100,
                )
            self._check_stop()

            dated = [p for p in members if p.birth_date is not None]
            if len(dated) < 2:
                continue

            for older in dated:
                for younger in dated:
                    if older.id == younger.id:
                        continue

                    gap = age_gap_years(older.birth_date, younger.birth_date)
                    if gap is None or not self.min_age_gap < gap < self.max_age_gap:
                        continue
                    if snapshot.linked_either_way(older.id, younger.id):
                        continue

                    if self.ideal_age_gap_min <= gap <= self.ideal_age_gap_max:
                        confidence = self.ideal_confidence
                    else:
                        confidence = self.base_confidence

                    candidates.append(self._candidate(
                        PARENT_CHILD,
                        source_person_id=older.id,
                        target_person_id=younger.id,
                        confidence=confidence,
                        explanation=(f"{older.local_name} and {younger.local_name} are in the same family "
                                     f"with a {round(gap)}-year age gap"),
                    ))

        return by_confidence(candidates, output_limit(self.max_candidates))
