from __future__ import annotations

from dataclasses import dataclass
from typing import List, Set, Tuple

from kinship_predict.prediction.model import PARENT_CHILD, PredictionCandidate
from kinship_predict.prediction.snapshot import TreeSnapshot
from kinship_predict.prediction.store import TreeStore
from .base import BaseRule, register_rule


@register_rule
@dataclass
class SiblingParentGapRule(BaseRule):
    """
    Child X has parents A and B, sibling Y has only A, and A and B share a union.

    B is then proposed as a parent of Y. The pass runs in both directions (A's
    children missing B, B's children missing A). Confidence grows with the
    number of siblings that already have both parents recorded.
    """
    rule_id: str = "sibling_parent_gap"
    description: str = "Detects siblings linked to one parent but missing the other (when parents are in a union)"
    max_biological_parents: int = 2

    @staticmethod
    def sibling_confidence(sibs_with_both: int) -> float:
        if sibs_with_both >= 3:
            return 90
        if sibs_with_both >= 1:
            return 80
        return 70

    async def detect(self, snapshot: TreeSnapshot, store: TreeStore) -> List[PredictionCandidate]:
        candidates: List[PredictionCandidate] = []
        if snapshot.is_trivial:
            return candidates

        co_parented = snapshot.children_by_parent_count(2)
        processed: Set[Tuple[str, str]] = set()

        for idx, parent_ids in enumerate(co_parented.values()):
            if idx % 100 == 0:
                self._report_step(
                    info=f"Applying {self.rule_id} ({idx + 1}/{len(co_parented)})",
                    target=len(co_parented),
                    reset_counter=(idx == 0),
                    plus_step=100,
                )

            for i in range(len(parent_ids)):
                for j in range(i + 1, len(parent_ids)):
                    parent_a = parent_ids[i]
                    parent_b = parent_ids[j]

                    self._check_stop()
                    if not snapshot.share_union(parent_a, parent_b):
                        continue

                    sibs_with_both = sum(
                        1 for parents in co_parented.values()
                        if parent_a in parents and parent_b in parents
                    )
                    confidence = self.sibling_confidence(sibs_with_both)

                    # (proposed parent, parent already linked)
                    for proposed, known in ((parent_b, parent_a), (parent_a, parent_b)):
                        linked_to_proposed = set(snapshot.children_of(proposed))
                        for child_id in snapshot.children_of(known):
                            if child_id in linked_to_proposed or child_id == proposed:
                                continue
                            key = (proposed, child_id)
                            if key in processed:
                                continue
                            processed.add(key)

                            self._check_stop()
                            if await store.count_biological_parents(child_id) >= self.max_biological_parents:
                                continue

                            known_name = snapshot.name(known)
                            candidates.append(self._candidate(
                                PARENT_CHILD,
                                source_person_id=proposed,
                                target_person_id=child_id,
                                confidence=confidence,
                                explanation=(f"{snapshot.name(proposed)} is in a union with {known_name}. "
                                             f"{sibs_with_both} sibling(s) have both parents, but "
                                             f"{snapshot.name(child_id)} only has {known_name}"),
                            ))

        return candidates
