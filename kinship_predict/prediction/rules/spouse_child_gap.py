from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from kinship_predict.union import Union
from kinship_predict.person import Person
from kinship_predict.prediction.date_utils import within_window
from kinship_predict.prediction.model import PARENT_CHILD, PredictionCandidate
from kinship_predict.prediction.snapshot import TreeSnapshot
from kinship_predict.prediction.store import TreeStore
from .base import BaseRule, register_rule


@register_rule
@dataclass
class SpouseChildGapRule(BaseRule):
    """
    A child is linked to one member of a union but not to the other.

    For every union with two or more members and every ordered pair (A, B) of
    members, each child of A that B is not yet linked to is proposed as a child
    of B, unless the child already has the maximum number of biological parents.

    Confidence depends on whether the child's birth falls inside the union:
    in_union_confidence when it does, outside_union_confidence when the dates
    say it does not (often a step-child), base_confidence when dates are unknown.
    """
    rule_id: str = "spouse_child_gap"
    description: str = "Detects children linked to one spouse but not the other in a union"
    base_confidence: float = 85
    in_union_confidence: float = 95
    outside_union_confidence: float = 60
    max_biological_parents: int = 2

    def confidence_for(self, union: Union, child: Optional[Person]) -> float:
        birth_date = child.birth_date if child is not None else None
        inside = within_window(birth_date, union.start_date, union.end_date)
        if inside is None:
            return self.base_confidence
        return self.in_union_confidence if inside else self.outside_union_confidence

    async def detect(self, snapshot: TreeSnapshot, store: TreeStore) -> List[PredictionCandidate]:
        candidates: List[PredictionCandidate] = []
        if snapshot.is_trivial:
            return candidates

        proposed: Set[Tuple[str, str]] = set()

        for idx, union in enumerate(snapshot.unions):
            if idx % 100 == 0:
                self._report_step(
                    info=f"Applying {self.rule_id} to union {union.id} ({idx + 1}/{len(snapshot.unions)})",
                    target=len(snapshot.unions),
                    reset_counter=(idx == 0),
                    plus_step=100,
                )
            if len(union.members) < 2:
                continue

            for member_a in union.members:
                children_of_a = snapshot.children_of(member_a.person_id)
                if not children_of_a:
                    continue

                for member_b in union.other_members(member_a.person_id):
                    for child_id in children_of_a:
                        key = (member_b.person_id, child_id)
                        if child_id == member_b.person_id or key in proposed:
                            continue

                        self._check_stop()
                        if await store.has_parent_link(member_b.person_id, child_id):
                            continue
                        if await store.count_biological_parents(child_id) >= self.max_biological_parents:
                            continue

                        proposed.add(key)
                        confidence = self.confidence_for(union, snapshot.person(child_id))

                        parent_a_name = member_a.person_name or snapshot.name(member_a.person_id)
                        parent_b_name = member_b.person_name or snapshot.name(member_b.person_id)
                        child_name = snapshot.name(child_id)

                        candidates.append(self._candidate(
                            PARENT_CHILD,
                            source_person_id=member_b.person_id,
                            target_person_id=child_id,
                            confidence=confidence,
                            explanation=(f"{parent_b_name} is in a union with {parent_a_name} who is parent of "
                                         f"{child_name}, but {parent_b_name} is not linked as parent"),
                        ))

        return candidates
