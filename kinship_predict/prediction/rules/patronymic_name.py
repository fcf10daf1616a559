from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Optional

from kinship_predict.person import Person, Sex
from kinship_predict.prediction.date_utils import age_gap_years
from kinship_predict.prediction.model import PARENT_CHILD, PredictionCandidate, by_confidence, output_limit
from kinship_predict.prediction.name_utils import parse_patronymic
from kinship_predict.prediction.snapshot import TreeSnapshot
from kinship_predict.prediction.store import TreeStore
from .base import BaseRule, register_rule


class ParsedName(NamedTuple):
    person: Person
    full_name: str
    given_name: str
    father_name: str


@register_rule
@dataclass
class PatronymicNameRule(BaseRule):
    """
    Arabic patronymic naming: "Given Father Grandfather Family".

    If X's second name token matches P's given name, P may be X's father.
    Common names collide often, so the score starts low and needs corroboration:
    P male, same family group, a plausible age gap. A known age gap that is
    negative or above reject_age_gap rejects the pair outright. Scores are
    capped at max_confidence and anything below min_confidence is dropped. The
    ranked output keeps at most max_candidates, and never more than 200.
    """
    rule_id: str = "patronymic_name"
    description: str = "Detects potential parent-child links based on Arabic patronymic naming patterns"
    base_confidence: float = 35
    male_parent_boost: float = 10
    same_family_boost: float = 10
    age_gap_boost: float = 10
    min_age_gap: float = 15
    max_age_gap: float = 50
    reject_age_gap: float = 60
    min_confidence: float = 40
    max_confidence: float = 65
    max_candidates: Optional[int] = 200

    def score(self, child: Person, parent: Person) -> Optional[float]:
        """
        Confidence that `parent` is the father-name source of `child`.

        Returns:
            The capped confidence, or None when the age gap rules the pair out
        """
        confidence = self.base_confidence

        if parent.sex is Sex.MALE:
            confidence += self.male_parent_boost

        if child.family_id is not None and child.family_id == parent.family_id:
            confidence += self.same_family_boost

        gap = age_gap_years(parent.birth_date, child.birth_date)
        if gap is not None:
            if self.min_age_gap <= gap <= self.max_age_gap:
                confidence += self.age_gap_boost
            elif gap < 0 or gap > self.reject_age_gap:
                return None

        return min(confidence, self.max_confidence)

    def _parse(self, snapshot: TreeSnapshot) -> List[ParsedName]:
        parsed = []
        for person in snapshot.people.values():
            full_name = person.patronymic_name
            given, father = parse_patronymic(full_name)
            # Single letters are initials, not names.
            if len(given) <= 1:
                continue
            parsed.append(ParsedName(person, full_name, given, father))
        return parsed

    async def detect(self, snapshot: TreeSnapshot, store: TreeStore) -> List[PredictionCandidate]:
        candidates: List[PredictionCandidate] = []
        if snapshot.is_trivial:
            return candidates

        parsed = self._parse(snapshot)

        by_given_name: Dict[str, List[ParsedName]] = defaultdict(list)
        for entry in parsed:
            by_given_name[entry.given_name].append(entry)

        for idx, child in enumerate(parsed):
            if idx % 100 == 0:
                self._report_step(
                    info=f"Applying {self.rule_id} to person {child.person.id} ({idx + 1}/{len(parsed)})",
                    target=len(parsed),
                    reset_counter=(idx == 0),
                    plus_step=100,
                )
                self._check_stop()

            if not child.father_name:
                continue

            for parent in by_given_name.get(child.father_name, ()):
                if parent.person.id == child.person.id:
                    continue
                if snapshot.has_link(parent.person.id, child.person.id):
                    continue

                confidence = self.score(child.person, parent.person)
                if confidence is None or confidence < self.min_confidence:
                    continue

                candidates.append(self._candidate(
                    PARENT_CHILD,
                    source_person_id=parent.person.id,
                    target_person_id=child.person.id,
                    confidence=confidence,
                    explanation=(f"{child.full_name}'s second name matches {parent.full_name}'s given name "
                                 f"(Arabic patronymic pattern)"),
                ))

        return by_confidence(candidates, output_limit(self.max_candidates))
