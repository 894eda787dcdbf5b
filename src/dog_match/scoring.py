"""Rule folding shared by every evaluator.

A rule looks at one aspect of a (dog, candidate) pair and returns either
nothing (the rule does not apply), a ``RuleOutcome`` adjusting the score,
a ``Verdict`` that settles the score outright, or ``DISQUALIFY``.  An
``Evaluator`` runs its rules in order from a base score and clamps the
total into 0..100.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union

from .derive import BreedSizeTable
from .models import Candidate, DogProfile, Reason, ScoreResult

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 100


class ScoringConvention(str, Enum):
    SUBTRACTIVE = "subtractive"  # start at 100, penalize violations
    ADDITIVE = "additive"  # start low, reward matches


class AgePolicy(str, Enum):
    STRICT = "strict"  # out-of-range age disqualifies
    ADVISORY = "advisory"  # out-of-range age is a penalty with a caution


class _Disqualified:
    def __repr__(self) -> str:
        return "DISQUALIFY"


DISQUALIFY = _Disqualified()


@dataclass(frozen=True)
class RuleOutcome:
    delta: int
    reason: Reason | None = None


@dataclass(frozen=True)
class Verdict:
    """Stops the fold; the result is ``score`` plus the reasons gathered so far."""

    score: int
    reason: Reason | None = None


def bonus(delta: int, text: str) -> RuleOutcome:
    return RuleOutcome(delta, Reason(text, positive=True))


def penalty(delta: int, text: str) -> RuleOutcome:
    return RuleOutcome(-abs(delta), Reason(text, positive=False))


def caution(delta: int, text: str) -> RuleOutcome:
    """A score change whose explanation should be read as a warning."""
    return RuleOutcome(delta, Reason(text, positive=False))


def note(text: str) -> RuleOutcome:
    return RuleOutcome(0, Reason(text, positive=True))


def settle(value: int, text: str) -> Verdict:
    return Verdict(value, Reason(text, positive=True))


Rule = Callable[[DogProfile, Candidate, BreedSizeTable], Union[RuleOutcome, Verdict, _Disqualified, None]]


def clamp_score(value: float) -> int:
    return int(max(MIN_SCORE, min(MAX_SCORE, round(value))))


@dataclass(frozen=True)
class Evaluator:
    name: str
    convention: ScoringConvention
    rules: tuple[Rule, ...]
    base: int | None = None

    @property
    def starting_score(self) -> int:
        if self.base is not None:
            return self.base
        return MAX_SCORE if self.convention is ScoringConvention.SUBTRACTIVE else MIN_SCORE

    def __call__(self, dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable) -> ScoreResult:
        total = self.starting_score
        reasons: list[Reason] = []
        for rule in self.rules:
            outcome = rule(dog, candidate, sizes)
            if outcome is None:
                continue
            if outcome is DISQUALIFY:
                logger.debug("%s: %s disqualified by %s", self.name, candidate.id, rule.__name__)
                return ScoreResult.disqualified_result()
            if isinstance(outcome, Verdict):
                if outcome.reason is not None:
                    reasons.append(outcome.reason)
                return ScoreResult(score=clamp_score(outcome.score), reasons=tuple(reasons))
            total += outcome.delta
            if outcome.reason is not None:
                reasons.append(outcome.reason)
        return ScoreResult(score=clamp_score(total), reasons=tuple(reasons))
