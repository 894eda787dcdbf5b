from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from .models import ScoredCandidate, ScoreResult

MatchTier = Literal["strong match", "good match", "weak match"]

# Same bands the event cards are colored by.
STRONG_MATCH_MIN = 80
GOOD_MATCH_MIN = 60


def match_tier(score: int) -> MatchTier:
    if score >= STRONG_MATCH_MIN:
        return "strong match"
    if score >= GOOD_MATCH_MIN:
        return "good match"
    return "weak match"


@dataclass(frozen=True)
class Explanation:
    score: int
    tier: MatchTier
    highlights: list[str]
    cautions: list[str]
    details: list[str]


def explain(result: ScoreResult, *, max_positive: int = 2, max_negative: int = 1) -> Explanation:
    """Compact summary for a card plus the full list for the expanded view."""
    return Explanation(
        score=result.score,
        tier=match_tier(result.score),
        highlights=result.positives[:max_positive],
        cautions=result.negatives[:max_negative],
        details=result.messages,
    )


@dataclass(frozen=True)
class TierGroups:
    strong: list[ScoredCandidate]
    good: list[ScoredCandidate]
    weak: list[ScoredCandidate]


def group_by_tier(scored: Iterable[ScoredCandidate]) -> TierGroups:
    groups: dict[str, list[ScoredCandidate]] = {"strong match": [], "good match": [], "weak match": []}
    for item in scored:
        groups[match_tier(item.score)].append(item)
    return TierGroups(
        strong=groups["strong match"],
        good=groups["good match"],
        weak=groups["weak match"],
    )
