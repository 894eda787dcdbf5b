"""Score, filter, sort and bucket candidates for one dog.

Everything here is a pure function of its inputs.  Candidate lists are
read, never modified, and ties keep their input order because sorting is
stable.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .compatibility import score
from .config import DEFAULT_SCORING_CONFIG, TOP_PICKS_CONFIG, ScoringConfig
from .filtering import ThresholdPolicy, filter_scored
from .models import Candidate, CandidateKind, DogProfile, OtherDog, ScoredCandidate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recommendations:
    buckets: dict[CandidateKind, list[ScoredCandidate]] = field(default_factory=dict)
    all: list[ScoredCandidate] = field(default_factory=list)

    def bucket(self, kind: CandidateKind) -> list[ScoredCandidate]:
        return self.buckets.get(kind, [])

    @property
    def empty(self) -> bool:
        return not self.all


def _is_self(dog: DogProfile, candidate: Candidate) -> bool:
    return isinstance(candidate, OtherDog) and candidate.id == dog.id


def _dedupe(scored: Iterable[ScoredCandidate]) -> list[ScoredCandidate]:
    seen: set[str] = set()
    unique: list[ScoredCandidate] = []
    for item in scored:
        if item.candidate.id in seen:
            continue
        seen.add(item.candidate.id)
        unique.append(item)
    return unique


def _sorted(scored: Iterable[ScoredCandidate], limit: int | None) -> list[ScoredCandidate]:
    ordered = sorted(scored, key=lambda item: -item.score)
    return ordered[:limit] if limit is not None else ordered


def score_candidates(
    dog: DogProfile,
    candidates: Sequence[Candidate],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> list[ScoredCandidate]:
    """Raw scores in input order, disqualified candidates included."""
    scored: list[ScoredCandidate] = []
    for candidate in candidates:
        if _is_self(dog, candidate):
            continue
        result = score(dog, candidate, breed_sizes=config.breed_sizes)
        if result.disqualified:
            logger.debug("%s is not eligible for %s", dog.id, candidate.id)
        scored.append(ScoredCandidate(candidate=candidate, kind=candidate.kind, result=result))
    return scored


def rank(
    dog: DogProfile,
    candidates: Sequence[Candidate],
    kind: CandidateKind | None = None,
    *,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    policy: ThresholdPolicy | None = None,
    limit: int | None = None,
) -> list[ScoredCandidate]:
    """Best candidates first, optionally for a single kind.

    ``policy`` and ``limit`` override the ones carried by ``config``.
    """
    if kind is not None:
        candidates = [c for c in candidates if c.kind is kind]
    scored = _dedupe(score_candidates(dog, candidates, config))
    eligible = filter_scored(scored, policy or config.policy)
    return _sorted(eligible, limit if limit is not None else config.limit)


def rank_across_categories(
    dog: DogProfile,
    candidates: Sequence[Candidate],
    *,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    policy: ThresholdPolicy | None = None,
    limit: int | None = None,
) -> Recommendations:
    """Bucket candidates by kind and build the merged "All" view."""
    limit = limit if limit is not None else config.limit
    eligible = filter_scored(_dedupe(score_candidates(dog, candidates, config)), policy or config.policy)

    grouped: dict[CandidateKind, list[ScoredCandidate]] = {}
    for item in eligible:
        grouped.setdefault(item.kind, []).append(item)
    buckets = {k: _sorted(items, limit) for k, items in grouped.items()}

    # input order among the bucketed items keeps ties stable in the merged view
    shown = {id(item) for items in buckets.values() for item in items}
    merged = _sorted((item for item in eligible if id(item) in shown), limit)
    logger.debug(
        "recommendations for %s: %s",
        dog.id,
        {k.value: len(v) for k, v in buckets.items()},
    )
    return Recommendations(buckets=buckets, all=merged)


def top_picks(
    dog: DogProfile,
    candidates: Sequence[Candidate],
    limit: int = 3,
    *,
    config: ScoringConfig = TOP_PICKS_CONFIG,
) -> list[ScoredCandidate]:
    """The single-dog highlight list: flat threshold, merged across kinds."""
    return rank(dog, candidates, config=config, limit=limit)
