from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .models import CandidateKind, ScoredCandidate

logger = logging.getLogger(__name__)


def _frozen(thresholds: Mapping[CandidateKind, int]) -> Mapping[CandidateKind, int]:
    return MappingProxyType({CandidateKind(kind): int(value) for kind, value in thresholds.items()})


@dataclass(frozen=True)
class ThresholdPolicy:
    """Minimum score, per candidate kind, a result must beat to be shown."""

    name: str
    thresholds: Mapping[CandidateKind, int] = field(default_factory=dict)
    default: int = 50

    def __post_init__(self) -> None:
        object.__setattr__(self, "thresholds", _frozen(self.thresholds))

    def threshold_for(self, kind: CandidateKind) -> int:
        return self.thresholds.get(kind, self.default)

    def passes(self, scored: ScoredCandidate) -> bool:
        if scored.result.disqualified:
            return False
        return scored.score > self.threshold_for(scored.kind)

    def with_overrides(self, overrides: Mapping[CandidateKind, int] | None = None, *, default: int | None = None) -> ThresholdPolicy:
        merged = dict(self.thresholds)
        merged.update(overrides or {})
        return ThresholdPolicy(
            name=self.name,
            thresholds=merged,
            default=self.default if default is None else default,
        )

    @classmethod
    def flat(cls, name: str, threshold: int) -> ThresholdPolicy:
        return cls(name=name, thresholds={kind: threshold for kind in CandidateKind}, default=threshold)


CATEGORY_THRESHOLDS = ThresholdPolicy(
    name="by_category",
    thresholds={
        CandidateKind.TRAINING: 30,
        CandidateKind.PLAYDATE: 40,
        CandidateKind.DOG_PARK: 20,
        CandidateKind.COMPETITION: 50,
        CandidateKind.PLAYMATE: 50,
        CandidateKind.GENERAL: 50,
    },
)

TOP_PICKS_THRESHOLDS = ThresholdPolicy.flat("top_picks", 50)


def filter_scored(scored: Iterable[ScoredCandidate], policy: ThresholdPolicy) -> list[ScoredCandidate]:
    kept: list[ScoredCandidate] = []
    dropped = 0
    for item in scored:
        if policy.passes(item):
            kept.append(item)
        else:
            dropped += 1
    logger.debug("policy %s kept %d, dropped %d", policy.name, len(kept), dropped)
    return kept
