from __future__ import annotations

from dataclasses import dataclass

from .derive import DEFAULT_BREED_SIZES, BreedSizeTable
from .filtering import CATEGORY_THRESHOLDS, TOP_PICKS_THRESHOLDS, ThresholdPolicy


@dataclass(frozen=True)
class ScoringConfig:
    breed_sizes: BreedSizeTable = DEFAULT_BREED_SIZES
    policy: ThresholdPolicy = CATEGORY_THRESHOLDS
    limit: int | None = None

    def __post_init__(self) -> None:
        if self.limit is not None and self.limit < 1:
            raise ValueError("limit must be at least 1")


DEFAULT_SCORING_CONFIG = ScoringConfig()
TOP_PICKS_CONFIG = ScoringConfig(policy=TOP_PICKS_THRESHOLDS, limit=3)
