from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .models import DIFFICULTY_LEVELS, ENERGY_LEVELS, TRAINING_LEVELS, DogProfile, DogSize, TrainingLevel

AgeUnit = Literal["months", "years"]

MONTHS_PER_YEAR = 12

# Skill-count ceilings per training level; anything above the last is Advanced.
TRAINING_LEVEL_CEILINGS: tuple[tuple[int, TrainingLevel], ...] = (
    (3, "Beginner"),
    (8, "Intermediate"),
)


@dataclass(frozen=True)
class BreedSizeTable:
    """Breed keywords used to guess a dog's size from free-text breed names."""

    small: tuple[str, ...]
    large: tuple[str, ...]

    def extended(self, *, small: tuple[str, ...] = (), large: tuple[str, ...] = ()) -> BreedSizeTable:
        return BreedSizeTable(
            small=tuple(dict.fromkeys([*self.small, *(k.lower() for k in small)])),
            large=tuple(dict.fromkeys([*self.large, *(k.lower() for k in large)])),
        )


DEFAULT_BREED_SIZES = BreedSizeTable(
    small=(
        "chihuahua", "yorkie", "yorkshire", "pomeranian", "maltese", "shih tzu",
        "toy", "miniature", "terrier", "dachshund", "poodle", "bichon", "havanese",
        "pug", "papillon", "pekingese",
    ),
    large=(
        "shepherd", "retriever", "labrador", "mastiff", "newfoundland",
        "great dane", "rottweiler", "doberman", "husky", "malamute",
        "bernese", "pyrenees", "leonberger", "wolfhound", "deerhound",
        "saint bernard", "bloodhound", "greyhound", "malinois",
    ),
)


def estimate_size(breed: str, table: BreedSizeTable = DEFAULT_BREED_SIZES) -> DogSize:
    """Guess a size from the breed name; small keywords are checked first."""
    lowered = breed.strip().lower()
    if any(keyword in lowered for keyword in table.small):
        return "Small"
    if any(keyword in lowered for keyword in table.large):
        return "Large"
    return "Medium"


def resolve_size(dog: DogProfile, table: BreedSizeTable = DEFAULT_BREED_SIZES) -> DogSize:
    if dog.size is not None:
        return dog.size
    return estimate_size(dog.breed, table)


def estimate_training_level(dog: DogProfile) -> TrainingLevel:
    count = len(dog.skills)
    for ceiling, level in TRAINING_LEVEL_CEILINGS:
        if count <= ceiling:
            return level
    return "Advanced"


def resolve_training_level(dog: DogProfile) -> TrainingLevel:
    if dog.training_level is not None:
        return dog.training_level
    return estimate_training_level(dog)


def training_level_rank(level: str) -> int:
    return TRAINING_LEVELS.index(level)


def energy_rank(level: str) -> int:
    """1 for Low up to 3 for High."""
    return ENERGY_LEVELS.index(level) + 1


def difficulty_rank(level: str) -> int:
    """1 for Easy up to 3 for Challenging."""
    return DIFFICULTY_LEVELS.index(level) + 1


def energy_distance(a: str, b: str) -> int:
    """Steps apart on the Low < Medium < High scale."""
    return abs(energy_rank(a) - energy_rank(b))


def years_to_months(years: float) -> float:
    return years * MONTHS_PER_YEAR


def months_to_years(months: float) -> float:
    return months / MONTHS_PER_YEAR


def age_in_years(dog: DogProfile) -> float:
    return max(0.0, float(dog.age))


def age_in_months(dog: DogProfile) -> float:
    return years_to_months(age_in_years(dog))


def normalize_age_bound(value: float | None, unit: AgeUnit) -> float | None:
    """Convert an age bound to months."""
    if value is None:
        return None
    if unit == "months":
        return float(value)
    if unit == "years":
        return years_to_months(float(value))
    raise ValueError("age unit must be one of: months, years")


def format_years(months: float) -> str:
    years = months_to_years(months)
    return f"{years:g}"
