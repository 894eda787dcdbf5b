from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Union

EnergyLevel = Literal["Low", "Medium", "High"]
DogSize = Literal["Small", "Medium", "Large"]
TrainingLevel = Literal["Beginner", "Intermediate", "Advanced"]
PlayStyle = Literal["Gentle", "Moderate", "Rough", "Varies"]
DifficultyLevel = Literal["Easy", "Moderate", "Challenging"]
EventCategory = Literal["Training", "Playdate", "DogPark", "Competition", "Other"]

ENERGY_LEVELS: tuple[str, ...] = ("Low", "Medium", "High")
DOG_SIZES: tuple[str, ...] = ("Small", "Medium", "Large")
ANY_SIZE = "Any"
TRAINING_LEVELS: tuple[str, ...] = ("Beginner", "Intermediate", "Advanced")
PLAY_STYLES: tuple[str, ...] = ("Gentle", "Moderate", "Rough", "Varies")
DIFFICULTY_LEVELS: tuple[str, ...] = ("Easy", "Moderate", "Challenging")
EVENT_CATEGORIES: tuple[str, ...] = ("Training", "Playdate", "DogPark", "Competition", "Other")


def _check_choice(name: str, value: str | None, choices: tuple[str, ...]) -> None:
    if value is not None and value not in choices:
        raise ValueError(f"{name} must be one of: {', '.join(choices)}")


def _check_choices(name: str, values: frozenset[str], choices: tuple[str, ...]) -> None:
    unknown = sorted(v for v in values if v not in choices)
    if unknown:
        raise ValueError(f"{name} has unknown values {unknown}; expected: {', '.join(choices)}")


class CandidateKind(str, Enum):
    """Which evaluator scores a candidate."""

    TRAINING = "Training"
    PLAYDATE = "Playdate"
    DOG_PARK = "DogPark"
    COMPETITION = "Competition"
    PLAYMATE = "Playmate"
    GENERAL = "General"


_KIND_BY_CATEGORY: dict[str, CandidateKind] = {
    "Training": CandidateKind.TRAINING,
    "Playdate": CandidateKind.PLAYDATE,
    "DogPark": CandidateKind.DOG_PARK,
    "Competition": CandidateKind.COMPETITION,
    "Other": CandidateKind.GENERAL,
}


@dataclass(frozen=True)
class DogProfile:
    """A dog as seen by the scoring engine.

    ``size`` and ``training_level`` are optional; when missing they are
    derived from the breed and the skill count.
    """

    id: str
    name: str
    breed: str = ""
    age: float = 0.0
    energy: EnergyLevel = "Medium"
    size: DogSize | None = None
    training_level: TrainingLevel | None = None
    is_good_off_leash: bool = False
    skills: frozenset[str] = frozenset()
    play_style: PlayStyle | None = None
    likes: frozenset[str] = frozenset()
    preferred_playmate_sizes: frozenset[str] = frozenset()
    behavior_notes: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("id cannot be empty")
        _check_choice("energy", self.energy, ENERGY_LEVELS)
        _check_choice("size", self.size, DOG_SIZES)
        _check_choice("training_level", self.training_level, TRAINING_LEVELS)
        _check_choice("play_style", self.play_style, PLAY_STYLES)
        _check_choices("preferred_playmate_sizes", self.preferred_playmate_sizes, DOG_SIZES + (ANY_SIZE,))


@dataclass(frozen=True)
class Requirements:
    """Constraints a candidate places on a dog.

    Ages are always in months here; unit conversion happens when the
    candidate is built (see ``dog_match.loader``).
    """

    min_age_months: float | None = None
    max_age_months: float | None = None
    energy_levels: frozenset[str] = frozenset()
    dog_sizes: frozenset[str] = frozenset()
    training_level: TrainingLevel | None = None
    required_abilities: frozenset[str] = frozenset()
    breed_allow_list: tuple[str, ...] = ()
    breed_deny_list: tuple[str, ...] = ()
    difficulty: DifficultyLevel | None = None
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _check_choices("energy_levels", self.energy_levels, ENERGY_LEVELS)
        _check_choices("dog_sizes", self.dog_sizes, DOG_SIZES + (ANY_SIZE,))
        _check_choice("training_level", self.training_level, TRAINING_LEVELS)
        _check_choice("difficulty", self.difficulty, DIFFICULTY_LEVELS)

    @property
    def has_age_range(self) -> bool:
        return self.min_age_months is not None or self.max_age_months is not None

    @property
    def restricts_energy(self) -> bool:
        return bool(self.energy_levels) and len(self.energy_levels) < len(ENERGY_LEVELS)

    @property
    def restricts_size(self) -> bool:
        return bool(self.dog_sizes) and ANY_SIZE not in self.dog_sizes

    @property
    def is_open(self) -> bool:
        """True when nothing here narrows which dogs fit.

        A zero minimum age, all three energy levels and an ``Any`` size
        count as open.  Tags count as content, so a tagged candidate is
        never open.
        """
        return (
            not self.min_age_months
            and self.max_age_months is None
            and not self.restricts_energy
            and not self.restricts_size
            and self.training_level is None
            and not self.required_abilities
            and not self.breed_allow_list
            and not self.breed_deny_list
            and self.difficulty is None
            and not self.tags
        )


NO_REQUIREMENTS = Requirements()


@dataclass(frozen=True)
class Event:
    id: str
    title: str
    category: EventCategory = "Other"
    requirements: Requirements = NO_REQUIREMENTS

    def __post_init__(self) -> None:
        _check_choice("category", self.category, EVENT_CATEGORIES)

    @property
    def kind(self) -> CandidateKind:
        return _KIND_BY_CATEGORY[self.category]


@dataclass(frozen=True)
class TrainingClass:
    id: str
    title: str
    requirements: Requirements = NO_REQUIREMENTS

    @property
    def kind(self) -> CandidateKind:
        return CandidateKind.TRAINING


@dataclass(frozen=True)
class DogParkMeetup:
    id: str
    title: str
    requirements: Requirements = NO_REQUIREMENTS

    @property
    def kind(self) -> CandidateKind:
        return CandidateKind.DOG_PARK


@dataclass(frozen=True)
class OtherDog:
    dog: DogProfile

    @property
    def id(self) -> str:
        return self.dog.id

    @property
    def title(self) -> str:
        return self.dog.name

    @property
    def requirements(self) -> Requirements:
        return NO_REQUIREMENTS

    @property
    def kind(self) -> CandidateKind:
        return CandidateKind.PLAYMATE


Candidate = Union[Event, TrainingClass, DogParkMeetup, OtherDog]


@dataclass(frozen=True)
class Reason:
    text: str
    positive: bool = True


@dataclass(frozen=True)
class ScoreResult:
    """A 0..100 score with its reasons.

    ``disqualified`` is set only when a hard rule ruled the dog out; a
    candidate that simply matched nothing also scores 0 but stays eligible.
    """

    score: int
    reasons: tuple[Reason, ...] = ()
    disqualified: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.score <= 100:
            raise ValueError("score must be between 0 and 100")
        if self.disqualified and (self.score or self.reasons):
            raise ValueError("a disqualified result must have score 0 and no reasons")

    @classmethod
    def disqualified_result(cls) -> ScoreResult:
        return cls(score=0, reasons=(), disqualified=True)

    @property
    def messages(self) -> list[str]:
        return [reason.text for reason in self.reasons]

    @property
    def positives(self) -> list[str]:
        return [reason.text for reason in self.reasons if reason.positive]

    @property
    def negatives(self) -> list[str]:
        return [reason.text for reason in self.reasons if not reason.positive]


@dataclass(frozen=True)
class ScoredCandidate:
    candidate: Candidate
    kind: CandidateKind
    result: ScoreResult

    @property
    def score(self) -> int:
        return self.result.score
