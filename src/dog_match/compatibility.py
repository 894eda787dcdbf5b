"""Category-specific compatibility rules.

Each candidate kind has one evaluator made of an ordered rule list.  The
general event evaluator starts at 100 and subtracts for violated
constraints; the category evaluators start low and add for matches.
Every event evaluator first checks whether the candidate asks anything of
the dog at all; a wide-open candidate scores 100 whatever the convention.

The panel evaluator is the quick base-50 score shown next to an event
list.  It is not part of the per-kind dispatch.
"""
from __future__ import annotations

import re

from .derive import (
    DEFAULT_BREED_SIZES,
    BreedSizeTable,
    age_in_months,
    age_in_years,
    difficulty_rank,
    energy_distance,
    energy_rank,
    estimate_size,
    format_years,
    resolve_size,
    resolve_training_level,
    training_level_rank,
)
from .models import (
    ENERGY_LEVELS,
    DOG_SIZES,
    Candidate,
    CandidateKind,
    DogProfile,
    Event,
    OtherDog,
    Requirements,
    ScoreResult,
)
from .scoring import (
    DISQUALIFY,
    MAX_SCORE,
    AgePolicy,
    Evaluator,
    Rule,
    ScoringConvention,
    bonus,
    caution,
    note,
    penalty,
    settle,
)

OFF_LEASH = "OffLeash"
PUPPY_CLASS_MAX_MONTHS = 8


def _joined(values: frozenset[str], order: tuple[str, ...]) -> str:
    return "/".join(v for v in order if v in values)


def _breed_matches(breed: str, names: tuple[str, ...]) -> bool:
    lowered = breed.strip().lower()
    if not lowered:
        return False
    return any(name.strip() and name.strip().lower() in lowered for name in names)


def _mentions(tags: tuple[str, ...], word: str) -> bool:
    pattern = re.compile(rf"\b{re.escape(word.lower())}\b")
    return any(pattern.search(tag.lower()) for tag in tags)


def _overlaps(like: str, tags: tuple[str, ...]) -> bool:
    a = like.strip().lower()
    if not a:
        return False
    for tag in tags:
        b = tag.strip().lower()
        if b and (a in b or b in a):
            return True
    return False


def _age_problem(dog: DogProfile, req: Requirements) -> str | None:
    months = age_in_months(dog)
    if req.min_age_months is not None and months < req.min_age_months:
        return "young"
    if req.max_age_months is not None and months > req.max_age_months:
        return "old"
    return None


def _describe_age_range(req: Requirements) -> str:
    if req.min_age_months is not None and req.max_age_months is not None:
        return f"{format_years(req.min_age_months)}-{format_years(req.max_age_months)} year"
    if req.min_age_months is not None:
        return f"{format_years(req.min_age_months)}+ year"
    return f"up to {format_years(req.max_age_months or 0)} year"


def age_requirement(policy: AgePolicy, fit_bonus: int = 0) -> Rule:
    """Build the age-range rule for a given policy.

    STRICT drops the candidate outright when the dog is outside the range;
    ADVISORY keeps it with a penalty and a caution.
    """

    def check_age(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
        req = candidate.requirements
        if not req.has_age_range:
            return None
        problem = _age_problem(dog, req)
        if problem is None:
            return bonus(fit_bonus, f"{dog.name} is in the target age range") if fit_bonus else None
        if policy is AgePolicy.STRICT:
            return DISQUALIFY
        if problem == "young":
            return penalty(20, f"{dog.name} is too young for this class")
        return penalty(10, f"{dog.name} is older than the target age range")

    check_age.__name__ = f"age_requirement_{policy.value}"
    return check_age


def open_to_all(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    if candidate.requirements.is_open:
        return settle(MAX_SCORE, "No special requirements, every dog is welcome")
    return None


# General events



def _energy_allowed(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    levels = candidate.requirements.energy_levels
    if not levels:
        return None
    if dog.energy in levels:
        return note(f"Great energy level match ({dog.energy})")
    return penalty(30, f"This event works best with {_joined(levels, ENERGY_LEVELS)} energy dogs")


def _size_allowed(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    req = candidate.requirements
    if not req.restricts_size:
        return None
    size = resolve_size(dog, sizes)
    if size in req.dog_sizes:
        return note("Good size match for this activity")
    return penalty(20, f"This event is best for {_joined(req.dog_sizes, DOG_SIZES)} sized dogs")


def _old_enough(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    minimum = candidate.requirements.min_age_months
    if not minimum:
        return None
    if age_in_months(dog) >= minimum:
        return note(f"{dog.name} meets the minimum age requirement")
    return penalty(40, f"Dog is too young (minimum age: {minimum:g} months)")


def _difficulty_fit(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    level = candidate.requirements.difficulty
    if level is None:
        return None
    years = age_in_years(dog)
    if level == "Easy":
        return note("This is an easy event suitable for all dogs")
    if level == "Moderate":
        if years < 1:
            return penalty(15, "Moderate events may be difficult for puppies under 1 year")
        return note("This event has moderate difficulty")
    if years < 2:
        return penalty(25, "Challenging events are difficult for dogs under 2 years")
    if dog.energy == "High":
        return note("Challenging event perfect for high energy dogs")
    return caution(0, "This is a high-intensity event")


def _off_leash_required(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    if OFF_LEASH not in candidate.requirements.required_abilities:
        return None
    if dog.is_good_off_leash:
        return note(f"{dog.name} has good off-leash control")
    return penalty(35, "This event requires off-leash reliability")


def _breed_not_denied(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    if not _breed_matches(dog.breed, candidate.requirements.breed_deny_list):
        return None
    return penalty(30, f"This activity may be challenging for {dog.breed}s")


def _breed_recommended(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    if not _breed_matches(dog.breed, candidate.requirements.breed_allow_list):
        return None
    return bonus(15, f"{dog.breed}s typically excel at this activity")


# Training


def _training_level_match(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    wanted = candidate.requirements.training_level
    if wanted is None:
        return None
    level = resolve_training_level(dog)
    gap = training_level_rank(wanted) - training_level_rank(level)
    if gap == 0:
        return bonus(50, f"{level} training level matches this class")
    if gap == 1:
        return caution(25, f"{dog.name} is one step below {wanted}; their foundation may be too basic")
    return None


def _behavior_tags(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    notes = dog.behavior_notes.lower()
    if not notes:
        return None
    matched = [tag for tag in candidate.requirements.tags if tag.strip() and tag.strip().lower() in notes]
    if not matched:
        return None
    return bonus(15, f"Works on {dog.name}'s behavior notes: {', '.join(matched)}")


def _off_leash_class(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    if OFF_LEASH in candidate.requirements.required_abilities and dog.is_good_off_leash:
        return bonus(10, f"{dog.name}'s off-leash skills are a great match")
    return None


def _puppy_class(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    if candidate.requirements.training_level == "Beginner" and age_in_months(dog) <= PUPPY_CLASS_MAX_MONTHS:
        return bonus(10, "Perfect age for starting puppy training")
    return None


def _command_class(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    abilities = candidate.requirements.required_abilities
    if dog.energy == "Medium" and any("Command" in ability for ability in abilities):
        return bonus(5, f"{dog.name}'s energy level is perfect for learning commands")
    return None


def _class_intensity(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    level = candidate.requirements.training_level
    if level == "Intermediate" and dog.energy == "Low":
        return penalty(10, f"This class may be too challenging for {dog.name}'s energy level")
    if level == "Advanced" and dog.energy != "High":
        return penalty(10, "This class requires high energy dogs")
    return None


# Playdates


def _playdate_energy(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    levels = candidate.requirements.energy_levels
    if not levels:
        return None
    if dog.energy in levels:
        return bonus(30, f"Energy level match ({dog.energy})")
    if any(energy_distance(dog.energy, level) == 1 for level in levels):
        return bonus(10, f"Energy level is close ({dog.energy} vs {_joined(levels, ENERGY_LEVELS)})")
    return None


def _playdate_size(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    req = candidate.requirements
    if not req.restricts_size:
        return None
    size = resolve_size(dog, sizes)
    if size in req.dog_sizes:
        return bonus(20, f"Good size match ({size})")
    if "Medium" in req.dog_sizes:
        return bonus(10, f"{size} dogs usually do fine with medium-sized playmates")
    return None


def _playdate_age(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    req = candidate.requirements
    if not req.has_age_range or _age_problem(dog, req) is not None:
        return None
    return bonus(20, f"{dog.name} ({age_in_years(dog):g} yrs) fits the {_describe_age_range(req)} age range")


def _playdate_breed(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    if not _breed_matches(dog.breed, candidate.requirements.breed_allow_list):
        return None
    return bonus(15, f"{dog.breed}s are especially welcome")


# Dog parks


def _park_participation(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    return bonus(40, "Dog parks welcome all kinds of dogs")


def _park_energy_tag(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    if _mentions(candidate.requirements.tags, dog.energy):
        return bonus(15, f"Suited to {dog.energy.lower()} energy dogs")
    return None


def _park_size_tag(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    size = resolve_size(dog, sizes)
    if _mentions(candidate.requirements.tags, size):
        return bonus(15, f"Has space for {size.lower()} dogs")
    return None


def _park_likes(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    tags = candidate.requirements.tags
    matched = [like for like in sorted(dog.likes) if _overlaps(like, tags)]
    if not matched:
        return None
    return bonus(min(10 * len(matched), 30), f"Matches what {dog.name} likes: {', '.join(matched)}")


def _park_off_leash(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    if not dog.is_good_off_leash:
        return None
    if any("off leash" in tag.lower().replace("-", " ") for tag in candidate.requirements.tags):
        return bonus(10, f"Off-leash area suits {dog.name}")
    return None


# Competitions


def _competition_breed(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    allow = candidate.requirements.breed_allow_list
    if allow and not _breed_matches(dog.breed, allow):
        return DISQUALIFY
    return None


def _competition_eligibility(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    who = dog.breed or dog.name
    return bonus(60, f"{who} is eligible to compete")


def _competition_skills(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    tags = {tag.strip().lower() for tag in candidate.requirements.tags}
    matched = sorted(skill for skill in dog.skills if skill.strip().lower() in tags)
    if not matched:
        return None
    return bonus(20, f"Skills match this competition: {', '.join(matched)}")


def _competition_off_leash(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    if OFF_LEASH in candidate.requirements.required_abilities and dog.is_good_off_leash:
        return bonus(10, f"{dog.name} is reliable off leash")
    return None


# Dog to dog


def _playmate_size(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    other_size = estimate_size(candidate.dog.breed, sizes)
    prefs = dog.preferred_playmate_sizes
    if other_size in prefs or "Any" in prefs:
        return bonus(10, f"{dog.name} enjoys playing with {other_size.lower()} dogs")
    return None


def _playmate_energy(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    other = candidate.dog
    if dog.energy == other.energy:
        return bonus(15, f"Both dogs have {dog.energy.lower()} energy")
    if energy_distance(dog.energy, other.energy) == 1:
        return bonus(5, "Energy levels are compatible")
    return None


def _playmate_age(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    gap = abs(age_in_years(dog) - age_in_years(candidate.dog))
    if gap <= 2:
        return bonus(15, "Ages are similar")
    if gap <= 4:
        return bonus(5, "Age difference is manageable")
    return None


def _playmate_style(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    style = dog.play_style
    if style is not None and style == candidate.dog.play_style:
        return bonus(10, f"Both enjoy {style.lower()} play")
    return None


# Recommendation panel


def _panel_energy(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    levels = candidate.requirements.energy_levels
    if not levels:
        return None
    if dog.energy in levels:
        return bonus(15, f"Energy level match ({dog.energy})")
    return penalty(10, f"Energy level mismatch ({dog.energy} vs {_joined(levels, ENERGY_LEVELS)})")


def _panel_age(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    minimum = candidate.requirements.min_age_months
    if not minimum or age_in_months(dog) >= minimum:
        return None
    return penalty(20, f"{dog.name} is too young ({age_in_years(dog):g} years vs min {format_years(minimum)} years)")


def _panel_breed(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    if not _breed_matches(dog.breed, candidate.requirements.breed_allow_list):
        return None
    return bonus(10, f"Breed is recommended ({dog.breed})")


def _panel_off_leash(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    if OFF_LEASH not in candidate.requirements.required_abilities:
        return None
    if dog.is_good_off_leash:
        return bonus(10, "Good off-leash skills")
    return penalty(15, "Requires off-leash reliability")


def _panel_size(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    req = candidate.requirements
    if not req.dog_sizes:
        return None
    if not req.restricts_size or resolve_size(dog, sizes) in req.dog_sizes:
        return bonus(10, "Size compatibility")
    return penalty(10, "Size incompatibility")


def _panel_difficulty(dog: DogProfile, candidate: Candidate, sizes: BreedSizeTable):
    level = candidate.requirements.difficulty
    if level is None:
        return None
    gap = difficulty_rank(level) - energy_rank(dog.energy)
    if gap <= 0:
        return bonus(10, f"Appropriate difficulty level ({level})")
    if gap > 1:
        return penalty(15, f"Difficulty level may be too high ({level})")
    return None


GENERAL_EVALUATOR = Evaluator(
    name="general",
    convention=ScoringConvention.SUBTRACTIVE,
    rules=(
        open_to_all,
        _energy_allowed,
        _size_allowed,
        _old_enough,
        _difficulty_fit,
        _off_leash_required,
        _breed_not_denied,
        _breed_recommended,
    ),
)

TRAINING_EVALUATOR = Evaluator(
    name="training",
    convention=ScoringConvention.ADDITIVE,
    rules=(
        open_to_all,
        age_requirement(AgePolicy.ADVISORY, fit_bonus=10),
        _training_level_match,
        _behavior_tags,
        _off_leash_class,
        _puppy_class,
        _command_class,
        _class_intensity,
    ),
)

PLAYDATE_EVALUATOR = Evaluator(
    name="playdate",
    convention=ScoringConvention.ADDITIVE,
    rules=(open_to_all, _playdate_energy, _playdate_size, _playdate_age, _playdate_breed),
)

DOG_PARK_EVALUATOR = Evaluator(
    name="dog_park",
    convention=ScoringConvention.ADDITIVE,
    rules=(open_to_all, _park_participation, _park_energy_tag, _park_size_tag, _park_likes, _park_off_leash),
)

COMPETITION_EVALUATOR = Evaluator(
    name="competition",
    convention=ScoringConvention.ADDITIVE,
    rules=(
        open_to_all,
        _competition_breed,
        age_requirement(AgePolicy.STRICT),
        _competition_eligibility,
        _competition_skills,
        _competition_off_leash,
    ),
)

PLAYMATE_EVALUATOR = Evaluator(
    name="playmate",
    convention=ScoringConvention.ADDITIVE,
    base=50,
    rules=(_playmate_size, _playmate_energy, _playmate_age, _playmate_style),
)

PANEL_EVALUATOR = Evaluator(
    name="panel",
    convention=ScoringConvention.ADDITIVE,
    base=50,
    rules=(
        open_to_all,
        _panel_energy,
        _panel_age,
        _panel_breed,
        _panel_off_leash,
        _panel_size,
        _panel_difficulty,
    ),
)

EVALUATORS: dict[CandidateKind, Evaluator] = {
    CandidateKind.GENERAL: GENERAL_EVALUATOR,
    CandidateKind.TRAINING: TRAINING_EVALUATOR,
    CandidateKind.PLAYDATE: PLAYDATE_EVALUATOR,
    CandidateKind.DOG_PARK: DOG_PARK_EVALUATOR,
    CandidateKind.COMPETITION: COMPETITION_EVALUATOR,
    CandidateKind.PLAYMATE: PLAYMATE_EVALUATOR,
}


def score(
    dog: DogProfile,
    candidate: Candidate,
    *,
    breed_sizes: BreedSizeTable = DEFAULT_BREED_SIZES,
) -> ScoreResult:
    """Score one candidate with the evaluator for its kind."""
    return EVALUATORS[candidate.kind](dog, candidate, breed_sizes)


def event_compatibility(
    dog: DogProfile,
    event: Event,
    *,
    breed_sizes: BreedSizeTable = DEFAULT_BREED_SIZES,
) -> ScoreResult:
    """Score any event against the general constraints, ignoring its category."""
    return GENERAL_EVALUATOR(dog, event, breed_sizes)


def playmate_compatibility(
    dog: DogProfile,
    other: DogProfile,
    *,
    breed_sizes: BreedSizeTable = DEFAULT_BREED_SIZES,
) -> ScoreResult:
    """How well ``other`` suits ``dog`` as a playmate.

    Only ``dog``'s preferred playmate sizes are consulted, so the score is
    not symmetric.
    """
    return PLAYMATE_EVALUATOR(dog, OtherDog(other), breed_sizes)


def panel_compatibility(
    dog: DogProfile,
    candidate: Candidate,
    *,
    breed_sizes: BreedSizeTable = DEFAULT_BREED_SIZES,
) -> ScoreResult:
    """The recommendation panel's score: 50 to start, nudged up or down per constraint."""
    return PANEL_EVALUATOR(dog, candidate, breed_sizes)
