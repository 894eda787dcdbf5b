"""Build engine records from the app's JSON shapes.

Age bounds arrive in different units depending on where they came from:
event requirements are in months, while training classes and playdates
are in years.  They are converted to months here so nothing downstream
has to know.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .derive import AgeUnit, normalize_age_bound
from .models import (
    ANY_SIZE,
    DOG_SIZES,
    ENERGY_LEVELS,
    EVENT_CATEGORIES,
    PLAY_STYLES,
    TRAINING_LEVELS,
    DIFFICULTY_LEVELS,
    Candidate,
    DogParkMeetup,
    DogProfile,
    Event,
    OtherDog,
    Requirements,
    TrainingClass,
)

logger = logging.getLogger(__name__)

DEFAULT_AGE_UNITS: dict[str, AgeUnit] = {
    "event": "months",
    "meetup": "months",
    "training_class": "years",
}
# Playdate events give their age range in years.
CATEGORY_AGE_UNITS: dict[str, AgeUnit] = {"Playdate": "years"}

_ENERGY_ALIASES = {"moderate": "Medium"}
_CATEGORY_ALIASES = {
    "training": "Training",
    "playdate": "Playdate",
    "dog_park": "DogPark",
    "dogpark": "DogPark",
    "competition": "Competition",
}


def _to_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(x) for x in value if x is not None and str(x).strip()]
    raise ValueError(f"expected a string or a list, got {type(value).__name__}")


def _choice(field_name: str, value: Any, choices: tuple[str, ...], aliases: dict[str, str] | None = None) -> str | None:
    if value is None or value == "":
        return None
    lowered = str(value).strip().lower()
    if aliases and lowered in aliases:
        return aliases[lowered]
    for choice in choices:
        if choice.lower() == lowered:
            return choice
    raise ValueError(f"{field_name}: unknown value {value!r}; expected one of: {', '.join(choices)}")


def _choices(field_name: str, value: Any, choices: tuple[str, ...], aliases: dict[str, str] | None = None) -> frozenset[str]:
    return frozenset(c for c in (_choice(field_name, v, choices, aliases) for v in _as_list(value)) if c)


def _first(data: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _require_id(data: dict[str, Any]) -> str:
    value = data.get("id")
    if value is None or not str(value).strip():
        raise ValueError("id is required")
    return str(value)


def dog_from_dict(data: dict[str, Any]) -> DogProfile:
    if not isinstance(data, dict):
        raise ValueError("dog must be a JSON object")
    size = _choice("size", data.get("size"), DOG_SIZES + (ANY_SIZE,))
    playmates = data.get("preferredPlaymates") or {}
    if not isinstance(playmates, dict):
        raise ValueError("preferredPlaymates must be an object")
    age = _to_float(data.get("age"))
    return DogProfile(
        id=_require_id(data),
        name=str(data.get("name") or data["id"]),
        breed=str(data.get("breed") or ""),
        age=age if age is not None else 0.0,
        energy=_choice("energy", _first(data, "energy", "energyLevel"), ENERGY_LEVELS, _ENERGY_ALIASES) or "Medium",
        size=None if size == ANY_SIZE else size,
        training_level=_choice("trainingLevel", data.get("trainingLevel"), TRAINING_LEVELS),
        is_good_off_leash=bool(data.get("isGoodOffLeash", False)),
        skills=frozenset(_as_list(data.get("skills"))),
        play_style=_choice("playStyle", data.get("playStyle"), PLAY_STYLES),
        likes=frozenset(_as_list(data.get("likes"))),
        preferred_playmate_sizes=_choices(
            "preferredPlaymates.sizes",
            _first(data, "preferredPlaymateSizes") or playmates.get("sizes"),
            DOG_SIZES + (ANY_SIZE,),
        ),
        behavior_notes=str(data.get("behaviorNotes") or ""),
    )


def requirements_from_dict(data: dict[str, Any], unit: AgeUnit) -> Requirements:
    """Read requirements from the flat event keys or a nested ``requirements`` object."""
    nested = data.get("requirements") or {}
    if not isinstance(nested, dict):
        raise ValueError("requirements must be an object")
    merged = {**data, **nested}
    unit = _choice("ageUnit", merged.get("ageUnit"), ("months", "years")) or unit
    return Requirements(
        min_age_months=normalize_age_bound(_to_float(merged.get("minAge")), unit),
        max_age_months=normalize_age_bound(_to_float(merged.get("maxAge")), unit),
        energy_levels=_choices(
            "suitableEnergyLevels",
            _first(merged, "suitableEnergyLevels", "energyLevel"),
            ENERGY_LEVELS,
            _ENERGY_ALIASES,
        ),
        dog_sizes=_choices("suitableDogSizes", _first(merged, "suitableDogSizes", "dogSize"), DOG_SIZES + (ANY_SIZE,)),
        training_level=_choice("trainingLevel", _first(merged, "trainingLevel", "skillLevel"), TRAINING_LEVELS),
        required_abilities=frozenset(_as_list(_first(merged, "requiredAbilities", "abilities"))),
        breed_allow_list=tuple(_as_list(_first(merged, "breedAllowList", "breedRecommendations", "breeds"))),
        breed_deny_list=tuple(_as_list(_first(merged, "breedDenyList", "notRecommendedFor"))),
        difficulty=_choice("difficultyLevel", merged.get("difficultyLevel"), DIFFICULTY_LEVELS),
        tags=tuple(_as_list(merged.get("tags"))),
    )


def _category(value: Any) -> str:
    if value is None:
        return "Other"
    text = str(value).strip()
    if text in EVENT_CATEGORIES:
        return text
    # Walk, Run, Social and the rest score as general events.
    return _CATEGORY_ALIASES.get(text.lower(), "Other")


def candidate_from_dict(data: dict[str, Any]) -> Candidate:
    if not isinstance(data, dict):
        raise ValueError("candidate must be a JSON object")
    kind = str(data.get("type") or "event").strip().lower()
    if kind == "dog":
        return OtherDog(dog_from_dict(data.get("dog") or data))
    if kind not in DEFAULT_AGE_UNITS:
        raise ValueError(f"type: unknown candidate type {kind!r}")

    candidate_id = _require_id(data)
    title = str(data.get("title") or data.get("name") or candidate_id)
    unit = DEFAULT_AGE_UNITS[kind]
    if kind == "training_class":
        return TrainingClass(id=candidate_id, title=title, requirements=requirements_from_dict(data, unit))
    if kind == "meetup":
        return DogParkMeetup(id=candidate_id, title=title, requirements=requirements_from_dict(data, unit))
    category = _category(data.get("category"))
    unit = CATEGORY_AGE_UNITS.get(category, unit)
    return Event(id=candidate_id, title=title, category=category, requirements=requirements_from_dict(data, unit))


def _read_json(path: str | Path) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def load_dog(path: str | Path) -> DogProfile:
    return dog_from_dict(_read_json(path))


def load_candidates(path: str | Path) -> list[Candidate]:
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("candidates", [data])
    if not isinstance(data, list):
        raise ValueError("candidates file must hold a list or an object with a 'candidates' list")
    candidates = [candidate_from_dict(item) for item in data]
    logger.info("loaded %d candidates from %s", len(candidates), path)
    return candidates
