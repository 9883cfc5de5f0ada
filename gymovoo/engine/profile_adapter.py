from __future__ import annotations

"""
Profile Adapter
---------------
Single normalization step between stored questionnaire answers and the
engine. Stored answers come in several legacy shapes (`questionnaire`,
`questionnaireData`, `smartQuestionnaireData.answers`, flat dicts) and with
several spellings per field; this module folds them into one `UserProfile`
and reports every default it had to apply as a `ValidationWarning`.

Values that are present but not recognized are not guessed at: they raise
`InvalidProfileError`.
"""

import re
from typing import Any, Dict, List, Mapping, Optional

from loguru import logger
from pydantic import ValidationError

from gymovoo.engine.equipment import resolve_with_warnings
from gymovoo.errors import InvalidProfileError
from gymovoo.models.schemas import (
    ExperienceLevel,
    Goal,
    Location,
    ProfileResult,
    UserProfile,
    ValidationWarning,
)


DEFAULT_GOAL = Goal.general_fitness
DEFAULT_EXPERIENCE = ExperienceLevel.beginner
DEFAULT_LOCATION = Location.home_bodyweight
DEFAULT_SESSIONS_PER_WEEK = 3
DEFAULT_SESSION_MINUTES = 45

GOAL_ALIASES: Dict[str, Goal] = {
    "weight_loss": Goal.lose_weight,
    "lose_weight": Goal.lose_weight,
    "fat_loss": Goal.lose_weight,
    "muscle_gain": Goal.build_muscle,
    "build_muscle": Goal.build_muscle,
    "hypertrophy": Goal.build_muscle,
    "get_stronger": Goal.increase_strength,
    "feel_stronger": Goal.increase_strength,
    "strength": Goal.increase_strength,
    "increase_strength": Goal.increase_strength,
    "endurance": Goal.improve_endurance,
    "improve_endurance": Goal.improve_endurance,
    "general_fitness": Goal.general_fitness,
    "improve_health": Goal.general_fitness,
}

EXPERIENCE_ALIASES: Dict[str, ExperienceLevel] = {
    "beginner": ExperienceLevel.beginner,
    "complete_beginner": ExperienceLevel.beginner,
    "some_experience": ExperienceLevel.beginner,
    "intermediate": ExperienceLevel.intermediate,
    "advanced": ExperienceLevel.advanced,
    "athlete": ExperienceLevel.advanced,
}

LOCATION_ALIASES: Dict[str, Location] = {
    "home_bodyweight": Location.home_bodyweight,
    "home": Location.home_bodyweight,
    "bodyweight": Location.home_bodyweight,
    "home_equipment": Location.home_equipment,
    "gym": Location.gym,
    "full_gym": Location.gym,
    "gym_only": Location.gym,
    "both": Location.gym,
    "home_and_gym": Location.gym,
    "home_gym": Location.home_equipment,
}

# Field name -> accepted keys, first match wins
FIELD_KEYS: Dict[str, tuple] = {
    "goal": ("goal", "fitness_goal", "primary_goal", "primaryGoal"),
    "experience_level": ("experience_level", "experience", "fitness_experience", "fitnessExperience"),
    "location": ("location", "workout_location", "training_location"),
    "sessions_per_week": ("sessions_per_week", "availability", "frequency", "workout_frequency"),
    "session_duration_minutes": ("session_duration_minutes", "session_duration", "duration", "workout_duration"),
    "injuries": ("injuries", "previous_injuries", "previousInjuries", "health_conditions"),
}

EQUIPMENT_KEYS = (
    "equipment",
    "available_equipment",
    "availableEquipment",
    "bodyweight_equipment",
    "home_equipment",
    "gym_equipment",
)

ANSWER_CONTAINERS = ("smartQuestionnaireData", "smartquestionnairedata", "questionnaireData", "questionnaire")

_FIRST_INT = re.compile(r"\d+")

_DAY_NAMES = {
    "mon": "mon", "monday": "mon",
    "tue": "tue", "tues": "tue", "tuesday": "tue",
    "wed": "wed", "wednesday": "wed",
    "thu": "thu", "thur": "thu", "thurs": "thu", "thursday": "thu",
    "fri": "fri", "friday": "fri",
    "sat": "sat", "saturday": "sat",
    "sun": "sun", "sunday": "sun",
}

MIN_SESSIONS, MAX_SESSIONS = 2, 5
MIN_DURATION, MAX_DURATION = 15, 120


def extract_answers(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge every legacy container into one flat answers dict.

    Later (newer) containers override older ones: flat keys < `questionnaire`
    < `questionnaireData` < `smartQuestionnaireData`.
    """
    merged: Dict[str, Any] = {k: v for k, v in raw.items() if k not in ANSWER_CONTAINERS}
    for key in reversed(ANSWER_CONTAINERS):
        block = raw.get(key)
        if not isinstance(block, Mapping):
            continue
        inner = block.get("answers") if isinstance(block.get("answers"), Mapping) else block
        merged.update(inner)
    return merged


def _first(answers: Mapping[str, Any], keys: tuple) -> Any:
    for k in keys:
        if answers.get(k) not in (None, "", []):
            return answers[k]
    return None


def _enum_value(field: str, value: Any, aliases: Mapping[str, Any]) -> Any:
    key = str(getattr(value, "value", value)).strip().lower().replace("-", "_").replace(" ", "_")
    if key not in aliases:
        raise InvalidProfileError(field, value)
    return aliases[key]


def _parse_int(value: Any) -> Optional[int]:
    """Parse ints out of answers like 4, "4", "3_times", "45-60"; None when there is no number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    numbers = [int(n) for n in _FIRST_INT.findall(str(value))]
    if not numbers:
        return None
    # Ranges such as "45-60" resolve to their lower bound
    return numbers[0]


def _count_days(value: Any) -> Optional[int]:
    """Count distinct weekdays in answers like "Mon, Wed, Fri" or ["monday", "thursday"]."""
    tokens = value if isinstance(value, (list, tuple, set)) else re.split(r"[\s,;/]+", str(value))
    days = {_DAY_NAMES[t] for t in (str(t).strip().lower().rstrip(".") for t in tokens) if t in _DAY_NAMES}
    return len(days) or None


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    if isinstance(value, str):
        return [v for v in (s.strip() for s in value.split(",")) if v]
    return [value]


def normalize_answers(raw: Mapping[str, Any]) -> ProfileResult:
    """Fold raw questionnaire answers into a `ProfileResult`."""
    answers = extract_answers(raw)
    warnings: List[ValidationWarning] = []

    def defaulted(field: str, default: Any) -> Any:
        warnings.append(
            ValidationWarning(field=field, message=f"Missing '{field}', using default", value=getattr(default, "value", default))
        )
        return default

    goal_raw = _first(answers, FIELD_KEYS["goal"])
    goal = _enum_value("goal", goal_raw, GOAL_ALIASES) if goal_raw is not None else defaulted("goal", DEFAULT_GOAL)

    exp_raw = _first(answers, FIELD_KEYS["experience_level"])
    experience = (
        _enum_value("experience_level", exp_raw, EXPERIENCE_ALIASES)
        if exp_raw is not None
        else defaulted("experience_level", DEFAULT_EXPERIENCE)
    )

    loc_raw = _first(answers, FIELD_KEYS["location"])
    location = (
        _enum_value("location", loc_raw, LOCATION_ALIASES)
        if loc_raw is not None
        else defaulted("location", DEFAULT_LOCATION)
    )

    def clamped(field: str, raw_value: Any, parsed: Optional[int], low: int, high: int, default: int) -> int:
        if parsed is None:
            warnings.append(
                ValidationWarning(field=field, message=f"Could not read '{field}', using default", value=raw_value)
            )
            return default
        if parsed < low or parsed > high:
            bound = low if parsed < low else high
            warnings.append(
                ValidationWarning(field=field, message=f"'{field}' outside {low}-{high}, clamped to {bound}", value=parsed)
            )
            logger.warning(f"Profile value clamped: {field}={parsed} -> {bound}")
            return bound
        return parsed

    sessions_raw = _first(answers, FIELD_KEYS["sessions_per_week"])
    if sessions_raw is None:
        sessions = defaulted("sessions_per_week", DEFAULT_SESSIONS_PER_WEEK)
    else:
        parsed = _parse_int(sessions_raw)
        if parsed is None:
            parsed = _count_days(sessions_raw)
        sessions = clamped(
            "sessions_per_week", sessions_raw, parsed, MIN_SESSIONS, MAX_SESSIONS, DEFAULT_SESSIONS_PER_WEEK
        )

    duration_raw = _first(answers, FIELD_KEYS["session_duration_minutes"])
    if duration_raw is None:
        duration = defaulted("session_duration_minutes", DEFAULT_SESSION_MINUTES)
    else:
        duration = clamped(
            "session_duration_minutes",
            duration_raw,
            _parse_int(duration_raw),
            MIN_DURATION,
            MAX_DURATION,
            DEFAULT_SESSION_MINUTES,
        )

    injuries_raw = _first(answers, FIELD_KEYS["injuries"])
    injuries = [i for i in _as_list(injuries_raw) if str(i).strip().lower() not in ("none", "no_injuries")]

    equipment: List[Any] = []
    for key in EQUIPMENT_KEYS:
        equipment.extend(_as_list(answers.get(key)))
    equipment_profile, eq_warnings = resolve_with_warnings(location, equipment)
    warnings.extend(eq_warnings)

    try:
        profile = UserProfile(
            goal=goal,
            experience_level=experience,
            sessions_per_week=sessions,
            session_duration_minutes=duration,
            injuries=injuries,
            equipment_profile=equipment_profile,
        )
    except ValidationError as e:
        err = e.errors()[0]
        field = str(err["loc"][0]) if err.get("loc") else "profile"
        raise InvalidProfileError(field, err.get("input"), f"Invalid profile: {err.get('msg')}") from e

    for w in warnings:
        if w.message.startswith("Missing"):
            logger.warning(f"Profile default applied: {w.field}={w.value}")
    return ProfileResult(profile=profile, warnings=warnings)


def coerce_profile(profile: UserProfile | Mapping[str, Any]) -> UserProfile:
    """Accept a ready `UserProfile` or its dict form; raise `InvalidProfileError` on bad input."""
    if isinstance(profile, UserProfile):
        return profile
    try:
        return UserProfile.model_validate(profile)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(p) for p in err.get("loc", ())) or "profile"
        raise InvalidProfileError(field, err.get("input"), f"Invalid profile: {err.get('msg')}") from e


def first_warning(result: ProfileResult, field: str) -> Optional[ValidationWarning]:
    return next((w for w in result.warnings if w.field == field), None)
