from __future__ import annotations

"""
Plan Assembler
--------------
Builds the weekly session list: picks a split from sessions-per-week and
goal, selects and safety-filters exercises per day, then prescribes concrete
sets/reps/rest for the goal and experience level.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from gymovoo.engine import selector
from gymovoo.engine.safety import SafetyFilter
from gymovoo.errors import InsufficientCatalogError, InvalidProfileError
from gymovoo.models.schemas import (
    Category,
    EquipmentProfile,
    ExerciseInstance,
    ExperienceLevel,
    Goal,
    SafetyAction,
    ValidationWarning,
    WorkoutSession,
)
from gymovoo.tools.exercise_db import ExerciseCatalog


SUPPORTED_SESSIONS_PER_WEEK = (2, 3, 4, 5)
MIN_REST_SECONDS = 15
MAX_REST_SECONDS = 240

STRENGTH_LEANING_GOALS = frozenset({Goal.build_muscle, Goal.increase_strength})


@dataclass(frozen=True)
class DayTemplate:
    label: str
    targets: Tuple[str, ...]


FULL_BODY = DayTemplate("Full Body", ("quads", "chest", "back", "hamstrings", "shoulders", "core"))
FULL_BODY_CONDITIONING = DayTemplate(
    "Full Body & Conditioning", ("full_body", "quads", "chest", "back", "core", "glutes")
)
PUSH = DayTemplate("Push", ("chest", "shoulders", "triceps"))
PULL = DayTemplate("Pull", ("back", "biceps", "core"))
LEGS = DayTemplate("Legs", ("quads", "hamstrings", "glutes", "calves", "core"))
UPPER = DayTemplate("Upper Body", ("chest", "back", "shoulders", "biceps", "triceps"))
LOWER = DayTemplate("Lower Body", ("quads", "hamstrings", "glutes", "calves", "core"))
CHEST_TRICEPS = DayTemplate("Chest & Triceps", ("chest", "triceps"))
BACK_BICEPS = DayTemplate("Back & Biceps", ("back", "biceps"))
SHOULDERS_CORE = DayTemplate("Shoulders & Core", ("shoulders", "core"))
CHEST = DayTemplate("Chest", ("chest", "triceps"))
BACK = DayTemplate("Back", ("back", "biceps"))
SHOULDERS = DayTemplate("Shoulders", ("shoulders", "back"))
ARMS_CORE = DayTemplate("Arms & Core", ("biceps", "triceps", "core"))


@dataclass(frozen=True)
class Prescription:
    rep_factor: float = 1.0
    rest_factor: float = 1.0
    reps_window: Optional[Tuple[int, int]] = None
    rest_window: Optional[Tuple[int, int]] = None


GOAL_PRESCRIPTIONS: Dict[Goal, Prescription] = {
    Goal.lose_weight: Prescription(rep_factor=1.5, rest_factor=0.5, reps_window=(12, 20), rest_window=(30, 45)),
    Goal.build_muscle: Prescription(rep_factor=0.75, rest_factor=1.5, reps_window=(6, 10), rest_window=(90, 180)),
    Goal.improve_endurance: Prescription(reps_window=(15, 25), rest_window=(30, 60)),
    Goal.increase_strength: Prescription(reps_window=(3, 6), rest_window=(120, 240)),
    Goal.general_fitness: Prescription(),
}

# Weekly load increase by experience level, in percent
WEEKLY_PROGRESSION_PCT: Dict[ExperienceLevel, float] = {
    ExperienceLevel.beginner: 5.0,
    ExperienceLevel.intermediate: 3.0,
    ExperienceLevel.advanced: 1.0,
}

SECONDS_PER_REP = 3
SECONDS_PER_METER = 0.25
TRANSITION_SECONDS = 60


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (Python's round() is banker's)."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def split_for(sessions_per_week: int, goal: Goal) -> List[DayTemplate]:
    """Weekly split pattern for a sessions-per-week count and goal."""
    if sessions_per_week not in SUPPORTED_SESSIONS_PER_WEEK:
        raise InvalidProfileError("sessions_per_week", sessions_per_week)
    strength = Goal(goal) in STRENGTH_LEANING_GOALS
    if sessions_per_week == 2:
        return [FULL_BODY, FULL_BODY]
    if sessions_per_week == 3:
        if strength:
            return [PUSH, PULL, LEGS]
        return [FULL_BODY_CONDITIONING, FULL_BODY, FULL_BODY_CONDITIONING]
    if sessions_per_week == 4:
        if strength:
            return [CHEST_TRICEPS, BACK_BICEPS, LEGS, SHOULDERS_CORE]
        return [UPPER, LOWER, UPPER, LOWER]
    if strength:
        return [CHEST, BACK, LEGS, SHOULDERS, ARMS_CORE]
    return [UPPER, LOWER, FULL_BODY_CONDITIONING, UPPER, LOWER]


def exercises_per_session(duration_minutes: int) -> int:
    return clamp(duration_minutes // 10, 3, 8)


def prescribe(instance: ExerciseInstance, goal: Goal, experience_level: ExperienceLevel) -> ExerciseInstance:
    """Resolve concrete sets/reps/rest for one exercise."""
    rx = GOAL_PRESCRIPTIONS[Goal(goal)]
    level = ExperienceLevel(experience_level)

    low, high = instance.reps_min, instance.reps_max
    # Timed and distance work keeps its catalog targets
    if instance.reps_unit == "reps":
        low = round_half_up(low * rx.rep_factor)
        high = round_half_up(high * rx.rep_factor)
        if rx.reps_window:
            w_low, w_high = rx.reps_window
            low = clamp(low, w_low, w_high)
            high = clamp(high, low, w_high)
        high = max(low, high)

    rest = round_half_up(instance.rest_seconds * rx.rest_factor)
    if rx.rest_window:
        rest = clamp(rest, *rx.rest_window)
    rest = clamp(rest, MIN_REST_SECONDS, MAX_REST_SECONDS)

    sets = instance.sets
    if instance.category not in (Category.flexibility, Category.recovery):
        if level == ExperienceLevel.beginner:
            sets = max(2, sets - 1)
        elif level == ExperienceLevel.advanced:
            sets = min(5, sets + 1)

    return instance.model_copy(update={"sets": sets, "reps_min": low, "reps_max": high, "rest_seconds": rest})


def estimate_exercise_seconds(instance: ExerciseInstance) -> float:
    avg = (instance.reps_min + instance.reps_max) / 2
    if instance.reps_unit == "seconds":
        work = instance.sets * avg
    elif instance.reps_unit == "meters":
        work = instance.sets * avg * SECONDS_PER_METER
    else:
        work = instance.sets * avg * SECONDS_PER_REP
    rest = max(instance.sets - 1, 0) * instance.rest_seconds
    return work + rest + TRANSITION_SECONDS


def estimate_session_minutes(exercises: Sequence[ExerciseInstance]) -> int:
    total = sum(estimate_exercise_seconds(ex) for ex in exercises)
    return max(10, round_half_up(total / 60))


_DASH = "–"


def session_name(day_index: int, template: DayTemplate) -> str:
    return f"Day {day_index} {_DASH} {template.label}"


def session_id(day_index: int) -> str:
    return f"day-{day_index}"


def slugify(label: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", label.lower()).strip("_")


class PlanAssembler:
    """Assembles the weekly sessions for one user.

    Holds the audit trail (`safety_log`) and non-fatal diagnostics
    (`warnings`) of the last `assemble` call.
    """

    def __init__(self, catalog: ExerciseCatalog, session_duration_minutes: int = 45) -> None:
        self.catalog = catalog
        self.session_duration_minutes = session_duration_minutes
        self.safety_log: List[SafetyAction] = []
        self.warnings: List[ValidationWarning] = []

    def assemble(
        self,
        sessions_per_week: int,
        goal: Goal,
        experience_level: ExperienceLevel,
        equipment_profile: EquipmentProfile,
        injuries: Sequence[str] = (),
    ) -> List[WorkoutSession]:
        """Build `sessions_per_week` sessions, or raise without a partial result.

        Raises:
            InvalidProfileError: unsupported goal, level or sessions-per-week.
            InsufficientCatalogError: a day has no eligible exercise.
        """
        try:
            goal = Goal(goal)
        except ValueError:
            raise InvalidProfileError("goal", goal) from None
        try:
            level = ExperienceLevel(experience_level)
        except ValueError:
            raise InvalidProfileError("experience_level", experience_level) from None

        split = split_for(sessions_per_week, goal)
        count = exercises_per_session(self.session_duration_minutes)
        safety = SafetyFilter(self.catalog, equipment_profile, level)

        logger.info(
            f"Assembling {sessions_per_week}-day plan: goal={goal.value} level={level.value} "
            f"equipment={list(equipment_profile.equipment_ids)} split={[d.label for d in split]}"
        )

        sessions: List[WorkoutSession] = []
        for day_index, template in enumerate(split, start=1):
            try:
                picked = selector.select(
                    self.catalog,
                    equipment_profile,
                    level,
                    count,
                    template.targets,
                    rotation=day_index - 1,
                )
            except InsufficientCatalogError as e:
                raise InsufficientCatalogError(f"Day {day_index} ({template.label}): {e}", day_index=day_index) from e

            safe = safety.apply(picked, injuries, day_index=day_index)
            if not safe:
                raise InsufficientCatalogError(
                    f"Day {day_index} ({template.label}): every eligible exercise is contraindicated",
                    day_index=day_index,
                )
            final = [prescribe(ex, goal, level) for ex in safe]
            sessions.append(
                WorkoutSession(
                    id=session_id(day_index),
                    day_index=day_index,
                    name=session_name(day_index, template),
                    focus=slugify(template.label),
                    exercises=final,
                    estimated_duration_minutes=estimate_session_minutes(final),
                )
            )

        self.safety_log = list(safety.actions)
        self.warnings = list(safety.warnings)
        return sessions
