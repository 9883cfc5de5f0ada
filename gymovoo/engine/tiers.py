from __future__ import annotations

"""
Plan Tier Generator
-------------------
Produces the Basic plan (sessions as assembled) and the Smart plan (each
session cloned plus one recovery/mobility exercise, feature flags on,
equipment-usage notes). Smart sessions are always a superset of the Basic
ones; a day with nothing eligible to add keeps its Basic content.
"""

import uuid
from typing import Iterable, List, Optional, Sequence

from loguru import logger

from gymovoo.config import PLAN_WEEKS, SMART_EXTRA_MINUTES
from gymovoo.engine.assembler import WEEKLY_PROGRESSION_PCT, prescribe
from gymovoo.engine.safety import safety_note_for
from gymovoo.engine.selector import rank_key
from gymovoo.models.schemas import (
    Category,
    EquipmentProfile,
    ExerciseInstance,
    ExperienceLevel,
    Goal,
    PlanFeatures,
    PlanTier,
    SafetyAction,
    TieredPlans,
    WorkoutPlan,
    WorkoutSession,
)
from gymovoo.tools.exercise_db import ExerciseCatalog


RECOVERY_CATEGORIES = (Category.recovery, Category.flexibility)

GOAL_TITLES = {
    Goal.lose_weight: "Weight Loss",
    Goal.build_muscle: "Muscle Building",
    Goal.general_fitness: "General Fitness",
    Goal.improve_endurance: "Endurance",
    Goal.increase_strength: "Strength",
}


def _new_plan_id(tier: PlanTier) -> str:
    return f"{tier.value}-plan-{uuid.uuid4().hex[:12]}"


def _recovery_candidates(
    catalog: ExerciseCatalog,
    equipment_profile: EquipmentProfile,
    injuries: Iterable[str],
    max_difficulty: Optional[ExperienceLevel] = None,
) -> List:
    pool = catalog.filter(
        equipment_available=equipment_profile.equipment_ids,
        max_difficulty=max_difficulty,
        category_any_of=RECOVERY_CATEGORIES,
        exclude_contraindications=injuries,
    )
    # Recovery work has no difficulty progression; rank as for a beginner
    return sorted(pool, key=lambda e: (e.category != Category.recovery,) + rank_key(e, ExperienceLevel.beginner))


def _fallback_candidates(
    catalog: ExerciseCatalog,
    equipment_profile: EquipmentProfile,
    injuries: Iterable[str],
    max_difficulty: Optional[ExperienceLevel] = None,
) -> List:
    """Any other eligible exercise, used when no recovery/flexibility entry fits."""
    pool = catalog.filter(
        equipment_available=equipment_profile.equipment_ids,
        max_difficulty=max_difficulty,
        exclude_contraindications=injuries,
    )
    level = max_difficulty or ExperienceLevel.beginner
    return sorted((e for e in pool if e.category not in RECOVERY_CATEGORIES), key=lambda e: rank_key(e, level))



def equipment_notes(sessions: Sequence[WorkoutSession], equipment_profile: EquipmentProfile) -> List[str]:
    used = {eq for s in sessions for ex in s.exercises for eq in ex.required_equipment}
    owned = list(equipment_profile.equipment_ids)
    if not owned:
        return ["Bodyweight-only plan: no equipment required."]
    notes: List[str] = []
    in_use = [eq for eq in owned if eq in used]
    idle = [eq for eq in owned if eq not in used]
    if in_use:
        notes.append(f"Uses your equipment: {', '.join(in_use)}.")
    if idle:
        notes.append(f"Not used this cycle: {', '.join(idle)}. Swap in variations with these for variety.")
    return notes


class PlanTierGenerator:
    def __init__(
        self,
        catalog: ExerciseCatalog,
        *,
        duration_weeks: int = PLAN_WEEKS,
        smart_extra_minutes: int = SMART_EXTRA_MINUTES,
    ) -> None:
        self.catalog = catalog
        self.duration_weeks = duration_weeks
        self.smart_extra_minutes = smart_extra_minutes

    def _smart_session(
        self,
        session: WorkoutSession,
        candidates: List,
        fallback: List,
        goal: Optional[Goal],
        level: Optional[ExperienceLevel],
        injuries: List[str],
    ) -> Optional[WorkoutSession]:
        """Clone `session` with one extra exercise, or None when nothing is left to add."""
        taken = {ex.exercise_id for ex in session.exercises}
        available = [c for c in candidates if c.id not in taken] or [c for c in fallback if c.id not in taken]
        if not available:
            return None
        # Rotate through the options so each day gets a different one
        extra_ex = available[(session.day_index - 1) % len(available)]
        extra = ExerciseInstance.from_exercise(extra_ex)
        if goal is not None and level is not None:
            extra = prescribe(extra, goal, level)
        note = safety_note_for(extra, injuries)
        if note:
            extra = extra.model_copy(update={"safety_note": note})
        return session.model_copy(
            update={
                "exercises": list(session.exercises) + [extra],
                "estimated_duration_minutes": session.estimated_duration_minutes + self.smart_extra_minutes,
            },
            deep=True,
        )

    def generate_both(
        self,
        base_sessions: Sequence[WorkoutSession],
        equipment_profile: EquipmentProfile,
        *,
        goal: Optional[Goal] = None,
        experience_level: Optional[ExperienceLevel] = None,
        injuries: Iterable[str] = (),
        safety_log: Sequence[SafetyAction] = (),
    ) -> TieredPlans:
        """Build the basic and smart plans from the same assembled sessions."""
        goal = Goal(goal) if goal is not None else None
        level = ExperienceLevel(experience_level) if experience_level is not None else None
        title = GOAL_TITLES.get(goal, "Personal") if goal else "Personal"
        progression = WEEKLY_PROGRESSION_PCT[level] if level is not None else 0.0

        basic = WorkoutPlan(
            id=_new_plan_id(PlanTier.basic),
            tier=PlanTier.basic,
            name=f"{title} Plan",
            sessions=[s.model_copy(deep=True) for s in base_sessions],
            duration_weeks=self.duration_weeks,
            features=PlanFeatures(),
            requires_subscription=False,
            weekly_progression_pct=progression,
            safety_log=list(safety_log),
        )

        injuries = sorted({str(i).strip().lower() for i in injuries if str(i).strip()})
        candidates = _recovery_candidates(self.catalog, equipment_profile, injuries, max_difficulty=level)
        fallback = _fallback_candidates(self.catalog, equipment_profile, injuries, max_difficulty=level)
        if not candidates:
            logger.warning("No recovery or flexibility exercise fits this profile; smart extras use other exercises")

        smart_sessions: List[WorkoutSession] = []
        skipped: List[int] = []
        for s in base_sessions:
            smart_session = self._smart_session(s, candidates, fallback, goal, level, injuries)
            if smart_session is None:
                logger.warning(f"No extra exercise available for smart day {s.day_index}; keeping basic session")
                skipped.append(s.day_index)
                smart_session = s.model_copy(deep=True)
            smart_sessions.append(smart_session)

        notes = equipment_notes(smart_sessions, equipment_profile)
        if skipped:
            days = ", ".join(str(d) for d in skipped)
            notes.append(f"No recovery exercise fits your equipment and injuries on day(s) {days}.")

        smart = WorkoutPlan(
            id=_new_plan_id(PlanTier.smart),
            tier=PlanTier.smart,
            name=f"Smart {title} Plan",
            sessions=smart_sessions,
            duration_weeks=self.duration_weeks,
            features=PlanFeatures(ai_recommendations=True, equipment_optimization=True),
            requires_subscription=True,
            weekly_progression_pct=progression,
            notes=notes,
            safety_log=list(safety_log),
        )
        logger.info(f"Generated tiers: basic={basic.id} smart={smart.id} ({len(base_sessions)} sessions)")
        return TieredPlans(basic=basic, smart=smart)
