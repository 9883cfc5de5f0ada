"""
Fast Deterministic Verification
--------------------------------
Pure Python checks over a finished plan. They re-derive the engine's
guarantees from the plan itself (equipment containment, injury exclusion,
session count, time fit, weekly muscle balance) so stored plans can be
audited without regenerating them.
"""

from typing import Any, Dict, List, Optional, Set

from gymovoo.engine.assembler import estimate_session_minutes
from gymovoo.models.schemas import UserProfile, WorkoutPlan
from gymovoo.tools.exercise_db import ExerciseCatalog, load_catalog


TIME_BUFFER = 1.15  # Allow 15% over the requested session length

# Muscle groups a balanced week should touch at least once
BALANCE_GROUPS = {
    "push": {"chest", "shoulders", "triceps"},
    "pull": {"back", "biceps"},
    "legs": {"quads", "hamstrings", "glutes", "calves"},
    "core": {"core"},
}


def check_equipment(profile: UserProfile, plan: WorkoutPlan) -> Dict[str, Any]:
    """Every exercise must be doable with the user's equipment."""
    owned = set(profile.equipment_profile.equipment_ids)
    violations: List[str] = []
    for session in plan.sessions:
        for ex in session.exercises:
            missing = sorted(set(ex.required_equipment) - owned)
            if missing:
                violations.append(f"{session.name}: {ex.name} needs {', '.join(missing)}")
    return {"ok": not violations, "violations": violations}


def check_avoidance(
    profile: UserProfile, plan: WorkoutPlan, catalog: Optional[ExerciseCatalog] = None
) -> Dict[str, Any]:
    """No exercise may carry a contraindication matching one of the user's injuries."""
    injuries = set(profile.injuries)
    violations: List[str] = []
    if injuries:
        if catalog is None:
            catalog = load_catalog()
        for session in plan.sessions:
            for ex in session.exercises:
                if ex.exercise_id not in catalog:
                    continue
                hit = sorted(injuries.intersection(catalog.get(ex.exercise_id).contraindications))
                if hit:
                    violations.append(f"{session.name}: {ex.name} (contraindicated for {', '.join(hit)})")
    return {"ok": not violations, "violations": violations, "injuries": sorted(injuries)}


def check_session_count(profile: UserProfile, plan: WorkoutPlan) -> Dict[str, Any]:
    expected = profile.sessions_per_week
    actual = len(plan.sessions)
    empty = [s.day_index for s in plan.sessions if not s.exercises]
    return {"ok": actual == expected and not empty, "expected": expected, "actual": actual, "empty_days": empty}


def check_time_fit(profile: UserProfile, plan: WorkoutPlan) -> Dict[str, Any]:
    """Check if sessions fit within the requested session length."""
    limit = profile.session_duration_minutes
    per_day_minutes = [estimate_session_minutes(s.exercises) for s in plan.sessions]
    ok = all(mins <= limit * TIME_BUFFER for mins in per_day_minutes)
    return {"ok": ok, "per_day_minutes": per_day_minutes, "limit": limit}


def check_balance(profile: UserProfile, plan: WorkoutPlan) -> Dict[str, Any]:
    """Check how many days of the week train each major muscle group."""
    weekly_presence_days = {k: 0 for k in BALANCE_GROUPS}
    for session in plan.sessions:
        day_groups: Set[str] = set()
        for ex in session.exercises:
            for group, muscles in BALANCE_GROUPS.items():
                if muscles.intersection(ex.target_muscles):
                    day_groups.add(group)
        for group in day_groups:
            weekly_presence_days[group] += 1

    ok = all(count >= 1 for count in weekly_presence_days.values())
    return {"ok": ok, "weekly_presence_days": weekly_presence_days}


def fast_verify(
    profile: UserProfile, plan: WorkoutPlan, catalog: Optional[ExerciseCatalog] = None
) -> Dict[str, Any]:
    """Run all fast deterministic checks.

    `balance` and `time_fit` are advisory: a bodyweight-only catalog may
    not cover every group, and the smart tier is allowed a few extra minutes.
    `ok` reflects the hard guarantees only.
    """
    equipment = check_equipment(profile, plan)
    avoidance = check_avoidance(profile, plan, catalog)
    session_count = check_session_count(profile, plan)
    time_fit = check_time_fit(profile, plan)
    balance = check_balance(profile, plan)

    return {
        "ok": equipment["ok"] and avoidance["ok"] and session_count["ok"],
        "equipment": equipment,
        "avoidance": avoidance,
        "session_count": session_count,
        "time_fit": time_fit,
        "balance": balance,
    }
