from __future__ import annotations

"""
Plan Versioner
--------------
Stamps plans with a stable hash of the answers they were generated from, so
callers can tell "nothing changed, skip regeneration" without diffing plan
bodies, and decides how a new plan fits next to the user's stored plans.
"""

import hashlib
import json
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Sequence

from gymovoo.config import MAX_STORED_PLANS
from gymovoo.engine.profile_adapter import coerce_profile, normalize_answers
from gymovoo.models.schemas import MergeDecision, UserProfile, WorkoutPlan


def _as_profile(source_answers: UserProfile | Mapping[str, Any]) -> UserProfile:
    if isinstance(source_answers, UserProfile):
        return source_answers
    if "equipment_profile" in source_answers:
        return coerce_profile(source_answers)
    return normalize_answers(source_answers).profile


def canonical_answers(source_answers: UserProfile | Mapping[str, Any]) -> Dict[str, Any]:
    """Canonical, order-independent view of the answers that drive generation.

    Raw answers go through the same normalization as plan generation, so a
    legacy-shaped dict hashes like the profile it resolves to.
    """
    p = _as_profile(source_answers)
    return {
        "goal": p.goal.value,
        "experience_level": p.experience_level.value,
        "location": p.equipment_profile.location.value,
        "equipment": sorted(p.equipment_profile.equipment_ids),
        "injuries": sorted(p.injuries),
        "sessions_per_week": p.sessions_per_week,
        "session_duration_minutes": p.session_duration_minutes,
    }


def fingerprint(source_answers: UserProfile | Mapping[str, Any]) -> str:
    payload = json.dumps(canonical_answers(source_answers), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def stamp(plan: WorkoutPlan, source_answers: UserProfile | Mapping[str, Any]) -> WorkoutPlan:
    """Return a copy of `plan` carrying `source_answers_hash` and `created_at`.

    `id` and `created_at` are the only fields that differ between two runs
    over identical answers.
    """
    return plan.model_copy(
        update={
            "source_answers_hash": fingerprint(source_answers),
            "created_at": datetime.now(timezone.utc),
        },
        deep=True,
    )


def is_current(plan: WorkoutPlan, source_answers: UserProfile | Mapping[str, Any]) -> bool:
    return plan.source_answers_hash is not None and plan.source_answers_hash == fingerprint(source_answers)


def merge_policy(
    stored_plans: Sequence[WorkoutPlan],
    new_plan: WorkoutPlan,
    max_plans: int = MAX_STORED_PLANS,
) -> MergeDecision:
    """How `new_plan` should be stored next to the user's existing plans.

    The engine never evicts anything itself; `replace_required` hands the
    slot choice back to the caller.
    """
    for stored in stored_plans:
        if (
            stored.tier == new_plan.tier
            and stored.source_answers_hash
            and stored.source_answers_hash == new_plan.source_answers_hash
        ):
            return MergeDecision(
                action="skip",
                reason="A stored plan was generated from the same answers",
                matching_plan_id=stored.id,
            )
    if len(stored_plans) < max_plans:
        return MergeDecision(action="add", reason=f"{len(stored_plans)}/{max_plans} plan slots used")
    return MergeDecision(action="replace_required", reason=f"All {max_plans} plan slots are occupied")
