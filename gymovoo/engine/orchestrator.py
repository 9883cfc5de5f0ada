from __future__ import annotations

"""
Plan Orchestrator
-----------------
Coordinates the Assembler → Tier Generator → Versioner sequence. Both tiers
come out stamped with the same answers hash, so the caller can store either
and later decide whether it is still current.
"""

from typing import Any, List, Mapping, Optional, Tuple

from loguru import logger

from gymovoo.engine import versioner
from gymovoo.engine.assembler import PlanAssembler
from gymovoo.engine.profile_adapter import coerce_profile, normalize_answers
from gymovoo.engine.tiers import PlanTierGenerator
from gymovoo.models.schemas import TieredPlans, UserProfile, ValidationWarning
from gymovoo.tools.exercise_db import ExerciseCatalog, load_catalog


def generate_plans_with_warnings(
    profile: UserProfile, catalog: ExerciseCatalog
) -> Tuple[TieredPlans, List[ValidationWarning]]:
    """Run the pipeline for a validated profile and keep the engine's warnings."""
    eq = profile.equipment_profile

    logger.info("Step 1: Assembling weekly sessions")
    assembler = PlanAssembler(catalog, session_duration_minutes=profile.session_duration_minutes)
    sessions = assembler.assemble(
        profile.sessions_per_week,
        profile.goal,
        profile.experience_level,
        eq,
        profile.injuries,
    )
    logger.info(
        f"  ✓ {len(sessions)} sessions, {sum(len(s.exercises) for s in sessions)} exercises, "
        f"{len(assembler.safety_log)} safety actions"
    )

    logger.info("Step 2: Generating basic and smart tiers")
    tiers = PlanTierGenerator(catalog).generate_both(
        sessions,
        eq,
        goal=profile.goal,
        experience_level=profile.experience_level,
        injuries=profile.injuries,
        safety_log=assembler.safety_log,
    )

    logger.info("Step 3: Stamping plans with answers hash")
    stamped = TieredPlans(
        basic=versioner.stamp(tiers.basic, profile),
        smart=versioner.stamp(tiers.smart, profile),
    )
    logger.info(f"  ✓ hash={stamped.basic.source_answers_hash[:12]}")
    return stamped, list(assembler.warnings)


def generate_plans(
    profile: UserProfile | Mapping[str, Any],
    catalog: Optional[ExerciseCatalog] = None,
) -> TieredPlans:
    """Generate both plan tiers for a normalized profile.

    Raises:
        InvalidProfileError: the profile does not validate.
        InsufficientCatalogError: the catalog cannot fill a session.
    """
    profile = coerce_profile(profile)
    plans, _ = generate_plans_with_warnings(profile, catalog or load_catalog())
    return plans


def generate_plans_from_answers(
    raw_answers: Mapping[str, Any],
    catalog: Optional[ExerciseCatalog] = None,
) -> Tuple[TieredPlans, List[ValidationWarning]]:
    """Normalize stored questionnaire answers, then generate both tiers.

    Returns the plans together with every warning raised along the way
    (defaults applied, equipment dropped, unmapped injuries).
    """
    result = normalize_answers(raw_answers)
    plans, engine_warnings = generate_plans_with_warnings(result.profile, catalog or load_catalog())
    return plans, list(result.warnings) + engine_warnings
