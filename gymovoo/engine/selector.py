from __future__ import annotations

"""
Exercise Selector
-----------------
Picks a muscle-group-balanced set of exercises for one session.

Filtering is by explicit `required_equipment` tags and difficulty rank;
exercise names are never inspected. Selection walks the requested muscle
groups round-robin so one group cannot crowd out the others.
"""

from collections import OrderedDict
from typing import Dict, List, Sequence

from loguru import logger

from gymovoo.errors import InsufficientCatalogError
from gymovoo.models.schemas import EquipmentProfile, Exercise, ExerciseInstance, ExperienceLevel
from gymovoo.tools.exercise_db import ExerciseCatalog


def eligible_exercises(
    catalog: ExerciseCatalog,
    equipment_profile: EquipmentProfile,
    experience_level: ExperienceLevel,
) -> List[Exercise]:
    """Exercises the user can do with their equipment at or below their level."""
    return catalog.filter(
        equipment_available=equipment_profile.equipment_ids,
        max_difficulty=experience_level,
    )


def rank_key(ex: Exercise, level: ExperienceLevel):
    # More owned equipment first, then difficulty closest to the user's level
    return (-len(ex.required_equipment), level.rank - ex.difficulty.rank, ex.id)


def group_by_primary_muscle(
    exercises: Sequence[Exercise], experience_level: ExperienceLevel
) -> Dict[str, List[Exercise]]:
    groups: Dict[str, List[Exercise]] = OrderedDict()
    for ex in sorted(exercises, key=lambda e: rank_key(e, experience_level)):
        groups.setdefault(ex.primary_muscle, []).append(ex)
    return groups


def _rotate(items: List[Exercise], rotation: int) -> List[Exercise]:
    if not items or not rotation:
        return list(items)
    k = rotation % len(items)
    return items[k:] + items[:k]


def _round_robin(
    order: List[str],
    queues: Dict[str, List[Exercise]],
    chosen: List[Exercise],
    seen: set[str],
    count: int,
) -> None:
    while len(chosen) < count:
        progressed = False
        for group in order:
            if len(chosen) >= count:
                break
            queue = queues[group]
            while queue and queue[0].id in seen:
                queue.pop(0)
            if not queue:
                continue
            ex = queue.pop(0)
            seen.add(ex.id)
            chosen.append(ex)
            progressed = True
        if not progressed:
            break


def select(
    catalog: ExerciseCatalog,
    equipment_profile: EquipmentProfile,
    experience_level: ExperienceLevel,
    count_per_session: int,
    muscle_group_targets: Sequence[str],
    rotation: int = 0,
) -> List[ExerciseInstance]:
    """Select up to `count_per_session` exercises for one session.

    Groups named in `muscle_group_targets` are visited first, in order; any
    other eligible group is appended afterwards so the session still fills up
    when the targets run dry. `rotation` shifts each group's ranking so
    repeated muscle groups on different days get different exercises.

    Raises `InsufficientCatalogError` if no exercise at all survives the
    equipment and difficulty filter.
    """
    level = ExperienceLevel(experience_level)
    pool = eligible_exercises(catalog, equipment_profile, level)
    if not pool:
        raise InsufficientCatalogError(
            f"No exercises match equipment {list(equipment_profile.equipment_ids) or ['bodyweight']} "
            f"at level '{level.value}'"
        )

    groups = group_by_primary_muscle(pool, level)
    targets = list(OrderedDict.fromkeys(muscle_group_targets))
    overflow = [g for g in groups if g not in targets]
    queues = {g: _rotate(groups.get(g, []), rotation) for g in targets + overflow}

    chosen: List[Exercise] = []
    seen: set[str] = set()
    for order in (targets, overflow):
        _round_robin(order, queues, chosen, seen, count_per_session)

    if len(chosen) < count_per_session:
        logger.info(f"Only {len(chosen)} of {count_per_session} exercises available for targets {list(muscle_group_targets)}")

    return [ExerciseInstance.from_exercise(ex) for ex in chosen]
