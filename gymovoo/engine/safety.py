from __future__ import annotations

"""
Safety Filter
-------------
Removes exercises contraindicated for the user's injuries, substitutes them
from the same muscle group where possible, and annotates anything that
loads a previously injured area.

Every removal or substitution is logged and kept in `actions` so callers can
show or store an audit trail.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional

from loguru import logger

from gymovoo.engine.selector import rank_key
from gymovoo.models.schemas import (
    EquipmentProfile,
    ExerciseInstance,
    ExperienceLevel,
    SafetyAction,
    ValidationWarning,
)
from gymovoo.tools.exercise_db import ExerciseCatalog


# Muscle groups loaded by movements that stress each injured area
INJURY_MUSCLE_GROUPS: Dict[str, FrozenSet[str]] = {
    "shoulder": frozenset({"shoulders", "chest", "triceps"}),
    "knee": frozenset({"quads", "hamstrings", "glutes", "calves"}),
    "back": frozenset({"back", "hamstrings", "core"}),
    "wrist": frozenset({"chest", "triceps", "biceps"}),
    "ankle": frozenset({"calves", "quads"}),
    "neck": frozenset({"shoulders", "back"}),
    "elbow": frozenset({"biceps", "triceps"}),
    "hip": frozenset({"glutes", "hamstrings", "quads"}),
}

SAFETY_NOTE_TEMPLATE = "Start light and stop if pain recurs (previous {injuries} injury)."


def safety_note_for(instance: ExerciseInstance, injuries: Iterable[str]) -> Optional[str]:
    touched = sorted(
        inj for inj in injuries
        if INJURY_MUSCLE_GROUPS.get(inj, frozenset()).intersection(instance.target_muscles)
    )
    if not touched:
        return None
    return SAFETY_NOTE_TEMPLATE.format(injuries="/".join(touched))


class SafetyFilter:
    def __init__(
        self,
        catalog: ExerciseCatalog,
        equipment_profile: EquipmentProfile,
        experience_level: ExperienceLevel,
    ) -> None:
        self.catalog = catalog
        self.equipment_profile = equipment_profile
        self.experience_level = ExperienceLevel(experience_level)
        self.actions: List[SafetyAction] = []
        self.warnings: List[ValidationWarning] = []
        self._checked_injuries: set[str] = set()

    def _check_known(self, injuries: List[str]) -> None:
        known = set(self.catalog.known_contraindications()) | set(INJURY_MUSCLE_GROUPS)
        for inj in injuries:
            if inj in self._checked_injuries:
                continue
            self._checked_injuries.add(inj)
            if inj not in known:
                msg = f"Injury '{inj}' is not a known contraindication or injured area"
                logger.warning(msg)
                self.warnings.append(ValidationWarning(field="injuries", message=msg, value=inj))

    def _substitute(self, instance: ExerciseInstance, injuries: List[str], taken: set[str]) -> Optional[ExerciseInstance]:
        primary = instance.target_muscles[0] if instance.target_muscles else None
        if primary is None:
            return None
        candidates = self.catalog.filter(
            equipment_available=self.equipment_profile.equipment_ids,
            max_difficulty=self.experience_level,
            primary_muscles=[primary],
            exclude_contraindications=injuries,
        )
        candidates = [c for c in candidates if c.id not in taken]
        if not candidates:
            return None
        best = min(candidates, key=lambda e: rank_key(e, self.experience_level))
        return ExerciseInstance.from_exercise(best)

    def apply(
        self,
        exercises: List[ExerciseInstance],
        injuries: Iterable[str],
        *,
        day_index: Optional[int] = None,
    ) -> List[ExerciseInstance]:
        """Return a new instance list with no contraindicated exercise in it."""
        injury_list = sorted({str(i).strip().lower() for i in injuries if str(i).strip()})
        if not injury_list:
            return list(exercises)
        self._check_known(injury_list)
        avoid = set(injury_list)

        taken = {ex.exercise_id for ex in exercises}
        out: List[ExerciseInstance] = []
        for inst in exercises:
            entry = self.catalog.get(inst.exercise_id) if inst.exercise_id in self.catalog else None
            conflicts = sorted(avoid.intersection(entry.contraindications)) if entry else []
            if conflicts:
                reason = f"contraindicated for {', '.join(conflicts)}"
                sub = self._substitute(inst, injury_list, taken)
                if sub is None:
                    logger.warning(f"Removed '{inst.exercise_id}' ({reason}); no safe substitute in group")
                    self.actions.append(
                        SafetyAction(action="removed", exercise_id=inst.exercise_id, reason=reason, day_index=day_index)
                    )
                    continue
                logger.warning(f"Replaced '{inst.exercise_id}' with '{sub.exercise_id}' ({reason})")
                self.actions.append(
                    SafetyAction(
                        action="substituted",
                        exercise_id=inst.exercise_id,
                        replacement_id=sub.exercise_id,
                        reason=reason,
                        day_index=day_index,
                    )
                )
                taken.add(sub.exercise_id)
                inst = sub

            note = safety_note_for(inst, injury_list)
            if note:
                inst = inst.model_copy(update={"safety_note": note})
            out.append(inst)
        return out
