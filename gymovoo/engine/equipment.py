from __future__ import annotations

"""
Equipment Resolver
------------------
Turns a declared training location plus whatever the questionnaire stored as
equipment (bare ids, `{id, label}` dicts, option ids) into a normalized
`EquipmentProfile`. Unknown or out-of-location ids are dropped with a
warning instead of failing, so plan generation never starves on data noise.
"""

from typing import Any, Dict, Iterable, List, Literal, Tuple

from loguru import logger

from gymovoo.errors import InvalidProfileError
from gymovoo.models.schemas import EquipmentProfile, Location, ValidationWarning


HOUSEHOLD_EQUIPMENT = frozenset({
    "mat",
    "chair",
    "wall",
    "stairs",
    "towel",
    "water_bottles",
    "pillow",
    "table",
    "weighted_backpack",
})

HOME_EQUIPMENT = HOUSEHOLD_EQUIPMENT | frozenset({
    "dumbbells",
    "resistance_bands",
    "kettlebell",
    "yoga_mat",
    "pullup_bar",
    "foam_roller",
    "exercise_ball",
    "jump_rope",
    "bench",
    "barbell",
    "medicine_ball",
    "trx",
})

GYM_ONLY_EQUIPMENT = frozenset({
    "squat_rack",
    "bench_press",
    "cable_machine",
    "leg_press",
    "lat_pulldown",
    "smith_machine",
    "chest_press",
    "rowing_machine",
    "treadmill",
    "elliptical",
    "stationary_bike",
    "leg_curl",
    "leg_extension",
    "dip_station",
    "ez_bar",
})

ALLOWED_EQUIPMENT: Dict[Location, frozenset] = {
    Location.home_bodyweight: HOUSEHOLD_EQUIPMENT,
    Location.home_equipment: HOME_EQUIPMENT,
    Location.gym: HOME_EQUIPMENT | GYM_ONLY_EQUIPMENT,
}

# Selections that mean "no equipment" rather than an actual item
BODYWEIGHT_MARKERS = frozenset({"none", "bodyweight", "bodyweight_only", "no_equipment"})

# Questionnaire option ids and spelling variants -> canonical equipment ids
EQUIPMENT_ALIASES: Dict[str, Tuple[str, ...]] = {
    "pull_up_bar": ("pullup_bar",),
    "mat_available": ("mat",),
    "chair_available": ("chair",),
    "wall_space": ("wall",),
    "stairs_available": ("stairs",),
    "towel_available": ("towel",),
    "pillow_available": ("pillow",),
    "table_sturdy": ("table",),
    "backpack_heavy": ("weighted_backpack",),
    "dumbbells_home": ("dumbbells",),
    "adjustable_dumbbells": ("dumbbells",),
    "kettlebell_home": ("kettlebell",),
    "yoga_mat_home": ("yoga_mat",),
    "home_bench": ("bench",),
    "flat_bench": ("bench",),
    "adjustable_bench": ("bench",),
    "barbell_home": ("barbell",),
    "mini_bands": ("resistance_bands",),
    "tube_bands": ("resistance_bands",),
    "free_weights": ("dumbbells", "barbell"),
    "free_weights_gym": ("dumbbells", "barbell"),
    "squat_rack_gym": ("squat_rack",),
    "bench_press_gym": ("bench_press", "bench"),
    "cable_machine_gym": ("cable_machine",),
    "leg_press_gym": ("leg_press",),
    "lat_pulldown_gym": ("lat_pulldown",),
    "smith_machine_gym": ("smith_machine",),
    "cardio_machines_gym": ("treadmill", "elliptical"),
    "chest_press_gym": ("chest_press",),
    "rowing_machine_gym": ("rowing_machine",),
}


def selection_id(item: Any) -> str | None:
    """Strip an equipment selection down to its id (string, dict or object)."""
    if item is None:
        return None
    if isinstance(item, str):
        value = item
    elif isinstance(item, dict):
        value = item.get("id")
    else:
        value = getattr(item, "id", None)
    if value is None:
        return None
    value = str(value).strip().lower().replace("-", "_").replace(" ", "_")
    return value or None


def parse_location(location: Any) -> Location:
    try:
        return Location(str(getattr(location, "value", location)).strip().lower())
    except ValueError:
        raise InvalidProfileError("location", location) from None


def resolve_with_warnings(
    location: Any, raw_selections: Iterable[Any] | None
) -> Tuple[EquipmentProfile, List[ValidationWarning]]:
    """Resolve equipment and return the diagnostics alongside the profile."""
    loc = parse_location(location)
    allowed = ALLOWED_EQUIPMENT[loc]
    warnings: List[ValidationWarning] = []

    ids: List[str] = []
    for item in raw_selections or []:
        sid = selection_id(item)
        if sid is None:
            warnings.append(ValidationWarning(field="equipment", message="Equipment entry without an id ignored", value=item))
            logger.warning(f"Ignoring equipment entry without id: {item!r}")
            continue
        if sid in BODYWEIGHT_MARKERS:
            continue
        for canonical in EQUIPMENT_ALIASES.get(sid, (sid,)):
            if canonical not in ids:
                ids.append(canonical)

    kept: List[str] = []
    for eq in ids:
        if eq in allowed:
            kept.append(eq)
            continue
        warnings.append(
            ValidationWarning(
                field="equipment",
                message=f"'{eq}' is not available for location '{loc.value}' and was dropped",
                value=eq,
            )
        )
        logger.warning(f"Dropping equipment '{eq}' not valid for location '{loc.value}'")

    if not kept and loc != Location.home_bodyweight:
        logger.info(f"No usable equipment for '{loc.value}', falling back to bodyweight-only profile")

    return EquipmentProfile(location=loc, equipment_ids=kept), warnings


def resolve(location: Any, raw_selections: Iterable[Any] | None) -> EquipmentProfile:
    """Resolve a location + raw selections into an `EquipmentProfile`.

    Raises `InvalidProfileError` only for an unrecognized location; equipment
    problems are logged and dropped.
    """
    profile, _ = resolve_with_warnings(location, raw_selections)
    return profile


def classify_environment(profile: EquipmentProfile) -> Literal["bodyweight", "home_gym", "full_gym"]:
    if not profile.equipment_ids:
        return "bodyweight"
    if any(e in GYM_ONLY_EQUIPMENT for e in profile.equipment_ids):
        return "full_gym"
    return "home_gym"
