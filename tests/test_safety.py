from gymovoo.engine import selector
from gymovoo.engine.equipment import resolve
from gymovoo.engine.safety import SafetyFilter, safety_note_for
from gymovoo.models.schemas import ExerciseInstance
from gymovoo.tools.exercise_db import ExerciseCatalog


def _instances(catalog, *ids):
    return [ExerciseInstance.from_exercise(catalog.get(i)) for i in ids]


def test_contraindicated_exercise_substituted_from_same_group(shoulder_catalog):
    f = SafetyFilter(shoulder_catalog, resolve("gym", ["barbell"]), "beginner")
    out = f.apply(_instances(shoulder_catalog, "overhead_press", "air_squat"), ["shoulder"], day_index=1)

    ids = [i.exercise_id for i in out]
    assert "overhead_press" not in ids
    assert ids[0] == "prone_y_raise"
    assert "shoulder" in out[0].safety_note
    assert out[1].safety_note is None

    assert len(f.actions) == 1
    action = f.actions[0]
    assert action.action == "substituted"
    assert action.exercise_id == "overhead_press"
    assert action.replacement_id == "prone_y_raise"
    assert action.day_index == 1


def test_removed_when_no_safe_substitute(make_exercise):
    cat = ExerciseCatalog([
        make_exercise("overhead_press", ["shoulders"], contra=["shoulder"]),
        make_exercise("air_squat", ["quads"]),
    ])
    f = SafetyFilter(cat, resolve("home_bodyweight", []), "beginner")
    out = f.apply(_instances(cat, "overhead_press", "air_squat"), ["shoulder"])
    assert [i.exercise_id for i in out] == ["air_squat"]
    assert f.actions[0].action == "removed"


def test_substitute_not_already_in_session(make_exercise):
    cat = ExerciseCatalog([
        make_exercise("overhead_press", ["shoulders"], contra=["shoulder"]),
        make_exercise("prone_y_raise", ["shoulders"]),
    ])
    f = SafetyFilter(cat, resolve("home_bodyweight", []), "beginner")
    out = f.apply(_instances(cat, "prone_y_raise", "overhead_press"), ["shoulder"])
    assert [i.exercise_id for i in out] == ["prone_y_raise"]


def test_no_injuries_is_passthrough(catalog):
    f = SafetyFilter(catalog, resolve("home_bodyweight", []), "beginner")
    picked = _instances(catalog, "push_up", "plank")
    assert f.apply(picked, []) == picked
    assert f.actions == []


def test_unknown_injury_warns(catalog):
    f = SafetyFilter(catalog, resolve("home_bodyweight", []), "beginner")
    f.apply(_instances(catalog, "bodyweight_squat"), ["tennis_elbow_left"])
    assert [w.value for w in f.warnings] == ["tennis_elbow_left"]


def test_injury_known_only_by_area_does_not_warn(catalog):
    assert "hip" not in catalog.known_contraindications()
    f = SafetyFilter(catalog, resolve("home_bodyweight", []), "beginner")
    out = f.apply(_instances(catalog, "bodyweight_squat"), ["hip"])
    assert f.warnings == []
    assert out[0].safety_note and "hip" in out[0].safety_note


def test_injury_never_in_output_for_full_catalog(catalog):
    eq = resolve("gym", ["barbell", "dumbbells", "bench", "squat_rack", "cable_machine"])
    for injury in ("shoulder", "knee", "back", "wrist"):
        f = SafetyFilter(catalog, eq, "intermediate")
        picked = selector.select(catalog, eq, "intermediate", 8, ["chest", "shoulders", "quads", "back"])
        for inst in f.apply(picked, [injury]):
            assert injury not in catalog.get(inst.exercise_id).contraindications


def test_safety_note_names_touched_injuries(catalog):
    inst = ExerciseInstance.from_exercise(catalog.get("incline_push_up"))
    assert safety_note_for(inst, ["knee"]) is None
    assert "shoulder/wrist" in safety_note_for(inst, ["wrist", "shoulder"])
