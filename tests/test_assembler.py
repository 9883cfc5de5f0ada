import pytest

from gymovoo.engine.assembler import (
    PlanAssembler,
    estimate_session_minutes,
    exercises_per_session,
    prescribe,
    split_for,
)
from gymovoo.engine.equipment import resolve
from gymovoo.errors import InsufficientCatalogError, InvalidProfileError
from gymovoo.models.schemas import ExerciseInstance
from gymovoo.tools.exercise_db import ExerciseCatalog


@pytest.mark.parametrize("sessions", [2, 3, 4, 5])
def test_session_count_matches_request(catalog, sessions):
    out = PlanAssembler(catalog).assemble(sessions, "general_fitness", "intermediate", resolve("home_bodyweight", []))
    assert len(out) == sessions
    assert [s.day_index for s in out] == list(range(1, sessions + 1))
    assert all(s.exercises for s in out)


def test_bodyweight_weight_loss_beginner(catalog):
    sessions = PlanAssembler(catalog).assemble(3, "lose_weight", "beginner", resolve("home_bodyweight", []))
    assert len(sessions) == 3
    for s in sessions:
        for ex in s.exercises:
            assert ex.required_equipment == ()
            if ex.reps_unit == "reps":
                assert 12 <= ex.reps_min <= ex.reps_max <= 20
            assert 30 <= ex.rest_seconds <= 45


def test_gym_muscle_building_advanced(catalog):
    eq = resolve("gym", ["barbell", "squat_rack", "bench"])
    sessions = PlanAssembler(catalog).assemble(4, "build_muscle", "advanced", eq)
    assert len(sessions) == 4
    assert any("barbell" in ex.required_equipment for s in sessions for ex in s.exercises)
    for s in sessions:
        for ex in s.exercises:
            assert 90 <= ex.rest_seconds <= 180
            assert set(ex.required_equipment) <= {"barbell", "squat_rack", "bench"}


def test_split_patterns():
    assert [d.label for d in split_for(2, "lose_weight")] == ["Full Body", "Full Body"]
    assert [d.label for d in split_for(3, "build_muscle")] == ["Push", "Pull", "Legs"]
    assert [d.label for d in split_for(4, "increase_strength")] == [
        "Chest & Triceps", "Back & Biceps", "Legs", "Shoulders & Core",
    ]
    assert [d.label for d in split_for(4, "general_fitness")] == ["Upper Body", "Lower Body", "Upper Body", "Lower Body"]
    assert len(split_for(5, "improve_endurance")) == 5


def test_unsupported_session_count_raises():
    with pytest.raises(InvalidProfileError):
        split_for(6, "general_fitness")


def test_session_names_and_ids(catalog):
    sessions = PlanAssembler(catalog).assemble(4, "build_muscle", "beginner", resolve("home_bodyweight", []))
    assert sessions[0].name == "Day 1 – Chest & Triceps"
    assert sessions[0].id == "day-1"
    assert sessions[0].focus == "chest_triceps"


def test_exercises_per_session_bounds():
    assert exercises_per_session(15) == 3
    assert exercises_per_session(45) == 4
    assert exercises_per_session(120) == 8


def test_prescription_sets_by_level(make_exercise):
    inst = ExerciseInstance.from_exercise(make_exercise("row", ["back"], sets=3, reps=(8, 12), rest=60))
    assert prescribe(inst, "general_fitness", "beginner").sets == 2
    assert prescribe(inst, "general_fitness", "intermediate").sets == 3
    assert prescribe(inst, "general_fitness", "advanced").sets == 4


def test_prescription_strength_window(make_exercise):
    inst = ExerciseInstance.from_exercise(make_exercise("squat", ["quads"], reps=(8, 12), rest=90))
    out = prescribe(inst, "increase_strength", "intermediate")
    assert (out.reps_min, out.reps_max) == (6, 6)
    assert out.rest_seconds == 120


def test_recovery_sets_unchanged(make_exercise):
    inst = ExerciseInstance.from_exercise(
        make_exercise("breathing", ["mobility"], category="recovery", sets=1, reps=(6, 8), rest=15)
    )
    assert prescribe(inst, "general_fitness", "beginner").sets == 1
    assert prescribe(inst, "general_fitness", "advanced").sets == 1


def test_duration_estimate_floor(make_exercise):
    inst = ExerciseInstance.from_exercise(make_exercise("stretch", ["mobility"], sets=1, reps=(5, 5), rest=15))
    assert estimate_session_minutes([inst]) == 10


def test_injury_exclusion_records_safety_log(shoulder_catalog):
    assembler = PlanAssembler(shoulder_catalog)
    sessions = assembler.assemble(2, "general_fitness", "beginner", resolve("gym", ["barbell"]), ["shoulder"])
    ids = [ex.exercise_id for s in sessions for ex in s.exercises]
    assert "overhead_press" not in ids
    assert "prone_y_raise" in ids
    assert assembler.safety_log[0].exercise_id == "overhead_press"


def test_no_eligible_exercises_raises(make_exercise):
    cat = ExerciseCatalog([make_exercise("bench_press", ["chest"], equipment=["barbell", "bench"])])
    with pytest.raises(InsufficientCatalogError) as exc:
        PlanAssembler(cat).assemble(3, "general_fitness", "advanced", resolve("home_bodyweight", []))
    assert exc.value.day_index == 1


def test_all_contraindicated_raises(make_exercise):
    cat = ExerciseCatalog([make_exercise("squat", ["quads"], contra=["knee"])])
    with pytest.raises(InsufficientCatalogError):
        PlanAssembler(cat).assemble(2, "general_fitness", "beginner", resolve("home_bodyweight", []), ["knee"])


def test_invalid_goal_raises(catalog):
    with pytest.raises(InvalidProfileError):
        PlanAssembler(catalog).assemble(3, "get_huge", "beginner", resolve("home_bodyweight", []))


def test_timed_and_distance_targets_not_scaled_as_reps(make_exercise):
    plank = ExerciseInstance.from_exercise(
        make_exercise("plank", ["core"], category="core", reps=(30, 45), rest=45).model_copy(update={"reps_unit": "seconds"})
    )
    out = prescribe(plank, "lose_weight", "beginner")
    assert (out.reps_min, out.reps_max) == (30, 45)
    assert out.reps == "30-45 s"
    assert out.rest_seconds == 30


def test_rowing_intervals_estimate_uses_distance(catalog):
    rowing = ExerciseInstance.from_exercise(catalog.get("rowing_intervals"))
    assert rowing.reps_unit == "meters"
    prescribed = prescribe(rowing, "general_fitness", "intermediate")
    assert (prescribed.reps_min, prescribed.reps_max) == (250, 500)
    assert estimate_session_minutes([prescribed]) <= 15


def test_gym_plan_fits_time_with_cardio_machines(catalog):
    eq = resolve("gym", ["rowing_machine", "treadmill", "elliptical", "stationary_bike", "dumbbells"])
    sessions = PlanAssembler(catalog).assemble(3, "general_fitness", "intermediate", eq)
    for s in sessions:
        assert s.estimated_duration_minutes <= 45 * 1.15
