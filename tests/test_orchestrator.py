import pytest

from gymovoo.engine.orchestrator import generate_plans, generate_plans_from_answers
from gymovoo.errors import InsufficientCatalogError, InvalidProfileError
from gymovoo.tools.exercise_db import ExerciseCatalog


def _all_instances(plan):
    return [ex for s in plan.sessions for ex in s.exercises]


def test_bodyweight_weight_loss_plan(catalog, make_profile):
    plans = generate_plans(make_profile(goal="lose_weight", level="beginner", sessions=3), catalog)
    for plan in (plans.basic, plans.smart):
        assert len(plan.sessions) == 3
        for ex in _all_instances(plan):
            assert ex.required_equipment == ()
            if ex.reps_unit == "reps":
                assert 12 <= ex.reps_min <= ex.reps_max <= 20
            assert 30 <= ex.rest_seconds <= 45


def test_gym_muscle_plan_uses_barbell(catalog, make_profile):
    profile = make_profile(location="gym", equipment=["barbell", "squat_rack", "bench"],
                           goal="build_muscle", level="advanced", sessions=4)
    plans = generate_plans(profile, catalog)
    assert len(plans.basic.sessions) == 4
    assert any("barbell" in ex.required_equipment for ex in _all_instances(plans.basic))
    assert all(90 <= ex.rest_seconds <= 180 for ex in _all_instances(plans.basic))


def test_shoulder_injury_substitutes_overhead_press(shoulder_catalog, make_profile):
    profile = make_profile(location="gym", equipment=["barbell"], sessions=2, injuries=["shoulder"])
    plans = generate_plans(profile, shoulder_catalog)
    for plan in (plans.basic, plans.smart):
        ids = [ex.exercise_id for ex in _all_instances(plan)]
        assert "overhead_press" not in ids
        sub = next(ex for ex in _all_instances(plan) if ex.exercise_id == "prone_y_raise")
        assert sub.safety_note and "shoulder" in sub.safety_note
    assert plans.basic.safety_log[0].action == "substituted"


def test_full_catalog_never_includes_contraindicated(catalog, make_profile):
    profile = make_profile(location="gym", equipment=["barbell", "dumbbells", "bench", "squat_rack"],
                           goal="increase_strength", level="advanced", sessions=5, injuries=["shoulder", "back"])
    plans = generate_plans(profile, catalog)
    for ex in _all_instances(plans.smart):
        assert not {"shoulder", "back"} & set(catalog.get(ex.exercise_id).contraindications)


def test_restricted_catalog_raises_without_partial_plan(make_exercise, make_profile):
    cat = ExerciseCatalog([make_exercise("barbell_curl", ["biceps"], equipment=["barbell"])])
    with pytest.raises(InsufficientCatalogError):
        generate_plans(make_profile(), cat)


def test_invalid_profile_dict_raises(catalog):
    with pytest.raises(InvalidProfileError):
        generate_plans({"goal": "lose_weight", "experience_level": "beginner", "sessions_per_week": 9,
                        "equipment_profile": {"location": "gym"}}, catalog)


def test_from_answers_collects_warnings(catalog):
    plans, warnings = generate_plans_from_answers(
        {"questionnaire": {"goal": "weight_loss", "location": "home_bodyweight",
                           "equipment": ["dumbbells"], "injuries": ["pinky_toe"]}},
        catalog,
    )
    fields = [w.field for w in warnings]
    assert "experience_level" in fields
    assert "equipment" in fields
    assert "injuries" in fields
    assert plans.basic.source_answers_hash == plans.smart.source_answers_hash
