from gymovoo.engine import versioner
from gymovoo.engine.orchestrator import generate_plans, generate_plans_from_answers
from gymovoo.models.schemas import PlanTier, WorkoutPlan


def _plan(tier="basic", hash_=None, id_="p1"):
    return WorkoutPlan(id=id_, tier=tier, name="Plan", sessions=[], source_answers_hash=hash_)


def test_fingerprint_is_order_independent():
    a = {"goal": "lose_weight", "experience_level": "beginner", "location": "home_equipment",
         "equipment": ["dumbbells", "bench"], "injuries": ["knee", "Back"]}
    b = {"goal": "lose_weight", "experience_level": "beginner", "location": "home_equipment",
         "equipment": ["bench", {"id": "dumbbells"}], "injuries": ["back", "knee"]}
    assert versioner.fingerprint(a) == versioner.fingerprint(b)


def test_fingerprint_changes_with_answers(make_profile):
    assert versioner.fingerprint(make_profile(goal="lose_weight")) != versioner.fingerprint(make_profile(goal="build_muscle"))
    assert versioner.fingerprint(make_profile(sessions=3)) != versioner.fingerprint(make_profile(sessions=4))


def test_regenerating_same_answers_gives_same_hash(catalog, make_profile):
    profile = make_profile(location="home_equipment", equipment=["dumbbells"], goal="build_muscle", level="intermediate")
    first = generate_plans(profile, catalog)
    second = generate_plans(profile, catalog)
    assert first.basic.source_answers_hash == second.basic.source_answers_hash
    assert first.basic.source_answers_hash == first.smart.source_answers_hash
    assert first.basic.id != second.basic.id
    assert versioner.is_current(first.basic, profile)
    assert not versioner.is_current(first.basic, make_profile(goal="lose_weight"))


def test_stamp_sets_hash_and_created_at(make_profile):
    stamped = versioner.stamp(_plan(), make_profile())
    assert stamped.source_answers_hash == versioner.fingerprint(make_profile())
    assert stamped.created_at is not None
    assert stamped.created_at.tzinfo is not None


def test_merge_policy_skip_add_replace():
    new = _plan(hash_="abc", id_="new")
    assert versioner.merge_policy([_plan(hash_="abc", id_="old")], new).action == "skip"
    assert versioner.merge_policy([_plan(tier=PlanTier.smart, hash_="abc")], new).action == "add"
    assert versioner.merge_policy([], new).action == "add"
    full = [_plan(hash_=h, id_=h) for h in ("x", "y", "z")]
    decision = versioner.merge_policy(full, new)
    assert decision.action == "replace_required"


def test_unstamped_plan_is_not_current(make_profile):
    assert not versioner.is_current(_plan(), make_profile())


def test_legacy_shaped_answers_match_stamped_hash(catalog):
    legacy = {"questionnaire": {"goal": "weight_loss", "experience": "beginner",
                                "workout_location": "home_bodyweight", "availability": "3_days", "duration": "45"}}
    plans, _ = generate_plans_from_answers(legacy, catalog)
    assert versioner.fingerprint(legacy) == plans.basic.source_answers_hash
    assert versioner.is_current(plans.smart, legacy)

    flat = {"goal": "lose_weight", "experience_level": "beginner", "location": "home_bodyweight",
            "sessions_per_week": 3, "session_duration_minutes": 45}
    assert versioner.fingerprint(flat) == versioner.fingerprint(legacy)
