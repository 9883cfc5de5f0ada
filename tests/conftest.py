import pytest

from gymovoo.models.schemas import EquipmentProfile, Exercise, UserProfile
from gymovoo.tools.exercise_db import ExerciseCatalog, load_catalog


@pytest.fixture
def catalog():
    return load_catalog()


@pytest.fixture
def make_exercise():
    def _make(id, muscles, equipment=(), category="strength", difficulty="beginner", contra=(), sets=3, reps=(8, 12), rest=60):
        return Exercise(
            id=id,
            name=id.replace("_", " ").title(),
            category=category,
            required_equipment=list(equipment),
            target_muscles=list(muscles),
            difficulty=difficulty,
            default_sets=sets,
            default_reps={"low": reps[0], "high": reps[1]},
            default_rest_seconds=rest,
            contraindications=list(contra),
        )

    return _make


@pytest.fixture
def shoulder_catalog(make_exercise):
    """Small catalog where the only loaded shoulder press is contraindicated for shoulders."""
    return ExerciseCatalog([
        make_exercise("overhead_press", ["shoulders", "triceps"], equipment=["barbell"], contra=["shoulder"]),
        make_exercise("prone_y_raise", ["shoulders", "back"]),
        make_exercise("air_squat", ["quads", "glutes"]),
        make_exercise("inverted_row", ["back", "biceps"]),
        make_exercise("incline_push_up", ["chest", "triceps"]),
        make_exercise("dead_bug", ["core"], category="core"),
        make_exercise("breathing_stretch", ["mobility"], category="recovery", sets=1, reps=(6, 8), rest=15),
    ])


def profile_for(location="home_bodyweight", equipment=(), goal="general_fitness", level="beginner", sessions=3, minutes=45, injuries=()):
    return UserProfile(
        goal=goal,
        experience_level=level,
        sessions_per_week=sessions,
        session_duration_minutes=minutes,
        injuries=list(injuries),
        equipment_profile=EquipmentProfile(location=location, equipment_ids=list(equipment)),
    )


@pytest.fixture
def make_profile():
    return profile_for
