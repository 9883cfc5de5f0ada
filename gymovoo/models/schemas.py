from enum import Enum
from typing import List, Optional, Literal, Dict, Any, Tuple
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Goal(str, Enum):
    lose_weight = "lose_weight"
    build_muscle = "build_muscle"
    general_fitness = "general_fitness"
    improve_endurance = "improve_endurance"
    increase_strength = "increase_strength"


class ExperienceLevel(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"

    @property
    def rank(self) -> int:
        return _EXPERIENCE_RANK[self.value]


_EXPERIENCE_RANK = {"beginner": 0, "intermediate": 1, "advanced": 2}


class Location(str, Enum):
    home_bodyweight = "home_bodyweight"
    home_equipment = "home_equipment"
    gym = "gym"


class Category(str, Enum):
    strength = "strength"
    cardio = "cardio"
    core = "core"
    flexibility = "flexibility"
    recovery = "recovery"


class PlanTier(str, Enum):
    basic = "basic"
    smart = "smart"


RepsUnit = Literal["reps", "seconds", "meters"]


class RepRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    low: int = Field(ge=1)
    high: int = Field(ge=1)

    @model_validator(mode="after")
    def _ordered(self) -> "RepRange":
        if self.high < self.low:
            raise ValueError(f"rep range high ({self.high}) below low ({self.low})")
        return self


class Exercise(BaseModel):
    """Catalog entry. Immutable reference data."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: Category
    required_equipment: Tuple[str, ...] = ()
    target_muscles: Tuple[str, ...]
    difficulty: ExperienceLevel
    default_sets: int = Field(ge=1)
    default_reps: RepRange
    reps_unit: RepsUnit = "reps"
    default_rest_seconds: int = Field(ge=0)
    contraindications: Tuple[str, ...] = ()

    @field_validator("required_equipment", "contraindications", mode="before")
    @classmethod
    def _dedupe_sorted(cls, v):
        return tuple(sorted({str(x).strip().lower() for x in (v or []) if str(x).strip()}))

    @field_validator("target_muscles")
    @classmethod
    def _non_empty(cls, v):
        if not v:
            raise ValueError("exercise needs at least one target muscle")
        return v

    @property
    def primary_muscle(self) -> str:
        return self.target_muscles[0]

    @property
    def is_bodyweight(self) -> bool:
        return not self.required_equipment


class EquipmentProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: Location
    equipment_ids: Tuple[str, ...] = ()

    @field_validator("equipment_ids", mode="before")
    @classmethod
    def _dedupe_sorted(cls, v):
        return tuple(sorted({str(x) for x in (v or [])}))

    def supports(self, required: Tuple[str, ...]) -> bool:
        return set(required).issubset(self.equipment_ids)


class UserProfile(BaseModel):
    goal: Goal
    experience_level: ExperienceLevel
    sessions_per_week: int = Field(default=3, ge=2, le=5)
    session_duration_minutes: int = Field(default=45, ge=15, le=120)
    injuries: List[str] = Field(default_factory=list)
    equipment_profile: EquipmentProfile

    @field_validator("injuries", mode="before")
    @classmethod
    def _normalize_injuries(cls, v):
        return sorted({str(x).strip().lower() for x in (v or []) if str(x).strip()})


_UNIT_SUFFIX = {"reps": "", "seconds": " s", "meters": " m"}


class ExerciseInstance(BaseModel):
    exercise_id: str
    name: str
    category: Category
    required_equipment: Tuple[str, ...] = ()
    target_muscles: Tuple[str, ...] = ()
    sets: int
    reps_min: int
    reps_max: int
    reps_unit: RepsUnit = "reps"
    rest_seconds: int
    safety_note: Optional[str] = None

    @property
    def reps(self) -> str:
        span = str(self.reps_min) if self.reps_min == self.reps_max else f"{self.reps_min}-{self.reps_max}"
        return span + _UNIT_SUFFIX[self.reps_unit]

    @classmethod
    def from_exercise(cls, ex: Exercise) -> "ExerciseInstance":
        return cls(
            exercise_id=ex.id,
            name=ex.name,
            category=ex.category,
            required_equipment=ex.required_equipment,
            target_muscles=ex.target_muscles,
            sets=ex.default_sets,
            reps_min=ex.default_reps.low,
            reps_max=ex.default_reps.high,
            reps_unit=ex.reps_unit,
            rest_seconds=ex.default_rest_seconds,
        )


class WorkoutSession(BaseModel):
    id: str
    day_index: int = Field(ge=1)
    name: str
    focus: str
    exercises: List[ExerciseInstance]
    estimated_duration_minutes: int


class SafetyAction(BaseModel):
    action: Literal["substituted", "removed"]
    exercise_id: str
    replacement_id: Optional[str] = None
    reason: str
    day_index: Optional[int] = None


class PlanFeatures(BaseModel):
    personalized_workouts: bool = True
    progress_tracking: bool = True
    custom_schedule: bool = True
    ai_recommendations: bool = False
    equipment_optimization: bool = False


class WorkoutPlan(BaseModel):
    id: str
    tier: PlanTier
    name: str
    sessions: List[WorkoutSession]
    created_at: Optional[datetime] = None
    source_answers_hash: Optional[str] = None
    duration_weeks: int = 4
    features: PlanFeatures = Field(default_factory=PlanFeatures)
    requires_subscription: bool = False
    weekly_progression_pct: float = 0.0
    notes: List[str] = Field(default_factory=list)
    safety_log: List[SafetyAction] = Field(default_factory=list)

    def exercise_ids(self) -> List[str]:
        return [ex.exercise_id for s in self.sessions for ex in s.exercises]


class TieredPlans(BaseModel):
    basic: WorkoutPlan
    smart: WorkoutPlan


class ValidationWarning(BaseModel):
    field: str
    message: str
    value: Optional[Any] = None


class ProfileResult(BaseModel):
    profile: UserProfile
    warnings: List[ValidationWarning] = Field(default_factory=list)


class MergeDecision(BaseModel):
    action: Literal["skip", "add", "replace_required"]
    reason: str
    matching_plan_id: Optional[str] = None


class PlansResponse(BaseModel):
    plans: TieredPlans
    warnings: List[ValidationWarning] = Field(default_factory=list)
    verification: Dict[str, Any] = Field(default_factory=dict)


class EquipmentResolveRequest(BaseModel):
    location: str
    equipment: List[Any] = Field(default_factory=list)
