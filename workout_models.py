from __future__ import annotations
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

Category = Literal["força", "cardio", "flexibilidade", "equilíbrio"]


class TrackerError(Exception):
    """Base exception for workout tracker errors."""


class WorkoutNotFoundError(TrackerError):
    """Raised when a workout bucket required by an operation does not exist."""

    def __init__(self, date: str, workout_type_id: str) -> None:
        super().__init__(f"workout {workout_type_id!r} not found on {date}")
        self.date = date
        self.workout_type_id = workout_type_id


class _StoredModel(BaseModel):
    """Base for models persisted in the camelCase document format."""

    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class ExerciseSet(_StoredModel):
    """A single weight x reps set."""

    id: str = ""
    reps: int = Field(0, ge=0)
    weight: float = Field(0.0, ge=0)
    completed: bool = False

    @property
    def volume(self) -> float:
        return self.weight * self.reps


class Exercise(_StoredModel):
    """One logged movement inside a workout-type bucket."""

    id: str
    name: str
    sets: Optional[List[ExerciseSet]] = None
    notes: Optional[str] = None
    cardio_duration: Optional[float] = Field(None, alias="cardioDuration", ge=0)
    cardio_intensity: Optional[int] = Field(
        None, alias="cardioIntensity", ge=1, le=10
    )
    category: Optional[Category] = None
    is_bodyweight_exercise: Optional[bool] = Field(
        None, alias="isBodyweightExercise"
    )
    completed: Optional[bool] = None

    @property
    def is_cardio(self) -> bool:
        return self.category == "cardio"

    @property
    def logged_sets(self) -> List[ExerciseSet]:
        return list(self.sets or [])


class WorkoutType(_StoredModel):
    """Selectable workout category used as the store partition key."""

    id: str
    name: str
    icon: str = "barbell-outline"
    color: str = "#7E57C2"
    selected: bool = False
    is_default: Optional[bool] = Field(None, alias="isDefault")


class Totals(_StoredModel):
    """Aggregated summary of an exercise list."""

    total_exercises: int = Field(0, alias="totalExercises")
    total_sets: int = Field(0, alias="totalSets")
    total_volume: float = Field(0.0, alias="totalVolume")
    total_duration: float = Field(0.0, alias="totalDuration")
    avg_weight: int = Field(0, alias="avgWeight")
    max_weight: float = Field(0.0, alias="maxWeight")
    avg_reps: int = Field(0, alias="avgReps")
    total_reps: int = Field(0, alias="totalReps")


class PreviousOccurrence(BaseModel):
    """Most recent earlier occurrence of a workout type.

    ``totals`` and ``date`` are both ``None`` when there is no history, which
    is distinct from a historical occurrence whose totals are all zero.
    """

    totals: Optional[Totals] = None
    date: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.date is not None


class TrainingGoals(_StoredModel):
    target_exercises: Optional[int] = Field(None, alias="targetExercises", ge=0)
    target_sets: Optional[int] = Field(None, alias="targetSets", ge=0)
    target_volume: Optional[float] = Field(None, alias="targetVolume", ge=0)
    target_duration: Optional[float] = Field(None, alias="targetDuration", ge=0)


WorkoutBuckets = Dict[str, List[Exercise]]
WorkoutData = Dict[str, WorkoutBuckets]
WeeklyTemplate = Dict[int, WorkoutBuckets]


def buckets_to_document(buckets: WorkoutBuckets) -> dict:
    return {
        type_id: [ex.to_document() for ex in exercises]
        for type_id, exercises in buckets.items()
    }


def workouts_to_document(data: WorkoutData) -> dict:
    return {date: buckets_to_document(buckets) for date, buckets in data.items()}


def workouts_from_document(raw: dict) -> WorkoutData:
    """Parse a stored workouts blob, raising ``ValueError`` on bad shape."""
    if not isinstance(raw, dict):
        raise ValueError("workouts document must be an object")
    data: WorkoutData = {}
    for date, buckets in raw.items():
        if not isinstance(buckets, dict):
            raise ValueError(f"invalid bucket map for {date}")
        parsed: WorkoutBuckets = {}
        for type_id, exercises in buckets.items():
            if not isinstance(exercises, list):
                raise ValueError(f"invalid exercise list for {date}/{type_id}")
            parsed[str(type_id)] = [Exercise.model_validate(ex) for ex in exercises]
        data[str(date)] = parsed
    return data
