from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from workout_models import Exercise, ExerciseSet, PreviousOccurrence
from .date_order import DateOrdering
from .workout_totals import TotalsCalculator


@dataclass(frozen=True)
class ExerciseProfile:
    """Per-exercise figures used when comparing the same movement over time."""

    name: str
    is_bodyweight: bool
    set_count: int
    total_reps: int
    total_volume: float
    max_weight: float

    @classmethod
    def from_exercise(cls, exercise: Exercise) -> "ExerciseProfile":
        sets = exercise.logged_sets
        is_bodyweight = bool(exercise.is_bodyweight_exercise) or (
            len(sets) > 0 and all(s.weight == 0 for s in sets)
        )
        total_reps = sum(s.reps for s in sets)
        if is_bodyweight:
            volume = 0.0
            max_weight = 0.0
        else:
            volume = sum(s.volume for s in sets)
            max_weight = max((s.weight for s in sets), default=0.0)
        return cls(
            name=exercise.name,
            is_bodyweight=is_bodyweight,
            set_count=len(sets),
            total_reps=total_reps,
            total_volume=volume,
            max_weight=max_weight,
        )


@dataclass(frozen=True)
class ExerciseComparison:
    """Outcome of comparing one exercise against its previous occurrence.

    ``comparable`` is False when there is no previous occurrence or when one
    side is bodyweight and the other weighted; in both cases every progress
    field is ``None`` and no badge should be shown.
    """

    current: ExerciseProfile
    previous: Optional[ExerciseProfile]
    comparable: bool
    volume_progress: Optional[float] = None
    max_weight_progress: Optional[float] = None
    reps_progress: Optional[float] = None

    @property
    def has_previous(self) -> bool:
        return self.previous is not None

    @property
    def primary_progress(self) -> Optional[float]:
        """Badge value: the larger of the max-weight and volume changes.

        Bodyweight pairs use the reps change as their volume change and have
        a max-weight change of 0, so fewer reps show as 0 rather than a
        negative badge.
        """
        if not self.comparable:
            return None
        if self.current.is_bodyweight:
            return max(0.0, self.reps_progress or 0.0)
        return max(self.max_weight_progress or 0.0, self.volume_progress or 0.0)

    def as_dict(self) -> dict:
        prev = self.previous
        return {
            "exercise": self.current.name,
            "bodyweight": self.current.is_bodyweight,
            "has_previous": self.has_previous,
            "comparable": self.comparable,
            "sets": self.current.set_count,
            "reps": self.current.total_reps,
            "volume": self.current.total_volume,
            "max_weight": self.current.max_weight,
            "previous_sets": prev.set_count if prev else None,
            "previous_reps": prev.total_reps if prev else None,
            "previous_volume": prev.total_volume if prev else None,
            "previous_max_weight": prev.max_weight if prev else None,
            "volume_progress": self.volume_progress,
            "max_weight_progress": self.max_weight_progress,
            "reps_progress": self.reps_progress,
            "primary_progress": self.primary_progress,
        }


@dataclass(frozen=True)
class Recommendation:
    """A single suggested change, tagged by ``kind`` such as ``reps`` or ``duration``."""

    kind: str
    current: Optional[float] = None
    suggested: Optional[float] = None

    def as_dict(self) -> dict:
        return {"type": self.kind, "current": self.current, "suggested": self.suggested}


@dataclass(frozen=True)
class ProgressionSuggestion:
    exercise_id: str
    exercise_name: str
    is_cardio: bool
    recommendations: Tuple[Recommendation, ...]

    def as_dict(self) -> dict:
        return {
            "exercise_id": self.exercise_id,
            "exercise": self.exercise_name,
            "is_cardio": self.is_cardio,
            "recommendations": [r.as_dict() for r in self.recommendations],
        }


class ProgressionTools:
    """Compare workouts and exercises against their history."""

    TARGET_REPS = 12
    REDUCED_REPS = 8
    WEIGHT_STEP = 0.05
    HIGH_INTENSITY = 8
    MAX_INTENSITY = 10

    @staticmethod
    def percent_change(current: float, previous: float) -> float:
        """Return the percentage change, or 0 when ``previous`` is not positive."""
        if previous > 0:
            return ((current - previous) / previous) * 100
        return 0.0

    @classmethod
    def display_change(
        cls,
        current: float,
        previous: Optional[float],
        is_inverse: bool = False,
    ) -> Optional[float]:
        """Return the change to show next to a metric.

        ``None`` means there is no prior data to compare with. ``is_inverse``
        flips the sign for metrics where lower is better.
        """
        if previous is None or previous <= 0:
            return None
        change = cls.percent_change(current, previous)
        return -change if is_inverse else change

    @staticmethod
    def find_previous_occurrence(
        store: Mapping[str, Mapping[str, Sequence[Exercise]]],
        selected_date: str,
        workout_type_id: str,
    ) -> PreviousOccurrence:
        """Return totals of the most recent earlier non-empty bucket."""
        for date in DateOrdering.dates_before(store.keys(), selected_date):
            exercises = store[date].get(workout_type_id)
            if exercises:
                return PreviousOccurrence(
                    totals=TotalsCalculator.compute_totals(exercises), date=date
                )
        return PreviousOccurrence()

    @staticmethod
    def find_matching_exercise(
        name: str, exercises: Iterable[Exercise]
    ) -> Optional[Exercise]:
        wanted = name.lower()
        for exercise in exercises:
            if exercise.name.lower() == wanted:
                return exercise
        return None

    @classmethod
    def compare_exercise(
        cls, current: Exercise, previous: Optional[Exercise]
    ) -> ExerciseComparison:
        cur = ExerciseProfile.from_exercise(current)
        if previous is None:
            return ExerciseComparison(current=cur, previous=None, comparable=False)
        prev = ExerciseProfile.from_exercise(previous)
        if cur.is_bodyweight != prev.is_bodyweight:
            return ExerciseComparison(current=cur, previous=prev, comparable=False)
        if cur.is_bodyweight:
            return ExerciseComparison(
                current=cur,
                previous=prev,
                comparable=True,
                reps_progress=cls.percent_change(cur.total_reps, prev.total_reps),
            )
        return ExerciseComparison(
            current=cur,
            previous=prev,
            comparable=True,
            volume_progress=cls.percent_change(cur.total_volume, prev.total_volume),
            max_weight_progress=cls.percent_change(cur.max_weight, prev.max_weight),
        )

    @classmethod
    def compare_workouts(
        cls,
        current: Sequence[Exercise],
        previous: Sequence[Exercise],
    ) -> List[ExerciseComparison]:
        """Compare every current exercise with the same-named previous one."""
        return [
            cls.compare_exercise(ex, cls.find_matching_exercise(ex.name, previous))
            for ex in current
        ]

    @staticmethod
    def exercise_history(
        store: Mapping[str, Mapping[str, Sequence[Exercise]]],
        name: str,
        before_date: Optional[str] = None,
    ) -> List[Tuple[str, Exercise]]:
        """Return ``(date, exercise)`` pairs for ``name``, oldest first."""
        wanted = name.lower()
        dates = store.keys()
        if before_date is not None:
            dates = [d for d in dates if DateOrdering.is_before(d, before_date)]
        history: List[Tuple[str, Exercise]] = []
        for date in DateOrdering.sorted_dates(dates):
            for exercises in store[date].values():
                for exercise in exercises:
                    if exercise.name.lower() == wanted:
                        history.append((date, exercise))
        return history

    @classmethod
    def suggest_for_sets(
        cls,
        previous_sets: Sequence[ExerciseSet],
        current_sets: Sequence[ExerciseSet],
    ) -> List[Recommendation]:
        """Add a rep until the previous average reaches 12, then add 5% load.

        Once the load goes up the reps drop back to 8.
        """
        if not previous_sets or not current_sets:
            return []
        avg_reps = sum(s.reps for s in previous_sets) / len(previous_sets)
        if avg_reps < cls.TARGET_REPS:
            return [
                Recommendation(
                    "reps",
                    current=TotalsCalculator.round_half_up(avg_reps),
                    suggested=min(
                        TotalsCalculator.round_half_up(avg_reps + 1), cls.TARGET_REPS
                    ),
                )
            ]
        max_weight = max(s.weight for s in previous_sets)
        return [
            Recommendation(
                "weight",
                current=max_weight,
                suggested=TotalsCalculator.round_half_up(
                    max_weight * (1 + cls.WEIGHT_STEP)
                ),
            ),
            Recommendation("reducereps", suggested=cls.REDUCED_REPS),
        ]

    @classmethod
    def suggest_for_cardio(
        cls, previous_intensity: int, previous_duration: float
    ) -> List[Recommendation]:
        """Raise intensity below 8, otherwise lengthen the session."""
        if previous_intensity < cls.HIGH_INTENSITY:
            return [
                Recommendation(
                    "intensity",
                    current=previous_intensity,
                    suggested=min(previous_intensity + 1, cls.MAX_INTENSITY),
                )
            ]
        longer = min(previous_duration + 5, previous_duration * 1.2)
        return [
            Recommendation(
                "duration",
                current=previous_duration,
                suggested=TotalsCalculator.round_half_up(longer),
            )
        ]

    @classmethod
    def suggest_progression(
        cls,
        current: Sequence[Exercise],
        previous: Sequence[Exercise],
    ) -> List[ProgressionSuggestion]:
        """Suggest the next step for each exercise also done last time.

        Cardio needs intensity and duration on both sides. Other exercises
        need sets on both sides.
        """
        by_name = {ex.name.lower(): ex for ex in previous}
        suggestions: List[ProgressionSuggestion] = []
        for ex in current:
            prev = by_name.get(ex.name.lower())
            if prev is None:
                continue
            if ex.is_cardio:
                if not (
                    prev.cardio_intensity
                    and ex.cardio_intensity
                    and prev.cardio_duration
                    and ex.cardio_duration
                ):
                    continue
                recommendations = cls.suggest_for_cardio(
                    prev.cardio_intensity, prev.cardio_duration
                )
            else:
                if not prev.sets or not ex.sets:
                    continue
                recommendations = cls.suggest_for_sets(prev.sets, ex.sets)
            if recommendations:
                suggestions.append(
                    ProgressionSuggestion(
                        exercise_id=ex.id,
                        exercise_name=ex.name,
                        is_cardio=ex.is_cardio,
                        recommendations=tuple(recommendations),
                    )
                )
        return suggestions
