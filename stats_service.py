from __future__ import annotations
from typing import Dict, List, Optional

from algorithms import (
    ExerciseProfile,
    ProgressionTools,
    TotalsCalculator,
)
from workout_models import PreviousOccurrence, Totals
from workout_service import WorkoutStore
from workout_type_service import WorkoutTypeRegistry


class StatisticsService:
    """Compute workout statistics for analysis.

    Every query takes the date explicitly and only falls back to the store's
    selected date when none is given.
    """

    # (metric name, Totals attribute, lower is better)
    METRICS = (
        ("exercises", "total_exercises", False),
        ("sets", "total_sets", False),
        ("volume", "total_volume", False),
        ("duration", "total_duration", False),
        ("avg_weight", "avg_weight", False),
        ("max_weight", "max_weight", False),
        ("avg_reps", "avg_reps", False),
        ("total_reps", "total_reps", False),
    )

    def __init__(
        self,
        store: WorkoutStore,
        registry: WorkoutTypeRegistry | None = None,
    ) -> None:
        self.store = store
        self.registry = registry

    def _date(self, date: Optional[str]) -> str:
        return date or self.store.selected_date

    def workout_totals(self, workout_type_id: str, date: Optional[str] = None) -> Totals:
        return TotalsCalculator.compute_totals(
            self.store.get_exercises(workout_type_id, self._date(date))
        )

    def day_totals(self, date: Optional[str] = None) -> Totals:
        return TotalsCalculator.compute_day_totals(
            self.store.get_workouts_for_date(self._date(date))
        )

    def previous_totals(
        self, workout_type_id: str, date: Optional[str] = None
    ) -> PreviousOccurrence:
        return ProgressionTools.find_previous_occurrence(
            self.store.workouts, self._date(date), workout_type_id
        )

    def workout_progress(
        self, workout_type_id: str, date: Optional[str] = None
    ) -> Dict[str, object]:
        """Return each metric with its previous value and percent change.

        ``change`` is ``None`` when there is nothing to compare with, and
        ``first_workout`` is set when the type was never logged before.
        """
        day = self._date(date)
        current = self.workout_totals(workout_type_id, day)
        previous = self.previous_totals(workout_type_id, day)
        metrics = []
        for name, attr, is_inverse in self.METRICS:
            value = getattr(current, attr)
            prev_value = getattr(previous.totals, attr) if previous.totals else None
            metrics.append(
                {
                    "metric": name,
                    "current": value,
                    "previous": prev_value,
                    "change": ProgressionTools.display_change(
                        value, prev_value, is_inverse
                    ),
                }
            )
        return {
            "workout_type": workout_type_id,
            "name": self.registry.type_name(workout_type_id) if self.registry else workout_type_id,
            "date": day,
            "previous_date": previous.date,
            "first_workout": not previous.found,
            "metrics": metrics,
        }

    def exercise_progress(
        self, workout_type_id: str, date: Optional[str] = None
    ) -> List[Dict[str, object]]:
        """Compare each exercise with the same exercise at the previous occurrence."""
        day = self._date(date)
        current = self.store.get_exercises(workout_type_id, day)
        previous = self.previous_totals(workout_type_id, day)
        prev_exercises = (
            self.store.get_exercises(workout_type_id, previous.date)
            if previous.found
            else []
        )
        return [
            c.as_dict() for c in ProgressionTools.compare_workouts(current, prev_exercises)
        ]

    def progression_suggestions(
        self, workout_type_id: str, date: Optional[str] = None
    ) -> Dict[str, object]:
        """Suggest the next overload step from the previous occurrence."""
        day = self._date(date)
        previous = self.previous_totals(workout_type_id, day)
        if not previous.found:
            return {"previous_date": None, "suggestions": []}
        suggestions = ProgressionTools.suggest_progression(
            self.store.get_exercises(workout_type_id, day),
            self.store.get_exercises(workout_type_id, previous.date),
        )
        return {
            "previous_date": previous.date,
            "suggestions": [s.as_dict() for s in suggestions],
        }

    def exercise_history(
        self, exercise: str, date: Optional[str] = None
    ) -> List[Dict[str, object]]:
        """Return per-date figures for ``exercise`` logged before ``date``."""
        history = []
        for day, ex in ProgressionTools.exercise_history(
            self.store.workouts, exercise, before_date=date
        ):
            profile = ExerciseProfile.from_exercise(ex)
            history.append(
                {
                    "date": day,
                    "exercise": profile.name,
                    "bodyweight": profile.is_bodyweight,
                    "sets": profile.set_count,
                    "reps": profile.total_reps,
                    "volume": profile.total_volume,
                    "max_weight": profile.max_weight,
                }
            )
        return history

    def summary(self, date: Optional[str] = None) -> Dict[str, object]:
        day = self._date(date)
        buckets = self.store.get_workouts_for_date(day)
        return {
            "date": day,
            "totals": TotalsCalculator.compute_day_totals(buckets).to_document(),
            "workouts": {
                type_id: TotalsCalculator.compute_totals(exercises).to_document()
                for type_id, exercises in buckets.items()
            },
        }
