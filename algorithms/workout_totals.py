import math
from typing import Iterable, Mapping

from workout_models import Exercise, Totals


class TotalsCalculator:
    """Reduce exercise lists into :class:`Totals` records."""

    STRENGTH_MINUTES_PER_SET: int = 2

    @staticmethod
    def round_half_up(value: float) -> int:
        """Round to the nearest integer with halves going up."""
        return int(math.floor(value + 0.5))

    @staticmethod
    def empty() -> Totals:
        return Totals()

    @classmethod
    def compute_totals(cls, exercises: Iterable[Exercise]) -> Totals:
        """Return totals for ``exercises``.

        Cardio exercises only contribute their ``cardio_duration``. Every other
        exercise is accounted by its sets, plus a fixed two minutes per set of
        estimated duration.
        """
        exercises = list(exercises)
        total_sets = 0
        total_volume = 0.0
        total_duration = 0.0
        total_reps = 0
        weight_sum = 0.0
        weight_count = 0
        reps_sum = 0
        reps_count = 0
        max_weight = 0.0

        for exercise in exercises:
            if exercise.is_cardio:
                if exercise.cardio_duration:
                    total_duration += exercise.cardio_duration
                continue
            if exercise.sets is None:
                continue
            for s in exercise.sets:
                total_volume += s.weight * s.reps
                total_reps += s.reps
                weight_sum += s.weight
                weight_count += 1
                reps_sum += s.reps
                reps_count += 1
                if s.weight > max_weight:
                    max_weight = s.weight
                total_sets += 1
            total_duration += len(exercise.sets) * cls.STRENGTH_MINUTES_PER_SET

        return Totals(
            total_exercises=len(exercises),
            total_sets=total_sets,
            total_volume=total_volume,
            total_duration=total_duration,
            avg_weight=cls.round_half_up(weight_sum / weight_count) if weight_count > 0 else 0,
            max_weight=max_weight,
            avg_reps=cls.round_half_up(reps_sum / reps_count) if reps_count > 0 else 0,
            total_reps=total_reps,
        )

    @classmethod
    def compute_day_totals(cls, buckets: Mapping[str, Iterable[Exercise]]) -> Totals:
        """Sum per-workout-type totals for one date.

        ``avg_weight`` and ``avg_reps`` are added up across workout types
        rather than re-averaged, so with more than one type logged they are
        not per-set averages. Existing clients depend on these numbers.
        """
        day = Totals()
        for exercises in buckets.values():
            t = cls.compute_totals(exercises)
            day.total_exercises += t.total_exercises
            day.total_sets += t.total_sets
            day.total_volume += t.total_volume
            day.total_duration += t.total_duration
            day.avg_weight += t.avg_weight
            day.max_weight = max(day.max_weight, t.max_weight)
            day.avg_reps += t.avg_reps
            day.total_reps += t.total_reps
        return day
