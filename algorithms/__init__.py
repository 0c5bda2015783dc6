from .date_order import DateOrdering
from .workout_totals import TotalsCalculator
from .progression import (
    ProgressionTools,
    ExerciseProfile,
    ExerciseComparison,
    Recommendation,
    ProgressionSuggestion,
)
from .weight_converter import WeightConverter

__all__ = [
    "DateOrdering",
    "TotalsCalculator",
    "ProgressionTools",
    "ExerciseProfile",
    "ExerciseComparison",
    "Recommendation",
    "ProgressionSuggestion",
    "WeightConverter",
]
