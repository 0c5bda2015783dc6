from workout_models import Totals
from .workout_totals import TotalsCalculator


class WeightConverter:
    """Convert stored kilogram figures for display in the configured unit."""

    KG_TO_LB = 2.20462

    @staticmethod
    def kg_to_lb(kg: float) -> float:
        return round(kg * WeightConverter.KG_TO_LB, 2)

    @classmethod
    def to_unit(cls, kg: float, unit: str) -> float:
        if unit == "lb":
            return cls.kg_to_lb(kg)
        if unit == "kg":
            return kg
        raise ValueError(f"unsupported weight unit: {unit}")

    @classmethod
    def convert_totals(cls, totals: Totals, unit: str) -> Totals:
        """Return a copy of ``totals`` with weight-based fields in ``unit``.

        ``avg_weight`` stays an integer so it is rounded half up again.
        """
        if unit == "kg":
            return totals.model_copy()
        avg = cls.to_unit(totals.avg_weight, unit)
        return totals.model_copy(
            update={
                "total_volume": cls.to_unit(totals.total_volume, unit),
                "max_weight": cls.to_unit(totals.max_weight, unit),
                "avg_weight": TotalsCalculator.round_half_up(avg),
            }
        )
