from __future__ import annotations
import logging
from typing import Dict, List, Optional

from algorithms import DateOrdering, TotalsCalculator
from storage_service import StorageService
from workout_models import (
    Exercise,
    TrainingGoals,
    WeeklyTemplate,
    buckets_to_document,
)
from workout_service import WorkoutStore

logger = logging.getLogger(__name__)


class PlannerService:
    """Weekly workout template, workout copying and training goals."""

    def __init__(
        self,
        store: WorkoutStore,
        storage: StorageService | None = None,
    ) -> None:
        self.store = store
        self.storage = storage
        self._template: WeeklyTemplate = {}
        self._goals: Optional[TrainingGoals] = None

    # weekly template

    @property
    def template(self) -> WeeklyTemplate:
        return {day: dict(types) for day, types in self._template.items()}

    @property
    def has_template_configured(self) -> bool:
        return len(self._template) > 0

    @staticmethod
    def _check_day(day: int) -> None:
        if not 0 <= day <= 6:
            raise ValueError("day must be between 0 (Sunday) and 6 (Saturday)")

    def load(self) -> None:
        if self.storage is None:
            return
        self._template = {}
        raw = self.storage.load("weeklyTemplate")
        if raw is not None:
            try:
                self._template = self._parse_template(raw)
            except (ValueError, TypeError) as exc:
                self.storage.report_malformed("weeklyTemplate", exc)
        self._goals = None
        raw_goals = self.storage.load("trainingGoals")
        if raw_goals is not None:
            try:
                self._goals = TrainingGoals.model_validate(raw_goals)
            except ValueError as exc:
                self.storage.report_malformed("trainingGoals", exc)

    @classmethod
    def _parse_template(cls, raw: dict) -> WeeklyTemplate:
        if not isinstance(raw, dict):
            raise ValueError("weekly template must be an object")
        template: WeeklyTemplate = {}
        for day, types in raw.items():
            d = int(day)
            cls._check_day(d)
            if not isinstance(types, dict):
                raise ValueError(f"invalid template entry for day {d}")
            template[d] = {
                str(type_id): [Exercise.model_validate(ex) for ex in exercises or []]
                for type_id, exercises in types.items()
            }
        return template

    def _save_template(self) -> None:
        if self.storage is None:
            return
        self.storage.schedule_save(
            "weeklyTemplate",
            {str(day): buckets_to_document(types) for day, types in self._template.items()},
        )

    def add_to_template(self, day: int, workout_type_id: str) -> None:
        self._check_day(day)
        self._template.setdefault(day, {}).setdefault(workout_type_id, [])
        self._save_template()

    def remove_from_template(self, day: int, workout_type_id: str) -> None:
        self._check_day(day)
        types = self._template.get(day)
        if types is None:
            return
        types.pop(workout_type_id, None)
        if not types:
            del self._template[day]
        self._save_template()

    def update_template(self, template: WeeklyTemplate) -> None:
        for day in template:
            self._check_day(day)
        self._template = {day: dict(types) for day, types in template.items()}
        self._save_template()

    def clear_template(self) -> None:
        self._template = {}
        if self.storage is not None:
            self.storage.schedule_delete("weeklyTemplate")

    def template_for_date(self, date: str) -> List[str]:
        """Return the workout type ids planned for the weekday of ``date``."""
        day = DateOrdering.day_of_week(date)
        if day is None:
            return []
        return list(self._template.get(day, {}).keys())

    def apply_template(self, date: str) -> List[str]:
        """Open empty buckets on ``date`` for the template's workout types.

        Returns the ids of the buckets that were created; existing buckets and
        their exercises are left untouched.
        """
        created = [
            type_id
            for type_id in self.template_for_date(date)
            if self.store.ensure_bucket(date, type_id)
        ]
        if created:
            logger.debug("applied weekly template to %s: %s", date, created)
            self.store.save()
        return created

    def copy_workout_from_date(
        self,
        source_date: str,
        source_workout_type_id: str,
        target_workout_type_id: str,
    ) -> List[Exercise]:
        return self.store.copy_workout_from_date(
            source_date, source_workout_type_id, target_workout_type_id
        )

    # training goals

    @property
    def goals(self) -> Optional[TrainingGoals]:
        return self._goals

    def update_goals(self, goals: TrainingGoals) -> None:
        self._goals = goals
        if self.storage is not None:
            self.storage.schedule_save("trainingGoals", goals.to_document())

    def goal_progress(self, date: str | None = None) -> List[Dict[str, float]]:
        """Compare the day's totals with each configured target."""
        if self._goals is None:
            return []
        totals = TotalsCalculator.compute_day_totals(
            self.store.get_workouts_for_date(date)
        )
        pairs = [
            ("exercises", self._goals.target_exercises, totals.total_exercises),
            ("sets", self._goals.target_sets, totals.total_sets),
            ("volume", self._goals.target_volume, totals.total_volume),
            ("duration", self._goals.target_duration, totals.total_duration),
        ]
        result = []
        for metric, target, current in pairs:
            if target is None:
                continue
            percent = min(current / target * 100, 100.0) if target > 0 else 0.0
            result.append(
                {
                    "metric": metric,
                    "target": target,
                    "current": current,
                    "percent": round(percent, 2),
                }
            )
        return result
