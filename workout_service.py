from __future__ import annotations
import asyncio
import logging
import secrets
import time
from typing import Iterable, List, Optional

from algorithms import DateOrdering
from storage_service import SaveCallback, StorageService
from workout_models import (
    Exercise,
    ExerciseSet,
    WorkoutBuckets,
    WorkoutData,
    WorkoutNotFoundError,
    WorkoutType,
    workouts_from_document,
    workouts_to_document,
)

logger = logging.getLogger(__name__)


def generate_set_id(taken: Iterable[str] = ()) -> str:
    """Return a set id built from a nanosecond timestamp and a random suffix."""
    taken = set(taken)
    while True:
        candidate = f"{time.time_ns()}-{secrets.token_hex(4)}"
        if candidate not in taken:
            return candidate


class WorkoutStore:
    """In-memory workouts keyed by date, then by workout type id.

    All mutations apply to :attr:`selected_date` and update memory before the
    document is handed to the storage collaborator. Missing dates, workout
    types and exercises are treated as empty and never raise.
    """

    def __init__(
        self,
        storage: StorageService | None = None,
        selected_date: str | None = None,
        on_saved: SaveCallback | None = None,
    ) -> None:
        self.storage = storage
        self.selected_date = selected_date or DateOrdering.today()
        self.on_saved = on_saved
        self._workouts: WorkoutData = {}

    @property
    def workouts(self) -> WorkoutData:
        """The live date -> workout type -> exercises map."""
        return self._workouts

    def load(self) -> None:
        """Replace the in-memory map with the persisted one."""
        if self.storage is None:
            return
        raw = self.storage.load("workouts")
        if raw is None:
            self._workouts = {}
            return
        try:
            self._workouts = workouts_from_document(raw)
        except (ValueError, TypeError) as exc:
            self.storage.report_malformed("workouts", exc)
            self._workouts = {}
            return
        logger.info("loaded workouts for %d dates", len(self._workouts))

    def save(self) -> Optional[asyncio.Task]:
        if self.storage is None:
            return None
        return self.storage.schedule_save(
            "workouts", workouts_to_document(self._workouts), self.on_saved
        )

    def set_selected_date(self, date: str) -> None:
        self.selected_date = date

    @staticmethod
    def _with_set_ids(exercise: Exercise) -> Exercise:
        stored = exercise.model_copy(deep=True)
        if stored.sets is None:
            return stored
        taken = {s.id for s in stored.sets if s.id}
        for s in stored.sets:
            if not s.id:
                s.id = generate_set_id(taken)
                taken.add(s.id)
        return stored

    def _bucket(self, date: str, workout_type_id: str) -> Optional[List[Exercise]]:
        return self._workouts.get(date, {}).get(workout_type_id)

    def ensure_bucket(self, date: str, workout_type_id: str) -> bool:
        """Create an empty bucket if missing; return True when one was created."""
        buckets = self._workouts.setdefault(date, {})
        if workout_type_id in buckets:
            return False
        buckets[workout_type_id] = []
        return True

    def add_exercise(self, workout_type_id: str, exercise: Exercise) -> Optional[Exercise]:
        """Append ``exercise`` to the selected date's bucket.

        Sets without an id get one. Returns the stored copy, or ``None`` when
        an exercise with the same id is already in the bucket.
        """
        existing = self._bucket(self.selected_date, workout_type_id) or []
        if any(ex.id == exercise.id for ex in existing):
            return None
        stored = self._with_set_ids(exercise)
        self.ensure_bucket(self.selected_date, workout_type_id)
        self._workouts[self.selected_date][workout_type_id].append(stored)
        self.save()
        return stored

    def remove_exercise(self, workout_type_id: str, exercise_id: str) -> bool:
        bucket = self._bucket(self.selected_date, workout_type_id)
        if bucket is None:
            return False
        remaining = [ex for ex in bucket if ex.id != exercise_id]
        removed = len(remaining) != len(bucket)
        self._workouts[self.selected_date][workout_type_id] = remaining
        self.save()
        return removed

    def update_exercise(self, workout_type_id: str, exercise: Exercise) -> bool:
        bucket = self._bucket(self.selected_date, workout_type_id)
        if bucket is None:
            return False
        for i, ex in enumerate(bucket):
            if ex.id == exercise.id:
                bucket[i] = self._with_set_ids(exercise)
                self.save()
                return True
        return False

    def set_workout_types_for_date(self, date: str, types: Iterable[WorkoutType]) -> None:
        """Ensure a bucket exists on ``date`` for every selected type.

        Buckets of types that are not selected are left alone.
        """
        created = False
        for wt in types:
            if wt.selected:
                created = self.ensure_bucket(date, wt.id) or created
        if created:
            self.save()

    def remove_workout(self, workout_type_id: str) -> bool:
        """Delete the whole bucket for ``workout_type_id`` on the selected date."""
        buckets = self._workouts.get(self.selected_date)
        if buckets is None or workout_type_id not in buckets:
            return False
        del buckets[workout_type_id]
        if not buckets:
            del self._workouts[self.selected_date]
        logger.debug("removed workout %s on %s", workout_type_id, self.selected_date)
        self.save()
        return True

    def get_exercises(self, workout_type_id: str, date: str | None = None) -> List[Exercise]:
        return list(self._bucket(date or self.selected_date, workout_type_id) or [])

    def get_workouts_for_date(self, date: str | None = None) -> WorkoutBuckets:
        buckets = self._workouts.get(date or self.selected_date, {})
        return {type_id: list(exercises) for type_id, exercises in buckets.items()}

    def has_bucket(self, workout_type_id: str, date: str | None = None) -> bool:
        return self._bucket(date or self.selected_date, workout_type_id) is not None

    def dates(self) -> List[str]:
        return DateOrdering.sorted_dates(self._workouts.keys())

    def copy_workout_from_date(
        self,
        source_date: str,
        source_workout_type_id: str,
        target_workout_type_id: str,
    ) -> List[Exercise]:
        """Copy a logged workout onto the selected date.

        The target bucket is replaced. Copies get fresh exercise and set ids
        and every set is marked not completed.
        """
        source = self._bucket(source_date, source_workout_type_id)
        if source is None:
            raise WorkoutNotFoundError(source_date, source_workout_type_id)
        stamp = time.time_ns()
        copies: List[Exercise] = []
        for ex in source:
            sets = None
            if ex.sets is not None:
                taken: set[str] = set()
                sets = []
                for s in ex.sets:
                    new_id = generate_set_id(taken)
                    taken.add(new_id)
                    sets.append(ExerciseSet(id=new_id, reps=s.reps, weight=s.weight))
            copies.append(
                ex.model_copy(deep=True, update={"id": f"{ex.id}-{stamp}", "sets": sets})
            )
        self._workouts.setdefault(self.selected_date, {})[target_workout_type_id] = copies
        logger.debug(
            "copied %d exercises from %s/%s to %s/%s",
            len(copies),
            source_date,
            source_workout_type_id,
            self.selected_date,
            target_workout_type_id,
        )
        self.save()
        return list(copies)
