from __future__ import annotations
import logging
import time
from typing import Callable, List, Optional

from storage_service import StorageService
from workout_models import WorkoutType
from workout_service import WorkoutStore

logger = logging.getLogger(__name__)

DEFAULT_WORKOUT_TYPES = (
    WorkoutType(id="chest", name="Chest", icon="weight-lifter", color="#FF5252", is_default=True),
    WorkoutType(id="back", name="Back", icon="human-handsdown", color="#448AFF", is_default=True),
    WorkoutType(id="legs", name="Legs", icon="run-fast", color="#66BB6A", is_default=True),
    WorkoutType(id="shoulders", name="Shoulders", icon="arm-flex", color="#FFA726", is_default=True),
    WorkoutType(id="arms", name="Arms", icon="arm-flex-outline", color="#AB47BC", is_default=True),
    WorkoutType(id="abs", name="Abs", icon="body-outline", color="#26C6DA", is_default=True),
    WorkoutType(id="cardio", name="Cardio", icon="heart-outline", color="#EF5350", is_default=True),
    WorkoutType(id="fullbody", name="Full Body", icon="dumbbell", color="#7E57C2", is_default=True),
)


class WorkoutTypeRegistry:
    """Catalog of the user's workout types.

    Removing a type never touches logged workouts; lookups for ids that are
    no longer registered return ``None`` or :attr:`UNKNOWN_TYPE_NAME`.
    """

    UNKNOWN_TYPE_NAME = "Unknown workout"

    def __init__(
        self,
        store: WorkoutStore,
        storage: StorageService | None = None,
        on_reset: Callable[[], None] | None = None,
    ) -> None:
        self.store = store
        self.storage = storage
        self.on_reset = on_reset
        self._types: List[WorkoutType] = []

    @property
    def types(self) -> List[WorkoutType]:
        return list(self._types)

    @property
    def has_types_configured(self) -> bool:
        return len(self._types) > 0

    @staticmethod
    def default_types() -> List[WorkoutType]:
        return [wt.model_copy() for wt in DEFAULT_WORKOUT_TYPES]

    def load(self) -> None:
        if self.storage is None:
            return
        raw = self.storage.load("workoutTypes")
        if raw is None:
            self._types = []
            return
        try:
            if not isinstance(raw, list):
                raise ValueError("workout types document must be a list")
            self._types = [WorkoutType.model_validate(item) for item in raw]
        except ValueError as exc:
            self.storage.report_malformed("workoutTypes", exc)
            self._types = []

    def save(self) -> None:
        if self.storage is None:
            return
        self.storage.schedule_save(
            "workoutTypes", [wt.to_document() for wt in self._types]
        )

    def _index(self, type_id: str) -> Optional[int]:
        for i, wt in enumerate(self._types):
            if wt.id == type_id:
                return i
        return None

    def get_type(self, type_id: str) -> Optional[WorkoutType]:
        idx = self._index(type_id)
        return self._types[idx] if idx is not None else None

    def type_name(self, type_id: str) -> str:
        wt = self.get_type(type_id)
        return wt.name if wt is not None else self.UNKNOWN_TYPE_NAME

    def selected_types(self) -> List[WorkoutType]:
        return [wt for wt in self._types if wt.selected]

    def add_type(
        self,
        name: str,
        icon: str,
        color: str,
        type_id: str | None = None,
    ) -> WorkoutType:
        """Register a selected type and open an empty bucket for the current date."""
        if not type_id:
            type_id = f"custom-{int(time.time() * 1000)}"
        is_default = any(d.id == type_id for d in DEFAULT_WORKOUT_TYPES) or None
        new_type = WorkoutType(
            id=type_id,
            name=name,
            icon=icon,
            color=color,
            selected=True,
            is_default=is_default,
        )
        idx = self._index(type_id)
        if idx is None:
            self._types.append(new_type)
        else:
            self._types[idx] = new_type
        self.save()
        self.store.set_workout_types_for_date(self.store.selected_date, [new_type])
        logger.debug("added workout type %s", type_id)
        return new_type

    def set_selected(self, type_id: str, selected: bool = True) -> bool:
        idx = self._index(type_id)
        if idx is None:
            return False
        wt = self._types[idx].model_copy(update={"selected": selected})
        self._types[idx] = wt
        self.save()
        self.store.set_workout_types_for_date(self.store.selected_date, [wt])
        return True

    def remove_type(self, type_id: str) -> bool:
        idx = self._index(type_id)
        if idx is None:
            return False
        del self._types[idx]
        self.save()
        return True

    def update_types(self, types: List[WorkoutType]) -> None:
        """Replace the registry and open buckets for selected types today."""
        self._types = [wt.model_copy() for wt in types]
        self.save()
        self.store.set_workout_types_for_date(self.store.selected_date, self._types)

    def reset_types(self) -> None:
        """Forget every registered type. Logged workouts are kept."""
        self._types = []
        logger.info("workout types reset")
        if self.storage is not None:
            self.storage.schedule_delete("workoutTypes")
        if self.on_reset is not None:
            self.on_reset()
