from typing import List
from fastapi import FastAPI, HTTPException, APIRouter, Body

from config import APP_VERSION, load_settings
from db import KeyValueRepository
from planner_service import PlannerService
from stats_service import StatisticsService
from storage_service import StorageService
from workout_models import Exercise, TrainingGoals, WorkoutNotFoundError, WorkoutType
from workout_service import WorkoutStore
from workout_type_service import WorkoutTypeRegistry


class TrackerAPI:
    """Provides REST endpoints for workout tracking."""

    def __init__(
        self,
        db_path: str | None = None,
        yaml_path: str = "settings.yaml",
        *,
        user_id: str | None = None,
        selected_date: str | None = None,
    ) -> None:
        self.settings = load_settings(yaml_path)
        self.db_path = db_path or self.settings.db_path
        self.kv = KeyValueRepository(self.db_path)
        self.storage = StorageService(
            self.kv,
            user_id=user_id,
            prefix=self.settings.storage_prefix,
            anonymous_user=self.settings.anonymous_user,
        )
        self.store = WorkoutStore(self.storage, selected_date)
        self.planner = PlannerService(self.store, self.storage)
        self.registry = WorkoutTypeRegistry(
            self.store, self.storage, on_reset=self.planner.clear_template
        )
        self.statistics = StatisticsService(self.store, self.registry)
        self.store.load()
        self.registry.load()
        self.planner.load()
        if self.settings.apply_weekly_template:
            self.planner.apply_template(self.store.selected_date)
        self.app = FastAPI(
            title="PumpGym API",
            description="REST API for workout tracking and progression analytics",
            version=APP_VERSION,
        )
        self._setup_routes()

    def select_date(self, date: str) -> None:
        self.store.set_selected_date(date)
        if self.settings.apply_weekly_template:
            self.planner.apply_template(date)

    def _setup_routes(self) -> None:
        workouts_router = APIRouter(prefix="/workouts", tags=["Workouts"])
        types_router = APIRouter(prefix="/workout_types", tags=["Workout Types"])
        template_router = APIRouter(prefix="/template", tags=["Weekly Template"])
        goals_router = APIRouter(prefix="/goals", tags=["Goals"])
        stats_router = APIRouter(prefix="/stats", tags=["Statistics"])

        @self.app.get(
            "/health",
            summary="Health check",
            description="Verify API and storage connectivity.",
        )
        def health():
            """Return API and storage status."""
            try:
                self.kv.keys(self.settings.storage_prefix)
                return {"status": "ok"}
            except Exception as e:  # pragma: no cover - connectivity failure
                raise HTTPException(status_code=500, detail=str(e))

        @self.app.get("/date")
        def get_selected_date():
            return {"date": self.store.selected_date}

        @self.app.put("/date")
        def set_selected_date(date: str):
            self.select_date(date)
            return {"date": self.store.selected_date}

        @workouts_router.get("")
        def list_workouts(date: str = None):
            buckets = self.store.get_workouts_for_date(date)
            return {
                type_id: [ex.to_document() for ex in exercises]
                for type_id, exercises in buckets.items()
            }

        @workouts_router.get("/{workout_type_id}/exercises")
        def list_exercises(workout_type_id: str, date: str = None):
            return [
                ex.to_document()
                for ex in self.store.get_exercises(workout_type_id, date)
            ]

        @workouts_router.post("/{workout_type_id}/exercises")
        def add_exercise(workout_type_id: str, exercise: Exercise):
            stored = self.store.add_exercise(workout_type_id, exercise)
            if stored is None:
                return {"added": False, "exercise": None}
            return {"added": True, "exercise": stored.to_document()}

        @workouts_router.put("/{workout_type_id}/exercises/{exercise_id}")
        def update_exercise(workout_type_id: str, exercise_id: str, exercise: Exercise):
            updated = self.store.update_exercise(
                workout_type_id, exercise.model_copy(update={"id": exercise_id})
            )
            return {"updated": updated}

        @workouts_router.delete("/{workout_type_id}/exercises/{exercise_id}")
        def remove_exercise(workout_type_id: str, exercise_id: str):
            return {"removed": self.store.remove_exercise(workout_type_id, exercise_id)}

        @workouts_router.delete("/{workout_type_id}")
        def remove_workout(workout_type_id: str):
            return {"removed": self.store.remove_workout(workout_type_id)}

        @workouts_router.post("/{workout_type_id}/copy")
        def copy_workout(workout_type_id: str, source_date: str, source_type: str = None):
            try:
                copies = self.planner.copy_workout_from_date(
                    source_date, source_type or workout_type_id, workout_type_id
                )
            except WorkoutNotFoundError as e:
                raise HTTPException(status_code=404, detail=str(e))
            return [ex.to_document() for ex in copies]

        @types_router.get("")
        def list_types():
            return [wt.to_document() for wt in self.registry.types]

        @types_router.get("/defaults")
        def default_types():
            return [wt.to_document() for wt in self.registry.default_types()]

        @types_router.get("/{type_id}")
        def get_type(type_id: str):
            wt = self.registry.get_type(type_id)
            return {
                "id": type_id,
                "name": self.registry.type_name(type_id),
                "known": wt is not None,
            }

        @types_router.post("")
        def add_type(name: str, icon: str, color: str, type_id: str = None):
            return self.registry.add_type(name, icon, color, type_id).to_document()

        @types_router.put("")
        def update_types(types: List[WorkoutType]):
            self.registry.update_types(types)
            return [wt.to_document() for wt in self.registry.types]

        @types_router.put("/{type_id}/selected")
        def select_type(type_id: str, selected: bool = True):
            if not self.registry.set_selected(type_id, selected):
                raise HTTPException(status_code=404, detail="workout type not found")
            return {"status": "updated"}

        @types_router.delete("/{type_id}")
        def remove_type(type_id: str):
            return {"removed": self.registry.remove_type(type_id)}

        @types_router.post("/reset")
        def reset_types():
            self.registry.reset_types()
            return {"status": "reset"}

        @template_router.get("")
        def get_template():
            return {
                str(day): list(types.keys())
                for day, types in sorted(self.planner.template.items())
            }

        @template_router.post("/{day}/{type_id}")
        def add_to_template(day: int, type_id: str):
            try:
                self.planner.add_to_template(day, type_id)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"status": "added"}

        @template_router.delete("/{day}/{type_id}")
        def remove_from_template(day: int, type_id: str):
            try:
                self.planner.remove_from_template(day, type_id)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"status": "removed"}

        @template_router.post("/apply")
        def apply_template(date: str = None):
            return {"created": self.planner.apply_template(date or self.store.selected_date)}

        @goals_router.get("")
        def get_goals():
            goals = self.planner.goals
            return goals.to_document() if goals else {}

        @goals_router.put("")
        def update_goals(goals: TrainingGoals = Body(...)):
            self.planner.update_goals(goals)
            return goals.to_document()

        @goals_router.get("/progress")
        def goal_progress(date: str = None):
            return self.planner.goal_progress(date)

        @stats_router.get("/day")
        def day_totals(date: str = None):
            return self.statistics.day_totals(date).to_document()

        @stats_router.get("/workouts/{workout_type_id}")
        def workout_totals(workout_type_id: str, date: str = None):
            return self.statistics.workout_totals(workout_type_id, date).to_document()

        @stats_router.get("/workouts/{workout_type_id}/previous")
        def previous_totals(workout_type_id: str, date: str = None):
            prev = self.statistics.previous_totals(workout_type_id, date)
            return {
                "totals": prev.totals.to_document() if prev.totals else None,
                "date": prev.date,
            }

        @stats_router.get("/workouts/{workout_type_id}/progress")
        def workout_progress(workout_type_id: str, date: str = None):
            return self.statistics.workout_progress(workout_type_id, date)

        @stats_router.get("/workouts/{workout_type_id}/exercises")
        def exercise_progress(workout_type_id: str, date: str = None):
            return self.statistics.exercise_progress(workout_type_id, date)

        @stats_router.get("/workouts/{workout_type_id}/suggestions")
        def progression_suggestions(workout_type_id: str, date: str = None):
            return self.statistics.progression_suggestions(workout_type_id, date)

        @stats_router.get("/exercises/history")
        def exercise_history(name: str, date: str = None):
            return self.statistics.exercise_history(name, date)

        self.app.include_router(workouts_router)
        self.app.include_router(types_router)
        self.app.include_router(template_router)
        self.app.include_router(goals_router)
        self.app.include_router(stats_router)


api = TrackerAPI()
app = api.app

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app)
