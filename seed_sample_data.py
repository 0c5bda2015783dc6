import datetime
from typing import Dict, List

from rest_api import TrackerAPI
from workout_models import Exercise, ExerciseSet


def _strength(ex_id: str, name: str, sets: List[tuple]) -> Exercise:
    return Exercise(
        id=ex_id,
        name=name,
        category="força",
        sets=[
            ExerciseSet(id=str(i), weight=w, reps=r, completed=True)
            for i, (w, r) in enumerate(sets, start=1)
        ],
    )


SAMPLE_EXERCISES: Dict[str, Exercise] = {
    "bench_press": _strength("bench_press", "Bench Press", [(60, 12), (70, 10), (80, 8)]),
    "incline_press": _strength("incline_press", "Incline Bench Press", [(50, 12), (60, 10), (70, 8)]),
    "chest_fly": _strength("chest_fly", "Chest Fly", [(15, 15), (17.5, 12), (20, 10)]),
    "lat_pulldown": _strength("lat_pulldown", "Lat Pulldown", [(60, 12), (70, 10), (80, 8)]),
    "squat": _strength("squat", "Squat", [(80, 12), (100, 10), (120, 8)]),
}


def sample_workouts(today: datetime.date | None = None) -> Dict[str, Dict[str, List[Exercise]]]:
    """Chest today, back yesterday and legs two days ago."""
    today = today or datetime.date.today()
    day = datetime.timedelta(days=1)
    return {
        today.isoformat(): {
            "chest": [
                SAMPLE_EXERCISES["bench_press"],
                SAMPLE_EXERCISES["incline_press"],
                SAMPLE_EXERCISES["chest_fly"],
            ],
        },
        (today - day).isoformat(): {"back": [SAMPLE_EXERCISES["lat_pulldown"]]},
        (today - 2 * day).isoformat(): {"legs": [SAMPLE_EXERCISES["squat"]]},
    }


def seed(api: TrackerAPI | None = None) -> bool:
    """Insert the sample workouts unless the store already has data."""
    api = api or TrackerAPI()
    if any(
        exercises
        for buckets in api.store.workouts.values()
        for exercises in buckets.values()
    ):
        print("Database already contains workouts")
        return False

    if not api.registry.has_types_configured:
        api.registry.update_types(api.registry.default_types())
    selected = api.store.selected_date
    for date, buckets in sample_workouts().items():
        api.store.set_selected_date(date)
        for type_id, exercises in buckets.items():
            for exercise in exercises:
                api.store.add_exercise(type_id, exercise)
    api.store.set_selected_date(selected)
    print("Seed data inserted")
    return True


if __name__ == "__main__":
    seed()
