import os
import sys
import unittest
from pydantic import ValidationError

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from workout_models import (
    Exercise,
    ExerciseSet,
    PreviousOccurrence,
    Totals,
    WorkoutNotFoundError,
    TrackerError,
    workouts_from_document,
    workouts_to_document,
)


class WorkoutModelsTest(unittest.TestCase):
    def test_camel_case_aliases(self) -> None:
        ex = Exercise.model_validate(
            {
                "id": "run",
                "name": "Run",
                "category": "cardio",
                "cardioDuration": 25,
                "cardioIntensity": 7,
            }
        )
        self.assertEqual(ex.cardio_duration, 25)
        self.assertTrue(ex.is_cardio)
        doc = ex.to_document()
        self.assertEqual(doc["cardioIntensity"], 7)
        self.assertNotIn("sets", doc)
        self.assertNotIn("notes", doc)

    def test_validation(self) -> None:
        with self.assertRaises(ValidationError):
            ExerciseSet(reps=-1, weight=10)
        with self.assertRaises(ValidationError):
            ExerciseSet(reps=1, weight=-10)
        with self.assertRaises(ValidationError):
            Exercise(id="x", name="X", category="yoga")

    def test_logged_sets_of_placeholder(self) -> None:
        self.assertEqual(Exercise(id="p", name="P").logged_sets, [])

    def test_workouts_document(self) -> None:
        raw = {
            "2024-01-10": {
                "chest": [{"id": "a", "name": "Bench", "sets": [{"id": "1", "weight": 50, "reps": 10}]}],
                "back": [],
            }
        }
        data = workouts_from_document(raw)
        self.assertEqual(data["2024-01-10"]["back"], [])
        self.assertEqual(data["2024-01-10"]["chest"][0].sets[0].volume, 500)
        doc = workouts_to_document(data)
        self.assertEqual(doc["2024-01-10"]["chest"][0]["sets"][0]["completed"], False)

    def test_bad_documents(self) -> None:
        with self.assertRaises(ValueError):
            workouts_from_document([])
        with self.assertRaises(ValueError):
            workouts_from_document({"2024-01-10": []})
        with self.assertRaises(ValueError):
            workouts_from_document({"2024-01-10": {"chest": [{"name": "no id"}]}})

    def test_previous_occurrence_absence_differs_from_zero(self) -> None:
        self.assertFalse(PreviousOccurrence().found)
        zero = PreviousOccurrence(totals=Totals(), date="2024-01-01")
        self.assertTrue(zero.found)

    def test_not_found_error(self) -> None:
        err = WorkoutNotFoundError("2024-01-01", "chest")
        self.assertIsInstance(err, TrackerError)
        self.assertEqual(err.workout_type_id, "chest")
        self.assertIn("2024-01-01", str(err))


if __name__ == "__main__":
    unittest.main()
