import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import KeyValueRepository
from planner_service import PlannerService
from storage_service import StorageService
from workout_models import Exercise, WorkoutType
from workout_service import WorkoutStore
from workout_type_service import DEFAULT_WORKOUT_TYPES, WorkoutTypeRegistry


class WorkoutTypeRegistryTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_types.db"
        if os.path.exists(self.db_path):
            os.remove(self.db_path)
        self.repo = KeyValueRepository(self.db_path)
        self.storage = StorageService(self.repo, user_id="tester")
        self.store = WorkoutStore(self.storage, selected_date="2024-01-10")
        self.planner = PlannerService(self.store, self.storage)
        self.registry = WorkoutTypeRegistry(
            self.store, self.storage, on_reset=self.planner.clear_template
        )

    def tearDown(self) -> None:
        if os.path.exists(self.db_path):
            os.remove(self.db_path)

    def test_default_catalog(self) -> None:
        defaults = self.registry.default_types()
        self.assertEqual(len(defaults), 8)
        self.assertEqual(
            [wt.id for wt in defaults],
            ["chest", "back", "legs", "shoulders", "arms", "abs", "cardio", "fullbody"],
        )
        chest = defaults[0]
        self.assertEqual(chest.color, "#FF5252")
        self.assertEqual(chest.icon, "weight-lifter")
        self.assertTrue(chest.is_default)
        defaults[0].name = "Changed"
        self.assertEqual(DEFAULT_WORKOUT_TYPES[0].name, "Chest")

    def test_add_type_generates_custom_id_and_bucket(self) -> None:
        self.assertFalse(self.registry.has_types_configured)
        wt = self.registry.add_type("Mobility", "yoga", "#123456")
        self.assertTrue(wt.id.startswith("custom-"))
        self.assertTrue(wt.selected)
        self.assertIsNone(wt.is_default)
        self.assertTrue(self.registry.has_types_configured)
        self.assertEqual(self.store.get_exercises(wt.id, "2024-01-10"), [])
        self.assertTrue(self.store.has_bucket(wt.id, "2024-01-10"))

        reloaded = WorkoutTypeRegistry(self.store, self.storage)
        reloaded.load()
        self.assertEqual([t.id for t in reloaded.types], [wt.id])

    def test_add_type_with_existing_id_replaces(self) -> None:
        self.registry.add_type("Chest", "weight-lifter", "#FF5252", type_id="chest")
        self.registry.add_type("Peito", "weight-lifter", "#000000", type_id="chest")
        self.assertEqual(len(self.registry.types), 1)
        self.assertEqual(self.registry.type_name("chest"), "Peito")
        self.assertTrue(self.registry.get_type("chest").is_default)

    def test_removed_type_history_is_kept(self) -> None:
        self.registry.add_type("Chest", "weight-lifter", "#FF5252", type_id="chest")
        self.store.add_exercise("chest", Exercise(id="a", name="Bench"))
        self.assertTrue(self.registry.remove_type("chest"))
        self.assertFalse(self.registry.remove_type("chest"))
        self.assertIsNone(self.registry.get_type("chest"))
        self.assertEqual(self.registry.type_name("chest"), "Unknown workout")
        self.assertEqual(len(self.store.get_exercises("chest", "2024-01-10")), 1)

    def test_update_types_opens_selected_buckets(self) -> None:
        self.registry.update_types(
            [
                WorkoutType(id="chest", name="Chest", selected=True),
                WorkoutType(id="back", name="Back"),
            ]
        )
        self.assertEqual([wt.id for wt in self.registry.selected_types()], ["chest"])
        self.assertTrue(self.store.has_bucket("chest"))
        self.assertFalse(self.store.has_bucket("back"))

    def test_reset_types_keeps_workouts_and_clears_template(self) -> None:
        self.registry.add_type("Chest", "weight-lifter", "#FF5252", type_id="chest")
        self.store.add_exercise("chest", Exercise(id="a", name="Bench"))
        self.planner.add_to_template(3, "chest")

        self.registry.reset_types()

        self.assertEqual(self.registry.types, [])
        self.assertFalse(self.planner.has_template_configured)
        self.assertIsNone(self.repo.get(self.storage.key("workoutTypes")))
        self.assertIsNone(self.repo.get(self.storage.key("weeklyTemplate")))
        self.assertEqual(len(self.store.get_exercises("chest")), 1)

    def test_malformed_types_document(self) -> None:
        self.repo.set(self.storage.key("workoutTypes"), '{"id": "chest"}')
        with self.assertLogs("storage_service", level="WARNING"):
            self.registry.load()
        self.assertEqual(self.registry.types, [])


if __name__ == "__main__":
    unittest.main()
