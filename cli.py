import argparse
import json
import logging
import shutil

from algorithms import TotalsCalculator, WeightConverter
from config import load_settings
from db import KeyValueRepository
from rest_api import TrackerAPI
from seed_sample_data import seed
from workout_models import workouts_to_document, buckets_to_document

logger = logging.getLogger(__name__)


def export_store(
    db_path: str, yaml_path: str, out_path: str, user_id: str | None = None
) -> dict:
    """Write every document of one user to ``out_path`` as JSON."""
    api = TrackerAPI(db_path=db_path, yaml_path=yaml_path, user_id=user_id)
    goals = api.planner.goals
    data = {
        "workouts": workouts_to_document(api.store.workouts),
        "workoutTypes": [wt.to_document() for wt in api.registry.types],
        "weeklyTemplate": {
            str(day): buckets_to_document(types)
            for day, types in api.planner.template.items()
        },
        "trainingGoals": goals.to_document() if goals else None,
    }
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    logger.info("exported %d dates to %s", len(data["workouts"]), out_path)
    return data


def backup_db(db_path: str, backup_path: str) -> None:
    shutil.copy(db_path, backup_path)


def restore_db(backup_path: str, db_path: str) -> None:
    shutil.copy(backup_path, db_path)


def compact_db(db_path: str) -> None:
    """Rebuild the database file to reclaim space left by deleted documents."""
    KeyValueRepository(db_path).vacuum()


def demo_data(db_path: str, yaml_path: str) -> bool:
    """Populate the database with the sample workouts if empty."""
    api = TrackerAPI(db_path=db_path, yaml_path=yaml_path)
    return seed(api)


def summary(
    db_path: str, yaml_path: str, date: str | None = None, user_id: str | None = None
) -> str:
    """Return a printable overview of one day's training."""
    api = TrackerAPI(db_path=db_path, yaml_path=yaml_path, user_id=user_id)
    unit = api.settings.weight_unit
    day = date or api.store.selected_date
    buckets = api.store.get_workouts_for_date(day)
    if not buckets:
        return f"{day}: no workouts"
    lines = [f"{day}:"]
    for type_id, exercises in buckets.items():
        t = WeightConverter.convert_totals(
            TotalsCalculator.compute_totals(exercises), unit
        )
        lines.append(
            f"  {api.registry.type_name(type_id)}: {t.total_exercises} exercises, "
            f"{t.total_sets} sets, {t.total_volume:g} {unit} volume, "
            f"{t.total_duration:g} min"
        )
    day_totals = WeightConverter.convert_totals(
        TotalsCalculator.compute_day_totals(buckets), unit
    )
    lines.append(
        f"  Total: {day_totals.total_exercises} exercises, {day_totals.total_sets} sets, "
        f"{day_totals.total_volume:g} {unit} volume, max {day_totals.max_weight:g} {unit}"
    )
    return "\n".join(lines)


def main() -> None:
    parser = argparse.ArgumentParser(description="Workout tracker utility commands")
    sub = parser.add_subparsers(dest="cmd", required=True)

    exp = sub.add_parser("export")
    exp.add_argument("--db", default="workout.db")
    exp.add_argument("--yaml", default="settings.yaml")
    exp.add_argument("--user", default=None)
    exp.add_argument("--out", default="workouts.json")

    bkp = sub.add_parser("backup")
    bkp.add_argument("--db", default="workout.db")
    bkp.add_argument("--out", default="backup.db")

    rst = sub.add_parser("restore")
    rst.add_argument("--in", dest="src", default="backup.db")
    rst.add_argument("--db", default="workout.db")

    vac = sub.add_parser("vacuum")
    vac.add_argument("--db", default="workout.db")

    demo = sub.add_parser("demo")
    demo.add_argument("--db", default="workout.db")
    demo.add_argument("--yaml", default="settings.yaml")

    summ = sub.add_parser("summary")
    summ.add_argument("--db", default="workout.db")
    summ.add_argument("--yaml", default="settings.yaml")
    summ.add_argument("--user", default=None)
    summ.add_argument("--date", default=None)

    args = parser.parse_args()

    settings = load_settings(getattr(args, "yaml", "settings.yaml"))
    logging.basicConfig(level=settings.log_level)

    if args.cmd == "export":
        export_store(args.db, args.yaml, args.out, args.user)
    elif args.cmd == "backup":
        backup_db(args.db, args.out)
    elif args.cmd == "restore":
        restore_db(args.src, args.db)
    elif args.cmd == "vacuum":
        compact_db(args.db)
    elif args.cmd == "demo":
        demo_data(args.db, args.yaml)
    elif args.cmd == "summary":
        print(summary(args.db, args.yaml, args.date, args.user))


if __name__ == "__main__":
    main()
