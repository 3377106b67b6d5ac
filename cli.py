import argparse
import logging
import shutil
import sys

from codec import EXPORT_FILENAME, DiaryImportError
from config import YamlConfig, db_path_from_env, settings_path_from_env
from rest_api import DiaryAPI
from seed_sample_data import create_seed
from view_selector import ALL_CATEGORIES


def export_diary(db_path: str, yaml_path: str, out_path: str = EXPORT_FILENAME) -> None:
    api = DiaryAPI(db_path=db_path, yaml_path=yaml_path)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(api.export_text())


def import_diary(db_path: str, yaml_path: str, in_path: str) -> int:
    """Replace the diary with the contents of ``in_path``."""
    with open(in_path, "r", encoding="utf-8") as f:
        text = f.read()
    api = DiaryAPI(db_path=db_path, yaml_path=yaml_path)
    return api.import_text(text)


def backup_db(db_path: str, backup_path: str) -> None:
    shutil.copy(db_path, backup_path)


def restore_db(backup_path: str, db_path: str) -> None:
    shutil.copy(backup_path, db_path)


def demo_data(db_path: str, yaml_path: str) -> None:
    """Populate the diary with sample exercises if it is empty."""
    api = DiaryAPI(db_path=db_path, yaml_path=yaml_path)
    if api.diary.exercises:
        print("Diary already contains exercises")
        return
    api.diary.replace_state(create_seed(api.settings.categories))
    print("Demo data inserted")


def list_exercises(db_path: str, yaml_path: str, category: str = ALL_CATEGORIES) -> None:
    api = DiaryAPI(db_path=db_path, yaml_path=yaml_path)
    home = api.navigator.show_home(category)
    print("  ".join(f"{t['name']} ({t['count']})" for t in home["tabs"]))
    for section in home["sections"]:
        print(f"\n{section['category']}")
        for card in section["exercises"]:
            summary = card["summary"]
            print(
                f"  {card['id']}  {card['name']}: "
                f"warmup {summary['warmup']}, working {summary['working']}"
            )


def show_exercise(db_path: str, yaml_path: str, exercise_id: str) -> None:
    api = DiaryAPI(db_path=db_path, yaml_path=yaml_path)
    if api.diary.get_exercise(exercise_id) is None:
        raise ValueError(f"exercise not found: {exercise_id}")
    detail = api.navigator.show_detail(exercise_id)
    print(f"{detail['name']} ({detail['category']})")
    for entry in detail["history"]:
        print(
            f"  {entry['display_date']}  warmup {entry['warmup']}kg  "
            f"working {entry['working']}kg  [{entry['id']}]"
        )


def main() -> None:
    parser = argparse.ArgumentParser(description="Workout diary commands")
    parser.add_argument("--db", default=db_path_from_env())
    parser.add_argument("--yaml", default=settings_path_from_env())
    sub = parser.add_subparsers(dest="cmd", required=True)

    lst = sub.add_parser("list")
    lst.add_argument("--category", default=ALL_CATEGORIES)

    show = sub.add_parser("show")
    show.add_argument("exercise_id")

    add_ex = sub.add_parser("add-exercise")
    add_ex.add_argument("--name", required=True)
    add_ex.add_argument("--category", required=True)

    del_ex = sub.add_parser("delete-exercise")
    del_ex.add_argument("exercise_id")

    add_en = sub.add_parser("add-entry")
    add_en.add_argument("exercise_id")
    add_en.add_argument("--date", default=None)
    add_en.add_argument("--warmup", type=float, default=0)
    add_en.add_argument("--working", type=float, default=0)

    reo = sub.add_parser("reorder")
    reo.add_argument("moved")
    reo.add_argument("target")

    exp = sub.add_parser("export")
    exp.add_argument("--out", default=EXPORT_FILENAME)

    imp = sub.add_parser("import")
    imp.add_argument("--in", dest="src", required=True)

    bkp = sub.add_parser("backup")
    bkp.add_argument("--out", default="backup.db")

    rst = sub.add_parser("restore")
    rst.add_argument("--in", dest="src", default="backup.db")

    sub.add_parser("demo")

    theme = sub.add_parser("theme")
    theme.add_argument("value", nargs="?", choices=["light", "dark", "toggle"])

    args = parser.parse_args()

    try:
        logging.basicConfig(level=YamlConfig(args.yaml).settings().log_level)
        if args.cmd == "list":
            list_exercises(args.db, args.yaml, args.category)
        elif args.cmd == "show":
            show_exercise(args.db, args.yaml, args.exercise_id)
        elif args.cmd == "add-exercise":
            api = DiaryAPI(db_path=args.db, yaml_path=args.yaml)
            print(api.diary.create_exercise(args.name, args.category))
        elif args.cmd == "delete-exercise":
            api = DiaryAPI(db_path=args.db, yaml_path=args.yaml)
            api.diary.delete_exercise(args.exercise_id)
        elif args.cmd == "add-entry":
            api = DiaryAPI(db_path=args.db, yaml_path=args.yaml)
            print(api.diary.create_entry(args.exercise_id, args.date, args.warmup, args.working))
        elif args.cmd == "reorder":
            api = DiaryAPI(db_path=args.db, yaml_path=args.yaml)
            print(", ".join(api.categories.reorder(args.moved, args.target)))
        elif args.cmd == "export":
            export_diary(args.db, args.yaml, args.out)
        elif args.cmd == "import":
            count = import_diary(args.db, args.yaml, args.src)
            print(f"Imported {count} exercises")
        elif args.cmd == "backup":
            backup_db(args.db, args.out)
        elif args.cmd == "restore":
            restore_db(args.src, args.db)
        elif args.cmd == "demo":
            demo_data(args.db, args.yaml)
        elif args.cmd == "theme":
            api = DiaryAPI(db_path=args.db, yaml_path=args.yaml)
            if args.value == "toggle":
                print(api.theme.toggle())
            elif args.value:
                api.theme.set(args.value)
                print(args.value)
            else:
                print(api.theme.get())
    except DiaryImportError as e:
        print(f"Import rejected: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
