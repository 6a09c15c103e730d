"""Console entry point for EquipTrack."""

import argparse
import asyncio
import sys

from EquipTrack.app import create_app


def _print_summary(dashboard, t) -> None:
    summaries = dashboard["summaries"]
    if not summaries:
        print(t("noEquipment"))
        return

    print(t("statusSummary"))
    for s in summaries:
        print(
            f"  {s.plant.value:<6} {t('available')}: {s.available}  {t('inOperation')}: {s.in_operation}  "
            f"{t('notAvailable')}: {s.not_available}  {t('inWorkshop')}: {s.in_workshop}  "
            f"{t('total')}: {s.total}"
        )


async def run(args) -> int:
    app = await create_app()
    t = app.equipment.translator.t

    if args.command == "summary":
        dashboard = await app.equipment.load_dashboard()
        _print_summary(dashboard, t)
        if dashboard["overdue_count"]:
            print(f"[WARN] {dashboard['overdue_count']} overdue")
        return 0

    if args.command == "export":
        result = await app.equipment.export_equipment(fmt=args.format)
        print(("[OK] " if result["success"] else "[ERROR] ") + result["message"])
        if result["success"]:
            print(f"  {result['path']}")
        return 0 if result["success"] else 1

    if args.command == "history":
        for entry in await app.equipment.get_change_logs(args.equipment_id):
            print(f"{entry.timestamp}  {entry.action.value:<13} {entry.equipment_id}  {entry.changes}")
        return 0

    if args.command == "language":
        await app.set_language(args.language)
        print(f"[OK] {args.language}")
        return 0

    return 1


def main() -> None:
    """Run the EquipTrack console."""
    parser = argparse.ArgumentParser(prog="equiptrack", description="Equipment inventory tracking")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("summary", help="Status summary per plant and overdue check")

    export_parser = sub.add_parser("export", help="Export active equipment")
    export_parser.add_argument("--format", choices=["csv", "xlsx"], default="csv")

    history_parser = sub.add_parser("history", help="Show the change log")
    history_parser.add_argument("equipment_id", nargs="?")

    language_parser = sub.add_parser("language", help="Change the saved language")
    language_parser.add_argument("language", choices=["en", "es"])

    sys.exit(asyncio.run(run(parser.parse_args())))


if __name__ == "__main__":
    main()
