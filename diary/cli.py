# command line access to the diary
# show, write, delete, search, recent, calendar and export against the local store

import argparse
import logging
import sys
import datetime as dt
from pathlib import Path
from typing import Optional

from diary.config import settings
from diary.dependencies import open_store
from diary.models.entry import Entry, Mood
from diary.services.calendar import month_grid, shift_date
from diary.services.entry_store import EntryStore, parse_date
from diary.services.search import build_results
from diary.services.storage import StorageUnavailable

logger = logging.getLogger(__name__)


def _format_entry(entry: Entry) -> str:
    mood = f" [{entry.mood.value}]" if entry.mood else ""
    lines = [f"{entry.date.isoformat()}  {entry.display_title}{mood}", f"id: {entry.id}"]
    if entry.content:
        lines.extend(["", entry.content])
    return "\n".join(lines)


def _format_month(store: EntryStore, year: int, month: int) -> str:
    grid = month_grid(year, month, store.dates_with_entries(year, month))
    lines = [grid.label, " ".join(f"{d:>3}" for d in grid.week_days)]
    row = []
    for cell in grid.days:
        if cell is None:
            row.append("   ")
        else:
            row.append(f"{cell.day:>2}{'*' if cell.has_entry else ' '}")
        if len(row) == 7:
            lines.append(" ".join(row))
            row = []
    if row:
        lines.append(" ".join(row))
    return "\n".join(lines)


def export_to(store: EntryStore, out_dir: Path, today: Optional[dt.date] = None) -> Path:
    """write the export file into out_dir and return its path"""
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / store.export_filename(today)
    path.write_text(store.export_all() + "\n", encoding="utf-8")
    logger.info(f"Exported {len(store)} entries to {path}")
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="diary")
    parser.add_argument("--data-dir", type=Path, default=None, help="storage directory")
    sub = parser.add_subparsers(dest="command")

    show = sub.add_parser("show")
    show.add_argument("date", nargs="?", default=None, help="YYYY-MM-DD, defaults to today")
    step = show.add_mutually_exclusive_group()
    step.add_argument("--prev", action="store_const", const=-1, dest="offset", default=0, help="the day before DATE")
    step.add_argument("--next", action="store_const", const=1, dest="offset", default=0, help="the day after DATE")

    write = sub.add_parser("write")
    write.add_argument("date")
    write.add_argument("--title", default="")
    write.add_argument("--content", default="")
    write.add_argument("--mood", choices=[m.value for m in Mood], default=None)

    delete = sub.add_parser("delete")
    delete.add_argument("entry_id")

    search = sub.add_parser("search")
    search.add_argument("query")

    recent = sub.add_parser("recent")
    recent.add_argument("--limit", type=int, default=settings.RECENT_ENTRIES_LIMIT)

    cal = sub.add_parser("calendar")
    cal.add_argument("year", type=int)
    cal.add_argument("month", type=int)

    export = sub.add_parser("export")
    export.add_argument("--out", type=Path, default=Path("."))

    return parser


def run(args: argparse.Namespace, store: EntryStore) -> int:
    if args.command == "show":
        date = parse_date(args.date) if args.date else dt.date.today()
        date = shift_date(date, args.offset).isoformat()
        entry = store.find_by_date(date)
        if entry is None:
            print(f"No entry for {date}")
            return 1
        print(_format_entry(entry))

    elif args.command == "write":
        entry = store.upsert(args.date, title=args.title, content=args.content, mood=args.mood)
        print(f"Saved entry {entry.id} for {entry.date.isoformat()}")

    elif args.command == "delete":
        if store.delete(args.entry_id):
            print(f"Deleted entry {args.entry_id}")
        else:
            print(f"No entry with id {args.entry_id}")

    elif args.command == "search":
        response = build_results(store.query(args.query), args.query, settings.EXCERPT_LENGTH)
        print(response.summary)
        for result in response.results:
            print(f"  {result.entry.date.isoformat()}  {result.display_title} ({result.character_count} characters)")

    elif args.command == "recent":
        entries = store.recent_by_date(args.limit)
        if not entries:
            print("No entries yet")
        for entry in entries:
            print(f"  {entry.date.isoformat()}  {entry.display_title}")

    elif args.command == "calendar":
        print(_format_month(store, args.year, args.month))

    elif args.command == "export":
        if len(store) == 0:
            print("No entries to export!")
            return 1
        print(f"Exported to {export_to(store, args.out)}")

    return 0


def main(argv=None) -> int:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    store = open_store(args.data_dir)
    try:
        return run(args, store)
    except StorageUnavailable as e:
        print(f"Warning: storage unavailable, entry may not be saved ({e})", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
