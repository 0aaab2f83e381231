from __future__ import annotations

import argparse
import logging
import sys
from datetime import date, datetime
from typing import List, Optional, Sequence

from .config import get_settings
from .domain import CalendarEngineError, EventNotFoundError, MonthGrid, StoreCorruptedError
from .engine.clock import resolve_time_zone
from .engine.formatting import format_interval, format_month_title
from .logging import configure_logging
from .services import CalendarService, DayAgenda, ServiceContext

logger = logging.getLogger(__name__)

WEEKDAY_HEADER = ("Su", "Mo", "Tu", "We", "Th", "Fr", "Sa")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lazy Calendar command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    month_parser = subparsers.add_parser("month", help="Show the day grid of a month.")
    month_parser.add_argument("year", type=int, nargs="?")
    month_parser.add_argument("month", type=int, nargs="?")

    day_parser = subparsers.add_parser("day", help="List the events of a day.")
    day_parser.add_argument("day", type=date.fromisoformat, nargs="?", help="YYYY-MM-DD, defaults to today.")

    add_parser = subparsers.add_parser("add", help="Create an event.")
    add_parser.add_argument("name")
    add_parser.add_argument("start", help="ISO datetime, local time zone unless an offset is given.")
    add_parser.add_argument("end", help="ISO datetime, local time zone unless an offset is given.")
    add_parser.add_argument("--alarm", action="store_true", help="Enable the alarm (at the start by default).")
    add_parser.add_argument("--alarm-time", help="ISO datetime of the alarm.")

    delete_parser = subparsers.add_parser("delete", help="Delete an event by id.")
    delete_parser.add_argument("event_id")

    return parser


def render_month(grid: MonthGrid) -> str:
    lines: List[str] = [format_month_title(grid.year, grid.month).center(20).rstrip(), " ".join(WEEKDAY_HEADER)]
    for week in grid.weeks():
        if all(cell is None for cell in week):
            continue
        lines.append(" ".join("  " if cell is None else f"{cell:2d}" for cell in week).rstrip())
    return "\n".join(lines)


def render_agenda(agenda: DayAgenda, time_zone: str) -> str:
    header = agenda.day.isoformat()
    if not agenda.events:
        return f"{header}\n  No events."
    lines = [header]
    for event in agenda.events:
        interval = format_interval(
            event.date_start,
            event.date_end,
            event.date_start_time_zone,
            event.date_end_time_zone,
            time_zone,
        )
        alarm = " [alarm]" if event.alarm else ""
        lines.append(f"  {event.id}  {event.name or 'Untitled'}  {interval}{alarm}")
    return "\n".join(lines)


def _parse_local(value: str, time_zone: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=resolve_time_zone(time_zone))
    return parsed


def run(args: argparse.Namespace, service: CalendarService) -> str:
    time_zone = service.context.time_zone
    if args.command == "month":
        if args.year is not None and args.month is not None:
            return render_month(service.go_to_month(args.year, args.month))
        return render_month(service.month_grid())
    if args.command == "day":
        target = args.day or date(service.cursor.year, service.cursor.month, service.cursor.day)
        return render_agenda(service.agenda_for(target), time_zone)
    if args.command == "add":
        start = _parse_local(args.start, time_zone)
        end = _parse_local(args.end, time_zone)
        if end < start:
            raise CalendarEngineError("The event cannot end before it starts.")
        alarm_time = _parse_local(args.alarm_time, time_zone) if args.alarm_time else None
        event = service.create_event(args.name, start, end, alarm=args.alarm or alarm_time is not None, alarm_time=alarm_time)
        return f"Created {event.id}"
    if args.command == "delete":
        if not service.delete_event(args.event_id):
            raise EventNotFoundError(args.event_id)
        return f"Deleted {args.event_id}"
    raise ValueError(f"Unknown command: {args.command}")  # pragma: no cover - argparse enforces choices


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = get_settings()
    configure_logging(settings.logging)
    parser = build_parser()
    args = parser.parse_args(argv)
    logger.debug("Running %s", args.command)

    try:
        service = CalendarService(ServiceContext(settings))
        print(run(args, service))
    except (CalendarEngineError, EventNotFoundError, StoreCorruptedError, ValueError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
