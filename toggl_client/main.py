import argparse
import json
import logging
from collections.abc import Sequence
from datetime import date
from datetime import datetime
from datetime import timedelta
from datetime import timezone

import tabulate

from toggl_client.config import Config
from toggl_client.config import get_api_token
from toggl_client.exceptions import TogglAPIException
from toggl_client.models import TimeEntry
from toggl_client.session import Session

logging.basicConfig(
    level=logging.INFO,
    format="[%(levelname)s] %(message)s",
)

logger = logging.getLogger("toggl-client")

TODAY = date.today()


def format_duration(entry: TimeEntry) -> str:
    seconds = entry.duration
    if entry.is_running and entry.start is not None:
        seconds = int((datetime.now(timezone.utc) - entry.start).total_seconds())
    return str(timedelta(seconds=seconds))


def format_start(entry: TimeEntry) -> str:
    if entry.start is None:
        return ""
    return entry.start.astimezone().strftime("%d/%m/%Y %H:%M")


def show_account(session: Session) -> int:
    account = session.get_account()
    print("account:", json.dumps(account.to_dict(), indent=4))
    return 0


def show_projects(session: Session, workspace: int) -> int:
    projects = session.get_projects(workspace)
    table_data = [
        (project.id, project.name, "yes" if project.is_active else "no")
        for project in projects
    ]
    print(tabulate.tabulate(table_data, headers=["ID", "Name", "Active"]))
    return 0


def show_entries(session: Session, days: int) -> int:
    end_date = datetime.now(timezone.utc)
    start_date = end_date - timedelta(days=days)
    entries = session.get_time_entries(start_date, end_date)
    table_data = [
        (
            entry.id,
            format_start(entry),
            entry.description,
            format_duration(entry),
            ", ".join(entry.tags),
        )
        for entry in entries
    ]
    headers = ["ID", "Start", "Description", "Duration", "Tags"]
    print(tabulate.tabulate(table_data, headers=headers))
    return 0


def show_current(session: Session) -> int:
    entry = session.get_current_time_entry()
    if entry is None:
        print("No timer running")
    else:
        print(f"{entry.description} ({format_duration(entry)}) [{entry.id}]")
    return 0


def start(
    session: Session, description: str, workspace: int, project: int | None
) -> int:
    entry = session.start_time_entry(description, workspace, project_id=project)
    logger.info(f"Started timer [{entry.id}] {entry.description}")
    return 0


def stop(session: Session) -> int:
    entry = session.get_current_time_entry()
    if entry is None:
        logger.error("No timer running")
        return 1
    entry = session.stop_time_entry(entry)
    logger.info(f"Stopped timer [{entry.id}] after {format_duration(entry)}")
    return 0


def show_summary(session: Session, workspace: int, since: str, until: str) -> int:
    report = session.get_summary_report(workspace, since, until)
    table_data = [
        (row.title.project, row.title.client, timedelta(milliseconds=row.time))
        for row in report.data
    ]
    print(tabulate.tabulate(table_data, headers=["Project", "Client", "Time"]))
    print(f"\nTotal: {timedelta(milliseconds=report.total_grand)}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Toggl Command Line Tool")
    parser.add_argument(
        "--debug",
        "--verbose",
        "-v",
        help="show debug messaging",
        action="store_true",
    )
    parser.add_argument(
        "-c",
        "--config",
        help="path to a JSON config file",
    )
    parser.add_argument(
        "--token",
        help="API token (defaults to the TOGGL_API_TOKEN environment variable)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("account", help="dump account information as JSON")

    projects_parser = subparsers.add_parser("projects", help="list projects")
    projects_parser.add_argument("--workspace", type=int, required=True)

    entries_parser = subparsers.add_parser("entries", help="list time entries")
    entries_parser.add_argument(
        "--days",
        type=int,
        default=7,
        metavar="INT",
        help="how many days back to list (%(default)s)",
    )

    subparsers.add_parser("current", help="show the running timer")

    start_parser = subparsers.add_parser("start", help="start a timer")
    start_parser.add_argument("description")
    start_parser.add_argument("--workspace", type=int, required=True)
    start_parser.add_argument("--project", type=int)

    subparsers.add_parser("stop", help="stop the running timer")

    summary_parser = subparsers.add_parser("summary", help="show a summary report")
    summary_parser.add_argument("--workspace", type=int, required=True)
    summary_parser.add_argument(
        "--since",
        default=TODAY.replace(day=1).isoformat(),
        help="report start date (%(default)s)",
    )
    summary_parser.add_argument(
        "--until",
        default=TODAY.isoformat(),
        help="report end date (%(default)s)",
    )

    args = parser.parse_args(argv)

    if args.debug:
        logger.setLevel(logging.DEBUG)

    try:
        config = Config.from_file(args.config) if args.config else Config()
        if args.token:
            config.api_token = args.token
        config.verbose = config.verbose or args.debug

        with Session.from_token(get_api_token(config), config) as session:
            if args.command == "account":
                return show_account(session)
            elif args.command == "projects":
                return show_projects(session, args.workspace)
            elif args.command == "entries":
                return show_entries(session, args.days)
            elif args.command == "current":
                return show_current(session)
            elif args.command == "start":
                return start(session, args.description, args.workspace, args.project)
            elif args.command == "stop":
                return stop(session)
            else:
                return show_summary(session, args.workspace, args.since, args.until)
    except TogglAPIException as e:
        logger.error(e)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
