"""cli.py – Console entry‑point for the jira_chores package.

Run ``jira close 1.4.0`` to close a release's resolved issues, ``jira notes
1.4.0`` to print its release notes, or ``jira`` alone for the usage block.
"""
from __future__ import annotations

import argparse
import json
import logging
from typing import List, Optional

from .commands import print_comments, print_issue, search
from .config import JiraSettings, configure_logging, load_settings
from .display import BOLD, RED, paint
from .jira_client import JiraClient
from .models import ReleaseNote, ReleaseNotes
from .workflows import close_issues, release_notes, set_version

log = logging.getLogger("jira_chores.cli")

USAGE = (
    "\nUsage:\n"
    "\tjira issue <issue number>\n"
    "\tjira comments <issue number>\n"
    "\tjira close <version>\n"
    "\tjira notes <version> [--json]\n"
    "\tjira search '<query>'\n"
    "\tjira setVersion <version> [sprintId]\n\n"
)

NOTE_SECTIONS = (
    ("New Features", "new_features"),
    ("Improvements", "improved"),
    ("Bug Fixes", "fixes"),
    ("Other", "other"),
)


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def _print_notes(notes: ReleaseNotes) -> None:
    print(paint(f"\nRelease Notes - {notes.version}\n", BOLD))
    for title, attr in NOTE_SECTIONS:
        items: List[ReleaseNote] = getattr(notes, attr)
        if not items:
            continue
        print(paint(title, BOLD))
        for note in items:
            print(f"  {note.id} - {note.description or ''}")
        print()


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="jira", description="Release chores against a Jira instance")
    sub = p.add_subparsers(dest="cmd")

    issue = sub.add_parser("issue", help="Print the details of one issue")
    issue.add_argument("key", metavar="issue number")

    comments = sub.add_parser("comments", help="Print the comment thread of one issue")
    comments.add_argument("key", metavar="issue number")

    close = sub.add_parser("close", help="Close every Resolved issue of a fix-version")
    close.add_argument("version")

    notes = sub.add_parser("notes", help="Build release notes for a fix-version")
    notes.add_argument("version")
    notes.add_argument("--json", action="store_true", help="Print the notes as JSON")

    find = sub.add_parser("search", help="Run a JQL query and list the hits")
    find.add_argument("query")

    set_ver = sub.add_parser(
        "setVersion",
        aliases=["set-version"],
        help="Assign a fix-version to the active sprint's open, unversioned issues",
    )
    set_ver.add_argument("version")
    set_ver.add_argument("sprint_id", nargs="?", default=None, help="Accepted but ignored; the active sprint is used")

    return p


def run(args: argparse.Namespace, settings: JiraSettings, client: JiraClient) -> None:
    if args.cmd == "issue":
        print_issue(client, args.key, project_number_field=settings.project_number_field)

    elif args.cmd == "comments":
        print_comments(client, args.key)

    elif args.cmd == "close":
        close_issues(client, args.version, max_workers=settings.max_workers)

    elif args.cmd == "notes":
        notes = release_notes(client, args.version, description_field=settings.release_notes_field)
        if notes is None:
            return
        if args.json:
            print(json.dumps(notes.to_dict(), indent=2))
        else:
            _print_notes(notes)

    elif args.cmd == "search":
        search(client, args.query, echo=True)

    elif args.cmd in ("setVersion", "set-version"):
        set_version(
            client,
            args.version,
            args.sprint_id,
            board_id=settings.board_id,
            project_key=settings.project_key,
        )


def main(argv: Optional[List[str]] = None, *, client: Optional[JiraClient] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.cmd:
        print(USAGE)
        return 0

    configure_logging()
    settings = load_settings()
    if client is None:
        if not settings.is_configured:
            print(paint("JIRA_URL is not set. Export it (and JIRA_USERNAME / JIRA_PASSWORD) or add a .env file.", RED))
            return 0
        client = JiraClient.from_settings(settings)

    log.debug("Running %s against %s", args.cmd, settings.base_url or "injected client")
    run(args, settings, client)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
