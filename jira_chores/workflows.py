#!/usr/bin/env python
"""
workflows.py – Multi-step release chores built on the single-issue commands.

* **close_issues**  – close every Resolved issue of a fix-version, in parallel.
* **release_notes** – group a fix-version's issues into note categories.
* **set_version**   – stamp the active sprint's open, unversioned issues
  with a fix-version, one at a time.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from .commands import apply_transition, get_transitions, handle_error, issues_for_version
from .display import BOLD, GREEN, RED, YELLOW, paint
from .jira_client import JiraClient, JiraError
from .models import Issue, ReleaseNote, ReleaseNotes, Sprint, Version

__all__ = [
    "CLOSE_TRANSITION",
    "close_issue",
    "close_issues",
    "release_notes",
    "set_version",
]

log = logging.getLogger("jira_chores.workflows")

CLOSE_TRANSITION = "Close Issue"
CLOSED = "Closed"
RESOLVED = "Resolved"

NEW_FEATURE = "New Feature"
IMPROVEMENT = "Improvement"
BUG = "Bug"


# ---------------------------------------------------------------------------
# Close issues
# ---------------------------------------------------------------------------

def close_issue(client: JiraClient, issue: Optional[Issue]) -> Optional[str]:
    """Close one issue if its status allows it and return the report line.

    ``None`` for records without a key or status.
    """
    if issue is None or not issue.key or not issue.status:
        return None

    key = issue.key
    if issue.status == CLOSED:
        return f"{key} - {paint('Issue already Closed', YELLOW)}"
    if issue.status != RESOLVED:
        return f"{key} - " + paint("Issue not Resolved yet, can't be closed", RED)

    transitions = get_transitions(client, key) or []
    close = next((t for t in transitions if t.name == CLOSE_TRANSITION), None)
    if close is None or not close.id:
        return f"{key} - {paint('Close Transition not available, reason unknown...', RED)}"

    apply_transition(client, key, close.id)
    return f"{key} - {paint('Closed', GREEN)}"


def _close_safely(client: JiraClient, issue: Issue) -> Optional[str]:
    try:
        return close_issue(client, issue)
    except JiraError as exc:
        log.debug("Closing %s failed: %s", issue.key, exc)
        reason = exc.message or "something went wrong talking to Jira"
    except Exception as exc:  # pylint: disable=broad-except
        # malformed payloads still get a report line
        log.debug("Closing %s failed", issue.key, exc_info=True)
        reason = f"{type(exc).__name__}: {exc}"
    return f"{issue.key} - {paint('Error: ' + reason, RED)}"


def close_issues(client: JiraClient, version: str, *, max_workers: int = 8) -> List[str]:
    """Close every Resolved issue tagged with *version*.

    Each issue is handled in its own worker; a failure on one issue turns
    into that issue's report line and never cancels the others. Lines are
    printed in query order once every worker has finished.
    """
    issues = issues_for_version(client, version)
    if not issues:
        return []

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(issues)))) as pool:
        futures = [pool.submit(_close_safely, client, issue) for issue in issues]
        results = [f.result() for f in futures]

    lines = [line for line in results if line is not None]
    for line in lines:
        print(line)
    return lines


# ---------------------------------------------------------------------------
# Release notes
# ---------------------------------------------------------------------------

def release_notes(
    client: JiraClient,
    version: str,
    *,
    description_field: str = "customfield_10101",
) -> Optional[ReleaseNotes]:
    """Group the issues of *version* by type.

    Returns ``None`` after reporting a failed query or an empty version.
    """
    if not version:
        return None
    try:
        raw = client.search(f"fixVersion={version}")
    except JiraError as exc:
        detail = f"\n\t{exc.message}" if exc.message else ""
        print(paint(f"{exc}{detail}", RED))
        return None
    if not raw:
        print(f"No issues found for version {version}")
        return None

    notes = ReleaseNotes(version=version)
    buckets = {
        NEW_FEATURE: notes.new_features,
        IMPROVEMENT: notes.improved,
        BUG: notes.fixes,
    }
    for issue in (Issue.from_json(i) for i in raw):
        note = ReleaseNote(
            id=issue.key,
            type=issue.issue_type,
            description=issue.get_field(description_field),
        )
        buckets.get(issue.issue_type, notes.other).append(note)
    log.debug("Release notes for %s: %s issues", version, notes.count)
    return notes


# ---------------------------------------------------------------------------
# Set version
# ---------------------------------------------------------------------------

def _find_version(versions: List[Version], name: str) -> Optional[Version]:
    return next((v for v in versions if v.name == name), None)


def set_version(
    client: JiraClient,
    version: str,
    sprint_id: Optional[str] = None,
    *,
    board_id: int,
    project_key: str,
) -> int:
    """Give every open, unversioned issue of the active sprint *version*.

    *sprint_id* is accepted for CLI compatibility but the active sprint is
    always used. Returns the number of issues updated.
    """
    if sprint_id:
        log.debug("Ignoring sprint id %s, using the active sprint", sprint_id)

    try:
        sprints = [Sprint.from_json(s) for s in client.get_sprints(board_id, state="active", max_results=50)]
        sprints = [s for s in sprints if s.id is not None and (s.state or "active") == "active"]
    except JiraError as exc:
        handle_error(exc)
        return 0
    if not sprints:
        print(paint("Active sprint not found", RED))
        return 0
    sprint = sprints[0]
    print(paint(f"Active sprint: {sprint.name or sprint.id}", BOLD))

    try:
        issues = [Issue.from_json(i) for i in client.get_sprint_issues(board_id, sprint.id)]
        versions = [Version.from_json(v) for v in client.get_project_versions(project_key)]
    except JiraError as exc:
        handle_error(exc)
        return 0

    target = _find_version(versions, version)
    if target is None:
        # TODO: offer to create the missing version in the project
        print(paint(f'Version "{version}" not found', RED))
        return 0

    updated = 0
    for issue in issues:
        if issue.status == CLOSED or issue.fix_versions:
            print(f"{issue.key} - {paint('already has a version or is closed', YELLOW)}")
            continue
        try:
            client.update_issue(issue.key, {"fixVersions": [{"id": target.id}]})
        except JiraError as exc:
            reason = exc.message or str(exc)
            print(f"{issue.key} - {paint('Failed to update: ' + reason, RED)}")
            continue
        print(f"{issue.key} - {paint('Fix version set to ' + target.name, GREEN)}")
        updated += 1

    print(f"Updated {updated} issues out of {len(issues)} total issues.")
    return updated
