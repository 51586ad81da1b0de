#!/usr/bin/env python
"""commands.py – single-issue commands and the shared issue query.

Every handler catches :class:`JiraError`, prints a readable message, and
returns an empty result so the CLI always finishes.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from .display import BOLD, GREEN, RED, UNDERLINE, YELLOW, error_message, format_timestamp, paint, pluralize
from .jira_client import JiraClient, JiraError
from .models import Comment, Issue, Transition

__all__ = [
    "handle_error",
    "search",
    "issues_for_version",
    "get_sprint_issues",
    "print_issue",
    "get_comments",
    "print_comments",
    "get_transitions",
    "apply_transition",
]

log = logging.getLogger("jira_chores.commands")


def handle_error(exc: JiraError) -> None:
    log.debug("Jira call failed: %s", exc)
    print(paint(error_message(exc), RED))


# ---------------------------------------------------------------------------
# Issue query
# ---------------------------------------------------------------------------

def search(client: JiraClient, query: Optional[str], *, echo: bool = False) -> List[Issue]:
    """Run a JQL *query*; ``[]`` for a blank query or a failed search.

    With *echo* each hit is printed as ``KEY - summary``.
    """
    if not query:
        return []
    try:
        raw = client.search(query)
    except JiraError as exc:
        handle_error(exc)
        return []

    issues = [Issue.from_json(i) for i in raw]
    if echo:
        for issue in issues:
            print(f"{issue.key} - {issue.summary}")
    return issues


def issues_for_version(client: JiraClient, version: Optional[str]) -> List[Issue]:
    if not version:
        return []
    return search(client, f"fixVersion={version}")


def get_sprint_issues(client: JiraClient, sprint: str) -> List[Issue]:
    return search(client, f"sprint={sprint}")


# ---------------------------------------------------------------------------
# Issue detail & comments
# ---------------------------------------------------------------------------

def _fetch_issue(client: JiraClient, key: str) -> Optional[Issue]:
    try:
        return Issue.from_json(client.get_issue(key))
    except JiraError as exc:
        handle_error(exc)
        return None


def _title(issue: Issue) -> str:
    return paint(f"{issue.key} - {issue.summary}", UNDERLINE, GREEN)


def print_issue(client: JiraClient, key: str, *, project_number_field: str = "customfield_10022") -> Optional[Issue]:
    issue = _fetch_issue(client, key)
    if issue is None:
        return None

    assignee = ""
    if issue.assignee:
        assignee = f"{issue.assignee.display_name} - {issue.assignee.email or ''}"
    project_number = issue.get_field(project_number_field)

    print("\n" + _title(issue) + "\n")
    print(paint("Type: ", BOLD) + (issue.issue_type or ""))
    print(paint("Assignee: ", BOLD) + assignee)
    print(paint("Status: ", BOLD) + (issue.status or ""))
    print(paint("Created: ", BOLD) + format_timestamp(issue.created))
    print(paint("Fix Version: ", BOLD) + ", ".join(issue.fix_versions))
    print(paint("Project Number: ", BOLD) + ("" if project_number is None else str(project_number)))
    print(paint("Labels: ", BOLD) + ",".join(issue.labels))
    print(paint("\nDescription:\n", BOLD) + paint(issue.description or "", YELLOW))

    count = len(issue.comments)
    print("\n" + pluralize(count, "Comment") + "\n")
    return issue


def get_comments(client: JiraClient, key: str) -> List[Comment]:
    issue = _fetch_issue(client, key)
    if issue is None:
        return []
    print(_title(issue) + "\n\n")
    return issue.comments


def print_comments(client: JiraClient, key: str) -> List[Comment]:
    comments = get_comments(client, key)
    for c in comments:
        name = c.author.display_name if c.author else ""
        email = c.author.email if c.author else ""
        author = f"{name} ({email or ''})"
        print(paint(f"{author} - {format_timestamp(c.created)}", UNDERLINE, YELLOW))
        print(c.body)
        print("\n")
    return comments


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def get_transitions(client: JiraClient, key: Optional[str]) -> Optional[List[Transition]]:
    """Transitions currently available for *key*; ``None`` without a key.

    Errors propagate so callers can attribute them to the issue.
    """
    if not key:
        return None
    return [Transition.from_json(t) for t in client.list_transitions(key)]


def apply_transition(client: JiraClient, key: str, transition_id: str) -> None:
    # TODO: re-read the issue afterwards and confirm the status actually changed
    log.debug("Applying transition %s to %s", transition_id, key)
    client.transition_issue(key, transition_id)
