"""Shared fixtures: a recording fake Jira client and issue payload factories."""

from __future__ import annotations

import threading
from typing import Any, Optional

import pytest

from jira_chores.jira_client import JiraError


def make_issue(
    key: str,
    *,
    status: Optional[str] = "Open",
    issue_type: Optional[str] = "Bug",
    summary: str = "",
    fix_versions: tuple[str, ...] = (),
    **extra_fields: Any,
) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "summary": summary or f"Summary of {key}",
        "status": {"name": status} if status else None,
        "issuetype": {"name": issue_type} if issue_type else None,
        "fixVersions": [{"id": str(i), "name": n} for i, n in enumerate(fix_versions, start=1)],
        "labels": [],
    }
    fields.update(extra_fields)
    return {"key": key, "fields": fields}


class FakeJiraClient:
    """Stands in for JiraClient and records every call made against it."""

    def __init__(
        self,
        issues: Optional[list[dict[str, Any]]] = None,
        *,
        transitions: Optional[dict[str, list[dict[str, Any]]]] = None,
        sprints: Optional[list[dict[str, Any]]] = None,
        sprint_issues: Optional[list[dict[str, Any]]] = None,
        versions: Optional[list[dict[str, Any]]] = None,
        detail: Optional[dict[str, dict[str, Any]]] = None,
    ):
        self.issues = issues or []
        self.transitions = transitions or {}
        self.sprints = sprints or []
        self.sprint_issues = sprint_issues or []
        self.versions = versions or []
        self.detail = detail or {}
        self.calls: list[tuple[Any, ...]] = []
        self.failures: dict[str, JiraError] = {}
        self._lock = threading.Lock()

    def fail(self, method: str, error: Optional[JiraError] = None, *, key: Optional[str] = None) -> None:
        name = f"{method}:{key}" if key else method
        self.failures[name] = error or JiraError("boom", status=500, messages=["Internal server error"])

    def _record(self, method: str, *args: Any) -> None:
        with self._lock:
            self.calls.append((method, *args))
        for name in (f"{method}:{args[0]}" if args else None, method):
            if name and name in self.failures:
                raise self.failures[name]

    def calls_to(self, method: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == method]

    @property
    def mutating_calls(self) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] in ("transition_issue", "update_issue")]

    # -- JiraClient surface -------------------------------------------------

    def search(self, jql: str, **_: Any) -> list[dict[str, Any]]:
        self._record("search", jql)
        return list(self.issues)

    def get_issue(self, key: str, **_: Any) -> dict[str, Any]:
        self._record("get_issue", key)
        return self.detail[key]

    def list_transitions(self, key: str) -> list[dict[str, Any]]:
        self._record("list_transitions", key)
        return list(self.transitions.get(key, []))

    def transition_issue(self, key: str, transition_id: str) -> None:
        self._record("transition_issue", key, transition_id)

    def update_issue(self, key: str, fields: dict[str, Any]) -> None:
        self._record("update_issue", key, fields)

    def get_sprints(self, board_id: int, *, state: str = "active", max_results: int = 50) -> list[dict[str, Any]]:
        self._record("get_sprints", board_id, state, max_results)
        return list(self.sprints)

    def get_sprint_issues(self, board_id: int, sprint_id: int, **_: Any) -> list[dict[str, Any]]:
        self._record("get_sprint_issues", board_id, sprint_id)
        return list(self.sprint_issues)

    def get_project_versions(self, project_key: str) -> list[dict[str, Any]]:
        self._record("get_project_versions", project_key)
        return list(self.versions)


CLOSE_TRANSITIONS = [
    {"id": "21", "name": "Reopen Issue"},
    {"id": "701", "name": "Close Issue", "to": {"name": "Closed"}},
]


@pytest.fixture(autouse=True)
def no_colour(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NO_COLOR", "1")


@pytest.fixture
def fake_client() -> FakeJiraClient:
    return FakeJiraClient()
