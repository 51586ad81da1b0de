#!/usr/bin/env python
"""jira_client.py – Thin wrapper around the Jira REST v2 and Agile 1.0 APIs.

* Handles **pagination** transparently for search and board/sprint listings.
* Converts every transport or HTTP failure into a single :class:`JiraError`
  that carries the server's ``errorMessages`` when the response has them.
* Covers exactly the calls the chores need: search, issue look-up,
  transitions, field updates, sprints, and project versions.

The class is stateless beyond the underlying `requests.Session`, so one
instance can be shared across the worker threads of a fan-out.
"""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, Optional
from collections.abc import Sequence

import requests
from requests.auth import HTTPBasicAuth

if TYPE_CHECKING:
    from .config import JiraSettings

log = logging.getLogger(__name__)

__all__ = ["JiraClient", "JiraError"]


class JiraError(Exception):
    """A failed call to Jira.

    ``messages`` mirrors the ``errorMessages`` array Jira returns with 4xx
    responses; ``errors`` mirrors the per-field ``errors`` map.
    """

    def __init__(
        self,
        description: str,
        *,
        status: Optional[int] = None,
        messages: Optional[Sequence[str]] = None,
        errors: Optional[dict[str, str]] = None,
    ):
        super().__init__(description)
        self.status = status
        self.messages: list[str] = list(messages or [])
        self.errors: dict[str, str] = dict(errors or {})

    @property
    def message(self) -> Optional[str]:
        """First human-readable message from the response, if any."""
        if self.messages:
            return self.messages[0]
        if self.errors:
            return next(iter(self.errors.values()))
        return None

    @classmethod
    def from_response(cls, resp: requests.Response) -> "JiraError":
        try:
            body = resp.json()
        except ValueError:
            body = None
        messages: list[str] = []
        errors: dict[str, str] = {}
        if isinstance(body, dict):
            messages = [str(m) for m in body.get("errorMessages") or []]
            errors = {str(k): str(v) for k, v in (body.get("errors") or {}).items()}
        return cls(
            f"Jira returned HTTP {resp.status_code} for {resp.request.method if resp.request else 'request'} {resp.url}",
            status=resp.status_code,
            messages=messages,
            errors=errors,
        )


class JiraClient:
    """Minimal Jira REST helper.

    Parameters
    ----------
    base_url : str
        Base URL to your Jira instance, e.g. ``https://jira.example.com``.
    username, password : str
        Basic‑auth credentials (or token as *password*).
    verify_ssl : bool, default True
        Set to False to skip TLS verification (self‑signed certs, etc.).
    timeout : int, default 30
        Per‑request timeout in seconds.
    """

    SEARCH_ENDPOINT = "rest/api/2/search"
    ISSUE_ENDPOINT = "rest/api/2/issue/{key}"
    TRANSITIONS_ENDPOINT = "rest/api/2/issue/{key}/transitions"
    VERSIONS_ENDPOINT = "rest/api/2/project/{key}/versions"
    SPRINTS_ENDPOINT = "rest/agile/1.0/board/{board_id}/sprint"
    SPRINT_ISSUES_ENDPOINT = "rest/agile/1.0/board/{board_id}/sprint/{sprint_id}/issue"

    def __init__(self, base_url: str, username: str, password: str, *, verify_ssl: bool = True, timeout: int = 30):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        sess = requests.Session()
        sess.auth = HTTPBasicAuth(username, password)
        sess.headers.update({"Content-Type": "application/json", "Accept": "application/json"})
        sess.verify = verify_ssl
        self.session = sess

    @classmethod
    def from_settings(cls, settings: "JiraSettings") -> "JiraClient":
        return cls(
            settings.base_url,
            settings.username,
            settings.password,
            verify_ssl=settings.verify_ssl,
            timeout=settings.timeout,
        )

    # ------------------------------------------------------------------
    # Internal request helpers
    # ------------------------------------------------------------------

    def _request(self, method: str, endpoint: str, *, params: Optional[dict[str, Any]] = None, json: Any = None) -> Any:
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        log.debug("%s %s params=%s", method, url, params)
        try:
            resp = self.session.request(method, url, params=params, json=json, timeout=self.timeout)
        except requests.RequestException as exc:
            raise JiraError(f"Could not reach Jira at {url}: {exc}") from exc

        if not resp.ok:
            raise JiraError.from_response(resp)
        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            # some proxies answer 200 with an HTML login page
            log.debug("Non-JSON body from %s (first 200 chars): %s", url, resp.text[:200])
            return None

    def _get(self, endpoint: str, **params: Any) -> Any:
        return self._request("GET", endpoint, params=params or None)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(self, jql: str, *, batch: int = 50) -> list[dict[str, Any]]:
        """Return every issue matching *jql*, following ``startAt`` pages in order."""
        start_at = 0
        total = sys.maxsize
        issues: list[dict[str, Any]] = []
        while start_at < total:
            params: dict[str, Any] = {
                "jql": jql,
                "startAt": start_at,
                "maxResults": min(int(batch), 1000),
            }
            page = self._get(self.SEARCH_ENDPOINT, **params) or {}
            total = int(page.get("total", 0))
            chunk: list[dict[str, Any]] = page.get("issues", []) or []
            log.debug("Fetched %s/%s issues for %r", start_at + len(chunk), total, jql)

            if not chunk:
                break
            issues.extend(chunk)
            start_at += len(chunk)
        return issues

    # ------------------------------------------------------------------
    # Issues & transitions
    # ------------------------------------------------------------------

    def get_issue(self, key: str) -> dict[str, Any]:
        """Fetch a single issue by key (comments are included in ``fields.comment``)."""
        return self._get(self.ISSUE_ENDPOINT.format(key=key)) or {}

    def list_transitions(self, key: str) -> list[dict[str, Any]]:
        """Transitions available to the current user for *key* in its current status."""
        data = self._get(self.TRANSITIONS_ENDPOINT.format(key=key)) or {}
        return data.get("transitions", []) or []

    def transition_issue(self, key: str, transition_id: str) -> None:
        self._request(
            "POST",
            self.TRANSITIONS_ENDPOINT.format(key=key),
            json={"transition": {"id": str(transition_id)}},
        )

    def update_issue(self, key: str, fields: dict[str, Any]) -> None:
        self._request("PUT", self.ISSUE_ENDPOINT.format(key=key), json={"fields": fields})

    # ------------------------------------------------------------------
    # Boards, sprints & versions
    # ------------------------------------------------------------------

    def get_sprints(self, board_id: int, *, state: str = "active", max_results: int = 50) -> list[dict[str, Any]]:
        data = self._get(
            self.SPRINTS_ENDPOINT.format(board_id=board_id),
            state=state,
            maxResults=max_results,
        ) or {}
        return data.get("values", []) or []

    def get_sprint_issues(self, board_id: int, sprint_id: int, *, batch: int = 50) -> list[dict[str, Any]]:
        """All issues of *sprint_id* on *board_id*, in board order."""
        endpoint = self.SPRINT_ISSUES_ENDPOINT.format(board_id=board_id, sprint_id=sprint_id)
        start_at = 0
        total = sys.maxsize
        issues: list[dict[str, Any]] = []
        while start_at < total:
            page = self._get(endpoint, startAt=start_at, maxResults=batch) or {}
            total = int(page.get("total", 0))
            chunk = page.get("issues", []) or []
            if not chunk:
                break
            issues.extend(chunk)
            start_at += len(chunk)
        log.debug("Sprint %s on board %s has %s issues", sprint_id, board_id, len(issues))
        return issues

    def get_project_versions(self, project_key: str) -> list[dict[str, Any]]:
        return self._get(self.VERSIONS_ENDPOINT.format(key=project_key)) or []
