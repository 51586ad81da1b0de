"""Parsing of Jira payloads into the package's dataclasses."""

from __future__ import annotations

from jira_chores.models import Issue, ReleaseNote, ReleaseNotes, Sprint, Transition, Version


def test_issue_from_full_payload() -> None:
    issue = Issue.from_json(
        {
            "key": "P-1",
            "fields": {
                "summary": "Crash",
                "status": {"name": "Resolved"},
                "issuetype": {"name": "Bug"},
                "assignee": {"displayName": "Ada", "emailAddress": "ada@example.com"},
                "fixVersions": [{"id": "1", "name": "1.4.0"}, "garbage"],
                "labels": ["ui"],
                "comment": {"comments": [{"author": {"displayName": "Sam"}, "body": "ok", "created": "2024-01-01T00:00:00.000+0000"}]},
                "customfield_10101": "Release text",
            },
        }
    )
    assert issue.status == "Resolved"
    assert issue.issue_type == "Bug"
    assert issue.assignee is not None and issue.assignee.email == "ada@example.com"
    assert issue.fix_versions == ["1.4.0"]
    assert issue.comments[0].author is not None and issue.comments[0].author.display_name == "Sam"
    assert issue.get_field("customfield_10101") == "Release text"
    assert issue.get_field("customfield_99999") is None


def test_issue_tolerates_nulls() -> None:
    issue = Issue.from_json({"key": "P-2", "fields": {"status": None, "issuetype": None, "assignee": None, "comment": None}})
    assert issue.status is None
    assert issue.issue_type is None
    assert issue.assignee is None
    assert issue.comments == []
    assert issue.fix_versions == []


def test_small_records() -> None:
    assert Transition.from_json({"id": 5, "name": "Close Issue"}) == Transition(id="5", name="Close Issue")
    assert Version.from_json({"id": 101, "name": "1.4.0"}) == Version(id="101", name="1.4.0")
    assert Sprint.from_json({"id": 77, "state": "active"}).state == "active"


def test_release_notes_helpers() -> None:
    notes = ReleaseNotes(version="1.0")
    assert notes.is_empty
    notes.other.append(ReleaseNote(id="P-1", type=None, description=None))
    assert not notes.is_empty
    assert notes.count == 1
    assert notes.to_dict()["other"] == [{"id": "P-1", "type": None, "description": None}]


def test_nameless_fix_versions_are_dropped() -> None:
    issue = Issue.from_json({"key": "P-3", "fields": {"fixVersions": [{"id": "1"}, {"id": "2", "name": None}, {"id": "3", "name": "2.0"}]}})
    assert issue.fix_versions == ["2.0"]


def test_sprint_without_id() -> None:
    sprint = Sprint.from_json({"name": "Broken", "state": "active"})
    assert sprint.id is None
    assert sprint.name == "Broken"
