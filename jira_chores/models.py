#!/usr/bin/env python
"""models.py – lightweight data structures used across the package."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

__all__ = [
    "Person",
    "Comment",
    "Issue",
    "Transition",
    "Version",
    "Sprint",
    "ReleaseNote",
    "ReleaseNotes",
]


def _name(o: Any, key: str = "name") -> Optional[str]:
    return o.get(key) if isinstance(o, dict) else None


@dataclass(frozen=True)
class Person:
    display_name: str
    email: Optional[str] = None

    @classmethod
    def from_json(cls, data: Optional[dict[str, Any]]) -> Optional["Person"]:
        if not isinstance(data, dict):
            return None
        return cls(
            display_name=data.get("displayName") or data.get("name") or "",
            email=data.get("emailAddress"),
        )


@dataclass(frozen=True)
class Comment:
    author: Optional[Person]
    created: Optional[str]
    body: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Comment":
        return cls(
            author=Person.from_json(data.get("author")),
            created=data.get("created"),
            body=data.get("body") or "",
        )


@dataclass
class Issue:
    """A Jira issue as seen by the chores; Jira stays the source of truth."""

    key: str
    summary: str = ""
    status: Optional[str] = None
    issue_type: Optional[str] = None
    description: Optional[str] = None
    assignee: Optional[Person] = None
    created: Optional[str] = None
    fix_versions: List[str] = field(default_factory=list)
    labels: List[str] = field(default_factory=list)
    comments: List[Comment] = field(default_factory=list)
    raw_fields: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_json(cls, issue: dict[str, Any]) -> "Issue":
        f = issue.get("fields") or {}
        comment_block = f.get("comment") or {}
        return cls(
            key=issue.get("key", ""),
            summary=f.get("summary") or "",
            status=_name(f.get("status")),
            issue_type=_name(f.get("issuetype")),
            description=f.get("description"),
            assignee=Person.from_json(f.get("assignee")),
            created=f.get("created"),
            fix_versions=[
                v["name"] for v in f.get("fixVersions") or [] if isinstance(v, dict) and v.get("name")
            ],
            labels=list(f.get("labels") or []),
            comments=[Comment.from_json(c) for c in comment_block.get("comments") or []],
            raw_fields=f,
        )

    def get_field(self, field_id: str) -> Any:
        """Value of a (custom) field by id, ``None`` when absent."""
        return self.raw_fields.get(field_id)


@dataclass(frozen=True)
class Transition:
    id: str
    name: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Transition":
        return cls(
            id=str(data.get("id") or ""),
            name=data.get("name") or "",
        )


@dataclass(frozen=True)
class Version:
    id: str
    name: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Version":
        return cls(
            id=str(data.get("id") or ""),
            name=data.get("name") or "",
        )


@dataclass(frozen=True)
class Sprint:
    id: Optional[int]
    name: str = ""
    state: Optional[str] = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Sprint":
        return cls(id=data.get("id"), name=data.get("name") or "", state=data.get("state"))


@dataclass(frozen=True)
class ReleaseNote:
    id: str
    type: Optional[str]
    description: Any


@dataclass
class ReleaseNotes:
    """Issues of one fix-version split into the four note categories."""

    version: str
    new_features: List[ReleaseNote] = field(default_factory=list)
    improved: List[ReleaseNote] = field(default_factory=list)
    fixes: List[ReleaseNote] = field(default_factory=list)
    other: List[ReleaseNote] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.new_features or self.improved or self.fixes or self.other)

    @property
    def count(self) -> int:
        return len(self.new_features) + len(self.improved) + len(self.fixes) + len(self.other)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "newFeatures": [asdict(n) for n in self.new_features],
            "improved": [asdict(n) for n in self.improved],
            "fixes": [asdict(n) for n in self.fixes],
            "other": [asdict(n) for n in self.other],
        }
