from jira_chores.config import JiraSettings, load_settings
from jira_chores.jira_client import JiraClient, JiraError
from jira_chores.models import Comment, Issue, Person, ReleaseNote, ReleaseNotes, Sprint, Transition, Version
from jira_chores.workflows import close_issues, release_notes, set_version

__all__ = [
    "JiraSettings",
    "load_settings",
    "JiraClient",
    "JiraError",
    "Comment",
    "Issue",
    "Person",
    "ReleaseNote",
    "ReleaseNotes",
    "Sprint",
    "Transition",
    "Version",
    "close_issues",
    "release_notes",
    "set_version",
]
