"""config.py – environment loading, connection settings, and logging."""
from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

__all__ = ["JiraSettings", "load_settings", "configure_logging"]

BASE_DIR = Path(__file__).resolve().parent

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class JiraSettings:
    """Everything the client and the workflows need, read once at start-up."""

    base_url: str
    username: str = ""
    password: str = ""
    board_id: int = 1
    project_key: str = ""
    project_number_field: str = "customfield_10022"
    release_notes_field: str = "customfield_10101"
    verify_ssl: bool = True
    timeout: int = 30
    max_workers: int = 8

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logging.getLogger("jira_chores").warning("Ignoring non-integer %s=%r", name, raw)
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in _TRUTHY


def load_settings(env_file: Optional[Path] = None) -> JiraSettings:
    """Load ``.env`` (if present) and build :class:`JiraSettings` from the environment."""
    # existing environment variables win over .env values
    load_dotenv(env_file or BASE_DIR / ".env")
    load_dotenv()

    return JiraSettings(
        base_url=os.getenv("JIRA_URL", "").strip(),
        username=os.getenv("JIRA_USERNAME", ""),
        password=os.getenv("JIRA_PASSWORD", ""),
        board_id=_env_int("JIRA_BOARD_ID", 1),
        project_key=os.getenv("JIRA_PROJECT_KEY", "").strip(),
        project_number_field=os.getenv("JIRA_PROJECT_NUMBER_FIELD", "customfield_10022"),
        release_notes_field=os.getenv("JIRA_RELEASE_NOTES_FIELD", "customfield_10101"),
        verify_ssl=_env_bool("JIRA_VERIFY_SSL", True),
        timeout=_env_int("JIRA_TIMEOUT", 30),
        max_workers=max(1, _env_int("JIRA_MAX_WORKERS", 8)),
    )


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure root logging the same way for every entry point."""
    level = (level or os.getenv("LOG_LEVEL", "WARNING")).upper()
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stdout)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    return logging.getLogger("jira_chores")
