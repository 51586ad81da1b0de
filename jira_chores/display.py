"""
display — Terminal colours, timestamp formatting, and error rendering.
"""

from __future__ import annotations

import os
import sys
from datetime import datetime
from typing import Optional

# ── Colour constants ─────────────────────────────────────────────────────

BOLD      = "\033[1m"
UNDERLINE = "\033[4m"
GREEN     = "\033[32m"
YELLOW    = "\033[33m"
RED       = "\033[31m"
RESET     = "\033[0m"

GENERIC_ERROR = "Sorry, something went wrong while retrieving Jira issues:"

_TIMESTAMP_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
)


def use_colour() -> bool:
    if os.getenv("NO_COLOR"):
        return False
    return sys.stdout.isatty()


def paint(text: str, *styles: str) -> str:
    """Wrap *text* in ANSI *styles* when the terminal supports it."""
    if not styles or not use_colour():
        return text
    return f"{''.join(styles)}{text}{RESET}"


# ── Dates ────────────────────────────────────────────────────────────────

def parse_timestamp(value: str) -> Optional[datetime]:
    for fmt in _TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def format_datetime(dt: datetime) -> str:
    """``March 5, 2024, 2:07 PM``"""
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    return f"{dt.strftime('%B')} {dt.day}, {dt.year}, {hour}:{dt.minute:02d} {meridiem}"


def format_timestamp(value: Optional[str]) -> str:
    """Render a Jira timestamp in local time; unparsable values pass through."""
    if not value:
        return ""
    dt = parse_timestamp(value)
    if dt is None:
        return value
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return format_datetime(dt)


# ── Errors ───────────────────────────────────────────────────────────────

def error_message(exc: BaseException) -> str:
    """The operator-facing text for a failed Jira call."""
    msg = f"\n{GENERIC_ERROR}\n\n"
    detail = getattr(exc, "message", None)
    if detail:
        msg += f"\t{detail}\n"
    return msg


def pluralize(count: int, singular: str, plural: Optional[str] = None) -> str:
    word = singular if count == 1 else (plural or singular + "s")
    return f"{count} {word}"
