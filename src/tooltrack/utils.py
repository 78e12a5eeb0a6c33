"""
Utility functions for the ToolTrack application.
"""

import os
import re
import uuid
from datetime import datetime, timezone


def get_project_root() -> str:
    """
    Get the project root directory (parent of src/tooltrack).

    Returns:
        Absolute path to the project root directory
    """
    return os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def new_record_id() -> str:
    """Return a fresh record identifier."""
    return uuid.uuid4().hex


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def parse_iso(timestamp: str) -> datetime:
    """Parse a timestamp written by utc_now_iso()."""
    return datetime.fromisoformat(timestamp)


def format_timestamp(timestamp: datetime) -> str:
    """
    Format a timestamp for table display in local time.

    Args:
        timestamp: Timezone-aware datetime

    Returns:
        Formatted string like "15 Jan 2024 10:30"
    """
    return timestamp.astimezone().strftime("%d %b %Y %H:%M")


def digits_only(value: str) -> str:
    """Strip everything but digits (phone numbers are typed with spaces and dashes)."""
    return re.sub(r"\D", "", value)


def truncate(text: str, limit: int = 50) -> str:
    """Shorten text for log lines."""
    return f"{text[:limit]}{'...' if len(text) > limit else ''}"
