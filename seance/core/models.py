"""Data models for seance."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

# Serialized form of an unset start time
ZERO_TIME = "0001-01-01T00:00:00Z"


@dataclass(frozen=True)
class SessionInfo:
    id: str
    path: str            # decoded project path
    file_path: str
    role: str = ""       # from the [GAS TOWN] beacon
    topic: str = ""      # from the [GAS TOWN] beacon
    start_time: Optional[datetime] = None
    summary: str = ""
    is_gastown: bool = False

    def short_id(self) -> str:
        """First 8 characters of the session id."""
        if len(self.id) > 8:
            return self.id[:8]
        return self.id

    def format_time(self) -> str:
        if self.start_time is None:
            return "unknown"
        return self.start_time.strftime("%Y-%m-%d %H:%M")

    def rig_from_path(self) -> str:
        """Rig name from the project path: the segment after ``gt/``."""
        parts = self.path.split("/")
        for i, part in enumerate(parts):
            if part == "gt" and i + 1 < len(parts):
                return parts[i + 1]
        return ""

    def display_topic(self) -> str:
        return self.topic or self.summary

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "path": self.path,
            "role": self.role,
            "topic": self.topic,
            "start_time": format_rfc3339(self.start_time),
            "summary": self.summary,
            "is_gastown": self.is_gastown,
            "file_path": self.file_path,
        }


@dataclass
class SessionFilter:
    gastown_only: bool = False
    role: str = ""        # substring, case-insensitive, matched on role or path
    rig: str = ""
    path: str = ""        # substring of the decoded project path
    limit: int = 0        # 0 = unlimited


@dataclass(frozen=True)
class BeaconMatch:
    role: str
    topic: Optional[str] = None


@dataclass(frozen=True)
class LogRecord:
    """The handful of fields discovery reads from one JSONL line."""

    type: str = ""
    session_id: str = ""
    timestamp: str = ""
    summary: str = ""
    message: Any = None  # str | dict | None, shape varies by producer


def format_rfc3339(value: Optional[datetime]) -> str:
    """RFC 3339 with trailing zeros trimmed from fractional seconds."""
    if value is None:
        return ZERO_TIME
    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    fraction = f"{value.microsecond:06d}".rstrip("0")
    if fraction:
        text += "." + fraction

    offset = value.utcoffset()
    if offset is None or offset == timedelta(0):
        return text + "Z"
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"
