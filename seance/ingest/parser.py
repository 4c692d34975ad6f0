"""
Session parser — extract discovery metadata from Claude Code JSONL files.

Only a prefix of each file is usually read: the summary record sits on
line 1, and the first user turn carries both the start timestamp and the
[GAS TOWN] beacon.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..core.models import BeaconMatch, LogRecord, SessionInfo

logger = logging.getLogger(__name__)

SESSION_SUFFIX = ".jsonl"

# [GAS TOWN] role • topic • timestamp  (topic and timestamp optional)
BEACON_PATTERN = re.compile(
    r"\[GAS TOWN\]\s+([^\s•]+)\s*(?:•\s*([^•]+?)\s*)?(?:•\s*(\S+))?\s*$"
)

# Stop once beacon and start time are known and this many lines were read
EARLY_EXIT_LINES = 20

_READ_BUFFER_BYTES = 64 * 1024
_MAX_LINE_BYTES = 1024 * 1024

# JSON key -> LogRecord attribute, per line kind
_HEADER_FIELDS = {
    "type": "type",
    "summary": "summary",
}
_ENTRY_FIELDS = {
    "type": "type",
    "sessionId": "session_id",
    "timestamp": "timestamp",
}

# RFC 3339 requires a time part; date-only values are rejected
_TIME_SEPARATOR = re.compile(r"^\d{4}-\d{2}-\d{2}[Tt ]")


# ── Beacon ────────────────────────────────────────────────────────────────────

def match_beacon(text: str) -> Optional[BeaconMatch]:
    """Find a [GAS TOWN] beacon at the end of ``text``.

    The beacon may be preceded by arbitrary text but nothing may follow it.
    Role is required; topic and trailing timestamp are optional.
    """
    if not text:
        return None
    m = BEACON_PATTERN.search(text)
    if not m:
        return None
    role, topic, _timestamp = m.groups()
    if topic is not None:
        topic = topic.strip() or None
    return BeaconMatch(role=role, topic=topic)


# ── Record decoding ───────────────────────────────────────────────────────────

def _load_object(line: Union[bytes, str]) -> Optional[Dict[str, Any]]:
    # Invalid UTF-8 becomes U+FFFD instead of failing the line
    if isinstance(line, bytes):
        line = line.decode("utf-8", errors="replace")
    try:
        data = json.loads(line)
    except (ValueError, RecursionError):
        return None
    if not isinstance(data, dict):
        return None
    return data


def _string_fields(data: Dict[str, Any], fields: Dict[str, str]) -> Optional[Dict[str, str]]:
    values = {}
    for key, attr in fields.items():
        value = data.get(key)
        if value is None:
            values[attr] = ""
        elif isinstance(value, str):
            values[attr] = value
        else:
            return None
    return values


def decode_header(line: Union[bytes, str]) -> Optional[LogRecord]:
    """Decode line 1 of a session file, which may be a summary record."""
    data = _load_object(line)
    if data is None:
        return None
    values = _string_fields(data, _HEADER_FIELDS)
    if values is None:
        return None
    return LogRecord(**values)


def decode_record(line: Union[bytes, str]) -> Optional[LogRecord]:
    """Decode one JSONL entry line. Returns None for lines discovery cannot use."""
    data = _load_object(line)
    if data is None:
        return None
    values = _string_fields(data, _ENTRY_FIELDS)
    if values is None:
        return None
    return LogRecord(message=data.get("message"), **values)


def extract_message_content(message: Any) -> str:
    """Text of a message payload.

    Tries the plain-string shape first, then ``{"role": ..., "content": "..."}``.
    Anything else (including list-of-blocks content) yields an empty string.
    """
    if isinstance(message, str):
        return message
    if isinstance(message, dict):
        content = message.get("content")
        if isinstance(content, str):
            return content
    return ""


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp. Naive values are taken as UTC."""
    if not value or not _TIME_SEPARATOR.match(value):
        return None
    try:
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


# ── Session scan ──────────────────────────────────────────────────────────────

def session_id_from_filename(session_file: Path) -> str:
    name = session_file.name
    if name.endswith(SESSION_SUFFIX):
        return name[: -len(SESSION_SUFFIX)]
    return name


def parse_session(session_file: Path, project_path: str) -> Optional[SessionInfo]:
    """
    Scan a session file and build its SessionInfo.

    Args:
        session_file: Path to the JSONL file
        project_path: Decoded project path the file belongs to

    Returns:
        SessionInfo, or None if the file cannot be opened
    """
    session_id = session_id_from_filename(session_file)
    summary = ""
    start_time: Optional[datetime] = None
    beacon: Optional[BeaconMatch] = None
    line_num = 0

    try:
        f = open(session_file, "rb", buffering=_READ_BUFFER_BYTES)
    except OSError as e:
        logger.debug(f"Cannot open {session_file}: {e}")
        return None

    with f:
        try:
            while True:
                raw = f.readline(_MAX_LINE_BYTES + 1)
                if not raw:
                    break
                if len(raw) > _MAX_LINE_BYTES and not raw.endswith(b"\n"):
                    logger.debug(
                        f"{session_file.name}: line {line_num + 1} exceeds "
                        f"{_MAX_LINE_BYTES} bytes, stopping"
                    )
                    break
                line_num += 1

                if line_num == 1:
                    record = decode_header(raw)
                    if record is not None and record.type == "summary":
                        summary = record.summary
                    continue

                record = decode_record(raw)
                if record is None:
                    continue

                if record.type == "user":
                    if start_time is None:
                        start_time = parse_timestamp(record.timestamp)
                    if not session_id and record.session_id:
                        session_id = record.session_id
                    if beacon is None:
                        beacon = match_beacon(extract_message_content(record.message))

                if beacon is not None and start_time is not None and line_num > EARLY_EXIT_LINES:
                    logger.debug(f"{session_file.name}: stopped early at line {line_num}")
                    break
        except OSError as e:
            logger.debug(f"Read error in {session_file} after line {line_num}: {e}")

    logger.debug(f"{session_file.name}: scanned {line_num} lines")

    return SessionInfo(
        id=session_id,
        path=project_path,
        file_path=str(session_file),
        role=beacon.role if beacon else "",
        topic=(beacon.topic or "") if beacon else "",
        start_time=start_time,
        summary=summary,
        is_gastown=beacon is not None,
    )
