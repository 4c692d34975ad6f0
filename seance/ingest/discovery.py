"""
Session discovery — find Claude Code session files on disk and describe them.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from ..core.models import SessionFilter, SessionInfo
from .parser import SESSION_SUFFIX, parse_session

logger = logging.getLogger(__name__)

# Sub-agent transcripts live next to their parent session
AGENT_PREFIX = "agent-"

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class DiscoveryError(Exception):
    """The session storage root exists but cannot be listed."""


def discover_sessions(
    projects_dir: Path,
    session_filter: Optional[SessionFilter] = None,
) -> List[SessionInfo]:
    """
    Find sessions under ``projects_dir`` matching the filter.

    Returns sessions sorted most recent first, truncated to the filter limit.
    A missing ``projects_dir`` yields an empty list.
    """
    session_filter = session_filter or SessionFilter()
    sessions = scan_projects(projects_dir, session_filter)
    sessions = [s for s in sessions if matches(s, session_filter)]
    return apply_limit(sort_sessions(sessions), session_filter.limit)


def scan_projects(projects_dir: Path, session_filter: SessionFilter) -> List[SessionInfo]:
    """Parse every candidate session file whose project passes the path filters."""
    try:
        projects_dir.stat()
    except (FileNotFoundError, NotADirectoryError):
        logger.debug(f"No session storage at {projects_dir}")
        return []
    except OSError as e:
        raise DiscoveryError(f"cannot access {projects_dir}: {e}") from e

    try:
        project_dirs = sorted(projects_dir.iterdir())
    except OSError as e:
        raise DiscoveryError(f"cannot list {projects_dir}: {e}") from e

    results: List[SessionInfo] = []
    files_seen = 0
    for project_dir in project_dirs:
        if not project_dir.is_dir():
            continue

        project_path = decode_path(project_dir.name)
        if not _project_matches(project_path, session_filter):
            continue

        for session_file in _session_files(project_dir):
            files_seen += 1
            info = parse_session(session_file, project_path)
            if info is not None:
                results.append(info)

    logger.info(f"Scanned {files_seen} session files under {projects_dir}")
    return results


def decode_path(encoded: str) -> str:
    """
    Decode a Claude Code project directory name to a path.

    Claude encodes project paths by replacing '/' with '-':
        -Users-stevey-gt-gastown  ->  /Users/stevey/gt/gastown

    The encoding is lossy: hyphens in real directory names come back
    as separators.
    """
    if encoded.startswith("-"):
        encoded = "/" + encoded[1:]
    return encoded.replace("-", "/")


def matches(info: SessionInfo, session_filter: SessionFilter) -> bool:
    """Per-session filters, applied after the file has been parsed."""
    if session_filter.gastown_only and not info.is_gastown:
        return False
    if session_filter.role:
        needle = session_filter.role.lower()
        if needle not in info.role.lower() and needle not in info.path.lower():
            return False
    return True


def sort_sessions(sessions: Iterable[SessionInfo]) -> List[SessionInfo]:
    """Most recent first; sessions without a start time sort last."""
    return sorted(sessions, key=lambda s: s.start_time or _OLDEST, reverse=True)


def apply_limit(sessions: List[SessionInfo], limit: int) -> List[SessionInfo]:
    if limit > 0:
        return sessions[:limit]
    return sessions


def _project_matches(project_path: str, session_filter: SessionFilter) -> bool:
    if session_filter.rig and f"/{session_filter.rig}/" not in project_path:
        return False
    if session_filter.path and session_filter.path not in project_path:
        return False
    return True


def _session_files(project_dir: Path) -> List[Path]:
    """Top-level session files in a project dir, skipping agent sub-sessions."""
    try:
        entries = sorted(project_dir.iterdir())
    except OSError as e:
        logger.debug(f"Cannot list {project_dir}: {e}")
        return []
    return [
        f for f in entries
        if f.name.endswith(SESSION_SUFFIX) and not f.name.startswith(AGENT_PREFIX)
    ]
