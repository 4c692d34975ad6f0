"""
Terminal rendering for discovered sessions.

Sessions without a beacon are shown dimmed so Gas Town sessions stand out.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from .core.models import SessionInfo

ID_WIDTH = 10
ROLE_WIDTH = 24
TIME_WIDTH = 16
TOPIC_WIDTH = 30

ELLIPSIS = "…"
RESUME_HINT = "Resume a session: claude --resume <full-session-id>"

_NAMED_ROLES = ("witness", "refinery", "deacon", "mayor")
_GROUP_ROLES = ("crew", "polecats")


def bold(text: str, color: bool = True) -> str:
    return f"\033[1m{text}\033[0m" if color else text


def dim(text: str, color: bool = True) -> str:
    return f"\033[2m{text}\033[0m" if color else text


def truncate(text: str, width: int) -> str:
    if len(text) > width:
        return text[: width - 1] + ELLIPSIS
    return text


def infer_role_from_path(path: str) -> str:
    """Best-effort role from a project path like .../crew/joe or .../witness."""
    parts = path.split("/")
    for i in range(len(parts) - 1, -1, -1):
        part = parts[i]
        if part in _NAMED_ROLES:
            return part
        if part in _GROUP_ROLES:
            if i + 1 < len(parts):
                return f"{part}/{parts[i + 1]}"
            return part
    return parts[-1] if parts else "unknown"


def _row(cells: Sequence[str]) -> List[str]:
    widths = (ID_WIDTH, ROLE_WIDTH, TIME_WIDTH, TOPIC_WIDTH)
    return [f"{cell:<{w}}" for cell, w in zip(cells, widths)]


def render_session_row(session: SessionInfo, *, color: bool = False) -> str:
    role = truncate(session.role or infer_role_from_path(session.path), ROLE_WIDTH)
    topic = truncate(session.display_topic(), TOPIC_WIDTH)
    cells = _row([session.short_id(), role, session.format_time(), topic])
    if not session.is_gastown:
        cells = [dim(c, color) for c in cells]
    return "  ".join(cells)


def render_sessions(sessions: Sequence[SessionInfo], *, color: bool = False) -> str:
    lines = [bold("Claude Code Sessions", color), ""]
    lines.append("  ".join(_row(["ID", "ROLE", "STARTED", "TOPIC"])))
    lines.append("─" * (ID_WIDTH + ROLE_WIDTH + TIME_WIDTH + TOPIC_WIDTH + 6))
    for s in sessions:
        lines.append(render_session_row(s, color=color))
    lines.append("")
    lines.append(dim(RESUME_HINT, color))
    return "\n".join(lines)


def render_empty(
    *,
    gastown_only: bool,
    storage_exists: bool = True,
    projects_dir: Optional[Path] = None,
    color: bool = False,
) -> str:
    """Message for an empty result, distinguishing missing storage from no matches."""
    if not storage_exists:
        return f"No Claude Code session storage found at {projects_dir}."
    if not gastown_only:
        return "No sessions found."
    return "\n".join([
        "No Gas Town sessions found.",
        dim("Use --all to include non-Gas Town sessions", color),
    ])
