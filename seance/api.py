"""
seance API — importable functions for all operations.

Functions other than list_sessions return JSON-serializable dicts/lists.
Designed to be called from scripts, skills, or other agents.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from .core.models import SessionFilter, SessionInfo


def _projects_dir(projects_dir: Optional[Path] = None) -> Path:
    if projects_dir is not None:
        return Path(projects_dir)
    from .core.config import Config
    return Config.load().resolved_projects_dir


# ── Discovery ─────────────────────────────────────────────────────────────────

def list_sessions(
    *,
    gastown_only: bool = True,
    role: Optional[str] = None,
    rig: Optional[str] = None,
    path: Optional[str] = None,
    limit: int = 0,
    projects_dir: Optional[Path] = None,
) -> List[SessionInfo]:
    """Discover sessions on disk, most recent first."""
    from .ingest.discovery import discover_sessions
    session_filter = SessionFilter(
        gastown_only=gastown_only,
        role=role or "",
        rig=rig or "",
        path=path or "",
        limit=limit,
    )
    return discover_sessions(_projects_dir(projects_dir), session_filter)


def discover(
    *,
    gastown_only: bool = True,
    role: Optional[str] = None,
    rig: Optional[str] = None,
    path: Optional[str] = None,
    limit: int = 0,
    projects_dir: Optional[Path] = None,
) -> List[Dict[str, Any]]:
    """Same query as list_sessions, as plain dicts."""
    found = list_sessions(
        gastown_only=gastown_only,
        role=role,
        rig=rig,
        path=path,
        limit=limit,
        projects_dir=projects_dir,
    )
    return [s.to_dict() for s in found]


def show(session_id: str, *, projects_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Look up one session by full id or unique id prefix."""
    if not session_id:
        return {"error": "Session id required"}
    found = list_sessions(gastown_only=False, projects_dir=projects_dir)

    exact = [s for s in found if s.id == session_id]
    candidates = exact or [s for s in found if s.id.startswith(session_id)]
    if not candidates:
        return {"error": f"Session not found: {session_id}"}
    if len(candidates) > 1:
        return {
            "error": f"Ambiguous session id: {session_id}",
            "matches": [s.id for s in candidates],
        }

    s = candidates[0]
    return {
        "session": s.to_dict(),
        "rig": s.rig_from_path(),
        "resume": f"claude --resume {s.id}",
    }


# ── Status ────────────────────────────────────────────────────────────────────

def status() -> Dict[str, Any]:
    """Config diagnostics and a count of what is on disk."""
    from .core.config import Config
    from .ingest.discovery import AGENT_PREFIX
    from .ingest.parser import SESSION_SUFFIX

    cfg = Config.load()
    projects_dir = cfg.resolved_projects_dir
    result: Dict[str, Any] = {
        "config_path": str(Config.config_path()),
        "projects_dir": str(projects_dir),
        "storage_exists": projects_dir.is_dir(),
        "recent": cfg.recent,
        "log_level": cfg.log_level,
        "projects": 0,
        "session_files": 0,
    }
    if not result["storage_exists"]:
        return result

    try:
        for project_dir in projects_dir.iterdir():
            if not project_dir.is_dir():
                continue
            result["projects"] += 1
            result["session_files"] += sum(
                1 for f in project_dir.glob(f"*{SESSION_SUFFIX}")
                if not f.name.startswith(AGENT_PREFIX)
            )
    except OSError as e:
        result["storage_error"] = str(e)

    return result


# ── Setup ────────────────────────────────────────────────────────────────────

def setup_config(key: str, value: str) -> Dict[str, str]:
    """Set a config key-value pair."""
    from .core.config import Config
    Config.set_config(key, value)
    return {"key": key, "value": value, "status": "ok"}
