#!/usr/bin/env python3
"""
seance — discover and browse predecessor Claude Code sessions

Usage:
    seance [list] [options]              List recent Gas Town sessions
    seance show <session_id>             Show one session (id or prefix)
    seance status                        Config and storage diagnostics
    seance config <key> <value>          Set a config value (claude_dir, recent, log_level)

List options:
    -a, --all            Include non-Gas Town sessions
    --role ROLE          Filter by role (crew, polecat, witness, etc.)
    --rig RIG            Filter by rig name
    --path PATH          Filter by project path substring
    -n, --recent N       Number of recent sessions to show
    --json               Output as JSON
    -v, --verbose        Debug logging to stderr

Sessions are identified by the [GAS TOWN] beacon sent during startup:
    [GAS TOWN] gastown/crew/joe • assigned:gt-xyz • 2025-12-30T15:42

Resume a session in Claude Code:
    claude --resume <session-id>
"""

from __future__ import annotations

import json
import logging
import sys


def _json_out(data):
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _setup_logging(args, level: str = "WARNING"):
    if "-v" in args or "--verbose" in args:
        level = "DEBUG"
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def cmd_list(args):
    from seance.api import list_sessions
    from seance.core.config import Config
    from seance.display import render_empty, render_sessions
    from seance.ingest.discovery import DiscoveryError

    cfg = Config.load()
    _setup_logging(args, cfg.log_level)

    show_all = "--all" in args or "-a" in args
    recent_str = _get_opt(args, "--recent") or _get_opt(args, "-n")
    try:
        limit = int(recent_str) if recent_str is not None else cfg.recent
    except ValueError:
        _err(f"Invalid --recent value: {recent_str}")

    projects_dir = cfg.resolved_projects_dir
    try:
        sessions = list_sessions(
            gastown_only=not show_all,
            role=_get_opt(args, "--role"),
            rig=_get_opt(args, "--rig"),
            path=_get_opt(args, "--path"),
            limit=limit,
            projects_dir=projects_dir,
        )
    except DiscoveryError as e:
        _err(f"discovering sessions: {e}")

    if "--json" in args:
        _json_out([s.to_dict() for s in sessions])
        return

    color = sys.stdout.isatty()
    if not sessions:
        print(render_empty(
            gastown_only=not show_all,
            storage_exists=projects_dir.is_dir(),
            projects_dir=projects_dir,
            color=color,
        ))
        return

    print(render_sessions(sessions, color=color))


def cmd_show(args):
    from seance.api import show
    from seance.core.config import Config
    from seance.ingest.discovery import DiscoveryError

    _setup_logging(args, Config.load().log_level)
    positional = [a for a in args if not a.startswith("-")]
    if not positional:
        _err("Usage: seance show <session_id>")
    try:
        result = show(positional[0])
    except DiscoveryError as e:
        _err(f"discovering sessions: {e}")
    _json_out(result)
    if "error" in result:
        sys.exit(1)


def cmd_status(args):
    from seance.api import status
    result = status()
    print(f"  config:   {result['config_path']}")
    if result["storage_exists"]:
        print(f"  storage:  {result['projects_dir']}")
        print(
            f"  data:     {result['projects']} projects, "
            f"{result['session_files']} session files"
        )
    else:
        print(f"  storage:  MISSING — {result['projects_dir']}")
    if "storage_error" in result:
        print(f"  error:    {result['storage_error']}")
    print(f"  recent:   {result['recent']}")


def cmd_config(args):
    from seance.api import setup_config
    if len(args) < 2:
        _err("Usage: seance config <key> <value>")
    try:
        result = setup_config(args[0], args[1])
    except ValueError as e:
        _err(str(e))
    print(f"  {result['key']} = {result['value']}")


COMMANDS = {
    "list": cmd_list,
    "show": cmd_show,
    "status": cmd_status,
    "config": cmd_config,
}


def _get_opt(args, flag):
    """Extract value after a flag from args list."""
    if flag in args:
        idx = args.index(flag)
        if idx + 1 < len(args):
            return args[idx + 1]
    return None


def _err(msg):
    print(msg, file=sys.stderr)
    sys.exit(1)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if argv and argv[0] in ("-h", "--help", "help"):
        print(__doc__.strip())
        sys.exit(0)

    # Bare `seance` and `seance --flags` mean `seance list`
    if not argv or argv[0].startswith("-"):
        cmd_list(argv)
        return

    handler = COMMANDS.get(argv[0])
    if not handler:
        print(f"Unknown command: {argv[0]}", file=sys.stderr)
        print(f"Available: {', '.join(COMMANDS.keys())}", file=sys.stderr)
        sys.exit(1)

    handler(argv[1:])


if __name__ == "__main__":
    main()
