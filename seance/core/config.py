"""Configuration for seance."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = "~/.seance/config.yaml"
_DEFAULT_CLAUDE_DIR = "~/.claude"

# Keys accepted in config.yaml and by set_config
_CONFIG_KEYS = ("claude_dir", "recent", "log_level")


@dataclass
class Config:
    # Claude Code data dir; sessions live under <claude_dir>/projects
    claude_dir: str = _DEFAULT_CLAUDE_DIR

    # Default number of sessions shown by `seance list`
    recent: int = 20

    log_level: str = "WARNING"

    @classmethod
    def load(cls, path: Optional[str] = None) -> Config:
        """Load config from YAML file, falling back to defaults."""
        config_path = cls.config_path(path)

        data: dict = {}
        if config_path.exists():
            try:
                with open(config_path) as f:
                    data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Ignoring unreadable config {config_path}: {e}")
            if not isinstance(data, dict):
                logger.warning(f"Ignoring config {config_path}: not a mapping")
                data = {}

        cfg = cls()

        if "claude_dir" in data:
            cfg.claude_dir = str(data["claude_dir"])
        if "recent" in data:
            cfg.recent = int(data["recent"])
        if "log_level" in data:
            cfg.log_level = str(data["log_level"]).upper()

        # Environment overrides
        if env_dir := os.getenv("SEANCE_CLAUDE_DIR"):
            cfg.claude_dir = env_dir
        if env_recent := os.getenv("SEANCE_RECENT"):
            cfg.recent = int(env_recent)
        if env_level := os.getenv("SEANCE_LOG_LEVEL"):
            cfg.log_level = env_level.upper()

        return cfg

    @staticmethod
    def config_path(path: Optional[str] = None) -> Path:
        return Path(
            path or os.getenv("SEANCE_CONFIG", _DEFAULT_CONFIG_PATH)
        ).expanduser()

    @classmethod
    def set_config(cls, key: str, value: str, path: Optional[str] = None) -> None:
        """Write a single key to config.yaml, keeping the other keys."""
        if key not in _CONFIG_KEYS:
            raise ValueError(
                f"Unknown config key '{key}' (expected one of: {', '.join(_CONFIG_KEYS)})"
            )
        parsed = int(value) if key == "recent" else value

        config_path = cls.config_path(path)
        data: dict = {}
        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}

        data[key] = parsed
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=True)

    @property
    def resolved_claude_dir(self) -> Path:
        return Path(self.claude_dir).expanduser()

    @property
    def resolved_projects_dir(self) -> Path:
        return self.resolved_claude_dir / "projects"
