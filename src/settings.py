"""Static configuration for titlebot.

Optional settings (identity, title lookup, logging) live in a single JSON
file for quick edits without touching Python. The connection target itself
always comes from the command line.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Optional

from core.config import IdentityConfig, TitleConfig

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# Settings are loaded from config.json when present; defaults otherwise.
CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")

DEFAULT_LOGGING: dict[str, Any] = {"enabled": True, "level": "INFO", "console": True}


@dataclass(frozen=True)
class Settings:
    """Resolved settings; built once at startup and passed explicitly."""

    identity: IdentityConfig = field(default_factory=IdentityConfig)
    titles: TitleConfig = field(default_factory=TitleConfig)
    logging: dict[str, Any] = field(default_factory=lambda: dict(DEFAULT_LOGGING))


def _load_json_config(path: str) -> dict:
    """Load the JSON file, or return an empty config if it does not exist."""

    if not os.path.exists(path):
        return {}

    with open(path, "r", encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a JSON object: {path}")
    return data


def _build_identity(raw: dict) -> IdentityConfig:
    defaults = IdentityConfig()
    return IdentityConfig(
        nickname=str(raw.get("nickname", defaults.nickname)),
        username=str(raw.get("username", defaults.username)),
        realname=str(raw.get("realname", defaults.realname)),
        version=str(raw.get("version", defaults.version)),
        quit_message=str(raw.get("quit_message", defaults.quit_message)),
    )


def _build_titles(raw: dict) -> TitleConfig:
    defaults = TitleConfig()
    message_timeout = float(raw.get("message_timeout_seconds", defaults.message_timeout))
    if message_timeout <= 0:
        raise ValueError("titles.message_timeout_seconds must be positive")
    return TitleConfig(
        message_timeout=message_timeout,
        user_agent=str(raw.get("user_agent", defaults.user_agent)),
        max_redirects=int(raw.get("max_redirects", defaults.max_redirects)),
    )


def load_settings(path: Optional[str] = None) -> Settings:
    """Read settings from *path* (default ``config.json`` in the project root)."""

    config = _load_json_config(path or CONFIG_PATH)

    logging_config = dict(DEFAULT_LOGGING)
    logging_config.update(config.get("logging", {}))

    return Settings(
        identity=_build_identity(config.get("irc", {})),
        titles=_build_titles(config.get("titles", {})),
        logging=logging_config,
    )
