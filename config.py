"""Runtime configuration read from the environment.

Variables
---------
DESKCALC_LOG_LEVEL       logging level name (default INFO)
DESKCALC_DEFAULT_THEME   theme for new sessions: light | dark (default light)
DESKCALC_MAX_SESSIONS    maximum concurrent sessions (default 100)
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from models import Theme
from store import DEFAULT_MAX_SESSIONS

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class AppConfig:
    log_level: str = "INFO"
    default_theme: Theme = Theme.LIGHT
    max_sessions: int = DEFAULT_MAX_SESSIONS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppConfig:
        """Build a config from ``environ`` (``os.environ`` by default)."""
        env = os.environ if environ is None else environ

        log_level = env.get("DESKCALC_LOG_LEVEL", "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"DESKCALC_LOG_LEVEL: unknown level {log_level!r}")

        raw_theme = env.get("DESKCALC_DEFAULT_THEME", Theme.LIGHT.value).lower()
        try:
            theme = Theme(raw_theme)
        except ValueError:
            raise ValueError(
                f"DESKCALC_DEFAULT_THEME: expected one of "
                f"{[t.value for t in Theme]}, got {raw_theme!r}"
            ) from None

        raw_max = env.get("DESKCALC_MAX_SESSIONS", str(DEFAULT_MAX_SESSIONS))
        try:
            max_sessions = int(raw_max)
        except ValueError:
            raise ValueError(
                f"DESKCALC_MAX_SESSIONS: expected an integer, got {raw_max!r}"
            ) from None
        if max_sessions < 1:
            raise ValueError(f"DESKCALC_MAX_SESSIONS: must be >= 1, got {max_sessions}")

        return cls(log_level=log_level, default_theme=theme, max_sessions=max_sessions)


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
