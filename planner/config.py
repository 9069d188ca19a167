"""Environment-driven settings for the planner backend.

Env vars:
  PLANNER_DATA_DIR=<dir>         -> where profile JSON files are stored
  PLANNER_DEATH_AGE=90           -> last simulated age
  PLANNER_LOG_LEVEL=INFO         -> logging level name
  PLANNER_PORT=8000              -> Flask dev server port
  PLANNER_VERSION_FILE=<path>    -> version.json served by /api/version
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

DEFAULT_DEATH_AGE = 90


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    try:
        return int(raw) if str(raw).strip() else default
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    data_dir: str = "user_data"
    death_age: int = DEFAULT_DEATH_AGE
    log_level: str = "INFO"
    port: int = 8000
    version_file: str = "version.json"

    @property
    def profiles_path(self) -> str:
        return os.path.join(self.data_dir, "profiles.json")

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            data_dir=os.getenv("PLANNER_DATA_DIR", "user_data"),
            death_age=_int_env("PLANNER_DEATH_AGE", DEFAULT_DEATH_AGE),
            log_level=os.getenv("PLANNER_LOG_LEVEL", "INFO").upper(),
            port=_int_env("PLANNER_PORT", 8000),
            version_file=os.getenv("PLANNER_VERSION_FILE", "version.json"),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
