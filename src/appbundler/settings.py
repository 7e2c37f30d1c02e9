"""Runtime settings for the appbundler CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RuntimeSettings:
    log_dir: Path

    @property
    def telemetry_file(self) -> Path:
        return self.log_dir / "telemetry.jsonl"


def _default_home_dir() -> Path:
    override = os.environ.get("APPBUNDLER_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".appbundler"


def load_settings() -> RuntimeSettings:
    base = _default_home_dir()
    return RuntimeSettings(log_dir=base / "logs")


SETTINGS = load_settings()
