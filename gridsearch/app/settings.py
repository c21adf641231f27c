# gridsearch/app/settings.py
"""
Viewer settings, resolved from the environment and --key=value flags.

- ENV: GRIDSEARCH_MAP, GRIDSEARCH_STEPS_PER_SEC, GRIDSEARCH_LOG_LEVEL
- CLI: --map=PATH, --steps-per-sec=N, --log-level=LEVEL  (CLI wins)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from gridsearch.core.types import ConfigurationError

MIN_STEPS_PER_SEC = 1
MAX_STEPS_PER_SEC = 1000
DEFAULT_STEPS_PER_SEC = 333  # ~3 ms per step


@dataclass
class ViewerSettings:
    map_path: Optional[Path] = None
    steps_per_sec: int = DEFAULT_STEPS_PER_SEC
    log_level: int = logging.INFO


def clamp_speed(value: int) -> int:
    return int(max(MIN_STEPS_PER_SEC, min(MAX_STEPS_PER_SEC, value)))


def _parse_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"unknown log level {name!r}")
    return level


def resolve_settings(argv: Optional[Sequence[str]] = None,
                     environ: Optional[Mapping[str, str]] = None) -> ViewerSettings:
    argv = list(argv) if argv is not None else []
    environ = environ if environ is not None else os.environ

    raw = {
        "map": environ.get("GRIDSEARCH_MAP"),
        "steps-per-sec": environ.get("GRIDSEARCH_STEPS_PER_SEC"),
        "log-level": environ.get("GRIDSEARCH_LOG_LEVEL"),
    }
    for arg in argv:
        for key in raw:
            prefix = f"--{key}="
            if arg.startswith(prefix):
                raw[key] = arg.split("=", 1)[1]

    settings = ViewerSettings()
    if raw["map"]:
        settings.map_path = Path(raw["map"])
    if raw["steps-per-sec"]:
        try:
            settings.steps_per_sec = clamp_speed(int(raw["steps-per-sec"]))
        except ValueError as ex:
            raise ConfigurationError(f"steps per second must be an integer, got {raw['steps-per-sec']!r}") from ex
    if raw["log-level"]:
        settings.log_level = _parse_level(raw["log-level"])
    return settings
