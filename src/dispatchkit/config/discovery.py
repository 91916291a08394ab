"""Locate the dispatchkit.toml to load.

An explicit ``--config`` path wins, then the DISPATCHKIT_CONFIG env var,
then a walk-up search from the working directory, the way git finds .git/.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "dispatchkit.toml"
CONFIG_ENV_VAR = "DISPATCHKIT_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest dispatchkit.toml at or above *start* (default: cwd).

    A set DISPATCHKIT_CONFIG replaces the search; if it names a missing file
    no config is used.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidate = Path(env_path)
        return candidate if candidate.is_file() else None

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_config(explicit: str | Path | None = None, start: Path | None = None) -> Path | None:
    """Pick the config file for one CLI invocation.

    A missing explicit file means "no config", not an error, so
    ``-c`` can point at an optional per-run override.
    """
    if explicit:
        path = Path(explicit)
        return path if path.is_file() else None
    return find_config(start)
