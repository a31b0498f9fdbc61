"""Well-known locations.

The cache directory is shared between runs and destroyed at the start of
each one. The project directory is per run and lives in the system temp dir.
"""

from __future__ import annotations

import os
import sys
import tempfile
from functools import lru_cache
from pathlib import Path

__all__ = [
    "cache_dir",
    "home",
    "temporary_directory",
]

APP_NAME = "zip-builder"


@lru_cache(maxsize=1)
def home() -> Path:
    """User's home directory, preferring env vars for CI/container runs."""
    if sys.platform == "win32":
        userprofile = os.environ.get("USERPROFILE")
        if userprofile:
            return Path(userprofile)
    else:
        home_env = os.environ.get("HOME")
        if home_env:
            return Path(home_env)
    return Path.home()


@lru_cache(maxsize=1)
def cache_dir() -> Path:
    """Build cache location.

    Location: ~/Library/Caches/zip-builder (macOS),
    $XDG_CACHE_HOME/zip-builder or ~/.cache/zip-builder (Linux),
    %LOCALAPPDATA%/zip-builder/Cache (Windows).
    """
    if sys.platform == "win32":
        local = os.environ.get("LOCALAPPDATA")
        base = Path(local) if local else home() / "AppData" / "Local"
        return base / APP_NAME / "Cache"
    if sys.platform == "darwin":
        return home() / "Library" / "Caches" / APP_NAME

    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache) / APP_NAME
    return home() / ".cache" / APP_NAME


def temporary_directory(name: str) -> Path:
    """Create a fresh, uniquely named directory in the system temp dir.

    Raises:
        OSError: If the directory cannot be created.
    """
    return Path(tempfile.mkdtemp(prefix=f"{APP_NAME}-{name}-"))


def clear_caches() -> None:
    """Clear cached paths. Useful in tests when env vars change."""
    home.cache_clear()
    cache_dir.cache_clear()
