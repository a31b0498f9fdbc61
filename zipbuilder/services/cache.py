from __future__ import annotations

from pathlib import Path

from zipbuilder.core.result import Err, Ok, Result
from zipbuilder.platform.files import remove_dir_if_exists
from zipbuilder.services.errors import PipelineError, SetupFailed


def invalidate_cache(cache_dir: Path) -> Result[bool, PipelineError]:
    """Delete the build cache so no stale state leaks into the release.

    Returns:
        Ok(True) if a cache was removed, Ok(False) if none existed.
    """
    try:
        return Ok(remove_dir_if_exists(cache_dir))
    except OSError as e:
        return Err(SetupFailed(step="remove the cache", reason=f"{cache_dir}: {e}"))
