from __future__ import annotations

from pathlib import Path

from zipbuilder.core.result import Err, Ok, Result
from zipbuilder.platform.process import CommandRunner, run_silent
from zipbuilder.services.errors import PipelineError, SetupFailed

POD_REPO_UPDATE = ["pod", "repo", "update"]


def update_pod_repos(
    cwd: Path,
    *,
    runner: CommandRunner = run_silent,
) -> Result[None, PipelineError]:
    """Synchronize the local CocoaPods spec repositories."""
    result = runner(list(POD_REPO_UPDATE), cwd)
    if isinstance(result, Err):
        return Err(SetupFailed(step="update the CocoaPods repos", reason=str(result.error)))
    return Ok(None)
