"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from zipbuilder.core.config import ConfigError
from zipbuilder.core.errors import ErrorCode
from zipbuilder.output.console import Style
from zipbuilder.services.errors import (
    ArchiveFailed,
    BuildFailed,
    BundleCollision,
    OutputPlacementFailed,
    PipelineError,
    RelocationFailed,
    SecondaryPackagingFailed,
    SetupFailed,
)

if TYPE_CHECKING:
    from zipbuilder.output.console import ConsoleProtocol

__all__ = ["print_config_error", "print_pipeline_error", "pipeline_error_exit_code"]


def print_pipeline_error(error: PipelineError, console: ConsoleProtocol) -> None:
    """Print a fatal pipeline error with appropriate formatting."""
    match error:
        case SetupFailed(step=step, reason=reason):
            console.error(f"Could not {step} before packaging the release: {reason}")
        case BuildFailed(reason=reason, log_path=log_path):
            console.error(f"Could not build the zip file: {reason}")
            if log_path is not None:
                console.print(f"build log: {log_path}", Style.DIM)
        case RelocationFailed(path=path, reason=reason):
            console.error(f"Could not move resources in {path}: {reason}")
        case BundleCollision(destination=destination, sources=sources):
            console.error(f"Duplicate resource bundle: {destination}")
            for src in sources:
                console.print(f"  from {src}", Style.DIM)
            console.print("hint: rename one of the bundles in the build output", Style.DIM)
        case SecondaryPackagingFailed(step=step, reason=reason):
            console.error(f"Could not create Carthage release ({step}): {reason}")
        case ArchiveFailed(path=path, reason=reason):
            console.error(f"Could not zip {path}: {reason}")
        case OutputPlacementFailed(path=path, reason=reason):
            console.error(f"Could not copy release output to {path}: {reason}")


def pipeline_error_exit_code(error: PipelineError) -> int:
    match error:
        case SetupFailed():
            return int(ErrorCode.SETUP_ERROR)
        case BuildFailed():
            return int(ErrorCode.BUILD_ERROR)
        case RelocationFailed() | BundleCollision() | SecondaryPackagingFailed() | ArchiveFailed():
            return int(ErrorCode.PACKAGING_ERROR)
        case OutputPlacementFailed():
            return int(ErrorCode.IO_ERROR)
    # Fallback for exhaustiveness
    return int(ErrorCode.BUILD_ERROR)


def print_config_error(error: ConfigError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
