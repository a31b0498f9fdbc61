from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class SetupFailed:
    """Cache removal, temp dir creation or dependency sync failed."""

    step: str
    reason: str


@dataclass(frozen=True, slots=True)
class BuildFailed:
    reason: str
    log_path: Path | None = None


@dataclass(frozen=True, slots=True)
class RelocationFailed:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class BundleCollision:
    """Two bundles would be moved to the same name in a Resources dir."""

    destination: Path
    sources: tuple[Path, ...]


@dataclass(frozen=True, slots=True)
class SecondaryPackagingFailed:
    step: str
    reason: str


@dataclass(frozen=True, slots=True)
class ArchiveFailed:
    path: Path
    reason: str


@dataclass(frozen=True, slots=True)
class OutputPlacementFailed:
    path: Path
    reason: str


PipelineError = (
    SetupFailed
    | BuildFailed
    | RelocationFailed
    | BundleCollision
    | SecondaryPackagingFailed
    | ArchiveFailed
    | OutputPlacementFailed
)
