from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from zipbuilder.core.naming import versioned_dir_name
from zipbuilder.core.result import Err, Ok, Result
from zipbuilder.platform.files import copy_file, copy_tree, create_dir, remove_dir_if_exists
from zipbuilder.services.carthage import CARTHAGE_DIR_NAME
from zipbuilder.services.errors import OutputPlacementFailed, PipelineError

BUILD_LOGS_DIR_NAME = "build_logs"


@dataclass(frozen=True, slots=True)
class PlacedOutputs:
    archive: Path
    carthage_dir: Path | None = None


def place_outputs(
    archive: Path,
    carthage_root: Path | None,
    output_dir: Path,
    version: str,
) -> Result[PlacedOutputs, PipelineError]:
    """Copy the release into a freshly cleared output directory.

    Layout:
        <output_dir>/<X_Y_Z>/<archive name>
        <output_dir>/carthage/...        (only with a Carthage root)
    """
    try:
        remove_dir_if_exists(output_dir)
        create_dir(output_dir)
    except OSError as e:
        return Err(OutputPlacementFailed(path=output_dir, reason=f"cannot reset directory: {e}"))

    versioned = output_dir / versioned_dir_name(version)
    destination = versioned / archive.name
    try:
        create_dir(versioned)
        copy_file(archive, destination)
    except OSError as e:
        return Err(OutputPlacementFailed(path=destination, reason=str(e)))

    if carthage_root is None:
        return Ok(PlacedOutputs(archive=destination))

    carthage_dest = output_dir / CARTHAGE_DIR_NAME
    try:
        copy_tree(carthage_root, carthage_dest)
    except OSError as e:
        return Err(OutputPlacementFailed(path=carthage_dest, reason=str(e)))

    return Ok(PlacedOutputs(archive=destination, carthage_dir=carthage_dest))


def copy_build_logs(logs_dir: Path, output_dir: Path) -> Result[Path | None, PipelineError]:
    """Copy captured build logs to ``<output_dir>/build_logs``.

    Runs after place_outputs so the reset of output_dir does not wipe them.
    """
    if not logs_dir.is_dir():
        return Ok(None)
    destination = output_dir / BUILD_LOGS_DIR_NAME
    try:
        remove_dir_if_exists(destination)
        copy_tree(logs_dir, destination)
    except OSError as e:
        return Err(OutputPlacementFailed(path=destination, reason=str(e)))
    return Ok(destination)
