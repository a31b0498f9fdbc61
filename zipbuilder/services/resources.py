"""Resource bundle relocation.

Build tools scatter ``.bundle`` directories inside framework folders. The
release zip expects them flattened into a ``Resources`` directory next to the
frameworks of each product:

    Firebase/
      FirebaseAnalytics/
        FirebaseAnalytics.xcframework/...
        Resources/
          FirebaseAnalytics_Privacy.bundle
"""

from __future__ import annotations

import os
from collections import defaultdict
from pathlib import Path

from zipbuilder.core.result import Err, Ok, Result
from zipbuilder.platform.files import create_dir, is_directory, list_dir, move
from zipbuilder.services.errors import BundleCollision, PipelineError, RelocationFailed

__all__ = [
    "BUNDLE_SUFFIX",
    "RESOURCES_DIR_NAME",
    "find_bundles",
    "move_all_bundles",
    "relocate_resources",
]

BUNDLE_SUFFIX = ".bundle"
RESOURCES_DIR_NAME = "Resources"


def find_bundles(directory: Path, *, exclude: Path | None = None) -> list[Path]:
    """All bundles below directory, outermost only, sorted by path.

    Bundles nested inside another bundle travel with their parent, so the
    walk does not descend into them. ``exclude`` prunes a subtree (the
    destination Resources dir).
    """
    found: list[Path] = []
    for current, dirnames, _files in os.walk(directory):
        base = Path(current)
        keep: list[str] = []
        for name in sorted(dirnames):
            path = base / name
            if exclude is not None and path == exclude:
                continue
            if name.endswith(BUNDLE_SUFFIX):
                found.append(path)
                continue
            keep.append(name)
        dirnames[:] = keep
    return sorted(found)


def _collision(bundles: list[Path], resources_dir: Path) -> BundleCollision | None:
    by_name: dict[str, list[Path]] = defaultdict(list)
    for bundle in bundles:
        by_name[bundle.name].append(bundle)

    for name in sorted(by_name):
        sources = by_name[name]
        destination = resources_dir / name
        if len(sources) > 1 or destination.exists():
            return BundleCollision(destination=destination, sources=tuple(sources))
    return None


def move_all_bundles(directory: Path, resources_dir: Path) -> Result[list[Path], PipelineError]:
    """Move every bundle found in directory into resources_dir.

    Nothing is moved if any two bundles (or a bundle and an existing entry in
    resources_dir) share a name.

    Returns:
        Ok(list of new bundle paths inside resources_dir).
    """
    try:
        bundles = find_bundles(directory, exclude=resources_dir)
    except OSError as e:
        return Err(RelocationFailed(path=directory, reason=str(e)))

    if not bundles:
        return Ok([])

    collision = _collision(bundles, resources_dir)
    if collision is not None:
        return Err(collision)

    moved: list[Path] = []
    try:
        create_dir(resources_dir)
        for bundle in bundles:
            destination = resources_dir / bundle.name
            move(bundle, destination)
            moved.append(destination)
    except OSError as e:
        return Err(RelocationFailed(path=directory, reason=str(e)))

    return Ok(moved)


def relocate_resources(root: Path) -> Result[int, PipelineError]:
    """Flatten bundles of every top-level directory under root.

    Files directly under root are skipped.

    Returns:
        Ok(total number of bundles moved).
    """
    try:
        entries = list_dir(root)
    except OSError as e:
        return Err(RelocationFailed(path=root, reason=str(e)))

    total = 0
    for entry in entries:
        if not is_directory(entry):
            continue
        result = move_all_bundles(entry, entry / RESOURCES_DIR_NAME)
        if isinstance(result, Err):
            return result
        total += len(result.value)
    return Ok(total)
