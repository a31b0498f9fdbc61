"""Filesystem primitives.

These are thin and idempotent where the operation allows it. They raise
OSError; services convert failures into pipeline errors.
"""

from __future__ import annotations

import os
import shutil
import stat
import tempfile
from collections.abc import Callable
from pathlib import Path

__all__ = [
    "atomic_write_text",
    "copy_file",
    "copy_tree",
    "create_dir",
    "is_directory",
    "list_dir",
    "move",
    "remove_dir_if_exists",
]


def _remove_readonly(_func: Callable[[str], object], path: str, exc: BaseException) -> None:
    """Handle read-only files on Windows (e.g. copied .git pack files)."""
    if isinstance(exc, PermissionError):
        os.chmod(path, stat.S_IWRITE)
        os.unlink(path)
    else:
        raise exc


def remove_dir_if_exists(path: Path) -> bool:
    """Remove a directory tree (or a stray file) at path.

    Returns:
        True if something was removed, False if nothing existed.
    """
    if path.is_symlink() or path.is_file():
        path.unlink()
        return True
    if not path.exists():
        return False
    shutil.rmtree(path, onexc=_remove_readonly)
    return True


def create_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def copy_tree(src: Path, dst: Path) -> None:
    """Copy a directory tree. dst must not exist yet."""
    if dst.exists():
        raise FileExistsError(f"destination already exists: {dst}")
    shutil.copytree(src, dst, symlinks=True)


def copy_file(src: Path, dst: Path) -> None:
    """Copy a file, preserving metadata. dst must not exist yet."""
    if dst.exists():
        raise FileExistsError(f"destination already exists: {dst}")
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dst)


def move(src: Path, dst: Path) -> None:
    """Move a file or directory. dst must not exist yet."""
    if dst.exists():
        raise FileExistsError(f"destination already exists: {dst}")
    shutil.move(str(src), str(dst))


def list_dir(path: Path) -> list[Path]:
    """Direct children of path, sorted by name."""
    return sorted(path.iterdir(), key=lambda p: p.name)


def is_directory(path: Path) -> bool:
    return path.is_dir()


def atomic_write_text(path: Path, content: str, *, encoding: str = "utf-8") -> None:
    """Write text to path atomically using temp file + replace."""
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink(missing_ok=True)
