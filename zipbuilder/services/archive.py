from __future__ import annotations

import hashlib
import os
import stat
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile, ZipInfo

from zipbuilder.core.result import Err, Ok, Result
from zipbuilder.services.errors import ArchiveFailed, PipelineError

_SYMLINK_ATTR = (stat.S_IFLNK | 0o777) << 16
_UNIX = 3


def collect_dir(base_dir: Path, *, arc_prefix: str) -> list[tuple[Path, str]]:
    """(source, archive name) pairs for every entry below base_dir.

    Directories are listed too (with a trailing slash) so empty directories
    such as a bare ``Resources`` survive the round trip. Symlinks are listed
    as-is and never descended into.
    """
    out: list[tuple[Path, str]] = []
    for current, dirnames, filenames in os.walk(base_dir):
        dirnames.sort()
        base = Path(current)
        for name in sorted(dirnames + filenames):
            p = base / name
            rel = p.relative_to(base_dir).as_posix()
            arc = f"{arc_prefix}/{rel}" if arc_prefix else rel
            if p.is_dir() and not p.is_symlink():
                out.append((p, arc + "/"))
            else:
                out.append((p, arc))
    return sorted(out, key=lambda item: item[1])


def _write_symlink(zf: ZipFile, src: Path, arc: str) -> None:
    # Framework bundles rely on relative links such as Versions/Current.
    info = ZipInfo(arc)
    info.create_system = _UNIX
    info.external_attr = _SYMLINK_ATTR
    zf.writestr(info, os.readlink(src))


def zip_files(zip_path: Path, *, files: list[tuple[Path, str]]) -> None:
    zip_path.parent.mkdir(parents=True, exist_ok=True)
    # Build outputs can carry mtime=0 files; ZIP cannot represent pre-1980
    # timestamps and Python validates strictly by default.
    with ZipFile(zip_path, "w", compression=ZIP_DEFLATED, strict_timestamps=False) as zf:
        for src, arc in files:
            if src.is_symlink():
                _write_symlink(zf, src, arc)
            elif arc.endswith("/"):
                zf.mkdir(arc.rstrip("/"))
            else:
                zf.write(src, arcname=arc)


def zip_contents(directory: Path, name: str) -> Result[Path, PipelineError]:
    """Compress directory into ``<directory.parent>/<name>``.

    Entries live under a top-level folder named after the directory. An
    existing archive with the same name is replaced.
    """
    zip_path = directory.parent / name
    try:
        if not directory.is_dir():
            return Err(ArchiveFailed(path=directory, reason="not a directory"))
        files = collect_dir(directory, arc_prefix=directory.name)
        zip_path.unlink(missing_ok=True)
        zip_files(zip_path, files=files)
    except OSError as e:
        zip_path.unlink(missing_ok=True)
        return Err(ArchiveFailed(path=directory, reason=str(e)))
    return Ok(zip_path)


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()
