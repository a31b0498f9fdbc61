"""Derived release names."""

from __future__ import annotations

__all__ = ["ARCHIVE_PREFIX", "candidate_name", "carthage_segment", "versioned_dir_name"]

ARCHIVE_PREFIX = "Firebase"


def candidate_name(version: str, rc_number: int | None = None) -> str:
    """Name of the primary archive, e.g. ``Firebase-10.5.0-rc2.zip``."""
    name = f"{ARCHIVE_PREFIX}-{version}"
    if rc_number is not None:
        name += f"-rc{rc_number}"
    return name + ".zip"


def versioned_dir_name(version: str) -> str:
    """Output subdirectory for a version: ``10.5.0`` -> ``10_5_0``."""
    return version.replace(".", "_")


def carthage_segment(rc_number: int | None) -> str:
    """Carthage output segment below the version directory."""
    if rc_number is not None:
        return f"rc{rc_number}"
    return "latest-non-rc"
