"""Carthage binary distribution.

Carthage consumes one zip per product plus a ``<Product>Binary.json`` file
that maps each released version to the zip's download URL. The layout is:

    carthage/
      10.5.0/
        rc2/                      (or latest-non-rc)
          FirebaseAnalytics-<sha>.zip
          ...

Products are restructured in place while packaging, so generation always
runs against a disposable snapshot of the release directory.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from zipbuilder.core.config import DEFAULT_CARTHAGE_BASE_URL
from zipbuilder.core.naming import carthage_segment
from zipbuilder.core.result import Err, Ok, Result
from zipbuilder.core.structured import as_str_dict
from zipbuilder.output.console import ConsoleProtocol
from zipbuilder.platform.files import (
    atomic_write_text,
    copy_file,
    copy_tree,
    create_dir,
    is_directory,
    list_dir,
    remove_dir_if_exists,
)
from zipbuilder.services.archive import collect_dir, sha256_file, zip_files
from zipbuilder.services.errors import PipelineError, SecondaryPackagingFailed

__all__ = [
    "CARTHAGE_BUILD_DIR_NAME",
    "CARTHAGE_DIR_NAME",
    "TEMPLATE_FILES",
    "binary_json_path",
    "generate_carthage_release",
    "package_carthage",
    "snapshot",
]

CARTHAGE_DIR_NAME = "carthage"
CARTHAGE_BUILD_DIR_NAME = "carthage_build"
TEMPLATE_FILES = ("LICENSE", "NOTICES")

_HASH_LENGTH = 16


def _fail(step: str, reason: object) -> Err[PipelineError]:
    return Err(SecondaryPackagingFailed(step=step, reason=str(reason)))


@contextmanager
def snapshot(src: Path, dst: Path) -> Iterator[Path]:
    """Copy src to dst for the duration of the block, then delete the copy.

    The copy is removed on every exit path. Raises OSError if the copy or
    the cleanup fails.
    """
    remove_dir_if_exists(dst)
    copy_tree(src, dst)
    try:
        yield dst
    finally:
        remove_dir_if_exists(dst)


def binary_json_path(json_dir: Path, product: str) -> Path:
    return json_dir / f"{product}Binary.json"


def _load_versions(path: Path) -> Result[dict[str, str], PipelineError]:
    if not path.exists():
        return Ok({})
    try:
        data_obj: object = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        return _fail("read JSON manifest", f"{path}: {e}")

    data = as_str_dict(data_obj)
    if data is None:
        return _fail("read JSON manifest", f"{path}: root must be an object")

    versions: dict[str, str] = {}
    for key, value in data.items():
        if not isinstance(value, str):
            return _fail("read JSON manifest", f"{path}: value for {key} is not a URL")
        versions[key] = value
    return Ok(versions)


def _record_version(path: Path, version: str, url: str) -> Result[None, PipelineError]:
    loaded = _load_versions(path)
    if isinstance(loaded, Err):
        return loaded
    versions = loaded.value

    # A rerun of the same release replaces its own entry.
    versions[version] = url
    try:
        atomic_write_text(path, json.dumps(versions, indent=2, sort_keys=True) + "\n")
    except OSError as e:
        return _fail("update JSON manifest", f"{path}: {e}")
    return Ok(None)


def _add_support_files(
    product_dir: Path,
    template_dir: Path,
    diagnostics_path: Path | None,
) -> None:
    for name in TEMPLATE_FILES:
        src = template_dir / name
        dst = product_dir / name
        if src.is_file() and not dst.exists():
            copy_file(src, dst)

    if diagnostics_path is not None:
        dst = product_dir / diagnostics_path.name
        if not dst.exists():
            copy_file(diagnostics_path, dst)


def _zip_product(product_dir: Path, output_dir: Path) -> Path:
    staging = output_dir / f"{product_dir.name}.zip"
    zip_files(staging, files=collect_dir(product_dir, arc_prefix=""))
    digest = sha256_file(staging)[:_HASH_LENGTH]
    final = output_dir / f"{product_dir.name}-{digest}.zip"
    staging.replace(final)
    return final


def generate_carthage_release(
    source_dir: Path,
    template_dir: Path,
    json_dir: Path,
    version: str,
    diagnostics_path: Path | None,
    output_dir: Path,
    *,
    base_url: str = DEFAULT_CARTHAGE_BASE_URL,
) -> Result[list[Path], PipelineError]:
    """Zip each product in source_dir and record it in the JSON manifests.

    source_dir is modified (license files are added to each product), so
    callers pass a snapshot, never the primary release tree.

    Returns:
        Ok(list of product zips written to output_dir).
    """
    if diagnostics_path is not None and not diagnostics_path.is_file():
        return _fail("locate diagnostics", f"file not found: {diagnostics_path}")

    try:
        products = [p for p in list_dir(source_dir) if is_directory(p)]
    except OSError as e:
        return _fail("list products", e)

    written: list[Path] = []
    for product in products:
        try:
            _add_support_files(product, template_dir, diagnostics_path)
            zip_path = _zip_product(product, output_dir)
        except OSError as e:
            return _fail(f"package {product.name}", e)
        written.append(zip_path)

        url = f"{base_url}/{version}/{zip_path.name}"
        recorded = _record_version(binary_json_path(json_dir, product.name), version, url)
        if isinstance(recorded, Err):
            return recorded

    return Ok(written)


def package_carthage(
    location: Path,
    *,
    template_dir: Path,
    json_dir: Path,
    version: str,
    diagnostics_path: Path | None,
    rc_number: int | None,
    console: ConsoleProtocol,
    base_url: str = DEFAULT_CARTHAGE_BASE_URL,
) -> Result[Path, PipelineError]:
    """Build the Carthage distribution next to the release directory.

    Returns:
        Ok(carthage root), ready to be copied into the output directory.
    """
    console.print("Creating Carthage release...")
    carthage_root = location.parent / CARTHAGE_DIR_NAME
    output = carthage_root / version / carthage_segment(rc_number)

    try:
        remove_dir_if_exists(carthage_root)
        create_dir(output)
    except OSError as e:
        return _fail("prepare output directory", f"{output}: {e}")

    step = "copy release directory"
    try:
        with snapshot(location, location.parent / CARTHAGE_BUILD_DIR_NAME) as build_copy:
            step = "generate release"
            generated = generate_carthage_release(
                build_copy,
                template_dir,
                json_dir,
                version,
                diagnostics_path,
                output,
                base_url=base_url,
            )
            step = "remove copied release directory"
    except OSError as e:
        return _fail(step, e)

    if isinstance(generated, Err):
        return generated

    console.success(f"Done creating Carthage release! Files written to {output}")
    return Ok(carthage_root)
