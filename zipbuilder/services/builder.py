"""Build collaborator contract.

The pipeline treats the library build as opaque: it hands over the
filesystem paths and custom spec repos and gets back a directory of
assembled artifacts plus the release version.

CommandReleaseBuilder runs an external build command in the per-run project
directory. The command receives its inputs through ``ZIP_BUILDER_*``
environment variables, including ``ZIP_BUILDER_CACHE_DIR``, the cache the
pipeline wipes before every build, and reports back by writing ``release.json``:

    {
      "version": "10.5.0",
      "output_dir": "Firebase",
      "carthage_diagnostics": "FirebaseCoreDiagnostics.zip"
    }

Relative paths are resolved against the project directory.
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from zipbuilder.core.config import FilesystemPaths
from zipbuilder.core.result import Err, Ok, Result
from zipbuilder.core.structured import as_str_dict, get_str
from zipbuilder.output.console import ConsoleProtocol
from zipbuilder.platform.process import ProcessError, run_logged, run_silent
from zipbuilder.services.errors import BuildFailed, PipelineError

__all__ = [
    "BUILD_LOG_NAME",
    "MANIFEST_NAME",
    "CommandReleaseBuilder",
    "ReleaseArtifacts",
    "ReleaseBuilder",
]

MANIFEST_NAME = "release.json"
BUILD_LOG_NAME = "build.log"

_VERSION_RE = re.compile(r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)$")


@dataclass(frozen=True, slots=True)
class ReleaseArtifacts:
    """What the build produced.

    Attributes:
        firebase_version: Dotted semantic version, e.g. "10.5.0".
        output_dir: Root of the assembled release tree.
        carthage_diagnostics: Diagnostics file bundled into Carthage zips.
    """

    firebase_version: str
    output_dir: Path
    carthage_diagnostics: Path | None = None


class ReleaseBuilder(Protocol):
    def build_and_assemble_release(
        self,
        project_dir: Path,
        paths: FilesystemPaths,
        custom_spec_repos: tuple[str, ...] | None,
    ) -> Result[ReleaseArtifacts, PipelineError]: ...


def _resolve(project_dir: Path, value: str) -> Path:
    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return project_dir / path


def read_manifest(project_dir: Path) -> Result[ReleaseArtifacts, PipelineError]:
    """Parse the release.json written by the build command."""
    manifest = project_dir / MANIFEST_NAME
    try:
        data_obj: object = json.loads(manifest.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(BuildFailed(reason=f"build did not write {manifest}"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        return Err(BuildFailed(reason=f"invalid {MANIFEST_NAME}: {e}"))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(BuildFailed(reason=f"{MANIFEST_NAME} must be a JSON object"))

    version = get_str(data, "version")
    if version is None or _VERSION_RE.match(version) is None:
        return Err(BuildFailed(reason=f"{MANIFEST_NAME}: invalid version {version!r}"))

    output_str = get_str(data, "output_dir")
    if output_str is None:
        return Err(BuildFailed(reason=f"{MANIFEST_NAME}: missing output_dir"))
    output_dir = _resolve(project_dir, output_str)
    if not output_dir.is_dir():
        return Err(BuildFailed(reason=f"build output directory not found: {output_dir}"))

    diagnostics: Path | None = None
    diagnostics_str = get_str(data, "carthage_diagnostics")
    if diagnostics_str is not None:
        diagnostics = _resolve(project_dir, diagnostics_str)

    return Ok(
        ReleaseArtifacts(
            firebase_version=version,
            output_dir=output_dir,
            carthage_diagnostics=diagnostics,
        )
    )


class CommandReleaseBuilder:
    """Runs the configured build command and reads back its manifest."""

    def __init__(
        self,
        command: tuple[str, ...],
        *,
        console: ConsoleProtocol,
        cache_dir: Path | None = None,
    ) -> None:
        self._command = command
        self._console = console
        self._cache_dir = cache_dir

    def _env(
        self,
        project_dir: Path,
        paths: FilesystemPaths,
        custom_spec_repos: tuple[str, ...] | None,
    ) -> dict[str, str]:
        env = dict(os.environ)
        env["ZIP_BUILDER_PROJECT_DIR"] = str(project_dir)
        env["ZIP_BUILDER_TEMPLATE_DIR"] = str(paths.template_dir)
        if self._cache_dir is not None:
            env["ZIP_BUILDER_CACHE_DIR"] = str(self._cache_dir)
        if paths.all_sdks_path is not None:
            env["ZIP_BUILDER_ALL_SDKS_PATH"] = str(paths.all_sdks_path)
        if paths.current_release_path is not None:
            env["ZIP_BUILDER_CURRENT_RELEASE_PATH"] = str(paths.current_release_path)
        if custom_spec_repos is not None:
            env["ZIP_BUILDER_CUSTOM_SPEC_REPOS"] = ",".join(custom_spec_repos)
        return env

    def build_and_assemble_release(
        self,
        project_dir: Path,
        paths: FilesystemPaths,
        custom_spec_repos: tuple[str, ...] | None,
    ) -> Result[ReleaseArtifacts, PipelineError]:
        if not self._command:
            return Err(BuildFailed(reason="no build command configured"))

        env = self._env(project_dir, paths, custom_spec_repos)
        cmd = list(self._command)
        self._console.print(f"Building release in {project_dir}")

        log_path: Path | None = None
        result: Result[None, ProcessError]
        if paths.logs_output_dir is not None:
            log_path = paths.logs_output_dir / BUILD_LOG_NAME
            try:
                paths.logs_output_dir.mkdir(parents=True, exist_ok=True)
                with log_path.open("w", encoding="utf-8") as log:
                    result = run_logged(cmd, cwd=project_dir, log=log, env=env)
            except OSError as e:
                return Err(BuildFailed(reason=f"cannot write build log: {e}", log_path=log_path))
        else:
            result = run_silent(cmd, cwd=project_dir, env=env)

        if isinstance(result, Err):
            return Err(BuildFailed(reason=str(result.error), log_path=log_path))

        return read_manifest(project_dir)
