"""Release assembly pipeline.

Steps, strictly in order:

1. Remove the build cache and create the per-run project directory.
2. Optionally update the CocoaPods spec repos.
3. Build and assemble the release (external collaborator).
4. Move resource bundles into per-product ``Resources`` directories.
5. Optionally produce the Carthage distribution from a snapshot.
6. Zip the release directory.
7. Optionally place the zip (and Carthage tree) in the output directory.

The first failing step ends the run; nothing is rolled back. The time
profile is printed on every exit path.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from zipbuilder.core.config import DEFAULT_CARTHAGE_BASE_URL, LaunchArgs
from zipbuilder.core.naming import candidate_name
from zipbuilder.core.result import Err, Ok, Result
from zipbuilder.output.console import ConsoleProtocol, Style
from zipbuilder.platform.paths import temporary_directory
from zipbuilder.platform.process import CommandRunner, run_silent
from zipbuilder.services.archive import zip_contents
from zipbuilder.services.builder import ReleaseBuilder
from zipbuilder.services.cache import invalidate_cache
from zipbuilder.services.carthage import package_carthage
from zipbuilder.services.errors import PipelineError, SetupFailed
from zipbuilder.services.output import BUILD_LOGS_DIR_NAME, copy_build_logs, place_outputs
from zipbuilder.services.pods import update_pod_repos
from zipbuilder.services.resources import relocate_resources

__all__ = ["FinalArtifacts", "ReleasePipeline"]


@dataclass(frozen=True, slots=True)
class FinalArtifacts:
    """Where the release ended up.

    Attributes:
        version: Released version, e.g. "10.5.0".
        archive: Final location of the primary zip (inside output_dir when
            one was requested).
        carthage_dir: Carthage tree, if one was produced.
        output_dir: Output directory, if one was requested.
    """

    version: str
    archive: Path
    carthage_dir: Path | None = None
    output_dir: Path | None = None


@dataclass(slots=True)
class _Timing:
    started: float
    pods_message: str | None = None


class ReleasePipeline:
    def __init__(
        self,
        *,
        builder: ReleaseBuilder,
        console: ConsoleProtocol,
        cache_dir: Path,
        carthage_base_url: str = DEFAULT_CARTHAGE_BASE_URL,
        pod_runner: CommandRunner = run_silent,
        clock: Callable[[], float] = time.monotonic,
        make_project_dir: Callable[[str], Path] = temporary_directory,
    ) -> None:
        self._builder = builder
        self._console = console
        self._cache_dir = cache_dir
        self._carthage_base_url = carthage_base_url
        self._pod_runner = pod_runner
        self._clock = clock
        self._make_project_dir = make_project_dir

    def run(self, args: LaunchArgs) -> Result[FinalArtifacts, PipelineError]:
        timing = _Timing(started=self._clock())
        result: Result[FinalArtifacts, PipelineError] | None = None
        try:
            result = self._run(args, timing)
            return result
        finally:
            self._report_timing(timing, succeeded=isinstance(result, Ok))

    def _run(self, args: LaunchArgs, timing: _Timing) -> Result[FinalArtifacts, PipelineError]:
        console = self._console

        removed = invalidate_cache(self._cache_dir)
        if isinstance(removed, Err):
            return removed
        if removed.value:
            console.print(f"Removed cache: {self._cache_dir}", Style.DIM)

        try:
            project_dir = self._make_project_dir("project")
        except OSError as e:
            return Err(SetupFailed(step="create the project directory", reason=str(e)))

        if args.update_pod_repo:
            pods_started = self._clock()
            synced = update_pod_repos(project_dir, runner=self._pod_runner)
            elapsed = self._clock() - pods_started
            timing.pods_message = f"CocoaPods took {elapsed:.0f} seconds to update."
            if isinstance(synced, Err):
                return synced

        logs_dir = project_dir / BUILD_LOGS_DIR_NAME if args.output_dir is not None else None
        built = self._builder.build_and_assemble_release(
            project_dir,
            args.filesystem_paths(logs_output_dir=logs_dir),
            args.custom_spec_repos,
        )
        if isinstance(built, Err):
            return built
        artifacts = built.value
        version = artifacts.firebase_version
        location = artifacts.output_dir
        console.print(f"Firebase {version} directory is ready to be packaged: {location}")

        relocated = relocate_resources(location)
        if isinstance(relocated, Err):
            return relocated
        console.print(f"Moved {relocated.value} resource bundles", Style.DIM)

        carthage_root: Path | None = None
        if args.carthage_dir is not None:
            packaged = package_carthage(
                location,
                template_dir=args.template_dir,
                json_dir=args.carthage_dir,
                version=version,
                diagnostics_path=artifacts.carthage_diagnostics,
                rc_number=args.rc_number,
                console=console,
                base_url=self._carthage_base_url,
            )
            if isinstance(packaged, Err):
                return packaged
            carthage_root = packaged.value

        console.print("Attempting to Zip the directory...")
        zipped = zip_contents(location, candidate_name(version, args.rc_number))
        if isinstance(zipped, Err):
            return zipped

        if args.output_dir is None:
            console.success(f"Success! Zip file can be found at {zipped.value}")
            return Ok(
                FinalArtifacts(version=version, archive=zipped.value, carthage_dir=carthage_root)
            )

        placed = place_outputs(zipped.value, carthage_root, args.output_dir, version)
        if isinstance(placed, Err):
            return placed

        if logs_dir is not None:
            logs = copy_build_logs(logs_dir, args.output_dir)
            if isinstance(logs, Err):
                return logs

        console.success(f"Success! Zip file can be found at {placed.value.archive}")
        if placed.value.carthage_dir is not None:
            console.success(f"Carthage release copied to {placed.value.carthage_dir}")

        return Ok(
            FinalArtifacts(
                version=version,
                archive=placed.value.archive,
                carthage_dir=placed.value.carthage_dir,
                output_dir=args.output_dir,
            )
        )

    def _report_timing(self, timing: _Timing, *, succeeded: bool) -> None:
        seconds = int(self._clock() - timing.started)
        self._console.header("Time profile:")
        if succeeded:
            self._console.print(
                f"  It took {seconds} seconds (~{seconds // 60}m) to build the zip file."
            )
        else:
            self._console.print(f"  The build failed in {seconds} seconds (~{seconds // 60}m).")
        if timing.pods_message is not None:
            self._console.print(f"  {timing.pods_message}")
