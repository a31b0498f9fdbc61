from __future__ import annotations

import shlex
from pathlib import Path

import typer

from zipbuilder import __version__
from zipbuilder.cli.context import build_context
from zipbuilder.core.config import LaunchArgs, validate_launch_args
from zipbuilder.core.errors import ErrorCode
from zipbuilder.core.result import Err
from zipbuilder.output.console import Style
from zipbuilder.output.errors import (
    pipeline_error_exit_code,
    print_config_error,
    print_pipeline_error,
)
from zipbuilder.platform.paths import cache_dir as default_cache_dir
from zipbuilder.services.builder import CommandReleaseBuilder
from zipbuilder.services.pipeline import ReleasePipeline

app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
)


def _split_repos(values: list[str] | None) -> tuple[str, ...] | None:
    if not values:
        return None
    repos: list[str] = []
    for value in values:
        repos.extend(part.strip() for part in value.split(","))
    return tuple(repos)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.command()
def build_zip(
    template_dir: Path = typer.Option(
        ..., "--template-dir", help="Template directory (license, notices, readme)"
    ),
    update_pod_repo: bool = typer.Option(
        False, "--update-pod-repo", help="Run 'pod repo update' before building"
    ),
    all_sdks_path: Path | None = typer.Option(
        None, "--all-sdks-path", "--all-ssdks-path", help="Override for the all-SDKs file"
    ),
    current_release_path: Path | None = typer.Option(
        None, "--current-release-path", help="Override for the current release file"
    ),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        help="Cleared and filled with the versioned zip (default: print its location)",
    ),
    carthage_dir: Path | None = typer.Option(
        None, "--carthage-dir", help="Carthage JSON manifests; enables the Carthage release"
    ),
    rc_number: int | None = typer.Option(
        None, "--rc-number", min=0, help="Release candidate number"
    ),
    custom_spec_repos: list[str] | None = typer.Option(
        None, "--custom-spec-repos", help="Custom podspec repos (repeatable or comma separated)"
    ),
    build_command: str | None = typer.Option(
        None, "--build-command", help="Build command (overrides [build] command)"
    ),
    config: Path | None = typer.Option(None, "--config", help="Path to zip-builder.toml"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Assemble the release zip (and optional Carthage distribution)."""
    ctx = build_context(config)
    console = ctx.console

    validated = validate_launch_args(
        LaunchArgs(
            template_dir=template_dir,
            update_pod_repo=update_pod_repo,
            all_sdks_path=all_sdks_path,
            current_release_path=current_release_path,
            output_dir=output_dir,
            carthage_dir=carthage_dir,
            rc_number=rc_number,
            custom_spec_repos=_split_repos(custom_spec_repos),
        )
    )
    if isinstance(validated, Err):
        print_config_error(validated.error, console)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    command = tuple(shlex.split(build_command)) if build_command else ctx.config.build_command
    if not command:
        console.error("no build command configured")
        console.print("hint: pass --build-command or set [build] command", Style.DIM)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    cache_dir = ctx.config.cache_dir or default_cache_dir()
    pipeline = ReleasePipeline(
        builder=CommandReleaseBuilder(command, console=console, cache_dir=cache_dir),
        console=console,
        cache_dir=cache_dir,
        carthage_base_url=ctx.config.carthage_base_url,
    )
    result = pipeline.run(validated.value)
    if isinstance(result, Err):
        print_pipeline_error(result.error, console)
        raise typer.Exit(code=pipeline_error_exit_code(result.error))


def main() -> None:
    app()
