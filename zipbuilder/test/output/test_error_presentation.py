from __future__ import annotations

from pathlib import Path

import pytest

from zipbuilder.core.config import ConfigError
from zipbuilder.core.errors import ErrorCode
from zipbuilder.output.console import MockConsole, Style
from zipbuilder.output.errors import (
    pipeline_error_exit_code,
    print_config_error,
    print_pipeline_error,
)
from zipbuilder.services.errors import (
    ArchiveFailed,
    BuildFailed,
    BundleCollision,
    OutputPlacementFailed,
    PipelineError,
    RelocationFailed,
    SecondaryPackagingFailed,
    SetupFailed,
)


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (SetupFailed(step="remove the cache", reason="denied"), ErrorCode.SETUP_ERROR),
        (BuildFailed(reason="exit 65"), ErrorCode.BUILD_ERROR),
        (RelocationFailed(path=Path("Firebase"), reason="x"), ErrorCode.PACKAGING_ERROR),
        (
            BundleCollision(destination=Path("R/A.bundle"), sources=(Path("a"), Path("b"))),
            ErrorCode.PACKAGING_ERROR,
        ),
        (SecondaryPackagingFailed(step="generate", reason="x"), ErrorCode.PACKAGING_ERROR),
        (ArchiveFailed(path=Path("Firebase"), reason="x"), ErrorCode.PACKAGING_ERROR),
        (OutputPlacementFailed(path=Path("out"), reason="x"), ErrorCode.IO_ERROR),
    ],
)
def test_exit_codes(error: PipelineError, code: ErrorCode) -> None:
    assert pipeline_error_exit_code(error) == int(code)


def test_every_error_prints_one_error_line() -> None:
    errors: list[PipelineError] = [
        SetupFailed(step="remove the cache", reason="denied"),
        BuildFailed(reason="exit 65", log_path=Path("build.log")),
        RelocationFailed(path=Path("Firebase"), reason="x"),
        BundleCollision(destination=Path("R/A.bundle"), sources=(Path("a"), Path("b"))),
        SecondaryPackagingFailed(step="generate", reason="x"),
        ArchiveFailed(path=Path("Firebase"), reason="x"),
        OutputPlacementFailed(path=Path("out"), reason="x"),
    ]
    for error in errors:
        console = MockConsole()
        print_pipeline_error(error, console)
        assert sum(1 for o in console.outputs if o.style == Style.ERROR) == 1


def test_build_failure_shows_log_path() -> None:
    console = MockConsole()

    print_pipeline_error(BuildFailed(reason="exit 65", log_path=Path("logs/build.log")), console)

    assert console.find("Could not build the zip file: exit 65")
    assert console.find("build log:")


def test_bundle_collision_lists_sources() -> None:
    console = MockConsole()

    print_pipeline_error(
        BundleCollision(
            destination=Path("R/A.bundle"),
            sources=(Path("x/A.bundle"), Path("y/A.bundle")),
        ),
        console,
    )

    assert len(console.find("  from ")) == 2
    assert console.find("hint:")


def test_config_error_with_hint() -> None:
    console = MockConsole()

    print_config_error(ConfigError("bad", hint="fix it"), console)

    assert console.messages == ["error: bad", "hint: fix it"]
