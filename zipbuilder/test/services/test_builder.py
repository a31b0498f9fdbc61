from __future__ import annotations

import json
import sys
from pathlib import Path

from zipbuilder.core.config import FilesystemPaths
from zipbuilder.core.result import Err, Ok
from zipbuilder.output.console import MockConsole
from zipbuilder.services.builder import (
    MANIFEST_NAME,
    CommandReleaseBuilder,
    ReleaseArtifacts,
    read_manifest,
)
from zipbuilder.services.errors import BuildFailed

_BUILD_SCRIPT = """
import json, os, pathlib
project = pathlib.Path(os.environ["ZIP_BUILDER_PROJECT_DIR"])
out = project / "Firebase"
(out / "FirebaseCore").mkdir(parents=True)
(project / "env.json").write_text(json.dumps({
    k: v for k, v in os.environ.items() if k.startswith("ZIP_BUILDER_")
}))
(project / "release.json").write_text(json.dumps({
    "version": "10.5.0",
    "output_dir": "Firebase",
    "carthage_diagnostics": "diag.zip",
}))
print("building")
"""


def _builder(tmp_path: Path, script: str) -> CommandReleaseBuilder:
    path = tmp_path / "build.py"
    path.write_text(script, encoding="utf-8")
    return CommandReleaseBuilder((sys.executable, str(path)), console=MockConsole())


def _project(tmp_path: Path) -> Path:
    project = tmp_path / "project"
    project.mkdir()
    return project


def test_command_builder_reads_manifest(tmp_path: Path) -> None:
    project = _project(tmp_path)
    builder = _builder(tmp_path, _BUILD_SCRIPT)

    result = builder.build_and_assemble_release(
        project,
        FilesystemPaths(template_dir=tmp_path / "template"),
        ("https://github.com/firebase/SpecsDev.git", "https://github.com/CocoaPods/Specs.git"),
    )

    assert result == Ok(
        ReleaseArtifacts(
            firebase_version="10.5.0",
            output_dir=project / "Firebase",
            carthage_diagnostics=project / "diag.zip",
        )
    )
    env = json.loads((project / "env.json").read_text(encoding="utf-8"))
    assert env["ZIP_BUILDER_TEMPLATE_DIR"] == str(tmp_path / "template")
    assert env["ZIP_BUILDER_CUSTOM_SPEC_REPOS"] == (
        "https://github.com/firebase/SpecsDev.git,https://github.com/CocoaPods/Specs.git"
    )
    assert "ZIP_BUILDER_ALL_SDKS_PATH" not in env


def test_command_builder_captures_log(tmp_path: Path) -> None:
    project = _project(tmp_path)
    logs = project / "build_logs"
    builder = _builder(tmp_path, _BUILD_SCRIPT)

    result = builder.build_and_assemble_release(
        project, FilesystemPaths(template_dir=tmp_path, logs_output_dir=logs), None
    )

    assert isinstance(result, Ok)
    assert "building" in (logs / "build.log").read_text(encoding="utf-8")


def test_command_builder_failure(tmp_path: Path) -> None:
    project = _project(tmp_path)
    builder = _builder(tmp_path, "import sys; sys.exit(65)\n")

    result = builder.build_and_assemble_release(
        project, FilesystemPaths(template_dir=tmp_path), None
    )

    assert isinstance(result, Err)
    assert isinstance(result.error, BuildFailed)
    assert "exit 65" in result.error.reason


def test_command_builder_without_command(tmp_path: Path) -> None:
    builder = CommandReleaseBuilder((), console=MockConsole())

    result = builder.build_and_assemble_release(
        tmp_path, FilesystemPaths(template_dir=tmp_path), None
    )

    assert result == Err(BuildFailed(reason="no build command configured"))


def test_read_manifest_missing(tmp_path: Path) -> None:
    result = read_manifest(tmp_path)

    assert isinstance(result, Err)
    assert "did not write" in result.error.reason


def test_read_manifest_rejects_bad_version(tmp_path: Path) -> None:
    (tmp_path / "Firebase").mkdir()
    (tmp_path / MANIFEST_NAME).write_text(
        json.dumps({"version": "10.5", "output_dir": "Firebase"}), encoding="utf-8"
    )

    result = read_manifest(tmp_path)

    assert isinstance(result, Err)
    assert "invalid version" in result.error.reason


def test_read_manifest_requires_existing_output(tmp_path: Path) -> None:
    (tmp_path / MANIFEST_NAME).write_text(
        json.dumps({"version": "10.5.0", "output_dir": "Firebase"}), encoding="utf-8"
    )

    result = read_manifest(tmp_path)

    assert isinstance(result, Err)
    assert "not found" in result.error.reason


def test_read_manifest_without_diagnostics(tmp_path: Path) -> None:
    out = tmp_path / "abs" / "Firebase"
    out.mkdir(parents=True)
    (tmp_path / MANIFEST_NAME).write_text(
        json.dumps({"version": "1.2.3", "output_dir": str(out)}), encoding="utf-8"
    )

    assert read_manifest(tmp_path) == Ok(ReleaseArtifacts(firebase_version="1.2.3", output_dir=out))


def test_command_builder_exports_cache_dir(tmp_path: Path) -> None:
    project = _project(tmp_path)
    path = tmp_path / "build.py"
    path.write_text(_BUILD_SCRIPT, encoding="utf-8")
    builder = CommandReleaseBuilder(
        (sys.executable, str(path)), console=MockConsole(), cache_dir=tmp_path / "cache"
    )

    result = builder.build_and_assemble_release(
        project, FilesystemPaths(template_dir=tmp_path), None
    )

    assert isinstance(result, Ok)
    env = json.loads((project / "env.json").read_text(encoding="utf-8"))
    assert env["ZIP_BUILDER_CACHE_DIR"] == str(tmp_path / "cache")


def test_command_builder_without_cache_dir_omits_variable(tmp_path: Path) -> None:
    project = _project(tmp_path)

    result = _builder(tmp_path, _BUILD_SCRIPT).build_and_assemble_release(
        project, FilesystemPaths(template_dir=tmp_path), None
    )

    assert isinstance(result, Ok)
    env = json.loads((project / "env.json").read_text(encoding="utf-8"))
    assert "ZIP_BUILDER_CACHE_DIR" not in env
