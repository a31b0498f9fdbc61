"""Typed launch arguments and configuration.

Launch arguments come from the CLI; defaults that rarely change between
releases (the build command, cache location, Carthage download URL) can be
kept in a ``zip-builder.toml`` file. Both are immutable once constructed.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_CARTHAGE_BASE_URL",
    "ConfigError",
    "FilesystemPaths",
    "LaunchArgs",
    "ZipBuilderConfig",
    "load_config",
    "validate_launch_args",
]

CONFIG_FILE_NAME = "zip-builder.toml"
DEFAULT_CARTHAGE_BASE_URL = "https://dl.google.com/dl/firebase/ios/carthage"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when launch arguments or the config file are invalid."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class FilesystemPaths:
    """Paths handed to the build collaborator.

    A path left as None disables the matching feature (no logs dir means no
    log capture).
    """

    template_dir: Path
    all_sdks_path: Path | None = None
    current_release_path: Path | None = None
    logs_output_dir: Path | None = None


@dataclass(frozen=True, slots=True)
class LaunchArgs:
    """Parsed process arguments, read-only for the whole run."""

    template_dir: Path
    update_pod_repo: bool = False
    all_sdks_path: Path | None = None
    current_release_path: Path | None = None
    output_dir: Path | None = None
    carthage_dir: Path | None = None
    rc_number: int | None = None
    custom_spec_repos: tuple[str, ...] | None = None

    def filesystem_paths(self, *, logs_output_dir: Path | None = None) -> FilesystemPaths:
        return FilesystemPaths(
            template_dir=self.template_dir,
            all_sdks_path=self.all_sdks_path,
            current_release_path=self.current_release_path,
            logs_output_dir=logs_output_dir,
        )


@dataclass(frozen=True, slots=True)
class ZipBuilderConfig:
    """Settings from zip-builder.toml."""

    build_command: tuple[str, ...] = field(default_factory=tuple)
    cache_dir: Path | None = None
    carthage_base_url: str = DEFAULT_CARTHAGE_BASE_URL

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, base_dir: Path) -> ZipBuilderConfig:
        """Create config from parsed TOML.

        Relative paths are resolved against ``base_dir`` (the config file's
        directory).

        Raises:
            ValueError: If ``[build] command`` is present but not a list of
                non-empty strings.
        """
        build: StrDict = get_table(data, "build") or {}
        cache: StrDict = get_table(data, "cache") or {}
        carthage: StrDict = get_table(data, "carthage") or {}

        command: tuple[str, ...] = ()
        if "command" in build:
            items = get_str_list(build, "command")
            if not items:
                raise ValueError("[build] command must be a non-empty list of strings")
            command = tuple(items)

        cache_dir: Path | None = None
        cache_str = get_str(cache, "dir")
        if cache_str is not None:
            cache_dir = Path(cache_str).expanduser()
            if not cache_dir.is_absolute():
                cache_dir = base_dir / cache_dir

        return cls(
            build_command=command,
            cache_dir=cache_dir,
            carthage_base_url=(get_str(carthage, "base_url") or DEFAULT_CARTHAGE_BASE_URL).rstrip(
                "/"
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[ZipBuilderConfig, ConfigError]:
    """Load and parse zip-builder.toml.

    Args:
        path: Path to the config file.

    Returns:
        Ok(ZipBuilderConfig) on success, Err(ConfigError) on failure.
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ZipBuilderConfig.from_dict(result.value, base_dir=path.parent))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def _require_dir(path: Path, flag: str) -> ConfigError | None:
    if not path.exists():
        return ConfigError(f"{flag} does not exist: {path}", path=path)
    if not path.is_dir():
        return ConfigError(f"{flag} is not a directory: {path}", path=path)
    return None


def validate_launch_args(args: LaunchArgs) -> Result[LaunchArgs, ConfigError]:
    """Check the launch arguments before anything touches the filesystem."""
    error = _require_dir(args.template_dir, "--template-dir")
    if error is not None:
        return Err(error)

    if args.carthage_dir is not None:
        error = _require_dir(args.carthage_dir, "--carthage-dir")
        if error is not None:
            return Err(error)

    for path, flag in (
        (args.all_sdks_path, "--all-sdks-path"),
        (args.current_release_path, "--current-release-path"),
    ):
        if path is not None and not path.exists():
            return Err(ConfigError(f"{flag} does not exist: {path}", path=path))

    if args.rc_number is not None and args.rc_number < 0:
        return Err(ConfigError(f"--rc-number must be >= 0, got {args.rc_number}"))

    if args.custom_spec_repos is not None and any(not r.strip() for r in args.custom_spec_repos):
        return Err(ConfigError("--custom-spec-repos entries must not be empty"))

    if args.output_dir is not None and args.output_dir.exists() and not args.output_dir.is_dir():
        return Err(
            ConfigError(
                f"--output-dir exists and is not a directory: {args.output_dir}",
                path=args.output_dir,
            )
        )

    return Ok(args)
