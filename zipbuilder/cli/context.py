from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from zipbuilder.core.config import CONFIG_FILE_NAME, ZipBuilderConfig, load_config
from zipbuilder.core.errors import ErrorCode
from zipbuilder.core.result import Err
from zipbuilder.output.console import ConsoleProtocol, RichConsole
from zipbuilder.output.errors import print_config_error


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: ZipBuilderConfig
    config_path: Path | None
    console: ConsoleProtocol


def build_context(config_path: Path | None = None) -> CLIContext:
    """Load zip-builder.toml (explicit path, or the cwd default if present)."""
    console = RichConsole()

    path = config_path
    if path is None:
        default = Path.cwd() / CONFIG_FILE_NAME
        if default.is_file():
            path = default

    config = ZipBuilderConfig()
    if path is not None:
        result = load_config(path)
        if isinstance(result, Err):
            print_config_error(result.error, console)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))
        config = result.value

    return CLIContext(config=config, config_path=path, console=console)
