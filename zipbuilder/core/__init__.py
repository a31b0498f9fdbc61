"""Core domain types and logic."""

from .config import (
    ConfigError,
    FilesystemPaths,
    LaunchArgs,
    ZipBuilderConfig,
    load_config,
    validate_launch_args,
)
from .errors import ErrorCode
from .naming import candidate_name, carthage_segment, versioned_dir_name
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "ConfigError",
    "FilesystemPaths",
    "LaunchArgs",
    "ZipBuilderConfig",
    "load_config",
    "validate_launch_args",
    # errors
    "ErrorCode",
    # naming
    "candidate_name",
    "carthage_segment",
    "versioned_dir_name",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
