"""Process exit codes.

Each fatal pipeline error maps to one of these codes. The values are part of
the CLI contract used by release automation and must stay stable.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the zip-builder CLI.

    - 0: Success
    - 1: User error (bad arguments, invalid config file)
    - 2: Setup error (cache removal, temp directory, dependency sync)
    - 3: Build error (the build collaborator failed)
    - 4: Packaging error (resource relocation, Carthage, archive)
    - 5: I/O error (copying into the output directory)
    """

    OK = 0
    USER_ERROR = 1
    SETUP_ERROR = 2
    BUILD_ERROR = 3
    PACKAGING_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK

    @property
    def is_error(self) -> bool:
        return self != ErrorCode.OK
