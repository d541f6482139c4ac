"""Exit codes for the modver CLI."""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Process exit codes.

    These values are part of the CLI contract and should remain stable:
    - 0: Success
    - 1: User error (malformed identifier, bad template, invalid arguments)
    - 2: Environment error (build info unavailable, go toolchain missing)
    - 5: I/O error (file not found, permission denied)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
