"""Run external tools with Result-based error handling.

Usage:
    result = run(["go", "version", "-m", "./app"], cwd=Path("."), timeout=30)
    match result:
        case Ok(stdout):
            print(stdout)
        case Err(error):
            print(f"{error}: {error.stderr}")
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from modver.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run"]

# returncode of a process that never ran to completion
NOT_RUN = -1


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A tool that could not be started, timed out, or exited non-zero.

    Attributes:
        command: The command line, program first.
        returncode: Exit status, or NOT_RUN when the tool never finished.
        stderr: What the tool printed on stderr, or why it never ran.
    """

    command: tuple[str, ...]
    returncode: int
    stderr: str

    def __str__(self) -> str:
        shown = " ".join(self.command[:3]) + (" ..." if len(self.command) > 3 else "")
        if self.returncode == NOT_RUN:
            return f"{shown} did not run"
        return f"{shown} failed (exit {self.returncode})"


def run(
    cmd: Sequence[str], *, cwd: Path, timeout: float | None = None
) -> Result[str, ProcessError]:
    """Run `cmd` in `cwd` and return its stdout as text.

    A missing executable or an expired `timeout` is reported the same way as
    a non-zero exit, with `returncode` set to NOT_RUN.
    """
    command = tuple(cmd)
    try:
        proc = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return Err(ProcessError(command, NOT_RUN, f"timed out after {timeout}s"))
    except OSError as e:
        return Err(ProcessError(command, NOT_RUN, str(e)))

    if proc.returncode != 0:
        return Err(ProcessError(command, proc.returncode, proc.stderr))
    return Ok(proc.stdout)
