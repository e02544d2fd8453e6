"""
Homebrew command execution.

Every brew invocation returns a ``CommandResult``; a non-zero exit status is
data, not an exception. The caller decides whether a failure is fatal.
"""

from __future__ import annotations

import subprocess
import time
from dataclasses import dataclass
from typing import Sequence

from .common import vlog


# Exit status reported when the executable cannot be started
COMMAND_NOT_FOUND = 127
# Exit status reported when the executable exists but cannot be run
COMMAND_NOT_EXECUTABLE = 126


@dataclass(frozen=True)
class CommandResult:
    """
    Result of running a single brew command.

    Attributes:
        command: Full command line that was executed
        exit_code: Process exit code (127 if the executable was not found,
            126 if it could not be run, -1 on timeout)
        stdout: Captured standard output (empty when output went to the terminal)
        stderr: Captured standard error (empty when output went to the terminal)
        duration_seconds: Time taken to run the command
        error_message: Human-readable error message if failed
    """
    command: tuple[str, ...]
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    duration_seconds: float = 0.0
    error_message: str | None = None

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.command)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "command": list(self.command),
            "exit_code": self.exit_code,
            "success": self.success,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "duration_seconds": self.duration_seconds,
            "error_message": self.error_message,
        }


def run_command(
    command: Sequence[str],
    capture: bool = True,
    timeout: int | None = None,
    verbose: bool = False,
) -> CommandResult:
    """
    Run an external command.

    Args:
        command: Command and arguments
        capture: Capture output instead of letting it reach the terminal
        timeout: Timeout in seconds, None waits forever
        verbose: Enable verbose logging

    Returns:
        CommandResult with the execution outcome
    """
    command = tuple(command)
    vlog(f"Executing: {' '.join(command)}", verbose)
    start_time = time.time()

    try:
        result = subprocess.run(
            command,
            capture_output=capture,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError:
        return CommandResult(
            command=command,
            exit_code=COMMAND_NOT_FOUND,
            duration_seconds=time.time() - start_time,
            error_message=f"Command not found: {command[0]}",
        )
    except subprocess.TimeoutExpired as e:
        return CommandResult(
            command=command,
            exit_code=-1,
            stdout=_decode(e.stdout),
            stderr=_decode(e.stderr),
            duration_seconds=time.time() - start_time,
            error_message=f"Command timed out after {timeout}s",
        )
    except OSError as e:
        return CommandResult(
            command=command,
            exit_code=COMMAND_NOT_EXECUTABLE,
            duration_seconds=time.time() - start_time,
            error_message=f"Cannot execute {command[0]}: {e}",
        )

    error_msg = None
    if result.returncode != 0:
        error_msg = f"Command failed with exit code {result.returncode}"
        if capture and result.stderr:
            error_msg += f": {result.stderr.strip()[:200]}"

    return CommandResult(
        command=command,
        exit_code=result.returncode,
        stdout=(result.stdout or "") if capture else "",
        stderr=(result.stderr or "") if capture else "",
        duration_seconds=time.time() - start_time,
        error_message=error_msg,
    )


def _decode(output) -> str:
    if not output:
        return ""
    if isinstance(output, bytes):
        return output.decode(errors="replace")
    return output


class Homebrew:
    """
    Thin wrapper around the ``brew`` command line.

    Query operations capture brew's output. Link, unlink and upgrade echo
    ``* brew <args>`` first and let brew write straight to the terminal.
    """

    def __init__(self, executable: str = "brew", timeout: int | None = None, verbose: bool = False):
        self.executable = executable
        self.timeout = timeout
        self.verbose = verbose

    def run(self, *args: str, capture: bool = True) -> CommandResult:
        return run_command(
            (self.executable,) + args,
            capture=capture,
            timeout=self.timeout,
            verbose=self.verbose,
        )

    def _mutate(self, *args: str) -> CommandResult:
        print(f"* brew {' '.join(args)}", flush=True)
        return self.run(*args, capture=False)

    def list_formulae(self) -> CommandResult:
        """``brew list -1``: one installed formula per line."""
        return self.run("list", "-1")

    def prefix(self, formula: str) -> str | None:
        """
        Installation prefix of a formula (``brew --prefix <formula>``).

        Returns:
            The prefix path, or None if brew could not resolve it
        """
        result = self.run("--prefix", formula)
        path = result.stdout.strip()
        if not result.success or not path:
            vlog(f"Could not resolve prefix of {formula}: {result.error_message}", self.verbose)
            return None
        return path

    def link(self, formula: str, overwrite: bool = True) -> CommandResult:
        if overwrite:
            return self._mutate("link", "--overwrite", formula)
        return self._mutate("link", formula)

    def unlink(self, formula: str) -> CommandResult:
        return self._mutate("unlink", formula)

    def upgrade(self, formula: str) -> CommandResult:
        return self._mutate("upgrade", formula)
