"""
Detection of the active PHP version.

The active version is the one whose ``php`` is first in PATH, i.e. the
formula currently linked into the Homebrew prefix.
"""

from __future__ import annotations

import os
import re
import subprocess

from .common import vlog
from .packages import format_version


PHP_VERSION_RE = re.compile(r"^PHP\s*(\d+)\.(\d+)")
ANSI_ESCAPE_RE = re.compile(r'\x1b\[[0-9;]*m|\033\[[0-9;]*m')


def get_first_line(args, timeout: int | None = None) -> str:
    """Run a command and return the first line of its output, ANSI codes removed.

    Args:
        args: Command and arguments
        timeout: Timeout in seconds, None waits forever

    Returns:
        First output line, or empty string if the command could not run
    """
    try:
        proc = subprocess.run(
            list(args),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            stdin=subprocess.DEVNULL,  # Isolate stdin
            text=True,
            timeout=timeout,
            check=False,
            env={**os.environ, "TERM": "dumb"},  # Disable ANSI/color output from subprocesses
        )
    except (OSError, subprocess.TimeoutExpired):
        return ""

    lines = (proc.stdout or "").splitlines()
    if not lines:
        return ""
    return ANSI_ESCAPE_RE.sub("", lines[0]).strip()


def parse_version_line(line: str, prefix: str = "php") -> str | None:
    """Convert a ``php -v`` banner into a version formula name.

    "PHP 7.0.12 (cli) (built: Oct 13 2016)" → "php70"

    Returns:
        Formula name, or None if the line is not a PHP version banner
    """
    m = PHP_VERSION_RE.match(line.strip())
    if not m:
        return None
    return f"{prefix}{m.group(1)}{m.group(2)}"


def detect_active_version(
    php_binary: str = "php",
    prefix: str = "php",
    timeout: int | None = None,
    verbose: bool = False,
) -> str | None:
    """
    Detect the formula name of the active PHP version from ``php -v``.

    Args:
        php_binary: PHP executable to query
        prefix: Formula name prefix
        timeout: Timeout in seconds
        verbose: Enable verbose logging

    Returns:
        Formula name of the active version (e.g., "php70"), or None if no PHP is active
    """
    line = get_first_line([php_binary, "-v"], timeout=timeout)
    active = parse_version_line(line, prefix)
    if active:
        vlog(f"Active PHP version: {format_version(active, prefix)} ({active})", verbose)
    else:
        vlog(f"No active PHP version detected (first line of '{php_binary} -v': {line!r})", verbose)
    return active
