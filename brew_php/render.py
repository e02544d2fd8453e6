"""
Output rendering and formatting.

Progress banners and listings go to stdout, interleaved with the output of
brew and PHP; errors go to stderr.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, Sequence

from wcwidth import wcswidth

from .packages import format_version

if TYPE_CHECKING:
    from .errors import ValidationError
    from .homebrew import CommandResult
    from .inventory import Inventory


# Environment options
USE_EMOJI = os.environ.get("BREW_PHP_EMOJI", "1") == "1"
USE_COLOR = os.environ.get("BREW_PHP_COLOR", "1") == "1"

GREEN = "\033[32m"
RED = "\033[31m"
RESET = "\033[0m"

UPGRADE_BANNER_WIDTH = 45
RUNNER_BANNER_WIDTH = 47


def status_icon(success: bool) -> str:
    """Icon for a finished brew command."""
    if not USE_EMOJI:
        return "✓" if success else "x"
    return "✅" if success else "❌"


def colorize(text: str, color: str) -> str:
    """Apply color to text when colors are enabled and stdout is a terminal."""
    if not USE_COLOR or not text or not sys.stdout.isatty():
        return text
    return f"{color}{text}{RESET}"


def banner(title: str, width: int = UPGRADE_BANNER_WIDTH) -> str:
    """Center a title in a line of '=' characters.

    >>> banner("Unlink all versions")
    '============ Unlink all versions ============'
    """
    inner = f" {title} "
    fill = max(width - wcswidth(inner), 6)
    left = fill // 2
    return "=" * left + inner + "=" * (fill - left)


def print_banner(title: str, width: int = UPGRADE_BANNER_WIDTH) -> None:
    print(banner(title, width), flush=True)


def print_installed_versions(inventory: Inventory, active_version: str | None) -> None:
    """Print the installed versions and the active one."""
    active = format_version(active_version, inventory.prefix) if active_version else ""
    print(f"Installed versions: {inventory.display_text}")
    print(f"Active version: {active}")


def print_usage(prog: str) -> None:
    print(f"Usage: {prog} <PHP versions> <PHP extensions>")
    print('    <PHP versions>, <PHP extensions> - Homebrew formula names (e.g. "php56", "php56-xdebug")')
    print()


def print_validation_error(exc: ValidationError) -> None:
    print(exc.message, file=sys.stderr)
    print("The valid (installed) PHP versions and extensions are:", file=sys.stderr)
    print(f"     {' '.join(exc.installed)}", file=sys.stderr)


def _pad(text: str, width: int) -> str:
    return text + " " * max(width - wcswidth(text), 0)


def render_results(results: Sequence[CommandResult]) -> list[str]:
    """Render brew command results as aligned table rows.

    Columns: status icon, command line, exit code, duration.
    """
    rows = [
        (status_icon(r.success), r.command_line, str(r.exit_code), f"{r.duration_seconds:.1f}s")
        for r in results
    ]
    if not rows:
        return []

    widths = [max(wcswidth(row[i]) for row in rows) for i in range(4)]
    lines = []
    for result, row in zip(results, rows):
        line = "  ".join(_pad(cell, widths[i]) for i, cell in enumerate(row)).rstrip()
        lines.append(colorize(line, GREEN if result.success else RED))
    return lines


def print_results(results: Sequence[CommandResult], title: str = "Summary") -> None:
    lines = render_results(results)
    if not lines:
        return
    print(f"\n{title}:")
    for line in lines:
        print(f"  {line}")
