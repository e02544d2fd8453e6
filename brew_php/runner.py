"""
Run a command line with every installed PHP version.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Sequence

from .homebrew import COMMAND_NOT_EXECUTABLE, COMMAND_NOT_FOUND, CommandResult, Homebrew, run_command
from .inventory import Inventory
from .logging_config import get_logger
from .packages import format_version
from .render import RUNNER_BANNER_WIDTH, print_banner


@dataclass(frozen=True)
class BatchResult:
    """
    Outcome of running PHP once per installed version.

    Attributes:
        arguments: Arguments forwarded to every PHP binary
        runs: (version, result) pairs in execution order
    """
    arguments: tuple[str, ...]
    runs: tuple[tuple[str, CommandResult], ...] = ()

    @property
    def failed_versions(self) -> tuple[str, ...]:
        return tuple(version for version, result in self.runs if not result.success)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "arguments": list(self.arguments),
            "runs": [
                {"version": version, **result.to_dict()}
                for version, result in self.runs
            ],
        }


def php_binary_path(brew: Homebrew, version: str, php_binary: str = "php") -> str | None:
    """Path of the PHP executable of one version (``$(brew --prefix phpNN)/bin/php``)."""
    prefix = brew.prefix(version)
    if prefix is None:
        return None
    return os.path.join(prefix, "bin", php_binary)


def run_all(
    arguments: Sequence[str],
    inventory: Inventory,
    brew: Homebrew,
    php_binary: str = "php",
) -> BatchResult:
    """
    Run PHP with the given arguments once for each installed version.

    The output of PHP goes straight to the terminal. Exit statuses are
    recorded but never stop the loop.

    Args:
        arguments: Arguments passed verbatim to every PHP binary
        inventory: Installed PHP formulae
        brew: Homebrew wrapper, used to find each version's prefix
        php_binary: Name of the PHP executable under each prefix's bin/

    Returns:
        BatchResult
    """
    logger = get_logger()
    arguments = tuple(arguments)
    runs = []

    for version in inventory.version_names:
        print_banner(f"PHP {format_version(version, inventory.prefix)}", RUNNER_BANNER_WIDTH)

        binary = php_binary_path(brew, version, php_binary)
        if binary is None:
            logger.error(f"Could not find the installation prefix of {version}")
            runs.append((version, CommandResult(
                command=(php_binary,) + arguments,
                exit_code=COMMAND_NOT_FOUND,
                error_message=f"brew --prefix {version} failed",
            )))
            continue

        result = run_command((binary,) + arguments, capture=False, timeout=brew.timeout, verbose=brew.verbose)
        if result.exit_code in (COMMAND_NOT_FOUND, COMMAND_NOT_EXECUTABLE) and result.error_message:
            logger.error(result.error_message)
        runs.append((version, result))

    return BatchResult(arguments=arguments, runs=tuple(runs))
