"""
Exception hierarchy for brew-php.

Every error carries the process exit status the command-line tools report
for it, so the entry points only have to catch ``BrewPhpError``.
"""

from __future__ import annotations

from typing import Sequence


class BrewPhpError(Exception):
    """
    Base exception for brew-php errors.

    Attributes:
        message: Human-readable error message
        exit_code: Process exit status for the command-line tools
        remediation: Suggested fix for the error
    """
    exit_code = 1

    def __init__(self, message: str, remediation: str | None = None):
        self.message = message
        self.remediation = remediation
        super().__init__(message)


class UsageError(BrewPhpError):
    """Raised when no formula was given on the command line."""
    exit_code = 1


class ValidationError(BrewPhpError):
    """
    Raised when a requested formula is not installed.

    Attributes:
        argument: The command-line argument as typed by the user
        installed: Names of all installed PHP formulae
    """
    exit_code = 2

    def __init__(self, message: str, argument: str, installed: Sequence[str] = ()):
        super().__init__(message)
        self.argument = argument
        self.installed = tuple(installed)


class CommandError(BrewPhpError):
    """Raised when Homebrew cannot be queried at all."""
    exit_code = 1


class ConfigError(ValueError, BrewPhpError):
    """Raised when a configuration value is invalid."""
    exit_code = 1
