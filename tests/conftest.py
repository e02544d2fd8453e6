"""
Shared fixtures: a recording stand-in for the brew command line.
"""

from __future__ import annotations

import pytest

from brew_php.homebrew import CommandResult, Homebrew
from brew_php.inventory import build_inventory
from brew_php.logging_config import setup_logging


MUTATING_COMMANDS = {"link", "unlink", "upgrade"}


class FakeBrew(Homebrew):
    """
    Homebrew wrapper that records every call instead of running brew.

    Attributes:
        installed: Formula names printed by ``brew list -1``
        failing: Command lines (e.g. "upgrade php56") that exit with status 1
        calls: Argument tuples of every call, in order
    """

    def __init__(self, installed=(), failing=(), list_fails=False):
        super().__init__("brew")
        self.installed = list(installed)
        self.failing = set(failing)
        self.list_fails = list_fails
        self.calls: list[tuple[str, ...]] = []

    def run(self, *args: str, capture: bool = True) -> CommandResult:
        self.calls.append(args)
        command = ("brew",) + args

        if args == ("list", "-1"):
            if self.list_fails:
                return CommandResult(command, 1, stderr="Error: boom", error_message="Command failed with exit code 1")
            return CommandResult(command, 0, stdout="".join(f"{name}\n" for name in self.installed))

        if args[0] == "--prefix":
            return CommandResult(command, 0, stdout=f"/usr/local/opt/{args[1]}\n")

        if " ".join(args) in self.failing:
            return CommandResult(command, 1, error_message="Command failed with exit code 1")
        return CommandResult(command, 0)

    @property
    def mutations(self) -> list[str]:
        """Mutating calls as command lines, e.g. "link --overwrite php70"."""
        return [" ".join(c) for c in self.calls if c[0] in MUTATING_COMMANDS]


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep the brew_php logger off the console; records still reach caplog."""
    setup_logging(quiet=True, propagate=True)
    yield


@pytest.fixture
def fake_brew_factory():
    return FakeBrew


@pytest.fixture
def installed():
    return ["php56", "php56-xdebug", "php70", "php70-intl", "php71", "git", "php-cs-fixer"]


@pytest.fixture
def brew(installed):
    return FakeBrew(installed)


@pytest.fixture
def inventory(installed):
    return build_inventory(installed)
