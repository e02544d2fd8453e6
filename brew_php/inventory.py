"""
Installed PHP versions and extensions, as reported by ``brew list -1``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .common import vlog
from .errors import CommandError
from .homebrew import Homebrew
from .logging_config import get_logger
from .packages import Package, parse_formula


@dataclass(frozen=True)
class Inventory:
    """
    Snapshot of the installed PHP formulae.

    Attributes:
        versions: Installed PHP versions, sorted by version
        packages: Installed PHP versions and extensions, sorted by version then name
        prefix: Formula name prefix
    """
    versions: tuple[Package, ...] = ()
    packages: tuple[Package, ...] = ()
    prefix: str = "php"

    @property
    def version_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.versions)

    @property
    def package_names(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.packages)

    @property
    def display_text(self) -> str:
        """Installed versions for humans, e.g. "5.6, 7.0, 7.1"."""
        return ", ".join(p.display_version for p in self.versions)

    def get(self, name: str) -> Package | None:
        for package in self.packages:
            if package.name == name:
                return package
        return None

    def is_installed(self, name: str) -> bool:
        return self.get(name) is not None

    def is_version_installed(self, name: str) -> bool:
        return name in self.version_names

    def extensions_of(self, version: str) -> tuple[Package, ...]:
        return tuple(p for p in self.packages if p.is_extension and p.version == version)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "versions": list(self.version_names),
            "packages": list(self.package_names),
        }


def build_inventory(names: Iterable[str], prefix: str = "php") -> Inventory:
    """
    Classify formula names into an Inventory.

    Names that are not PHP formulae are ignored; duplicates collapse.
    """
    parsed: dict[str, Package] = {}
    for name in names:
        package = parse_formula(name, prefix)
        if package is not None:
            parsed[package.name] = package

    packages = sorted(parsed.values(), key=lambda p: p.sort_key)
    return Inventory(
        versions=tuple(p for p in packages if p.is_version),
        packages=tuple(packages),
        prefix=prefix,
    )


def collect_inventory(
    brew: Homebrew,
    prefix: str = "php",
    strict: bool = False,
    verbose: bool = False,
) -> Inventory:
    """
    Query Homebrew for the installed PHP versions and extensions.

    Args:
        brew: Homebrew wrapper
        prefix: Formula name prefix
        strict: Raise instead of returning an empty Inventory when brew fails
        verbose: Enable verbose logging

    Returns:
        Inventory (empty when nothing is installed)

    Raises:
        CommandError: If strict and ``brew list`` fails
    """
    result = brew.list_formulae()
    if not result.success:
        if strict:
            raise CommandError(
                f"Could not list the installed formulae: {result.error_message}",
                remediation="Check that Homebrew is installed and in PATH",
            )
        get_logger().warning(f"Could not list the installed formulae: {result.error_message}")
        return Inventory(prefix=prefix)

    inventory = build_inventory(result.stdout.splitlines(), prefix)
    vlog(
        f"Found {len(inventory.versions)} PHP version(s) and "
        f"{len(inventory.packages) - len(inventory.versions)} extension(s)",
        verbose,
    )
    return inventory
