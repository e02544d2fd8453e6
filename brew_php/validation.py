"""
Validation of the formulae requested on the command line.

Arguments are normalized (the "php" prefix is optional), checked against the
installed formulae and grouped per PHP version. Validation completes before
anything is linked, unlinked or upgraded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .errors import UsageError, ValidationError
from .inventory import Inventory
from .packages import sort_versions


@dataclass(frozen=True)
class VersionGroup:
    """
    Requested formulae belonging to one PHP version.

    Attributes:
        version: Formula name of the PHP version (e.g., "php56")
        interpreter: Whether the version itself was requested for upgrade
        extensions: Requested extensions of this version
    """
    version: str
    interpreter: bool
    extensions: tuple[str, ...] = ()


@dataclass(frozen=True)
class UpgradeRequest:
    """
    Validated upgrade request.

    Attributes:
        versions: Formula names of the involved PHP versions, sorted, unique
        formulae: Resolved formula names of all arguments, sorted, unique
        arguments: Command-line arguments as given
        prefix: Formula name prefix
    """
    versions: tuple[str, ...]
    formulae: tuple[str, ...]
    arguments: tuple[str, ...] = ()
    prefix: str = "php"

    def group_for(self, version: str) -> VersionGroup:
        """Split the requested formulae of one version into interpreter and extensions."""
        interpreter = False
        extensions = []
        for formula in self.formulae:
            if formula == version:
                interpreter = True
            elif formula.startswith(f"{version}-"):
                extensions.append(formula)
        return VersionGroup(version=version, interpreter=interpreter, extensions=tuple(extensions))

    def groups(self) -> list[VersionGroup]:
        return [self.group_for(version) for version in self.versions]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "arguments": list(self.arguments),
            "versions": list(self.versions),
            "formulae": list(self.formulae),
        }


def normalize_argument(argument: str, prefix: str = "php") -> str:
    """
    Normalize a formula name, adding the prefix if it is missing.

    "56" → "php56", "56-xdebug" → "php56-xdebug", "php70" → "php70"
    """
    argument = argument.strip()
    if argument.startswith(prefix):
        argument = argument[len(prefix):]
    return f"{prefix}{argument}"


def parse_and_validate_arguments(
    arguments: Sequence[str],
    inventory: Inventory,
) -> UpgradeRequest:
    """
    Resolve the command-line arguments against the installed formulae.

    Args:
        arguments: Formula names from the command line
        inventory: Installed PHP formulae

    Returns:
        UpgradeRequest with the sorted unique versions and formulae

    Raises:
        UsageError: If no argument was given
        ValidationError: On the first argument that is not installed, or whose
            PHP version is not installed
    """
    if not arguments:
        raise UsageError("No PHP versions or extensions given")

    prefix = inventory.prefix
    formulae: list[str] = []
    versions: list[str] = []

    for argument in arguments:
        formula = normalize_argument(argument, prefix)
        package = inventory.get(formula)
        if package is None:
            raise ValidationError(
                f'Invalid argument "{argument}": unknown/uninstalled PHP version or extension.',
                argument=argument,
                installed=inventory.package_names,
            )

        if not inventory.is_version_installed(package.version):
            raise ValidationError(
                f'Invalid argument "{argument}": the formula "{package.version}" is not installed.',
                argument=argument,
                installed=inventory.package_names,
            )

        formulae.append(package.name)
        versions.append(package.version)

    return UpgradeRequest(
        versions=tuple(sort_versions(versions, prefix)),
        formulae=tuple(sort_versions(formulae, prefix)),
        arguments=tuple(arguments),
        prefix=prefix,
    )
