"""
PHP formula names and their classification.

Homebrew formulae for side-by-side PHP installations follow one naming
scheme: ``php56``, ``php70`` and ``php710`` are interpreter versions,
``php56-xdebug`` or ``php70-intl`` are extensions built for one version.
Names are classified once, here, into ``Package`` objects.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache

from packaging.version import Version


PACKAGE_KINDS = {"version", "extension"}


@lru_cache(maxsize=None)
def _formula_re(prefix: str) -> re.Pattern[str]:
    return re.compile(
        rf"^(?P<version>{re.escape(prefix)}(?P<major>\d)(?P<minor>\d{{1,2}}))"
        r"(?:-(?P<extension>.+))?$"
    )


@dataclass(frozen=True)
class Package:
    """
    An installed PHP formula.

    Attributes:
        name: Homebrew formula name (e.g., "php56-xdebug")
        kind: "version" for an interpreter, "extension" for an extension
        version: Formula name of the owning version (equal to name for versions)
        extension: Extension suffix (e.g., "xdebug"), None for versions
        prefix: Formula name prefix the name was parsed with
    """
    name: str
    kind: str
    version: str
    extension: str | None = None
    prefix: str = "php"

    def __post_init__(self):
        if self.kind not in PACKAGE_KINDS:
            raise ValueError(f"Invalid package kind: {self.kind}. Must be 'version' or 'extension'")
        if self.kind == "version" and (self.name != self.version or self.extension):
            raise ValueError(f"Version package {self.name} cannot have an owner or an extension")
        if self.kind == "extension" and not self.extension:
            raise ValueError(f"Extension package {self.name} needs an extension name")

    @property
    def is_version(self) -> bool:
        return self.kind == "version"

    @property
    def is_extension(self) -> bool:
        return self.kind == "extension"

    @property
    def display_version(self) -> str:
        """Friendly version number of the owning version (php56 → 5.6)."""
        return format_version(self.version, self.prefix)

    @property
    def sort_key(self) -> tuple[Version, str]:
        return (Version(self.display_version), self.name)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "kind": self.kind,
            "version": self.version,
            "extension": self.extension,
        }


def parse_formula(name: str, prefix: str = "php") -> Package | None:
    """
    Classify a Homebrew formula name.

    Args:
        name: Formula name as printed by ``brew list -1``
        prefix: Formula name prefix (normally "php")

    Returns:
        Package, or None if the name is not a PHP version or extension formula
    """
    m = _formula_re(prefix).match(name.strip())
    if not m:
        return None

    if m.group("extension"):
        return Package(
            name=m.group(0),
            kind="extension",
            version=m.group("version"),
            extension=m.group("extension"),
            prefix=prefix,
        )
    return Package(name=m.group(0), kind="version", version=m.group("version"), prefix=prefix)


def format_version(name: str, prefix: str = "php") -> str:
    """
    Format a version formula name for humans.

    The first digit is the major version, the remaining digits the minor one:
    "php56" → "5.6", "php710" → "7.10". Names that do not match are returned
    unchanged.
    """
    m = _formula_re(prefix).match(name)
    if not m:
        return name
    return f"{m.group('major')}.{m.group('minor')}"


def version_sort_key(name: str, prefix: str = "php") -> tuple[Version, str]:
    """Sort key ordering version formula names by their numeric version."""
    package = parse_formula(name, prefix)
    if package is None:
        return (Version("0"), name)
    return package.sort_key


def sort_versions(names, prefix: str = "php") -> list[str]:
    """De-duplicate and sort formula names by version, then by name."""
    return sorted(set(names), key=lambda n: version_sort_key(n, prefix))
