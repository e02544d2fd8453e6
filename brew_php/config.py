"""
Configuration file parsing and management.

Supports YAML configuration files (JSON for files ending in ``.json``).
Merges configurations from multiple sources (explicit → project → user → system → defaults).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any

import yaml

from .common import vlog
from .errors import ConfigError


CONFIG_ENV_VAR = "BREW_PHP_CONFIG"

# Configuration file locations (in priority order)
CONFIG_LOCATIONS = [
    ".brew-php.yml",                               # Project root (highest priority)
    ".brew-php.yaml",
    os.path.expanduser("~/.config/brew-php/config.yml"),  # User global
    os.path.expanduser("~/.config/brew-php/config.yaml"),
    "/etc/brew-php/config.yml",                    # System global
    "/etc/brew-php/config.yaml",
]

ON_FAILURE_MODES = {"continue", "abort"}


@dataclass(frozen=True)
class UpgradePreferences:
    """
    Behaviour of the upgrade sequence when a brew call fails.

    Attributes:
        on_failure: 'continue' records the failure and goes on, 'abort' stops
            the remaining sequence
        restore_active: Re-link the version that was active before the run,
            even after an abort or an interrupt
    """
    on_failure: str = "continue"
    restore_active: bool = True

    def __post_init__(self):
        if self.on_failure not in ON_FAILURE_MODES:
            raise ConfigError(
                f"Invalid on_failure mode: {self.on_failure}. "
                "Must be 'continue' or 'abort'"
            )

    @staticmethod
    def from_dict(data: dict[str, Any]) -> UpgradePreferences:
        """Create UpgradePreferences from dictionary."""
        return UpgradePreferences(
            on_failure=data.get("on_failure", "continue"),
            restore_active=bool(data.get("restore_active", True)),
        )


@dataclass(frozen=True)
class Config:
    """
    Complete configuration for brew-php.

    Attributes:
        version: Config schema version
        brew: Homebrew executable
        formula_prefix: Prefix shared by the PHP formula names
        php_binary: Name of the PHP executable (in PATH and under each prefix's bin/)
        timeout_seconds: Timeout for each brew/php call, None waits forever
        upgrade: Upgrade sequence preferences
        source: Path to the configuration file that was loaded
    """
    version: int = 1
    brew: str = "brew"
    formula_prefix: str = "php"
    php_binary: str = "php"
    timeout_seconds: int | None = None
    upgrade: UpgradePreferences = field(default_factory=UpgradePreferences)
    source: str = ""

    def __post_init__(self):
        """Validate config after initialization."""
        if self.version != 1:
            raise ConfigError(f"Unsupported config version: {self.version}. Expected version 1")

        if not self.brew:
            raise ConfigError("The brew executable must not be empty")

        if not self.formula_prefix or not self.formula_prefix.isalpha():
            raise ConfigError(
                f"Invalid formula_prefix: {self.formula_prefix!r}. Must be a non-empty word"
            )

        if not self.php_binary:
            raise ConfigError("The php binary must not be empty")

        if self.timeout_seconds is not None and not 1 <= self.timeout_seconds <= 86400:
            raise ConfigError(
                f"Invalid timeout_seconds: {self.timeout_seconds}. "
                "Must be between 1 and 86400, or null for no timeout"
            )

    @staticmethod
    def from_dict(data: dict[str, Any], source: str = "") -> Config:
        """Create Config from dictionary."""
        return Config(
            version=data.get("version", 1),
            brew=data.get("brew", "brew"),
            formula_prefix=data.get("formula_prefix", "php"),
            php_binary=data.get("php_binary", "php"),
            timeout_seconds=data.get("timeout_seconds"),
            upgrade=UpgradePreferences.from_dict(data.get("upgrade") or {}),
            source=source,
        )

    def merge_with(self, other: Config) -> Config:
        """
        Merge this config with another, preferring values from this config.

        A value equal to its default is treated as unset.

        Args:
            other: Other config to merge (lower priority)

        Returns:
            New merged Config object
        """
        defaults = Config()

        def pick(name: str):
            value = getattr(self, name)
            return value if value != getattr(defaults, name) else getattr(other, name)

        merged_upgrade = UpgradePreferences(
            on_failure=self.upgrade.on_failure if self.upgrade.on_failure != "continue" else other.upgrade.on_failure,
            restore_active=self.upgrade.restore_active and other.upgrade.restore_active,
        )

        return Config(
            version=self.version,
            brew=pick("brew"),
            formula_prefix=pick("formula_prefix"),
            php_binary=pick("php_binary"),
            timeout_seconds=pick("timeout_seconds"),
            upgrade=merged_upgrade,
            source=self.source or other.source,
        )

    def with_environment(self, environ: dict[str, str] | None = None) -> Config:
        """Apply BREW_PHP_BREW / BREW_PHP_PHP_BINARY overrides."""
        environ = os.environ if environ is None else environ
        brew = environ.get("BREW_PHP_BREW") or self.brew
        php_binary = environ.get("BREW_PHP_PHP_BINARY") or self.php_binary
        if brew == self.brew and php_binary == self.php_binary:
            return self
        return Config(
            version=self.version,
            brew=brew,
            formula_prefix=self.formula_prefix,
            php_binary=php_binary,
            timeout_seconds=self.timeout_seconds,
            upgrade=self.upgrade,
            source=self.source,
        )


def _load_yaml(file_path: str) -> dict[str, Any] | None:
    """
    Load YAML configuration file.

    Returns:
        Parsed configuration dictionary, or None if the file is unreadable or invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return None


def _load_json(file_path: str) -> dict[str, Any] | None:
    """
    Load JSON configuration file.

    Returns:
        Parsed configuration dictionary, or None if file invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, json.JSONDecodeError):
        return None


def load_config_file(file_path: str, verbose: bool = False) -> Config | None:
    """
    Load configuration from a single file.

    Args:
        file_path: Path to configuration file
        verbose: Enable verbose logging

    Returns:
        Config object, or None if file cannot be loaded
    """
    if not os.path.exists(file_path):
        return None

    vlog(f"Loading config from: {file_path}", verbose)

    if file_path.endswith(".json"):
        data = _load_json(file_path)
    else:
        data = _load_yaml(file_path)

    if data is None:
        vlog(f"Invalid config file: {file_path}", verbose)
        return None

    try:
        config = Config.from_dict(data, source=file_path)
        vlog(f"Loaded config successfully: {file_path}", verbose)
        return config
    except (ValueError, TypeError) as e:
        vlog(f"Config validation failed for {file_path}: {e}", verbose)
        return None


def load_config(
    custom_path: str | None = None,
    verbose: bool = False,
) -> Config:
    """
    Load and merge configuration from all sources.

    Configuration precedence (highest to lowest):
    1. Custom path (argument, or the BREW_PHP_CONFIG environment variable)
    2. Project .brew-php.yml
    3. User ~/.config/brew-php/config.yml
    4. System /etc/brew-php/config.yml
    5. Default configuration

    Environment overrides for the executables are applied last.

    Raises:
        ConfigError: If an explicit path is given but cannot be loaded
    """
    custom_path = custom_path or os.environ.get(CONFIG_ENV_VAR)
    configs: list[Config] = []

    if custom_path:
        config = load_config_file(custom_path, verbose)
        if config is None:
            raise ConfigError(f"Could not load config from specified path: {custom_path}")
        configs.append(config)

    for location in CONFIG_LOCATIONS:
        config = load_config_file(location, verbose)
        if config is not None:
            configs.append(config)

    if not configs:
        vlog("No config files found, using defaults", verbose)
        return Config().with_environment()

    merged = configs[0]
    for config in configs[1:]:
        merged = merged.merge_with(config)

    vlog(f"Merged {len(configs)} config files", verbose)
    return merged.with_environment()


def validate_config(config: Config) -> list[str]:
    """
    Validate configuration and return list of warnings.

    Args:
        config: Config object to validate

    Returns:
        List of validation warning messages (empty if valid)
    """
    warnings = []

    if config.upgrade.on_failure == "abort" and not config.upgrade.restore_active:
        warnings.append(
            "upgrade.on_failure is 'abort' but restore_active is false: "
            "an aborted upgrade leaves every PHP version unlinked"
        )

    if os.sep in config.php_binary:
        warnings.append(
            f"php_binary '{config.php_binary}' contains a path separator; "
            "php-all looks it up under each formula's bin/ directory"
        )

    return warnings
