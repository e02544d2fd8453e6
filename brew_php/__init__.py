"""
brew-php - Manage PHP versions installed side by side with Homebrew.

Modules:
- Inventory: installed PHP versions and extensions, active version detection
- Validation: command-line formula names resolved and grouped per version
- Upgrade: unlink / upgrade / re-link sequence preserving the active version
- Runner: run a command line with every installed PHP version
"""

__version__ = "1.0.0"

VERSION = __version__

from .errors import BrewPhpError, UsageError, ValidationError, CommandError, ConfigError
from .packages import Package, parse_formula, format_version, sort_versions
from .homebrew import CommandResult, Homebrew, run_command
from .inventory import Inventory, build_inventory, collect_inventory
from .detection import detect_active_version, parse_version_line
from .config import Config, UpgradePreferences, load_config, load_config_file, validate_config
from .validation import (
    UpgradeRequest,
    VersionGroup,
    normalize_argument,
    parse_and_validate_arguments,
)
from .upgrade import UpgradeResult, UpgradeStep, plan_upgrade, upgrade_versions
from .runner import BatchResult, run_all
from .logging_config import setup_logging, get_logger

__all__ = [
    "__version__",
    "VERSION",
    # Errors
    "BrewPhpError",
    "UsageError",
    "ValidationError",
    "CommandError",
    "ConfigError",
    # Packages and inventory
    "Package",
    "parse_formula",
    "format_version",
    "sort_versions",
    "Inventory",
    "build_inventory",
    "collect_inventory",
    "detect_active_version",
    "parse_version_line",
    # Homebrew
    "CommandResult",
    "Homebrew",
    "run_command",
    # Configuration
    "Config",
    "UpgradePreferences",
    "load_config",
    "load_config_file",
    "validate_config",
    # Validation
    "UpgradeRequest",
    "VersionGroup",
    "normalize_argument",
    "parse_and_validate_arguments",
    # Upgrade
    "UpgradeResult",
    "UpgradeStep",
    "plan_upgrade",
    "upgrade_versions",
    # Runner
    "BatchResult",
    "run_all",
    # Logging
    "setup_logging",
    "get_logger",
]
