"""
Command-line entry points.

brew-upgrade-php
    Upgrade one or more PHP versions and their extensions installed using
    Homebrew, keeping the active PHP version active.

php-all
    Run a command line using all the PHP versions installed using Homebrew.

Exit codes of brew-upgrade-php:
    0  success
    1  no formula given (or invalid configuration)
    2  a formula is not installed
    3  some brew commands failed during the upgrade
    130  interrupted
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Sequence

from . import __version__
from .common import debug_enabled, vlog
from .config import ON_FAILURE_MODES, Config, load_config, validate_config
from .detection import detect_active_version
from .errors import BrewPhpError, UsageError, ValidationError
from .homebrew import Homebrew
from .inventory import collect_inventory
from .logging_config import get_logger, setup_logging
from .render import print_installed_versions, print_results, print_usage, print_validation_error
from .runner import run_all
from .upgrade import plan_upgrade, upgrade_versions
from .validation import parse_and_validate_arguments


EXIT_OK = 0
EXIT_UPGRADE_FAILED = 3
EXIT_INTERRUPTED = 130


def build_upgrade_parser(prog: str | None = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Upgrade one or more PHP versions and extensions installed using Homebrew.",
    )
    parser.add_argument(
        "formulae",
        nargs="*",
        metavar="FORMULA",
        help='Homebrew formula names, the "php" prefix is optional (e.g. "php56", "56-xdebug")',
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the brew commands without running them",
    )
    parser.add_argument(
        "--on-failure",
        choices=sorted(ON_FAILURE_MODES),
        help="What to do when a brew command fails (default: from config, 'continue')",
    )
    parser.add_argument(
        "--no-restore",
        action="store_true",
        help="Do not re-link the active version after an aborted or interrupted upgrade",
    )
    parser.add_argument("--config", help="Path to a configuration file")
    parser.add_argument("--log-file", help="Also write the log to this file")
    parser.add_argument("--json", action="store_true", help="Print the upgrade result as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _load_config(path: str | None, verbose: bool) -> Config:
    config = load_config(path, verbose=verbose)
    for warning in validate_config(config):
        get_logger().warning(warning)
    return config


def upgrade_main(argv: Sequence[str] | None = None) -> int:
    """Run brew-upgrade-php; returns the exit status."""
    parser = build_upgrade_parser()
    args = parser.parse_args(argv)
    verbose = args.verbose or debug_enabled()
    setup_logging(verbose=verbose, log_file=args.log_file)

    try:
        config = _load_config(args.config, verbose)
    except BrewPhpError as e:
        print(f"✗ {e.message}", file=sys.stderr)
        return e.exit_code

    prefix = config.formula_prefix
    brew = Homebrew(config.brew, timeout=config.timeout_seconds, verbose=verbose)
    active_version = detect_active_version(config.php_binary, prefix, config.timeout_seconds, verbose)
    inventory = collect_inventory(brew, prefix, verbose=verbose)

    try:
        request = parse_and_validate_arguments(args.formulae, inventory)
    except UsageError as e:
        print_usage(parser.prog)
        print_installed_versions(inventory, active_version)
        return e.exit_code
    except ValidationError as e:
        print_validation_error(e)
        return e.exit_code

    if args.dry_run:
        print("Planned brew commands:")
        for step in plan_upgrade(request, inventory, active_version):
            print(f"  {config.brew} {' '.join(step.args)}")
        return EXIT_OK

    result = upgrade_versions(
        request,
        inventory,
        active_version,
        brew,
        on_failure=args.on_failure or config.upgrade.on_failure,
        restore_active=config.upgrade.restore_active and not args.no_restore,
        verbose=verbose,
    )

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    elif result.failures:
        print_results(result.steps)
        print(result.summary())

    return EXIT_OK if result.success else EXIT_UPGRADE_FAILED


def run_all_main(argv: Sequence[str] | None = None) -> int:
    """Run php-all; every argument goes to PHP untouched."""
    argv = list(sys.argv[1:] if argv is None else argv)
    verbose = debug_enabled()
    setup_logging(verbose=verbose)

    try:
        config = _load_config(None, verbose)
        brew = Homebrew(config.brew, timeout=config.timeout_seconds, verbose=verbose)
        inventory = collect_inventory(brew, config.formula_prefix, strict=True, verbose=verbose)
    except BrewPhpError as e:
        print(f"✗ {e.message}", file=sys.stderr)
        if e.remediation:
            print(f"  {e.remediation}", file=sys.stderr)
        return e.exit_code

    result = run_all(argv, inventory, brew, config.php_binary)
    if result.failed_versions:
        vlog(f"PHP exited with a non-zero status for: {', '.join(result.failed_versions)}", verbose)
    return EXIT_OK


def _exit(main) -> None:
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(EXIT_INTERRUPTED)


def upgrade() -> None:
    """Console script: brew-upgrade-php."""
    _exit(upgrade_main)


def php_all() -> None:
    """Console script: php-all."""
    _exit(run_all_main)

