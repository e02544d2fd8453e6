"""
Common utilities shared across brew_php modules.
"""

from __future__ import annotations

import os
import sys


DEBUG_ENV_VAR = "BREW_PHP_DEBUG"


def debug_enabled() -> bool:
    """Return True when debug output was requested through the environment."""
    return os.environ.get(DEBUG_ENV_VAR, "0") == "1"


def vlog(msg: str, verbose: bool = False) -> None:
    """
    Log verbose message using structured logging.

    Args:
        msg: Message to log
        verbose: Whether verbose mode is enabled
    """
    if verbose or debug_enabled():
        try:
            from .logging_config import get_logger
            get_logger().info(msg)
        except Exception:
            # Fallback to stderr if logging fails
            print(f"[brew-php] {msg}", file=sys.stderr)
