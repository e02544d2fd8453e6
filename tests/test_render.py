"""
Tests for output rendering (brew_php/render.py).
"""

from unittest.mock import patch

from brew_php.errors import ValidationError
from brew_php.homebrew import CommandResult
from brew_php.inventory import build_inventory
from brew_php.render import (
    RUNNER_BANNER_WIDTH,
    banner,
    print_installed_versions,
    print_usage,
    print_validation_error,
    render_results,
    status_icon,
)


class TestBanner:
    """Tests for banner lines."""

    def test_upgrade_banners(self):
        assert banner("Unlink all versions") == "============ Unlink all versions ============"
        assert banner("Process PHP 5.6") == "============== Process PHP 5.6 =============="
        assert banner("That's all!") == "================ That's all! ================"

    def test_runner_banner(self):
        assert banner("PHP 7.0", RUNNER_BANNER_WIDTH) == "=================== PHP 7.0 ==================="

    def test_long_title_keeps_minimum_fill(self):
        line = banner("x" * 60)
        assert line.startswith("=== ")
        assert line.endswith(" ===")


class TestStatusIcon:
    def test_emoji(self):
        assert status_icon(True) == "✅"
        assert status_icon(False) == "❌"

    def test_plain(self):
        with patch("brew_php.render.USE_EMOJI", False):
            assert status_icon(True) == "✓"
            assert status_icon(False) == "x"


class TestListings:
    """Tests for usage and installed version listings."""

    def test_print_installed_versions(self, capsys):
        inventory = build_inventory(["php56", "php70", "php70-intl"])
        print_installed_versions(inventory, "php70")
        assert capsys.readouterr().out == "Installed versions: 5.6, 7.0\nActive version: 7.0\n"

    def test_print_installed_versions_no_active(self, capsys):
        print_installed_versions(build_inventory([]), None)
        assert capsys.readouterr().out == "Installed versions: \nActive version: \n"

    def test_print_usage(self, capsys):
        print_usage("brew-upgrade-php")
        out = capsys.readouterr().out
        assert out.startswith("Usage: brew-upgrade-php <PHP versions> <PHP extensions>\n")
        assert '"php56-xdebug"' in out

    def test_print_validation_error(self, capsys):
        exc = ValidationError('Invalid argument "72": nope', argument="72", installed=("php56", "php70"))
        print_validation_error(exc)
        captured = capsys.readouterr()
        assert captured.out == ""
        assert 'Invalid argument "72"' in captured.err
        assert "php56 php70" in captured.err


class TestRenderResults:
    """Tests for the summary table."""

    @patch("brew_php.render.USE_COLOR", False)
    def test_columns_aligned(self):
        results = [
            CommandResult(("brew", "unlink", "php56"), 0, duration_seconds=0.31),
            CommandResult(("brew", "upgrade", "php56-xdebug"), 1, duration_seconds=12.0),
        ]
        lines = render_results(results)
        assert lines[0].startswith("✅  brew unlink php56" + " " * 10 + "0  0.3s")
        assert lines[1].startswith("❌  brew upgrade php56-xdebug  1  12.0s")

    def test_empty(self):
        assert render_results([]) == []
