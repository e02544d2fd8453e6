"""
Tests for running a command line with every PHP version (brew_php/runner.py).
"""

import logging
from unittest.mock import MagicMock, patch

from brew_php.homebrew import COMMAND_NOT_EXECUTABLE, COMMAND_NOT_FOUND, CommandResult
from brew_php.inventory import build_inventory
from brew_php.runner import BatchResult, php_binary_path, run_all


def _fake_run(exit_codes):
    calls = []

    def run(command, capture=True, timeout=None, verbose=False):
        calls.append((tuple(command), capture))
        return CommandResult(tuple(command), exit_codes.get(command[0], 0))

    return run, calls


class TestPhpBinaryPath:
    """Tests for php_binary_path."""

    def test_path_under_prefix(self, brew):
        assert php_binary_path(brew, "php56") == "/usr/local/opt/php56/bin/php"
        assert brew.calls == [("--prefix", "php56")]

    def test_custom_binary(self, brew):
        assert php_binary_path(brew, "php70", "php-cgi") == "/usr/local/opt/php70/bin/php-cgi"


class TestRunAll:
    """Tests for run_all."""

    def test_runs_every_version_in_order(self, fake_brew_factory, capsys):
        """Test each version gets the arguments verbatim, in version order."""
        brew = fake_brew_factory(["php70", "php53"])
        inventory = build_inventory(brew.installed)
        fake_run, calls = _fake_run({})

        with patch("brew_php.runner.run_command", side_effect=fake_run):
            result = run_all(["--version"], inventory, brew)

        assert calls == [
            (("/usr/local/opt/php53/bin/php", "--version"), False),
            (("/usr/local/opt/php70/bin/php", "--version"), False),
        ]
        assert [version for version, _ in result.runs] == ["php53", "php70"]

    def test_banners(self, fake_brew_factory, capsys):
        brew = fake_brew_factory(["php53", "php70"])
        inventory = build_inventory(brew.installed)
        fake_run, _ = _fake_run({})

        with patch("brew_php.runner.run_command", side_effect=fake_run):
            run_all([], inventory, brew)

        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            "=================== PHP 5.3 ===================",
            "=================== PHP 7.0 ===================",
        ]

    def test_failures_do_not_stop_the_loop(self, fake_brew_factory, capsys):
        """Test a failing PHP does not prevent the next one from running."""
        brew = fake_brew_factory(["php53", "php70"])
        inventory = build_inventory(brew.installed)
        fake_run, calls = _fake_run({"/usr/local/opt/php53/bin/php": 255})

        with patch("brew_php.runner.run_command", side_effect=fake_run):
            result = run_all(["-r", "exit(255);"], inventory, brew)

        assert len(calls) == 2
        assert result.failed_versions == ("php53",)

    def test_arguments_with_spaces_untouched(self, fake_brew_factory, capsys):
        brew = fake_brew_factory(["php71"])
        inventory = build_inventory(brew.installed)
        fake_run, calls = _fake_run({})

        with patch("brew_php.runner.run_command", side_effect=fake_run):
            run_all(["-r", "echo 'a b';"], inventory, brew)

        assert calls[0][0] == ("/usr/local/opt/php71/bin/php", "-r", "echo 'a b';")

    def test_no_versions(self, fake_brew_factory, capsys):
        brew = fake_brew_factory(["git"])
        result = run_all(["-v"], build_inventory(brew.installed), brew)
        assert result.runs == ()
        assert capsys.readouterr().out == ""

    def test_unresolvable_prefix(self, fake_brew_factory, capsys, caplog):
        """Test a version whose prefix cannot be found is skipped and logged."""
        brew = fake_brew_factory(["php53", "php70"])
        inventory = build_inventory(brew.installed)
        fake_run, calls = _fake_run({})

        with patch.object(brew, "prefix", side_effect=[None, "/usr/local/opt/php70"]), \
                patch("brew_php.runner.run_command", side_effect=fake_run), \
                caplog.at_level(logging.ERROR, logger="brew_php"):
            result = run_all(["-v"], inventory, brew)

        assert calls == [(("/usr/local/opt/php70/bin/php", "-v"), False)]
        assert result.runs[0][1].exit_code == COMMAND_NOT_FOUND
        assert "php53" in caplog.text

    def test_unexecutable_binary_does_not_stop_the_loop(self, fake_brew_factory, capsys, caplog):
        """Test a PHP binary that cannot be run is logged and the next version still runs."""
        brew = fake_brew_factory(["php56", "php70"])
        inventory = build_inventory(brew.installed)
        calls = []

        def fake_subprocess_run(command, **kwargs):
            calls.append(command[0])
            if command[0] == "/usr/local/opt/php56/bin/php":
                raise PermissionError(13, "Permission denied")
            return MagicMock(returncode=0, stdout=None, stderr=None)

        with patch("brew_php.homebrew.subprocess.run", side_effect=fake_subprocess_run), \
                caplog.at_level(logging.ERROR, logger="brew_php"):
            result = run_all(["-v"], inventory, brew)

        assert calls == ["/usr/local/opt/php56/bin/php", "/usr/local/opt/php70/bin/php"]
        assert result.runs[0][1].exit_code == COMMAND_NOT_EXECUTABLE
        assert result.failed_versions == ("php56",)
        assert "Permission denied" in caplog.text
        assert "PHP 7.0" in capsys.readouterr().out


class TestBatchResult:
    """Tests for BatchResult."""

    def test_to_dict(self):
        result = BatchResult(
            arguments=("-v",),
            runs=(("php56", CommandResult(("php", "-v"), 0)),),
        )
        data = result.to_dict()
        assert data["arguments"] == ["-v"]
        assert data["runs"][0]["version"] == "php56"
        assert data["runs"][0]["exit_code"] == 0
