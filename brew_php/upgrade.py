"""
Upgrade of PHP versions and extensions installed side by side.

After a formula is installed or upgraded Homebrew runs ``brew link`` for it.
The PHP versions all provide the same files, so Homebrew marks them as
conflicting and refuses to upgrade one while another one is linked. The
upgrade therefore runs in phases:

1. unlink every installed PHP version
2. for each requested version, in version order: upgrade it (which links it)
   or, if only its extensions were requested, link it; upgrade its extensions;
   unlink it again
3. re-link the version that was active before the run

Each brew call returns a ``CommandResult``. With ``on_failure="continue"`` a
failed call is recorded and the sequence goes on; with ``"abort"`` the rest of
the sequence is skipped. The re-link of step 3 is a compensating action: with
``restore_active`` it also runs after an abort or an interrupt.

There is no locking; two runs against the same Homebrew prefix race each other.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

from .common import vlog
from .config import ON_FAILURE_MODES
from .homebrew import CommandResult, Homebrew
from .inventory import Inventory
from .logging_config import get_logger
from .packages import format_version
from .render import print_banner
from .validation import UpgradeRequest


@dataclass(frozen=True)
class UpgradeStep:
    """
    One planned brew call.

    Attributes:
        action: "link", "unlink" or "upgrade"
        formula: Formula the action applies to
        stage: "unlink_all", "process" or "restore"
        version: PHP version being processed (stage "process" only)
    """
    action: str
    formula: str
    stage: str
    version: str | None = None

    @property
    def args(self) -> tuple[str, ...]:
        if self.action == "link":
            return ("link", "--overwrite", self.formula)
        return (self.action, self.formula)

    def run(self, brew: Homebrew) -> CommandResult:
        if self.action == "link":
            return brew.link(self.formula, overwrite=True)
        if self.action == "unlink":
            return brew.unlink(self.formula)
        return brew.upgrade(self.formula)


@dataclass(frozen=True)
class UpgradeResult:
    """
    Outcome of an upgrade run.

    Attributes:
        success: Every brew call succeeded, the re-link included; when no
            version was active there is nothing to re-link and only the
            other calls count
        phase: Last phase reached ("done" or "aborted")
        versions: PHP versions that were processed
        steps: Every brew call in execution order, the restore included
        failures: The failed brew calls
        active_version: Version that was active before the run
        restore_result: Result of re-linking the active version, None if skipped
        aborted: Whether the sequence stopped early on a failure
        duration_seconds: Total time
    """
    success: bool
    phase: str
    versions: tuple[str, ...]
    steps: tuple[CommandResult, ...]
    failures: tuple[CommandResult, ...]
    active_version: str | None = None
    restore_result: CommandResult | None = None
    aborted: bool = False
    duration_seconds: float = 0.0

    @property
    def restored_version(self) -> str | None:
        if self.restore_result is not None and self.restore_result.success:
            return self.active_version
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "phase": self.phase,
            "versions": list(self.versions),
            "steps": [s.to_dict() for s in self.steps],
            "failures": [f.to_dict() for f in self.failures],
            "active_version": self.active_version,
            "restored_version": self.restored_version,
            "aborted": self.aborted,
            "duration_seconds": self.duration_seconds,
        }

    def summary(self) -> str:
        """Human-readable summary."""
        restored = self.restored_version or "-"
        return f"""
Upgrade Summary:
  ✅ Succeeded: {len(self.steps) - len(self.failures)}
  ❌ Failed: {len(self.failures)}
  🔄 Restored: {restored}
  ⏱️  Duration: {self.duration_seconds:.1f}s
"""


def plan_upgrade(
    request: UpgradeRequest,
    inventory: Inventory,
    active_version: str | None = None,
) -> list[UpgradeStep]:
    """
    List the brew calls an upgrade runs, in order.

    Args:
        request: Validated upgrade request
        inventory: Installed PHP formulae
        active_version: Version to re-link at the end, None to skip the restore

    Returns:
        Ordered list of UpgradeStep
    """
    steps = [UpgradeStep("unlink", version, "unlink_all") for version in inventory.version_names]

    for group in request.groups():
        # Without the interpreter in the request the version is only linked,
        # its extensions cannot be upgraded otherwise
        first = "upgrade" if group.interpreter else "link"
        steps.append(UpgradeStep(first, group.version, "process", group.version))
        for extension in group.extensions:
            steps.append(UpgradeStep("upgrade", extension, "process", group.version))
        steps.append(UpgradeStep("unlink", group.version, "process", group.version))

    if active_version:
        steps.append(UpgradeStep("link", active_version, "restore"))

    return steps


def _announce(step: UpgradeStep, previous: UpgradeStep | None, prefix: str) -> None:
    if step.stage == "unlink_all" and (previous is None or previous.stage != "unlink_all"):
        print_banner("Unlink all versions")
    elif step.stage == "process" and (previous is None or previous.version != step.version):
        print_banner(f"Process PHP {format_version(step.version, prefix)}")
    elif step.stage == "restore":
        print_banner(f"Re-link current version ({format_version(step.formula, prefix)})")


def upgrade_versions(
    request: UpgradeRequest,
    inventory: Inventory,
    active_version: str | None,
    brew: Homebrew,
    on_failure: str = "continue",
    restore_active: bool = True,
    verbose: bool = False,
) -> UpgradeResult:
    """
    Upgrade the requested PHP versions and extensions.

    Args:
        request: Validated upgrade request
        inventory: Installed PHP formulae
        active_version: Formula name of the version active before the run
        brew: Homebrew wrapper
        on_failure: "continue" or "abort" when a brew call fails
        restore_active: Re-link the active version after an abort or an interrupt too
        verbose: Enable verbose logging

    Returns:
        UpgradeResult

    Raises:
        ValueError: If on_failure is not a known mode
        KeyboardInterrupt: Re-raised after the restore
    """
    if on_failure not in ON_FAILURE_MODES:
        raise ValueError(f"Invalid on_failure mode: {on_failure}. Must be 'continue' or 'abort'")

    logger = get_logger()
    start_time = time.time()
    prefix = inventory.prefix
    steps = plan_upgrade(request, inventory)
    results: list[CommandResult] = []
    failures: list[CommandResult] = []
    phase = "idle"
    aborted = False
    completed = False
    restore_result = None

    def enter(new_phase: str) -> None:
        nonlocal phase
        if new_phase != phase:
            vlog(f"Upgrade phase: {phase} -> {new_phase}", verbose)
            phase = new_phase

    def restore() -> CommandResult | None:
        if not active_version:
            logger.warning("No active PHP version was detected before the upgrade, nothing to re-link")
            return None
        step = UpgradeStep("link", active_version, "restore")
        _announce(step, None, prefix)
        result = step.run(brew)
        results.append(result)
        if not result.success:
            failures.append(result)
            logger.error(f"Could not re-link {active_version}: {result.error_message}")
        return result

    vlog(f"Upgrade plan: {', '.join(' '.join(s.args) for s in steps)}", verbose)

    try:
        previous = None
        for step in steps:
            if step.stage == "process":
                enter("processing")
            elif previous is None:
                enter("unlinked_all")
            _announce(step, previous, prefix)
            previous = step

            result = step.run(brew)
            results.append(result)

            if not result.success:
                failures.append(result)
                logger.warning(f"brew {' '.join(step.args)} failed: {result.error_message}")
                if on_failure == "abort":
                    logger.error("Aborting the upgrade sequence")
                    aborted = True
                    break
        completed = True
    finally:
        if not completed and restore_active:
            # Interrupted; re-link before the exception propagates
            restore()

    if not aborted or restore_active:
        restore_result = restore()
        enter("relinked")

    print_banner("That's all!")

    enter("aborted" if aborted else "done")
    return UpgradeResult(
        success=not failures and not aborted,
        phase=phase,
        versions=request.versions,
        steps=tuple(results),
        failures=tuple(failures),
        active_version=active_version,
        restore_result=restore_result,
        aborted=aborted,
        duration_seconds=time.time() - start_time,
    )
