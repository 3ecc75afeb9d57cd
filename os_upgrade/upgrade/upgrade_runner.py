"""
Upgrade phase orchestration.

Runs the upgrade phase end to end on the local host:

1. Probe host signals
2. Skip hosts already on the target release or already running setup
3. Evaluate compatibility (exit 10 on any blocker)
4. Stage installation media (exit 20 on any staging error)
5. Launch the installer (exit 30 on launch error, collision or failure)

Each run is stateless; re-running simply re-derives everything from the
live host.
"""

from typing import Optional

from loguru import logger

from os_upgrade.config import UpgradeParameters
from os_upgrade.core.dataclasses import CompatibilityResult, UpgradeRunResult
from os_upgrade.core.enums import LaunchCategory, UpgradeOutcome
from os_upgrade.core.exceptions import MediaStagingError
from os_upgrade.probes.signal_probe import SignalProbe, is_target_os
from os_upgrade.progress.event_sender import EventEmitter
from os_upgrade.validation.compatibility_evaluator import CompatibilityEvaluator

from .installer_launcher import InstallerLauncher
from .media_stager import MediaStager, build_remote_source

TOTAL_STEPS = 5


# =============================================================================
# SECTION 1: UPGRADE RUNNER CLASS
# =============================================================================


class UpgradeRunner:
    """
    Orchestrates one upgrade phase run.

    Collaborators default to the real implementations and can be replaced
    individually, which is how the tests drive each branch.
    """

    # =========================================================================
    # SUBSECTION 1.1: INITIALIZATION
    # =========================================================================

    def __init__(
        self,
        params: UpgradeParameters,
        probe: Optional[SignalProbe] = None,
        evaluator: Optional[CompatibilityEvaluator] = None,
        stager: Optional[MediaStager] = None,
        launcher: Optional[InstallerLauncher] = None,
        emitter: Optional[EventEmitter] = None,
        log=None,
    ):
        self.params = params
        self.log = log or logger
        self.probe = probe or SignalProbe(system_drive=params.system_drive, log=self.log)
        self.evaluator = evaluator or CompatibilityEvaluator(
            min_free_space_gb=params.min_free_space_gb, log=self.log
        )
        self.stager = stager or MediaStager(log=self.log)
        self.launcher = launcher or InstallerLauncher(log=self.log)
        self.emitter = emitter or EventEmitter("upgrade")

    @property
    def hostname(self) -> str:
        return self.probe.hostname

    # =========================================================================
    # SUBSECTION 1.2: MAIN FLOW
    # =========================================================================

    def run(self) -> UpgradeRunResult:
        """
        Execute the upgrade phase.

        Returns:
            UpgradeRunResult whose outcome carries the process exit code
        """
        self.emitter.operation_start(TOTAL_STEPS)

        # Step 1: probe
        signals = self.probe.probe_host_signals()
        caption = signals.os_caption.value_or("unknown")
        self.log.info(
            f"[{self.hostname}] OS: {caption} (build {signals.os_build_number.value_or('unknown')})"
        )
        self.emitter.step_complete(1, TOTAL_STEPS, "Host signals collected")

        # Step 2: skip conditions
        if is_target_os(signals.os_caption.value_or(None)):
            return self._finish(
                UpgradeOutcome.ALREADY_UPGRADED,
                f"Host already runs {caption}, nothing to do",
            )
        if signals.is_setup_running.value_or(False):
            return self._finish(
                UpgradeOutcome.SETUP_ALREADY_RUNNING,
                "Upgrade setup is already running, not starting another attempt",
            )
        self.emitter.step_complete(2, TOTAL_STEPS, "Host requires the upgrade")

        # Step 3: compatibility
        compatibility = self.evaluator.evaluate(signals)
        self.emitter.pre_check_complete(self.hostname, compatibility)
        if not compatibility.passed:
            return self._incompatible(compatibility)
        self.emitter.step_complete(3, TOTAL_STEPS, "✅ All compatibility checks passed")

        if self.params.check_only:
            return self._finish(
                UpgradeOutcome.STARTED,
                "Compatibility checks passed (check-only run, media not staged)",
                compatibility=compatibility,
            )

        # Step 4: media
        remote_source = build_remote_source(self.params.remote_host, self.params.media_folder)
        try:
            staged = self.stager.stage(
                remote_source, self.params.local_dest, self.params.use_local_copy
            )
        except MediaStagingError as e:
            self.log.error(f"[{self.hostname}] ❌ Media unavailable: {e.message}")
            if e.remediation:
                self.log.error(f"[{self.hostname}] Remediation: {e.remediation}")
            return self._finish(
                UpgradeOutcome.MEDIA_UNAVAILABLE,
                f"Media unavailable: {e.message}",
                compatibility=compatibility,
            )
        self.emitter.step_complete(4, TOTAL_STEPS, f"Media staged at {staged.installer_path}")

        # Step 5: launch
        launch = self.launcher.launch(staged.installer_path, self.params.installer_args)
        if launch.category != LaunchCategory.SUCCESS:
            return self._finish(
                UpgradeOutcome.LAUNCH_FAILED,
                f"Installer failed ({launch.category.value}): {launch.error}",
                compatibility=compatibility,
                staged_media=staged,
                launch=launch,
            )
        self.emitter.step_complete(5, TOTAL_STEPS, "Installer finished")
        return self._finish(
            UpgradeOutcome.STARTED,
            "Upgrade started, the host will finish installing on its next restart",
            compatibility=compatibility,
            staged_media=staged,
            launch=launch,
        )

    # =========================================================================
    # SUBSECTION 1.3: RESULT HELPERS
    # =========================================================================

    def _incompatible(self, compatibility: CompatibilityResult) -> UpgradeRunResult:
        self.log.error(
            f"[{self.hostname}] ❌ Host is not compatible ({len(compatibility.blockers)} blocker(s)):"
        )
        for reason in compatibility.reasons:
            self.log.error(f"[{self.hostname}]   • {reason}")
        return self._finish(
            UpgradeOutcome.INCOMPATIBLE,
            "Host is not compatible: " + "; ".join(compatibility.reasons),
            compatibility=compatibility,
        )

    def _finish(self, outcome: UpgradeOutcome, message: str, **details) -> UpgradeRunResult:
        result = UpgradeRunResult(outcome=outcome, message=message, **details)
        if outcome.succeeded:
            self.log.info(f"[{self.hostname}] {message} (exit {result.exit_code})")
        else:
            self.log.error(f"[{self.hostname}] {message} (exit {result.exit_code})")

        self.emitter.operation_complete(
            success=outcome.succeeded,
            message=message,
            final_results={
                "outcome": outcome,
                "exit_code": result.exit_code,
                "reasons": result.compatibility.reasons if result.compatibility else [],
                "installer_exit_code": result.launch.exit_code if result.launch else None,
            },
        )
        return result
