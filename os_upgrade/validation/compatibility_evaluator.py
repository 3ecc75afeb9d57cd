"""
Upgrade compatibility evaluation.

Applies an ordered registry of hardware and firmware checks to probed host
signals. Every check runs regardless of the others and contributes at most
one Blocker, so a single evaluation reports the complete list of reasons a
host cannot be upgraded.
"""

from typing import Callable, List, Optional, Tuple

from loguru import logger

from os_upgrade.core.constants import (
    DEFAULT_MIN_FREE_SPACE_GB,
    MINIMUM_RAM_GB,
    REQUIRED_CPU_ADDRESS_WIDTH,
)
from os_upgrade.core.dataclasses import Blocker, CompatibilityResult, HostSignals
from os_upgrade.core.enums import BlockerKind, FirmwareType

CheckFunction = Callable[[HostSignals], Optional[Blocker]]


def round_gb(value: float) -> int:
    """Round a size in GB to the nearest whole GB (half to even)."""
    return int(round(value))


class CompatibilityEvaluator:
    """
    Evaluates host signals against the upgrade's hard requirements.

    Checks run in a fixed order (TPM, Secure Boot, firmware, CPU, RAM, free
    disk) so logs and reason lists are deterministic. A check that raises is
    recorded as a CHECK_ERROR blocker instead of aborting the evaluation.
    """

    def __init__(self, min_free_space_gb: int = DEFAULT_MIN_FREE_SPACE_GB, log=None):
        self.min_free_space_gb = min_free_space_gb
        self.log = log or logger

    @property
    def checks(self) -> List[Tuple[str, CheckFunction]]:
        return [
            ("TPM", self.check_tpm),
            ("Secure Boot", self.check_secure_boot),
            ("Firmware", self.check_firmware),
            ("CPU Architecture", self.check_cpu_architecture),
            ("Memory", self.check_memory),
            ("Free Disk Space", self.check_free_disk_space),
        ]

    # =========================================================================
    # SECTION 1: ORCHESTRATION
    # =========================================================================

    def evaluate(self, signals: HostSignals) -> CompatibilityResult:
        """
        Run every check and aggregate the blockers.

        Args:
            signals: Probed host facts

        Returns:
            CompatibilityResult, passed only when no check produced a blocker
        """
        blockers = []
        checks = self.checks
        for idx, (check_name, check_func) in enumerate(checks, start=1):
            try:
                blocker = check_func(signals)
            except Exception as e:
                self.log.error(f"❌ Check {check_name} failed to run: {e}")
                blocker = Blocker(
                    kind=BlockerKind.CHECK_ERROR,
                    message=f"{check_name} check could not be evaluated ({e})",
                    detail=str(e),
                )

            if blocker is None:
                self.log.debug(f"✅ [{idx}/{len(checks)}] {check_name} passed")
            else:
                self.log.warning(f"⚠️ [{idx}/{len(checks)}] {check_name}: {blocker.message}")
                blockers.append(blocker)

        result = CompatibilityResult(blockers=tuple(blockers))
        self.log.info(
            f"📊 Compatibility summary: {len(checks) - len(blockers)}/{len(checks)} passed, "
            f"{len(blockers)} blocker(s)"
        )
        return result

    # =========================================================================
    # SECTION 2: CHECKS
    # =========================================================================

    def check_tpm(self, signals: HostSignals) -> Optional[Blocker]:
        if not signals.tpm_present.known:
            return Blocker(
                BlockerKind.TPM_QUERY_FAILED,
                f"TPM check failed ({signals.tpm_present.error})",
                signals.tpm_present.error,
            )
        if not signals.tpm_present.value:
            return Blocker(BlockerKind.TPM_NOT_PRESENT, "TPM not present")
        if not signals.tpm_ready.known:
            return Blocker(
                BlockerKind.TPM_QUERY_FAILED,
                f"TPM check failed ({signals.tpm_ready.error})",
                signals.tpm_ready.error,
            )
        if not signals.tpm_ready.value:
            return Blocker(BlockerKind.TPM_NOT_READY, "TPM present but not ready")
        return None

    def check_secure_boot(self, signals: HostSignals) -> Optional[Blocker]:
        # A failed query is itself evidence of a non-UEFI platform
        if not signals.secure_boot_enabled.known:
            return Blocker(
                BlockerKind.SECURE_BOOT_QUERY_FAILED,
                "Secure Boot check failed, likely not UEFI",
                signals.secure_boot_enabled.error,
            )
        if not signals.secure_boot_enabled.value:
            return Blocker(BlockerKind.SECURE_BOOT_DISABLED, "Secure Boot disabled")
        return None

    def check_firmware(self, signals: HostSignals) -> Optional[Blocker]:
        firmware = signals.firmware_type.value_or(FirmwareType.UNKNOWN)
        if firmware != FirmwareType.UEFI:
            return Blocker(
                BlockerKind.FIRMWARE_NOT_UEFI,
                f"Firmware is not UEFI ({firmware.value})",
                signals.firmware_type.error,
            )
        return None

    def check_cpu_architecture(self, signals: HostSignals) -> Optional[Blocker]:
        if not signals.cpu_address_width.known:
            return Blocker(
                BlockerKind.CPU_QUERY_FAILED,
                f"CPU architecture check failed ({signals.cpu_address_width.error})",
                signals.cpu_address_width.error,
            )
        width = signals.cpu_address_width.value
        if width != REQUIRED_CPU_ADDRESS_WIDTH:
            return Blocker(BlockerKind.CPU_NOT_64_BIT, f"CPU is not 64-bit ({width}-bit)")
        return None

    def check_memory(self, signals: HostSignals) -> Optional[Blocker]:
        if not signals.ram_gb.known:
            return Blocker(
                BlockerKind.RAM_QUERY_FAILED,
                f"RAM check failed ({signals.ram_gb.error})",
                signals.ram_gb.error,
            )
        ram_gb = round_gb(signals.ram_gb.value)
        if ram_gb < MINIMUM_RAM_GB:
            return Blocker(
                BlockerKind.INSUFFICIENT_RAM,
                f"RAM < {MINIMUM_RAM_GB} GB ({ram_gb} GB installed)",
            )
        return None

    def check_free_disk_space(self, signals: HostSignals) -> Optional[Blocker]:
        drive = signals.system_drive
        if not signals.free_disk_gb.known:
            return Blocker(
                BlockerKind.DISK_QUERY_FAILED,
                f"Free space check failed on {drive} ({signals.free_disk_gb.error})",
                signals.free_disk_gb.error,
            )
        free_gb = round_gb(signals.free_disk_gb.value)
        if free_gb < self.min_free_space_gb:
            return Blocker(
                BlockerKind.INSUFFICIENT_DISK,
                f"Free space on {drive} < {self.min_free_space_gb} GB ({free_gb} GB free)",
            )
        return None
