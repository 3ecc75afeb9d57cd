"""
Application enumerations for type safety and clear intent definitions.

Centralized enum definitions for firmware types, compatibility blockers,
installer launch categories and phase outcomes.
"""

from enum import Enum


class FirmwareType(Enum):
    """Platform firmware reported by the host."""

    UEFI = "UEFI"
    LEGACY = "Legacy"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: str) -> "FirmwareType":
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        if normalized == "bios":
            return cls.LEGACY
        return cls.UNKNOWN


class BlockerKind(Enum):
    """Reasons a host is not eligible for the upgrade."""

    TPM_NOT_PRESENT = "tpm_not_present"
    TPM_NOT_READY = "tpm_not_ready"
    TPM_QUERY_FAILED = "tpm_query_failed"
    SECURE_BOOT_DISABLED = "secure_boot_disabled"
    SECURE_BOOT_QUERY_FAILED = "secure_boot_query_failed"
    FIRMWARE_NOT_UEFI = "firmware_not_uefi"
    CPU_NOT_64_BIT = "cpu_not_64_bit"
    CPU_QUERY_FAILED = "cpu_query_failed"
    INSUFFICIENT_RAM = "insufficient_ram"
    RAM_QUERY_FAILED = "ram_query_failed"
    INSUFFICIENT_DISK = "insufficient_disk"
    DISK_QUERY_FAILED = "disk_query_failed"
    CHECK_ERROR = "check_error"


class LaunchCategory(Enum):
    """Classification of an installer invocation."""

    SUCCESS = "success"
    COLLISION_FAILURE = "collision_failure"
    GENERIC_FAILURE = "generic_failure"
    LAUNCH_ERROR = "launch_error"


class UpgradeOutcome(Enum):
    """Discrete outcomes of the upgrade phase."""

    STARTED = "started"
    ALREADY_UPGRADED = "already_upgraded"
    SETUP_ALREADY_RUNNING = "setup_already_running"
    INCOMPATIBLE = "incompatible"
    MEDIA_UNAVAILABLE = "media_unavailable"
    LAUNCH_FAILED = "launch_failed"

    @property
    def exit_code(self) -> int:
        return _UPGRADE_EXIT_CODES[self]

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


_UPGRADE_EXIT_CODES = {
    UpgradeOutcome.STARTED: 0,
    UpgradeOutcome.ALREADY_UPGRADED: 0,
    UpgradeOutcome.SETUP_ALREADY_RUNNING: 0,
    UpgradeOutcome.INCOMPATIBLE: 10,
    UpgradeOutcome.MEDIA_UNAVAILABLE: 20,
    UpgradeOutcome.LAUNCH_FAILED: 30,
}


class RebootGateOutcome(Enum):
    """The reboot gate phase has a single outcome."""

    COMPLETED = "completed"

    @property
    def exit_code(self) -> int:
        return 0
