"""
Data classes for the upgrade orchestration system.

Defines the transient, per-run value records exchanged between the probe,
the evaluators and the upgrade components. Everything here is created fresh
for each run and never persisted.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Generic, List, Optional, Tuple, TypeVar

from .enums import BlockerKind, FirmwareType, LaunchCategory, RebootGateOutcome, UpgradeOutcome

T = TypeVar("T")


@dataclass(frozen=True)
class ProbeResult(Generic[T]):
    """Tagged result of a single host query: a value, or the reason it is unknown."""

    value: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> "ProbeResult[T]":
        return cls(value=value)

    @classmethod
    def unknown(cls, reason: str) -> "ProbeResult[T]":
        return cls(error=reason or "unknown error")

    @property
    def known(self) -> bool:
        return self.error is None

    def value_or(self, default: T) -> T:
        return self.value if self.known else default


@dataclass(frozen=True)
class HostSignals:
    """Host facts consulted by the upgrade phase."""

    os_caption: ProbeResult[str]
    os_build_number: ProbeResult[str]
    is_setup_running: ProbeResult[bool]
    tpm_present: ProbeResult[bool]
    tpm_ready: ProbeResult[bool]
    secure_boot_enabled: ProbeResult[bool]
    firmware_type: ProbeResult[FirmwareType]
    cpu_address_width: ProbeResult[int]
    ram_gb: ProbeResult[float]
    free_disk_gb: ProbeResult[float]
    system_drive: str = "C:"

    def unknown_facts(self) -> List[Tuple[str, str]]:
        """Return (fact name, reason) for every probe that failed."""
        unknown = []
        for name in (
            "os_caption",
            "os_build_number",
            "is_setup_running",
            "tpm_present",
            "tpm_ready",
            "secure_boot_enabled",
            "firmware_type",
            "cpu_address_width",
            "ram_gb",
            "free_disk_gb",
        ):
            result = getattr(self, name)
            if not result.known:
                unknown.append((name, result.error))
        return unknown


@dataclass(frozen=True)
class Blocker:
    """A single reason the host cannot be upgraded."""

    kind: BlockerKind
    message: str
    detail: Optional[str] = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class CompatibilityResult:
    """Aggregated outcome of every compatibility check."""

    blockers: Tuple[Blocker, ...] = ()
    passed: bool = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "blockers", tuple(self.blockers))
        object.__setattr__(self, "passed", len(self.blockers) == 0)

    @property
    def reasons(self) -> List[str]:
        return [blocker.message for blocker in self.blockers]

    @property
    def kinds(self) -> List[BlockerKind]:
        return [blocker.kind for blocker in self.blockers]


@dataclass(frozen=True)
class RebootSignals:
    """
    Host facts consulted by the reboot gate.

    The pending-reboot indicator only counts when a staging marker exists;
    without staging it is forced to False whatever the raw registry state.
    """

    is_windows11: bool = False
    is_setup_running: bool = False
    is_staged: bool = False
    raw_pending_reboot: bool = False

    @property
    def is_pending_reboot(self) -> bool:
        return self.is_staged and self.raw_pending_reboot


@dataclass(frozen=True)
class RebootDecision:
    """Whether a reboot prompt should be scheduled, and which signals said so."""

    should_schedule: bool
    triggers: Tuple[str, ...] = ()


@dataclass
class StagedMedia:
    """Location the installer will be launched from."""

    installer_path: Path
    source_path: Path
    copied: bool = False


@dataclass
class LaunchOutcome:
    """Result of invoking the OS installer."""

    category: LaunchCategory
    exit_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.category == LaunchCategory.SUCCESS


@dataclass
class UpgradeRunResult:
    """Summary of one upgrade phase run."""

    outcome: UpgradeOutcome
    message: str
    compatibility: Optional[CompatibilityResult] = None
    staged_media: Optional[StagedMedia] = None
    launch: Optional[LaunchOutcome] = None

    @property
    def exit_code(self) -> int:
        return self.outcome.exit_code


@dataclass
class RebootGateResult:
    """Summary of one reboot gate run."""

    reboot_scheduled: bool
    signals: Optional[RebootSignals] = None
    decision: Optional[RebootDecision] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return RebootGateOutcome.COMPLETED.exit_code
