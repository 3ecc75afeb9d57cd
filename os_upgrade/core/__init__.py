"""
Core package for the OS upgrade orchestration system.

Contains fundamental data structures, constants, enumerations, and exceptions
used by both the upgrade and reboot gate phases.
"""

from .dataclasses import (
    Blocker,
    CompatibilityResult,
    HostSignals,
    LaunchOutcome,
    ProbeResult,
    RebootDecision,
    RebootGateResult,
    RebootSignals,
    StagedMedia,
    UpgradeRunResult,
)
from .enums import (
    BlockerKind,
    FirmwareType,
    LaunchCategory,
    RebootGateOutcome,
    UpgradeOutcome,
)
from .exceptions import (
    ConfigurationError,
    DestinationMissingError,
    MediaStagingError,
    ProbeFailure,
    SourceNotFoundError,
    TransferFailedError,
    UpgradeError,
)

__all__ = [
    # Data classes
    "Blocker",
    "CompatibilityResult",
    "HostSignals",
    "LaunchOutcome",
    "ProbeResult",
    "RebootDecision",
    "RebootGateResult",
    "RebootSignals",
    "StagedMedia",
    "UpgradeRunResult",
    # Enums
    "BlockerKind",
    "FirmwareType",
    "LaunchCategory",
    "RebootGateOutcome",
    "UpgradeOutcome",
    # Exceptions
    "ConfigurationError",
    "DestinationMissingError",
    "MediaStagingError",
    "ProbeFailure",
    "SourceNotFoundError",
    "TransferFailedError",
    "UpgradeError",
]
