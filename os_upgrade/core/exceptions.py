"""
Custom exception classes for upgrade operations.

Provides hierarchical exception handling for granular error categorization
of probe, media staging and argument failures.
"""

from typing import Optional


class UpgradeError(Exception):
    """Base exception for all upgrade-related errors"""

    def __init__(self, message: str, remediation: Optional[str] = None):
        self.message = message
        self.remediation = remediation
        super().__init__(self.message)


class ProbeFailure(UpgradeError):
    """Raised inside a probe when a single host fact cannot be read"""

    pass


class MediaStagingError(UpgradeError):
    """Base class for installation media staging failures"""

    pass


class SourceNotFoundError(MediaStagingError):
    """Raised when the remote installer entry point is unreachable"""

    pass


class TransferFailedError(MediaStagingError):
    """Raised when the mirrored copy of the media aborts"""

    def __init__(
        self,
        message: str,
        return_code: Optional[int] = None,
        remediation: Optional[str] = None,
    ):
        self.return_code = return_code
        super().__init__(message, remediation)


class DestinationMissingError(MediaStagingError):
    """Raised when the installer is absent from the destination after copying"""

    pass



class ConfigurationError(UpgradeError):
    """Raised when run arguments cannot be parsed"""

    pass
