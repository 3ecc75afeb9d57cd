"""
Upgrade orchestration package.

Provides media staging, installer invocation, reboot scheduling and the two
phase runners built on them.
"""

from .installer_launcher import InstallerLauncher, categorize_exit_code
from .media_stager import MediaStager, RobocopyTransfer, build_remote_source
from .reboot_gate_runner import RebootGateRunner
from .reboot_scheduler import RebootScheduler
from .upgrade_runner import UpgradeRunner

__all__ = [
    "InstallerLauncher",
    "MediaStager",
    "RebootGateRunner",
    "RebootScheduler",
    "RobocopyTransfer",
    "UpgradeRunner",
    "build_remote_source",
    "categorize_exit_code",
]
