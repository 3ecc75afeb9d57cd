"""
Host probing package.

Reads host facts through PowerShell queries, psutil and filesystem checks
into error-tolerant ProbeResult values.
"""

from .powershell import PowerShellRunner
from .signal_probe import SignalProbe, is_target_os

__all__ = ["PowerShellRunner", "SignalProbe", "is_target_os"]
