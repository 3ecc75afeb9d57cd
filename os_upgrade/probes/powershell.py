"""
PowerShell query runner.

Runs a single PowerShell expression non-interactively, converts its output
to JSON on the PowerShell side and decodes it here. Every failure mode
(missing executable, timeout, non-zero exit, unparsable output) surfaces as
a ProbeFailure so callers have exactly one exception to handle.
"""

import json
import locale
import shutil
import subprocess
from typing import Any, List, Optional

from loguru import logger

from os_upgrade.core.constants import POWERSHELL_EXECUTABLE, POWERSHELL_QUERY_TIMEOUT
from os_upgrade.core.exceptions import ProbeFailure


class PowerShellRunner:
    """Executes PowerShell expressions and returns their JSON-decoded result."""

    def __init__(
        self,
        executable: Optional[str] = None,
        timeout: Optional[float] = POWERSHELL_QUERY_TIMEOUT,
        log=None,
    ):
        self.executable = executable or _default_executable()
        self.timeout = timeout
        self.log = log or logger

    def build_command(self, script: str) -> List[str]:
        wrapped = (
            "$ErrorActionPreference = 'Stop'; "
            f"{script} | ConvertTo-Json -Compress -Depth 3"
        )
        return [
            self.executable,
            "-NoProfile",
            "-NonInteractive",
            "-ExecutionPolicy",
            "Bypass",
            "-Command",
            wrapped,
        ]

    def run_json(self, script: str) -> Any:
        """
        Run a PowerShell expression and decode its JSON output.

        Args:
            script: PowerShell expression whose pipeline output is the result

        Returns:
            Decoded JSON value (bool, int, str, dict or list)

        Raises:
            ProbeFailure: When the query cannot be executed or decoded
        """
        self.log.debug(f"PowerShell query: {script}")
        try:
            process = subprocess.run(
                self.build_command(script),
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError:
            raise ProbeFailure(f"PowerShell executable not found: {self.executable}")
        except subprocess.TimeoutExpired:
            raise ProbeFailure(f"PowerShell query timed out after {self.timeout}s")

        stdout = _normalize_output(process.stdout).strip()
        if process.returncode != 0:
            stderr = _normalize_output(process.stderr).strip()
            raise ProbeFailure(
                f"PowerShell query exited with {process.returncode}: "
                f"{_first_line(stderr) or 'no error output'}"
            )
        if not stdout:
            raise ProbeFailure("PowerShell query returned no output")

        try:
            return json.loads(stdout)
        except json.JSONDecodeError as e:
            raise ProbeFailure(f"Could not decode PowerShell output: {e}")


def _default_executable() -> str:
    if shutil.which(POWERSHELL_EXECUTABLE):
        return POWERSHELL_EXECUTABLE
    if shutil.which("pwsh"):
        return "pwsh"
    return POWERSHELL_EXECUTABLE


def _first_line(text: str) -> str:
    return text.splitlines()[0].strip() if text else ""


def _normalize_output(payload) -> str:
    if payload is None:
        return ""
    if isinstance(payload, str):
        return payload

    for encoding in ("utf-8-sig", locale.getpreferredencoding(False), "cp1252"):
        try:
            return payload.decode(encoding)
        except (LookupError, UnicodeDecodeError):
            continue
    return payload.decode("utf-8", errors="replace")
