"""
OS reboot countdown scheduling through shutdown.exe.
"""

import subprocess
from typing import List

from loguru import logger

from os_upgrade.core.constants import SHUTDOWN_EXECUTABLE


class RebootScheduler:
    """Schedules a restart countdown with a message shown to the signed-in user."""

    def __init__(self, executable: str = SHUTDOWN_EXECUTABLE, log=None):
        self.executable = executable
        self.log = log or logger

    def build_command(self, delay_minutes: int, message: str) -> List[str]:
        delay_seconds = max(0, int(delay_minutes)) * 60
        return [self.executable, "/r", "/t", str(delay_seconds), "/c", message]

    def schedule(self, delay_minutes: int, message: str) -> bool:
        """
        Schedule the reboot.

        Returns:
            True when the scheduler accepted the request. Failures are logged
            and reported as False, never raised.
        """
        command = self.build_command(delay_minutes, message)
        self.log.info(f"⏱️ Scheduling reboot in {delay_minutes} minute(s)")
        try:
            process = subprocess.run(command, capture_output=True, check=False)
        except OSError as e:
            self.log.warning(f"⚠️ Could not run {self.executable}: {e}")
            return False

        if process.returncode != 0:
            self.log.warning(
                f"⚠️ {self.executable} exited with {process.returncode}, reboot may not be scheduled"
            )
            return False
        self.log.info("✅ Reboot scheduled")
        return True
