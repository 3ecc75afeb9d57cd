"""
OS installer invocation.

Runs the installer synchronously with the unattended argument set and maps
its exit code to a LaunchCategory. A process that cannot be started at all
is reported as LAUNCH_ERROR and never confused with an installer exit code.
"""

import shlex
import subprocess
from pathlib import Path
from typing import List, Union

from loguru import logger

from os_upgrade.core.constants import DEFAULT_INSTALLER_ARGS, INSTALLER_COLLISION_EXIT_CODE
from os_upgrade.core.dataclasses import LaunchOutcome
from os_upgrade.core.enums import LaunchCategory


def categorize_exit_code(exit_code: int) -> LaunchCategory:
    if exit_code == 0:
        return LaunchCategory.SUCCESS
    if exit_code == INSTALLER_COLLISION_EXIT_CODE:
        return LaunchCategory.COLLISION_FAILURE
    return LaunchCategory.GENERIC_FAILURE


class InstallerLauncher:
    """
    Launches the installer and waits for it to exit.

    There is no timeout: the installer may run for a long time, and the host
    may be restarted underneath it, in which case this process simply ends.
    """

    def __init__(self, log=None):
        self.log = log or logger

    def build_command(self, installer_path: Union[str, Path], installer_args: str) -> List[str]:
        return [str(installer_path)] + shlex.split(installer_args, posix=False)

    def launch(
        self,
        installer_path: Union[str, Path],
        installer_args: str = DEFAULT_INSTALLER_ARGS,
    ) -> LaunchOutcome:
        """
        Run the installer and classify the result.

        Args:
            installer_path: Path to the installer entry point
            installer_args: Unattended argument string

        Returns:
            LaunchOutcome with the exit code (None when the process never started)
        """
        command = self.build_command(installer_path, installer_args)
        self.log.info(f"🚀 Launching installer: {' '.join(command)}")
        try:
            process = subprocess.run(command, check=False)
        except OSError as e:
            self.log.error(f"❌ Installer could not be started: {e}")
            return LaunchOutcome(category=LaunchCategory.LAUNCH_ERROR, error=str(e))

        category = categorize_exit_code(process.returncode)
        outcome = LaunchOutcome(category=category, exit_code=process.returncode)

        if category == LaunchCategory.SUCCESS:
            self.log.info("✅ Installer exited with code 0, upgrade staged")
        elif category == LaunchCategory.COLLISION_FAILURE:
            outcome.error = (
                "Installer reported that a resource already exists; "
                "a previous attempt probably left staging artifacts behind"
            )
            self.log.error(f"❌ Installer exited with {process.returncode}: {outcome.error}")
        else:
            outcome.error = f"Installer exited with code {process.returncode}"
            self.log.error(f"❌ {outcome.error}")
        return outcome
