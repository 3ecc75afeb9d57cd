"""
Installation media staging.

Makes the installer reachable on the local host: verifies the remote entry
point first, then optionally mirrors the media into a freshly cleared local
directory with robocopy. Every failure is raised as a MediaStagingError
subclass so the caller can map it to a single exit code.
"""

import shutil
import subprocess
from pathlib import Path, PureWindowsPath
from typing import List, Optional

from loguru import logger

from os_upgrade.core.constants import (
    INSTALLER_ENTRY_POINT,
    ROBOCOPY_EXECUTABLE,
    ROBOCOPY_FAILURE_THRESHOLD,
    ROBOCOPY_RETRY_COUNT,
    ROBOCOPY_RETRY_WAIT,
)
from os_upgrade.core.dataclasses import StagedMedia
from os_upgrade.core.exceptions import (
    DestinationMissingError,
    SourceNotFoundError,
    TransferFailedError,
)


def build_remote_source(remote_host: str, media_folder: str) -> str:
    """
    Build the UNC path of the media folder on the remote host.

    A folder that is already a UNC path is returned unchanged; a local path
    such as ``D:\\Media\\Win11`` becomes ``\\\\host\\D$\\Media\\Win11``.
    """
    if media_folder.startswith("\\\\"):
        return media_folder
    folder = PureWindowsPath(media_folder)
    if folder.drive:
        admin_share = folder.drive.rstrip(":") + "$"
        rest = "\\".join(folder.parts[1:])
        return f"\\\\{remote_host}\\{admin_share}\\{rest}".rstrip("\\")
    share_path = str(folder).lstrip("\\")
    return f"\\\\{remote_host}\\{share_path}"


class RobocopyTransfer:
    """Mirrored copy through robocopy; returns robocopy's numeric code."""

    def __init__(
        self,
        executable: str = ROBOCOPY_EXECUTABLE,
        retry_count: int = ROBOCOPY_RETRY_COUNT,
        retry_wait: int = ROBOCOPY_RETRY_WAIT,
        log=None,
    ):
        self.executable = executable
        self.retry_count = retry_count
        self.retry_wait = retry_wait
        self.log = log or logger

    def build_command(self, source: Path, destination: Path) -> List[str]:
        return [
            self.executable,
            str(source),
            str(destination),
            "/MIR",
            f"/R:{self.retry_count}",
            f"/W:{self.retry_wait}",
            "/NFL",
            "/NDL",
            "/NJH",
            "/NJS",
            "/NP",
        ]

    def mirror(self, source: Path, destination: Path) -> int:
        command = self.build_command(source, destination)
        self.log.info(f"Mirroring media: {' '.join(command)}")
        try:
            process = subprocess.run(command, capture_output=True, check=False)
        except OSError as e:
            raise TransferFailedError(
                f"Could not start {self.executable}: {e}",
                remediation="Verify robocopy is available on the target host",
            )
        return process.returncode


class MediaStager:
    """
    Ensures the installer entry point is present and reachable locally.

    Re-running with the same inputs always clears and re-copies; the
    destination is never synced incrementally.
    """

    def __init__(
        self,
        transfer: Optional[RobocopyTransfer] = None,
        failure_threshold: int = ROBOCOPY_FAILURE_THRESHOLD,
        entry_point: str = INSTALLER_ENTRY_POINT,
        log=None,
    ):
        self.log = log or logger
        self.transfer = transfer or RobocopyTransfer(log=self.log)
        self.failure_threshold = failure_threshold
        self.entry_point = entry_point

    def stage(self, remote_source: str, local_dest: str, use_local_copy: bool) -> StagedMedia:
        """
        Stage the installation media.

        Args:
            remote_source: Media folder on the remote share
            local_dest: Local directory the media is mirrored into
            use_local_copy: Mirror locally when True, otherwise install from the share

        Returns:
            StagedMedia pointing at the installer to launch

        Raises:
            SourceNotFoundError: Remote entry point missing or unreachable
            TransferFailedError: Destination could not be cleared or the copy failed
            DestinationMissingError: Entry point absent after the copy
        """
        source = Path(remote_source)
        source_installer = source / self.entry_point

        # Checked before touching the destination so a bad path never costs a transfer
        if not _is_file(source_installer):
            raise SourceNotFoundError(
                f"Installer not found at {source_installer}",
                remediation="Check the share path and that the computer account can read it",
            )
        self.log.info(f"✅ Installer found at {source_installer}")

        if not use_local_copy:
            self.log.info("Local copy disabled, installing directly from the share")
            return StagedMedia(installer_path=source_installer, source_path=source, copied=False)

        destination = Path(local_dest)
        self._clear_destination(destination)

        return_code = self.transfer.mirror(source, destination)
        if return_code >= self.failure_threshold:
            raise TransferFailedError(
                f"Mirrored copy failed with robocopy code {return_code}",
                return_code=return_code,
                remediation="Check free space and share permissions, then re-run",
            )
        self.log.info(f"Mirrored copy finished with robocopy code {return_code}")

        destination_installer = destination / self.entry_point
        if not _is_file(destination_installer):
            raise DestinationMissingError(
                f"Installer missing at {destination_installer} after copy",
                remediation="Verify the media folder contents on the share",
            )
        return StagedMedia(
            installer_path=destination_installer,
            source_path=source,
            copied=True,
        )

    def _clear_destination(self, destination: Path) -> None:
        try:
            if destination.exists():
                self.log.info(f"Clearing destination {destination}")
                shutil.rmtree(destination)
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise TransferFailedError(
                f"Could not prepare destination {destination}: {e}",
                remediation="Close programs holding files in the destination and re-run",
            )


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False
