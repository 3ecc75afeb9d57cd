"""
Run parameter models.

Both phases take simple scalar parameters from the command line. The models
below validate them and fill in defaults, some of which can be overridden
from the environment:

OS_UPGRADE_LOG_DIR: directory for per-run log files.
OS_UPGRADE_SYSTEM_DRIVE: drive whose free space gates the upgrade.
"""

import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

from os_upgrade.core.constants import (
    DEFAULT_INSTALLER_ARGS,
    DEFAULT_LOCAL_MEDIA_PATH,
    DEFAULT_LOG_DIR,
    DEFAULT_MIN_FREE_SPACE_GB,
    DEFAULT_REBOOT_DELAY_MINUTES,
    DEFAULT_REBOOT_MESSAGE,
    DEFAULT_SYSTEM_DRIVE,
)


def default_log_dir() -> str:
    return os.getenv("OS_UPGRADE_LOG_DIR", DEFAULT_LOG_DIR)


def default_system_drive() -> str:
    return os.getenv("OS_UPGRADE_SYSTEM_DRIVE", DEFAULT_SYSTEM_DRIVE)


class UpgradeParameters(BaseModel):
    """Parameters of the upgrade phase."""

    model_config = ConfigDict(frozen=True)

    remote_host: str = Field(..., description="Host sharing the installation media")
    media_folder: str = Field(..., description="Media folder on the remote host")
    use_local_copy: bool = Field(default=True, description="Mirror the media locally first")
    local_dest: str = Field(
        default=DEFAULT_LOCAL_MEDIA_PATH, description="Local directory for mirrored media"
    )
    min_free_space_gb: int = Field(
        default=DEFAULT_MIN_FREE_SPACE_GB, ge=1, description="Minimum free space on the system drive"
    )
    installer_args: str = Field(
        default=DEFAULT_INSTALLER_ARGS, description="Unattended installer arguments"
    )
    check_only: bool = Field(default=False, description="Stop after the compatibility checks")
    system_drive: str = Field(default_factory=default_system_drive, validate_default=True)
    log_dir: str = Field(default_factory=default_log_dir, validate_default=True)

    @field_validator("remote_host", "media_folder", "local_dest", "installer_args")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("system_drive")
    @classmethod
    def _drive_letter(cls, value: str) -> str:
        value = value.strip().rstrip("\\/")
        if len(value) != 2 or not value[0].isalpha() or value[1] != ":":
            raise ValueError(f"expected a drive such as 'C:', got {value!r}")
        return value.upper()


class RebootGateParameters(BaseModel):
    """Parameters of the reboot gate phase."""

    model_config = ConfigDict(frozen=True)

    delay_minutes: int = Field(
        default=DEFAULT_REBOOT_DELAY_MINUTES, ge=0, description="Countdown before the restart"
    )
    message: str = Field(
        default=DEFAULT_REBOOT_MESSAGE, description="Message shown to the signed-in user"
    )
    log_dir: str = Field(default_factory=default_log_dir, validate_default=True)

    @field_validator("message")
    @classmethod
    def _message_text(cls, value: str) -> str:
        return value.strip() or DEFAULT_REBOOT_MESSAGE
