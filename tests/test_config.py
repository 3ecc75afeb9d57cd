from __future__ import annotations

import pytest
from pydantic import ValidationError

from os_upgrade.config import RebootGateParameters, UpgradeParameters
from os_upgrade.core.constants import (
    DEFAULT_INSTALLER_ARGS,
    DEFAULT_LOG_DIR,
    DEFAULT_REBOOT_MESSAGE,
)


def test_upgrade_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OS_UPGRADE_LOG_DIR", raising=False)
    monkeypatch.delenv("OS_UPGRADE_SYSTEM_DRIVE", raising=False)
    params = UpgradeParameters(remote_host="srv01", media_folder="D:\\Media")
    assert params.use_local_copy is True
    assert params.min_free_space_gb == 64
    assert params.installer_args == DEFAULT_INSTALLER_ARGS
    assert params.check_only is False
    assert params.system_drive == "C:"
    assert params.log_dir == DEFAULT_LOG_DIR


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OS_UPGRADE_LOG_DIR", "D:\\Logs")
    monkeypatch.setenv("OS_UPGRADE_SYSTEM_DRIVE", "d:\\")
    params = UpgradeParameters(remote_host="srv01", media_folder="D:\\Media")
    assert params.log_dir == "D:\\Logs"
    assert params.system_drive == "D:"


@pytest.mark.parametrize(
    "overrides",
    [
        {"remote_host": "   "},
        {"media_folder": ""},
        {"min_free_space_gb": 0},
        {"system_drive": "C"},
        {"system_drive": "12"},
    ],
)
def test_invalid_upgrade_parameters(overrides: dict) -> None:
    values = {"remote_host": "srv01", "media_folder": "D:\\Media", **overrides}
    with pytest.raises(ValidationError):
        UpgradeParameters(**values)


def test_values_are_trimmed() -> None:
    params = UpgradeParameters(remote_host=" srv01 ", media_folder=" D:\\Media ")
    assert params.remote_host == "srv01"
    assert params.media_folder == "D:\\Media"


def test_parameters_are_immutable() -> None:
    params = UpgradeParameters(remote_host="srv01", media_folder="D:\\Media")
    with pytest.raises(ValidationError):
        params.remote_host = "other"


def test_reboot_gate_defaults_and_blank_message() -> None:
    assert RebootGateParameters().delay_minutes == 60
    assert RebootGateParameters(message="  ").message == DEFAULT_REBOOT_MESSAGE


def test_negative_delay_is_rejected() -> None:
    with pytest.raises(ValidationError):
        RebootGateParameters(delay_minutes=-1)


def test_invalid_system_drive_from_environment_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OS_UPGRADE_SYSTEM_DRIVE", "C")
    with pytest.raises(ValidationError, match="system_drive"):
        UpgradeParameters(remote_host="srv01", media_folder="D:\\Media")
