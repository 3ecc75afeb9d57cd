from __future__ import annotations

from dataclasses import replace
from types import SimpleNamespace

import pytest

from os_upgrade.core.dataclasses import HostSignals, ProbeResult
from os_upgrade.core.enums import FirmwareType


def compatible_signals(**overrides) -> HostSignals:
    """Signals of a Windows 10 host that passes every compatibility check."""
    signals = HostSignals(
        os_caption=ProbeResult.ok("Microsoft Windows 10 Pro"),
        os_build_number=ProbeResult.ok("19045"),
        is_setup_running=ProbeResult.ok(False),
        tpm_present=ProbeResult.ok(True),
        tpm_ready=ProbeResult.ok(True),
        secure_boot_enabled=ProbeResult.ok(True),
        firmware_type=ProbeResult.ok(FirmwareType.UEFI),
        cpu_address_width=ProbeResult.ok(64),
        ram_gb=ProbeResult.ok(15.8),
        free_disk_gb=ProbeResult.ok(180.2),
        system_drive="C:",
    )
    return replace(signals, **overrides)


class FakeRunner:
    """PowerShell runner answering queries by substring match."""

    def __init__(self, answers: dict):
        self.answers = answers
        self.calls: list[str] = []

    def run_json(self, script: str):
        self.calls.append(script)
        for needle, answer in self.answers.items():
            if needle in script:
                if isinstance(answer, Exception):
                    raise answer
                return answer
        raise AssertionError(f"unexpected query: {script}")


def fake_psutil(
    *,
    process_names=("explorer.exe",),
    total_bytes=16 * 1024**3,
    free_bytes=120 * 1024**3,
    disk_error: Exception | None = None,
) -> SimpleNamespace:
    def process_iter(attrs):
        return [SimpleNamespace(info={"name": name}) for name in process_names]

    def disk_usage(path):
        if disk_error is not None:
            raise disk_error
        return SimpleNamespace(free=free_bytes)

    return SimpleNamespace(
        process_iter=process_iter,
        virtual_memory=lambda: SimpleNamespace(total=total_bytes),
        disk_usage=disk_usage,
    )


@pytest.fixture
def healthy_runner() -> FakeRunner:
    return FakeRunner(
        {
            "Win32_OperatingSystem": {"Caption": "Microsoft Windows 10 Pro", "BuildNumber": "19045"},
            "Get-Tpm": {"TpmPresent": True, "TpmReady": True},
            "Confirm-SecureBootUEFI": True,
            "firmware_type": "UEFI",
            "Win32_Processor": 64,
            "RebootPending": False,
        }
    )
