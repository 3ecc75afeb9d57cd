from __future__ import annotations

import pytest

from conftest import FakeRunner, fake_psutil
from os_upgrade.core.enums import FirmwareType
from os_upgrade.core.exceptions import ProbeFailure
from os_upgrade.probes import signal_probe
from os_upgrade.probes.signal_probe import SignalProbe, is_target_os


@pytest.fixture(autouse=True)
def default_psutil(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(signal_probe, "psutil", fake_psutil())


def make_probe(runner, markers=(), **kwargs) -> SignalProbe:
    return SignalProbe(runner=runner, staging_marker_dirs=markers, hostname="PC01", **kwargs)


def test_host_signals_from_healthy_host(healthy_runner: FakeRunner) -> None:
    signals = make_probe(healthy_runner).probe_host_signals()
    assert signals.os_caption.value == "Microsoft Windows 10 Pro"
    assert signals.os_build_number.value == "19045"
    assert signals.tpm_present.value is True
    assert signals.tpm_ready.value is True
    assert signals.secure_boot_enabled.value is True
    assert signals.firmware_type.value == FirmwareType.UEFI
    assert signals.cpu_address_width.value == 64
    assert signals.ram_gb.value == pytest.approx(16.0)
    assert signals.free_disk_gb.value == pytest.approx(120.0)
    assert signals.is_setup_running.value is False
    assert signals.unknown_facts() == []


def test_secure_boot_failure_does_not_affect_other_facts(healthy_runner: FakeRunner) -> None:
    healthy_runner.answers["Confirm-SecureBootUEFI"] = ProbeFailure(
        "Cmdlet not supported on this platform"
    )
    signals = make_probe(healthy_runner).probe_host_signals()
    assert signals.secure_boot_enabled.known is False
    assert "not supported" in signals.secure_boot_enabled.error
    assert signals.tpm_present.value is True
    assert signals.firmware_type.value == FirmwareType.UEFI
    assert [name for name, _ in signals.unknown_facts()] == ["secure_boot_enabled"]


def test_tpm_query_failure_marks_both_tpm_facts_unknown(healthy_runner: FakeRunner) -> None:
    healthy_runner.answers["Get-Tpm"] = ProbeFailure("access denied")
    signals = make_probe(healthy_runner).probe_host_signals()
    assert signals.tpm_present.known is False
    assert signals.tpm_ready.known is False
    assert signals.cpu_address_width.value == 64


def test_non_boolean_tpm_answer_is_unknown(healthy_runner: FakeRunner) -> None:
    healthy_runner.answers["Get-Tpm"] = {"TpmPresent": "yes", "TpmReady": True}
    present, ready = make_probe(healthy_runner).probe_tpm()
    assert present.known is False
    assert ready.value is True


def test_disk_failure_is_isolated(monkeypatch: pytest.MonkeyPatch, healthy_runner: FakeRunner) -> None:
    monkeypatch.setattr(
        signal_probe, "psutil", fake_psutil(disk_error=PermissionError("denied"))
    )
    signals = make_probe(healthy_runner).probe_host_signals()
    assert signals.free_disk_gb.known is False
    assert signals.ram_gb.known is True


def test_firmware_type_parsing(healthy_runner: FakeRunner) -> None:
    healthy_runner.answers["firmware_type"] = "Legacy"
    assert make_probe(healthy_runner).probe_firmware_type().value == FirmwareType.LEGACY


def test_setup_process_detection(monkeypatch: pytest.MonkeyPatch, healthy_runner: FakeRunner) -> None:
    monkeypatch.setattr(
        signal_probe, "psutil", fake_psutil(process_names=("explorer.exe", "SetupHost.exe", None))
    )
    assert make_probe(healthy_runner).probe_setup_running().value is True


def test_reboot_signals_skip_pending_query_without_staging(tmp_path, healthy_runner: FakeRunner) -> None:
    healthy_runner.answers["RebootPending"] = True
    signals = make_probe(healthy_runner, markers=[str(tmp_path / "missing")]).probe_reboot_signals()
    assert signals.is_staged is False
    assert signals.raw_pending_reboot is False
    assert not any("RebootPending" in call for call in healthy_runner.calls)


def test_reboot_signals_with_staging_and_pending_reboot(tmp_path, healthy_runner: FakeRunner) -> None:
    marker = tmp_path / "$WINDOWS.~BT"
    marker.mkdir()
    healthy_runner.answers["RebootPending"] = True
    signals = make_probe(healthy_runner, markers=[str(marker)]).probe_reboot_signals()
    assert signals.is_staged is True
    assert signals.raw_pending_reboot is True
    assert signals.is_pending_reboot is True
    assert signals.is_windows11 is False


def test_reboot_signals_degrade_to_false_on_failures(tmp_path) -> None:
    marker = tmp_path / "$Windows.~WS"
    marker.mkdir()
    runner = FakeRunner(
        {
            "Win32_OperatingSystem": ProbeFailure("WMI repository corrupt"),
            "RebootPending": ProbeFailure("registry unavailable"),
        }
    )
    signals = make_probe(runner, markers=[str(marker)]).probe_reboot_signals()
    assert signals.is_windows11 is False
    assert signals.is_staged is True
    assert signals.raw_pending_reboot is False


def test_windows11_host_is_detected(healthy_runner: FakeRunner) -> None:
    healthy_runner.answers["Win32_OperatingSystem"] = {
        "Caption": "Microsoft Windows 11 Enterprise",
        "BuildNumber": "22631",
    }
    assert make_probe(healthy_runner).probe_reboot_signals().is_windows11 is True


@pytest.mark.parametrize(
    ("caption", "expected"),
    [
        ("Microsoft Windows 11 Pro", True),
        ("microsoft windows 11 education", True),
        ("Microsoft Windows 10 Pro", False),
        ("", False),
        (None, False),
    ],
)
def test_is_target_os(caption, expected: bool) -> None:
    assert is_target_os(caption) is expected
