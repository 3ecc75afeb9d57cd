from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from os_upgrade import run_reboot_gate, run_upgrade
from os_upgrade.core.enums import UpgradeOutcome


def upgrade_args(tmp_path: Path, *extra: str) -> list[str]:
    return [
        "--remote-host",
        "srv01",
        "--media-folder",
        "D:\\Media\\Win11",
        "--log-dir",
        str(tmp_path),
        *extra,
    ]


class RecordingRunner:
    """Stands in for a phase runner and remembers the parameters it got."""

    received = None

    def __init__(self, params, log=None):
        type(self).received = params

    def run(self):
        return SimpleNamespace(
            outcome=UpgradeOutcome.INCOMPATIBLE,
            exit_code=10,
            reboot_scheduled=False,
        )


class ExplodingRunner:
    def __init__(self, params, log=None):
        pass

    def run(self):
        raise RuntimeError("unexpected")


def test_upgrade_exit_code_comes_from_runner(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(run_upgrade, "UpgradeRunner", RecordingRunner)
    assert run_upgrade.main(upgrade_args(tmp_path, "--no-local-copy", "--min-free-gb", "32")) == 10
    params = RecordingRunner.received
    assert params.use_local_copy is False
    assert params.min_free_space_gb == 32
    assert params.check_only is False


def test_upgrade_writes_run_log(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(run_upgrade, "UpgradeRunner", RecordingRunner)
    run_upgrade.main(upgrade_args(tmp_path))
    (log_file,) = tmp_path.glob("upgrade_*.log")
    assert "OS UPGRADE PHASE STARTED" in log_file.read_text(encoding="utf-8")


def test_unexpected_upgrade_error_exits_30(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(run_upgrade, "UpgradeRunner", ExplodingRunner)
    assert run_upgrade.main(upgrade_args(tmp_path)) == 30


@pytest.mark.parametrize(
    "argv",
    [
        ["--remote-host", "srv01"],
        ["--remote-host", "srv01", "--media-folder", "D:\\Media", "--min-free-gb", "0"],
        ["--remote-host", "", "--media-folder", "D:\\Media"],
    ],
)
def test_invalid_upgrade_arguments_exit_2(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        run_upgrade.main(argv)
    assert excinfo.value.code == 2


def test_reboot_gate_passes_parameters(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(run_reboot_gate, "RebootGateRunner", RecordingRunner)
    argv = ["--delay-minutes", "5", "--message", "Restart now", "--log-dir", str(tmp_path)]
    assert run_reboot_gate.main(argv) == 0
    assert RecordingRunner.received.delay_minutes == 5
    assert RecordingRunner.received.message == "Restart now"


def test_reboot_gate_always_exits_0(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(run_reboot_gate, "RebootGateRunner", ExplodingRunner)
    assert run_reboot_gate.main(["--log-dir", str(tmp_path)]) == 0


def test_reboot_gate_invalid_delay_falls_back_to_defaults(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(run_reboot_gate, "RebootGateRunner", RecordingRunner)
    assert run_reboot_gate.main(["--delay-minutes=-5", "--log-dir", str(tmp_path)]) == 0
    assert RecordingRunner.received.delay_minutes == 60
    assert RecordingRunner.received.log_dir == str(tmp_path)


def test_reboot_gate_unparsable_delay_keeps_other_values(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(run_reboot_gate, "RebootGateRunner", RecordingRunner)
    argv = ["--delay-minutes", "abc", "--message", "Restart now", "--log-dir", str(tmp_path)]
    assert run_reboot_gate.main(argv) == 0
    assert RecordingRunner.received.delay_minutes == 60
    assert RecordingRunner.received.message == "Restart now"
    assert RecordingRunner.received.log_dir == str(tmp_path)


def test_reboot_gate_missing_option_value_exits_0(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("OS_UPGRADE_LOG_DIR", str(tmp_path))
    monkeypatch.setattr(run_reboot_gate, "RebootGateRunner", RecordingRunner)
    assert run_reboot_gate.main(["--message", "Restart now", "--delay-minutes"]) == 0
    assert RecordingRunner.received.delay_minutes == 60
    assert RecordingRunner.received.log_dir == str(tmp_path)


def test_reboot_gate_ignores_unknown_arguments(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setattr(run_reboot_gate, "RebootGateRunner", RecordingRunner)
    assert run_reboot_gate.main(["--log-dir", str(tmp_path), "--force", "--delay-minutes", "5"]) == 0
    assert RecordingRunner.received.delay_minutes == 5
