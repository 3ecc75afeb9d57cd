"""
Host signal probing for the upgrade and reboot gate phases.

Reads raw host state (CIM classes, TPM and Secure Boot cmdlets, registry
keys, the process table, filesystem markers) into typed ProbeResult values.
Every fact is fetched independently: a failure reading one fact is logged
as a warning and recorded as unknown, and never prevents the others from
being read.
"""

import socket
from pathlib import Path
from typing import Callable, Iterable, Optional, Tuple, TypeVar

import psutil
from loguru import logger

from os_upgrade.core.constants import (
    DEFAULT_SYSTEM_DRIVE,
    PENDING_FILE_RENAME_KEY,
    PENDING_FILE_RENAME_VALUE,
    PENDING_REBOOT_REGISTRY_KEYS,
    PENDING_XML_PATH,
    SETUP_PROCESS_NAMES,
    STAGING_MARKER_DIRS,
    TARGET_OS_MARKER,
)
from os_upgrade.core.dataclasses import HostSignals, ProbeResult, RebootSignals
from os_upgrade.core.enums import FirmwareType
from os_upgrade.core.exceptions import ProbeFailure

from .powershell import PowerShellRunner

T = TypeVar("T")

BYTES_PER_GB = 1024 ** 3


# =============================================================================
# SECTION 1: HELPERS
# =============================================================================


def is_target_os(caption: Optional[str]) -> bool:
    """Return True when an OS caption names the upgrade target release."""
    if not caption:
        return False
    return TARGET_OS_MARKER.lower() in caption.lower()


def _ps_quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def _pending_reboot_script() -> str:
    key_list = ", ".join(_ps_quote(key) for key in PENDING_REBOOT_REGISTRY_KEYS)
    return (
        "& { $pending = $false; "
        f"foreach ($key in @({key_list})) {{ if (Test-Path -LiteralPath $key) {{ $pending = $true }} }}; "
        f"$rename = Get-ItemProperty -LiteralPath {_ps_quote(PENDING_FILE_RENAME_KEY)} "
        f"-Name {PENDING_FILE_RENAME_VALUE} -ErrorAction SilentlyContinue; "
        "if ($rename) { $pending = $true }; "
        f"if (Test-Path -LiteralPath {_ps_quote(PENDING_XML_PATH)}) {{ $pending = $true }}; "
        "$pending }"
    )


def _expect_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    raise ProbeFailure(f"Expected a boolean, got {value!r}")


# =============================================================================
# SECTION 2: SIGNAL PROBE
# =============================================================================


class SignalProbe:
    """
    Read-only view of the host state the orchestrator decides on.

    Collaborators are injectable so the probe can be exercised off-host:
    the PowerShell runner answers CIM/registry/cmdlet queries, psutil
    answers memory, disk and process questions, and staging markers are
    plain directory paths.
    """

    def __init__(
        self,
        runner: Optional[PowerShellRunner] = None,
        system_drive: str = DEFAULT_SYSTEM_DRIVE,
        staging_marker_dirs: Iterable[str] = STAGING_MARKER_DIRS,
        setup_process_names: Iterable[str] = SETUP_PROCESS_NAMES,
        hostname: Optional[str] = None,
        log=None,
    ):
        self.log = log or logger
        self.runner = runner or PowerShellRunner(log=self.log)
        self.system_drive = system_drive.rstrip("\\/")
        self.staging_marker_dirs = tuple(staging_marker_dirs)
        self.setup_process_names = {name.lower() for name in setup_process_names}
        self.hostname = hostname or socket.gethostname()

    # =========================================================================
    # SUBSECTION 2.1: ISOLATION WRAPPER
    # =========================================================================

    def _capture(self, fact: str, query: Callable[[], T]) -> ProbeResult[T]:
        try:
            value = query()
        except Exception as e:
            self.log.warning(f"[{self.hostname}] ⚠️ Could not read {fact}: {e}")
            return ProbeResult.unknown(str(e))
        self.log.debug(f"[{self.hostname}] {fact}: {value!r}")
        return ProbeResult.ok(value)

    # =========================================================================
    # SUBSECTION 2.2: INDIVIDUAL FACTS
    # =========================================================================

    def probe_os(self) -> Tuple[ProbeResult[str], ProbeResult[str]]:
        """Return (caption, build number) of the running OS."""
        info = self._capture(
            "OS information",
            lambda: self.runner.run_json(
                "Get-CimInstance -ClassName Win32_OperatingSystem "
                "| Select-Object Caption, BuildNumber"
            ),
        )
        if not info.known:
            return ProbeResult.unknown(info.error), ProbeResult.unknown(info.error)
        caption = self._capture("OS caption", lambda: str(info.value["Caption"]).strip())
        build = self._capture("OS build number", lambda: str(info.value["BuildNumber"]).strip())
        return caption, build

    def probe_setup_running(self) -> ProbeResult[bool]:
        def query() -> bool:
            for process in psutil.process_iter(["name"]):
                name = (process.info.get("name") or "").lower()
                if name in self.setup_process_names:
                    return True
            return False

        return self._capture("setup process state", query)

    def probe_tpm(self) -> Tuple[ProbeResult[bool], ProbeResult[bool]]:
        """Return (present, ready) for the TPM."""
        info = self._capture(
            "TPM status",
            lambda: self.runner.run_json("Get-Tpm | Select-Object TpmPresent, TpmReady"),
        )
        if not info.known:
            return ProbeResult.unknown(info.error), ProbeResult.unknown(info.error)
        present = self._capture("TPM presence", lambda: _expect_bool(info.value["TpmPresent"]))
        ready = self._capture("TPM readiness", lambda: _expect_bool(info.value["TpmReady"]))
        return present, ready

    def probe_secure_boot(self) -> ProbeResult[bool]:
        return self._capture(
            "Secure Boot state",
            lambda: _expect_bool(self.runner.run_json("Confirm-SecureBootUEFI")),
        )

    def probe_firmware_type(self) -> ProbeResult[FirmwareType]:
        return self._capture(
            "firmware type",
            lambda: FirmwareType.parse(str(self.runner.run_json("$env:firmware_type"))),
        )

    def probe_cpu_address_width(self) -> ProbeResult[int]:
        return self._capture(
            "CPU address width",
            lambda: int(
                self.runner.run_json(
                    "(Get-CimInstance -ClassName Win32_Processor "
                    "| Select-Object -First 1).AddressWidth"
                )
            ),
        )

    def probe_ram_gb(self) -> ProbeResult[float]:
        return self._capture(
            "physical memory",
            lambda: psutil.virtual_memory().total / BYTES_PER_GB,
        )

    def probe_free_disk_gb(self) -> ProbeResult[float]:
        return self._capture(
            f"free space on {self.system_drive}",
            lambda: psutil.disk_usage(self.system_drive + "\\").free / BYTES_PER_GB,
        )

    def probe_staging_markers(self) -> ProbeResult[bool]:
        return self._capture(
            "staging markers",
            lambda: any(Path(marker).is_dir() for marker in self.staging_marker_dirs),
        )

    def probe_pending_reboot(self) -> ProbeResult[bool]:
        return self._capture(
            "pending reboot indicators",
            lambda: _expect_bool(self.runner.run_json(_pending_reboot_script())),
        )

    # =========================================================================
    # SUBSECTION 2.3: SIGNAL SETS
    # =========================================================================

    def probe_host_signals(self) -> HostSignals:
        """Collect every fact the upgrade phase needs."""
        self.log.info(f"[{self.hostname}] 🔍 Probing host signals")
        caption, build = self.probe_os()
        tpm_present, tpm_ready = self.probe_tpm()
        signals = HostSignals(
            os_caption=caption,
            os_build_number=build,
            is_setup_running=self.probe_setup_running(),
            tpm_present=tpm_present,
            tpm_ready=tpm_ready,
            secure_boot_enabled=self.probe_secure_boot(),
            firmware_type=self.probe_firmware_type(),
            cpu_address_width=self.probe_cpu_address_width(),
            ram_gb=self.probe_ram_gb(),
            free_disk_gb=self.probe_free_disk_gb(),
            system_drive=self.system_drive,
        )
        unknown = signals.unknown_facts()
        if unknown:
            self.log.warning(
                f"[{self.hostname}] ⚠️ {len(unknown)} host fact(s) could not be read: "
                f"{[name for name, _ in unknown]}"
            )
        return signals

    def probe_reboot_signals(self) -> RebootSignals:
        """
        Collect the reboot gate signals.

        Failed reads degrade to False. The pending-reboot indicator is only
        queried when a staging marker exists.
        """
        self.log.info(f"[{self.hostname}] 🔍 Probing reboot signals")
        caption, _ = self.probe_os()
        is_staged = self.probe_staging_markers().value_or(False)

        raw_pending_reboot = False
        if is_staged:
            raw_pending_reboot = self.probe_pending_reboot().value_or(False)
        else:
            self.log.debug(
                f"[{self.hostname}] No staging marker, pending reboot indicators not consulted"
            )

        return RebootSignals(
            is_windows11=is_target_os(caption.value_or(None)),
            is_setup_running=self.probe_setup_running().value_or(False),
            is_staged=is_staged,
            raw_pending_reboot=raw_pending_reboot,
        )
