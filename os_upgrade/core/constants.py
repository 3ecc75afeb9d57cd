"""
Application-wide constants and operational parameters.

Centralized thresholds, well-known host paths, registry keys and installer
settings shared by the upgrade and reboot gate phases.
"""

from typing import Final

# ==============================================================================
# COMPATIBILITY THRESHOLDS
# ==============================================================================

MINIMUM_RAM_GB: Final[int] = 4
DEFAULT_MIN_FREE_SPACE_GB: Final[int] = 64
REQUIRED_CPU_ADDRESS_WIDTH: Final[int] = 64
DEFAULT_SYSTEM_DRIVE: Final[str] = "C:"

# Marker used to recognise a host that is already on the target release
TARGET_OS_MARKER: Final[str] = "Windows 11"

# ==============================================================================
# MEDIA STAGING
# ==============================================================================

INSTALLER_ENTRY_POINT: Final[str] = "setup.exe"
DEFAULT_LOCAL_MEDIA_PATH: Final[str] = r"C:\Temp\Win11Media"

ROBOCOPY_EXECUTABLE: Final[str] = "robocopy.exe"
ROBOCOPY_FAILURE_THRESHOLD: Final[int] = 8  # codes below 8 are (partial) success
ROBOCOPY_RETRY_COUNT: Final[int] = 2
ROBOCOPY_RETRY_WAIT: Final[int] = 5  # seconds

# ==============================================================================
# INSTALLER
# ==============================================================================

DEFAULT_INSTALLER_ARGS: Final[str] = (
    "/auto upgrade /quiet /noreboot /dynamicupdate enable "
    "/eula accept /telemetry disable"
)

# Win32 ERROR_ALREADY_EXISTS, returned when stale setup artifacts block a new attempt
INSTALLER_COLLISION_EXIT_CODE: Final[int] = 183

# ==============================================================================
# HOST STATE MARKERS
# ==============================================================================

SETUP_PROCESS_NAMES: Final[tuple] = ("setuphost.exe", "setupprep.exe")

STAGING_MARKER_DIRS: Final[tuple] = (r"C:\$WINDOWS.~BT", r"C:\$Windows.~WS")

PENDING_REBOOT_REGISTRY_KEYS: Final[tuple] = (
    r"HKLM:\SOFTWARE\Microsoft\Windows\CurrentVersion\Component Based Servicing\RebootPending",
    r"HKLM:\SOFTWARE\Microsoft\Windows\CurrentVersion\WindowsUpdate\Auto Update\RebootRequired",
)
PENDING_FILE_RENAME_KEY: Final[str] = r"HKLM:\SYSTEM\CurrentControlSet\Control\Session Manager"
PENDING_FILE_RENAME_VALUE: Final[str] = "PendingFileRenameOperations"
PENDING_XML_PATH: Final[str] = r"C:\Windows\WinSxS\pending.xml"

# ==============================================================================
# POWERSHELL AND REBOOT SCHEDULING
# ==============================================================================

POWERSHELL_EXECUTABLE: Final[str] = "powershell.exe"
POWERSHELL_QUERY_TIMEOUT: Final[int] = 60  # seconds per probe query

SHUTDOWN_EXECUTABLE: Final[str] = "shutdown.exe"
DEFAULT_REBOOT_DELAY_MINUTES: Final[int] = 60
DEFAULT_REBOOT_MESSAGE: Final[str] = (
    "Your computer will restart to finish installing the Windows upgrade. "
    "Please save your work."
)

# ==============================================================================
# LOGGING
# ==============================================================================

DEFAULT_LOG_DIR: Final[str] = r"C:\ProgramData\OSUpgrade\Logs"
LOG_FILE_FORMAT: Final[str] = "{time:YYYY-MM-DD HH:mm:ss} [{extra[level_tag]}] {message}"
LOG_TIMESTAMP_FORMAT: Final[str] = "%Y%m%d_%H%M%S"
