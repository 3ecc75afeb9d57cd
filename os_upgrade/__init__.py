"""
Unattended OS upgrade orchestration for managed endpoints.

Two independent, stateless phases:

- ``os_upgrade.run_upgrade``: compatibility checks, media staging and an
  unattended installer launch.
- ``os_upgrade.run_reboot_gate``: schedules a reboot prompt only when the
  host shows evidence of upgrade activity.
"""

__version__ = "1.0.0"
