"""
Upgrade phase entry point.

Validates upgrade eligibility, stages the installation media and launches
the OS installer unattended. Exit codes:

    0   upgrade started, host already upgraded, or setup already running
    10  host is not compatible
    20  installation media unavailable
    30  installer could not be launched or reported a failure
"""

import argparse
import sys
from typing import List, Optional

from loguru import logger
from pydantic import ValidationError

from os_upgrade.config import UpgradeParameters
from os_upgrade.core.constants import DEFAULT_INSTALLER_ARGS, DEFAULT_MIN_FREE_SPACE_GB
from os_upgrade.core.enums import UpgradeOutcome
from os_upgrade.upgrade.upgrade_runner import UpgradeRunner
from os_upgrade.utils.run_log import configure_console_logging, run_log_sink


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="os-upgrade",
        description="Validate, stage and launch an unattended OS upgrade on this host",
    )
    parser.add_argument("--remote-host", dest="remote_host", required=True)
    parser.add_argument(
        "--media-folder",
        dest="media_folder",
        required=True,
        help="Media folder on the remote host (local path or UNC path)",
    )
    parser.add_argument(
        "--local-copy",
        dest="use_local_copy",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Mirror the media to --local-dest before launching (default: on)",
    )
    parser.add_argument("--local-dest", dest="local_dest")
    parser.add_argument(
        "--min-free-gb",
        dest="min_free_space_gb",
        type=int,
        help=f"Minimum free space on the system drive (default: {DEFAULT_MIN_FREE_SPACE_GB})",
    )
    parser.add_argument(
        "--installer-args",
        dest="installer_args",
        help=f"Installer arguments (default: {DEFAULT_INSTALLER_ARGS})",
    )
    parser.add_argument(
        "--check-only",
        dest="check_only",
        action="store_true",
        default=None,
        help="Run the compatibility checks only",
    )
    parser.add_argument("--log-dir", dest="log_dir")
    parser.add_argument("--verbose", action="store_true")
    return parser


def parse_parameters(parser: argparse.ArgumentParser, argv: Optional[List[str]]) -> tuple:
    args = parser.parse_args(argv)
    values = {
        key: value
        for key, value in vars(args).items()
        if key != "verbose" and value is not None
    }
    try:
        return UpgradeParameters(**values), args.verbose
    except ValidationError as e:
        parser.error(str(e))


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    params, verbose = parse_parameters(parser, argv)
    configure_console_logging(verbose)

    with run_log_sink(params.log_dir, "upgrade") as log_path:
        log = logger.bind(phase="upgrade")
        log.info("========================================")
        log.info("OS UPGRADE PHASE STARTED")
        log.info(f"Remote host: {params.remote_host}")
        log.info(f"Media folder: {params.media_folder}")
        log.info(f"Local copy: {params.use_local_copy} -> {params.local_dest}")
        log.info(f"Minimum free space: {params.min_free_space_gb} GB")
        log.info(f"Check only: {params.check_only}")
        log.info(f"Run log: {log_path or 'unavailable'}")
        log.info("========================================")

        try:
            result = UpgradeRunner(params, log=log).run()
        except Exception as e:
            log.exception(f"Critical failure in upgrade phase: {e}")
            return UpgradeOutcome.LAUNCH_FAILED.exit_code

        log.info(f"Upgrade phase finished: {result.outcome.value} (exit {result.exit_code})")
        return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
