"""
Reboot gate entry point.

Schedules a reboot prompt only when there is evidence of upgrade activity on
this host. Always exits 0: the phase is advisory and skipping the prompt is
the safe default. Arguments that cannot be parsed or validated fall back to
their defaults instead of failing the run.
"""

import argparse
import sys
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import ValidationError

from os_upgrade.config import RebootGateParameters
from os_upgrade.core.constants import DEFAULT_REBOOT_DELAY_MINUTES
from os_upgrade.core.enums import RebootGateOutcome
from os_upgrade.core.exceptions import ConfigurationError
from os_upgrade.upgrade.reboot_gate_runner import RebootGateRunner
from os_upgrade.utils.run_log import configure_console_logging, run_log_sink


class AdvisoryArgumentParser(argparse.ArgumentParser):
    """Argument parser that raises ConfigurationError instead of exiting."""

    def error(self, message: str):
        raise ConfigurationError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = AdvisoryArgumentParser(
        prog="os-upgrade-reboot-gate",
        description="Schedule a reboot prompt when an OS upgrade is pending on this host",
    )
    # Values stay strings here; RebootGateParameters converts and range-checks them
    parser.add_argument(
        "--delay-minutes",
        dest="delay_minutes",
        help=f"Countdown before the restart (default: {DEFAULT_REBOOT_DELAY_MINUTES})",
    )
    parser.add_argument("--message", dest="message", help="Message shown to the user")
    parser.add_argument("--log-dir", dest="log_dir")
    parser.add_argument("--verbose", action="store_true")
    return parser


def parse_arguments(argv: Optional[List[str]]) -> argparse.Namespace:
    try:
        args, unknown = build_parser().parse_known_args(argv)
    except ConfigurationError as e:
        logger.warning(f"⚠️ Could not parse arguments, using defaults: {e.message}")
        return argparse.Namespace(verbose=False)
    if unknown:
        logger.warning(f"⚠️ Ignoring unrecognised arguments: {unknown}")
    return args


def resolve_parameters(values: Dict[str, Any]) -> RebootGateParameters:
    """Validate parameters, replacing only the rejected ones with defaults."""
    try:
        return RebootGateParameters(**values)
    except ValidationError as e:
        rejected = {str(error["loc"][0]) for error in e.errors() if error["loc"]}
        logger.warning(f"⚠️ Invalid parameter(s) {sorted(rejected)}, using defaults: {e}")
        return RebootGateParameters(
            **{key: value for key, value in values.items() if key not in rejected}
        )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    configure_console_logging(args.verbose)

    params = resolve_parameters(
        {
            key: value
            for key, value in vars(args).items()
            if key != "verbose" and value is not None
        }
    )

    with run_log_sink(params.log_dir, "reboot_gate") as log_path:
        log = logger.bind(phase="reboot_gate")
        log.info("========================================")
        log.info("REBOOT GATE PHASE STARTED")
        log.info(f"Delay: {params.delay_minutes} minute(s)")
        log.info(f"Run log: {log_path or 'unavailable'}")
        log.info("========================================")

        try:
            result = RebootGateRunner(params, log=log).run()
            log.info(f"Reboot gate finished: reboot_scheduled={result.reboot_scheduled}")
        except Exception as e:
            log.exception(f"Reboot gate failed: {e}")
    return RebootGateOutcome.COMPLETED.exit_code


if __name__ == "__main__":
    sys.exit(main())
