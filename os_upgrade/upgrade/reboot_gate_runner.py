"""
Reboot gate phase orchestration.

Probes the reboot signals, decides whether a reboot prompt is warranted and
schedules it when it is. This phase never reports failure: every internal
fault degrades to "no reboot", since a missed prompt costs far less than an
unwanted restart.
"""

from typing import Optional

from loguru import logger

from os_upgrade.config import RebootGateParameters
from os_upgrade.core.dataclasses import RebootGateResult
from os_upgrade.probes.signal_probe import SignalProbe
from os_upgrade.progress.event_sender import EventEmitter
from os_upgrade.validation.reboot_evaluator import RebootSignalEvaluator

from .reboot_scheduler import RebootScheduler


class RebootGateRunner:
    """Orchestrates one reboot gate run."""

    def __init__(
        self,
        params: RebootGateParameters,
        probe: Optional[SignalProbe] = None,
        evaluator: Optional[RebootSignalEvaluator] = None,
        scheduler: Optional[RebootScheduler] = None,
        emitter: Optional[EventEmitter] = None,
        log=None,
    ):
        self.params = params
        self.log = log or logger
        self.probe = probe or SignalProbe(log=self.log)
        self.evaluator = evaluator or RebootSignalEvaluator(log=self.log)
        self.scheduler = scheduler or RebootScheduler(log=self.log)
        self.emitter = emitter or EventEmitter("reboot_gate")

    def run(self) -> RebootGateResult:
        result = RebootGateResult(reboot_scheduled=False)
        try:
            result.signals = self.probe.probe_reboot_signals()
            result.decision = self.evaluator.evaluate(result.signals)
            if result.decision.should_schedule:
                self.log.info(f"Reboot required, triggered by {list(result.decision.triggers)}")
                result.reboot_scheduled = self.scheduler.schedule(
                    self.params.delay_minutes, self.params.message
                )
                if not result.reboot_scheduled:
                    result.warnings.append("Reboot scheduler did not accept the request")
            else:
                self.log.info("No upgrade activity detected, reboot not scheduled")
        except Exception as e:
            self.log.exception(f"Reboot gate failed, treating as no reboot: {e}")
            result.warnings.append(f"Reboot gate error: {e}")

        self.emitter.operation_complete(
            success=True,
            message="Reboot scheduled" if result.reboot_scheduled else "Reboot not scheduled",
            final_results={
                "reboot_scheduled": result.reboot_scheduled,
                "triggers": result.decision.triggers if result.decision else [],
                "warnings": result.warnings,
            },
        )
        return result
