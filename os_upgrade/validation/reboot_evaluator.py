"""
Reboot gate decision.

Decides from the reboot signal set whether a reboot prompt should be
scheduled. The decision is a pure function of its inputs.
"""

from loguru import logger

from os_upgrade.core.dataclasses import RebootDecision, RebootSignals


class RebootSignalEvaluator:
    """
    Schedule a reboot when any upgrade-related signal is present.

    The last disjunct only consults the pending-reboot indicator together
    with staging. It never changes the outcome while staging alone is
    sufficient, but the pending-reboot signal must stay conditional so an
    unrelated patch reboot flag cannot trigger a prompt on its own.
    """

    def __init__(self, log=None):
        self.log = log or logger

    def evaluate(self, signals: RebootSignals) -> RebootDecision:
        triggers = []
        if signals.is_windows11:
            triggers.append("is_windows11")
        if signals.is_setup_running:
            triggers.append("is_setup_running")
        if signals.is_staged:
            triggers.append("is_staged")
        if signals.is_staged and signals.is_pending_reboot:
            triggers.append("is_pending_reboot")

        decision = RebootDecision(should_schedule=bool(triggers), triggers=tuple(triggers))
        self.log.info(
            f"Reboot signals: windows11={signals.is_windows11}, "
            f"setup_running={signals.is_setup_running}, staged={signals.is_staged}, "
            f"pending_reboot={signals.is_pending_reboot} -> schedule={decision.should_schedule}"
        )
        return decision
