"""
Structured progress events for the deployment tool.

Each event is one JSON object per line on stdout, carrying a sequence number
so the consumer can restore ordering. Human-readable logging goes to stderr
and the run log file, never to stdout.
"""

import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from loguru import logger

from os_upgrade.utils.json_utils import safe_json_serialize


class EventEmitter:
    """JSON line event emitter with sequence tracking."""

    def __init__(self, operation: str, stream=None):
        self.operation = operation
        self.stream = stream
        self._sequence = 0

    def emit(
        self,
        event_type: str,
        data: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
        level: str = "INFO",
    ) -> None:
        """Emit a structured JSON event; a broken stream never aborts the run."""
        self._sequence += 1
        event = {
            "event_type": event_type,
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "sequence": self._sequence,
        }
        if message:
            event["message"] = message
        if data is not None:
            event["data"] = safe_json_serialize(data)

        try:
            print(json.dumps(event), file=self.stream or sys.stdout, flush=True)
        except (OSError, ValueError) as e:
            logger.warning(f"⚠️ Could not emit {event_type} event: {e}")

    def operation_start(self, total_steps: int) -> None:
        self.emit(
            "OPERATION_START",
            data={"operation": self.operation, "total_steps": total_steps},
        )

    def step_complete(self, step: int, total_steps: int, message: str) -> None:
        """Emit a step completion event with progress calculation."""
        self.emit(
            "STEP_COMPLETE",
            data={
                "step": step,
                "total_steps": total_steps,
                "percentage": round((step / total_steps) * 100),
            },
            message=message,
        )

    def pre_check_complete(self, hostname: str, compatibility) -> None:
        """Emit the compatibility summary."""
        self.emit(
            "PRE_CHECK_COMPLETE",
            data={
                "device": hostname,
                "can_proceed": compatibility.passed,
                "reasons": compatibility.reasons,
                "blockers": [blocker.kind for blocker in compatibility.blockers],
            },
            message="Compatibility validation completed",
            level="SUCCESS" if compatibility.passed else "WARNING",
        )

    def operation_complete(
        self,
        success: bool,
        message: str,
        final_results: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.emit(
            "OPERATION_COMPLETE",
            data={
                "success": success,
                "status": "SUCCESS" if success else "FAILED",
                "operation": self.operation,
                "final_results": final_results,
            },
            message=message,
            level="SUCCESS" if success else "ERROR",
        )
