from __future__ import annotations

import io
import json

from os_upgrade.core.dataclasses import Blocker, CompatibilityResult
from os_upgrade.core.enums import BlockerKind, UpgradeOutcome
from os_upgrade.progress.event_sender import EventEmitter


def read_events(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_events_are_json_lines_with_sequence() -> None:
    stream = io.StringIO()
    emitter = EventEmitter("upgrade", stream=stream)
    emitter.operation_start(5)
    emitter.step_complete(2, 5, "Host requires the upgrade")

    start, step = read_events(stream)
    assert start["event_type"] == "OPERATION_START"
    assert start["data"] == {"operation": "upgrade", "total_steps": 5}
    assert start["timestamp"].endswith("Z")
    assert (start["sequence"], step["sequence"]) == (1, 2)
    assert step["data"]["percentage"] == 40
    assert step["message"] == "Host requires the upgrade"


def test_pre_check_summary_lists_blocker_kinds() -> None:
    stream = io.StringIO()
    compatibility = CompatibilityResult(
        blockers=(Blocker(BlockerKind.SECURE_BOOT_DISABLED, "Secure Boot disabled"),)
    )
    EventEmitter("upgrade", stream=stream).pre_check_complete("PC01", compatibility)

    (event,) = read_events(stream)
    assert event["level"] == "WARNING"
    assert event["data"] == {
        "device": "PC01",
        "can_proceed": False,
        "reasons": ["Secure Boot disabled"],
        "blockers": ["secure_boot_disabled"],
    }


def test_operation_complete_serializes_enums() -> None:
    stream = io.StringIO()
    EventEmitter("upgrade", stream=stream).operation_complete(
        success=False,
        message="Media unavailable",
        final_results={"outcome": UpgradeOutcome.MEDIA_UNAVAILABLE, "exit_code": 20},
    )
    (event,) = read_events(stream)
    assert event["level"] == "ERROR"
    assert event["data"]["status"] == "FAILED"
    assert event["data"]["final_results"] == {"outcome": "media_unavailable", "exit_code": 20}


def test_closed_stream_does_not_raise() -> None:
    stream = io.StringIO()
    stream.close()
    EventEmitter("upgrade", stream=stream).operation_start(5)
