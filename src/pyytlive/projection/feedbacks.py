"""Button feedbacks: broadcast phase and bound stream health colors."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from pyytlive.models.broadcast import Broadcast, BroadcastLifecycle, StreamHealth
from pyytlive.models.surface import (
    FeedbackDefinition,
    FeedbackEvent,
    FeedbackStyle,
    OptionField,
)
from pyytlive.projection._common import RgbFn, broadcast_option, resolve_broadcast
from pyytlive.state.memory import StateMemory

FEEDBACK_BROADCAST_STATUS = "broadcast_status"
FEEDBACK_STREAM_HEALTH = "broadcast_bound_stream_health"


def blink_phase(epoch_seconds: float) -> bool:
    """1 s square wave used to blink "starting" phases."""
    return math.floor(epoch_seconds) % 2 == 0


def _color(option_id: str, label: str, default: int) -> OptionField:
    return OptionField(type="colorpicker", id=option_id, label=label, default=default)


def list_feedbacks(
    broadcasts: Mapping[str, Broadcast],
    rgb: RgbFn,
    unfinished_cnt: int,
) -> list[FeedbackDefinition]:
    broadcast = broadcast_option(broadcasts, unfinished_cnt)
    return [
        FeedbackDefinition(
            id=FEEDBACK_BROADCAST_STATUS,
            label="Broadcast status",
            description="Change button colors with the broadcast lifecycle phase",
            options=[
                broadcast,
                _color("bg_ready", "Background color (ready)", rgb(209, 209, 0)),
                _color("bg_testing", "Background color (testing)", rgb(0, 172, 0)),
                _color("bg_live", "Background color (live)", rgb(222, 0, 0)),
                _color("bg_complete", "Background color (complete)", rgb(0, 0, 168)),
                _color("text", "Text color", rgb(255, 255, 255)),
            ],
        ),
        FeedbackDefinition(
            id=FEEDBACK_STREAM_HEALTH,
            label="Health of stream bound to broadcast",
            description="Change button colors with the health of the bound stream",
            options=[
                broadcast,
                _color("bg_good", "Background color (good)", rgb(0, 204, 0)),
                _color("bg_ok", "Background color (ok)", rgb(204, 204, 0)),
                _color("bg_bad", "Background color (bad)", rgb(255, 102, 0)),
                _color("bg_no_data", "Background color (no data)", rgb(255, 0, 0)),
                _color("text", "Text color", rgb(255, 255, 255)),
            ],
        ),
    ]


def _option(options: Mapping[str, Any], key: str, rgb: RgbFn, fallback: tuple[int, int, int]) -> int:
    value = options.get(key)
    if isinstance(value, int):
        return value
    return rgb(*fallback)


def _status_style(broadcast: Broadcast, options: Mapping[str, Any], rgb: RgbFn, blink: bool) -> FeedbackStyle:
    ready = _option(options, "bg_ready", rgb, (209, 209, 0))
    testing = _option(options, "bg_testing", rgb, (0, 172, 0))
    live = _option(options, "bg_live", rgb, (222, 0, 0))
    complete = _option(options, "bg_complete", rgb, (0, 0, 168))

    status = broadcast.status
    if status == BroadcastLifecycle.READY:
        bgcolor = ready
    elif status == BroadcastLifecycle.TEST_STARTING:
        bgcolor = testing if blink else ready
    elif status == BroadcastLifecycle.TESTING:
        bgcolor = testing
    elif status == BroadcastLifecycle.LIVE_STARTING:
        bgcolor = live if blink else testing
    elif status == BroadcastLifecycle.LIVE:
        bgcolor = live
    elif status == BroadcastLifecycle.COMPLETE:
        bgcolor = complete
    else:
        return {}
    return {"bgcolor": bgcolor, "color": _option(options, "text", rgb, (255, 255, 255))}


_HEALTH_OPTIONS: dict[StreamHealth, tuple[str, tuple[int, int, int]]] = {
    StreamHealth.GOOD: ("bg_good", (0, 204, 0)),
    StreamHealth.OK: ("bg_ok", (204, 204, 0)),
    StreamHealth.BAD: ("bg_bad", (255, 102, 0)),
    StreamHealth.NO_DATA: ("bg_no_data", (255, 0, 0)),
}


def _health_style(broadcast: Broadcast, options: Mapping[str, Any], rgb: RgbFn) -> FeedbackStyle:
    entry = _HEALTH_OPTIONS.get(broadcast.stream_health) if broadcast.stream_health else None
    if entry is None:
        return {}
    key, fallback = entry
    return {
        "bgcolor": _option(options, key, rgb, fallback),
        "color": _option(options, "text", rgb, (255, 255, 255)),
    }


def handle_feedback(
    event: FeedbackEvent,
    memory: StateMemory,
    rgb: RgbFn,
    blink: bool,
) -> FeedbackStyle:
    """Compute the style for one feedback; ``{}`` leaves the button unchanged."""
    broadcast = resolve_broadcast(memory, event.options.get("broadcast"))
    if broadcast is None:
        return {}
    if event.type == FEEDBACK_BROADCAST_STATUS:
        return _status_style(broadcast, event.options, rgb, blink)
    if event.type == FEEDBACK_STREAM_HEALTH:
        return _health_style(broadcast, event.options, rgb)
    return {}
