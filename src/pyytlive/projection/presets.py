"""Ready-made buttons offered to the user."""

from __future__ import annotations

from collections.abc import Mapping

from pyytlive._constants import UNFINISHED_SLOT_PREFIX, VARIABLE_NAMESPACE
from pyytlive.models.broadcast import Broadcast
from pyytlive.models.surface import ButtonStyle, PresetAction, PresetDefinition, PresetFeedback
from pyytlive.projection._common import RgbFn
from pyytlive.projection.actions import ACTION_FINISH, ACTION_GO_LIVE, ACTION_START_TEST, ACTION_TOGGLE
from pyytlive.projection.feedbacks import FEEDBACK_BROADCAST_STATUS, FEEDBACK_STREAM_HEALTH


def _var(name: str) -> str:
    return f"$({VARIABLE_NAMESPACE}:{name})"


def _button(
    category: str,
    label: str,
    text: str,
    rgb: RgbFn,
    action: str | None,
    feedback: str,
    ref: str,
) -> PresetDefinition:
    options = {"broadcast": ref}
    return PresetDefinition(
        category=category,
        label=label,
        bank=ButtonStyle(text=text, size="auto", color=rgb(255, 255, 255), bgcolor=rgb(0, 0, 0)),
        actions=[PresetAction(action=action, options=options)] if action else [],
        feedbacks=[PresetFeedback(type=feedback, options=options)],
    )


def _broadcast_presets(broadcast: Broadcast, rgb: RgbFn) -> list[PresetDefinition]:
    category = broadcast.name or broadcast.id
    state = _var(f"broadcast_{broadcast.id}_lifecycle")
    return [
        _button(category, "Start test", f"Start test\\n{state}", rgb, ACTION_START_TEST, FEEDBACK_BROADCAST_STATUS, broadcast.id),
        _button(category, "Go live", f"Go live\\n{state}", rgb, ACTION_GO_LIVE, FEEDBACK_BROADCAST_STATUS, broadcast.id),
        _button(category, "Finish", f"Finish\\n{state}", rgb, ACTION_FINISH, FEEDBACK_BROADCAST_STATUS, broadcast.id),
        _button(
            category,
            "Stream health",
            f"Stream\\n{_var(f'broadcast_{broadcast.id}_health')}",
            rgb,
            None,
            FEEDBACK_STREAM_HEALTH,
            broadcast.id,
        ),
    ]


def _unfinished_presets(index: int, rgb: RgbFn) -> list[PresetDefinition]:
    category = "Unfinished broadcasts"
    ref = f"{UNFINISHED_SLOT_PREFIX}{index}"
    slot = index + 1
    return [
        _button(
            category,
            f"Toggle unfinished #{slot}",
            f"{_var(f'unfinished_{index}')}\\n{_var(f'unfinished_short_{index}')}",
            rgb,
            ACTION_TOGGLE,
            FEEDBACK_BROADCAST_STATUS,
            ref,
        ),
        _button(
            category,
            f"Stream health #{slot}",
            f"Stream #{slot}\\n{_var(f'unfinished_health_{index}')}",
            rgb,
            None,
            FEEDBACK_STREAM_HEALTH,
            ref,
        ),
    ]


def list_presets(
    broadcasts: Mapping[str, Broadcast],
    rgb: RgbFn,
    unfinished_cnt: int,
) -> list[PresetDefinition]:
    presets: list[PresetDefinition] = []
    for broadcast in broadcasts.values():
        presets.extend(_broadcast_presets(broadcast, rgb))
    for i in range(unfinished_cnt):
        presets.extend(_unfinished_presets(i, rgb))
    return presets
