from __future__ import annotations

import pytest
from _fakes import RecordingHost, make_broadcast

from pyytlive.host import combine_rgb
from pyytlive.models.broadcast import BroadcastLifecycle, StreamHealth
from pyytlive.models.surface import FeedbackEvent
from pyytlive.projection import engine
from pyytlive.projection._common import resolve_broadcast
from pyytlive.projection.feedbacks import (
    FEEDBACK_BROADCAST_STATUS,
    FEEDBACK_STREAM_HEALTH,
    blink_phase,
    handle_feedback,
    list_feedbacks,
)
from pyytlive.projection.presets import list_presets
from pyytlive.projection.vars import declare_vars, export_vars, health_text
from pyytlive.state.memory import StateMemory

# ------------------------------------------------------------------
# Variables
# ------------------------------------------------------------------


def test_declared_and_exported_variable_names_match() -> None:
    memory = StateMemory.from_broadcasts([make_broadcast("B1"), make_broadcast("B2", BroadcastLifecycle.COMPLETE)])

    declared = {d.name for d in declare_vars(memory, 2)}
    exported = export_vars(memory, 2)

    assert declared == set(exported)
    assert exported["unfinished_0"] == "Show B1"
    assert exported["unfinished_1"] == ""
    assert exported["broadcast_B2_lifecycle"] == "Finished"


def test_health_text_without_bound_stream() -> None:
    assert health_text(None) == "n/a"
    assert health_text(StreamHealth.NO_DATA) == "No data"


# ------------------------------------------------------------------
# Engine
# ------------------------------------------------------------------


def test_reload_all_publishes_every_artifact(host: RecordingHost) -> None:
    memory = StateMemory.from_broadcasts([make_broadcast("B1")])

    engine.reload_all(host, memory, 1)

    assert host.names() == [
        "variable_definitions",
        "variable_values",
        "preset_definitions",
        "feedback_definitions",
        "action_definitions",
        "check_feedbacks",
    ]


def test_reload_states_pushes_values_only(host: RecordingHost) -> None:
    memory = StateMemory.from_broadcasts([make_broadcast("B1")])

    engine.reload_states(host, memory, 1)

    assert host.names() == ["variable_values", "check_feedbacks"]
    assert host.last("check_feedbacks") == ()


def test_reload_broadcast_uses_current_slot(host: RecordingHost) -> None:
    memory = StateMemory.from_broadcasts([make_broadcast("B1", hours=1), make_broadcast("B2", hours=2)])
    memory.broadcasts["B1"] = memory.broadcasts["B1"].model_copy(update={"status": BroadcastLifecycle.COMPLETE})
    memory.reorder()
    b2 = memory.broadcasts["B2"].model_copy(update={"status": BroadcastLifecycle.TEST_STARTING})
    memory.replace(b2)

    engine.reload_broadcast(host, b2, memory, 2)

    values = host.last("variable_values")
    assert values["unfinished_0"] == "Show B2"
    assert values["unfinished_state_0"] == "Test starting"
    assert "unfinished_1" not in values
    assert host.last("check_feedbacks") == (FEEDBACK_BROADCAST_STATUS,)


def test_reload_broadcast_outside_slot_range(host: RecordingHost) -> None:
    memory = StateMemory.from_broadcasts([make_broadcast("B1", hours=1), make_broadcast("B2", hours=2)])

    engine.reload_broadcast(host, memory.broadcasts["B2"], memory, 1)

    values = host.last("variable_values")
    assert values == {
        "broadcast_B2_lifecycle": "Ready",
        "broadcast_B2_health": "n/a",
        "broadcast_B2_viewers": "",
    }


def test_reload_broadcast_for_unknown_id_only_checks_feedbacks(host: RecordingHost) -> None:
    memory = StateMemory.from_broadcasts([make_broadcast("B1")])

    engine.reload_broadcast(host, make_broadcast("ghost"), memory, 3)

    assert host.names() == ["check_feedbacks"]


# ------------------------------------------------------------------
# Feedbacks
# ------------------------------------------------------------------


def _status(memory: StateMemory, ref: str, blink: bool, **options: int) -> dict:
    event = FeedbackEvent(type=FEEDBACK_BROADCAST_STATUS, options={"broadcast": ref, **options})
    return handle_feedback(event, memory, combine_rgb, blink)


@pytest.mark.parametrize(
    ("status", "blink", "expected"),
    [
        (BroadcastLifecycle.READY, True, (209, 209, 0)),
        (BroadcastLifecycle.TESTING, False, (0, 172, 0)),
        (BroadcastLifecycle.LIVE, True, (222, 0, 0)),
        (BroadcastLifecycle.COMPLETE, False, (0, 0, 168)),
        (BroadcastLifecycle.TEST_STARTING, True, (0, 172, 0)),
        (BroadcastLifecycle.TEST_STARTING, False, (209, 209, 0)),
        (BroadcastLifecycle.LIVE_STARTING, True, (222, 0, 0)),
        (BroadcastLifecycle.LIVE_STARTING, False, (0, 172, 0)),
    ],
)
def test_status_feedback_colors(status: BroadcastLifecycle, blink: bool, expected: tuple[int, int, int]) -> None:
    memory = StateMemory.from_broadcasts([make_broadcast("B1", status)])

    style = _status(memory, "B1", blink)

    assert style == {"bgcolor": combine_rgb(*expected), "color": combine_rgb(255, 255, 255)}


def test_status_feedback_option_overrides() -> None:
    memory = StateMemory.from_broadcasts([make_broadcast("B1")])
    assert _status(memory, "B1", True, bg_ready=0x123456, text=0)["bgcolor"] == 0x123456


def test_status_feedback_without_style() -> None:
    memory = StateMemory.from_broadcasts([make_broadcast("B1", BroadcastLifecycle.CREATED)])
    assert _status(memory, "B1", True) == {}
    assert _status(memory, "missing", True) == {}
    assert _status(memory, "unfinished_4", True) == {}


def test_blink_phase_alternates_every_second() -> None:
    t = 1_700_000_000.25
    assert blink_phase(t) != blink_phase(t + 1)
    assert blink_phase(t) == blink_phase(t + 2)


def test_health_feedback() -> None:
    memory = StateMemory.from_broadcasts(
        [make_broadcast("B1", stream="S1").model_copy(update={"stream_health": StreamHealth.BAD}), make_broadcast("B2")]
    )

    bad = handle_feedback(
        FeedbackEvent(type=FEEDBACK_STREAM_HEALTH, options={"broadcast": "unfinished_0"}), memory, combine_rgb, True
    )
    unbound = handle_feedback(
        FeedbackEvent(type=FEEDBACK_STREAM_HEALTH, options={"broadcast": "B2"}), memory, combine_rgb, True
    )

    assert bad["bgcolor"] == combine_rgb(255, 102, 0)
    assert unbound == {}


def test_feedback_definitions_offer_slot_references() -> None:
    definitions = list_feedbacks({"B1": make_broadcast("B1")}, combine_rgb, 2)
    dropdown = definitions[0].options[0]
    assert [c.id for c in dropdown.choices] == ["B1", "unfinished_0", "unfinished_1"]
    assert dropdown.default == "B1"


# ------------------------------------------------------------------
# Presets and references
# ------------------------------------------------------------------


def test_presets_per_broadcast_and_slot() -> None:
    presets = list_presets({"B1": make_broadcast("B1")}, combine_rgb, 1)

    labels = [p.label for p in presets]
    assert labels == ["Start test", "Go live", "Finish", "Stream health", "Toggle unfinished #1", "Stream health #1"]
    toggle = presets[4]
    assert toggle.actions[0].options == {"broadcast": "unfinished_0"}
    assert "$(youtube:unfinished_0)" in toggle.bank.text


def test_resolve_broadcast_by_id_and_slot() -> None:
    memory = StateMemory.from_broadcasts([make_broadcast("B1", hours=2), make_broadcast("B0", hours=1)])
    assert resolve_broadcast(memory, "unfinished_0").id == "B0"  # type: ignore[union-attr]
    assert resolve_broadcast(memory, "B1").id == "B1"  # type: ignore[union-attr]
    assert resolve_broadcast(memory, None) is None
