"""Tests for YouTube payload parsing with YtBaseModel + YtEnum."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from pyytlive.models.broadcast import (
    Broadcast,
    BroadcastLifecycle,
    BroadcastState,
    StreamHealth,
    TransitionTarget,
    stream_health_from_api_item,
)

# ------------------------------------------------------------------
# YtEnum
# ------------------------------------------------------------------


class TestYtEnum:
    def test_unknown_value_falls_back(self) -> None:
        assert BroadcastLifecycle("somethingNew") == BroadcastLifecycle.UNKNOWN

    def test_known_value(self) -> None:
        assert BroadcastLifecycle("liveStarting") == BroadcastLifecycle.LIVE_STARTING

    def test_all_enums_have_unknown(self) -> None:
        for cls in (BroadcastLifecycle, StreamHealth, TransitionTarget):
            assert cls("???") == cls.UNKNOWN, cls.__name__

    def test_finished_phases(self) -> None:
        finished = {s for s in BroadcastLifecycle if s.is_finished}
        assert finished == {BroadcastLifecycle.COMPLETE, BroadcastLifecycle.REVOKED}


# ------------------------------------------------------------------
# Broadcast
# ------------------------------------------------------------------

_ITEM = {
    "kind": "youtube#liveBroadcast",
    "id": "abc123",
    "snippet": {
        "title": "Sunday service",
        "scheduledStartTime": "2026-03-01T10:00:00Z",
        "liveChatId": "chat-1",
    },
    "status": {"lifeCycleStatus": "testing", "privacyStatus": "unlisted"},
    "contentDetails": {"boundStreamId": "stream-9", "monitorStream": {"enableMonitorStream": False}},
    "statistics": {"concurrentViewers": "42"},
}


class TestBroadcast:
    def test_from_api_item(self) -> None:
        b = Broadcast.from_api_item(_ITEM)
        assert b.id == "abc123"
        assert b.name == "Sunday service"
        assert b.status == BroadcastLifecycle.TESTING
        assert b.monitor_stream_enabled is False
        assert b.bound_stream_id == "stream-9"
        assert b.scheduled_start_time == datetime(2026, 3, 1, 10, 0, tzinfo=UTC)
        assert b.live_chat_id == "chat-1"
        assert b.concurrent_viewers == 42
        assert b.stream_health is None

    def test_sparse_item_uses_defaults(self) -> None:
        b = Broadcast.from_api_item({"id": "x"})
        assert b.status == BroadcastLifecycle.UNKNOWN
        assert b.monitor_stream_enabled is True
        assert b.bound_stream_id is None
        assert b.scheduled_start_time is None
        assert b.concurrent_viewers is None

    def test_is_frozen(self) -> None:
        b = Broadcast(id="x")
        with pytest.raises(ValidationError):
            b.name = "changed"  # type: ignore[misc]

    def test_camel_case_aliases(self) -> None:
        b = Broadcast.model_validate({"id": "x", "boundStreamId": "s", "scheduledStartTime": "2026-01-01T00:00:00Z"})
        assert b.bound_stream_id == "s"
        assert b.scheduled_start_time is not None

    def test_negative_viewers_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Broadcast(id="x", concurrent_viewers=-1)


def test_broadcast_state_from_api_item() -> None:
    state = BroadcastState.from_api_item(
        {"id": "abc123", "status": {"lifeCycleStatus": "live"}, "statistics": {"concurrentViewers": "7"}}
    )
    assert state.status == BroadcastLifecycle.LIVE
    assert state.concurrent_viewers == 7


@pytest.mark.parametrize(
    ("item", "expected"),
    [
        ({"id": "s", "status": {"healthStatus": {"status": "good"}}}, StreamHealth.GOOD),
        ({"id": "s", "status": {"healthStatus": {"status": "noData"}}}, StreamHealth.NO_DATA),
        ({"id": "s", "status": {"streamStatus": "inactive"}}, StreamHealth.NO_DATA),
        ({"id": "s", "status": {"healthStatus": {"status": "revoked"}}}, StreamHealth.UNKNOWN),
    ],
)
def test_stream_health_from_api_item(item: dict, expected: StreamHealth) -> None:
    assert stream_health_from_api_item(item) == expected
