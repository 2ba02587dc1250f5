"""Broadcast and stream models.

Field meanings follow the ``liveBroadcasts`` and ``liveStreams``
resources of the YouTube Data API v3.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from pyytlive.models._base import YtBaseModel, YtEnum, YtTimestamp

# ------------------------------------------------------------------
# Enums
# ------------------------------------------------------------------


class BroadcastLifecycle(YtEnum):
    """``status.lifeCycleStatus`` of a broadcast."""

    UNKNOWN = "unknown"
    CREATED = "created"
    READY = "ready"
    TEST_STARTING = "testStarting"
    TESTING = "testing"
    LIVE_STARTING = "liveStarting"
    LIVE = "live"
    COMPLETE = "complete"
    REVOKED = "revoked"

    @property
    def is_finished(self) -> bool:
        return self in (BroadcastLifecycle.COMPLETE, BroadcastLifecycle.REVOKED)


class StreamHealth(YtEnum):
    """``status.healthStatus.status`` of a bound stream."""

    UNKNOWN = "unknown"
    GOOD = "good"
    OK = "ok"
    BAD = "bad"
    NO_DATA = "noData"


class TransitionTarget(YtEnum):
    """Values accepted by ``liveBroadcasts.transition``."""

    UNKNOWN = "unknown"
    TESTING = "testing"
    LIVE = "live"
    COMPLETE = "complete"


# ------------------------------------------------------------------
# Models
# ------------------------------------------------------------------


class Broadcast(YtBaseModel):
    """A scheduled, live or finished broadcast tracked by the module."""

    id: str
    name: str = ""
    status: BroadcastLifecycle = BroadcastLifecycle.UNKNOWN
    monitor_stream_enabled: bool = True
    """Whether the broadcast has a monitor stream (required for the testing phase)."""
    bound_stream_id: str | None = None
    stream_health: StreamHealth | None = None
    """Health of the bound stream; ``None`` when unbound or not yet queried."""
    scheduled_start_time: YtTimestamp = None
    actual_start_time: YtTimestamp = None
    live_chat_id: str | None = None
    concurrent_viewers: int | None = Field(default=None, ge=0)

    @classmethod
    def from_api_item(cls, item: dict[str, Any]) -> Broadcast:
        """Build from one ``liveBroadcast`` resource."""
        snippet = item.get("snippet") or {}
        status = item.get("status") or {}
        details = item.get("contentDetails") or {}
        statistics = item.get("statistics") or {}
        monitor = details.get("monitorStream") or {}
        viewers = statistics.get("concurrentViewers")

        return cls(
            id=str(item["id"]),
            name=str(snippet.get("title", "")),
            status=BroadcastLifecycle(status.get("lifeCycleStatus", "unknown")),
            monitor_stream_enabled=bool(monitor.get("enableMonitorStream", True)),
            bound_stream_id=details.get("boundStreamId") or None,
            scheduled_start_time=snippet.get("scheduledStartTime"),
            actual_start_time=snippet.get("actualStartTime"),
            live_chat_id=snippet.get("liveChatId") or None,
            concurrent_viewers=int(viewers) if viewers not in (None, "") else None,
        )


class BroadcastState(YtBaseModel):
    """Polled, frequently changing part of a broadcast."""

    id: str
    status: BroadcastLifecycle = BroadcastLifecycle.UNKNOWN
    concurrent_viewers: int | None = None

    @classmethod
    def from_api_item(cls, item: dict[str, Any]) -> BroadcastState:
        status = item.get("status") or {}
        viewers = (item.get("statistics") or {}).get("concurrentViewers")
        return cls(
            id=str(item["id"]),
            status=BroadcastLifecycle(status.get("lifeCycleStatus", "unknown")),
            concurrent_viewers=int(viewers) if viewers not in (None, "") else None,
        )


def stream_health_from_api_item(item: dict[str, Any]) -> StreamHealth:
    """Extract the health status from one ``liveStream`` resource."""
    health = ((item.get("status") or {}).get("healthStatus") or {}).get("status")
    return StreamHealth(health) if health else StreamHealth.NO_DATA
