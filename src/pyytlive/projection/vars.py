"""Host variables derived from the broadcast cache.

Per broadcast ``<id>``:

* ``broadcast_<id>_lifecycle`` - phase, e.g. ``Testing``
* ``broadcast_<id>_health`` - bound stream health, e.g. ``Good``
* ``broadcast_<id>_viewers`` - concurrent viewers while live

Per unfinished slot ``<n>`` (``0 <= n < unfinished_cnt``):

* ``unfinished_<n>`` - broadcast title
* ``unfinished_state_<n>`` / ``unfinished_short_<n>`` - long/short phase
* ``unfinished_health_<n>`` - bound stream health
* ``unfinished_viewers_<n>`` - concurrent viewers

Slots without a broadcast export empty strings.
"""

from __future__ import annotations

from pyytlive.models.broadcast import Broadcast, BroadcastLifecycle, StreamHealth
from pyytlive.models.surface import VariableDefinition
from pyytlive.state.memory import StateMemory

_LIFECYCLE_TEXT: dict[BroadcastLifecycle, str] = {
    BroadcastLifecycle.CREATED: "Created",
    BroadcastLifecycle.READY: "Ready",
    BroadcastLifecycle.TEST_STARTING: "Test starting",
    BroadcastLifecycle.TESTING: "Testing",
    BroadcastLifecycle.LIVE_STARTING: "Going live",
    BroadcastLifecycle.LIVE: "Live",
    BroadcastLifecycle.COMPLETE: "Finished",
    BroadcastLifecycle.REVOKED: "Revoked",
}

_LIFECYCLE_SHORT: dict[BroadcastLifecycle, str] = {
    BroadcastLifecycle.CREATED: "Created",
    BroadcastLifecycle.READY: "Ready",
    BroadcastLifecycle.TEST_STARTING: "Starting",
    BroadcastLifecycle.TESTING: "Test",
    BroadcastLifecycle.LIVE_STARTING: "Starting",
    BroadcastLifecycle.LIVE: "LIVE",
    BroadcastLifecycle.COMPLETE: "Done",
    BroadcastLifecycle.REVOKED: "Revoked",
}

_HEALTH_TEXT: dict[StreamHealth, str] = {
    StreamHealth.GOOD: "Good",
    StreamHealth.OK: "OK",
    StreamHealth.BAD: "Bad",
    StreamHealth.NO_DATA: "No data",
}


def lifecycle_text(status: BroadcastLifecycle) -> str:
    return _LIFECYCLE_TEXT.get(status, "Unknown")


def lifecycle_short_text(status: BroadcastLifecycle) -> str:
    return _LIFECYCLE_SHORT.get(status, "?")


def health_text(health: StreamHealth | None) -> str:
    if health is None:
        return "n/a"
    return _HEALTH_TEXT.get(health, "Unknown")


def _viewers_text(broadcast: Broadcast) -> str:
    return "" if broadcast.concurrent_viewers is None else str(broadcast.concurrent_viewers)


def declare_vars(memory: StateMemory, unfinished_cnt: int) -> list[VariableDefinition]:
    definitions: list[VariableDefinition] = []
    for broadcast in memory.broadcasts.values():
        definitions.extend(
            [
                VariableDefinition(
                    name=f"broadcast_{broadcast.id}_lifecycle",
                    label=f"Broadcast '{broadcast.name}' state",
                ),
                VariableDefinition(
                    name=f"broadcast_{broadcast.id}_health",
                    label=f"Broadcast '{broadcast.name}' stream health",
                ),
                VariableDefinition(
                    name=f"broadcast_{broadcast.id}_viewers",
                    label=f"Broadcast '{broadcast.name}' concurrent viewers",
                ),
            ]
        )
    for i in range(unfinished_cnt):
        slot = i + 1
        definitions.extend(
            [
                VariableDefinition(name=f"unfinished_{i}", label=f"Unfinished broadcast #{slot} name"),
                VariableDefinition(name=f"unfinished_state_{i}", label=f"Unfinished broadcast #{slot} state"),
                VariableDefinition(
                    name=f"unfinished_short_{i}",
                    label=f"Unfinished broadcast #{slot} state (short)",
                ),
                VariableDefinition(
                    name=f"unfinished_health_{i}",
                    label=f"Unfinished broadcast #{slot} stream health",
                ),
                VariableDefinition(
                    name=f"unfinished_viewers_{i}",
                    label=f"Unfinished broadcast #{slot} concurrent viewers",
                ),
            ]
        )
    return definitions


def get_broadcast_vars(broadcast: Broadcast) -> dict[str, str]:
    return {
        f"broadcast_{broadcast.id}_lifecycle": lifecycle_text(broadcast.status),
        f"broadcast_{broadcast.id}_health": health_text(broadcast.stream_health),
        f"broadcast_{broadcast.id}_viewers": _viewers_text(broadcast),
    }


def get_unfinished_broadcast_state_vars(index: int, broadcast: Broadcast | None) -> dict[str, str]:
    """Slot variables for position *index*; ``None`` blanks the slot."""
    if broadcast is None:
        return {
            f"unfinished_{index}": "",
            f"unfinished_state_{index}": "",
            f"unfinished_short_{index}": "",
            f"unfinished_health_{index}": "",
            f"unfinished_viewers_{index}": "",
        }
    return {
        f"unfinished_{index}": broadcast.name,
        f"unfinished_state_{index}": lifecycle_text(broadcast.status),
        f"unfinished_short_{index}": lifecycle_short_text(broadcast.status),
        f"unfinished_health_{index}": health_text(broadcast.stream_health),
        f"unfinished_viewers_{index}": _viewers_text(broadcast),
    }


def export_vars(memory: StateMemory, unfinished_cnt: int) -> dict[str, str]:
    values: dict[str, str] = {}
    for broadcast in memory.broadcasts.values():
        values.update(get_broadcast_vars(broadcast))
    unfinished = memory.unfinished_broadcasts
    for i in range(unfinished_cnt):
        values.update(get_unfinished_broadcast_state_vars(i, unfinished[i] if i < len(unfinished) else None))
    return values
