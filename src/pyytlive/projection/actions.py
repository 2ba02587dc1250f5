"""Host actions operating on broadcasts."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Protocol

from pyytlive.exceptions import YtActionError
from pyytlive.models.broadcast import Broadcast
from pyytlive.models.surface import ActionDefinition, ActionEvent
from pyytlive.projection._common import broadcast_option, resolve_broadcast
from pyytlive.state.memory import StateMemory

_logger = logging.getLogger(__name__)

ACTION_START_TEST = "init_broadcast"
ACTION_GO_LIVE = "start_broadcast"
ACTION_FINISH = "stop_broadcast"
ACTION_TOGGLE = "toggle_broadcast"
ACTION_REFRESH_FEEDBACKS = "refresh_feedbacks"
ACTION_REFRESH_STATUS = "refresh_status"


class BroadcastController(Protocol):
    """Operations an action may trigger (implemented by the core)."""

    async def start_test(self, broadcast_id: str) -> None: ...

    async def go_live(self, broadcast_id: str) -> None: ...

    async def finish(self, broadcast_id: str) -> None: ...

    async def toggle(self, broadcast_id: str) -> None: ...

    async def refresh_states(self) -> None: ...

    async def reload_everything(self) -> None: ...


def list_actions(broadcasts: Mapping[str, Broadcast], unfinished_cnt: int) -> list[ActionDefinition]:
    broadcast = broadcast_option(broadcasts, unfinished_cnt)
    return [
        ActionDefinition(id=ACTION_START_TEST, label="Start broadcast test", options=[broadcast]),
        ActionDefinition(id=ACTION_GO_LIVE, label="Go live", options=[broadcast]),
        ActionDefinition(id=ACTION_FINISH, label="Finish broadcast", options=[broadcast]),
        ActionDefinition(id=ACTION_TOGGLE, label="Advance broadcast to next phase", options=[broadcast]),
        ActionDefinition(id=ACTION_REFRESH_FEEDBACKS, label="Refresh broadcast/stream feedbacks"),
        ActionDefinition(id=ACTION_REFRESH_STATUS, label="Reload everything from YouTube"),
    ]


async def handle_action(event: ActionEvent, memory: StateMemory, core: BroadcastController) -> None:
    """Run one host action.

    Raises
    ------
    YtActionError
        Unknown action or unresolvable broadcast reference.
    YtError
        The underlying transition or refresh failed.
    """
    if event.action == ACTION_REFRESH_FEEDBACKS:
        await core.refresh_states()
        return
    if event.action == ACTION_REFRESH_STATUS:
        await core.reload_everything()
        return

    operations = {
        ACTION_START_TEST: core.start_test,
        ACTION_GO_LIVE: core.go_live,
        ACTION_FINISH: core.finish,
        ACTION_TOGGLE: core.toggle,
    }
    operation = operations.get(event.action)
    if operation is None:
        raise YtActionError(f"Unknown action {event.action!r}")

    ref = event.options.get("broadcast")
    broadcast = resolve_broadcast(memory, ref)
    if broadcast is None:
        raise YtActionError(f"No broadcast matches {ref!r}")
    _logger.debug("Action %s on broadcast %s", event.action, broadcast.id)
    await operation(broadcast.id)
