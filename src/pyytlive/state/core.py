"""Executive core: broadcast cache, polling and lifecycle transitions."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from pyytlive.api import BroadcastApi
from pyytlive.exceptions import YtDataFetchError, YtError, YtTransitionError
from pyytlive.models.broadcast import Broadcast, BroadcastLifecycle, TransitionTarget
from pyytlive.state.memory import StateMemory

_logger = logging.getLogger(__name__)


class ModuleBase(Protocol):
    """Receiver of cache change notifications."""

    def reload_all(self, memory: StateMemory) -> None:
        """Broadcast list changed; redefine everything."""
        ...

    def reload_states(self, memory: StateMemory) -> None:
        """Bulk state refresh finished."""
        ...

    def reload_broadcast(self, broadcast: Broadcast, memory: StateMemory) -> None:
        """A single broadcast changed."""
        ...


class Core:
    """Keeps :class:`StateMemory` in sync with YouTube.

    Parameters
    ----------
    module : ModuleBase
        Notified after every change of the cache.
    api : BroadcastApi
        YouTube API client.
    refresh_interval : float
        Seconds between two polls of broadcast states and stream health.
    """

    def __init__(self, module: ModuleBase, api: BroadcastApi, refresh_interval: float) -> None:
        self._module = module
        self._api = api
        self._refresh_interval = refresh_interval
        self._memory = StateMemory()
        self._poll_task: asyncio.Task[None] | None = None
        self._destroyed = False

    @property
    def memory(self) -> StateMemory:
        return self._memory

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def init(self) -> None:
        """Load broadcasts and start polling.

        Raises
        ------
        YtDataFetchError
            The initial query failed.
        """
        try:
            self._memory = await self._load()
        except YtError as err:
            raise YtDataFetchError(str(err)) from err
        except (ValueError, KeyError, TypeError) as err:
            # ValidationError is a ValueError
            raise YtDataFetchError(f"Unreadable broadcast data: {err}") from err
        if self._destroyed:
            return
        _logger.debug(
            "Loaded %d broadcasts (%d unfinished)",
            len(self._memory.broadcasts),
            len(self._memory.unfinished_broadcasts),
        )
        self._poll_task = asyncio.create_task(self._poll_loop())

    def destroy(self) -> None:
        """Stop polling. Idempotent."""
        self._destroyed = True
        task = self._poll_task
        self._poll_task = None
        if task is not None and not task.done():
            task.cancel()

    async def _poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self._refresh_interval)
            try:
                await self.refresh_states()
            except YtError as err:
                _logger.warning("Periodic YouTube refresh failed: %s", err)
            except Exception:
                _logger.warning("Unexpected error during periodic YouTube refresh", exc_info=True)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def _load(self) -> StateMemory:
        broadcasts = await self._api.list_broadcasts()
        bound = [b.bound_stream_id for b in broadcasts if b.bound_stream_id]
        health = await self._api.list_stream_health(bound) if bound else {}
        return StateMemory.from_broadcasts(
            b.model_copy(update={"stream_health": health.get(b.bound_stream_id)}) if b.bound_stream_id else b
            for b in broadcasts
        )

    async def refresh_states(self) -> None:
        """Poll lifecycle phases, viewer counts and stream health of known broadcasts."""
        memory = self._memory
        if not memory.broadcasts:
            self._module.reload_states(memory)
            return

        # Transitions may land while the requests are in flight.
        snapshot = {broadcast_id: b.status for broadcast_id, b in memory.broadcasts.items()}
        states = await self._api.list_broadcast_states(list(memory.broadcasts))
        bound = [b.bound_stream_id for b in memory.broadcasts.values() if b.bound_stream_id]
        health = await self._api.list_stream_health(bound) if bound else {}
        if self._destroyed or memory is not self._memory:
            return

        by_id = {state.id: state for state in states}
        for broadcast_id, broadcast in list(memory.broadcasts.items()):
            update: dict[str, object] = {}
            state = by_id.get(broadcast_id)
            if state is not None and broadcast.status == snapshot.get(broadcast_id):
                update["status"] = state.status
                update["concurrent_viewers"] = state.concurrent_viewers
            if broadcast.bound_stream_id:
                update["stream_health"] = health.get(broadcast.bound_stream_id)
            if update:
                memory.broadcasts[broadcast_id] = broadcast.model_copy(update=update)
        memory.reorder()
        self._module.reload_states(memory)

    async def reload_everything(self) -> None:
        """Re-fetch the broadcast list and redefine all host artifacts."""
        memory = await self._load()
        if self._destroyed:
            return
        self._memory = memory
        self._module.reload_all(memory)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _require(self, broadcast_id: str) -> Broadcast:
        broadcast = self._memory.broadcasts.get(broadcast_id)
        if broadcast is None:
            raise YtTransitionError(f"Unknown broadcast {broadcast_id!r}")
        return broadcast

    async def _transition(self, broadcast: Broadcast, target: TransitionTarget) -> None:
        _logger.info("Transitioning broadcast %s (%s) to %s", broadcast.id, broadcast.status, target)
        status = await self._api.transition(broadcast.id, target)
        if self._destroyed:
            return
        current = self._memory.broadcasts.get(broadcast.id)
        if current is None:
            return
        updated = current.model_copy(update={"status": status})
        slots_changed = self._memory.replace(updated)
        self._module.reload_broadcast(updated, self._memory)
        if slots_changed:
            self._module.reload_states(self._memory)

    async def start_test(self, broadcast_id: str) -> None:
        broadcast = self._require(broadcast_id)
        if broadcast.status != BroadcastLifecycle.READY:
            raise YtTransitionError(f"Broadcast {broadcast_id} cannot start testing from {broadcast.status}")
        if not broadcast.monitor_stream_enabled:
            raise YtTransitionError(f"Broadcast {broadcast_id} has no monitor stream to test with")
        await self._transition(broadcast, TransitionTarget.TESTING)

    async def go_live(self, broadcast_id: str) -> None:
        broadcast = self._require(broadcast_id)
        allowed = broadcast.status == BroadcastLifecycle.TESTING or (
            broadcast.status == BroadcastLifecycle.READY and not broadcast.monitor_stream_enabled
        )
        if not allowed:
            raise YtTransitionError(f"Broadcast {broadcast_id} cannot go live from {broadcast.status}")
        await self._transition(broadcast, TransitionTarget.LIVE)

    async def finish(self, broadcast_id: str) -> None:
        broadcast = self._require(broadcast_id)
        if broadcast.status != BroadcastLifecycle.LIVE:
            raise YtTransitionError(f"Broadcast {broadcast_id} cannot finish from {broadcast.status}")
        await self._transition(broadcast, TransitionTarget.COMPLETE)

    async def toggle(self, broadcast_id: str) -> None:
        """Advance to the next phase: ready → testing/live → complete."""
        broadcast = self._require(broadcast_id)
        status = broadcast.status
        if status == BroadcastLifecycle.READY:
            if broadcast.monitor_stream_enabled:
                await self.start_test(broadcast_id)
            else:
                await self.go_live(broadcast_id)
        elif status == BroadcastLifecycle.TESTING:
            await self.go_live(broadcast_id)
        elif status == BroadcastLifecycle.LIVE:
            await self.finish(broadcast_id)
        else:
            raise YtTransitionError(f"Broadcast {broadcast_id} has no next phase from {status}")
