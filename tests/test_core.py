from __future__ import annotations

import asyncio

import pytest
from _fakes import FakeApi, make_broadcast

from pyytlive.exceptions import YtDataFetchError, YtTransitionError
from pyytlive.models.broadcast import Broadcast, BroadcastLifecycle, StreamHealth, TransitionTarget
from pyytlive.state.core import Core
from pyytlive.state.memory import StateMemory


class RecordingModule:
    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []

    def reload_all(self, memory: StateMemory) -> None:
        self.events.append(("all", None))

    def reload_states(self, memory: StateMemory) -> None:
        self.events.append(("states", None))

    def reload_broadcast(self, broadcast: Broadcast, memory: StateMemory) -> None:
        self.events.append(("broadcast", broadcast))


@pytest.fixture
def module() -> RecordingModule:
    return RecordingModule()


async def _started(module: RecordingModule, api: FakeApi) -> Core:
    core = Core(module, api, refresh_interval=3600)
    await core.init()
    return core


@pytest.mark.asyncio
async def test_init_loads_broadcasts_with_stream_health(module: RecordingModule, api: FakeApi) -> None:
    api.broadcasts = [make_broadcast("B1", stream="S1"), make_broadcast("B2")]
    api.health = {"S1": StreamHealth.GOOD}

    core = await _started(module, api)

    assert core.memory.broadcasts["B1"].stream_health == StreamHealth.GOOD
    assert core.memory.broadcasts["B2"].stream_health is None
    assert [b.id for b in core.memory.unfinished_broadcasts] == ["B1", "B2"]
    assert module.events == []
    core.destroy()


@pytest.mark.asyncio
async def test_init_failure_is_data_fetch_error(module: RecordingModule, api: FakeApi) -> None:
    api.fail_list = True
    core = Core(module, api, refresh_interval=3600)

    with pytest.raises(YtDataFetchError, match="quota exceeded"):
        await core.init()


@pytest.mark.asyncio
async def test_destroy_is_idempotent_and_stops_polling(module: RecordingModule, api: FakeApi) -> None:
    api.broadcasts = [make_broadcast("B1")]
    core = Core(module, api, refresh_interval=0.01)
    await core.init()

    core.destroy()
    core.destroy()
    api.states = {"B1": BroadcastLifecycle.TESTING}
    await asyncio.sleep(0.05)

    assert module.events == []


@pytest.mark.asyncio
async def test_poll_loop_refreshes_and_survives_errors(module: RecordingModule, api: FakeApi) -> None:
    api.broadcasts = [make_broadcast("B1")]
    api.fail_states = True
    core = Core(module, api, refresh_interval=0.01)
    await core.init()

    await asyncio.sleep(0.05)
    assert module.events == []

    api.fail_states = False
    api.states = {"B1": BroadcastLifecycle.TESTING}
    await asyncio.sleep(0.05)
    core.destroy()

    assert ("states", None) in module.events
    assert core.memory.broadcasts["B1"].status == BroadcastLifecycle.TESTING


@pytest.mark.asyncio
async def test_refresh_states_reorders_unfinished(module: RecordingModule, api: FakeApi) -> None:
    api.broadcasts = [make_broadcast("B1", hours=1, stream="S1"), make_broadcast("B2", hours=2)]
    core = await _started(module, api)
    assert core.memory.unfinished_index("B2") == 1

    api.states = {"B1": BroadcastLifecycle.COMPLETE, "B2": BroadcastLifecycle.READY}
    api.health = {"S1": StreamHealth.BAD}
    await core.refresh_states()

    assert core.memory.unfinished_index("B1") is None
    assert core.memory.unfinished_index("B2") == 0
    assert core.memory.broadcasts["B1"].stream_health == StreamHealth.BAD
    assert module.events == [("states", None)]
    core.destroy()


@pytest.mark.asyncio
async def test_refresh_states_with_empty_cache_still_notifies(module: RecordingModule, api: FakeApi) -> None:
    core = await _started(module, api)
    await core.refresh_states()
    assert module.events == [("states", None)]
    core.destroy()


@pytest.mark.asyncio
async def test_reload_everything_refetches(module: RecordingModule, api: FakeApi) -> None:
    core = await _started(module, api)
    api.broadcasts = [make_broadcast("NEW")]

    await core.reload_everything()

    assert list(core.memory.broadcasts) == ["NEW"]
    assert module.events == [("all", None)]
    core.destroy()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "monitor", "operation", "target"),
    [
        (BroadcastLifecycle.READY, True, "start_test", TransitionTarget.TESTING),
        (BroadcastLifecycle.TESTING, True, "go_live", TransitionTarget.LIVE),
        (BroadcastLifecycle.READY, False, "go_live", TransitionTarget.LIVE),
        (BroadcastLifecycle.LIVE, True, "finish", TransitionTarget.COMPLETE),
        (BroadcastLifecycle.READY, True, "toggle", TransitionTarget.TESTING),
        (BroadcastLifecycle.READY, False, "toggle", TransitionTarget.LIVE),
        (BroadcastLifecycle.TESTING, True, "toggle", TransitionTarget.LIVE),
        (BroadcastLifecycle.LIVE, True, "toggle", TransitionTarget.COMPLETE),
    ],
)
async def test_allowed_transitions(
    module: RecordingModule,
    api: FakeApi,
    status: BroadcastLifecycle,
    monitor: bool,
    operation: str,
    target: TransitionTarget,
) -> None:
    api.broadcasts = [make_broadcast("B1", status, monitor=monitor)]
    core = await _started(module, api)

    await getattr(core, operation)("B1")

    assert api.transitions == [("B1", target)]
    kind, updated = module.events[0]
    assert kind == "broadcast"
    assert core.memory.broadcasts["B1"] is updated
    core.destroy()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "monitor", "operation"),
    [
        (BroadcastLifecycle.READY, False, "start_test"),
        (BroadcastLifecycle.LIVE, True, "start_test"),
        (BroadcastLifecycle.READY, True, "go_live"),
        (BroadcastLifecycle.TESTING, True, "finish"),
        (BroadcastLifecycle.COMPLETE, True, "toggle"),
        (BroadcastLifecycle.TEST_STARTING, True, "toggle"),
    ],
)
async def test_rejected_transitions(
    module: RecordingModule,
    api: FakeApi,
    status: BroadcastLifecycle,
    monitor: bool,
    operation: str,
) -> None:
    api.broadcasts = [make_broadcast("B1", status, monitor=monitor)]
    core = await _started(module, api)

    with pytest.raises(YtTransitionError):
        await getattr(core, operation)("B1")

    assert api.transitions == []
    assert module.events == []
    core.destroy()


@pytest.mark.asyncio
async def test_transition_of_unknown_broadcast(module: RecordingModule, api: FakeApi) -> None:
    core = await _started(module, api)
    with pytest.raises(YtTransitionError, match="Unknown broadcast"):
        await core.finish("nope")
    core.destroy()


@pytest.mark.asyncio
async def test_finish_frees_slot_and_refreshes_all_values(module: RecordingModule, api: FakeApi) -> None:
    api.broadcasts = [make_broadcast("B1", BroadcastLifecycle.LIVE, hours=1), make_broadcast("B2", hours=2)]
    core = await _started(module, api)

    await core.finish("B1")

    assert [kind for kind, _ in module.events] == ["broadcast", "states"]
    assert core.memory.unfinished_index("B1") is None
    assert core.memory.unfinished_index("B2") == 0
    core.destroy()


@pytest.mark.asyncio
async def test_init_with_unreadable_payload_is_data_fetch_error(module: RecordingModule) -> None:
    class BadPayloadApi(FakeApi):
        async def list_broadcasts(self) -> list[Broadcast]:
            return [Broadcast.from_api_item({"id": "B1", "snippet": {"scheduledStartTime": "tomorrow"}})]

    core = Core(module, BadPayloadApi(), refresh_interval=3600)

    with pytest.raises(YtDataFetchError, match="Unreadable broadcast data"):
        await core.init()


@pytest.mark.asyncio
async def test_poll_loop_survives_unexpected_errors(module: RecordingModule) -> None:
    class FlakyApi(FakeApi):
        calls = 0

        async def list_broadcast_states(self, broadcast_ids):  # type: ignore[no-untyped-def]
            self.calls += 1
            if self.calls == 1:
                raise ValueError("invalid literal for int()")
            return await super().list_broadcast_states(broadcast_ids)

    api = FlakyApi(broadcasts=[make_broadcast("B1")], states={"B1": BroadcastLifecycle.TESTING})
    core = Core(module, api, refresh_interval=0.01)
    await core.init()

    await asyncio.sleep(0.1)
    task = core._poll_task  # noqa: SLF001
    assert task is not None and not task.done()
    core.destroy()

    assert api.calls > 1
    assert ("states", None) in module.events
    assert core.memory.broadcasts["B1"].status == BroadcastLifecycle.TESTING


@pytest.mark.asyncio
async def test_poll_does_not_overwrite_transition_in_flight(module: RecordingModule) -> None:
    release = asyncio.Event()

    class SlowStatesApi(FakeApi):
        async def list_broadcast_states(self, broadcast_ids):  # type: ignore[no-untyped-def]
            states = await super().list_broadcast_states(broadcast_ids)
            await release.wait()
            return states

    api = SlowStatesApi(broadcasts=[make_broadcast("B1"), make_broadcast("B2", hours=2)])
    api.states = {"B1": BroadcastLifecycle.READY, "B2": BroadcastLifecycle.TESTING}
    core = await _started(module, api)

    poll = asyncio.create_task(core.refresh_states())
    await asyncio.sleep(0)
    await core.start_test("B1")
    release.set()
    await poll

    assert core.memory.broadcasts["B1"].status == BroadcastLifecycle.TEST_STARTING
    assert core.memory.broadcasts["B2"].status == BroadcastLifecycle.TESTING
    core.destroy()
