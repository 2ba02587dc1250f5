"""Module lifecycle: authorization, cache start-up, teardown and host entry points."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from pyytlive.api import BroadcastApi, YouTubeClient
from pyytlive.auth.flow import AuthorizationEnvironment, YouTubeAuthorization
from pyytlive.config import (
    ModuleConfig,
    load_max_broadcast_count,
    load_max_unfinished_broadcast_count,
    load_refresh_interval,
)
from pyytlive.exceptions import YtError
from pyytlive.host import InstanceStatus, ModuleHost
from pyytlive.models.broadcast import Broadcast
from pyytlive.models.credential import Credential
from pyytlive.models.surface import ActionEvent, FeedbackEvent, FeedbackStyle
from pyytlive.projection import engine
from pyytlive.projection.actions import handle_action
from pyytlive.projection.feedbacks import blink_phase, handle_feedback
from pyytlive.state.core import Core, ModuleBase
from pyytlive.state.memory import StateMemory

_logger = logging.getLogger(__name__)


class Authorizer(Protocol):
    async def authorize(self, is_reconfig: bool = False) -> Credential: ...

    def cancel(self) -> None: ...


ApiFactory = Callable[[Credential, ModuleConfig, Callable[[Credential], None]], BroadcastApi]
CoreFactory = Callable[[ModuleBase, BroadcastApi, float], Core]


def _default_api_factory(
    credential: Credential,
    config: ModuleConfig,
    on_refresh: Callable[[Credential], None],
) -> BroadcastApi:
    return YouTubeClient(
        credential,
        load_max_broadcast_count(config),
        client_id=config.client_id,
        client_secret=config.client_secret,
        on_credential_refresh=on_refresh,
    )


# ------------------------------------------------------------------
# Lifecycle states
# ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Uninitialized:
    pass


@dataclass(frozen=True, slots=True)
class Authorizing:
    """Authorization (and then cache start-up) in progress for *epoch*."""

    epoch: int
    api: BroadcastApi | None = None
    core: Core | None = None


@dataclass(frozen=True, slots=True)
class Ready:
    epoch: int
    api: BroadcastApi
    core: Core


@dataclass(frozen=True, slots=True)
class Error:
    reason: str


@dataclass(frozen=True, slots=True)
class Destroyed:
    pass


LifecycleState = Uninitialized | Authorizing | Ready | Error | Destroyed


class _EpochListener:
    """Forwards core notifications only while its epoch is the live one."""

    def __init__(self, module: YouTubeModule, epoch: int) -> None:
        self._module = module
        self._epoch = epoch

    def _live(self) -> bool:
        state = self._module.state
        return isinstance(state, Ready) and state.epoch == self._epoch

    def reload_all(self, memory: StateMemory) -> None:
        if self._live():
            self._module.reload_all(memory)

    def reload_states(self, memory: StateMemory) -> None:
        if self._live():
            self._module.reload_states(memory)

    def reload_broadcast(self, broadcast: Broadcast, memory: StateMemory) -> None:
        if self._live():
            self._module.reload_broadcast(broadcast, memory)


class YouTubeModule:
    """Control-surface integration of YouTube Live.

    Usage::

        module = YouTubeModule(host, config)
        await module.init()
        ...
        await module.update_config(new_config)
        ...
        await module.destroy()

    Every ``init`` attempt captures an epoch; ``destroy`` bumps it before
    anything else, so continuations of a superseded attempt never touch
    the host, the config or the live state.

    Parameters
    ----------
    host : ModuleHost
        Status reporting, UI artifact setters and config persistence.
    config : ModuleConfig
        Initial configuration.
    auth_factory, api_factory, core_factory : callable, optional
        Collaborator constructors (overridable for tests).
    """

    def __init__(
        self,
        host: ModuleHost,
        config: ModuleConfig,
        *,
        auth_factory: Callable[[AuthorizationEnvironment], Authorizer] = YouTubeAuthorization,
        api_factory: ApiFactory = _default_api_factory,
        core_factory: CoreFactory = Core,
    ) -> None:
        self._host = host
        self._config = config
        self._auth = auth_factory(self)
        self._api_factory = api_factory
        self._core_factory = core_factory
        self._state: LifecycleState = Uninitialized()
        self._epoch = 0
        self._action_tasks: set[asyncio.Task[None]] = set()

    @property
    def config(self) -> ModuleConfig:
        return self._config

    @property
    def state(self) -> LifecycleState:
        return self._state

    def _is_current(self, epoch: int) -> bool:
        return epoch == self._epoch and not isinstance(self._state, Destroyed)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def init(self, is_reconfig: bool = False) -> None:
        """Authorize, load broadcasts and publish the UI artifacts.

        Failures are reported through ``host.status`` only.
        """
        if isinstance(self._state, (Authorizing, Ready)):
            await self.destroy()

        self._epoch += 1
        epoch = self._epoch
        self._state = Authorizing(epoch)
        _logger.debug("Initializing YouTube module (epoch %d, reconfig=%s)", epoch, is_reconfig)
        self._host.status(InstanceStatus.WARNING, "Initializing")

        try:
            credential = await self._auth.authorize(is_reconfig)
        except Exception as err:
            if not self._is_current(epoch):
                _logger.debug("Authorization attempt %d superseded: %s", epoch, err)
                return
            if not isinstance(err, YtError):
                _logger.debug("Unexpected authorization failure", exc_info=True)
            self.save_token("")
            self._fail(f"Authorization failed: {err}")
            return
        if not self._is_current(epoch):
            _logger.debug("Discarding authorization result of superseded attempt %d", epoch)
            return

        self.save_token(credential.to_token_string())

        api = self._api_factory(credential, self._config, self._credential_listener(epoch))
        core = self._core_factory(
            _EpochListener(self, epoch),
            api,
            load_refresh_interval(self._config),
        )
        self._state = Authorizing(epoch, api, core)

        try:
            await core.init()
        except Exception as err:
            if not self._is_current(epoch):
                return
            if not isinstance(err, YtError):
                _logger.debug("Unexpected broadcast query failure", exc_info=True)
            core.destroy()
            self._fail(f"YouTube broadcast query failed: {err}")
            await api.close()
            return
        if not self._is_current(epoch):
            # destroy() already tore the pair down
            return

        self._state = Ready(epoch, api, core)
        _logger.info("YouTube module initialized successfully")
        self._host.status(InstanceStatus.OK)
        self.reload_all(core.memory)

    def _fail(self, reason: str) -> None:
        _logger.warning(reason)
        self._state = Error(reason)
        self._host.status(InstanceStatus.ERROR, reason)

    async def destroy(self) -> None:
        """Cancel pending work and drop the live state. Idempotent."""
        state = self._state
        if isinstance(state, Destroyed):
            return
        self._epoch += 1
        self._state = Destroyed()
        self._auth.cancel()

        api: BroadcastApi | None = None
        if isinstance(state, (Authorizing, Ready)):
            if state.core is not None:
                state.core.destroy()
            api = state.api
        for task in list(self._action_tasks):
            task.cancel()
        if api is not None:
            await api.close()
        _logger.debug("YouTube module destroyed")

    async def update_config(self, config: ModuleConfig) -> None:
        """Store new configuration and restart the module."""
        self._config = config
        _logger.debug("Restarting YouTube module after reconfiguration")
        await self.destroy()
        await self.init(is_reconfig=True)

    # ------------------------------------------------------------------
    # Credential persistence
    # ------------------------------------------------------------------

    def save_token(self, raw: str) -> None:
        """Persist a serialized credential (``""`` signs out)."""
        self._config = dataclasses.replace(self._config, auth_token=raw)
        self._host.save_config(self._config)

    def _credential_listener(self, epoch: int) -> Callable[[Credential], None]:
        def on_refresh(credential: Credential) -> None:
            if self._is_current(epoch):
                self.save_token(credential.to_token_string())

        return on_refresh

    def prompt_authorization(self, url: str) -> None:
        self._host.status(InstanceStatus.WARNING, f"Authorize access at {url}")

    # ------------------------------------------------------------------
    # Host entry points
    # ------------------------------------------------------------------

    def action(self, event: ActionEvent) -> asyncio.Task[None] | None:
        """Run an action in the background; failures are only logged."""
        state = self._state
        if not isinstance(state, Ready):
            return None
        task = asyncio.get_running_loop().create_task(handle_action(event, state.core.memory, state.core))
        self._action_tasks.add(task)
        task.add_done_callback(self._action_done)
        return task

    def _action_done(self, task: asyncio.Task[None]) -> None:
        self._action_tasks.discard(task)
        if task.cancelled():
            return
        err = task.exception()
        if err is not None:
            _logger.warning("Action failed: %s", err)

    def feedback(self, event: FeedbackEvent) -> FeedbackStyle:
        state = self._state
        if not isinstance(state, Ready):
            return {}
        return handle_feedback(event, state.core.memory, self._host.rgb, blink_phase(time.time()))

    # ------------------------------------------------------------------
    # Core notifications
    # ------------------------------------------------------------------

    def reload_all(self, memory: StateMemory) -> None:
        engine.reload_all(self._host, memory, load_max_unfinished_broadcast_count(self._config))

    def reload_states(self, memory: StateMemory) -> None:
        engine.reload_states(self._host, memory, load_max_unfinished_broadcast_count(self._config))

    def reload_broadcast(self, broadcast: Broadcast, memory: StateMemory) -> None:
        engine.reload_broadcast(self._host, broadcast, memory, load_max_unfinished_broadcast_count(self._config))
