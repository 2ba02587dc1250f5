"""Interactive OAuth2 authorization for the YouTube module.

A stored credential is reused when possible. Otherwise a small
``aiohttp.web`` listener is bound to the configured redirect URL, the
consent URL is reported to the environment, and the code Google redirects
back with is exchanged for a credential.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
from typing import Protocol
from urllib.parse import urlsplit

import aiohttp
from aiohttp import web

from pyytlive.auth.oauth import build_authorization_url, exchange_code
from pyytlive.config import ModuleConfig
from pyytlive.exceptions import YtAuthorizationCancelled, YtAuthorizationError, YtConfigError
from pyytlive.models.credential import Credential

_logger = logging.getLogger(__name__)

_SUCCESS_PAGE = "Authorization complete. You can close this window and return to your control surface."


class AuthorizationEnvironment(Protocol):
    """What the flow needs from its owner."""

    @property
    def config(self) -> ModuleConfig: ...

    def prompt_authorization(self, url: str) -> None:
        """Tell the user to open *url* to grant access."""
        ...


def _listen_address(redirect_url: str) -> tuple[str, int, str]:
    parts = urlsplit(redirect_url)
    if parts.scheme != "http" or not parts.hostname:
        raise YtConfigError(f"Redirect URL must be a plain http:// URL, got {redirect_url!r}")
    try:
        port = parts.port or 80
    except ValueError as err:
        raise YtConfigError(f"Invalid port in redirect URL {redirect_url!r}: {err}") from err
    return parts.hostname, port, parts.path or "/"


class YouTubeAuthorization:
    """OAuth2 flow producing a :class:`Credential`.

    Only one attempt is outstanding at a time; :meth:`cancel` aborts it.
    """

    def __init__(
        self,
        env: AuthorizationEnvironment,
        *,
        http_session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._env = env
        self._http_session = http_session
        self._task: asyncio.Task[Credential] | None = None

    async def authorize(self, is_reconfig: bool = False) -> Credential:
        """Return a usable credential.

        Raises
        ------
        YtConfigError
            Client ID/secret or redirect URL missing or invalid.
        YtAuthorizationError
            Consent denied or the code exchange failed.
        YtAuthorizationCancelled
            :meth:`cancel` was called while the attempt was outstanding.
        """
        self.cancel()
        task = asyncio.ensure_future(self._run(is_reconfig))
        self._task = task
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                task.cancel()
                raise
            raise YtAuthorizationCancelled("Authorization cancelled") from None
        finally:
            if self._task is task:
                self._task = None

    def cancel(self) -> None:
        """Abort any outstanding attempt. Safe to call when idle."""
        task = self._task
        self._task = None
        if task is not None and not task.done():
            _logger.debug("Cancelling pending authorization")
            task.cancel()

    async def _run(self, is_reconfig: bool) -> Credential:
        config = self._env.config
        if not config.client_id or not config.client_secret:
            raise YtConfigError("Missing OAuth client ID or client secret")

        stored = Credential.from_token_string(config.auth_token)
        if stored is not None and self._may_reuse(stored, config, is_reconfig):
            _logger.debug("Reusing stored credential")
            return stored

        code = await self._wait_for_code(config)
        if self._http_session is not None:
            return await self._exchange(self._http_session, config, code)
        async with aiohttp.ClientSession() as session:
            return await self._exchange(session, config, code)

    @staticmethod
    def _may_reuse(stored: Credential, config: ModuleConfig, is_reconfig: bool) -> bool:
        if not is_reconfig or stored.client_id is None:
            return True
        # A reconfiguration may have switched to another OAuth client.
        return stored.client_id == config.client_id

    @staticmethod
    async def _exchange(session: aiohttp.ClientSession, config: ModuleConfig, code: str) -> Credential:
        return await exchange_code(
            session,
            client_id=config.client_id,
            client_secret=config.client_secret,
            redirect_url=config.client_redirect_url,
            code=code,
        )

    async def _wait_for_code(self, config: ModuleConfig) -> str:
        host, port, path = _listen_address(config.client_redirect_url)
        state = secrets.token_urlsafe(16)
        loop = asyncio.get_running_loop()
        result: asyncio.Future[str] = loop.create_future()

        app = web.Application()
        app.router.add_get(path, make_redirect_handler(state, result))
        runner = web.AppRunner(app)
        await runner.setup()
        try:
            site = web.TCPSite(runner, host, port)
            try:
                await site.start()
            except OSError as err:
                raise YtAuthorizationError(f"Cannot listen on {host}:{port}: {err}") from err

            url = build_authorization_url(config.client_id, config.client_redirect_url, state)
            _logger.info("Waiting for YouTube authorization at %s", url)
            self._env.prompt_authorization(url)
            return await result
        finally:
            await runner.cleanup()


def make_redirect_handler(
    state: str,
    result: asyncio.Future[str],
):
    """Request handler resolving *result* with the code Google redirects back with."""

    async def handle(request: web.Request) -> web.Response:
        query = request.query
        if query.get("state") != state:
            return web.Response(status=400, text="State mismatch, please retry the authorization.")

        error = query.get("error")
        if error:
            if not result.done():
                result.set_exception(YtAuthorizationError(f"Consent denied: {error}"))
            return web.Response(status=403, text=f"Authorization failed: {error}")

        code = query.get("code")
        if not code:
            return web.Response(status=400, text="Missing authorization code.")
        if not result.done():
            result.set_result(code)
        return web.Response(text=_SUCCESS_PAGE)

    return handle
