"""Async client for the YouTube Live broadcast endpoints."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any, Protocol

import aiohttp

from pyytlive._constants import API_BASE_URL
from pyytlive._redact import redact_for_log
from pyytlive.auth.oauth import refresh_credential
from pyytlive.exceptions import YtApiError, YtAuthorizationError, YtTransportError
from pyytlive.models.broadcast import (
    Broadcast,
    BroadcastLifecycle,
    BroadcastState,
    StreamHealth,
    TransitionTarget,
    stream_health_from_api_item,
)
from pyytlive.models.credential import Credential

_logger = logging.getLogger(__name__)

# liveBroadcasts/liveStreams accept at most 50 ids per request.
_ID_BATCH = 50


class BroadcastApi(Protocol):
    """Structural interface of the API client used by the state cache.

    Tests pass in-memory doubles; :class:`YouTubeClient` is the production
    implementation.
    """

    async def list_broadcasts(self) -> list[Broadcast]: ...

    async def list_broadcast_states(self, broadcast_ids: Sequence[str]) -> list[BroadcastState]: ...

    async def list_stream_health(self, stream_ids: Sequence[str]) -> dict[str, StreamHealth]: ...

    async def transition(self, broadcast_id: str, target: TransitionTarget) -> BroadcastLifecycle: ...

    async def close(self) -> None: ...


def _batches(ids: Iterable[str]) -> list[list[str]]:
    unique = list(dict.fromkeys(ids))
    return [unique[i : i + _ID_BATCH] for i in range(0, len(unique), _ID_BATCH)]


class YouTubeClient:
    """YouTube Data API v3 client scoped to live broadcasts.

    Usage::

        client = YouTubeClient(credential, 10, client_id=..., client_secret=...)
        try:
            broadcasts = await client.list_broadcasts()
        finally:
            await client.close()

    Parameters
    ----------
    credential : Credential
        Authorized token set.
    max_broadcasts : int
        ``maxResults`` for the broadcast listing.
    client_id, client_secret : str
        OAuth client used to refresh an expired access token.
    session : aiohttp.ClientSession, optional
        External HTTP session; an owned session is created otherwise.
    on_credential_refresh : callable, optional
        Called with the new credential after every successful refresh.
    """

    def __init__(
        self,
        credential: Credential,
        max_broadcasts: int,
        *,
        client_id: str = "",
        client_secret: str = "",
        session: aiohttp.ClientSession | None = None,
        on_credential_refresh: Callable[[Credential], None] | None = None,
    ) -> None:
        self._credential = credential
        self._max_broadcasts = max_broadcasts
        self._client_id = client_id
        self._client_secret = client_secret
        self._external_session = session is not None
        self._http_session = session
        self._on_credential_refresh = on_credential_refresh

    @property
    def credential(self) -> Credential:
        return self._credential

    async def close(self) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
        self._http_session = None

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def _require_session(self) -> aiohttp.ClientSession:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        return self._http_session

    async def refresh(self) -> Credential:
        """Refresh the access token and report the new credential."""
        credential = await refresh_credential(
            self._require_session(),
            self._credential,
            client_id=self._client_id,
            client_secret=self._client_secret,
        )
        self._credential = credential
        _logger.debug("Access token refreshed")
        if self._on_credential_refresh is not None:
            self._on_credential_refresh(credential)
        return credential

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    async def _send(
        self,
        method: str,
        endpoint: str,
        params: dict[str, str],
    ) -> tuple[int, Any]:
        """Perform one HTTP request; returns ``(status, decoded_json)``."""
        session = self._require_session()
        headers = {"Authorization": self._credential.authorization_header, "Accept": "application/json"}
        try:
            async with session.request(method, f"{API_BASE_URL}/{endpoint}", params=params, headers=headers) as resp:
                body = await resp.json(content_type=None) if resp.content_length != 0 else None
                return resp.status, body
        except (aiohttp.ClientError, TimeoutError) as err:
            raise YtTransportError(f"{endpoint} request failed: {err}", endpoint=endpoint) from err
        except ValueError as err:
            raise YtTransportError(f"{endpoint} returned invalid JSON", endpoint=endpoint) from err

    async def _request(self, method: str, endpoint: str, params: dict[str, str]) -> dict[str, Any]:
        """Authorized request with a single refresh-and-retry on 401."""
        if self._credential.is_expired() and self._credential.refresh_token:
            await self._refresh_or_raise(endpoint)

        status, body = await self._send(method, endpoint, params)
        if status == 401 and self._credential.refresh_token:
            await self._refresh_or_raise(endpoint)
            status, body = await self._send(method, endpoint, params)

        _logger.debug("%s %s -> %s %s", method, endpoint, status, redact_for_log(body))
        if not 200 <= status < 300:
            raise _api_error(endpoint, status, body)
        return body if isinstance(body, dict) else {}

    async def _refresh_or_raise(self, endpoint: str) -> None:
        try:
            await self.refresh()
        except YtAuthorizationError as err:
            raise YtApiError(
                f"{endpoint} failed: token refresh rejected ({err})",
                status_code=401,
                reason="authError",
                endpoint=endpoint,
            ) from err

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def list_broadcasts(self) -> list[Broadcast]:
        """Fetch the channel's broadcasts (all lifecycle phases)."""
        body = await self._request(
            "GET",
            "liveBroadcasts",
            {
                "part": "id,snippet,contentDetails,status,statistics",
                "broadcastType": "all",
                "mine": "true",
                "maxResults": str(self._max_broadcasts),
            },
        )
        return [Broadcast.from_api_item(item) for item in body.get("items", [])]

    async def list_broadcast_states(self, broadcast_ids: Sequence[str]) -> list[BroadcastState]:
        states: list[BroadcastState] = []
        for batch in _batches(broadcast_ids):
            body = await self._request(
                "GET",
                "liveBroadcasts",
                {"part": "id,status,statistics", "id": ",".join(batch), "maxResults": str(_ID_BATCH)},
            )
            states.extend(BroadcastState.from_api_item(item) for item in body.get("items", []))
        return states

    async def list_stream_health(self, stream_ids: Sequence[str]) -> dict[str, StreamHealth]:
        health: dict[str, StreamHealth] = {}
        for batch in _batches(stream_ids):
            body = await self._request(
                "GET",
                "liveStreams",
                {"part": "id,status", "id": ",".join(batch), "maxResults": str(_ID_BATCH)},
            )
            for item in body.get("items", []):
                health[str(item["id"])] = stream_health_from_api_item(item)
        return health

    async def transition(self, broadcast_id: str, target: TransitionTarget) -> BroadcastLifecycle:
        """Move a broadcast to *target*; returns the phase YouTube reports afterwards."""
        body = await self._request(
            "POST",
            "liveBroadcasts/transition",
            {"part": "id,status", "id": broadcast_id, "broadcastStatus": target.value},
        )
        status = (body.get("status") or {}).get("lifeCycleStatus", "unknown")
        return BroadcastLifecycle(status)


def _api_error(endpoint: str, status: int, body: Any) -> YtApiError:
    reason = ""
    message = f"HTTP {status}"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        message = str(error.get("message") or message)
        details = error.get("errors")
        if isinstance(details, list) and details and isinstance(details[0], dict):
            reason = str(details[0].get("reason", ""))
    return YtApiError(
        f"{endpoint} failed: {message}",
        status_code=status,
        reason=reason,
        endpoint=endpoint,
    )
