"""Custom exception hierarchy for pyytlive."""

from __future__ import annotations


class YtError(Exception):
    """Base exception for all pyytlive errors."""


class YtConfigError(YtError):
    """Invalid or missing configuration."""


class YtTransportError(YtError):
    """HTTP-level failure (network, timeout, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class YtApiError(YtError):
    """YouTube API answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str = "",
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.reason = reason
        self.endpoint = endpoint
        super().__init__(message)


class YtAuthorizationError(YtError):
    """Credential could not be obtained, exchanged or refreshed."""


class YtAuthorizationCancelled(YtAuthorizationError):
    """An outstanding authorization attempt was aborted via ``cancel()``."""


class YtDataFetchError(YtError):
    """Initial broadcast/stream query failed after a successful authorization.

    Unlike :class:`YtAuthorizationError` the stored credential stays valid.
    """


class YtTransitionError(YtError):
    """Requested broadcast transition is not allowed from the current phase."""


class YtActionError(YtError):
    """Host action could not be mapped onto a broadcast operation."""
