"""Google OAuth2 endpoints.

Builds the consent URL, exchanges authorization codes and refreshes
access tokens. The token endpoint answers with a JSON body shaped like::

    {"access_token": "...", "expires_in": 3599, "refresh_token": "...",
     "scope": "...", "token_type": "Bearer"}
"""

from __future__ import annotations

import logging
import time
from typing import Any
from urllib.parse import urlencode

import aiohttp

from pyytlive._constants import AUTH_URL, OAUTH_SCOPES, TOKEN_URL
from pyytlive._redact import redact_for_log
from pyytlive.exceptions import YtAuthorizationError
from pyytlive.models.credential import Credential

_logger = logging.getLogger(__name__)


def build_authorization_url(client_id: str, redirect_url: str, state: str) -> str:
    """Consent page URL requesting offline access to the YouTube scope."""
    query = {
        "client_id": client_id,
        "redirect_uri": redirect_url,
        "response_type": "code",
        "scope": " ".join(OAUTH_SCOPES),
        "access_type": "offline",
        "prompt": "consent",
        "state": state,
    }
    return f"{AUTH_URL}?{urlencode(query)}"


def _credential_from_response(
    body: dict[str, Any],
    *,
    client_id: str,
    previous: Credential | None = None,
    now: float | None = None,
) -> Credential:
    access_token = body.get("access_token")
    if not access_token:
        raise YtAuthorizationError("Token response missing access_token")

    expires_in = body.get("expires_in")
    current = time.time() if now is None else now
    expiry_date = (current + float(expires_in)) * 1000.0 if expires_in is not None else None

    # Refresh responses usually omit refresh_token; keep the one we had.
    refresh_token = body.get("refresh_token") or (previous.refresh_token if previous else None)

    return Credential(
        access_token=str(access_token),
        refresh_token=refresh_token,
        token_type=str(body.get("token_type") or "Bearer"),
        scope=body.get("scope") or (previous.scope if previous else None),
        expiry_date=expiry_date,
        client_id=client_id,
    )


async def _post_token(session: aiohttp.ClientSession, form: dict[str, str]) -> dict[str, Any]:
    try:
        async with session.post(TOKEN_URL, data=form) as response:
            body: Any = await response.json(content_type=None)
            status = response.status
    except (aiohttp.ClientError, TimeoutError, ValueError) as err:
        raise YtAuthorizationError(f"Token endpoint request failed: {err}") from err

    _logger.debug("Token endpoint status=%s body=%s", status, redact_for_log(body))
    if not isinstance(body, dict):
        raise YtAuthorizationError(f"Token endpoint returned unexpected payload (HTTP {status})")
    if status != 200:
        detail = body.get("error_description") or body.get("error") or f"HTTP {status}"
        raise YtAuthorizationError(str(detail))
    return body


async def exchange_code(
    session: aiohttp.ClientSession,
    *,
    client_id: str,
    client_secret: str,
    redirect_url: str,
    code: str,
) -> Credential:
    """Trade an authorization code for a credential."""
    body = await _post_token(
        session,
        {
            "grant_type": "authorization_code",
            "code": code,
            "client_id": client_id,
            "client_secret": client_secret,
            "redirect_uri": redirect_url,
        },
    )
    return _credential_from_response(body, client_id=client_id)


async def refresh_credential(
    session: aiohttp.ClientSession,
    credential: Credential,
    *,
    client_id: str,
    client_secret: str,
) -> Credential:
    """Obtain a fresh access token using the credential's refresh token."""
    if not credential.refresh_token:
        raise YtAuthorizationError("Credential has no refresh token")
    body = await _post_token(
        session,
        {
            "grant_type": "refresh_token",
            "refresh_token": credential.refresh_token,
            "client_id": client_id,
            "client_secret": client_secret,
        },
    )
    return _credential_from_response(body, client_id=client_id, previous=credential)
