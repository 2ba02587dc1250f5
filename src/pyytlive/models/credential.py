"""OAuth2 credential model."""

from __future__ import annotations

import json
import logging
import time

from pydantic import BaseModel, ConfigDict, ValidationError

from pyytlive._constants import CREDENTIAL_EXPIRY_SKEW

_logger = logging.getLogger(__name__)


class Credential(BaseModel):
    """Token set issued by Google's OAuth2 token endpoint.

    Field names follow the token JSON Google libraries persist, so tokens
    stored by other tools round-trip unchanged.

    Parameters
    ----------
    access_token : str
        Short-lived bearer token.
    refresh_token : str or None
        Long-lived refresh material; absent when Google did not re-issue it.
    token_type : str
        Authorization scheme, normally ``"Bearer"``.
    scope : str or None
        Space-separated granted scopes.
    expiry_date : float or None
        Expiry as epoch milliseconds.
    client_id : str or None
        OAuth client the token was issued to.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: str
    refresh_token: str | None = None
    token_type: str = "Bearer"
    scope: str | None = None
    expiry_date: float | None = None
    client_id: str | None = None

    @classmethod
    def from_token_string(cls, raw: str) -> Credential | None:
        """Deserialize a persisted token. ``""`` and garbage yield ``None``."""
        if not raw or not raw.strip():
            return None
        try:
            return cls.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as err:
            _logger.warning("Ignoring unreadable stored token: %s", err.__class__.__name__)
            return None

    def to_token_string(self) -> str:
        return self.model_dump_json(exclude_none=True)

    def is_expired(self, now: float | None = None) -> bool:
        """Whether the access token is (about to be) expired.

        *now* is epoch seconds; tokens without an expiry never expire.
        """
        if self.expiry_date is None:
            return False
        current = time.time() if now is None else now
        return current >= (self.expiry_date / 1000.0) - CREDENTIAL_EXPIRY_SKEW

    @property
    def authorization_header(self) -> str:
        return f"{self.token_type} {self.access_token}"
