"""Module configuration for pyytlive."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyytlive._constants import (
    DEFAULT_MAX_BROADCASTS,
    DEFAULT_REDIRECT_URL,
    DEFAULT_REFRESH_INTERVAL,
    DEFAULT_UNFINISHED_COUNT,
    MAX_BROADCASTS_LIMIT,
    MIN_REFRESH_INTERVAL,
)
from pyytlive.models.surface import ConfigField


@dataclasses.dataclass(frozen=True)
class ModuleConfig:
    """Persisted module settings.

    Parameters
    ----------
    client_id : str
        OAuth2 client ID of the Google Cloud application.
    client_secret : str
        OAuth2 client secret.
    client_redirect_url : str
        Redirect URL registered for the OAuth client. The authorization
        flow listens on its host, port and path.
    auth_token : str
        Serialized :class:`~pyytlive.models.credential.Credential`.
        ``""`` means signed out.
    max_broadcasts : int
        How many broadcasts to fetch from YouTube.
    refresh_interval : float
        Seconds between two state polls.
    unfinished_max_cnt : int
        Number of positional "unfinished broadcast" slots exposed to the host.
    """

    client_id: str = ""
    client_secret: str = ""
    client_redirect_url: str = DEFAULT_REDIRECT_URL
    auth_token: str = ""
    max_broadcasts: int = DEFAULT_MAX_BROADCASTS
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL
    unfinished_max_cnt: int = DEFAULT_UNFINISHED_COUNT

    @classmethod
    def from_env(cls, **overrides: Any) -> ModuleConfig:
        """Create configuration from ``YTLIVE_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "YTLIVE_CLIENT_ID": "client_id",
            "YTLIVE_CLIENT_SECRET": "client_secret",
            "YTLIVE_REDIRECT_URL": "client_redirect_url",
            "YTLIVE_AUTH_TOKEN": "auth_token",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # Numeric fields are kept raw; the load_* accessors sanitize them.
        _ENV_NUMERIC_MAP = {
            "YTLIVE_MAX_BROADCASTS": "max_broadcasts",
            "YTLIVE_REFRESH_INTERVAL": "refresh_interval",
            "YTLIVE_UNFINISHED_COUNT": "unfinished_max_cnt",
        }
        for env_key, field_name in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = val

        config_kwargs.update(overrides)
        return cls(**config_kwargs)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ModuleConfig:
        """Build from a persisted dict, ignoring unknown keys."""
        known = {f.name for f in dataclasses.fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


def _as_int(value: Any) -> int | None:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def _as_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def load_max_broadcast_count(config: ModuleConfig) -> int:
    """Number of broadcasts to request, clamped to ``1..50``."""
    value = _as_int(config.max_broadcasts)
    if value is None:
        return DEFAULT_MAX_BROADCASTS
    return max(1, min(MAX_BROADCASTS_LIMIT, value))


def load_refresh_interval(config: ModuleConfig) -> float:
    """Polling period in seconds (at least one second)."""
    value = _as_float(config.refresh_interval)
    if value is None:
        return DEFAULT_REFRESH_INTERVAL
    return max(MIN_REFRESH_INTERVAL, value)


def load_max_unfinished_broadcast_count(config: ModuleConfig) -> int:
    """Number of unfinished-broadcast slots (never negative)."""
    value = _as_int(config.unfinished_max_cnt)
    if value is None:
        return DEFAULT_UNFINISHED_COUNT
    return max(0, value)


def list_config_fields() -> list[ConfigField]:
    """Fields the host renders in the module configuration form."""
    return [
        ConfigField(
            type="static-text",
            id="info",
            label="Information",
            value=(
                "Create OAuth2 credentials for a desktop/web application in the Google Cloud console, "
                "enable the YouTube Data API v3 and add the redirect URL below to the client."
            ),
            width=12,
        ),
        ConfigField(type="textinput", id="client_id", label="Client ID", width=12),
        ConfigField(type="textinput", id="client_secret", label="Client secret", width=12),
        ConfigField(
            type="textinput",
            id="client_redirect_url",
            label="Redirect URL",
            default=DEFAULT_REDIRECT_URL,
            width=12,
        ),
        ConfigField(
            type="number",
            id="max_broadcasts",
            label="Maximum number of fetched broadcasts",
            default=DEFAULT_MAX_BROADCASTS,
            min=1,
            max=MAX_BROADCASTS_LIMIT,
            width=6,
        ),
        ConfigField(
            type="number",
            id="refresh_interval",
            label="Refresh interval (seconds)",
            default=DEFAULT_REFRESH_INTERVAL,
            min=MIN_REFRESH_INTERVAL,
            width=6,
        ),
        ConfigField(
            type="number",
            id="unfinished_max_cnt",
            label="Number of unfinished broadcast slots",
            default=DEFAULT_UNFINISHED_COUNT,
            min=0,
            width=6,
        ),
    ]
