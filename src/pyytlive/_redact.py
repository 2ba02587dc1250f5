"""Helpers for safe debug logging.

pyytlive handles OAuth secrets (client secrets, access and refresh tokens,
authorization codes). This module redacts them before DEBUG logs are emitted.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_KEYS: frozenset[str] = frozenset({"code", "authorization", "cookie", "state"})
_SENSITIVE_SUFFIXES: tuple[str, ...] = ("_token", "token", "secret")

_REDACTED = "<redacted>"


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return lowered in _SENSITIVE_KEYS or lowered.endswith(_SENSITIVE_SUFFIXES)


def redact_for_log(value: Any, *, max_string: int = 256, _depth: int = 0) -> Any:
    """Return a copy of *value* with secrets replaced, for debug logs.

    Mapping keys naming a token, secret, authorization code or OAuth state
    are masked; bearer strings are masked wherever they appear.
    """
    if _depth > 10:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        if value.lower().startswith("bearer "):
            return _REDACTED
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"

    if isinstance(value, Mapping):
        return {
            str(k): _REDACTED if _is_sensitive(str(k)) else redact_for_log(v, max_string=max_string, _depth=_depth + 1)
            for k, v in value.items()
        }

    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)
