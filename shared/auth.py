"""
Admin session tokens.

A token is base64-encoded JSON: {"adminId", "role", "exp", "iat"}, with
times in epoch milliseconds. The console only carries it around; the
tracking API is the one that validates it.
"""

import base64
import binascii
import json
import time
from typing import Any, Optional

ADMIN_ROLE = "admin"
DEFAULT_TOKEN_TTL_HOURS = 24


def _now_ms() -> int:
    return int(time.time() * 1000)


def generate_admin_token(
    admin_id: str,
    ttl_hours: float = DEFAULT_TOKEN_TTL_HOURS,
    now_ms: Optional[int] = None,
) -> str:
    """Issue a token for an admin, valid for ttl_hours."""
    issued = _now_ms() if now_ms is None else now_ms
    payload = {
        "adminId": admin_id,
        "role": ADMIN_ROLE,
        "exp": issued + int(ttl_hours * 60 * 60 * 1000),
        "iat": issued,
    }
    return base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")


def decode_admin_token(token: str) -> Optional[dict[str, Any]]:
    """Decode a token's payload without checking expiry or role."""
    try:
        payload = json.loads(base64.b64decode(token, validate=True).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None
    return payload if isinstance(payload, dict) else None


def validate_admin_token(token: Optional[str], now_ms: Optional[int] = None) -> Optional[dict[str, Any]]:
    """
    Return the token's payload if it is a current admin token, else None.

    Rejects missing, malformed, expired and non-admin tokens.
    """
    if not token:
        return None
    payload = decode_admin_token(token)
    if payload is None:
        return None
    exp = payload.get("exp")
    if not isinstance(exp, (int, float)):
        return None
    if exp < (_now_ms() if now_ms is None else now_ms):
        return None
    if payload.get("role") != ADMIN_ROLE:
        return None
    return payload
