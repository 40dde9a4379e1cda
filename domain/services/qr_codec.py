"""Visitor QR payload codec.

The payload is a plain JSON object; it carries no signature. A scanned
payload is trusted only if the exact same string exists in the QR code store.
"""

from __future__ import annotations

import json
import secrets
import time
from dataclasses import dataclass
from typing import Any, Optional

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


@dataclass(frozen=True)
class QrPayload:
    id: Optional[str]
    user_id: Optional[str]
    apartment: Optional[str]
    resident_name: Optional[str]
    timestamp: Optional[int]


def _now_millis() -> int:
    return int(time.time() * 1000)


def generate_payload_id() -> str:
    """Time component plus a random suffix, e.g. "1760790000000-k3j9x0q2m".

    Collisions are unlikely but not impossible.
    """
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"{_now_millis()}-{suffix}"


def encode(user_id: str, apartment: str, resident_name: str) -> str:
    data = {
        "id": generate_payload_id(),
        "userId": user_id,
        "apartment": apartment,
        "residentName": resident_name,
        "timestamp": _now_millis(),
    }
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def decode(payload: Any) -> Optional[QrPayload]:
    """Parse a scanned payload. Returns None instead of raising."""
    if not isinstance(payload, str):
        return None

    try:
        data = json.loads(payload)
    except (ValueError, RecursionError):
        return None

    if not isinstance(data, dict):
        return None

    timestamp = data.get("timestamp")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
        timestamp = None

    return QrPayload(
        id=_as_str(data.get("id")),
        user_id=_as_str(data.get("userId")),
        apartment=_as_str(data.get("apartment")),
        resident_name=_as_str(data.get("residentName")),
        timestamp=int(timestamp) if timestamp is not None else None,
    )
