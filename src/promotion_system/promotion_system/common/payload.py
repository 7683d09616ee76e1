from __future__ import annotations

import json
from typing import Any, Optional

import structlog

from ..core.exceptions import InvalidPayloadError

logger = structlog.get_logger(__name__)


def parse_payload(raw: str | dict | None) -> dict[str, Any]:
    """Decode the JSON document body attached to an approval or appointment."""
    if isinstance(raw, dict):
        return raw
    if not raw:
        raise InvalidPayloadError("Payload is empty")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidPayloadError(f"Payload is not valid JSON: {e.msg}") from e
    if not isinstance(data, dict):
        raise InvalidPayloadError("Payload must be a JSON object")
    return data


def get_int(data: dict[str, Any], key: str) -> Optional[int]:
    value = data.get(key)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            logger.warning("payload_int_conversion_failed", key=key, value=value)
            return None
    return None


def get_str(data: dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None
