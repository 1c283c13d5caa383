"""
TransformResult serialization for out-of-process caches.

Disk and Redis entries are JSON documents produced with orjson; image bytes
travel base64-encoded inside them.
"""

import base64
import binascii
from typing import Any

import orjson

from pixelcache.models.transform import TransformResult


def result_to_dict(result: TransformResult) -> dict[str, Any]:
    """Convert a result into a JSON-safe mapping."""
    return {
        "data": base64.b64encode(result.data).decode("ascii"),
        "content_type": result.content_type,
        "etag": result.etag,
        "width": result.width,
        "height": result.height,
    }


def result_from_dict(payload: dict[str, Any]) -> TransformResult:
    """
    Rebuild a result from result_to_dict() output.

    Raises:
        ValueError: If the payload is missing fields or the data is not base64
    """
    try:
        return TransformResult(
            data=base64.b64decode(payload["data"], validate=True),
            content_type=payload["content_type"],
            etag=payload["etag"],
            width=payload.get("width"),
            height=payload.get("height"),
        )
    except (KeyError, TypeError, binascii.Error) as e:
        raise ValueError(f"Malformed cache payload: {e}") from e


def dumps_result(result: TransformResult) -> bytes:
    return orjson.dumps(result_to_dict(result))


def loads_result(raw: bytes | str) -> TransformResult:
    """
    Decode a serialized result.

    Raises:
        ValueError: On invalid JSON or malformed payload
    """
    payload = orjson.loads(raw)
    if not isinstance(payload, dict):
        raise ValueError("Malformed cache payload: expected an object")
    return result_from_dict(payload)
