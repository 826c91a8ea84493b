"""Payload preparation and wire encoding.

Both steps are pure: the prepare hook receives a copy of the collected map
and the serializer returns bytes without touching its input.
"""

import json
from collections.abc import Callable
from typing import Any

from restform.models import PayloadMap

PrepareData = Callable[[PayloadMap], PayloadMap]
SerializeData = Callable[[PayloadMap], bytes | str]


def default_prepare_data(data: PayloadMap) -> PayloadMap:
    """Identity transform."""
    return data


def default_serialize_data(data: PayloadMap) -> bytes:
    """Encode a payload map as compact, key-sorted UTF-8 JSON."""
    return json.dumps(
        data, sort_keys=True, ensure_ascii=False, separators=(",", ":")
    ).encode("utf-8")


def prepare(raw: PayloadMap, prepare_data: PrepareData | None = None) -> PayloadMap:
    """Run the prepare hook over a copy of the collected map.

    Args:
        raw: The map produced by FieldRegistry.collect.
        prepare_data: Transform hook. Defaults to identity.

    Returns:
        The transformed map.

    Raises:
        TypeError: If the hook does not return a dict with string keys.
    """
    hook = prepare_data or default_prepare_data
    prepared = hook(dict(raw))
    if not isinstance(prepared, dict):
        raise TypeError(
            f"prepare_data must return a dict, got {type(prepared).__name__}"
        )
    bad_keys = [key for key in prepared if not isinstance(key, str)]
    if bad_keys:
        raise TypeError(f"prepare_data must return string keys, got {bad_keys!r}")
    return prepared


def serialize(payload: PayloadMap, serialize_data: SerializeData | None = None) -> bytes:
    """Encode a prepared payload for the wire.

    A hook returning ``str`` is encoded as UTF-8.
    """
    hook = serialize_data or default_serialize_data
    body = hook(payload)
    if isinstance(body, str):
        body = body.encode("utf-8")
    return body


def parse_payload(body: bytes | str) -> dict[str, Any]:
    """Decode a request body the way the receiving endpoint does.

    Raises:
        ValueError: If the body is not a JSON object.
    """
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    data = json.loads(body)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def parse_response_object(text: str | None) -> dict[str, Any] | None:
    """Return the response body as a dict only if it is a JSON object.

    Arrays, scalars, ``null`` and malformed text all yield None.
    """
    if not text:
        return None
    try:
        data = json.loads(text)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    return data
