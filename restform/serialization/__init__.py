"""Payload preparation and serialization."""

from restform.serialization.serializer import (
    PrepareData,
    SerializeData,
    default_prepare_data,
    default_serialize_data,
    parse_payload,
    parse_response_object,
    prepare,
    serialize,
)

__all__ = [
    "PrepareData",
    "SerializeData",
    "default_prepare_data",
    "default_serialize_data",
    "parse_payload",
    "parse_response_object",
    "prepare",
    "serialize",
]
