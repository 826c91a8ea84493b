"""HTTP transport layer for restform."""

from restform.transport.base import CompletionCallback, Transport
from restform.transport.http import RequestsTransport

__all__ = [
    "CompletionCallback",
    "RequestsTransport",
    "Transport",
]
