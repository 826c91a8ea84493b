"""Transport protocol.

A transport performs exactly one request per call and reports completion
through a callback. It may complete before ``send`` returns (blocking
transports) or later from the event loop; the controller handles both.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from restform.models import OutboundRequest, TransportResponse

CompletionCallback = Callable[[TransportResponse], None]


@runtime_checkable
class Transport(Protocol):
    """Protocol for the HTTP layer."""

    def send(self, request: OutboundRequest, on_complete: CompletionCallback) -> None:
        """Issue ``request`` and call ``on_complete`` once with the outcome.

        Transport-level failures are reported through ``on_complete`` as a
        TransportResponse with status 0 and, where known, an error token;
        they are never raised.
        """
        ...
