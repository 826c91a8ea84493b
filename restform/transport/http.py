"""Blocking HTTP transport built on requests."""

import logging

import requests

from restform.errors.classifier import HTTP_ERROR, TIMEOUT
from restform.models import OutboundRequest, TransportResponse
from restform.transport.base import CompletionCallback

logger = logging.getLogger(__name__)


class RequestsTransport:
    """Sends submissions with a ``requests.Session``.

    Completes synchronously: ``on_complete`` runs before ``send`` returns.
    Timeouts map to the "timeout" token, connection failures to status 0
    with no token, and any other request exception to the "error" token.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        user_agent: str = "restform/0.1",
    ) -> None:
        """
        Initialize the transport.

        Args:
            session: Session to send through. A new one is created if omitted.
            user_agent: User agent header for new sessions.
        """
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": user_agent})
        self.session = session

    def send(self, request: OutboundRequest, on_complete: CompletionCallback) -> None:
        logger.debug(f"{request.method} {request.url} ({len(request.body)} bytes)")
        try:
            resp = self.session.request(
                request.method,
                request.url,
                data=request.body,
                headers={
                    "Content-Type": request.content_type,
                    "Accept": "application/json, text/javascript, */*; q=0.01",
                    "X-Requested-With": "XMLHttpRequest",
                },
                timeout=request.timeout_ms / 1000,
            )
        except requests.exceptions.Timeout:
            logger.warning(f"Request timed out after {request.timeout_ms}ms: {request.url}")
            response = TransportResponse(status=0, error=TIMEOUT)
        except requests.exceptions.ConnectionError as e:
            logger.warning(f"Connection failed: {request.url}: {e}")
            response = TransportResponse(status=0)
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error: {request.url}: {e}")
            response = TransportResponse(status=0, error=HTTP_ERROR)
        else:
            logger.debug(f"Response {resp.status_code} from {request.url}")
            response = TransportResponse(
                status=resp.status_code,
                body=resp.text,
                headers=dict(resp.headers),
            )

        on_complete(response)

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()
