"""Data models shared across the submission lifecycle."""

from collections.abc import Callable
from enum import Enum, IntEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# Reserved error key for errors that belong to the form rather than a field.
# Same convention as Django's non_field_errors.
FORM_ERRORS_KEY = "__all__"

JSON_CONTENT_TYPE = "application/json"

PayloadMap = dict[str, Any]
ErrorPayload = dict[str, list[str]]


class SubmissionState(str, Enum):
    """Lifecycle state of a form's submission controller."""

    IDLE = "idle"
    COLLECTING = "collecting"  # Clearing errors and building the payload
    DISPATCHED = "dispatched"  # Request is outstanding
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class Severity(IntEnum):
    """Severity level passed to the after-error hook."""

    VALIDATION = 0  # Server rejected field or form content
    CONNECTIVITY = 1  # No network path to the endpoint
    PROTOCOL = 2  # Malformed response, timeout, abort or other transport error


class FieldHandler(BaseModel):
    """Per-field override bundle.

    Each operation is independently optional. A field with ``data`` is exempt
    from default value extraction; a field with ``clear``/``error`` is exempt
    from default error clearing/rendering.
    """

    clear: Callable[[], Any] | None = None
    error: Callable[[list[str]], Any] | None = None
    data: Callable[[], Any] | None = None

    model_config = ConfigDict(frozen=True)


class OutboundRequest(BaseModel):
    """The single request issued for one submission cycle."""

    method: str
    url: str
    timeout_ms: int
    content_type: str = JSON_CONTENT_TYPE
    body: bytes

    model_config = ConfigDict(frozen=True)


class TransportResponse(BaseModel):
    """What the transport hands back when a request completes.

    ``status`` is 0 when no HTTP response was received. ``error`` carries a
    transport-level failure token ("timeout", "abort", "error") when the
    transport itself gave up on the request.
    """

    status: int
    body: str = ""
    error: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """True for statuses the controller treats as success."""
        return self.error is None and (200 <= self.status < 300 or self.status == 304)


class FailureReport(BaseModel):
    """A classified submission failure."""

    kind: Literal["validation", "connectivity", "protocol"]
    reason: str
    severity: Severity
    errors: ErrorPayload
    response: TransportResponse


class SubmissionRecord(BaseModel):
    """Outcome of one completed submission cycle."""

    outcome: Literal["succeeded", "failed"]
    payload: PayloadMap
    request: OutboundRequest
    response: TransportResponse
    data: Any = None
    failure: FailureReport | None = None


class SubmitResult(BaseModel):
    """Returned by the submit handler to the host UI layer.

    The host should always suppress the native submission and stop
    propagation, including when the submit was rejected because another
    request is still outstanding.
    """

    accepted: bool
    state: SubmissionState
    suppress_default: bool = True
    stop_propagation: bool = True
