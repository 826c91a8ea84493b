"""Classification of failed transport responses.

Every failure lands in exactly one class:

- protocol: the transport gave up (timeout, abort, other error), the
  endpoint answered 2xx with a body that is not JSON, or it answered an
  error status without a JSON object body
- connectivity: no HTTP response at all (status 0)
- validation: an error status carrying a JSON object of field errors
"""

from typing import Any

from restform.models import (
    FORM_ERRORS_KEY,
    ErrorPayload,
    FailureReport,
    Severity,
    TransportResponse,
)
from restform.serialization import parse_response_object

CONNECTION_LOST = "connection lost"

# Failure tokens, matching the status texts browsers' XHR wrappers report
TIMEOUT = "timeout"
ABORT = "abort"
PARSE_ERROR = "parsererror"
HTTP_ERROR = "error"


def normalize_error_payload(errors: dict[str, Any]) -> ErrorPayload:
    """Coerce an error object to ``{key: [message, ...]}``.

    Scalar values become one-element lists, ``None`` becomes an empty list,
    and every message is converted to ``str``.
    """
    normalized: ErrorPayload = {}
    for key, value in errors.items():
        if value is None:
            messages: list[str] = []
        elif isinstance(value, (list, tuple)):
            messages = [str(m) for m in value]
        else:
            messages = [str(value)]
        normalized[str(key)] = messages
    return normalized


def _protocol(reason: str, response: TransportResponse) -> FailureReport:
    return FailureReport(
        kind="protocol",
        reason=reason,
        severity=Severity.PROTOCOL,
        errors={FORM_ERRORS_KEY: [reason]},
        response=response,
    )


def classify_failure(response: TransportResponse) -> FailureReport:
    """Classify a response the controller has already deemed a failure.

    Args:
        response: The completed transport response.

    Returns:
        FailureReport with the error payload to route and the severity to
        report to the after-error hook.
    """
    if response.error is not None:
        return _protocol(response.error, response)

    if response.status == 0:
        return FailureReport(
            kind="connectivity",
            reason=CONNECTION_LOST,
            severity=Severity.CONNECTIVITY,
            errors={FORM_ERRORS_KEY: [CONNECTION_LOST]},
            response=response,
        )

    if response.ok:
        # Success status, but the body could not be decoded
        return _protocol(PARSE_ERROR, response)

    errors = parse_response_object(response.body)
    if errors is None:
        return _protocol(HTTP_ERROR, response)

    return FailureReport(
        kind="validation",
        reason=HTTP_ERROR,
        severity=Severity.VALIDATION,
        errors=normalize_error_payload(errors),
        response=response,
    )
