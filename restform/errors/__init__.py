"""Failure classification, error routing and exception types."""

from restform.config import ConfigurationError
from restform.errors.classifier import (
    ABORT,
    CONNECTION_LOST,
    HTTP_ERROR,
    PARSE_ERROR,
    TIMEOUT,
    classify_failure,
    normalize_error_payload,
)
from restform.errors.exceptions import (
    ConnectivityError,
    ProtocolError,
    SubmissionError,
    SubmissionValidationError,
    error_for,
)
from restform.errors.router import ErrorRouter

__all__ = [
    # Classification
    "ABORT",
    "CONNECTION_LOST",
    "HTTP_ERROR",
    "PARSE_ERROR",
    "TIMEOUT",
    "classify_failure",
    "normalize_error_payload",
    # Routing
    "ErrorRouter",
    # Exceptions
    "ConfigurationError",
    "ConnectivityError",
    "ProtocolError",
    "SubmissionError",
    "SubmissionValidationError",
    "error_for",
]
