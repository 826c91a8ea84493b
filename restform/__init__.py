"""restform: submission controller for REST-backed HTML forms."""

__version__ = "0.1.0"

# These imports must come after __version__ so the CLI can import it without a cycle
from restform.config import ConfigurationError, FormConfiguration, load_options
from restform.controller import SubmissionController
from restform.errors import ErrorRouter, classify_failure
from restform.factory import bind_all, bind_form
from restform.fields import FieldRegistry
from restform.models import (
    FORM_ERRORS_KEY,
    FieldHandler,
    Severity,
    SubmissionState,
    SubmitResult,
    TransportResponse,
)
from restform.transport import RequestsTransport, Transport
from restform.view import FormView, HtmlFormView

__all__ = [
    "__version__",
    # Configuration
    "ConfigurationError",
    "FormConfiguration",
    "load_options",
    # Lifecycle
    "ErrorRouter",
    "FieldRegistry",
    "SubmissionController",
    "bind_all",
    "bind_form",
    "classify_failure",
    # Models
    "FORM_ERRORS_KEY",
    "FieldHandler",
    "Severity",
    "SubmissionState",
    "SubmitResult",
    "TransportResponse",
    # Collaborators
    "FormView",
    "HtmlFormView",
    "RequestsTransport",
    "Transport",
]
