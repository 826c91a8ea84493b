"""Factory functions for wiring controllers to forms.

``bind_form`` is the one-call setup for a single form; ``bind_all`` binds
every form in a document that opts in with ``data-form-handler="rest"``.
"""

from collections.abc import Mapping
from typing import Any

from bs4 import BeautifulSoup

from restform.config import FormConfiguration
from restform.controller import CallLater, SubmissionController
from restform.transport import RequestsTransport, Transport
from restform.view import FormView, HtmlFormView

REST_HANDLER_ATTRIBUTE = "data-form-handler"
REST_HANDLER_VALUE = "rest"


def bind_form(
    view: FormView,
    transport: Transport | None = None,
    overrides: Mapping[str, Any] | None = None,
    call_later: CallLater | None = None,
    **options: Any,
) -> SubmissionController:
    """Create a controller for one form.

    Args:
        view: The form view.
        transport: Transport to send with. Defaults to RequestsTransport.
        overrides: Option overrides (e.g. from an options file).
        call_later: Scheduler for re-enabling submit controls.
        **options: Further option overrides.

    Returns:
        A controller in the idle state.

    Raises:
        ConfigurationError: If the endpoint or method cannot be resolved.
    """
    config = FormConfiguration.resolve(view, overrides, **options)
    return SubmissionController(
        view,
        transport if transport is not None else RequestsTransport(),
        config,
        call_later=call_later,
    )


def bind_all(
    document: BeautifulSoup | str,
    transport: Transport | None = None,
    overrides: Mapping[str, Any] | None = None,
    **options: Any,
) -> list[SubmissionController]:
    """Bind every ``<form data-form-handler="rest">`` in a document.

    All controllers share one transport and the same option overrides.

    Returns:
        Controllers in document order.
    """
    if isinstance(document, str):
        document = BeautifulSoup(document, "html.parser")
    if transport is None:
        transport = RequestsTransport()

    controllers = []
    for form in document.find_all("form", attrs={REST_HANDLER_ATTRIBUTE: REST_HANDLER_VALUE}):
        view = HtmlFormView(form, document)
        controllers.append(bind_form(view, transport, overrides, **options))
    return controllers
