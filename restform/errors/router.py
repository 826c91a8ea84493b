"""Error router for dispatching error payloads to renderers.

Routes each key of an error payload to exactly one renderer:

- ``__all__`` -> the form-wide renderer
- a key with a field handler exposing ``error`` -> that handler
- any other key -> the default per-field renderer

Also owns the inverse operation, clearing every rendered error before a
new submission.
"""

import logging
from collections.abc import Iterable
from functools import partial
from typing import Any

from restform.config import FormConfiguration
from restform.errors.classifier import normalize_error_payload
from restform.models import FORM_ERRORS_KEY
from restform.view import FormView

logger = logging.getLogger(__name__)


class ErrorRouter:
    """Dispatches error payloads to form-wide, handler or default field renderers."""

    def __init__(self, view: FormView, config: FormConfiguration) -> None:
        """Initialize the router.

        Args:
            view: The form view supplying the default renderers.
            config: Form configuration; its field handlers and renderer
                overrides take priority over the view's operations.
        """
        self.view = view
        self.config = config

        self._clear_form = config.clear_form_errors or partial(
            view.clear_form_errors, target=config.form_error_target
        )
        self._render_form = config.render_form_errors or partial(
            view.render_form_errors, target=config.form_error_target
        )
        self._clear_field = config.clear_field_errors or view.clear_field_errors
        self._render_field = config.render_field_errors or view.render_field_errors

    def route(self, errors: dict[str, Any]) -> None:
        """Render every entry of an error payload.

        Args:
            errors: Mapping of field name (or ``__all__``) to messages.
        """
        for key, messages in normalize_error_payload(errors).items():
            if key == FORM_ERRORS_KEY:
                logger.debug(f"Rendering {len(messages)} form-wide error(s)")
                self._render_form(messages)
                continue

            handler = self.config.field_handlers.get(key)
            if handler is not None and handler.error is not None:
                logger.debug(f"Rendering errors for {key!r} with custom handler")
                handler.error(messages)
            else:
                logger.debug(f"Rendering errors for {key!r}")
                self._render_field(key, messages)

    def clear(self, field_names: Iterable[str] | None = None) -> None:
        """Remove all previously rendered errors.

        Args:
            field_names: Fields to clear. Defaults to every named element
                in the form.
        """
        self._clear_form()

        names = self.view.field_names() if field_names is None else field_names
        for name in names:
            handler = self.config.field_handlers.get(name)
            if handler is not None and handler.clear is not None:
                handler.clear()
            else:
                self._clear_field(name)
