"""Form view protocol.

Defines the UI operations the submission controller needs from the
document layer. The controller never touches markup directly; everything
goes through a view that conforms to this protocol.
"""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable


@runtime_checkable
class FormView(Protocol):
    """Protocol for the document/UI layer wrapped around one form."""

    def iter_fields(self) -> Iterator[tuple[str, str]]:
        """Yield ``(name, value)`` for every field that would be submitted.

        A name may repeat (checkbox groups, multi-selects).
        """
        ...

    def field_names(self) -> list[str]:
        """Return the names of every named element in the form, in document order."""
        ...

    def attribute(self, name: str) -> str | None:
        """Return an attribute of the form element itself (e.g. "action")."""
        ...

    def set_submit_disabled(self, disabled: bool) -> None:
        """Disable or re-enable the form's submit controls."""
        ...

    def clear_form_errors(self, target: str | None = None) -> None:
        """Remove every form-wide error block from the form and ``target``."""
        ...

    def render_form_errors(self, errors: list[str], target: str | None = None) -> None:
        """Prepend a form-wide error block to ``target`` (or the form itself).

        Args:
            errors: Messages to display.
            target: Optional selector for the anchor element.
        """
        ...

    def clear_field_errors(self, name: str) -> None:
        """Remove the errored marker and inline error nodes for a field."""
        ...

    def render_field_errors(self, name: str, errors: list[str]) -> None:
        """Mark a field's group as errored and insert an inline error node after it."""
        ...
