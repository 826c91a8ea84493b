"""Field registry for building the raw payload map.

Collection is purely mechanical: it reads whatever the view reports as
submittable, drops excluded names, and layers handler and static values
on top. Precedence is static data > handler data > document value.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from restform.models import FieldHandler, PayloadMap


class FieldRegistry:
    """Collects field values into a fresh PayloadMap per submission."""

    def collect(
        self,
        form_fields: Iterable[tuple[str, Any]],
        excluded_field_names: Iterable[str] = (),
        field_handlers: Mapping[str, FieldHandler] | None = None,
        extra_static_data: Mapping[str, Any] | None = None,
    ) -> PayloadMap:
        """Build the raw payload map for one submission.

        Args:
            form_fields: ``(name, value)`` pairs as enumerated by the view.
                Repeated names keep the last value.
            excluded_field_names: Names whose document value is never included.
            field_handlers: Per-field handlers; those exposing ``data`` override
                the document value.
            extra_static_data: Hardcoded values merged in last.

        Returns:
            A new dict mapping field name to value.
        """
        excluded = set(excluded_field_names)
        data: PayloadMap = {}

        for name, value in form_fields:
            if name in excluded:
                continue
            data[name] = value

        for name, handler in (field_handlers or {}).items():
            if handler.data is not None:
                data[name] = handler.data()

        data.update(extra_static_data or {})
        return data
