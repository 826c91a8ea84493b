"""Field collection for form submissions."""

from restform.fields.registry import FieldRegistry

__all__ = ["FieldRegistry"]
