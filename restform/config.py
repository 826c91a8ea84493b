"""Form configuration.

A FormConfiguration is resolved once per form from three layers, lowest
precedence first: built-in defaults, the form element's own ``action`` and
``method`` attributes, and explicit overrides. The result is frozen; the
only way to change it is to resolve a new one.

Static options can also be kept in a YAML file, validated against
``schemas/form_options.schema.json`` before use.
"""

import json
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import jsonschema
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from restform.models import FieldHandler, Severity, TransportResponse
from restform.serialization import (
    PrepareData,
    SerializeData,
    default_prepare_data,
    default_serialize_data,
)

if TYPE_CHECKING:
    from restform.view import FormView

OPTIONS_SCHEMA_PATH = Path(__file__).parent / "schemas" / "form_options.schema.json"

REQUIRED_OPTIONS = ("endpoint_url", "http_method")


class ConfigurationError(ValueError):
    """Raised at initialization when form options are missing or invalid."""

    pass


class FormConfiguration(BaseModel):
    """Resolved, immutable options for one form."""

    endpoint_url: str
    http_method: str
    excluded_field_names: frozenset[str] = frozenset()
    extra_static_data: dict[str, Any] = Field(default_factory=dict)
    timeout_ms: int = Field(default=30000, gt=0)
    disable_submit_during_request: bool = True
    form_error_target: str | None = None
    field_handlers: dict[str, FieldHandler] = Field(default_factory=dict)

    # Hooks
    prepare_data: PrepareData = default_prepare_data
    serialize_data: SerializeData = default_serialize_data
    before_submit: Callable[[], Any] | None = None
    after_submit: Callable[[], Any] | None = None
    on_success: Callable[[Any], Any] | None = None
    on_after_error: Callable[[str, Severity, TransportResponse], Any] | None = None

    # Renderer overrides; None means use the view's own operation
    clear_form_errors: Callable[[], Any] | None = None
    render_form_errors: Callable[[list[str]], Any] | None = None
    clear_field_errors: Callable[[str], Any] | None = None
    render_field_errors: Callable[[str, list[str]], Any] | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("endpoint_url", "http_method")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("http_method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def resolve(
        cls,
        view: "FormView | None" = None,
        overrides: Mapping[str, Any] | None = None,
        **options: Any,
    ) -> "FormConfiguration":
        """Build a configuration from defaults, form attributes and overrides.

        Args:
            view: The form view. Its ``action``/``method`` attributes supply
                the endpoint URL and method unless overridden.
            overrides: Option overrides (e.g. loaded from an options file).
            **options: Further overrides, applied after ``overrides``.

        Returns:
            The resolved configuration.

        Raises:
            ConfigurationError: If the endpoint URL or method cannot be
                determined, or an option is invalid.
        """
        settings: dict[str, Any] = {}
        if view is not None:
            settings["endpoint_url"] = view.attribute("action")
            settings["http_method"] = view.attribute("method")
        settings.update(overrides or {})
        settings.update(options)

        missing = [
            name for name in REQUIRED_OPTIONS
            if not isinstance(settings.get(name), str) or not settings[name].strip()
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required form option(s): {', '.join(missing)}. "
                "Set them on the form element (action/method) or pass them explicitly."
            )

        try:
            return cls(**settings)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid form options: {e}") from e

    def options(self) -> dict[str, Any]:
        """Return the options as a flat dict, hooks included."""
        return {name: getattr(self, name) for name in type(self).model_fields}

    def merged(self, **overrides: Any) -> "FormConfiguration":
        """Resolve a new configuration with ``overrides`` applied on top of this one."""
        return type(self).resolve(overrides={**self.options(), **overrides})


def load_options_schema() -> dict[str, Any]:
    """Load the JSON schema for options files."""
    with open(OPTIONS_SCHEMA_PATH) as f:
        return json.load(f)


def validate_options(options: Mapping[str, Any]) -> None:
    """Validate static options against the options schema.

    Raises:
        ConfigurationError: If the options do not conform.
    """
    try:
        jsonschema.validate(dict(options), load_options_schema())
    except jsonschema.ValidationError as e:
        location = ".".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigurationError(f"Invalid options at {location}: {e.message}") from e


def load_options(path: Path | str) -> dict[str, Any]:
    """Load and validate a YAML options file.

    Args:
        path: Path to the options file.

    Returns:
        Dict of static options, ready to pass as ``overrides`` to
        FormConfiguration.resolve.

    Raises:
        ConfigurationError: If the file is not a mapping or fails validation.
    """
    with open(path) as f:
        options = yaml.safe_load(f)

    if options is None:
        return {}
    if not isinstance(options, dict):
        raise ConfigurationError(f"Options file must contain a mapping: {path}")

    validate_options(options)
    return options
