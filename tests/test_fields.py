"""Tests for field collection."""

import pytest

from restform.fields import FieldRegistry
from restform.models import FieldHandler


@pytest.fixture
def registry() -> FieldRegistry:
    """Create a field registry."""
    return FieldRegistry()


class TestFieldRegistry:
    """Tests for FieldRegistry.collect."""

    def test_collects_every_field(self, registry: FieldRegistry) -> None:
        """Test that each field contributes its current value."""
        data = registry.collect([("username", "abc"), ("password", "")])
        assert data == {"username": "abc", "password": ""}

    def test_excluded_field_is_dropped(self, registry: FieldRegistry) -> None:
        """Test that only the excluded name is left out."""
        data = registry.collect(
            [("username", "abc"), ("password", "secret"), ("csrf", "tok")],
            excluded_field_names={"csrf"},
        )
        assert data == {"username": "abc", "password": "secret"}

    def test_non_empty_exclusions_keep_other_fields(self, registry: FieldRegistry) -> None:
        """Test that a non-empty exclusion list does not drop unrelated fields."""
        data = registry.collect([("a", "1"), ("b", "2")], excluded_field_names=["zzz"])
        assert data == {"a": "1", "b": "2"}

    def test_handler_data_overrides_document_value(self, registry: FieldRegistry) -> None:
        """Test that a data handler replaces the document value."""
        handlers = {"password": FieldHandler(data=lambda: "from-handler")}
        data = registry.collect([("password", "typed")], field_handlers=handlers)
        assert data["password"] == "from-handler"

    def test_handler_data_adds_missing_field(self, registry: FieldRegistry) -> None:
        """Test that handlers contribute fields that are not in the document."""
        handlers = {"rating": FieldHandler(data=lambda: 4)}
        data = registry.collect([], field_handlers=handlers)
        assert data == {"rating": 4}

    def test_handler_without_data_does_not_touch_value(self, registry: FieldRegistry) -> None:
        """Test that clear/error-only handlers leave the value alone."""
        handlers = {"password": FieldHandler(clear=lambda: None)}
        data = registry.collect([("password", "typed")], field_handlers=handlers)
        assert data == {"password": "typed"}

    def test_handler_data_applies_to_excluded_field(self, registry: FieldRegistry) -> None:
        """Test that exclusion only affects the document value."""
        handlers = {"token": FieldHandler(data=lambda: "computed")}
        data = registry.collect(
            [("token", "raw")], excluded_field_names={"token"}, field_handlers=handlers
        )
        assert data == {"token": "computed"}

    def test_static_data_has_highest_precedence(self, registry: FieldRegistry) -> None:
        """Test precedence: static > handler > document."""
        handlers = {"role": FieldHandler(data=lambda: "handler")}
        data = registry.collect(
            [("role", "document"), ("name", "x")],
            field_handlers=handlers,
            extra_static_data={"role": "static", "source": "web"},
        )
        assert data == {"role": "static", "name": "x", "source": "web"}

    def test_repeated_names_keep_last_value(self, registry: FieldRegistry) -> None:
        """Test that repeated names behave like object assignment."""
        data = registry.collect([("tags", "a"), ("tags", "b")])
        assert data == {"tags": "b"}

    def test_returns_fresh_map(self, registry: FieldRegistry) -> None:
        """Test that static data is copied, not reused."""
        static = {"source": "web"}
        first = registry.collect([], extra_static_data=static)
        first["source"] = "changed"
        second = registry.collect([], extra_static_data=static)
        assert second == {"source": "web"}
        assert static == {"source": "web"}
