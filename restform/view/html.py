"""Headless form view over an HTML document.

Wraps a ``<form>`` element parsed with BeautifulSoup and implements the
FormView operations against it, using Bootstrap 2 markup conventions:

- a field's enclosing ``.control-group`` gets the ``error`` class
- inline errors are ``<span class="help-inline ajax-error alert-error">``
  inserted right after the field
- form-wide errors are a dismissible ``<div class="form-error alert alert-error">``
  prepended to the error target (or the form)

Field enumeration follows the browser's "successful controls" rules as
jQuery's ``serializeArray`` applies them.
"""

import re
from collections.abc import Iterator

from bs4 import BeautifulSoup, Tag


class FormNotFoundError(Exception):
    """Raised when the requested form is not present in the document."""

    def __init__(self, form_id: str | None) -> None:
        self.form_id = form_id
        if form_id:
            super().__init__(f"No <form> with id {form_id!r} in document")
        else:
            super().__init__("No <form> element in document")


SUBMITTABLE_TAGS = ["input", "select", "textarea"]
NON_SUBMITTABLE_TYPES = {"submit", "button", "image", "reset", "file"}
CHECKABLE_TYPES = {"checkbox", "radio"}

FORM_ERROR_CLASSES = ["form-error", "alert", "alert-error"]
FIELD_ERROR_CLASSES = ["help-inline", "ajax-error", "alert-error"]

_LINE_BREAKS = re.compile(r"\r?\n")


def _normalize(value: str) -> str:
    return _LINE_BREAKS.sub("\r\n", value)


def _add_class(tag: Tag, name: str) -> None:
    classes = list(tag.get("class", []))
    if name not in classes:
        tag["class"] = classes + [name]


def _remove_class(tag: Tag, name: str) -> None:
    classes = [c for c in tag.get("class", []) if c != name]
    if classes:
        tag["class"] = classes
    elif tag.has_attr("class"):
        del tag["class"]


def _has_class(tag: object, name: str) -> bool:
    return isinstance(tag, Tag) and name in tag.get("class", [])


class HtmlFormView:
    """FormView implementation backed by a BeautifulSoup document."""

    def __init__(self, form: Tag, document: BeautifulSoup | None = None) -> None:
        """Initialize the view.

        Args:
            form: The ``<form>`` element to wrap.
            document: The document the form belongs to. Used to resolve the
                form-wide error target and to create new nodes. Defaults to
                the form's root.
        """
        self.form = form
        if document is None:
            root: Tag = form
            for parent in form.parents:
                root = parent
            document = root if isinstance(root, BeautifulSoup) else None
        self.document = document
        self._factory = document if document is not None else BeautifulSoup("", "html.parser")

    @classmethod
    def from_html(cls, html: str, form_id: str | None = None) -> "HtmlFormView":
        """Parse a document and wrap one of its forms.

        Args:
            html: The HTML document.
            form_id: The ``id`` of the form to wrap. Defaults to the first form.

        Raises:
            FormNotFoundError: If no matching form exists.
        """
        document = BeautifulSoup(html, "html.parser")
        if form_id:
            form = document.find("form", id=form_id)
        else:
            form = document.find("form")
        if form is None:
            raise FormNotFoundError(form_id)
        return cls(form, document)

    def to_html(self) -> str:
        """Render the document (or the bare form) back to HTML."""
        if self.document is not None:
            return str(self.document)
        return str(self.form)

    # -- field enumeration -------------------------------------------------

    def _is_disabled(self, element: Tag) -> bool:
        if element.has_attr("disabled"):
            return True
        for fieldset in element.find_parents("fieldset"):
            if fieldset.has_attr("disabled"):
                return True
        return False

    def _select_values(self, select: Tag) -> list[str]:
        options = [o for o in select.find_all("option") if not o.has_attr("disabled")]
        selected = [o for o in options if o.has_attr("selected")]
        if not selected and not select.has_attr("multiple") and options:
            selected = options[:1]
        return [o.get("value", o.get_text()) for o in selected]

    def iter_fields(self) -> Iterator[tuple[str, str]]:
        """Yield (name, value) pairs for every field a browser would submit."""
        for element in self.form.find_all(SUBMITTABLE_TAGS):
            name = element.get("name")
            if not name or self._is_disabled(element):
                continue

            if element.name == "select":
                for value in self._select_values(element):
                    yield name, _normalize(value)
                continue

            if element.name == "textarea":
                yield name, _normalize(element.get_text())
                continue

            input_type = (element.get("type") or "text").lower()
            if input_type in NON_SUBMITTABLE_TYPES:
                continue
            if input_type in CHECKABLE_TYPES:
                if element.has_attr("checked"):
                    yield name, _normalize(element.get("value", "on"))
                continue
            yield name, _normalize(element.get("value", ""))

    def field_names(self) -> list[str]:
        """Return the distinct names of all named elements, in document order."""
        names: list[str] = []
        for element in self.form.find_all(attrs={"name": True}):
            if element["name"] not in names:
                names.append(element["name"])
        return names

    def attribute(self, name: str) -> str | None:
        """Return an attribute of the form element, or None if it is absent."""
        return self.form.get(name)

    def set_value(self, name: str, value: str) -> None:
        """Set the current value of a field, as a user typing or clicking would."""
        for element in self.form.find_all(attrs={"name": name}):
            if element.name == "textarea":
                element.string = value
            elif element.name == "select":
                for option in element.find_all("option"):
                    if option.get("value", option.get_text()) == value:
                        option["selected"] = "selected"
                    elif option.has_attr("selected"):
                        del option["selected"]
            elif element.name == "input":
                input_type = (element.get("type") or "text").lower()
                if input_type in CHECKABLE_TYPES:
                    if element.get("value", "on") == value:
                        element["checked"] = "checked"
                    elif element.has_attr("checked"):
                        del element["checked"]
                else:
                    element["value"] = value

    # -- submit controls ---------------------------------------------------

    def submit_controls(self) -> list[Tag]:
        """Return the form's submit controls."""
        return self.form.find_all(attrs={"type": "submit"})

    def set_submit_disabled(self, disabled: bool) -> None:
        """Disable or re-enable every submit control."""
        for control in self.submit_controls():
            if disabled:
                control["disabled"] = "disabled"
            elif control.has_attr("disabled"):
                del control["disabled"]

    # -- error rendering ---------------------------------------------------

    def _error_target(self, target: str | None) -> Tag:
        if target and self.document is not None:
            anchor = self.document.select_one(target)
            if anchor is not None:
                return anchor
        return self.form

    def clear_form_errors(self, target: str | None = None) -> None:
        scopes = [self.form]
        anchor = self._error_target(target)
        if anchor is not self.form:
            scopes.append(anchor)
        for scope in scopes:
            for block in scope.select(".form-error.alert-error"):
                block.decompose()

    def render_form_errors(self, errors: list[str], target: str | None = None) -> None:
        block = self._factory.new_tag("div", attrs={"class": FORM_ERROR_CLASSES})
        close = self._factory.new_tag(
            "button",
            attrs={"type": "button", "class": "close", "data-dismiss": "alert"},
        )
        close.string = "×"
        block.append(close)
        self._append_messages(block, errors)
        self._error_target(target).insert(0, block)

    def _fields(self, name: str) -> list[Tag]:
        return self.form.find_all(attrs={"name": name})

    def clear_field_errors(self, name: str) -> None:
        for field in self._fields(name):
            for group in field.find_parents(class_="control-group"):
                _remove_class(group, "error")
                for node in group.select(".alert-error"):
                    node.decompose()
            # Fields outside a control group still carry their inline node
            sibling = field.find_next_sibling()
            while _has_class(sibling, "ajax-error"):
                following = sibling.find_next_sibling()
                sibling.decompose()
                sibling = following

    def render_field_errors(self, name: str, errors: list[str]) -> None:
        for field in self._fields(name):
            for group in field.find_parents(class_="control-group"):
                _add_class(group, "error")
            node = self._factory.new_tag("span", attrs={"class": FIELD_ERROR_CLASSES})
            self._append_messages(node, errors)
            field.insert_after(node)

    def _append_messages(self, container: Tag, messages: list[str]) -> None:
        for index, message in enumerate(messages):
            if index:
                container.append(self._factory.new_tag("br"))
            container.append(message)
