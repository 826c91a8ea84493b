"""Tests for the BeautifulSoup-backed form view."""

import pytest

from restform.view import FormNotFoundError, FormView, HtmlFormView

FULL_FORM_HTML = """
<form id="profile" action="/api/profile" method="put">
  <input type="hidden" name="id" value="7">
  <input type="text" name="nickname">
  <input type="text" name="locked" value="x" disabled>
  <fieldset disabled><input type="text" name="in_disabled_fieldset" value="y"></fieldset>
  <input type="checkbox" name="newsletter" checked>
  <input type="checkbox" name="terms" value="yes">
  <input type="radio" name="plan" value="free">
  <input type="radio" name="plan" value="pro" checked>
  <select name="country">
    <option value="us">US</option>
    <option value="ca">Canada</option>
  </select>
  <select name="langs" multiple>
    <option value="en" selected>English</option>
    <option selected>French</option>
    <option value="de">German</option>
  </select>
  <textarea name="bio">line1
line2</textarea>
  <input type="file" name="avatar">
  <input type="submit" name="save" value="Save">
  <input type="reset" name="reset">
  <button type="button" name="cancel">Cancel</button>
</form>
"""


@pytest.fixture
def profile_view() -> HtmlFormView:
    """A view over a form exercising every control type."""
    return HtmlFormView.from_html(FULL_FORM_HTML)


class TestFieldEnumeration:
    """Tests for successful-control enumeration."""

    def test_view_conforms_to_protocol(self, profile_view: HtmlFormView) -> None:
        assert isinstance(profile_view, FormView)

    def test_iter_fields(self, profile_view: HtmlFormView) -> None:
        assert list(profile_view.iter_fields()) == [
            ("id", "7"),
            ("nickname", ""),
            ("newsletter", "on"),
            ("plan", "pro"),
            ("country", "us"),
            ("langs", "en"),
            ("langs", "French"),
            ("bio", "line1\r\nline2"),
        ]

    def test_field_names_include_every_named_element(self, profile_view: HtmlFormView) -> None:
        names = profile_view.field_names()
        assert names[:3] == ["id", "nickname", "locked"]
        assert "save" in names
        assert "cancel" in names
        assert names.count("plan") == 1

    def test_attribute(self, profile_view: HtmlFormView) -> None:
        assert profile_view.attribute("action") == "/api/profile"
        assert profile_view.attribute("method") == "put"
        assert profile_view.attribute("enctype") is None

    def test_set_value(self, profile_view: HtmlFormView) -> None:
        profile_view.set_value("nickname", "zed")
        profile_view.set_value("terms", "yes")
        profile_view.set_value("plan", "free")
        profile_view.set_value("country", "ca")
        profile_view.set_value("bio", "hello")

        fields = dict(profile_view.iter_fields())
        assert fields["nickname"] == "zed"
        assert fields["terms"] == "yes"
        assert fields["plan"] == "free"
        assert fields["country"] == "ca"
        assert fields["bio"] == "hello"


class TestFormLookup:
    """Tests for locating the form."""

    def test_form_by_id(self, login_html: str) -> None:
        view = HtmlFormView.from_html(login_html, form_id="login")
        assert view.attribute("action") == "/api/login"

    def test_missing_form_id(self, login_html: str) -> None:
        with pytest.raises(FormNotFoundError, match="nope"):
            HtmlFormView.from_html(login_html, form_id="nope")

    def test_no_form(self) -> None:
        with pytest.raises(FormNotFoundError):
            HtmlFormView.from_html("<p>nothing</p>")


class TestSubmitControls:
    """Tests for disabling submit controls."""

    def test_disable_and_enable(self, login_view: HtmlFormView) -> None:
        button = login_view.submit_controls()[0]

        login_view.set_submit_disabled(True)
        assert button.has_attr("disabled")

        login_view.set_submit_disabled(False)
        assert not button.has_attr("disabled")


class TestErrorRendering:
    """Tests for rendering and clearing errors."""

    def test_render_field_errors(self, login_view: HtmlFormView) -> None:
        login_view.render_field_errors("password", ["too short", "too simple"])

        field = login_view.form.find(attrs={"name": "password"})
        node = field.find_next_sibling()
        assert node.name == "span"
        assert node["class"] == ["help-inline", "ajax-error", "alert-error"]
        assert node.get_text() == "too shorttoo simple"
        assert len(node.find_all("br")) == 1
        group = field.find_parent(class_="control-group")
        assert "error" in group["class"]

    def test_clear_field_errors(self, login_view: HtmlFormView) -> None:
        login_view.render_field_errors("password", ["too short"])
        login_view.clear_field_errors("password")

        assert login_view.form.select(".ajax-error") == []
        group = login_view.form.find(attrs={"name": "password"}).find_parent(class_="control-group")
        assert group["class"] == ["control-group"]

    def test_clear_field_errors_outside_control_group(self) -> None:
        view = HtmlFormView.from_html('<form action="/x" method="post"><input name="q"></form>')
        view.render_field_errors("q", ["bad"])
        assert len(view.form.select(".ajax-error")) == 1

        view.clear_field_errors("q")
        assert view.form.select(".ajax-error") == []

    def test_render_form_errors_prepends_to_form(self, login_view: HtmlFormView) -> None:
        login_view.render_form_errors(["Invalid credentials"])

        first = login_view.form.find(True)
        assert first["class"] == ["form-error", "alert", "alert-error"]
        assert "Invalid credentials" in first.get_text()
        assert first.find("button", attrs={"data-dismiss": "alert"}) is not None

    def test_render_form_errors_to_target(self, login_view: HtmlFormView) -> None:
        login_view.render_form_errors(["Invalid credentials"], target="#messages")

        messages = login_view.document.select_one("#messages")
        assert len(messages.select(".form-error")) == 1
        assert login_view.form.select(".form-error") == []

    def test_missing_target_falls_back_to_form(self, login_view: HtmlFormView) -> None:
        login_view.render_form_errors(["x"], target="#nowhere")
        assert len(login_view.form.select(".form-error")) == 1

    def test_clear_form_errors(self, login_view: HtmlFormView) -> None:
        login_view.render_form_errors(["a"])
        login_view.render_form_errors(["b"], target="#messages")
        login_view.clear_form_errors(target="#messages")

        assert login_view.document.select(".form-error") == []

    def test_clear_is_idempotent(self, login_view: HtmlFormView) -> None:
        login_view.render_field_errors("password", ["too short"])
        login_view.render_form_errors(["nope"])

        login_view.clear_form_errors()
        login_view.clear_field_errors("password")
        once = login_view.to_html()

        login_view.clear_form_errors()
        login_view.clear_field_errors("password")
        assert login_view.to_html() == once
