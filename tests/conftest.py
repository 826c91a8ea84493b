"""Pytest configuration and shared fixtures."""

from collections.abc import Callable, Iterator
from typing import Any

import pytest

from restform.models import OutboundRequest, TransportResponse
from restform.transport import CompletionCallback
from restform.view import HtmlFormView

LOGIN_FORM_HTML = """
<html>
  <body>
    <div id="messages"></div>
    <form id="login" action="/api/login" method="post" data-form-handler="rest">
      <div class="control-group">
        <label for="username">Username</label>
        <div class="controls">
          <input type="text" id="username" name="username" value="abc">
        </div>
      </div>
      <div class="control-group">
        <label for="password">Password</label>
        <div class="controls">
          <input type="password" id="password" name="password" value="">
        </div>
      </div>
      <button type="submit" name="go">Sign in</button>
    </form>
  </body>
</html>
"""


class RecordingView:
    """FormView that records every UI operation instead of rendering."""

    def __init__(
        self,
        fields: list[tuple[str, str]] | None = None,
        attributes: dict[str, str] | None = None,
    ) -> None:
        self.fields = list(fields or [])
        self.attributes = dict(attributes or {})
        self.calls: list[tuple[Any, ...]] = []
        self.submit_disabled = False

    def iter_fields(self) -> Iterator[tuple[str, str]]:
        return iter(self.fields)

    def field_names(self) -> list[str]:
        names: list[str] = []
        for name, _ in self.fields:
            if name not in names:
                names.append(name)
        return names

    def attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def set_submit_disabled(self, disabled: bool) -> None:
        self.submit_disabled = disabled
        self.calls.append(("set_submit_disabled", disabled))

    def clear_form_errors(self, target: str | None = None) -> None:
        self.calls.append(("clear_form_errors", target))

    def render_form_errors(self, errors: list[str], target: str | None = None) -> None:
        self.calls.append(("render_form_errors", errors, target))

    def clear_field_errors(self, name: str) -> None:
        self.calls.append(("clear_field_errors", name))

    def render_field_errors(self, name: str, errors: list[str]) -> None:
        self.calls.append(("render_field_errors", name, errors))

    def calls_named(self, name: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == name]


class DeferredTransport:
    """Transport that holds requests until the test completes them."""

    def __init__(self) -> None:
        self.requests: list[OutboundRequest] = []
        self._pending: list[CompletionCallback] = []

    def send(self, request: OutboundRequest, on_complete: CompletionCallback) -> None:
        self.requests.append(request)
        self._pending.append(on_complete)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def complete(self, status: int, body: str = "", error: str | None = None) -> None:
        """Complete the oldest outstanding request."""
        on_complete = self._pending.pop(0)
        on_complete(TransportResponse(status=status, body=body, error=error))


class RecordingScheduler:
    """call_later replacement that queues callbacks until flushed."""

    def __init__(self) -> None:
        self.scheduled: list[tuple[float, Callable[[], Any]]] = []

    def __call__(self, delay: float, callback: Callable[[], Any]) -> None:
        self.scheduled.append((delay, callback))

    def flush(self) -> None:
        scheduled, self.scheduled = self.scheduled, []
        for _, callback in scheduled:
            callback()


@pytest.fixture
def login_html() -> str:
    """Return a Bootstrap login form document."""
    return LOGIN_FORM_HTML


@pytest.fixture
def login_view(login_html: str) -> HtmlFormView:
    """Return a view over the login form."""
    return HtmlFormView.from_html(login_html, form_id="login")


@pytest.fixture
def recording_view() -> RecordingView:
    """Return a recording view with username/password fields."""
    return RecordingView(
        fields=[("username", "abc"), ("password", "")],
        attributes={"action": "/api/login", "method": "post"},
    )


@pytest.fixture
def transport() -> DeferredTransport:
    """Return a transport that completes only when told to."""
    return DeferredTransport()


@pytest.fixture
def scheduler() -> RecordingScheduler:
    """Return a scheduler that queues delayed callbacks."""
    return RecordingScheduler()
