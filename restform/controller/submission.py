"""Submission controller.

Drives one form through the submission lifecycle:

    idle -> collecting -> dispatched -> succeeded | failed -> idle

The transport completion callback is the only point where a cycle is
suspended. While a request is outstanding and
``disable_submit_during_request`` is set, further submits are rejected by
an explicit in-flight guard, not just by disabling the submit controls.
"""

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any

from restform.config import FormConfiguration
from restform.errors import ErrorRouter, HTTP_ERROR, classify_failure
from restform.fields import FieldRegistry
from restform.models import (
    FailureReport,
    OutboundRequest,
    PayloadMap,
    Severity,
    SubmissionRecord,
    SubmissionState,
    SubmitResult,
    TransportResponse,
)
from restform.serialization import prepare, serialize
from restform.transport import Transport
from restform.view import FormView

logger = logging.getLogger(__name__)

# Seconds to wait before re-enabling submit controls, so error rendering
# triggered by the response can settle first
RE_ENABLE_DELAY = 0.2

CallLater = Callable[[float, Callable[[], Any]], Any]


def default_call_later(delay: float, callback: Callable[[], Any]) -> Any:
    """Schedule ``callback`` on the running event loop, or run it now if there is none."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        callback()
        return None
    return loop.call_later(delay, callback)


class SubmissionController:
    """Intercepts submits for one form and reconciles responses onto its view."""

    def __init__(
        self,
        view: FormView,
        transport: Transport,
        config: FormConfiguration,
        registry: FieldRegistry | None = None,
        call_later: CallLater | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            view: The form's UI layer.
            transport: Transport used to send submissions.
            config: Resolved form configuration.
            registry: Field registry. A default one is created if omitted.
            call_later: Scheduler for the delayed re-enable of submit
                controls, called as ``call_later(seconds, callback)``.
        """
        self.view = view
        self.transport = transport
        self.config = config
        self.registry = registry if registry is not None else FieldRegistry()
        self.router = ErrorRouter(view, config)
        self._call_later = call_later or default_call_later

        self._state = SubmissionState.IDLE
        self._in_flight = 0
        self.last_submission: SubmissionRecord | None = None

    @property
    def state(self) -> SubmissionState:
        """Current lifecycle state."""
        return self._state

    @property
    def busy(self) -> bool:
        """True while at least one request is outstanding."""
        return self._in_flight > 0

    def reconfigure(self, config: FormConfiguration | None = None, **overrides: Any) -> None:
        """Replace the configuration between submissions.

        Args:
            config: A fully resolved configuration to use as-is.
            **overrides: Options applied on top of the current configuration
                when ``config`` is not given.

        Raises:
            RuntimeError: If a request is outstanding.
            ConfigurationError: If the new options are invalid.
        """
        if self.busy:
            raise RuntimeError("Cannot reconfigure a form while a submission is outstanding")
        self.config = config if config is not None else self.config.merged(**overrides)
        self.router = ErrorRouter(self.view, self.config)

    def _transition(self, state: SubmissionState) -> None:
        logger.debug(f"Form state {self._state.value} -> {state.value}")
        self._state = state

    def collect_payload(self) -> PayloadMap:
        """Collect and prepare the payload for the current field values."""
        config = self.config
        raw = self.registry.collect(
            self.view.iter_fields(),
            excluded_field_names=config.excluded_field_names,
            field_handlers=config.field_handlers,
            extra_static_data=config.extra_static_data,
        )
        return prepare(raw, config.prepare_data)

    def submit(self) -> SubmitResult:
        """Handle a submit event.

        Returns:
            SubmitResult telling the host to suppress the native submission.
            ``accepted`` is False if the submit was rejected because a
            request is still outstanding.

        Raises:
            Exception: Anything raised by a hook or field handler while
                collecting. The form is returned to idle first.
        """
        config = self.config

        if config.disable_submit_during_request and self.busy:
            logger.info("Submit rejected: a request is already outstanding")
            return SubmitResult(accepted=False, state=self._state)

        if config.disable_submit_during_request:
            self.view.set_submit_disabled(True)
        self._in_flight += 1
        self._transition(SubmissionState.COLLECTING)

        try:
            self.router.clear()
            if config.before_submit is not None:
                config.before_submit()
            payload = self.collect_payload()
            body = serialize(payload, config.serialize_data)
        except Exception:
            self._release(config)
            raise

        request = OutboundRequest(
            method=config.http_method,
            url=config.endpoint_url,
            timeout_ms=config.timeout_ms,
            body=body,
        )
        self._transition(SubmissionState.DISPATCHED)
        logger.info(f"Submitting form to {request.method} {request.url}")

        completed = False

        def on_complete(response: TransportResponse) -> None:
            nonlocal completed
            if completed:
                logger.warning(f"Ignoring duplicate completion for {request.url}")
                return
            completed = True
            self._complete(config, payload, request, response)

        try:
            self.transport.send(request, on_complete)
        except Exception:
            if completed:
                # Raised by our own completion handling, not the transport
                raise
            logger.exception(f"Transport raised while sending to {request.url}")
            on_complete(TransportResponse(status=0, error=HTTP_ERROR))

        return SubmitResult(accepted=True, state=self._state)

    def _complete(
        self,
        config: FormConfiguration,
        payload: PayloadMap,
        request: OutboundRequest,
        response: TransportResponse,
    ) -> None:
        record: SubmissionRecord | None = None
        try:
            if config.after_submit is not None:
                config.after_submit()

            data: Any = None
            failure: FailureReport | None = None
            if response.ok:
                try:
                    data = _decode_success_body(response)
                except ValueError:
                    failure = classify_failure(response)
            else:
                failure = classify_failure(response)

            record = SubmissionRecord(
                outcome="failed" if failure else "succeeded",
                payload=payload,
                request=request,
                response=response,
                data=data,
                failure=failure,
            )

            if failure is None:
                self._transition(SubmissionState.SUCCEEDED)
                if config.on_success is not None:
                    config.on_success(data)
            else:
                self._transition(SubmissionState.FAILED)
                self._log_failure(failure, request)
                self.router.route(failure.errors)
                self._notify_after_error(config, failure)
        finally:
            if record is not None:
                self.last_submission = record
            self._release(config)

    def _release(self, config: FormConfiguration) -> None:
        self._in_flight -= 1
        if self.busy:
            self._transition(SubmissionState.DISPATCHED)
            return

        self._transition(SubmissionState.IDLE)
        if config.disable_submit_during_request:
            self._call_later(RE_ENABLE_DELAY, self._re_enable_submit)

    def _re_enable_submit(self) -> None:
        # A new submission may have started during the delay
        if not self.busy:
            self.view.set_submit_disabled(False)

    def _log_failure(self, failure: FailureReport, request: OutboundRequest) -> None:
        if failure.severity == Severity.VALIDATION:
            logger.info(
                f"Submission to {request.url} rejected with {len(failure.errors)} error key(s)"
            )
        else:
            logger.warning(
                f"Submission to {request.url} failed ({failure.kind}: {failure.reason}); "
                f"status={failure.response.status} body={failure.response.body[:500]!r}"
            )

    def _notify_after_error(self, config: FormConfiguration, failure: FailureReport) -> None:
        if config.on_after_error is None:
            return
        try:
            config.on_after_error(failure.reason, failure.severity, failure.response)
        except Exception:
            logger.exception("on_after_error hook raised; ignoring")


def _decode_success_body(response: TransportResponse) -> Any:
    """Decode a success body. 204 and empty bodies decode to None.

    Raises:
        ValueError: If the body is not valid JSON.
    """
    if response.status == 204 or not response.body.strip():
        return None
    return json.loads(response.body)
