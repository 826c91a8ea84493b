"""Exception types for restform."""

from restform.models import FailureReport


class SubmissionError(Exception):
    """Base class for classified submission failures.

    These are recovered locally by the controller; they are never raised out
    of a completed cycle but are available for callers that prefer to raise.
    """

    kind = "submission"

    def __init__(self, report: FailureReport) -> None:
        self.report = report
        super().__init__(f"{self.kind} failure ({report.reason}): {report.errors}")


class SubmissionValidationError(SubmissionError):
    """The endpoint rejected specific field or form content."""

    kind = "validation"


class ConnectivityError(SubmissionError):
    """No network path to the endpoint."""

    kind = "connectivity"


class ProtocolError(SubmissionError):
    """Malformed response, timeout, aborted request or other transport error."""

    kind = "protocol"


_BY_KIND: dict[str, type[SubmissionError]] = {
    "validation": SubmissionValidationError,
    "connectivity": ConnectivityError,
    "protocol": ProtocolError,
}


def error_for(report: FailureReport) -> SubmissionError:
    """Build the exception matching a failure report's kind."""
    return _BY_KIND[report.kind](report)
