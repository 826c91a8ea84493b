"""Submission lifecycle controller."""

from restform.controller.submission import (
    RE_ENABLE_DELAY,
    CallLater,
    SubmissionController,
    default_call_later,
)

__all__ = [
    "RE_ENABLE_DELAY",
    "CallLater",
    "SubmissionController",
    "default_call_later",
]
