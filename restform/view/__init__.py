"""Document/UI layer for restform.

Provides the FormView protocol the controller talks to, and a headless
HTML implementation of it.
"""

from restform.view.base import FormView
from restform.view.html import FormNotFoundError, HtmlFormView

__all__ = [
    "FormNotFoundError",
    "FormView",
    "HtmlFormView",
]
