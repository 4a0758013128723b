"""
Exception hierarchy.

``ProgrammerError`` signals a misuse of the API and is never caught by the
library. ``ViewNotFound`` is the recoverable result of an identifier
lookup that matched nothing. ``BackendInitError`` is raised when a
terminal driver cannot be set up.
"""


class TermViewsError(Exception):
    """Base class for all errors raised by term_views."""


class ProgrammerError(TermViewsError, ValueError):
    """An API was called with arguments that can never be valid."""


class ViewNotFound(TermViewsError, LookupError):
    """No view in the tree matches the given selector."""

    def __init__(self, selector):
        super().__init__(f"no view matches {selector!r}")
        self.selector = selector


class BackendInitError(TermViewsError, RuntimeError):
    """The terminal driver could not be initialized."""
