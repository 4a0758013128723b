"""Shared fixtures."""

from unittest.mock import MagicMock

import pytest

from term_views import EventResult, Printer, Theme, Vec2, View
from term_views.backend import Backend


class RecordingView(View):
    """A view that records what it is asked and answers as configured."""

    def __init__(self, size=(3, 1), focusable=True, consume=True):
        self.size = Vec2.of(size)
        self.focusable = focusable
        self.consume = consume
        self.events = []
        self.focus_calls = []
        self.layouts = []
        self.printers = []

    def required_size(self, constraint):
        return self.size.min(constraint)

    def layout(self, size):
        self.layouts.append(size)

    def draw(self, printer):
        self.printers.append(printer)

    def on_event(self, event):
        self.events.append(event)
        return EventResult.consume() if self.consume else EventResult.ignored()

    def take_focus(self, source):
        self.focus_calls.append(source)
        return self.focusable


@pytest.fixture
def make_view():
    """Factory for RecordingView instances."""
    return RecordingView


@pytest.fixture
def backend():
    """A mocked backend with an 80x24 screen."""
    backend = MagicMock(spec=Backend)
    backend.screen_size.return_value = (80, 24)
    backend.has_colors.return_value = True
    return backend


@pytest.fixture
def printer(backend):
    """A printer covering the whole mocked screen."""
    return Printer(backend, Theme(), size=(80, 24))
