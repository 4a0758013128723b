"""Tests for the Controller class."""

import pytest
from unittest.mock import Mock

from term_views import (
    Char, ColorStyle, Controller, EventResult, Exit, IdView, Refresh, Settings,
    Vec2, View, ViewNotFound, WindowResize,
)


class QuitView(View):
    """Consumes every event with a callback that quits."""

    def __init__(self):
        self.seen = []

    def draw(self, printer):
        pass

    def on_event(self, event):
        self.seen.append(event)
        return EventResult.with_cb(lambda root: root.quit())


@pytest.fixture
def controller(backend):
    return Controller(backend)


class TestController:
    """Tests for the Controller class."""

    def test_initialization_registers_theme(self, backend):
        """Test every color style is registered and the refresh rate set."""
        Controller(backend, settings=Settings(fps=10))
        assert backend.register_style.call_count == len(ColorStyle)
        backend.set_refresh_rate.assert_called_once_with(10)

    def test_no_colors_skips_theme(self, backend):
        """Test styles are not registered without color support."""
        backend.has_colors.return_value = False
        Controller(backend)
        backend.register_style.assert_not_called()

    def test_step_routes_and_runs_callback(self, controller, backend):
        """Test the callback of a consumed event runs on the controller."""
        view = QuitView()
        controller.add_fullscreen_layer(view)
        controller.refresh_layout()
        backend.poll_event.return_value = Char('q')

        controller.step()

        assert view.seen == [Char('q')]
        assert not controller.is_running()
        backend.refresh.assert_not_called()

    def test_step_draws(self, controller, backend, make_view):
        """Test a step lays out and draws the screen."""
        view = make_view()
        controller.add_layer(view)
        backend.poll_event.return_value = Char('a')

        controller.step()

        assert view.layouts
        assert view.printers
        backend.refresh.assert_called_once()

    def test_exit_quits_without_routing(self, controller, backend, make_view):
        """Test an Exit event stops the controller."""
        view = make_view()
        controller.add_fullscreen_layer(view)
        backend.poll_event.return_value = Exit()

        controller.step()

        assert not controller.is_running()
        assert view.events == []

    def test_resize_clears_screen(self, controller, backend):
        """Test a resize clears before redrawing."""
        backend.poll_event.return_value = WindowResize()
        controller.step()
        backend.clear.assert_called_once()
        backend.refresh.assert_called_once()

    def test_global_callback(self, controller):
        """Test global callbacks run for events no view consumes."""
        fn = Mock()
        controller.add_global_callback(Char('g'), fn)
        controller.on_event(Char('g'))
        fn.assert_called_once_with(controller)

    def test_global_callback_on_refresh(self, controller, backend):
        """Test refresh ticks reach global callbacks."""
        fn = Mock()
        controller.add_global_callback(Refresh(), fn)
        backend.poll_event.return_value = Refresh()
        controller.step()
        fn.assert_called_once_with(controller)

    def test_global_callback_skipped_when_consumed(self, controller):
        """Test a consuming view hides the event from global callbacks."""
        fn = Mock()
        controller.add_global_callback(Char('g'), fn)
        controller.add_fullscreen_layer(QuitView())
        controller.refresh_layout()
        controller.on_event(Char('g'))
        fn.assert_not_called()

    def test_clear_global_callbacks(self, controller):
        """Test callbacks can be removed."""
        fn = Mock()
        controller.add_global_callback(Char('g'), fn)
        controller.clear_global_callbacks(Char('g'))
        controller.on_event(Char('g'))
        fn.assert_not_called()

    def test_find_id(self, controller, make_view):
        """Test looking up a view by id."""
        view = make_view()
        controller.add_layer(IdView(view, "target"))
        assert controller.find_id("target") is view
        assert controller.call_on_id("target", lambda v: v.size) == Vec2(3, 1)

    def test_find_id_missing(self, controller):
        """Test missing ids raise or return None."""
        with pytest.raises(ViewNotFound):
            controller.find_id("missing")
        assert controller.call_on_id("missing", lambda v: 1) is None

    def test_focus_id(self, controller, make_view):
        """Test focusing a view by id."""
        view = make_view()
        controller.add_layer(IdView(view, "target"))
        controller.focus_id("target")
        assert view.focus_calls

    def test_focus_id_unfocusable(self, controller, make_view):
        """Test focusing a view that refuses focus."""
        controller.add_layer(IdView(make_view(focusable=False), "target"))
        with pytest.raises(ViewNotFound):
            controller.focus_id("target")

    def test_pop_layer(self, controller, make_view):
        """Test the popped layer's view is returned."""
        view = make_view()
        controller.add_layer(view)
        assert controller.pop_layer() is view
        assert controller.pop_layer() is None

    def test_screen_size(self, controller):
        """Test the backend's size as a Vec2."""
        assert controller.screen_size() == Vec2(80, 24)
