"""Tests for events, event results and cell geometry."""

import pytest
from unittest.mock import Mock

from term_views import (
    Callback, Char, EventResult, Key, KeyPress, Modifier, Mouse, MouseButton,
    MousePress, ProgrammerError, Refresh, Vec2,
)


class TestVec2:
    """Tests for the Vec2 class."""

    def test_arithmetic_accepts_tuples(self):
        """Test that tuples are coerced on both sides of an operation."""
        assert Vec2(3, 4) + (1, 2) == Vec2(4, 6)
        assert Vec2(3, 4) - (1, 2) == Vec2(2, 2)

    def test_saturating_sub_stops_at_zero(self):
        """Test component-wise subtraction clamped at zero."""
        assert Vec2(3, 1).saturating_sub((5, 1)) == Vec2(0, 0)

    def test_min_max(self):
        """Test component-wise min and max."""
        assert Vec2(3, 8).min((5, 2)) == Vec2(3, 2)
        assert Vec2(3, 8).max((5, 2)) == Vec2(5, 8)

    def test_comparisons(self):
        """Test fits_in is inclusive and strictly_less is not."""
        assert Vec2(2, 2).fits_in((2, 3))
        assert not Vec2(2, 2).strictly_less((2, 3))
        assert Vec2(1, 2).strictly_less((2, 3))

    def test_unpacking(self):
        """Test that a Vec2 unpacks as (x, y)."""
        x, y = Vec2(7, 9)
        assert (x, y) == (7, 9)


class TestKey:
    """Tests for function key construction."""

    @pytest.mark.parametrize("n", range(13))
    def test_from_f_valid(self, n):
        """Test F0 through F12 are all available."""
        assert Key.from_f(n).value == f"f{n}"

    @pytest.mark.parametrize("n", [-1, 13, 24, True, 1.0, "1"])
    def test_from_f_invalid(self, n):
        """Test anything outside 0..12 is a programmer error."""
        with pytest.raises(ProgrammerError):
            Key.from_f(n)


class TestModifier:
    """Tests for combining modifier flags."""

    def test_single_flags(self):
        """Test each flag on its own."""
        assert Modifier.from_flags(False, False, False) is Modifier.NONE
        assert Modifier.from_flags(True, False, False) is Modifier.CTRL
        assert Modifier.from_flags(False, True, False) is Modifier.ALT
        assert Modifier.from_flags(False, False, True) is Modifier.SHIFT

    def test_pairs(self):
        """Test the supported two-flag combinations."""
        assert Modifier.from_flags(True, False, True) is Modifier.CTRL_SHIFT
        assert Modifier.from_flags(True, True, False) is Modifier.CTRL_ALT
        assert Modifier.from_flags(False, True, True) is Modifier.ALT_SHIFT

    def test_all_three_unsupported(self):
        """Test that Ctrl+Alt+Shift has no modifier."""
        assert Modifier.from_flags(True, True, True) is None


class TestMakeRelative:
    """Tests for moving events into a sub-region's coordinates."""

    def test_non_mouse_event_passes_unchanged(self):
        """Test keyboard events are returned as-is for any region."""
        event = KeyPress(Key.ENTER)
        assert event.make_relative((50, 50), (1, 1)) is event

    def test_mouse_inside_is_shifted(self):
        """Test a mouse event inside the region is relativized."""
        event = Mouse(Vec2(12, 7), MousePress(MouseButton.LEFT))
        relative = event.make_relative((10, 5), (5, 5))
        assert relative == Mouse(Vec2(2, 2), MousePress(MouseButton.LEFT))

    def test_source_event_is_not_mutated(self):
        """Test that relativizing returns a new event."""
        event = Mouse(Vec2(12, 7), MousePress(MouseButton.LEFT))
        event.make_relative((10, 5))
        assert event.pos == Vec2(12, 7)

    def test_mouse_above_or_left_rejected(self):
        """Test positions before the top-left corner are rejected."""
        assert Mouse(Vec2(9, 7), MousePress(MouseButton.LEFT)).make_relative((10, 5)) is None
        assert Mouse(Vec2(12, 4), MousePress(MouseButton.LEFT)).make_relative((10, 5)) is None

    def test_mouse_past_size_rejected(self):
        """Test the bottom-right edge of the region is exclusive."""
        event = Mouse(Vec2(15, 6), MousePress(MouseButton.LEFT))
        assert event.make_relative((10, 5), (5, 5)) is None
        assert event.make_relative((10, 5), (6, 5)) is not None

    def test_unbounded_region(self):
        """Test that without a size only the top-left bound applies."""
        event = Mouse(Vec2(500, 500), MousePress(MouseButton.LEFT))
        assert event.make_relative((1, 1)).mouse_position() == Vec2(499, 499)

    def test_events_are_hashable(self):
        """Test events can be used as dictionary keys."""
        callbacks = {Char('q'): 1, Refresh(): 2}
        assert callbacks[Char('q')] == 1
        assert callbacks[Refresh()] == 2


class TestEventResult:
    """Tests for the EventResult and Callback classes."""

    def test_ignored(self):
        """Test an ignored result does nothing when processed."""
        result = EventResult.ignored()
        assert not result.is_consumed()
        result.process(Mock())

    def test_consume_without_callback(self):
        """Test consuming without a callback."""
        result = EventResult.consume()
        assert result.is_consumed()
        assert result.callback is None
        result.process(Mock())

    def test_with_cb_runs_on_root(self):
        """Test the callback receives the root it is processed with."""
        fn = Mock()
        root = Mock()
        EventResult.with_cb(fn).process(root)
        fn.assert_called_once_with(root)

    def test_consume_wraps_plain_function(self):
        """Test that a plain function is wrapped in a Callback."""
        result = EventResult.consume(lambda root: None)
        assert isinstance(result.callback, Callback)

    def test_callback_requires_callable(self):
        """Test Callback rejects non-callables."""
        with pytest.raises(ProgrammerError):
            Callback(42)

    def test_callback_from_fn_keeps_callbacks(self):
        """Test from_fn does not double-wrap."""
        callback = Callback(lambda root: None)
        assert Callback.from_fn(callback) is callback
