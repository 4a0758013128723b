"""Tests for the core wrapper views and LinearLayout."""

from term_views import (
    Char, Direction, DummyView, IdView, Key, KeyPress, Layer, LinearLayout,
    Modifier, Mouse, MouseButton, MousePress, Printer, Selector, ShadowView,
    Theme, Vec2,
)


class TestShadowView:
    """Tests for the ShadowView class."""

    def test_required_size_adds_padding(self, make_view):
        """Test one cell of padding and one of shadow on each axis."""
        shadow = ShadowView(make_view(size=(5, 3)))
        assert shadow.padding() == Vec2(2, 2)
        assert shadow.required_size(Vec2(80, 24)) == Vec2(7, 5)

    def test_padding_can_be_disabled(self, make_view):
        """Test padding flags remove the top and left cells."""
        shadow = ShadowView(make_view(size=(5, 3)), top_padding=False, left_padding=False)
        assert shadow.padding() == Vec2(1, 1)
        assert shadow.required_size(Vec2(80, 24)) == Vec2(6, 4)

    def test_padding_clamped_to_constraint(self, make_view):
        """Test the reservation never exceeds what is offered."""
        view = make_view(size=(5, 3))
        shadow = ShadowView(view)
        assert shadow.required_size(Vec2(1, 1)) == Vec2(1, 1)

        shadow.layout(Vec2(1, 1))
        assert view.layouts == [Vec2(0, 0)]

    def test_layout_removes_padding(self, make_view):
        """Test the child is laid out without the padding."""
        view = make_view()
        ShadowView(view).layout(Vec2(7, 5))
        assert view.layouts == [Vec2(5, 3)]

    def test_mouse_event_relativized(self, make_view):
        """Test the child sees coordinates relative to its own corner."""
        view = make_view()
        shadow = ShadowView(view)
        result = shadow.on_event(Mouse(Vec2(3, 2), MousePress(MouseButton.LEFT)))

        assert result.is_consumed()
        assert view.events == [Mouse(Vec2(2, 1), MousePress(MouseButton.LEFT))]

    def test_mouse_on_padding_ignored(self, make_view):
        """Test clicks on the padding do not reach the child."""
        view = make_view()
        result = ShadowView(view).on_event(Mouse(Vec2(0, 3), MousePress(MouseButton.LEFT)))
        assert not result.is_consumed()
        assert view.events == []

    def test_key_event_passed_unchanged(self, make_view):
        """Test non-mouse events go straight to the child."""
        view = make_view()
        ShadowView(view).on_event(Char('a'))
        assert view.events == [Char('a')]

    def test_draw_shadow(self, make_view, backend):
        """Test the shadow is drawn below and right of the child."""
        view = make_view()
        printer = Printer(backend, Theme(), size=(7, 5))
        ShadowView(view).draw(printer)

        backend.print_at.assert_any_call((2, 4), "     ")
        for y in (2, 3, 4):
            backend.print_at.assert_any_call((6, y), " ")
        assert view.printers[0].offset == Vec2(1, 1)
        assert view.printers[0].size == Vec2(5, 3)

    def test_no_shadow_when_disabled(self, make_view, backend):
        """Test the theme can turn shadows off."""
        printer = Printer(backend, Theme(shadow=False), size=(7, 5))
        ShadowView(make_view()).draw(printer)
        backend.print_at.assert_not_called()


class TestIdView:
    """Tests for the IdView class."""

    def test_call_on_any_matches_id(self, make_view):
        """Test the wrapped view is visited for a matching selector."""
        view = make_view()
        found = []
        IdView(view, "name").call_on_any(Selector("name"), found.append)
        assert found == [view]

    def test_call_on_any_other_id(self, make_view):
        """Test other selectors do not match."""
        found = []
        IdView(make_view(), "name").call_on_any(Selector("other"), found.append)
        assert found == []

    def test_nested_ids(self, make_view):
        """Test selectors reach into wrapped views."""
        inner = make_view()
        found = []
        IdView(IdView(inner, "inner"), "outer").call_on_any(Selector("inner"), found.append)
        assert found == [inner]

    def test_focus_view(self, make_view):
        """Test focusing by id asks the view to take focus."""
        view = make_view()
        assert IdView(view, "name").focus_view(Selector("name"))
        assert view.focus_calls == [Direction.NONE]

    def test_focus_view_refused(self, make_view):
        """Test a view that cannot take focus is not focused."""
        view = make_view(focusable=False)
        assert not IdView(view, "name").focus_view(Selector("name"))


class TestLayer:
    """Tests for the Layer class."""

    def test_fills_background(self, make_view, backend):
        """Test every row is painted before the child draws."""
        view = make_view()
        Layer(view).draw(Printer(backend, Theme(), size=(4, 3)))
        assert backend.print_at.call_count == 3
        backend.print_at.assert_any_call((0, 2), "    ")
        assert len(view.printers) == 1

    def test_dummy_view_wants_nothing(self):
        """Test DummyView asks for no room."""
        assert DummyView().required_size(Vec2(10, 10)) == Vec2(0, 0)


class TestLinearLayout:
    """Tests for the LinearLayout class."""

    def create_layout(self, make_view, **kwargs):
        views = [make_view(**kwargs) for _ in range(3)]
        layout = LinearLayout.vertical()
        for view in views:
            layout.add_child(view)
        layout.layout(Vec2(10, 10))
        layout.take_focus(Direction.NONE)
        return layout, views

    def test_required_size_vertical(self, make_view):
        """Test heights add up and the widest child sets the width."""
        layout = LinearLayout.vertical().child(make_view(size=(3, 1))).child(make_view(size=(5, 2)))
        assert len(layout) == 2
        assert layout.required_size(Vec2(10, 10)) == Vec2(5, 3)

    def test_required_size_horizontal(self, make_view):
        """Test widths add up along a row."""
        layout = LinearLayout.horizontal().child(make_view(size=(3, 1))).child(make_view(size=(5, 2)))
        assert layout.required_size(Vec2(20, 10)) == Vec2(8, 2)

    def test_layout_gives_space_in_order(self, make_view):
        """Test later children get what is left."""
        views = [make_view(size=(3, 2)) for _ in range(3)]
        layout = LinearLayout.vertical()
        for view in views:
            layout.add_child(view)
        layout.layout(Vec2(10, 5))

        assert [v.layouts[-1] for v in views] == [Vec2(10, 2), Vec2(10, 2), Vec2(10, 1)]

    def test_events_go_to_focused_child(self, make_view):
        """Test only the focused child receives keyboard events."""
        layout, views = self.create_layout(make_view)
        assert layout.on_event(Char('a')).is_consumed()
        assert views[0].events == [Char('a')]
        assert views[1].events == []

    def test_arrow_moves_focus(self, make_view):
        """Test an ignored Down arrow moves focus to the next child."""
        layout, views = self.create_layout(make_view, consume=False)
        assert layout.on_event(KeyPress(Key.DOWN)).is_consumed()
        assert layout.focus == 1
        assert views[1].focus_calls[-1] == Direction.UP

    def test_tab_and_shift_tab(self, make_view):
        """Test Tab moves forward and Shift-Tab back."""
        layout, _ = self.create_layout(make_view, consume=False)
        layout.on_event(KeyPress(Key.TAB))
        layout.on_event(KeyPress(Key.TAB))
        assert layout.focus == 2
        layout.on_event(KeyPress(Key.TAB, Modifier.SHIFT))
        assert layout.focus == 1

    def test_focus_stops_at_the_end(self, make_view):
        """Test moving past the last child is ignored."""
        layout, _ = self.create_layout(make_view, consume=False)
        layout.focus = 2
        assert not layout.on_event(KeyPress(Key.DOWN)).is_consumed()
        assert layout.focus == 2

    def test_unfocusable_children_skipped(self, make_view):
        """Test focus moves past children that refuse it."""
        layout, views = self.create_layout(make_view, consume=False)
        views[1].focusable = False
        layout.on_event(KeyPress(Key.DOWN))
        assert layout.focus == 2

    def test_mouse_press_moves_focus(self, make_view):
        """Test clicking a child focuses it and relativizes the event."""
        layout, views = self.create_layout(make_view)
        layout.on_event(Mouse(Vec2(1, 2), MousePress(MouseButton.LEFT)))
        assert layout.focus == 2
        assert views[2].events == [Mouse(Vec2(1, 0), MousePress(MouseButton.LEFT))]

    def test_take_focus_from_back(self, make_view):
        """Test focus entering from the back lands on the last child."""
        layout, _ = self.create_layout(make_view)
        assert layout.take_focus(Direction.BACK)
        assert layout.focus == 2

    def test_take_focus_refused(self, make_view):
        """Test a layout of unfocusable children refuses focus."""
        layout, _ = self.create_layout(make_view, focusable=False)
        assert not layout.take_focus(Direction.FRONT)

    def test_focus_view_sets_focus(self, make_view):
        """Test focusing a nested id moves the layout's focus."""
        target = make_view()
        layout = LinearLayout.vertical().child(make_view()).child(IdView(target, "target"))
        assert layout.focus_view(Selector("target"))
        assert layout.focus == 1

    def test_draw_marks_focused_child(self, make_view, printer):
        """Test only the focused child is drawn as focused."""
        layout, views = self.create_layout(make_view)
        layout.draw(printer)
        assert [v.printers[0].focused for v in views] == [True, False, False]
        assert views[1].printers[0].offset == Vec2(0, 1)
