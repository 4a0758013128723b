"""
Core views: wrappers and the linear container.

Concrete widgets live outside this package; the views here only frame,
identify and arrange other views.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List

from .event import Event, EventResult, Key, KeyPress, Modifier, MousePress
from .theme import ColorStyle
from .vec import Vec2
from .view import Direction, Selector, View, ViewWrapper, Visitor


class DummyView(View):
    """An empty view: draws nothing and never takes focus."""

    def required_size(self, constraint: Vec2) -> Vec2:
        return Vec2.zero()

    def draw(self, printer) -> None:
        pass


class IdView(ViewWrapper):
    """Wrapper giving an identifier to a view, so selectors can find it.

    Attributes:
        id: The identifier matched by ``Selector(id)``.
    """

    def __init__(self, view: View, id: str):
        super().__init__(view)
        self.id = id

    def call_on_any(self, selector: Selector, visitor: Visitor) -> None:
        if selector.id == self.id:
            visitor(self.view)
        self.view.call_on_any(selector, visitor)

    def focus_view(self, selector: Selector) -> bool:
        if selector.id == self.id:
            return self.view.take_focus(Direction.NONE)
        return self.view.focus_view(selector)


class Layer(ViewWrapper):
    """Wrapper painting a plain background behind its view."""

    def draw(self, printer) -> None:
        with printer.with_color(ColorStyle.PRIMARY):
            for y in range(printer.size.y):
                printer.print_hline((0, y), printer.size.x, " ")
        self.view.draw(printer)


class ShadowView(ViewWrapper):
    """Wrapper adding a drop shadow along the bottom and right edges.

    It reserves one cell on the bottom and right for the shadow, plus one
    cell of padding on the top and left unless disabled.

    Attributes:
        top_padding: Whether an empty row is kept above the view.
        left_padding: Whether an empty column is kept left of the view.
    """

    def __init__(self, view: View, top_padding: bool = True, left_padding: bool = True):
        super().__init__(view)
        self.top_padding = top_padding
        self.left_padding = left_padding

    def padding(self) -> Vec2:
        """Total cells reserved on each axis (padding plus shadow)."""
        return Vec2(1 + int(self.left_padding), 1 + int(self.top_padding))

    def _top_left(self) -> Vec2:
        return Vec2(int(self.left_padding), int(self.top_padding))

    def required_size(self, constraint: Vec2) -> Vec2:
        # Never reserve more than we were offered.
        offset = self.padding().or_min(constraint)
        return self.view.required_size(constraint - offset) + offset

    def layout(self, size: Vec2) -> None:
        offset = self.padding().or_min(size)
        self.view.layout(size - offset)

    def on_event(self, event: Event) -> EventResult:
        relative = event.make_relative(self._top_left())
        if relative is None:
            return EventResult.ignored()
        return self.view.on_event(relative)

    def draw(self, printer) -> None:
        if printer.size.y <= int(self.top_padding) or printer.size.x <= int(self.left_padding):
            # Nothing to do if there's no place to draw.
            return

        printer = printer.offset_by(self._top_left())
        if printer.theme.shadow:
            w, h = printer.size
            with printer.with_color(ColorStyle.SHADOW):
                printer.print_hline((1, h - 1), w - 1, " ")
                printer.print_vline((w - 1, 1), h - 1, " ")

        self.view.draw(printer.sub_printer(Vec2.zero(), printer.size.saturating_sub((1, 1))))


class Orientation(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass
class _Child:
    view: View
    size: Vec2 = Vec2.zero()
    # Position along the main axis
    offset: int = 0


class LinearLayout(View):
    """Arranges children in a row or a column.

    Children are given space in order, each up to what it asks for. Only
    the focused child receives keyboard events; when it ignores one,
    Tab, Shift-Tab and the arrow keys along the layout's axis move focus.
    A mouse press on another child moves focus to it first.

    Attributes:
        orientation: Row (HORIZONTAL) or column (VERTICAL).
        focus: Index of the focused child.
    """

    def __init__(self, orientation: Orientation = Orientation.VERTICAL):
        self.orientation = orientation
        self.children: List[_Child] = []
        self.focus = 0

    @classmethod
    def vertical(cls) -> "LinearLayout":
        return cls(Orientation.VERTICAL)

    @classmethod
    def horizontal(cls) -> "LinearLayout":
        return cls(Orientation.HORIZONTAL)

    def add_child(self, view: View) -> None:
        self.children.append(_Child(view))

    def child(self, view: View) -> "LinearLayout":
        """Chainable variant of :meth:`add_child`."""
        self.add_child(view)
        return self

    def __len__(self) -> int:
        return len(self.children)

    def _main(self, v: Vec2) -> int:
        return v.x if self.orientation is Orientation.HORIZONTAL else v.y

    def _cross(self, v: Vec2) -> int:
        return v.y if self.orientation is Orientation.HORIZONTAL else v.x

    def _vec(self, main: int, cross: int) -> Vec2:
        if self.orientation is Orientation.HORIZONTAL:
            return Vec2(main, cross)
        return Vec2(cross, main)

    def _negotiate(self, size: Vec2):
        """Main-axis share and cross size of each child within ``size``."""
        remaining = self._main(size)
        cross = self._cross(size)
        shares = []
        for child in self.children:
            req = child.view.required_size(self._vec(remaining, cross))
            main = min(self._main(req), remaining)
            shares.append((main, min(self._cross(req), cross)))
            remaining -= main
        return shares

    def required_size(self, constraint: Vec2) -> Vec2:
        shares = self._negotiate(constraint)
        main = sum(m for m, _ in shares)
        cross = max((c for _, c in shares), default=0)
        return self._vec(main, cross).min(constraint)

    def layout(self, size: Vec2) -> None:
        offset = 0
        cross = self._cross(size)
        for child, (main, _) in zip(self.children, self._negotiate(size)):
            child.size = self._vec(main, cross)
            child.offset = offset
            child.view.layout(child.size)
            offset += main

    def draw(self, printer) -> None:
        for i, child in enumerate(self.children):
            sub = printer.sub_printer(self._vec(child.offset, 0), child.size, i == self.focus)
            child.view.draw(sub)

    def _child_at(self, event: Event):
        for i, child in enumerate(self.children):
            if event.make_relative(self._vec(child.offset, 0), child.size) is not None:
                return i
        return None

    def on_event(self, event: Event) -> EventResult:
        if not self.children:
            return EventResult.ignored()

        if event.mouse_position() is not None and isinstance(event.event, MousePress):
            target = self._child_at(event)
            if target is not None and target != self.focus:
                if self.children[target].view.take_focus(Direction.NONE):
                    self.focus = target

        child = self.children[self.focus]
        relative = event.make_relative(self._vec(child.offset, 0), child.size)
        if relative is not None:
            result = child.view.on_event(relative)
            if result.is_consumed():
                return result

        return self._move_focus_on_key(event)

    def _move_focus_on_key(self, event: Event) -> EventResult:
        if not isinstance(event, KeyPress):
            return EventResult.ignored()
        if self.orientation is Orientation.HORIZONTAL:
            backward_key, forward_key = Key.LEFT, Key.RIGHT
            backward_source, forward_source = Direction.RIGHT, Direction.LEFT
        else:
            backward_key, forward_key = Key.UP, Key.DOWN
            backward_source, forward_source = Direction.DOWN, Direction.UP

        if event == KeyPress(Key.TAB):
            return self._move_focus(1, Direction.FRONT)
        if event == KeyPress(Key.TAB, Modifier.SHIFT):
            return self._move_focus(-1, Direction.BACK)
        if event == KeyPress(forward_key):
            return self._move_focus(1, forward_source)
        if event == KeyPress(backward_key):
            return self._move_focus(-1, backward_source)
        return EventResult.ignored()

    def _move_focus(self, step: int, source: Direction) -> EventResult:
        i = self.focus + step
        while 0 <= i < len(self.children):
            if self.children[i].view.take_focus(source):
                self.focus = i
                return EventResult.consume()
            i += step
        return EventResult.ignored()

    def take_focus(self, source: Direction) -> bool:
        indexes = list(range(len(self.children)))
        if source in (Direction.BACK, Direction.DOWN, Direction.RIGHT):
            indexes.reverse()
        elif source is Direction.NONE and indexes:
            # Keep the current focus when it still accepts.
            indexes.remove(self.focus)
            indexes.insert(0, self.focus)
        for i in indexes:
            if self.children[i].view.take_focus(source):
                self.focus = i
                return True
        return False

    def call_on_any(self, selector: Selector, visitor: Visitor) -> None:
        for child in self.children:
            child.view.call_on_any(selector, visitor)

    def focus_view(self, selector: Selector) -> bool:
        for i, child in enumerate(self.children):
            if child.view.focus_view(selector):
                self.focus = i
                return True
        return False
