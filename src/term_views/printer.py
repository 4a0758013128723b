"""
Draw surface handed to ``View.draw``.

A ``Printer`` covers a rectangle of the screen. Coordinates given to it
are relative to its top-left corner, and anything falling outside the
rectangle is clipped, so a view can never draw over its neighbours.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from wcwidth import wcwidth

from .theme import ColorStyle, Effect, Theme
from .vec import Vec2, VecLike


def truncate_to_width(text: str, width: int) -> str:
    """Longest prefix of ``text`` that fits in ``width`` cells."""
    used = 0
    for i, ch in enumerate(text):
        # Control characters report -1; count them as zero-width.
        used += max(0, wcwidth(ch))
        if used > width:
            return text[:i]
    return text


class Printer:
    """Convenient interface to draw on a sub-region of the screen.

    Attributes:
        backend: Backend that does the actual printing.
        theme: Theme in use.
        offset: Absolute screen position of the top-left corner.
        size: Size of the drawable area.
        focused: Whether the view being drawn is on the focus path.
    """

    def __init__(self, backend, theme: Optional[Theme] = None,
                 offset: VecLike = (0, 0), size: Optional[VecLike] = None,
                 focused: bool = True):
        self.backend = backend
        self.theme = theme or Theme()
        self.offset = Vec2.of(offset)
        self.size = Vec2.of(size) if size is not None else Vec2.of(backend.screen_size())
        self.focused = focused

    def __repr__(self) -> str:
        return f"Printer(offset={self.offset}, size={self.size}, focused={self.focused})"

    def print(self, pos: VecLike, text: str) -> None:
        """Print ``text`` at ``pos``, clipped to the printer's area."""
        pos = Vec2.of(pos)
        if pos.x < 0 or pos.y < 0 or pos.y >= self.size.y or pos.x >= self.size.x:
            return
        text = truncate_to_width(text, self.size.x - pos.x)
        if text:
            self.backend.print_at(tuple(self.offset + pos), text)

    def print_hline(self, start: VecLike, length: int, c: str) -> None:
        """Print a horizontal line of ``length`` copies of ``c``."""
        if length > 0:
            self.print(start, c * length)

    def print_vline(self, start: VecLike, length: int, c: str) -> None:
        """Print a vertical line of ``length`` copies of ``c``."""
        start = Vec2.of(start)
        for i in range(length):
            self.print((start.x, start.y + i), c)

    @contextmanager
    def with_color(self, style: ColorStyle) -> Iterator["Printer"]:
        with self.backend.with_color(style):
            yield self

    @contextmanager
    def with_effect(self, effect: Effect) -> Iterator["Printer"]:
        with self.backend.with_effect(effect):
            yield self

    @contextmanager
    def with_selection(self, selected: bool) -> Iterator["Printer"]:
        """Highlight colors when ``selected``, dimmer when not focused."""
        if not selected:
            style = ColorStyle.PRIMARY
        elif self.focused:
            style = ColorStyle.HIGHLIGHT
        else:
            style = ColorStyle.HIGHLIGHT_INACTIVE
        with self.with_color(style):
            yield self

    def offset_by(self, offset: VecLike, focused: bool = True) -> "Printer":
        """A printer for the area below and right of ``offset``."""
        offset = Vec2.of(offset)
        return Printer(self.backend, self.theme, self.offset + offset,
                       self.size.saturating_sub(offset), self.focused and focused)

    def sub_printer(self, offset: VecLike, size: VecLike, focused: bool = True) -> "Printer":
        """A printer for the ``size`` area at ``offset``, clipped to this one."""
        offset = Vec2.of(offset)
        available = self.size.saturating_sub(offset)
        return Printer(self.backend, self.theme, self.offset + offset,
                       Vec2.of(size).min(available), self.focused and focused)
