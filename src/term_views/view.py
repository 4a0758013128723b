"""
The contract every screen element implements.

Layout is negotiated top-down in two calls. A parent first asks
``required_size(constraint)`` to learn how much room a child would like
within ``constraint``, then commits with ``layout(size)``; the size given
to ``layout`` may be smaller than requested. ``draw`` then paints within
a ``Printer`` scoped to that size.

Events come in through ``on_event`` and follow the focus path: containers
forward them to their focused child only. Views are found by identifier
with a ``Selector``, through ``call_on_any`` and ``focus_view``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Union

from .errors import ProgrammerError
from .event import Event, EventResult
from .vec import Vec2, VecLike


class Direction(Enum):
    """Where focus is coming from when ``take_focus`` is called."""
    # Programmatic focus request
    NONE = "none"
    # Relative to the container's order: from the first or last child
    FRONT = "front"
    BACK = "back"
    # Absolute: from this edge
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class Selector:
    """Identifies a view in the tree by its id."""
    id: str

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise ProgrammerError(f"selector id must be a non-empty string, got {self.id!r}")


Visitor = Callable[[Any], None]


def _clamp(val, minval, maxval):
    """Clamp a value between min and max, handling relative float values."""
    if isinstance(val, float):
        # Interpret as relative value (0.0-1.0) and scale to the range
        return max(minval, min(maxval, int(round(minval + val * (maxval - minval)))))
    return max(minval, min(maxval, val))


@dataclass(frozen=True)
class Offset:
    """Placement of a layer along one axis.

    ``center`` centers the layer in the free space. ``absolute`` places it
    at a cell offset, or at a fraction of the free space if given a float.
    ``parent`` places it relative to the previous layer's offset.
    """
    kind: str = "center"
    value: Union[int, float] = 0

    @classmethod
    def center(cls) -> "Offset":
        return cls("center")

    @classmethod
    def absolute(cls, value: Union[int, float]) -> "Offset":
        return cls("absolute", value)

    @classmethod
    def parent(cls, value: int) -> "Offset":
        return cls("parent", value)

    def __post_init__(self):
        if self.kind not in ("center", "absolute", "parent"):
            raise ProgrammerError(f"unknown offset kind {self.kind!r}")

    @property
    def is_center(self) -> bool:
        return self.kind == "center"

    def compute_offset(self, size: int, available: int, parent: int) -> int:
        """Offset for an element of ``size`` in ``available`` cells."""
        free = max(0, available - size)
        if self.kind == "center":
            return free // 2
        if self.kind == "absolute":
            return _clamp(self.value, 0, free)
        return _clamp(parent + int(self.value), 0, free)


@dataclass(frozen=True)
class Position:
    """Placement of a layer on both axes."""
    x: Offset = field(default_factory=Offset.center)
    y: Offset = field(default_factory=Offset.center)

    @classmethod
    def center(cls) -> "Position":
        return cls(Offset.center(), Offset.center())

    @classmethod
    def absolute(cls, offset: tuple) -> "Position":
        x, y = offset
        return cls(Offset.absolute(x), Offset.absolute(y))

    @classmethod
    def parent(cls, offset: VecLike) -> "Position":
        offset = Vec2.of(offset)
        return cls(Offset.parent(offset.x), Offset.parent(offset.y))

    def compute_offset(self, size: VecLike, available: VecLike, parent: VecLike) -> Vec2:
        size, available, parent = Vec2.of(size), Vec2.of(available), Vec2.of(parent)
        return Vec2(
            self.x.compute_offset(size.x, available.x, parent.x),
            self.y.compute_offset(size.y, available.y, parent.y),
        )


class View(ABC):
    """Base class for every element of the view tree.

    Only ``draw`` is required; the other methods default to a view that
    wants one cell, ignores events and cannot take focus.
    """

    def required_size(self, constraint: Vec2) -> Vec2:
        """Size this view would like, given at most ``constraint``."""
        return Vec2(1, 1).min(constraint)

    def layout(self, size: Vec2) -> None:
        """Called once the final size of the view is known."""

    @abstractmethod
    def draw(self, printer) -> None:
        """Draw the view within ``printer``'s area."""

    def on_event(self, event: Event) -> EventResult:
        return EventResult.ignored()

    def take_focus(self, source: Direction) -> bool:
        """Try to become focused; ``source`` is where focus comes from."""
        return False

    def call_on_any(self, selector: Selector, visitor: Visitor) -> None:
        """Run ``visitor`` on every view matching ``selector``."""

    def focus_view(self, selector: Selector) -> bool:
        """Move focus to the view matching ``selector``. False if not found."""
        return False


class ViewWrapper(View):
    """A view forwarding everything to the view it wraps.

    Subclasses override the methods they need to change.

    Attributes:
        view: The wrapped view.
    """

    def __init__(self, view: View):
        self.view = view

    def required_size(self, constraint: Vec2) -> Vec2:
        return self.view.required_size(constraint)

    def layout(self, size: Vec2) -> None:
        self.view.layout(size)

    def draw(self, printer) -> None:
        self.view.draw(printer)

    def on_event(self, event: Event) -> EventResult:
        return self.view.on_event(event)

    def take_focus(self, source: Direction) -> bool:
        return self.view.take_focus(source)

    def call_on_any(self, selector: Selector, visitor: Visitor) -> None:
        self.view.call_on_any(selector, visitor)

    def focus_view(self, selector: Selector) -> bool:
        return self.view.focus_view(selector)
