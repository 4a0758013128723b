"""
Stack of layers drawn on top of each other.

Only the top-most layer is active: it receives every event and keeps
focus. Lower layers are still drawn underneath, each at the offset given
by its placement.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .event import Event, EventResult
from .theme import ColorStyle
from .vec import Vec2
from .view import Direction, Position, Selector, View, Visitor
from .views import Layer, ShadowView

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    """Where a layer goes: floating at a position, or fullscreen."""
    position: Optional[Position] = None

    @classmethod
    def floating(cls, position: Position) -> "Placement":
        return cls(position)

    @classmethod
    def fullscreen(cls) -> "Placement":
        return cls(None)

    @property
    def is_fullscreen(self) -> bool:
        return self.position is None

    def compute_offset(self, size, available, parent) -> Vec2:
        if self.position is None:
            return Vec2.zero()
        return self.position.compute_offset(size, available, parent)


@dataclass
class StackChild:
    """One layer of the stack.

    Attributes:
        view: The layer's view, wrapped with its background and shadow.
        content: The view as given by the caller.
        placement: How the layer is positioned.
        size: Size given at the last layout.
        position: Offset computed at the last layout.
        virgin: True until the layer got its first layout and focus.
    """
    view: View
    content: View
    placement: Placement
    size: Vec2 = Vec2.zero()
    position: Vec2 = Vec2.zero()
    virgin: bool = True


class StackView(View):
    """Simple stack of views.

    Only the top-most view is active and can receive input.
    """

    def __init__(self):
        self.layers: List[StackChild] = []
        self.last_size = Vec2.zero()

    def __len__(self) -> int:
        return len(self.layers)

    def add_fullscreen_layer(self, view: View) -> None:
        """Add a full-screen layer on top of the stack.

        Fullscreen layers have no shadow.
        """
        self.layers.append(StackChild(Layer(view), view, Placement.fullscreen()))
        logger.debug("pushed fullscreen layer %r (depth %d)", view, len(self.layers))

    def add_layer(self, view: View) -> None:
        """Add a view on top of the stack, in the center of the screen."""
        self.add_layer_at(Position.center(), view)

    def add_layer_at(self, position: Position, view: View) -> None:
        """Add a view on top of the stack at ``position``."""
        # Skip padding for absolute/parent-placed views
        wrapped = ShadowView(
            Layer(view),
            top_padding=position.y.is_center,
            left_padding=position.x.is_center,
        )
        self.layers.append(StackChild(wrapped, view, Placement.floating(position)))
        logger.debug("pushed layer %r at %r (depth %d)", view, position, len(self.layers))

    def layer(self, view: View) -> "StackView":
        """Chainable variant of :meth:`add_layer`."""
        self.add_layer(view)
        return self

    def fullscreen_layer(self, view: View) -> "StackView":
        """Chainable variant of :meth:`add_fullscreen_layer`."""
        self.add_fullscreen_layer(view)
        return self

    def pop_layer(self) -> Optional[View]:
        """Remove the top-most layer and return its view, if any."""
        if not self.layers:
            return None
        popped = self.layers.pop()
        logger.debug("popped layer %r (depth %d)", popped.content, len(self.layers))
        return popped.content

    def offset(self) -> Vec2:
        """Offset of the current top layer."""
        previous = Vec2.zero()
        for layer in self.layers:
            previous = layer.placement.compute_offset(layer.size, self.last_size, previous)
        return previous

    def layer_sizes(self) -> List[Vec2]:
        return [layer.size for layer in self.layers]

    def draw(self, printer) -> None:
        last = len(self.layers)
        previous = Vec2.zero()
        with printer.with_color(ColorStyle.PRIMARY):
            for i, layer in enumerate(self.layers):
                offset = layer.placement.compute_offset(layer.size, printer.size, previous)
                previous = offset
                layer.view.draw(printer.sub_printer(offset, layer.size, i + 1 == last))

    def on_event(self, event: Event) -> EventResult:
        if not self.layers:
            return EventResult.ignored()
        top = self.layers[-1]
        # Rejects clicks outside the top layer and moves the rest into its space.
        relative = event.make_relative(top.position, top.size)
        if relative is None:
            return EventResult.ignored()
        return top.view.on_event(relative)

    def layout(self, size: Vec2) -> None:
        self.last_size = size
        previous = Vec2.zero()

        for layer in self.layers:
            # Each layer gets what it asks for, within the screen.
            layer.size = size.min(layer.view.required_size(size))
            layer.view.layout(layer.size)

            layer.position = layer.placement.compute_offset(layer.size, size, previous)
            previous = layer.position

            # Focusability can depend on the size, so focus is only given
            # after the first layout.
            if layer.virgin:
                layer.view.take_focus(Direction.NONE)
                layer.virgin = False

    def required_size(self, constraint: Vec2) -> Vec2:
        size = Vec2(1, 1)
        for layer in self.layers:
            size = size.max(layer.view.required_size(constraint))
        return size

    def take_focus(self, source: Direction) -> bool:
        if not self.layers:
            return False
        return self.layers[-1].view.take_focus(source)

    def call_on_any(self, selector: Selector, visitor: Visitor) -> None:
        for layer in self.layers:
            layer.view.call_on_any(selector, visitor)

    def focus_view(self, selector: Selector) -> bool:
        for layer in self.layers:
            if layer.view.focus_view(selector):
                return True
        return False
