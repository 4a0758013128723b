"""
User-input events and their effects.

Every input the application receives (keys, characters, mouse reports,
resizes and refresh ticks) is converted by a backend into one of the
``Event`` classes below. The event is then given to the root view and
descends the view tree toward the view currently in focus, through
``View.on_event``:

* If a view consumes the event, it answers with a consumed
  ``EventResult``, optionally carrying a ``Callback`` to run on the
  application root once routing is over.
* Otherwise the event is ignored, and the parent may in turn handle it.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional

from .errors import ProgrammerError
from .vec import Vec2, VecLike


class Key(Enum):
    """A non-character key on the keyboard."""
    ENTER = "enter"
    TAB = "tab"
    BACKSPACE = "backspace"
    ESC = "esc"

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"

    INS = "ins"
    DEL = "del"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"

    PAUSE_BREAK = "pause_break"
    # The 5 in the center of the keypad, when numlock is disabled.
    NUMPAD_CENTER = "numpad_center"

    F0 = "f0"
    F1 = "f1"
    F2 = "f2"
    F3 = "f3"
    F4 = "f4"
    F5 = "f5"
    F6 = "f6"
    F7 = "f7"
    F8 = "f8"
    F9 = "f9"
    F10 = "f10"
    F11 = "f11"
    F12 = "f12"

    @staticmethod
    def from_f(n: int) -> "Key":
        """Return the function key ``Fn``.

        Raises:
            ProgrammerError: if ``n`` is outside ``0..12``.
        """
        if not isinstance(n, int) or isinstance(n, bool) or not 0 <= n <= 12:
            raise ProgrammerError(f"unknown function key: F{n}")
        return Key(f"f{n}")


class Modifier(Enum):
    """Modifier keys held while a key or mouse button was used."""
    NONE = "none"
    SHIFT = "shift"
    ALT = "alt"
    ALT_SHIFT = "alt_shift"
    CTRL = "ctrl"
    CTRL_SHIFT = "ctrl_shift"
    CTRL_ALT = "ctrl_alt"

    @staticmethod
    def from_flags(ctrl: bool, alt: bool, shift: bool) -> Optional["Modifier"]:
        """Combine modifier flags, or None for the unsupported triple."""
        return _MODIFIER_FLAGS.get((ctrl, alt, shift))


_MODIFIER_FLAGS = {
    (False, False, False): Modifier.NONE,
    (False, False, True): Modifier.SHIFT,
    (False, True, False): Modifier.ALT,
    (False, True, True): Modifier.ALT_SHIFT,
    (True, False, False): Modifier.CTRL,
    (True, False, True): Modifier.CTRL_SHIFT,
    (True, True, False): Modifier.CTRL_ALT,
}


class MouseButton(Enum):
    LEFT = "left"
    MIDDLE = "middle"
    RIGHT = "right"


class MouseEvent:
    """Base class for what happened to the mouse."""


@dataclass(frozen=True)
class MousePress(MouseEvent):
    button: MouseButton


@dataclass(frozen=True)
class MouseRelease(MouseEvent):
    button: MouseButton


@dataclass(frozen=True)
class WheelUp(MouseEvent):
    pass


@dataclass(frozen=True)
class WheelDown(MouseEvent):
    pass


class Event:
    """Base class of every event as seen by the application.

    Events are immutable: operations that move an event into another
    coordinate space return a new event.
    """

    @staticmethod
    def from_char(ch: str) -> "Event":
        return Char(ch)

    @staticmethod
    def from_key(key: Key) -> "Event":
        return KeyPress(key)

    def mouse_position(self) -> Optional[Vec2]:
        """Position of the mouse, or None if this is not a mouse event."""
        return None

    def relativize(self, top_left: VecLike) -> "Event":
        """Return this event with its mouse position shifted by ``-top_left``.

        Non-mouse events are returned unchanged.
        """
        return self

    def make_relative(self, top_left: VecLike,
                      size: Optional[VecLike] = None) -> Optional["Event"]:
        """Translate this event into the space of a sub-region.

        Args:
            top_left: Top-left corner of the region.
            size: Size of the region, or None for an unbounded region.

        Returns:
            The relativized event, or None if this is a mouse event whose
            position lies outside the region. Non-mouse events always pass.
        """
        pos = self.mouse_position()
        if pos is None:
            return self
        top_left = Vec2.of(top_left)
        if not top_left.fits_in(pos):
            # Too high or too far left
            return None
        if size is not None and not pos.strictly_less(top_left + size):
            # Too low or too far right
            return None
        return self.relativize(top_left)


@dataclass(frozen=True)
class WindowResize(Event):
    """Fired when the terminal window is resized."""


@dataclass(frozen=True)
class Refresh(Event):
    """Fired regularly when a refresh rate is set."""


@dataclass(frozen=True)
class Char(Event):
    """A character was entered (letters, numbers, punctuation...)."""
    char: str


@dataclass(frozen=True)
class CtrlChar(Event):
    """A character was entered with the Ctrl key pressed."""
    char: str


@dataclass(frozen=True)
class AltChar(Event):
    """A character was entered with the Alt key pressed."""
    char: str


@dataclass(frozen=True)
class KeyPress(Event):
    """A non-character key was pressed, possibly with modifiers."""
    key: Key
    modifier: Modifier = Modifier.NONE


@dataclass(frozen=True)
class Mouse(Event):
    """A mouse event, possibly with modifier keys held."""
    pos: Vec2
    event: MouseEvent
    modifier: Modifier = Modifier.NONE

    def mouse_position(self) -> Optional[Vec2]:
        return self.pos

    def relativize(self, top_left: VecLike) -> "Event":
        return replace(self, pos=self.pos - top_left)


@dataclass(frozen=True)
class Unknown(Event):
    """Input the backend could not classify, kept as raw bytes."""
    data: bytes = b""


@dataclass(frozen=True)
class Exit(Event):
    """The application is about to exit."""


class Callback:
    """A function run against the application root after an event.

    Callbacks are immutable and may be shared between several results.
    """

    __slots__ = ("_fn",)

    def __init__(self, fn: Callable[..., None]):
        if not callable(fn):
            raise ProgrammerError(f"callback is not callable: {fn!r}")
        self._fn = fn

    @classmethod
    def from_fn(cls, fn: Callable[..., None]) -> "Callback":
        if isinstance(fn, Callback):
            return fn
        return cls(fn)

    def __call__(self, root) -> None:
        self._fn(root)

    def __repr__(self) -> str:
        return f"Callback({self._fn!r})"


@dataclass(frozen=True)
class EventResult:
    """Answer to an event notification: ignored, or consumed.

    Attributes:
        consumed: Whether the event was consumed.
        callback: Optional callback to run when consumed.
    """
    consumed: bool = False
    callback: Optional[Callback] = None

    @classmethod
    def ignored(cls) -> "EventResult":
        return cls(consumed=False)

    @classmethod
    def consume(cls, callback: Optional[Callable[..., None]] = None) -> "EventResult":
        """Consumed result with an optional callback (or plain function)."""
        if callback is not None:
            callback = Callback.from_fn(callback)
        return cls(consumed=True, callback=callback)

    @classmethod
    def with_cb(cls, fn: Callable[..., None]) -> "EventResult":
        return cls(consumed=True, callback=Callback.from_fn(fn))

    def is_consumed(self) -> bool:
        return self.consumed

    def process(self, root) -> None:
        """Run the attached callback on ``root``; no-op otherwise."""
        if self.consumed and self.callback is not None:
            self.callback(root)
