"""
Streamed backend built on ``blessed``.

A daemon thread reads decoded keystrokes with ``Terminal.inkey()``, turns
them into events and puts them on an input queue. Window size changes
arrive through a ``SIGWINCH`` handler on a second queue.
:meth:`BlessedBackend.poll_event` waits on both queues, and on the refresh
timer when a refresh rate is set.
"""

import logging
import queue
import re
import signal
import termios
import threading
import time
from contextlib import ExitStack, contextmanager
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from blessed import Terminal
from blessed.keyboard import Keystroke

from ..config import Settings
from ..errors import BackendInitError
from ..event import (
    AltChar, Char, CtrlChar, Event, Exit, Key, KeyPress, Modifier, Mouse,
    MouseButton, MouseEvent, MousePress, MouseRelease, Refresh, Unknown,
    WheelDown, WheelUp, WindowResize,
)
from ..theme import Color, ColorStyle, Dark, Effect, Light, Rgb, RgbLowRes
from ..vec import Vec2
from .base import Backend

logger = logging.getLogger(__name__)

ESC = "\x1b"

# How often the input thread checks whether it should stop
_INPUT_POLL_INTERVAL = 0.1
# How often a blocked poll looks at the resize queue
_RESIZE_CHECK_INTERVAL = 0.05

KEY_NAMES: Dict[str, Event] = {
    "KEY_ENTER": KeyPress(Key.ENTER),
    "KEY_TAB": KeyPress(Key.TAB),
    "KEY_BTAB": KeyPress(Key.TAB, Modifier.SHIFT),
    "KEY_BACKSPACE": KeyPress(Key.BACKSPACE),
    "KEY_ESCAPE": KeyPress(Key.ESC),
    "KEY_LEFT": KeyPress(Key.LEFT),
    "KEY_RIGHT": KeyPress(Key.RIGHT),
    "KEY_UP": KeyPress(Key.UP),
    "KEY_DOWN": KeyPress(Key.DOWN),
    "KEY_SLEFT": KeyPress(Key.LEFT, Modifier.SHIFT),
    "KEY_SRIGHT": KeyPress(Key.RIGHT, Modifier.SHIFT),
    "KEY_SUP": KeyPress(Key.UP, Modifier.SHIFT),
    "KEY_SR": KeyPress(Key.UP, Modifier.SHIFT),
    "KEY_SDOWN": KeyPress(Key.DOWN, Modifier.SHIFT),
    "KEY_SF": KeyPress(Key.DOWN, Modifier.SHIFT),
    "KEY_HOME": KeyPress(Key.HOME),
    "KEY_END": KeyPress(Key.END),
    "KEY_PGUP": KeyPress(Key.PAGE_UP),
    "KEY_PPAGE": KeyPress(Key.PAGE_UP),
    "KEY_PGDOWN": KeyPress(Key.PAGE_DOWN),
    "KEY_NPAGE": KeyPress(Key.PAGE_DOWN),
    "KEY_DELETE": KeyPress(Key.DEL),
    "KEY_DC": KeyPress(Key.DEL),
    "KEY_INSERT": KeyPress(Key.INS),
    "KEY_IC": KeyPress(Key.INS),
    "KEY_CENTER": KeyPress(Key.NUMPAD_CENTER),
    "KEY_B2": KeyPress(Key.NUMPAD_CENTER),
}

# Single characters that stand for a key rather than text
CONTROL_CHARS: Dict[str, Event] = {
    "\x03": Exit(),
    "\t": KeyPress(Key.TAB),
    "\r": KeyPress(Key.ENTER),
    "\n": KeyPress(Key.ENTER),
    "\x7f": KeyPress(Key.BACKSPACE),
    "\x08": KeyPress(Key.BACKSPACE),
    ESC: KeyPress(Key.ESC),
}

_FUNCTION_KEY = re.compile(r"KEY_F(\d+)")

# Keys that can carry a modifier in a blessed name such as KEY_CTRL_LEFT
BASE_KEYS: Dict[str, Key] = {
    name: event.key for name, event in KEY_NAMES.items() if event.modifier is Modifier.NONE
}

# blessed orders modifier tokens ctrl, alt, shift, super, hyper, meta
_KEY_MODIFIERS = ("CTRL", "ALT", "SHIFT", "SUPER", "HYPER", "META")
# and mouse buttons ctrl, shift, meta, where meta is the Alt key
_MOUSE_MODIFIERS = ("CTRL", "SHIFT", "META")

MOUSE_ACTIONS: Dict[str, MouseEvent] = {
    "LEFT": MousePress(MouseButton.LEFT),
    "MIDDLE": MousePress(MouseButton.MIDDLE),
    "RIGHT": MousePress(MouseButton.RIGHT),
    "LEFT_RELEASED": MouseRelease(MouseButton.LEFT),
    "MIDDLE_RELEASED": MouseRelease(MouseButton.MIDDLE),
    "RIGHT_RELEASED": MouseRelease(MouseButton.RIGHT),
    "SCROLL_UP": WheelUp(),
    "SCROLL_DOWN": WheelDown(),
}

# Longest unknown CSI sequence collected, in characters after "ESC ["
_MAX_SEQUENCE = 32


def split_modifiers(name: str, tokens: Tuple[str, ...]) -> Tuple[FrozenSet[str], str]:
    """Split the leading modifier ``tokens`` off an underscore separated name.

    ``"CTRL_SHIFT_LEFT"`` gives ``{"CTRL", "SHIFT"}`` and ``"LEFT"``. The
    last part is never taken as a modifier.
    """
    parts = name.split("_")
    found = set()
    while len(parts) > 1 and parts[0] in tokens:
        found.add(parts.pop(0))
    return frozenset(found), "_".join(parts)


def _base_key(name: str) -> Optional[Key]:
    key = BASE_KEYS.get(name)
    if key is not None:
        return key
    match = _FUNCTION_KEY.fullmatch(name)
    if match and int(match.group(1)) <= 12:
        return Key.from_f(int(match.group(1)))
    return None


def _translate_key_name(name: str, raw: bytes) -> Optional[Event]:
    event = KEY_NAMES.get(name)
    if event is not None:
        return event
    match = _FUNCTION_KEY.fullmatch(name)
    if match and int(match.group(1)) > 12:
        return Unknown(bytes([int(match.group(1))]))

    flags, base = split_modifiers(name[len("KEY_"):], _KEY_MODIFIERS)
    key = _base_key("KEY_" + base)
    if key is None:
        # KEY_CTRL_A, KEY_ALT_X and the like are decided by their text.
        return None
    if not flags <= {"CTRL", "ALT", "SHIFT"}:
        return Unknown(raw)
    modifier = Modifier.from_flags("CTRL" in flags, "ALT" in flags, "SHIFT" in flags)
    if modifier is None:
        return Unknown(raw)
    return KeyPress(key, modifier)


def translate_mouse(keystroke: Keystroke) -> Event:
    """Map a blessed mouse keystroke such as ``MOUSE_CTRL_LEFT`` onto an event.

    Motion, drag and buttons beyond the wheel come back as Unknown.
    """
    raw = str(keystroke).encode("utf-8")
    flags, button = split_modifiers(keystroke.name[len("MOUSE_"):], _MOUSE_MODIFIERS)
    modifier = Modifier.from_flags("CTRL" in flags, "META" in flags, "SHIFT" in flags)
    action = MOUSE_ACTIONS.get(button)
    if modifier is None or action is None:
        return Unknown(raw)
    x, y = keystroke.mouse_xy
    return Mouse(Vec2(x, y), action, modifier)


def translate_keystroke(keystroke: Keystroke) -> Event:
    """Map one blessed keystroke onto an event.

    Ctrl-C is the Exit event. Sequences blessed could not name come back
    as Unknown with their UTF-8 bytes.
    """
    text = str(keystroke)
    # Exit first: blessed names Ctrl-C KEY_CTRL_C.
    if text in CONTROL_CHARS:
        return CONTROL_CHARS[text]

    name = keystroke.name
    if name and name.startswith("MOUSE_"):
        return translate_mouse(keystroke)
    if name and name.startswith("KEY_"):
        event = _translate_key_name(name, text.encode("utf-8"))
        if event is not None:
            return event

    if len(text) == 2 and text[0] == ESC and text[1].isprintable():
        return AltChar(text[1])
    if keystroke.is_sequence or len(text) != 1:
        return Unknown(text.encode("utf-8"))
    if 1 <= ord(text) <= 26:
        return CtrlChar(chr(ord("a") + ord(text) - 1))
    if text.isprintable():
        return Char(text)
    return Unknown(text.encode("utf-8"))


class KeystrokeDecoder:
    """Turn a stream of blessed keystrokes into events.

    blessed names an escape sequence it cannot match ``CSI`` and leaves
    the rest of it in the input. The decoder reads that rest so the whole
    sequence becomes a single Unknown event.

    Attributes:
        read: ``read(timeout)`` returns the next keystroke, empty on timeout.
        escape_delay: Seconds to wait for the rest of a sequence.
    """

    def __init__(self, read: Callable[[float], Keystroke], escape_delay: float = 0.025):
        self.read = read
        self.escape_delay = escape_delay

    def decode(self, keystroke: Keystroke) -> List[Event]:
        """Events for ``keystroke``, reading more input if it starts a sequence."""
        if keystroke.name != "CSI":
            return [translate_keystroke(keystroke)]
        return [self._decode_csi(str(keystroke))]

    def _decode_csi(self, start: str) -> Event:
        body = ""
        while len(body) < _MAX_SEQUENCE:
            piece = self.read(self.escape_delay)
            if not piece:
                break
            body += str(piece)
            # Parameter and intermediate bytes lie below 0x40.
            if "\x40" <= body[-1] <= "\x7e":
                return Unknown((start + body).encode("utf-8"))
        if not body:
            # Alt+[ arrives as a CSI with nothing after it.
            return AltChar("[")
        logger.warning("incomplete escape sequence %r", start + body)
        return Unknown((start + body).encode("utf-8"))


class BlessedBackend(Backend):
    """Backend fed by a background thread reading a blessed Terminal.

    Attributes:
        term: The blessed Terminal.
        settings: Backend settings.
    """

    def __init__(self, term: Optional[Terminal] = None, settings: Optional[Settings] = None):
        self.term = term if term is not None else Terminal()
        self.settings = settings or Settings()
        self._input: "queue.SimpleQueue[Event]" = queue.SimpleQueue()
        self._resize: "queue.SimpleQueue[bool]" = queue.SimpleQueue()
        self._timeout: Optional[float] = None
        self._colors: Dict[ColorStyle, Tuple[Color, Color]] = {}
        self._current_style = ColorStyle.BACKGROUND
        self._modes = ExitStack()
        self._stopping = threading.Event()
        self._worker: Optional[threading.Thread] = None
        self._previous_sigwinch = None
        self.decoder = KeystrokeDecoder(self._read_keystroke, self.settings.escape_delay_ms / 1000)

    @classmethod
    def init(cls, settings: Optional[Settings] = None) -> "BlessedBackend":
        settings = settings or Settings()
        backend = cls(Terminal(), settings)
        try:
            backend._enter_modes()
        except (OSError, termios.error) as e:
            backend._modes.close()
            raise BackendInitError(f"cannot set up terminal: {e}") from e
        backend.set_refresh_rate(settings.fps)
        backend.start()
        logger.debug("blessed backend initialized (%s)", backend.term.kind)
        return backend

    def _enter_modes(self):
        self._modes.enter_context(self.term.fullscreen())
        self._modes.enter_context(self.term.raw())
        self._modes.enter_context(self.term.hidden_cursor())
        if self.settings.mouse:
            # Queries the terminal, so it runs before the input thread starts.
            self._modes.enter_context(self.term.mouse_enabled())
        self._previous_sigwinch = signal.signal(signal.SIGWINCH, self._handle_sigwinch)

    def start(self):
        """Start the thread that reads input."""
        self._worker = threading.Thread(
            target=self._read_input, name="term-views-input", daemon=True
        )
        self._worker.start()

    def _handle_sigwinch(self, signum, frame):
        self._resize.put(True)

    def _read_keystroke(self, timeout: float) -> Keystroke:
        return self.term.inkey(timeout=timeout, esc_delay=self.decoder.escape_delay)

    def _read_input(self):
        while not self._stopping.is_set():
            keystroke = self._read_keystroke(_INPUT_POLL_INTERVAL)
            if not keystroke:
                continue
            for event in self.decoder.decode(keystroke):
                if isinstance(event, Unknown):
                    logger.debug("unknown input %r", event.data)
                self._input.put(event)

    def finish(self) -> None:
        self._stopping.set()
        if self._worker is not None:
            self._worker.join(timeout=_INPUT_POLL_INTERVAL * 5)
            self._worker = None
        self._write(self.term.normal + self.term.clear)
        if self._previous_sigwinch is not None:
            signal.signal(signal.SIGWINCH, self._previous_sigwinch)
            self._previous_sigwinch = None
        self._modes.close()
        self.refresh()
        logger.debug("blessed backend finished")

    def screen_size(self) -> Tuple[int, int]:
        return self.term.width, self.term.height

    def has_colors(self) -> bool:
        return self.term.number_of_colors > 0

    def register_style(self, style: ColorStyle, foreground: Color, background: Color) -> None:
        self._colors[style] = (foreground, background)

    def _color_sequence(self, color: Color, background: bool = False) -> str:
        if isinstance(color, Rgb):
            paint = self.term.on_color_rgb if background else self.term.color_rgb
            return str(paint(color.r, color.g, color.b))
        if isinstance(color, Dark):
            index = color.base.value
        elif isinstance(color, Light):
            index = color.base.value + 8
        elif isinstance(color, RgbLowRes):
            index = 16 + 36 * color.r + 6 * color.g + color.b
        else:
            raise TypeError(f"not a color: {color!r}")
        paint = self.term.on_color if background else self.term.color
        return str(paint(index))

    def _apply_colors(self, foreground: Color, background: Color):
        self._write(self._color_sequence(foreground) + self._color_sequence(background, True))

    def _apply_style(self, style: ColorStyle):
        if style in self._colors:
            self._apply_colors(*self._colors[style])

    @contextmanager
    def with_color(self, style: ColorStyle):
        previous = self._current_style
        self._apply_style(style)
        self._current_style = style
        try:
            yield
        finally:
            self._current_style = previous
            self._apply_style(previous)

    @contextmanager
    def with_any_color(self, foreground: Color, background: Color):
        self._apply_colors(foreground, background)
        try:
            yield
        finally:
            self._apply_style(self._current_style)

    @contextmanager
    def with_effect(self, effect: Effect):
        if effect is Effect.REVERSE:
            self._write(self.term.reverse)
        try:
            yield
        finally:
            if effect is Effect.REVERSE:
                self._write(self.term.normal)
                self._apply_style(self._current_style)

    def _write(self, text: str):
        print(text, end='', file=self.term.stream)

    def clear(self) -> None:
        self._apply_style(ColorStyle.BACKGROUND)
        self._write(self.term.clear)

    def refresh(self) -> None:
        print('', end='', file=self.term.stream, flush=True)

    def print_at(self, pos: Tuple[int, int], text: str) -> None:
        x, y = pos
        self._write(self.term.move_xy(x, y) + text)

    def set_refresh_rate(self, fps: int) -> None:
        self._timeout = None if fps == 0 else 1.0 / fps

    def poll_event(self) -> Event:
        deadline = None if self._timeout is None else time.monotonic() + self._timeout
        while True:
            if deadline is not None and time.monotonic() >= deadline:
                return Refresh()
            try:
                self._resize.get_nowait()
                return WindowResize()
            except queue.Empty:
                pass
            wait = _RESIZE_CHECK_INTERVAL
            if deadline is not None:
                wait = max(0.0, min(wait, deadline - time.monotonic()))
            try:
                return self._input.get(timeout=wait)
            except queue.Empty:
                continue
