"""
Polling backend built on the standard library ``curses`` module.

``getch()`` returns one integer code per call. Printable codes start a
UTF-8 character that is completed by further ``getch()`` calls; every
other code goes through :func:`translate_code`. Mouse reports are fetched
with ``getmouse()`` and decoded by :func:`translate_mouse`. A click
reported as a single code is split into a press and a release; the
release waits in a FIFO that :meth:`CursesBackend.poll_event` drains
before reading new input.
"""

import curses
import locale
import logging
import os
from collections import deque
from contextlib import contextmanager
from typing import Dict, List, Optional, Tuple

from .. import utf8
from ..config import Settings
from ..errors import BackendInitError
from ..event import (
    Char, CtrlChar, Event, Key, KeyPress, Modifier, Mouse, MouseButton,
    MousePress, MouseRelease, Refresh, Unknown, WheelDown, WheelUp,
    WindowResize,
)
from ..theme import Color, ColorStyle, Dark, Effect, Light, Rgb, RgbLowRes
from ..vec import Vec2
from .base import Backend

logger = logging.getLogger(__name__)

# Value returned by getch() when no input arrived before the timeout
NOT_READY = -1

ALT = Modifier.ALT
ALT_SHIFT = Modifier.ALT_SHIFT
CTRL = Modifier.CTRL
CTRL_SHIFT = Modifier.CTRL_SHIFT
CTRL_ALT = Modifier.CTRL_ALT

_FULL_BLOCK = (ALT, ALT_SHIFT, CTRL, CTRL_SHIFT, CTRL_ALT)


def _block(start: int, key: Key, modifiers=_FULL_BLOCK) -> Dict[int, Event]:
    return {start + i: KeyPress(key, modifier) for i, modifier in enumerate(modifiers)}


# Codes 512 and above are undocumented ncurses extensions for modified
# navigation keys. 523, 524, 541, 543 and 565 are not mapped.
EXTENSION_CODES: Dict[int, Event] = {
    **_block(519, Key.DEL, (ALT, ALT_SHIFT, CTRL, CTRL_SHIFT)),
    **_block(525, Key.DOWN),
    **_block(530, Key.END),
    **_block(535, Key.HOME),
    540: KeyPress(Key.INS, ALT),
    542: KeyPress(Key.INS, CTRL),
    544: KeyPress(Key.INS, CTRL_ALT),
    **_block(545, Key.LEFT),
    **_block(550, Key.PAGE_DOWN),
    **_block(555, Key.PAGE_UP),
    **_block(560, Key.RIGHT),
    **_block(566, Key.UP),
}

KEY_CODES: Dict[int, Event] = {
    NOT_READY: Refresh(),
    9: KeyPress(Key.TAB),
    10: KeyPress(Key.ENTER),
    13: KeyPress(Key.ENTER),
    curses.KEY_ENTER: KeyPress(Key.ENTER),
    # This is the escape key when pressed by itself.
    27: KeyPress(Key.ESC),
    # Backspace sends 127, but Ctrl-H sends KEY_BACKSPACE
    127: KeyPress(Key.BACKSPACE),
    curses.KEY_BACKSPACE: KeyPress(Key.BACKSPACE),
    curses.KEY_RESIZE: WindowResize(),
    curses.KEY_B2: KeyPress(Key.NUMPAD_CENTER),
    curses.KEY_DC: KeyPress(Key.DEL),
    curses.KEY_IC: KeyPress(Key.INS),
    curses.KEY_BTAB: KeyPress(Key.TAB, Modifier.SHIFT),
    curses.KEY_SLEFT: KeyPress(Key.LEFT, Modifier.SHIFT),
    curses.KEY_SRIGHT: KeyPress(Key.RIGHT, Modifier.SHIFT),
    curses.KEY_LEFT: KeyPress(Key.LEFT),
    curses.KEY_RIGHT: KeyPress(Key.RIGHT),
    curses.KEY_UP: KeyPress(Key.UP),
    curses.KEY_DOWN: KeyPress(Key.DOWN),
    curses.KEY_SR: KeyPress(Key.UP, Modifier.SHIFT),
    curses.KEY_SF: KeyPress(Key.DOWN, Modifier.SHIFT),
    curses.KEY_PPAGE: KeyPress(Key.PAGE_UP),
    curses.KEY_NPAGE: KeyPress(Key.PAGE_DOWN),
    curses.KEY_HOME: KeyPress(Key.HOME),
    curses.KEY_END: KeyPress(Key.END),
    curses.KEY_SHOME: KeyPress(Key.HOME, Modifier.SHIFT),
    curses.KEY_SEND: KeyPress(Key.END, Modifier.SHIFT),
    curses.KEY_SDC: KeyPress(Key.DEL, Modifier.SHIFT),
    curses.KEY_SNEXT: KeyPress(Key.PAGE_DOWN, Modifier.SHIFT),
    curses.KEY_SPREVIOUS: KeyPress(Key.PAGE_UP, Modifier.SHIFT),
    **EXTENSION_CODES,
}

# Each range holds F1..F12 with one modifier: (first code, modifier)
FUNCTION_KEY_RANGES: Tuple[Tuple[int, Modifier], ...] = (
    (curses.KEY_F1, Modifier.NONE),
    (277, Modifier.SHIFT),
    (289, Modifier.CTRL),
    (301, Modifier.CTRL_SHIFT),
    (313, Modifier.ALT),
)


def code_bytes(code: int) -> bytes:
    """The 4-byte little-endian two's complement encoding of ``code``."""
    return (code & 0xFFFFFFFF).to_bytes(4, "little")


def translate_code(code: int) -> Event:
    """Translate a non-printable ``getch()`` code into an event.

    Mouse reports (``KEY_MOUSE``) need a ``getmouse()`` call and are
    handled by the backend; passed here they come back as Unknown.
    """
    event = KEY_CODES.get(code)
    if event is not None:
        return event

    for first, modifier in FUNCTION_KEY_RANGES:
        if first <= code < first + 12:
            return KeyPress(Key.from_f(code - first + 1), modifier)

    # Values 8-10 (H, I, J) are taken by other keys.
    if 1 <= code <= 25 and code not in (8, 9, 10):
        return CtrlChar(chr(ord("a") + code - 1))

    return Unknown(code_bytes(code))


_RELEASED = {
    curses.BUTTON1_RELEASED: MouseButton.LEFT,
    curses.BUTTON2_RELEASED: MouseButton.MIDDLE,
    curses.BUTTON3_RELEASED: MouseButton.RIGHT,
}

_PRESSED = {
    curses.BUTTON1_PRESSED: MouseButton.LEFT,
    curses.BUTTON2_PRESSED: MouseButton.MIDDLE,
    curses.BUTTON3_PRESSED: MouseButton.RIGHT,
}

_CLICKED = {
    curses.BUTTON1_CLICKED: MouseButton.LEFT,
    curses.BUTTON1_DOUBLE_CLICKED: MouseButton.LEFT,
    curses.BUTTON1_TRIPLE_CLICKED: MouseButton.LEFT,
    curses.BUTTON2_CLICKED: MouseButton.MIDDLE,
    curses.BUTTON2_DOUBLE_CLICKED: MouseButton.MIDDLE,
    curses.BUTTON2_TRIPLE_CLICKED: MouseButton.MIDDLE,
    curses.BUTTON3_CLICKED: MouseButton.RIGHT,
    curses.BUTTON3_DOUBLE_CLICKED: MouseButton.RIGHT,
    curses.BUTTON3_TRIPLE_CLICKED: MouseButton.RIGHT,
}

_MODIFIER_MASK = curses.BUTTON_CTRL | curses.BUTTON_ALT | curses.BUTTON_SHIFT


def translate_mouse(pos: Vec2, bstate: int) -> List[Event]:
    """Translate a ``getmouse()`` report into one or two events.

    Clicks come back as a press followed by a release.
    """
    ctrl = bool(bstate & curses.BUTTON_CTRL)
    alt = bool(bstate & curses.BUTTON_ALT)
    shift = bool(bstate & curses.BUTTON_SHIFT)
    modifier = Modifier.from_flags(ctrl, alt, shift)
    if modifier is None:
        return [Unknown(code_bytes(bstate))]

    bstate &= ~_MODIFIER_MASK

    if bstate in _RELEASED:
        return [Mouse(pos, MouseRelease(_RELEASED[bstate]), modifier)]
    if bstate in _PRESSED:
        return [Mouse(pos, MousePress(_PRESSED[bstate]), modifier)]
    if bstate in _CLICKED:
        button = _CLICKED[bstate]
        return [
            Mouse(pos, MousePress(button), modifier),
            Mouse(pos, MouseRelease(button), modifier),
        ]
    if bstate == curses.BUTTON4_PRESSED:
        return [Mouse(pos, WheelUp(), modifier)]
    if bstate == curses.BUTTON5_PRESSED:
        return [Mouse(pos, WheelDown(), modifier)]
    return [Unknown(code_bytes(bstate))]


def find_closest(color: Color, colors: int = 8) -> int:
    """Best color index for ``color`` on a terminal with ``colors`` colors."""
    if isinstance(color, Dark):
        return color.base.value
    if isinstance(color, Light):
        return color.base.value + 8 if colors >= 16 else color.base.value
    if isinstance(color, Rgb):
        if colors >= 256:
            r, g, b = (round(c * 5 / 255) for c in (color.r, color.g, color.b))
            return 16 + 36 * r + 6 * g + b
        return _closest_base(color.r > 127, color.g > 127, color.b > 127)
    if isinstance(color, RgbLowRes):
        if colors >= 256:
            return 16 + 36 * color.r + 6 * color.g + color.b
        return _closest_base(color.r > 2, color.g > 2, color.b > 2)
    raise TypeError(f"not a color: {color!r}")


def _closest_base(red: bool, green: bool, blue: bool) -> int:
    return int(red) | int(green) << 1 | int(blue) << 2


# Pair ids handed out by with_any_color, after the ColorStyle pairs
FIRST_SCRATCH_PAIR = len(ColorStyle) + 1
SCRATCH_PAIRS = 16


class CursesBackend(Backend):
    """Backend reading numeric key codes from a curses window.

    Attributes:
        screen: The curses window used for input and output.
    """

    def __init__(self, screen, settings: Optional[Settings] = None):
        self.screen = screen
        self.settings = settings or Settings()
        self._event_queue = deque()
        self._current_pair = 0
        # (foreground, background) color indices -> scratch pair id
        self._scratch_pairs: Dict[Tuple[int, int], int] = {}
        self._next_scratch = 0

    @classmethod
    def init(cls, settings: Optional[Settings] = None) -> "CursesBackend":
        settings = settings or Settings()
        # Time ncurses waits after ESC to see if it's an escape sequence.
        # Must be set before initscr().
        os.environ["ESCDELAY"] = str(settings.escape_delay_ms)
        locale.setlocale(locale.LC_ALL, "")
        screen = None
        try:
            screen = curses.initscr()
            screen.keypad(True)
            if settings.mouse:
                curses.mousemask(curses.ALL_MOUSE_EVENTS)
            curses.noecho()
            curses.cbreak()
            curses.start_color()
        except curses.error as e:
            # endwin() itself fails when initscr() never returned.
            if screen is not None:
                curses.endwin()
            raise BackendInitError(f"cannot initialize curses: {e}") from e

        try:
            curses.curs_set(0)
        except curses.error:
            logger.debug("terminal cannot hide the cursor")
        screen.bkgd(" ", curses.color_pair(ColorStyle.BACKGROUND.id))

        backend = cls(screen, settings)
        backend._current_pair = curses.color_pair(ColorStyle.BACKGROUND.id)
        backend.set_refresh_rate(settings.fps)
        logger.debug("curses backend initialized (%d colors)", curses.COLORS)
        return backend

    def finish(self) -> None:
        curses.endwin()
        logger.debug("curses backend finished")

    def screen_size(self) -> Tuple[int, int]:
        rows, cols = self.screen.getmaxyx()
        return cols, rows

    def has_colors(self) -> bool:
        return curses.has_colors()

    def register_style(self, style: ColorStyle, foreground: Color, background: Color) -> None:
        colors = curses.COLORS
        curses.init_pair(style.id, find_closest(foreground, colors), find_closest(background, colors))

    @contextmanager
    def _with_pair(self, pair: int):
        previous = self._current_pair
        self.screen.attron(pair)
        self._current_pair = pair
        try:
            yield
        finally:
            self.screen.attroff(pair)
            self.screen.attron(previous)
            self._current_pair = previous

    def with_color(self, style: ColorStyle):
        return self._with_pair(curses.color_pair(style.id))

    def with_any_color(self, foreground: Color, background: Color):
        """Draw with an unregistered color pair.

        curses can only draw registered pairs. Each distinct combination
        gets one of ``SCRATCH_PAIRS`` pair ids, recycled oldest first, so a
        frame using more combinations than that recolors its earliest text.
        """
        colors = curses.COLORS
        key = (find_closest(foreground, colors), find_closest(background, colors))
        pair_id = self._scratch_pairs.get(key)
        if pair_id is None:
            pair_id = FIRST_SCRATCH_PAIR + self._next_scratch
            self._next_scratch = (self._next_scratch + 1) % SCRATCH_PAIRS
            self._scratch_pairs = {
                pair: used for pair, used in self._scratch_pairs.items() if used != pair_id
            }
            curses.init_pair(pair_id, *key)
            self._scratch_pairs[key] = pair_id
        return self._with_pair(curses.color_pair(pair_id))

    @contextmanager
    def with_effect(self, effect: Effect):
        attr = curses.A_REVERSE if effect is Effect.REVERSE else curses.A_NORMAL
        self.screen.attron(attr)
        try:
            yield
        finally:
            self.screen.attroff(attr)

    def clear(self) -> None:
        self.screen.clear()

    def refresh(self) -> None:
        self.screen.refresh()

    def print_at(self, pos: Tuple[int, int], text: str) -> None:
        x, y = pos
        try:
            self.screen.addstr(y, x, text)
        except curses.error:
            # Writing the bottom-right cell leaves the cursor off-screen;
            # the text itself is drawn.
            pass

    def set_refresh_rate(self, fps: int) -> None:
        if fps == 0:
            self.screen.timeout(-1)
        else:
            self.screen.timeout(1000 // fps)

    def poll_event(self) -> Event:
        if self._event_queue:
            return self._event_queue.popleft()

        code = self.screen.getch()

        # Is it a UTF-8 starting point?
        if 32 <= code <= 255 and code != 127:
            return self._read_char(code)
        if code == curses.KEY_MOUSE:
            return self._read_mouse(code)
        event = translate_code(code)
        if isinstance(event, Unknown):
            logger.debug("unknown key code %d", code)
        return event

    def _next_byte(self) -> Optional[int]:
        byte = self.screen.getch()
        return byte if 0 <= byte <= 255 else None

    def _read_char(self, first: int) -> Event:
        try:
            return Char(utf8.read_char(first, self._next_byte))
        except utf8.Utf8Error as e:
            logger.warning("invalid UTF-8 input %r: %s", e.data, e)
            return Unknown(e.data)

    def _read_mouse(self, code: int) -> Event:
        try:
            _, x, y, _, bstate = curses.getmouse()
        except curses.error:
            logger.warning("getmouse() failed after a mouse report")
            return Unknown(code_bytes(code))
        events = translate_mouse(Vec2(x, y), bstate)
        self._event_queue.extend(events[1:])
        return events[0]
