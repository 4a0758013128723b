"""
Contract every terminal driver implements.

A backend owns the terminal between :meth:`Backend.init` and
:meth:`Backend.finish`. It reports the screen size, registers color
styles, prints text at cell coordinates and turns raw input into the
canonical events of :mod:`term_views.event`.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

from ..config import Settings
from ..event import Event
from ..theme import Color, ColorStyle, Effect


class Backend(ABC):
    """Abstract terminal driver."""

    @classmethod
    @abstractmethod
    def init(cls, settings: Optional[Settings] = None) -> "Backend":
        """Set up the terminal and return a ready backend.

        Raises:
            BackendInitError: if the terminal cannot be put in the needed mode.
        """

    @abstractmethod
    def finish(self) -> None:
        """Restore the terminal to its original mode."""

    @abstractmethod
    def screen_size(self) -> Tuple[int, int]:
        """Current screen size as ``(columns, rows)``."""

    @abstractmethod
    def has_colors(self) -> bool:
        """Whether the terminal can display colors."""

    @abstractmethod
    def register_style(self, style: ColorStyle, foreground: Color, background: Color) -> None:
        """Associate a foreground/background pair with ``style``."""

    @abstractmethod
    def with_color(self, style: ColorStyle):
        """Context manager: ``style`` is active inside, the previous one after."""

    @abstractmethod
    def with_any_color(self, foreground: Color, background: Color):
        """Context manager: an explicit color pair is active inside."""

    @abstractmethod
    def with_effect(self, effect: Effect):
        """Context manager: ``effect`` is turned on inside, off after."""

    @abstractmethod
    def clear(self) -> None:
        """Clear the whole screen."""

    @abstractmethod
    def refresh(self) -> None:
        """Flush pending output to the terminal."""

    @abstractmethod
    def print_at(self, pos: Tuple[int, int], text: str) -> None:
        """Print ``text`` starting at cell ``(x, y)``."""

    @abstractmethod
    def set_refresh_rate(self, fps: int) -> None:
        """Emit a Refresh event ``fps`` times per second, or block if 0."""

    @abstractmethod
    def poll_event(self) -> Event:
        """Block until the next event is available and return it."""
