"""
Application root tying a backend to a stack of layers.

The controller is what callbacks receive. Each call to :meth:`Controller.step`
runs one tick: poll an event, route it, run the resulting callback, lay
the layers out and draw them. Looping over ``step`` is left to the
application.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from . import backend as backends
from .backend import Backend
from .config import Settings, configure_logging
from .errors import ViewNotFound
from .event import Callback, Event, Exit, WindowResize
from .printer import Printer
from .stack_view import StackView
from .theme import ColorStyle, Theme
from .vec import Vec2
from .view import Position, Selector, View

logger = logging.getLogger(__name__)


class Controller:
    """Owns the backend, the theme and the screen's layer stack.

    Attributes:
        backend: The terminal driver.
        theme: Theme shared by every view.
        settings: Runtime settings.
        screen: The stack of layers.
        running: False once :meth:`quit` was called.
    """

    def __init__(
        self,
        backend: Backend,
        *,
        theme: Optional[Theme] = None,
        settings: Optional[Settings] = None,
    ):
        self.backend = backend
        self.theme = theme or Theme()
        self.settings = settings or Settings()
        self.screen = StackView()
        self.running = True
        self.global_callbacks: Dict[Event, List[Callback]] = {}

        if backend.has_colors():
            self.theme.register(backend)
        backend.set_refresh_rate(self.settings.fps)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None,
                      theme: Optional[Theme] = None) -> "Controller":
        """Configure logging, initialize the configured backend and wrap it."""
        settings = settings or Settings.from_env()
        configure_logging(settings)
        return cls(backends.init(settings=settings), theme=theme, settings=settings)

    def add_layer(self, view: View) -> None:
        self.screen.add_layer(view)

    def add_fullscreen_layer(self, view: View) -> None:
        self.screen.add_fullscreen_layer(view)

    def add_layer_at(self, position: Position, view: View) -> None:
        self.screen.add_layer_at(position, view)

    def pop_layer(self) -> Optional[View]:
        return self.screen.pop_layer()

    def add_global_callback(self, event: Event, fn: Callable[["Controller"], None]) -> None:
        """Run ``fn`` when ``event`` reaches the root without being consumed."""
        self.global_callbacks.setdefault(event, []).append(Callback.from_fn(fn))

    def clear_global_callbacks(self, event: Event) -> None:
        self.global_callbacks.pop(event, None)

    def call_on_id(self, id: str, fn: Callable[[View], Any]) -> Any:
        """Call ``fn`` on the first view with this id and return its result.

        Returns None if no view matches.
        """
        found = []
        self.screen.call_on_any(Selector(id), found.append)
        if not found:
            return None
        return fn(found[0])

    def find_id(self, id: str) -> View:
        """Return the first view with this id.

        Raises:
            ViewNotFound: if no view matches.
        """
        found = []
        self.screen.call_on_any(Selector(id), found.append)
        if not found:
            raise ViewNotFound(Selector(id))
        return found[0]

    def focus_id(self, id: str) -> None:
        """Move focus to the view with this id.

        Raises:
            ViewNotFound: if no focusable view matches.
        """
        selector = Selector(id)
        if not self.screen.focus_view(selector):
            raise ViewNotFound(selector)

    def set_fps(self, fps: int) -> None:
        self.backend.set_refresh_rate(fps)

    def quit(self) -> None:
        self.running = False

    def is_running(self) -> bool:
        return self.running

    def screen_size(self) -> Vec2:
        return Vec2.of(self.backend.screen_size())

    def on_event(self, event: Event) -> None:
        """Route ``event`` to the top layer, then run whatever it asked for.

        Global callbacks for the event run when no view consumes it.
        """
        result = self.screen.on_event(event)
        if result.is_consumed():
            result.process(self)
            return
        for callback in self.global_callbacks.get(event, []):
            callback(self)

    def refresh_layout(self) -> None:
        self.screen.layout(self.screen_size())

    def draw(self) -> None:
        printer = Printer(self.backend, self.theme, size=self.screen_size())
        with printer.with_color(ColorStyle.BACKGROUND):
            for y in range(printer.size.y):
                printer.print_hline((0, y), printer.size.x, " ")
        self.screen.draw(printer)
        self.backend.refresh()

    def step(self) -> None:
        """Run one tick: poll, route, callback, layout, draw."""
        event = self.backend.poll_event()
        if isinstance(event, Exit):
            logger.debug("exit event received")
            self.quit()
            return
        if isinstance(event, WindowResize):
            self.backend.clear()
        self.on_event(event)

        if self.running:
            self.refresh_layout()
            self.draw()
