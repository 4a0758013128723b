"""
Runtime settings and logging setup.

Settings can be given explicitly or read from ``TERM_VIEWS_*`` environment
variables with :meth:`Settings.from_env`.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "TERM_VIEWS_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "NOTSET")


@dataclass(frozen=True)
class Settings:
    """Options shared by the backends and the controller.

    Attributes:
        backend: Name of the terminal driver ("curses" or "blessed").
        fps: Refresh rate in frames per second, 0 to block on input.
        escape_delay_ms: How long to wait after ESC for an escape sequence.
        mouse: Whether to enable mouse reporting.
        log_file: Path of the log file, or None to disable logging.
        log_level: Level name for the ``term_views`` logger.
    """
    backend: str = "curses"
    fps: int = 0
    escape_delay_ms: int = 25
    mouse: bool = True
    log_file: Optional[str] = None
    log_level: str = "WARNING"

    def __post_init__(self):
        if self.fps < 0:
            raise ValueError(f"fps must be >= 0, got {self.fps}")
        if self.escape_delay_ms < 0:
            raise ValueError(f"escape_delay_ms must be >= 0, got {self.escape_delay_ms}")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``TERM_VIEWS_*`` variables, defaulting the rest.

        Raises:
            ValueError: if a numeric or boolean variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        def get(name):
            return env.get(ENV_PREFIX + name)

        return cls(
            backend=get("BACKEND") or defaults.backend,
            fps=_parse_int(get("FPS"), defaults.fps, "FPS"),
            escape_delay_ms=_parse_int(get("ESCDELAY"), defaults.escape_delay_ms, "ESCDELAY"),
            mouse=_parse_bool(get("MOUSE"), defaults.mouse, "MOUSE"),
            log_file=get("LOG_FILE") or defaults.log_file,
            log_level=(get("LOG_LEVEL") or defaults.log_level).upper(),
        )


def _parse_int(value, default, name):
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {value!r}") from None


def _parse_bool(value, default, name):
    if value is None or value == "":
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be a boolean, got {value!r}")


def configure_logging(settings: Settings) -> logging.Logger:
    """Attach a handler to the ``term_views`` logger.

    The terminal belongs to the UI while it runs, so records only ever go
    to ``settings.log_file``. Without a log file a NullHandler is used.
    """
    logger = logging.getLogger("term_views")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if settings.log_file:
        handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s"
        ))
        logger.setLevel(settings.log_level)
    else:
        handler = logging.NullHandler()
    logger.addHandler(handler)
    logger.propagate = False
    return logger
