"""
Terminal drivers.

``init()`` picks a driver by name; both convert their raw input into the
same events.
"""

import logging
from typing import Callable, Dict, Optional, Type

from ..config import Settings
from ..errors import BackendInitError
from .base import Backend

logger = logging.getLogger(__name__)


def _curses() -> Type[Backend]:
    from .curses_backend import CursesBackend
    return CursesBackend


def _blessed() -> Type[Backend]:
    from .blessed_backend import BlessedBackend
    return BlessedBackend


# Imported lazily: each driver pulls in its own terminal library.
BACKENDS: Dict[str, Callable[[], Type[Backend]]] = {
    "curses": _curses,
    "blessed": _blessed,
}


def get_backend_class(name: str) -> Type[Backend]:
    """Return the backend class registered as ``name``.

    Raises:
        BackendInitError: if no backend has that name.
    """
    try:
        loader = BACKENDS[name]
    except KeyError:
        raise BackendInitError(
            f"unknown backend {name!r}, expected one of {sorted(BACKENDS)}"
        ) from None
    return loader()


def init(name: Optional[str] = None, settings: Optional[Settings] = None) -> Backend:
    """Initialize and return the backend ``name`` (default: ``settings.backend``)."""
    settings = settings or Settings()
    name = name or settings.backend
    logger.debug("initializing %s backend", name)
    return get_backend_class(name).init(settings)


__all__ = [
    'Backend',
    'BACKENDS',
    'get_backend_class',
    'init',
]
