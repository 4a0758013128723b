"""
Terminal Views Library

The engine of a terminal user-interface toolkit: backends turn raw terminal
input into canonical events, views negotiate their size and route events
along the focus path, and a stack of layers composes modal surfaces.
"""

from .config import Settings, configure_logging
from .controller import Controller
from .errors import BackendInitError, ProgrammerError, TermViewsError, ViewNotFound
from .event import (
    AltChar, Callback, Char, CtrlChar, Event, EventResult, Exit, Key,
    KeyPress, Modifier, Mouse, MouseButton, MouseEvent, MousePress,
    MouseRelease, Refresh, Unknown, WheelDown, WheelUp, WindowResize,
)
from .printer import Printer
from .stack_view import Placement, StackView
from .theme import BaseColor, Color, ColorStyle, Dark, Effect, Light, Rgb, RgbLowRes, Theme
from .vec import Vec2
from .view import Direction, Offset, Position, Selector, View, ViewWrapper
from .views import DummyView, IdView, Layer, LinearLayout, Orientation, ShadowView

__all__ = [
    'AltChar',
    'BackendInitError',
    'BaseColor',
    'Callback',
    'Char',
    'Color',
    'ColorStyle',
    'Controller',
    'CtrlChar',
    'Dark',
    'Direction',
    'DummyView',
    'Effect',
    'Event',
    'EventResult',
    'Exit',
    'IdView',
    'Key',
    'KeyPress',
    'Layer',
    'Light',
    'LinearLayout',
    'Modifier',
    'Mouse',
    'MouseButton',
    'MouseEvent',
    'MousePress',
    'MouseRelease',
    'Offset',
    'Orientation',
    'Placement',
    'Position',
    'Printer',
    'ProgrammerError',
    'Refresh',
    'Rgb',
    'RgbLowRes',
    'Selector',
    'Settings',
    'ShadowView',
    'StackView',
    'TermViewsError',
    'Theme',
    'Unknown',
    'Vec2',
    'View',
    'ViewNotFound',
    'ViewWrapper',
    'WheelDown',
    'WheelUp',
    'WindowResize',
    'configure_logging',
]

__version__ = '0.1.0'
