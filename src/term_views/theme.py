"""
Colors, color styles and text effects.

A ``ColorStyle`` names a role (background, shadow, primary text...). The
``Theme`` maps each role to a foreground/background ``Color`` pair, which
backends register once at startup and then refer to by the style's id.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Tuple


class BaseColor(Enum):
    """One of the 8 base terminal colors, in ANSI order."""
    BLACK = 0
    RED = 1
    GREEN = 2
    YELLOW = 3
    BLUE = 4
    MAGENTA = 5
    CYAN = 6
    WHITE = 7


class Color:
    """Base class for colors a backend knows how to approximate."""


@dataclass(frozen=True)
class Dark(Color):
    """The normal-intensity version of a base color."""
    base: BaseColor


@dataclass(frozen=True)
class Light(Color):
    """The high-intensity version of a base color."""
    base: BaseColor


@dataclass(frozen=True)
class Rgb(Color):
    """A 24-bit color, each channel 0-255."""
    r: int
    g: int
    b: int


@dataclass(frozen=True)
class RgbLowRes(Color):
    """A color from the 6x6x6 cube, each channel 0-5."""
    r: int
    g: int
    b: int


class ColorStyle(Enum):
    """Role of a piece of text. The value is the registered pair id."""
    BACKGROUND = 1
    SHADOW = 2
    PRIMARY = 3
    SECONDARY = 4
    TERTIARY = 5
    TITLE_PRIMARY = 6
    TITLE_SECONDARY = 7
    HIGHLIGHT = 8
    HIGHLIGHT_INACTIVE = 9

    @property
    def id(self) -> int:
        return self.value


class Effect(Enum):
    """Text effect applied on top of the color style."""
    SIMPLE = "simple"
    REVERSE = "reverse"


def _default_palette() -> Dict[ColorStyle, Tuple[Color, Color]]:
    return {
        ColorStyle.BACKGROUND: (Dark(BaseColor.BLUE), Dark(BaseColor.BLUE)),
        ColorStyle.SHADOW: (Dark(BaseColor.BLACK), Dark(BaseColor.BLACK)),
        ColorStyle.PRIMARY: (Dark(BaseColor.BLACK), Dark(BaseColor.WHITE)),
        ColorStyle.SECONDARY: (Dark(BaseColor.BLUE), Dark(BaseColor.WHITE)),
        ColorStyle.TERTIARY: (Light(BaseColor.WHITE), Dark(BaseColor.WHITE)),
        ColorStyle.TITLE_PRIMARY: (Dark(BaseColor.RED), Dark(BaseColor.WHITE)),
        ColorStyle.TITLE_SECONDARY: (Dark(BaseColor.YELLOW), Dark(BaseColor.WHITE)),
        ColorStyle.HIGHLIGHT: (Dark(BaseColor.WHITE), Dark(BaseColor.RED)),
        ColorStyle.HIGHLIGHT_INACTIVE: (Dark(BaseColor.WHITE), Dark(BaseColor.BLUE)),
    }


@dataclass
class Theme:
    """Visual settings shared by every view.

    Attributes:
        shadow: Whether floating layers draw a drop shadow.
        palette: Foreground/background pair for each color style.
    """
    shadow: bool = True
    palette: Dict[ColorStyle, Tuple[Color, Color]] = field(default_factory=_default_palette)

    def register(self, backend) -> None:
        """Register every style of the palette with ``backend``."""
        for style, (fg, bg) in self.palette.items():
            backend.register_style(style, fg, bg)
