"""Common color values bundled into a theme."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Color(Enum):
    """Terminal colors."""

    BLACK = "black"
    DARK_GREY = "dark_grey"
    RED = "red"
    DARK_RED = "dark_red"
    GREEN = "green"
    DARK_GREEN = "dark_green"
    YELLOW = "yellow"
    DARK_YELLOW = "dark_yellow"
    BLUE = "blue"
    DARK_BLUE = "dark_blue"
    MAGENTA = "magenta"
    DARK_MAGENTA = "dark_magenta"
    CYAN = "cyan"
    DARK_CYAN = "dark_cyan"
    WHITE = "white"
    GREY = "grey"


@dataclass
class Theme:
    """Named palette used by the shell."""

    black: Color = Color.BLACK
    dark_grey: Color = Color.DARK_GREY
    red: Color = Color.RED
    dark_red: Color = Color.DARK_RED
    green: Color = Color.GREEN
    dark_green: Color = Color.DARK_GREEN
    yellow: Color = Color.YELLOW
    dark_yellow: Color = Color.DARK_YELLOW
    blue: Color = Color.BLUE
    dark_blue: Color = Color.DARK_BLUE
    magenta: Color = Color.MAGENTA
    dark_magenta: Color = Color.DARK_MAGENTA
    cyan: Color = Color.CYAN
    dark_cyan: Color = Color.DARK_CYAN
    white: Color = Color.WHITE
    light_grey: Color = Color.GREY