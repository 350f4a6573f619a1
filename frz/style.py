"""Terminal text styles and their parsing from theme configuration."""

from __future__ import annotations

import enum
import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Union


class StyleError(ValueError):
    """Raised when a colour, modifier or style definition is invalid."""


class NamedColor(enum.Enum):
    """The named terminal colours, plus the terminal's own default."""

    RESET = "reset"
    BLACK = "black"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"
    GRAY = "gray"
    DARK_GRAY = "dark_gray"
    LIGHT_RED = "light_red"
    LIGHT_GREEN = "light_green"
    LIGHT_YELLOW = "light_yellow"
    LIGHT_BLUE = "light_blue"
    LIGHT_MAGENTA = "light_magenta"
    LIGHT_CYAN = "light_cyan"
    WHITE = "white"


@dataclass(frozen=True)
class Rgb:
    """A 24-bit colour."""

    r: int
    g: int
    b: int


@dataclass(frozen=True)
class Indexed:
    """A colour from the 256-entry terminal palette."""

    index: int


Color = Union[NamedColor, Rgb, Indexed]


class Modifier(enum.Flag):
    """Text attributes that can be combined on a style."""

    BOLD = enum.auto()
    DIM = enum.auto()
    ITALIC = enum.auto()
    UNDERLINED = enum.auto()
    SLOW_BLINK = enum.auto()
    RAPID_BLINK = enum.auto()
    REVERSED = enum.auto()
    HIDDEN = enum.auto()
    CROSSED_OUT = enum.auto()


@dataclass(frozen=True)
class Style:
    """Foreground, background and modifiers applied to a piece of text."""

    fg: Color | None = None
    bg: Color | None = None
    modifiers: Modifier = Modifier(0)

    def with_fg(self, color: Color) -> Style:
        return replace(self, fg=color)

    def with_bg(self, color: Color) -> Style:
        return replace(self, bg=color)

    def add_modifier(self, modifier: Modifier) -> Style:
        return replace(self, modifiers=self.modifiers | modifier)


_NAMED_COLORS: dict[str, NamedColor] = {
    "reset": NamedColor.RESET,
    "none": NamedColor.RESET,
    "default": NamedColor.RESET,
    "black": NamedColor.BLACK,
    "red": NamedColor.RED,
    "green": NamedColor.GREEN,
    "yellow": NamedColor.YELLOW,
    "blue": NamedColor.BLUE,
    "magenta": NamedColor.MAGENTA,
    "cyan": NamedColor.CYAN,
    "gray": NamedColor.GRAY,
    "grey": NamedColor.GRAY,
    "dark_gray": NamedColor.DARK_GRAY,
    "dark_grey": NamedColor.DARK_GRAY,
    "light_red": NamedColor.LIGHT_RED,
    "light_green": NamedColor.LIGHT_GREEN,
    "light_yellow": NamedColor.LIGHT_YELLOW,
    "light_blue": NamedColor.LIGHT_BLUE,
    "light_magenta": NamedColor.LIGHT_MAGENTA,
    "light_cyan": NamedColor.LIGHT_CYAN,
    "white": NamedColor.WHITE,
}

_MODIFIERS: dict[str, Modifier] = {
    "bold": Modifier.BOLD,
    "dim": Modifier.DIM,
    "italic": Modifier.ITALIC,
    "underline": Modifier.UNDERLINED,
    "underlined": Modifier.UNDERLINED,
    "slow_blink": Modifier.SLOW_BLINK,
    "slowblink": Modifier.SLOW_BLINK,
    "rapid_blink": Modifier.RAPID_BLINK,
    "rapidblink": Modifier.RAPID_BLINK,
    "fast_blink": Modifier.RAPID_BLINK,
    "reversed": Modifier.REVERSED,
    "reverse": Modifier.REVERSED,
    "invert": Modifier.REVERSED,
    "inverted": Modifier.REVERSED,
    "hidden": Modifier.HIDDEN,
    "crossed_out": Modifier.CROSSED_OUT,
    "crossedout": Modifier.CROSSED_OUT,
    "strikethrough": Modifier.CROSSED_OUT,
}

_DECIMAL_U8 = re.compile(r"\+?[0-9]+")
_HEX_U8 = re.compile(r"\+?[0-9a-fA-F]+")


def _parse_u8(text: str, pattern: re.Pattern[str] = _DECIMAL_U8, base: int = 10) -> int | None:
    if not pattern.fullmatch(text):
        return None
    number = int(text, base)
    return number if number <= 255 else None


def _normalise_key(value: str) -> str:
    lowered = "".join(ch.lower() if ch.isascii() else ch for ch in value.strip())
    return lowered.replace("-", "_").replace(" ", "_")


def _parse_hex_colour(hex_text: str) -> Rgb:
    if len(hex_text) == 3:
        expanded = "".join(ch * 2 for ch in hex_text)
    elif len(hex_text) == 6:
        expanded = hex_text
    else:
        raise StyleError("hex colours must be 3 or 6 characters long")

    components = []
    for name, part in zip(("red", "green", "blue"), (expanded[0:2], expanded[2:4], expanded[4:6])):
        number = _parse_u8(part, _HEX_U8, 16)
        if number is None:
            raise StyleError(f"invalid {name} component `{hex_text}`")
        components.append(number)
    return Rgb(*components)


def _parse_rgb_triplet(body: str) -> Rgb:
    components = [part.strip() for part in body.split(",")]
    if len(components) != 3:
        raise StyleError(
            f"expected three components for rgb() colour, found {len(components)}"
        )
    values = []
    for letter, part in zip("rgb", components):
        number = _parse_u8(part)
        if number is None:
            raise StyleError(
                f"invalid {letter}-component `{part}` in rgb() colour specification"
            )
        values.append(number)
    return Rgb(*values)


def parse_color(value: str) -> Color:
    """Parse a colour given as hex, rgb(), ansi(), a palette index or a name."""
    text = value.strip()

    if text.startswith("#"):
        return _parse_hex_colour(text[1:])

    if text.startswith("rgb(") and text.endswith(")"):
        return _parse_rgb_triplet(text[len("rgb("):-1])

    if text.startswith("ansi(") and text.endswith(")"):
        body = text[len("ansi("):-1]
        index = _parse_u8(body.strip())
        if index is None:
            raise StyleError(f"invalid ANSI colour index `{body}`")
        return Indexed(index)

    index = _parse_u8(text)
    if index is not None:
        return Indexed(index)

    key = _normalise_key(text)
    try:
        return _NAMED_COLORS[key]
    except KeyError:
        raise StyleError(f"unknown colour `{key}`") from None


def parse_modifier(value: str) -> Modifier:
    """Parse a text modifier name such as ``bold`` or ``strikethrough``."""
    key = _normalise_key(value)
    try:
        return _MODIFIERS[key]
    except KeyError:
        raise StyleError(f"unknown modifier `{key}`") from None


def _optional_str(mapping: Mapping[str, Any], key: str) -> str | None:
    value = mapping.get(key)
    if value is not None and not isinstance(value, str):
        raise StyleError(f"`{key}` must be a string")
    return value


@dataclass(frozen=True)
class StyleConfig:
    """A style as written in a theme file, before its values are parsed."""

    fg: str | None = None
    bg: str | None = None
    modifiers: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, mapping: Any) -> StyleConfig:
        if not isinstance(mapping, Mapping):
            raise StyleError("style definition must be a table")
        modifiers = mapping.get("modifiers", [])
        if not isinstance(modifiers, (list, tuple)) or not all(
            isinstance(item, str) for item in modifiers
        ):
            raise StyleError("`modifiers` must be a list of strings")
        return cls(
            fg=_optional_str(mapping, "fg"),
            bg=_optional_str(mapping, "bg"),
            modifiers=tuple(modifiers),
        )

    def to_style(self, context: str) -> Style:
        style = Style()

        if self.fg is not None:
            try:
                style = style.with_fg(parse_color(self.fg))
            except StyleError as err:
                raise StyleError(
                    f"{context}: invalid foreground colour `{self.fg}`: {err}"
                ) from err

        if self.bg is not None:
            try:
                style = style.with_bg(parse_color(self.bg))
            except StyleError as err:
                raise StyleError(
                    f"{context}: invalid background colour `{self.bg}`: {err}"
                ) from err

        for modifier in self.modifiers:
            try:
                style = style.add_modifier(parse_modifier(modifier))
            except StyleError as err:
                raise StyleError(f"{context}: invalid modifier `{modifier}`: {err}") from err

        return style