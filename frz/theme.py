"""Theme types and loading of theme definitions from TOML files."""

from __future__ import annotations

import tomllib
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from os import PathLike
from pathlib import Path
from typing import Any

from frz.style import Color, NamedColor, Style, StyleConfig, StyleError


class ThemeConfigError(ValueError):
    """Raised when a theme definition cannot be read or is invalid."""


@dataclass(frozen=True)
class Theme:
    """The set of styles used to draw the interface."""

    header: Style
    row_highlight: Style
    prompt: Style
    empty: Style
    highlight: Style

    def header_fg(self) -> Color:
        return self.header.fg if self.header.fg is not None else NamedColor.RESET

    def header_bg(self) -> Color:
        return self.header.bg if self.header.bg is not None else NamedColor.RESET

    def row_highlight_bg(self) -> Color:
        bg = self.row_highlight.bg
        return bg if bg is not None else NamedColor.RESET

    def tab_inactive_style(self) -> Style:
        return Style(fg=self.header_fg(), bg=self.row_highlight_bg())

    def tab_highlight_style(self) -> Style:
        return Style(bg=self.header_bg())


@dataclass(frozen=True)
class ThemeRegistration:
    """A theme with the names it can be looked up by."""

    name: str
    theme: Theme
    aliases: tuple[str, ...] = ()
    bat_theme: str | None = None

    def alias(self, alias: str) -> ThemeRegistration:
        return replace(self, aliases=(*self.aliases, alias))

    def with_bat_theme(self, bat_theme: str) -> ThemeRegistration:
        return replace(self, bat_theme=bat_theme)

    def with_aliases(self, aliases: Iterable[str]) -> ThemeRegistration:
        return replace(self, aliases=(*self.aliases, *aliases))


@dataclass(frozen=True)
class ThemeDefinition:
    """A statically defined theme."""

    name: str
    theme: Theme
    aliases: tuple[str, ...] = ()

    def to_registration(self) -> ThemeRegistration:
        return ThemeRegistration(name=self.name, theme=self.theme, aliases=tuple(self.aliases))


@dataclass(frozen=True)
class AliasConflict:
    """An alias that could not be registered because it already names another theme."""

    alias: str
    existing: str
    attempted: str


@dataclass
class ThemeRegistrationReport:
    """Summary of what happened while registering themes."""

    inserted: list[str] = field(default_factory=list)
    replaced: list[str] = field(default_factory=list)
    alias_conflicts: list[AliasConflict] = field(default_factory=list)

    def is_clean(self) -> bool:
        return not (self.inserted or self.replaced or self.alias_conflicts)


@dataclass(frozen=True)
class ThemeDescriptor:
    """Snapshot of a registered theme and its metadata."""

    name: str
    aliases: tuple[str, ...]
    theme: Theme
    bat_theme: str | None = None


@dataclass(frozen=True)
class ThemeDocument:
    """A parsed theme file."""

    registration: ThemeRegistration
    is_default: bool = False


@dataclass(frozen=True)
class BuiltinThemes:
    """All themes loaded from a directory, with the one chosen as default."""

    registrations: tuple[ThemeRegistration, ...]
    default_theme: Theme


_STYLE_KEYS = ("header", "row_highlight", "prompt", "empty", "highlight")


def _build_theme(styles: Any, context: str) -> Theme:
    if not isinstance(styles, dict):
        raise ThemeConfigError(f"{context}: `styles` must be a table")
    parsed: dict[str, Style] = {}
    for key in _STYLE_KEYS:
        if key not in styles:
            raise ThemeConfigError(f"{context}: missing style `{key}`")
        try:
            parsed[key] = StyleConfig.from_mapping(styles[key]).to_style(f"{context}.{key}")
        except StyleError as err:
            raise ThemeConfigError(f"{context}.{key}: {err}") from err
    return Theme(**parsed)


def parse_theme_document(text: str, context: str) -> ThemeDocument:
    """Parse one TOML theme definition; ``context`` names it in error messages."""
    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as err:
        raise ThemeConfigError(f"failed to parse theme definition in {context}: {err}") from err

    name = raw.get("name")
    if not isinstance(name, str):
        raise ThemeConfigError(f"{context}: `name` must be a string")

    aliases = raw.get("aliases", [])
    if not isinstance(aliases, list) or not all(isinstance(a, str) for a in aliases):
        raise ThemeConfigError(f"{context}: `aliases` must be a list of strings")

    is_default = raw.get("default", False)
    if not isinstance(is_default, bool):
        raise ThemeConfigError(f"{context}: `default` must be a boolean")

    bat_theme = raw.get("bat_theme")
    if bat_theme is not None and not isinstance(bat_theme, str):
        raise ThemeConfigError(f"{context}: `bat_theme` must be a string")

    if "styles" not in raw:
        raise ThemeConfigError(f"{context}: missing `styles` table")
    theme = _build_theme(raw["styles"], f"{context}.styles")

    registration = ThemeRegistration(name=name, theme=theme, bat_theme=bat_theme)
    registration = registration.with_aliases(
        alias for alias in (a.strip() for a in aliases) if alias
    )
    return ThemeDocument(registration=registration, is_default=is_default)


def load_themes(directory: str | PathLike[str]) -> BuiltinThemes:
    """Load every theme file directly inside ``directory``, in path order."""
    files = sorted(path for path in Path(directory).iterdir() if path.is_file())

    registrations: list[ThemeRegistration] = []
    default: ThemeRegistration | None = None

    for path in files:
        context = f'"{path.name}"'
        try:
            text = path.read_bytes().decode("utf-8")
        except UnicodeDecodeError as err:
            raise ThemeConfigError(f"{context} is not valid UTF-8") from err

        document = parse_theme_document(text, context)
        if document.is_default:
            if default is not None:
                raise ThemeConfigError(
                    "multiple built-in themes are marked as default "
                    f"(`{default.name}` and `{document.registration.name}`)"
                )
            default = document.registration
        registrations.append(document.registration)

    if not registrations:
        raise ThemeConfigError("no built-in theme definitions were found")

    default_theme = (default or registrations[0]).theme
    return BuiltinThemes(registrations=tuple(registrations), default_theme=default_theme)