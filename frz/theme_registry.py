"""Registry of named themes with case-insensitive lookup and aliases."""

from __future__ import annotations

import functools
import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from frz.theme import (
    AliasConflict,
    Theme,
    ThemeDefinition,
    ThemeDescriptor,
    ThemeRegistration,
    ThemeRegistrationReport,
    load_themes,
)

_BUILTIN_THEME_DIR = Path(__file__).with_name("themes")


def _ascii_lower(value: str) -> str:
    return "".join(ch.lower() if ch.isascii() else ch for ch in value)


def _normalize_name(name: str) -> str:
    return _ascii_lower(name.strip())


@dataclass
class _ThemeEntry:
    display_name: str
    theme: Theme
    bat_theme: str | None = None
    aliases: list[str] = field(default_factory=list)


class ThemeRegistry:
    """Themes keyed by normalised name, with aliases pointing at canonical names."""

    def __init__(self) -> None:
        self._canonical: dict[str, _ThemeEntry] = {}
        self._aliases: dict[str, str] = {}

    def register(
        self, registration: ThemeRegistration, report: ThemeRegistrationReport
    ) -> None:
        """Add or replace a theme, recording what happened in ``report``."""
        normalized = _normalize_name(registration.name)
        entry = self._canonical.get(normalized)
        removed_aliases: list[str] = []

        if entry is not None:
            report.replaced.append(entry.display_name)
            removed_aliases = entry.aliases
            entry.aliases = []
            entry.display_name = registration.name
            entry.theme = registration.theme
            entry.bat_theme = registration.bat_theme
        else:
            entry = _ThemeEntry(
                display_name=registration.name,
                theme=registration.theme,
                bat_theme=registration.bat_theme,
            )
            self._canonical[normalized] = entry
            report.inserted.append(registration.name)

        for alias in removed_aliases:
            self._aliases.pop(_normalize_name(alias), None)

        for alias in registration.aliases:
            alias_normalized = _normalize_name(alias)
            if alias_normalized == normalized:
                continue

            existing = self._aliases.get(alias_normalized)
            if existing is not None and existing != normalized:
                report.alias_conflicts.append(
                    AliasConflict(alias=alias, existing=existing, attempted=normalized)
                )
                continue

            self._aliases[alias_normalized] = normalized
            lowered = _ascii_lower(alias)
            if not any(_ascii_lower(known) == lowered for known in entry.aliases):
                entry.aliases.append(alias)

        entry.aliases.sort(key=_ascii_lower)

    def register_all(
        self, registrations: Iterable[ThemeRegistration]
    ) -> ThemeRegistrationReport:
        """Register every theme given and return one report for all of them."""
        report = ThemeRegistrationReport()
        for registration in registrations:
            self.register(registration, report)
        return report

    def _entry(self, name: str) -> _ThemeEntry | None:
        normalized = _normalize_name(name)
        entry = self._canonical.get(normalized)
        if entry is not None:
            return entry
        target = self._aliases.get(normalized)
        return self._canonical.get(target) if target is not None else None

    def get(self, name: str) -> Theme | None:
        """Look a theme up by name or alias, ignoring case and surrounding space."""
        entry = self._entry(name)
        return entry.theme if entry is not None else None

    def names(self) -> list[str]:
        """Display names ordered by their normalised key."""
        return [self._canonical[key].display_name for key in sorted(self._canonical)]

    def descriptors(self) -> list[ThemeDescriptor]:
        """Descriptors ordered by normalised key."""
        return [
            ThemeDescriptor(
                name=entry.display_name,
                aliases=tuple(entry.aliases),
                theme=entry.theme,
                bat_theme=entry.bat_theme,
            )
            for entry in (self._canonical[key] for key in sorted(self._canonical))
        ]

    def bat_theme(self, name: str) -> str | None:
        """The syntax-highlighting theme paired with the named theme, if any."""
        entry = self._entry(name)
        return entry.bat_theme if entry is not None else None


_lock = threading.RLock()


@functools.cache
def _global_registry() -> ThemeRegistry:
    registry = ThemeRegistry()
    if _BUILTIN_THEME_DIR.is_dir():
        registry.register_all(load_themes(_BUILTIN_THEME_DIR).registrations)
    return registry


def _registry() -> ThemeRegistry:
    with _lock:
        return _global_registry()


def register_additional(
    registrations: Iterable[ThemeRegistration],
) -> ThemeRegistrationReport:
    """Register more themes with the shared registry."""
    with _lock:
        return _registry().register_all(registrations)


def register_definitions(
    definitions: Iterable[ThemeDefinition],
) -> ThemeRegistrationReport:
    """Register static theme definitions with the shared registry."""
    return register_additional(
        definition.to_registration() for definition in definitions
    )


def by_name(name: str) -> Theme | None:
    """Look a theme up in the shared registry by case-insensitive name."""
    with _lock:
        return _registry().get(name)


def names() -> list[str]:
    """Canonical theme names, sorted case-insensitively."""
    with _lock:
        found = _registry().names()
    return sorted(found, key=_ascii_lower)


def bat_theme(name: str) -> str | None:
    """The syntax-highlighting theme paired with a theme in the shared registry."""
    with _lock:
        return _registry().bat_theme(name)


def descriptors() -> list[ThemeDescriptor]:
    """Descriptors of every known theme, sorted case-insensitively by name."""
    with _lock:
        found = _registry().descriptors()
    return sorted(found, key=lambda descriptor: _ascii_lower(descriptor.name))