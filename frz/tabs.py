"""Layout and titles for the input row and its tab selector."""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass

from frz.style import Style
from frz.theme import Theme

_U16_MAX = 0xFFFF
_MIN_TABS_WIDTH = 12


@dataclass(frozen=True)
class TabItem:
    """A tab header: the mode it selects and its label."""

    mode: Hashable
    label: str


@dataclass(frozen=True)
class Length:
    """A layout section of exactly ``value`` columns."""

    value: int


@dataclass(frozen=True)
class Min:
    """A layout section of at least ``value`` columns."""

    value: int


@dataclass(frozen=True)
class TabTitle:
    """The rendered text of a tab and the style it is drawn in."""

    label: str
    style: Style


def calculate_prompt_width(prompt: str) -> int:
    """Columns taken by the prompt and its `` > `` separator, or 0 without a prompt."""
    if not prompt:
        return 0
    return min(len(prompt.encode("utf-8")) + 3, _U16_MAX)


def layout_constraints(
    has_prompt: bool, prompt_width: int, tabs_width: int
) -> list[Length | Min]:
    """Sections of the input row: optional prompt, input, then tabs."""
    if has_prompt:
        return [Length(prompt_width), Min(1), Length(tabs_width)]
    return [Min(1), Length(tabs_width)]


def selected_tab_index(mode: Hashable, tabs: Sequence[TabItem]) -> int:
    """Position of the tab for ``mode``, or 0 when it has none."""
    return next((index for index, tab in enumerate(tabs) if tab.mode == mode), 0)


def build_tab_titles(
    theme: Theme, selected: int, tabs: Sequence[TabItem]
) -> list[TabTitle]:
    """Padded tab labels, styled as active or inactive."""
    active = theme.header
    inactive = theme.tab_inactive_style()
    return [
        TabTitle(f" {tab.label} ", active if index == selected else inactive)
        for index, tab in enumerate(tabs)
    ]


def calculate_tabs_width(tabs: Sequence[TabItem]) -> int:
    """Columns needed for all tabs, never less than twelve."""
    width = sum(len(tab.label) + 3 for tab in tabs)
    return max(min(width, _U16_MAX), _MIN_TABS_WIDTH)