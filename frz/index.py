"""Indexed search data and the incremental updates the indexer emits."""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field, replace
from pathlib import Path


@dataclass(frozen=True)
class FileEntry:
    """A file path relative to the indexed root, with the tags derived for it."""

    path: str
    tags: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", tuple(self.tags))


@dataclass(frozen=True)
class AttributeEntry:
    """A tag name and the number of files that carry it."""

    name: str
    count: int


@dataclass
class IndexData:
    """Everything that can be searched: files, attributes and their context."""

    files: list[FileEntry] = field(default_factory=list)
    attributes: list[AttributeEntry] = field(default_factory=list)
    context_label: str | None = None
    root: Path | None = None
    initial_query: str = ""


@dataclass(frozen=True)
class ProgressSnapshot:
    """How far indexing has got, as reported with each update."""

    indexed_attributes: int
    indexed_files: int
    total_attributes: int | None = None
    total_files: int | None = None
    complete: bool = False


@dataclass(frozen=True)
class IndexUpdate:
    """A batch of entries discovered by the indexer."""

    files: tuple[FileEntry, ...]
    attributes: tuple[AttributeEntry, ...]
    progress: ProgressSnapshot
    reset: bool = False
    cached_data: IndexData | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "files", tuple(self.files))
        object.__setattr__(self, "attributes", tuple(self.attributes))


def merge_update(data: IndexData, update: IndexUpdate) -> None:
    """Fold ``update`` into ``data``, keeping attributes sorted by name."""
    if update.reset:
        data.files.clear()
        data.attributes.clear()

    data.files.extend(update.files)

    for attribute in update.attributes:
        position = bisect.bisect_left(
            data.attributes, attribute.name, key=lambda existing: existing.name
        )
        if position < len(data.attributes) and data.attributes[position].name == attribute.name:
            data.attributes[position] = replace(
                data.attributes[position], count=attribute.count
            )
        else:
            data.attributes.insert(position, attribute)