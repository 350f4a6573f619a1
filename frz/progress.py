"""Tracking of indexing progress per data set, formatted for the status line."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from frz.index import IndexData

_SEPARATOR = " • "


@dataclass
class _ProgressEntry:
    indexed: int = 0
    total: int | None = None

    def set_total(self, total: int | None) -> None:
        if total is not None and self.total is not None and total < self.total:
            return
        if total is not None and total < self.indexed:
            self.total = self.indexed
            return
        self.total = total

    def record(self, count: int) -> None:
        if count > self.indexed:
            self.indexed = count

    def is_complete(self) -> bool:
        if self.total is None:
            return False
        if self.total == 0:
            return True
        return self.indexed >= self.total

    def format(self) -> str:
        if self.total is None:
            return str(self.indexed)
        if self.total == 0:
            return "0"
        if self.is_complete():
            return str(self.total)
        return f"{self.indexed}/{self.total}"


@dataclass
class IndexProgress:
    """How many items have been indexed relative to the expected totals."""

    _entries: dict[str, _ProgressEntry] = field(default_factory=dict, repr=False)
    complete: bool = False

    @classmethod
    def with_unknown_totals(cls) -> IndexProgress:
        """A tracker whose totals will be supplied later."""
        return cls()

    def register_dataset(self, key: str) -> None:
        """Start tracking ``key`` if it is not tracked yet."""
        self._entries.setdefault(key, _ProgressEntry())

    def record_indexed(self, updates: Iterable[tuple[str, int]]) -> None:
        """Record indexed counts; counts never go down."""
        for key, count in updates:
            self.register_dataset(key)
            self._entries[key].record(count)
        self._update_completion()

    def set_totals(self, totals: Iterable[tuple[str, int | None]]) -> None:
        """Update the expected totals of one or more data sets."""
        for key, total in totals:
            self.register_dataset(key)
            self._entries[key].set_total(total)
        self._update_completion()

    def mark_complete(self) -> None:
        """Mark indexing as finished regardless of the recorded totals."""
        self.complete = True

    def status(self, labels: Iterable[tuple[str, str]] = ()) -> tuple[str, bool]:
        """The status text, in registration order, and whether indexing is complete."""
        label_map: dict[str, str] = {}
        for key, label in labels:
            label_map.setdefault(key, label)
        segments = [
            f"Indexed {label_map.get(key, key)}: {entry.format()}"
            for key, entry in self._entries.items()
        ]
        return _SEPARATOR.join(segments), self.complete

    def refresh_from_data(
        self, data: IndexData, datasets: Iterable[tuple[str, int]]
    ) -> None:
        """Reconcile the tracked counts with a snapshot of the data."""
        pairs = list(datasets)
        self.set_totals((key, count) for key, count in pairs)
        self.record_indexed(pairs)
        self.mark_complete()
        if not self._entries:
            attributes = len(data.attributes)
            files = len(data.files)
            self.register_dataset("attributes")
            self.register_dataset("files")
            self.record_indexed([("attributes", attributes), ("files", files)])
            self.set_totals([("attributes", attributes), ("files", files)])
            self.mark_complete()

    def _update_completion(self) -> None:
        self.complete = bool(self._entries) and all(
            entry.is_complete() for entry in self._entries.values()
        )