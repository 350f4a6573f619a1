"""Batching of indexed files into updates, and replay of cached data."""

from __future__ import annotations

import time
from collections import Counter
from collections.abc import Callable, Iterator, Sequence
from itertools import islice

from frz.cache import CachedEntry, CacheWriter
from frz.index import AttributeEntry, FileEntry, IndexUpdate, ProgressSnapshot

MIN_BATCH_SIZE = 32
MAX_BATCH_SIZE = 1_024
DISPATCH_INTERVAL = 0.12

Sink = Callable[[IndexUpdate], None]


def batch_size_for(indexed_files: int) -> int:
    """How many pending files trigger a flush, growing as the index grows."""
    if indexed_files < 1_024:
        return MIN_BATCH_SIZE
    if indexed_files < 16_384:
        return 256
    return MAX_BATCH_SIZE


class UpdateBatcher:
    """Accumulates indexed files and sends them on in batches."""

    def __init__(
        self,
        emit_reset: bool,
        cache_writer: CacheWriter | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._facet_counts: Counter[str] = Counter()
        self._pending_attributes: dict[str, int] = {}
        self._pending_files: list[FileEntry] = []
        self._indexed_files = 0
        self._clock = clock
        self._last_dispatch = clock()
        self._emit_reset = emit_reset
        self._cache_writer = cache_writer

    def record_file(self, file: FileEntry) -> None:
        if self._cache_writer is not None:
            self._cache_writer.record(file)
        for tag in file.tags:
            self._facet_counts[tag] += 1
            self._pending_attributes[tag] = self._facet_counts[tag]
        self._indexed_files += 1
        self._pending_files.append(file)

    def _has_pending(self) -> bool:
        return bool(self._pending_files or self._pending_attributes)

    def should_flush(self) -> bool:
        if len(self._pending_files) >= batch_size_for(self._indexed_files):
            return True
        if not self._emit_reset and not self._has_pending():
            return False
        return self._clock() - self._last_dispatch >= DISPATCH_INTERVAL

    def flush(self, sink: Sink, complete: bool) -> None:
        """Send pending work; exceptions raised by ``sink`` propagate."""
        if not complete and not self._emit_reset and not self._has_pending():
            return

        files = tuple(self._pending_files)
        self._pending_files = []
        attributes = tuple(
            AttributeEntry(name, self._pending_attributes[name])
            for name in sorted(self._pending_attributes)
        )
        self._pending_attributes.clear()

        attribute_total = len(self._facet_counts)
        progress = ProgressSnapshot(
            indexed_attributes=attribute_total,
            indexed_files=self._indexed_files,
            total_attributes=attribute_total if complete else None,
            total_files=self._indexed_files if complete else None,
            complete=complete,
        )
        reset = self._emit_reset
        self._emit_reset = False

        sink(IndexUpdate(files=files, attributes=attributes, progress=progress, reset=reset))
        self._last_dispatch = self._clock()

    def finalize(self, sink: Sink) -> CacheWriter | None:
        """Send the final, complete update and hand back the cache writer."""
        self.flush(sink, True)
        return self._cache_writer


def _chunks(items: Sequence[FileEntry], size: int) -> Iterator[tuple[FileEntry, ...]]:
    iterator = iter(items)
    while chunk := tuple(islice(iterator, size)):
        yield chunk


def stream_cached_entry(entry: CachedEntry, preview_len: int | None, sink: Sink) -> None:
    """Replay cached files after the first ``preview_len`` in batches."""
    data = entry.data
    total_files = len(data.files)
    total_attributes = len(data.attributes)
    if total_files == 0 and total_attributes == 0:
        return

    start = min(preview_len or 0, total_files)
    attributes = tuple(data.attributes)
    remaining = data.files[start:]

    if not remaining:
        sink(
            IndexUpdate(
                files=(),
                attributes=attributes,
                progress=ProgressSnapshot(
                    indexed_attributes=total_attributes,
                    indexed_files=total_files,
                    total_attributes=total_attributes,
                    total_files=total_files,
                    complete=False,
                ),
                reset=preview_len is None,
            )
        )
        return

    dispatched = start
    first_batch = True
    for chunk in _chunks(remaining, MAX_BATCH_SIZE):
        dispatched += len(chunk)
        sink(
            IndexUpdate(
                files=chunk,
                attributes=attributes,
                progress=ProgressSnapshot(
                    indexed_attributes=total_attributes,
                    indexed_files=dispatched,
                    total_attributes=total_attributes,
                    total_files=total_files,
                    complete=False,
                ),
                reset=preview_len is None and first_batch,
            )
        )
        first_batch = False