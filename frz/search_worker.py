"""Background worker that runs searches against its own copy of the index."""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable, Hashable, Mapping, Sequence
from dataclasses import dataclass, field, replace

from frz.index import IndexData, IndexUpdate, merge_update


@dataclass(frozen=True)
class Query:
    """Run a search for ``query`` in the data set identified by ``mode``."""

    id: int
    query: str
    mode: Hashable


@dataclass(frozen=True)
class Update:
    """Merge an index update into the worker's data."""

    update: IndexUpdate


@dataclass(frozen=True)
class Shutdown:
    """Stop the worker."""


Command = Query | Update | Shutdown


@dataclass(frozen=True)
class SearchResult:
    """Matching row indices and their scores for one query."""

    id: int
    mode: Hashable
    indices: tuple[int, ...]
    scores: tuple[int, ...]
    complete: bool


class LatestQueryId:
    """The id of the most recently issued query, shared between threads."""

    def __init__(self, value: int = 0) -> None:
        self._value = value
        self._lock = threading.Lock()

    def load(self) -> int:
        with self._lock:
            return self._value

    def store(self, value: int) -> None:
        with self._lock:
            self._value = value


@dataclass
class SearchStream:
    """Where a searcher sends its results for one query."""

    sink: Callable[[SearchResult], None]
    id: int
    mode: Hashable
    latest: LatestQueryId = field(default_factory=LatestQueryId)

    def send(self, indices: Sequence[int], scores: Sequence[int], complete: bool) -> bool:
        """Deliver a batch of results; True while the worker should keep going."""
        self.sink(
            SearchResult(
                id=self.id,
                mode=self.mode,
                indices=tuple(indices),
                scores=tuple(scores),
                complete=complete,
            )
        )
        return True


Searcher = Callable[[str, SearchStream, IndexData], bool]


def _handle(
    command: Command,
    data: IndexData,
    searchers: Mapping[Hashable, Searcher],
    results: queue.Queue[SearchResult],
    latest: LatestQueryId,
) -> bool:
    match command:
        case Query(id=query_id, query=text, mode=mode):
            searcher = searchers.get(mode)
            if searcher is None:
                return True
            stream = SearchStream(results.put, query_id, mode, latest)
            return searcher(text, stream, data)
        case Update(update=update):
            merge_update(data, update)
            return True
        case Shutdown():
            return False
    raise TypeError(f"unknown search command: {command!r}")


def _worker_loop(
    data: IndexData,
    searchers: Mapping[Hashable, Searcher],
    commands: queue.Queue[Command],
    results: queue.Queue[SearchResult],
    latest: LatestQueryId,
) -> None:
    while _handle(commands.get(), data, searchers, results, latest):
        pass


def spawn(
    data: IndexData, searchers: Mapping[Hashable, Searcher]
) -> tuple[queue.Queue[Command], queue.Queue[SearchResult], LatestQueryId]:
    """Start the worker thread; returns its command queue, result queue and latest id."""
    own_data = replace(data, files=list(data.files), attributes=list(data.attributes))
    commands: queue.Queue[Command] = queue.Queue()
    results: queue.Queue[SearchResult] = queue.Queue()
    latest = LatestQueryId(0)
    thread = threading.Thread(
        target=_worker_loop,
        args=(own_data, dict(searchers), commands, results, latest),
        name="frz-search",
        daemon=True,
    )
    thread.start()
    return commands, results, latest