"""Client side of the search worker: issuing queries and tracking their state."""

from __future__ import annotations

import queue
from collections.abc import Hashable
from dataclasses import dataclass

from frz.index import IndexUpdate
from frz.search_worker import Command, LatestQueryId, Query, SearchResult, Shutdown, Update

_U64_MASK = (1 << 64) - 1


@dataclass
class _Revisions:
    input: int = 0
    pending_result: int = 0
    last_applied: int = 0
    last_user_input: int = 0


class SearchRuntime:
    """Sends queries to the worker and tracks which input has been applied."""

    def __init__(
        self,
        commands: queue.Queue[Command],
        results: queue.Queue[SearchResult],
        latest_query_id: LatestQueryId,
    ) -> None:
        self._commands = commands
        self._results = results
        self._latest_query_id = latest_query_id
        self._next_query_id = 0
        self._current_query_id: int | None = None
        self._in_flight = False
        self._revisions = _Revisions()

    def shutdown(self) -> None:
        self._commands.put(Shutdown())

    def mark_query_dirty(self) -> None:
        self._revisions.input = (self._revisions.input + 1) & _U64_MASK

    def mark_query_dirty_from_user_input(self) -> None:
        self.mark_query_dirty()
        self._revisions.last_user_input = self._revisions.input

    def issue_search(self, query: str, mode: Hashable) -> None:
        self._next_query_id = min(self._next_query_id + 1, _U64_MASK)
        query_id = self._next_query_id
        self._current_query_id = query_id
        self._in_flight = True
        self._revisions.pending_result = self._revisions.input
        self._latest_query_id.store(query_id)
        self._commands.put(Query(id=query_id, query=query, mode=mode))

    def should_refresh_after_index_update(self) -> bool:
        """True when idle and the latest user edit has not yet been applied."""
        revisions = self._revisions
        return (
            not self._in_flight
            and revisions.input != revisions.last_applied
            and revisions.input == revisions.last_user_input
        )

    def matches_latest(self, result_id: int) -> bool:
        return result_id == self._current_query_id

    def record_result_completion(self, complete: bool) -> None:
        if complete:
            self._in_flight = False
            self._revisions.last_applied = self._revisions.pending_result
            self._revisions.last_user_input = self._revisions.last_applied

    def has_issued_query(self) -> bool:
        return self._current_query_id is not None

    def is_in_flight(self) -> bool:
        return self._in_flight

    def has_unapplied_input(self) -> bool:
        return self._revisions.input != self._revisions.last_applied

    def try_recv(self) -> SearchResult | None:
        """The next waiting result, or None when there is none."""
        try:
            return self._results.get_nowait()
        except queue.Empty:
            return None

    def notify_of_update(self, update: IndexUpdate) -> None:
        self._commands.put(Update(update))