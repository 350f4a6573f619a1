import queue
import time

from frz.index import FileEntry, IndexData, IndexUpdate, ProgressSnapshot
from frz.search_runtime import SearchRuntime
from frz.search_worker import LatestQueryId, Query, SearchResult, Shutdown, Update, spawn


def _runtime():
    commands = queue.Queue()
    results = queue.Queue()
    latest = LatestQueryId()
    return SearchRuntime(commands, results, latest), commands, results, latest


def test_issue_search_sends_query_and_publishes_id():
    runtime, commands, _, latest = _runtime()
    assert not runtime.has_issued_query()
    runtime.issue_search("abc", "files")
    command = commands.get_nowait()
    assert isinstance(command, Query)
    assert (command.query, command.mode) == ("abc", "files")
    assert command.id == latest.load()
    assert runtime.matches_latest(command.id)
    assert runtime.is_in_flight()
    assert runtime.has_issued_query()


def test_later_queries_supersede_earlier_ones():
    runtime, commands, _, _ = _runtime()
    runtime.issue_search("a", "files")
    runtime.issue_search("ab", "files")
    first = commands.get_nowait()
    second = commands.get_nowait()
    assert second.id > first.id
    assert not runtime.matches_latest(first.id)
    assert runtime.matches_latest(second.id)


def test_completion_applies_pending_input():
    runtime, _, _, _ = _runtime()
    assert not runtime.has_unapplied_input()
    runtime.mark_query_dirty()
    assert runtime.has_unapplied_input()
    runtime.issue_search("q", "files")
    runtime.record_result_completion(False)
    assert runtime.is_in_flight()
    assert runtime.has_unapplied_input()
    runtime.record_result_completion(True)
    assert not runtime.is_in_flight()
    assert not runtime.has_unapplied_input()


def test_refresh_after_index_update_only_for_pending_user_edits():
    runtime, _, _, _ = _runtime()
    assert not runtime.should_refresh_after_index_update()
    runtime.mark_query_dirty()
    assert not runtime.should_refresh_after_index_update()
    runtime.mark_query_dirty_from_user_input()
    assert runtime.should_refresh_after_index_update()
    runtime.issue_search("q", "files")
    assert not runtime.should_refresh_after_index_update()
    runtime.record_result_completion(True)
    assert not runtime.should_refresh_after_index_update()


def test_try_recv_returns_waiting_results():
    runtime, _, results, _ = _runtime()
    assert runtime.try_recv() is None
    result = SearchResult(id=1, mode="files", indices=(0,), scores=(5,), complete=True)
    results.put(result)
    assert runtime.try_recv() == result
    assert runtime.try_recv() is None


def test_notify_and_shutdown_send_commands():
    runtime, commands, _, _ = _runtime()
    update = IndexUpdate(
        files=(FileEntry("a.txt"),),
        attributes=(),
        progress=ProgressSnapshot(indexed_attributes=0, indexed_files=1),
    )
    runtime.notify_of_update(update)
    runtime.shutdown()
    assert commands.get_nowait() == Update(update)
    assert commands.get_nowait() == Shutdown()


def test_round_trip_with_worker():
    def searcher(query, stream, data):
        hits = [i for i, f in enumerate(data.files) if query in f.path]
        return stream.send(hits, [1] * len(hits), True)

    data = IndexData(files=[FileEntry("src/lib.rs"), FileEntry("README.md")])
    commands, results, latest = spawn(data, {"files": searcher})
    runtime = SearchRuntime(commands, results, latest)
    runtime.mark_query_dirty_from_user_input()
    runtime.issue_search("lib", "files")

    deadline = time.monotonic() + 2
    result = None
    while result is None and time.monotonic() < deadline:
        result = runtime.try_recv()
        time.sleep(0.01)

    assert runtime.matches_latest(result.id)
    assert result.indices == (0,)
    runtime.record_result_completion(result.complete)
    assert not runtime.has_unapplied_input()
    runtime.shutdown()