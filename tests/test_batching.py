import time

from frz.batching import (
    MAX_BATCH_SIZE,
    MIN_BATCH_SIZE,
    UpdateBatcher,
    batch_size_for,
    stream_cached_entry,
)
from frz.cache import CachedEntry, CacheHandle
from frz.fs_options import FilesystemOptions
from frz.index import AttributeEntry, FileEntry, IndexData


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_batch_size_thresholds():
    assert batch_size_for(0) == MIN_BATCH_SIZE
    assert batch_size_for(1_023) == MIN_BATCH_SIZE
    assert batch_size_for(1_024) == 256
    assert batch_size_for(16_383) == 256
    assert batch_size_for(16_384) == MAX_BATCH_SIZE


def test_flush_without_work_sends_nothing():
    sent = []
    batcher = UpdateBatcher(emit_reset=False)
    batcher.flush(sent.append, False)
    assert sent == []


def test_reset_is_emitted_once():
    sent = []
    batcher = UpdateBatcher(emit_reset=True)
    batcher.flush(sent.append, False)
    batcher.record_file(FileEntry("a.txt", ("x",)))
    batcher.flush(sent.append, False)
    assert [update.reset for update in sent] == [True, False]
    assert sent[1].files == (FileEntry("a.txt", ("x",)),)


def test_attribute_counts_accumulate():
    sent = []
    batcher = UpdateBatcher(emit_reset=False)
    batcher.record_file(FileEntry("a", ("x", "y")))
    batcher.flush(sent.append, False)
    batcher.record_file(FileEntry("b", ("x",)))
    batcher.flush(sent.append, False)
    assert sent[0].attributes == (AttributeEntry("x", 1), AttributeEntry("y", 1))
    assert sent[1].attributes == (AttributeEntry("x", 2),)
    assert sent[1].progress.indexed_attributes == 2
    assert sent[1].progress.indexed_files == 2
    assert sent[1].progress.total_files is None


def test_should_flush_on_batch_size():
    batcher = UpdateBatcher(emit_reset=False, clock=FakeClock())
    for number in range(MIN_BATCH_SIZE - 1):
        batcher.record_file(FileEntry(f"f{number}"))
    assert batcher.should_flush() is False
    batcher.record_file(FileEntry("last"))
    assert batcher.should_flush() is True


def test_should_flush_on_interval():
    clock = FakeClock()
    batcher = UpdateBatcher(emit_reset=False, clock=clock)
    assert batcher.should_flush() is False
    batcher.record_file(FileEntry("a"))
    assert batcher.should_flush() is False
    clock.now = 1.0
    assert batcher.should_flush() is True


def test_finalize_reports_totals_and_returns_writer(tmp_path):
    handle = CacheHandle.resolve("/root", FilesystemOptions(), tmp_path)
    writer = handle.writer()
    sent = []
    batcher = UpdateBatcher(emit_reset=False, cache_writer=writer)
    batcher.record_file(FileEntry("a", ("x",)))
    batcher.record_file(FileEntry("b", ("x",)))
    returned = batcher.finalize(sent.append)
    assert returned is writer
    progress = sent[-1].progress
    assert progress.complete is True
    assert progress.total_files == 2
    assert progress.total_attributes == 1
    returned.finish()
    assert len(handle.load().data.files) == 2


def _entry(file_count):
    data = IndexData(
        files=[FileEntry(f"f{number}") for number in range(file_count)],
        attributes=[AttributeEntry("tag", file_count)],
    )
    return CachedEntry(data=data, indexed_at=time.time(), complete=True)


def test_stream_cached_entry_batches_everything():
    sent = []
    stream_cached_entry(_entry(2_500), None, sent.append)
    assert [len(update.files) for update in sent] == [MAX_BATCH_SIZE, MAX_BATCH_SIZE, 452]
    assert [update.reset for update in sent] == [True, False, False]
    assert sent[-1].progress.indexed_files == 2_500
    assert all(update.progress.total_files == 2_500 for update in sent)
    assert all(update.progress.complete is False for update in sent)


def test_stream_cached_entry_skips_preview():
    sent = []
    stream_cached_entry(_entry(600), 512, sent.append)
    assert len(sent) == 1
    assert sent[0].files[0] == FileEntry("f512")
    assert sent[0].reset is False
    assert sent[0].progress.indexed_files == 600


def test_stream_cached_entry_preview_covers_all():
    sent = []
    stream_cached_entry(_entry(10), 10, sent.append)
    assert len(sent) == 1
    assert sent[0].files == ()
    assert sent[0].reset is False
    assert sent[0].attributes == (AttributeEntry("tag", 10),)


def test_stream_cached_entry_empty_sends_nothing():
    sent = []
    entry = CachedEntry(data=IndexData(), indexed_at=time.time(), complete=True)
    stream_cached_entry(entry, None, sent.append)
    assert sent == []