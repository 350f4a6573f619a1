import json
import time

from frz.cache import (
    CACHE_PREVIEW_LIMIT,
    CACHE_TTL,
    CachedEntry,
    CacheHandle,
    fingerprint_for,
)
from frz.fs_options import FilesystemOptions
from frz.index import AttributeEntry, FileEntry, IndexData


def test_fingerprint_is_stable():
    options = FilesystemOptions()
    assert fingerprint_for("/root", options) == fingerprint_for("/root", FilesystemOptions())


def test_fingerprint_depends_on_root_and_options():
    base = fingerprint_for("/root", FilesystemOptions())
    assert fingerprint_for("/other", FilesystemOptions()) != base
    assert fingerprint_for("/root", FilesystemOptions(include_hidden=False)) != base
    assert fingerprint_for("/root", FilesystemOptions(allowed_extensions=[])) != base


def test_fingerprint_ignores_extension_order():
    first = FilesystemOptions(allowed_extensions=["rs", "py"])
    second = FilesystemOptions(allowed_extensions=["py", "rs"])
    assert fingerprint_for("/r", first) == fingerprint_for("/r", second)


def test_resolve_paths(tmp_path):
    handle = CacheHandle.resolve("/root", FilesystemOptions(), tmp_path)
    assert handle.path.parent == tmp_path / "filesystem"
    assert handle.path.name == f"{handle.fingerprint:016x}.json"
    assert handle.preview_path.name.endswith(".preview.json")


def test_load_missing_returns_none(tmp_path):
    handle = CacheHandle.resolve("/root", FilesystemOptions(), tmp_path)
    assert handle.load() is None
    assert handle.load_preview() is None


def test_round_trip(tmp_path):
    handle = CacheHandle.resolve("/root", FilesystemOptions(), tmp_path)
    writer = handle.writer("label")
    writer.record(FileEntry("b.rs", ("src", "*.rs")))
    writer.record(FileEntry("a.md", ("*.md",)))
    writer.finish()

    entry = handle.load()
    assert entry.complete is True
    assert entry.data.context_label == "label"
    assert entry.data.files == [FileEntry("b.rs", ("src", "*.rs")), FileEntry("a.md", ("*.md",))]
    assert entry.data.attributes == [
        AttributeEntry("*.md", 1),
        AttributeEntry("*.rs", 1),
        AttributeEntry("src", 1),
    ]
    preview = handle.load_preview()
    assert preview.complete is True
    assert preview.data.files == entry.data.files
    assert not list(handle.path.parent.glob("*.tmp"))


def test_preview_is_limited(tmp_path):
    handle = CacheHandle.resolve("/root", FilesystemOptions(), tmp_path)
    writer = handle.writer()
    for number in range(600):
        writer.record(FileEntry(f"file_{number}.txt", ("common",)))
    writer.finish()

    preview = handle.load_preview()
    assert len(preview.data.files) == CACHE_PREVIEW_LIMIT
    assert preview.complete is False
    assert preview.data.attributes == [AttributeEntry("common", CACHE_PREVIEW_LIMIT)]

    full = handle.load()
    assert len(full.data.files) == 600
    assert full.data.attributes == [AttributeEntry("common", 600)]


def test_fingerprint_mismatch_is_rejected(tmp_path):
    handle = CacheHandle.resolve("/root", FilesystemOptions(), tmp_path)
    handle.writer().finish()
    other = CacheHandle(path=handle.path, fingerprint=handle.fingerprint ^ 1)
    assert handle.load() is not None
    assert other.load() is None


def test_version_mismatch_and_corrupt_files(tmp_path):
    handle = CacheHandle.resolve("/root", FilesystemOptions(), tmp_path)
    handle.writer().finish()
    payload = json.loads(handle.path.read_text())
    payload["version"] = 99
    handle.path.write_text(json.dumps(payload))
    assert handle.load() is None

    handle.preview_path.write_text("{not json")
    assert handle.load_preview() is None


def test_missing_complete_defaults_false(tmp_path):
    handle = CacheHandle.resolve("/root", FilesystemOptions(), tmp_path)
    handle.writer().finish()
    payload = json.loads(handle.path.read_text())
    del payload["complete"]
    handle.path.write_text(json.dumps(payload))
    assert handle.load().complete is False


def test_reindex_delay():
    fresh = CachedEntry(IndexData(), time.time(), True)
    assert 0 < fresh.reindex_delay() <= CACHE_TTL
    old = CachedEntry(IndexData(), time.time() - 10 * CACHE_TTL, True)
    assert old.reindex_delay() == 0.0
    future = CachedEntry(IndexData(), time.time() + 10 * CACHE_TTL, True)
    assert future.reindex_delay() == 0.0