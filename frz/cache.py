"""On-disk cache of a filesystem index, with a small preview alongside it."""

from __future__ import annotations

import hashlib
import json
import os
import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from frz.fs_options import FilesystemOptions
from frz.index import AttributeEntry, FileEntry, IndexData

CACHE_TTL = 60.0
CACHE_VERSION = 1
CACHE_NAMESPACE = "filesystem"
CACHE_PREVIEW_LIMIT = 512
CACHE_PREVIEW_EXTENSION = ".preview.json"


def _default_cache_dir() -> Path | None:
    base = os.environ.get("XDG_CACHE_HOME")
    if base:
        return Path(base) / "frz"
    try:
        return Path.home() / ".cache" / "frz"
    except RuntimeError:
        return None


def fingerprint_for(root: str | os.PathLike[str], options: FilesystemOptions) -> int:
    """A 64-bit fingerprint of the root and every option that affects the index."""
    extensions = sorted(options.allowed_extensions) if options.allowed_extensions is not None else None
    key = [
        os.fspath(root),
        options.include_hidden,
        options.follow_symlinks,
        options.respect_ignore_files,
        options.git_ignore,
        options.git_global,
        options.git_exclude,
        options.threads,
        options.max_depth,
        extensions,
        sorted(options.global_ignores),
    ]
    digest = hashlib.blake2b(json.dumps(key).encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "big")


@dataclass
class CachedEntry:
    """Index data loaded from the cache, with the time it was written."""

    data: IndexData
    indexed_at: float
    complete: bool

    def reindex_delay(self) -> float:
        """Seconds left before the cached data is old enough to re-index."""
        age = time.time() - self.indexed_at
        if age < 0:
            return 0.0
        return max(0.0, CACHE_TTL - age)


def _preview_path(path: Path) -> Path:
    return path.with_suffix(CACHE_PREVIEW_EXTENSION)


def _attribute_payload(counts: Counter[str]) -> list[dict[str, object]]:
    return [{"name": name, "count": counts[name]} for name in sorted(counts)]


def _write_payload(path: Path, payload: dict[str, object]) -> None:
    tmp_path = path.with_suffix(".tmp")
    data = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    with open(tmp_path, "wb") as handle:
        handle.write(data)
        handle.flush()
        try:
            os.fsync(handle.fileno())
        except OSError:
            pass
    os.replace(tmp_path, path)


def _load_payload(path: Path, fingerprint: int) -> CachedEntry | None:
    try:
        payload = json.loads(path.read_bytes())
    except (OSError, ValueError):
        return None

    try:
        if payload["version"] != CACHE_VERSION or payload["fingerprint"] != fingerprint:
            return None
        context_label = payload["context_label"]
        indexed_at = int(payload["indexed_at"])
        complete = bool(payload.get("complete", False))
        files = [FileEntry(entry["path"], tuple(entry["tags"])) for entry in payload["files"]]
        attributes = [
            AttributeEntry(entry["name"], int(entry["count"])) for entry in payload["attributes"]
        ]
    except (KeyError, TypeError, ValueError):
        return None

    data = IndexData(files=files, attributes=attributes, context_label=context_label)
    return CachedEntry(data=data, indexed_at=float(indexed_at), complete=complete)


@dataclass
class CacheWriter:
    """Collects indexed files and writes the full cache and its preview."""

    path: Path
    fingerprint: int
    context_label: str | None = None
    _files: list[FileEntry] = field(default_factory=list, init=False, repr=False)
    _attributes: Counter[str] = field(default_factory=Counter, init=False, repr=False)

    def record(self, file: FileEntry) -> None:
        self._files.append(file)
        self._attributes.update(file.tags)

    def finish(self) -> None:
        """Write both cache files, replacing any previous ones."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        timestamp = int(time.time())

        preview_files = self._files[:CACHE_PREVIEW_LIMIT]
        preview_counts: Counter[str] = Counter()
        for file in preview_files:
            preview_counts.update(file.tags)

        def payload(files: list[FileEntry], counts: Counter[str], complete: bool) -> dict[str, object]:
            return {
                "version": CACHE_VERSION,
                "fingerprint": self.fingerprint,
                "indexed_at": timestamp,
                "context_label": self.context_label,
                "complete": complete,
                "files": [{"path": f.path, "tags": list(f.tags)} for f in files],
                "attributes": _attribute_payload(counts),
            }

        _write_payload(self.path, payload(self._files, self._attributes, True))
        _write_payload(
            _preview_path(self.path),
            payload(preview_files, preview_counts, len(preview_files) == len(self._files)),
        )


@dataclass(frozen=True)
class CacheHandle:
    """Location of the cache files for one root and set of options."""

    path: Path
    fingerprint: int

    @classmethod
    def resolve(
        cls,
        root: str | os.PathLike[str],
        options: FilesystemOptions,
        base_dir: str | os.PathLike[str] | None = None,
    ) -> CacheHandle | None:
        base = Path(base_dir) if base_dir is not None else _default_cache_dir()
        if base is None:
            return None
        fingerprint = fingerprint_for(root, options)
        path = base / CACHE_NAMESPACE / f"{fingerprint:016x}.json"
        return cls(path=path, fingerprint=fingerprint)

    @property
    def preview_path(self) -> Path:
        return _preview_path(self.path)

    def load(self) -> CachedEntry | None:
        return _load_payload(self.path, self.fingerprint)

    def writer(self, context_label: str | None = None) -> CacheWriter:
        return CacheWriter(self.path, self.fingerprint, context_label)

    def load_preview(self) -> CachedEntry | None:
        return _load_payload(self.preview_path, self.fingerprint)