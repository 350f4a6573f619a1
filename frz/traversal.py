"""Walking a directory tree and indexing it in the background."""

from __future__ import annotations

import contextlib
import os
import queue
import re
import threading
import time
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, replace
from pathlib import Path, PurePosixPath

from frz.batching import UpdateBatcher, stream_cached_entry
from frz.cache import CacheHandle
from frz.fs_options import FilesystemOptions
from frz.index import FileEntry, IndexData, IndexUpdate, ProgressSnapshot

Tagger = Callable[[PurePosixPath], Iterable[str]]


def _ascii_lower(value: str) -> str:
    return "".join(ch.lower() if ch.isascii() else ch for ch in value)


def _translate(pattern: str) -> re.Pattern[str]:
    out: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        c = pattern[i]
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("/**", i) and i + 3 == n:
            out.append("/.*")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif c == "*":
            out.append("[^/]*")
            i += 1
        elif c == "?":
            out.append("[^/]")
            i += 1
        elif c == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            close = pattern.find("]", j)
            if close == -1:
                out.append(re.escape(c))
                i += 1
            else:
                body = pattern[i + 1 : close]
                if body[:1] in ("!", "^"):
                    body = "^" + body[1:]
                out.append(f"[{body}]")
                i = close + 1
        elif c == "\\" and i + 1 < n:
            out.append(re.escape(pattern[i + 1]))
            i += 2
        else:
            out.append(re.escape(c))
            i += 1
    return re.compile("".join(out))


@dataclass(frozen=True)
class _Rule:
    base: Path
    regex: re.Pattern[str]
    negated: bool
    dir_only: bool
    anchored: bool

    def matches(self, path: Path, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        if not self.anchored:
            return self.regex.fullmatch(path.name) is not None
        try:
            relative = path.relative_to(self.base).as_posix()
        except ValueError:
            return False
        return self.regex.fullmatch(relative) is not None


def _parse_ignore_file(path: Path) -> list[_Rule]:
    try:
        lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return []
    rules = []
    for raw in lines:
        line = raw.rstrip(" \t")
        if not line or line.startswith("#"):
            continue
        negated = line.startswith("!")
        if negated:
            line = line[1:]
        if line.startswith("\\"):
            line = line[1:]
        dir_only = line.endswith("/")
        line = line.rstrip("/")
        if not line:
            continue
        anchored = "/" in line
        line = line.lstrip("/")
        rules.append(
            _Rule(
                base=path.parent,
                regex=_translate(line),
                negated=negated,
                dir_only=dir_only,
                anchored=anchored,
            )
        )
    return rules


def _find_repo_root(directory: Path) -> Path | None:
    for candidate in (directory, *directory.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


def _global_gitignore() -> Path:
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / "git" / "ignore"


class _Walker:
    def __init__(self, root: Path, options: FilesystemOptions) -> None:
        self.root = Path(os.path.abspath(root))
        self.options = options
        self.global_ignores = options.global_ignore_set()
        self.extensions = options.extension_filter()
        self.repo_root = _find_repo_root(self.root)
        self.visited: set[str] = {os.path.realpath(self.root)}

    def _in_repo(self, directory: Path) -> bool:
        return self.repo_root is not None and (
            directory == self.repo_root or self.repo_root in directory.parents
        )

    def _rules_in(self, directory: Path) -> list[_Rule]:
        rules: list[_Rule] = []
        if self.options.git_ignore and self._in_repo(directory):
            rules.extend(_parse_ignore_file(directory / ".gitignore"))
        if self.options.respect_ignore_files:
            rules.extend(_parse_ignore_file(directory / ".ignore"))
        return rules

    def _base_rules(self) -> list[_Rule]:
        rules: list[_Rule] = []
        if self.repo_root is not None:
            if self.options.git_global:
                with contextlib.suppress(RuntimeError):
                    rules.extend(
                        replace(rule, base=self.repo_root)
                        for rule in _parse_ignore_file(_global_gitignore())
                    )
            if self.options.git_exclude:
                exclude = self.repo_root / ".git" / "info" / "exclude"
                rules.extend(
                    replace(rule, base=self.repo_root) for rule in _parse_ignore_file(exclude)
                )
        for parent in reversed(self.root.parents):
            rules.extend(self._rules_in(parent))
        return rules

    @staticmethod
    def _ignored(path: Path, is_dir: bool, rules: list[_Rule]) -> bool:
        ignored = False
        for rule in rules:
            if rule.matches(path, is_dir):
                ignored = not rule.negated
        return ignored

    def files(self) -> Iterator[str]:
        yield from self._walk_dir(self.root, 1, self._base_rules())

    def _walk_dir(self, directory: Path, depth: int, rules: list[_Rule]) -> Iterator[str]:
        max_depth = self.options.max_depth
        if max_depth is not None and depth > max_depth:
            return
        rules = rules + self._rules_in(directory)
        try:
            with os.scandir(directory) as scan:
                entries = sorted(scan, key=lambda entry: entry.name)
        except OSError:
            return

        for entry in entries:
            name = entry.name
            if not self.options.include_hidden and name.startswith("."):
                continue
            if name in self.global_ignores:
                continue
            try:
                if entry.is_symlink() and not self.options.follow_symlinks:
                    continue
                is_dir = entry.is_dir(follow_symlinks=True)
                is_file = entry.is_file(follow_symlinks=True)
            except OSError:
                continue

            path = Path(entry.path)
            if self._ignored(path, is_dir, rules):
                continue

            if is_dir:
                real = os.path.realpath(path)
                if real in self.visited:
                    continue
                self.visited.add(real)
                yield from self._walk_dir(path, depth + 1, rules)
            elif is_file:
                if self.extensions is not None:
                    extension = _ascii_lower(PurePosixPath(name).suffix[1:])
                    if extension not in self.extensions:
                        continue
                yield path.relative_to(self.root).as_posix()


def walk_files(
    root: str | os.PathLike[str], options: FilesystemOptions | None = None
) -> Iterator[str]:
    """Yield the paths of indexable files below ``root``, relative and slash-separated."""
    options = options if options is not None else FilesystemOptions()
    global_ignores = options.global_ignore_set()
    if any(part in global_ignores for part in Path(root).parts):
        return
    yield from _Walker(Path(root), options).files()


def _fill_context(data: IndexData, root: Path, context_label: str) -> None:
    if data.context_label is None:
        data.context_label = context_label
    if data.root is None:
        data.root = root


def _replay_cache(
    handle: CacheHandle,
    root: Path,
    context_label: str,
    sink: Callable[[IndexUpdate], None],
) -> float:
    delay = 0.0
    preview_complete = False
    preview_count: int | None = None

    preview = handle.load_preview()
    if preview is not None:
        delay = preview.reindex_delay()
        preview_complete = preview.complete
        preview_count = len(preview.data.files)
        _fill_context(preview.data, root, context_label)

        files = tuple(preview.data.files)
        attributes = tuple(preview.data.attributes)
        if files or attributes:
            sink(
                IndexUpdate(
                    files=files,
                    attributes=attributes,
                    progress=ProgressSnapshot(
                        indexed_attributes=len(attributes),
                        indexed_files=len(files),
                        total_attributes=len(attributes) if preview_complete else None,
                        total_files=len(files) if preview_complete else None,
                        complete=preview_complete,
                    ),
                    reset=True,
                    cached_data=preview.data,
                )
            )

    if not preview_complete:
        entry = handle.load()
        if entry is not None:
            delay = entry.reindex_delay()
            _fill_context(entry.data, root, context_label)
            stream_cached_entry(entry, preview_count, sink)

    return delay


def _index(
    root: Path,
    options: FilesystemOptions,
    handle: CacheHandle | None,
    context_label: str,
    tagger: Tagger | None,
    updates: queue.Queue[IndexUpdate | None],
) -> None:
    sink = updates.put
    try:
        delay = _replay_cache(handle, root, context_label, sink) if handle is not None else 0.0
        if delay > 0:
            time.sleep(delay)

        writer = handle.writer(context_label) if handle is not None else None
        batcher = UpdateBatcher(handle is not None, writer)
        for relative in walk_files(root, options):
            tags = tuple(tagger(PurePosixPath(relative))) if tagger is not None else ()
            batcher.record_file(FileEntry(relative, tags))
            if batcher.should_flush():
                batcher.flush(sink, False)

        writer = batcher.finalize(sink)
        if writer is not None:
            with contextlib.suppress(OSError):
                writer.finish()
    finally:
        updates.put(None)


def spawn_filesystem_index(
    root: str | os.PathLike[str],
    options: FilesystemOptions | None = None,
    cache_dir: str | os.PathLike[str] | None = None,
    tagger: Tagger | None = None,
) -> tuple[IndexData, queue.Queue[IndexUpdate | None]]:
    """Start indexing ``root`` in a background thread.

    Returns the initial (empty) data and a queue of updates; ``None`` is put on
    the queue once indexing has finished.
    """
    root_path = Path(root)
    options = replace(options) if options is not None else FilesystemOptions()
    handle = CacheHandle.resolve(root_path, options, base_dir=cache_dir)
    context_label = options.ensure_context_label(root_path)
    data = IndexData(context_label=context_label, root=root_path)

    updates: queue.Queue[IndexUpdate | None] = queue.Queue()
    thread = threading.Thread(
        target=_index,
        args=(root_path, options, handle, context_label, tagger, updates),
        name="frz-index",
        daemon=True,
    )
    thread.start()
    return data, updates