# frz

Building blocks for a fuzzy finder that works on tabular data: files below a
directory and the tags (attributes) attached to them.

## Installation

```
pip install frz
```

## What is in the package

- `frz.style`: `Style`, `Modifier`, the colour types `NamedColor`, `Rgb` and
  `Indexed`, and `parse_color` / `parse_modifier`. Colours may be written as
  `#f80` or `#ff8800`, `rgb(1, 2, 3)`, `ansi(42)`, a bare palette index such
  as `42`, or a name such as `light_blue` (case, `-` and spaces are ignored).
  `StyleConfig` turns a `{"fg": ..., "bg": ..., "modifiers": [...]}` mapping
  into a `Style`. Invalid input raises `StyleError`.
- `frz.theme`: `Theme` (five styles: `header`, `row_highlight`, `prompt`,
  `empty`, `highlight`), `ThemeRegistration`, `ThemeDefinition`,
  `parse_theme_document` for one TOML theme file and `load_themes` for a
  directory of them. At most one file may set `default = true`; otherwise the
  first file in path order is the default. Problems raise `ThemeConfigError`.
- `frz.theme_registry`: `ThemeRegistry`, and a shared registry reached through
  `register_additional`, `register_definitions`, `by_name`, `names`,
  `bat_theme` and `descriptors`. Lookups ignore case and surrounding space and
  follow aliases; alias clashes are reported in a `ThemeRegistrationReport`.
- `frz.highlight`: `truncate_with_highlight` fits text into a display width
  with an ellipsis on the left or right (`TruncationStyle`) and shifts the
  matched character indices to match; `highlight_spans` splits the result into
  `(text, highlighted)` runs.
- `frz.search_input`: `SearchInput`, a one-line query buffer with a cursor and
  common editing keys (`Key`, `KeyInput`). `input()` returns `True` only when
  the trimmed text changed; Enter and Ctrl+M are ignored.
- `frz.index`: `FileEntry`, `AttributeEntry`, `IndexData`, `ProgressSnapshot`,
  `IndexUpdate` and `merge_update`, which keeps attributes sorted by name.
- `frz.fs_options`: `FilesystemOptions` (hidden files, symlinks, `.ignore` and
  git ignore files, ignored path components, depth, allowed extensions).
- `frz.traversal`: `walk_files` yields relative, slash-separated file paths;
  `spawn_filesystem_index` indexes a tree in a background thread and returns
  the initial `IndexData` and a `queue.Queue` of `IndexUpdate`s, ending with
  `None`. Tags come from an optional `tagger` callable.
- `frz.batching`: `UpdateBatcher` groups files into updates whose size grows
  with the index (`batch_size_for`); `stream_cached_entry` replays cached data.
- `frz.cache`: `CacheHandle`, `CacheWriter` and `CachedEntry`. The cache is a
  JSON file plus a preview of the first 512 files, named by `fingerprint_for`,
  stored under `$XDG_CACHE_HOME/frz/filesystem` (or `~/.cache/frz/filesystem`)
  unless a `cache_dir` is given. Cached data older than 60 seconds is re-indexed
  straight away; newer data delays the walk until it is.
- `frz.search_worker`: `spawn(data, searchers)` starts a worker thread. The
  searchers map a mode to a callable `(query, stream, data) -> bool` that sends
  results through `SearchStream.send`; commands are `Query`, `Update` and
  `Shutdown`.
- `frz.search_runtime`: `SearchRuntime` issues queries to the worker and tracks
  whether the latest input has been applied.
- `frz.progress`: `IndexProgress` produces status text such as
  `Indexed Files: 120/400`.
- `frz.tabs`: layout and title helpers for the input row and its tabs.

## Examples

Parse a colour and build a style:

```python
from frz.style import Modifier, Style, parse_color

style = Style().with_fg(parse_color("#ff8800")).add_modifier(Modifier.BOLD)
```

Register and look up a theme:

```python
from frz.style import Style, parse_color
from frz.theme import Theme, ThemeRegistration
from frz.theme_registry import by_name, register_additional

plain = Style()
theme = Theme(
    header=plain.with_bg(parse_color("blue")),
    row_highlight=plain.with_bg(parse_color("cyan")),
    prompt=plain.with_fg(parse_color("white")),
    empty=plain.with_fg(parse_color("dark gray")),
    highlight=plain.with_fg(parse_color("yellow")),
)
report = register_additional([ThemeRegistration("ocean", theme).alias("Sea")])
assert by_name("SEA") == theme
```

Truncate text and keep its highlights:

```python
from frz.highlight import TruncationStyle, truncate_with_highlight

text, indices = truncate_with_highlight("abcdefgh", [1, 3, 6], 5, TruncationStyle.LEFT)
# text == "…efgh", indices == [3]
```

Index a directory in the background:

```python
from frz.index import merge_update
from frz.traversal import spawn_filesystem_index

data, updates = spawn_filesystem_index(".")
while (update := updates.get()) is not None:
    merge_update(data, update)
print(len(data.files))
```

Track indexing progress:

```python
from frz.progress import IndexProgress

progress = IndexProgress()
progress.record_indexed([("files", 120)])
progress.set_totals([("files", 400)])
print(progress.status([("files", "Files")]))  # ('Indexed Files: 120/400', False)
```

## What the package does not do

- It has no interactive screen and no command to run: it provides the parts a
  terminal finder is built from, not the finder itself.
- It has no fuzzy matching algorithm; searchers passed to
  `frz.search_worker.spawn` decide what matches and how it scores.
- It derives no tags from paths on its own; pass a `tagger` to
  `spawn_filesystem_index` to attach them.
- It ships no theme files. The shared registry loads themes from a `themes`
  directory beside `frz/theme_registry.py` if one exists, and otherwise starts
  empty until themes are registered.

## Running the tests

```
pip install -e ".[test]"
pytest
```