"""Options controlling how a directory tree is indexed."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

_DEFAULT_GLOBAL_IGNORES = (
    ".git",
    "node_modules",
    "target",
    ".venv",
    ".cache",
    ".local",
    ".cargo",
    ".mozilla",
    ".vscode-server",
    ".pki",
    ".dotnet",
    ".npm",
    ".rustup",
    "__pycache__",
    "sessionData",
)


def normalize_extension(ext: str) -> str:
    """Strip whitespace and leading dots from an extension and lower-case it."""
    stripped = ext.strip().lstrip(".")
    return "".join(ch.lower() if ch.isascii() else ch for ch in stripped)


@dataclass
class FilesystemOptions:
    """Which files to walk and how."""

    include_hidden: bool = True
    follow_symlinks: bool = False
    respect_ignore_files: bool = True
    git_ignore: bool = True
    git_global: bool = True
    git_exclude: bool = True
    global_ignores: list[str] = field(default_factory=lambda: list(_DEFAULT_GLOBAL_IGNORES))
    threads: int | None = None
    max_depth: int | None = None
    allowed_extensions: list[str] | None = None
    context_label: str | None = None

    def ensure_context_label(self, root: str | os.PathLike[str]) -> str:
        """Use the root's path as the context label unless one is already set."""
        if self.context_label is None:
            self.context_label = os.fspath(root)
        return self.context_label

    def extension_filter(self) -> set[str] | None:
        """The normalised allowed extensions, or None when all are allowed."""
        if self.allowed_extensions is None:
            return None
        normalized = (normalize_extension(ext) for ext in self.allowed_extensions)
        return {ext for ext in normalized if ext}

    def global_ignore_set(self) -> frozenset[str]:
        """Path components that exclude a file wherever they appear."""
        return frozenset(self.global_ignores)

    def thread_count(self) -> int:
        """The configured thread count, or the number of CPUs when unset or zero."""
        if self.threads:
            return self.threads
        return os.cpu_count() or 1