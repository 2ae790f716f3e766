# src/foundry/assembly/tree.py
"""Assembly store: the project tree a run writes into.

Two implementations share the FileTree protocol:

- MemoryFileTree: map-backed, used during assembly. Tracks which writer
  (node id, ``component:<pkg>``, ``root``) last wrote each path so that
  write_with_merge can arbitrate collisions.
- DiskFileTree: rooted at a real directory, used for export.

Paths are POSIX, relative, and never escape the root.
"""

from __future__ import annotations

import posixpath
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol, runtime_checkable

from foundry.contracts.errors import InvalidPathError
from foundry.contracts.results import Manifest, ManifestEntry
from foundry.core.logging import get_logger

logger = get_logger(__name__)


def normalize_path(path: str) -> str:
    """Normalise a tree path to POSIX relative form.

    Raises:
        InvalidPathError: If the path is empty or escapes the root
    """
    cleaned = path.replace("\\", "/").lstrip("/")
    if not cleaned:
        raise InvalidPathError(f"Empty path: {path!r}")
    normalized = posixpath.normpath(cleaned)
    if normalized == "." or normalized == ".." or normalized.startswith("../"):
        raise InvalidPathError(f"Path escapes the assembly root: {path!r}")
    return normalized


@runtime_checkable
class FileTree(Protocol):
    """Byte-addressable project tree."""

    def write(self, path: str, data: bytes, *, origin: str | None = None) -> None: ...

    def read(self, path: str) -> bytes | None: ...

    def exists(self, path: str) -> bool: ...

    def delete(self, path: str) -> bool: ...

    def list(self, prefix: str = "") -> list[str]: ...


class MemoryFileTree:
    """In-memory FileTree keyed by normalised path.

    Directories are implicit: writing ``a/b/c.ts`` creates ``a`` and ``a/b``.
    """

    def __init__(self) -> None:
        self._files: dict[str, bytes] = {}
        self._origins: dict[str, str | None] = {}

    def write(self, path: str, data: bytes, *, origin: str | None = None) -> None:
        key = normalize_path(path)
        self._files[key] = data
        self._origins[key] = origin

    def read(self, path: str) -> bytes | None:
        return self._files.get(normalize_path(path))

    def read_text(self, path: str) -> str | None:
        data = self.read(path)
        return None if data is None else data.decode("utf-8")

    def exists(self, path: str) -> bool:
        return normalize_path(path) in self._files

    def delete(self, path: str) -> bool:
        key = normalize_path(path)
        self._origins.pop(key, None)
        return self._files.pop(key, None) is not None

    def origin_of(self, path: str) -> str | None:
        return self._origins.get(normalize_path(path))

    def list(self, prefix: str = "") -> list[str]:
        """Sorted paths at or below `prefix` (a directory, or "" for all)."""
        if not prefix:
            return sorted(self._files)
        base = normalize_path(prefix)
        return sorted(p for p in self._files if p == base or p.startswith(base + "/"))

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._files))

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.exists(path)


class DiskFileTree:
    """FileTree over a real directory. Origins are not tracked."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def _resolve(self, path: str) -> Path:
        return self.root.joinpath(*normalize_path(path).split("/"))

    def write(self, path: str, data: bytes, *, origin: str | None = None) -> None:
        target = self._resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    def read(self, path: str) -> bytes | None:
        target = self._resolve(path)
        if not target.is_file():
            return None
        return target.read_bytes()

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def delete(self, path: str) -> bool:
        target = self._resolve(path)
        if not target.is_file():
            return False
        target.unlink()
        return True

    def list(self, prefix: str = "") -> list[str]:
        base = self._resolve(prefix) if prefix else self.root
        if not base.exists():
            return []
        if base.is_file():
            return [base.relative_to(self.root).as_posix()]
        return sorted(p.relative_to(self.root).as_posix() for p in base.rglob("*") if p.is_file())


def create_manifest(tree: FileTree) -> Manifest:
    """Walk the tree into a path-sorted {path, size} listing."""
    entries = []
    for path in tree.list():
        data = tree.read(path)
        if data is None:
            continue
        entries.append(ManifestEntry(path=path, size=len(data)))
    return Manifest(files=tuple(entries))


def export_to_directory(tree: FileTree, target: Path) -> int:
    """Write every file in `tree` under `target`, creating directories.

    Returns:
        Number of files written
    """
    disk = DiskFileTree(target)
    count = 0
    for path in tree.list():
        data = tree.read(path)
        if data is None:
            continue
        disk.write(path, data)
        count += 1
    logger.info("Exported assembly tree", target=str(target), files=count)
    return count
