# src/foundry/assembly/patching.py
"""Whole-file writes and positional patches against the assembly tree.

Patches are best-effort: a missing target file, marker or search string
leaves the content byte-identical and yields an AssemblyWarning. They never
abort a run.
"""

from __future__ import annotations

from collections.abc import Iterable

from foundry.assembly.tree import MemoryFileTree, normalize_path
from foundry.contracts.codegen import (
    After,
    Before,
    DeleteOperation,
    InsertOperation,
    PatchOperation,
    ReplaceOperation,
)
from foundry.contracts.enums import WarningKind
from foundry.contracts.results import AssemblyWarning
from foundry.core.logging import get_logger

logger = get_logger(__name__)


def apply_file(store: MemoryFileTree, path: str, content: str | bytes, *, origin: str | None = None) -> str:
    """Write a whole file, replacing anything already there.

    Returns:
        The normalised path written.
    """
    key = normalize_path(path)
    data = content.encode("utf-8") if isinstance(content, str) else content
    store.write(key, data, origin=origin)
    return key


def apply_operation(text: str, operation: PatchOperation) -> tuple[str, str | None]:
    """Apply one operation to `text`.

    Returns:
        (new_text, None) on success, or (text, reason) when the marker or
        search string is absent.
    """
    match operation:
        case InsertOperation(position="start", content=content):
            return content + "\n" + text, None
        case InsertOperation(position="end", content=content):
            return text + "\n" + content, None
        case InsertOperation(position=After(marker=marker), content=content):
            index = text.find(marker)
            if index == -1:
                return text, f"marker not found: {marker!r}"
            cut = index + len(marker)
            return text[:cut] + "\n" + content + text[cut:], None
        case InsertOperation(position=Before(marker=marker), content=content):
            index = text.find(marker)
            if index == -1:
                return text, f"marker not found: {marker!r}"
            return text[:index] + content + "\n" + text[index:], None
        case ReplaceOperation(search=search, replace=replacement, all=replace_all):
            if not search or search not in text:
                return text, f"search text not found: {search!r}"
            return text.replace(search, replacement, -1 if replace_all else 1), None
        case DeleteOperation(search=search):
            if not search or search not in text:
                return text, f"search text not found: {search!r}"
            return text.replace(search, "", 1), None
        case _:
            raise TypeError(f"Unknown patch operation: {operation!r}")


def apply_patch(
    store: MemoryFileTree,
    path: str,
    operations: Iterable[PatchOperation],
    *,
    origin: str | None = None,
) -> list[AssemblyWarning]:
    """Fold `operations` left to right over the file's current text.

    Operations whose marker is absent are skipped individually; the rest
    still apply. The file keeps its previous origin.
    """
    key = normalize_path(path)
    data = store.read(key)
    if data is None:
        logger.warning("Patch target missing", path=key, origin=origin)
        return [
            AssemblyWarning(
                kind=WarningKind.PATCH_TARGET_MISSING,
                path=key,
                message="patch target does not exist; patch skipped",
                origin=origin,
            )
        ]

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        return [
            AssemblyWarning(
                kind=WarningKind.PATCH_TARGET_MISSING,
                path=key,
                message="patch target is not UTF-8 text; patch skipped",
                origin=origin,
            )
        ]

    warnings: list[AssemblyWarning] = []
    for operation in operations:
        text, reason = apply_operation(text, operation)
        if reason is not None:
            logger.warning("Patch operation skipped", path=key, origin=origin, reason=reason)
            warnings.append(AssemblyWarning(kind=WarningKind.PATCH_MARKER_MISSING, path=key, message=reason, origin=origin))

    patched = text.encode("utf-8")
    if patched != data:
        store.write(key, patched, origin=store.origin_of(key))
    return warnings
