# src/foundry/assembly/merging.py
"""Content merging for paths written by more than one source.

When two plugins (or a plugin and an imported component package) target the
same path, the file name decides the policy:

    index.ts / index.tsx           barrel exports, union by module specifier
    types.ts / *.types.ts          append non-duplicate type declarations
    constants.ts / *.constants.ts  append non-duplicate exported constants
    *.json                         recursive key union, existing wins
    .gitignore, .env.example, ...  line union preserving order
    anything else                  not mergeable, existing content kept

write_with_merge() is the single arbitration point every writer goes
through. A failed merge never overwrites: the existing bytes stay and exactly
one warning is recorded.
"""

from __future__ import annotations

import json
import posixpath
import re
from collections.abc import Callable
from typing import Any

from foundry.assembly.tree import MemoryFileTree, normalize_path
from foundry.contracts.enums import MergeableFileType, WarningKind
from foundry.contracts.results import AssemblyWarning, MergeResult
from foundry.core.logging import get_logger

logger = get_logger(__name__)

LINE_SET_FILES: frozenset[str] = frozenset({".gitignore", ".env.example", ".npmignore", ".dockerignore"})

_FROM_PATTERN = re.compile(r"""from\s+['"]([^'"]+)['"]""")
_SPECIFIER_END = re.compile(r"""['"][^'"]+['"]\s*;?$""")
_REEXPORT = re.compile(r"""^export\s[^;]*?\bfrom\s+['"][^'"]+['"]\s*;?$""")
_IMPORT = re.compile(r"""^import\s[^;]*?['"][^'"]+['"]\s*;?$""")
_TYPE_DECL = re.compile(r"^export\s+(?:type|interface|enum)\s+(\w+)")
_TYPE_NAMES = re.compile(r"(?:export\s+)?(?:type|interface|enum)\s+(\w+)")
_CONST_DECL = re.compile(r"^export\s+const\s+(\w+)")
_CONST_NAMES = re.compile(r"(?:export\s+)?const\s+(\w+)")


def get_mergeable_type(filename: str) -> MergeableFileType:
    """Select the merge policy for a path from its base name."""
    basename = posixpath.basename(filename)

    if basename in ("index.ts", "index.tsx"):
        return MergeableFileType.BARREL_EXPORTS
    if basename == "types.ts" or basename.endswith(".types.ts"):
        return MergeableFileType.TYPES
    if basename == "constants.ts" or basename.endswith(".constants.ts"):
        return MergeableFileType.CONSTANTS
    if basename.endswith(".json"):
        return MergeableFileType.JSON_MANIFEST
    if basename in LINE_SET_FILES:
        return MergeableFileType.LINE_SET
    return MergeableFileType.NONE


def should_merge_file(filename: str) -> bool:
    return get_mergeable_type(filename) is not MergeableFileType.NONE


def merge_file_contents(existing: str, incoming: str, filename: str) -> MergeResult:
    """Merge `incoming` into `existing` according to the file's policy.

    Returns:
        MergeResult. On failure `content` is `existing` unchanged and
        `warnings` holds exactly one message.
    """
    merger = _MERGERS.get(get_mergeable_type(filename))
    if merger is None:
        return MergeResult(
            success=False,
            content=existing,
            warnings=(f"Cannot merge {filename}: unsupported file type",),
        )
    return merger(existing, incoming)


# =============================================================================
# Barrel exports
# =============================================================================


def _module_statements(content: str) -> list[str] | None:
    """Import and re-export statements of a barrel file.

    Returns None when the file holds anything else (declarations, default
    exports, bodies), since such a file cannot be rebuilt from statements.
    """
    statements: list[str] = []
    buffer: list[str] = []
    for line in content.split("\n"):
        stripped = line.strip()
        if not buffer:
            if not stripped or stripped.startswith(("//", "/*", "*")):
                continue
            if not stripped.startswith(("import ", "export ")):
                return None
        buffer.append(line.rstrip())
        if _SPECIFIER_END.search(stripped):
            statement = "\n".join(buffer).strip()
            if not (_REEXPORT.match(statement) or _IMPORT.match(statement)):
                return None
            statements.append(statement)
            buffer = []
    if buffer:
        return None
    return statements


def _statement_key(statement: str) -> str:
    match = _FROM_PATTERN.search(statement)
    return match.group(1) if match else statement


def _extract_top_comment(content: str) -> str:
    lines: list[str] = []
    for line in content.split("\n"):
        stripped = line.strip()
        if stripped.startswith(("/**", "*", "*/", "//")):
            lines.append(line)
        elif stripped == "":
            if lines:
                lines.append(line)
        else:
            break
    return "\n".join(lines).strip()


def merge_barrel_exports(existing: str, incoming: str) -> MergeResult:
    """Union import and re-export statements keyed by module specifier.

    Only pure barrels merge. A file with any other code is not mergeable.
    """
    existing_statements = _module_statements(existing)
    incoming_statements = _module_statements(incoming)
    if existing_statements is None or incoming_statements is None:
        return MergeResult(
            success=False,
            content=existing,
            warnings=("Cannot merge barrel: file contains code other than imports and re-exports",),
        )

    warnings: list[str] = []
    exports: dict[str, str] = {}
    for statement in existing_statements:
        if statement.startswith("export "):
            exports[_statement_key(statement)] = statement
    for statement in incoming_statements:
        if not statement.startswith("export "):
            continue
        key = _statement_key(statement)
        if key not in exports:
            exports[key] = statement
        elif exports[key] != statement:
            warnings.append(f"Duplicate export skipped: {key}")

    imports: dict[str, str] = {}
    for statement in existing_statements + incoming_statements:
        if statement.startswith("import "):
            imports.setdefault(_statement_key(statement), statement)

    existing_comment = _extract_top_comment(existing)
    incoming_comment = _extract_top_comment(incoming)
    comment = existing_comment if len(existing_comment) >= len(incoming_comment) else incoming_comment

    parts: list[str] = []
    if comment:
        parts.extend([comment, ""])
    if imports:
        parts.extend([*imports.values(), ""])
    parts.extend([*exports.values(), ""])

    return MergeResult(success=True, content="\n".join(parts), warnings=tuple(warnings))


# =============================================================================
# Declaration files (types, constants)
# =============================================================================


def _declaration_ends(line: str, rest: list[str]) -> bool:
    """Whether a declaration whose braces are balanced ends on `line`."""
    stripped = line.strip()
    if stripped.endswith((";", "}")):
        return True
    if not rest or not rest[0].strip():
        return True
    following = rest[0]
    return not (following[:1].isspace() or following.lstrip().startswith(("|", "&", "=")))


def _append_declarations(
    existing: str,
    incoming: str,
    *,
    declaration: re.Pattern[str],
    known_names: re.Pattern[str],
    label: str,
    heading: str,
) -> MergeResult:
    warnings: list[str] = []
    names = set(known_names.findall(existing))
    lines = incoming.split("\n")

    kept: list[str] = []
    skipping = False
    depth = 0
    for index, line in enumerate(lines):
        if not skipping:
            match = declaration.match(line)
            if match and match.group(1) in names:
                warnings.append(f"Duplicate {label} skipped: {match.group(1)}")
                skipping = True
                depth = 0
        if skipping:
            depth += line.count("{") - line.count("}")
            if depth <= 0 and _declaration_ends(line, lines[index + 1 :]):
                skipping = False
            continue
        # Imports are dropped; the existing file owns its import block
        if line.strip().startswith("import "):
            continue
        kept.append(line)

    merged = existing.rstrip()
    addition = "\n".join(kept).strip()
    if addition:
        merged += f"\n\n// {heading}\n{addition}"
    return MergeResult(success=True, content=merged + "\n", warnings=tuple(warnings))


def merge_type_definitions(existing: str, incoming: str) -> MergeResult:
    return _append_declarations(
        existing,
        incoming,
        declaration=_TYPE_DECL,
        known_names=_TYPE_NAMES,
        label="type",
        heading="Additional types from merged plugins",
    )


def merge_constants(existing: str, incoming: str) -> MergeResult:
    return _append_declarations(
        existing,
        incoming,
        declaration=_CONST_DECL,
        known_names=_CONST_NAMES,
        label="constant",
        heading="Additional constants from merged plugins",
    )


# =============================================================================
# JSON manifests
# =============================================================================


def _union_json(existing: Any, incoming: Any, path: str, warnings: list[str]) -> Any:
    if isinstance(existing, dict) and isinstance(incoming, dict):
        merged = dict(existing)
        for key, value in incoming.items():
            child = f"{path}.{key}" if path else key
            merged[key] = _union_json(existing[key], value, child, warnings) if key in existing else value
        return merged
    if isinstance(existing, list) and isinstance(incoming, list):
        merged_list = list(existing)
        for item in incoming:
            if item not in merged_list:
                merged_list.append(item)
        return merged_list
    if existing != incoming:
        warnings.append(f"Conflicting value for '{path}': kept {json.dumps(existing)}, ignored {json.dumps(incoming)}")
    return existing


def merge_json_manifest(existing: str, incoming: str) -> MergeResult:
    """Recursive key union. Lists are unioned in order; scalars keep the existing value."""
    try:
        existing_doc = json.loads(existing)
        incoming_doc = json.loads(incoming)
    except json.JSONDecodeError as e:
        return MergeResult(success=False, content=existing, warnings=(f"Cannot merge JSON: {e}",))

    warnings: list[str] = []
    merged = _union_json(existing_doc, incoming_doc, "", warnings)
    return MergeResult(success=True, content=json.dumps(merged, indent=2) + "\n", warnings=tuple(warnings))


# =============================================================================
# Line sets
# =============================================================================


def merge_line_set(existing: str, incoming: str) -> MergeResult:
    """Append incoming lines not already present, preserving order."""
    seen = set(existing.split("\n"))
    added: list[str] = []
    for line in incoming.split("\n"):
        if line.strip() and line not in seen:
            added.append(line)
            seen.add(line)
    if not added:
        return MergeResult(success=True, content=existing)
    return MergeResult(success=True, content=existing.rstrip("\n") + "\n" + "\n".join(added) + "\n")


_MERGERS: dict[MergeableFileType, Callable[[str, str], MergeResult]] = {
    MergeableFileType.BARREL_EXPORTS: merge_barrel_exports,
    MergeableFileType.TYPES: merge_type_definitions,
    MergeableFileType.CONSTANTS: merge_constants,
    MergeableFileType.JSON_MANIFEST: merge_json_manifest,
    MergeableFileType.LINE_SET: merge_line_set,
}


# =============================================================================
# Arbitration
# =============================================================================


def write_with_merge(store: MemoryFileTree, path: str, data: bytes, *, origin: str | None) -> list[AssemblyWarning]:
    """Write `data` at `path`, merging when another source already wrote there.

    - new path, or the same origin rewriting its own file: overwrite
    - identical bytes: nothing to do
    - otherwise merge; if that fails the existing content stays and one
      MERGE_CONFLICT warning is returned

    Returns:
        Warnings produced by the write (empty for a clean write)
    """
    key = normalize_path(path)
    existing = store.read(key)
    previous_origin = store.origin_of(key)

    if existing is None or previous_origin == origin:
        store.write(key, data, origin=origin)
        return []
    if existing == data:
        return []

    try:
        existing_text = existing.decode("utf-8")
        incoming_text = data.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning("Binary collision kept existing content", path=key, origin=origin)
        return [
            AssemblyWarning(
                kind=WarningKind.MERGE_CONFLICT,
                path=key,
                message=f"Cannot merge binary content from {origin}; kept content from {previous_origin}",
                origin=origin,
            )
        ]

    result = merge_file_contents(existing_text, incoming_text, key)
    if not result.success:
        detail = result.warnings[0] if result.warnings else f"Cannot merge {key}"
        logger.warning("Merge conflict kept existing content", path=key, origin=origin, existing_origin=previous_origin)
        return [
            AssemblyWarning(
                kind=WarningKind.MERGE_CONFLICT,
                path=key,
                message=f"{detail}; kept content from {previous_origin}",
                origin=origin,
            )
        ]

    store.write(key, result.content.encode("utf-8"), origin=f"{previous_origin}+{origin}")
    logger.debug("Merged file", path=key, origin=origin, existing_origin=previous_origin)
    return [AssemblyWarning(kind=WarningKind.MERGE_NOTE, path=key, message=w, origin=origin) for w in result.warnings]
