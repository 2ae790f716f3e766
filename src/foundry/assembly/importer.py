# src/foundry/assembly/importer.py
"""Component importer: lays a pre-built package from disk into the assembly tree.

Strategies (see ImportStrategy):

    MAPPED   each file is matched against the package's (glob, category)
             mappings; the first match routes it through the output router
             scoped to the package namespace. Unmatched docs go to
             docs/<namespace>/, other unmatched files are skipped.
    PACKAGE  the package is copied intact under packages/<namespace>/.
    MERGE_INTO_FRONTEND (deprecated)
             src/ subdirectories merge into the frontend source root, loose
             src/ files collapse into lib/, README into docs/<namespace>/.

Every write goes through write_with_merge with origin ``component:<package>``.
The source tree is only read.
"""

from __future__ import annotations

import os
import posixpath
import warnings
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path

from foundry.assembly.globbing import PathMappings, find_mapping, literal_prefix
from foundry.assembly.merging import write_with_merge
from foundry.assembly.tree import MemoryFileTree
from foundry.contracts.enums import ImportStrategy, WarningKind
from foundry.contracts.paths import PathContext
from foundry.contracts.results import AssemblyWarning
from foundry.core.config import DEFAULT_DOC_EXTENSIONS, DEFAULT_SKIP_DIRS
from foundry.core.logging import get_logger
from foundry.engine.router import resolve_output_path

logger = get_logger(__name__)


def package_namespace(package_name: str) -> str:
    """'@cradle/wallet-auth' -> 'wallet-auth'"""
    return package_name.rstrip("/").split("/")[-1]


class ComponentImporter:
    """Imports component packages into one run's assembly tree.

    Args:
        store: The run's assembly tree
        context: The run's project shape
        component_root: Base directory for relative package paths
        skip_dirs: Directory names never descended into
        doc_extensions: Extensions routed to docs/ when no mapping matches
    """

    def __init__(
        self,
        store: MemoryFileTree,
        context: PathContext,
        *,
        component_root: Path | None = None,
        skip_dirs: Sequence[str] = DEFAULT_SKIP_DIRS,
        doc_extensions: Sequence[str] = DEFAULT_DOC_EXTENSIONS,
    ) -> None:
        self._store = store
        self._context = context
        self._component_root = component_root
        self._skip_dirs = frozenset(skip_dirs)
        self._doc_extensions = tuple(ext.lower() for ext in doc_extensions)

    def resolve_source(self, source: Path | str) -> Path:
        path = Path(source)
        if not path.is_absolute() and self._component_root is not None:
            return self._component_root / path
        return path

    def import_package(
        self,
        source: Path | str,
        package_name: str,
        *,
        path_mappings: PathMappings | None = None,
        strategy: ImportStrategy = ImportStrategy.AUTO,
    ) -> list[AssemblyWarning]:
        """Copy one package into the tree.

        Returns:
            Warnings from merges and a missing source directory.
        """
        root = self.resolve_source(source)
        origin = f"component:{package_name}"

        if not root.is_dir():
            logger.warning("Component path not found", package=package_name, path=str(root))
            return [
                AssemblyWarning(
                    kind=WarningKind.COMPONENT_MISSING,
                    path=str(source),
                    message=f"component source not found: {root}",
                    origin=origin,
                )
            ]

        namespace = package_namespace(package_name)
        resolved = self._resolve_strategy(strategy, path_mappings)
        logger.info("Importing component", package=package_name, namespace=namespace, strategy=str(resolved))

        if resolved is ImportStrategy.MAPPED:
            return self._import_mapped(root, namespace, list(_mapping_pairs(path_mappings)), origin)
        if resolved is ImportStrategy.MERGE_INTO_FRONTEND:
            return self._import_merged_into_frontend(root, namespace, origin)
        return self._import_as_package(root, namespace, origin)

    def _resolve_strategy(self, strategy: ImportStrategy, path_mappings: PathMappings | None) -> ImportStrategy:
        if strategy is ImportStrategy.AUTO:
            if path_mappings and self._context.has_frontend:
                return ImportStrategy.MAPPED
            return ImportStrategy.PACKAGE
        if strategy is ImportStrategy.MAPPED and not path_mappings:
            return ImportStrategy.PACKAGE
        if strategy is ImportStrategy.MERGE_INTO_FRONTEND:
            warnings.warn(
                "ImportStrategy.MERGE_INTO_FRONTEND is deprecated; declare component path mappings instead",
                DeprecationWarning,
                stacklevel=3,
            )
            if not self._context.has_frontend:
                return ImportStrategy.PACKAGE
        return strategy

    # -------------------------------------------------------------------------
    # Walking
    # -------------------------------------------------------------------------

    def _walk(self, root: Path) -> Iterator[tuple[str, Path]]:
        """Yield (package-relative POSIX path, file) in sorted order."""
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in self._skip_dirs and not d.startswith("."))
            base = Path(dirpath)
            for name in sorted(filenames):
                if name.startswith("."):
                    continue
                file_path = base / name
                yield file_path.relative_to(root).as_posix(), file_path

    def _write(self, path: str, file_path: Path, origin: str) -> list[AssemblyWarning]:
        return write_with_merge(self._store, path, file_path.read_bytes(), origin=origin)

    def _is_doc(self, relative: str) -> bool:
        return posixpath.splitext(relative)[1].lower() in self._doc_extensions

    # -------------------------------------------------------------------------
    # Strategies
    # -------------------------------------------------------------------------

    def _import_mapped(
        self,
        root: Path,
        namespace: str,
        mappings: list[tuple[str, str]],
        origin: str,
    ) -> list[AssemblyWarning]:
        collected: list[AssemblyWarning] = []
        hooks_dir = posixpath.join(self._context.frontend_base_path, "plugins", namespace, "hooks")
        hook_files: list[str] = []

        for relative, file_path in self._walk(root):
            found = find_mapping(relative, mappings)
            if found is None:
                if self._is_doc(relative):
                    target = posixpath.join("docs", namespace, relative)
                    collected.extend(self._write(target, file_path, origin))
                else:
                    logger.debug("No mapping for component file", file=relative, namespace=namespace)
                continue

            pattern, category = found
            prefix = literal_prefix(pattern)
            routed = relative[len(prefix) + 1 :] if prefix and relative.startswith(prefix + "/") else relative
            target = resolve_output_path(routed, category, self._context, scope=namespace)
            collected.extend(self._write(target, file_path, origin))

            if posixpath.dirname(target) == hooks_dir:
                hook_files.append(posixpath.basename(target))

        if hook_files and self._context.has_frontend:
            collected.extend(self._write_hook_reexports(namespace, hook_files, origin))
        return collected

    def _write_hook_reexports(self, namespace: str, hook_files: list[str], origin: str) -> list[AssemblyWarning]:
        """Make namespaced hooks importable from the frontend's hooks/index.ts."""
        module = f"../plugins/{namespace}/hooks"
        if "index.ts" in hook_files or "index.tsx" in hook_files:
            lines = [f"export * from '{module}';"]
        else:
            stems = sorted(
                posixpath.splitext(name)[0] for name in hook_files if name.endswith((".ts", ".tsx"))
            )
            lines = [f"export * from '{module}/{stem}';" for stem in stems]
        if not lines:
            return []

        barrel = posixpath.join(self._context.frontend_base_path, "hooks", "index.ts")
        content = f"// Re-exports from {namespace}\n" + "\n".join(lines) + "\n"
        logger.debug("Adding hook re-exports", barrel=barrel, namespace=namespace, count=len(lines))
        return write_with_merge(self._store, barrel, content.encode("utf-8"), origin=origin)

    def _import_as_package(self, root: Path, namespace: str, origin: str) -> list[AssemblyWarning]:
        collected: list[AssemblyWarning] = []
        for relative, file_path in self._walk(root):
            collected.extend(self._write(posixpath.join("packages", namespace, relative), file_path, origin))
        return collected

    def _import_merged_into_frontend(self, root: Path, namespace: str, origin: str) -> list[AssemblyWarning]:
        collected: list[AssemblyWarning] = []
        frontend_root = self._context.frontend_base_path

        for relative, file_path in self._walk(root):
            if relative.startswith("src/"):
                inner = relative[len("src/") :]
                if "/" in inner:
                    target = posixpath.join(frontend_root, inner)
                else:
                    target = posixpath.join(frontend_root, "lib", inner)
            elif relative == "README.md":
                target = posixpath.join("docs", namespace, "README.md")
            else:
                continue
            collected.extend(self._write(target, file_path, origin))
        return collected


def _mapping_pairs(mappings: PathMappings | None) -> Iterator[tuple[str, str]]:
    if not mappings:
        return
    items = mappings.items() if isinstance(mappings, Mapping) else mappings
    for pattern, category in items:
        yield pattern, str(category)
