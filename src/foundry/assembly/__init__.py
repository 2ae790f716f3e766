# src/foundry/assembly/__init__.py
"""Assembly: the project tree, patches, merges, component import, root files."""

from foundry.assembly.globbing import compile_glob, find_path_category, match_glob
from foundry.assembly.importer import ComponentImporter
from foundry.assembly.merging import get_mergeable_type, merge_file_contents, write_with_merge
from foundry.assembly.patching import apply_file, apply_patch
from foundry.assembly.root_files import dedupe_env_vars, synthesize_root_files
from foundry.assembly.tree import (
    DiskFileTree,
    FileTree,
    MemoryFileTree,
    create_manifest,
    export_to_directory,
    normalize_path,
)

__all__ = [
    "ComponentImporter",
    "DiskFileTree",
    "FileTree",
    "MemoryFileTree",
    "apply_file",
    "apply_patch",
    "compile_glob",
    "create_manifest",
    "dedupe_env_vars",
    "export_to_directory",
    "find_path_category",
    "get_mergeable_type",
    "match_glob",
    "merge_file_contents",
    "normalize_path",
    "synthesize_root_files",
    "write_with_merge",
]
