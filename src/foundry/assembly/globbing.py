# src/foundry/assembly/globbing.py
"""Minimal glob grammar for component path mappings.

Exactly two wildcards:

    *    any run of characters except '/'
    **   any run of characters including '/'; the slashes around it stay
         literal, so 'src/**/*.rs' needs at least one directory below src

Everything else is literal. Patterns are anchored to the full relative path.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from functools import lru_cache

from foundry.contracts.enums import PathCategory

type PathMappings = Mapping[str, PathCategory | str] | Iterable[tuple[str, PathCategory | str]]


@lru_cache(maxsize=256)
def compile_glob(pattern: str) -> re.Pattern[str]:
    parts: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**", i):
            parts.append(".*")
            i += 2
        elif pattern[i] == "*":
            parts.append("[^/]*")
            i += 1
        else:
            parts.append(re.escape(pattern[i]))
            i += 1
    return re.compile("^" + "".join(parts) + "$")


def match_glob(path: str, pattern: str) -> bool:
    return compile_glob(pattern).match(path.replace("\\", "/")) is not None


def _pairs(mappings: PathMappings) -> Iterable[tuple[str, PathCategory | str]]:
    if isinstance(mappings, Mapping):
        return mappings.items()
    return mappings


def find_mapping(path: str, mappings: PathMappings) -> tuple[str, PathCategory] | None:
    """First (pattern, category) whose pattern matches `path`, in declaration order."""
    for pattern, category in _pairs(mappings):
        if match_glob(path, pattern):
            return pattern, PathCategory(category)
    return None


def find_path_category(path: str, mappings: PathMappings) -> PathCategory | None:
    found = find_mapping(path, mappings)
    return found[1] if found else None


def literal_prefix(pattern: str) -> str:
    """Leading directories of `pattern` that contain no wildcard.

    'src/hooks/**/*.ts' -> 'src/hooks'; 'contract/**' -> 'contract'; '*.md' -> ''
    """
    segments = pattern.split("/")[:-1]
    literal: list[str] = []
    for segment in segments:
        if "*" in segment:
            break
        literal.append(segment)
    return "/".join(literal)
