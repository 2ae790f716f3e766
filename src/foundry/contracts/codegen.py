# src/foundry/contracts/codegen.py
"""Plugin output contracts.

A plugin's generate() returns one CodegenOutput. The engine owns everything
that happens to it afterwards: path rewriting, writing, patching, merging.

Patch operations form a small tagged union:

    InsertOperation(position="start" | "end" | After(m) | Before(m), content)
    ReplaceOperation(search, replace, all=False)
    DeleteOperation(search)
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field, replace
from typing import Literal

from foundry.contracts.enums import PathCategory


@dataclass(frozen=True, slots=True)
class GeneratedFile:
    """A file emitted by a plugin.

    `path` is relative and POSIX-style. When `category` is set the router
    rewrites `path` into the project directory for that category.
    """

    path: str
    content: str | bytes
    category: PathCategory | None = None
    encoding: Literal["utf-8", "base64"] = "utf-8"

    @property
    def data(self) -> bytes:
        """File content as bytes, decoding base64 payloads."""
        if isinstance(self.content, bytes):
            return self.content
        if self.encoding == "base64":
            try:
                return base64.b64decode(self.content, validate=True)
            except binascii.Error as e:
                raise ValueError(f"Invalid base64 content for {self.path}: {e}") from e
        return self.content.encode("utf-8")

    def with_path(self, path: str) -> GeneratedFile:
        return replace(self, path=path)


@dataclass(frozen=True, slots=True)
class After:
    """Insert immediately after the first occurrence of `marker`."""

    marker: str


@dataclass(frozen=True, slots=True)
class Before:
    """Insert immediately before the first occurrence of `marker`."""

    marker: str


type InsertPosition = Literal["start", "end"] | After | Before


@dataclass(frozen=True, slots=True)
class InsertOperation:
    position: InsertPosition
    content: str


@dataclass(frozen=True, slots=True)
class ReplaceOperation:
    search: str
    replace: str
    all: bool = False


@dataclass(frozen=True, slots=True)
class DeleteOperation:
    search: str


type PatchOperation = InsertOperation | ReplaceOperation | DeleteOperation


@dataclass(frozen=True, slots=True)
class CodegenPatch:
    """Ordered operations against one file already in the assembly tree."""

    path: str
    operations: tuple[PatchOperation, ...]


@dataclass(frozen=True, slots=True)
class EnvVarDefinition:
    key: str
    description: str
    required: bool = True
    default_value: str | None = None
    secret: bool = False


@dataclass(frozen=True, slots=True)
class ScriptDefinition:
    name: str
    command: str
    description: str | None = None


@dataclass(frozen=True, slots=True)
class InterfaceDefinition:
    """Machine-readable interface a plugin exposes to downstream nodes (ABI, types)."""

    name: str
    type: Literal["abi", "typescript", "openapi"]
    content: str


@dataclass(frozen=True, slots=True)
class DocSnippet:
    """Markdown document written as `# {title}\\n\\n{content}` at `path`."""

    path: str
    title: str
    content: str

    def render(self) -> str:
        return f"# {self.title}\n\n{self.content}"


@dataclass
class CodegenOutput:
    """Everything one node's plugin produced.

    Mutable so plugins can build it incrementally through BasePlugin helpers.
    Downstream nodes read it through ExecutionContext.node_outputs.
    """

    files: list[GeneratedFile] = field(default_factory=list)
    patches: list[CodegenPatch] = field(default_factory=list)
    env_vars: list[EnvVarDefinition] = field(default_factory=list)
    scripts: list[ScriptDefinition] = field(default_factory=list)
    interfaces: list[InterfaceDefinition] = field(default_factory=list)
    docs: list[DocSnippet] = field(default_factory=list)
