# src/foundry/contracts/results.py
"""Outcomes of validation, merging, assembly and whole runs.

These types answer: "What did an operation produce?"

- ValidationResult carries per-field errors so NodeValidationError can name them
- AssemblyWarning records recoverable problems; they never abort a run
- ExecutionResult is the structured success surface returned to callers
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from foundry.contracts.enums import RunStatus, WarningKind

if TYPE_CHECKING:
    from foundry.contracts.codegen import EnvVarDefinition, ScriptDefinition


@dataclass(frozen=True, slots=True)
class FieldError:
    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    """Result of a plugin's config validation.

    Use the factory methods rather than constructing directly.
    """

    valid: bool
    errors: tuple[FieldError, ...] = ()

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(valid=True)

    @classmethod
    def failed(cls, errors: list[FieldError]) -> ValidationResult:
        if not errors:
            raise ValueError("ValidationResult.failed() requires at least one FieldError")
        return cls(valid=False, errors=tuple(errors))


@dataclass(frozen=True, slots=True)
class AssemblyWarning:
    """A recoverable problem recorded during assembly.

    Fields:
        kind: What went wrong (missing patch target, merge conflict, ...)
        path: Assembly path the problem concerns
        message: Human-readable detail
        origin: Writer that triggered it (node id, ``component:<pkg>``, ``root``)
    """

    kind: WarningKind
    path: str
    message: str
    origin: str | None = None

    def __str__(self) -> str:
        return f"[{self.kind}] {self.path}: {self.message}"


@dataclass(frozen=True, slots=True)
class MergeResult:
    """Result of merging incoming file content into existing content.

    On failure `content` is the existing content unchanged.
    """

    success: bool
    content: str
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    path: str
    size: int


@dataclass(frozen=True)
class Manifest:
    """Read-only listing of an assembly tree, sorted by path."""

    files: tuple[ManifestEntry, ...] = ()

    @property
    def total_size(self) -> int:
        return sum(entry.size for entry in self.files)

    def to_dict(self) -> dict[str, list[dict[str, object]]]:
        return {"files": [{"path": e.path, "size": e.size} for e in self.files]}


@dataclass(frozen=True, slots=True)
class PublishResult:
    url: str


@dataclass
class ExecutionResult:
    """Summary of a finished blueprint run.

    `env_vars` and `scripts` are the raw per-node accumulations in schedule
    order; deduplication happens only when .env.example is rendered.
    """

    run_id: str
    status: RunStatus
    files: list[ManifestEntry] = field(default_factory=list)
    env_vars: list[EnvVarDefinition] = field(default_factory=list)
    scripts: list[ScriptDefinition] = field(default_factory=list)
    warnings: list[AssemblyWarning] = field(default_factory=list)
    repo_url: str | None = None

    @property
    def manifest(self) -> Manifest:
        return Manifest(files=tuple(self.files))
