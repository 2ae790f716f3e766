"""Shared contracts for cross-boundary data types.

This package is a LEAF MODULE with no outbound dependencies to core/engine.
Settings classes are NOT re-exported here; import them from foundry.core.config.

Import patterns:
    from foundry.contracts import Blueprint, GeneratedFile, PathCategory
    from foundry.core.config import FoundrySettings
"""

from foundry.contracts.blueprint import (
    Blueprint,
    BlueprintConfig,
    BlueprintEdge,
    BlueprintNode,
    GitHubConfig,
    NetworkConfig,
    ProjectMetadata,
)
from foundry.contracts.codegen import (
    After,
    Before,
    CodegenOutput,
    CodegenPatch,
    DeleteOperation,
    DocSnippet,
    EnvVarDefinition,
    GeneratedFile,
    InsertOperation,
    InsertPosition,
    InterfaceDefinition,
    PatchOperation,
    ReplaceOperation,
    ScriptDefinition,
)
from foundry.contracts.enums import (
    CategoryDomain,
    ImportStrategy,
    LogLevel,
    MergeableFileType,
    PathCategory,
    RunStatus,
    WarningKind,
)
from foundry.contracts.errors import (
    CollaboratorError,
    CycleError,
    FoundryError,
    GraphValidationError,
    InvalidPathError,
    NodeValidationError,
    PluginNotFoundError,
    RunCancelledError,
)
from foundry.contracts.paths import PathContext
from foundry.contracts.results import (
    AssemblyWarning,
    ExecutionResult,
    FieldError,
    Manifest,
    ManifestEntry,
    MergeResult,
    PublishResult,
    ValidationResult,
)

__all__ = [
    # blueprint
    "Blueprint",
    "BlueprintConfig",
    "BlueprintEdge",
    "BlueprintNode",
    "GitHubConfig",
    "NetworkConfig",
    "ProjectMetadata",
    # codegen
    "After",
    "Before",
    "CodegenOutput",
    "CodegenPatch",
    "DeleteOperation",
    "DocSnippet",
    "EnvVarDefinition",
    "GeneratedFile",
    "InsertOperation",
    "InsertPosition",
    "InterfaceDefinition",
    "PatchOperation",
    "ReplaceOperation",
    "ScriptDefinition",
    # enums
    "CategoryDomain",
    "ImportStrategy",
    "LogLevel",
    "MergeableFileType",
    "PathCategory",
    "RunStatus",
    "WarningKind",
    # errors
    "CollaboratorError",
    "CycleError",
    "FoundryError",
    "GraphValidationError",
    "InvalidPathError",
    "NodeValidationError",
    "PluginNotFoundError",
    "RunCancelledError",
    # paths
    "PathContext",
    # results
    "AssemblyWarning",
    "ExecutionResult",
    "FieldError",
    "Manifest",
    "ManifestEntry",
    "MergeResult",
    "PublishResult",
    "ValidationResult",
]
