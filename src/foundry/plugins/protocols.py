# src/foundry/plugins/protocols.py
"""Plugin protocols defining the contracts the engine relies on.

These protocols define what plugins must implement. They're used for type
checking, not runtime enforcement (that's pluggy's job).

Collaborators:
- NodePluginProtocol: turns one blueprint node into a CodegenOutput
- RepositoryPublisher: pushes a finished assembly tree to a code host
"""

from __future__ import annotations

from collections.abc import Awaitable, Mapping
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from foundry.assembly.tree import MemoryFileTree
    from foundry.contracts.blueprint import BlueprintNode, GitHubConfig
    from foundry.contracts.codegen import CodegenOutput
    from foundry.contracts.results import PublishResult, ValidationResult
    from foundry.plugins.context import ExecutionContext


@runtime_checkable
class NodePluginProtocol(Protocol):
    """Protocol for node plugins.

    `plugin_id` equals the blueprint node `type` the plugin handles.
    validate() and generate() may be plain or async methods; the engine
    awaits whichever it gets.

    The component_* attributes are optional. When `component_path` is set,
    the engine imports that package after generate() returns.

    Example:
        class Erc20Plugin:
            plugin_id = "erc20-stylus"

            def validate(self, config, ctx):
                return ValidationResult.ok()

            async def generate(self, node, ctx):
                return CodegenOutput(files=[...])
    """

    plugin_id: str

    def validate(
        self, config: Mapping[str, object], ctx: ExecutionContext
    ) -> ValidationResult | Awaitable[ValidationResult]: ...

    def generate(self, node: BlueprintNode, ctx: ExecutionContext) -> CodegenOutput | Awaitable[CodegenOutput]: ...


@runtime_checkable
class RepositoryPublisher(Protocol):
    """Exports a finished assembly tree to a remote repository.

    Failures may raise anything; the orchestrator wraps them in
    CollaboratorError and leaves the tree intact.
    """

    async def create_repository(self, config: GitHubConfig, tree: MemoryFileTree) -> PublishResult: ...
