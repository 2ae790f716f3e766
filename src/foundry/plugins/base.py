# src/foundry/plugins/base.py
"""Base class for node plugin implementations.

Why base class inheritance:
- Plugin discovery uses issubclass() checks against BasePlugin
- Python's Protocol with non-method members (plugin_id, ...) cannot support
  issubclass(), only isinstance() on already-instantiated objects

NodePluginProtocol exists for type checking. Plugins registered through a
hookimpl need not subclass BasePlugin, but built-in plugins must.

Lifecycle (per run, per node, on the orchestrator's event loop):
    validate(config, ctx) -> generate(node, ctx)

generate() is only called after validate() returned a valid result.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, ClassVar, Literal

from pydantic import ValidationError

from foundry.contracts.blueprint import BlueprintNode
from foundry.contracts.codegen import (
    CodegenOutput,
    CodegenPatch,
    DocSnippet,
    EnvVarDefinition,
    GeneratedFile,
    InterfaceDefinition,
    PatchOperation,
    ScriptDefinition,
)
from foundry.contracts.enums import ImportStrategy, PathCategory
from foundry.contracts.results import FieldError, ValidationResult
from foundry.plugins.config_base import PluginConfig, field_errors
from foundry.plugins.context import ExecutionContext


class BasePlugin(ABC):
    """Base class for node plugins.

    Subclass and set:
        plugin_id: The blueprint node type handled (required, unique)
        config_model: PluginConfig subclass validating node.config (optional)
        component_*: A bundled component package to import (optional)

    Example:
        class Erc20Plugin(BasePlugin):
            plugin_id = "erc20-stylus"
            config_model = Erc20Config

            def generate(self, node, ctx):
                cfg = self.parse_config(node.config)
                output = CodegenOutput()
                self.add_file(output, "erc20/src/lib.rs", render(cfg), category=PathCategory.CONTRACT_SOURCE)
                return output
    """

    plugin_id: ClassVar[str]
    version: ClassVar[str] = "0.1.0"
    config_model: ClassVar[type[PluginConfig] | None] = None

    component_path: ClassVar[str | None] = None
    component_package: ClassVar[str | None] = None
    component_path_mappings: ClassVar[Mapping[str, PathCategory] | None] = None
    component_import_strategy: ClassVar[ImportStrategy] = ImportStrategy.AUTO

    def validate(self, config: Mapping[str, Any], ctx: ExecutionContext) -> ValidationResult:
        """Validate node config against `config_model`.

        Subclasses adding cross-field or context checks should call
        super().validate() first.
        """
        if self.config_model is None:
            return ValidationResult.ok()
        try:
            self.config_model.model_validate(dict(config))
        except ValidationError as e:
            return ValidationResult.failed(field_errors(e))
        return ValidationResult.ok()

    def parse_config(self, config: Mapping[str, Any]) -> Any:
        """Validated config model instance for `config`."""
        if self.config_model is None:
            raise TypeError(f"{type(self).__name__} declares no config_model")
        return self.config_model.from_dict(dict(config))

    @abstractmethod
    def generate(self, node: BlueprintNode, ctx: ExecutionContext) -> CodegenOutput:
        """Produce files, patches and side-channel data for one node."""
        ...

    # === Output helpers ===

    @staticmethod
    def add_file(
        output: CodegenOutput,
        path: str,
        content: str | bytes,
        *,
        category: PathCategory | None = None,
        encoding: Literal["utf-8", "base64"] = "utf-8",
    ) -> GeneratedFile:
        file = GeneratedFile(path=path, content=content, category=category, encoding=encoding)
        output.files.append(file)
        return file

    @staticmethod
    def add_env_var(
        output: CodegenOutput,
        key: str,
        description: str,
        *,
        required: bool = True,
        default_value: str | None = None,
        secret: bool = False,
    ) -> None:
        output.env_vars.append(
            EnvVarDefinition(key=key, description=description, required=required, default_value=default_value, secret=secret)
        )

    @staticmethod
    def add_script(output: CodegenOutput, name: str, command: str, description: str | None = None) -> None:
        output.scripts.append(ScriptDefinition(name=name, command=command, description=description))

    @staticmethod
    def add_doc(output: CodegenOutput, path: str, title: str, content: str) -> None:
        output.docs.append(DocSnippet(path=path, title=title, content=content))

    @staticmethod
    def add_patch(output: CodegenOutput, path: str, *operations: PatchOperation) -> None:
        output.patches.append(CodegenPatch(path=path, operations=tuple(operations)))

    @staticmethod
    def add_interface(
        output: CodegenOutput, name: str, interface_type: Literal["abi", "typescript", "openapi"], content: str
    ) -> None:
        output.interfaces.append(InterfaceDefinition(name=name, type=interface_type, content=content))

    @staticmethod
    def invalid(field: str, message: str) -> ValidationResult:
        return ValidationResult.failed([FieldError(field=field, message=message)])
