# src/foundry/plugins/context.py
"""Plugin execution context.

The ExecutionContext carries everything a plugin may read while validating
or generating one node. It is rebuilt per node: `node_outputs` is a
read-only snapshot holding exactly the nodes scheduled before this one.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from foundry.contracts.blueprint import BlueprintConfig
from foundry.contracts.codegen import CodegenOutput, InterfaceDefinition
from foundry.contracts.paths import PathContext


@dataclass(frozen=True)
class ExecutionContext:
    run_id: str
    config: BlueprintConfig
    path_context: PathContext
    node_outputs: Mapping[str, CodegenOutput] = field(default_factory=lambda: MappingProxyType({}))
    node_id: str | None = None

    def output_of(self, node_id: str) -> CodegenOutput | None:
        return self.node_outputs.get(node_id)

    def find_interfaces(self, interface_type: str) -> list[tuple[str, InterfaceDefinition]]:
        """All upstream interfaces of one type, as (node_id, interface), in schedule order."""
        found: list[tuple[str, InterfaceDefinition]] = []
        for node_id, output in self.node_outputs.items():
            found.extend((node_id, i) for i in output.interfaces if i.type == interface_type)
        return found
