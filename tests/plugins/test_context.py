# tests/plugins/test_context.py
"""Tests for plugin execution context."""

from types import MappingProxyType

import pytest

from foundry.contracts.blueprint import BlueprintConfig, ProjectMetadata
from foundry.contracts.codegen import CodegenOutput, InterfaceDefinition
from foundry.contracts.paths import PathContext


class TestExecutionContext:
    """Context passed to every plugin call."""

    def test_minimal_context(self) -> None:
        from foundry.plugins.context import ExecutionContext

        ctx = ExecutionContext(run_id="run-001", config=BlueprintConfig(project=ProjectMetadata(name="P")), path_context=PathContext())

        assert ctx.run_id == "run-001"
        assert ctx.node_id is None
        assert dict(ctx.node_outputs) == {}
        assert ctx.output_of("anything") is None

    def test_snapshot_is_read_only(self) -> None:
        from foundry.plugins.context import ExecutionContext

        ctx = ExecutionContext(
            run_id="r",
            config=BlueprintConfig(project=ProjectMetadata(name="P")),
            path_context=PathContext(),
            node_outputs=MappingProxyType({"a": CodegenOutput()}),
        )

        with pytest.raises(TypeError):
            ctx.node_outputs["b"] = CodegenOutput()  # type: ignore[index]

    def test_find_interfaces_in_schedule_order(self) -> None:
        from foundry.plugins.context import ExecutionContext

        outputs = {
            "token": CodegenOutput(interfaces=[InterfaceDefinition("erc20", "abi", "[1]"), InterfaceDefinition("types", "typescript", "")]),
            "nft": CodegenOutput(interfaces=[InterfaceDefinition("erc721", "abi", "[2]")]),
        }
        ctx = ExecutionContext(
            run_id="r",
            config=BlueprintConfig(project=ProjectMetadata(name="P")),
            path_context=PathContext(),
            node_outputs=MappingProxyType(outputs),
        )

        assert [(node_id, i.name) for node_id, i in ctx.find_interfaces("abi")] == [("token", "erc20"), ("nft", "erc721")]
        assert ctx.output_of("nft") is outputs["nft"]
