# tests/conftest.py
"""Shared test fixtures and helpers.

Test plugins:
- StaticFilesPlugin ("static-files"): emits files and patches straight from
  node config. Two nodes of this type are the simplest way to collide writes.
- AsyncEchoPlugin ("async-echo"): async validate/generate; records which
  upstream outputs were visible when it ran.
- RejectingPlugin ("rejecting"): validation always fails on `reason`.
- ExplodingPlugin ("exploding"): generate() raises RuntimeError.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import asyncio
import os
from collections.abc import Callable, Mapping
from typing import Any

import pytest
from hypothesis import Phase, Verbosity, settings

from foundry.contracts.blueprint import Blueprint, BlueprintConfig, BlueprintEdge, BlueprintNode, ProjectMetadata
from foundry.contracts.codegen import After, CodegenOutput, InsertOperation
from foundry.contracts.results import ValidationResult
from foundry.plugins.base import BasePlugin
from foundry.plugins.context import ExecutionContext
from foundry.plugins.manager import PluginManager

# =============================================================================
# Test plugins
# =============================================================================


class StaticFilesPlugin(BasePlugin):
    """Emits the files and patches listed in its node config."""

    plugin_id = "static-files"

    def generate(self, node: BlueprintNode, ctx: ExecutionContext) -> CodegenOutput:
        output = CodegenOutput()
        for spec in node.config.get("files", []):
            self.add_file(output, spec["path"], spec["content"], category=spec.get("category"))
        for spec in node.config.get("patches", []):
            self.add_patch(output, spec["path"], InsertOperation(After(spec["after"]), spec["content"]))
        for key in node.config.get("env", []):
            self.add_env_var(output, key, f"{key} for {node.id}")
        for name in node.config.get("scripts", []):
            self.add_script(output, name, f"echo {name}")
        if "doc" in node.config:
            self.add_doc(output, f"docs/{node.id}.md", node.id.title(), node.config["doc"])
        return output


class AsyncEchoPlugin(BasePlugin):
    """Async plugin that writes which upstream outputs it could see."""

    plugin_id = "async-echo"

    async def validate(self, config: Mapping[str, Any], ctx: ExecutionContext) -> ValidationResult:
        await asyncio.sleep(0)
        return ValidationResult.ok()

    async def generate(self, node: BlueprintNode, ctx: ExecutionContext) -> CodegenOutput:  # type: ignore[override]
        await asyncio.sleep(float(node.config.get("delay", 0)))
        output = CodegenOutput()
        seen = ",".join(ctx.node_outputs)
        self.add_file(output, f"echo/{node.id}.txt", f"{ctx.run_id}:{seen}\n")
        return output


class RejectingPlugin(BasePlugin):
    """Always rejects its config."""

    plugin_id = "rejecting"

    def validate(self, config: Mapping[str, Any], ctx: ExecutionContext) -> ValidationResult:
        return self.invalid("reason", "always rejected")

    def generate(self, node: BlueprintNode, ctx: ExecutionContext) -> CodegenOutput:
        raise AssertionError("generate must not run after failed validation")


class ExplodingPlugin(BasePlugin):
    """Raises from generate()."""

    plugin_id = "exploding"

    def generate(self, node: BlueprintNode, ctx: ExecutionContext) -> CodegenOutput:
        raise RuntimeError("boom")


TEST_PLUGINS: tuple[type[BasePlugin], ...] = (StaticFilesPlugin, AsyncEchoPlugin, RejectingPlugin, ExplodingPlugin)


@pytest.fixture
def plugin_manager() -> PluginManager:
    """Built-in plugins plus the test plugins above."""
    manager = PluginManager()
    manager.register_builtin_plugins()
    manager.register_classes(*TEST_PLUGINS)
    return manager


@pytest.fixture
def test_plugin_classes() -> tuple[type[BasePlugin], ...]:
    return TEST_PLUGINS


# =============================================================================
# Blueprint builders
# =============================================================================

NodeSpec = tuple[str, str] | tuple[str, str, dict[str, Any]]


def build_blueprint(
    nodes: list[NodeSpec],
    edges: list[tuple[str, str]] | None = None,
    **config: Any,
) -> Blueprint:
    """Blueprint from (id, type[, config]) tuples and (source, target) pairs."""
    config.setdefault("project", ProjectMetadata(name="Test Project"))
    return Blueprint(
        id="bp-test",
        nodes=[BlueprintNode(id=spec[0], type=spec[1], config=spec[2] if len(spec) > 2 else {}) for spec in nodes],  # type: ignore[misc]
        edges=[BlueprintEdge(source=s, target=t) for s, t in edges or []],
        config=BlueprintConfig(**config),
    )


@pytest.fixture
def make_blueprint() -> Callable[..., Blueprint]:
    return build_blueprint


@pytest.fixture
def arbitrum_network() -> dict[str, Any]:
    return {"chainId": 421614, "name": "Arbitrum Sepolia", "rpcUrl": "https://sepolia-rollup.arbitrum.io/rpc", "isTestnet": True}


# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
