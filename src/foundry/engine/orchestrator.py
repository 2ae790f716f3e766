# src/foundry/engine/orchestrator.py
"""Orchestrator: full blueprint run lifecycle.

Coordinates:
- Scheduling (once, before any write)
- Path context inference (once)
- Per node: cancel check, plugin lookup, validate, generate, route, write,
  patch, docs, component import
- Root-file synthesis, manifest, optional publish

Runs are sequential: node N+1 starts only after node N's output is fully
written, since it may read that output through ExecutionContext.node_outputs.
Independent runs may be dispatched together with run_concurrently().
"""

from __future__ import annotations

import asyncio
import inspect
import uuid
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, TypeVar

import structlog

from foundry.assembly.importer import ComponentImporter
from foundry.assembly.merging import write_with_merge
from foundry.assembly.patching import apply_patch
from foundry.assembly.root_files import synthesize_root_files
from foundry.assembly.tree import MemoryFileTree, create_manifest
from foundry.contracts.blueprint import Blueprint, BlueprintNode
from foundry.contracts.codegen import CodegenOutput, EnvVarDefinition, ScriptDefinition
from foundry.contracts.enums import ImportStrategy, LogLevel, RunStatus
from foundry.contracts.errors import (
    CollaboratorError,
    FoundryError,
    NodeValidationError,
    PluginNotFoundError,
    RunCancelledError,
)
from foundry.contracts.paths import PathContext
from foundry.contracts.results import AssemblyWarning, ExecutionResult
from foundry.core.config import FoundrySettings
from foundry.core.logging import get_logger
from foundry.engine.path_context import build_path_context
from foundry.engine.router import rewrite_output_paths
from foundry.engine.runs import Artifact, LogEntry, RunStore
from foundry.engine.scheduler import schedule
from foundry.plugins.context import ExecutionContext
from foundry.plugins.manager import PluginManager
from foundry.plugins.protocols import NodePluginProtocol, RepositoryPublisher

logger = get_logger(__name__)

T = TypeVar("T")


async def _resolve(value: T | Awaitable[T]) -> T:
    """Await plugin results that are awaitable; pass plain values through."""
    if inspect.isawaitable(value):
        return await value
    return value


class CancellationToken:
    """Cooperative cancellation for one run.

    Checked at the top of each node iteration; a node already generating
    finishes first.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass(frozen=True)
class RunOptions:
    """Per-run switches.

    Attributes:
        dry_run: Never publish, even when requested
        publish: Push the tree with the configured RepositoryPublisher
        import_components: Import plugins' bundled component packages
    """

    dry_run: bool = False
    publish: bool = False
    import_components: bool = True


@dataclass(frozen=True)
class RunRequest:
    """One entry for run_concurrently()."""

    blueprint: Blueprint
    run_id: str | None = None
    options: RunOptions = field(default_factory=RunOptions)
    cancel_token: CancellationToken | None = None


@dataclass
class _RunState:
    """Mutable accumulators for one run."""

    run_id: str
    store: MemoryFileTree
    context: PathContext
    node_outputs: dict[str, CodegenOutput] = field(default_factory=dict)
    env_vars: list[EnvVarDefinition] = field(default_factory=list)
    scripts: list[ScriptDefinition] = field(default_factory=list)
    warnings: list[AssemblyWarning] = field(default_factory=list)


class Orchestrator:
    """Drives blueprint runs.

    Args:
        plugin_manager: Registry resolving node types to plugins
        settings: Component root and importer configuration
        run_store: Lifecycle/log/artifact sink (a fresh in-memory one if None)
        publisher: Repository publisher used when a run requests publishing
    """

    def __init__(
        self,
        plugin_manager: PluginManager,
        *,
        settings: FoundrySettings | None = None,
        run_store: RunStore | None = None,
        publisher: RepositoryPublisher | None = None,
    ) -> None:
        self._plugins = plugin_manager
        self._settings = settings if settings is not None else FoundrySettings()
        self.run_store = run_store if run_store is not None else RunStore()
        self._publisher = publisher

    async def execute(
        self,
        blueprint: Blueprint,
        *,
        run_id: str | None = None,
        options: RunOptions | None = None,
        store: MemoryFileTree | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> ExecutionResult:
        """Execute one blueprint run.

        Args:
            blueprint: Validated blueprint
            run_id: Identifier for the run store (generated if None)
            options: Per-run switches
            store: Tree to assemble into; pass one to inspect it afterwards
            cancel_token: Checked before each node

        Returns:
            ExecutionResult with manifest entries, env vars, scripts, warnings

        Raises:
            GraphValidationError: Malformed or cyclic graph (nothing written)
            PluginNotFoundError: A node type has no registered plugin
            NodeValidationError: A plugin rejected its node's config
            RunCancelledError: The cancel token was set
            CollaboratorError: Publishing failed (the tree is left intact)
        """
        run_id = run_id or f"run-{uuid.uuid4().hex[:12]}"
        options = options or RunOptions()
        store = store if store is not None else MemoryFileTree()

        self.run_store.create(run_id, blueprint.id)

        with structlog.contextvars.bound_contextvars(run_id=run_id):
            self.run_store.start(run_id)
            logger.info("Run started", blueprint_id=blueprint.id, nodes=len(blueprint.nodes))
            try:
                result = await self._execute(blueprint, run_id, options, store, cancel_token)
            except RunCancelledError as e:
                self.run_store.cancel(run_id, str(e))
                logger.warning("Run cancelled", reason=str(e))
                raise
            except FoundryError as e:
                self.run_store.fail(run_id, str(e))
                logger.error("Run failed", error=str(e), error_type=type(e).__name__)
                raise
            except Exception as e:
                # Plugin bugs fail the run too; the record must not stay RUNNING
                self.run_store.fail(run_id, f"{type(e).__name__}: {e}")
                logger.exception("Run crashed")
                raise

            self.run_store.complete(run_id)
            logger.info("Run completed", files=len(result.files), warnings=len(result.warnings))
            return result

    async def _execute(
        self,
        blueprint: Blueprint,
        run_id: str,
        options: RunOptions,
        store: MemoryFileTree,
        cancel_token: CancellationToken | None,
    ) -> ExecutionResult:
        ordered = schedule(blueprint.nodes, blueprint.edges)
        context = build_path_context(ordered)
        logger.debug(
            "Scheduled blueprint",
            order=[node.id for node in ordered],
            has_frontend=context.has_frontend,
            has_backend=context.has_backend,
            has_contracts=context.has_contracts,
        )

        state = _RunState(run_id=run_id, store=store, context=context)
        importer = ComponentImporter(
            store,
            context,
            component_root=self._settings.component_root,
            skip_dirs=self._settings.import_.skip_dirs,
            doc_extensions=self._settings.import_.doc_extensions,
        )

        for node in ordered:
            if cancel_token is not None and cancel_token.cancelled:
                raise RunCancelledError(run_id, node.id)
            with structlog.contextvars.bound_contextvars(node_id=node.id):
                await self._execute_node(blueprint, node, state, options, importer)

        root_warnings = synthesize_root_files(
            store,
            blueprint.config.project,
            context,
            env_vars=state.env_vars,
            scripts=state.scripts,
        )
        self._record_warnings(state, root_warnings)

        manifest = create_manifest(store)
        self.run_store.add_artifact(run_id, Artifact(kind="manifest", name="manifest.json", content=manifest.to_dict()))

        repo_url = None
        if options.publish and not options.dry_run and blueprint.config.github is not None:
            repo_url = await self._publish(blueprint, store)

        return ExecutionResult(
            run_id=run_id,
            status=RunStatus.COMPLETED,
            files=list(manifest.files),
            env_vars=state.env_vars,
            scripts=state.scripts,
            warnings=state.warnings,
            repo_url=repo_url,
        )

    async def _execute_node(
        self,
        blueprint: Blueprint,
        node: BlueprintNode,
        state: _RunState,
        options: RunOptions,
        importer: ComponentImporter,
    ) -> None:
        plugin = self._plugins.get_or_raise(node)
        ctx = ExecutionContext(
            run_id=state.run_id,
            config=blueprint.config,
            path_context=state.context,
            node_outputs=MappingProxyType(dict(state.node_outputs)),
            node_id=node.id,
        )

        validation = await _resolve(plugin.validate(node.config, ctx))
        if not validation.valid:
            raise NodeValidationError(node.id, list(validation.errors))

        output = await _resolve(plugin.generate(node, ctx))
        self.run_store.add_log(state.run_id, LogEntry(level=LogLevel.INFO, message=f"Generating {node.type}", node_id=node.id))

        # Downstream nodes see files where they landed, not where they were declared
        output = replace(output, files=rewrite_output_paths(output.files, state.context))
        for file in output.files:
            self._record_warnings(state, write_with_merge(state.store, file.path, file.data, origin=node.id), node.id)

        for patch in output.patches:
            self._record_warnings(state, apply_patch(state.store, patch.path, patch.operations, origin=node.id), node.id)

        if blueprint.config.generate_docs:
            for doc in output.docs:
                self._record_warnings(state, write_with_merge(state.store, doc.path, doc.render().encode("utf-8"), origin=node.id), node.id)

        if options.import_components:
            self._import_component(plugin, importer, state, node.id)

        state.node_outputs[node.id] = output
        state.env_vars.extend(output.env_vars)
        state.scripts.extend(output.scripts)
        logger.debug("Node complete", files=len(output.files), patches=len(output.patches))

    def _import_component(self, plugin: NodePluginProtocol, importer: ComponentImporter, state: _RunState, node_id: str) -> None:
        # Optional attributes: plugins without a component package omit them
        component_path: str | None = getattr(plugin, "component_path", None)
        if not component_path:
            return
        package_name: str = getattr(plugin, "component_package", None) or plugin.plugin_id
        mappings: Any = getattr(plugin, "component_path_mappings", None)
        strategy: ImportStrategy = getattr(plugin, "component_import_strategy", ImportStrategy.AUTO)

        self._record_warnings(
            state,
            importer.import_package(component_path, package_name, path_mappings=mappings, strategy=strategy),
            node_id,
        )

    def _record_warnings(
        self, state: _RunState, warnings: Sequence[AssemblyWarning], node_id: str | None = None
    ) -> None:
        for warning in warnings:
            state.warnings.append(warning)
            logger.warning("Assembly warning", kind=str(warning.kind), path=warning.path, detail=warning.message)
            self.run_store.add_log(state.run_id, LogEntry(level=LogLevel.WARN, message=str(warning), node_id=node_id))

    async def _publish(self, blueprint: Blueprint, store: MemoryFileTree) -> str:
        github = blueprint.config.github
        if github is None:
            raise CollaboratorError("Publishing requested but no GitHub configuration was given")
        if self._publisher is None:
            raise CollaboratorError("Publishing requested but no repository publisher is configured")
        try:
            published = await self._publisher.create_repository(github, store)
        except CollaboratorError:
            raise
        except Exception as e:
            raise CollaboratorError(f"Repository publish failed for {github.owner}/{github.repo_name}: {e}") from e
        logger.info("Published repository", url=published.url)
        return published.url

    async def validate(self, blueprint: Blueprint) -> list[FoundryError]:
        """Check a blueprint without writing anything.

        Scheduling errors raise. Per-node problems (missing plugin, invalid
        config) are collected so all of them can be reported at once.
        """
        ordered = schedule(blueprint.nodes, blueprint.edges)
        context = build_path_context(ordered)
        problems: list[FoundryError] = []
        for node in ordered:
            plugin = self._plugins.get(node.type)
            if plugin is None:
                problems.append(PluginNotFoundError(node.id, node.type))
                continue
            ctx = ExecutionContext(run_id="validate", config=blueprint.config, path_context=context, node_id=node.id)
            validation = await _resolve(plugin.validate(node.config, ctx))
            if not validation.valid:
                problems.append(NodeValidationError(node.id, list(validation.errors)))
        return problems


async def run_concurrently(orchestrator: Orchestrator, requests: Sequence[RunRequest]) -> list[ExecutionResult]:
    """Execute independent runs concurrently, each with its own tree.

    Results come back in request order once every run has finished. If any
    run failed, the first failure (in request order) is raised after all
    runs have settled.
    """
    outcomes = await asyncio.gather(
        *(
            orchestrator.execute(
                request.blueprint,
                run_id=request.run_id,
                options=request.options,
                cancel_token=request.cancel_token,
            )
            for request in requests
        ),
        return_exceptions=True,
    )
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    return [outcome for outcome in outcomes if isinstance(outcome, ExecutionResult)]
