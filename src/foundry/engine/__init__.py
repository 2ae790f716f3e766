# src/foundry/engine/__init__.py
"""Run engine: scheduling, project-shape inference, routing, orchestration.

The orchestrator is imported from foundry.engine.orchestrator directly; it
depends on foundry.assembly, which itself uses the router defined here.
"""

from foundry.engine.path_context import build_path_context
from foundry.engine.router import resolve_output_path, rewrite_output_paths
from foundry.engine.scheduler import build_dependency_graph, schedule

__all__ = [
    "build_dependency_graph",
    "build_path_context",
    "resolve_output_path",
    "rewrite_output_paths",
    "schedule",
]
