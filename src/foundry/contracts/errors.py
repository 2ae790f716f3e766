# src/foundry/contracts/errors.py
"""Exception hierarchy for blueprint runs.

Fatal problems are exceptions; recoverable ones (missing patch targets,
merge conflicts) are AssemblyWarning records attached to the run result
instead. Mapping of the taxonomy:

    structural     -> GraphValidationError, CycleError
    configuration  -> PluginNotFoundError, NodeValidationError
    collaborator   -> CollaboratorError
    cancellation   -> RunCancelledError

InvalidPathError is raised when a plugin emits a path that would escape the
assembly root; it is a plugin bug and fails the run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from foundry.contracts.results import FieldError


class FoundryError(Exception):
    """Base class for every error raised by the engine."""


class GraphValidationError(FoundryError, ValueError):
    """Raised when the blueprint graph cannot be scheduled."""


class CycleError(GraphValidationError):
    """Raised when the blueprint graph contains a cycle.

    Attributes:
        cycle: Node ids along the detected cycle, in edge order.
    """

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        path = " -> ".join([*cycle, cycle[0]]) if cycle else "?"
        super().__init__(f"Blueprint contains a cycle: {path}")


class PluginNotFoundError(FoundryError, LookupError):
    """Raised when a node's type has no registered plugin."""

    def __init__(self, node_id: str, node_type: str) -> None:
        self.node_id = node_id
        self.node_type = node_type
        super().__init__(f"No plugin found for node '{node_id}' of type '{node_type}'")


class NodeValidationError(FoundryError):
    """Raised when a plugin rejects a node's configuration."""

    def __init__(self, node_id: str, errors: list[FieldError]) -> None:
        self.node_id = node_id
        self.errors = errors
        detail = ", ".join(f"{e.field}: {e.message}" for e in errors) or "no detail"
        super().__init__(f"Node {node_id} validation failed: {detail}")


class InvalidPathError(FoundryError, ValueError):
    """Raised when a path is empty or escapes the assembly root."""


class CollaboratorError(FoundryError):
    """Raised when an external collaborator (publisher, tool) fails.

    The assembled tree is left intact so export can be retried.
    """


class RunCancelledError(FoundryError):
    """Raised when a run observes its cancellation token."""

    def __init__(self, run_id: str, node_id: str | None = None) -> None:
        self.run_id = run_id
        self.node_id = node_id
        where = f" before node '{node_id}'" if node_id else ""
        super().__init__(f"Run {run_id} cancelled{where}")
