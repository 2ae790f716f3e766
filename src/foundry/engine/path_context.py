# src/foundry/engine/path_context.py
"""Project-shape inference from the scheduled node set."""

from __future__ import annotations

from collections.abc import Iterable

from foundry.contracts.blueprint import BlueprintNode
from foundry.contracts.paths import PathContext

FRONTEND_SCAFFOLD_TYPES: frozenset[str] = frozenset({"frontend-scaffold"})
BACKEND_SCAFFOLD_TYPES: frozenset[str] = frozenset({"backend-scaffold"})
CONTRACT_TYPES: frozenset[str] = frozenset(
    {
        "stylus-contract",
        "stylus-zk-contract",
        "erc20-stylus",
        "erc721-stylus",
        "erc1155-stylus",
        "eip7702-smart-eoa",
        "erc8004-agent-runtime",
    }
)


def _src_directory(config: dict[str, object]) -> bool:
    # Blueprint configs accept both camelCase and snake_case keys
    for key in ("srcDirectory", "src_directory"):
        if key in config:
            return config[key] is not False
    return True


def build_path_context(nodes: Iterable[BlueprintNode]) -> PathContext:
    """Classify node types once and fix the base directory of each project part.

    Base paths are conventions, not derived from node counts. The only
    config-driven detail is ``srcDirectory: false`` (or ``src_directory``) on
    the frontend scaffold, which drops the ``src`` segment from the frontend
    source root.
    """
    node_types: set[str] = set()
    frontend_config: dict[str, object] | None = None

    for node in nodes:
        node_types.add(node.type)
        if frontend_config is None and node.type in FRONTEND_SCAFFOLD_TYPES:
            frontend_config = node.config

    use_src_directory = frontend_config is None or _src_directory(frontend_config)

    return PathContext(
        has_frontend=not node_types.isdisjoint(FRONTEND_SCAFFOLD_TYPES),
        has_backend=not node_types.isdisjoint(BACKEND_SCAFFOLD_TYPES),
        has_contracts=not node_types.isdisjoint(CONTRACT_TYPES),
        node_types=frozenset(node_types),
        frontend_src_path="src" if use_src_directory else "",
    )
