# src/foundry/engine/scheduler.py
"""Dependency ordering of blueprint nodes.

Wraps a NetworkX DiGraph. The order is Kahn's algorithm with ties broken by
declaration index, so identical blueprints always schedule identically and
nodes without edges keep the order they were declared in.
"""

from __future__ import annotations

from collections.abc import Sequence

import networkx as nx

from foundry.contracts.blueprint import BlueprintEdge, BlueprintNode
from foundry.contracts.errors import CycleError, GraphValidationError


def build_dependency_graph(nodes: Sequence[BlueprintNode], edges: Sequence[BlueprintEdge]) -> nx.DiGraph:
    """Build the node dependency graph.

    Each node carries its declaration index under ``index``. Duplicate edges
    collapse into one.

    Raises:
        GraphValidationError: On duplicate node ids or edges naming unknown nodes
    """
    graph = nx.DiGraph()
    for index, node in enumerate(nodes):
        if node.id in graph:
            raise GraphValidationError(f"Duplicate node id: '{node.id}'")
        graph.add_node(node.id, index=index, node=node)

    for edge in edges:
        missing = [end for end in (edge.source, edge.target) if end not in graph]
        if missing:
            raise GraphValidationError(f"Edge {edge.source} -> {edge.target} references unknown node(s): {', '.join(missing)}")
        graph.add_edge(edge.source, edge.target)

    return graph


def schedule(nodes: Sequence[BlueprintNode], edges: Sequence[BlueprintEdge]) -> list[BlueprintNode]:
    """Order nodes so every edge's source precedes its target.

    Raises:
        CycleError: If the graph has a cycle (a self-loop counts)
        GraphValidationError: If the graph is malformed
    """
    graph = build_dependency_graph(nodes, edges)

    if not nx.is_directed_acyclic_graph(graph):
        cycle = nx.find_cycle(graph)
        raise CycleError([str(edge[0]) for edge in cycle])

    index = nx.get_node_attributes(graph, "index")
    order = nx.lexicographical_topological_sort(graph, key=lambda node_id: index[node_id])
    return [graph.nodes[node_id]["node"] for node_id in order]


def dependencies_of(graph: nx.DiGraph, node_id: str) -> set[str]:
    """All transitive upstream node ids of `node_id`."""
    return set(nx.ancestors(graph, node_id))
