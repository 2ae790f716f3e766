# src/foundry/contracts/blueprint.py
"""Blueprint schema: nodes, edges and blueprint-level configuration.

Blueprints arrive as JSON from the graph editor (camelCase keys) or as YAML
written by hand (snake_case keys). Both spellings are accepted.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_SCHEMA_CONFIG = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class NetworkConfig(BaseModel):
    """Target chain for generated contracts and frontends."""

    model_config = _SCHEMA_CONFIG

    chain_id: int = Field(gt=0)
    name: str
    rpc_url: str | None = None
    explorer_url: str | None = None
    is_testnet: bool = False


class GitHubConfig(BaseModel):
    """Repository the assembled project is published to, when requested."""

    model_config = _SCHEMA_CONFIG

    owner: str = Field(pattern=r"^[a-zA-Z0-9\-]+$")
    repo_name: str = Field(pattern=r"^[a-zA-Z0-9\-_.]+$")
    visibility: Literal["public", "private"] = "private"
    default_branch: str = "main"
    create_pr: bool = False
    pr_title: str | None = None
    pr_body: str | None = None


class ProjectMetadata(BaseModel):
    """Project identity written into package.json and README.md."""

    model_config = _SCHEMA_CONFIG

    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    version: str = Field(default="0.1.0", pattern=r"^\d+\.\d+\.\d+$")
    author: str | None = None
    license: Literal["MIT", "Apache-2.0", "GPL-3.0", "UNLICENSED"] = "MIT"
    keywords: list[str] = Field(default_factory=list, max_length=10)

    @property
    def slug(self) -> str:
        """'My Cool dApp' -> 'my-cool-dapp'"""
        return "-".join(self.name.lower().split())


class BlueprintConfig(BaseModel):
    """Blueprint-level configuration shared with every plugin."""

    model_config = _SCHEMA_CONFIG

    project: ProjectMetadata
    network: NetworkConfig | None = None
    github: GitHubConfig | None = None
    deploy_on_generate: bool = False
    generate_docs: bool = True


class BlueprintNode(BaseModel):
    """One buildable component. `type` selects the plugin."""

    model_config = _SCHEMA_CONFIG

    id: str = Field(min_length=1)
    type: str = Field(min_length=1)
    config: dict[str, Any] = Field(default_factory=dict)


class BlueprintEdge(BaseModel):
    """Directed dependency: `target` is processed after `source`."""

    model_config = _SCHEMA_CONFIG

    source: str
    target: str
    id: str | None = None


class Blueprint(BaseModel):
    """The unit of execution: a graph of nodes plus shared configuration."""

    model_config = _SCHEMA_CONFIG

    id: str = Field(min_length=1)
    nodes: list[BlueprintNode] = Field(default_factory=list)
    edges: list[BlueprintEdge] = Field(default_factory=list)
    config: BlueprintConfig

    @field_validator("nodes")
    @classmethod
    def validate_unique_node_ids(cls, v: list[BlueprintNode]) -> list[BlueprintNode]:
        seen: set[str] = set()
        for node in v:
            if node.id in seen:
                raise ValueError(f"duplicate node id: {node.id!r}")
            seen.add(node.id)
        return v

    def get_node(self, node_id: str) -> BlueprintNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None
