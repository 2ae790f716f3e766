# src/foundry/contracts/paths.py
"""Project-shape descriptor shared by routing, importing and root-file synthesis."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class PathContext:
    """What shape is this project, and where does each part live?

    Computed once per run before any plugin executes. Every routing decision
    in the run is made against the same instance.
    """

    has_frontend: bool = False
    has_backend: bool = False
    has_contracts: bool = False
    node_types: frozenset[str] = field(default_factory=frozenset)
    frontend_path: str = "apps/web"
    frontend_src_path: str = "src"
    backend_path: str = "apps/api"
    backend_src_path: str = "src"
    contracts_path: str = "contracts"

    @property
    def frontend_base_path(self) -> str:
        return _join(self.frontend_path, self.frontend_src_path)

    @property
    def backend_base_path(self) -> str:
        return _join(self.backend_path, self.backend_src_path)

    @property
    def contracts_base_path(self) -> str:
        return self.contracts_path

    @property
    def is_monorepo(self) -> bool:
        """Workspace tooling is needed for a backend, or when there is no frontend at all."""
        return self.has_backend or not self.has_frontend


def _join(*parts: str) -> str:
    return "/".join(p for p in parts if p)
