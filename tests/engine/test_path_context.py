# tests/engine/test_path_context.py
"""Tests for project-shape inference."""

from foundry.contracts.blueprint import BlueprintNode


def _node(node_type: str, **config: object) -> BlueprintNode:
    return BlueprintNode(id=f"n-{node_type}", type=node_type, config=config)


class TestBuildPathContext:
    def test_contract_and_frontend(self) -> None:
        from foundry.engine.path_context import build_path_context

        ctx = build_path_context([_node("erc20-stylus"), _node("frontend-scaffold")])

        assert ctx.has_frontend is True
        assert ctx.has_contracts is True
        assert ctx.has_backend is False
        assert ctx.frontend_base_path == "apps/web/src"
        assert ctx.contracts_base_path == "contracts"

    def test_empty_node_set(self) -> None:
        from foundry.engine.path_context import build_path_context

        ctx = build_path_context([])

        assert (ctx.has_frontend, ctx.has_backend, ctx.has_contracts) == (False, False, False)
        assert ctx.node_types == frozenset()

    def test_backend_detected(self) -> None:
        from foundry.engine.path_context import build_path_context

        ctx = build_path_context([_node("backend-scaffold")])

        assert ctx.has_backend is True
        assert ctx.backend_base_path == "apps/api/src"

    def test_every_contract_type_counts(self) -> None:
        from foundry.engine.path_context import CONTRACT_TYPES, build_path_context

        for node_type in CONTRACT_TYPES:
            assert build_path_context([_node(node_type)]).has_contracts, node_type

    def test_unknown_types_are_recorded_but_classified_as_nothing(self) -> None:
        from foundry.engine.path_context import build_path_context

        ctx = build_path_context([_node("wallet-auth")])

        assert ctx.node_types == frozenset({"wallet-auth"})
        assert not (ctx.has_frontend or ctx.has_backend or ctx.has_contracts)

    def test_src_directory_false_drops_src_segment(self) -> None:
        from foundry.engine.path_context import build_path_context

        ctx = build_path_context([_node("frontend-scaffold", srcDirectory=False)])

        assert ctx.frontend_base_path == "apps/web"

    def test_snake_case_src_directory(self) -> None:
        from foundry.engine.path_context import build_path_context

        ctx = build_path_context([_node("frontend-scaffold", src_directory=False)])

        assert ctx.frontend_base_path == "apps/web"

    def test_src_directory_true_keeps_src_segment(self) -> None:
        from foundry.engine.path_context import build_path_context

        ctx = build_path_context([_node("frontend-scaffold", src_directory=True)])

        assert ctx.frontend_base_path == "apps/web/src"

    def test_is_monorepo(self) -> None:
        from foundry.engine.path_context import build_path_context

        assert build_path_context([_node("frontend-scaffold")]).is_monorepo is False
        assert build_path_context([_node("frontend-scaffold"), _node("backend-scaffold")]).is_monorepo is True
        assert build_path_context([_node("erc20-stylus")]).is_monorepo is True
