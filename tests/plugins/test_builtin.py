# tests/plugins/test_builtin.py
"""Tests for the built-in node plugins."""

import json
from types import MappingProxyType
from typing import Any

import pytest

from foundry.contracts.blueprint import BlueprintConfig, BlueprintNode
from foundry.contracts.codegen import CodegenOutput, InterfaceDefinition
from foundry.contracts.enums import PathCategory
from foundry.contracts.paths import PathContext
from foundry.plugins.context import ExecutionContext

TOKEN_CONFIG = {"tokenName": "Gold", "tokenSymbol": "gld", "decimals": 6, "initialSupply": "5000"}


def _ctx(network: dict[str, Any] | None = None, node_outputs: dict[str, CodegenOutput] | None = None) -> ExecutionContext:
    config: dict[str, Any] = {"project": {"name": "Gold dApp"}}
    if network is not None:
        config["network"] = network
    return ExecutionContext(
        run_id="run-1",
        config=BlueprintConfig.model_validate(config),
        path_context=PathContext(has_frontend=True, has_contracts=True),
        node_outputs=MappingProxyType(node_outputs or {}),
    )


class TestErc20Validation:
    def test_valid_with_network(self, arbitrum_network: dict[str, Any]) -> None:
        from foundry.plugins.builtin.erc20_stylus import Erc20StylusPlugin

        assert Erc20StylusPlugin().validate(TOKEN_CONFIG, _ctx(arbitrum_network)).valid

    def test_requires_network(self) -> None:
        from foundry.plugins.builtin.erc20_stylus import Erc20StylusPlugin

        result = Erc20StylusPlugin().validate(TOKEN_CONFIG, _ctx())

        assert not result.valid
        assert [e.field for e in result.errors] == ["network"]

    @pytest.mark.parametrize(
        ("override", "field"),
        [
            ({"tokenSymbol": "G-LD"}, "tokenSymbol"),
            ({"decimals": 40}, "decimals"),
            ({"initialSupply": "-1"}, "initialSupply"),
            ({"tokenName": ""}, "tokenName"),
        ],
    )
    def test_field_errors(self, arbitrum_network: dict[str, Any], override: dict[str, Any], field: str) -> None:
        from foundry.plugins.builtin.erc20_stylus import Erc20StylusPlugin

        result = Erc20StylusPlugin().validate({**TOKEN_CONFIG, **override}, _ctx(arbitrum_network))

        assert not result.valid
        assert [e.field for e in result.errors] == [field]


class TestErc20Generate:
    def test_outputs(self, arbitrum_network: dict[str, Any]) -> None:
        from foundry.plugins.builtin.erc20_stylus import Erc20StylusPlugin

        output = Erc20StylusPlugin().generate(BlueprintNode(id="token", type="erc20-stylus", config=TOKEN_CONFIG), _ctx(arbitrum_network))

        assert [(f.path, f.category) for f in output.files] == [
            ("erc20/Cargo.toml", PathCategory.CONTRACT_SOURCE),
            ("erc20/src/lib.rs", PathCategory.CONTRACT_SOURCE),
            ("erc20/abi.json", PathCategory.CONTRACT),
        ]
        lib_rs = output.files[1].content
        assert 'pub const SYMBOL: &str = "GLD";' in lib_rs
        assert "pub const DECIMALS: u8 = 6;" in lib_rs
        assert "fn mint" not in lib_rs
        assert 'name = "gld-token"' in output.files[0].content

        assert [i.name for i in output.interfaces] == ["erc20"]
        abi = json.loads(output.interfaces[0].content)
        assert "mint" not in {entry["name"] for entry in abi}

        env = {v.key: v for v in output.env_vars}
        assert env["DEPLOYER_PRIVATE_KEY"].secret
        assert env["RPC_URL"].default_value == arbitrum_network["rpcUrl"]
        assert [s.name for s in output.scripts] == ["deploy:erc20"]
        assert output.docs[0].title == "Gold (GLD)"

    def test_deploy_script_follows_contracts_path(self, arbitrum_network: dict[str, Any]) -> None:
        from foundry.plugins.builtin.erc20_stylus import Erc20StylusPlugin

        ctx = ExecutionContext(
            run_id="run-1",
            config=BlueprintConfig.model_validate({"project": {"name": "Gold dApp"}, "network": arbitrum_network}),
            path_context=PathContext(has_contracts=True, contracts_path="packages/chain"),
            node_outputs=MappingProxyType({}),
        )

        output = Erc20StylusPlugin().generate(BlueprintNode(id="token", type="erc20-stylus", config=TOKEN_CONFIG), ctx)

        assert output.scripts[0].command.startswith("cd packages/chain/erc20 && cargo stylus deploy")

    def test_mint_and_burn(self, arbitrum_network: dict[str, Any]) -> None:
        from foundry.plugins.builtin.erc20_stylus import Erc20StylusPlugin

        config = {**TOKEN_CONFIG, "mintable": True, "burnable": True}
        output = Erc20StylusPlugin().generate(BlueprintNode(id="token", type="erc20-stylus", config=config), _ctx(arbitrum_network))

        names = [entry["name"] for entry in json.loads(output.interfaces[0].content)]
        assert names[-2:] == ["mint", "burn"]
        assert "pub fn mint" in output.files[1].content
        assert "pub fn burn" in output.files[1].content


class TestFrontendScaffold:
    def test_defaults(self) -> None:
        from foundry.plugins.builtin.frontend_scaffold import SECTIONS_MARKER, FrontendScaffoldPlugin

        output = FrontendScaffoldPlugin().generate(BlueprintNode(id="web", type="frontend-scaffold"), _ctx())

        paths = {f.path: f for f in output.files}
        assert set(paths) == {"layout.tsx", "page.tsx", "globals.css", "apps/web/package.json"}
        assert SECTIONS_MARKER in paths["page.tsx"].content
        assert paths["apps/web/package.json"].category is PathCategory.ROOT
        manifest = json.loads(paths["apps/web/package.json"].content)
        assert "wagmi" in manifest["dependencies"]
        assert [v.key for v in output.env_vars] == ["NEXT_PUBLIC_WALLETCONNECT_PROJECT_ID"]

    def test_layout_renders_title_and_react_import(self) -> None:
        from foundry.plugins.builtin.frontend_scaffold import FrontendScaffoldPlugin

        node = BlueprintNode(id="web", type="frontend-scaffold", config={"appTitle": 'Gold "dApp"'})

        output = FrontendScaffoldPlugin().generate(node, _ctx())

        layout = next(f.content for f in output.files if f.path == "layout.tsx")
        assert layout.startswith("import type { ReactNode } from 'react';\n")
        assert 'export const metadata = { title: "Gold \\"dApp\\"" };' in layout
        assert "({ children }: { children: ReactNode })" in layout
        assert "<body>{children}</body>" in layout

    def test_upstream_abis_become_constants(self, arbitrum_network: dict[str, Any]) -> None:
        from foundry.plugins.builtin.frontend_scaffold import FrontendScaffoldPlugin

        upstream = CodegenOutput(interfaces=[InterfaceDefinition(name="my-token", type="abi", content="[]")])
        ctx = _ctx(arbitrum_network, {"token": upstream})

        output = FrontendScaffoldPlugin().generate(
            BlueprintNode(id="web", type="frontend-scaffold", config={"walletConnect": False, "styling": "css"}), ctx
        )

        paths = {f.path: f for f in output.files}
        assert paths["contracts/my-token.ts"].content == "export const MY_TOKEN_ABI = [] as const;\n"
        assert paths["contracts/my-token.ts"].category is PathCategory.FRONTEND_LIB
        assert paths["contracts/index.ts"].content == "export * from './my-token';\n"
        assert paths["globals.css"].content == "body { margin: 0; }\n"
        assert "wagmi" not in json.loads(paths["apps/web/package.json"].content)["dependencies"]
        env = {v.key: v for v in output.env_vars}
        assert env["NEXT_PUBLIC_CHAIN_ID"].default_value == "421614"
        assert "NEXT_PUBLIC_WALLETCONNECT_PROJECT_ID" not in env

    def test_rejects_unknown_styling(self) -> None:
        from foundry.plugins.builtin.frontend_scaffold import FrontendScaffoldPlugin

        result = FrontendScaffoldPlugin().validate({"styling": "sass"}, _ctx())

        assert [e.field for e in result.errors] == ["styling"]
