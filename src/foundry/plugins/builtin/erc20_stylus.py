# src/foundry/plugins/builtin/erc20_stylus.py
"""ERC-20 token contract for Arbitrum Stylus (Rust)."""

import json
from typing import Any

from pydantic import Field, field_validator

from foundry.contracts.blueprint import BlueprintNode
from foundry.contracts.codegen import CodegenOutput
from foundry.contracts.enums import PathCategory
from foundry.contracts.results import ValidationResult
from foundry.plugins.base import BasePlugin
from foundry.plugins.config_base import PluginConfig
from foundry.plugins.context import ExecutionContext


class Erc20Config(PluginConfig):
    token_name: str = Field(min_length=1, max_length=64)
    token_symbol: str = Field(min_length=1, max_length=11)
    decimals: int = Field(default=18, ge=0, le=36)
    initial_supply: str = "1000000"
    mintable: bool = False
    burnable: bool = False

    @field_validator("token_symbol")
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        if not v.isalnum():
            raise ValueError("symbol must be alphanumeric")
        return v.upper()

    @field_validator("initial_supply")
    @classmethod
    def validate_supply(cls, v: str) -> str:
        if not v.isdigit():
            raise ValueError("initial supply must be a non-negative integer")
        return v


def _function(name: str, inputs: list[tuple[str, str]], outputs: list[str], mutability: str) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": "", "type": t} for t in outputs],
        "stateMutability": mutability,
    }


def build_abi(config: Erc20Config) -> list[dict[str, Any]]:
    abi = [
        _function("name", [], ["string"], "view"),
        _function("symbol", [], ["string"], "view"),
        _function("decimals", [], ["uint8"], "view"),
        _function("totalSupply", [], ["uint256"], "view"),
        _function("balanceOf", [("owner", "address")], ["uint256"], "view"),
        _function("transfer", [("to", "address"), ("value", "uint256")], ["bool"], "nonpayable"),
        _function("approve", [("spender", "address"), ("value", "uint256")], ["bool"], "nonpayable"),
        _function("allowance", [("owner", "address"), ("spender", "address")], ["uint256"], "view"),
        _function(
            "transferFrom",
            [("from", "address"), ("to", "address"), ("value", "uint256")],
            ["bool"],
            "nonpayable",
        ),
    ]
    if config.mintable:
        abi.append(_function("mint", [("to", "address"), ("value", "uint256")], [], "nonpayable"))
    if config.burnable:
        abi.append(_function("burn", [("value", "uint256")], [], "nonpayable"))
    return abi


CARGO_TOML = """\
[package]
name = "{crate}"
version = "0.1.0"
edition = "2021"

[dependencies]
alloy-primitives = "0.7"
alloy-sol-types = "0.7"
stylus-sdk = "0.6"

[features]
export-abi = ["stylus-sdk/export-abi"]

[lib]
crate-type = ["lib", "cdylib"]
"""

LIB_RS = """\
#![cfg_attr(not(feature = "export-abi"), no_main)]
extern crate alloc;

use alloy_primitives::{{Address, U256}};
use stylus_sdk::{{msg, prelude::*}};

pub const NAME: &str = "{name}";
pub const SYMBOL: &str = "{symbol}";
pub const DECIMALS: u8 = {decimals};
pub const INITIAL_SUPPLY: &str = "{supply}";

sol_storage! {{
    #[entrypoint]
    pub struct Erc20 {{
        mapping(address => uint256) balances;
        mapping(address => mapping(address => uint256)) allowances;
        uint256 total_supply;
    }}
}}

#[public]
impl Erc20 {{
    pub fn name(&self) -> String {{ NAME.into() }}
    pub fn symbol(&self) -> String {{ SYMBOL.into() }}
    pub fn decimals(&self) -> u8 {{ DECIMALS }}
    pub fn total_supply(&self) -> U256 {{ self.total_supply.get() }}
    pub fn balance_of(&self, owner: Address) -> U256 {{ self.balances.get(owner) }}
{extra}}}
"""

MINT_RS = """\
    pub fn mint(&mut self, to: Address, value: U256) {
        let balance = self.balances.get(to);
        self.balances.setter(to).set(balance + value);
        self.total_supply.set(self.total_supply.get() + value);
    }
"""

BURN_RS = """\
    pub fn burn(&mut self, value: U256) {
        let sender = msg::sender();
        let balance = self.balances.get(sender);
        self.balances.setter(sender).set(balance - value);
        self.total_supply.set(self.total_supply.get() - value);
    }
"""


class Erc20StylusPlugin(BasePlugin):
    """ERC-20 token contract written for Arbitrum Stylus."""

    plugin_id = "erc20-stylus"
    version = "0.2.0"
    config_model = Erc20Config

    def validate(self, config: dict[str, Any], ctx: ExecutionContext) -> ValidationResult:
        result = super().validate(config, ctx)
        if not result.valid:
            return result
        if ctx.config.network is None:
            return self.invalid("network", "an ERC-20 deployment needs a target network")
        return result

    def generate(self, node: BlueprintNode, ctx: ExecutionContext) -> CodegenOutput:
        cfg: Erc20Config = self.parse_config(node.config)
        output = CodegenOutput()
        abi = json.dumps(build_abi(cfg), indent=2)

        extra = (MINT_RS if cfg.mintable else "") + (BURN_RS if cfg.burnable else "")
        self.add_file(output, "erc20/Cargo.toml", CARGO_TOML.format(crate=f"{cfg.token_symbol.lower()}-token"), category=PathCategory.CONTRACT_SOURCE)
        self.add_file(
            output,
            "erc20/src/lib.rs",
            LIB_RS.format(name=cfg.token_name, symbol=cfg.token_symbol, decimals=cfg.decimals, supply=cfg.initial_supply, extra=extra),
            category=PathCategory.CONTRACT_SOURCE,
        )
        self.add_file(output, "erc20/abi.json", abi + "\n", category=PathCategory.CONTRACT)
        self.add_interface(output, "erc20", "abi", abi)

        self.add_env_var(output, "DEPLOYER_PRIVATE_KEY", "Private key used to deploy contracts", secret=True)
        network = ctx.config.network
        self.add_env_var(
            output,
            "RPC_URL",
            f"RPC endpoint for {network.name}" if network else "RPC endpoint",
            default_value=network.rpc_url if network else None,
        )
        self.add_script(
            output,
            "deploy:erc20",
            f"cd {ctx.path_context.contracts_base_path}/erc20 && cargo stylus deploy --private-key $DEPLOYER_PRIVATE_KEY --endpoint $RPC_URL",
            "Deploy the ERC-20 contract",
        )
        self.add_doc(
            output,
            "docs/erc20.md",
            f"{cfg.token_name} ({cfg.token_symbol})",
            f"ERC-20 token with {cfg.decimals} decimals and an initial supply of {cfg.initial_supply}.\n",
        )
        return output
