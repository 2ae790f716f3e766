# src/foundry/plugins/builtin/frontend_scaffold.py
"""Next.js App Router frontend scaffold."""

import json
import re
from typing import Literal

from pydantic import Field

from foundry.contracts.blueprint import BlueprintNode
from foundry.contracts.codegen import CodegenOutput
from foundry.contracts.enums import PathCategory
from foundry.plugins.base import BasePlugin
from foundry.plugins.config_base import PluginConfig
from foundry.plugins.context import ExecutionContext

# Marker in page.tsx that downstream plugins insert sections after
SECTIONS_MARKER = "{/* foundry:sections */}"


class FrontendScaffoldConfig(PluginConfig):
    app_title: str = Field(default="My dApp", min_length=1, max_length=80)
    src_directory: bool = True
    styling: Literal["tailwind", "css"] = "tailwind"
    wallet_connect: bool = True


LAYOUT_TSX = """\
import type {{ ReactNode }} from 'react';
import './globals.css';

export const metadata = {{ title: {title} }};

export default function RootLayout({{ children }}: {{ children: ReactNode }}) {{
  return (
    <html lang="en">
      <body>{{children}}</body>
    </html>
  );
}}
"""

PAGE_TSX = """\
export default function Home() {{
  return (
    <main>
      <h1>{title}</h1>
      {marker}
    </main>
  );
}}
"""


def _const_name(name: str) -> str:
    """'erc20' -> 'ERC20_ABI', 'my-token' -> 'MY_TOKEN_ABI'"""
    return re.sub(r"[^A-Za-z0-9]+", "_", name).upper() + "_ABI"


class FrontendScaffoldPlugin(BasePlugin):
    """Next.js frontend app, wired to upstream contract ABIs."""

    plugin_id = "frontend-scaffold"
    version = "0.3.0"
    config_model = FrontendScaffoldConfig

    def generate(self, node: BlueprintNode, ctx: ExecutionContext) -> CodegenOutput:
        cfg: FrontendScaffoldConfig = self.parse_config(node.config)
        output = CodegenOutput()
        title = json.dumps(cfg.app_title)

        self.add_file(output, "layout.tsx", LAYOUT_TSX.format(title=title), category=PathCategory.FRONTEND_APP)
        self.add_file(
            output,
            "page.tsx",
            PAGE_TSX.format(title=cfg.app_title, marker=SECTIONS_MARKER),
            category=PathCategory.FRONTEND_APP,
        )
        self.add_file(output, "globals.css", "@tailwind base;\n@tailwind components;\n@tailwind utilities;\n" if cfg.styling == "tailwind" else "body { margin: 0; }\n", category=PathCategory.FRONTEND_APP)

        dependencies = {"next": "^14.2.0", "react": "^18.3.0", "react-dom": "^18.3.0"}
        if cfg.wallet_connect:
            dependencies |= {"wagmi": "^2.12.0", "viem": "^2.21.0"}
        package_json = {
            "name": "web",
            "private": True,
            "scripts": {"dev": "next dev", "build": "next build", "start": "next start"},
            "dependencies": dependencies,
        }
        web_root = ctx.path_context.frontend_path
        self.add_file(output, f"{web_root}/package.json", json.dumps(package_json, indent=2) + "\n", category=PathCategory.ROOT)

        # Expose every upstream ABI as a typed constant
        abi_exports: list[str] = []
        for _node_id, interface in ctx.find_interfaces("abi"):
            const = _const_name(interface.name)
            self.add_file(
                output,
                f"contracts/{interface.name}.ts",
                f"export const {const} = {interface.content} as const;\n",
                category=PathCategory.FRONTEND_LIB,
            )
            abi_exports.append(f"export * from './{interface.name}';")
        if abi_exports:
            self.add_file(output, "contracts/index.ts", "\n".join(abi_exports) + "\n", category=PathCategory.FRONTEND_LIB)

        if ctx.config.network is not None:
            self.add_env_var(
                output,
                "NEXT_PUBLIC_CHAIN_ID",
                "Chain the frontend connects to",
                default_value=str(ctx.config.network.chain_id),
            )
        if cfg.wallet_connect:
            self.add_env_var(output, "NEXT_PUBLIC_WALLETCONNECT_PROJECT_ID", "WalletConnect Cloud project id", required=False)

        self.add_script(output, "web:dev", f"pnpm --dir {web_root} dev", "Start the frontend dev server")
        return output
