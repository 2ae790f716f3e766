# src/foundry/assembly/root_files.py
"""Root project files synthesised after every node has run.

The shape depends on PathContext: a project with a backend, or without a
frontend, is a pnpm workspace (monorepo); a frontend-only or
frontend+contracts project is a standalone app whose .env.example lives in
apps/web/.

Root files go through write_with_merge like every other writer, so a plugin
that already emitted package.json keeps its values and gains the missing keys.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import Any

import jinja2

from foundry.assembly.merging import write_with_merge
from foundry.assembly.tree import MemoryFileTree
from foundry.contracts.blueprint import ProjectMetadata
from foundry.contracts.codegen import EnvVarDefinition, ScriptDefinition
from foundry.contracts.paths import PathContext
from foundry.contracts.results import AssemblyWarning

ROOT_ORIGIN = "root"

TYPESCRIPT_VERSION = "^5.3.0"
PACKAGE_MANAGER = "pnpm@9.0.0"

BASE_SCRIPTS: dict[str, str] = {
    "dev": "next dev",
    "build": "next build",
    "start": "next start",
    "lint": "next lint",
}

GITIGNORE = """\
# Dependencies
node_modules/
.pnpm-store/

# Build
dist/
build/
.next/
out/

# Environment
.env
.env.local
.env.*.local

# IDE
.idea/
.vscode/
*.swp

# OS
.DS_Store

# Logs
*.log

# Test coverage
coverage/

# Rust/WASM
target/
*.wasm

# Generated
*.generated.*
"""

PNPM_WORKSPACE = """\
packages:
  - "apps/*"
  - "packages/*"
  - "contracts/*"
"""

ENV_EXAMPLE_HEADER = "# Environment Variables\n# Copy this file to .env and fill in the values\n\n"

README_TEMPLATE = """\
# {{ project.name }}

{{ project.description or "A project assembled from a Foundry blueprint." }}

## Project Structure

```
{{ project.slug }}/
{% if context.has_frontend -%}
├── {{ context.frontend_path }}/{{ " " * (24 - context.frontend_path|length) }}# Frontend app
{% endif -%}
{% if context.has_backend -%}
├── {{ context.backend_path }}/{{ " " * (24 - context.backend_path|length) }}# Backend service
{% endif -%}
{% if context.has_contracts -%}
├── {{ context.contracts_path }}/{{ " " * (24 - context.contracts_path|length) }}# Smart contracts
{% for name in contract_dirs -%}
│   └── {{ name }}/
{% endfor -%}
{% endif -%}
├── docs/                        # Documentation
├── .gitignore
└── README.md
```

## Quick Start

1. **Install dependencies:**
   ```bash
   pnpm install
   ```

2. **Set up environment variables:**
   ```bash
   cp {{ env_path }} {{ env_path[:-8] }}
   ```
{% if required_env %}
   Configure:
{% for var in required_env %}
   - `{{ var.key }}`: {{ var.description }}
{% endfor %}
{% else %}
   - No required variables
{% endif %}
{% if scripts %}

## Available Scripts

| Command | Description |
|---------|-------------|
{% for script in scripts -%}
| `pnpm {{ script.name }}` | {{ script.description or script.command }} |
{% endfor %}
{%- endif %}

## License

{{ project.license }}
"""

_CONTRACT_DIRS: tuple[tuple[str, str], ...] = (
    ("erc20-stylus", "erc20"),
    ("erc721-stylus", "erc721"),
    ("erc1155-stylus", "erc1155"),
)

_env = jinja2.Environment(
    autoescape=False,  # Markdown, not HTML
    undefined=jinja2.StrictUndefined,
    keep_trailing_newline=True,
    trim_blocks=True,
)


def dedupe_env_vars(env_vars: Iterable[EnvVarDefinition]) -> list[EnvVarDefinition]:
    """Collapse repeated keys in first-seen order.

    The first non-empty description and default win; required and secret
    are OR-ed across all occurrences.
    """
    by_key: dict[str, EnvVarDefinition] = {}
    for var in env_vars:
        seen = by_key.get(var.key)
        if seen is None:
            by_key[var.key] = var
            continue
        by_key[var.key] = replace(
            seen,
            required=seen.required or var.required,
            secret=seen.secret or var.secret,
            description=seen.description or var.description,
            default_value=seen.default_value if seen.default_value else (var.default_value or seen.default_value),
        )
    return list(by_key.values())


def env_example_path(context: PathContext) -> str:
    if context.has_frontend and not context.is_monorepo:
        return f"{context.frontend_path}/.env.example"
    return ".env.example"


def render_env_example(env_vars: Sequence[EnvVarDefinition]) -> str:
    blocks = []
    for var in env_vars:
        flags = (" (required)" if var.required else "") + (" [secret]" if var.secret else "")
        blocks.append(f"# {var.description}{flags}\n{var.key}={var.default_value or ''}")
    body = "\n\n".join(blocks) if blocks else "# No environment variables required"
    return ENV_EXAMPLE_HEADER + body + "\n"


def render_package_json(project: ProjectMetadata, scripts: Sequence[ScriptDefinition], *, monorepo: bool) -> str:
    manifest: dict[str, Any] = {
        "name": project.slug,
        "version": project.version,
        "private": True,
        "scripts": {**BASE_SCRIPTS, **{s.name: s.command for s in scripts}},
        "dependencies": {},
        "devDependencies": {"typescript": TYPESCRIPT_VERSION},
        "packageManager": PACKAGE_MANAGER,
    }
    if project.description is not None:
        manifest["description"] = project.description
    if monorepo and project.author is not None:
        manifest["author"] = project.author
    manifest["license"] = project.license
    manifest["keywords"] = list(project.keywords)
    return json.dumps(manifest, indent=2) + "\n"


def render_readme(
    project: ProjectMetadata,
    context: PathContext,
    scripts: Sequence[ScriptDefinition],
    env_vars: Sequence[EnvVarDefinition],
) -> str:
    contract_dirs = [name for node_type, name in _CONTRACT_DIRS if node_type in context.node_types]
    return _env.from_string(README_TEMPLATE).render(
        project=project,
        context=context,
        contract_dirs=contract_dirs,
        env_path=env_example_path(context),
        required_env=[v for v in env_vars if v.required],
        scripts=list(scripts),
    )


def synthesize_root_files(
    store: MemoryFileTree,
    project: ProjectMetadata,
    context: PathContext,
    *,
    env_vars: Sequence[EnvVarDefinition] = (),
    scripts: Sequence[ScriptDefinition] = (),
) -> list[AssemblyWarning]:
    """Write package.json, .env.example, README.md, .gitignore and, for a
    monorepo, pnpm-workspace.yaml.

    Returns:
        Warnings from merging with files plugins already wrote.
    """
    monorepo = context.is_monorepo
    deduped = dedupe_env_vars(env_vars)

    files: list[tuple[str, str]] = [
        ("package.json", render_package_json(project, scripts, monorepo=monorepo)),
        (env_example_path(context), render_env_example(deduped)),
        ("README.md", render_readme(project, context, scripts, deduped)),
        (".gitignore", GITIGNORE),
    ]
    if monorepo:
        files.append(("pnpm-workspace.yaml", PNPM_WORKSPACE))

    warnings: list[AssemblyWarning] = []
    for path, content in files:
        warnings.extend(write_with_merge(store, path, content.encode("utf-8"), origin=ROOT_ORIGIN))
    return warnings
