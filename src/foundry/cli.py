# src/foundry/cli.py
"""Foundry Command Line Interface.

Entry point for the foundry CLI tool.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import TYPE_CHECKING, Literal

import typer
import yaml
from pydantic import ValidationError

from foundry import __version__
from foundry.contracts.errors import FoundryError
from foundry.core.config import FoundrySettings, load_blueprint, load_settings

if TYPE_CHECKING:
    from foundry.contracts.blueprint import Blueprint
    from foundry.contracts.results import ExecutionResult
    from foundry.plugins.manager import PluginManager

__all__ = ["app"]


app = typer.Typer(
    name="foundry",
    help="Foundry: assemble projects from component blueprints.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"foundry version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from a .env file.

    Args:
        env_file: Explicit path to .env file. If None, searches for .env
                 in current directory and parent directories.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(f"Error: .env file not found: {env_file}", fg=typer.colors.RED, err=True)
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """Foundry: assemble projects from component blueprints."""
    from foundry.core.logging import configure_logging

    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "INFO")

    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho(
            "Warning: --env-file ignored because --no-dotenv is set.",
            fg=typer.colors.YELLOW,
            err=True,
        )


def _format_error(
    title: str,
    message: str,
    hint: str | None = None,
    details: list[str] | None = None,
) -> None:
    """Display a formatted error panel on stderr."""
    from rich.console import Console
    from rich.panel import Panel
    from rich.text import Text

    content = Text()
    content.append(message, style="white")
    if details:
        content.append("\n\n")
        for detail in details:
            content.append(f"  • {detail}\n", style="dim")
    if hint:
        content.append("\n")
        content.append("Hint: ", style="yellow bold")
        content.append(hint, style="yellow")

    Console(stderr=True).print(Panel(content, title=f"[red bold]{title}[/]", border_style="red", padding=(0, 1)))


def _get_plugin_manager(settings: FoundrySettings) -> PluginManager:
    from foundry.plugins.manager import PluginManager

    manager = PluginManager(allowed_plugins=settings.allowed_plugins)
    manager.register_builtin_plugins()
    return manager


def _load_inputs(blueprint_path: Path, settings_path: Path | None) -> tuple[Blueprint, FoundrySettings]:
    """Load settings and blueprint, turning load failures into exit code 1."""
    try:
        settings = load_settings(settings_path)
    except FileNotFoundError as e:
        _format_error("File Not Found", str(e), hint="Check the --settings path.")
        raise typer.Exit(1) from None
    except ValidationError as e:
        details = [f"{'.'.join(str(x) for x in err['loc'])}: {err['msg']}" for err in e.errors()]
        _format_error("Configuration Validation Failed", "Invalid foundry settings", details=details)
        raise typer.Exit(1) from None

    try:
        blueprint = load_blueprint(blueprint_path)
    except FileNotFoundError as e:
        _format_error("File Not Found", str(e), hint="Check the blueprint path.")
        raise typer.Exit(1) from None
    except yaml.YAMLError as e:
        _format_error("Blueprint Syntax Error", f"Failed to parse {blueprint_path.name}", details=[str(e)])
        raise typer.Exit(1) from None
    except ValidationError as e:
        # ValidationError inherits from ValueError; keep it first
        details = [f"{'.'.join(str(x) for x in err['loc'])}: {err['msg']}" for err in e.errors()]
        _format_error(
            "Blueprint Validation Failed",
            f"Invalid blueprint in {blueprint_path.name}",
            details=details,
            hint="Check node ids, edge endpoints and config field names.",
        )
        raise typer.Exit(1) from None
    except ValueError as e:
        _format_error("Blueprint Error", str(e))
        raise typer.Exit(1) from None

    return blueprint, settings


def _result_to_dict(result: ExecutionResult, output: Path | None) -> dict[str, object]:
    return {
        "run_id": result.run_id,
        "status": str(result.status),
        "output": str(output) if output is not None else None,
        "files": [{"path": f.path, "size": f.size} for f in result.files],
        "env_vars": sorted({v.key for v in result.env_vars}),
        "scripts": [s.name for s in result.scripts],
        "warnings": [
            {"kind": str(w.kind), "path": w.path, "message": w.message, "origin": w.origin} for w in result.warnings
        ],
        "repo_url": result.repo_url,
    }


@app.command()
def run(
    blueprint: Path = typer.Argument(..., help="Path to blueprint YAML or JSON file."),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Directory to export the assembled project to (default: settings output_dir).",
    ),
    settings: Path | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to foundry settings YAML file.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Assemble in memory and report, without exporting or publishing.",
    ),
    output_format: Literal["console", "json"] = typer.Option(
        "console",
        "--format",
        "-f",
        help="Output format: 'console' (human-readable) or 'json' (structured JSON).",
    ),
) -> None:
    """Assemble a project from a blueprint and export it."""
    from foundry.assembly.tree import MemoryFileTree, export_to_directory
    from foundry.engine.orchestrator import Orchestrator, RunOptions

    bp, config = _load_inputs(blueprint.expanduser(), settings.expanduser() if settings else None)
    orchestrator = Orchestrator(_get_plugin_manager(config), settings=config)
    store = MemoryFileTree()

    try:
        result = asyncio.run(orchestrator.execute(bp, options=RunOptions(dry_run=dry_run), store=store))
    except FoundryError as e:
        if output_format == "json":
            typer.echo(json.dumps({"status": "failed", "error": str(e), "error_type": type(e).__name__}))
        else:
            _format_error("Run Failed", str(e))
        raise typer.Exit(1) from None

    target: Path | None = None
    if not dry_run:
        target = (output or config.output_dir).expanduser()
        export_to_directory(store, target)

    if output_format == "json":
        typer.echo(json.dumps(_result_to_dict(result, target), indent=2))
        return

    typer.echo(f"Run {result.run_id}: {result.status}")
    typer.echo(f"  Files: {len(result.files)} ({result.manifest.total_size} bytes)")
    if result.scripts:
        typer.echo(f"  Scripts: {', '.join(s.name for s in result.scripts)}")
    for warning in result.warnings:
        typer.secho(f"  ! {warning}", fg=typer.colors.YELLOW)
    if target is not None:
        typer.echo(f"  Exported to {target}")
    else:
        typer.echo("  Dry run - nothing written")


@app.command()
def validate(
    blueprint: Path = typer.Argument(..., help="Path to blueprint YAML or JSON file."),
    settings: Path | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to foundry settings YAML file.",
    ),
) -> None:
    """Validate a blueprint without generating anything."""
    from foundry.engine.orchestrator import Orchestrator

    bp, config = _load_inputs(blueprint.expanduser(), settings.expanduser() if settings else None)
    orchestrator = Orchestrator(_get_plugin_manager(config), settings=config)

    try:
        problems = asyncio.run(orchestrator.validate(bp))
    except FoundryError as e:
        _format_error("Blueprint Graph Error", str(e), hint="Check for cycles and edges to unknown nodes.")
        raise typer.Exit(1) from None

    if problems:
        _format_error(
            "Blueprint Validation Failed",
            f"{len(problems)} node(s) have problems",
            details=[str(p) for p in problems],
        )
        raise typer.Exit(1)

    typer.echo("Blueprint valid!")
    typer.echo(f"  Project: {bp.config.project.name}")
    typer.echo(f"  Nodes: {len(bp.nodes)}")
    typer.echo(f"  Edges: {len(bp.edges)}")


plugins_app = typer.Typer(help="Plugin management commands.")
app.add_typer(plugins_app, name="plugins")


@plugins_app.command("list")
def plugins_list(
    settings: Path | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Path to foundry settings YAML file (applies allowed_plugins).",
    ),
) -> None:
    """List available node plugins."""
    config = load_settings(settings.expanduser()) if settings else FoundrySettings()
    specs = _get_plugin_manager(config).get_specs()

    typer.echo("\nNODE PLUGINS:")
    if not specs:
        typer.echo("  (none available)")
    for spec in specs:
        marker = " [component]" if spec.has_component else ""
        typer.echo(f"  {spec.plugin_id:20} {spec.version:8} - {spec.description}{marker}")
    typer.echo()
