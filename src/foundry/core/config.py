# src/foundry/core/config.py
"""
Configuration schema and loading for Foundry.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from foundry.contracts.blueprint import Blueprint

# Directory names never descended into when importing component packages.
DEFAULT_SKIP_DIRS: tuple[str, ...] = (
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "dist",
    "build",
    "target",
    ".next",
    "__pycache__",
)

# Unmatched files with these extensions are routed to docs/ instead of dropped.
DEFAULT_DOC_EXTENSIONS: tuple[str, ...] = (".md", ".mdx", ".rst", ".txt")


class LoggingSettings(BaseModel):
    """Log output configuration."""

    model_config = {"frozen": True}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level",
    )
    json_output: bool = Field(
        default=False,
        description="Emit JSON lines instead of console output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.upper()
        return v


class ImportSettings(BaseModel):
    """Component importer configuration."""

    model_config = {"frozen": True}

    skip_dirs: tuple[str, ...] = Field(
        default=DEFAULT_SKIP_DIRS,
        description="Directory names skipped while walking a component package",
    )
    doc_extensions: tuple[str, ...] = Field(
        default=DEFAULT_DOC_EXTENSIONS,
        description="Extensions treated as documentation when no mapping matches",
    )

    @field_validator("doc_extensions")
    @classmethod
    def validate_doc_extensions(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for ext in v:
            if not ext.startswith("."):
                raise ValueError(f"doc extension must start with '.', got {ext!r}")
        return tuple(ext.lower() for ext in v)


class FoundrySettings(BaseModel):
    """Top-level Foundry configuration.

    All settings are validated and frozen after construction.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    component_root: Path | None = Field(
        default=None,
        description="Directory that plugin component paths are resolved against",
    )
    allowed_plugins: list[str] | None = Field(
        default=None,
        description="If set, only these plugin ids may be registered",
    )
    output_dir: Path = Field(
        default=Path("./output"),
        description="Default export directory for `foundry run`",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Log output configuration",
    )
    import_: ImportSettings = Field(
        default_factory=ImportSettings,
        alias="import",
        description="Component importer configuration",
    )


# Regex pattern for ${VAR} or ${VAR:-default} syntax
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values.

    Unset variables without a default are left as written.
    """

    def _expand_string(value: str) -> str:
        def replacer(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default = match.group(2)
            env_value = os.environ.get(var_name)
            if env_value is not None:
                return env_value
            if default is not None:
                return default
            return match.group(0)

        return _ENV_VAR_PATTERN.sub(replacer, value)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _expand_string(value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


def _lower_keys(value: Any) -> Any:
    """Dynaconf upper-cases keys loaded from the environment."""
    if isinstance(value, dict):
        return {str(k).lower(): _lower_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_lower_keys(item) for item in value]
    return value


def load_settings(config_path: Path | None = None) -> FoundrySettings:
    """Load settings from a YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (FOUNDRY_*) - highest priority
    2. Config file (foundry.yaml)
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: FOUNDRY_LOGGING__LEVEL for nested keys.

    Args:
        config_path: Path to YAML configuration file. None loads
            environment overrides on top of the defaults.

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="FOUNDRY",
        settings_files=[str(config_path)] if config_path is not None else [],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): _lower_keys(v) for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}
    raw_config = _expand_env_vars(raw_config)

    return FoundrySettings.model_validate(raw_config)


def load_blueprint(path: Path) -> Blueprint:
    """Load a blueprint from a YAML or JSON file.

    JSON is parsed through the YAML loader. ${VAR} references in node
    configs are expanded from the environment.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the document is not a mapping
        ValidationError: If the blueprint fails schema validation
    """
    if not path.exists():
        raise FileNotFoundError(f"Blueprint file not found: {path}")

    with path.open(encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"Blueprint {path} must contain a mapping, got {type(raw).__name__}")

    return Blueprint.model_validate(_expand_env_vars(raw))
