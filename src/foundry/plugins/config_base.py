# src/foundry/plugins/config_base.py
"""Base class for typed node configurations.

Plugins inherit from PluginConfig to get:
- Strict validation (reject unknown fields)
- camelCase aliases, since blueprint JSON from the editor uses them
- Per-field error extraction for NodeValidationError

Example usage:
    class Erc20Config(PluginConfig):
        token_name: str
        decimals: int = 18

    cfg = Erc20Config.from_dict({"tokenName": "Gold", "decimals": 6})
"""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from foundry.contracts.results import FieldError


class PluginConfigError(Exception):
    """Raised when plugin configuration is invalid."""

    def __init__(self, message: str, errors: list[FieldError] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


def field_errors(error: ValidationError) -> list[FieldError]:
    """Flatten a pydantic ValidationError into (field, message) pairs."""
    result: list[FieldError] = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "__root__"
        result.append(FieldError(field=location, message=detail["msg"]))
    return result


class PluginConfig(BaseModel):
    """Base class for typed node configurations.

    All node configs should inherit from this class.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> Self:
        """Create config from dict with clear error on validation failure.

        Raises:
            PluginConfigError: If configuration is invalid.
        """
        if not isinstance(config, dict):
            raise PluginConfigError(
                f"Invalid configuration for {cls.__name__}: config must be a dict, got {type(config).__name__}.",
                [FieldError(field="__root__", message="config must be a mapping")],
            )

        try:
            return cls.model_validate(config)
        except ValidationError as e:
            raise PluginConfigError(f"Invalid configuration for {cls.__name__}: {e}", field_errors(e)) from e
