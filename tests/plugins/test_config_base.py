# tests/plugins/test_config_base.py
"""Tests for plugin configuration base classes."""

import pytest
from pydantic import ValidationError

from foundry.plugins.config_base import PluginConfig, PluginConfigError, field_errors


class _TokenConfig(PluginConfig):
    token_name: str
    decimals: int = 18


class TestPluginConfig:
    """Tests for PluginConfig base class."""

    def test_rejects_extra_fields(self) -> None:
        """Extra fields should raise validation error."""
        with pytest.raises(ValidationError) as exc_info:
            _TokenConfig.model_validate({"tokenName": "Gold", "unknownField": 1})

        assert "Extra inputs are not permitted" in str(exc_info.value)

    def test_accepts_camel_and_snake_case(self) -> None:
        assert _TokenConfig.from_dict({"tokenName": "Gold"}).token_name == "Gold"
        assert _TokenConfig.from_dict({"token_name": "Gold", "decimals": 6}).decimals == 6

    def test_is_frozen(self) -> None:
        cfg = _TokenConfig.from_dict({"tokenName": "Gold"})

        with pytest.raises(ValidationError):
            cfg.token_name = "Silver"  # type: ignore[misc]

    def test_from_dict_wraps_validation_error(self) -> None:
        """from_dict should wrap ValidationError in PluginConfigError."""
        with pytest.raises(PluginConfigError) as exc_info:
            _TokenConfig.from_dict({})

        assert "Invalid configuration for _TokenConfig" in str(exc_info.value)
        assert exc_info.value.__cause__ is not None
        assert [e.field for e in exc_info.value.errors] == ["tokenName"]

    def test_from_dict_rejects_non_mapping(self) -> None:
        with pytest.raises(PluginConfigError) as exc_info:
            _TokenConfig.from_dict(["tokenName"])  # type: ignore[arg-type]

        assert "config must be a dict, got list" in str(exc_info.value)
        assert exc_info.value.errors[0].field == "__root__"


class TestFieldErrors:
    def test_nested_location_is_dotted(self) -> None:
        class Inner(PluginConfig):
            value: int

        class Outer(PluginConfig):
            inner: Inner

        with pytest.raises(ValidationError) as exc_info:
            Outer.model_validate({"inner": {"value": "not a number"}})

        errors = field_errors(exc_info.value)

        assert [e.field for e in errors] == ["inner.value"]
        assert "integer" in errors[0].message
