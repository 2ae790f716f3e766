# src/foundry/plugins/__init__.py
"""Plugin system: contracts, base class, pluggy registry, discovery.

Usage:
    from foundry.plugins import BasePlugin, PluginManager, hookimpl
"""

from foundry.plugins.base import BasePlugin
from foundry.plugins.config_base import PluginConfig, PluginConfigError
from foundry.plugins.context import ExecutionContext
from foundry.plugins.hookspecs import hookimpl
from foundry.plugins.manager import PluginManager, PluginSpec
from foundry.plugins.protocols import NodePluginProtocol, RepositoryPublisher

__all__ = [
    "BasePlugin",
    "ExecutionContext",
    "NodePluginProtocol",
    "PluginConfig",
    "PluginConfigError",
    "PluginManager",
    "PluginSpec",
    "RepositoryPublisher",
    "hookimpl",
]
