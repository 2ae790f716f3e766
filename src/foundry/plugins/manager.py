# src/foundry/plugins/manager.py
"""Plugin manager for discovery, registration, and lookup.

Uses pluggy for hook-based plugin registration. One PluginManager is built
at process start and passed into the Orchestrator; there is no global
registry. It is read-only while runs execute.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import pluggy

from foundry.contracts.blueprint import BlueprintNode
from foundry.contracts.errors import PluginNotFoundError
from foundry.core.logging import get_logger
from foundry.plugins.hookspecs import PROJECT_NAME, FoundryNodeSpec
from foundry.plugins.protocols import NodePluginProtocol

logger = get_logger(__name__)


@dataclass(frozen=True)
class PluginSpec:
    """Registration record for a plugin, for listing."""

    plugin_id: str
    version: str
    description: str
    has_component: bool

    @classmethod
    def from_plugin(cls, plugin_cls: type) -> "PluginSpec":
        from foundry.plugins.discovery import get_plugin_description

        return cls(
            plugin_id=plugin_cls.plugin_id,  # type: ignore[attr-defined]
            version=getattr(plugin_cls, "version", "0.0.0"),
            description=get_plugin_description(plugin_cls),
            has_component=getattr(plugin_cls, "component_path", None) is not None,
        )


class PluginManager:
    """Manages plugin discovery, registration, and lookup.

    Usage:
        manager = PluginManager()
        manager.register_builtin_plugins()
        manager.register(MyPluginPack())

        plugin = manager.get("erc20-stylus")

    Args:
        allowed_plugins: If given, plugin ids outside this list are ignored
            at registration. None allows everything.
    """

    def __init__(self, allowed_plugins: Sequence[str] | None = None) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(FoundryNodeSpec)
        self._allowed = frozenset(allowed_plugins) if allowed_plugins is not None else None

        # plugin_id -> class, for duplicate detection; instances built once
        self._classes: dict[str, type[NodePluginProtocol]] = {}
        self._instances: dict[str, NodePluginProtocol] = {}

    def register_builtin_plugins(self) -> None:
        """Discover and register all built-in plugins.

        Call this once at startup to make built-in plugins discoverable.
        """
        from foundry.plugins.discovery import create_dynamic_hookimpl, discover_builtin_plugins

        self.register(create_dynamic_hookimpl(discover_builtin_plugins()))

    def register(self, plugin: Any) -> None:
        """Register a plugin pack (an object implementing hook methods)."""
        self._pm.register(plugin)
        self._refresh_caches()

    def register_classes(self, *plugin_classes: type) -> None:
        """Register plugin classes directly, without writing a hookimpl."""
        from foundry.plugins.discovery import create_dynamic_hookimpl

        self.register(create_dynamic_hookimpl(list(plugin_classes)))

    def _refresh_caches(self) -> None:
        """Refresh plugin caches from hooks.

        Raises:
            ValueError: If two plugins share a plugin_id, or one has none
        """
        new_classes: dict[str, type[NodePluginProtocol]] = {}

        for plugin_classes in self._pm.hook.foundry_get_node_plugins():
            for cls in plugin_classes:
                plugin_id = getattr(cls, "plugin_id", None)
                if not plugin_id:
                    raise ValueError(f"Plugin class {cls.__name__} has no plugin_id")
                if plugin_id in new_classes:
                    raise ValueError(f"Duplicate plugin_id: '{plugin_id}'. Already registered by {new_classes[plugin_id].__name__}")
                if self._allowed is not None and plugin_id not in self._allowed:
                    logger.debug("Plugin not in allow-list, skipping", plugin_id=plugin_id)
                    continue
                new_classes[plugin_id] = cls

        # Keep existing instances for classes that did not change
        self._instances = {
            plugin_id: instance
            for plugin_id, instance in self._instances.items()
            if plugin_id in new_classes and type(instance) is new_classes[plugin_id]
        }
        self._classes = new_classes

    # === Lookup ===

    def get(self, node_type: str) -> NodePluginProtocol | None:
        """Plugin instance for a node type, or None if unregistered."""
        cls = self._classes.get(node_type)
        if cls is None:
            return None
        instance = self._instances.get(node_type)
        if instance is None:
            instance = cls()
            self._instances[node_type] = instance
        return instance

    def get_or_raise(self, node: BlueprintNode) -> NodePluginProtocol:
        """Plugin instance for `node`.

        Raises:
            PluginNotFoundError: If the node's type is not registered
        """
        plugin = self.get(node.type)
        if plugin is None:
            raise PluginNotFoundError(node.id, node.type)
        return plugin

    def has(self, node_type: str) -> bool:
        return node_type in self._classes

    def plugin_ids(self) -> list[str]:
        return sorted(self._classes)

    def get_specs(self) -> list[PluginSpec]:
        return [PluginSpec.from_plugin(self._classes[plugin_id]) for plugin_id in self.plugin_ids()]
