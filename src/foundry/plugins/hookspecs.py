# src/foundry/plugins/hookspecs.py
"""pluggy hook specifications for Foundry node plugins.

Plugins implement these hooks to register themselves with the framework.
The plugin manager calls these hooks during discovery.

Usage (implementing a plugin pack):
    from foundry.plugins.hookspecs import hookimpl

    class MyPack:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def foundry_get_node_plugins(self):
            return [MyContractPlugin, MyFrontendPlugin]

Note: @hookspec defines the hook interface (done here).
      @hookimpl marks plugin implementations of those hooks.
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from foundry.plugins.protocols import NodePluginProtocol

# Project name for pluggy
PROJECT_NAME = "foundry"

# Hook specification marker
hookspec = pluggy.HookspecMarker(PROJECT_NAME)

# Hook implementation marker (for plugins to use)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class FoundryNodeSpec:
    """Hook specifications for node plugins."""

    @hookspec
    def foundry_get_node_plugins(self) -> list[type["NodePluginProtocol"]]:  # type: ignore[empty-body]
        """Return node plugin classes.

        Each class must have a unique, non-empty `plugin_id` matching the
        blueprint node `type` it handles, and a no-argument constructor.

        Returns:
            List of plugin classes (not instances)
        """
