"""Dynamic plugin discovery by folder scanning.

Scans plugin directories for classes that:
1. Inherit from BasePlugin
2. Have a non-empty `plugin_id` class attribute
3. Are not abstract (no @abstractmethod methods without implementation)
"""

import importlib.util
import inspect
import sys
from pathlib import Path
from typing import Any

from foundry.core.logging import get_logger

logger = get_logger(__name__)

# Files that should never be scanned for plugins
EXCLUDED_FILES: frozenset[str] = frozenset({"__init__.py"})

# Directories (relative to this package) scanned for built-in plugins.
# Non-recursive: subdirectories must be listed explicitly.
BUILTIN_PLUGIN_DIRS: tuple[str, ...] = ("builtin",)


def discover_plugins_in_directory(directory: Path, base_class: type) -> list[type]:
    """Discover plugin classes in a directory.

    Scans all .py files in the directory (non-recursive) in name order.

    Args:
        directory: Path to scan for plugin files
        base_class: Base class that plugins must inherit from
    """
    discovered: list[type] = []

    if not directory.exists():
        logger.warning("Plugin directory does not exist", directory=str(directory))
        return discovered

    for py_file in sorted(directory.glob("*.py")):
        if py_file.name in EXCLUDED_FILES:
            continue
        # Built-in plugin code is ours: import errors are bugs and propagate.
        discovered.extend(_discover_in_file(py_file, base_class))

    return discovered


def _discover_in_file(py_file: Path, base_class: type) -> list[type]:
    # Parent directory in the module name avoids stem collisions across dirs
    module_name = f"foundry.plugins._discovered.{py_file.parent.name}.{py_file.stem}"
    spec = importlib.util.spec_from_file_location(module_name, py_file)
    if spec is None or spec.loader is None:
        return []

    module = importlib.util.module_from_spec(spec)
    # dataclass resolution looks up cls.__module__ in sys.modules during exec
    sys.modules[module.__name__] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module.__name__, None)
        raise

    discovered: list[type] = []
    for name, obj in inspect.getmembers(module, inspect.isclass):
        if obj.__module__ != module.__name__:
            continue
        if not issubclass(obj, base_class) or obj is base_class:
            continue
        if inspect.isabstract(obj):
            continue

        plugin_id = getattr(obj, "plugin_id", None)
        if not plugin_id:
            logger.warning(
                "Plugin class has no plugin_id, skipping",
                plugin_class=name,
                file=str(py_file),
                base=base_class.__name__,
            )
            continue

        discovered.append(obj)

    return discovered


def discover_builtin_plugins() -> list[type]:
    """Discover all built-in node plugins.

    Raises:
        ValueError: If two built-in plugins share a plugin_id
    """
    from foundry.plugins.base import BasePlugin

    plugins_root = Path(__file__).parent
    found: list[type] = []
    seen: dict[str, type] = {}

    for dir_name in BUILTIN_PLUGIN_DIRS:
        for cls in discover_plugins_in_directory(plugins_root / dir_name, BasePlugin):
            plugin_id: str = cls.plugin_id  # type: ignore[attr-defined]
            if plugin_id in seen:
                raise ValueError(
                    f"Duplicate plugin_id '{plugin_id}': found in both {seen[plugin_id].__module__} and {cls.__module__}."
                )
            seen[plugin_id] = cls
            found.append(cls)

    return found


def get_plugin_description(plugin_cls: type) -> str:
    """First non-empty docstring line, or '<plugin_id> plugin'."""
    if plugin_cls.__doc__:
        for line in plugin_cls.__doc__.strip().split("\n"):
            cleaned = line.strip()
            if cleaned:
                return cleaned

    plugin_id = getattr(plugin_cls, "plugin_id", plugin_cls.__name__)
    return f"{plugin_id} plugin"


def create_dynamic_hookimpl(plugin_classes: list[type], hook_method_name: str = "foundry_get_node_plugins") -> object:
    """Create a pluggy hookimpl object returning `plugin_classes`.

    Args:
        plugin_classes: Plugin classes to register
        hook_method_name: Name of the hook method
    """
    from foundry.plugins.hookspecs import hookimpl

    class DynamicHookImpl:
        """Dynamically generated hook implementer."""

    def hook_method(self: Any) -> list[type]:
        return plugin_classes

    setattr(DynamicHookImpl, hook_method_name, hookimpl(hook_method))

    return DynamicHookImpl()
