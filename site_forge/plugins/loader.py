"""
Plugin loading from the site configuration.

Plugins listed in ``site-config.yaml`` are imported by module name, in
order. The site's own ``site_node.py`` is loaded from the program directory
and registered last.
"""

import importlib
import importlib.util
import logging
from pathlib import Path
from types import ModuleType
from typing import Iterable, Union

from site_forge.config.site import SiteConfig
from site_forge.exceptions import PluginLoadError
from site_forge.plugins.hooks import DEFAULT_HOOKS, HookRegistry, HookSpec, Plugin

logger = logging.getLogger(__name__)

SITE_NODE_FILENAME = "site_node.py"
SITE_NODE_PLUGIN = "site_node"


def import_plugin_module(name: str) -> ModuleType:
    """
    Import a plugin module by dotted name.

    Raises:
        PluginLoadError: If the module cannot be found or raises on import
    """
    try:
        return importlib.import_module(name)
    except ImportError as e:
        raise PluginLoadError(name, str(e)) from e
    except Exception as e:
        raise PluginLoadError(name, f"{type(e).__name__}: {e}") from e


def load_module_from_file(module_name: str, file_path: Path) -> ModuleType:
    """
    Execute a Python file as a module.

    Raises:
        PluginLoadError: If the file cannot be loaded or raises on import
    """
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    if spec is None or spec.loader is None:
        raise PluginLoadError(str(file_path), "not a loadable Python file")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise PluginLoadError(str(file_path), f"{type(e).__name__}: {e}") from e
    return module


def load_plugins(
    directory: Union[str, Path],
    site_config: SiteConfig,
    hooks: Iterable[HookSpec] = DEFAULT_HOOKS,
    max_concurrency: int = 8,
) -> HookRegistry:
    """
    Build the hook registry for a site.

    Args:
        directory: Site root directory
        site_config: Site configuration listing plugins
        hooks: Hooks plugins may implement
        max_concurrency: Bound for concurrently running collecting handlers

    Returns:
        HookRegistry with configured plugins first and site_node.py last

    Raises:
        PluginLoadError: If a plugin cannot be imported
    """
    hooks = tuple(hooks)
    registry = HookRegistry(hooks=hooks, max_concurrency=max_concurrency)

    for plugin_spec in site_config.plugins:
        module = import_plugin_module(plugin_spec.resolve)
        plugin = Plugin.from_module(
            module, name=plugin_spec.resolve, options=plugin_spec.options, hooks=hooks
        )
        if not plugin.handlers:
            logger.warning(f"Plugin {plugin_spec.resolve} implements none of the build hooks")
        registry.register_plugin(plugin)

    site_node = Path(directory) / SITE_NODE_FILENAME
    if site_node.is_file():
        module = load_module_from_file(f"_site_forge_{SITE_NODE_PLUGIN}", site_node)
        registry.register_plugin(Plugin.from_module(module, name=SITE_NODE_PLUGIN, hooks=hooks))

    logger.info(f"Loaded {len(registry.plugins)} plugin(s)")
    return registry
