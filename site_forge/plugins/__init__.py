"""
Plugin system: hook declarations, the hook registry and plugin loading.
"""

from .hooks import (
    CREATE_PAGES,
    DEFAULT_HOOKS,
    ON_POST_CREATE_PAGES,
    HookRegistry,
    HookShape,
    HookSpec,
    Plugin,
)
from .loader import load_plugins

__all__ = [
    'CREATE_PAGES',
    'DEFAULT_HOOKS',
    'ON_POST_CREATE_PAGES',
    'HookRegistry',
    'HookShape',
    'HookSpec',
    'Plugin',
    'load_plugins',
]
