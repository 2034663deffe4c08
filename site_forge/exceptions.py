"""Custom exceptions for the site bootstrap pipeline."""

from pathlib import Path
from typing import Optional, Union


class SiteForgeError(Exception):
    """Base exception for all site-forge errors."""
    pass


class ConfigLoadError(SiteForgeError):
    """Site configuration could not be loaded or is invalid."""
    pass


class PluginLoadError(ConfigLoadError):
    """A configured plugin could not be imported."""

    def __init__(self, plugin: str, reason: str = ""):
        self.plugin = plugin
        msg = f"Could not load plugin '{plugin}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class SchemaBuildError(SiteForgeError):
    """The query schema could not be built."""
    pass


class PluginHookError(SiteForgeError):
    """A plugin handler failed while running a hook."""

    def __init__(self, plugin: str, hook: str, reason: str = ""):
        self.plugin = plugin
        self.hook = hook
        msg = f"Plugin '{plugin}' failed in hook '{hook}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class UnknownHookError(SiteForgeError, KeyError):
    """Hook name was never declared on the registry."""

    def __init__(self, hook: str):
        self.hook = hook
        super().__init__(f"Unknown hook: '{hook}'")

    def __str__(self) -> str:
        return self.args[0]


class InvalidPathError(SiteForgeError):
    """A file path cannot be turned into a route."""

    def __init__(self, file_path: Union[str, Path], root: Union[str, Path], reason: str = ""):
        self.file_path = str(file_path)
        self.root = str(root)
        msg = f"Cannot derive route for '{self.file_path}' under '{self.root}'"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg)


class InvalidPageError(SiteForgeError):
    """A page descriptor failed validation."""

    def __init__(self, reason: str, path: Optional[str] = None):
        self.path = path
        msg = f"Invalid page '{path}': {reason}" if path else f"Invalid page: {reason}"
        super().__init__(msg)


class FileCopyError(SiteForgeError):
    """Build directory preparation failed."""
    pass


class InvalidStateTransition(SiteForgeError):
    """Bootstrap orchestrator was asked to move backwards or out of a terminal state."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move bootstrap from {current} to {requested}")
