"""
Hook system for plugin extensibility.

Provides:
- HookSpec / HookShape describing the lifecycle hooks a build exposes
- Plugin, an ordered bundle of hook handlers plus options
- HookRegistry, which runs every plugin's handler for a hook

Two hook shapes exist:

- collecting: every handler receives the shared arguments and returns zero,
  one or many items; the items are concatenated in plugin order. Handlers
  may run concurrently.
- transforming: an accumulator is threaded through the handlers one after
  the other; each handler receives ``(accumulator, args)`` and returns the
  next accumulator.

Handler failures are never swallowed: they are raised as PluginHookError.
"""

import inspect
import logging
from dataclasses import dataclass, field
from enum import Enum
from types import ModuleType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import anyio

from site_forge.exceptions import PluginHookError, UnknownHookError
from site_forge.models.page import Page, coerce_page
from site_forge.models.registry import as_registry

logger = logging.getLogger(__name__)

HookArgs = Dict[str, Any]
Handler = Callable[..., Any]


class HookShape(str, Enum):
    """How a hook combines its handlers' results."""

    COLLECTING = "collecting"
    TRANSFORMING = "transforming"


@dataclass(frozen=True)
class HookSpec:
    """
    Declaration of a lifecycle hook.

    Attributes:
        name: Hook name; plugin modules implement it as a function of that name
        shape: Collecting or transforming
        coerce: Applied to each collected item (collecting) or to each
            handler's returned accumulator (transforming)
    """

    name: str
    shape: HookShape
    coerce: Optional[Callable[[Any], Any]] = None
    description: str = ""


CREATE_PAGES = HookSpec(
    name="create_pages",
    shape=HookShape.COLLECTING,
    coerce=coerce_page,
    description="Declare pages; receives {graphql, site_config, plugin_options}",
)

ON_POST_CREATE_PAGES = HookSpec(
    name="on_post_create_pages",
    shape=HookShape.TRANSFORMING,
    coerce=as_registry,
    description="Rewrite the page registry; receives (pages, {pages, graphql, site_config, plugin_options})",
)

DEFAULT_HOOKS: Tuple[HookSpec, ...] = (CREATE_PAGES, ON_POST_CREATE_PAGES)


@dataclass
class Plugin:
    """A named set of hook handlers with its configured options."""

    name: str
    handlers: Dict[str, Handler] = field(default_factory=dict)
    options: Dict[str, Any] = field(default_factory=dict)

    def handler_for(self, hook_name: str) -> Optional[Handler]:
        return self.handlers.get(hook_name)

    @classmethod
    def from_module(
        cls,
        module: ModuleType,
        name: Optional[str] = None,
        options: Optional[Dict[str, Any]] = None,
        hooks: Iterable[HookSpec] = DEFAULT_HOOKS,
    ) -> "Plugin":
        """
        Build a plugin from a module's top-level hook functions.

        Args:
            module: Imported plugin module
            name: Plugin name (defaults to the module name)
            options: Plugin options from the site config
            hooks: Hooks to look for

        Returns:
            Plugin whose handlers are the module's callables named after hooks
        """
        handlers = {}
        for spec in hooks:
            func = getattr(module, spec.name, None)
            if func is not None and callable(func):
                handlers[spec.name] = func
        return cls(name=name or module.__name__, handlers=handlers, options=dict(options or {}))


async def _invoke(handler: Handler, *args: Any) -> Any:
    result = handler(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


def _as_items(produced: Any) -> List[Any]:
    """Normalize a collecting handler's return value to a list."""
    if produced is None:
        return []
    if isinstance(produced, (Page, Mapping)):
        return [produced]
    if isinstance(produced, (str, bytes)):
        raise TypeError(f"expected items, got {type(produced).__name__}")
    try:
        return list(produced)
    except TypeError:
        raise TypeError(f"expected an iterable of items, got {type(produced).__name__}") from None


def _hook_error(plugin: Plugin, hook_name: str, cause: Exception) -> PluginHookError:
    if isinstance(cause, PluginHookError):
        return cause
    error = PluginHookError(plugin.name, hook_name, f"{type(cause).__name__}: {cause}")
    error.__cause__ = cause
    return error


class HookRegistry:
    """
    Registry of plugins and the hooks they implement.

    Plugins run in registration order. The registry is an explicit object
    passed to the bootstrap; there is no process-wide instance.
    """

    def __init__(self, hooks: Iterable[HookSpec] = DEFAULT_HOOKS, max_concurrency: int = 8):
        """
        Initialize an empty registry.

        Args:
            hooks: Hooks that can be run
            max_concurrency: Upper bound on concurrently running collecting handlers
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._specs: Dict[str, HookSpec] = {}
        self._plugins: List[Plugin] = []
        self.max_concurrency = max_concurrency
        for spec in hooks:
            self.declare(spec)

    def declare(self, spec: HookSpec) -> None:
        """Declare a hook so that it can be run."""
        self._specs[spec.name] = spec
        logger.debug(f"Declared {spec.shape.value} hook: {spec.name}")

    def spec(self, hook_name: str) -> HookSpec:
        try:
            return self._specs[hook_name]
        except KeyError:
            raise UnknownHookError(hook_name) from None

    @property
    def hooks(self) -> List[HookSpec]:
        return list(self._specs.values())

    @property
    def plugins(self) -> List[Plugin]:
        return list(self._plugins)

    def register_plugin(self, plugin: Plugin) -> Plugin:
        """
        Register a plugin after the already registered ones.

        Raises:
            UnknownHookError: If the plugin implements an undeclared hook
            ValueError: If a handler is not callable
        """
        for hook_name, handler in plugin.handlers.items():
            self.spec(hook_name)
            if not callable(handler):
                raise ValueError(f"Handler for '{hook_name}' in plugin '{plugin.name}' must be callable")

        self._plugins.append(plugin)
        implemented = ", ".join(plugin.handlers) or "no hooks"
        logger.info(f"Registered plugin: {plugin.name} ({implemented})")
        return plugin

    def register(self, hook_name: str, handler: Handler, plugin_name: Optional[str] = None) -> Handler:
        """
        Register a single handler as its own plugin.

        Example:
            registry.register("create_pages", lambda args: [{"path": "x", "component": "x.js"}])
        """
        name = plugin_name or getattr(handler, "__name__", repr(handler))
        self.register_plugin(Plugin(name=name, handlers={hook_name: handler}))
        return handler

    def handlers_for(self, hook_name: str) -> List[Tuple[Plugin, Handler]]:
        """Plugins implementing a hook, with their handlers, in registration order."""
        self.spec(hook_name)
        return [
            (plugin, plugin.handlers[hook_name])
            for plugin in self._plugins
            if hook_name in plugin.handlers
        ]

    @staticmethod
    def _args_for(plugin: Plugin, args: Optional[HookArgs]) -> HookArgs:
        return {**(args or {}), "plugin_options": dict(plugin.options)}

    async def run(self, hook_name: str, args: Optional[HookArgs] = None, initial: Any = None) -> Any:
        """
        Run a hook according to its declared shape.

        Args:
            hook_name: Declared hook name
            args: Shared arguments handed to every handler
            initial: Items to start from (collecting) or the accumulator (transforming)

        Returns:
            Collected items, or the final accumulator

        Notes:
            - An undeclared hook cannot have handlers, so running it returns
              ``initial`` unchanged

        Raises:
            PluginHookError: If any handler fails
        """
        spec = self._specs.get(hook_name)
        if spec is None:
            logger.debug(f"Hook {hook_name} is not declared, nothing to run")
            return initial
        if spec.shape is HookShape.COLLECTING:
            return await self.run_collecting(hook_name, args, initial or ())
        return await self.run_transforming(hook_name, initial, args)

    async def run_collecting(
        self,
        hook_name: str,
        args: Optional[HookArgs] = None,
        initial: Iterable[Any] = (),
    ) -> List[Any]:
        """
        Run a collecting hook; handlers run concurrently, results keep plugin order.

        Notes:
            - The first failing handler cancels the others and its error is raised
            - Synchronous handlers run on the event loop; only coroutine
              handlers actually overlap
        """
        spec = self.spec(hook_name)
        handlers = self.handlers_for(hook_name)
        collected = list(initial)

        if not handlers:
            logger.debug(f"No plugin implements {hook_name}")
            return collected

        results: List[List[Any]] = [[] for _ in handlers]
        failures: List[PluginHookError] = []
        limiter = anyio.CapacityLimiter(self.max_concurrency)

        async def collect(index: int, plugin: Plugin, handler: Handler) -> None:
            async with limiter:
                try:
                    logger.debug(f"Running {hook_name} for plugin {plugin.name}")
                    items = _as_items(await _invoke(handler, self._args_for(plugin, args)))
                    if spec.coerce is not None:
                        items = [spec.coerce(item) for item in items]
                    results[index] = items
                except Exception as e:
                    logger.error(f"Plugin {plugin.name} failed in {hook_name}: {e}")
                    failures.append(_hook_error(plugin, hook_name, e))
                    tg.cancel_scope.cancel()

        async with anyio.create_task_group() as tg:
            for index, (plugin, handler) in enumerate(handlers):
                tg.start_soon(collect, index, plugin, handler)

        if failures:
            raise failures[0]

        for plugin_items in results:
            collected.extend(plugin_items)

        logger.info(f"{hook_name}: {len(handlers)} plugin(s) produced {len(collected)} item(s)")
        return collected

    async def run_transforming(
        self,
        hook_name: str,
        accumulator: Any,
        args: Optional[HookArgs] = None,
    ) -> Any:
        """
        Run a transforming hook; each handler sees the previous handler's output.

        Returns:
            The final accumulator (the initial one, untouched, when no plugin implements the hook)
        """
        spec = self.spec(hook_name)
        handlers = self.handlers_for(hook_name)
        current = accumulator

        if not handlers:
            logger.debug(f"No plugin implements {hook_name}")
            return current

        for plugin, handler in handlers:
            try:
                logger.debug(f"Running {hook_name} for plugin {plugin.name}")
                result = await _invoke(handler, current, self._args_for(plugin, args))
                if result is not None:
                    current = spec.coerce(result) if spec.coerce is not None else result
            except Exception as e:
                logger.error(f"Plugin {plugin.name} failed in {hook_name}: {e}")
                raise _hook_error(plugin, hook_name, e)

        logger.info(f"{hook_name}: ran {len(handlers)} plugin(s)")
        return current

    def clear(self) -> None:
        """Remove all registered plugins (declared hooks are kept)."""
        self._plugins.clear()
        logger.debug("Cleared all plugins")

    @property
    def hook_count(self) -> Dict[str, int]:
        """Get count of registered handlers by hook."""
        return {name: len(self.handlers_for(name)) for name in self._specs}
