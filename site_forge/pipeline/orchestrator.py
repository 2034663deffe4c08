"""
Bootstrap orchestrator for a site build.

Runs the bootstrap as a strictly ordered sequence of states:

    INIT -> SCHEMA_READY -> COLLECT_PAGES -> AUTO_DISCOVER -> POST_CREATE -> HAND_OFF

Each state finishes its merge before the next one starts. The first error
moves the orchestrator to FAILED and is raised; the page registry is then
never handed to the query subsystem.
"""

import inspect
import logging
from datetime import datetime
from functools import partial
from typing import Any, Callable, Optional

import anyio
import anyio.to_thread

from site_forge.config.site import SiteConfig, load_site_config
from site_forge.discovery.filesystem import discover_pages
from site_forge.exceptions import InvalidStateTransition
from site_forge.models.build import (
    BootstrapResult,
    BootstrapStatistics,
    BuildState,
    GraphQLRunner,
    ProgramConfig,
)
from site_forge.models.registry import MergePolicy, PageRegistry, as_registry, merge_pages
from site_forge.pipeline.scaffold import prepare_build_directory
from site_forge.plugins.hooks import CREATE_PAGES, ON_POST_CREATE_PAGES, HookRegistry
from site_forge.plugins.loader import load_plugins
from site_forge.query.runner import QueryHandOff, hand_off, make_graphql_runner
from site_forge.query.schema import SchemaBuilder, build_schema

logger = logging.getLogger(__name__)

# Receives (error, schema); exactly one of them is None
CompletionCallback = Callable[[Optional[BaseException], Any], Any]


class BootstrapOrchestrator:
    """
    Orchestrates the bootstrap of a site build.

    Coordinates:
    - Site config, plugin loading and build directory preparation
    - Schema building and the bound query runner
    - Plugin-declared pages (create_pages) and auto-discovered pages
    - The post-create transform (on_post_create_pages)
    - Hand-off of the final registry to the query subsystem
    """

    def __init__(
        self,
        program: ProgramConfig,
        hook_registry: Optional[HookRegistry] = None,
        schema_builder: Optional[SchemaBuilder] = None,
        query_subsystem: Optional[QueryHandOff] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            program: Site directory and settings
            hook_registry: Plugins to run; loaded from the site config when omitted
            schema_builder: Schema builder; resolved from the site config when omitted
            query_subsystem: Receives the final registry at hand-off
        """
        self.program = program
        self.settings = program.settings
        self.hook_registry = hook_registry
        self.schema_builder = schema_builder
        self.query_subsystem = query_subsystem

        self.state = BuildState.INIT
        self.stats = BootstrapStatistics()
        self.site_config: Optional[SiteConfig] = program.site_config
        self.pages = PageRegistry()
        self.schema: Any = None
        self.graphql: Optional[GraphQLRunner] = None

        logger.info(f"Initialized bootstrap for {program.directory}")

    def _enter(self, state: BuildState) -> None:
        if self.state.is_terminal or state.order <= self.state.order:
            raise InvalidStateTransition(self.state.value, state.value)
        logger.info(f"Bootstrap: {self.state.value} -> {state.value}")
        self.state = state

    def _fail(self) -> None:
        if self.state is not BuildState.FAILED:
            logger.debug(f"Bootstrap: {self.state.value} -> {BuildState.FAILED.value}")
            self.state = BuildState.FAILED

    @property
    def merge_policy(self) -> MergePolicy:
        if self.settings.discovery.override_existing:
            return MergePolicy.LAST_WINS
        return MergePolicy.KEEP_EXISTING

    async def run(self) -> BootstrapResult:
        """
        Execute the complete bootstrap.

        Returns:
            Schema, final page registry, query runner and statistics

        Raises:
            SiteForgeError: On the first fatal error of any state
            InvalidStateTransition: If the orchestrator already ran
        """
        if self.state is not BuildState.INIT:
            raise InvalidStateTransition(self.state.value, BuildState.INIT.value)

        self.stats.start_time = datetime.now()
        try:
            await self._initialize()
            await self._build_schema()
            await self._collect_pages()
            await self._auto_discover()
            await self._post_create()
            await self._hand_off()
        except Exception as e:
            failed_in = self.state.value
            self._fail()
            self.stats.end_time = datetime.now()
            self.stats.errors.append(f"{failed_in}: {e}")
            logger.error(f"Bootstrap failed during {failed_in}: {e}", exc_info=True)
            raise

        self.stats.end_time = datetime.now()
        logger.info(
            f"Bootstrap completed: {self.stats.total_pages} pages "
            f"({self.stats.plugin_pages} from plugins, {self.stats.discovered_pages} discovered) "
            f"in {self.stats.duration:.2f}s"
        )
        return BootstrapResult(
            schema=self.schema,
            pages=self.pages,
            graphql=self.graphql,
            stats=self.stats,
            state=self.state,
        )

    async def _initialize(self) -> None:
        directory = self.program.directory

        if self.site_config is None:
            self.site_config = load_site_config(directory)

        if self.hook_registry is None:
            self.hook_registry = load_plugins(
                directory,
                self.site_config,
                max_concurrency=self.settings.build.max_concurrency,
            )
        self.stats.plugins = len(self.hook_registry.plugins)

        await anyio.to_thread.run_sync(prepare_build_directory, directory, self.settings.build)

    async def _build_schema(self) -> None:
        self._enter(BuildState.SCHEMA_READY)
        self.schema = await build_schema(self.program.directory, self.site_config, self.schema_builder)
        self.graphql = make_graphql_runner(self.schema)

    def _hook_args(self) -> dict:
        return {"graphql": self.graphql, "site_config": self.site_config}

    async def _collect_pages(self) -> None:
        self._enter(BuildState.COLLECT_PAGES)
        declared = await self.hook_registry.run(CREATE_PAGES.name, self._hook_args(), [])
        self.pages = merge_pages(self.pages, declared)
        self.stats.plugin_pages = len(declared)
        logger.info(f"Collected {len(declared)} page(s) from plugins")

    async def _auto_discover(self) -> None:
        self._enter(BuildState.AUTO_DISCOVER)
        discovered = await discover_pages(self.program.pages_directory, self.settings.discovery)

        collisions = sum(1 for page in discovered if page.path in self.pages)
        if collisions and self.merge_policy is MergePolicy.LAST_WINS:
            self.stats.overridden_pages = collisions

        self.pages = merge_pages(self.pages, discovered, self.merge_policy)
        self.stats.discovered_pages = len(discovered)

    async def _post_create(self) -> None:
        self._enter(BuildState.POST_CREATE)
        args = {**self._hook_args(), "pages": self.pages}
        modified = await self.hook_registry.run(ON_POST_CREATE_PAGES.name, args, self.pages)
        self.pages = as_registry(modified)

    async def _hand_off(self) -> None:
        self._enter(BuildState.HAND_OFF)
        self.stats.total_pages = len(self.pages)
        await hand_off(self.query_subsystem, self.program.directory, self.pages, self.graphql)


async def bootstrap(
    program: ProgramConfig,
    callback: Optional[CompletionCallback] = None,
    *,
    hook_registry: Optional[HookRegistry] = None,
    schema_builder: Optional[SchemaBuilder] = None,
    query_subsystem: Optional[QueryHandOff] = None,
) -> Optional[BootstrapResult]:
    """
    Bootstrap a site build.

    Args:
        program: Site directory and settings
        callback: Completion callback called with ``(error, schema)``
        hook_registry: Plugins to run instead of the configured ones
        schema_builder: Schema builder instead of the configured one
        query_subsystem: Receives the final registry at hand-off

    Returns:
        The BootstrapResult, or None when the build failed and a callback
        received the error

    Raises:
        Exception: Any bootstrap error, when no callback is given
    """
    orchestrator = BootstrapOrchestrator(
        program,
        hook_registry=hook_registry,
        schema_builder=schema_builder,
        query_subsystem=query_subsystem,
    )

    try:
        result = await orchestrator.run()
    except Exception as e:
        if callback is None:
            raise
        await _notify(callback, e, None)
        return None

    if callback is not None:
        await _notify(callback, None, result.schema)
    return result


async def _notify(callback: CompletionCallback, error: Optional[BaseException], schema: Any) -> None:
    outcome = callback(error, schema)
    if inspect.isawaitable(outcome):
        await outcome


def run_bootstrap(
    program: ProgramConfig,
    callback: Optional[CompletionCallback] = None,
    **kwargs: Any,
) -> Optional[BootstrapResult]:
    """Blocking wrapper around :func:`bootstrap`."""
    return anyio.run(partial(bootstrap, program, callback, **kwargs))
