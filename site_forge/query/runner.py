"""Query runner bound to a schema, and the hand-off to the query subsystem."""

import inspect
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from site_forge.models.build import GraphQLRunner
from site_forge.models.registry import PageRegistry

logger = logging.getLogger(__name__)

# Called once the page registry is final: (directory, pages, graphql)
QueryHandOff = Callable[[Path, PageRegistry, GraphQLRunner], Any]


def make_graphql_runner(schema: Any) -> GraphQLRunner:
    """
    Bind a schema into a query function.

    The returned coroutine function takes ``(query, context)``. The context
    is passed as root value, context value and variable values at once;
    existing page queries rely on finding their data in all three places.
    """

    async def graphql(query: str, context: Optional[Dict[str, Any]] = None) -> Any:
        context = {} if context is None else context
        result = schema.execute(
            query,
            root_value=context,
            context_value=context,
            variable_values=context,
        )
        if inspect.isawaitable(result):
            result = await result
        return result

    return graphql


async def hand_off(
    query_subsystem: Optional[QueryHandOff],
    directory: Path,
    pages: PageRegistry,
    graphql: GraphQLRunner,
) -> None:
    """Deliver the final registry and query runner to the query subsystem."""
    if query_subsystem is None:
        logger.debug("No query subsystem configured, skipping hand-off")
        return

    result = query_subsystem(directory, pages, graphql)
    if inspect.isawaitable(result):
        await result
    logger.info(f"Handed {len(pages)} page(s) to the query subsystem")
