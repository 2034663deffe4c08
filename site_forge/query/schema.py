"""
Schema building for the query subsystem.

The default schema exposes the site metadata::

    {
      site {
        title
        siteMetadata
      }
    }

A site can replace it with ``schema_builder: "module:callable"`` in its
config. A builder is called as ``builder(directory, site_config)``, may be
sync or async, and must return an object with an ``execute`` method taking
``query, root_value=, context_value=, variable_values=``.
"""

import importlib
import inspect
import logging
from pathlib import Path
from typing import Any, Callable, Optional

import strawberry
from strawberry.scalars import JSON

from site_forge.config.site import SiteConfig
from site_forge.exceptions import SchemaBuildError

logger = logging.getLogger(__name__)

SchemaBuilder = Callable[[Path, SiteConfig], Any]


@strawberry.type
class Site:
    """Site-level data exposed to page queries."""

    title: Optional[str]
    site_metadata: JSON


def build_site_schema(directory: Path, site_config: SiteConfig) -> strawberry.Schema:
    """Build the default schema from the site config."""
    metadata = dict(site_config.site_metadata)
    site = Site(title=metadata.get("title"), site_metadata=metadata)

    def resolve_site() -> Site:
        return site

    @strawberry.type
    class Query:
        site: Site = strawberry.field(resolver=resolve_site)

    logger.debug(f"Built default schema for {directory}")
    return strawberry.Schema(query=Query)


def resolve_schema_builder(site_config: SiteConfig) -> SchemaBuilder:
    """
    Find the schema builder a site asks for.

    Raises:
        SchemaBuildError: If the configured builder cannot be imported
    """
    if not site_config.schema_builder:
        return build_site_schema

    module_name, _, attr = site_config.schema_builder.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise SchemaBuildError(f"Couldn't import schema builder module '{module_name}': {e}") from e

    builder = getattr(module, attr, None)
    if builder is None or not callable(builder):
        raise SchemaBuildError(f"Schema builder '{site_config.schema_builder}' is not a callable")
    return builder


async def build_schema(
    directory: Path,
    site_config: SiteConfig,
    builder: Optional[SchemaBuilder] = None,
) -> Any:
    """
    Run a schema builder and check the result can execute queries.

    Args:
        directory: Site root directory
        site_config: Site configuration
        builder: Builder to use; resolved from the site config when omitted

    Returns:
        The schema

    Raises:
        SchemaBuildError: If the builder fails or returns something unusable
    """
    if builder is None:
        builder = resolve_schema_builder(site_config)

    try:
        schema = builder(directory, site_config)
        if inspect.isawaitable(schema):
            schema = await schema
    except SchemaBuildError:
        raise
    except Exception as e:
        raise SchemaBuildError(f"Schema builder failed: {type(e).__name__}: {e}") from e

    if schema is None or not callable(getattr(schema, "execute", None)):
        raise SchemaBuildError(f"Schema builder returned an object without execute(): {schema!r}")

    return schema
