"""Tests for the schema-bound query runner and the query hand-off."""

from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest

from site_forge.models.page import Page
from site_forge.models.registry import PageRegistry
from site_forge.query.runner import hand_off, make_graphql_runner


@pytest.mark.anyio
class TestGraphQLRunner:
    """Tests for make_graphql_runner."""

    async def test_context_bound_three_ways(self):
        """Test the context is passed as root, context and variables."""
        schema = Mock()
        schema.execute.return_value = {"data": {}}
        context = {"slug": "post-1"}

        result = await make_graphql_runner(schema)("query { x }", context)

        assert result == {"data": {}}
        schema.execute.assert_called_once_with(
            "query { x }",
            root_value=context,
            context_value=context,
            variable_values=context,
        )

    async def test_missing_context_is_empty(self):
        schema = Mock()

        await make_graphql_runner(schema)("{ x }")

        kwargs = schema.execute.call_args.kwargs
        assert kwargs["root_value"] == {}
        assert kwargs["variable_values"] == {}

    async def test_async_execute_awaited(self):
        schema = Mock()
        schema.execute = AsyncMock(return_value="done")

        assert await make_graphql_runner(schema)("{ x }") == "done"


@pytest.mark.anyio
class TestHandOff:
    """Tests for hand_off."""

    async def test_no_subsystem(self):
        """Test hand-off is a no-op without a query subsystem."""
        await hand_off(None, Path("."), PageRegistry(), AsyncMock())

    async def test_sync_subsystem_receives_registry(self):
        subsystem = Mock()
        pages = PageRegistry([Page(path="a", component="a.js")])
        graphql = AsyncMock()

        await hand_off(subsystem, Path("/site"), pages, graphql)

        subsystem.assert_called_once_with(Path("/site"), pages, graphql)

    async def test_async_subsystem_awaited(self):
        subsystem = AsyncMock()

        await hand_off(subsystem, Path("/site"), PageRegistry(), AsyncMock())

        subsystem.assert_awaited_once()
