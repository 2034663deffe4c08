"""Tests for schema building."""

import sys
import types

import pytest

from site_forge.config.site import SiteConfig
from site_forge.exceptions import SchemaBuildError
from site_forge.query.runner import make_graphql_runner
from site_forge.query.schema import build_schema, build_site_schema, resolve_schema_builder


@pytest.fixture
def builder_module(monkeypatch):
    """Register an in-memory module holding schema builders."""
    module = types.ModuleType("sf_test_schema_builders")

    class FakeSchema:
        def execute(self, query, root_value=None, context_value=None, variable_values=None):
            return {"query": query}

    def build(directory, site_config):
        return FakeSchema()

    async def build_async(directory, site_config):
        return FakeSchema()

    module.build = build
    module.build_async = build_async
    module.not_callable = 42
    monkeypatch.setitem(sys.modules, module.__name__, module)
    return module


class TestResolveSchemaBuilder:
    """Tests for resolve_schema_builder."""

    def test_default_builder(self):
        assert resolve_schema_builder(SiteConfig()) is build_site_schema

    def test_configured_builder(self, builder_module):
        site_config = SiteConfig(schema_builder="sf_test_schema_builders:build")
        assert resolve_schema_builder(site_config) is builder_module.build

    def test_missing_module(self):
        site_config = SiteConfig(schema_builder="sf_no_such_module:build")

        with pytest.raises(SchemaBuildError):
            resolve_schema_builder(site_config)

    def test_not_callable(self, builder_module):
        site_config = SiteConfig(schema_builder="sf_test_schema_builders:not_callable")

        with pytest.raises(SchemaBuildError):
            resolve_schema_builder(site_config)


@pytest.mark.anyio
class TestBuildSchema:
    """Tests for build_schema."""

    async def test_default_schema_answers_site_query(self, tmp_path):
        """Test the default schema exposes site metadata."""
        site_config = SiteConfig(site_metadata={"title": "My Site", "author": "someone"})
        schema = await build_schema(tmp_path, site_config)

        result = await make_graphql_runner(schema)("{ site { title siteMetadata } }")

        assert result.errors is None
        assert result.data["site"]["title"] == "My Site"
        assert result.data["site"]["siteMetadata"] == {"title": "My Site", "author": "someone"}

    async def test_async_builder(self, tmp_path, builder_module):
        site_config = SiteConfig(schema_builder="sf_test_schema_builders:build_async")

        schema = await build_schema(tmp_path, site_config)

        assert schema.execute("{ x }") == {"query": "{ x }"}

    async def test_explicit_builder_wins(self, tmp_path, builder_module):
        site_config = SiteConfig(schema_builder="sf_no_such_module:build")

        schema = await build_schema(tmp_path, site_config, builder=builder_module.build)

        assert hasattr(schema, "execute")

    async def test_builder_failure_wrapped(self, tmp_path):
        """Test builder exceptions become SchemaBuildError."""

        def broken(directory, site_config):
            raise RuntimeError("no schema today")

        with pytest.raises(SchemaBuildError) as exc_info:
            await build_schema(tmp_path, SiteConfig(), builder=broken)

        assert "no schema today" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    async def test_builder_result_without_execute(self, tmp_path):
        with pytest.raises(SchemaBuildError):
            await build_schema(tmp_path, SiteConfig(), builder=lambda directory, site_config: object())
