"""
Query boundary: schema building and the schema-bound query runner.
"""

from .schema import build_schema, build_site_schema, resolve_schema_builder
from .runner import QueryHandOff, hand_off, make_graphql_runner

__all__ = [
    'build_schema',
    'build_site_schema',
    'resolve_schema_builder',
    'QueryHandOff',
    'hand_off',
    'make_graphql_runner',
]
