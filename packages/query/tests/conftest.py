"""Shared fixtures for query DSL tests."""

from __future__ import annotations

import pytest

from search_query_dsl import QueryParserSettings, QueryShardContext
from search_query_dsl.queries import build_default_registry


@pytest.fixture
def registry():
    """Registry with every built-in query type."""
    return build_default_registry()


@pytest.fixture
def strict_settings() -> QueryParserSettings:
    return QueryParserSettings(strict=True)


@pytest.fixture
def shard_context(registry) -> QueryShardContext:
    return QueryShardContext(registry, index_name="test-index")
