"""Parse a complete query request body into a query tree."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .content import JsonContentParser
from .context import QueryParseContext
from .exceptions import ParsingError

if TYPE_CHECKING:
    from .queries.base import AbstractQuery
    from .registry import QueryRegistry
    from .settings import QueryParserSettings

logger = logging.getLogger("search_query_dsl.parser")


def parse_query(
    source: str | bytes | dict[str, Any],
    *,
    registry: QueryRegistry,
    settings: QueryParserSettings | None = None,
) -> AbstractQuery:
    """
    Parse exactly one query from *source*.

    Parameters
    ----------
    source:
        JSON text or an already-decoded dict such as
        ``{"constant_score": {"filter": {...}}}``.
    registry:
        Query types that may appear in the source.
    settings:
        Optional parser settings (strict deprecation handling).

    Raises:
        ParsingError: On malformed content, unknown clauses or trailing
            content.  No partial tree is ever returned.
    """
    if isinstance(source, dict):
        parser = JsonContentParser(source)
    else:
        parser = JsonContentParser.from_json(source)

    context = QueryParseContext(parser, registry, settings)
    query = context.parse_inner_query()
    if parser.next_token() is not None:
        raise ParsingError(
            "Unexpected content after the query", parser.token_location()
        )
    logger.debug("Parsed [%s] query", query.writeable_name)
    return query
