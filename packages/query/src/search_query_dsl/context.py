"""
Contexts handed to query nodes while parsing, rewriting and compiling.

* :class:`QueryParseContext` wraps one content token stream.
* :class:`QueryRewriteContext` carries what rewriting needs to build new
  nodes (e.g. parsing embedded query sources).
* :class:`QueryShardContext` adds the request-scoped state used when
  compiling nodes into executable queries.

Contexts are request-scoped and never shared between threads.
"""

from __future__ import annotations

import contextlib
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .content import Token
from .exceptions import DeprecatedFieldError, ParsingError, UnknownQueryError
from .executable import ExecutableQuery, MatchNoDocs
from .parse_field import CACHE_FIELD, CACHE_KEY_FIELD, ParseFieldMatcher
from .queries.empty import EmptyQuery
from .rewrite import rewrite_query
from .settings import QueryParserSettings

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .content import ContentParser
    from .parse_field import ParseField
    from .queries.base import AbstractQuery
    from .registry import QueryRegistry

logger = logging.getLogger("search_query_dsl.parser")
shard_logger = logging.getLogger("search_query_dsl.shard")

_MALFORMED = "[_na] query malformed"


class QueryParseContext:
    """
    Parsing state for one content document.

    Query parsers receive this context positioned on the start of their
    clause body and pull tokens from :attr:`parser`.
    """

    def __init__(
        self,
        parser: ContentParser,
        registry: QueryRegistry,
        settings: QueryParserSettings | None = None,
    ) -> None:
        self.parser = parser
        self.registry = registry
        self.settings = settings if settings is not None else QueryParserSettings()
        self.parse_field_matcher = ParseFieldMatcher(strict=self.settings.strict)

    def match_field(self, field_name: str | None, field: ParseField) -> bool:
        """
        Match *field_name* against *field* using the configured strictness.

        Raises:
            ParsingError: If a deprecated name is used in strict mode.
        """
        try:
            return self.parse_field_matcher.match(field_name, field)
        except DeprecatedFieldError as exc:
            raise ParsingError(str(exc), self.parser.token_location()) from exc

    def is_deprecated_setting(self, field_name: str | None) -> bool:
        """Return ``True`` for legacy settings that parsers skip instead of rejecting."""
        return self.match_field(field_name, CACHE_FIELD) or self.match_field(
            field_name, CACHE_KEY_FIELD
        )

    def parse_inner_query(self) -> AbstractQuery:
        """
        Parse one ``{"<clause>": {...}}`` object from the stream.

        An empty object ``{}`` yields an :class:`EmptyQuery`.  On return the
        stream is positioned on the closing token of the wrapping object.
        """
        parser = self.parser
        if parser.current_token is not Token.START_OBJECT:
            token = parser.next_token()
            if token is not Token.START_OBJECT:
                raise ParsingError(
                    f"{_MALFORMED}, must start with start_object",
                    parser.token_location(),
                )

        token = parser.next_token()
        if token is Token.END_OBJECT:
            logger.debug("Empty query clause at %s", parser.token_location())
            return EmptyQuery()
        if token is not Token.FIELD_NAME:
            raise ParsingError(
                f"{_MALFORMED}, no field after start_object",
                parser.token_location(),
            )

        query_name = parser.current_name() or ""
        token = parser.next_token()
        if token not in (Token.START_OBJECT, Token.START_ARRAY):
            raise ParsingError(
                f"[{query_name}] query malformed, no start_object after query name",
                parser.token_location(),
            )

        query_parser = self.registry.get_parser(query_name)
        if query_parser is None:
            raise UnknownQueryError(
                query_name, self.registry.names, parser.token_location()
            )
        result = query_parser(self)

        # Move from the clause's closing token to the wrapping object's one
        if parser.current_token in (Token.END_OBJECT, Token.END_ARRAY):
            parser.next_token()
        token = parser.current_token
        if token is not Token.END_OBJECT:
            found = token.value if token is not None else "end of content"
            raise ParsingError(
                f"[{query_name}] malformed query, expected [END_OBJECT] "
                f"but found [{found}]",
                parser.token_location(),
            )
        return result


class QueryRewriteContext:
    """State available to ``rewrite`` implementations."""

    def __init__(
        self,
        registry: QueryRegistry,
        settings: QueryParserSettings | None = None,
    ) -> None:
        self.registry = registry
        self.settings = settings if settings is not None else QueryParserSettings()

    def new_parse_context(self, parser: ContentParser) -> QueryParseContext:
        """Create a parse context for content embedded in a query."""
        return QueryParseContext(parser, self.registry, self.settings)


@dataclass(frozen=True)
class ParsedQuery:
    """Result of compiling a query tree against a shard."""

    query: ExecutableQuery
    named_queries: dict[str, ExecutableQuery] = field(default_factory=dict)


class QueryShardContext(QueryRewriteContext):
    """
    Request-scoped compilation state.

    Attributes:
        index_name: Name of the index the query runs against.
        is_filter: ``True`` while compiling a clause in filter position.
    """

    def __init__(
        self,
        registry: QueryRegistry,
        settings: QueryParserSettings | None = None,
        *,
        index_name: str = "_na_",
    ) -> None:
        super().__init__(registry, settings)
        self.index_name = index_name
        self.is_filter = False
        self._named_queries: dict[str, ExecutableQuery] = {}

    @contextlib.contextmanager
    def filter_scope(self) -> Iterator[None]:
        """Compile in filter position for the duration of the block."""
        previous = self.is_filter
        self.is_filter = True
        try:
            yield
        finally:
            self.is_filter = previous

    def add_named_query(self, name: str, query: ExecutableQuery) -> None:
        self._named_queries[name] = query

    def copy_named_queries(self) -> dict[str, ExecutableQuery]:
        return dict(self._named_queries)

    def compile(self, query: AbstractQuery) -> ParsedQuery:
        """
        Rewrite *query* to a fixed point and compile it.

        A tree that compiles to nothing matches no documents.
        """
        rewritten = rewrite_query(query, self)
        executable = rewritten.to_query(self)
        if executable is None:
            shard_logger.debug(
                "Query compiled to nothing on [%s], matching no documents",
                self.index_name,
            )
            executable = MatchNoDocs("No query left after rewrite.")
        return ParsedQuery(executable, self.copy_named_queries())
