"""
``wrapper``: a query supplied as an opaque, base64 encoded JSON source.

The embedded source is only parsed during rewrite, so a wrapper must be
rewritten before it can be compiled::

    {"wrapper": {"query": "eyJ0ZXJtIjogeyJ1c2VyIjogImtpbWNoeSJ9fQ=="}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..content import JsonContentParser, Token
from ..exceptions import ParsingError, QueryShardError, StreamError
from ..parse_field import ParseField
from .base import DEFAULT_BOOST, AbstractQuery
from .boolean import BoolQuery

if TYPE_CHECKING:
    from ..content import ContentBuilder
    from ..context import QueryParseContext, QueryRewriteContext, QueryShardContext
    from ..executable import ExecutableQuery
    from ..stream import StreamInput, StreamOutput

QUERY_FIELD = ParseField("query")


class WrapperQuery(AbstractQuery):
    NAME = "wrapper"

    def __init__(self, source: bytes | str) -> None:
        if isinstance(source, str):
            source = source.encode("utf-8")
        if not source:
            raise ValueError("query source string must not be empty")
        super().__init__()
        self.source = source

    def _do_content(self, builder: ContentBuilder) -> None:
        builder.start_object(self.NAME)
        builder.field(QUERY_FIELD.name, self.source)
        self._print_boost_and_query_name(builder)
        builder.end_object()

    @classmethod
    def from_content(cls, context: QueryParseContext) -> WrapperQuery:
        parser = context.parser
        source: bytes | None = None
        metadata: dict[str, Any] = {"boost": DEFAULT_BOOST, "name": None}

        field_name: str | None = None
        while (token := parser.next_token()) is not Token.END_OBJECT:
            if token is Token.FIELD_NAME:
                field_name = parser.current_name()
            elif token is not None and token.is_value:
                if context.match_field(field_name, QUERY_FIELD):
                    source = parser.binary_value()
                elif not cls._parse_boost_or_name(context, field_name, metadata):
                    raise cls._unsupported_field(context, field_name)
            else:
                raise cls._unexpected_token(context, token)

        if not source:
            raise ParsingError(
                f"[{cls.NAME}] query text missing", parser.token_location()
            )
        query = cls(source)
        query.set_boost(metadata["boost"])
        query.set_query_name(metadata["name"])
        return query

    def _do_write_to(self, out: StreamOutput) -> None:
        out.write_bytes(self.source)

    @classmethod
    def _do_read_from(cls, stream: StreamInput) -> WrapperQuery:
        source = stream.read_bytes()
        if not source:
            raise StreamError(f"[{cls.NAME}] query source is empty")
        return cls(source)

    def _do_rewrite(self, context: QueryRewriteContext) -> AbstractQuery:
        parser = JsonContentParser.from_json(self.source)
        query = context.new_parse_context(parser).parse_inner_query()
        if self.boost != DEFAULT_BOOST or self.query_name is not None:
            # Keep the embedded query's own boost and name intact
            return BoolQuery().must(query)
        return query

    def _do_to_query(self, context: QueryShardContext) -> ExecutableQuery | None:
        raise QueryShardError(self.NAME, "this query must be rewritten first")

    def _do_equals(self, other: Any) -> bool:
        return bool(self.source == other.source)

    def _do_hash(self) -> int:
        return hash(self.source)
