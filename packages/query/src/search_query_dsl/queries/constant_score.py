"""``constant_score``: run a clause as a filter and score every hit the same."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..content import Token
from ..exceptions import ParsingError
from ..executable import ConstantScore
from ..parse_field import ParseField
from .base import DEFAULT_BOOST, AbstractQuery

if TYPE_CHECKING:
    from ..content import ContentBuilder
    from ..context import QueryParseContext, QueryRewriteContext, QueryShardContext
    from ..executable import ExecutableQuery
    from ..stream import StreamInput, StreamOutput


class ConstantScoreQuery(AbstractQuery):
    """
    Wraps a clause and gives every document it matches a constant score
    equal to the query boost.

    The wrapped clause is owned by this node and never shared with
    another part of the tree.
    """

    NAME = "constant_score"
    INNER_QUERY_FIELD = ParseField("filter", "query")

    def __init__(self, inner: AbstractQuery) -> None:
        if inner is None:
            raise ValueError("inner clause [filter] cannot be null.")
        super().__init__()
        self._inner = inner

    @property
    def inner_query(self) -> AbstractQuery:
        """The clause wrapped by this query."""
        return self._inner

    # -- content -------------------------------------------------------------

    def _do_content(self, builder: ContentBuilder) -> None:
        builder.start_object(self.NAME)
        builder.field_name(self.INNER_QUERY_FIELD.name)
        self._inner.to_content(builder)
        self._print_boost_and_query_name(builder)
        builder.end_object()

    @classmethod
    def from_content(cls, context: QueryParseContext) -> ConstantScoreQuery:
        parser = context.parser
        inner: AbstractQuery | None = None
        metadata: dict[str, Any] = {"boost": DEFAULT_BOOST, "name": None}

        field_name: str | None = None
        while (token := parser.next_token()) is not Token.END_OBJECT:
            if token is Token.FIELD_NAME:
                field_name = parser.current_name()
            elif token is None:
                raise cls._unexpected_token(context, token)
            elif context.is_deprecated_setting(field_name):
                parser.skip_children()
            elif token is Token.START_OBJECT:
                if not context.match_field(field_name, cls.INNER_QUERY_FIELD):
                    raise cls._unsupported_field(context, field_name)
                if inner is not None:
                    raise ParsingError(
                        f"[{cls.NAME}] accepts only one 'filter' element.",
                        parser.token_location(),
                    )
                inner = context.parse_inner_query()
            elif token.is_value:
                if not cls._parse_boost_or_name(context, field_name, metadata):
                    raise cls._unsupported_field(context, field_name)
            else:
                raise cls._unexpected_token(context, token)

        if inner is None:
            raise ParsingError(
                f"[{cls.NAME}] requires a 'filter' element",
                parser.token_location(),
            )

        query = cls(inner)
        query.set_boost(metadata["boost"])
        query.set_query_name(metadata["name"])
        return query

    # -- binary --------------------------------------------------------------

    def _do_write_to(self, out: StreamOutput) -> None:
        out.write_query(self._inner)

    @classmethod
    def _do_read_from(cls, stream: StreamInput) -> ConstantScoreQuery:
        return cls(stream.read_query())

    # -- rewrite / compile ---------------------------------------------------

    def _do_rewrite(self, context: QueryRewriteContext) -> AbstractQuery:
        rewritten = self._inner.rewrite(context)
        if rewritten is self._inner:
            return self
        return ConstantScoreQuery(rewritten)

    def _do_to_query(self, context: QueryShardContext) -> ExecutableQuery | None:
        inner_filter = self._inner.to_filter(context)
        if inner_filter is None:
            # Nothing to wrap, let enclosing queries drop this clause too
            return None
        return ConstantScore(inner_filter)

    # -- identity ------------------------------------------------------------

    def _do_equals(self, other: Any) -> bool:
        return bool(self._inner == other._inner)

    def _do_hash(self) -> int:
        return hash(self._inner)
