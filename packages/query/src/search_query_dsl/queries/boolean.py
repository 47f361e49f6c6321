"""``bool``: combine clauses with must / filter / should / must_not."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..content import Token
from ..exceptions import ParsingError
from ..executable import BooleanClause, BooleanMatch, MatchAllDocs, Occur
from ..parse_field import ParseField
from .base import DEFAULT_BOOST, AbstractQuery
from .match_all import MatchAllQuery

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..content import ContentBuilder
    from ..context import QueryParseContext, QueryRewriteContext, QueryShardContext
    from ..executable import ExecutableQuery
    from ..stream import StreamInput, StreamOutput

MUST_FIELD = ParseField("must")
FILTER_FIELD = ParseField("filter")
SHOULD_FIELD = ParseField("should")
MUST_NOT_FIELD = ParseField("must_not")
MINIMUM_SHOULD_MATCH_FIELD = ParseField("minimum_should_match")

_CLAUSE_FIELDS: tuple[tuple[str, ParseField], ...] = (
    ("must", MUST_FIELD),
    ("filter", FILTER_FIELD),
    ("should", SHOULD_FIELD),
    ("must_not", MUST_NOT_FIELD),
)


class BoolQuery(AbstractQuery):
    """
    Boolean combination of clauses.

    ``must`` and ``should`` clauses contribute to scoring; ``filter`` and
    ``must_not`` clauses are compiled in filter position.  Clauses that
    compile to nothing are dropped, and a query left without clauses
    matches everything.
    """

    NAME = "bool"

    def __init__(self) -> None:
        super().__init__()
        self.must_clauses: list[AbstractQuery] = []
        self.filter_clauses: list[AbstractQuery] = []
        self.should_clauses: list[AbstractQuery] = []
        self.must_not_clauses: list[AbstractQuery] = []
        self.minimum_should_match: int | None = None

    # -- building ------------------------------------------------------------

    def must(self, query: AbstractQuery) -> BoolQuery:
        self.must_clauses.append(_require(query))
        return self

    def filter(self, query: AbstractQuery) -> BoolQuery:
        self.filter_clauses.append(_require(query))
        return self

    def should(self, query: AbstractQuery) -> BoolQuery:
        self.should_clauses.append(_require(query))
        return self

    def must_not(self, query: AbstractQuery) -> BoolQuery:
        self.must_not_clauses.append(_require(query))
        return self

    def set_minimum_should_match(self, value: int | None) -> BoolQuery:
        self.minimum_should_match = value
        return self

    def has_clauses(self) -> bool:
        return any(self._clause_lists())

    def _clause_lists(self) -> tuple[list[AbstractQuery], ...]:
        return (
            self.must_clauses,
            self.filter_clauses,
            self.should_clauses,
            self.must_not_clauses,
        )

    # -- content -------------------------------------------------------------

    def _do_content(self, builder: ContentBuilder) -> None:
        builder.start_object(self.NAME)
        for (key, _), clauses in zip(_CLAUSE_FIELDS, self._clause_lists()):
            if not clauses:
                continue
            builder.start_array(key)
            for clause in clauses:
                clause.to_content(builder)
            builder.end_array()
        if self.minimum_should_match is not None:
            builder.field(MINIMUM_SHOULD_MATCH_FIELD.name, self.minimum_should_match)
        self._print_boost_and_query_name(builder)
        builder.end_object()

    @classmethod
    def from_content(cls, context: QueryParseContext) -> BoolQuery:
        parser = context.parser
        query = cls()
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
                target = cls._clause_list(context, query, field_name)
                target.append(context.parse_inner_query())
            elif token is Token.START_ARRAY:
                target = cls._clause_list(context, query, field_name)
                while (token := parser.next_token()) is not Token.END_ARRAY:
                    if token is not Token.START_OBJECT:
                        raise cls._unexpected_token(context, token)
                    target.append(context.parse_inner_query())
            elif token.is_value:
                if context.match_field(field_name, MINIMUM_SHOULD_MATCH_FIELD):
                    value = parser.int_value()
                    if not -(2**31) <= value < 2**31:
                        raise ParsingError(
                            f"[{cls.NAME}] minimum_should_match [{value}] "
                            "is out of range",
                            parser.token_location(),
                        )
                    query.minimum_should_match = value
                elif not cls._parse_boost_or_name(context, field_name, metadata):
                    raise cls._unsupported_field(context, field_name)
            else:
                raise cls._unexpected_token(context, token)

        query.set_boost(metadata["boost"])
        query.set_query_name(metadata["name"])
        return query

    @classmethod
    def _clause_list(
        cls,
        context: QueryParseContext,
        query: BoolQuery,
        field_name: str | None,
    ) -> list[AbstractQuery]:
        for (_, field), clauses in zip(_CLAUSE_FIELDS, query._clause_lists()):
            if context.match_field(field_name, field):
                return clauses
        raise cls._unsupported_field(context, field_name)

    # -- binary --------------------------------------------------------------

    def _do_write_to(self, out: StreamOutput) -> None:
        for clauses in self._clause_lists():
            out.write_query_list(clauses)
        out.write_bool(self.minimum_should_match is not None)
        if self.minimum_should_match is not None:
            out.write_int(self.minimum_should_match)

    @classmethod
    def _do_read_from(cls, stream: StreamInput) -> BoolQuery:
        query = cls()
        for clauses in query._clause_lists():
            clauses.extend(stream.read_query_list())
        if stream.read_bool():
            query.minimum_should_match = stream.read_int()
        return query

    # -- rewrite -------------------------------------------------------------

    def _do_rewrite(self, context: QueryRewriteContext) -> AbstractQuery:
        if not self.has_clauses():
            return MatchAllQuery().set_boost(self.boost).set_query_name(self.query_name)

        rewritten = [
            [clause.rewrite(context) for clause in clauses]
            for clauses in self._clause_lists()
        ]
        changed = any(
            new is not old
            for new_clauses, old_clauses in zip(rewritten, self._clause_lists())
            for new, old in zip(new_clauses, old_clauses)
        )
        if not changed:
            return self

        query = BoolQuery()
        for target, clauses in zip(query._clause_lists(), rewritten):
            target.extend(clauses)
        query.minimum_should_match = self.minimum_should_match
        return query.set_boost(self.boost).set_query_name(self.query_name)

    # -- compile -------------------------------------------------------------

    def _do_to_query(self, context: QueryShardContext) -> ExecutableQuery | None:
        clauses: list[BooleanClause] = []
        self._add_clauses(context, clauses, self.must_clauses, Occur.MUST)
        self._add_clauses(context, clauses, self.filter_clauses, Occur.FILTER)
        self._add_clauses(context, clauses, self.should_clauses, Occur.SHOULD)
        self._add_clauses(context, clauses, self.must_not_clauses, Occur.MUST_NOT)
        if not clauses:
            return MatchAllDocs()
        return BooleanMatch(tuple(clauses), self.minimum_should_match or 0)

    @staticmethod
    def _add_clauses(
        context: QueryShardContext,
        target: list[BooleanClause],
        clauses: Sequence[AbstractQuery],
        occur: Occur,
    ) -> None:
        for clause in clauses:
            if occur in (Occur.FILTER, Occur.MUST_NOT):
                compiled = clause.to_filter(context)
            else:
                compiled = clause.to_query(context)
            if compiled is not None:
                target.append(BooleanClause(compiled, occur))

    # -- identity ------------------------------------------------------------

    def _do_equals(self, other: Any) -> bool:
        return bool(
            self._clause_lists() == other._clause_lists()
            and self.minimum_should_match == other.minimum_should_match
        )

    def _do_hash(self) -> int:
        return hash(
            (
                tuple(tuple(clauses) for clauses in self._clause_lists()),
                self.minimum_should_match,
            )
        )


def _require(query: AbstractQuery) -> AbstractQuery:
    if query is None:
        raise ValueError("inner bool query clause cannot be null")
    return query
