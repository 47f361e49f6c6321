"""``match_all``: matches every document."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..content import Token
from ..executable import MatchAllDocs
from .base import DEFAULT_BOOST, AbstractQuery

if TYPE_CHECKING:
    from ..content import ContentBuilder
    from ..context import QueryParseContext, QueryShardContext
    from ..executable import ExecutableQuery
    from ..stream import StreamInput, StreamOutput


class MatchAllQuery(AbstractQuery):
    NAME = "match_all"

    def _do_content(self, builder: ContentBuilder) -> None:
        builder.start_object(self.NAME)
        self._print_boost_and_query_name(builder)
        builder.end_object()

    @classmethod
    def from_content(cls, context: QueryParseContext) -> MatchAllQuery:
        parser = context.parser
        metadata: dict[str, Any] = {"boost": DEFAULT_BOOST, "name": None}

        field_name: str | None = None
        while (token := parser.next_token()) is not Token.END_OBJECT:
            if token is Token.FIELD_NAME:
                field_name = parser.current_name()
            elif token is None:
                raise cls._unexpected_token(context, token)
            elif context.is_deprecated_setting(field_name):
                parser.skip_children()
            elif token.is_value:
                if not cls._parse_boost_or_name(context, field_name, metadata):
                    raise cls._unsupported_field(context, field_name)
            else:
                raise cls._unexpected_token(context, token)

        return cls().set_boost(metadata["boost"]).set_query_name(metadata["name"])

    def _do_write_to(self, out: StreamOutput) -> None:
        pass

    @classmethod
    def _do_read_from(cls, stream: StreamInput) -> MatchAllQuery:
        return cls()

    def _do_to_query(self, context: QueryShardContext) -> ExecutableQuery | None:
        return MatchAllDocs()

    def _do_equals(self, other: Any) -> bool:
        return True

    def _do_hash(self) -> int:
        return 0
