"""``term``: exact match of one field against one value."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..content import Token
from ..exceptions import ParsingError
from ..executable import TermMatch
from ..parse_field import ParseField
from .base import DEFAULT_BOOST, AbstractQuery

if TYPE_CHECKING:
    from ..content import ContentBuilder
    from ..context import QueryParseContext, QueryShardContext
    from ..executable import ExecutableQuery
    from ..stream import StreamInput, StreamOutput


class TermQuery(AbstractQuery):
    """
    Matches documents whose ``field`` holds exactly ``value``.

    Content forms::

        {"term": {"status": "active"}}
        {"term": {"status": {"value": "active", "boost": 2.0, "_name": "s"}}}
    """

    NAME = "term"
    VALUE_FIELD = ParseField("value", "term")

    def __init__(self, field: str, value: Any) -> None:
        if not field:
            raise ValueError("field name is null or empty")
        if value is None:
            raise ValueError("value cannot be null")
        super().__init__()
        self.field = field
        self.value = value

    def _do_content(self, builder: ContentBuilder) -> None:
        builder.start_object(self.NAME)
        builder.start_object(self.field)
        builder.field(self.VALUE_FIELD.name, self.value)
        self._print_boost_and_query_name(builder)
        builder.end_object()
        builder.end_object()

    @classmethod
    def from_content(cls, context: QueryParseContext) -> TermQuery:
        parser = context.parser
        field: str | None = None
        value: Any = None
        metadata: dict[str, Any] = {"boost": DEFAULT_BOOST, "name": None}

        current_name: str | None = None
        while (token := parser.next_token()) is not Token.END_OBJECT:
            if token is Token.FIELD_NAME:
                current_name = parser.current_name()
            elif token is None:
                raise cls._unexpected_token(context, token)
            elif context.is_deprecated_setting(current_name):
                parser.skip_children()
            elif token is Token.START_OBJECT:
                cls._check_single_field(context, field)
                field = current_name
                value = cls._parse_value_object(context, metadata)
            elif token.is_value:
                if cls._parse_boost_or_name(context, current_name, metadata):
                    continue
                cls._check_single_field(context, field)
                field = current_name
                value = parser.value()
            else:
                raise cls._unexpected_token(context, token)

        if field is None or value is None:
            raise ParsingError(
                f"[{cls.NAME}] requires a field and a value",
                parser.token_location(),
            )
        query = cls(field, value)
        query.set_boost(metadata["boost"])
        query.set_query_name(metadata["name"])
        return query

    @classmethod
    def _check_single_field(
        cls,
        context: QueryParseContext,
        field: str | None,
    ) -> None:
        if field is not None:
            raise ParsingError(
                f"[{cls.NAME}] query does not support different field names, "
                "use [bool] query instead",
                context.parser.token_location(),
            )

    @classmethod
    def _parse_value_object(
        cls, context: QueryParseContext, metadata: dict[str, Any]
    ) -> Any:
        parser = context.parser
        value: Any = None
        current_name: str | None = None
        while (token := parser.next_token()) is not Token.END_OBJECT:
            if token is Token.FIELD_NAME:
                current_name = parser.current_name()
            elif token is not None and token.is_value:
                if context.match_field(current_name, cls.VALUE_FIELD):
                    value = parser.value()
                elif not cls._parse_boost_or_name(context, current_name, metadata):
                    raise cls._unsupported_field(context, current_name)
            else:
                raise cls._unexpected_token(context, token)
        return value

    def _do_write_to(self, out: StreamOutput) -> None:
        out.write_string(self.field)
        out.write_generic_value(self.value)

    @classmethod
    def _do_read_from(cls, stream: StreamInput) -> TermQuery:
        return cls(stream.read_string(), stream.read_generic_value())

    def _do_to_query(self, context: QueryShardContext) -> ExecutableQuery | None:
        return TermMatch(self.field, self.value)

    def _do_equals(self, other: Any) -> bool:
        return bool(self.field == other.field and self.value == other.value)

    def _do_hash(self) -> int:
        return hash((self.field, self.value))
