"""
Base class for every node of the query tree.

:class:`AbstractQuery` owns the metadata shared by all node types
(``boost`` and ``query_name``) and implements the parts of each
operation that are the same everywhere:

* content output wraps the node body in ``{NAME: {...}}``;
* the binary codec writes the node payload, then boost, then name;
* ``rewrite`` carries boost and name over to a replacement node;
* ``to_query`` applies boost and registers named queries after the
  node has compiled itself;
* equality and hashing compare class, boost and name before the node's
  own fields.

Subclasses implement the ``_do_*`` hooks for their own fields.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from ..content import ContentBuilder, Token
from ..exceptions import ParsingError
from ..executable import Boosted
from ..parse_field import BOOST_FIELD, NAME_FIELD

if TYPE_CHECKING:
    from ..context import QueryParseContext, QueryRewriteContext, QueryShardContext
    from ..executable import ExecutableQuery
    from ..stream import StreamInput, StreamOutput

Q = TypeVar("Q", bound="AbstractQuery")

DEFAULT_BOOST = 1.0


class AbstractQuery(ABC):
    """
    A node of the query tree.

    Boost and name are set with the fluent setters while the tree is
    being built; once a tree is handed to the search layer it is
    treated as read-only and may be shared between requests.
    """

    NAME: ClassVar[str]

    def __init__(self) -> None:
        self._boost = DEFAULT_BOOST
        self._query_name: str | None = None

    # -- shared metadata -----------------------------------------------------

    @property
    def boost(self) -> float:
        return self._boost

    @property
    def query_name(self) -> str | None:
        return self._query_name

    def set_boost(self: Q, boost: float) -> Q:
        self._boost = float(boost)
        return self

    def set_query_name(self: Q, query_name: str | None) -> Q:
        self._query_name = query_name
        return self

    @property
    def writeable_name(self) -> str:
        """Name used to tag this node in binary streams."""
        return self.NAME

    # -- content -------------------------------------------------------------

    @classmethod
    def from_content(cls, context: QueryParseContext) -> AbstractQuery:
        """Parse the clause body the context's stream is positioned on."""
        raise NotImplementedError(f"[{cls.NAME}] has no content form")

    def to_content(self, builder: ContentBuilder) -> ContentBuilder:
        builder.start_object()
        self._do_content(builder)
        builder.end_object()
        return builder

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = self.to_content(ContentBuilder()).to_dict()
        return result

    def to_json(self, *, pretty: bool = False) -> str:
        return self.to_content(ContentBuilder()).to_json(pretty=pretty)

    @abstractmethod
    def _do_content(self, builder: ContentBuilder) -> None: ...

    def _print_boost_and_query_name(self, builder: ContentBuilder) -> None:
        builder.field(BOOST_FIELD.name, self._boost)
        if self._query_name is not None:
            builder.field(NAME_FIELD.name, self._query_name)

    @staticmethod
    def _parse_boost_or_name(
        context: QueryParseContext,
        field_name: str | None,
        metadata: dict[str, Any],
    ) -> bool:
        """Store ``boost`` / ``_name`` into *metadata*; ``False`` for other fields."""
        if context.match_field(field_name, BOOST_FIELD):
            metadata["boost"] = context.parser.float_value()
            return True
        if context.match_field(field_name, NAME_FIELD):
            parser = context.parser
            metadata["name"] = (
                None if parser.current_token is Token.VALUE_NULL else parser.text()
            )
            return True
        return False

    @classmethod
    def _unsupported_field(
        cls, context: QueryParseContext, field_name: str | None
    ) -> ParsingError:
        return ParsingError(
            f"[{cls.NAME}] query does not support [{field_name}]",
            context.parser.token_location(),
        )

    @classmethod
    def _unexpected_token(
        cls, context: QueryParseContext, token: Token | None
    ) -> ParsingError:
        if token is None:
            return ParsingError(
                f"[{cls.NAME}] unexpected end of content",
                context.parser.token_location(),
            )
        return ParsingError(
            f"[{cls.NAME}] unexpected token [{token.value}]",
            context.parser.token_location(),
        )

    # -- binary --------------------------------------------------------------

    def write_to(self, out: StreamOutput) -> None:
        self._do_write_to(out)
        out.write_double(self._boost)
        out.write_optional_string(self._query_name)

    @classmethod
    def read_from(cls, stream: StreamInput) -> AbstractQuery:
        query = cls._do_read_from(stream)
        query._boost = stream.read_double()
        query._query_name = stream.read_optional_string()
        return query

    @abstractmethod
    def _do_write_to(self, out: StreamOutput) -> None: ...

    @classmethod
    @abstractmethod
    def _do_read_from(cls, stream: StreamInput) -> AbstractQuery: ...

    # -- rewrite -------------------------------------------------------------

    def rewrite(self, context: QueryRewriteContext) -> AbstractQuery:
        """
        Rewrite this node once.

        Returns ``self`` when nothing changed.  A replacement node inherits
        this node's name and boost unless it already carries its own.
        """
        rewritten = self._do_rewrite(context)
        if rewritten is self:
            return self
        if self._query_name is not None and rewritten.query_name is None:
            rewritten.set_query_name(self._query_name)
        if self._boost != DEFAULT_BOOST and rewritten.boost == DEFAULT_BOOST:
            rewritten.set_boost(self._boost)
        return rewritten

    def _do_rewrite(self, context: QueryRewriteContext) -> AbstractQuery:
        return self

    # -- compile -------------------------------------------------------------

    def to_query(self, context: QueryShardContext) -> ExecutableQuery | None:
        """
        Compile into an executable query.

        ``None`` means the node constrains nothing; enclosing nodes drop it.
        """
        query = self._do_to_query(context)
        if query is not None:
            if self._boost != DEFAULT_BOOST:
                query = Boosted(query, self._boost)
            if self._query_name is not None:
                context.add_named_query(self._query_name, query)
        return query

    def to_filter(self, context: QueryShardContext) -> ExecutableQuery | None:
        """Compile in filter position (scoring is irrelevant)."""
        with context.filter_scope():
            return self.to_query(context)

    @abstractmethod
    def _do_to_query(self, context: QueryShardContext) -> ExecutableQuery | None: ...

    # -- identity ------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if other is self:
            return True
        if other is None or type(other) is not type(self):
            return False
        assert isinstance(other, AbstractQuery)
        return (
            self._boost == other._boost
            and self._query_name == other._query_name
            and self._do_equals(other)
        )

    def __hash__(self) -> int:
        return hash((type(self), self._boost, self._query_name, self._do_hash()))

    @abstractmethod
    def _do_equals(self, other: Any) -> bool: ...

    @abstractmethod
    def _do_hash(self) -> int: ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_json()})"
