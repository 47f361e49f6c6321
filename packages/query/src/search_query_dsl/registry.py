"""
QueryRegistry: maps clause and wire names to query factories.

Used both by the content parser (clause name → ``from_content``) and by
:class:`~search_query_dsl.stream.StreamInput` (wire name → ``read_from``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable

    from .context import QueryParseContext
    from .queries.base import AbstractQuery
    from .stream import StreamInput

    ContentFactory = Callable[[QueryParseContext], AbstractQuery]
    StreamFactory = Callable[[StreamInput], AbstractQuery]


class RegistrableQuery(Protocol):
    """A query class that can register itself by name."""

    NAME: str

    @classmethod
    def from_content(cls, context: QueryParseContext) -> Any: ...

    @classmethod
    def read_from(cls, stream: StreamInput) -> Any: ...


@dataclass(frozen=True)
class QueryEntry:
    """
    Registration for one query type.

    Attributes:
        name: Clause name in content and wire name in binary streams.
        reader: Decodes the query from a binary stream.
        parser: Parses the query body from content.  ``None`` for types
            that have no clause of their own.
    """

    name: str
    reader: StreamFactory
    parser: ContentFactory | None = None


class QueryRegistry:
    """
    Registry of query types keyed by name.

    Usage::

        registry = QueryRegistry()
        registry.register_query(TermQuery)

        parser = registry.get_parser("term")
        reader = registry.get_reader("term")
    """

    def __init__(self) -> None:
        self._entries: dict[str, QueryEntry] = {}

    # -- registration --------------------------------------------------------

    def register(
        self,
        name: str,
        *,
        reader: StreamFactory,
        parser: ContentFactory | None = None,
    ) -> None:
        """Register factories under *name*, replacing any previous entry."""
        self._entries[name] = QueryEntry(name=name, reader=reader, parser=parser)

    def register_query(self, query_class: type[RegistrableQuery]) -> None:
        """Register a query class under its ``NAME``."""
        self.register(
            query_class.NAME,
            reader=query_class.read_from,
            parser=query_class.from_content,
        )

    def unregister(self, name: str) -> None:
        self._entries.pop(name, None)

    # -- look-up -------------------------------------------------------------

    def get_parser(self, name: str) -> ContentFactory | None:
        entry = self._entries.get(name)
        return entry.parser if entry is not None else None

    def get_reader(self, name: str) -> StreamFactory | None:
        entry = self._entries.get(name)
        return entry.reader if entry is not None else None

    def has(self, name: str) -> bool:
        return name in self._entries

    @property
    def names(self) -> list[str]:
        """Clause names that can appear in content."""
        return [e.name for e in self._entries.values() if e.parser is not None]

    @property
    def wire_names(self) -> list[str]:
        return list(self._entries.keys())
