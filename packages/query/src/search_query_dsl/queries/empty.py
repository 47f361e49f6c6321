"""The query parsed from an empty clause object ``{}``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .base import AbstractQuery

if TYPE_CHECKING:
    from ..content import ContentBuilder
    from ..context import QueryShardContext
    from ..executable import ExecutableQuery
    from ..stream import StreamInput, StreamOutput


class EmptyQuery(AbstractQuery):
    """
    Placeholder for a clause that says nothing.

    It compiles to ``None`` so enclosing queries ignore it.  It has no
    clause name in content; ``NAME`` is only its wire name.
    """

    NAME = "empty_query"

    def _do_content(self, builder: ContentBuilder) -> None:
        pass

    def _do_write_to(self, out: StreamOutput) -> None:
        pass

    @classmethod
    def _do_read_from(cls, stream: StreamInput) -> EmptyQuery:
        return cls()

    def _do_to_query(self, context: QueryShardContext) -> ExecutableQuery | None:
        return None

    def _do_equals(self, other: Any) -> bool:
        return True

    def _do_hash(self) -> int:
        return 0
