"""
Query DSL exception hierarchy.

All exceptions inherit from ``QueryDslError`` and provide
``to_dict()`` for API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class QueryDslError(Exception):
    """Base exception for all query DSL errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class ParsingError(QueryDslError):
    """Structured query content is malformed or not supported."""

    def __init__(self, message: str, location: str | None = None) -> None:
        self.message = message
        self.location = location
        super().__init__(message)

    def __str__(self) -> str:
        if self.location is None:
            return self.message
        return f"{self.message} (at {self.location})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "PARSING_ERROR",
            "message": self.message,
            "location": self.location,
        }


class UnknownQueryError(ParsingError):
    """
    No query type is registered under the requested clause name.

    Provides fuzzy-matched suggestions for likely intended clauses.
    """

    def __init__(
        self,
        name: str,
        known_names: list[str],
        location: str | None = None,
    ) -> None:
        self.name = name
        self.known_names = known_names
        self.suggestions = get_close_matches(name, known_names, n=3, cutoff=0.6)

        message = f"No query registered for [{name}]."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message, location)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNKNOWN_QUERY",
            "name": self.name,
            "location": self.location,
            "suggestions": self.suggestions,
            "known_queries": sorted(self.known_names),
        }


class DeprecatedFieldError(QueryDslError):
    """A deprecated field name was used while strict parsing is enabled."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)


class StreamError(QueryDslError):
    """Binary query stream is truncated or contains unknown data."""


class QueryRewriteError(QueryDslError):
    """Rewriting a query tree did not reach a fixed point."""

    def __init__(self, rounds: int) -> None:
        self.rounds = rounds
        super().__init__(f"Query rewrite did not converge after {rounds} rounds")


class QueryShardError(QueryDslError):
    """A query cannot be compiled against the shard context in its current form."""

    def __init__(self, query_name: str, message: str) -> None:
        self.query_name = query_name
        super().__init__(f"[{query_name}] {message}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "QUERY_SHARD_ERROR",
            "query": self.query_name,
            "message": str(self),
        }
