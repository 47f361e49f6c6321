"""
Executable query primitives.

These are the low-level objects query nodes compile into.  They are
plain immutable values: the search engine that runs them is outside
this package, so they only carry structure, equality and a readable
string form.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ExecutableQuery:
    """Marker base for compiled queries."""

    __slots__ = ()


@dataclass(frozen=True)
class MatchAllDocs(ExecutableQuery):
    def __str__(self) -> str:
        return "*:*"


@dataclass(frozen=True)
class MatchNoDocs(ExecutableQuery):
    reason: str = field(default="", compare=False)

    def __str__(self) -> str:
        return f'MatchNoDocs("{self.reason}")'


@dataclass(frozen=True)
class TermMatch(ExecutableQuery):
    field: str
    value: Any

    def __str__(self) -> str:
        return f"{self.field}:{self.value}"


class Occur(str, Enum):
    """How a clause participates in a boolean query."""

    MUST = "+"
    FILTER = "#"
    SHOULD = ""
    MUST_NOT = "-"


@dataclass(frozen=True)
class BooleanClause:
    query: ExecutableQuery
    occur: Occur

    def __str__(self) -> str:
        return f"{self.occur.value}{self.query}"


@dataclass(frozen=True)
class BooleanMatch(ExecutableQuery):
    clauses: tuple[BooleanClause, ...]
    minimum_should_match: int = 0

    def __str__(self) -> str:
        body = " ".join(str(c) for c in self.clauses)
        if self.minimum_should_match:
            return f"({body})~{self.minimum_should_match}"
        return f"({body})"


@dataclass(frozen=True)
class ConstantScore(ExecutableQuery):
    """Matches what ``query`` matches, every hit scoring the same constant."""

    query: ExecutableQuery

    def __str__(self) -> str:
        return f"ConstantScore({self.query})"


@dataclass(frozen=True)
class Boosted(ExecutableQuery):
    query: ExecutableQuery
    boost: float

    def __str__(self) -> str:
        return f"({self.query})^{self.boost}"
