"""Parser and rewrite settings."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class QueryParserSettings(BaseModel):
    """
    Immutable settings shared by parsing and rewriting.

    Attributes:
        strict: If ``True``, deprecated field names are rejected with a
            parsing error instead of being accepted with a deprecation
            warning.
        max_rewrite_rounds: Upper bound on rewrite rounds before a tree is
            considered non-converging.
    """

    model_config = ConfigDict(frozen=True)

    strict: bool = False
    max_rewrite_rounds: int = Field(default=16, ge=1)
