"""
Field names with deprecated aliases.

A :class:`ParseField` holds the preferred name of a content field plus
the names it used to be known by.  :class:`ParseFieldMatcher` decides
what happens when a deprecated name shows up: lenient matching logs a
deprecation warning and accepts it, strict matching rejects it.
"""

from __future__ import annotations

import logging

from .exceptions import DeprecatedFieldError

deprecation_logger = logging.getLogger("search_query_dsl.deprecation")


def _camel_case(name: str) -> str:
    head, *rest = name.lstrip("_").split("_")
    prefix = name[: len(name) - len(name.lstrip("_"))]
    return prefix + head + "".join(part.capitalize() for part in rest)


class ParseField:
    """
    A named content field.

    The camelCase spelling of every name is accepted as a deprecated
    alias, e.g. ``mustNot`` for ``must_not``.
    """

    def __init__(self, name: str, *deprecated_names: str) -> None:
        self.name = name
        deprecated: list[str] = []
        for candidate in (*deprecated_names, _camel_case(name)):
            if candidate != name and candidate not in deprecated:
                deprecated.append(candidate)
            camel = _camel_case(candidate)
            if camel != name and camel not in deprecated:
                deprecated.append(camel)
        self.deprecated_names: tuple[str, ...] = tuple(deprecated)
        self.all_replaced_with: str | None = None
        self.all_deprecated: str | None = None

    def with_all_deprecated(self, reason: str) -> ParseField:
        """Return a copy whose every name, including the preferred one, is deprecated."""
        field = ParseField(self.name, *self.deprecated_names)
        field.all_deprecated = reason
        return field

    def with_all_replaced_with(self, replacement: str) -> ParseField:
        """Return a copy whose every name is deprecated in favour of *replacement*."""
        field = ParseField(self.name, *self.deprecated_names)
        field.all_replaced_with = replacement
        return field

    @property
    def all_names(self) -> tuple[str, ...]:
        return (self.name, *self.deprecated_names)

    def match(self, field_name: str | None, *, strict: bool = False) -> bool:
        """
        Return ``True`` if *field_name* is one of this field's names.

        Raises:
            DeprecatedFieldError: If the name is deprecated and *strict*
                is set.
        """
        if field_name is None:
            return False
        fully_deprecated = (
            self.all_replaced_with is not None or self.all_deprecated is not None
        )
        if field_name == self.name and not fully_deprecated:
            return True
        if field_name != self.name and field_name not in self.deprecated_names:
            return False

        if self.all_replaced_with is not None:
            message = (
                f"Deprecated field [{field_name}] used, "
                f"replaced by [{self.all_replaced_with}]"
            )
        elif self.all_deprecated is not None:
            message = f"Deprecated field [{field_name}] used, {self.all_deprecated}"
        else:
            message = (
                f"Deprecated field [{field_name}] used, expected [{self.name}] instead"
            )

        if strict:
            raise DeprecatedFieldError(field_name, message)
        deprecation_logger.warning(message)
        return True

    def __repr__(self) -> str:
        return f"ParseField({self.name!r})"


class ParseFieldMatcher:
    """Matches field names against :class:`ParseField` definitions."""

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict

    def match(self, field_name: str | None, field: ParseField) -> bool:
        return field.match(field_name, strict=self.strict)


# Shared by every query type
NAME_FIELD = ParseField("_name")
BOOST_FIELD = ParseField("boost")

CACHE_FIELD = ParseField("_cache").with_all_deprecated(
    "the query engine makes its own caching decisions"
)
CACHE_KEY_FIELD = ParseField("_cache_key", "_cacheKey").with_all_deprecated(
    "the query engine makes its own caching decisions"
)
