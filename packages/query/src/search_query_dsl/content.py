"""
Structured content token streams.

Query parsers never look at raw JSON.  They pull tokens one at a time
from a :class:`ContentParser` and write themselves back out through a
:class:`ContentBuilder`.  :class:`JsonContentParser` is the token stream
used for JSON requests; token locations are dot paths such as
``<root>.constant_score.filter``.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from .exceptions import ParsingError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

ROOT_LOCATION = "<root>"
END_LOCATION = "<end>"


class Token(str, Enum):
    """Token kinds produced by a content stream."""

    START_OBJECT = "START_OBJECT"
    END_OBJECT = "END_OBJECT"
    START_ARRAY = "START_ARRAY"
    END_ARRAY = "END_ARRAY"
    FIELD_NAME = "FIELD_NAME"
    VALUE_STRING = "VALUE_STRING"
    VALUE_NUMBER = "VALUE_NUMBER"
    VALUE_BOOLEAN = "VALUE_BOOLEAN"
    VALUE_NULL = "VALUE_NULL"

    @property
    def is_value(self) -> bool:
        return self in _VALUE_TOKENS


_VALUE_TOKENS = frozenset(
    {Token.VALUE_STRING, Token.VALUE_NUMBER, Token.VALUE_BOOLEAN, Token.VALUE_NULL}
)


@runtime_checkable
class ContentParser(Protocol):
    """Pull-style token stream over one structured document."""

    @property
    def current_token(self) -> Token | None: ...

    def next_token(self) -> Token | None:
        """Advance and return the new current token, or ``None`` at the end."""
        ...

    def current_name(self) -> str | None: ...

    def text(self) -> str: ...

    def value(self) -> Any: ...

    def float_value(self) -> float: ...

    def int_value(self) -> int: ...

    def bool_value(self) -> bool: ...

    def binary_value(self) -> bytes: ...

    def token_location(self) -> str: ...

    def skip_children(self) -> None:
        """If positioned on a start token, advance to its matching end token."""
        ...


class _ObjectPairs(list[tuple[str, Any]]):
    """JSON object decoded as ordered pairs, so repeated keys stay visible."""


@dataclass(frozen=True)
class _Event:
    token: Token
    name: str | None
    value: Any
    location: str


def _value_token(value: Any) -> Token:
    if value is None:
        return Token.VALUE_NULL
    if isinstance(value, bool):
        return Token.VALUE_BOOLEAN
    if isinstance(value, int | float):
        return Token.VALUE_NUMBER
    return Token.VALUE_STRING


def _walk(value: Any, location: str, name: str | None) -> Iterator[_Event]:
    if isinstance(value, dict | _ObjectPairs):
        pairs: Iterable[tuple[str, Any]] = (
            value.items() if isinstance(value, dict) else value
        )
        yield _Event(Token.START_OBJECT, name, None, location)
        for key, child in pairs:
            child_location = f"{location}.{key}"
            yield _Event(Token.FIELD_NAME, key, None, child_location)
            yield from _walk(child, child_location, key)
        yield _Event(Token.END_OBJECT, name, None, location)
    elif isinstance(value, list | tuple):
        yield _Event(Token.START_ARRAY, name, None, location)
        for idx, child in enumerate(value):
            yield from _walk(child, f"{location}[{idx}]", name)
        yield _Event(Token.END_ARRAY, name, None, location)
    else:
        yield _Event(_value_token(value), name, value, location)


class JsonContentParser:
    """
    Token stream over a JSON document.

    Build from already-decoded data (``JsonContentParser(data)``) or from
    text (``JsonContentParser.from_json(text)``).  Decoding from text
    keeps repeated object keys, so duplicate clauses are reported
    instead of being silently collapsed.
    """

    def __init__(self, data: Any) -> None:
        self._events: list[_Event] = list(_walk(data, ROOT_LOCATION, None))
        self._pos = -1

    @classmethod
    def from_json(cls, text: str | bytes) -> JsonContentParser:
        try:
            data = json.loads(text, object_pairs_hook=_ObjectPairs)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ParsingError(f"Invalid JSON: {exc}", ROOT_LOCATION) from exc
        return cls(data)

    # -- navigation ----------------------------------------------------------

    @property
    def current_token(self) -> Token | None:
        event = self._current()
        return event.token if event is not None else None

    def next_token(self) -> Token | None:
        if self._pos < len(self._events):
            self._pos += 1
        return self.current_token

    def skip_children(self) -> None:
        token = self.current_token
        if token not in (Token.START_OBJECT, Token.START_ARRAY):
            return
        depth = 1
        while depth:
            token = self.next_token()
            if token is None:
                raise ParsingError("Unexpected end of content", END_LOCATION)
            if token in (Token.START_OBJECT, Token.START_ARRAY):
                depth += 1
            elif token in (Token.END_OBJECT, Token.END_ARRAY):
                depth -= 1

    def token_location(self) -> str:
        event = self._current()
        return event.location if event is not None else END_LOCATION

    # -- current value -------------------------------------------------------

    def current_name(self) -> str | None:
        event = self._current()
        return event.name if event is not None else None

    def value(self) -> Any:
        return self._require_value().value

    def text(self) -> str:
        raw = self._require_value().value
        if isinstance(raw, bool):
            return "true" if raw else "false"
        return str(raw)

    def float_value(self) -> float:
        raw = self._require_value().value
        if isinstance(raw, int | float) and not isinstance(raw, bool):
            return float(raw)
        if isinstance(raw, str):
            try:
                return float(raw)
            except ValueError:
                pass
        raise ParsingError(
            f"[{self.current_name()}] expected a number, got [{raw!r}]",
            self.token_location(),
        )

    def int_value(self) -> int:
        raw = self._require_value().value
        if isinstance(raw, int) and not isinstance(raw, bool):
            return raw
        if isinstance(raw, float) and raw.is_integer():
            return int(raw)
        if isinstance(raw, str):
            try:
                return int(raw)
            except ValueError:
                pass
        raise ParsingError(
            f"[{self.current_name()}] expected an integer, got [{raw!r}]",
            self.token_location(),
        )

    def bool_value(self) -> bool:
        raw = self._require_value().value
        if isinstance(raw, bool):
            return raw
        if raw in ("true", "false"):
            return raw == "true"
        raise ParsingError(
            f"[{self.current_name()}] expected a boolean, got [{raw!r}]",
            self.token_location(),
        )

    def binary_value(self) -> bytes:
        raw = self._require_value().value
        if isinstance(raw, str):
            try:
                return base64.b64decode(raw, validate=True)
            except (binascii.Error, ValueError):
                pass
        raise ParsingError(
            f"[{self.current_name()}] expected base64 encoded content",
            self.token_location(),
        )

    # -- internals -----------------------------------------------------------

    def _current(self) -> _Event | None:
        if 0 <= self._pos < len(self._events):
            return self._events[self._pos]
        return None

    def _require_value(self) -> _Event:
        event = self._current()
        if event is None or not event.token.is_value:
            token = event.token.value if event is not None else None
            raise ParsingError(
                f"Expected a value token, found [{token}]",
                self.token_location(),
            )
        return event


class ContentBuilder:
    """
    Writes structured content as nested dicts and lists.

    Example::

        builder = ContentBuilder()
        builder.start_object()
        builder.start_object("match_all")
        builder.field("boost", 2.0)
        builder.end_object()
        builder.end_object()
        builder.to_dict()  # {"match_all": {"boost": 2.0}}
    """

    def __init__(self) -> None:
        self._root: Any = None
        self._has_root = False
        self._stack: list[dict[str, Any] | list[Any]] = []
        self._pending_name: str | None = None

    # -- structure -----------------------------------------------------------

    def start_object(self, name: str | None = None) -> ContentBuilder:
        if name is not None:
            self.field_name(name)
        obj: dict[str, Any] = {}
        self._attach(obj)
        self._stack.append(obj)
        return self

    def end_object(self) -> ContentBuilder:
        if not self._stack or not isinstance(self._stack[-1], dict):
            raise ValueError("No open object to close")
        self._stack.pop()
        return self

    def start_array(self, name: str | None = None) -> ContentBuilder:
        if name is not None:
            self.field_name(name)
        arr: list[Any] = []
        self._attach(arr)
        self._stack.append(arr)
        return self

    def end_array(self) -> ContentBuilder:
        if not self._stack or not isinstance(self._stack[-1], list):
            raise ValueError("No open array to close")
        self._stack.pop()
        return self

    # -- fields --------------------------------------------------------------

    def field_name(self, name: str) -> ContentBuilder:
        if self._pending_name is not None:
            raise ValueError(f"Field [{self._pending_name}] has no value")
        self._pending_name = name
        return self

    def field(self, name: str, value: Any) -> ContentBuilder:
        self.field_name(name)
        return self.value(value)

    def value(self, value: Any) -> ContentBuilder:
        if isinstance(value, bytes):
            value = base64.b64encode(value).decode("ascii")
        self._attach(value)
        return self

    # -- output --------------------------------------------------------------

    def to_dict(self) -> Any:
        if self._stack:
            raise ValueError(f"{len(self._stack)} container(s) still open")
        return self._root

    def to_json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), indent=2 if pretty else None)

    def _attach(self, value: Any) -> None:
        if not self._stack:
            if self._has_root:
                raise ValueError("Content already has a root value")
            self._root = value
            self._has_root = True
            return
        parent = self._stack[-1]
        if isinstance(parent, list):
            parent.append(value)
            return
        if self._pending_name is None:
            raise ValueError("Values inside an object need a field name")
        parent[self._pending_name] = value
        self._pending_name = None
