"""
Binary wire streams for shipping query trees between processes.

Every query is written as its wire name followed by its own payload,
so :meth:`StreamInput.read_query` can dispatch through a
:class:`~search_query_dsl.registry.QueryRegistry` without knowing the
concrete type in advance.
"""

from __future__ import annotations

import io
import struct
from typing import TYPE_CHECKING, Any

from .exceptions import StreamError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .queries.base import AbstractQuery
    from .registry import QueryRegistry

_INT = struct.Struct(">i")
_DOUBLE = struct.Struct(">d")

# Type tags for write_generic_value
_TYPE_NULL = 0
_TYPE_STRING = 1
_TYPE_INT = 2
_TYPE_DOUBLE = 3
_TYPE_BOOL = 4


class StreamOutput:
    """Append-only binary writer."""

    def __init__(self) -> None:
        self._buffer = io.BytesIO()

    def getvalue(self) -> bytes:
        return self._buffer.getvalue()

    # -- primitives ----------------------------------------------------------

    def write_byte(self, value: int) -> None:
        self._buffer.write(bytes((value & 0xFF,)))

    def write_bool(self, value: bool) -> None:
        self.write_byte(1 if value else 0)

    def write_vint(self, value: int) -> None:
        """Write a non-negative int using 7 bits per byte."""
        if value < 0:
            raise ValueError(f"Negative vint not supported: {value}")
        while value > 0x7F:
            self.write_byte((value & 0x7F) | 0x80)
            value >>= 7
        self.write_byte(value)

    def write_int(self, value: int) -> None:
        self._buffer.write(_INT.pack(value))

    def write_double(self, value: float) -> None:
        self._buffer.write(_DOUBLE.pack(value))

    def write_bytes(self, value: bytes) -> None:
        self.write_vint(len(value))
        self._buffer.write(value)

    def write_string(self, value: str) -> None:
        self.write_bytes(value.encode("utf-8"))

    def write_optional_string(self, value: str | None) -> None:
        if value is None:
            self.write_bool(False)
        else:
            self.write_bool(True)
            self.write_string(value)

    def write_generic_value(self, value: Any) -> None:
        """Write a scalar value prefixed by its type tag."""
        if value is None:
            self.write_byte(_TYPE_NULL)
        elif isinstance(value, bool):
            self.write_byte(_TYPE_BOOL)
            self.write_bool(value)
        elif isinstance(value, str):
            self.write_byte(_TYPE_STRING)
            self.write_string(value)
        elif isinstance(value, int):
            self.write_byte(_TYPE_INT)
            self.write_string(str(value))
        elif isinstance(value, float):
            self.write_byte(_TYPE_DOUBLE)
            self.write_double(value)
        else:
            raise ValueError(f"Cannot write value of type {type(value).__name__}")

    # -- queries -------------------------------------------------------------

    def write_query(self, query: AbstractQuery) -> None:
        self.write_string(query.writeable_name)
        query.write_to(self)

    def write_query_list(self, queries: Sequence[AbstractQuery]) -> None:
        self.write_vint(len(queries))
        for query in queries:
            self.write_query(query)


class StreamInput:
    """Binary reader, the inverse of :class:`StreamOutput`."""

    def __init__(self, data: bytes, registry: QueryRegistry) -> None:
        self._buffer = io.BytesIO(data)
        self.registry = registry

    def at_end(self) -> bool:
        return self._buffer.tell() >= len(self._buffer.getbuffer())

    # -- primitives ----------------------------------------------------------

    def read_byte(self) -> int:
        return self._read_exact(1)[0]

    def read_bool(self) -> bool:
        value = self.read_byte()
        if value not in (0, 1):
            raise StreamError(f"Invalid boolean byte: {value}")
        return value == 1

    def read_vint(self) -> int:
        result = 0
        shift = 0
        while True:
            byte = self.read_byte()
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return result
            shift += 7
            if shift > 63:
                raise StreamError("vint is too long")

    def read_int(self) -> int:
        return int(_INT.unpack(self._read_exact(_INT.size))[0])

    def read_double(self) -> float:
        return float(_DOUBLE.unpack(self._read_exact(_DOUBLE.size))[0])

    def read_bytes(self) -> bytes:
        return self._read_exact(self.read_vint())

    def read_string(self) -> str:
        raw = self.read_bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise StreamError(f"Invalid UTF-8 string: {exc}") from exc

    def read_optional_string(self) -> str | None:
        if self.read_bool():
            return self.read_string()
        return None

    def read_generic_value(self) -> Any:
        tag = self.read_byte()
        if tag == _TYPE_NULL:
            return None
        if tag == _TYPE_BOOL:
            return self.read_bool()
        if tag == _TYPE_STRING:
            return self.read_string()
        if tag == _TYPE_INT:
            text = self.read_string()
            try:
                return int(text)
            except ValueError as exc:
                raise StreamError(f"Invalid integer value: {text!r}") from exc
        if tag == _TYPE_DOUBLE:
            return self.read_double()
        raise StreamError(f"Unknown value type tag: {tag}")

    # -- queries -------------------------------------------------------------

    def read_query(self) -> AbstractQuery:
        name = self.read_string()
        reader = self.registry.get_reader(name)
        if reader is None:
            raise StreamError(f"Unknown named query [{name}]")
        return reader(self)

    def read_query_list(self) -> list[AbstractQuery]:
        return [self.read_query() for _ in range(self.read_vint())]

    def _read_exact(self, size: int) -> bytes:
        data = self._buffer.read(size)
        if len(data) != size:
            raise StreamError(
                f"Unexpected end of stream: wanted {size} bytes, got {len(data)}"
            )
        return data


def query_to_bytes(query: AbstractQuery) -> bytes:
    """Encode *query* (and its whole subtree) for transport."""
    out = StreamOutput()
    out.write_query(query)
    return out.getvalue()


def query_from_bytes(data: bytes, registry: QueryRegistry) -> AbstractQuery:
    """Decode a query written by :func:`query_to_bytes`."""
    stream = StreamInput(data, registry)
    query = stream.read_query()
    if not stream.at_end():
        raise StreamError("Trailing bytes after query")
    return query
