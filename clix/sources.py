"""
Value sources: the read side of a parsed command line.

A value source is anything exposing the canonical typed getters below, each keyed
by a flat string name (usually a flag or environment variable name). Getters never
raise for unknown keys; they return the zero value of their kind instead
(`timestamp` returns None for “absent”).

    string        int32        int64        uint32        uint64
    boolean       float64      timestamp    duration
    string_list   int32_list   int64_list   uint32_list   uint64_list   float64_list

The binder only ever talks to this protocol. CLI frameworks can be plugged in by
providing an object with these methods, or through clix.legacy for the older
native-width contract.

MappingSource is the in-memory implementation: a read-only snapshot of already
typed values, handy for tests, fixtures and frameworks that hand out a dict.
"""
import reprlib
from collections.abc import Mapping
from types import MappingProxyType
from typing import Protocol, runtime_checkable

from rich.pretty import Pretty
from rich.table import Table

from .kinds import Kind
from .utils import rename


@runtime_checkable
class ValueSource(Protocol):
    """
    Canonical value-source contract.

    All getters take the flat key as their only (positional) argument.
    """

    def string(self, key, /): ...
    def int32(self, key, /): ...
    def int64(self, key, /): ...
    def uint32(self, key, /): ...
    def uint64(self, key, /): ...
    def boolean(self, key, /): ...
    def float64(self, key, /): ...
    def timestamp(self, key, /): ...
    def duration(self, key, /): ...
    def string_list(self, key, /): ...
    def int32_list(self, key, /): ...
    def int64_list(self, key, /): ...
    def uint32_list(self, key, /): ...
    def uint64_list(self, key, /): ...
    def float64_list(self, key, /): ...


def _getter(kind, /):
    """
    Build the MappingSource getter reading values of the given kind.

    Missing keys yield kind.zero(); present ones go through kind.cast(), so
    integer widths are honored and lists are always fresh copies.
    """

    def getter(self, key, /):
        try:
            value = self._values[key]
        except KeyError:
            return kind.zero()
        return kind.cast(value)

    getter.__doc__ = f"Return the {kind.name.lower().replace('_', ' ')} value stored under key."
    return rename(getter, kind.getter)


class MappingSource:
    """
    In-memory canonical value source.

    Construction mirrors dict(): MappingSource(mapping_or_pairs, **overrides).
    Values are expected to be typed already (str, int, float, bool, timedelta,
    datetime or lists of those); no text parsing happens here.

    Example
        >>> source = MappingSource({"db-port": 3306}, name="my-app")
        >>> source.int32("db-port"), source.string("name"), source.string("missing")
        (3306, 'my-app', '')
    """
    __slots__ = ("_values",)

    def __init__(self, values=(), /, **overrides):
        if not isinstance(values, Mapping):
            values = dict(values)
        if not all(isinstance(key, str) for key in values):
            raise TypeError("MappingSource() keys must be strings")
        self._values = MappingProxyType({**values, **overrides})

    string = _getter(Kind.TEXT)
    int32 = _getter(Kind.INT32)
    int64 = _getter(Kind.INT64)
    uint32 = _getter(Kind.UINT32)
    uint64 = _getter(Kind.UINT64)
    boolean = _getter(Kind.BOOL)
    float64 = _getter(Kind.FLOAT64)
    timestamp = _getter(Kind.OPTIONAL_TIMESTAMP)
    duration = _getter(Kind.DURATION)
    string_list = _getter(Kind.TEXT_LIST)
    int32_list = _getter(Kind.INT32_LIST)
    int64_list = _getter(Kind.INT64_LIST)
    uint32_list = _getter(Kind.UINT32_LIST)
    uint64_list = _getter(Kind.UINT64_LIST)
    float64_list = _getter(Kind.FLOAT64_LIST)

    def __contains__(self, key, /):
        return key in self._values

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __eq__(self, other, /):
        if not isinstance(other, MappingSource):
            return NotImplemented
        return self._values == other._values

    __hash__ = None

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, reprlib.repr(dict(self._values)))

    def __rich__(self):
        table = Table(title=type(self).__name__, title_justify="left", show_edge=False)
        table.add_column("key", style="bold cyan", no_wrap=True)
        table.add_column("value")
        for key, value in self._values.items():
            table.add_row(key, Pretty(value))
        return table


__all__ = (
    "ValueSource",
    "MappingSource",
)
