"""
Legacy value sources and their adapter to the canonical contract.

The older generation of value sources differs from clix.sources.ValueSource in two ways:

- Integer widths: it only has native-width (64-bit) getters, `int`/`uint` and
  `int_list`/`uint_list`. The canonical int64/uint64 getters pass those through
  unchanged; the 32-bit getters are synthesized with explicit narrowing casts,
  element by element into a new list for sequences.
- Timestamp absence: its `timestamp` getter always returns a datetime and reports
  “absent” as the zero instant. The adapter turns the zero instant into None.

Known limitation
- A legacy source holding a real timestamp equal to the zero instant cannot be
  told apart from an absent one; the adapter reports it as absent.

Usage
    config = parse(Config, adapt(command))
    config = parse_legacy(Config, command)  # same thing
"""
import logging
from typing import Protocol, runtime_checkable

from .binding import parse
from .kinds import iszero
from .utils import narrow

logger = logging.getLogger(__name__)


@runtime_checkable
class LegacySource(Protocol):
    """
    Legacy value-source contract (native-width integers, non-optional timestamps).
    """

    def string(self, key, /): ...
    def int(self, key, /): ...
    def uint(self, key, /): ...
    def boolean(self, key, /): ...
    def float(self, key, /): ...
    def timestamp(self, key, /): ...
    def duration(self, key, /): ...
    def string_list(self, key, /): ...
    def int_list(self, key, /): ...
    def uint_list(self, key, /): ...
    def float_list(self, key, /): ...


class LegacyAdapter:
    """
    Canonical value source implemented on top of a legacy one.

    Holds nothing but the wrapped source; every call is forwarded.
    """
    __slots__ = ("_legacy",)

    def __init__(self, legacy, /):
        self._legacy = legacy

    @property
    def legacy(self):
        """The wrapped legacy source."""
        return self._legacy

    def string(self, key, /):
        return self._legacy.string(key)

    def int32(self, key, /):
        return narrow(self._legacy.int(key), 32)

    def int64(self, key, /):
        return self._legacy.int(key)

    def uint32(self, key, /):
        return narrow(self._legacy.uint(key), 32, signed=False)

    def uint64(self, key, /):
        return self._legacy.uint(key)

    def boolean(self, key, /):
        return self._legacy.boolean(key)

    def float64(self, key, /):
        return self._legacy.float(key)

    def timestamp(self, key, /):
        value = self._legacy.timestamp(key)
        if value is None or iszero(value):
            logger.debug("zero timestamp for key %r treated as absent", key)
            return None
        return value

    def duration(self, key, /):
        return self._legacy.duration(key)

    def string_list(self, key, /):
        return self._legacy.string_list(key)

    def int32_list(self, key, /):
        return [narrow(value, 32) for value in self._legacy.int_list(key) or ()]

    def int64_list(self, key, /):
        return self._legacy.int_list(key)

    def uint32_list(self, key, /):
        return [narrow(value, 32, signed=False) for value in self._legacy.uint_list(key) or ()]

    def uint64_list(self, key, /):
        return self._legacy.uint_list(key)

    def float64_list(self, key, /):
        return self._legacy.float_list(key)

    def __repr__(self):
        return "%s(%r)" % (type(self).__name__, self._legacy)

    def __rich_repr__(self):
        yield self._legacy


def adapt(legacy, /):
    """
    Wrap a legacy source so it can be handed to parse().

    Raises TypeError when `legacy` does not implement the legacy getters.
    """
    if not isinstance(legacy, LegacySource):
        raise TypeError("adapt() argument must implement the legacy value-source getters")
    return LegacyAdapter(legacy)


def parse_legacy(shape, legacy, /):
    """
    Shorthand for parse(shape, adapt(legacy)).
    """
    return parse(shape, adapt(legacy))


__all__ = (
    "LegacySource",
    "LegacyAdapter",
    "adapt",
    "parse_legacy",
)
