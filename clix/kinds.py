"""
Field kinds: what a declared type means to the binder.

Overview
- Width markers
  • int32, int64, uint32, uint64, float64: typing.NewType aliases used in record
    annotations to pick an exact width. Plain `int` and `float` are 64-bit.

- ZERO_TIME
  • The zero instant (0001-01-01 00:00:00 UTC), value of an unset timestamp field.

- Kind
  • One member per supported leaf type. Each member knows the getter it is read
    through, its integer width (if any), its zero value and how to cast a fetched
    value into its slot.

- classify(hint)
  • Map a resolved annotation to its Kind, or None when the type is not bindable.

Example
    >>> classify(list[int32])
    <Kind.INT32_LIST: 12>
    >>> Kind.INT32.cast(2 ** 32 + 7)
    7
    >>> classify(dict) is None
    True
"""
import datetime
import enum
import types
import typing

from .utils import narrow

int32 = typing.NewType("int32", int)
int64 = typing.NewType("int64", int)
uint32 = typing.NewType("uint32", int)
uint64 = typing.NewType("uint64", int)
float64 = typing.NewType("float64", float)

ZERO_TIME = datetime.datetime(1, 1, 1, tzinfo=datetime.timezone.utc)


class Kind(enum.Enum):
    """
    Supported leaf kinds.

    Member attributes
    - getter: name of the value-source method the kind is read through.
    - width: integer width in bits, or None for non-integer kinds.
    - signed: whether the integer slot is signed.
    - sequence: whether values are lists of elements.
    """

    def __new__(cls, getter, width=None, signed=True):
        member = object.__new__(cls)
        # Both timestamp kinds share a getter, so values are ordinals, not getter names.
        member._value_ = len(cls.__members__) + 1
        member.getter = getter
        member.width = width
        member.signed = signed
        member.sequence = getter.endswith("_list")
        return member

    TEXT = "string",
    INT32 = "int32", 32
    INT64 = "int64", 64
    UINT32 = "uint32", 32, False
    UINT64 = "uint64", 64, False
    BOOL = "boolean",
    FLOAT64 = "float64",
    DURATION = "duration",
    TIMESTAMP = "timestamp",
    OPTIONAL_TIMESTAMP = "timestamp",
    TEXT_LIST = "string_list",
    INT32_LIST = "int32_list", 32
    INT64_LIST = "int64_list", 64
    UINT32_LIST = "uint32_list", 32, False
    UINT64_LIST = "uint64_list", 64, False
    FLOAT64_LIST = "float64_list",

    def zero(self):
        """
        Return a fresh zero value for this kind (lists are never shared).
        """
        if self.sequence:
            return []
        match self:
            case Kind.TEXT:
                return ""
            case Kind.BOOL:
                return False
            case Kind.FLOAT64:
                return 0.0
            case Kind.DURATION:
                return datetime.timedelta(0)
            case Kind.TIMESTAMP:
                return ZERO_TIME
            case Kind.OPTIONAL_TIMESTAMP:
                return None
        return 0

    def cast(self, value):
        """
        Coerce a fetched value into this kind's slot.

        Integers are narrowed to the kind's width, floats go through float(),
        booleans through bool(). A None list (a source that reports absence that
        way) becomes an empty list. Everything else passes through unchanged.
        """
        if self.sequence:
            return [self._element(element) for element in value or ()]
        return self._element(value)

    def _element(self, value):
        if self.width is not None:
            return narrow(value, self.width, signed=self.signed)
        if self in (Kind.FLOAT64, Kind.FLOAT64_LIST):
            return float(value)
        if self is Kind.BOOL:
            return bool(value)
        return value


_SCALARS = {
    str: Kind.TEXT,
    int32: Kind.INT32,
    int: Kind.INT64,
    int64: Kind.INT64,
    uint32: Kind.UINT32,
    uint64: Kind.UINT64,
    bool: Kind.BOOL,
    float: Kind.FLOAT64,
    float64: Kind.FLOAT64,
    datetime.timedelta: Kind.DURATION,
    datetime.datetime: Kind.TIMESTAMP,
}

_SEQUENCES = {
    str: Kind.TEXT_LIST,
    int32: Kind.INT32_LIST,
    int: Kind.INT64_LIST,
    int64: Kind.INT64_LIST,
    uint32: Kind.UINT32_LIST,
    uint64: Kind.UINT64_LIST,
    float: Kind.FLOAT64_LIST,
    float64: Kind.FLOAT64_LIST,
}


def classify(hint, /):
    """
    Return the Kind of a resolved type annotation, or None if it is unsupported.

    Recognized shapes
    - one of the scalar types (str, int, int32, ..., timedelta, datetime)
    - datetime | None / Optional[datetime] → OPTIONAL_TIMESTAMP
    - list[X] where X is str or one of the integer/float widths
    """
    try:
        return _SCALARS[hint]
    except (KeyError, TypeError):
        pass

    origin = typing.get_origin(hint)
    arguments = typing.get_args(hint)

    if origin in (typing.Union, types.UnionType):
        if set(arguments) == {datetime.datetime, types.NoneType}:
            return Kind.OPTIONAL_TIMESTAMP
        return None

    if origin is list and len(arguments) == 1:
        try:
            return _SEQUENCES[arguments[0]]
        except (KeyError, TypeError):
            return None

    return None


def iszero(value, /):
    """
    Check whether a timestamp is the zero instant.

    Naive values are compared against datetime.min, aware ones against ZERO_TIME.
    """
    if value.tzinfo is None:
        return value == datetime.datetime.min
    return value == ZERO_TIME


__all__ = (
    # Width markers
    "int32",
    "int64",
    "uint32",
    "uint64",
    "float64",

    # Types
    "Kind",

    # Functions
    "classify",
    "iszero",

    # Constants
    "ZERO_TIME",
)
