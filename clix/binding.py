"""
clix binder: populate a typed configuration record from a flat value source.

Overview
- Annotations
  • key("name"): bind a dataclass field to a source key (field metadata "cli").
  • nested("prefix-"): mark a nested dataclass field and the prefix prepended to
    every key resolved inside it (field metadata "cli-prefix"). A nested dataclass
    field needs no annotation at all when it has no prefix.

- Resolution plan
  • plan(shape) → Plan: one Binding per field, in declaration order, computed once
    per shape and cached. A Binding is either a leaf (kind + key), a recursion
    target (prefix) or unbound (neither).

- Binder
  • parse(shape, source) → record: build a fully populated record.
  • assign(shape, prefix, source) → record: the recursive walker behind parse().

Resolution rules
- Leaf keys are prefixed with the concatenation of every enclosing prefix, with no
  separator added: prefix "db-" and key "host" read "db-host".
- Durations, scalars and lists are always overwritten with the getter result; the
  source's zero value stands in for a missing key.
- Timestamps are only stored when the source reports one (getter result not None).
- Private fields (leading underscore), init=False fields and fields whose type is
  not bindable are left alone.
- Whatever is left alone takes the field's declared default, or the zero value of
  its type when it has none.

The binder never raises because of what the source holds or lacks; callers needing
strictness validate the returned record themselves.

Quick example
    >>> from dataclasses import dataclass
    >>> from datetime import timedelta
    >>> from clix.sources import MappingSource
    >>> @dataclass
    ... class Database:
    ...     host: str = key("host")
    ...     port: int = key("port")
    >>> @dataclass
    ... class Config:
    ...     name: str = key("name")
    ...     timeout: timedelta = key("timeout")
    ...     db: Database = nested("db-")
    >>> parse(Config, MappingSource({"name": "my-app", "db-port": 3306}))
    Config(name='my-app', timeout=datetime.timedelta(0), db=Database(host='', port=3306))
"""
import dataclasses
import functools
import logging
import sys
import typing
from collections import namedtuple

from rich.table import Table
from rich.text import Text

from .kinds import Kind, classify
from .utils import Unset, coalesce

logger = logging.getLogger(__name__)

# Field metadata vocabulary
KEY = "cli"
PREFIX = "cli-prefix"


def key(name, /, default=Unset, *, default_factory=Unset):
    """
    Declare a dataclass field bound to the source key `name`.

    Parameters
    - name: str, non-empty. Prefixes of enclosing nested records are prepended.
    - default / default_factory: optional dataclass default. Only used for fields
      the binder leaves alone (absent timestamps, unsupported types); bound
      scalars are always overwritten.

    Returns
    - dataclasses.Field carrying {"cli": name} in its metadata.
    """
    if not isinstance(name, str):
        raise TypeError("key() argument must be a string")
    if not name.strip():
        raise ValueError("key() argument must be a non-empty string")
    if default is not Unset and default_factory is not Unset:
        raise ValueError("key() cannot specify both default and default_factory")
    return dataclasses.field(
        default=coalesce(default, dataclasses.MISSING),
        default_factory=coalesce(default_factory, dataclasses.MISSING),
        metadata={KEY: name},
    )


def nested(prefix="", /, *, default_factory=Unset):
    """
    Declare a nested dataclass field whose keys are all prefixed with `prefix`.

    The prefix is concatenated as-is, so include the separator ("db-", "db.").
    """
    if not isinstance(prefix, str):
        raise TypeError("nested() argument must be a string")
    return dataclasses.field(
        default_factory=coalesce(default_factory, dataclasses.MISSING),
        metadata={PREFIX: prefix},
    )


Binding = namedtuple("Binding", (
    "name",
    "hint",
    "kind",
    "key",
    "prefix",
))
Binding.__doc__ = """
Resolution descriptor of one field.

- leaf: key is a string, kind is its Kind (None when the type is unsupported)
- recursion target: prefix is a string and hint is the nested dataclass type
- unbound: key and prefix are both None
"""


class Plan(tuple):
    """
    Ordered tuple of Binding entries for one record shape.

    resolve() flattens nested plans into the effective keys a parse would query;
    rendering through rich shows the same thing as a table.
    """
    __slots__ = ()

    def resolve(self, prefix="", /, *, path=""):
        """
        Yield (field path, full key, kind) for every leaf reachable from this plan.
        """
        for binding in self:
            if binding.key is not None:
                yield path + binding.name, prefix + binding.key, binding.kind
            elif binding.prefix is not None:
                yield from plan(binding.hint).resolve(prefix + binding.prefix, path=path + binding.name + ".")

    def __rich__(self):
        table = Table(show_edge=False)
        table.add_column("field", style="bold", no_wrap=True)
        table.add_column("key", style="cyan", no_wrap=True)
        table.add_column("kind")
        for path, full, kind in self.resolve():
            if kind is None:
                table.add_row(path, full, Text("unsupported", style="dim"))
            else:
                table.add_row(path, full, kind.name.lower())
        return table


def _isshape(object, /):
    return isinstance(object, type) and dataclasses.is_dataclass(object)


def _hints(shape, /):
    """
    Resolve the field annotations of `shape`.

    typing.get_type_hints is tried first. When some postponed annotation names
    something out of reach (a class declared inside a function, say), each field
    is evaluated on its own against the shape's module and class namespace;
    the ones that still fail keep their annotation string, which no kind
    matches, so they end up skipped.
    """
    try:
        return typing.get_type_hints(shape)
    except NameError:
        pass

    module = sys.modules.get(shape.__module__)
    globalns = dict(getattr(module, "__dict__", {}))
    localns = dict(vars(shape))
    hints = {}

    for field in dataclasses.fields(shape):
        if not isinstance(field.type, str):
            hints[field.name] = field.type
            continue
        try:
            hints[field.name] = eval(field.type, globalns, localns)
        except NameError:
            logger.debug("%s.%s: cannot resolve annotation %r, skipped", shape.__qualname__, field.name, field.type)
            hints[field.name] = field.type

    return hints


@functools.cache
def plan(shape, /):
    """
    Compute the resolution plan of a dataclass type.

    Annotations are resolved with typing.get_type_hints, so postponed (string)
    annotations work as long as they resolve from the shape's module. Fields
    whose annotation cannot be resolved are treated as unsupported.
    """
    if not _isshape(shape):
        raise TypeError("plan() argument must be a dataclass type")

    hints = _hints(shape)
    bindings = []

    for field in dataclasses.fields(shape):
        hint = hints.get(field.name, field.type)

        # Not settable through the constructor or not public.
        if not field.init or field.name.startswith("_"):
            bindings.append(Binding(field.name, hint, None, None, None))
            continue

        name = field.metadata.get(KEY)

        if name is None and _isshape(hint):
            bindings.append(Binding(field.name, hint, None, None, field.metadata.get(PREFIX, "")))
            continue

        if name is not None:
            bindings.append(Binding(field.name, hint, classify(hint), name, None))
            continue

        bindings.append(Binding(field.name, hint, None, None, None))

    return Plan(bindings)


def _zero(hint, /):
    """
    Zero value of a declared type: the kind's zero, a zero-valued record for
    nested dataclasses, None for anything else.
    """
    if (kind := classify(hint)) is not None:
        return kind.zero()
    if _isshape(hint):
        return _build(hint, {})
    return None


def _build(shape, values, /):
    """
    Instantiate `shape` from the bound `values`, filling every other constructor
    field without a declared default with its zero value.
    """
    for binding, field in zip(plan(shape), dataclasses.fields(shape)):
        if not field.init or field.name in values:
            continue
        if field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING:
            values[field.name] = _zero(binding.hint)
    return shape(**values)


def _fetch(shape, binding, key, source, /):
    """
    Read one leaf through the getter of its kind. Returns Unset when the field
    must be left alone.
    """
    kind = binding.kind

    if kind is None:
        logger.debug("%s.%s: unsupported type %r for key %r, skipped", shape.__qualname__, binding.name, binding.hint, key)
        return Unset

    value = getattr(source, kind.getter)(key)

    if kind in (Kind.TIMESTAMP, Kind.OPTIONAL_TIMESTAMP):
        if value is None:
            logger.debug("%s.%s: no timestamp for key %r", shape.__qualname__, binding.name, key)
            return Unset
        return value

    return kind.cast(value)


def assign(shape, prefix, source, /):
    """
    Recursively build a `shape` record, resolving its leaf keys under `prefix`.

    Parameters
    - shape: dataclass type to populate
    - prefix: str, accumulated prefix of the enclosing records ("" at the root)
    - source: a ValueSource

    Returns
    - a new `shape` instance
    """
    values = {}

    for binding in plan(shape):
        if binding.key is not None:
            value = _fetch(shape, binding, prefix + binding.key, source)
        elif binding.prefix is not None:
            value = assign(binding.hint, prefix + binding.prefix, source)
        else:
            logger.debug("%s.%s: not bound, skipped", shape.__qualname__, binding.name)
            continue
        if value is not Unset:
            values[binding.name] = value

    return _build(shape, values)


def parse(shape, source, /):
    """
    Build a `shape` record populated from `source`.

    `shape` must be a dataclass type; `source` any object implementing the
    canonical getters (see clix.sources.ValueSource, or clix.legacy.adapt for
    legacy sources). Missing keys leave zero values; nothing is reported.
    """
    if not _isshape(shape):
        raise TypeError("parse() first argument must be a dataclass type")
    return assign(shape, "", source)


__all__ = (
    # Annotations
    "key",
    "nested",

    # Plans
    "Binding",
    "Plan",
    "plan",

    # Binder
    "assign",
    "parse",

    # Constants
    "KEY",
    "PREFIX",
)
