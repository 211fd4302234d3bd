"""
Declaration records and value variants.

A declaration is one recorded intent to contribute a value at a path.
Its value is one of a closed set of variants:

- Immediate: a concrete value, stored as given
- Generator: a zero-argument callable (sync or async) producing a value
- Link: another accessor whose resolved value is used
- Reference: a function of the root accessor, with an optional fallback

Declarations are never mutated once recorded.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import typing as _typing

if _typing.TYPE_CHECKING:
    import architect.lazy._conditions as _conditions
    import architect.lazy._core as _core
    import architect.lazy._proxy as _proxy
    import architect.lazy._types as _types


@_dataclasses.dataclass(frozen=True, slots=True)
class ValueVariant:
    """Base class for declaration values."""

    pass


@_dataclasses.dataclass(frozen=True, slots=True)
class Immediate(ValueVariant):
    """A concrete value."""

    value: _typing.Any


@_dataclasses.dataclass(frozen=True, slots=True)
class Generator(ValueVariant):
    """A callable producing the value when resolved."""

    fn: _types.Resolver


@_dataclasses.dataclass(frozen=True, slots=True)
class Link(ValueVariant):
    """The resolved value of another accessor."""

    target: _proxy.Accessor


@_dataclasses.dataclass(frozen=True, slots=True)
class Reference(ValueVariant):
    """
    A value read from elsewhere in a tree.

    ``fn`` receives the root accessor of ``store`` and returns an accessor
    (or a plain value). If the accessor cannot be resolved, ``fallback`` is
    used when one was given.
    """

    store: _core.LazyStore
    fn: _typing.Callable[[_proxy.Accessor], _typing.Any]
    fallback: _typing.Any


@_dataclasses.dataclass(frozen=True, slots=True)
class Declaration:
    """One recorded contribution to a tree."""

    path: _types.Path
    value: ValueVariant
    weight: int = 0
    force: bool = False
    condition: _conditions.Condition | None = None
    sequence: int = 0
