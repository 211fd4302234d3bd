"""
Path helpers for the lazy value engine.

A path is a tuple of keys. Path A is an ancestor of path B when A is a
prefix of B (a path is considered its own ancestor here, which is what
declaration matching needs).
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import architect.lazy._types as _types


def _get_missing_singleton() -> _MissingType:
    """Return the MISSING singleton. Called by pickle to reconstruct."""
    return MISSING


class _MissingType:
    """Sentinel for "no value here", distinct from a resolved None."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> tuple[_typing.Callable[[], _MissingType], tuple[()]]:
        """Pickle support: ensure singleton is preserved."""
        return (_get_missing_singleton, ())


MISSING = _MissingType()


def normalize_key(key: _types.PathKey) -> str:
    """
    Normalise a navigation key.

    Navigation always produces string keys; ``APPEND`` is reserved for
    declaration decomposition and cannot be navigated to.

    Raises:
        TypeError: If the key is neither a string nor an integer.
    """
    if isinstance(key, bool) or not isinstance(key, (str, int)):
        raise TypeError(f"Path keys must be str or int, got {type(key).__name__}")
    return str(key)


def format_path(path: _types.Path) -> str:
    """Render a path for messages, e.g. ``spec.containers.[]``."""
    if not path:
        return "<root>"
    return ".".join("[]" if is_append(key) else str(key) for key in path)


def is_append(key: _types.PathKey) -> bool:
    """Check if a key is the APPEND marker."""
    return isinstance(key, int) and not isinstance(key, bool) and key == _types.APPEND


def is_prefix(prefix: _types.Path, path: _types.Path) -> bool:
    """Check if ``prefix`` is a prefix of ``path`` (or equal to it)."""
    return len(prefix) <= len(path) and path[: len(prefix)] == prefix


def is_strict_descendant(path: _types.Path, ancestor: _types.Path) -> bool:
    """Check if ``path`` lies strictly below ``ancestor``."""
    return len(path) > len(ancestor) and path[: len(ancestor)] == ancestor


def ancestors(path: _types.Path) -> _typing.Iterator[_types.Path]:
    """Yield ``path`` and each of its prefixes, deepest first, ending at ``()``."""
    for end in range(len(path), -1, -1):
        yield path[:end]


def list_index(key: _types.PathKey) -> int | None:
    """
    Return the list position a key addresses, or None if it addresses none.

    Only ASCII decimal strings (and non-negative ints) are positions; signs,
    other Unicode digits and the APPEND marker are not.
    """
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key if key >= 0 else None
    if key.isascii() and key.isdecimal():
        return int(key)
    return None


def child(value: _typing.Any, key: _types.PathKey) -> _typing.Any:
    """
    Descend one key into a resolved value.

    Records are indexed by key, lists by a decimal-string key.
    Anything else has no children.

    Returns:
        The child value, or MISSING if there is none.
    """
    if isinstance(value, _abc.Mapping):
        return value.get(key, MISSING)
    if isinstance(value, list):
        index = list_index(key)
        if index is None or index >= len(value):
            return MISSING
        return value[index]
    return MISSING
