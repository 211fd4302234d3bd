"""
ResultBuilder: assembles weight-ordered writes into one nested value.

Writes are applied strictly in the order given:
- Scalars (and any forced write) replace whatever occupies the location
- Records merge key by key with an existing record
- Lists concatenate onto an existing list
- An APPEND key in the write path appends a new list element
- Any other key below a list writes into an existing element

Example:
    >>> builder = ResultBuilder()
    >>> builder.set(("a", "x"), 1)
    >>> builder.set(("a", "y"), 2)
    >>> builder.set(("items", APPEND), "foo")
    >>> builder.resolve()
    {'a': {'x': 1, 'y': 2}, 'items': ['foo']}
"""

from __future__ import annotations

import typing as _typing

import architect.lazy._errors as _errors
import architect.lazy._paths as _paths
import architect.lazy._types as _types
import architect.utils.objects as _objects


class ResultBuilder:
    """Accumulates (path, value, force) writes rooted at ``()``."""

    __slots__ = ("_root",)

    def __init__(self) -> None:
        self._root: _typing.Any = _paths.MISSING

    def set(self, path: _types.Path, value: _typing.Any, force: bool = False) -> None:
        """
        Place a value at a path.

        Args:
            path: Absolute path of the write.
            value: Concrete value; owned by the builder from now on.
            force: Replace the location instead of merging into it.
        """
        self._root = _place(self._root, path, value, force, path)

    def resolve(self) -> _typing.Any:
        """Return the assembled value, or MISSING if nothing was written."""
        return self._root


def _place(
    target: _typing.Any,
    path: _types.Path,
    value: _typing.Any,
    force: bool,
    full: _types.Path,
) -> _typing.Any:
    if not path:
        return _merge(target, value, force)

    key, rest = path[0], path[1:]

    if _paths.is_append(key):
        if not isinstance(target, list):
            target = []
        target.append(_place(_paths.MISSING, rest, value, force, full))
        return target

    if isinstance(target, list):
        # A list is never turned into a record; keys below it address elements
        index = _paths.list_index(key)
        if index is None or index >= len(target):
            raise _errors.IllegalMutationError(full, f"no list element {key!r} to write into")
        target[index] = _place(target[index], rest, value, force, full)
        return target

    if not _objects.is_record(target):
        target = {}
    target[key] = _place(target.get(key, _paths.MISSING), rest, value, force, full)
    return target


def _merge(target: _typing.Any, value: _typing.Any, force: bool) -> _typing.Any:
    if force or target is _paths.MISSING:
        return value

    if _objects.is_record(target) and _objects.is_record(value):
        for key, item in value.items():
            target[key] = _merge(target.get(key, _paths.MISSING), item, False)
        return target

    if isinstance(target, list) and isinstance(value, list):
        target.extend(value)
        return target

    return value
