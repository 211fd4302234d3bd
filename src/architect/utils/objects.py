"""
Helpers for plain nested values (records, lists, scalars).

Records are dicts. Merging follows the same rules as the lazy engine:
records merge key by key, lists concatenate, anything else is replaced.
"""

from __future__ import annotations

import asyncio as _asyncio
import copy as _copy
import hashlib as _hashlib
import inspect as _inspect
import json as _json
import typing as _typing

T = _typing.TypeVar("T")


def is_record(value: _typing.Any) -> bool:
    """Check if a value is a record (a dict, not a list or scalar)."""
    return isinstance(value, dict)


def to_array(value: T | list[T]) -> list[T]:
    """Wrap a value in a list, leaving lists as-is."""
    return value if isinstance(value, list) else [value]


def recursive_merge(target: _typing.Any, source: _typing.Any) -> _typing.Any:
    """
    Deep merge ``source`` into ``target``.

    ``target`` is modified in place where it is a container; pass a copy if
    it must be preserved. ``source`` is deep-copied before being stored.

    Args:
        target: The base value.
        source: The value merged on top (takes priority for scalars).

    Returns:
        The merged value.

    Example:
        >>> recursive_merge({"a": [1], "b": {"x": 1}}, {"a": [2], "b": {"y": 2}})
        {'a': [1, 2], 'b': {'x': 1, 'y': 2}}
    """
    if isinstance(target, list):
        return target + _copy.deepcopy(to_array(source))

    if is_record(target) and is_record(source):
        for key, value in source.items():
            if key in target:
                target[key] = recursive_merge(target[key], value)
            else:
                target[key] = _copy.deepcopy(value)
        return target

    return _copy.deepcopy(source)


def recursive_merge_these(values: _typing.Iterable[_typing.Any]) -> _typing.Any:
    """
    Deep merge a sequence of values in order.

    Returns:
        The merged value, or None for an empty sequence.
    """
    result: _typing.Any = None
    first = True
    for value in values:
        if first:
            result = _copy.deepcopy(value)
            first = False
        else:
            result = recursive_merge(result, value)
    return result


def composite_hash(objects: _typing.Iterable[_typing.Any]) -> str:
    """
    Return a stable hash over several JSON-serialisable objects.

    Keys are sorted so that equal records hash equally regardless of
    insertion order.
    """
    digest = _hashlib.md5()
    for obj in objects:
        encoded = _json.dumps(obj, sort_keys=True, default=repr, separators=(",", ":"))
        digest.update(_hashlib.md5(encoded.encode("utf-8")).digest())
    return digest.hexdigest()


async def async_filter(
    values: _typing.Iterable[T],
    predicate: _typing.Callable[[T], _typing.Any],
) -> list[T]:
    """
    Filter values with a possibly-async predicate, evaluated concurrently.

    Returns:
        The values whose predicate was truthy, in their original order.
    """
    items = list(values)

    async def _check(item: T) -> bool:
        result = predicate(item)
        if _inspect.isawaitable(result):
            result = await result
        return bool(result)

    keep = await _asyncio.gather(*(_check(item) for item in items))
    return [item for item, ok in zip(items, keep, strict=True) if ok]
