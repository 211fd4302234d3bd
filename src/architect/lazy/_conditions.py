"""
Condition evaluation for gated declarations.

A condition is one of:
- a bool
- an Accessor resolving to a boolean (so conditions can depend on the tree)
- a callable, sync or async, returning a bool or an Accessor
- an AllOf built by combine_conditions()

Conditions are evaluated at the resolution depth of the value they gate,
so a condition that depends on its own value is caught by the depth ceiling.
"""

from __future__ import annotations

import asyncio as _asyncio
import dataclasses as _dataclasses
import inspect as _inspect
import typing as _typing

import architect.lazy._proxy as _proxy

Condition: _typing.TypeAlias = _typing.Union[
    bool,
    "_proxy.Accessor",
    "AllOf",
    _typing.Callable[[], _typing.Any],
]


@_dataclasses.dataclass(frozen=True, slots=True)
class AllOf:
    """True iff every wrapped condition is true."""

    conditions: tuple[Condition, ...]


async def resolve_condition(condition: Condition, depth: int = 0) -> bool:
    """
    Resolve a condition to a boolean.

    Args:
        condition: The condition to evaluate.
        depth: Current evaluation depth, propagated into tree lookups.

    Returns:
        The truth value of the condition.
    """
    if isinstance(condition, bool):
        return condition

    if isinstance(condition, _proxy.Accessor):
        return bool(await condition.resolve(depth=depth))

    if isinstance(condition, AllOf):
        # Wait for every condition so no failure goes unretrieved
        results = await _asyncio.gather(
            *(resolve_condition(c, depth) for c in condition.conditions),
            return_exceptions=True,
        )
        for outcome in results:
            if isinstance(outcome, BaseException):
                raise outcome
        return all(results)

    if not callable(condition):
        raise TypeError(f"Invalid condition type: {type(condition).__name__}")

    result = condition()
    if _inspect.isawaitable(result):
        result = await result
    if isinstance(result, _proxy.Accessor):
        result = await result.resolve(depth=depth)
    return bool(result)


def combine_conditions(*conditions: Condition) -> AllOf:
    """
    Combine conditions with logical AND.

    Every condition is evaluated; there is no short-circuit ordering.
    """
    return AllOf(tuple(conditions))
