"""
Type aliases for the lazy value engine.

This module provides type aliases used throughout the lazy package:
- PathKey: A single key addressing a child in the virtual tree
- Path: Tuple of keys representing a location in the virtual tree
- APPEND: The key that marks "append a new list element"
"""

from __future__ import annotations

import typing as _typing

PathKey: _typing.TypeAlias = str | int

# Example: ("spec", "template", "metadata") represents spec.template.metadata
Path: _typing.TypeAlias = tuple[PathKey, ...]

# The only integer key that appears in a declared path. Every list element
# is declared at ``path + (APPEND,)`` and appended in declaration order.
APPEND: _typing.Final[int] = -1

# Zero-argument callable producing a value, optionally asynchronously
Resolver: _typing.TypeAlias = _typing.Callable[[], _typing.Any]
