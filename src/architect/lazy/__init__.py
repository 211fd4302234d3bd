"""
Lazy value engine: composable, weighted, conditional configuration trees.

Values are declared at paths of a virtual tree and resolved on demand.
Declarations at overlapping paths deep-merge, higher weights override,
conditions gate declarations, and values may reference other parts of
the same tree.

Example:
    >>> import architect.lazy as lazy
    >>> root = lazy.from_value({"metadata": {"labels": {"app": "web"}}})
    >>> root.metadata.labels.set({"tier": "frontend"})
    >>> root.metadata.name.set(root.reference(lambda r: r.metadata.labels.app))
    >>> await root.resolve()
    {'metadata': {'labels': {'app': 'web', 'tier': 'frontend'}, 'name': 'web'}}
"""

import typing as _typing

import architect.lazy._yaml as _yaml
from architect.lazy._builder import ResultBuilder
from architect.lazy._conditions import AllOf, Condition, combine_conditions, resolve_condition
from architect.lazy._core import LazyStore
from architect.lazy._declarations import (
    Declaration,
    Generator,
    Immediate,
    Link,
    Reference,
    ValueVariant,
)
from architect.lazy._errors import (
    DepthExceededError,
    IllegalMutationError,
    InvalidAssignmentError,
    LazyError,
    NotFoundError,
    ResolutionError,
    UndefinedIntermediateError,
)
from architect.lazy._paths import MISSING
from architect.lazy._proxy import Accessor
from architect.lazy._types import APPEND, Path, PathKey
from architect.lazy._yaml import ForceMarker, LazyLoader


def from_value(value: _typing.Any) -> Accessor:
    """Create a store seeded with ``value`` and return its root accessor."""
    return LazyStore(value).root


def from_yaml(stream: _typing.Any) -> Accessor:
    """
    Create a store from YAML content and return its root accessor.

    Subtrees tagged ``!force`` are declared as forced (atomic) values.
    An empty document yields an empty store.
    """
    data = _yaml.load(stream)
    if data is None:
        return LazyStore().root
    return LazyStore(data).root


__all__ = [
    "APPEND",
    "MISSING",
    "Accessor",
    "AllOf",
    "Condition",
    "Declaration",
    "DepthExceededError",
    "ForceMarker",
    "Generator",
    "IllegalMutationError",
    "Immediate",
    "InvalidAssignmentError",
    "LazyError",
    "LazyLoader",
    "LazyStore",
    "Link",
    "NotFoundError",
    "Path",
    "PathKey",
    "Reference",
    "ResolutionError",
    "ResultBuilder",
    "UndefinedIntermediateError",
    "ValueVariant",
    "combine_conditions",
    "from_value",
    "from_yaml",
    "resolve_condition",
]
