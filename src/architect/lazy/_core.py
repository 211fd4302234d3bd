"""
LazyStore: an append-only store of declarations for one virtual tree.

Values are declared at paths and resolved on demand. Declaring a non-empty
record decomposes it key by key, and each list element is declared at the
APPEND key, so later declarations can deep-merge into (or, with a higher
weight, override) any part of the tree.

Resolution of a path:
1. Collect declarations at the path or at any of its ancestors
2. Collect declarations strictly below the path
3. Drop declarations whose condition is false
4. Order by weight (ties keep declaration order, later wins)
5. Evaluate each value and feed it to a ResultBuilder
6. Walk the built tree down to the requested path

Example:
    >>> store = LazyStore({"a": {"x": 1}})
    >>> store.set(("a",), {"y": 2})
    >>> await store.get(("a",))
    {'x': 1, 'y': 2}

Thread safety: none. Finish every set() a resolution depends on before
resolving; separate stores may resolve concurrently.
"""

from __future__ import annotations

import copy as _copy
import inspect as _inspect
import logging as _logging
import typing as _typing

import architect.lazy._builder as _builder
import architect.lazy._conditions as _conditions
import architect.lazy._declarations as _declarations
import architect.lazy._errors as _errors
import architect.lazy._paths as _paths
import architect.lazy._proxy as _proxy
import architect.lazy._types as _types
import architect.lazy._yaml as _yaml

_logger = _logging.getLogger(__name__)


class LazyStore:
    """
    Append-only collection of declarations for one tree.

    Args:
        value: Optional initial value, declared at the root with weight 0.
    """

    def __init__(self, value: _typing.Any = _paths.MISSING) -> None:
        self._declarations: list[_declarations.Declaration] = []
        # Paths with list elements declared directly below them
        self._lists: set[_types.Path] = set()
        if value is not _paths.MISSING:
            self.set((), value)

    @property
    def declarations(self) -> tuple[_declarations.Declaration, ...]:
        """Read-only snapshot of every declaration, in declaration order."""
        return tuple(self._declarations)

    @property
    def root(self) -> _proxy.Accessor:
        """Accessor for the root of the tree."""
        return _proxy.Accessor(self, ())

    def __len__(self) -> int:
        return len(self._declarations)

    def __repr__(self) -> str:
        return f"LazyStore(declarations={len(self._declarations)})"

    # =========================================================================
    # Declaring values
    # =========================================================================

    def set(
        self,
        path: _types.Path,
        value: _typing.Any,
        weight: int = 0,
        force: bool = False,
        condition: _conditions.Condition | None = None,
    ) -> None:
        """
        Declare a value at a path.

        Non-empty records are decomposed key by key and list elements are
        declared at ``path + (APPEND,)`` unless ``force`` is set, in which
        case the value is recorded whole and replaces rather than merges.
        Either every resulting declaration is recorded or none is.

        Args:
            path: Where to declare the value.
            value: A concrete value, a callable producing one, an Accessor,
                or a Reference from ``Accessor.reference()``.
            weight: Priority; higher weights are applied later and win.
            force: Record the value atomically and replace on resolution.
            condition: Optional gate evaluated at resolution time.

        Raises:
            InvalidAssignmentError: If the value is a store or a declaration.
            IllegalMutationError: If a key other than a list position is
                declared below a list.
        """
        declarations = [
            _declarations.Declaration(
                path=item_path,
                value=_to_variant(_yaml.unwrap(item)),
                weight=weight,
                force=item_force,
                condition=condition,
                sequence=len(self._declarations) + offset,
            )
            for offset, (item_path, item, item_force) in enumerate(
                _decompose(path, value, force)
            )
        ]
        lists = set(self._lists)
        for declaration in declarations:
            _check_list_keys(declaration.path, lists)
            lists.update(_list_prefixes(declaration.path))

        self._lists = lists
        for declaration in declarations:
            self._declarations.append(declaration)
            _logger.debug(
                "declared %s at %s (weight=%d, force=%s)",
                type(declaration.value).__name__,
                _paths.format_path(declaration.path),
                weight,
                declaration.force,
            )

    # =========================================================================
    # Resolving values
    # =========================================================================

    def _anchor(self, path: _types.Path) -> _types.Path:
        """
        Return the prefix of ``path`` that declarations can be matched at.

        Keys below a declared list address elements by position, which no
        declaration path carries, so matching stops at the list itself.
        """
        for end in range(len(path)):
            if path[:end] in self._lists:
                return path[:end]
        return path

    def _match(self, path: _types.Path) -> list[_declarations.Declaration]:
        """Collect declarations at, above, or below ``path`` in declaration order."""
        return [
            declaration
            for declaration in self._declarations
            if _paths.is_prefix(declaration.path, path)
            or _paths.is_strict_descendant(declaration.path, path)
        ]

    async def get(self, path: _types.Path, depth: int = 0) -> _typing.Any:
        """
        Resolve the value at a path.

        Args:
            path: The path to resolve.
            depth: Current evaluation depth, propagated into nested resolutions.

        Returns:
            A plain nested value with no lazy parts left.

        Raises:
            NotFoundError: If nothing resolves to a value at the path.
            UndefinedIntermediateError: If an ancestor of the path is undefined.
            DepthExceededError: If nested resolution exceeds the depth ceiling.
            IllegalMutationError: If a write below a list cannot be applied to
                an existing element.
        """
        anchor = self._anchor(path)
        candidates = self._match(anchor)
        if not candidates:
            raise _errors.NotFoundError(path)

        applicable = []
        for declaration in candidates:
            if declaration.condition is not None and not await _conditions.resolve_condition(
                declaration.condition, depth
            ):
                continue
            applicable.append(declaration)

        # sorted() is stable, so equal weights keep declaration order
        applicable.sort(key=lambda d: d.weight)
        _check_list_writes(applicable)

        builder = _builder.ResultBuilder()
        for declaration in applicable:
            value = await self._evaluate(declaration, depth)
            builder.set(declaration.path, _copy.deepcopy(value), declaration.force)

        _logger.debug(
            "resolved %s from %d of %d declarations (depth=%d)",
            _paths.format_path(path),
            len(applicable),
            len(candidates),
            depth,
        )
        result = builder.resolve()
        if result is _paths.MISSING:
            raise _errors.NotFoundError(path)
        return _walk(result, path)

    async def _evaluate(
        self,
        declaration: _declarations.Declaration,
        depth: int,
    ) -> _typing.Any:
        """Turn a declaration's value variant into a concrete value."""
        variant = declaration.value

        if isinstance(variant, _declarations.Immediate):
            return variant.value

        if isinstance(variant, _declarations.Link):
            return await variant.target.resolve(depth=depth)

        if isinstance(variant, _declarations.Generator):
            result = variant.fn()
            if _inspect.isawaitable(result):
                result = await result
            if isinstance(result, _proxy.Accessor):
                result = await result.resolve(depth=depth)
            return result

        if isinstance(variant, _declarations.Reference):
            result = variant.fn(variant.store.root)
            if _inspect.isawaitable(result):
                result = await result
            if not isinstance(result, _proxy.Accessor):
                return result
            try:
                return await result.resolve(depth=depth)
            except (_errors.NotFoundError, _errors.UndefinedIntermediateError):
                if variant.fallback is _paths.MISSING:
                    raise
                return variant.fallback

        raise TypeError(f"Unknown value variant: {type(variant).__name__}")


def _to_variant(value: _typing.Any) -> _declarations.ValueVariant:
    """Wrap a declared value in its variant."""
    if isinstance(value, (LazyStore, _declarations.Declaration)):
        raise _errors.InvalidAssignmentError(
            f"cannot declare a {type(value).__name__} as a value, "
            "declare its accessor or a concrete value instead"
        )
    if isinstance(value, _declarations.ValueVariant):
        return value
    if isinstance(value, _proxy.Accessor):
        return _declarations.Link(value)
    if callable(value):
        return _declarations.Generator(value)
    return _declarations.Immediate(value)


def _walk(value: _typing.Any, path: _types.Path) -> _typing.Any:
    """
    Descend the built tree along ``path``.

    Raises:
        NotFoundError: If the final value is undefined.
        UndefinedIntermediateError: If a value is undefined while keys remain.
    """
    current = value
    for key in path:
        if current is _paths.MISSING:
            raise _errors.UndefinedIntermediateError(path, key)
        current = _paths.child(current, key)

    if current is _paths.MISSING:
        raise _errors.NotFoundError(path)
    return current


def _decompose(
    path: _types.Path,
    value: _typing.Any,
    force: bool,
) -> _typing.Iterator[tuple[_types.Path, _typing.Any, bool]]:
    """Yield the (path, value, force) records a declaration splits into."""
    if _yaml.is_force(value):
        yield path, value.value, True
        return

    composite = isinstance(value, (dict, list)) and len(value) > 0
    # List elements are recorded whole so records inside lists stay intact
    element = bool(path) and _paths.is_append(path[-1])

    if force or element or not composite:
        yield path, value, force
    elif isinstance(value, dict):
        for key, item in value.items():
            yield from _decompose(path + (_paths.normalize_key(key),), item, force)
    else:
        for item in value:
            yield from _decompose(path + (_types.APPEND,), item, force)


def _list_prefixes(path: _types.Path) -> _typing.Iterator[_types.Path]:
    """Yield each prefix of ``path`` that is followed by APPEND."""
    for end, key in enumerate(path):
        if _paths.is_append(key):
            yield path[:end]


def _check_list_keys(path: _types.Path, lists: set[_types.Path]) -> None:
    """Reject a path that puts a record key below a declared list."""
    for end, key in enumerate(path):
        if path[:end] not in lists or _paths.is_append(key):
            continue
        if _paths.list_index(key) is None:
            raise _errors.IllegalMutationError(
                path, f"cannot declare key {key!r} below a list, only positions"
            )


def _check_list_writes(applicable: list[_declarations.Declaration]) -> None:
    """
    Reject writes below a list that the list cannot take.

    ``applicable`` is in application order. A write into a list element
    must come after the list's first element, and no record key may sit
    below a list whichever of the two was declared first.
    """
    first_element: dict[_types.Path, int] = {}
    for position, declaration in enumerate(applicable):
        for prefix in _list_prefixes(declaration.path):
            first_element.setdefault(prefix, position)
    if not first_element:
        return

    for position, declaration in enumerate(applicable):
        path = declaration.path
        for end, key in enumerate(path):
            prefix = path[:end]
            if prefix not in first_element or _paths.is_append(key):
                continue
            if _paths.list_index(key) is None:
                raise _errors.IllegalMutationError(
                    path, f"cannot declare key {key!r} below a list, only positions"
                )
            if position < first_element[prefix]:
                raise _errors.IllegalMutationError(
                    path,
                    "write into a list element applies before the list; "
                    "declare it with a higher weight",
                )
