"""
Accessor: a navigation handle over (store, path).

Attribute and item access yield new accessors one key deeper; nothing about
navigation touches the store. Reads and writes go through explicit methods.

Example:
    >>> root = from_value({"spec": {"replicas": 1}})
    >>> root.spec.replicas.set(3, weight=10)
    >>> await root.spec.resolve()
    {'replicas': 3}
    >>> root.spec.replicas = 3  # IllegalMutationError: use .set()

Keys that collide with accessor methods (``resolve``, ``set``, ``at`` ...)
or start with an underscore are reached with ``accessor["set"]`` or
``accessor.at("set")``.
"""

from __future__ import annotations

import copy as _copy
import typing as _typing

import architect.constants as _constants
import architect.lazy._declarations as _declarations
import architect.lazy._errors as _errors
import architect.lazy._paths as _paths
import architect.utils.objects as _objects

if _typing.TYPE_CHECKING:
    import architect.lazy._conditions as _conditions
    import architect.lazy._core as _core
    import architect.lazy._types as _types


class Accessor:
    """
    Read/write view of one path inside a LazyStore.

    Accessors carry no state beyond the store and path, compare equal when
    both match, and are never mutated.
    """

    __slots__ = ("_store", "_path")

    def __init__(self, store: _core.LazyStore, path: _types.Path = ()) -> None:
        object.__setattr__(self, "_store", store)
        object.__setattr__(self, "_path", tuple(path))

    @property
    def store(self) -> _core.LazyStore:
        """The store this accessor reads from and writes to."""
        return self._store

    @property
    def path(self) -> _types.Path:
        """The path of this accessor from the root of its store."""
        return self._path

    @property
    def root(self) -> Accessor:
        """Accessor for the root of the same store."""
        return Accessor(self._store, ())

    # =========================================================================
    # Navigation
    # =========================================================================

    def at(self, *keys: _types.PathKey) -> Accessor:
        """Return the accessor ``len(keys)`` levels below this one."""
        return Accessor(self._store, self._path + tuple(_paths.normalize_key(k) for k in keys))

    def __getattr__(self, name: str) -> Accessor:
        # Only reached for names not found on the class
        if name.startswith("_"):
            raise AttributeError(name)
        return self.at(name)

    def __getitem__(self, key: _types.PathKey) -> Accessor:
        return self.at(key)

    def __setattr__(self, name: str, value: _typing.Any) -> None:
        raise _errors.IllegalMutationError(self._path + (name,))

    def __delattr__(self, name: str) -> None:
        raise _errors.IllegalMutationError(self._path + (name,))

    def __setitem__(self, key: _types.PathKey, value: _typing.Any) -> None:
        raise _errors.IllegalMutationError(self._path + (key,))

    def __delitem__(self, key: _types.PathKey) -> None:
        raise _errors.IllegalMutationError(self._path + (key,))

    # =========================================================================
    # Reading and writing
    # =========================================================================

    async def resolve(
        self,
        fallback: _typing.Any = _paths.MISSING,
        *,
        depth: int = 0,
    ) -> _typing.Any:
        """
        Resolve the value at this path.

        Args:
            fallback: Returned if nothing is declared here. If the resolved
                value is a record, it is deep-merged on top of the fallback.
            depth: Evaluation depth of the caller; only set this when
                resolving from inside another resolution.

        Returns:
            The resolved plain value.

        Raises:
            NotFoundError: If nothing is declared here and no fallback was given.
            UndefinedIntermediateError: If an ancestor is undefined and no
                fallback was given.
            DepthExceededError: If the depth ceiling is exceeded.
        """
        depth += 1
        if depth > _constants.MAX_EVALUATION_DEPTH:
            raise _errors.DepthExceededError(self._path, _constants.MAX_EVALUATION_DEPTH)

        try:
            result = await self._store.get(self._path, depth)
        except (_errors.NotFoundError, _errors.UndefinedIntermediateError):
            if fallback is _paths.MISSING:
                raise
            return _copy.deepcopy(fallback)

        if fallback is not _paths.MISSING and _objects.is_record(result):
            return _objects.recursive_merge(_copy.deepcopy(fallback), result)
        return result

    def set(
        self,
        value: _typing.Any,
        weight: int = 0,
        force: bool = False,
        condition: _conditions.Condition | None = None,
    ) -> None:
        """
        Declare a value at this path.

        See LazyStore.set() for how values are decomposed.

        Args:
            value: The value, a callable producing it, or another accessor.
            weight: Priority; higher weights win.
            force: Replace instead of merging records and lists.
            condition: Skip this declaration when the condition is false.
                A condition that reads this same value recurses until the
                depth ceiling is hit.
        """
        self._store.set(self._path, value, weight, force, condition)

    def reference(
        self,
        fn: _typing.Callable[[Accessor], _typing.Any],
        fallback: _typing.Any = _paths.MISSING,
    ) -> _declarations.Reference:
        """
        Create a value that reads from elsewhere in this tree.

        Args:
            fn: Called with the root accessor at resolution time; returns the
                accessor (or plain value) to use.
            fallback: Used when the referenced path cannot be resolved.

        Returns:
            A Reference to pass to set().

        Example:
            >>> root.backend.port.set(root.reference(lambda r: r.service.port))
        """
        return _declarations.Reference(self._store, fn, fallback)

    # =========================================================================
    # Value semantics
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Accessor):
            return self._store is other._store and self._path == other._path
        return NotImplemented

    def __hash__(self) -> int:
        return hash((id(self._store), self._path))

    def __repr__(self) -> str:
        return f"Accessor(path={_paths.format_path(self._path)!r})"

    def __copy__(self) -> Accessor:
        return self

    def __deepcopy__(self, memo: dict[int, _typing.Any]) -> Accessor:
        return self
