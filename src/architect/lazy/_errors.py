"""
Exceptions raised by the lazy value engine.

Resolution failures carry the path they occurred at. NotFoundError and
UndefinedIntermediateError are recoverable through an accessor fallback;
DepthExceededError never is.
"""

from __future__ import annotations

import typing as _typing

import architect.lazy._paths as _paths

if _typing.TYPE_CHECKING:
    import architect.lazy._types as _types


class LazyError(Exception):
    """Base class for all lazy engine errors."""

    pass


class ResolutionError(LazyError):
    """A path could not be resolved to a concrete value."""

    def __init__(self, path: _types.Path, message: str) -> None:
        self.path = path
        super().__init__(f"{message} at {_paths.format_path(path)}")


class NotFoundError(ResolutionError):
    """No applicable declaration resolves to a defined value."""

    def __init__(self, path: _types.Path) -> None:
        super().__init__(path, "no value found")


class UndefinedIntermediateError(ResolutionError):
    """Descending into a resolved value hit an undefined branch."""

    def __init__(self, path: _types.Path, key: _types.PathKey) -> None:
        self.key = key
        super().__init__(path, f"attempted to read {key!r} of undefined")


class DepthExceededError(ResolutionError):
    """The evaluation depth ceiling was hit, usually a reference cycle."""

    def __init__(self, path: _types.Path, depth: int) -> None:
        self.depth = depth
        super().__init__(path, f"maximum evaluation depth of {depth} exceeded")


class InvalidAssignmentError(LazyError, TypeError):
    """A store or raw declaration was passed where a value was expected."""

    pass


class IllegalMutationError(LazyError, TypeError):
    """
    The virtual tree was mutated other than by declaring or appending.

    Raised for attribute or item assignment on an accessor, and for writes
    that would turn a list into a record or address a missing element.
    """

    def __init__(self, path: _types.Path, message: str | None = None) -> None:
        self.path = path
        if message is None:
            message = "cannot mutate with attribute or item syntax, use .set() instead"
        super().__init__(f"{message} at {_paths.format_path(path)}")
