"""
Registry of instances keyed by type identity and name.

Component types are identified by their ``component_uuid``; other types
(facts) by their qualified class name.
"""

from __future__ import annotations

import logging as _logging
import typing as _typing

_logger = _logging.getLogger(__name__)

T = _typing.TypeVar("T")

RegistryKey: _typing.TypeAlias = tuple[str, str | None]


def token_id(token: type) -> str:
    """Return the identity a type is registered under."""
    uuid = getattr(token, "component_uuid", None)
    if uuid:
        return str(uuid)
    return f"{token.__module__}.{token.__qualname__}"


class Registry:
    """
    Instances keyed by (type identity, name).

    Args:
        args: Constructor arguments used when register() has to create
            the instance itself.
    """

    def __init__(self, args: _typing.Sequence[_typing.Any] | None = None) -> None:
        self._args = tuple(args) if args is not None else ()
        self._data: dict[RegistryKey, _typing.Any] = {}

    def _key(self, token: type, name: str | None) -> RegistryKey:
        if name is None:
            name = getattr(token, "component_name", None)
        return (token_id(token), name)

    def register(self, token: type[T], instance: T | None = None, name: str | None = None) -> T:
        """
        Register an instance of ``token``.

        If no instance is given, one is constructed from the registry args.
        A later registration under the same key replaces the earlier one.

        Returns:
            The registered instance.
        """
        if instance is None:
            instance = token(*self._args)
        key = self._key(token, name)
        if key in self._data:
            _logger.debug("replacing registration for %s", key)
        self._data[key] = instance
        return instance

    def request(self, token: type[T], name: str | None = None) -> T | None:
        """Return the instance registered for ``token``, or None."""
        return self._data.get(self._key(token, name))

    def values(self) -> list[_typing.Any]:
        """All registered instances, in registration order."""
        return list(self._data.values())

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
