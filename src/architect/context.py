"""
Configuration context passed to components during the configure phase.

Lets a component reach (and auto-register) other components by type and
declare values on their props.
"""

from __future__ import annotations

import typing as _typing

if _typing.TYPE_CHECKING:
    import architect.component as _component
    import architect.lazy as _lazy
    import architect.target as _target


class ConfigurationContext:
    """Component-facing view of a Target during configuration."""

    def __init__(self, target: _target.Target) -> None:
        self._target = target

    @property
    def target(self) -> _target.Target:
        return self._target

    def component(
        self,
        token: type[_component.Component],
        name: str | None = None,
    ) -> _lazy.Accessor:
        """Return the props of a component, registering it if needed."""
        return self._target.component(token, name, auto=True).props

    def enable(self, token: type[_component.Component], name: str | None = None) -> None:
        """Register (if needed) and enable a component."""
        self._target.enable(token, name)

    def set(
        self,
        token: type[_component.Component],
        value: _typing.Any,
        weight: int = 0,
        force: bool = False,
        condition: _lazy.Condition | None = None,
        name: str | None = None,
    ) -> None:
        """Declare a value on the root of a component's props."""
        self.component(token, name).set(value, weight, force, condition)
