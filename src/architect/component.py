"""
Components: the units that declare configuration and build output.

A component owns a lazy property tree (``props``). During the configure
phase components declare values on their own and each other's props;
during the build phase each enabled component resolves its props and
returns the objects it contributes to the result.

Example:
    >>> class Web(Component):
    ...     component_name = "web"
    ...     component_uuid = "4f1c2a9e-..."
    ...
    ...     async def build(self, result=None):
    ...         replicas = await self.props.replicas.resolve(1)
    ...         return [{"kind": "Deployment", "spec": {"replicas": replicas}}]
"""

from __future__ import annotations

import asyncio as _asyncio
import typing as _typing

import architect.constants as constants
import architect.lazy as lazy

if _typing.TYPE_CHECKING:
    import architect.context as _context
    import architect.target as _target


class ComponentDefinitionError(Exception):
    """A component class or instance is declared incorrectly."""

    pass


class ComponentMatcher:
    """Matches components that are instances of the same component type."""

    def __init__(self, token: type[Component]) -> None:
        self._token = token

    @property
    def token(self) -> type[Component]:
        return self._token

    def match(self, component: Component) -> bool:
        """Check if a component has the token's uuid."""
        return component.uuid == self._token.component_uuid

    def __str__(self) -> str:
        return f"{type(self).__name__}({self._token.__name__})"


class Component:
    """
    Base unit of configuration that produces objects for the result tree.

    Root component classes must set ``component_name`` and ``component_uuid``.
    Child components (added with add_child()) share their parent's identity.

    Args:
        target: The target this component belongs to.
        props: Initial property values.
        name: Instance name; defaults to ``component_name``. Must be left
            unset for child components.
        parent: Parent component, for children.
    """

    component_name: _typing.ClassVar[str | None] = None
    component_uuid: _typing.ClassVar[str | None] = None

    def __init__(
        self,
        target: _target.Target,
        props: dict[str, _typing.Any] | None = None,
        name: str | None = None,
        parent: Component | None = None,
    ) -> None:
        self.target = target
        self.parent = parent
        self.children: list[Component] = []

        cls = type(self)
        if parent is not None:
            if name is not None:
                raise ComponentDefinitionError(
                    "the name parameter must be left undefined when a parent is specified"
                )
            self.name: str = parent.name
        else:
            if not cls.component_name or not cls.component_uuid:
                raise ComponentDefinitionError(
                    f"{cls.__name__}: component_name and component_uuid must be set"
                )
            self.name = name if name is not None else cls.component_name

        self.props: lazy.Accessor = lazy.from_value(props if props is not None else {})

        self.init()

    @property
    def requirements(self) -> list[ComponentMatcher]:
        """Component types that must be enabled alongside this one."""
        return []

    @property
    def uuid(self) -> str:
        """The component type's uuid (shared with children)."""
        if self.parent is not None:
            return self.parent.uuid
        return _typing.cast(str, type(self).component_uuid)

    @property
    def rid(self) -> str:
        """Short result id, e.g. ``web-4f1c2a9``."""
        return f"{self.name}-{self.uuid[: constants.RID_UUID_LENGTH]}"

    def add_child(self, child: type[Component]) -> Component:
        """Construct a child component and attach it."""
        instance = child(self.target, parent=self)
        self.children.append(instance)
        return instance

    def init(self) -> None:
        """Custom initialisation hook; override instead of __init__."""
        pass

    async def configure(self, context: _context.ConfigurationContext) -> None:
        """Declare values on props (own or other components'). Runs for all components."""
        await _asyncio.gather(*(child.configure(context) for child in self.children))

    async def build(self, result: _typing.Any = None) -> _typing.Any:
        """Produce this component's output. Runs for enabled components only."""
        if result is None:
            result = {}
        for child in self.children:
            result = await child.build(result)
        return result

    def post_build(self, data: _typing.Any) -> _typing.Any:
        """Post-process build output (may be a coroutine function)."""
        return data

    def validate(self, data: _typing.Any) -> list[_target.ValidationError]:
        """
        Check this component's post-processed output (may be a coroutine function).

        Returns:
            The problems found; an empty list if the output is valid.
        """
        return []

    def __str__(self) -> str:
        return self.rid

    def __repr__(self) -> str:
        return f"{type(self).__name__}(rid={self.rid!r})"
