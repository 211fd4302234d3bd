"""
Target: the orchestration context that configures and builds components.

Resolution runs in phases:
1. Configure every registered component concurrently (components may
   register and configure further components)
2. Keep the components whose ``enable`` prop resolves truthy
3. Check requirements between enabled components
4. Build every enabled component concurrently and post-process the output
5. Optionally validate each output, collecting problems in the Result

All declarations must be made during configuration; building only reads.
"""

from __future__ import annotations

import asyncio as _asyncio
import inspect as _inspect
import logging as _logging
import typing as _typing

import architect.component as component_module
import architect.context as context_module
import architect.registry as registry
import architect.result as result_module
import architect.utils.objects as objects

_logger = _logging.getLogger(__name__)

C = _typing.TypeVar("C", bound=component_module.Component)
F = _typing.TypeVar("F", bound="BaseFact")


class ValidationError(Exception):
    """A problem found in the resolved configuration tree."""

    pass


class RequirementError(Exception):
    """An enabled component requires a component type that is not enabled."""

    def __init__(
        self,
        component: component_module.Component,
        matcher: component_module.ComponentMatcher,
    ) -> None:
        self.component = component
        self.matcher = matcher
        super().__init__(f"Component {component}: requirement {matcher} not met")


class BaseFact:
    """A shared piece of information registered on a target."""

    def __init__(self, instance: _typing.Any = None) -> None:
        self.instance = instance


class Target:
    """
    Context for constructing output from components.

    Args:
        params: Free-form parameters available to components.
    """

    def __init__(self, params: dict[str, _typing.Any] | None = None) -> None:
        self.params: dict[str, _typing.Any] = dict(params or {})
        self._components = registry.Registry()
        self._facts = registry.Registry()

    @property
    def components(self) -> list[component_module.Component]:
        """Every registered component, in registration order."""
        return self._components.values()

    def component(
        self,
        token: type[C],
        name: str | None = None,
        auto: bool = False,
    ) -> C:
        """
        Return the component registered for ``token`` and ``name``.

        Args:
            token: Component class.
            name: Instance name (defaults to the class's component_name).
            auto: Construct and register the component if it is missing.

        Raises:
            KeyError: If the component is missing and ``auto`` is False.
        """
        instance = self._components.request(token, name)
        if instance is None:
            if not auto:
                raise KeyError(f"Component {token.__name__} ({name or 'default'}) is not registered")
            instance = token(self, name=name)
            self._components.register(token, instance, name)
            _logger.debug("registered component %s", instance.rid)
        return instance

    def enable(self, token: type[component_module.Component], name: str | None = None) -> None:
        """Register (if needed) and enable a component."""
        self.component(token, name, auto=True).props.set({"enable": True})

    def register_fact(self, fact: BaseFact) -> None:
        """Make a fact available to components under its type."""
        self._facts.register(type(fact), fact)

    def fact(self, token: type[F]) -> F | None:
        """Return the fact registered for ``token``, or None."""
        return self._facts.request(token)

    async def _configure(self) -> None:
        context = context_module.ConfigurationContext(self)
        configured: set[int] = set()

        # Configuring may register more components; repeat until none are new
        while True:
            pending = [c for c in self._components.values() if id(c) not in configured]
            if not pending:
                break
            configured.update(id(c) for c in pending)
            _logger.debug("configuring %d component(s)", len(pending))
            await _asyncio.gather(*(c.configure(context) for c in pending))

    async def _is_enabled(self, component: component_module.Component) -> bool:
        return bool(await component.props.enable.resolve(False))

    async def resolve(
        self,
        requirements: bool = True,
        validate: bool = True,
    ) -> result_module.Result:
        """
        Configure and build every enabled component.

        Args:
            requirements: Fail when a component's requirements are not met.
            validate: Run each component's validate() hook on its output and
                collect the problems in ``Result.errors``.

        Returns:
            The Result holding every enabled component's output.

        Raises:
            RequirementError: If ``requirements`` is set and one is unmet.
        """
        await self._configure()

        enabled = await objects.async_filter(self._components.values(), self._is_enabled)
        _logger.debug(
            "enabled components: %s", ", ".join(c.rid for c in enabled) or "<none>"
        )

        resolved = {c.rid: result_module.ResolvedComponent(component=c) for c in enabled}

        for c in enabled:
            for matcher in c.requirements:
                matches = [other for other in enabled if matcher.match(other)]
                if not matches and requirements:
                    raise RequirementError(c, matcher)
                resolved[c.rid].dependencies.extend(matches)

        async def _build(c: component_module.Component) -> None:
            output = await c.build()
            if output is None:
                return
            output = c.post_build(output)
            if _inspect.isawaitable(output):
                output = await output
            resolved[c.rid].result = output

        await _asyncio.gather(*(_build(c) for c in enabled))

        result = result_module.Result(components=resolved)
        if validate:
            for rid, item in resolved.items():
                if item.result is None:
                    continue
                errors = item.component.validate(item.result)
                if _inspect.isawaitable(errors):
                    errors = await errors
                for error in errors:
                    _logger.debug("validation error in %s: %s", rid, error)
                    result.errors.append(error)
        return result
