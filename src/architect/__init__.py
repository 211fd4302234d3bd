"""
Architect - lazily resolved configuration trees

Builds large structured configuration (Kubernetes manifests, router
configs, ...) out of independently declared components whose properties
reference each other, override by weight, merge deeply and are gated by
conditions, all resolved asynchronously at build time.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("architect")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "Architect Contributors"

from architect.component import Component, ComponentDefinitionError, ComponentMatcher  # noqa: E402
from architect.context import ConfigurationContext  # noqa: E402
from architect.result import Result  # noqa: E402
from architect.target import BaseFact, RequirementError, Target, ValidationError  # noqa: E402

__all__ = [
    "__version__",
    "__version_info__",
    "BaseFact",
    "Component",
    "ComponentDefinitionError",
    "ComponentMatcher",
    "ConfigurationContext",
    "RequirementError",
    "Result",
    "Target",
    "ValidationError",
]
