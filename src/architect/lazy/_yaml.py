"""
YAML loading for lazy trees.

Provides:
- ForceMarker: wrapper marking a subtree as atomic (replace, never merge)
- LazyLoader: YAML loader that understands the ``!force`` tag

Example YAML:
    metadata:
      labels:
        app: web
    # Replace the whole selector instead of merging it with other declarations
    selector: !force
      matchLabels:
        app: web

When a store declares a value containing a ForceMarker, the marked subtree
is recorded as a single forced declaration at its path.

Usage:
    >>> import architect.lazy as lazy
    >>> root = lazy.from_yaml(content)
"""

from __future__ import annotations

import typing as _typing

import yaml as _yaml


class ForceMarker:
    """
    Wrapper marking a value for forced (non-merging) declaration.

    Use `.value` to access the wrapped value.
    """

    __slots__ = ("_value",)

    def __init__(self, value: _typing.Any) -> None:
        self._value = value

    @property
    def value(self) -> _typing.Any:
        """The wrapped value."""
        return self._value

    def __repr__(self) -> str:
        return f"ForceMarker({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ForceMarker):
            return bool(self._value == other._value)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(("ForceMarker", id(self._value)))


def is_force(value: _typing.Any) -> bool:
    """Check if a value is a ForceMarker."""
    return isinstance(value, ForceMarker)


def unwrap(value: _typing.Any) -> _typing.Any:
    """
    Remove ForceMarker wrappers anywhere inside a value.

    Markers only mean something where a store decomposes a value; inside a
    value recorded whole they are replaced by what they wrap.
    """
    if is_force(value):
        return unwrap(value.value)
    if isinstance(value, dict):
        if not any(_contains_marker(item) for item in value.values()):
            return value
        return {key: unwrap(item) for key, item in value.items()}
    if isinstance(value, list):
        if not any(_contains_marker(item) for item in value):
            return value
        return [unwrap(item) for item in value]
    return value


def _contains_marker(value: _typing.Any) -> bool:
    if is_force(value):
        return True
    if isinstance(value, dict):
        return any(_contains_marker(item) for item in value.values())
    if isinstance(value, list):
        return any(_contains_marker(item) for item in value)
    return False


def _force_constructor(
    loader: _yaml.SafeLoader,
    node: _yaml.Node,
) -> ForceMarker:
    """
    Construct a ForceMarker from the !force tag.

    The tag wraps whatever value follows:
        key: !force value
        key: !force
          nested: dict
        key: !force [list, items]
    """
    value: _typing.Any
    if isinstance(node, _yaml.MappingNode):
        value = loader.construct_mapping(node, deep=True)
    elif isinstance(node, _yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    elif isinstance(node, _yaml.ScalarNode):
        # Re-resolve the plain scalar so ints, bools and nulls keep their types
        tag = loader.resolve(_yaml.ScalarNode, node.value, (True, False))
        value = loader.construct_object(_yaml.ScalarNode(tag, node.value), deep=True)
    else:
        value = None

    return ForceMarker(value)


class LazyLoader(_yaml.SafeLoader):
    """SafeLoader extended with the ``!force`` tag."""

    pass


LazyLoader.add_constructor("!force", _force_constructor)


def load(stream: _typing.Any) -> _typing.Any:
    """
    Load YAML with lazy extensions (!force).

    Args:
        stream: YAML content (string, bytes, or file-like object).

    Returns:
        Plain nested data, with ForceMarker wrappers where tagged.
    """
    return _yaml.load(stream, Loader=LazyLoader)
