"""
Build results and the writers that serialise them.

A Result holds the output of every enabled component, keyed by the
component's short result id (rid).
"""

from __future__ import annotations

import dataclasses as _dataclasses
import json as _json
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import yaml as _yaml

import architect.utils.objects as objects

if _typing.TYPE_CHECKING:
    import architect.component as _component
    import architect.target as _target

_logger = _logging.getLogger(__name__)


@_dataclasses.dataclass
class ResolvedComponent:
    """One enabled component and what it built."""

    component: _component.Component
    dependencies: list[_component.Component] = _dataclasses.field(default_factory=list)
    result: _typing.Any = None


class Writer(_typing.Protocol):
    """Serialises a Result into a directory."""

    def write(self, result: Result, directory: _pathlib.Path) -> list[_pathlib.Path]: ...


class Result:
    """
    Output of Target.resolve().

    Args:
        components: Resolved components keyed by rid.
        writer: Writer used by write().
    """

    def __init__(
        self,
        components: dict[str, ResolvedComponent] | None = None,
        writer: Writer | None = None,
    ) -> None:
        self.components: dict[str, ResolvedComponent] = dict(components or {})
        self.errors: list[_target.ValidationError] = []
        self.writer = writer

    def outputs(self) -> dict[str, _typing.Any]:
        """Build output per rid, skipping components that produced nothing."""
        return {
            rid: resolved.result
            for rid, resolved in self.components.items()
            if resolved.result is not None
        }

    @property
    def all(self) -> list[_typing.Any]:
        """Every component's output concatenated into one list."""
        merged: list[_typing.Any] = []
        for output in self.outputs().values():
            merged = objects.recursive_merge(merged, output)
        return merged

    @property
    def digest(self) -> str:
        """Stable hash of all outputs, for change detection."""
        outputs = self.outputs()
        return objects.composite_hash(outputs[rid] for rid in sorted(outputs))

    def write(self, directory: str | _pathlib.Path) -> list[_pathlib.Path]:
        """
        Write the result to a directory with the configured writer.

        Returns:
            Paths of the written files (empty if no writer is configured).
        """
        if self.writer is None:
            return []
        path = _pathlib.Path(directory)
        path.mkdir(parents=True, exist_ok=True)
        written = self.writer.write(self, path)
        _logger.debug("wrote %d file(s) to %s", len(written), path)
        return written


class YamlWriter:
    """Writes one YAML file per component; list outputs become multi-document files."""

    suffix = ".yaml"

    def dumps(self, output: _typing.Any) -> str:
        if isinstance(output, list):
            return _yaml.safe_dump_all(output, sort_keys=False)
        return _yaml.safe_dump(output, sort_keys=False)

    def write(self, result: Result, directory: _pathlib.Path) -> list[_pathlib.Path]:
        written = []
        for rid, output in result.outputs().items():
            path = directory / f"{rid}{self.suffix}"
            path.write_text(self.dumps(output), encoding="utf-8")
            written.append(path)
        return written


class JsonWriter(YamlWriter):
    """Writes one JSON file per component."""

    suffix = ".json"

    def dumps(self, output: _typing.Any) -> str:
        return _json.dumps(output, indent=2) + "\n"


WRITERS: dict[str, type[YamlWriter]] = {
    "yaml": YamlWriter,
    "json": JsonWriter,
}
