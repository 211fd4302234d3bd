"""
Main CLI entry point for Architect.

Provides the command-line interface using Click. A target is named as
``module:attribute`` (or ``path/to/file.py:attribute``) where the attribute
is a Target instance or a zero-argument callable returning one.
"""

import asyncio as _asyncio
import importlib as _importlib
import importlib.util as _importlib_util
import json as _json
import logging as _logging
import os as _os
import pathlib as _pathlib
import sys as _sys
import typing as _typing

import click as _click

import architect
import architect.config as config
import architect.constants as constants
import architect.lazy as lazy
import architect.result as result_module
import architect.target as target_module

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}


def _run_async(coro: _typing.Coroutine[_typing.Any, _typing.Any, _typing.Any]) -> _typing.Any:
    """Run an async coroutine synchronously."""
    return _asyncio.run(coro)


def _load_module(module_ref: str) -> _typing.Any:
    """Import a module by dotted name or by .py file path."""
    if module_ref.endswith(".py"):
        path = _pathlib.Path(module_ref).resolve()
        if not path.exists():
            raise _click.BadParameter(f"File not found: {module_ref}")
        spec = _importlib_util.spec_from_file_location(path.stem, path)
        if spec is None or spec.loader is None:
            raise _click.BadParameter(f"Cannot import {module_ref}")
        module = _importlib_util.module_from_spec(spec)
        _sys.modules[path.stem] = module
        spec.loader.exec_module(module)
        return module

    # Make targets in the working directory importable
    if _os.getcwd() not in _sys.path:
        _sys.path.insert(0, _os.getcwd())
    try:
        return _importlib.import_module(module_ref)
    except ImportError as e:
        raise _click.BadParameter(f"Cannot import {module_ref}: {e}") from e


def load_target(ref: str) -> target_module.Target:
    """
    Load a Target from a ``module:attribute`` reference.

    Raises:
        click.BadParameter: If the reference cannot be loaded or is not a Target.
    """
    module_ref, sep, attr = ref.rpartition(":")
    if not sep or not module_ref or not attr:
        raise _click.BadParameter(f"Expected MODULE:ATTRIBUTE, got {ref!r}")

    obj: _typing.Any = _load_module(module_ref)
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise _click.BadParameter(f"{module_ref} has no attribute {attr!r}") from None

    if not isinstance(obj, target_module.Target) and callable(obj):
        obj = obj()

    if not isinstance(obj, target_module.Target):
        raise _click.BadParameter(f"{ref} is not a Target (got {type(obj).__name__})")
    return obj


def _resolve_target(ref: str, requirements: bool, validate: bool) -> result_module.Result:
    """Load and resolve a target, turning engine failures into CLI errors."""
    target = load_target(ref)
    try:
        result = _typing.cast(
            result_module.Result, _run_async(target.resolve(requirements, validate))
        )
    except (lazy.LazyError, target_module.RequirementError) as e:
        raise _click.ClickException(str(e)) from e

    if result.errors:
        lines = [f"{len(result.errors)} validation error(s):"]
        lines.extend(f"  {error}" for error in result.errors)
        raise _click.ClickException("\n".join(lines))
    return result


def _should_use_color(cli_flag: bool | None) -> tuple[bool, bool]:
    """Determine whether to use color output.

    Priority:
    1. CLI flag (--color / --no-color) if specified
    2. NO_COLOR env var (if set, disable color) - standard convention
    3. Auto-detect: color if stdout is a TTY

    Returns:
        Tuple of (color_enabled, force_color).
        force_color is True when color was explicitly requested (not auto-detected).
    """
    if cli_flag is not None:
        return (cli_flag, cli_flag)

    if _os.environ.get("NO_COLOR") is not None:
        return (False, False)

    return (_sys.stdout.isatty(), False)


def _print_yaml(yaml_text: str, *, color: bool = True, force_color: bool = False) -> None:
    """Print YAML text, optionally with syntax highlighting."""
    if color:
        import rich.console as _rich_console
        import rich.syntax as _rich_syntax

        console = _rich_console.Console(
            force_terminal=force_color,
            no_color=False if force_color else None,
            color_system="truecolor" if force_color else "auto",
        )
        syntax = _rich_syntax.Syntax(
            yaml_text,
            "yaml",
            theme="monokai",
            background_color="default",
        )
        console.print(syntax)
        return

    _click.echo(yaml_text, nl=False)


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(architect.__version__, "-v", "--version", prog_name="architect")
@_click.option("--verbose", is_flag=True, help="Enable debug logging")
@_click.option(
    "--log-level",
    type=_click.Choice(config.settings.LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Root log level (overrides ARCHITECT_LOG_LEVEL)",
)
@_click.pass_context
def cli(ctx: _click.Context, verbose: bool, log_level: str | None) -> None:
    """Architect - build configuration trees from lazily resolved components."""
    ctx.ensure_object(dict)

    overrides: dict[str, _typing.Any] = {}
    if verbose:
        overrides["log_level"] = "DEBUG"
    elif log_level is not None:
        overrides["log_level"] = log_level

    try:
        settings = config.Settings(**overrides)
    except ValueError as e:
        raise _click.ClickException(f"Invalid settings: {e}") from e

    _logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj["settings"] = settings


@cli.command()
@_click.argument("target")
@_click.option(
    "-o",
    "--output",
    "output_dir",
    type=_click.Path(file_okay=False, path_type=_pathlib.Path),
    default=None,
    help="Output directory (default: ARCHITECT_OUTPUT_DIR or ./out)",
)
@_click.option(
    "--format",
    "output_format",
    type=_click.Choice(constants.OUTPUT_FORMATS),
    default=None,
    help="Output format (default: ARCHITECT_OUTPUT_FORMAT or yaml)",
)
@_click.option(
    "--requirements/--no-requirements",
    default=None,
    help="Fail when a component requirement is not met",
)
@_click.option(
    "--validate/--no-validate",
    default=None,
    help="Fail when a component reports validation errors",
)
@_click.pass_context
def build(
    ctx: _click.Context,
    target: str,
    output_dir: _pathlib.Path | None,
    output_format: str | None,
    requirements: bool | None,
    validate: bool | None,
) -> None:
    """Resolve TARGET and write one file per enabled component.

    Examples:
        architect build deploy:target
        architect build ./deploy.py:make_target -o manifests --format json
    """
    settings: config.Settings = ctx.obj["settings"]
    if requirements is None:
        requirements = settings.validate_requirements
    if validate is None:
        validate = settings.validate_output

    result = _resolve_target(target, requirements, validate)
    result.writer = result_module.WRITERS[output_format or settings.output_format]()

    written = result.write(output_dir or settings.output_dir)
    for path in written:
        _click.echo(f"wrote {path}")
    _click.echo(f"{len(written)} file(s), digest {result.digest}")


@cli.command()
@_click.argument("target")
@_click.option("--component", "rid", type=str, default=None, help="Show one component by rid")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.option(
    "--color/--no-color",
    "use_color",
    default=None,
    help="Enable/disable syntax highlighting (default: auto-detect TTY)",
)
@_click.option(
    "--requirements/--no-requirements",
    default=None,
    help="Fail when a component requirement is not met",
)
@_click.option(
    "--validate/--no-validate",
    default=None,
    help="Fail when a component reports validation errors",
)
@_click.pass_context
def show(
    ctx: _click.Context,
    target: str,
    rid: str | None,
    as_json: bool,
    use_color: bool | None,
    requirements: bool | None,
    validate: bool | None,
) -> None:
    """Resolve TARGET and print the merged output.

    Examples:
        architect show deploy:target
        architect show deploy:target --component web-4f1c2a9 --json
    """
    settings: config.Settings = ctx.obj["settings"]
    if requirements is None:
        requirements = settings.validate_requirements
    if validate is None:
        validate = settings.validate_output

    result = _resolve_target(target, requirements, validate)

    if rid is not None:
        outputs = result.outputs()
        if rid not in outputs:
            available = ", ".join(sorted(outputs)) or "<none>"
            raise _click.ClickException(f"Unknown component: {rid}. Available: {available}")
        data: _typing.Any = outputs[rid]
    else:
        data = result.all

    if as_json:
        _click.echo(_json.dumps(data, indent=2))
        return

    yaml_text = result_module.YamlWriter().dumps(data)
    color_enabled, force_color = _should_use_color(use_color)
    _print_yaml(yaml_text, color=color_enabled, force_color=force_color)


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="architect")


if __name__ == "__main__":
    main()
