"""Tests for CLI main module."""

import json as _json
import pathlib as _pathlib
import textwrap as _textwrap
import uuid as _uuid

import click.testing as _click_testing
import pytest as _pytest
import yaml as _yaml

import architect
import architect.cli as cli

TARGET_SOURCE = _textwrap.dedent(
    """\
    import architect


    class Database(architect.Component):
        component_name = "database"
        component_uuid = "8d2f6b1c-3e4a-4f5b-9c7d-1a2b3c4d5e6f"

        async def build(self, result=None):
            return [{"kind": "Service", "spec": {"port": await self.props.port.resolve(5432)}}]


    class Web(architect.Component):
        component_name = "web"
        component_uuid = "4f1c2a9e-7b3d-4c6a-8e5f-0a1b2c3d4e5f"

        @property
        def requirements(self):
            return [architect.ComponentMatcher(Database)]

        async def build(self, result=None):
            return [{"kind": "Deployment", "spec": {"replicas": await self.props.replicas.resolve(1)}}]


    def make_target():
        target = architect.Target()
        target.enable(Web)
        target.enable(Database)
        return target


    def web_only():
        target = architect.Target()
        target.enable(Web)
        return target


    class Checked(architect.Component):
        component_name = "checked"
        component_uuid = "c0ffee00-1111-4222-8333-444455556666"

        async def build(self, result=None):
            return {"replicas": 0}

        def validate(self, data):
            return [architect.ValidationError("replicas must be positive")]


    def invalid():
        target = architect.Target()
        target.enable(Checked)
        return target


    not_a_target = 42
    """
)


@_pytest.fixture
def target_file(tmp_path: _pathlib.Path) -> str:
    """Write a target module with a unique name and return its path."""
    path = tmp_path / f"deploy_{_uuid.uuid4().hex}.py"
    path.write_text(TARGET_SOURCE)
    return str(path)


@_pytest.fixture
def runner(clean_env: dict[str, str]) -> _click_testing.CliRunner:
    return _click_testing.CliRunner(env=clean_env)


class TestCLIBasics:
    """Help and version."""

    def test_help_lists_commands(self, runner: _click_testing.CliRunner) -> None:
        result = runner.invoke(cli.cli, ["--help"])

        assert result.exit_code == 0
        for cmd in ["build", "show"]:
            assert cmd in result.output, f"Command '{cmd}' missing from help"

    def test_version(self, runner: _click_testing.CliRunner) -> None:
        result = runner.invoke(cli.cli, ["--version"])

        assert result.exit_code == 0
        assert architect.__version__ in result.output

    def test_invalid_log_level(self, runner: _click_testing.CliRunner) -> None:
        result = runner.invoke(cli.cli, ["--log-level", "chatty", "build", "deploy:target"])

        assert result.exit_code == 2


class TestBuildCommand:
    """architect build writes one file per component."""

    def test_build_yaml(
        self,
        runner: _click_testing.CliRunner,
        target_file: str,
        tmp_path: _pathlib.Path,
    ) -> None:
        out = tmp_path / "manifests"

        result = runner.invoke(cli.cli, ["build", f"{target_file}:make_target", "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert "2 file(s), digest" in result.output
        assert sorted(p.name for p in out.iterdir()) == [
            "database-8d2f6b1.yaml",
            "web-4f1c2a9.yaml",
        ]
        web = _yaml.safe_load((out / "web-4f1c2a9.yaml").read_text())
        assert web == {"kind": "Deployment", "spec": {"replicas": 1}}

    def test_build_json(
        self,
        runner: _click_testing.CliRunner,
        target_file: str,
        tmp_path: _pathlib.Path,
    ) -> None:
        result = runner.invoke(
            cli.cli,
            ["build", f"{target_file}:make_target", "-o", str(tmp_path), "--format", "json"],
        )

        assert result.exit_code == 0, result.output
        data = _json.loads((tmp_path / "database-8d2f6b1.json").read_text())
        assert data == [{"kind": "Service", "spec": {"port": 5432}}]

    def test_output_dir_from_env(
        self,
        clean_env: dict[str, str],
        target_file: str,
        tmp_path: _pathlib.Path,
    ) -> None:
        env = dict(clean_env, ARCHITECT_OUTPUT_DIR=str(tmp_path / "from-env"))
        runner = _click_testing.CliRunner(env=env)

        result = runner.invoke(cli.cli, ["build", f"{target_file}:make_target"])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "from-env" / "web-4f1c2a9.yaml").exists()

    def test_unmet_requirement_fails(
        self,
        runner: _click_testing.CliRunner,
        target_file: str,
        tmp_path: _pathlib.Path,
    ) -> None:
        result = runner.invoke(cli.cli, ["build", f"{target_file}:web_only", "-o", str(tmp_path)])

        assert result.exit_code == 1
        assert "requirement ComponentMatcher(Database) not met" in result.output

    def test_no_requirements_flag(
        self,
        runner: _click_testing.CliRunner,
        target_file: str,
        tmp_path: _pathlib.Path,
    ) -> None:
        result = runner.invoke(
            cli.cli,
            ["build", f"{target_file}:web_only", "-o", str(tmp_path), "--no-requirements"],
        )

        assert result.exit_code == 0, result.output
        assert "1 file(s)" in result.output

    def test_validation_errors_fail(
        self,
        runner: _click_testing.CliRunner,
        target_file: str,
        tmp_path: _pathlib.Path,
    ) -> None:
        """Validation errors stop the build before anything is written."""
        out = tmp_path / "manifests"

        result = runner.invoke(cli.cli, ["build", f"{target_file}:invalid", "-o", str(out)])

        assert result.exit_code == 1
        assert "1 validation error(s)" in result.output
        assert "replicas must be positive" in result.output
        assert not out.exists()

    def test_no_validate_flag(
        self,
        runner: _click_testing.CliRunner,
        target_file: str,
        tmp_path: _pathlib.Path,
    ) -> None:
        result = runner.invoke(
            cli.cli,
            ["build", f"{target_file}:invalid", "-o", str(tmp_path), "--no-validate"],
        )

        assert result.exit_code == 0, result.output
        assert (tmp_path / "checked-c0ffee0.yaml").exists()

    def test_bad_reference(self, runner: _click_testing.CliRunner) -> None:
        """A reference without an attribute is a usage error."""
        result = runner.invoke(cli.cli, ["build", "no_colon_here"])

        assert result.exit_code == 2
        assert "Expected MODULE:ATTRIBUTE" in result.output

    def test_missing_attribute(self, runner: _click_testing.CliRunner, target_file: str) -> None:
        result = runner.invoke(cli.cli, ["build", f"{target_file}:nope"])

        assert result.exit_code == 2
        assert "has no attribute" in result.output

    def test_not_a_target(self, runner: _click_testing.CliRunner, target_file: str) -> None:
        result = runner.invoke(cli.cli, ["build", f"{target_file}:not_a_target"])

        assert result.exit_code == 2
        assert "is not a Target" in result.output

    def test_missing_file(self, runner: _click_testing.CliRunner, tmp_path: _pathlib.Path) -> None:
        result = runner.invoke(cli.cli, ["build", f"{tmp_path / 'absent.py'}:target"])

        assert result.exit_code == 2
        assert "File not found" in result.output


class TestShowCommand:
    """architect show prints merged output."""

    def test_show_yaml_without_color(
        self, runner: _click_testing.CliRunner, target_file: str
    ) -> None:
        result = runner.invoke(cli.cli, ["show", f"{target_file}:make_target", "--no-color"])

        assert result.exit_code == 0, result.output
        documents = list(_yaml.safe_load_all(result.output))
        assert {"kind": "Deployment", "spec": {"replicas": 1}} in documents
        assert {"kind": "Service", "spec": {"port": 5432}} in documents

    def test_show_matches_written_file(
        self,
        runner: _click_testing.CliRunner,
        target_file: str,
        tmp_path: _pathlib.Path,
    ) -> None:
        """show prints a component exactly as build writes it."""
        runner.invoke(cli.cli, ["build", f"{target_file}:make_target", "-o", str(tmp_path)])

        result = runner.invoke(
            cli.cli,
            ["show", f"{target_file}:make_target", "--component", "web-4f1c2a9", "--no-color"],
        )

        assert result.exit_code == 0, result.output
        assert result.output == (tmp_path / "web-4f1c2a9.yaml").read_text()

    def test_show_json_component(
        self, runner: _click_testing.CliRunner, target_file: str
    ) -> None:
        result = runner.invoke(
            cli.cli,
            ["show", f"{target_file}:make_target", "--component", "web-4f1c2a9", "--json"],
        )

        assert result.exit_code == 0, result.output
        assert _json.loads(result.output) == [{"kind": "Deployment", "spec": {"replicas": 1}}]

    def test_show_unknown_component(
        self, runner: _click_testing.CliRunner, target_file: str
    ) -> None:
        result = runner.invoke(
            cli.cli, ["show", f"{target_file}:make_target", "--component", "nope"]
        )

        assert result.exit_code == 1
        assert "Unknown component: nope" in result.output
        assert "web-4f1c2a9" in result.output
