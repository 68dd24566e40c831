"""Unit tests for the command-line entry point (ionic_create.cli)."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from ionic_create.cli import build_parser, main, spec_from_args
from ionic_create.config import ProjectSpec
from ionic_create.errors import FileSystemError, PackageManagerError, ProjectValidationError
from ionic_create.stages import ExecutionContext


def parse(*argv: str):
    return build_parser().parse_args(list(argv))


class TestParser:
    @pytest.mark.unit
    def test_defaults(self):
        args = parse()
        assert args.name is None
        assert args.types is None
        assert args.eslint is None
        assert args.packagemanager is None
        assert args.verbose is False

    @pytest.mark.unit
    def test_bare_toggle_means_true(self):
        args = parse("my-app", "--capacitor")
        assert args.name == "my-app"
        assert args.capacitor is True

    @pytest.mark.unit
    @pytest.mark.parametrize("value, expected", [("false", False), ("yes", True), ("0", False)])
    def test_toggle_values(self, value: str, expected: bool):
        assert parse("--prettier", value).prettier is expected

    @pytest.mark.unit
    def test_invalid_toggle_value(self, capsys):
        with pytest.raises(SystemExit):
            parse("--eslint", "perhaps")
        assert "Invalid boolean value" in capsys.readouterr().err

    @pytest.mark.unit
    def test_invalid_package_manager(self):
        with pytest.raises(SystemExit):
            parse("--packagemanager", "bun")


class TestSpecFromArgs:
    @pytest.mark.unit
    def test_flags_override_defaults(self, tmp_path: Path):
        spec = spec_from_args(
            parse("demo", "--path", str(tmp_path), "--types", "false", "--vitest", "--packagemanager", "pnpm")
        )

        assert spec.name == "demo"
        assert spec.path == tmp_path
        assert spec.types is None
        assert spec.vitest is True
        assert spec.eslint is True
        assert spec.package_manager == "pnpm"

    @pytest.mark.unit
    def test_preset_then_flags(self, tmp_path: Path):
        preset = ProjectSpec(name="from-preset", types=None, capacitor=True).save(tmp_path / "p.json")

        spec = spec_from_args(parse("--config", str(preset), "--eslint", "false"))

        assert spec.name == "from-preset"
        assert spec.types is None
        assert spec.capacitor is True
        assert spec.eslint is False

    @pytest.mark.unit
    def test_missing_preset(self, tmp_path: Path):
        with pytest.raises(FileSystemError):
            spec_from_args(parse("--config", str(tmp_path / "nope.json")))

    @pytest.mark.unit
    def test_invalid_preset(self, tmp_path: Path):
        preset = tmp_path / "bad.json"
        preset.write_text(json.dumps({"capacitor": "sometimes"}), encoding="utf-8")
        with pytest.raises(ProjectValidationError, match="Invalid configuration file"):
            spec_from_args(parse("--config", str(preset)))

    @pytest.mark.unit
    def test_invalid_types_flag(self):
        with pytest.raises(ProjectValidationError):
            spec_from_args(parse("--types", "flow"))


class TestMain:
    @pytest.fixture(autouse=True)
    def quiet_output(self):
        with patch("ionic_create.cli.print_banner"), patch("ionic_create.cli.print_section"), patch("ionic_create.cli.console"):
            yield

    @pytest.mark.unit
    def test_success(self, tmp_path: Path):
        ctx = ExecutionContext(project_path=tmp_path / "demo", package_manager="yarn")
        create = AsyncMock(return_value=ctx)
        with patch("ionic_create.cli.scaffold_project", new=create):
            with patch("ionic_create.cli.print_completion_message") as completion:
                code = main(["demo", "--path", str(tmp_path), "--packagemanager", "yarn"])

        assert code == 0
        spec = create.await_args.args[0]
        assert spec.name == "demo"
        completion.assert_called_once()
        assert completion.call_args.args[1] == "yarn"
        assert completion.call_args.kwargs["capacitor"] is None

    @pytest.mark.unit
    def test_failure_is_reported(self, tmp_path: Path):
        error = PackageManagerError("Install failed", "npm install", "ERR!")
        with patch("ionic_create.cli.scaffold_project", new=AsyncMock(side_effect=error)):
            with patch("ionic_create.cli.report_error") as report:
                with patch("ionic_create.cli.print_completion_message") as completion:
                    code = main(["demo", "--path", str(tmp_path)])

        assert code == 1
        report.assert_called_once_with(error)
        completion.assert_not_called()

    @pytest.mark.unit
    def test_invalid_option_is_reported(self):
        create = AsyncMock()
        with patch("ionic_create.cli.scaffold_project", new=create):
            with patch("ionic_create.cli.report_error") as report:
                code = main(["--types", "flow"])

        assert code == 1
        create.assert_not_awaited()
        assert isinstance(report.call_args.args[0], ProjectValidationError)

    @pytest.mark.unit
    def test_save_config_and_capacitor_summary(self, tmp_path: Path):
        preset = tmp_path / "saved.json"
        values = {"appId": "demo.ionic.io", "appName": "demo", "serverUrl": "http://10.0.0.2:5173/"}
        ctx = ExecutionContext(project_path=tmp_path / "demo", package_manager="pnpm")
        ctx.data["capacitor"] = values
        with patch("ionic_create.cli.scaffold_project", new=AsyncMock(return_value=ctx)):
            with patch("ionic_create.cli.print_completion_message") as completion:
                code = main(
                    ["demo", "--path", str(tmp_path), "--capacitor", "--save-config", str(preset)]
                )

        assert code == 0
        assert completion.call_args.args[1] == "pnpm"
        assert completion.call_args.kwargs["capacitor"] == values
        saved = ProjectSpec.load(preset)
        assert saved.name == "demo"
        assert saved.capacitor is True
