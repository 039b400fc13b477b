"""CLI tests through typer's CliRunner, wired with real gateways over tmp_path."""

import json
from pathlib import Path
from typing import Optional
from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from swift_style_linter.domain.exceptions import ParserUnavailableError
from swift_style_linter.domain.registry import RuleRegistry
from swift_style_linter.infrastructure.config_file_loader import ConfigFileLoader
from swift_style_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from swift_style_linter.infrastructure.gateways.swift_scanner import SwiftDeclarationScanner
from swift_style_linter.interface.cli import CLIAppFactory, CLIDependencies

runner = CliRunner()


def _app(tmp_path: Path, parser: Optional[object] = None):
    deps = CLIDependencies(
        telemetry=MagicMock(),
        filesystem=FileSystemGateway(),
        registry=RuleRegistry(),
        load_config=lambda path: ConfigFileLoader.load_config_from_fs(path, start=tmp_path),
        get_parser=lambda name: parser or SwiftDeclarationScanner(),
    )
    return CLIAppFactory.create_app(deps), deps


@pytest.fixture
def project(tmp_path: Path) -> Path:
    sources = tmp_path / "Sources"
    sources.mkdir()
    (sources / "A.swift").write_text("/// docs\npublic final class A {\n    override public func run() {}\n}\n")
    return tmp_path


def test_lint_reports_warnings_and_exits_zero(project: Path) -> None:
    app, deps = _app(project)
    result = runner.invoke(app, ["lint", str(project / "Sources")])
    assert result.exit_code == 0, result.output
    assert "A.swift:3:21: warning: Missing Docs Violation" in result.output
    assert "warning: Visibility Order Violation" in result.output
    deps.telemetry.step.assert_called()


def test_lint_strict_fails_on_warnings(project: Path) -> None:
    app, _ = _app(project)
    result = runner.invoke(app, ["lint", str(project / "Sources"), "--strict"])
    assert result.exit_code == 2


def test_lint_exits_two_on_error_severity(project: Path) -> None:
    (project / ".swiftstyle.toml").write_text('visibility_order = "error"\n')
    app, _ = _app(project)
    result = runner.invoke(app, ["lint", str(project / "Sources")])
    assert result.exit_code == 2
    assert "error: Visibility Order Violation" in result.output


def test_lint_json_reporter_and_disabled_rules(project: Path) -> None:
    (project / ".swiftstyle.toml").write_text('disabled_rules = ["missing_docs"]\nreporter = "json"\n')
    app, _ = _app(project)
    result = runner.invoke(app, ["lint", str(project / "Sources")])
    assert result.exit_code == 0
    assert [entry["rule_id"] for entry in json.loads(result.output)] == ["visibility_order"]


def test_lint_configuration_error_exits_one(project: Path) -> None:
    (project / ".swiftstyle.toml").write_text('disabled_rules = ["no_such_rule"]\n')
    app, deps = _app(project)
    result = runner.invoke(app, ["lint", str(project / "Sources")])
    assert result.exit_code == 1
    deps.telemetry.error.assert_called_once()


def test_lint_explicit_config_and_included(project: Path) -> None:
    config = project / "custom.toml"
    config.write_text(f'included = ["{(project / "Sources").as_posix()}"]\nonly_rules = ["line_length"]\n')
    app, _ = _app(project)
    result = runner.invoke(app, ["lint", "--config", str(config)])
    assert result.exit_code == 0
    assert result.output == ""


def test_lint_missing_parser_exits_one(project: Path) -> None:
    parser = MagicMock()
    parser.parse.side_effect = ParserUnavailableError("sourcekitten not found")
    app, deps = _app(project, parser=parser)
    result = runner.invoke(app, ["lint", str(project / "Sources")])
    assert result.exit_code == 1
    deps.telemetry.error.assert_called_once_with("sourcekitten not found")


def test_autocorrect_rewrites_files(project: Path) -> None:
    app, _ = _app(project)
    result = runner.invoke(app, ["autocorrect", str(project / "Sources")])
    assert result.exit_code == 0
    assert "A.swift:3:5 Corrected Visibility Order" in result.output
    assert "public override func run()" in (project / "Sources" / "A.swift").read_text()


def test_rules_lists_every_rule(tmp_path: Path) -> None:
    app, _ = _app(tmp_path)
    result = runner.invoke(app, ["rules"])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert [line.split()[0] for line in lines] == ["line_length", "missing_docs", "visibility_order"]
    assert "warning=100, error=200" in lines[0]
    assert "correctable: yes" in lines[2]
    assert "warning=public" in lines[1]


def test_configured_paths_are_relative_to_the_config_file(project: Path, monkeypatch) -> None:
    generated = project / "Sources" / "Generated"
    generated.mkdir()
    (generated / "G.swift").write_text("public struct G {}\n")
    (project / ".swiftstyle.toml").write_text('excluded = ["Sources/Generated"]\n')
    monkeypatch.chdir(project / "Sources")
    app, _ = _app(project / "Sources")
    result = runner.invoke(app, ["lint"])
    assert result.exit_code == 0
    assert "A.swift:3:21: warning: Missing Docs Violation" in result.output
    assert "G.swift" not in result.output


def test_configured_included_from_a_nested_directory(project: Path, monkeypatch) -> None:
    (project / "Docs").mkdir()
    (project / "Docs" / "Stray.swift").write_text("public struct Stray {}\n")
    (project / ".swiftstyle.toml").write_text('included = ["Sources"]\n')
    monkeypatch.chdir(project / "Docs")
    app, _ = _app(project / "Docs")
    result = runner.invoke(app, ["lint"])
    assert result.exit_code == 0
    assert "A.swift:3:21" in result.output
    assert "Stray.swift" not in result.output
