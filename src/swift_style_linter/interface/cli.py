"""CLI entry points for swiftstyle - Thin Controller using Typer."""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

import typer

from swift_style_linter.domain.config import ConfigurationLoader
from swift_style_linter.domain.entities import RuleParameter, Severity
from swift_style_linter.domain.exceptions import ConfigurationError, ParserUnavailableError
from swift_style_linter.domain.protocols import (
    FileSystemProtocol,
    StructureParserProtocol,
    TelemetryPort,
)
from swift_style_linter.domain.registry import RuleRegistry
from swift_style_linter.interface.reporters import XcodeReporter, reporter_for
from swift_style_linter.use_cases.autocorrect_files import AutocorrectFilesUseCase
from swift_style_linter.use_cases.lint_files import LintFilesUseCase

EXIT_CONFIGURATION_ERROR = 1
EXIT_SERIOUS_VIOLATIONS = 2

_PATHS = typer.Argument(None, help="Files or directories to process (default: configured `included`, else .)")
_CONFIG = typer.Option(None, "--config", "-c", help="Configuration file (default: search upward from cwd)")
_VERBOSE = typer.Option(False, "--verbose", "-v", help="Log debug output")


class ReporterChoice(str, Enum):
    xcode = "xcode"
    json = "json"


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    telemetry: TelemetryPort
    filesystem: FileSystemProtocol
    registry: RuleRegistry
    load_config: Callable[[Optional[str]], tuple[dict[str, object], Optional[Path]]]
    get_parser: Callable[[str], StructureParserProtocol]


@dataclass(frozen=True)
class LoadedConfiguration:
    """Validated settings plus the directory their relative paths are anchored to."""

    loader: ConfigurationLoader
    parser: StructureParserProtocol
    root: Path


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def configure_logging(verbose: bool) -> None:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
            force=True,
        )

    @staticmethod
    def load(deps: CLIDependencies, config: Optional[Path]) -> LoadedConfiguration:
        """Validate configuration up front; exit 1 on any configuration problem."""
        try:
            raw, source = deps.load_config(str(config) if config else None)
            loader = ConfigurationLoader(raw, deps.registry)
            root = source.resolve().parent if source is not None else Path.cwd()
            return LoadedConfiguration(loader, deps.get_parser(loader.parser_name), root)
        except ConfigurationError as exc:
            deps.telemetry.error(str(exc))
            raise typer.Exit(code=EXIT_CONFIGURATION_ERROR) from exc

    @staticmethod
    def collect_files(
        deps: CLIDependencies, loaded: LoadedConfiguration, paths: Optional[List[Path]]
    ) -> list[str]:
        """Command-line paths are relative to cwd; configured paths to the config file's directory."""
        loader, root = loaded.loader, loaded.root
        if paths:
            targets = [str(p) for p in paths]
        elif loader.included:
            targets = [str(root / p) for p in loader.included]
        else:
            targets = ["."]
        excluded = [str(root / p) for p in loader.excluded]
        files: dict[str, None] = {}
        for target in targets:
            for found in deps.filesystem.glob_swift_files(target, excluded):
                files.setdefault(found)
        return list(files)

    def describe_parameters(parameters: tuple[RuleParameter, ...]) -> str:
        rendered = []
        for parameter in parameters:
            value = getattr(parameter.value, "value", parameter.value)
            rendered.append(parameter.severity.value if value is None else f"{parameter.severity.value}={value}")
        return ", ".join(rendered)

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies."""
        app = typer.Typer(
            name="swiftstyle",
            help="swiftstyle: style and convention checks for Swift sources",
            add_completion=False,
        )

        @app.command()
        def lint(
            paths: Optional[List[Path]] = _PATHS,
            config: Optional[Path] = _CONFIG,
            reporter: Optional[ReporterChoice] = typer.Option(None, help="Output format (default: configured reporter)"),
            strict: bool = typer.Option(False, help="Fail on warnings as well as errors"),
            jobs: int = typer.Option(1, "--jobs", "-j", min=1, help="Files validated in parallel"),
            verbose: bool = _VERBOSE,
        ) -> None:
            """Print style violations."""
            CLIAppFactory.configure_logging(verbose)
            loaded = CLIAppFactory.load(deps, config)
            files = CLIAppFactory.collect_files(deps, loaded, paths)
            use_case = LintFilesUseCase(loaded.parser, deps.filesystem, deps.telemetry, max_workers=jobs)
            try:
                report = use_case.execute(files, loaded.loader.rules)
            except ParserUnavailableError as exc:
                deps.telemetry.error(str(exc))
                raise typer.Exit(code=EXIT_CONFIGURATION_ERROR) from exc

            output = reporter_for(reporter.value if reporter else loaded.loader.reporter_name)
            violations = report.violations
            if violations or output.identifier == "json":
                typer.echo(output.report_violations(violations))
            serious = sum(1 for v in violations if v.severity is Severity.ERROR)
            deps.telemetry.step(
                f"Done linting! Found {len(violations)} violation(s), {serious} serious "
                f"in {len(report.files)} file(s)."
            )
            if report.has_serious_violations or (strict and violations):
                raise typer.Exit(code=EXIT_SERIOUS_VIOLATIONS)

        @app.command()
        def autocorrect(
            paths: Optional[List[Path]] = _PATHS,
            config: Optional[Path] = _CONFIG,
            verbose: bool = _VERBOSE,
        ) -> None:
            """Rewrite files to fix correctable violations."""
            CLIAppFactory.configure_logging(verbose)
            loaded = CLIAppFactory.load(deps, config)
            files = CLIAppFactory.collect_files(deps, loaded, paths)
            use_case = AutocorrectFilesUseCase(loaded.parser, deps.filesystem, deps.telemetry)
            try:
                reports = use_case.execute(files, loaded.loader.rules)
            except ParserUnavailableError as exc:
                deps.telemetry.error(str(exc))
                raise typer.Exit(code=EXIT_CONFIGURATION_ERROR) from exc

            corrections = [c for r in reports for c in r.corrections]
            if corrections:
                typer.echo(XcodeReporter().report_corrections(corrections))
            changed = sum(1 for r in reports if r.corrections)
            deps.telemetry.step(f"Done correcting {len(files)} file(s)! {changed} file(s) changed.")

        @app.command()
        def rules() -> None:
            """List available rules."""
            for rule_type in deps.registry:
                description = rule_type.description
                correctable = "yes" if RuleRegistry.is_correctable(rule_type) else "no"
                defaults = CLIAppFactory.describe_parameters(rule_type().severity_configuration)
                typer.echo(
                    f"{description.identifier:<20} {description.name:<20} "
                    f"correctable: {correctable:<4} {defaults}"
                )

        return app
