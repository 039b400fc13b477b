"""Use Case: Lint Swift files with the configured rules."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional, Sequence

from swift_style_linter.domain.declaration_index import DeclarationIndex
from swift_style_linter.domain.entities import Severity, StyleViolation
from swift_style_linter.domain.exceptions import SourceParseError
from swift_style_linter.domain.protocols import (
    FileSystemProtocol,
    StructureParserProtocol,
    TelemetryPort,
)
from swift_style_linter.domain.rules import DeclarationIndexAware, Rule
from swift_style_linter.domain.source_file import SourceFile


@dataclass
class FileReport:
    """Outcome for one file: its violations, or the error that isolated it."""

    path: str
    violations: list[StyleViolation] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class LintReport:
    files: list[FileReport] = field(default_factory=list)
    cancelled: bool = False

    @property
    def violations(self) -> list[StyleViolation]:
        return [violation for report in self.files for violation in report.violations]

    @property
    def errors(self) -> list[FileReport]:
        return [report for report in self.files if report.error is not None]

    @property
    def has_serious_violations(self) -> bool:
        return any(violation.severity is Severity.ERROR for violation in self.violations)


def lint_source(file: SourceFile, rules: Sequence[Rule]) -> list[StyleViolation]:
    """Run every rule over one file, in rule order, dropping violations in disabled regions."""
    violations: list[StyleViolation] = []
    for rule in rules:
        for violation in rule.validate(file):
            offset = violation.location.offset
            if offset is None and violation.location.line is not None:
                offset = file.offset_of_line(violation.location.line)
            if offset is None or file.is_rule_enabled(rule.identifier, offset):
                violations.append(violation)
    return violations


class LintFilesUseCase:
    """
    Parse every file, build the run's declaration index, then validate.

    Failures reading or parsing one file are recorded on that file's report
    and never abort the run.
    """

    def __init__(
        self,
        parser: StructureParserProtocol,
        filesystem: FileSystemProtocol,
        telemetry: TelemetryPort,
        max_workers: int = 1,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.parser = parser
        self.filesystem = filesystem
        self.telemetry = telemetry
        self.max_workers = max(1, max_workers)
        self.cancel_event = cancel_event or threading.Event()

    def execute(self, paths: Sequence[str], rules: Sequence[Rule]) -> LintReport:
        report = LintReport()
        loaded: list[tuple[FileReport, SourceFile]] = []
        for path in paths:
            if self.cancel_event.is_set():
                report.cancelled = True
                return report
            file_report = FileReport(path)
            report.files.append(file_report)
            source = self._load(file_report)
            if source is not None:
                loaded.append((file_report, source))

        index = DeclarationIndex.build(source.structure for _, source in loaded)
        bound = [
            rule.with_declaration_index(index) if isinstance(rule, DeclarationIndexAware) else rule
            for rule in rules
        ]
        self.telemetry.step(
            f"Linting {len(loaded)} file(s) with {len(bound)} rule(s) ({len(index)} indexed types)"
        )

        if self.max_workers == 1:
            for file_report, source in loaded:
                if self.cancel_event.is_set():
                    report.cancelled = True
                    break
                self._validate(file_report, source, bound)
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [
                    executor.submit(self._validate, file_report, source, bound)
                    for file_report, source in loaded
                ]
                for future in futures:
                    future.result()
            report.cancelled = self.cancel_event.is_set()
        return report

    def _load(self, file_report: FileReport) -> Optional[SourceFile]:
        try:
            contents = self.filesystem.read_text(file_report.path)
            source = SourceFile(contents, self.parser, file_report.path)
            _ = source.parsed
            return source
        except SourceParseError as exc:
            self._isolate(file_report, exc.reason)
        except (OSError, UnicodeDecodeError) as exc:
            self._isolate(file_report, f"cannot read file: {exc}")
        return None

    def _validate(self, file_report: FileReport, source: SourceFile, rules: Sequence[Rule]) -> None:
        if self.cancel_event.is_set():
            return
        try:
            file_report.violations = lint_source(source, rules)
        except SourceParseError as exc:
            self._isolate(file_report, exc.reason)
        logging.debug("%s: %d violation(s)", file_report.path, len(file_report.violations))

    def _isolate(self, file_report: FileReport, reason: str) -> None:
        file_report.error = reason
        file_report.violations = []
        self.telemetry.warning(f"Skipping {file_report.path}: {reason}")
