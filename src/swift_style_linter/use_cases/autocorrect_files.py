"""Use Case: Apply automatic corrections to Swift files."""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from swift_style_linter.domain.entities import Correction
from swift_style_linter.domain.exceptions import SourceParseError
from swift_style_linter.domain.protocols import (
    FileSystemProtocol,
    StructureParserProtocol,
    TelemetryPort,
)
from swift_style_linter.domain.rules import CorrectableRule, Rule
from swift_style_linter.domain.source_file import SourceFile


@dataclass
class CorrectionReport:
    path: str
    corrections: list[Correction] = field(default_factory=list)
    error: Optional[str] = None


def correct_source(file: SourceFile, rules: Sequence[Rule]) -> list[Correction]:
    """Run every correctable rule in order; each sees the text left by the previous one."""
    corrections: list[Correction] = []
    for rule in rules:
        if isinstance(rule, CorrectableRule):
            corrections.extend(rule.correct(file))
    return corrections


class AutocorrectFilesUseCase:
    """Correct each file as a unit: read, parse, correct with every rule, write if changed."""

    def __init__(
        self,
        parser: StructureParserProtocol,
        filesystem: FileSystemProtocol,
        telemetry: TelemetryPort,
    ) -> None:
        self.parser = parser
        self.filesystem = filesystem
        self.telemetry = telemetry

    def execute(self, paths: Sequence[str], rules: Sequence[Rule]) -> list[CorrectionReport]:
        correctable = [rule for rule in rules if isinstance(rule, CorrectableRule)]
        self.telemetry.step(f"Correcting {len(paths)} file(s) with {len(correctable)} rule(s)")
        return [self._correct(path, correctable) for path in paths]

    def _correct(self, path: str, rules: Sequence[Rule]) -> CorrectionReport:
        report = CorrectionReport(path)
        try:
            original = self.filesystem.read_text(path)
            source = SourceFile(original, self.parser, path)
            report.corrections = correct_source(source, rules)
        except SourceParseError as exc:
            report.error = exc.reason
        except (OSError, UnicodeDecodeError) as exc:
            report.error = f"cannot read file: {exc}"
        if report.error is None and source.contents != original:
            try:
                self.filesystem.write_text(path, source.contents)
                logging.debug("Wrote %d correction(s) to %s", len(report.corrections), path)
            except OSError as exc:
                report.error = f"cannot write file: {exc}"
        if report.error is not None:
            report.corrections = []
            self.telemetry.warning(f"Skipping {path}: {report.error}")
        return report
