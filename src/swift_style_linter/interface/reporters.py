"""Reporters: render violations and corrections for terminals, IDEs and tools."""

import json
from typing import Sequence

from swift_style_linter.domain.entities import Correction, StyleViolation
from swift_style_linter.domain.protocols import ReporterProtocol


class XcodeReporter:
    """One line per violation, in the format Xcode shows inline."""

    identifier = "xcode"

    def report_violations(self, violations: Sequence[StyleViolation]) -> str:
        return "\n".join(self.format_violation(violation) for violation in violations)

    def report_corrections(self, corrections: Sequence[Correction]) -> str:
        return "\n".join(correction.console_description for correction in corrections)

    @staticmethod
    def format_violation(violation: StyleViolation) -> str:
        return (
            f"{violation.location}: {violation.severity.value}: "
            f"{violation.rule_description.name} Violation: {violation.message} "
            f"({violation.rule_identifier})"
        )


class JSONReporter:
    identifier = "json"

    def report_violations(self, violations: Sequence[StyleViolation]) -> str:
        return json.dumps([violation.to_dict() for violation in violations], indent=2)

    def report_corrections(self, corrections: Sequence[Correction]) -> str:
        return json.dumps(
            [
                {
                    "rule_id": correction.rule_description.identifier,
                    "type": correction.rule_description.name,
                    "file": correction.location.file,
                    "line": correction.location.line,
                    "character": correction.location.character,
                    "offset": correction.location.offset,
                }
                for correction in corrections
            ],
            indent=2,
        )


REPORTERS: dict[str, type[ReporterProtocol]] = {
    reporter.identifier: reporter for reporter in (XcodeReporter, JSONReporter)
}


def reporter_for(identifier: str) -> ReporterProtocol:
    """Instantiate the reporter registered under `identifier`."""
    try:
        return REPORTERS[identifier]()
    except KeyError:
        raise ValueError(f"unknown reporter {identifier!r}; expected one of {sorted(REPORTERS)}") from None
