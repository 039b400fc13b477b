import json

import pytest

from swift_style_linter.domain.entities import Correction, Location, Severity, StyleViolation
from swift_style_linter.domain.rules.line_length import LineLengthRule
from swift_style_linter.domain.rules.visibility_order import VisibilityOrderRule
from swift_style_linter.interface.reporters import JSONReporter, XcodeReporter, reporter_for

VIOLATION = StyleViolation(
    rule_description=LineLengthRule.description,
    severity=Severity.ERROR,
    location=Location("Sources/A.swift", 3, 1, 40),
    reason="Line should be 100 characters or less: currently 201 characters",
)
CORRECTION = Correction(VisibilityOrderRule.description, Location("Sources/A.swift", 2, 5, 14))


def test_xcode_violation_format() -> None:
    assert XcodeReporter().report_violations([VIOLATION]) == (
        "Sources/A.swift:3:1: error: Line Length Violation: "
        "Line should be 100 characters or less: currently 201 characters (line_length)"
    )


def test_xcode_uses_description_without_reason() -> None:
    violation = StyleViolation(VisibilityOrderRule.description, Severity.WARNING, Location("A.swift", 1, 1, 0))
    assert XcodeReporter().report_violations([violation]).endswith(
        "warning: Visibility Order Violation: "
        "Declaration visibility should always be the first modifier. (visibility_order)"
    )


def test_xcode_corrections() -> None:
    assert XcodeReporter().report_corrections([CORRECTION]) == "Sources/A.swift:2:5 Corrected Visibility Order"


def test_json_reporter() -> None:
    [entry] = json.loads(JSONReporter().report_violations([VIOLATION]))
    assert entry == {
        "rule_id": "line_length",
        "type": "Line Length",
        "severity": "error",
        "reason": VIOLATION.reason,
        "file": "Sources/A.swift",
        "line": 3,
        "character": 1,
        "offset": 40,
    }
    [fix] = json.loads(JSONReporter().report_corrections([CORRECTION]))
    assert fix["rule_id"] == "visibility_order" and fix["offset"] == 14


def test_reporter_lookup() -> None:
    assert isinstance(reporter_for("xcode"), XcodeReporter)
    assert isinstance(reporter_for("json"), JSONReporter)
    with pytest.raises(ValueError):
        reporter_for("html")
