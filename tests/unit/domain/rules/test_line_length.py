import unittest

from swift_style_linter.domain.entities import RuleParameter, Severity
from swift_style_linter.domain.rules.line_length import LineLengthRule

from conftest import make_file


class TestLineLengthRule(unittest.TestCase):
    def setUp(self) -> None:
        self.rule = LineLengthRule()

    def test_default_ladder(self) -> None:
        self.assertEqual(self.rule.severity_configuration, RuleParameter.from_array([100, 200]))

    def test_limit_is_inclusive(self) -> None:
        self.assertEqual(self.rule.validate(make_file("x" * 100 + "\n")), [])

    def test_over_warning_limit(self) -> None:
        violations = self.rule.validate(make_file("x" * 101 + "\n"))
        self.assertEqual(len(violations), 1)
        self.assertIs(violations[0].severity, Severity.WARNING)
        self.assertEqual(
            violations[0].reason, "Line should be 100 characters or less: currently 101 characters"
        )

    def test_over_error_limit_reports_once(self) -> None:
        violations = self.rule.validate(make_file("x" * 201 + "\n"))
        self.assertEqual([v.severity for v in violations], [Severity.ERROR])

    def test_violations_follow_document_order(self) -> None:
        source = "x" * 150 + "\nlet a = 1\n" + "y" * 250 + "\n"
        violations = self.rule.validate(make_file(source, path="A.swift"))
        self.assertEqual([(v.location.line, v.severity) for v in violations], [(1, Severity.WARNING), (3, Severity.ERROR)])
        self.assertEqual(violations[1].location.offset, 161)
        self.assertEqual(violations[1].location.file, "A.swift")

    def test_characters_not_bytes(self) -> None:
        self.assertEqual(self.rule.validate(make_file("é" * 100 + "\n")), [])
