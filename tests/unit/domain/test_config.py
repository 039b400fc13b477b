import unittest

from swift_style_linter.domain.config import ConfigurationLoader
from swift_style_linter.domain.entities import RuleParameter, Severity
from swift_style_linter.domain.exceptions import ConfigurationError
from swift_style_linter.domain.rules.line_length import LineLengthRule
from swift_style_linter.domain.rules.missing_docs import MissingDocsRule
from swift_style_linter.domain.rules.visibility_order import VisibilityOrderRule
from swift_style_linter.domain.structure import AccessControlLevel


class TestConfigurationLoader(unittest.TestCase):
    def test_defaults_enable_every_rule(self) -> None:
        loader = ConfigurationLoader()
        self.assertEqual(
            [rule.identifier for rule in loader.rules],
            ["line_length", "missing_docs", "visibility_order"],
        )
        self.assertEqual(loader.parser_name, "scanner")
        self.assertEqual(loader.reporter_name, "xcode")

    def test_disabled_rules(self) -> None:
        loader = ConfigurationLoader({"disabled_rules": ["missing_docs"]})
        self.assertEqual([r.identifier for r in loader.rules], ["line_length", "visibility_order"])

    def test_only_rules(self) -> None:
        loader = ConfigurationLoader({"only_rules": ["visibility_order"]})
        self.assertEqual([r.identifier for r in loader.rules], ["visibility_order"])

    def test_unknown_rule_identifier_is_rejected(self) -> None:
        with self.assertRaisesRegex(ConfigurationError, "unknown rule identifier"):
            ConfigurationLoader({"disabled_rules": ["trailing_whitespace"]})
        with self.assertRaises(ConfigurationError):
            ConfigurationLoader({"trailing_whitespace": 3})

    def test_rule_overrides(self) -> None:
        loader = ConfigurationLoader(
            {
                "line_length": [120, 240],
                "visibility_order": "error",
                "missing_docs": {"warning": ["public"], "error": ["internal"]},
            }
        )
        rules = {rule.identifier: rule for rule in loader.rules}
        self.assertEqual(
            rules["line_length"],
            LineLengthRule(parameters=RuleParameter.from_array([120, 240])),
        )
        self.assertEqual(rules["visibility_order"].severity_configuration[0].severity, Severity.ERROR)
        self.assertEqual(
            rules["missing_docs"].acl,
            frozenset({AccessControlLevel.PUBLIC, AccessControlLevel.INTERNAL}),
        )

    def test_invalid_general_settings(self) -> None:
        for config in (
            {"parser": "clang"},
            {"reporter": "html"},
            {"included": [1, 2]},
            {"excluded": {"a": 1}},
        ):
            with self.subTest(config=config), self.assertRaises(ConfigurationError):
                ConfigurationLoader(config)

    def test_string_list_accepts_single_string(self) -> None:
        self.assertEqual(ConfigurationLoader({"included": "Sources"}).included, ["Sources"])


class TestRuleConfiguration(unittest.TestCase):
    def test_line_length_forms(self) -> None:
        self.assertEqual(
            LineLengthRule.from_configuration(80).parameters, (RuleParameter(Severity.WARNING, 80),)
        )
        self.assertEqual(
            LineLengthRule.from_configuration({"error": 200, "warning": 120}).parameters,
            (RuleParameter(Severity.WARNING, 120), RuleParameter(Severity.ERROR, 200)),
        )

    def test_line_length_rejects_bad_values(self) -> None:
        for value in (True, [], [0], [1, 2, 3], "long", {"fatal": 3}, {"warning": -1}):
            with self.subTest(value=value), self.assertRaises(ConfigurationError):
                LineLengthRule.from_configuration(value)

    def test_visibility_order_rejects_unknown_severity(self) -> None:
        with self.assertRaisesRegex(ConfigurationError, "visibility_order"):
            VisibilityOrderRule.from_configuration("fatal")
        with self.assertRaises(ConfigurationError):
            VisibilityOrderRule.from_configuration({"level": "error"})

    def test_missing_docs_rejects_unknown_levels(self) -> None:
        for value in ({"warning": ["fileprivate"]}, {"warning": [1]}, ["public"], {"warning": 3}):
            with self.subTest(value=value), self.assertRaises(ConfigurationError):
                MissingDocsRule.from_configuration(value)

    def test_missing_docs_rejects_empty_levels(self) -> None:
        for value in ({}, {"warning": []}, {"warning": [], "error": []}):
            with self.subTest(value=value), self.assertRaisesRegex(ConfigurationError, "no access levels"):
                MissingDocsRule.from_configuration(value)
        with self.assertRaises(ConfigurationError):
            ConfigurationLoader({"missing_docs": {}})
