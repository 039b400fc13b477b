"""Configuration for linter settings: rule selection and per-rule overrides."""

import logging
from typing import Mapping, Optional

from swift_style_linter.domain.exceptions import ConfigurationError
from swift_style_linter.domain.registry import RuleRegistry
from swift_style_linter.domain.rules import Rule

PARSERS: frozenset[str] = frozenset({"scanner", "sourcekitten"})
REPORTERS: frozenset[str] = frozenset({"xcode", "json"})
_GENERAL_KEYS: frozenset[str] = frozenset(
    {"disabled_rules", "only_rules", "included", "excluded", "parser", "reporter"}
)


class ConfigurationLoader:
    """
    Validates a raw configuration dictionary and builds the configured rules.

    Everything is checked up front: unknown rule identifiers, malformed rule
    parameters and unsupported settings raise ConfigurationError before any
    file is processed. The resulting rule instances are immutable.
    """

    def __init__(
        self,
        config: Optional[Mapping[str, object]] = None,
        registry: Optional[RuleRegistry] = None,
    ) -> None:
        self._config: Mapping[str, object] = config or {}
        self.registry = registry or RuleRegistry()
        self.disabled_rules = self._identifier_list("disabled_rules")
        self.only_rules = self._identifier_list("only_rules")
        self.included = self._string_list("included")
        self.excluded = self._string_list("excluded")
        self.parser_name = self._choice("parser", PARSERS, "scanner")
        self.reporter_name = self._choice("reporter", REPORTERS, "xcode")
        self._rules = self._build_rules()

    @property
    def config(self) -> Mapping[str, object]:
        """Return the loaded configuration."""
        return self._config

    @property
    def rules(self) -> list[Rule]:
        return list(self._rules)

    def _build_rules(self) -> list[Rule]:
        overrides = {key: value for key, value in self._config.items() if key not in _GENERAL_KEYS}
        for identifier in overrides:
            self.registry.require(identifier)

        rules: list[Rule] = []
        for rule_type in self.registry:
            identifier = rule_type.description.identifier
            if self.only_rules and identifier not in self.only_rules:
                continue
            if identifier in self.disabled_rules:
                continue
            if identifier in overrides:
                rules.append(rule_type.from_configuration(overrides[identifier]))
                logging.debug("Configured %s from %r", identifier, overrides[identifier])
            else:
                rules.append(rule_type())
        if self.only_rules and self.disabled_rules:
            logging.warning("Both only_rules and disabled_rules are set; disabled_rules wins on overlap.")
        return rules

    def _string_list(self, key: str) -> list[str]:
        value = self._config.get(key, [])
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigurationError(f"'{key}' must be a list of strings, got {value!r}")
        return list(value)

    def _identifier_list(self, key: str) -> list[str]:
        identifiers = self._string_list(key)
        for identifier in identifiers:
            self.registry.require(identifier)
        return identifiers

    def _choice(self, key: str, allowed: frozenset[str], default: str) -> str:
        value = self._config.get(key, default)
        if value not in allowed:
            raise ConfigurationError(f"'{key}' must be one of {sorted(allowed)}, got {value!r}")
        return str(value)
