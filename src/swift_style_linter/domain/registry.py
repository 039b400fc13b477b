"""Registry of rule types keyed by their stable identifiers."""

from typing import Iterable, Iterator, Optional

from swift_style_linter.domain.exceptions import ConfigurationError
from swift_style_linter.domain.rules import Rule
from swift_style_linter.domain.rules.line_length import LineLengthRule
from swift_style_linter.domain.rules.missing_docs import MissingDocsRule
from swift_style_linter.domain.rules.visibility_order import VisibilityOrderRule

DEFAULT_RULES: tuple[type[Rule], ...] = (
    LineLengthRule,
    MissingDocsRule,
    VisibilityOrderRule,
)


class RuleRegistry:
    """Maps identifiers to rule classes; identifiers must be unique."""

    def __init__(self, rule_types: Iterable[type[Rule]] = DEFAULT_RULES) -> None:
        self._rule_types: dict[str, type[Rule]] = {}
        for rule_type in rule_types:
            identifier = rule_type.description.identifier
            if identifier in self._rule_types:
                raise ConfigurationError("duplicate rule identifier", identifier)
            self._rule_types[identifier] = rule_type

    def __iter__(self) -> Iterator[type[Rule]]:
        return iter(self._rule_types.values())

    @property
    def identifiers(self) -> list[str]:
        return list(self._rule_types)

    def get(self, identifier: str) -> Optional[type[Rule]]:
        return self._rule_types.get(identifier)

    def require(self, identifier: str) -> type[Rule]:
        rule_type = self.get(identifier)
        if rule_type is None:
            raise ConfigurationError("unknown rule identifier", identifier)
        return rule_type

    @staticmethod
    def is_correctable(rule_type: type[Rule]) -> bool:
        return callable(getattr(rule_type, "correct", None))

    def default_rules(self) -> list[Rule]:
        return [rule_type() for rule_type in self]
