"""Line Length Rule - escalating severity ladder over line character counts."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Mapping

from swift_style_linter.domain.entities import (
    Location,
    RuleDescription,
    RuleParameter,
    Severity,
    StyleViolation,
    severity_ladder,
)
from swift_style_linter.domain.exceptions import ConfigurationError
from swift_style_linter.domain.rules import DescribedRule, parse_severity

if TYPE_CHECKING:
    from swift_style_linter.domain.source_file import SourceFile

_DEFAULT_PARAMETERS: tuple[RuleParameter[int], ...] = (
    RuleParameter(Severity.WARNING, 100),
    RuleParameter(Severity.ERROR, 200),
)


@dataclass(frozen=True)
class LineLengthRule(DescribedRule):
    """
    Flags lines longer than the configured limits.

    Each line is checked against the ladder most severe first and reported
    once, at the first limit it exceeds.
    """

    description: ClassVar[RuleDescription] = RuleDescription(
        identifier="line_length",
        name="Line Length",
        description="Lines should not span too many characters.",
        non_triggering_examples=(
            "let x = 1\n",
            "x" * 100 + "\n",
        ),
        triggering_examples=(
            "x" * 101 + "\n",
            "let a = 1\n" + "y" * 201 + "\n",
        ),
    )

    parameters: tuple[RuleParameter[int], ...] = _DEFAULT_PARAMETERS

    @property
    def severity_configuration(self) -> tuple[RuleParameter[int], ...]:
        return self.parameters

    @classmethod
    def from_configuration(cls, value: object) -> "LineLengthRule":
        """Accepts `120`, `[120, 200]` or `{warning = 120, error = 200}`."""
        identifier = cls.description.identifier
        if isinstance(value, bool):
            raise ConfigurationError(f"expected integer limits, got {value!r}", identifier)
        if isinstance(value, int):
            value = [value]
        if isinstance(value, list):
            if not value or not all(_is_limit(v) for v in value):
                raise ConfigurationError(f"expected a list of positive integers, got {value!r}", identifier)
            try:
                return cls(parameters=RuleParameter.from_array(value))
            except ValueError as exc:
                raise ConfigurationError(str(exc), identifier) from exc
        if isinstance(value, Mapping):
            parameters = []
            for key, limit in value.items():
                severity = parse_severity(key, identifier)
                if not _is_limit(limit):
                    raise ConfigurationError(f"limit for {key} must be a positive integer, got {limit!r}", identifier)
                parameters.append(RuleParameter(severity, limit))
            if not parameters:
                raise ConfigurationError("no limits configured", identifier)
            return cls(parameters=tuple(sorted(parameters, key=lambda p: p.severity.rank)))
        raise ConfigurationError(f"unsupported configuration {value!r}", identifier)

    def validate(self, file: "SourceFile") -> list[StyleViolation]:
        ladder = severity_ladder(self.parameters)
        if not ladder:
            return []
        soft_limit = self.parameters[0].value
        violations: list[StyleViolation] = []
        for line in file.lines:
            length = len(line.content)
            for parameter in ladder:
                if length > parameter.value:
                    violations.append(
                        StyleViolation(
                            rule_description=self.description,
                            severity=parameter.severity,
                            location=Location.from_line(file, line.index),
                            reason=(
                                f"Line should be {soft_limit} characters or less: "
                                f"currently {length} characters"
                            ),
                        )
                    )
                    break
        return violations


def _is_limit(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
