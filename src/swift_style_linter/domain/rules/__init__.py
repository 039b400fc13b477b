"""Rule abstraction: the base contract and the optional capabilities rules may offer."""

from typing import TYPE_CHECKING, ClassVar, Iterable, Protocol, runtime_checkable

from swift_style_linter.domain.entities import (
    Correction,
    RuleDescription,
    RuleParameter,
    Severity,
    StyleViolation,
    TextEdit,
)
from swift_style_linter.domain.exceptions import ConfigurationError

if TYPE_CHECKING:
    from swift_style_linter.domain.declaration_index import DeclarationIndex
    from swift_style_linter.domain.source_file import SourceFile


class Rule(Protocol):
    """The fundamental unit of style governance."""

    description: ClassVar[RuleDescription]

    @property
    def identifier(self) -> str: ...

    @property
    def severity_configuration(self) -> tuple[RuleParameter, ...]: ...

    def validate(self, file: "SourceFile") -> list[StyleViolation]:
        """Violations for one file, in document order. Must not mutate anything."""
        ...

    @classmethod
    def from_configuration(cls, value: object) -> "Rule":
        """Build an instance from a raw configuration value; raise ConfigurationError if invalid."""
        ...


@runtime_checkable
class CorrectableRule(Protocol):
    """Capability: rewrite a file so that it no longer violates the rule."""

    def correct(self, file: "SourceFile") -> list[Correction]:
        """Apply fixes to `file` and return one Correction per applied edit."""
        ...


@runtime_checkable
class DeclarationIndexAware(Protocol):
    """Capability: resolve inherited members through the run's declaration index."""

    def with_declaration_index(self, index: "DeclarationIndex") -> Rule: ...


class DescribedRule:
    """Identity shared by concrete rules through their class-level description."""

    description: ClassVar[RuleDescription]

    @property
    def identifier(self) -> str:
        return self.description.identifier


def parse_severity(value: object, identifier: str) -> Severity:
    if not isinstance(value, str):
        raise ConfigurationError(f"severity must be a string, got {value!r}", identifier)
    try:
        return Severity.from_string(value)
    except ValueError as exc:
        raise ConfigurationError(str(exc), identifier) from exc


def enabled_edits(
    file: "SourceFile", identifier: str, edits: Iterable[TextEdit]
) -> list[TextEdit]:
    """Drop edits that start inside a region disabling `identifier`."""
    return [edit for edit in edits if file.is_rule_enabled(identifier, edit.offset)]
