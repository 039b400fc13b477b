"""Domain entities: severities, rule parameters, locations, violations and corrections."""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, Iterable, Mapping, Optional, Sequence, TypeVar

if TYPE_CHECKING:
    from swift_style_linter.domain.source_file import SourceFile

T = TypeVar("T")


class Severity(Enum):
    """Violation severity. ERROR outranks WARNING."""

    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @classmethod
    def from_string(cls, value: str) -> "Severity":
        """Parse a severity name; raises ValueError for anything unknown."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"unknown severity '{value}'") from None


_SEVERITY_RANK: dict[Severity, int] = {Severity.WARNING: 0, Severity.ERROR: 1}


@dataclass(frozen=True)
class RuleParameter(Generic[T]):
    """One rung of a severity ladder: a threshold value tagged with a severity."""

    severity: Severity
    value: T

    @classmethod
    def from_array(cls, values: Sequence[T]) -> tuple["RuleParameter[T]", ...]:
        """Build a ladder from plain values: the first is a warning, the second an error."""
        severities = (Severity.WARNING, Severity.ERROR)
        if len(values) > len(severities):
            raise ValueError(f"expected at most {len(severities)} values, got {len(values)}")
        return tuple(cls(severity, value) for severity, value in zip(severities, values))


def severity_ladder(parameters: Iterable[RuleParameter[T]]) -> list[RuleParameter[T]]:
    """
    Order parameters most severe first.

    Within one severity, later declarations come first, so a ladder declared as
    [(warning, 100), (error, 200)] is evaluated as error@200 then warning@100.
    """
    return sorted(reversed(list(parameters)), key=lambda p: p.severity.rank, reverse=True)


@dataclass(frozen=True)
class SeverityConfiguration:
    """Severity for rules that fire at a single level."""

    severity: Severity = Severity.WARNING

    @property
    def parameters(self) -> tuple[RuleParameter[None], ...]:
        return (RuleParameter(self.severity, None),)


@dataclass(frozen=True)
class RuleDescription:
    """Identity, documentation and fixtures of a rule."""

    identifier: str
    name: str
    description: str
    non_triggering_examples: tuple[str, ...] = ()
    triggering_examples: tuple[str, ...] = ()
    corrections: Mapping[str, str] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class Location:
    """
    A position in a source file.

    Line and character are 1-based; offset is the 0-based character offset.
    Locations built from a SourceFile carry both representations.
    """

    file: Optional[str]
    line: Optional[int] = None
    character: Optional[int] = None
    offset: Optional[int] = None

    @classmethod
    def from_offset(cls, file: "SourceFile", offset: int) -> "Location":
        line, character = file.line_and_character(offset)
        return cls(file=file.path, line=line, character=character, offset=offset)

    @classmethod
    def from_line(cls, file: "SourceFile", line: int) -> "Location":
        return cls(file=file.path, line=line, offset=file.offset_of_line(line))

    def __str__(self) -> str:
        parts = [self.file or "<nopath>"]
        if self.line is not None:
            parts.append(str(self.line))
            if self.character is not None:
                parts.append(str(self.character))
        return ":".join(parts)


@dataclass(frozen=True)
class StyleViolation:
    """A detected rule non-conformance at a specific location."""

    rule_description: RuleDescription
    severity: Severity
    location: Location
    reason: Optional[str] = None

    @property
    def rule_identifier(self) -> str:
        return self.rule_description.identifier

    @property
    def message(self) -> str:
        return self.reason or self.rule_description.description

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for reporters."""
        return {
            "rule_id": self.rule_identifier,
            "type": self.rule_description.name,
            "severity": self.severity.value,
            "reason": self.message,
            "file": self.location.file,
            "line": self.location.line,
            "character": self.location.character,
            "offset": self.location.offset,
        }


@dataclass(frozen=True)
class Correction:
    """An applied automatic fix, located at its pre-correction offset."""

    rule_description: RuleDescription
    location: Location

    @property
    def console_description(self) -> str:
        return f"{self.location} Corrected {self.rule_description.name}"


@dataclass(frozen=True)
class TextEdit:
    """Replace `length` characters at `offset` with `replacement`."""

    offset: int
    length: int
    replacement: str

    @property
    def end(self) -> int:
        return self.offset + self.length

    def overlaps(self, other: "TextEdit") -> bool:
        """Ranges intersect, or both edits anchor at the same offset."""
        if self.offset == other.offset:
            return True
        return self.offset < other.end and other.offset < self.end
