"""Visibility Order Rule - access level must be the first declaration modifier (auto-fixable)."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Mapping, Optional

from swift_style_linter.domain.entities import (
    Correction,
    Location,
    RuleDescription,
    RuleParameter,
    SeverityConfiguration,
    StyleViolation,
    TextEdit,
)
from swift_style_linter.domain.exceptions import ConfigurationError
from swift_style_linter.domain.rules import DescribedRule, enabled_edits, parse_severity
from swift_style_linter.domain.services.correction_applier import CorrectionApplier
from swift_style_linter.domain.syntax import VISIBILITY_MODIFIERS, SyntaxToken

if TYPE_CHECKING:
    from swift_style_linter.domain.source_file import SourceFile

_VISIBILITIES = ("", "public ", "internal ", "fileprivate ", "private ")


def _examples(template: str, modifiers: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(template.format(vis=vis, mod=mod) for mod in modifiers for vis in _VISIBILITIES)


def _misordered(declarations: tuple[tuple[str, str], ...]) -> dict[str, str]:
    corrections: dict[str, str] = {}
    for modifier, declaration in declarations:
        for visibility in ("public", "internal", "fileprivate", "private"):
            wrong = f"{modifier} {visibility} {declaration}"
            corrections[wrong] = f"{visibility} {modifier} {declaration}"
    return corrections


_CORRECTIONS = _misordered(
    (("override", "func x()"), ("required", "init()"), ("override", "init()"))
)


@dataclass(frozen=True)
class _Misordering:
    modifiers: tuple[SyntaxToken, ...]
    visibility_index: int

    @property
    def offset(self) -> int:
        return self.modifiers[0].offset


@dataclass(frozen=True)
class VisibilityOrderRule(DescribedRule):
    """
    Rule for declarations whose access level follows another modifier.

    Detection and correction both work on the syntax map's modifier tokens in
    front of each function or initializer keyword, so text inside strings and
    comments is never considered.
    """

    description: ClassVar[RuleDescription] = RuleDescription(
        identifier="visibility_order",
        name="Visibility Order",
        description="Declaration visibility should always be the first modifier.",
        non_triggering_examples=(
            _examples("{vis}{mod}func x()", ("", "override "))
            + _examples("{vis}{mod}init()", ("", "required ", "override "))
            + (
                'let s = "override public func x()"',
                "// override public func x()",
                "public static override func x()",
            )
        ),
        triggering_examples=tuple(_CORRECTIONS) + ("static public func x()",),
        corrections={
            **_CORRECTIONS,
            "override  public func x()": "public  override func x()",
            "required convenience public init()": "public required convenience init()",
            "final class Foo {\n    override public func x() {}\n}\n": (
                "final class Foo {\n    public override func x() {}\n}\n"
            ),
        },
    )

    configuration: SeverityConfiguration = field(default_factory=SeverityConfiguration)

    @property
    def severity_configuration(self) -> tuple[RuleParameter[None], ...]:
        return self.configuration.parameters

    @classmethod
    def from_configuration(cls, value: object) -> "VisibilityOrderRule":
        """Accepts `"error"` or `{severity = "error"}`."""
        identifier = cls.description.identifier
        if isinstance(value, Mapping):
            unknown = set(value) - {"severity"}
            if unknown:
                raise ConfigurationError(f"unknown keys {sorted(unknown)}", identifier)
            value = value.get("severity", "warning")
        return cls(configuration=SeverityConfiguration(parse_severity(value, identifier)))

    def validate(self, file: "SourceFile") -> list[StyleViolation]:
        return [
            StyleViolation(
                rule_description=self.description,
                severity=self.configuration.severity,
                location=Location.from_offset(file, misordering.offset),
                reason=(
                    f"'{file.syntax_map.text(misordering.modifiers[misordering.visibility_index])}' "
                    "should be the first modifier"
                ),
            )
            for misordering in self._misorderings(file)
        ]

    def correct(self, file: "SourceFile") -> list[Correction]:
        edits = [self._reorder(file, misordering) for misordering in self._misorderings(file)]
        edits = enabled_edits(file, self.identifier, edits)
        return CorrectionApplier().apply(file, [(self.description, edit) for edit in edits])

    def _misorderings(self, file: "SourceFile") -> list[_Misordering]:
        syntax_map = file.syntax_map
        found: list[_Misordering] = []
        for node in file.structure.walk():
            if not node.kind.is_function:
                continue
            modifiers = syntax_map.modifier_tokens_before(node.offset)
            visibility_index = _visibility_index(file, modifiers)
            if visibility_index is not None and visibility_index > 0:
                found.append(_Misordering(modifiers, visibility_index))
        return found

    @staticmethod
    def _reorder(file: "SourceFile", misordering: _Misordering) -> TextEdit:
        """Move the visibility token to the front, keeping every separator in place."""
        syntax_map = file.syntax_map
        tokens = misordering.modifiers
        words = [syntax_map.text(token) for token in tokens]
        visibility = words.pop(misordering.visibility_index)
        words.insert(0, visibility)
        start, end = tokens[0].offset, tokens[-1].end
        pieces = []
        for i, word in enumerate(words):
            pieces.append(word)
            if i + 1 < len(tokens):
                pieces.append(file.contents[tokens[i].end:tokens[i + 1].offset])
        return TextEdit(offset=start, length=end - start, replacement="".join(pieces))


def _visibility_index(file: "SourceFile", modifiers: tuple[SyntaxToken, ...]) -> Optional[int]:
    for i, token in enumerate(modifiers):
        if file.syntax_map.text(token) in VISIBILITY_MODIFIERS:
            return i
    return None
