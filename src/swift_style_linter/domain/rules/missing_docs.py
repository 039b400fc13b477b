"""Missing Docs Rule - declarations at configured access levels must be documented."""

import dataclasses
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Iterable, Mapping, Optional

from swift_style_linter.domain.declaration_index import DeclarationIndex
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
from swift_style_linter.domain.structure import AccessControlLevel, StructuralNode

if TYPE_CHECKING:
    from swift_style_linter.domain.source_file import SourceFile


@dataclass(frozen=True)
class MissingDocsRule(DescribedRule):
    """
    Rule for undocumented declarations.

    Members that a type inherits from a protocol or supertype are skipped:
    documenting the requirement once is enough, so conforming types may leave
    their implementations undocumented.
    """

    description: ClassVar[RuleDescription] = RuleDescription(
        identifier="missing_docs",
        name="Missing Docs",
        description="Public declarations should be documented.",
        non_triggering_examples=(
            # public, documented using /// docs
            "/// docs\npublic func a() {}\n",
            # public, documented using /** docs */
            "/** docs */\npublic func a() {}\n",
            # internal (implicit), undocumented
            "func a() {}\n",
            # internal (explicit), undocumented
            "internal func a() {}\n",
            # private, undocumented
            "private func a() {}\n",
            # internal (implicit), undocumented
            "// regular comment\nfunc a() {}\n",
            # internal (implicit), undocumented
            "/* regular comment */\nfunc a() {}\n",
            # protocol member is documented, but inherited member is not
            "/// docs\npublic protocol A {\n/// docs\nvar b: Int { get } }\n"
            "/// docs\npublic struct C: A {\npublic let b: Int\n}",
        ),
        triggering_examples=(
            # public, undocumented
            "public func a() {}\n",
            # public, undocumented
            "// regular comment\npublic func a() {}\n",
            # public, undocumented
            "/* regular comment */\npublic func a() {}\n",
            # protocol member and inherited member are both undocumented
            "/// docs\npublic protocol A {\n// no docs\nvar b: Int { get } }\n"
            "/// docs\npublic struct C: A {\n\npublic let b: Int\n}",
        ),
    )

    parameters: tuple[RuleParameter[AccessControlLevel], ...] = (
        RuleParameter(Severity.WARNING, AccessControlLevel.PUBLIC),
    )
    declaration_index: Optional[DeclarationIndex] = dataclasses.field(default=None, compare=False)

    @property
    def severity_configuration(self) -> tuple[RuleParameter[AccessControlLevel], ...]:
        return self.parameters

    @property
    def acl(self) -> frozenset[AccessControlLevel]:
        return frozenset(parameter.value for parameter in self.parameters)

    @classmethod
    def from_configuration(cls, value: object) -> "MissingDocsRule":
        """Accepts `{warning = ["public"], error = ["internal"]}`."""
        identifier = cls.description.identifier
        if not isinstance(value, Mapping):
            raise ConfigurationError(f"expected a table of severity -> access levels, got {value!r}", identifier)
        parameters: list[RuleParameter[AccessControlLevel]] = []
        for key, levels in value.items():
            severity = parse_severity(key, identifier)
            if isinstance(levels, str):
                levels = [levels]
            if not isinstance(levels, list):
                raise ConfigurationError(f"access levels for {key} must be a list, got {levels!r}", identifier)
            for level in levels:
                acl = AccessControlLevel.from_keyword(level) if isinstance(level, str) else None
                if acl is None or acl is AccessControlLevel.UNRECOGNIZED:
                    raise ConfigurationError(f"unknown access level {level!r}", identifier)
                parameters.append(RuleParameter(severity, acl))
        if not parameters:
            raise ConfigurationError("no access levels configured", identifier)
        return cls(parameters=tuple(parameters))

    def with_declaration_index(self, index: DeclarationIndex) -> "MissingDocsRule":
        return dataclasses.replace(self, declaration_index=index)

    def validate(self, file: "SourceFile") -> list[StyleViolation]:
        structure = file.structure
        index = self.declaration_index or DeclarationIndex.build([structure])
        severities = self._severities_by_level()
        return [
            StyleViolation(
                rule_description=self.description,
                severity=severities[node.accessibility],
                location=Location.from_offset(file, node.offset),
            )
            for node in self._undocumented(structure, index, frozenset(), severities)
        ]

    def _severities_by_level(self) -> dict[Optional[AccessControlLevel], Severity]:
        severities: dict[Optional[AccessControlLevel], Severity] = {}
        for parameter in severity_ladder(self.parameters):
            severities.setdefault(parameter.value, parameter.severity)
        return severities

    def _undocumented(
        self,
        node: StructuralNode,
        index: DeclarationIndex,
        skipping: frozenset[str],
        severities: Mapping[Optional[AccessControlLevel], Severity],
    ) -> Iterable[StructuralNode]:
        """Children first, then the node itself; skipping only suppresses self-emission."""
        inherited_members = index.inherited_members(node.inherited_type_names)
        for child in node.children:
            yield from self._undocumented(child, index, inherited_members, severities)
        if node.name is not None and node.name in skipping:
            return
        if (
            node.kind.is_documentable
            and node.accessibility in severities
            and node.documentation_comment is None
        ):
            yield node
