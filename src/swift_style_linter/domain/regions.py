"""Regions of a file where rules are switched off by `swiftstyle:disable` comments."""

import re
import sys
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from swift_style_linter.domain.source_file import SourceFile

ALL_RULES = "all"

_COMMAND_PATTERN = re.compile(
    r"swiftstyle:(?P<action>disable|enable)(?::(?P<modifier>previous|this|next))?"
    r"(?P<rules>(?:[ \t]+[A-Za-z_][A-Za-z0-9_]*)+)"
)

_LINE_END = sys.maxsize


class Action(Enum):
    DISABLE = "disable"
    ENABLE = "enable"


@dataclass(frozen=True)
class Command:
    """A parsed comment command anchored at a (line, character) position."""

    action: Action
    rule_identifiers: frozenset[str]
    line: int
    character: int
    modifier: Optional[str] = None

    def expand(self) -> list["Command"]:
        """Resolve :previous/:this/:next into plain commands bracketing one line."""
        if self.modifier is None:
            return [self]
        target = {"previous": self.line - 1, "this": self.line, "next": self.line + 1}[self.modifier]
        inverse = Action.ENABLE if self.action is Action.DISABLE else Action.DISABLE
        return [
            Command(self.action, self.rule_identifiers, target, 0),
            Command(inverse, self.rule_identifiers, target, _LINE_END),
        ]


@dataclass(frozen=True)
class Region:
    """Half-open span [start, end) of positions sharing one set of disabled rules."""

    start: tuple[int, int]
    end: tuple[int, int]
    disabled_rule_identifiers: frozenset[str]

    def contains(self, line: int, character: int) -> bool:
        return self.start <= (line, character) < self.end

    def disables(self, identifier: str) -> bool:
        return ALL_RULES in self.disabled_rule_identifiers or identifier in self.disabled_rule_identifiers


def parse_commands(file: "SourceFile") -> list[Command]:
    syntax_map = file.syntax_map
    commands: list[Command] = []
    for token in syntax_map.tokens:
        if not token.kind.is_comment:
            continue
        text = syntax_map.text(token)
        for match in _COMMAND_PATTERN.finditer(text):
            line, character = file.line_and_character(token.offset + match.start())
            commands.append(
                Command(
                    action=Action(match.group("action")),
                    rule_identifiers=frozenset(match.group("rules").split()),
                    line=line,
                    character=character,
                    modifier=match.group("modifier"),
                )
            )
    return commands


def regions_from_syntax(file: "SourceFile") -> tuple[Region, ...]:
    """Sweep the file's commands in position order into contiguous regions."""
    commands = sorted(
        (expanded for command in parse_commands(file) for expanded in command.expand()),
        key=lambda c: (c.line, c.character),
    )
    if not commands:
        return ()
    regions: list[Region] = []
    disabled: frozenset[str] = frozenset()
    start = (0, 0)
    for command in commands:
        position = (command.line, command.character)
        if position > start:
            regions.append(Region(start, position, disabled))
            start = position
        if command.action is Action.DISABLE:
            disabled = disabled | command.rule_identifiers
        elif ALL_RULES in command.rule_identifiers:
            disabled = frozenset()
        else:
            disabled = disabled - command.rule_identifiers
    regions.append(Region(start, (_LINE_END, _LINE_END), disabled))
    return tuple(region for region in regions if region.disabled_rule_identifiers)
