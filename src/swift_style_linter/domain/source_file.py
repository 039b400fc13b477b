"""Source file: raw text plus lazily computed line index, structure and regions."""

from bisect import bisect_right
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from swift_style_linter.domain.regions import Region, regions_from_syntax

if TYPE_CHECKING:
    from swift_style_linter.domain.protocols import StructureParserProtocol
    from swift_style_linter.domain.structure import StructuralNode
    from swift_style_linter.domain.syntax import SyntaxMap


@dataclass(frozen=True)
class Line:
    """One line of a file: 1-based index, content without the newline, start offset."""

    index: int
    content: str
    offset: int


@dataclass(frozen=True)
class ParsedSource:
    """What a parser produces for one file."""

    structure: "StructuralNode"
    syntax_map: "SyntaxMap"


class SourceFile:
    """
    A file under analysis.

    Every derived view (line index, parsed structure, disable regions) is
    computed on first use and dropped whenever the contents change, so offset
    to line translation always reflects the current text.
    """

    def __init__(
        self,
        contents: str,
        parser: "StructureParserProtocol",
        path: Optional[str] = None,
    ) -> None:
        self.path = path
        self._parser = parser
        self._contents = contents
        self._invalidate()

    def __repr__(self) -> str:
        return f"SourceFile(path={self.path!r}, length={len(self._contents)})"

    @property
    def contents(self) -> str:
        return self._contents

    @contents.setter
    def contents(self, value: str) -> None:
        self._contents = value
        self._invalidate()

    def _invalidate(self) -> None:
        self._line_starts: Optional[list[int]] = None
        self._lines: Optional[tuple[Line, ...]] = None
        self._parsed: Optional[ParsedSource] = None
        self._regions: Optional[tuple[Region, ...]] = None

    @property
    def line_starts(self) -> list[int]:
        if self._line_starts is None:
            starts = [0]
            starts.extend(i + 1 for i, char in enumerate(self._contents) if char == "\n")
            self._line_starts = starts
        return self._line_starts

    @property
    def lines(self) -> tuple[Line, ...]:
        if self._lines is None:
            raw_lines = self._contents.split("\n")
            if raw_lines and raw_lines[-1] == "" and len(raw_lines) > 1:
                raw_lines.pop()
            self._lines = tuple(
                Line(index=i + 1, content=text.rstrip("\r"), offset=start)
                for i, (text, start) in enumerate(zip(raw_lines, self.line_starts))
            )
        return self._lines

    def line_and_character(self, offset: int) -> tuple[int, int]:
        """1-based (line, character) for a 0-based offset, clamped to the text."""
        offset = max(0, min(offset, len(self._contents)))
        line = bisect_right(self.line_starts, offset)
        return line, offset - self.line_starts[line - 1] + 1

    def offset_of_line(self, line: int) -> int:
        if line < 1 or line > len(self.line_starts):
            raise ValueError(f"line {line} outside 1..{len(self.line_starts)}")
        return self.line_starts[line - 1]

    @property
    def parsed(self) -> ParsedSource:
        """Structure and syntax map; raises SourceParseError for malformed text."""
        if self._parsed is None:
            self._parsed = self._parser.parse(self._contents, self.path)
        return self._parsed

    @property
    def structure(self) -> "StructuralNode":
        return self.parsed.structure

    @property
    def syntax_map(self) -> "SyntaxMap":
        return self.parsed.syntax_map

    @property
    def regions(self) -> tuple[Region, ...]:
        if self._regions is None:
            self._regions = regions_from_syntax(self)
        return self._regions

    def is_rule_enabled(self, identifier: str, offset: int) -> bool:
        """False when `offset` falls inside a region that disables the rule."""
        line, character = self.line_and_character(offset)
        return not any(
            region.contains(line, character) and region.disables(identifier)
            for region in self.regions
        )
