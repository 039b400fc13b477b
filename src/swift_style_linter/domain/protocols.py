from typing import TYPE_CHECKING, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from swift_style_linter.domain.entities import Correction, StyleViolation
    from swift_style_linter.domain.source_file import ParsedSource


class StructureParserProtocol(Protocol):
    """Protocol for the parser collaborator that builds a file's structural model."""

    def parse(self, contents: str, path: Optional[str] = None) -> "ParsedSource":
        """Return structure and syntax map; raise SourceParseError for malformed source."""
        ...


class TelemetryPort(Protocol):
    """Protocol for telemetry/UI updates."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def glob_swift_files(self, path: str, excluded: Sequence[str] = ()) -> list[str]:
        """Get all Swift files in path (recursive if directory), minus excluded paths."""
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content from a file."""
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file."""
        ...


class ReporterProtocol(Protocol):
    """Protocol for rendering lint and autocorrect results."""

    identifier: str

    def report_violations(self, violations: Sequence["StyleViolation"]) -> str: ...
    def report_corrections(self, corrections: Sequence["Correction"]) -> str: ...
