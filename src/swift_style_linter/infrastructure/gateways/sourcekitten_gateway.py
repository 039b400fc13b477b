"""SourceKitten gateway: structure and syntax map from the external `sourcekitten` tool."""

import json
import logging
import subprocess
import tempfile
from bisect import bisect_right
from itertools import accumulate
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from swift_style_linter.domain.exceptions import ParserUnavailableError, SourceParseError
from swift_style_linter.domain.source_file import ParsedSource
from swift_style_linter.domain.structure import AccessControlLevel, DeclarationKind, StructuralNode
from swift_style_linter.domain.syntax import SyntaxKind, SyntaxMap, SyntaxToken


class _ByteOffsets:
    """Converts SourceKit's UTF-8 byte offsets into character offsets."""

    def __init__(self, contents: str) -> None:
        widths = [len(char.encode("utf-8")) for char in contents]
        self._starts = [0, *accumulate(widths)]

    def to_character(self, byte_offset: int) -> int:
        return bisect_right(self._starts, byte_offset) - 1


class SourceKittenGateway:
    """Structure parser backed by `sourcekitten structure` and `sourcekitten syntax`."""

    def __init__(self, executable: str = "sourcekitten", timeout: float = 60) -> None:
        self.executable = executable
        self.timeout = timeout

    def parse(self, contents: str, path: Optional[str] = None) -> ParsedSource:
        """Parse `contents` through a scratch copy so the text never travels in argv."""
        with tempfile.TemporaryDirectory(prefix="swiftstyle_") as tmp:
            source = Path(tmp) / (Path(path).name if path else "source.swift")
            try:
                source.write_text(contents, encoding="utf-8", newline="")
            except OSError as exc:
                raise SourceParseError(f"cannot stage source for {self.executable}: {exc}", path) from exc
            structure_payload = self._run("structure", source, path)
            syntax_payload = self._run("syntax", source, path)
        return self.from_payloads(contents, structure_payload, syntax_payload, path)

    def _run(self, command: str, source: Path, path: Optional[str]) -> Any:
        cmd = [self.executable, command, "--file", str(source)]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
        except FileNotFoundError as exc:
            raise ParserUnavailableError(
                f"{self.executable} not found. Install SourceKitten or set parser = \"scanner\"."
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise SourceParseError(f"{self.executable} {command} timed out", path) from exc
        except OSError as exc:
            raise SourceParseError(f"cannot run {self.executable} {command}: {exc}", path) from exc

        if result.returncode != 0:
            logging.debug("%s %s stderr: %s", self.executable, command, result.stderr)
            raise SourceParseError(
                f"{self.executable} {command} exited with {result.returncode}: {result.stderr.strip()}",
                path,
            )
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as exc:
            raise SourceParseError(f"invalid {command} output: {exc}", path) from exc

    @classmethod
    def from_payloads(
        cls,
        contents: str,
        structure_payload: Mapping[str, Any],
        syntax_payload: Sequence[Mapping[str, Any]],
        path: Optional[str] = None,
    ) -> ParsedSource:
        """Build the parsed model from decoded `structure` and `syntax` JSON."""
        if not isinstance(structure_payload, Mapping) or not isinstance(syntax_payload, list):
            raise SourceParseError("unexpected SourceKitten payload shape", path)
        offsets = _ByteOffsets(contents)
        tokens = [cls._token(entry, offsets, path) for entry in syntax_payload]
        syntax_map = SyntaxMap(tokens, contents)
        children = tuple(
            cls._node(entry, offsets, syntax_map, path)
            for entry in structure_payload.get("key.substructure", [])
        )
        root = StructuralNode(
            kind=DeclarationKind.SOURCE_FILE,
            offset=0,
            length=len(contents),
            children=children,
        )
        return ParsedSource(structure=root, syntax_map=syntax_map)

    @staticmethod
    def _token(entry: Mapping[str, Any], offsets: _ByteOffsets, path: Optional[str]) -> SyntaxToken:
        try:
            start = offsets.to_character(int(entry["offset"]))
            end = offsets.to_character(int(entry["offset"]) + int(entry["length"]))
            return SyntaxToken(SyntaxKind.from_sourcekit(entry.get("kind")), start, end - start)
        except (KeyError, TypeError, ValueError) as exc:
            raise SourceParseError(f"malformed syntax token {entry!r}", path) from exc

    @classmethod
    def _node(
        cls,
        entry: Mapping[str, Any],
        offsets: _ByteOffsets,
        syntax_map: SyntaxMap,
        path: Optional[str],
    ) -> StructuralNode:
        try:
            byte_offset = int(entry["key.offset"])
            byte_length = int(entry["key.length"])
        except (KeyError, TypeError, ValueError) as exc:
            raise SourceParseError(f"malformed structure entry {entry.get('key.kind')!r}", path) from exc
        start = offsets.to_character(byte_offset)
        end = offsets.to_character(byte_offset + byte_length)
        inherited = tuple(
            item["key.name"] for item in entry.get("key.inheritedtypes", []) if "key.name" in item
        )
        return StructuralNode(
            kind=DeclarationKind.from_sourcekit(entry.get("key.kind")),
            offset=start,
            length=end - start,
            name=entry.get("key.name"),
            accessibility=AccessControlLevel.from_sourcekit(entry.get("key.accessibility")),
            documentation_comment=syntax_map.documentation_comment_before(start),
            inherited_type_names=inherited,
            children=tuple(
                cls._node(child, offsets, syntax_map, path)
                for child in entry.get("key.substructure", [])
            ),
        )
