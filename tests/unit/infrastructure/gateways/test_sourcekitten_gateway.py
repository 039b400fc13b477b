"""Unit tests for SourceKittenGateway."""

import json
import subprocess
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from swift_style_linter.domain.exceptions import ParserUnavailableError, SourceParseError
from swift_style_linter.domain.structure import AccessControlLevel, DeclarationKind
from swift_style_linter.domain.syntax import SyntaxKind
from swift_style_linter.infrastructure.gateways.sourcekitten_gateway import SourceKittenGateway

# "é" is two bytes in UTF-8, so every later byte offset is one past the character offset.
CONTENTS = "// é\n/// docs\npublic struct S: P {\n  public let b: Int\n}\n"

STRUCTURE = {
    "key.offset": 0,
    "key.length": 58,
    "key.diagnostic_stage": "source.diagnostic.stage.swift.parse",
    "key.substructure": [
        {
            "key.kind": "source.lang.swift.decl.struct",
            "key.name": "S",
            "key.offset": 22,
            "key.length": 35,
            "key.accessibility": "source.lang.swift.accessibility.public",
            "key.inheritedtypes": [{"key.name": "P"}],
            "key.substructure": [
                {
                    "key.kind": "source.lang.swift.decl.var.instance",
                    "key.name": "b",
                    "key.offset": 45,
                    "key.length": 10,
                    "key.accessibility": "source.lang.swift.accessibility.public",
                }
            ],
        }
    ],
}

SYNTAX = [
    {"kind": "source.lang.swift.syntaxtype.comment", "offset": 0, "length": 5},
    {"kind": "source.lang.swift.syntaxtype.doccomment", "offset": 6, "length": 8},
    {"kind": "source.lang.swift.syntaxtype.keyword", "offset": 15, "length": 6},
    {"kind": "source.lang.swift.syntaxtype.keyword", "offset": 22, "length": 6},
    {"kind": "source.lang.swift.syntaxtype.identifier", "offset": 29, "length": 1},
    {"kind": "source.lang.swift.syntaxtype.typeidentifier", "offset": 32, "length": 1},
    {"kind": "source.lang.swift.syntaxtype.keyword", "offset": 38, "length": 6},
    {"kind": "source.lang.swift.syntaxtype.keyword", "offset": 45, "length": 3},
    {"kind": "source.lang.swift.syntaxtype.identifier", "offset": 49, "length": 1},
    {"kind": "source.lang.swift.syntaxtype.typeidentifier", "offset": 52, "length": 3},
]


class TestSourceKittenPayloads(unittest.TestCase):
    def setUp(self) -> None:
        self.parsed = SourceKittenGateway.from_payloads(CONTENTS, STRUCTURE, SYNTAX, "S.swift")

    def test_byte_offsets_become_character_offsets(self) -> None:
        struct = self.parsed.structure.children[0]
        self.assertEqual(struct.offset, CONTENTS.index("struct"))
        self.assertEqual(struct.children[0].offset, CONTENTS.index("let b"))
        self.assertEqual(self.parsed.syntax_map.text(self.parsed.syntax_map.tokens[0]), "// é")

    def test_node_attributes(self) -> None:
        struct = self.parsed.structure.children[0]
        self.assertIs(struct.kind, DeclarationKind.STRUCT)
        self.assertIs(struct.accessibility, AccessControlLevel.PUBLIC)
        self.assertEqual(struct.inherited_type_names, ("P",))
        self.assertEqual(struct.documentation_comment, "/// docs")
        self.assertIsNone(struct.children[0].documentation_comment)

    def test_root_is_synthesized(self) -> None:
        root = self.parsed.structure
        self.assertIs(root.kind, DeclarationKind.SOURCE_FILE)
        self.assertEqual(root.length, len(CONTENTS))

    def test_unknown_kinds_are_unrecognized(self) -> None:
        syntax = [{"kind": "source.lang.swift.syntaxtype.future", "offset": 0, "length": 2}]
        structure = {"key.substructure": [{"key.kind": "source.lang.swift.decl.macro", "key.offset": 0, "key.length": 1}]}
        parsed = SourceKittenGateway.from_payloads("ab", structure, syntax)
        self.assertIs(parsed.syntax_map.tokens[0].kind, SyntaxKind.UNRECOGNIZED)
        self.assertIs(parsed.structure.children[0].kind, DeclarationKind.UNRECOGNIZED)
        self.assertIsNone(parsed.structure.children[0].accessibility)

    def test_malformed_payloads_raise(self) -> None:
        with self.assertRaises(SourceParseError):
            SourceKittenGateway.from_payloads("a", {"key.substructure": [{"key.kind": "x"}]}, [])
        with self.assertRaises(SourceParseError):
            SourceKittenGateway.from_payloads("a", {}, [{"kind": "x"}])
        with self.assertRaises(SourceParseError):
            SourceKittenGateway.from_payloads("a", [], [])


class TestSourceKittenProcess(unittest.TestCase):
    def setUp(self) -> None:
        self.gateway = SourceKittenGateway(executable="sourcekitten")

    def test_parse_runs_structure_and_syntax_on_a_staged_copy(self) -> None:
        outputs = iter([json.dumps(STRUCTURE), json.dumps(SYNTAX)])
        staged = []

        def run(cmd, **kwargs):
            staged.append((cmd[:3], Path(cmd[3]).name, Path(cmd[3]).read_text(encoding="utf-8")))
            return MagicMock(returncode=0, stdout=next(outputs), stderr="")

        with patch("subprocess.run", side_effect=run) as mock_run:
            parsed = self.gateway.parse(CONTENTS, "Sources/S.swift")
        self.assertEqual(
            [entry[0] for entry in staged],
            [["sourcekitten", "structure", "--file"], ["sourcekitten", "syntax", "--file"]],
        )
        self.assertEqual({entry[1] for entry in staged}, {"S.swift"})
        self.assertEqual({entry[2] for entry in staged}, {CONTENTS})
        self.assertNotIn(CONTENTS, mock_run.call_args_list[0].args[0])
        self.assertFalse(Path(mock_run.call_args_list[0].args[0][3]).exists())
        self.assertEqual(parsed.structure.children[0].name, "S")

    def test_os_error_starting_the_tool_is_a_parse_error(self) -> None:
        with patch("subprocess.run", side_effect=OSError(7, "Argument list too long")):
            with self.assertRaisesRegex(SourceParseError, "cannot run sourcekitten structure"):
                self.gateway.parse("let a = 1", "A.swift")

    def test_missing_executable(self) -> None:
        with patch("subprocess.run", side_effect=FileNotFoundError()):
            with self.assertRaises(ParserUnavailableError):
                self.gateway.parse("let a = 1")

    def test_failed_run_is_a_parse_error(self) -> None:
        with patch("subprocess.run", return_value=MagicMock(returncode=1, stdout="", stderr="boom")):
            with self.assertRaisesRegex(SourceParseError, "boom"):
                self.gateway.parse("let a = 1", "A.swift")

    def test_timeout_is_a_parse_error(self) -> None:
        with patch("subprocess.run", side_effect=subprocess.TimeoutExpired("sourcekitten", 60)):
            with self.assertRaises(SourceParseError):
                self.gateway.parse("let a = 1")

    def test_invalid_json_is_a_parse_error(self) -> None:
        with patch("subprocess.run", return_value=MagicMock(returncode=0, stdout="not json", stderr="")):
            with self.assertRaises(SourceParseError):
                self.gateway.parse("let a = 1")
