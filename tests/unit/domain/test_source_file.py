import unittest
from unittest.mock import MagicMock

from swift_style_linter.domain.source_file import ParsedSource, SourceFile
from swift_style_linter.domain.structure import DeclarationKind, StructuralNode
from swift_style_linter.domain.syntax import SyntaxMap

from conftest import make_file


class TestSourceFileLines(unittest.TestCase):
    def test_lines_drop_trailing_newline(self) -> None:
        file = make_file("a\nbb\n")
        self.assertEqual([(l.index, l.content, l.offset) for l in file.lines], [(1, "a", 0), (2, "bb", 2)])

    def test_lines_strip_carriage_returns(self) -> None:
        file = make_file("a\r\nb")
        self.assertEqual([l.content for l in file.lines], ["a", "b"])

    def test_empty_file_has_one_empty_line(self) -> None:
        self.assertEqual([l.content for l in make_file("").lines], [""])

    def test_line_and_character_is_clamped(self) -> None:
        file = make_file("ab\ncd")
        self.assertEqual(file.line_and_character(-3), (1, 1))
        self.assertEqual(file.line_and_character(3), (2, 1))
        self.assertEqual(file.line_and_character(99), (2, 3))

    def test_offset_of_line_out_of_range(self) -> None:
        with self.assertRaises(ValueError):
            make_file("a\n").offset_of_line(5)


class TestSourceFileCaching(unittest.TestCase):
    def setUp(self) -> None:
        self.parser = MagicMock()
        self.parser.parse.side_effect = lambda contents, path=None: ParsedSource(
            StructuralNode(DeclarationKind.SOURCE_FILE, 0, len(contents)), SyntaxMap([], contents)
        )

    def test_structure_is_parsed_once(self) -> None:
        file = SourceFile("let a = 1\n", self.parser, "A.swift")
        file.structure
        file.syntax_map
        self.parser.parse.assert_called_once_with("let a = 1\n", "A.swift")

    def test_assigning_contents_invalidates_derived_views(self) -> None:
        file = SourceFile("a\n", self.parser)
        self.assertEqual(len(file.lines), 1)
        self.assertEqual(file.structure.length, 2)
        file.contents = "a\nb\nc\n"
        self.assertEqual(len(file.lines), 3)
        self.assertEqual(file.structure.length, 6)
        self.assertEqual(self.parser.parse.call_count, 2)
