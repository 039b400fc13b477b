"""Swift lexer: splits source text into lexemes and classifies them into a syntax map."""

from dataclasses import dataclass
from typing import Optional

from swift_style_linter.domain.exceptions import SourceParseError
from swift_style_linter.domain.syntax import (
    DECLARATION_MODIFIERS,
    VISIBILITY_MODIFIERS,
    SyntaxKind,
    SyntaxToken,
)

WORD = "word"
ATTRIBUTE = "attribute"
DIRECTIVE = "directive"
COMMENT = "comment"
DOC_COMMENT = "doc"
STRING = "string"
NUMBER = "number"
OPERATOR = "operator"
PUNCT = "punct"

DECLARATION_KEYWORDS: frozenset[str] = frozenset(
    {
        "associatedtype",
        "case",
        "class",
        "deinit",
        "enum",
        "extension",
        "func",
        "import",
        "init",
        "let",
        "operator",
        "precedencegroup",
        "protocol",
        "struct",
        "subscript",
        "typealias",
        "var",
    }
)

KEYWORDS: frozenset[str] = DECLARATION_KEYWORDS | frozenset(
    {
        "Any", "Self", "as", "break", "catch", "continue", "default", "defer", "do",
        "else", "fallthrough", "false", "fileprivate", "for", "guard", "if", "in",
        "inout", "internal", "is", "nil", "private", "public", "repeat", "rethrows",
        "return", "self", "static", "super", "switch", "throw", "throws", "true",
        "try", "where", "while",
    }
)

_ALWAYS_KEYWORD_MODIFIERS: frozenset[str] = frozenset({"class", "static"}) | (
    VISIBILITY_MODIFIERS - {"open"}
)
_MODIFIER_ARGUMENTS: frozenset[str] = frozenset({"set", "safe", "unsafe"})
_BUILD_CONFIG_WORDS: frozenset[str] = frozenset({"if", "elseif", "else", "endif"})
_OPERATOR_CHARS = frozenset("/=-+!*%<>&|^~?.")


@dataclass(frozen=True)
class Lexeme:
    """A raw lexical unit with its 0-based offset."""

    category: str
    text: str
    offset: int

    @property
    def end(self) -> int:
        return self.offset + len(self.text)

    def is_word(self, *words: str) -> bool:
        return self.category == WORD and (not words or self.text in words)

    def is_punct(self, text: str) -> bool:
        return self.category == PUNCT and self.text == text


class SwiftLexer:
    """Single-pass lexer; raises SourceParseError on unterminated comments or strings."""

    def __init__(self, contents: str, path: Optional[str] = None) -> None:
        self.contents = contents
        self.path = path
        self._pos = 0

    def lexemes(self) -> list[Lexeme]:
        text = self.contents
        found: list[Lexeme] = []
        self._pos = 0
        while self._pos < len(text):
            char = text[self._pos]
            start = self._pos
            if char.isspace():
                self._pos += 1
                continue
            if text.startswith("//", start):
                end = text.find("\n", start)
                end = len(text) if end == -1 else end
                body = text[start:end]
                is_doc = body.startswith("///") and not body.startswith("////")
                found.append(Lexeme(DOC_COMMENT if is_doc else COMMENT, body, start))
                self._pos = end
            elif text.startswith("/*", start):
                end = self._block_comment_end(start)
                body = text[start:end]
                is_doc = body.startswith("/**") and not body.startswith("/***") and body != "/**/"
                found.append(Lexeme(DOC_COMMENT if is_doc else COMMENT, body, start))
                self._pos = end
            elif char == '"' or (char == "#" and self._raw_string_hashes(start) is not None):
                self._pos = self._string_end(start)
                found.append(Lexeme(STRING, text[start:self._pos], start))
            elif char.isdigit():
                self._pos = self._number_end(start)
                found.append(Lexeme(NUMBER, text[start:self._pos], start))
            elif char == "_" or char.isalpha() or char == "$":
                self._pos = self._word_end(start + 1)
                found.append(Lexeme(WORD, text[start:self._pos], start))
            elif char == "`":
                end = text.find("`", start + 1)
                if end == -1 or "\n" in text[start:end]:
                    raise SourceParseError("unterminated escaped identifier", self.path)
                self._pos = end + 1
                found.append(Lexeme(WORD, text[start:self._pos], start))
            elif char in "@#" and start + 1 < len(text) and (text[start + 1].isalpha() or text[start + 1] == "_"):
                self._pos = self._word_end(start + 1)
                category = ATTRIBUTE if char == "@" else DIRECTIVE
                found.append(Lexeme(category, text[start:self._pos], start))
            elif char in _OPERATOR_CHARS:
                self._pos = self._operator_end(start)
                found.append(Lexeme(OPERATOR, text[start:self._pos], start))
            else:
                self._pos = start + 1
                found.append(Lexeme(PUNCT, char, start))
        return found

    def _word_end(self, pos: int) -> int:
        text = self.contents
        while pos < len(text) and (text[pos].isalnum() or text[pos] in "_$"):
            pos += 1
        return pos

    def _number_end(self, pos: int) -> int:
        text = self.contents
        while pos < len(text):
            char = text[pos]
            if char.isalnum() or char == "_":
                pos += 1
            elif char == "." and pos + 1 < len(text) and text[pos + 1].isdigit():
                pos += 1
            else:
                break
        return pos

    def _operator_end(self, pos: int) -> int:
        text = self.contents
        pos += 1
        while pos < len(text) and text[pos] in _OPERATOR_CHARS:
            if text.startswith("//", pos) or text.startswith("/*", pos):
                break
            pos += 1
        return pos

    def _block_comment_end(self, start: int) -> int:
        """Block comments nest in Swift."""
        text = self.contents
        depth = 0
        pos = start
        while pos < len(text):
            if text.startswith("/*", pos):
                depth += 1
                pos += 2
            elif text.startswith("*/", pos):
                depth -= 1
                pos += 2
                if depth == 0:
                    return pos
            else:
                pos += 1
        raise SourceParseError("unterminated block comment", self.path)

    def _raw_string_hashes(self, start: int) -> Optional[int]:
        text = self.contents
        pos = start
        while pos < len(text) and text[pos] == "#":
            pos += 1
        if pos < len(text) and text[pos] == '"':
            return pos - start
        return None

    def _string_end(self, start: int) -> int:
        text = self.contents
        hashes = self._raw_string_hashes(start) or 0
        pos = start + hashes
        multiline = text.startswith('"""', pos)
        delimiter = ('"""' if multiline else '"') + "#" * hashes
        escape = "\\" + "#" * hashes
        pos += 3 if multiline else 1
        while pos < len(text):
            if text.startswith(delimiter, pos):
                return pos + len(delimiter)
            if text.startswith(escape, pos):
                pos += len(escape)
                if pos < len(text) and text[pos] == "(":
                    pos = self._interpolation_end(pos)
                else:
                    pos += 1
                continue
            if text[pos] == "\n" and not multiline:
                break
            pos += 1
        raise SourceParseError("unterminated string literal", self.path)

    def _interpolation_end(self, pos: int) -> int:
        text = self.contents
        depth = 0
        while pos < len(text):
            char = text[pos]
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth == 0:
                    return pos + 1
            elif char == '"':
                pos = self._string_end(pos)
                continue
            elif char == "\n":
                break
            pos += 1
        raise SourceParseError("unterminated string interpolation", self.path)


def classify(lexemes: list[Lexeme]) -> list[SyntaxToken]:
    """Map lexemes to SourceKit-style syntax tokens; punctuation and operators are dropped."""
    significant = [lexeme for lexeme in lexemes if lexeme.category not in (COMMENT, DOC_COMMENT)]
    following: dict[int, tuple[Optional[Lexeme], Optional[Lexeme]]] = {}
    for i, lexeme in enumerate(significant):
        nxt = significant[i + 1] if i + 1 < len(significant) else None
        after = significant[i + 2] if i + 2 < len(significant) else None
        following[lexeme.offset] = (nxt, after)

    tokens: list[SyntaxToken] = []
    for lexeme in lexemes:
        kind = _syntax_kind(lexeme, *following.get(lexeme.offset, (None, None)))
        if kind is not None:
            tokens.append(SyntaxToken(kind, lexeme.offset, len(lexeme.text)))
    return tokens


def is_modifier_context(nxt: Optional[Lexeme], after: Optional[Lexeme]) -> bool:
    """A contextual modifier word is only a modifier when a declaration follows it."""
    if nxt is None:
        return False
    if nxt.category == ATTRIBUTE:
        return True
    if nxt.category == WORD:
        return nxt.text in DECLARATION_KEYWORDS or nxt.text in DECLARATION_MODIFIERS
    return nxt.is_punct("(") and after is not None and after.is_word(*_MODIFIER_ARGUMENTS)


def _syntax_kind(
    lexeme: Lexeme, nxt: Optional[Lexeme], after: Optional[Lexeme]
) -> Optional[SyntaxKind]:
    category = lexeme.category
    if category == COMMENT:
        if lexeme.text.startswith("// MARK:"):
            return SyntaxKind.COMMENT_MARK
        return SyntaxKind.COMMENT
    if category == DOC_COMMENT:
        return SyntaxKind.DOC_COMMENT
    if category == STRING:
        return SyntaxKind.STRING
    if category == NUMBER:
        return SyntaxKind.NUMBER
    if category == ATTRIBUTE:
        return SyntaxKind.ATTRIBUTE_ID
    if category == DIRECTIVE:
        if lexeme.text[1:] in _BUILD_CONFIG_WORDS:
            return SyntaxKind.BUILDCONFIG_KEYWORD
        return SyntaxKind.KEYWORD
    if category != WORD:
        return None
    text = lexeme.text
    if text in _ALWAYS_KEYWORD_MODIFIERS:
        return SyntaxKind.KEYWORD
    if text in DECLARATION_MODIFIERS:
        if not is_modifier_context(nxt, after):
            return SyntaxKind.IDENTIFIER
        return SyntaxKind.KEYWORD if text in VISIBILITY_MODIFIERS else SyntaxKind.ATTRIBUTE_BUILTIN
    if text in KEYWORDS:
        return SyntaxKind.KEYWORD
    return SyntaxKind.IDENTIFIER
