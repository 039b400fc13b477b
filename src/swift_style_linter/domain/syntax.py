"""Syntax map: classified tokens of a source file, and the lookups rules run over them."""

from bisect import bisect_left
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

_SYNTAX_PREFIX = "source.lang.swift.syntaxtype."


class SyntaxKind(Enum):
    """Token classes, valued by their SourceKit syntax type strings."""

    ATTRIBUTE_BUILTIN = _SYNTAX_PREFIX + "attribute.builtin"
    ATTRIBUTE_ID = _SYNTAX_PREFIX + "attribute.id"
    BUILDCONFIG_ID = _SYNTAX_PREFIX + "buildconfig.id"
    BUILDCONFIG_KEYWORD = _SYNTAX_PREFIX + "buildconfig.keyword"
    COMMENT = _SYNTAX_PREFIX + "comment"
    COMMENT_MARK = _SYNTAX_PREFIX + "comment.mark"
    COMMENT_URL = _SYNTAX_PREFIX + "comment.url"
    DOC_COMMENT = _SYNTAX_PREFIX + "doccomment"
    DOC_COMMENT_FIELD = _SYNTAX_PREFIX + "doccomment.field"
    IDENTIFIER = _SYNTAX_PREFIX + "identifier"
    KEYWORD = _SYNTAX_PREFIX + "keyword"
    NUMBER = _SYNTAX_PREFIX + "number"
    OBJECT_LITERAL = _SYNTAX_PREFIX + "objectliteral"
    PLACEHOLDER = _SYNTAX_PREFIX + "placeholder"
    STRING = _SYNTAX_PREFIX + "string"
    STRING_INTERPOLATION_ANCHOR = _SYNTAX_PREFIX + "string_interpolation_anchor"
    TYPE_IDENTIFIER = _SYNTAX_PREFIX + "typeidentifier"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def from_sourcekit(cls, value: Optional[str]) -> "SyntaxKind":
        return _SYNTAX_KIND_BY_VALUE.get(value, cls.UNRECOGNIZED)

    @property
    def is_comment(self) -> bool:
        return self in COMMENT_KINDS

    @property
    def is_documentation(self) -> bool:
        return self in (SyntaxKind.DOC_COMMENT, SyntaxKind.DOC_COMMENT_FIELD)


_SYNTAX_KIND_BY_VALUE: dict[str, SyntaxKind] = {kind.value: kind for kind in SyntaxKind}

COMMENT_KINDS: frozenset[SyntaxKind] = frozenset(
    {
        SyntaxKind.COMMENT,
        SyntaxKind.COMMENT_MARK,
        SyntaxKind.COMMENT_URL,
        SyntaxKind.DOC_COMMENT,
        SyntaxKind.DOC_COMMENT_FIELD,
    }
)

VISIBILITY_MODIFIERS: frozenset[str] = frozenset(
    {"open", "public", "internal", "fileprivate", "private"}
)

OTHER_DECLARATION_MODIFIERS: frozenset[str] = frozenset(
    {
        "class",
        "convenience",
        "dynamic",
        "final",
        "indirect",
        "infix",
        "lazy",
        "mutating",
        "nonmutating",
        "optional",
        "override",
        "postfix",
        "prefix",
        "required",
        "static",
        "unowned",
        "weak",
    }
)

DECLARATION_MODIFIERS: frozenset[str] = VISIBILITY_MODIFIERS | OTHER_DECLARATION_MODIFIERS

_MODIFIER_TOKEN_KINDS: frozenset[SyntaxKind] = frozenset(
    {SyntaxKind.KEYWORD, SyntaxKind.ATTRIBUTE_BUILTIN}
)


@dataclass(frozen=True)
class SyntaxToken:
    """A classified token: kind plus 0-based character offset and length."""

    kind: SyntaxKind
    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


@dataclass(frozen=True)
class DeclarationPrefix:
    """Attributes and modifiers written before a declaration keyword."""

    start: int
    modifiers: tuple[SyntaxToken, ...]


class SyntaxMap:
    """Ordered tokens of one file, with lookups relative to declaration offsets."""

    def __init__(self, tokens: Iterable[SyntaxToken], contents: str) -> None:
        self.tokens: tuple[SyntaxToken, ...] = tuple(sorted(tokens, key=lambda t: t.offset))
        self.contents = contents
        self._offsets = [token.offset for token in self.tokens]

    def text(self, token: SyntaxToken) -> str:
        return self.contents[token.offset:token.end]

    def tokens_of_kind(self, kinds: Iterable[SyntaxKind]) -> list[SyntaxToken]:
        wanted = frozenset(kinds)
        return [token for token in self.tokens if token.kind in wanted]

    def token_at(self, offset: int) -> Optional[SyntaxToken]:
        index = bisect_left(self._offsets, offset)
        if index < len(self.tokens) and self.tokens[index].offset == offset:
            return self.tokens[index]
        return None

    def declaration_prefix(self, offset: int) -> DeclarationPrefix:
        """
        Walk back from a declaration keyword over its modifiers and attributes.

        Tokens must be separated by whitespace, or by plain comments once a
        modifier has been found. Parenthesised groups such as `private(set)`
        or `@available(iOS 10, *)` are stepped over whole.
        """
        index = bisect_left(self._offsets, offset) - 1
        cursor = offset
        start = offset
        modifiers: list[SyntaxToken] = []
        while index >= 0:
            token = self.tokens[index]
            gap = self.contents[token.end:cursor].strip()
            if token.kind.is_comment and not token.kind.is_documentation and start < offset and not gap:
                # comment inside the modifier run
                cursor = token.offset
                index -= 1
                continue
            if gap.endswith(")"):
                close = token.end + self.contents[token.end:cursor].rindex(")")
                opening = self._matching_open_paren(close)
                if opening is None:
                    break
                while index >= 0 and self.tokens[index].offset >= opening:
                    index -= 1
                if index < 0:
                    break
                token = self.tokens[index]
                if self.contents[token.end:opening].strip():
                    break
            elif gap:
                break
            text = self.text(token)
            if token.kind is SyntaxKind.ATTRIBUTE_ID:
                start = token.offset
            elif token.kind in _MODIFIER_TOKEN_KINDS and text in DECLARATION_MODIFIERS:
                modifiers.insert(0, token)
                start = token.offset
            else:
                break
            cursor = token.offset
            index -= 1
        return DeclarationPrefix(start=start, modifiers=tuple(modifiers))

    def modifier_tokens_before(self, offset: int) -> tuple[SyntaxToken, ...]:
        return self.declaration_prefix(offset).modifiers

    def documentation_comment_before(self, offset: int) -> Optional[str]:
        """Doc comment text directly above a declaration, or None."""
        start = self.declaration_prefix(offset).start
        index = bisect_left(self._offsets, start) - 1
        cursor = start
        pieces: list[str] = []
        while index >= 0:
            token = self.tokens[index]
            if not token.kind.is_documentation or self.contents[token.end:cursor].strip():
                break
            pieces.insert(0, self.text(token))
            cursor = token.offset
            index -= 1
        if not pieces:
            return None
        return "\n".join(piece.rstrip("\n") for piece in pieces)

    def _matching_open_paren(self, close: int) -> Optional[int]:
        depth = 0
        for position in range(close, -1, -1):
            char = self.contents[position]
            if char == ")":
                depth += 1
            elif char == "(":
                depth -= 1
                if depth == 0:
                    return position
        return None
