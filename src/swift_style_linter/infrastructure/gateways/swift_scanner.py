"""Built-in structure parser: a declaration scanner over the Swift lexer's output."""

import logging
from dataclasses import dataclass
from typing import Optional

from swift_style_linter.domain.exceptions import SourceParseError
from swift_style_linter.domain.source_file import ParsedSource
from swift_style_linter.domain.structure import AccessControlLevel, DeclarationKind, StructuralNode
from swift_style_linter.domain.syntax import DECLARATION_MODIFIERS, VISIBILITY_MODIFIERS, SyntaxMap
from swift_style_linter.infrastructure.gateways.swift_lexer import (
    ATTRIBUTE,
    COMMENT,
    DECLARATION_KEYWORDS,
    DIRECTIVE,
    DOC_COMMENT,
    OPERATOR,
    WORD,
    Lexeme,
    SwiftLexer,
    classify,
    is_modifier_context,
)

_TYPE_KINDS: dict[str, DeclarationKind] = {
    "class": DeclarationKind.CLASS,
    "enum": DeclarationKind.ENUM,
    "extension": DeclarationKind.EXTENSION,
    "protocol": DeclarationKind.PROTOCOL,
    "struct": DeclarationKind.STRUCT,
}
_CLOSERS = {"(": ")", "[": "]", "{": "}"}


@dataclass(frozen=True)
class _Modifiers:
    words: tuple[str, ...] = ()
    visibility: Optional[str] = None

    def has(self, word: str) -> bool:
        return word in self.words


@dataclass(frozen=True)
class _Container:
    kind: DeclarationKind
    accessibility: AccessControlLevel
    explicit: bool


class _DeclarationParser:
    """
    Recursive scan over significant lexemes (comments removed).

    Declaration offsets point at the declaration keyword, as SourceKit reports
    them. Function, initializer and accessor bodies are skipped unread.
    """

    def __init__(self, lexemes: list[Lexeme], syntax_map: SyntaxMap, path: Optional[str]) -> None:
        self._lexemes = lexemes
        self._syntax_map = syntax_map
        self._contents = syntax_map.contents
        self._path = path
        self._pos = 0

    def parse(self) -> StructuralNode:
        children = self._members(None)
        if self._peek() is not None:
            raise self._error("unbalanced '}'")
        return StructuralNode(
            kind=DeclarationKind.SOURCE_FILE,
            offset=0,
            length=len(self._contents),
            children=tuple(children),
        )

    # -- cursor helpers -------------------------------------------------

    def _peek(self, ahead: int = 0) -> Optional[Lexeme]:
        index = self._pos + ahead
        return self._lexemes[index] if index < len(self._lexemes) else None

    def _advance(self) -> Lexeme:
        lexeme = self._lexemes[self._pos]
        self._pos += 1
        return lexeme

    def _error(self, reason: str) -> SourceParseError:
        return SourceParseError(reason, self._path)

    def _starts_line(self, lexeme: Lexeme) -> bool:
        previous_end = self._lexemes[self._pos - 1].end if self._pos > 0 else 0
        return "\n" in self._contents[previous_end:lexeme.offset]

    def _starts_declaration(self, lexeme: Lexeme) -> bool:
        if lexeme.category in (ATTRIBUTE, DIRECTIVE):
            return True
        if lexeme.category != WORD:
            return False
        if lexeme.text in DECLARATION_KEYWORDS:
            return True
        return lexeme.text in DECLARATION_MODIFIERS and is_modifier_context(self._peek(1), self._peek(2))

    def _skip_group(self) -> Lexeme:
        """Consume a balanced (), [] or {} group; return its closing lexeme."""
        stack = [self._advance()]
        while stack:
            lexeme = self._peek()
            if lexeme is None:
                raise self._error(f"unbalanced '{stack[-1].text}' at offset {stack[-1].offset}")
            self._advance()
            if lexeme.text in _CLOSERS and lexeme.category != WORD:
                stack.append(lexeme)
            elif lexeme.text in _CLOSERS.values() and lexeme.category != WORD:
                opener = stack.pop()
                if _CLOSERS[opener.text] != lexeme.text:
                    raise self._error(f"mismatched '{lexeme.text}' at offset {lexeme.offset}")
                if not stack:
                    return lexeme
        raise self._error("unbalanced group")

    def _skip_generic_clause(self) -> None:
        lexeme = self._peek()
        if lexeme is None or lexeme.category != OPERATOR or not lexeme.text.startswith("<"):
            return
        depth = 0
        while True:
            lexeme = self._peek()
            if lexeme is None:
                raise self._error("unterminated generic clause")
            if lexeme.text in ("(", "["):
                self._skip_group()
                continue
            self._advance()
            if lexeme.category == OPERATOR:
                depth += lexeme.text.count("<") - (lexeme.text.count(">") - lexeme.text.count("->"))
                if depth <= 0:
                    return

    def _skip_to_statement_end(self, start_end: int) -> int:
        """Consume the rest of a declaration header or body; return its end offset."""
        end = start_end
        while True:
            lexeme = self._peek()
            if lexeme is None or lexeme.text in (")", "]", "}", ";") and lexeme.category != WORD:
                return end
            if self._starts_line(lexeme) and self._starts_declaration(lexeme):
                return end
            if lexeme.text in _CLOSERS and lexeme.category != WORD:
                end = self._skip_group().end
                continue
            end = self._advance().end

    # -- members --------------------------------------------------------

    def _members(self, container: Optional[_Container]) -> list[StructuralNode]:
        members: list[StructuralNode] = []
        while True:
            lexeme = self._peek()
            if lexeme is None or (lexeme.text == "}" and lexeme.category != WORD):
                return members
            if lexeme.text in ("{", "(", "[") and lexeme.category != WORD:
                self._skip_group()
                continue
            if lexeme.text in (")", "]") and lexeme.category != WORD:
                raise self._error(f"unbalanced '{lexeme.text}' at offset {lexeme.offset}")
            modifiers = self._modifiers()
            keyword = self._peek()
            if keyword is None:
                return members
            members.extend(self._declaration(keyword, modifiers, container))

    def _modifiers(self) -> _Modifiers:
        words: list[str] = []
        visibility: Optional[str] = None
        while True:
            lexeme = self._peek()
            if lexeme is None:
                break
            if lexeme.category == ATTRIBUTE:
                self._advance()
                following = self._peek()
                if following is not None and following.text == "(" and following.offset == lexeme.end:
                    self._skip_group()
                continue
            if lexeme.category != WORD or lexeme.text not in DECLARATION_MODIFIERS:
                break
            if not is_modifier_context(self._peek(1), self._peek(2)):
                break
            self._advance()
            following = self._peek()
            if following is not None and following.text == "(" and following.category != WORD:
                self._skip_group()
            elif lexeme.text in VISIBILITY_MODIFIERS and visibility is None:
                visibility = lexeme.text
            words.append(lexeme.text)
        return _Modifiers(tuple(words), visibility)

    def _declaration(
        self, keyword: Lexeme, modifiers: _Modifiers, container: Optional[_Container]
    ) -> list[StructuralNode]:
        if keyword.category != WORD:
            if keyword.text not in ("{", "}", "(", ")", "[", "]"):
                self._advance()
            return []
        text = keyword.text
        if text in _TYPE_KINDS:
            return [self._type(keyword, modifiers, container)]
        if text == "func":
            return [self._function(keyword, modifiers, container)]
        if text in ("init", "deinit", "subscript"):
            return [self._special_function(keyword, modifiers, container)]
        if text in ("var", "let"):
            return self._variable(keyword, modifiers, container)
        if text == "case" and container is not None and container.kind is DeclarationKind.ENUM:
            return [self._enum_case(keyword, container)]
        if text in ("typealias", "associatedtype"):
            return [self._typealias(keyword, modifiers, container)]
        self._advance()
        return []

    def _accessibility(
        self, modifiers: _Modifiers, container: Optional[_Container]
    ) -> AccessControlLevel:
        if modifiers.visibility is not None:
            return AccessControlLevel.from_keyword(modifiers.visibility)
        if container is None:
            return AccessControlLevel.INTERNAL
        if container.kind is DeclarationKind.PROTOCOL:
            return container.accessibility
        if container.kind is DeclarationKind.EXTENSION and container.explicit:
            return container.accessibility
        return AccessControlLevel.INTERNAL

    def _node(
        self,
        keyword: Lexeme,
        kind: DeclarationKind,
        end: int,
        name: Optional[str],
        accessibility: Optional[AccessControlLevel],
        inherited: tuple[str, ...] = (),
        children: tuple[StructuralNode, ...] = (),
    ) -> StructuralNode:
        return StructuralNode(
            kind=kind,
            offset=keyword.offset,
            length=end - keyword.offset,
            name=name,
            accessibility=accessibility,
            documentation_comment=self._syntax_map.documentation_comment_before(keyword.offset),
            inherited_type_names=inherited,
            children=children,
        )

    def _type(
        self, keyword: Lexeme, modifiers: _Modifiers, container: Optional[_Container]
    ) -> StructuralNode:
        self._advance()
        name = self._qualified_name()
        self._skip_generic_clause()
        inherited = self._inheritance_clause()
        while (lexeme := self._peek()) is not None and lexeme.text != "{":
            if lexeme.text in (";", "}"):
                raise self._error(f"expected '{{' after {keyword.text} {name}")
            self._advance()
        if self._peek() is None:
            raise self._error(f"expected '{{' after {keyword.text} {name}")

        kind = _TYPE_KINDS[keyword.text]
        accessibility = self._accessibility(modifiers, container)
        inner = _Container(kind, accessibility, explicit=modifiers.visibility is not None)
        self._advance()
        children = self._members(inner)
        closing = self._peek()
        if closing is None:
            raise self._error(f"unterminated body of {keyword.text} {name}")
        self._advance()
        return self._node(
            keyword, kind, closing.end, name, accessibility, inherited, tuple(children)
        )

    def _qualified_name(self) -> Optional[str]:
        parts: list[str] = []
        while (lexeme := self._peek()) is not None and lexeme.category == WORD:
            parts.append(self._advance().text.strip("`"))
            dot = self._peek()
            if dot is None or dot.text != "." or dot.category != OPERATOR:
                break
            self._advance()
        return ".".join(parts) or None

    def _inheritance_clause(self) -> tuple[str, ...]:
        colon = self._peek()
        if colon is None or colon.text != ":":
            return ()
        self._advance()
        names: list[str] = []
        while (lexeme := self._peek()) is not None and lexeme.text != "{" and not lexeme.is_word("where"):
            if lexeme.category == WORD:
                name = self._qualified_name()
                if name:
                    names.append(name)
                self._skip_generic_clause()
            else:
                self._advance()
        return tuple(names)

    def _function(
        self, keyword: Lexeme, modifiers: _Modifiers, container: Optional[_Container]
    ) -> StructuralNode:
        self._advance()
        base = self._peek()
        if base is None:
            raise self._error("expected function name")
        self._advance()
        is_operator = base.category == OPERATOR
        self._skip_generic_clause()
        labels = self._parameter_labels(unlabeled_default=is_operator)
        end = self._skip_to_statement_end(self._lexemes[self._pos - 1].end)
        if container is None:
            kind = DeclarationKind.FUNCTION_OPERATOR if is_operator else DeclarationKind.FUNCTION_FREE
        elif modifiers.has("static"):
            kind = DeclarationKind.FUNCTION_METHOD_STATIC
        elif modifiers.has("class"):
            kind = DeclarationKind.FUNCTION_METHOD_CLASS
        else:
            kind = DeclarationKind.FUNCTION_METHOD_INSTANCE
        name = f"{base.text.strip('`')}({labels})"
        return self._node(keyword, kind, end, name, self._accessibility(modifiers, container))

    def _special_function(
        self, keyword: Lexeme, modifiers: _Modifiers, container: Optional[_Container]
    ) -> StructuralNode:
        self._advance()
        following = self._peek()
        if following is not None and following.category == OPERATOR and following.text in ("?", "!"):
            self._advance()
        self._skip_generic_clause()
        if keyword.text == "deinit":
            kind, name = DeclarationKind.FUNCTION_DESTRUCTOR, "deinit"
        elif keyword.text == "subscript":
            labels = self._parameter_labels(unlabeled_default=True)
            kind, name = DeclarationKind.FUNCTION_SUBSCRIPT, f"subscript({labels})"
        else:
            labels = self._parameter_labels(unlabeled_default=False)
            kind, name = DeclarationKind.FUNCTION_CONSTRUCTOR, f"init({labels})"
        end = self._skip_to_statement_end(self._lexemes[self._pos - 1].end)
        return self._node(keyword, kind, end, name, self._accessibility(modifiers, container))

    def _parameter_labels(self, unlabeled_default: bool) -> str:
        """SourceKit-style argument labels, e.g. `b:_:` for `(b: Int, _ c: Int)`."""
        opening = self._peek()
        if opening is None or opening.text != "(":
            return ""
        start = self._pos
        self._skip_group()
        inner = self._lexemes[start + 1:self._pos - 1]
        labels: list[str] = []
        segment: list[Lexeme] = []
        depth = 0
        angles = 0
        for lexeme in inner + [Lexeme(",", ",", -1)]:
            if lexeme.text in _CLOSERS and lexeme.category != WORD:
                depth += 1
            elif lexeme.text in _CLOSERS.values() and lexeme.category != WORD:
                depth -= 1
            elif lexeme.category == OPERATOR:
                angles += lexeme.text.count("<") - (lexeme.text.count(">") - lexeme.text.count("->"))
            if depth == 0 and angles <= 0 and lexeme.text == ",":
                if segment:
                    labels.append(_label(segment, unlabeled_default))
                segment = []
            else:
                segment.append(lexeme)
        return "".join(f"{label}:" for label in labels)

    def _variable(
        self, keyword: Lexeme, modifiers: _Modifiers, container: Optional[_Container]
    ) -> list[StructuralNode]:
        self._advance()
        pattern = self._peek()
        if pattern is None:
            raise self._error(f"expected name after '{keyword.text}'")
        name: Optional[str] = None
        if pattern.category == WORD:
            name = self._advance().text.strip("`")
        elif pattern.text == "(":
            start = self._pos
            self._skip_group()
            words = [lx.text for lx in self._lexemes[start:self._pos] if lx.category == WORD]
            name = words[0] if words else None
        end = self._skip_to_statement_end(self._lexemes[self._pos - 1].end)
        if container is None:
            kind = DeclarationKind.VAR_GLOBAL
        elif modifiers.has("static"):
            kind = DeclarationKind.VAR_STATIC
        elif modifiers.has("class"):
            kind = DeclarationKind.VAR_CLASS
        else:
            kind = DeclarationKind.VAR_INSTANCE
        return [self._node(keyword, kind, end, name, self._accessibility(modifiers, container))]

    def _enum_case(self, keyword: Lexeme, container: _Container) -> StructuralNode:
        self._advance()
        documentation = self._syntax_map.documentation_comment_before(keyword.offset)
        elements: list[StructuralNode] = []
        end = keyword.end
        while (lexeme := self._peek()) is not None:
            if lexeme.text in ("}", ";") and lexeme.category != WORD:
                break
            if self._starts_line(lexeme) and self._starts_declaration(lexeme):
                break
            if lexeme.category == WORD:
                self._advance()
                labels = self._parameter_labels(unlabeled_default=False)
                element_end = self._lexemes[self._pos - 1].end
                name = f"{lexeme.text.strip('`')}({labels})" if labels else lexeme.text.strip("`")
                elements.append(
                    StructuralNode(
                        kind=DeclarationKind.ENUM_ELEMENT,
                        offset=lexeme.offset,
                        length=element_end - lexeme.offset,
                        name=name,
                        accessibility=container.accessibility,
                        documentation_comment=documentation,
                    )
                )
                end = self._skip_element_tail(element_end)
            else:
                self._advance()
        return self._node(
            keyword, DeclarationKind.ENUM_CASE, end, None, None, children=tuple(elements)
        )

    def _skip_element_tail(self, end: int) -> int:
        """Skip a raw value (`= 1`) up to the next ',' or the end of the case."""
        while (lexeme := self._peek()) is not None:
            if lexeme.text == "," or (lexeme.text in ("}", ";") and lexeme.category != WORD):
                if lexeme.text == ",":
                    self._advance()
                return end
            if self._starts_line(lexeme) and self._starts_declaration(lexeme):
                return end
            if lexeme.text in _CLOSERS and lexeme.category != WORD:
                end = self._skip_group().end
            else:
                end = self._advance().end
        return end

    def _typealias(
        self, keyword: Lexeme, modifiers: _Modifiers, container: Optional[_Container]
    ) -> StructuralNode:
        self._advance()
        name_lexeme = self._peek()
        name = None
        if name_lexeme is not None and name_lexeme.category == WORD:
            name = self._advance().text.strip("`")
        end = self._skip_to_statement_end(self._lexemes[self._pos - 1].end)
        kind = (
            DeclarationKind.TYPEALIAS if keyword.text == "typealias" else DeclarationKind.ASSOCIATED_TYPE
        )
        return self._node(keyword, kind, end, name, self._accessibility(modifiers, container))


def _label(segment: list[Lexeme], unlabeled_default: bool) -> str:
    names: list[str] = []
    for lexeme in segment:
        if lexeme.text == ":":
            break
        if lexeme.category == WORD:
            names.append(lexeme.text.strip("`"))
    else:
        return "_"
    if unlabeled_default and len(names) < 2:
        return "_"
    return names[0] if names else "_"


class SwiftDeclarationScanner:
    """
    Structure parser that needs no external toolchain.

    Covers the declaration forms the rules reason about (types, protocols,
    extensions, functions, initializers, subscripts, properties, enum cases,
    typealiases) and rejects unbalanced brackets or unterminated literals.
    """

    def parse(self, contents: str, path: Optional[str] = None) -> ParsedSource:
        lexemes = SwiftLexer(contents, path).lexemes()
        syntax_map = SyntaxMap(classify(lexemes), contents)
        significant = [lx for lx in lexemes if lx.category not in (COMMENT, DOC_COMMENT)]
        structure = _DeclarationParser(significant, syntax_map, path).parse()
        logging.debug(
            "Scanned %s: %d declarations, %d tokens",
            path or "<memory>", sum(1 for _ in structure.walk()) - 1, len(syntax_map.tokens),
        )
        return ParsedSource(structure=structure, syntax_map=syntax_map)
