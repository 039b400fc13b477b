"""Structural model: a language-agnostic tree of declarations parsed from a source file."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

_DECL_PREFIX = "source.lang.swift.decl."
_ACCESSIBILITY_PREFIX = "source.lang.swift.accessibility."


class DeclarationKind(Enum):
    """Declaration categories, valued by their SourceKit kind strings."""

    ASSOCIATED_TYPE = _DECL_PREFIX + "associatedtype"
    CLASS = _DECL_PREFIX + "class"
    ENUM = _DECL_PREFIX + "enum"
    ENUM_CASE = _DECL_PREFIX + "enumcase"
    ENUM_ELEMENT = _DECL_PREFIX + "enumelement"
    EXTENSION = _DECL_PREFIX + "extension"
    EXTENSION_CLASS = _DECL_PREFIX + "extension.class"
    EXTENSION_ENUM = _DECL_PREFIX + "extension.enum"
    EXTENSION_PROTOCOL = _DECL_PREFIX + "extension.protocol"
    EXTENSION_STRUCT = _DECL_PREFIX + "extension.struct"
    FUNCTION_ACCESSOR_ADDRESS = _DECL_PREFIX + "function.accessor.address"
    FUNCTION_ACCESSOR_DIDSET = _DECL_PREFIX + "function.accessor.didset"
    FUNCTION_ACCESSOR_GETTER = _DECL_PREFIX + "function.accessor.getter"
    FUNCTION_ACCESSOR_MUTABLEADDRESS = _DECL_PREFIX + "function.accessor.mutableaddress"
    FUNCTION_ACCESSOR_SETTER = _DECL_PREFIX + "function.accessor.setter"
    FUNCTION_ACCESSOR_WILLSET = _DECL_PREFIX + "function.accessor.willset"
    FUNCTION_CONSTRUCTOR = _DECL_PREFIX + "function.constructor"
    FUNCTION_DESTRUCTOR = _DECL_PREFIX + "function.destructor"
    FUNCTION_FREE = _DECL_PREFIX + "function.free"
    FUNCTION_METHOD_CLASS = _DECL_PREFIX + "function.method.class"
    FUNCTION_METHOD_INSTANCE = _DECL_PREFIX + "function.method.instance"
    FUNCTION_METHOD_STATIC = _DECL_PREFIX + "function.method.static"
    FUNCTION_OPERATOR = _DECL_PREFIX + "function.operator"
    FUNCTION_SUBSCRIPT = _DECL_PREFIX + "function.subscript"
    GENERIC_TYPE_PARAM = _DECL_PREFIX + "generic_type_param"
    MODULE = _DECL_PREFIX + "module"
    PROTOCOL = _DECL_PREFIX + "protocol"
    STRUCT = _DECL_PREFIX + "struct"
    TYPEALIAS = _DECL_PREFIX + "typealias"
    VAR_CLASS = _DECL_PREFIX + "var.class"
    VAR_GLOBAL = _DECL_PREFIX + "var.global"
    VAR_INSTANCE = _DECL_PREFIX + "var.instance"
    VAR_LOCAL = _DECL_PREFIX + "var.local"
    VAR_PARAMETER = _DECL_PREFIX + "var.parameter"
    VAR_STATIC = _DECL_PREFIX + "var.static"
    SOURCE_FILE = "source.lang.swift.sourcefile"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def from_sourcekit(cls, value: Optional[str]) -> "DeclarationKind":
        """Map a parser kind string; anything outside the table is UNRECOGNIZED."""
        if value is None:
            return cls.UNRECOGNIZED
        return _KIND_BY_VALUE.get(value, cls.UNRECOGNIZED)

    @property
    def is_documentable(self) -> bool:
        return self not in _UNDOCUMENTABLE_KINDS

    @property
    def is_function(self) -> bool:
        return self in FUNCTION_KINDS

    @property
    def is_type(self) -> bool:
        return self in TYPE_KINDS


_KIND_BY_VALUE: dict[str, DeclarationKind] = {kind.value: kind for kind in DeclarationKind}

_UNDOCUMENTABLE_KINDS: frozenset[DeclarationKind] = frozenset(
    {
        DeclarationKind.VAR_LOCAL,
        DeclarationKind.VAR_PARAMETER,
        DeclarationKind.SOURCE_FILE,
        DeclarationKind.UNRECOGNIZED,
    }
)

FUNCTION_KINDS: frozenset[DeclarationKind] = frozenset(
    {
        DeclarationKind.FUNCTION_CONSTRUCTOR,
        DeclarationKind.FUNCTION_FREE,
        DeclarationKind.FUNCTION_METHOD_CLASS,
        DeclarationKind.FUNCTION_METHOD_INSTANCE,
        DeclarationKind.FUNCTION_METHOD_STATIC,
        DeclarationKind.FUNCTION_OPERATOR,
    }
)

TYPE_KINDS: frozenset[DeclarationKind] = frozenset(
    {
        DeclarationKind.CLASS,
        DeclarationKind.ENUM,
        DeclarationKind.EXTENSION,
        DeclarationKind.EXTENSION_CLASS,
        DeclarationKind.EXTENSION_ENUM,
        DeclarationKind.EXTENSION_PROTOCOL,
        DeclarationKind.EXTENSION_STRUCT,
        DeclarationKind.PROTOCOL,
        DeclarationKind.STRUCT,
    }
)


class AccessControlLevel(Enum):
    """Closed set of access levels the documentation rule reasons about."""

    PRIVATE = "private"
    INTERNAL = "internal"
    PUBLIC = "public"
    UNRECOGNIZED = "unrecognized"

    @property
    def sourcekit_value(self) -> str:
        return _ACCESSIBILITY_PREFIX + self.value

    @classmethod
    def from_sourcekit(cls, value: Optional[str]) -> Optional["AccessControlLevel"]:
        """
        Map a parser accessibility string.

        None means the parser reported no accessibility. Strings outside the
        closed set (fileprivate, open, future levels) become UNRECOGNIZED.
        """
        if value is None:
            return None
        if value.startswith(_ACCESSIBILITY_PREFIX):
            return cls.from_keyword(value[len(_ACCESSIBILITY_PREFIX):])
        return cls.UNRECOGNIZED

    @classmethod
    def from_keyword(cls, keyword: str) -> "AccessControlLevel":
        if keyword == cls.PRIVATE.value:
            return cls.PRIVATE
        if keyword == cls.INTERNAL.value:
            return cls.INTERNAL
        if keyword == cls.PUBLIC.value:
            return cls.PUBLIC
        return cls.UNRECOGNIZED


@dataclass(frozen=True)
class StructuralNode:
    """One declaration (or the file root) with its exclusively-owned children."""

    kind: DeclarationKind
    offset: int
    length: int
    name: Optional[str] = None
    accessibility: Optional[AccessControlLevel] = None
    documentation_comment: Optional[str] = None
    inherited_type_names: tuple[str, ...] = ()
    children: tuple["StructuralNode", ...] = ()

    def walk(self) -> Iterator["StructuralNode"]:
        """Yield this node and its descendants depth-first, in document order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    @property
    def member_names(self) -> tuple[str, ...]:
        return tuple(child.name for child in self.children if child.name)
