from swift_style_linter.domain.structure import AccessControlLevel, DeclarationKind, StructuralNode


def test_unknown_kind_string_is_unrecognized() -> None:
    assert DeclarationKind.from_sourcekit("source.lang.swift.decl.macro") is DeclarationKind.UNRECOGNIZED
    assert DeclarationKind.from_sourcekit(None) is DeclarationKind.UNRECOGNIZED


def test_documentable_kinds() -> None:
    assert DeclarationKind.FUNCTION_FREE.is_documentable
    assert DeclarationKind.ENUM_ELEMENT.is_documentable
    assert not DeclarationKind.VAR_LOCAL.is_documentable
    assert not DeclarationKind.VAR_PARAMETER.is_documentable
    assert not DeclarationKind.UNRECOGNIZED.is_documentable


def test_function_and_type_kinds() -> None:
    assert DeclarationKind.FUNCTION_CONSTRUCTOR.is_function
    assert not DeclarationKind.FUNCTION_SUBSCRIPT.is_function
    assert DeclarationKind.EXTENSION_STRUCT.is_type
    assert not DeclarationKind.TYPEALIAS.is_type


def test_accessibility_from_sourcekit() -> None:
    assert AccessControlLevel.from_sourcekit(None) is None
    assert AccessControlLevel.from_sourcekit("source.lang.swift.accessibility.public") is AccessControlLevel.PUBLIC
    assert (
        AccessControlLevel.from_sourcekit("source.lang.swift.accessibility.fileprivate")
        is AccessControlLevel.UNRECOGNIZED
    )
    assert AccessControlLevel.from_sourcekit("bogus") is AccessControlLevel.UNRECOGNIZED
    assert AccessControlLevel.PRIVATE.sourcekit_value == "source.lang.swift.accessibility.private"


def test_walk_is_depth_first_in_document_order() -> None:
    leaf_a = StructuralNode(DeclarationKind.VAR_INSTANCE, 10, 1, name="a")
    leaf_b = StructuralNode(DeclarationKind.VAR_INSTANCE, 20, 1, name="b")
    inner = StructuralNode(DeclarationKind.STRUCT, 5, 20, name="S", children=(leaf_a,))
    root = StructuralNode(DeclarationKind.SOURCE_FILE, 0, 30, children=(inner, leaf_b))
    assert [node.name for node in root.walk()] == [None, "S", "a", "b"]
    assert inner.member_names == ("a",)
    assert inner.offset + inner.length == 25
