from swift_style_linter.domain.declaration_index import DeclarationIndex

from conftest import make_file


def test_build_collects_members_of_types_protocols_and_extensions() -> None:
    first = make_file("protocol P {\n  var a: Int { get }\n  func b()\n}\n")
    second = make_file("struct S {\n  let c: Int\n}\nextension S {\n  func d(x: Int) {}\n}\n")
    index = DeclarationIndex.build([first.structure, second.structure])
    assert index.members_of("P") == ("a", "b()")
    assert index.members_of("S") == ("c", "d(x:)")
    assert len(index) == 2
    assert "P" in index


def test_unknown_type_resolves_to_no_members() -> None:
    index = DeclarationIndex.empty()
    assert index.members_of("Missing") == ()
    assert index.inherited_members(["Missing"]) == frozenset()


def test_inherited_members_union() -> None:
    index = DeclarationIndex({"A": ["x"], "B": ["y", "x"]})
    assert index.inherited_members(["A", "B", "C"]) == frozenset({"x", "y"})
