"""Run-scoped lookup from type names to the member names declared for them."""

from collections import defaultdict
from types import MappingProxyType
from typing import Iterable, Mapping

from swift_style_linter.domain.structure import StructuralNode


class DeclarationIndex:
    """
    Read-only snapshot of every named type, protocol and extension in a run.

    Built once from all parsed files before validation starts and shared by
    concurrent validations; rebuilding means constructing a new index.
    """

    def __init__(self, members_by_type: Mapping[str, Iterable[str]]) -> None:
        self._members_by_type: Mapping[str, tuple[str, ...]] = MappingProxyType(
            {name: tuple(members) for name, members in members_by_type.items()}
        )

    @classmethod
    def build(cls, structures: Iterable[StructuralNode]) -> "DeclarationIndex":
        collected: dict[str, list[str]] = defaultdict(list)
        for structure in structures:
            for node in structure.walk():
                if node.kind.is_type and node.name:
                    collected[node.name].extend(node.member_names)
        return cls(collected)

    @classmethod
    def empty(cls) -> "DeclarationIndex":
        return cls({})

    def members_of(self, type_name: str) -> tuple[str, ...]:
        """Member names declared for `type_name`; unknown names resolve to ()."""
        return self._members_by_type.get(type_name, ())

    def inherited_members(self, type_names: Iterable[str]) -> frozenset[str]:
        return frozenset(member for name in type_names for member in self.members_of(name))

    def __len__(self) -> int:
        return len(self._members_by_type)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._members_by_type
