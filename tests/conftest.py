"""Pytest configuration and shared helpers.

Run pytest from the project root; pythonpath in pyproject.toml puts src/ on
the import path. Sources are parsed with the built-in scanner so no external
toolchain is needed.
"""

from typing import Optional

import pytest

from swift_style_linter.domain.source_file import SourceFile
from swift_style_linter.infrastructure.gateways.swift_scanner import SwiftDeclarationScanner


def make_file(contents: str, path: Optional[str] = None) -> SourceFile:
    """Return a SourceFile parsed by the built-in scanner."""
    return SourceFile(contents, SwiftDeclarationScanner(), path)


@pytest.fixture
def scanner() -> SwiftDeclarationScanner:
    return SwiftDeclarationScanner()
