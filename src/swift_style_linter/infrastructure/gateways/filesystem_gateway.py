"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

from pathlib import Path
from typing import List, Sequence

from swift_style_linter.domain.protocols import FileSystemProtocol


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def glob_swift_files(self, path: str, excluded: Sequence[str] = ()) -> List[str]:
        """Get all Swift files in path (recursive if directory), minus excluded paths."""
        path_obj = Path(path).resolve()
        if path_obj.is_dir():
            candidates = sorted(path_obj.glob("**/*.swift"))
        elif path_obj.suffix == ".swift":
            candidates = [path_obj]
        else:
            candidates = []
        skipped = [Path(p).resolve() for p in excluded]
        return [str(p) for p in candidates if not any(p == s or s in p.parents for s in skipped)]

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content from a file."""
        return Path(path).read_text(encoding=encoding)

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file."""
        Path(path).write_text(content, encoding=encoding)
