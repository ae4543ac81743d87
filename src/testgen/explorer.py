"""Read-only listing of test files and test methods.

Best effort: only conventional test directories directly under the project
root are scanned, and test methods are found by attribute pattern matching.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from testgen.logging import get_logger

TEST_DIRECTORIES = ("tests", "test", "Test", "Tests", "__tests__", "spec")

TEST_FILE_PATTERNS = (
    re.compile(r"\.test\."),
    re.compile(r"\.spec\."),
    re.compile(r"Tests?\."),
    re.compile(r"_test\."),
    re.compile(r"_spec\."),
)

TEST_ATTRIBUTES = ("[Fact]", "[Theory]", "[Test]", "[TestMethod]")

METHOD_SIGNATURE = re.compile(r"public\s+(?:async\s+)?(?:static\s+)?[\w<>\[\],\s]*?\s(\w+)\s*\(")

# An attribute may sit a few lines above its method (stacked attributes)
_LOOKAHEAD_LINES = 5


@dataclass
class TestMethodEntry:
    __test__ = False

    name: str
    line: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "line": self.line}


@dataclass
class TestFileEntry:
    __test__ = False

    path: Path
    methods: list[TestMethodEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"path": str(self.path), "methods": [m.to_dict() for m in self.methods]}


def is_test_file(name: str) -> bool:
    return any(pattern.search(name) for pattern in TEST_FILE_PATTERNS)


def find_test_files(root: Path) -> list[Path]:
    """Test files directly inside the conventional test directories of root."""
    found: dict[Path, Path] = {}
    for dir_name in TEST_DIRECTORIES:
        directory = Path(root) / dir_name
        if not directory.is_dir():
            continue
        for path in sorted(directory.iterdir()):
            if path.is_file() and is_test_file(path.name):
                # Test/ and test/ are the same directory on case-insensitive filesystems
                found.setdefault(path.resolve(), path)
    return list(found.values())


def list_test_methods(path: Path) -> list[tuple[str, int]]:
    """Test methods in a file as ``(name, 1-based line)`` pairs."""
    try:
        lines = Path(path).read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError as e:
        get_logger().warning(f"Cannot read {path}: {e}")
        return []

    methods: list[tuple[str, int]] = []
    seen_lines: set[int] = set()
    for index, line in enumerate(lines):
        if not any(attr in line for attr in TEST_ATTRIBUTES):
            continue
        for offset in range(_LOOKAHEAD_LINES + 1):
            candidate = index + offset
            if candidate >= len(lines):
                break
            match = METHOD_SIGNATURE.search(lines[candidate])
            if match:
                if candidate not in seen_lines:
                    seen_lines.add(candidate)
                    methods.append((match.group(1), candidate + 1))
                break
    return methods


def explore(root: Path) -> list[TestFileEntry]:
    return [
        TestFileEntry(
            path=path,
            methods=[TestMethodEntry(name, line) for name, line in list_test_methods(path)],
        )
        for path in find_test_files(root)
    ]


__all__ = [
    "TEST_DIRECTORIES",
    "TestFileEntry",
    "TestMethodEntry",
    "explore",
    "find_test_files",
    "is_test_file",
    "list_test_methods",
]
