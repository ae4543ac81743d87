"""testgen parser - Tree-sitter based source analysis."""

from __future__ import annotations

from testgen.parser.base import (
    CodeAnalyzer,
    calculate_cyclomatic_complexity,
    create_parser,
    get_language,
)
from testgen.parser.csharp_analyzer import CSharpAnalyzer

__all__ = [
    "CSharpAnalyzer",
    "CodeAnalyzer",
    "calculate_cyclomatic_complexity",
    "create_parser",
    "get_language",
]
