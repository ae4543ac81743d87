"""Analyzer protocol and Tree-sitter helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from tree_sitter import Language, Node, Parser

from testgen.errors import UnsupportedFileTypeError
from testgen.models import AnalysisResult


class CodeAnalyzer(Protocol):
    """Protocol for per-language source analyzers.

    The engine keeps a list of analyzers and routes each file to the first
    one whose ``can_analyze`` returns True.
    """

    file_type: str
    supported_extensions: tuple[str, ...]

    def can_analyze(self, file_path: Path) -> bool:
        """Whether this analyzer handles the file (extension match)."""
        ...

    async def analyze(self, file_path: Path) -> AnalysisResult:
        """Analyze one file. Raises AnalysisError on unreadable input."""
        ...

    async def analyze_batch(self, file_paths: list[Path]) -> list[AnalysisResult]:
        """Analyze files concurrently; result i belongs to file_paths[i]."""
        ...


# Language registry
_languages: dict[str, Language] = {}


def get_language(lang: str) -> Language:
    """Get or create Tree-sitter Language instance."""
    if lang not in _languages:
        if lang == "csharp":
            import tree_sitter_c_sharp as tscsharp

            _languages[lang] = Language(tscsharp.language())
        else:
            raise UnsupportedFileTypeError(lang, "")
    return _languages[lang]


def create_parser(lang: str) -> Parser:
    return Parser(get_language(lang))


# Node kinds counted toward cyclomatic complexity. The set is the contract;
# it is an approximation, not any external tool's definition.
DECISION_POINTS: dict[str, set[str]] = {
    "csharp": {
        "if_statement",
        "while_statement",
        "for_statement",
        "foreach_statement",
        "for_each_statement",  # older grammar releases
        "switch_statement",
        "catch_clause",
        "conditional_expression",
        "binary_expression",  # only && and ||
    },
}

DECISION_OPERATORS: set[str] = {"&&", "||"}


def calculate_cyclomatic_complexity(node: Node, language: str, source: bytes) -> int:
    """Calculate cyclomatic complexity by decision point counting.

    Base complexity is 1. Each node in DECISION_POINTS adds 1; a
    binary_expression only counts when its operator is && or ||.

    Args:
        node: Tree-sitter AST node (typically method body)
        language: Language key into DECISION_POINTS
        source: Original source bytes for operator text extraction

    Returns:
        Cyclomatic complexity score (minimum 1)
    """
    decision_types = DECISION_POINTS.get(language, set())
    complexity = 1

    def _is_decision_operator(n: Node) -> bool:
        operator = n.child_by_field_name("operator")
        if operator is not None:
            return get_node_text(operator, source) in DECISION_OPERATORS
        return any(get_node_text(child, source) in DECISION_OPERATORS for child in n.children)

    def traverse(n: Node) -> None:
        nonlocal complexity

        if n.type in decision_types:
            if n.type == "binary_expression":
                if _is_decision_operator(n):
                    complexity += 1
            else:
                complexity += 1

        for child in n.children:
            traverse(child)

    traverse(node)
    return complexity


def get_node_text(node: Node, source: bytes) -> str:
    """Extract text content of a node."""
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def find_children_by_type(node: Node, type_name: str) -> list[Node]:
    """Find all direct children with a specific type."""
    return [child for child in node.children if child.type == type_name]


def find_child_by_type(node: Node, type_name: str) -> Node | None:
    """Find first direct child with a specific type."""
    for child in node.children:
        if child.type == type_name:
            return child
    return None


def find_descendants_by_type(node: Node, type_name: str) -> list[Node]:
    """Find all descendants with a specific type, in document order."""
    results = []
    if node.type == type_name:
        results.append(node)
    for child in node.children:
        results.extend(find_descendants_by_type(child, type_name))
    return results
