"""Base protocol for test generators.

Defines the interface that every per-language generator implements.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from testgen.models import AnalysisResult, GeneratedTestFile, TestCase


@runtime_checkable
class TestGenerator(Protocol):
    """Protocol for test generators.

    The engine keeps a list of generators, groups analysis results by the
    first one whose ``can_generate`` returns True, and calls
    ``generate_test_files`` once per group.
    """

    @property
    def name(self) -> str:
        """Return a human readable generator name."""
        ...

    def can_generate(self, result: AnalysisResult) -> bool:
        """Whether this generator handles the analyzed file."""
        ...

    def generate_tests(self, result: AnalysisResult) -> list[TestCase]:
        """Derive test cases for every eligible member of the file."""
        ...

    async def generate_test_files(
        self, results: list[AnalysisResult], output_dir: Path
    ) -> list[GeneratedTestFile]:
        """Render and write one test file per source file.

        The output directory is purged once before anything is written.

        Args:
            results: Analysis results claimed by this generator
            output_dir: Directory that receives the generated files

        Returns:
            Descriptors of the files written
        """
        ...
