"""testgen generators - turn analysis results into test files."""

from __future__ import annotations

from testgen.generators.base import TestGenerator
from testgen.generators.csharp import FRAMEWORKS, CSharpTestGenerator, FrameworkSettings

__all__ = [
    "FRAMEWORKS",
    "CSharpTestGenerator",
    "FrameworkSettings",
    "TestGenerator",
]
