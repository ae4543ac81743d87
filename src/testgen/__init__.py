"""testgen - Test skeleton generation from C# source analysis."""

__version__ = "0.1.0"
