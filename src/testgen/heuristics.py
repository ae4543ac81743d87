"""Naming and type heuristics for C# code.

Everything here is pattern matching on names and type text, not semantic
analysis. A class named ``IOCContainer`` is treated as an interface, for
example. The analyzer and generator call these functions instead of
inlining the rules, so they can be tuned in one place.
"""

from __future__ import annotations

import re

from testgen.models import DependencyLifetime, FolderType, TestingPattern

SERVICE_TYPE_PATTERNS: tuple[str, ...] = (
    "Service",
    "Repository",
    "Manager",
    "Handler",
    "Provider",
    "Factory",
)

VALUE_TYPES: frozenset[str] = frozenset(
    {
        "int",
        "int32",
        "long",
        "int64",
        "bool",
        "boolean",
        "decimal",
        "double",
        "float",
        "byte",
        "sbyte",
        "short",
        "ushort",
        "uint",
        "ulong",
        "char",
    }
)

NUMERIC_TYPES: frozenset[str] = VALUE_TYPES - {"bool", "boolean", "char"}

# Test value literals keyed by lowercased type name
_TEST_VALUES: dict[str, str] = {
    "string": '"test"',
    "int": "42",
    "int32": "42",
    "long": "42L",
    "int64": "42L",
    "bool": "true",
    "boolean": "true",
    "decimal": "42.0m",
    "double": "42.0",
    "float": "42.0f",
    "guid": "Guid.NewGuid()",
    "datetime": "new DateTime(2023, 1, 1)",
}

_FOLDER_TYPES: dict[str, FolderType] = {
    "controllers": FolderType.CONTROLLERS,
    "services": FolderType.SERVICES,
    "models": FolderType.MODELS,
    "repositories": FolderType.REPOSITORIES,
    "viewmodels": FolderType.VIEW_MODELS,
    "helpers": FolderType.HELPERS,
    "extensions": FolderType.EXTENSIONS,
    "configuration": FolderType.CONFIGURATION,
    "config": FolderType.CONFIGURATION,
    "data": FolderType.DATA,
    "business": FolderType.BUSINESS,
    "web": FolderType.WEB,
    "api": FolderType.API,
}

_WORD_SPLIT = re.compile(r"[_\-\s]+")


def is_interface_name(name: str) -> bool:
    """True for names like ``IOrderRepository``: a leading I then an uppercase letter."""
    return len(name) > 1 and name[0] == "I" and name[1].isupper()


def is_service_type(type_name: str) -> bool:
    lowered = type_name.lower()
    return any(pattern.lower() in lowered for pattern in SERVICE_TYPE_PATTERNS)


def requires_mock(type_name: str) -> bool:
    """Whether a constructor parameter of this type is an injected dependency."""
    return is_interface_name(type_name) or is_service_type(type_name)


def guess_lifetime(type_name: str) -> DependencyLifetime:
    """Guess a DI lifetime from type-name substrings, ignoring case."""
    lowered = type_name.lower()
    if "repository" in lowered or "context" in lowered:
        return DependencyLifetime.SCOPED
    if "configuration" in lowered or "settings" in lowered:
        return DependencyLifetime.SINGLETON
    return DependencyLifetime.TRANSIENT


def is_controller(name: str, base_types: list[str], attribute_names: list[str]) -> bool:
    """Controller by name suffix, base type or ``[ApiController]``-style attribute."""
    if name.lower().endswith("controller"):
        return True
    if any("Controller" in base for base in base_types):
        return True
    return any("ApiController" in attr or "Controller" in attr for attr in attribute_names)


def is_service(name: str) -> bool:
    return "service" in name.lower()


def is_repository(name: str) -> bool:
    return "repository" in name.lower()


def is_test_class_name(name: str) -> bool:
    return name.lower().endswith(("tests", "test"))


def is_test_attribute(attribute_name: str) -> bool:
    """Attribute that marks a method as a test (``[Fact]``, ``[Test]``, ``[TestMethod]`` ...)."""
    return "Test" in attribute_name or "Fact" in attribute_name or "Theory" in attribute_name


def is_test_class_attribute(attribute_name: str) -> bool:
    return "TestClass" in attribute_name or "TestFixture" in attribute_name


def _normalize(type_name: str) -> str:
    return type_name.strip().lower()


def is_value_type(type_name: str) -> bool:
    return _normalize(type_name) in VALUE_TYPES


def is_numeric_type(type_name: str) -> bool:
    return _normalize(type_name) in NUMERIC_TYPES


def is_string_type(type_name: str) -> bool:
    return _normalize(type_name) == "string"


def is_reference_type(type_name: str) -> bool:
    """Strings, arrays, lists, I-prefixed names and anything not a known value type.

    ``int?`` is not in the value-type table, so it counts as a reference type.
    """
    lowered = type_name.strip().lower()
    if lowered == "string" or lowered.endswith("[]") or lowered.startswith("list<"):
        return True
    if is_value_type(type_name):
        return False
    if type_name.startswith("I"):
        return True
    return not is_value_type(type_name)


def generate_test_value(type_name: str) -> str:
    """Map a declared C# type to a literal usable in arrange code."""
    lowered = type_name.strip().lower()
    if lowered in _TEST_VALUES:
        return _TEST_VALUES[lowered]
    if type_name.endswith("[]"):
        return f"new {type_name[:-2]}[0]"
    if type_name.startswith("List<"):
        return f"new {type_name}()"
    if is_interface_name(type_name):
        return f"Mock.Of<{type_name}>()"
    return f"new {type_name}()"


def mock_argument(type_name: str) -> str:
    return f"It.IsAny<{type_name}>()"


def to_pascal_case(text: str) -> str:
    """``order_id`` / ``orderId`` -> ``OrderId``."""
    if not text:
        return text
    parts = [p for p in _WORD_SPLIT.split(text) if p]
    if len(parts) > 1:
        return "".join(p[0].upper() + p[1:] for p in parts)
    return text[0].upper() + text[1:]


def to_camel_case(text: str) -> str:
    pascal = to_pascal_case(text)
    if not pascal:
        return pascal
    return pascal[0].lower() + pascal[1:]


def classify_folder(name: str) -> FolderType:
    return _FOLDER_TYPES.get(name.lower(), FolderType.OTHER)


def classify_testing_pattern(name: str) -> TestingPattern:
    lowered = name.lower()
    if "unit" in lowered:
        return TestingPattern.UNIT_TESTS
    if "integration" in lowered:
        return TestingPattern.INTEGRATION_TESTS
    if "functional" in lowered:
        return TestingPattern.FUNCTIONAL_TESTS
    if "acceptance" in lowered:
        return TestingPattern.ACCEPTANCE_TESTS
    if "performance" in lowered:
        return TestingPattern.PERFORMANCE_TESTS
    return TestingPattern.UNIT_TESTS


def extract_exception_type(expected_result: str) -> str:
    """Exception class named by an ``expected_result`` label."""
    if "ArgumentNull" in expected_result:
        return "ArgumentNullException"
    if "ArgumentOutOfRange" in expected_result:
        return "ArgumentOutOfRangeException"
    if "InvalidOperation" in expected_result:
        return "InvalidOperationException"
    return "Exception"
