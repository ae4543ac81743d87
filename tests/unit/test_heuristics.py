"""Tests for C# naming and type heuristics."""

from __future__ import annotations

import pytest

from testgen import heuristics
from testgen.models import DependencyLifetime, FolderType, TestingPattern


class TestTestValues:
    """Literal generation for declared types."""

    @pytest.mark.parametrize(
        "type_name,expected",
        [
            ("string", '"test"'),
            ("int", "42"),
            ("long", "42L"),
            ("bool", "true"),
            ("decimal", "42.0m"),
            ("float", "42.0f"),
            ("Guid", "Guid.NewGuid()"),
            ("DateTime", "new DateTime(2023, 1, 1)"),
            ("int[]", "new int[0]"),
            ("List<string>", "new List<string>()"),
            ("IOrderRepository", "Mock.Of<IOrderRepository>()"),
            ("Order", "new Order()"),
        ],
    )
    def test_generate_test_value(self, type_name: str, expected: str) -> None:
        """Each type maps to a compilable literal."""
        assert heuristics.generate_test_value(type_name) == expected

    def test_mock_argument(self) -> None:
        assert heuristics.mock_argument("int") == "It.IsAny<int>()"


class TestTypeClassification:
    """Value, reference, numeric and string checks."""

    @pytest.mark.parametrize(
        "type_name,expected",
        [
            ("string", True),
            ("int", False),
            ("decimal", False),
            ("Int32", False),
            ("int?", True),
            ("IList<int>", True),
            ("Order", True),
            ("byte[]", True),
        ],
    )
    def test_is_reference_type(self, type_name: str, expected: bool) -> None:
        assert heuristics.is_reference_type(type_name) is expected

    def test_numeric_excludes_bool_and_char(self) -> None:
        assert heuristics.is_numeric_type("int")
        assert heuristics.is_numeric_type("Double")
        assert not heuristics.is_numeric_type("bool")
        assert not heuristics.is_numeric_type("char")

    def test_is_string_type(self) -> None:
        assert heuristics.is_string_type("string")
        assert heuristics.is_string_type("String")
        assert not heuristics.is_string_type("StringBuilder")


class TestDependencyHeuristics:
    """Mock and lifetime decisions from type names."""

    @pytest.mark.parametrize(
        "type_name,expected",
        [
            ("IOrderRepository", True),
            ("OrderService", True),
            ("ILogger<OrderService>", True),
            ("EmailHandler", True),
            ("int", False),
            ("Order", False),
            ("Index", False),
        ],
    )
    def test_requires_mock(self, type_name: str, expected: bool) -> None:
        assert heuristics.requires_mock(type_name) is expected

    @pytest.mark.parametrize(
        "type_name,expected",
        [
            ("IOrderRepository", DependencyLifetime.SCOPED),
            ("AppDbContext", DependencyLifetime.SCOPED),
            ("IOptions<AppSettings>", DependencyLifetime.SINGLETON),
            ("IConfiguration", DependencyLifetime.SINGLETON),
            ("IEmailSender", DependencyLifetime.TRANSIENT),
            ("IUserREPOSITORY", DependencyLifetime.SCOPED),
            ("appdbcontext", DependencyLifetime.SCOPED),
            ("IOptions<Appsettings>", DependencyLifetime.SINGLETON),
        ],
    )
    def test_guess_lifetime(self, type_name: str, expected: DependencyLifetime) -> None:
        assert heuristics.guess_lifetime(type_name) == expected

    def test_interface_name_needs_uppercase_second_letter(self) -> None:
        assert heuristics.is_interface_name("IService")
        assert not heuristics.is_interface_name("Item")
        assert not heuristics.is_interface_name("I")


class TestClassRoles:
    """Controller, service and test class detection."""

    def test_controller_by_name_base_or_attribute(self) -> None:
        assert heuristics.is_controller("HomeController", [], [])
        assert heuristics.is_controller("Home", ["ControllerBase"], [])
        assert heuristics.is_controller("Orders", [], ["ApiController"])
        assert not heuristics.is_controller("Order", [], [])

    def test_test_class_names(self) -> None:
        assert heuristics.is_test_class_name("CalculatorTests")
        assert heuristics.is_test_class_name("CalculatorTest")
        assert heuristics.is_test_class_name("calculatortests")
        assert heuristics.is_test_class_name("OrderServiceTEST")
        assert not heuristics.is_test_class_name("TestDataBuilder")

    def test_test_attributes(self) -> None:
        for attribute in ("Fact", "Theory", "Test", "TestMethod", "TestCase"):
            assert heuristics.is_test_attribute(attribute)
        assert not heuristics.is_test_attribute("HttpGet")
        assert heuristics.is_test_class_attribute("TestFixture")
        assert heuristics.is_test_class_attribute("TestClass")
        assert not heuristics.is_test_class_attribute("Serializable")


class TestNaming:
    """Case conversion helpers."""

    @pytest.mark.parametrize(
        "text,expected",
        [("order_id", "OrderId"), ("orderId", "OrderId"), ("data", "Data"), ("", "")],
    )
    def test_to_pascal_case(self, text: str, expected: str) -> None:
        assert heuristics.to_pascal_case(text) == expected

    def test_to_camel_case(self) -> None:
        assert heuristics.to_camel_case("OrderId") == "orderId"
        assert heuristics.to_camel_case("repository") == "repository"


class TestFolderClassification:
    """Folder role and testing pattern from directory names."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Controllers", FolderType.CONTROLLERS),
            ("services", FolderType.SERVICES),
            ("ViewModels", FolderType.VIEW_MODELS),
            ("Config", FolderType.CONFIGURATION),
            ("Misc", FolderType.OTHER),
        ],
    )
    def test_classify_folder(self, name: str, expected: FolderType) -> None:
        assert heuristics.classify_folder(name) == expected

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("UnitTests", TestingPattern.UNIT_TESTS),
            ("MyApp.IntegrationTests", TestingPattern.INTEGRATION_TESTS),
            ("AcceptanceSpecs", TestingPattern.ACCEPTANCE_TESTS),
            ("Tests", TestingPattern.UNIT_TESTS),
        ],
    )
    def test_classify_testing_pattern(self, name: str, expected: TestingPattern) -> None:
        assert heuristics.classify_testing_pattern(name) == expected


class TestExceptionTypes:
    """Exception class names from expected-result labels."""

    @pytest.mark.parametrize(
        "label,expected",
        [
            ("ThrowsArgumentNullException", "ArgumentNullException"),
            ("ThrowsArgumentOutOfRangeException", "ArgumentOutOfRangeException"),
            ("ThrowsInvalidOperationException", "InvalidOperationException"),
            ("Throws", "Exception"),
        ],
    )
    def test_extract_exception_type(self, label: str, expected: str) -> None:
        assert heuristics.extract_exception_type(label) == expected
