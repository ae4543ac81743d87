"""Tests for the template registry."""

from __future__ import annotations

from pathlib import Path

import pytest

from testgen.errors import TemplateError
from testgen.templates import TemplateEngine

BUILTIN = [
    "csharp/base",
    "csharp/controller-test",
    "csharp/file",
    "csharp/macros",
    "csharp/service-test",
    "csharp/unit-test",
]


def class_data(**overrides: object) -> dict[str, object]:
    data: dict[str, object] = {
        "class_name": "Calculator",
        "framework": "xunit",
        "class_attribute": "",
        "setup_attribute": "",
        "test_attribute": "Fact",
        "dependencies": [],
        "construct_sut": True,
        "sut_expression": "new Calculator()",
        "include_aaa": True,
        "tests": [
            {
                "name": "Add_WithValidInput_ReturnsExpectedResult",
                "documentation": "Add with valid input returns expected result.",
                "is_async": False,
                "arrange": ["var a = 42;"],
                "mock_setup": [],
                "act": ["var result = _sut.Add(a);"],
                "assertions": ["result.Should().NotBeNull();"],
                "verifications": [],
            }
        ],
    }
    data.update(overrides)
    return data


class TestBuiltinTemplates:
    """Packaged C# templates."""

    def test_builtin_names(self) -> None:
        engine = TemplateEngine()
        assert engine.available_templates() == BUILTIN
        assert engine.has_template("csharp/unit-test")

    def test_without_builtins(self) -> None:
        assert TemplateEngine(include_builtin=False).available_templates() == []

    def test_unit_test_class(self) -> None:
        content = TemplateEngine().render("csharp/unit-test", class_data())
        lines = content.splitlines()
        assert "public class CalculatorTests" in lines
        assert "    private Calculator _sut;" in lines
        assert "    public CalculatorTests()" in lines
        assert "        _sut = new Calculator();" in lines
        assert "    /// Add with valid input returns expected result." in lines
        assert "    [Fact]" in lines
        assert "    public void Add_WithValidInput_ReturnsExpectedResult()" in lines
        assert "        // Arrange" in lines
        assert "        var a = 42;" in lines
        assert "        // Act" in lines
        assert "        // Assert" in lines
        assert lines[-1] == "}"

    def test_setup_method_with_attribute(self) -> None:
        data = class_data(
            class_attribute="TestFixture",
            setup_attribute="SetUp",
            test_attribute="Test",
            dependencies=[{"type": "IClock", "mock_name": "_clockMock"}],
        )
        lines = TemplateEngine().render("csharp/unit-test", data).splitlines()
        assert "[TestFixture]" in lines
        assert "    private Mock<IClock> _clockMock;" in lines
        assert "    [SetUp]" in lines
        assert "    public void SetUp()" in lines
        assert "        _clockMock = new Mock<IClock>();" in lines
        assert "    [Test]" in lines

    def test_async_test_signature(self) -> None:
        data = class_data()
        data["tests"][0]["is_async"] = True  # type: ignore[index]
        content = TemplateEngine().render("csharp/unit-test", data)
        assert "    public async Task Add_WithValidInput_ReturnsExpectedResult()" in content

    def test_static_class_without_sut(self) -> None:
        content = TemplateEngine().render(
            "csharp/unit-test", class_data(construct_sut=False, sut_expression="")
        )
        assert "_sut" not in content.replace("_sut.Add", "")
        assert "public CalculatorTests()" not in content

    def test_service_and_controller_regions(self) -> None:
        engine = TemplateEngine()
        service = engine.render("csharp/service-test", class_data())
        controller = engine.render("csharp/controller-test", class_data())
        assert "    #region Service operations" in service.splitlines()
        assert "    #endregion" in service.splitlines()
        assert "    #region Action tests" in controller.splitlines()
        assert "Controller tests for" in controller

    def test_file_wrapper(self) -> None:
        content = TemplateEngine().render(
            "csharp/file",
            {
                "source_file": "Calculator.cs",
                "usings": ["System", "Xunit"],
                "test_namespace": "MyApp.Tests",
                "blocks": ["public class ATests\n{\n}", "public class BTests\n{\n}"],
            },
        )
        lines = content.splitlines()
        assert lines[0] == "// <auto-generated>"
        assert "using System;" in lines
        assert "using Xunit;" in lines
        assert "namespace MyApp.Tests;" in lines
        assert lines.count("public class ATests") == 1
        assert lines.count("public class BTests") == 1


class TestRegistry:
    """Registering, overriding and loading templates."""

    def test_register_and_render(self) -> None:
        engine = TemplateEngine(include_builtin=False)
        engine.register("custom/hello", "Hello {{ name }}!")
        assert engine.render("custom/hello", {"name": "World"}) == "Hello World!"

    def test_register_replaces_compiled_template(self) -> None:
        engine = TemplateEngine(include_builtin=False)
        engine.register("greeting", "Hi {{ name }}")
        assert engine.render("greeting", {"name": "A"}) == "Hi A"
        engine.register("greeting", "Bye {{ name }}")
        assert engine.render("greeting", {"name": "A"}) == "Bye A"

    def test_override_builtin(self) -> None:
        engine = TemplateEngine()
        engine.register("csharp/unit-test", "// custom {{ class_name }}")
        assert engine.render("csharp/unit-test", class_data()) == "// custom Calculator"

    def test_unknown_template(self) -> None:
        with pytest.raises(TemplateError) as exc_info:
            TemplateEngine().render("csharp/missing", {})
        assert exc_info.value.template_name == "csharp/missing"

    def test_syntax_error_is_template_error(self) -> None:
        engine = TemplateEngine(include_builtin=False)
        engine.register("broken", "{% for x in %}")
        with pytest.raises(TemplateError, match="Error rendering template broken"):
            engine.render("broken", {})

    def test_missing_values_render_empty(self) -> None:
        engine = TemplateEngine(include_builtin=False)
        engine.register("partial", "[{{ missing }}]")
        assert engine.render("partial", {}) == "[]"

    def test_load_from_directory(self, tmp_path: Path) -> None:
        (tmp_path / "csharp").mkdir()
        (tmp_path / "csharp" / "unit-test.j2").write_text("// {{ class_name }} v2", encoding="utf-8")
        (tmp_path / "csharp" / "readme.txt").write_text("ignored", encoding="utf-8")

        engine = TemplateEngine()
        assert engine.load_from_directory(tmp_path) == 1
        assert engine.render("csharp/unit-test", class_data()) == "// Calculator v2"

    def test_load_from_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(TemplateError):
            TemplateEngine().load_from_directory(tmp_path / "missing")

    def test_reset_restores_builtins(self) -> None:
        engine = TemplateEngine()
        engine.register("extra", "x")
        engine.register("csharp/unit-test", "override")
        engine.reset()
        assert engine.available_templates() == BUILTIN
        assert "public class CalculatorTests" in engine.render("csharp/unit-test", class_data())
