"""Tests for the C# analyzer."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from testgen.errors import AnalysisError, UnsupportedFileTypeError
from testgen.models import AccessModifier, DependencyLifetime
from testgen.parser import CSharpAnalyzer, get_language
from tests.conftest import CALCULATOR_SOURCE, CONTROLLER_SOURCE, ORDER_SERVICE_SOURCE


@pytest.fixture(scope="module")
def analyzer() -> CSharpAnalyzer:
    return CSharpAnalyzer()


class TestFileLevel:
    """Namespace, usings and file routing."""

    def test_block_namespace_and_usings(self, analyzer: CSharpAnalyzer) -> None:
        result = analyzer.analyze_source(CALCULATOR_SOURCE.encode())
        assert result.namespace == "MyApp.Models"
        assert result.usings == ["System", "System.Collections.Generic"]
        assert result.file_type == "csharp"

    def test_file_scoped_namespace(self, analyzer: CSharpAnalyzer) -> None:
        result = analyzer.analyze_source(ORDER_SERVICE_SOURCE.encode())
        assert result.namespace == "MyApp.Services"

    def test_unknown_language(self) -> None:
        with pytest.raises(UnsupportedFileTypeError):
            get_language("cobol")

    def test_can_analyze_by_extension(self, analyzer: CSharpAnalyzer) -> None:
        assert analyzer.can_analyze(Path("Order.cs"))
        assert analyzer.can_analyze(Path("Order.CS"))
        assert not analyzer.can_analyze(Path("order.ts"))

    def test_analyze_reads_file(self, analyzer: CSharpAnalyzer, tmp_path: Path) -> None:
        path = tmp_path / "Calculator.cs"
        path.write_text(CALCULATOR_SOURCE, encoding="utf-8")
        result = asyncio.run(analyzer.analyze(path))
        assert result.file_path == str(path)
        assert [c.name for c in result.classes] == ["Calculator"]

    def test_missing_file_raises(self, analyzer: CSharpAnalyzer, tmp_path: Path) -> None:
        with pytest.raises(AnalysisError) as exc_info:
            asyncio.run(analyzer.analyze(tmp_path / "Missing.cs"))
        assert exc_info.value.file_path.endswith("Missing.cs")

    def test_unparseable_source_raises(self, analyzer: CSharpAnalyzer) -> None:
        with pytest.raises(AnalysisError):
            analyzer.analyze_source(b"this is not C# at all {{{")

    def test_batch_keeps_input_order(self, analyzer: CSharpAnalyzer, tmp_path: Path) -> None:
        first = tmp_path / "Calculator.cs"
        second = tmp_path / "OrderService.cs"
        first.write_text(CALCULATOR_SOURCE, encoding="utf-8")
        second.write_text(ORDER_SERVICE_SOURCE, encoding="utf-8")

        results = asyncio.run(analyzer.analyze_batch([second, first]))
        assert [r.file_path for r in results] == [str(second), str(first)]

    def test_analysis_is_deterministic(self, analyzer: CSharpAnalyzer) -> None:
        first = analyzer.analyze_source(ORDER_SERVICE_SOURCE.encode(), "OrderService.cs")
        second = analyzer.analyze_source(ORDER_SERVICE_SOURCE.encode(), "OrderService.cs")
        assert first.to_dict() == second.to_dict()


class TestClasses:
    """Type declarations and their members."""

    def test_class_metadata(self, analyzer: CSharpAnalyzer) -> None:
        result = analyzer.analyze_source(CALCULATOR_SOURCE.encode())
        cls = result.classes[0]
        assert cls.name == "Calculator"
        assert cls.full_name == "MyApp.Models.Calculator"
        assert cls.kind == "class"
        assert cls.access_modifier == AccessModifier.PUBLIC
        assert cls.documentation == "Simple arithmetic."
        assert not cls.is_controller

    def test_methods_and_parameters(self, analyzer: CSharpAnalyzer) -> None:
        result = analyzer.analyze_source(CALCULATOR_SOURCE.encode())
        methods = {m.name: m for m in result.classes[0].methods}
        assert list(methods) == ["Add", "Process", "Reset"]

        add = methods["Add"]
        assert add.return_type == "int"
        assert add.access_modifier == AccessModifier.PUBLIC
        assert [(p.name, p.type) for p in add.parameters] == [("a", "int"), ("b", "int")]
        assert not add.is_async

        assert methods["Reset"].access_modifier == AccessModifier.PRIVATE
        assert methods["Process"].thrown_exceptions == ["ArgumentNullException"]

    def test_optional_parameters(self, analyzer: CSharpAnalyzer) -> None:
        source = b"""
public class Greeter
{
    public void Greet(string name = null, int times = 1, bool loud = false) { }
}
"""
        greet = analyzer.analyze_source(source).classes[0].methods[0]
        assert [(p.name, p.is_optional, p.default_value) for p in greet.parameters] == [
            ("name", True, "null"),
            ("times", True, "1"),
            ("loud", True, "false"),
        ]

    def test_cyclomatic_complexity(self, analyzer: CSharpAnalyzer) -> None:
        result = analyzer.analyze_source(CALCULATOR_SOURCE.encode())
        methods = {m.name: m for m in result.classes[0].methods}
        assert methods["Add"].cyclomatic_complexity == 1
        # one if plus one ||
        assert methods["Process"].cyclomatic_complexity == 3

    def test_auto_property(self, analyzer: CSharpAnalyzer) -> None:
        result = analyzer.analyze_source(CALCULATOR_SOURCE.encode())
        prop = result.classes[0].properties[0]
        assert prop.name == "Total"
        assert prop.type == "int"
        assert prop.has_getter and prop.has_setter
        assert prop.is_auto_property
        assert result.properties == [prop]

    def test_interface_members_default_public(self, analyzer: CSharpAnalyzer) -> None:
        result = analyzer.analyze_source(ORDER_SERVICE_SOURCE.encode())
        interface = result.find_class("IOrderRepository")
        assert interface is not None
        assert interface.kind == "interface"
        method = interface.methods[0]
        assert method.name == "GetByIdAsync"
        assert method.return_type == "Task<Order>"
        assert method.access_modifier == AccessModifier.PUBLIC
        assert method.is_async

    def test_find_class_by_full_name(self, analyzer: CSharpAnalyzer) -> None:
        result = analyzer.analyze_source(ORDER_SERVICE_SOURCE.encode())
        assert result.find_class("MyApp.Services.OrderService") is result.find_class("OrderService")
        assert result.find_class("Missing") is None

    def test_async_method(self, analyzer: CSharpAnalyzer) -> None:
        result = analyzer.analyze_source(ORDER_SERVICE_SOURCE.encode())
        service = result.find_class("OrderService")
        assert service is not None
        method = service.methods[0]
        assert method.is_async
        assert method.return_type == "Task<Order>"
        assert method.thrown_exceptions == ["ArgumentOutOfRangeException"]

    def test_constructors(self, analyzer: CSharpAnalyzer) -> None:
        source = b"""
public class Derived : BaseType
{
    static Derived() { }
    public Derived(int x) : base(x) { }
    internal Derived(string name, int count = 10) : this(count) { }
}
"""
        cls = analyzer.analyze_source(source).classes[0]
        assert cls.base_types == ["BaseType"]
        static_ctor, base_ctor, this_ctor = cls.constructors
        assert static_ctor.is_static
        assert base_ctor.calls_base and not base_ctor.calls_this
        assert base_ctor.access_modifier == AccessModifier.PUBLIC
        assert this_ctor.calls_this
        assert this_ctor.access_modifier == AccessModifier.INTERNAL
        optional = this_ctor.parameters[1]
        assert optional.is_optional
        assert optional.default_value == "10"

    def test_modifiers(self, analyzer: CSharpAnalyzer) -> None:
        source = b"""
public abstract class Shape
{
    public abstract double Area();
    protected virtual void Draw() { }
}

public static class MathUtil
{
    public static int Square(int x) => x * x;
}
"""
        result = analyzer.analyze_source(source)
        shape = result.find_class("Shape")
        util = result.find_class("MathUtil")
        assert shape is not None and util is not None
        assert shape.is_abstract
        area, draw = shape.methods
        assert area.is_abstract
        assert draw.is_virtual
        assert draw.access_modifier == AccessModifier.PROTECTED
        assert util.is_static
        assert util.methods[0].is_static

    def test_nested_types_in_document_order(self, analyzer: CSharpAnalyzer) -> None:
        source = b"""
public class Outer
{
    public void Run() { }

    public class Inner
    {
        public void Step() { }
    }
}
"""
        result = analyzer.analyze_source(source)
        assert [c.name for c in result.classes] == ["Outer", "Inner"]
        outer, inner = result.classes
        assert [m.name for m in outer.methods] == ["Run"]
        assert [m.name for m in inner.methods] == ["Step"]
        assert [m.name for m in result.methods] == ["Run", "Step"]


class TestControllers:
    """Attributes, base types and dependency detection."""

    def test_controller_detection(self, analyzer: CSharpAnalyzer) -> None:
        result = analyzer.analyze_source(CONTROLLER_SOURCE.encode())
        cls = result.classes[0]
        assert cls.is_controller
        assert cls.base_types == ["ControllerBase"]
        assert [a.name for a in cls.attributes] == ["ApiController", "Route"]
        assert cls.attributes[0].full_name == "ApiControllerAttribute"
        assert cls.attributes[1].arguments == ['"api/[controller]"']

    def test_method_attribute_arguments(self, analyzer: CSharpAnalyzer) -> None:
        result = analyzer.analyze_source(CONTROLLER_SOURCE.encode())
        method = result.classes[0].methods[0]
        assert method.attributes[0].name == "HttpGet"
        assert method.attributes[0].arguments == ['"{id}"']

    def test_constructor_dependencies(self, analyzer: CSharpAnalyzer) -> None:
        result = analyzer.analyze_source(ORDER_SERVICE_SOURCE.encode())
        assert len(result.dependencies) == 1
        dependency = result.dependencies[0]
        assert dependency.name == "repository"
        assert dependency.type == "IOrderRepository"
        assert dependency.requires_mock
        assert dependency.lifetime == DependencyLifetime.SCOPED

    def test_value_parameters_are_not_dependencies(self, analyzer: CSharpAnalyzer) -> None:
        source = b"public class Timer { public Timer(int seconds, string label) { } }"
        assert analyzer.analyze_source(source).dependencies == []

    def test_interfaces_split_from_base_types(self, analyzer: CSharpAnalyzer) -> None:
        source = b"public class Repo : BaseRepo, IRepo, System.IDisposable { }"
        cls = analyzer.analyze_source(source).classes[0]
        assert cls.base_types == ["BaseRepo"]
        assert cls.interfaces == ["IRepo", "System.IDisposable"]
