"""C# test generator.

Turns analyzed classes into xUnit, NUnit or MSTest test cases and writes one
test file per source file. Every eligible method gets a happy-path test plus
null-argument, zero, empty-string and async variants derived from its
parameter list. Constructor-injected dependencies become Moq mocks whose
setup and verification target the first method of the dependency's
interface when that interface is analyzed in the same file.
"""

from __future__ import annotations

import asyncio
import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from testgen.config import TestGenConfig
from testgen.errors import GenerationError
from testgen.heuristics import (
    extract_exception_type,
    generate_test_value,
    is_numeric_type,
    is_reference_type,
    is_string_type,
    is_test_attribute,
    is_test_class_attribute,
    is_test_class_name,
    mock_argument,
    to_camel_case,
    to_pascal_case,
)
from testgen.logging import get_logger
from testgen.models import (
    AccessModifier,
    AnalysisResult,
    ClassInfo,
    ConstructorInfo,
    DependencyInfo,
    GeneratedTestFile,
    MethodInfo,
    ParameterInfo,
    PropertyInfo,
    TestCase,
    TestType,
)
from testgen.templates import TemplateEngine


@dataclass(frozen=True)
class FrameworkSettings:
    """Attribute vocabulary for one C# test framework."""

    name: str
    namespace: str
    test_attribute: str
    class_attribute: str = ""
    setup_attribute: str = ""  # empty: set up in the test class constructor


FRAMEWORKS: dict[str, FrameworkSettings] = {
    "xunit": FrameworkSettings("xunit", "Xunit", "Fact"),
    "nunit": FrameworkSettings("nunit", "NUnit.Framework", "Test", "TestFixture", "SetUp"),
    "mstest": FrameworkSettings(
        "mstest",
        "Microsoft.VisualStudio.TestTools.UnitTesting",
        "TestMethod",
        "TestClass",
        "TestInitialize",
    ),
}

DEFAULT_FRAMEWORK = "xunit"

# Files whose directory is treated as the project root when mirroring output
PROJECT_MARKERS = ("*.csproj", "*.sln", "*.vbproj", "*.fsproj")

# Return types that produce no value to assert on
NO_RESULT_TYPES = frozenset({"void", "Task", "ValueTask"})

# Stubbed when the dependency's interface is not analyzed in the same file
FALLBACK_MOCK_CALL = "GetAsync(It.IsAny<int>())"

_TASK_RESULT = re.compile(r"^(?:Task|ValueTask)<(.+)>$")
_NAMING_TOKENS = re.compile(r"MethodName|Scenario|ExpectedResult")
_WORD_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

_ZERO_LITERALS = {
    "long": "0L",
    "int64": "0L",
    "ulong": "0UL",
    "uint": "0U",
    "decimal": "0m",
    "double": "0.0",
    "float": "0f",
}


@dataclass
class MockPlan:
    """Mock declaration plus the setup and verify lines for one dependency."""

    dependency: DependencyInfo
    mock_name: str
    mock_type: str
    setup: list[str] = field(default_factory=list)
    verify: list[str] = field(default_factory=list)


@dataclass
class ClassPlan:
    """Everything derived once per class and shared by its test cases."""

    info: ClassInfo
    framework: FrameworkSettings
    mocks: list[MockPlan] = field(default_factory=list)
    existing_tests: list[str] = field(default_factory=list)

    @property
    def construct_sut(self) -> bool:
        return not self.info.is_static


def find_project_root(source_file: Path) -> Path | None:
    """Nearest ancestor directory holding a project or solution file."""
    for directory in source_file.resolve().parents:
        try:
            if any(next(directory.glob(marker), None) for marker in PROJECT_MARKERS):
                return directory
        except OSError:
            continue
    return None


def zero_literal(type_name: str) -> str:
    return _ZERO_LITERALS.get(type_name.strip().lower(), "0")


def humanize(label: str) -> str:
    """``WithNullData`` -> ``with null data``."""
    return _WORD_BOUNDARY.sub(" ", label).lower()


def returns_clause(return_type: str) -> str:
    """Moq ``Returns``/``ReturnsAsync`` suffix for a stubbed member."""
    if return_type == "void":
        return ""
    if return_type == "Task":
        return ".Returns(Task.CompletedTask)"
    if return_type == "ValueTask":
        return ".Returns(ValueTask.CompletedTask)"
    match = _TASK_RESULT.match(return_type)
    if match:
        return f".ReturnsAsync(default({match.group(1)}))"
    return f".Returns(default({return_type}))"


class CSharpTestGenerator:
    """Generates C# test files through the template engine."""

    file_type = "csharp"

    def __init__(
        self,
        config: TestGenConfig | None = None,
        template_engine: TemplateEngine | None = None,
    ) -> None:
        self.config = config or TestGenConfig()
        self.templates = template_engine or TemplateEngine()
        self._logger = get_logger()

    @property
    def name(self) -> str:
        return "C# Test Generator"

    def can_generate(self, result: AnalysisResult) -> bool:
        return result.file_type.lower() == self.file_type and bool(result.classes)

    # ------------------------------------------------------------------
    # Test case synthesis
    # ------------------------------------------------------------------

    def determine_framework(self, result: AnalysisResult) -> str:
        """Package references win, then existing tests, then configuration."""
        structure = result.project_structure
        if structure is not None and structure.nuget_info.test_frameworks:
            detected = structure.nuget_info.test_frameworks[0].type.value
            if detected in FRAMEWORKS:
                return detected

        if result.existing_tests is not None and result.existing_tests.test_framework:
            existing = result.existing_tests.test_framework.lower()
            if existing in FRAMEWORKS:
                return existing

        configured = self.config.project.test_frameworks.get("csharp", "").lower()
        if configured in FRAMEWORKS:
            return configured
        return DEFAULT_FRAMEWORK

    def is_test_class(self, cls: ClassInfo) -> bool:
        if is_test_class_name(cls.name):
            return True
        return any(is_test_class_attribute(attr.name) for attr in cls.attributes)

    def should_test_method(self, method: MethodInfo, existing_tests: list[str]) -> bool:
        analysis = self.config.analysis
        if method.access_modifier == AccessModifier.PRIVATE and not analysis.include_private_methods:
            return False
        if method.access_modifier == AccessModifier.INTERNAL and not analysis.include_internal_methods:
            return False
        if any(is_test_attribute(attr.name) for attr in method.attributes):
            return False
        prefix = f"{method.name}_"
        return not any(name == method.name or name.startswith(prefix) for name in existing_tests)

    def should_test_constructor(self, cls: ClassInfo, constructor: ConstructorInfo) -> bool:
        return (
            not cls.is_static
            and not constructor.is_static
            and constructor.access_modifier == AccessModifier.PUBLIC
        )

    def should_test_property(self, prop: PropertyInfo) -> bool:
        return prop.access_modifier == AccessModifier.PUBLIC and prop.has_getter and prop.has_setter

    def generate_tests(self, result: AnalysisResult) -> list[TestCase]:
        """Derive test cases for every eligible class member in the file."""
        self._logger.debug(f"Generating test cases for {result.file_path}")
        framework = FRAMEWORKS[self.determine_framework(result)]

        cases: list[TestCase] = []
        for cls in result.classes:
            if cls.kind == "interface" or self.is_test_class(cls):
                continue
            plan = self._plan_class(cls, result, framework)
            class_cases: list[TestCase] = []

            for method in cls.methods:
                if self.should_test_method(method, plan.existing_tests):
                    class_cases.extend(self._method_tests(plan, method))
            for constructor in cls.constructors:
                if self.should_test_constructor(cls, constructor):
                    class_cases.extend(self._constructor_tests(plan, constructor))
            for prop in cls.properties:
                if self.should_test_property(prop):
                    class_cases.append(self._property_test(plan, prop))

            self._dedupe_names(class_cases)
            cases.extend(class_cases)

        self._logger.debug(f"Generated {len(cases)} test cases for {result.file_path}")
        return cases

    def _plan_class(
        self, cls: ClassInfo, result: AnalysisResult, framework: FrameworkSettings
    ) -> ClassPlan:
        existing: list[str] = []
        if result.existing_tests is not None:
            existing = result.existing_tests.existing_test_methods.get(cls.name, [])

        plan = ClassPlan(info=cls, framework=framework, existing_tests=existing)
        if not self.config.analysis.generate_mocks:
            return plan

        for dependency in self.class_dependencies(cls, result):
            mock_name = f"_{to_camel_case(dependency.name)}Mock"
            mock = MockPlan(
                dependency=dependency,
                mock_name=mock_name,
                mock_type=dependency.interface_type or dependency.type,
            )
            interface = result.find_class(dependency.type)
            member = None
            if interface is not None:
                member = next(
                    (m for m in interface.methods if not m.name.startswith(("get_", "set_"))),
                    None,
                )
            if member is None:
                call = FALLBACK_MOCK_CALL
                mock.setup.append(
                    f"// {dependency.type} is not defined in this file; adjust the stubbed call"
                )
                mock.setup.append(f"{mock_name}.Setup(x => x.{call});")
            else:
                args = ", ".join(mock_argument(p.type) for p in member.parameters)
                call = f"{member.name}({args})"
                mock.setup.append(
                    f"{mock_name}.Setup(x => x.{call}){returns_clause(member.return_type)};"
                )
            mock.verify.append(f"{mock_name}.Verify(x => x.{call}, Times.Once);")
            plan.mocks.append(mock)
        return plan

    def class_dependencies(self, cls: ClassInfo, result: AnalysisResult) -> list[DependencyInfo]:
        """Mockable dependencies injected through this class's constructors."""
        injected = {(p.name, p.type) for c in cls.constructors for p in c.parameters}
        return [d for d in result.dependencies if d.requires_mock and (d.name, d.type) in injected]

    def _method_tests(self, plan: ClassPlan, method: MethodInfo) -> list[TestCase]:
        happy_type = TestType.STATIC_METHOD if method.is_static else TestType.UNIT
        tests = [
            self._method_case(
                plan, method, "WithValidInput", "ReturnsExpectedResult", happy_type, with_mocks=True
            )
        ]

        inputs = [p for p in method.parameters if not p.is_out]
        if self.config.generation.generate_negative_tests:
            for param in inputs:
                if is_reference_type(param.type) and not param.is_optional:
                    tests.append(
                        self._method_case(
                            plan,
                            method,
                            f"WithNull{to_pascal_case(param.name)}",
                            "ThrowsArgumentNullException",
                            TestType.EXCEPTION,
                            overrides={param.name: "null"},
                        )
                    )
            for param in inputs:
                if is_numeric_type(param.type):
                    tests.append(
                        self._method_case(
                            plan,
                            method,
                            f"WithZero{to_pascal_case(param.name)}",
                            "HandlesEdgeCase",
                            TestType.UNIT,
                            overrides={param.name: zero_literal(param.type)},
                        )
                    )
                elif is_string_type(param.type):
                    tests.append(
                        self._method_case(
                            plan,
                            method,
                            f"WithEmpty{to_pascal_case(param.name)}",
                            "HandlesEmptyString",
                            TestType.UNIT,
                            overrides={param.name: "string.Empty"},
                        )
                    )

        if method.is_async:
            tests.append(
                self._method_case(
                    plan,
                    method,
                    "WhenOperationCompletesSuccessfully",
                    "ReturnsCompletedTask",
                    TestType.ASYNC_METHOD,
                    with_mocks=True,
                )
            )
        return tests

    def _test_name(self, member: str, scenario: str, expected: str) -> str:
        values = {"MethodName": member, "Scenario": scenario, "ExpectedResult": expected}
        convention = self.config.generation.test_naming_convention
        name = _NAMING_TOKENS.sub(lambda m: values[m.group(0)], convention)
        return f"{self.config.generation.test_method_prefix}{name}"

    def _new_case(
        self,
        plan: ClassPlan,
        member: str,
        scenario: str,
        expected: str,
        test_type: TestType,
        is_async: bool = False,
        priority: int = 1,
        negative: bool = False,
    ) -> TestCase:
        tags = [plan.framework.name, test_type.value]
        if negative:
            tags.append("negative")
        if is_async:
            tags.append("async")
        return TestCase(
            test_name=self._test_name(member, scenario, expected),
            target_method=member,
            target_class=plan.info.name,
            scenario=scenario,
            expected_result=expected,
            test_type=test_type,
            test_framework=plan.framework.name,
            is_async=is_async,
            priority=priority,
            tags=tags,
        )

    def _arrange(
        self, params: list[ParameterInfo], overrides: dict[str, str], case: TestCase
    ) -> None:
        for param in params:
            if param.is_out:
                continue
            value = overrides.get(param.name, generate_test_value(param.type))
            case.test_data[param.name] = value
            if value == "null":
                case.arrange_code.append(f"{param.type} {param.name} = null;")
            else:
                case.arrange_code.append(f"var {param.name} = {value};")

    def _method_case(
        self,
        plan: ClassPlan,
        method: MethodInfo,
        scenario: str,
        expected: str,
        test_type: TestType,
        overrides: dict[str, str] | None = None,
        with_mocks: bool = False,
    ) -> TestCase:
        case = self._new_case(
            plan,
            method.name,
            scenario,
            expected,
            test_type,
            is_async=method.is_async,
            negative=bool(overrides),
        )
        self._arrange(method.parameters, overrides or {}, case)

        if with_mocks and not method.is_static:
            for mock in plan.mocks:
                case.mock_setup.extend(mock.setup)
                case.mock_verifications.extend(mock.verify)

        target = plan.info.name if method.is_static else "_sut"
        call = f"{target}.{method.name}({self._arguments(method.parameters)})"
        awaitable = method.is_async and method.return_type != "void"
        returns_value = method.return_type not in NO_RESULT_TYPES

        if test_type == TestType.EXCEPTION:
            exception = extract_exception_type(expected)
            if awaitable:
                case.act_code.append(f"Func<Task> act = async () => await {call};")
                case.assertions.append(f"await act.Should().ThrowAsync<{exception}>();")
            else:
                case.act_code.append(f"Action act = () => {call};")
                case.assertions.append(f"act.Should().Throw<{exception}>();")
        elif returns_value:
            case.act_code.append(f"var result = {'await ' if awaitable else ''}{call};")
            if plan.framework.name == "xunit":
                case.assertions.append("result.Should().NotBeNull();")
            else:
                case.assertions.append("Assert.IsNotNull(result);")
        elif awaitable:
            case.act_code.append(f"Func<Task> act = async () => await {call};")
            case.assertions.append("await act.Should().NotThrowAsync();")
        else:
            case.act_code.append(f"Action act = () => {call};")
            case.assertions.append("act.Should().NotThrow();")
        return case

    def _arguments(self, params: list[ParameterInfo]) -> str:
        args = []
        for param in params:
            if param.is_out:
                args.append(f"out var {param.name}")
            elif param.is_ref:
                args.append(f"ref {param.name}")
            else:
                args.append(param.name)
        return ", ".join(args)

    def _construct(self, cls: ClassInfo, arguments: str) -> str:
        """Expression creating an instance; abstract classes go through Moq."""
        if cls.is_abstract:
            if arguments:
                return f"new Mock<{cls.name}>({arguments}) {{ CallBase = true }}.Object"
            return f"new Mock<{cls.name}> {{ CallBase = true }}.Object"
        return f"new {cls.name}({arguments})"

    def _constructor_tests(self, plan: ClassPlan, constructor: ConstructorInfo) -> list[TestCase]:
        tests = [self._constructor_case(plan, constructor, "WithValidParameters", "CreatesInstance")]
        for param in constructor.parameters:
            if is_reference_type(param.type) and not param.is_optional:
                tests.append(
                    self._constructor_case(
                        plan,
                        constructor,
                        f"WithNull{to_pascal_case(param.name)}",
                        "ThrowsArgumentNullException",
                        overrides={param.name: "null"},
                    )
                )
        return tests

    def _constructor_case(
        self,
        plan: ClassPlan,
        constructor: ConstructorInfo,
        scenario: str,
        expected: str,
        overrides: dict[str, str] | None = None,
    ) -> TestCase:
        case = self._new_case(
            plan, "Constructor", scenario, expected, TestType.CONSTRUCTOR, negative=bool(overrides)
        )
        self._arrange(constructor.parameters, overrides or {}, case)
        creation = self._construct(plan.info, self._arguments(constructor.parameters))

        if "Exception" in expected:
            case.act_code.append(f"Action act = () => {creation};")
            case.assertions.append(f"act.Should().Throw<{extract_exception_type(expected)}>();")
        else:
            case.act_code.append(f"var result = {creation};")
            case.assertions.append("result.Should().NotBeNull();")
        return case

    def _property_test(self, plan: ClassPlan, prop: PropertyInfo) -> TestCase:
        case = self._new_case(
            plan, prop.name, "GetAndSet", "WorkCorrectly", TestType.PROPERTY, priority=2
        )
        value = generate_test_value(prop.type)
        target = plan.info.name if prop.is_static else "_sut"
        case.test_data[prop.name] = value
        case.arrange_code.append(f"var expected{prop.name} = {value};")
        case.act_code.append(f"{target}.{prop.name} = expected{prop.name};")
        case.act_code.append(f"var actual{prop.name} = {target}.{prop.name};")
        case.assertions.append(f"actual{prop.name}.Should().Be(expected{prop.name});")
        return case

    def _dedupe_names(self, cases: list[TestCase]) -> None:
        """Overloads share scenario names; suffix repeats with ``_2``, ``_3`` ..."""
        seen: dict[str, int] = {}
        for case in cases:
            count = seen.get(case.test_name, 0) + 1
            seen[case.test_name] = count
            if count > 1:
                case.test_name = f"{case.test_name}_{count}"

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def template_name(self, cls: ClassInfo) -> str:
        if cls.is_controller:
            return "csharp/controller-test"
        if cls.is_service:
            return "csharp/service-test"
        return "csharp/unit-test"

    def required_usings(
        self, result: AnalysisResult, framework: FrameworkSettings, cases: list[TestCase]
    ) -> list[str]:
        usings = ["System"]
        if result.namespace:
            usings.append(result.namespace)
        usings.append(framework.namespace)
        if any(case.is_async for case in cases):
            usings.append("System.Threading.Tasks")

        mock_framework = self.config.generation.mock_framework
        structure = result.project_structure
        if structure is not None and structure.nuget_info.mocking_frameworks:
            mock_framework = structure.nuget_info.mocking_frameworks[0].name
        usings.append(mock_framework)
        usings.append("FluentAssertions")
        return list(dict.fromkeys(u for u in usings if u))

    def _sut_expression(self, plan: ClassPlan) -> str:
        constructors = [
            c
            for c in plan.info.constructors
            if not c.is_static and c.access_modifier == AccessModifier.PUBLIC
        ]
        if not constructors:
            return self._construct(plan.info, "")
        constructor = max(constructors, key=lambda c: len(c.parameters))

        mocks = {(m.dependency.name, m.dependency.type): m for m in plan.mocks}
        args = []
        for param in constructor.parameters:
            mock = mocks.get((param.name, param.type))
            args.append(f"{mock.mock_name}.Object" if mock else generate_test_value(param.type))
        return self._construct(plan.info, ", ".join(args))

    def build_class_data(
        self, cls: ClassInfo, cases: list[TestCase], result: AnalysisResult
    ) -> dict[str, Any]:
        """Data bag for one rendered test class."""
        framework = FRAMEWORKS[self.determine_framework(result)]
        plan = self._plan_class(cls, result, framework)
        generation = self.config.generation

        tests = []
        for case in cases:
            documentation = ""
            if generation.include_documentation:
                documentation = (
                    f"{case.target_method} {humanize(case.scenario)} "
                    f"{humanize(case.expected_result)}."
                )
            tests.append(
                {
                    "name": case.test_name,
                    "documentation": documentation,
                    "is_async": case.is_async,
                    "arrange": case.arrange_code,
                    "mock_setup": case.mock_setup,
                    "act": case.act_code,
                    "assertions": case.assertions,
                    "verifications": case.mock_verifications,
                }
            )

        return {
            "class_name": cls.name,
            "framework": framework.name,
            "class_attribute": framework.class_attribute,
            "setup_attribute": framework.setup_attribute,
            "test_attribute": framework.test_attribute,
            "dependencies": [{"type": m.mock_type, "mock_name": m.mock_name} for m in plan.mocks],
            "construct_sut": plan.construct_sut,
            "sut_expression": self._sut_expression(plan) if plan.construct_sut else "",
            "include_aaa": generation.include_arrange_act_assert,
            "tests": tests,
        }

    def render_file(self, result: AnalysisResult, cases: list[TestCase]) -> str:
        """Render every class block and wrap them in one compilation unit.

        Raises:
            GenerationError: A test case targets a class missing from the result.
            TemplateError: A template failed to render.
        """
        framework = FRAMEWORKS[self.determine_framework(result)]

        by_class: dict[str, list[TestCase]] = {}
        for case in cases:
            by_class.setdefault(case.target_class, []).append(case)

        blocks = []
        for class_name, class_cases in by_class.items():
            cls = next((c for c in result.classes if c.name == class_name), None)
            if cls is None:
                raise GenerationError(
                    f"Test case targets unknown class {class_name}",
                    file_path=result.file_path,
                )
            data = self.build_class_data(cls, class_cases, result)
            blocks.append(self.templates.render(self.template_name(cls), data))

        content = self.templates.render(
            "csharp/file",
            {
                "source_file": Path(result.file_path).name,
                "usings": self.required_usings(result, framework, cases),
                "test_namespace": f"{result.namespace}.Tests" if result.namespace else "GeneratedTests",
                "blocks": blocks,
            },
        )
        return content.rstrip() + "\n"

    # ------------------------------------------------------------------
    # File writing
    # ------------------------------------------------------------------

    def test_file_name(self, source_file: Path) -> str:
        naming = self.config.output.test_file_naming
        try:
            return naming.format(SourceFileName=source_file.stem, Extension="cs")
        except (KeyError, IndexError):
            self._logger.warning(f"Invalid test file naming template {naming!r}, using default")
            return f"{source_file.stem}Tests.cs"

    def test_file_path(self, source_file: Path, output_dir: Path) -> Path:
        """Mirror the source's location below its project root, else flat."""
        file_name = self.test_file_name(source_file)
        root = find_project_root(source_file)
        if root is None:
            return output_dir / file_name
        relative = source_file.resolve().parent.relative_to(root)
        return output_dir / relative / file_name

    def purge_output_directory(self, output_dir: Path) -> None:
        """Delete everything below output_dir, keeping a copy when backups are on.

        The output directory is owned by the generator: contents from earlier
        runs are not preserved.
        """
        if not output_dir.is_dir():
            return

        if self.config.output.create_backups and any(output_dir.iterdir()):
            backup = output_dir.with_name(f"{output_dir.name}.bak")
            try:
                if backup.exists():
                    shutil.rmtree(backup)
                shutil.copytree(output_dir, backup)
                self._logger.info(f"Backed up {output_dir} to {backup}")
            except OSError as e:
                self._logger.warning(f"Failed to back up {output_dir}: {e}")

        self._logger.info(f"Cleaning up old test folder: {output_dir}")
        for entry in output_dir.iterdir():
            try:
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
            except OSError as e:
                self._logger.warning(f"Failed to remove {entry}: {e}")

    async def generate_test_files(
        self, results: list[AnalysisResult], output_dir: Path
    ) -> list[GeneratedTestFile]:
        """Render and write one test file per source file.

        The output directory is purged once before anything is written.
        Failures for one file are logged and that file is skipped.
        """
        output_dir = Path(output_dir).resolve()
        if not results:
            return []

        existing = (
            {p for p in output_dir.rglob("*") if p.is_file()} if output_dir.is_dir() else set()
        )
        await asyncio.to_thread(self.purge_output_directory, output_dir)

        generated: list[GeneratedTestFile] = []
        for result in results:
            if not self.can_generate(result):
                continue
            source = Path(result.file_path)
            if output_dir in source.resolve().parents:
                self._logger.warning(f"Skipping {source}: it lives in the output directory")
                continue

            try:
                cases = self.generate_tests(result)
                if not cases:
                    continue
                content = self.render_file(result, cases)
                path = self.test_file_path(source, output_dir)
                await asyncio.to_thread(_write_text, path, content)
            except Exception:
                self._logger.exception(f"Error generating test file for {result.file_path}")
                continue

            generated.append(
                GeneratedTestFile(
                    file_path=str(path),
                    source_file_path=result.file_path,
                    content=content,
                    test_framework=self.determine_framework(result),
                    test_cases=cases,
                    is_new_file=path not in existing,
                    requires_compilation=True,
                )
            )
            self._logger.info(f"Generated test file: {path} with {len(cases)} test cases")

        return generated


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
