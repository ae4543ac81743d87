"""Data models shared by the analyzer, scanner, generators and engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any


class AccessModifier(str, Enum):
    PRIVATE = "private"
    PROTECTED = "protected"
    INTERNAL = "internal"
    PUBLIC = "public"
    PROTECTED_INTERNAL = "protected internal"
    PRIVATE_PROTECTED = "private protected"


class DependencyLifetime(str, Enum):
    TRANSIENT = "transient"
    SCOPED = "scoped"
    SINGLETON = "singleton"
    UNKNOWN = "unknown"


class TestType(str, Enum):
    """Kind of scenario a generated test exercises."""

    __test__ = False

    UNIT = "unit"
    INTEGRATION = "integration"
    CONTROLLER = "controller"
    SERVICE = "service"
    REPOSITORY = "repository"
    MODEL = "model"
    PROPERTY = "property"
    CONSTRUCTOR = "constructor"
    EXCEPTION = "exception"
    ASYNC_METHOD = "async_method"
    STATIC_METHOD = "static_method"
    EXTENSION_METHOD = "extension_method"


class FolderType(str, Enum):
    CONTROLLERS = "controllers"
    SERVICES = "services"
    MODELS = "models"
    REPOSITORIES = "repositories"
    VIEW_MODELS = "view_models"
    HELPERS = "helpers"
    EXTENSIONS = "extensions"
    CONFIGURATION = "configuration"
    DATA = "data"
    BUSINESS = "business"
    WEB = "web"
    API = "api"
    OTHER = "other"


class TestingPattern(str, Enum):
    __test__ = False

    UNIT_TESTS = "unit_tests"
    INTEGRATION_TESTS = "integration_tests"
    FUNCTIONAL_TESTS = "functional_tests"
    ACCEPTANCE_TESTS = "acceptance_tests"
    PERFORMANCE_TESTS = "performance_tests"


class PackageType(str, Enum):
    PRODUCTION_DEPENDENCY = "production_dependency"
    TEST_FRAMEWORK = "test_framework"
    MOCKING_FRAMEWORK = "mocking_framework"
    ASSERTION_LIBRARY = "assertion_library"


class TestFrameworkType(str, Enum):
    __test__ = False

    XUNIT = "xunit"
    NUNIT = "nunit"
    MSTEST = "mstest"
    UNKNOWN = "unknown"


class MockingFrameworkType(str, Enum):
    MOQ = "moq"
    NSUBSTITUTE = "nsubstitute"
    FAKEITEASY = "fakeiteasy"
    UNKNOWN = "unknown"


class AssertionLibraryType(str, Enum):
    FLUENT_ASSERTIONS = "fluentassertions"
    SHOULDLY = "shouldly"
    NUNIT = "nunit"
    XUNIT = "xunit"
    MSTEST = "mstest"
    UNKNOWN = "unknown"


# =============================================================================
# Source analysis
# =============================================================================


@dataclass
class AttributeInfo:
    """A C# attribute such as ``[HttpGet("{id}")]``."""

    name: str
    full_name: str = ""
    arguments: list[str] = field(default_factory=list)
    named_arguments: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "full_name": self.full_name,
            "arguments": self.arguments,
            "named_arguments": self.named_arguments,
        }


@dataclass
class ParameterInfo:
    """A method or constructor parameter."""

    name: str
    type: str = "object"
    is_optional: bool = False
    default_value: str | None = None
    is_params: bool = False
    is_out: bool = False
    is_ref: bool = False
    attributes: list[AttributeInfo] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "is_optional": self.is_optional,
            "default_value": self.default_value,
            "is_params": self.is_params,
            "is_out": self.is_out,
            "is_ref": self.is_ref,
            "attributes": [a.to_dict() for a in self.attributes],
        }


@dataclass
class MethodInfo:
    """A method declared directly in a class body."""

    name: str
    return_type: str = "void"
    access_modifier: AccessModifier = AccessModifier.PRIVATE
    is_async: bool = False
    is_static: bool = False
    is_virtual: bool = False
    is_override: bool = False
    is_abstract: bool = False
    parameters: list[ParameterInfo] = field(default_factory=list)
    attributes: list[AttributeInfo] = field(default_factory=list)
    documentation: str | None = None
    thrown_exceptions: list[str] = field(default_factory=list)
    cyclomatic_complexity: int = 1
    start_line: int = 0
    end_line: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "return_type": self.return_type,
            "access_modifier": self.access_modifier.value,
            "is_async": self.is_async,
            "is_static": self.is_static,
            "is_virtual": self.is_virtual,
            "is_override": self.is_override,
            "is_abstract": self.is_abstract,
            "parameters": [p.to_dict() for p in self.parameters],
            "attributes": [a.to_dict() for a in self.attributes],
            "documentation": self.documentation,
            "thrown_exceptions": self.thrown_exceptions,
            "cyclomatic_complexity": self.cyclomatic_complexity,
            "lines": [self.start_line, self.end_line],
        }


@dataclass
class PropertyInfo:
    """A property declared directly in a class body."""

    name: str
    type: str = "object"
    access_modifier: AccessModifier = AccessModifier.PRIVATE
    has_getter: bool = False
    has_setter: bool = False
    is_auto_property: bool = False
    is_static: bool = False
    is_virtual: bool = False
    attributes: list[AttributeInfo] = field(default_factory=list)
    default_value: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "access_modifier": self.access_modifier.value,
            "has_getter": self.has_getter,
            "has_setter": self.has_setter,
            "is_auto_property": self.is_auto_property,
            "is_static": self.is_static,
            "is_virtual": self.is_virtual,
            "attributes": [a.to_dict() for a in self.attributes],
            "default_value": self.default_value,
        }


@dataclass
class ConstructorInfo:
    """An instance or static constructor."""

    name: str
    access_modifier: AccessModifier = AccessModifier.PRIVATE
    parameters: list[ParameterInfo] = field(default_factory=list)
    attributes: list[AttributeInfo] = field(default_factory=list)
    calls_base: bool = False
    calls_this: bool = False
    is_static: bool = False
    is_primary: bool = False  # C# 12 primary constructor
    documentation: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "access_modifier": self.access_modifier.value,
            "parameters": [p.to_dict() for p in self.parameters],
            "attributes": [a.to_dict() for a in self.attributes],
            "calls_base": self.calls_base,
            "calls_this": self.calls_this,
            "is_static": self.is_static,
            "is_primary": self.is_primary,
            "documentation": self.documentation,
        }


@dataclass
class ClassInfo:
    """A class and the members declared directly in its body."""

    name: str
    full_name: str = ""
    namespace: str = ""
    kind: str = "class"  # class, struct, record or interface
    access_modifier: AccessModifier = AccessModifier.PRIVATE
    is_abstract: bool = False
    is_sealed: bool = False
    is_static: bool = False
    is_controller: bool = False
    is_service: bool = False
    is_repository: bool = False
    base_types: list[str] = field(default_factory=list)
    interfaces: list[str] = field(default_factory=list)
    attributes: list[AttributeInfo] = field(default_factory=list)
    methods: list[MethodInfo] = field(default_factory=list)
    properties: list[PropertyInfo] = field(default_factory=list)
    constructors: list[ConstructorInfo] = field(default_factory=list)
    documentation: str | None = None
    start_line: int = 0
    end_line: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "full_name": self.full_name,
            "namespace": self.namespace,
            "kind": self.kind,
            "access_modifier": self.access_modifier.value,
            "is_abstract": self.is_abstract,
            "is_sealed": self.is_sealed,
            "is_static": self.is_static,
            "is_controller": self.is_controller,
            "is_service": self.is_service,
            "is_repository": self.is_repository,
            "base_types": self.base_types,
            "interfaces": self.interfaces,
            "attributes": [a.to_dict() for a in self.attributes],
            "methods": [m.to_dict() for m in self.methods],
            "properties": [p.to_dict() for p in self.properties],
            "constructors": [c.to_dict() for c in self.constructors],
            "documentation": self.documentation,
            "lines": [self.start_line, self.end_line],
        }


@dataclass
class DependencyInfo:
    """A constructor-injected collaborator that generated tests should mock."""

    name: str
    type: str
    interface_type: str = ""
    is_injected: bool = True
    lifetime: DependencyLifetime = DependencyLifetime.UNKNOWN
    requires_mock: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "interface_type": self.interface_type,
            "is_injected": self.is_injected,
            "lifetime": self.lifetime.value,
            "requires_mock": self.requires_mock,
        }


@dataclass
class AnalysisResult:
    """Normalized structural summary of one source file.

    ``methods`` and ``properties`` flatten the members of every class for
    convenience. ``project_structure`` and ``existing_tests`` are read-only
    context attached by the engine after analysis.
    """

    file_path: str
    file_type: str
    namespace: str = ""
    classes: list[ClassInfo] = field(default_factory=list)
    methods: list[MethodInfo] = field(default_factory=list)
    properties: list[PropertyInfo] = field(default_factory=list)
    dependencies: list[DependencyInfo] = field(default_factory=list)
    usings: list[str] = field(default_factory=list)
    project_structure: ProjectStructure | None = None
    existing_tests: ExistingTestInfo | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def find_class(self, name: str) -> ClassInfo | None:
        """Look up a class by simple or fully-qualified name."""
        for cls in self.classes:
            if cls.name == name or cls.full_name == name:
                return cls
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_path": self.file_path,
            "file_type": self.file_type,
            "namespace": self.namespace,
            "classes": [c.to_dict() for c in self.classes],
            "dependencies": [d.to_dict() for d in self.dependencies],
            "usings": self.usings,
            "metadata": self.metadata,
        }


# =============================================================================
# Project structure
# =============================================================================


@dataclass
class ProjectReference:
    name: str
    path: str
    project_type: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "path": self.path, "project_type": self.project_type}


@dataclass
class PackageReference:
    name: str
    version: str = ""
    package_type: PackageType = PackageType.PRODUCTION_DEPENDENCY
    is_test_package: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "package_type": self.package_type.value,
            "is_test_package": self.is_test_package,
        }


@dataclass
class SourceFolder:
    """A directory containing source files, with its classified role."""

    name: str
    path: str
    folder_type: FolderType = FolderType.OTHER
    source_files: list[str] = field(default_factory=list)
    subfolders: list[SourceFolder] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "folder_type": self.folder_type.value,
            "source_files": self.source_files,
            "subfolders": [s.to_dict() for s in self.subfolders],
        }


@dataclass
class TestFolder:
    __test__ = False

    name: str
    path: str
    testing_pattern: TestingPattern = TestingPattern.UNIT_TESTS
    test_files: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "testing_pattern": self.testing_pattern.value,
            "test_files": self.test_files,
        }


@dataclass
class TestFrameworkInfo:
    __test__ = False

    name: str
    version: str = ""
    type: TestFrameworkType = TestFrameworkType.UNKNOWN
    attributes: list[str] = field(default_factory=list)
    assert_methods: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "type": self.type.value,
            "attributes": self.attributes,
            "assert_methods": self.assert_methods,
        }


@dataclass
class MockingFrameworkInfo:
    name: str
    version: str = ""
    type: MockingFrameworkType = MockingFrameworkType.UNKNOWN
    setup_methods: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "type": self.type.value,
            "setup_methods": self.setup_methods,
        }


@dataclass
class AssertionLibraryInfo:
    name: str
    version: str = ""
    type: AssertionLibraryType = AssertionLibraryType.UNKNOWN
    assertion_methods: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "type": self.type.value,
            "assertion_methods": self.assertion_methods,
        }


@dataclass
class NuGetInfo:
    """Test, mocking and assertion frameworks detected from package references."""

    test_frameworks: list[TestFrameworkInfo] = field(default_factory=list)
    mocking_frameworks: list[MockingFrameworkInfo] = field(default_factory=list)
    assertion_libraries: list[AssertionLibraryInfo] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "test_frameworks": [t.to_dict() for t in self.test_frameworks],
            "mocking_frameworks": [m.to_dict() for m in self.mocking_frameworks],
            "assertion_libraries": [a.to_dict() for a in self.assertion_libraries],
        }


@dataclass
class BuildInfo:
    configuration: str = "Debug"
    platform: str = "AnyCPU"
    output_path: str = ""
    defines: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "configuration": self.configuration,
            "platform": self.platform,
            "output_path": self.output_path,
            "defines": self.defines,
        }


@dataclass
class ProjectStructure:
    """Build and layout metadata for a project root. Read-only once built."""

    root_path: str
    project_name: str = ""
    project_type: str = ""
    target_framework: str = ""
    references: list[ProjectReference] = field(default_factory=list)
    packages: list[PackageReference] = field(default_factory=list)
    source_folders: list[SourceFolder] = field(default_factory=list)
    test_folders: list[TestFolder] = field(default_factory=list)
    project_properties: dict[str, str] = field(default_factory=dict)
    configuration_files: list[str] = field(default_factory=list)
    nuget_info: NuGetInfo = field(default_factory=NuGetInfo)
    build_info: BuildInfo = field(default_factory=BuildInfo)
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "root_path": self.root_path,
            "project_name": self.project_name,
            "project_type": self.project_type,
            "target_framework": self.target_framework,
            "references": [r.to_dict() for r in self.references],
            "packages": [p.to_dict() for p in self.packages],
            "source_folders": [s.to_dict() for s in self.source_folders],
            "test_folders": [t.to_dict() for t in self.test_folders],
            "project_properties": self.project_properties,
            "configuration_files": self.configuration_files,
            "nuget_info": self.nuget_info.to_dict(),
            "build_info": self.build_info.to_dict(),
            "metadata": self.metadata,
        }


@dataclass
class TestClassInfo:
    """A test class found in an existing test file."""

    __test__ = False

    name: str
    file_path: str
    tested_class: str = ""
    test_methods: list[str] = field(default_factory=list)
    mocked_dependencies: list[str] = field(default_factory=list)
    test_framework: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "file_path": self.file_path,
            "tested_class": self.tested_class,
            "test_methods": self.test_methods,
            "mocked_dependencies": self.mocked_dependencies,
            "test_framework": self.test_framework,
        }


@dataclass
class ExistingTestInfo:
    """Tests already present in the project.

    ``existing_test_methods`` maps a tested class name to the test method
    names found for it and is used to avoid generating duplicates.
    """

    test_files: list[str] = field(default_factory=list)
    test_classes: list[TestClassInfo] = field(default_factory=list)
    test_framework: str = ""
    test_libraries: list[str] = field(default_factory=list)
    existing_test_methods: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "test_files": self.test_files,
            "test_classes": [t.to_dict() for t in self.test_classes],
            "test_framework": self.test_framework,
            "test_libraries": self.test_libraries,
            "existing_test_methods": self.existing_test_methods,
        }


# =============================================================================
# Generation
# =============================================================================


@dataclass
class TestCase:
    """One generated test, named ``{Method}_{Scenario}_{ExpectedResult}``."""

    __test__ = False

    test_name: str
    target_method: str
    target_class: str
    scenario: str
    expected_result: str
    test_type: TestType = TestType.UNIT
    test_framework: str = "xunit"
    arrange_code: list[str] = field(default_factory=list)
    mock_setup: list[str] = field(default_factory=list)
    act_code: list[str] = field(default_factory=list)
    assertions: list[str] = field(default_factory=list)
    mock_verifications: list[str] = field(default_factory=list)
    test_data: dict[str, Any] = field(default_factory=dict)
    is_async: bool = False
    priority: int = 1
    tags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "test_name": self.test_name,
            "target_method": self.target_method,
            "target_class": self.target_class,
            "scenario": self.scenario,
            "expected_result": self.expected_result,
            "test_type": self.test_type.value,
            "test_framework": self.test_framework,
            "arrange_code": self.arrange_code,
            "mock_setup": self.mock_setup,
            "act_code": self.act_code,
            "assertions": self.assertions,
            "mock_verifications": self.mock_verifications,
            "test_data": self.test_data,
            "is_async": self.is_async,
            "priority": self.priority,
            "tags": self.tags,
        }


@dataclass
class GeneratedTestFile:
    file_path: str
    source_file_path: str
    content: str
    test_framework: str = "xunit"
    test_cases: list[TestCase] = field(default_factory=list)
    is_new_file: bool = True
    requires_compilation: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "file_path": self.file_path,
            "source_file_path": self.source_file_path,
            "test_framework": self.test_framework,
            "test_cases": len(self.test_cases),
            "is_new_file": self.is_new_file,
            "requires_compilation": self.requires_compilation,
        }


@dataclass
class GenerationStatistics:
    files_analyzed: int = 0
    test_cases_generated: int = 0
    test_methods_generated: int = 0
    coverage_percentage: float = 0.0
    test_files_created: int = 0
    test_files_updated: int = 0
    classes_covered: int = 0
    methods_covered: int = 0
    phase_timings: dict[str, float] = field(default_factory=dict)
    existing_test_files: int = 0
    existing_test_methods: int = 0
    dependencies_detected: int = 0
    mocks_generated: int = 0
    assertions_generated: int = 0
    files_skipped: int = 0
    warnings_count: int = 0
    file_type_breakdown: dict[str, int] = field(default_factory=dict)
    test_framework_breakdown: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "files_analyzed": self.files_analyzed,
            "test_cases_generated": self.test_cases_generated,
            "test_methods_generated": self.test_methods_generated,
            "coverage_percentage": round(self.coverage_percentage, 2),
            "test_files_created": self.test_files_created,
            "test_files_updated": self.test_files_updated,
            "classes_covered": self.classes_covered,
            "methods_covered": self.methods_covered,
            "phase_timings": {k: round(v, 4) for k, v in self.phase_timings.items()},
            "existing_test_files": self.existing_test_files,
            "existing_test_methods": self.existing_test_methods,
            "dependencies_detected": self.dependencies_detected,
            "mocks_generated": self.mocks_generated,
            "assertions_generated": self.assertions_generated,
            "files_skipped": self.files_skipped,
            "warnings_count": self.warnings_count,
            "file_type_breakdown": self.file_type_breakdown,
            "test_framework_breakdown": self.test_framework_breakdown,
        }


@dataclass
class GenerationResult:
    """Aggregate outcome of one engine run."""

    success: bool = False
    test_cases: list[TestCase] = field(default_factory=list)
    generated_files: list[GeneratedTestFile] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    statistics: GenerationStatistics = field(default_factory=GenerationStatistics)
    duration: float = 0.0
    started_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "test_cases": [t.to_dict() for t in self.test_cases],
            "generated_files": [f.to_dict() for f in self.generated_files],
            "errors": self.errors,
            "warnings": self.warnings,
            "statistics": self.statistics.to_dict(),
            "duration": round(self.duration, 4),
            "started_at": self.started_at.isoformat() if self.started_at else None,
        }


@dataclass
class GenerationRequest:
    """Inputs for one engine run."""

    project_path: Path
    output_path: Path
    configuration: Any = None  # TestGenConfig; typed loosely to avoid an import cycle
    file_types: list[str] = field(default_factory=lambda: ["csharp"])
    files_to_analyze: list[Path] = field(default_factory=list)
    analyze_existing_tests: bool = True
    overwrite_existing: bool = False
    create_backups: bool = True
    validate_generated: bool = True
    exclude_patterns: list[str] = field(default_factory=list)
    custom_templates: dict[str, str] = field(default_factory=dict)
