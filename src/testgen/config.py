"""Configuration models for testgen."""

from __future__ import annotations

import json
import typing
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

from testgen.errors import ConfigError
from testgen.models import ProjectStructure

CONFIG_FILE_NAME = "testgen.config.json"


class ConfigSection(BaseModel):
    """Base for configuration sections, serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProjectConfig(ConfigSection):
    """Project configuration."""

    name: str = Field(default="", description="Project name")
    root_path: str = Field(default="./", description="Project root directory")
    output_path: str = Field(
        default="./GeneratedTests",
        description="Directory that receives generated test files",
    )
    test_frameworks: dict[str, str] = Field(
        default_factory=lambda: {"csharp": "xunit", "typescript": "jest"},
        description="Test framework per language",
    )
    source_directories: list[str] = Field(
        default_factory=list,
        description="Source directories to analyze (empty means the whole root)",
    )


class AnalysisConfig(ConfigSection):
    """Source analysis configuration."""

    include_private_methods: bool = Field(
        default=False,
        description="Generate tests for private methods",
    )
    include_internal_methods: bool = Field(
        default=True,
        description="Generate tests for internal methods",
    )
    generate_mocks: bool = Field(
        default=True,
        description="Emit mock setup and verification for dependencies",
    )
    analyze_dependencies: bool = Field(
        default=True,
        description="Detect constructor-injected dependencies",
    )
    max_depth: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum dependency analysis depth",
    )
    exclude_patterns: list[str] = Field(
        default_factory=lambda: [
            "*.designer.cs",
            "*.generated.cs",
            "**/bin/**",
            "**/obj/**",
        ],
        description="Glob patterns excluded from discovery",
    )


class GenerationConfig(ConfigSection):
    """Test generation configuration."""

    test_naming_convention: str = Field(
        default="MethodName_Scenario_ExpectedResult",
        description="Naming convention for generated tests",
    )
    include_arrange_act_assert: bool = Field(
        default=True,
        description="Emit Arrange/Act/Assert section comments",
    )
    generate_test_data: bool = Field(default=True, description="Generate literal test data")
    generate_negative_tests: bool = Field(
        default=True,
        description="Generate null, empty and edge-case tests",
    )
    include_documentation: bool = Field(
        default=True,
        description="Copy source documentation into test comments",
    )
    test_method_prefix: str = Field(default="", description="Prefix for test method names")
    mock_framework: str = Field(default="Moq", description="Mocking framework")


class FileTypeConfig(ConfigSection):
    """Per-file-type settings."""

    enabled: bool = Field(default=True, description="Process this file type")
    extensions: list[str] = Field(default_factory=list, description="File extensions")
    exclude_patterns: list[str] = Field(
        default_factory=list,
        description="Glob patterns excluded for this type",
    )
    test_settings: dict[str, Any] = Field(
        default_factory=dict,
        description="Type-specific test settings",
    )


class OutputConfig(ConfigSection):
    """Output configuration."""

    overwrite_existing: bool = Field(default=False, description="Overwrite existing test files")
    create_backups: bool = Field(default=True, description="Back up files before overwriting")
    generate_reports: bool = Field(default=True, description="Write a generation report")
    report_formats: list[str] = Field(
        default_factory=lambda: ["json"],
        description="Report formats",
    )
    group_tests_by_type: bool = Field(default=True, description="Group tests by type")
    test_file_naming: str = Field(
        default="{SourceFileName}Tests.{Extension}",
        description="Test file naming template",
    )


class LoggingConfig(ConfigSection):
    """Logging configuration."""

    level: str = Field(default="Information", description="Minimum log level")
    log_to_file: bool = Field(default=False, description="Also write logs to a file")
    log_file_path: str = Field(default="./logs/testgen.log", description="Log file path")
    include_timestamp: bool = Field(default=True, description="Include timestamps")
    include_stack_trace: bool = Field(default=False, description="Include stack traces")


class PerformanceConfig(ConfigSection):
    """Performance configuration."""

    max_concurrency: int = Field(
        default=4,
        description="Maximum files analyzed at once (capped at CPU count)",
    )
    enable_caching: bool = Field(default=True, description="Enable analysis caching")
    cache_directory: str = Field(default="./.testgen-cache", description="Cache directory")
    timeout_seconds: int = Field(default=300, description="Overall run timeout in seconds")


class ValidationConfig(ConfigSection):
    """Validation of generated output."""

    compile_generated_tests: bool = Field(
        default=True,
        description="Request compilation of generated tests",
    )
    run_basic_validation: bool = Field(
        default=True,
        description="Check generated files for basic structure",
    )
    check_code_style: bool = Field(default=True, description="Check code style")
    generate_coverage_report: bool = Field(default=False, description="Produce a coverage report")


@dataclass
class ConfigValidationResult:
    """Outcome of TestGenConfig.validate(); errors block, warnings do not."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {"is_valid": self.is_valid, "errors": self.errors, "warnings": self.warnings}


class TestGenConfig(BaseSettings):
    """Main testgen configuration."""

    __test__ = False

    model_config = SettingsConfigDict(
        env_prefix="TESTGEN_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    # Root fields keep their names for env lookup and only serialize as camelCase
    file_types: dict[str, FileTypeConfig] = Field(
        default_factory=dict, serialization_alias="fileTypes"
    )
    templates: dict[str, dict[str, str]] = Field(
        default_factory=dict,
        description="Custom template files per language: name -> path",
    )
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    performance: PerformanceConfig = Field(default_factory=PerformanceConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)

    @classmethod
    def load(cls, config_path: Path) -> TestGenConfig:
        """Load configuration from a JSON file.

        Comments and trailing commas are allowed, and keys match
        case-insensitively in camelCase, PascalCase or snake_case.

        Raises:
            ConfigError: The file is missing or is not a valid configuration.
        """
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}", path=str(path))

        try:
            raw = json.loads(strip_json_comments(path.read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read configuration {path}: {e}", path=str(path)) from e
        if not isinstance(raw, dict):
            raise ConfigError(f"Configuration root must be an object: {path}", path=str(path))

        try:
            return cls(**_normalize_keys(raw, cls))
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration {path}: {e}", path=str(path)) from e

    def save(self, config_path: Path) -> None:
        """Write configuration as indented camelCase JSON."""
        path = Path(config_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump(by_alias=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")

    @classmethod
    def create_default(
        cls, project_path: Path, structure: ProjectStructure | None = None
    ) -> TestGenConfig:
        """Build a configuration for a project, using detected frameworks."""
        config = cls()
        config.project.name = structure.project_name if structure else Path(project_path).name
        config.project.root_path = str(project_path)
        config.project.output_path = str(Path(project_path) / "GeneratedTests")

        if structure is not None:
            nuget = structure.nuget_info
            if nuget.test_frameworks:
                config.project.test_frameworks["csharp"] = nuget.test_frameworks[0].type.value
            if nuget.mocking_frameworks:
                config.generation.mock_framework = nuget.mocking_frameworks[0].name

        config.file_types = default_file_types()
        return config

    def validate_config(self) -> ConfigValidationResult:
        """Check the configuration for blocking errors and warnings."""
        result = ConfigValidationResult()

        if not self.project.name.strip():
            result.errors.append("Project name is required")
        if not self.project.root_path.strip():
            result.errors.append("Project root path is required")
        elif not Path(self.project.root_path).exists():
            result.errors.append(f"Project root path does not exist: {self.project.root_path}")
        if not self.project.output_path.strip():
            result.errors.append("Output path is required")

        if self.file_types and not any(ft.enabled for ft in self.file_types.values()):
            result.warnings.append("No file types are enabled for processing")
        elif not self.file_types:
            result.warnings.append("No file types are configured")

        if self.performance.max_concurrency <= 0:
            result.errors.append("Max concurrency must be greater than 0")
        if self.performance.timeout_seconds <= 0:
            result.errors.append("Timeout must be greater than 0")

        return result

    def enabled_file_types(self) -> list[str]:
        """Extensions of every enabled file type, or ``["csharp"]`` when none is configured."""
        if not self.file_types:
            return ["csharp"]
        extensions: list[str] = []
        for file_type in self.file_types.values():
            if file_type.enabled:
                extensions.extend(file_type.extensions)
        return extensions

    def file_type_exclude_patterns(self) -> list[str]:
        patterns: list[str] = []
        for file_type in self.file_types.values():
            if file_type.enabled:
                patterns.extend(file_type.exclude_patterns)
        return patterns


def default_file_types() -> dict[str, FileTypeConfig]:
    return {
        "cs": FileTypeConfig(
            enabled=True,
            extensions=[".cs"],
            exclude_patterns=[
                "*.Designer.cs",
                "*.g.cs",
                "*.g.i.cs",
                "AssemblyInfo.cs",
                "GlobalAssemblyInfo.cs",
            ],
        ),
        "ts": FileTypeConfig(
            enabled=False,
            extensions=[".ts", ".tsx"],
            exclude_patterns=["*.d.ts", "*.spec.ts", "*.test.ts"],
        ),
        "html": FileTypeConfig(enabled=False, extensions=[".html", ".cshtml", ".razor"]),
        "less": FileTypeConfig(enabled=False, extensions=[".less"]),
        "css": FileTypeConfig(enabled=False, extensions=[".css", ".scss", ".sass"]),
    }


def strip_json_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments and trailing commas outside strings."""
    out: list[str] = []
    i = 0
    in_string = False
    length = len(text)
    while i < length:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < length:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
        elif ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = length if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = length if end == -1 else end + 2
        elif ch == ",":
            j = i + 1
            while j < length and text[j] in " \t\r\n":
                j += 1
            if j < length and text[j] in "}]":
                i += 1  # trailing comma
            else:
                out.append(ch)
                i += 1
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def _model_type(annotation: Any) -> type[BaseModel] | None:
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    return None


def _normalize_keys(data: dict[str, Any], model: type[BaseModel]) -> dict[str, Any]:
    """Match keys to field names ignoring case and underscores, recursing into sections.

    Keys inside plain dict fields (framework names, file-type names) are data
    and are kept as written.
    """
    lookup = {name.replace("_", "").lower(): name for name in model.model_fields}
    normalized: dict[str, Any] = {}
    for key, value in data.items():
        name = lookup.get(key.replace("_", "").lower())
        if name is None:
            continue
        annotation = model.model_fields[name].annotation
        nested = _model_type(annotation)
        if nested is not None and isinstance(value, dict):
            value = _normalize_keys(value, nested)
        elif typing.get_origin(annotation) is dict and isinstance(value, dict):
            args = typing.get_args(annotation)
            value_model = _model_type(args[1]) if len(args) == 2 else None
            if value_model is not None:
                value = {
                    k: _normalize_keys(v, value_model) if isinstance(v, dict) else v
                    for k, v in value.items()
                }
        normalized[name] = value
    return normalized


def get_default_config_json(project_path: Path, structure: ProjectStructure | None = None) -> str:
    """Default configuration document for ``testgen init``."""
    config = TestGenConfig.create_default(project_path, structure)
    return json.dumps(config.model_dump(by_alias=True), indent=2) + "\n"
