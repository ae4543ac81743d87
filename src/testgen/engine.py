"""Generation engine - runs the six phases of a test generation.

ProjectStructureAnalysis -> ExistingTestsAnalysis -> FileDiscovery ->
SourceAnalysis -> TestGeneration -> Validation. Only source analysis fans
out; every other phase runs sequentially. The engine never raises: any
failure ends up in the returned GenerationResult.
"""

from __future__ import annotations

import asyncio
import os
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from testgen.config import TestGenConfig
from testgen.errors import GenerationCancelledError
from testgen.generators import CSharpTestGenerator, TestGenerator
from testgen.heuristics import is_test_class_name
from testgen.logging import get_logger
from testgen.models import (
    AccessModifier,
    AnalysisResult,
    ExistingTestInfo,
    GeneratedTestFile,
    GenerationRequest,
    GenerationResult,
    GenerationStatistics,
    ProjectStructure,
    TestType,
)
from testgen.parser import CodeAnalyzer, CSharpAnalyzer
from testgen.scanner import analyze_existing_tests, analyze_project_structure, discover_files
from testgen.templates import TemplateEngine

ProgressCallback = Callable[[str], None]

# Test types that exercise a method rather than a constructor or property
_METHOD_TEST_TYPES = frozenset(
    {TestType.UNIT, TestType.EXCEPTION, TestType.ASYNC_METHOD, TestType.STATIC_METHOD}
)


def _is_within(path: Path, directory: Path) -> bool:
    return directory == path or directory in path.parents


def _backup_path(output_path: Path) -> Path:
    return output_path.with_name(f"{output_path.name}.bak")


def _without_generated(existing: ExistingTestInfo, output_path: Path) -> ExistingTestInfo:
    """Drop tests written by earlier runs so they do not suppress regeneration."""
    generated_dirs = (output_path, _backup_path(output_path))

    def is_generated(file_path: str) -> bool:
        path = Path(file_path).resolve()
        return any(_is_within(path, directory) for directory in generated_dirs)

    kept = ExistingTestInfo(
        test_files=[f for f in existing.test_files if not is_generated(f)],
        test_classes=[c for c in existing.test_classes if not is_generated(c.file_path)],
        test_framework=existing.test_framework,
        test_libraries=existing.test_libraries,
    )
    for test_class in kept.test_classes:
        methods = kept.existing_test_methods.setdefault(test_class.tested_class, [])
        methods.extend(m for m in test_class.test_methods if m not in methods)
    return kept


class TestGeneratorEngine:
    """Coordinates scanners, analyzers and generators for one project.

    Analyzers and generators form a capability registry: each file goes to
    the first analyzer whose ``can_analyze`` accepts it, and each analysis
    result to the first generator whose ``can_generate`` accepts it.
    """

    __test__ = False

    def __init__(
        self,
        config: TestGenConfig | None = None,
        analyzers: list[CodeAnalyzer] | None = None,
        generators: list[TestGenerator] | None = None,
        template_engine: TemplateEngine | None = None,
    ) -> None:
        self.config = config or TestGenConfig()
        self.templates = template_engine or TemplateEngine()
        self.analyzers: list[CodeAnalyzer] = (
            analyzers if analyzers is not None else [CSharpAnalyzer()]
        )
        # Without explicit generators the built-in one is rebuilt per run from
        # the request configuration
        self._builtin_generators = generators is None
        self.generators: list[TestGenerator] = (
            generators
            if generators is not None
            else [CSharpTestGenerator(self.config, self.templates)]
        )
        self._logger = get_logger()

    async def generate(
        self,
        request: GenerationRequest,
        progress: ProgressCallback | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> GenerationResult:
        """Run a complete generation.

        Args:
            request: What to analyze and where to write
            progress: Optional callback receiving one message per phase
            cancel_event: Set it to stop the run at the next check point

        Returns:
            GenerationResult; ``success`` is False on cancellation or failure
        """
        started = time.perf_counter()
        result = GenerationResult(started_at=datetime.now())
        if request.configuration is None:
            request.configuration = self.config
        timeout = request.configuration.performance.timeout_seconds

        try:
            await asyncio.wait_for(
                self._run(request, result, progress, cancel_event),
                timeout=timeout if timeout > 0 else None,
            )
            result.success = True
        except GenerationCancelledError as e:
            self._logger.warning(e.message)
            result.success = False
            result.errors.append(e.message)
        except asyncio.TimeoutError:
            self._logger.error(f"Test generation timed out after {timeout}s")
            result.success = False
            result.errors.append(f"Test generation timed out after {timeout}s")
        except Exception as e:
            self._logger.exception("Error occurred during test generation")
            result.success = False
            result.errors.append(f"Test generation failed: {e}")
        finally:
            result.duration = time.perf_counter() - started
            result.statistics.warnings_count = len(result.warnings)

        return result

    async def _run(
        self,
        request: GenerationRequest,
        result: GenerationResult,
        progress: ProgressCallback | None,
        cancel_event: asyncio.Event | None,
    ) -> None:
        config: TestGenConfig = request.configuration
        stats = result.statistics
        project_path = Path(request.project_path).resolve()
        output_path = Path(request.output_path).resolve()
        self._logger.debug(f"Starting test generation for project: {project_path}")

        config.output.overwrite_existing = request.overwrite_existing
        config.output.create_backups = request.create_backups
        self._register_templates(request, config, project_path)

        with self._phase("ProjectStructureAnalysis", "Analyzing project structure...", stats, progress):
            structure = await asyncio.to_thread(analyze_project_structure, project_path)
            if structure.project_name:
                config.project.name = structure.project_name
        self._check_cancelled(cancel_event)

        existing: ExistingTestInfo | None = None
        if request.analyze_existing_tests:
            with self._phase("ExistingTestsAnalysis", "Analyzing existing tests...", stats, progress):
                existing = await asyncio.to_thread(analyze_existing_tests, project_path)
                existing = _without_generated(existing, output_path)
                stats.existing_test_files = len(existing.test_files)
                stats.existing_test_methods = sum(
                    len(methods) for methods in existing.existing_test_methods.values()
                )
            self._check_cancelled(cancel_event)

        with self._phase("FileDiscovery", "Discovering files to analyze...", stats, progress):
            files = await self._discover(request, config, project_path, output_path)
        self._check_cancelled(cancel_event)

        with self._phase("SourceAnalysis", "Analyzing source files...", stats, progress):
            analyses = await self._analyze_files(
                files, config, structure, existing, result, cancel_event
            )
        self._check_cancelled(cancel_event)

        with self._phase("TestGeneration", "Generating test cases...", stats, progress):
            generated = await self._generate_files(
                self._generators_for(config), analyses, output_path, result, cancel_event
            )

        if request.validate_generated:
            with self._phase("Validation", "Validating generated tests...", stats, progress):
                self._validate(generated, result)

        result.generated_files = generated
        result.test_cases = [case for file in generated for case in file.test_cases]
        self._fill_statistics(stats, analyses, generated, result)

        self._logger.debug(
            f"Test generation completed: {stats.test_cases_generated} test cases "
            f"across {len(generated)} files"
        )

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    async def _discover(
        self,
        request: GenerationRequest,
        config: TestGenConfig,
        project_path: Path,
        output_path: Path,
    ) -> list[Path]:
        if request.files_to_analyze:
            return [Path(f).resolve() for f in request.files_to_analyze]

        file_types = request.file_types or config.enabled_file_types()
        exclude_patterns = [
            *config.analysis.exclude_patterns,
            *config.file_type_exclude_patterns(),
            *request.exclude_patterns,
        ]
        files = await asyncio.to_thread(discover_files, project_path, file_types, exclude_patterns)

        # Earlier output and its backup must not be fed back in as sources
        backup_path = _backup_path(output_path)
        return [
            f
            for f in files
            if not _is_within(f.resolve(), output_path) and not _is_within(f.resolve(), backup_path)
        ]

    async def _analyze_files(
        self,
        files: list[Path],
        config: TestGenConfig,
        structure: ProjectStructure,
        existing: ExistingTestInfo | None,
        result: GenerationResult,
        cancel_event: asyncio.Event | None,
    ) -> list[AnalysisResult]:
        """Analyze files concurrently, bounded by the configured and CPU limits."""
        if not files:
            return []

        limit = max(1, min(config.performance.max_concurrency, os.cpu_count() or 1))
        semaphore = asyncio.Semaphore(limit)
        slots: list[AnalysisResult | None] = [None] * len(files)
        skipped = 0

        async def analyze_one(index: int, path: Path) -> None:
            nonlocal skipped
            async with semaphore:
                if cancel_event is not None and cancel_event.is_set():
                    return
                analyzer = next((a for a in self.analyzers if a.can_analyze(path)), None)
                if analyzer is None:
                    self._logger.warning(f"No analyzer found for file: {path}")
                    skipped += 1
                    return
                try:
                    analysis = await analyzer.analyze(path)
                except Exception as e:
                    self._logger.error(f"Error analyzing file {path}: {e}")
                    result.warnings.append(f"Failed to analyze {path}: {e}")
                    skipped += 1
                    return
                analysis.project_structure = structure
                analysis.existing_tests = existing
                slots[index] = analysis

        self._logger.debug(f"Analyzing {len(files)} files with concurrency {limit}")
        await asyncio.gather(*(analyze_one(i, path) for i, path in enumerate(files)))

        result.statistics.files_skipped += skipped
        return [analysis for analysis in slots if analysis is not None]

    async def _generate_files(
        self,
        generators: list[TestGenerator],
        analyses: list[AnalysisResult],
        output_path: Path,
        result: GenerationResult,
        cancel_event: asyncio.Event | None,
    ) -> list[GeneratedTestFile]:
        """Invoke each generator once with every result it claims."""
        groups: dict[int, tuple[TestGenerator, list[AnalysisResult]]] = {}
        for analysis in analyses:
            generator = next((g for g in generators if g.can_generate(analysis)), None)
            if generator is None:
                self._logger.debug(f"No generator claims {analysis.file_path}")
                continue
            groups.setdefault(id(generator), (generator, []))[1].append(analysis)

        generated: list[GeneratedTestFile] = []
        for generator, group in groups.values():
            self._check_cancelled(cancel_event)
            self._logger.debug(f"Generating tests for {len(group)} files with {generator.name}")
            try:
                generated.extend(await generator.generate_test_files(group, output_path))
            except Exception as e:
                self._logger.exception(f"Error generating tests with {generator.name}")
                result.warnings.append(f"{generator.name} failed: {e}")
        return generated

    def _validate(self, generated: list[GeneratedTestFile], result: GenerationResult) -> None:
        """Shallow structural check of each generated file; never compiles."""
        for file in generated:
            if not file.requires_compilation:
                continue
            if not file.content.strip():
                message = f"Generated test file is empty: {file.file_path}"
            elif "namespace" not in file.content or "class" not in file.content:
                message = f"Generated test file may have syntax issues: {file.file_path}"
            else:
                continue
            self._logger.warning(message)
            result.warnings.append(message)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _generators_for(self, config: TestGenConfig) -> list[TestGenerator]:
        if self._builtin_generators and config is not self.config:
            return [CSharpTestGenerator(config, self.templates)]
        return self.generators

    def _register_templates(
        self, request: GenerationRequest, config: TestGenConfig, project_path: Path
    ) -> None:
        for language, templates in config.templates.items():
            for name, template_path in templates.items():
                path = Path(template_path)
                if not path.is_absolute():
                    path = project_path / path
                self.templates.register(f"{language}/{name}", path.read_text(encoding="utf-8"))
        for name, content in request.custom_templates.items():
            self.templates.register(name, content)

    @contextmanager
    def _phase(
        self,
        name: str,
        message: str,
        stats: GenerationStatistics,
        progress: ProgressCallback | None,
    ) -> Iterator[None]:
        self._logger.debug(f"{name}: {message}")
        self._report(progress, message)
        started = time.perf_counter()
        try:
            yield
        finally:
            stats.phase_timings[name] = time.perf_counter() - started
            self._logger.debug(f"{name} completed in {stats.phase_timings[name]:.3f}s")

    def _report(self, progress: ProgressCallback | None, message: str) -> None:
        """Best effort: a failing callback is logged and otherwise ignored."""
        if progress is None:
            return
        try:
            progress(message)
        except Exception as e:
            self._logger.warning(f"Progress callback failed: {e}")

    def _check_cancelled(self, cancel_event: asyncio.Event | None) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise GenerationCancelledError()

    def _fill_statistics(
        self,
        stats: GenerationStatistics,
        analyses: list[AnalysisResult],
        generated: list[GeneratedTestFile],
        result: GenerationResult,
    ) -> None:
        cases = result.test_cases
        stats.files_analyzed = len(analyses)
        stats.test_cases_generated = len(cases)
        stats.test_methods_generated = len(cases)
        stats.test_files_created = sum(1 for f in generated if f.is_new_file)
        stats.test_files_updated = sum(1 for f in generated if not f.is_new_file)
        stats.classes_covered = len({case.target_class for case in cases})
        stats.dependencies_detected = sum(len(a.dependencies) for a in analyses)
        stats.mocks_generated = sum(1 for case in cases if case.mock_setup)
        stats.assertions_generated = sum(len(case.assertions) for case in cases)

        for analysis in analyses:
            breakdown = stats.file_type_breakdown
            breakdown[analysis.file_type] = breakdown.get(analysis.file_type, 0) + 1
        for file in generated:
            breakdown = stats.test_framework_breakdown
            breakdown[file.test_framework] = breakdown.get(file.test_framework, 0) + 1

        covered = {
            (case.target_class, case.target_method)
            for case in cases
            if case.test_type in _METHOD_TEST_TYPES
        }
        stats.methods_covered = len(covered)

        public_methods = {
            (cls.name, method.name)
            for analysis in analyses
            for cls in analysis.classes
            if cls.kind != "interface" and not is_test_class_name(cls.name)
            for method in cls.methods
            if method.access_modifier == AccessModifier.PUBLIC
        }
        if public_methods:
            stats.coverage_percentage = (
                100.0 * len(public_methods & covered) / len(public_methods)
            )
