"""Project structure analysis: build manifests, solution files, folder layout."""

from __future__ import annotations

import os
import xml.etree.ElementTree as ET
from pathlib import Path

from testgen import heuristics
from testgen.logging import get_logger
from testgen.models import (
    AssertionLibraryInfo,
    AssertionLibraryType,
    MockingFrameworkInfo,
    MockingFrameworkType,
    PackageReference,
    PackageType,
    ProjectReference,
    ProjectStructure,
    SourceFolder,
    TestFolder,
    TestFrameworkInfo,
    TestFrameworkType,
)
from testgen.scanner import SKIP_DIRECTORIES

PROJECT_FILE_PATTERNS = ("*.csproj", "*.vbproj", "*.fsproj")
CONFIG_FILE_PATTERNS = ("*.config", "appsettings*.json", "*.settings")

PROJECT_TYPES: dict[str, str] = {
    ".csproj": "C# Project",
    ".vbproj": "VB.NET Project",
    ".fsproj": "F# Project",
}

# Known attribute and method vocabularies per framework
TEST_FRAMEWORK_VOCABULARY: dict[TestFrameworkType, tuple[list[str], list[str]]] = {
    TestFrameworkType.XUNIT: (
        ["Fact", "Theory", "InlineData"],
        ["Assert.Equal", "Assert.True", "Assert.False", "Assert.Null"],
    ),
    TestFrameworkType.NUNIT: (
        ["Test", "TestCase", "TestCaseSource"],
        ["Assert.AreEqual", "Assert.IsTrue", "Assert.IsFalse", "Assert.IsNull"],
    ),
    TestFrameworkType.MSTEST: (
        ["TestMethod", "DataRow", "DataTestMethod"],
        ["Assert.AreEqual", "Assert.IsTrue", "Assert.IsFalse", "Assert.IsNull"],
    ),
}

MOCKING_FRAMEWORK_VOCABULARY: dict[MockingFrameworkType, list[str]] = {
    MockingFrameworkType.MOQ: ["Setup", "Returns", "Verify", "Callback"],
    MockingFrameworkType.NSUBSTITUTE: ["Returns", "Received", "DidNotReceive", "When"],
    MockingFrameworkType.FAKEITEASY: ["CallTo", "Returns", "MustHaveHappened"],
}

ASSERTION_LIBRARY_VOCABULARY: dict[AssertionLibraryType, list[str]] = {
    AssertionLibraryType.FLUENT_ASSERTIONS: [
        "Should().Be",
        "Should().BeNull",
        "Should().BeOfType",
        "Should().Contain",
    ],
    AssertionLibraryType.SHOULDLY: ["ShouldBe", "ShouldBeNull", "ShouldBeOfType", "ShouldContain"],
}


def determine_package_type(name: str) -> PackageType:
    lowered = name.lower()
    if "test" in lowered:
        return PackageType.TEST_FRAMEWORK
    if any(m in lowered for m in ("moq", "nsubstitute", "fakeiteasy")):
        return PackageType.MOCKING_FRAMEWORK
    if "fluentassertions" in lowered or "shouldly" in lowered:
        return PackageType.ASSERTION_LIBRARY
    if any(f in lowered for f in ("xunit", "nunit", "mstest")):
        return PackageType.TEST_FRAMEWORK
    return PackageType.PRODUCTION_DEPENDENCY


def is_test_package(name: str) -> bool:
    lowered = name.lower()
    return any(k in lowered for k in ("test", "moq", "nsubstitute", "fluentassertions"))


def determine_test_framework(name: str) -> TestFrameworkType:
    lowered = name.lower()
    for framework in (TestFrameworkType.XUNIT, TestFrameworkType.NUNIT, TestFrameworkType.MSTEST):
        if framework.value in lowered:
            return framework
    return TestFrameworkType.UNKNOWN


def determine_mocking_framework(name: str) -> MockingFrameworkType:
    lowered = name.lower()
    for framework in (
        MockingFrameworkType.MOQ,
        MockingFrameworkType.NSUBSTITUTE,
        MockingFrameworkType.FAKEITEASY,
    ):
        if framework.value in lowered:
            return framework
    return MockingFrameworkType.UNKNOWN


def determine_assertion_library(name: str) -> AssertionLibraryType:
    lowered = name.lower()
    for library in (
        AssertionLibraryType.FLUENT_ASSERTIONS,
        AssertionLibraryType.SHOULDLY,
        AssertionLibraryType.NUNIT,
        AssertionLibraryType.XUNIT,
        AssertionLibraryType.MSTEST,
    ):
        if library.value in lowered:
            return library
    return AssertionLibraryType.UNKNOWN


def _find_first(root: Path, patterns: tuple[str, ...]) -> Path | None:
    for pattern in patterns:
        matches = sorted(p for p in root.rglob(pattern) if not _in_skipped_dir(p, root))
        if matches:
            return matches[0]
    return None


def _in_skipped_dir(path: Path, root: Path) -> bool:
    try:
        parts = path.relative_to(root).parts[:-1]
    except ValueError:
        return False
    return any(part.lower() in SKIP_DIRECTORIES for part in parts)


def parse_project_file(project_file: Path, structure: ProjectStructure) -> None:
    """Read properties, target framework and references from an MSBuild project."""
    logger = get_logger()
    try:
        tree = ET.parse(project_file)
    except (OSError, ET.ParseError) as e:
        logger.error(f"Error analyzing project file {project_file}: {e}")
        return

    root = tree.getroot()

    def local(tag: str) -> str:
        # Old-style projects carry the MSBuild XML namespace
        return tag.rsplit("}", 1)[-1]

    for element in root.iter():
        tag = local(element.tag)
        if tag == "PropertyGroup":
            for prop in element:
                structure.project_properties[local(prop.tag)] = (prop.text or "").strip()
        elif tag == "PackageReference":
            name = element.get("Include")
            if name:
                version = element.get("Version")
                if version is None:
                    version_node = next((c for c in element if local(c.tag) == "Version"), None)
                    version = version_node.text if version_node is not None else ""
                structure.packages.append(
                    PackageReference(
                        name=name,
                        version=(version or "").strip(),
                        package_type=determine_package_type(name),
                        is_test_package=is_test_package(name),
                    )
                )
        elif tag == "ProjectReference":
            include = element.get("Include")
            if include:
                structure.references.append(
                    ProjectReference(
                        name=Path(include.replace("\\", "/")).stem,
                        path=include,
                        project_type="Unknown",
                    )
                )

    props = structure.project_properties
    target = props.get("TargetFramework") or props.get("TargetFrameworks")
    if target:
        structure.target_framework = target
    if props.get("OutputType"):
        structure.project_type = props["OutputType"]
    if props.get("Configuration"):
        structure.build_info.configuration = props["Configuration"]
    if props.get("Platform"):
        structure.build_info.platform = props["Platform"]
    if props.get("OutputPath"):
        structure.build_info.output_path = props["OutputPath"]
    if props.get("DefineConstants"):
        structure.build_info.defines = [
            d.strip() for d in props["DefineConstants"].split(";") if d.strip()
        ]

    structure.project_name = project_file.stem


def parse_solution_file(solution_file: Path, structure: ProjectStructure) -> None:
    """Add ``Project("{guid}") = "Name", "Path", "{guid}"`` entries as references."""
    logger = get_logger()
    try:
        lines = solution_file.read_text(encoding="utf-8-sig", errors="replace").splitlines()
    except OSError as e:
        logger.error(f"Error analyzing solution file {solution_file}: {e}")
        return

    for line in lines:
        if not line.startswith("Project("):
            continue
        parts = [p for p in line.split("=") if p]
        if len(parts) < 2:
            continue
        info = [p for p in parts[1].strip().split(",") if p]
        if len(info) < 2:
            continue
        name = info[0].strip(' "')
        path = info[1].strip(' "')
        ext = os.path.splitext(path)[1].lower()
        structure.references.append(
            ProjectReference(name=name, path=path, project_type=PROJECT_TYPES.get(ext, "Unknown"))
        )


def build_folder(directory: Path) -> SourceFolder | None:
    """Recursively describe a directory; None when it cannot be read."""
    logger = get_logger()
    try:
        entries = sorted(directory.iterdir())
    except OSError as e:
        logger.warning(f"Access denied to directory {directory}: {e}")
        return None

    folder = SourceFolder(
        name=directory.name,
        path=str(directory),
        folder_type=heuristics.classify_folder(directory.name),
    )
    for entry in entries:
        if entry.is_file() and entry.suffix.lower() == ".cs":
            folder.source_files.append(str(entry))
        elif entry.is_dir() and entry.name.lower() not in SKIP_DIRECTORIES:
            child = build_folder(entry)
            if child is not None:
                folder.subfolders.append(child)
    return folder


def detect_frameworks(structure: ProjectStructure) -> None:
    """Fill NuGetInfo from package names, attaching known vocabularies."""
    nuget = structure.nuget_info
    for package in structure.packages:
        test_framework = determine_test_framework(package.name)
        if test_framework != TestFrameworkType.UNKNOWN:
            attributes, asserts = TEST_FRAMEWORK_VOCABULARY[test_framework]
            nuget.test_frameworks.append(
                TestFrameworkInfo(
                    name=package.name,
                    version=package.version,
                    type=test_framework,
                    attributes=list(attributes),
                    assert_methods=list(asserts),
                )
            )

        mocking = determine_mocking_framework(package.name)
        if mocking != MockingFrameworkType.UNKNOWN:
            nuget.mocking_frameworks.append(
                MockingFrameworkInfo(
                    name=package.name,
                    version=package.version,
                    type=mocking,
                    setup_methods=list(MOCKING_FRAMEWORK_VOCABULARY[mocking]),
                )
            )

        assertion = determine_assertion_library(package.name)
        if assertion != AssertionLibraryType.UNKNOWN:
            nuget.assertion_libraries.append(
                AssertionLibraryInfo(
                    name=package.name,
                    version=package.version,
                    type=assertion,
                    assertion_methods=list(ASSERTION_LIBRARY_VOCABULARY.get(assertion, [])),
                )
            )


def find_configuration_files(root: Path) -> list[str]:
    found: list[str] = []
    for pattern in CONFIG_FILE_PATTERNS:
        for path in sorted(root.rglob(pattern)):
            if path.is_file() and not _in_skipped_dir(path, root) and str(path) not in found:
                found.append(str(path))
    return found


def analyze_project_structure(root: Path) -> ProjectStructure:
    """Describe the project rooted at ``root``.

    Best effort: unreadable manifests and directories are logged and skipped,
    so the returned structure may be partial.
    """
    logger = get_logger()
    root = Path(root).resolve()
    structure = ProjectStructure(root_path=str(root), project_name=root.name)

    project_file = _find_first(root, PROJECT_FILE_PATTERNS)
    if project_file is not None:
        logger.debug(f"Using project file {project_file}")
        parse_project_file(project_file, structure)

    for solution_file in sorted(root.glob("*.sln")):
        parse_solution_file(solution_file, structure)

    root_folder = build_folder(root)
    if root_folder is not None:
        structure.source_folders = root_folder.subfolders
        structure.metadata["root_source_files"] = len(root_folder.source_files)

    for folder in structure.source_folders:
        lowered = folder.name.lower()
        if "test" in lowered or "spec" in lowered:
            structure.test_folders.append(
                TestFolder(
                    name=folder.name,
                    path=folder.path,
                    testing_pattern=heuristics.classify_testing_pattern(folder.name),
                    test_files=[f for f in _all_files(folder) if _looks_like_test(f)],
                )
            )

    detect_frameworks(structure)
    structure.configuration_files = find_configuration_files(root)

    structure.metadata["project_file"] = str(project_file) if project_file else None
    structure.metadata["source_folder_count"] = sum(
        1 + _count_subfolders(f) for f in structure.source_folders
    )
    logger.info(
        f"Project {structure.project_name}: {len(structure.packages)} packages, "
        f"{len(structure.test_folders)} test folders"
    )
    return structure


def _all_files(folder: SourceFolder) -> list[str]:
    files = list(folder.source_files)
    for sub in folder.subfolders:
        files.extend(_all_files(sub))
    return files


def _count_subfolders(folder: SourceFolder) -> int:
    return sum(1 + _count_subfolders(s) for s in folder.subfolders)


def _looks_like_test(path: str) -> bool:
    name = Path(path).name.lower()
    return "test" in name or "spec" in name
