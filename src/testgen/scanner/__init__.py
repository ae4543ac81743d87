"""testgen scanner - source discovery and project layout analysis."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from testgen.logging import get_logger

# File-type tag -> extensions it covers
FILE_TYPE_EXTENSIONS: dict[str, tuple[str, ...]] = {
    "csharp": (".cs",),
    "typescript": (".ts", ".tsx"),
    "javascript": (".js", ".jsx"),
    "html": (".html", ".cshtml", ".razor"),
    "css": (".css", ".less", ".scss", ".sass"),
}

# Build artifacts and tool directories never worth descending into
SKIP_DIRECTORIES: frozenset[str] = frozenset({"bin", "obj", "node_modules", ".git", ".vs"})


@dataclass
class SkippedItem:
    """Information about a skipped file or directory."""

    path: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "reason": self.reason}


@dataclass
class DiscoveryResult:
    """Files found by a discovery walk, plus what was left out and why."""

    root: str
    files: list[Path] = field(default_factory=list)
    skipped: list[SkippedItem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root,
            "files": [str(f) for f in self.files],
            "skipped": [s.to_dict() for s in self.skipped],
        }


def resolve_extensions(file_types: list[str]) -> set[str]:
    """Turn file-type tags (``csharp``) or raw extensions (``.cs``) into extensions."""
    extensions: set[str] = set()
    for file_type in file_types:
        tag = file_type.strip().lower()
        if tag.startswith("."):
            extensions.add(tag)
        elif tag in FILE_TYPE_EXTENSIONS:
            extensions.update(FILE_TYPE_EXTENSIONS[tag])
    return extensions or {".cs"}


def compile_exclude_patterns(patterns: list[str]) -> list[re.Pattern[str]]:
    """Translate globs to case-insensitive regexes (``*`` -> ``.*``, ``?`` -> ``.``)."""
    compiled = []
    for pattern in patterns:
        regex = re.escape(pattern.replace("\\", "/")).replace(r"\*", ".*").replace(r"\?", ".")
        compiled.append(re.compile(f"^{regex}$", re.IGNORECASE))
    return compiled


def should_exclude(
    path: Path, patterns: list[re.Pattern[str]], root: Path, is_dir: bool = False
) -> bool:
    """Match a path against compiled exclude patterns.

    Both the absolute and the root-relative form are tried. Directories are
    also tried with a trailing slash so ``**/bin/**`` prunes ``bin`` itself.
    """
    candidates = [path.as_posix()]
    try:
        candidates.append(path.relative_to(root).as_posix())
    except ValueError:
        pass
    if is_dir:
        candidates += [f"{c}/" for c in candidates] + [f"/{candidates[-1]}/"]

    return any(p.match(candidate) for p in patterns for candidate in candidates)


def walk_files(root: Path, extensions: set[str], exclude_patterns: list[str]) -> DiscoveryResult:
    """Depth-first walk collecting files with matching extensions.

    Excluded and build-artifact directories are pruned before descending.
    Unreadable directories are logged and skipped.
    """
    logger = get_logger()
    root = root.resolve()
    compiled = compile_exclude_patterns(exclude_patterns)
    result = DiscoveryResult(root=str(root))

    def on_error(error: OSError) -> None:
        logger.warning(f"Cannot access {error.filename}: {error.strerror}")
        result.skipped.append(SkippedItem(path=str(error.filename), reason="access_denied"))

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        current_dir = Path(dirpath)

        kept = []
        for dirname in sorted(dirnames):
            dir_path = current_dir / dirname
            if dirname.lower() in SKIP_DIRECTORIES:
                continue
            if should_exclude(dir_path, compiled, root, is_dir=True):
                result.skipped.append(
                    SkippedItem(path=str(dir_path.relative_to(root)), reason="exclude_pattern")
                )
                continue
            kept.append(dirname)
        dirnames[:] = kept

        for filename in sorted(filenames):
            file_path = current_dir / filename
            if file_path.suffix.lower() not in extensions:
                continue
            if should_exclude(file_path, compiled, root):
                result.skipped.append(
                    SkippedItem(path=str(file_path.relative_to(root)), reason="exclude_pattern")
                )
                continue
            result.files.append(file_path)

    return result


def discover_files(root: Path, file_types: list[str], exclude_patterns: list[str]) -> list[Path]:
    """Find source files of the given types under root.

    Args:
        root: Project root
        file_types: Tags such as ``csharp`` or raw extensions such as ``.cs``
        exclude_patterns: Globs; matching directories are not descended into

    Returns:
        Matching files in depth-first, name-sorted order
    """
    logger = get_logger()
    extensions = resolve_extensions(file_types)
    logger.debug(f"Discovering {sorted(extensions)} under {root}")

    result = walk_files(root, extensions, exclude_patterns)
    logger.info(f"Discovered {len(result.files)} source files ({len(result.skipped)} excluded)")
    return result.files


from testgen.scanner.existing_tests import analyze_existing_tests  # noqa: E402
from testgen.scanner.project import analyze_project_structure  # noqa: E402

__all__ = [
    "FILE_TYPE_EXTENSIONS",
    "SKIP_DIRECTORIES",
    "DiscoveryResult",
    "SkippedItem",
    "analyze_existing_tests",
    "analyze_project_structure",
    "compile_exclude_patterns",
    "discover_files",
    "resolve_extensions",
    "should_exclude",
    "walk_files",
]
