"""Template registry and rendering for generated test files.

Templates are Jinja2 sources registered under hierarchical names such as
``csharp/unit-test``. The built-in set ships as ``*.j2`` files next to this
module; callers may register more or override them from a directory.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path
from typing import Any

import jinja2

from testgen.errors import TemplateError
from testgen.logging import get_logger

TEMPLATE_SUFFIX = ".j2"


def _builtin_templates() -> dict[str, str]:
    """Read the packaged templates into a name -> source map."""
    templates: dict[str, str] = {}
    root = resources.files("testgen.templates")
    for language_dir in root.iterdir():
        if not language_dir.is_dir() or language_dir.name.startswith("__"):
            continue
        for entry in language_dir.iterdir():
            if entry.name.endswith(TEMPLATE_SUFFIX):
                name = f"{language_dir.name}/{entry.name[: -len(TEMPLATE_SUFFIX)]}"
                templates[name] = entry.read_text(encoding="utf-8")
    return templates


class TemplateEngine:
    """An explicit, per-run template registry backed by a Jinja2 environment."""

    def __init__(self, include_builtin: bool = True) -> None:
        self._logger = get_logger()
        self._include_builtin = include_builtin
        self._sources: dict[str, str] = {}
        self._env = jinja2.Environment(
            loader=jinja2.DictLoader(self._sources),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=False,
            undefined=jinja2.Undefined,
        )
        if include_builtin:
            self._sources.update(_builtin_templates())

    def register(self, name: str, content: str) -> None:
        """Add or replace a template."""
        self._sources[name] = content
        # DictLoader reads the shared dict; drop compiled copies of the old source
        if self._env.cache is not None:
            self._env.cache.clear()
        self._logger.debug(f"Registered template {name}")

    def render(self, name: str, data: dict[str, Any]) -> str:
        """Render a registered template.

        Raises:
            TemplateError: The template is unknown or fails to render.
        """
        if name not in self._sources:
            raise TemplateError(f"Template not found: {name}", name)
        try:
            return self._env.get_template(name).render(**data)
        except jinja2.TemplateError as e:
            self._logger.error(f"Error rendering template {name}: {e}")
            raise TemplateError(f"Error rendering template {name}: {e}", name) from e

    def load_from_directory(self, directory: Path) -> int:
        """Register every ``*.j2`` file under a directory.

        The template name is the relative path without the suffix, always
        using ``/`` separators (``csharp/unit-test.j2`` -> ``csharp/unit-test``).

        Returns:
            Number of templates loaded
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise TemplateError(f"Template directory not found: {directory}", str(directory))

        count = 0
        for path in sorted(directory.rglob(f"*{TEMPLATE_SUFFIX}")):
            name = path.relative_to(directory).with_suffix("").as_posix()
            self.register(name, path.read_text(encoding="utf-8"))
            count += 1
        self._logger.info(f"Loaded {count} templates from {directory}")
        return count

    def available_templates(self) -> list[str]:
        return sorted(self._sources)

    def has_template(self, name: str) -> bool:
        return name in self._sources

    def reset(self) -> None:
        """Drop registered templates and restore the built-in set."""
        self._sources.clear()
        if self._env.cache is not None:
            self._env.cache.clear()
        if self._include_builtin:
            self._sources.update(_builtin_templates())


__all__ = ["TEMPLATE_SUFFIX", "TemplateEngine"]
