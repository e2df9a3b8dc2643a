"""Derive a scaffold report (files, dependencies, steps, warnings) from snippets."""

from __future__ import annotations

import logging
from typing import Sequence

from ..snippet import Snippet, get_extension
from .dependencies import extract_dependencies
from .report import ScaffoldFile, ScaffoldReport

logger = logging.getLogger("reviver")

ROOT_STEP = "Create a root directory for the project."
FINAL_STEP = "Configure environment variables and run the system."
NO_CODE_ERROR = "No code detected. Please add logic to your snippets."
PIP_INSTALLER = "pip install"
NPM_INSTALLER = "npm install"


def empty_file_warning(title: str) -> str:
    return f'Warning: the file "{title}" is currently empty.'


def source_file_step(title: str, extension: str) -> str:
    return f"Create source file: {title}{extension}"


def install_step(installer: str, dependencies: Sequence[str]) -> str:
    return f"Install required packages: {installer} {' '.join(dependencies)}"


def choose_installer(snippets: Sequence[Snippet]) -> str:
    """Pick ``pip`` when any snippet is Python, otherwise ``npm``."""
    if any(snippet.language == "python" for snippet in snippets):
        return PIP_INSTALLER
    return NPM_INSTALLER


class ProjectAnalyzer:
    """Build a ``ScaffoldReport`` from an ordered snippet collection.

    Every call recomputes the report from scratch, so analysing the same
    sequence twice yields equal reports.
    """

    def analyze(self, snippets: Sequence[Snippet] | None) -> ScaffoldReport:
        snippets = list(snippets or [])
        steps = [ROOT_STEP]

        if not snippets or all(snippet.is_blank() for snippet in snippets):
            return ScaffoldReport(steps=steps, errors=[NO_CODE_ERROR])

        files: list[ScaffoldFile] = []
        errors: list[str] = []
        dependencies: dict[str, None] = {}

        for snippet in snippets:
            if snippet.is_blank():
                errors.append(empty_file_warning(snippet.title))

            extension = get_extension(snippet.language)
            files.append(
                ScaffoldFile(name=snippet.title, language=snippet.language, extension=extension)
            )
            for dependency in extract_dependencies(snippet.content, snippet.language):
                dependencies.setdefault(dependency, None)
            steps.append(source_file_step(snippet.title, extension))

        if dependencies:
            steps.append(install_step(choose_installer(snippets), list(dependencies)))
        steps.append(FINAL_STEP)

        logger.debug(
            "Analyzed %d snippets: %d dependencies, %d warnings",
            len(snippets),
            len(dependencies),
            len(errors),
        )
        return ScaffoldReport(
            files=files,
            dependencies=list(dependencies),
            steps=steps,
            errors=errors,
        )


def analyze(snippets: Sequence[Snippet] | None) -> ScaffoldReport:
    """Convenience helper around ``ProjectAnalyzer().analyze``."""
    return ProjectAnalyzer().analyze(snippets)


__all__ = [
    "FINAL_STEP",
    "NO_CODE_ERROR",
    "NPM_INSTALLER",
    "PIP_INSTALLER",
    "ROOT_STEP",
    "ProjectAnalyzer",
    "analyze",
    "choose_installer",
    "empty_file_warning",
]
