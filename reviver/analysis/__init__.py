"""Scaffold analysis for snippet collections."""

from .analyzer import ProjectAnalyzer, analyze
from .dependencies import extract_dependencies
from .report import ScaffoldFile, ScaffoldReport

__all__ = [
    "ProjectAnalyzer",
    "ScaffoldFile",
    "ScaffoldReport",
    "analyze",
    "extract_dependencies",
]
