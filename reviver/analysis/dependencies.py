"""Pattern-based extraction of external package identifiers from source text.

A regular-expression scan, not import resolution. Three textual shapes are
recognised and the first path segment of every non-local module reference is
kept.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Pattern, Sequence

# Applied in this order; discovery order across patterns is significant.
DEPENDENCY_PATTERNS: Sequence[Pattern[str]] = (
    # import x from "pkg" / from "pkg" import x / import "pkg"
    re.compile(r"""(?:import|from)\s+['"]([^'"]+)['"]"""),
    # require("pkg")
    re.compile(r"""require\s*\(\s*['"]([^'"]+)['"]\s*\)"""),
    # bare `import pkg` at line start, without a `from` clause
    re.compile(r"^import\s+([A-Za-z0-9_]+)\b(?![^\n]*\bfrom\b)", re.MULTILINE),
)

LOCAL_PREFIXES = (".", "/", "~")


def is_local_reference(module_path: str) -> bool:
    return module_path.startswith(LOCAL_PREFIXES)


def package_identifier(module_path: str) -> str:
    """Return the first path segment of ``module_path``.

    Scoped npm packages collapse to their scope: ``@scope/pkg`` -> ``@scope``.
    """
    return module_path.split("/", 1)[0]


def iter_module_references(content: str) -> Iterable[str]:
    for pattern in DEPENDENCY_PATTERNS:
        for match in pattern.finditer(content):
            yield match.group(1)


def extract_dependencies(content: str | None, language: str | None = None) -> List[str]:
    """Return external package identifiers referenced by ``content``.

    The result is ordered by first discovery (pattern order, then match
    position) with duplicates collapsed. ``language`` is accepted for
    interface symmetry with the analyzer; every pattern runs regardless.
    """
    if not content:
        return []

    found: dict[str, None] = {}
    for module_path in iter_module_references(content):
        if not module_path or is_local_reference(module_path):
            continue
        found.setdefault(package_identifier(module_path), None)
    return list(found)


__all__ = [
    "DEPENDENCY_PATTERNS",
    "extract_dependencies",
    "is_local_reference",
    "package_identifier",
]
