"""FastMCP server exposing scaffold analysis as MCP tools."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import ValidationError

from ..analysis import ProjectAnalyzer, extract_dependencies
from ..snippet import Snippet

logger = logging.getLogger("reviver")

MAX_SNIPPETS = 200


def _parse_snippets(snippets: List[Dict[str, Any]]) -> List[Snippet]:
    if len(snippets) > MAX_SNIPPETS:
        raise ToolError(f"At most {MAX_SNIPPETS} snippets can be analyzed at once.")
    try:
        return [Snippet.model_validate(item) for item in snippets]
    except ValidationError as exc:
        raise ToolError(f"Invalid snippet payload: {exc.errors()[0].get('msg', exc)}") from exc


def create_server() -> FastMCP:
    """Create a FastMCP server wired to the project analyzer."""

    analyzer = ProjectAnalyzer()
    server = FastMCP("Project Reviver MCP Server")

    @server.tool(
        name="analyze_snippets",
        description=(
            "Build a project scaffold plan from an ordered list of snippets. Each snippet"
            " is an object with `title`, `content` and `language` (javascript, typescript,"
            " python, html, css, json or markdown). Returns files, detected external"
            " dependencies, ordered setup steps and warnings."
        ),
        tags={"reviver", "analysis"},
    )
    def analyze_snippets(snippets: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Analyze snippets and return the scaffold report."""
        parsed = _parse_snippets(snippets)
        try:
            report = analyzer.analyze(parsed)
        except Exception as exc:  # pragma: no cover - analyzer does not raise on text input
            logger.exception("Snippet analysis failed")
            raise ToolError(f"Snippet analysis failed: {exc}") from exc
        return report.model_dump()

    @server.tool(
        name="extract_dependencies",
        description=(
            "List external package identifiers referenced by a piece of source text"
            " (ES imports, require() calls and bare `import x` lines), in discovery order."
        ),
        tags={"reviver", "analysis"},
    )
    def extract(content: str, language: str | None = None) -> Dict[str, Any]:
        if content is None:
            raise ToolError("Content is required.")
        return {"dependencies": extract_dependencies(content, language)}

    return server


mcp = create_server()

__all__ = ["create_server", "mcp"]
