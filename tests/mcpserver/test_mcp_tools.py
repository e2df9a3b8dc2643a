import pytest
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from reviver.mcpserver.server import MAX_SNIPPETS, _parse_snippets, create_server


def test_parse_snippets_builds_models():
    snippets = _parse_snippets([{"title": "app", "content": "import os", "language": "python"}])

    assert [(s.title, s.extension) for s in snippets] == [("app", ".py")]


def test_parse_snippets_rejects_invalid_payload():
    with pytest.raises(ToolError):
        _parse_snippets([{"title": ["not", "a", "string"]}])


def test_parse_snippets_limits_batch_size():
    with pytest.raises(ToolError):
        _parse_snippets([{"title": "x"}] * (MAX_SNIPPETS + 1))


def test_create_server_returns_fastmcp_instance():
    assert isinstance(create_server(), FastMCP)
