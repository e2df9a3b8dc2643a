import json

import pytest

from reviver.utils import FileLoader, load_workspace_document


def test_load_snippets_from_directory(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "app.js").write_text("import React from 'react'", encoding="utf-8")
    (tmp_path / "main.py").write_text("import flask", encoding="utf-8")
    (tmp_path / "notes.rs").write_text("fn main() {}", encoding="utf-8")
    (tmp_path / "test_main.py").write_text("import pytest", encoding="utf-8")
    (tmp_path / "node_modules").mkdir()
    (tmp_path / "node_modules" / "dep.js").write_text("x", encoding="utf-8")

    snippets = FileLoader().load_snippets(str(tmp_path))

    assert [(s.title, s.language) for s in snippets] == [("main", "python"), ("src/app", "javascript")]


def test_include_tests_and_size_cap(tmp_path):
    (tmp_path / "test_main.py").write_text("import pytest", encoding="utf-8")
    (tmp_path / "big.js").write_text("x" * 100, encoding="utf-8")

    snippets = FileLoader(max_file_size=50, exclude_tests=False).load_snippets(str(tmp_path))

    assert [s.title for s in snippets] == ["test_main"]


def test_missing_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        FileLoader().detect_files(str(tmp_path / "nope"))


def test_load_workspace_document(tmp_path):
    path = tmp_path / "workspace.json"
    path.write_text(
        json.dumps({"snippets": [{"id": "a", "title": "app", "content": "x", "language": "css", "extra": 1}]}),
        encoding="utf-8",
    )

    (snippet,) = load_workspace_document(str(path))

    assert (snippet.id, snippet.title, snippet.language) == ("a", "app", "css")


def test_load_workspace_document_rejects_bad_shape(tmp_path):
    path = tmp_path / "workspace.json"
    path.write_text(json.dumps({"snippets": {"not": "a list"}}), encoding="utf-8")

    with pytest.raises(ValueError):
        load_workspace_document(str(path))
