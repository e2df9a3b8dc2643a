from reviver.analysis import ProjectAnalyzer, ScaffoldReport, analyze
from reviver.analysis.analyzer import FINAL_STEP, NO_CODE_ERROR, ROOT_STEP
from reviver.snippet import Snippet


def _snippet(title, content, language="javascript"):
    return Snippet(title=title, content=content, language=language)


def test_empty_collection_short_circuits():
    report = analyze([])

    assert report.files == []
    assert report.dependencies == []
    assert report.steps == [ROOT_STEP]
    assert report.errors == [NO_CODE_ERROR]


def test_all_blank_snippets_short_circuit():
    report = analyze([_snippet("a", "   "), _snippet("b", "\n\t")])

    assert report.files == []
    assert report.steps == [ROOT_STEP]
    assert report.errors == [NO_CODE_ERROR]


def test_blank_member_is_warned_but_still_scaffolded():
    report = analyze([_snippet("a", "x=1"), _snippet("b", "")])

    assert [f.name for f in report.files] == ["a", "b"]
    assert report.errors == ['Warning: the file "b" is currently empty.']
    assert len(report.steps) == 1 + 2 + 0 + 1
    assert report.steps[0] == ROOT_STEP
    assert report.steps[-1] == FINAL_STEP


def test_dependencies_keep_discovery_order_across_snippets():
    report = analyze([_snippet("one", "import a from 'pkg-a'"), _snippet("two", "require('pkg-b')")])

    assert report.dependencies == ["pkg-a", "pkg-b"]
    assert report.steps == [
        ROOT_STEP,
        "Create source file: one.js",
        "Create source file: two.js",
        "Install required packages: npm install pkg-a pkg-b",
        FINAL_STEP,
    ]


def test_python_snippet_switches_installer_to_pip():
    report = analyze([_snippet("ui", "import x from 'react'"), _snippet("api", "import flask", "python")])

    assert report.steps[-2] == "Install required packages: pip install react flask"


def test_no_install_step_without_dependencies():
    report = analyze([_snippet("index", "<h1>hi</h1>", "html")])

    assert report.dependencies == []
    assert report.steps == [ROOT_STEP, "Create source file: index.html", FINAL_STEP]


def test_files_use_extension_table_with_fallback():
    report = analyze([_snippet("styles", "a{}", "css"), _snippet("notes", "hello", "cobol")])

    assert [(f.name, f.language, f.extension) for f in report.files] == [
        ("styles", "css", ".css"),
        ("notes", "cobol", ".txt"),
    ]
    assert report.files[1].filename == "notes.txt"


def test_empty_title_is_allowed():
    report = analyze([_snippet("", "")] + [_snippet("main", "print(1)", "python")])

    assert report.errors == ['Warning: the file "" is currently empty.']
    assert report.steps[1] == "Create source file: .js"


def test_analysis_is_idempotent():
    snippets = [_snippet("a", "import os", "python"), _snippet("b", "")]
    analyzer = ProjectAnalyzer()

    first = analyzer.analyze(snippets)
    second = analyzer.analyze(snippets)

    assert first == second
    assert first.model_dump_json() == second.model_dump_json()


def test_markdown_export():
    report = analyze([_snippet("app", "const r = require('express')")])

    text = report.to_markdown()

    assert "- root_project/\n  - app.js" in text
    assert "- `express`" in text
    assert "4. Configure environment variables and run the system." in text


def test_markdown_export_without_dependencies():
    text = ScaffoldReport(steps=[ROOT_STEP], errors=[NO_CODE_ERROR]).to_markdown()

    assert "No external libraries detected." in text
    assert "## Warnings" in text
