import pytest

from reviver.snippet import Snippet, SnippetStorage, get_extension, language_for_extension, seed_snippets


def test_add_snippet_auto_numbers_title_with_default_language():
    storage = SnippetStorage(seed_snippets())

    added = storage.add_snippet()

    assert added.title == "module_2"
    assert added.language == "javascript"
    assert added.content == ""
    assert storage.get_snippet_count() == 2


def test_generated_ids_are_unique_and_immutable():
    first, second = Snippet(), Snippet()

    assert first.id != second.id
    with pytest.raises(ValueError):
        first.id = "other"


def test_update_replaces_snippet_in_place():
    storage = SnippetStorage([Snippet(id="a", title="a"), Snippet(id="b", title="b")])
    before = storage.get_all_snippets()

    updated = storage.update_snippet("b", content="x = 1", language="python")

    assert updated.id == "b"
    assert [s.id for s in storage.get_all_snippets()] == ["a", "b"]
    assert storage.get("b").language == "python"
    assert before[1].content == ""


def test_update_rejects_unknown_fields_and_ids():
    storage = SnippetStorage([Snippet(id="a")])

    assert storage.update_snippet("missing", title="x") is None
    with pytest.raises(ValueError):
        storage.update_snippet("a", id="b")


def test_remove_refuses_to_empty_collection():
    storage = SnippetStorage([Snippet(id="only")])

    assert storage.remove_snippet("only") is False
    assert storage.get_snippet_count() == 1


def test_remove_unknown_id_is_noop():
    storage = SnippetStorage([Snippet(id="a"), Snippet(id="b")])

    assert storage.remove_snippet("c") is False
    assert storage.remove_snippet("a") is True
    assert [s.id for s in storage.get_all_snippets()] == ["b"]


def test_matches_compares_by_value():
    storage = SnippetStorage([Snippet(id="a", title="t", content="c")])

    assert storage.matches([Snippet(id="a", title="t", content="c")])
    assert not storage.matches([Snippet(id="a", title="t", content="changed")])
    assert not storage.matches([])


def test_seed_snippet_shape():
    (seed,) = seed_snippets()

    assert (seed.title, seed.content, seed.language) == ("app", "", "javascript")


def test_extension_lookup():
    assert get_extension("typescript") == ".ts"
    assert get_extension("markdown") == ".md"
    assert get_extension("brainfuck") == ".txt"
    assert get_extension(None) == ".txt"
    assert language_for_extension("py") == "python"
    assert language_for_extension(".JSON") == "json"
    assert language_for_extension(".rs") is None
