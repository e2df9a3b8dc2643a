"""Snippet data model and the local workspace store."""

from .model import LANGUAGES, LanguageInfo, Snippet, get_extension, language_for_extension
from .snippet_storage import SnippetStorage, seed_snippets

__all__ = [
    "LANGUAGES",
    "LanguageInfo",
    "Snippet",
    "SnippetStorage",
    "get_extension",
    "language_for_extension",
    "seed_snippets",
]
