from __future__ import annotations

import uuid
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class LanguageInfo(NamedTuple):
    """Static metadata for a supported snippet language."""
    id: str
    extension: str
    label: str


LANGUAGES: tuple[LanguageInfo, ...] = (
    LanguageInfo("javascript", ".js", "JavaScript"),
    LanguageInfo("typescript", ".ts", "TypeScript"),
    LanguageInfo("python", ".py", "Python"),
    LanguageInfo("html", ".html", "HTML"),
    LanguageInfo("css", ".css", "CSS"),
    LanguageInfo("json", ".json", "JSON"),
    LanguageInfo("markdown", ".md", "Markdown"),
)

DEFAULT_LANGUAGE = "javascript"
FALLBACK_EXTENSION = ".txt"

_EXTENSIONS = {info.id: info.extension for info in LANGUAGES}
_BY_EXTENSION = {info.extension: info.id for info in LANGUAGES}


def get_extension(language: str | None) -> str:
    """Return the file extension for ``language`` (``.txt`` when unknown)."""
    return _EXTENSIONS.get(language or "", FALLBACK_EXTENSION)


def language_for_extension(extension: str) -> str | None:
    if not extension:
        return None
    normalized = extension.lower()
    if not normalized.startswith("."):
        normalized = f".{normalized}"
    return _BY_EXTENSION.get(normalized)


class Snippet(BaseModel):
    """One named, language-tagged block of source text in a workspace."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, frozen=True)
    title: str = ""
    content: str = ""
    language: str = DEFAULT_LANGUAGE

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    @property
    def extension(self) -> str:
        return get_extension(self.language)

    @property
    def filename(self) -> str:
        return f"{self.title}{self.extension}"

    def is_blank(self) -> bool:
        return not self.content.strip()


__all__ = [
    "DEFAULT_LANGUAGE",
    "FALLBACK_EXTENSION",
    "LANGUAGES",
    "LanguageInfo",
    "Snippet",
    "get_extension",
    "language_for_extension",
]
