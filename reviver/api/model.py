"""Pydantic models for the public API surface."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, field_validator

from ..snippet import LANGUAGES, Snippet, get_extension
from ..sync import SyncStatus

LANGUAGE_IDS = frozenset(info.id for info in LANGUAGES)


def _check_language(value: str | None) -> str | None:
    if value is not None and value not in LANGUAGE_IDS:
        raise ValueError(f"Unsupported language '{value}'; expected one of {sorted(LANGUAGE_IDS)}")
    return value


class SnippetCreateRequest(BaseModel):
    title: str | None = Field(None, description="File base name; defaults to module_N")
    content: str = Field("", description="Source text of the module")
    language: str = Field("javascript", description="Language identifier")

    @field_validator("language")
    @classmethod
    def check_language(cls, value: str | None) -> str | None:
        return _check_language(value)


class SnippetUpdateRequest(BaseModel):
    title: str | None = Field(None, description="New file base name")
    content: str | None = Field(None, description="New source text")
    language: str | None = Field(None, description="New language identifier")

    @field_validator("language")
    @classmethod
    def check_language(cls, value: str | None) -> str | None:
        return _check_language(value)


class SnippetResponse(BaseModel):
    id: str
    title: str
    content: str
    language: str
    extension: str

    @classmethod
    def from_snippet(cls, snippet: Snippet) -> "SnippetResponse":
        return cls(
            id=snippet.id,
            title=snippet.title,
            content=snippet.content,
            language=snippet.language,
            extension=get_extension(snippet.language),
        )


class WorkspaceResponse(BaseModel):
    status: SyncStatus
    snippets: List[SnippetResponse]


class AnalyzeRequest(BaseModel):
    snippets: List[Snippet] = Field(default_factory=list, description="Ordered snippets to analyze")


__all__ = [
    "AnalyzeRequest",
    "LANGUAGE_IDS",
    "SnippetCreateRequest",
    "SnippetResponse",
    "SnippetUpdateRequest",
    "WorkspaceResponse",
]
