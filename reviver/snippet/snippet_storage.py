from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Sequence

from .model import DEFAULT_LANGUAGE, Snippet

logger = logging.getLogger("reviver")

EDITABLE_FIELDS = frozenset({"title", "content", "language"})
SEED_TITLE = "app"


def seed_snippets() -> List[Snippet]:
    """Build the one-element collection used for a first-time workspace."""
    return [Snippet(title=SEED_TITLE, content="", language=DEFAULT_LANGUAGE)]


class SnippetStorage:
    """Ordered, in-memory collection of snippets for one workspace.

    Updates replace the stored ``Snippet`` instead of mutating it, so a list
    returned by ``get_all_snippets`` is never changed behind the caller's back.
    """

    def __init__(self, snippets: Iterable[Snippet] | None = None) -> None:
        self.snippets: List[Snippet] = list(snippets or [])

    def add_snippet(
        self,
        *,
        title: str | None = None,
        content: str = "",
        language: str = DEFAULT_LANGUAGE,
    ) -> Snippet:
        """Append a new snippet, auto-numbering its title when none is given."""
        if title is None:
            title = f"module_{len(self.snippets) + 1}"
        snippet = Snippet(title=title, content=content, language=language)
        self.snippets = [*self.snippets, snippet]
        return snippet

    def update_snippet(self, snippet_id: str, **updates: Any) -> Snippet | None:
        """Apply ``updates`` to the snippet with ``snippet_id``.

        Returns the updated snippet, or ``None`` when the id is unknown.
        """
        unknown = set(updates) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update snippet fields: {', '.join(sorted(unknown))}")

        index = self._index_of(snippet_id)
        if index is None:
            return None

        current = self.snippets[index]
        updated = Snippet.model_validate({**current.model_dump(), **updates, "id": current.id})
        snippets = list(self.snippets)
        snippets[index] = updated
        self.snippets = snippets
        return updated

    def remove_snippet(self, snippet_id: str) -> bool:
        """Remove a snippet; refused when it would leave the collection empty."""
        if len(self.snippets) <= 1:
            logger.debug("Refusing to remove %s: workspace must keep one snippet", snippet_id)
            return False
        index = self._index_of(snippet_id)
        if index is None:
            return False
        self.snippets = self.snippets[:index] + self.snippets[index + 1 :]
        return True

    def replace_all(self, snippets: Sequence[Snippet]) -> None:
        self.snippets = list(snippets)

    def get(self, snippet_id: str) -> Snippet | None:
        index = self._index_of(snippet_id)
        return None if index is None else self.snippets[index]

    def get_snippet_count(self) -> int:
        return len(self.snippets)

    def get_all_snippets(self) -> List[Snippet]:
        return list(self.snippets)

    def to_documents(self) -> List[Dict[str, Any]]:
        """Serialize the collection to plain JSON-like dicts."""
        return [snippet.model_dump() for snippet in self.snippets]

    def matches(self, snippets: Sequence[Snippet]) -> bool:
        """Deep value comparison against another snippet sequence."""
        return self.to_documents() == [snippet.model_dump() for snippet in snippets]

    def _index_of(self, snippet_id: str) -> int | None:
        for index, snippet in enumerate(self.snippets):
            if snippet.id == snippet_id:
                return index
        return None


__all__ = ["EDITABLE_FIELDS", "SEED_TITLE", "SnippetStorage", "seed_snippets"]
