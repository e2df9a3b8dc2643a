"""Contracts for the external identity and document-store collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Protocol

Unsubscribe = Callable[[], None]


@dataclass(frozen=True, slots=True)
class DocumentSnapshot:
    """Value of a remote document at one point in its modification history."""

    path: str
    exists: bool
    data: Dict[str, Any] | None = None


SnapshotCallback = Callable[[DocumentSnapshot], None]
ErrorCallback = Callable[[Exception], None]
SessionCallback = Callable[[str | None], None]


class IdentityProvider(Protocol):
    async def resolve_session(self) -> str:
        """Sign in and return an opaque session id."""
        ...

    def on_session_change(self, callback: SessionCallback) -> Unsubscribe:
        ...


class DocumentStore(Protocol):
    def subscribe(
        self,
        path: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        """Listen to ``path``; snapshots arrive in modification order."""
        ...

    async def create(self, path: str, value: Mapping[str, Any]) -> None:
        ...

    async def update(self, path: str, partial: Mapping[str, Any]) -> None:
        """Merge ``partial`` into an existing document (``KeyError`` if missing)."""
        ...


__all__ = [
    "DocumentSnapshot",
    "DocumentStore",
    "ErrorCallback",
    "IdentityProvider",
    "SessionCallback",
    "SnapshotCallback",
    "Unsubscribe",
]
