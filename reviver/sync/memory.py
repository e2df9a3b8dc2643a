from __future__ import annotations

import asyncio
import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from .adapters import DocumentSnapshot, ErrorCallback, SnapshotCallback, Unsubscribe

logger = logging.getLogger("reviver")


@dataclass(slots=True)
class _Subscription:
    on_snapshot: SnapshotCallback
    on_error: ErrorCallback
    active: bool = True


class InMemoryDocumentStore:
    """Process-local document store with live subscriptions.

    Snapshots are scheduled on the running event loop with ``call_soon`` so
    every subscriber sees them in modification order, never re-entrantly from
    inside a write.
    """

    def __init__(self, documents: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self._documents: Dict[str, Dict[str, Any]] = {
            path: copy.deepcopy(dict(value)) for path, value in (documents or {}).items()
        }
        self._subscriptions: Dict[str, List[_Subscription]] = {}

    def get(self, path: str) -> Dict[str, Any] | None:
        document = self._documents.get(path)
        return copy.deepcopy(document) if document is not None else None

    def subscribe(
        self,
        path: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        subscription = _Subscription(on_snapshot, on_error)
        self._subscriptions.setdefault(path, []).append(subscription)
        asyncio.get_running_loop().call_soon(self._deliver, subscription, self._snapshot(path))

        def unsubscribe() -> None:
            subscription.active = False
            subscribers = self._subscriptions.get(path, [])
            if subscription in subscribers:
                subscribers.remove(subscription)

        return unsubscribe

    async def create(self, path: str, value: Mapping[str, Any]) -> None:
        self._documents[path] = copy.deepcopy(dict(value))
        self._notify(path)

    async def update(self, path: str, partial: Mapping[str, Any]) -> None:
        document = self._documents.get(path)
        if document is None:
            raise KeyError(f"Document does not exist: {path}")
        document.update(copy.deepcopy(dict(partial)))
        self._notify(path)

    def _snapshot(self, path: str) -> DocumentSnapshot:
        document = self._documents.get(path)
        if document is None:
            return DocumentSnapshot(path=path, exists=False)
        return DocumentSnapshot(path=path, exists=True, data=copy.deepcopy(document))

    def _notify(self, path: str) -> None:
        subscribers = self._subscriptions.get(path)
        if not subscribers:
            return
        loop = asyncio.get_running_loop()
        for subscription in list(subscribers):
            loop.call_soon(self._deliver, subscription, self._snapshot(path))

    @staticmethod
    def _deliver(subscription: _Subscription, snapshot: DocumentSnapshot) -> None:
        if not subscription.active:
            return
        try:
            subscription.on_snapshot(snapshot)
        except Exception as exc:  # pragma: no cover - surfaced through on_error
            logger.debug("Snapshot callback failed for %s", snapshot.path, exc_info=True)
            subscription.on_error(exc)


__all__ = ["InMemoryDocumentStore"]
