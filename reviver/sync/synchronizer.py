"""Reconcile the local snippet store with a remote workspace document.

The synchronizer is a small state machine::

    uninitialized --session id--> loading --first snapshot--> ready

``syncing`` is layered on top of ``ready`` and is true while at least one
write for the active session is in flight. Local intents are applied
optimistically and persisted in the background; inbound snapshots that differ
from local state replace it (the remote document is authoritative).

Writes are ordered according to ``SyncConfig.write_policy``. With
``LAST_WRITE_WINS`` every write is an independent task and the remote value
is whichever write completes last, even if that reorders local intents.
``SEQUENTIAL`` serializes writes so the remote follows intent order.

Intents are refused while ``loading``: the local list is still empty and
persisting it would replace the user's remote workspace.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Set

from pydantic import BaseModel, ValidationError

from ..analysis import ProjectAnalyzer, ScaffoldReport
from ..errors import IdentityFailure, ReviverError, SubscriptionFailure, WriteFailure
from ..exception_handler import ErrorHandler
from ..snippet import Snippet, SnippetStorage, seed_snippets
from .adapters import DocumentSnapshot, DocumentStore, IdentityProvider, Unsubscribe
from .config import SyncConfig, WritePolicy

logger = logging.getLogger("reviver")

ChangeListener = Callable[[List[Snippet]], None]


class SyncState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class SyncStatus(BaseModel):
    """Snapshot of the synchronizer's externally visible status."""

    state: SyncState
    syncing: bool
    session_id: str | None = None
    revision: int = 0
    snippet_count: int = 0
    error_count: int = 0


class WorkspaceSynchronizer:
    """Own the local snippet store and mirror it to a remote document."""

    def __init__(
        self,
        store: DocumentStore,
        identity: IdentityProvider,
        *,
        config: SyncConfig | None = None,
        storage: SnippetStorage | None = None,
        analyzer: ProjectAnalyzer | None = None,
        error_handler: ErrorHandler | None = None,
    ) -> None:
        self.store = store
        self.identity = identity
        self.config = config or SyncConfig()
        self.storage = storage or SnippetStorage()
        self.analyzer = analyzer or ProjectAnalyzer()
        self.error_handler = error_handler or ErrorHandler()

        self.state = SyncState.UNINITIALIZED
        self.session_id: str | None = None
        self.report: ScaffoldReport | None = None
        self.revision = 0

        self._generation = 0
        self._write_seq = 0
        self._in_flight: Set[int] = set()
        self._pending: Set[asyncio.Task[None]] = set()
        self._write_lock = asyncio.Lock()
        self._listeners: List[ChangeListener] = []
        self._unsubscribe: Unsubscribe | None = None
        self._identity_unsubscribe: Unsubscribe | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def syncing(self) -> bool:
        return bool(self._in_flight)

    @property
    def path(self) -> str | None:
        if self.session_id is None:
            return None
        return self.config.workspace_path(self.session_id)

    async def start(self) -> None:
        """Resolve the session and open the workspace subscription.

        An identity failure is logged and leaves the synchronizer
        ``uninitialized``; it is not retried.
        """
        if self._identity_unsubscribe is None:
            self._identity_unsubscribe = self.identity.on_session_change(self._on_session_change)

        try:
            session_id = await self.identity.resolve_session()
        except Exception as exc:
            self._record_failure(IdentityFailure, "Session resolution failed", exc)
            return

        self.open_session(session_id)

    def open_session(self, session_id: str) -> None:
        """Start mirroring the workspace document scoped to ``session_id``."""
        if session_id == self.session_id and self._unsubscribe is not None:
            return

        self._release_subscription()
        self._generation += 1
        generation = self._generation

        self.session_id = session_id
        self.state = SyncState.LOADING
        self.report = None
        self._in_flight.clear()
        self._clear_local()

        path = self.config.workspace_path(session_id)
        logger.info("Opening workspace %s", path)
        try:
            self._unsubscribe = self.store.subscribe(
                path,
                lambda snapshot: self._on_snapshot(generation, snapshot),
                lambda exc: self._on_subscription_error(generation, exc),
            )
        except Exception as exc:
            self._on_subscription_error(generation, exc)

    async def flush(self) -> None:
        """Wait until every write issued so far has settled."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def close(self) -> None:
        """Release the subscription and identity listener.

        In-flight writes are left to complete.
        """
        self._release_subscription()
        if self._identity_unsubscribe is not None:
            self._identity_unsubscribe()
            self._identity_unsubscribe = None

    def status(self) -> SyncStatus:
        return SyncStatus(
            state=self.state,
            syncing=self.syncing,
            session_id=self.session_id,
            revision=self.revision,
            snippet_count=self.storage.get_snippet_count(),
            error_count=self.error_handler.error_count,
        )

    def add_listener(self, listener: ChangeListener) -> Unsubscribe:
        """Register ``listener`` for visible changes to the snippet list."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    @property
    def snippets(self) -> List[Snippet]:
        return self.storage.get_all_snippets()

    @property
    def loading(self) -> bool:
        return self.state is SyncState.LOADING

    def add_snippet(self, **fields: Any) -> Snippet | None:
        if self._refuse_while_loading("add"):
            return None
        snippet = self.storage.add_snippet(**fields)
        self._local_mutation()
        return snippet

    def update_snippet(self, snippet_id: str, **updates: Any) -> Snippet | None:
        if self._refuse_while_loading("update"):
            return None
        snippet = self.storage.update_snippet(snippet_id, **updates)
        if snippet is not None:
            self._local_mutation()
        return snippet

    def remove_snippet(self, snippet_id: str) -> bool:
        if self._refuse_while_loading("remove"):
            return False
        removed = self.storage.remove_snippet(snippet_id)
        if removed:
            self._local_mutation()
        return removed

    def request_analysis(self) -> ScaffoldReport:
        self.report = self.analyzer.analyze(self.storage.get_all_snippets())
        return self.report

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    def _on_session_change(self, session_id: str | None) -> None:
        if session_id is None:
            logger.info("Session ended; closing workspace subscription")
            self._release_subscription()
            self._generation += 1
            self.session_id = None
            self.state = SyncState.UNINITIALIZED
            self.report = None
            self._in_flight.clear()
            self._clear_local()
            return
        self.open_session(session_id)

    def _on_snapshot(self, generation: int, snapshot: DocumentSnapshot) -> None:
        if generation != self._generation:
            logger.debug("Ignoring snapshot for stale session (%s)", snapshot.path)
            return

        if self.state is SyncState.LOADING:
            if snapshot.exists:
                self._adopt(self._parse_snippets(snapshot.data))
            else:
                logger.info("Creating workspace document %s", snapshot.path)
                self._adopt(seed_snippets())
                self._schedule_write(create=True)
            self.state = SyncState.READY
            return

        if not snapshot.exists:
            logger.warning("Workspace document %s disappeared; keeping local state", snapshot.path)
            return

        self._adopt(self._parse_snippets(snapshot.data))

    def _on_subscription_error(self, generation: int, exc: Exception) -> None:
        if generation != self._generation:
            return
        self._record_failure(
            SubscriptionFailure,
            "Workspace subscription failed",
            exc,
            path=self.path,
        )

    def _adopt(self, incoming: List[Snippet]) -> None:
        if self.storage.matches(incoming):
            logger.debug("Remote snapshot matches local state; skipping")
            return
        self.storage.replace_all(incoming)
        self._changed()

    @staticmethod
    def _parse_snippets(data: Mapping[str, Any] | None) -> List[Snippet]:
        snippets: List[Snippet] = []
        for raw in (data or {}).get("snippets") or []:
            if not isinstance(raw, Mapping) or not raw.get("id"):
                # A generated id would differ on every snapshot.
                logger.warning("Skipping snippet without id in workspace document: %r", raw)
                continue
            try:
                snippets.append(Snippet.model_validate(raw))
            except ValidationError:
                logger.warning("Skipping malformed snippet in workspace document: %r", raw)
        return snippets

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    def _refuse_while_loading(self, intent: str) -> bool:
        if self.state is not SyncState.LOADING:
            return False
        logger.info("Ignoring %s while workspace %s is loading", intent, self.path)
        return True

    def _clear_local(self) -> None:
        if self.storage.get_snippet_count():
            self.storage.replace_all([])
            self._changed()

    def _local_mutation(self) -> None:
        self._changed()
        self._schedule_write()

    def _changed(self) -> None:
        self.revision += 1
        snippets = self.storage.get_all_snippets()
        for listener in list(self._listeners):
            try:
                listener(snippets)
            except Exception:  # pragma: no cover - listener errors are logged only
                logger.exception("Workspace change listener failed")

    def _schedule_write(self, *, create: bool = False) -> asyncio.Task[None] | None:
        path = self.path
        if path is None or self.state is SyncState.UNINITIALIZED:
            logger.debug("No active session; keeping change local only")
            return None

        self._write_seq += 1
        write_id = self._write_seq
        payload: Dict[str, Any] = {"snippets": self.storage.to_documents()}
        self._in_flight.add(write_id)

        task = asyncio.get_running_loop().create_task(
            self._persist(path, payload, self._generation, write_id, self.session_id, create=create)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _persist(
        self,
        path: str,
        payload: Dict[str, Any],
        generation: int,
        write_id: int,
        session_id: str | None,
        *,
        create: bool,
    ) -> None:
        try:
            if self.config.write_policy is WritePolicy.SEQUENTIAL:
                async with self._write_lock:
                    await self._write(path, payload, create=create)
            else:
                await self._write(path, payload, create=create)
        except Exception as exc:
            self._record_failure(
                WriteFailure,
                "Failed to persist workspace",
                exc,
                session_id=session_id,
                path=path,
            )
        else:
            logger.debug("Persisted %d snippets to %s (write %d)", len(payload["snippets"]), path, write_id)
        finally:
            if generation == self._generation:
                self._in_flight.discard(write_id)

    async def _write(self, path: str, payload: Dict[str, Any], *, create: bool) -> None:
        if create:
            await self.store.create(path, payload)
        else:
            await self.store.update(path, payload)

    # ------------------------------------------------------------------

    def _release_subscription(self) -> None:
        if self._unsubscribe is not None:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
            unsubscribe()

    def _record_failure(
        self,
        failure_type: type[ReviverError],
        message: str,
        cause: Exception,
        **context: Any,
    ) -> None:
        context.setdefault("session_id", self.session_id)
        failure = failure_type(message, **context)
        failure.__cause__ = cause
        self.error_handler.handle_error(failure, {"error": f"{type(cause).__name__}: {cause}"})


__all__ = ["ChangeListener", "SyncState", "SyncStatus", "WorkspaceSynchronizer"]
