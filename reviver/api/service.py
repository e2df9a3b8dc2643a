"""Service-layer helpers for workspace intents and scaffold analysis."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from fastapi import HTTPException

from ..analysis import ProjectAnalyzer, ScaffoldReport
from ..exception_handler import ErrorHandler
from ..sync import (
    DocumentStore,
    InMemoryDocumentStore,
    LocalIdentityProvider,
    RedisDocumentStore,
    SyncConfig,
    WorkspaceSynchronizer,
    WritePolicy,
)
from ..sync.config import DEFAULT_APP_ID
from .model import (
    AnalyzeRequest,
    SnippetCreateRequest,
    SnippetResponse,
    SnippetUpdateRequest,
    WorkspaceResponse,
)

logger = logging.getLogger("reviver")

STORE_REDIS = "redis"
STORE_MEMORY = "memory"


@dataclass(slots=True)
class ApiSettings:
    """Runtime configuration for the API server."""

    redis_url: str
    store_backend: str
    app_id: str
    session_id: str | None
    write_policy: WritePolicy
    log_level: str

    @classmethod
    def from_env(cls) -> "ApiSettings":
        def _choice_env(name: str, default: str, choices: set[str]) -> str:
            raw = (os.getenv(name) or "").strip().lower()
            if not raw:
                return default
            if raw not in choices:
                logger.warning("Invalid value for %s: %s", name, raw)
                return default
            return raw

        policy = _choice_env(
            "REVIVER_WRITE_POLICY",
            WritePolicy.LAST_WRITE_WINS.value,
            {policy.value for policy in WritePolicy},
        )

        return cls(
            redis_url=os.getenv("REDIS_URL", "redis://127.0.0.1:6379/0"),
            store_backend=_choice_env("REVIVER_STORE", STORE_REDIS, {STORE_REDIS, STORE_MEMORY}),
            app_id=os.getenv("REVIVER_APP_ID") or DEFAULT_APP_ID,
            session_id=os.getenv("REVIVER_SESSION_ID") or None,
            write_policy=WritePolicy(policy),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def sync_config(self) -> SyncConfig:
        return SyncConfig(app_id=self.app_id, write_policy=self.write_policy)


def build_document_store(settings: ApiSettings) -> DocumentStore:
    if settings.store_backend == STORE_MEMORY:
        logger.info("Using in-memory workspace store")
        return InMemoryDocumentStore()
    return RedisDocumentStore.from_url(settings.redis_url)


def build_synchronizer(
    settings: ApiSettings,
    *,
    store: DocumentStore | None = None,
) -> WorkspaceSynchronizer:
    return WorkspaceSynchronizer(
        store if store is not None else build_document_store(settings),
        LocalIdentityProvider(settings.session_id),
        config=settings.sync_config(),
        error_handler=ErrorHandler(settings.log_level),
    )


def workspace_service(synchronizer: WorkspaceSynchronizer) -> WorkspaceResponse:
    return WorkspaceResponse(
        status=synchronizer.status(),
        snippets=[SnippetResponse.from_snippet(snippet) for snippet in synchronizer.snippets],
    )


def _require_loaded(synchronizer: WorkspaceSynchronizer) -> None:
    if synchronizer.loading:
        raise HTTPException(status_code=503, detail="Workspace is still loading")


def add_snippet_service(
    payload: SnippetCreateRequest,
    synchronizer: WorkspaceSynchronizer,
) -> SnippetResponse:
    _require_loaded(synchronizer)
    snippet = synchronizer.add_snippet(
        title=payload.title,
        content=payload.content,
        language=payload.language,
    )
    return SnippetResponse.from_snippet(snippet)


def update_snippet_service(
    snippet_id: str,
    payload: SnippetUpdateRequest,
    synchronizer: WorkspaceSynchronizer,
) -> SnippetResponse:
    _require_loaded(synchronizer)
    updates = payload.model_dump(exclude_none=True)
    if not updates:
        snippet = synchronizer.storage.get(snippet_id)
    else:
        snippet = synchronizer.update_snippet(snippet_id, **updates)

    if snippet is None:
        raise HTTPException(status_code=404, detail="Snippet not found")
    return SnippetResponse.from_snippet(snippet)


def remove_snippet_service(snippet_id: str, synchronizer: WorkspaceSynchronizer) -> None:
    _require_loaded(synchronizer)
    if synchronizer.storage.get(snippet_id) is None:
        raise HTTPException(status_code=404, detail="Snippet not found")
    if not synchronizer.remove_snippet(snippet_id):
        raise HTTPException(status_code=409, detail="A workspace must keep at least one snippet")


def request_analysis_service(synchronizer: WorkspaceSynchronizer) -> ScaffoldReport:
    return synchronizer.request_analysis()


def get_analysis_service(synchronizer: WorkspaceSynchronizer) -> ScaffoldReport:
    if synchronizer.report is None:
        raise HTTPException(status_code=404, detail="No analysis has been requested yet")
    return synchronizer.report


def analyze_snippets_service(payload: AnalyzeRequest) -> ScaffoldReport:
    return ProjectAnalyzer().analyze(payload.snippets)


__all__ = [
    "ApiSettings",
    "STORE_MEMORY",
    "STORE_REDIS",
    "add_snippet_service",
    "analyze_snippets_service",
    "build_document_store",
    "build_synchronizer",
    "get_analysis_service",
    "remove_snippet_service",
    "request_analysis_service",
    "update_snippet_service",
    "workspace_service",
]
