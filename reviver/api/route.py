"""FastAPI routes for workspace intents and scaffold analysis."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from ..analysis import ScaffoldReport
from ..sync import WorkspaceSynchronizer
from .model import (
    AnalyzeRequest,
    SnippetCreateRequest,
    SnippetResponse,
    SnippetUpdateRequest,
    WorkspaceResponse,
)
from .service import (
    add_snippet_service,
    analyze_snippets_service,
    get_analysis_service,
    remove_snippet_service,
    request_analysis_service,
    update_snippet_service,
    workspace_service,
)


def get_synchronizer(request: Request) -> WorkspaceSynchronizer:
    synchronizer = getattr(request.app.state, "synchronizer", None)
    if not isinstance(synchronizer, WorkspaceSynchronizer):
        raise RuntimeError("Workspace synchronizer has not been initialised")
    return synchronizer


router = APIRouter()


@router.get("/workspace", response_model=WorkspaceResponse)
async def get_workspace(
    synchronizer: WorkspaceSynchronizer = Depends(get_synchronizer),
) -> WorkspaceResponse:
    return workspace_service(synchronizer)


@router.post(
    "/workspace/snippets",
    response_model=SnippetResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_snippet(
    payload: SnippetCreateRequest,
    synchronizer: WorkspaceSynchronizer = Depends(get_synchronizer),
) -> SnippetResponse:
    return add_snippet_service(payload, synchronizer)


@router.patch("/workspace/snippets/{snippet_id}", response_model=SnippetResponse)
async def update_snippet(
    snippet_id: str,
    payload: SnippetUpdateRequest,
    synchronizer: WorkspaceSynchronizer = Depends(get_synchronizer),
) -> SnippetResponse:
    return update_snippet_service(snippet_id, payload, synchronizer)


@router.delete("/workspace/snippets/{snippet_id}", response_class=Response)
async def remove_snippet(
    snippet_id: str,
    synchronizer: WorkspaceSynchronizer = Depends(get_synchronizer),
) -> Response:
    """Remove a snippet; the last remaining snippet cannot be removed."""

    remove_snippet_service(snippet_id, synchronizer)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/workspace/analysis", response_model=ScaffoldReport)
async def request_analysis(
    synchronizer: WorkspaceSynchronizer = Depends(get_synchronizer),
) -> ScaffoldReport:
    return request_analysis_service(synchronizer)


@router.get("/workspace/analysis", response_model=ScaffoldReport)
async def get_analysis(
    synchronizer: WorkspaceSynchronizer = Depends(get_synchronizer),
) -> ScaffoldReport:
    return get_analysis_service(synchronizer)


@router.post("/analyze", response_model=ScaffoldReport)
async def analyze_snippets(payload: AnalyzeRequest) -> ScaffoldReport:
    return analyze_snippets_service(payload)


__all__ = ["router", "get_synchronizer"]
