import asyncio

import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from reviver.api.model import AnalyzeRequest, SnippetCreateRequest, SnippetUpdateRequest
from reviver.api.route import (
    add_snippet,
    analyze_snippets,
    get_analysis,
    get_workspace,
    remove_snippet,
    request_analysis,
    update_snippet,
)
from reviver.api.service import STORE_MEMORY, ApiSettings, build_synchronizer
from reviver.snippet import Snippet
from reviver.sync import InMemoryDocumentStore, SyncState, WritePolicy


def _make_settings(**overrides) -> ApiSettings:
    values = dict(
        redis_url="redis://127.0.0.1:6379/0",
        store_backend=STORE_MEMORY,
        app_id="test-app",
        session_id="user-1",
        write_policy=WritePolicy.LAST_WRITE_WINS,
        log_level="INFO",
    )
    values.update(overrides)
    return ApiSettings(**values)


async def _started_synchronizer():
    store = InMemoryDocumentStore()
    synchronizer = build_synchronizer(_make_settings(), store=store)
    await synchronizer.start()
    for _ in range(3):
        await asyncio.sleep(0)
    await synchronizer.flush()
    return synchronizer, store


@pytest.mark.asyncio
async def test_workspace_starts_with_seed_snippet():
    synchronizer, _store = await _started_synchronizer()

    workspace = await get_workspace(synchronizer=synchronizer)

    assert workspace.status.state is SyncState.READY
    assert workspace.status.session_id == "user-1"
    assert [(s.title, s.extension) for s in workspace.snippets] == [("app", ".js")]


@pytest.mark.asyncio
async def test_add_update_and_remove_snippet_round_trip_to_store():
    synchronizer, store = await _started_synchronizer()

    created = await add_snippet(SnippetCreateRequest(language="python"), synchronizer=synchronizer)
    assert created.title == "module_2"
    assert created.extension == ".py"

    updated = await update_snippet(
        created.id,
        SnippetUpdateRequest(content="import requests"),
        synchronizer=synchronizer,
    )
    assert updated.content == "import requests"
    assert updated.language == "python"

    await synchronizer.flush()
    remote = store.get(synchronizer.path)
    assert [item["content"] for item in remote["snippets"]] == ["", "import requests"]

    response = await remove_snippet(created.id, synchronizer=synchronizer)
    assert response.status_code == 204
    await synchronizer.flush()
    assert len(store.get(synchronizer.path)["snippets"]) == 1


@pytest.mark.asyncio
async def test_update_unknown_snippet_returns_404():
    synchronizer, _store = await _started_synchronizer()

    with pytest.raises(HTTPException) as exc_info:
        await update_snippet("missing", SnippetUpdateRequest(title="x"), synchronizer=synchronizer)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_removing_last_snippet_is_refused():
    synchronizer, _store = await _started_synchronizer()
    (only,) = synchronizer.snippets

    with pytest.raises(HTTPException) as exc_info:
        await remove_snippet(only.id, synchronizer=synchronizer)

    assert exc_info.value.status_code == 409
    assert synchronizer.storage.get_snippet_count() == 1


@pytest.mark.asyncio
async def test_analysis_is_absent_until_requested():
    synchronizer, _store = await _started_synchronizer()

    with pytest.raises(HTTPException) as exc_info:
        await get_analysis(synchronizer=synchronizer)
    assert exc_info.value.status_code == 404

    report = await request_analysis(synchronizer=synchronizer)
    assert report.errors == ["No code detected. Please add logic to your snippets."]
    assert await get_analysis(synchronizer=synchronizer) == report


@pytest.mark.asyncio
async def test_stateless_analyze_endpoint():
    payload = AnalyzeRequest(
        snippets=[
            Snippet(title="server", content="const e = require('express')"),
            Snippet(title="client", content="import axios from 'axios/dist'", language="typescript"),
        ]
    )

    report = await analyze_snippets(payload)

    assert report.dependencies == ["express", "axios"]
    assert [f.filename for f in report.files] == ["server.js", "client.ts"]


def test_unsupported_language_is_rejected():
    with pytest.raises(ValidationError):
        SnippetCreateRequest(language="cobol")
    with pytest.raises(ValidationError):
        SnippetUpdateRequest(language="cobol")


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("REVIVER_STORE", "memory")
    monkeypatch.setenv("REVIVER_WRITE_POLICY", "sequential")
    monkeypatch.setenv("REVIVER_APP_ID", "custom-app")
    monkeypatch.delenv("REVIVER_SESSION_ID", raising=False)

    settings = ApiSettings.from_env()

    assert settings.store_backend == STORE_MEMORY
    assert settings.write_policy is WritePolicy.SEQUENTIAL
    assert settings.sync_config().workspace_path("u") == "artifacts/custom-app/users/u/settings/workspace"
    assert settings.session_id is None


def test_settings_fall_back_on_invalid_values(monkeypatch):
    monkeypatch.setenv("REVIVER_STORE", "mongo")
    monkeypatch.setenv("REVIVER_WRITE_POLICY", "causal")

    settings = ApiSettings.from_env()

    assert settings.store_backend == "redis"
    assert settings.write_policy is WritePolicy.LAST_WRITE_WINS


@pytest.mark.asyncio
async def test_intents_are_unavailable_while_workspace_loads():
    existing = {"id": "s1", "title": "main", "content": "import os", "language": "python"}
    settings = _make_settings()
    path = settings.sync_config().workspace_path("user-1")
    store = InMemoryDocumentStore({path: {"snippets": [existing]}})
    synchronizer = build_synchronizer(settings, store=store)
    await synchronizer.start()

    with pytest.raises(HTTPException) as exc_info:
        await add_snippet(SnippetCreateRequest(), synchronizer=synchronizer)
    assert exc_info.value.status_code == 503

    with pytest.raises(HTTPException) as exc_info:
        await remove_snippet("s1", synchronizer=synchronizer)
    assert exc_info.value.status_code == 503

    for _ in range(3):
        await asyncio.sleep(0)
    await synchronizer.flush()

    assert synchronizer.state is SyncState.READY
    assert store.get(path) == {"snippets": [existing]}
