from __future__ import annotations

import logging
import uuid
from typing import List

from .adapters import SessionCallback, Unsubscribe

logger = logging.getLogger("reviver")


class LocalIdentityProvider:
    """Process-local identity provider.

    Resolves to a configured session id (token sign-in) or, when none is
    configured, to a freshly generated anonymous id. Listeners registered via
    ``on_session_change`` are told about every resolved or switched session.
    """

    def __init__(self, session_id: str | None = None) -> None:
        self._configured_id = session_id
        self._session_id: str | None = None
        self._listeners: List[SessionCallback] = []

    @property
    def session_id(self) -> str | None:
        return self._session_id

    async def resolve_session(self) -> str:
        if self._session_id is None:
            session_id = self._configured_id or uuid.uuid4().hex
            logger.info(
                "Signed in %s session %s",
                "configured" if self._configured_id else "anonymous",
                session_id[:8],
            )
            self._set_session(session_id)
        assert self._session_id is not None
        return self._session_id

    def switch_session(self, session_id: str | None) -> None:
        """Change the active session (``None`` signs out)."""
        self._set_session(session_id)

    def on_session_change(self, callback: SessionCallback) -> Unsubscribe:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _set_session(self, session_id: str | None) -> None:
        if session_id == self._session_id:
            return
        self._session_id = session_id
        for listener in list(self._listeners):
            try:
                listener(session_id)
            except Exception:  # pragma: no cover - listener bugs must not break sign-in
                logger.exception("Session change listener failed")


__all__ = ["LocalIdentityProvider"]
