"""Exception types for workspace synchronization failures."""

from __future__ import annotations

from typing import Any, Dict


class ReviverError(Exception):
    """Base class for errors raised inside the reviver engines."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.context: Dict[str, Any] = {key: value for key, value in context.items() if value is not None}


class IdentityFailure(ReviverError):
    """The identity provider could not resolve a session."""


class SubscriptionFailure(ReviverError):
    """Listening to the remote workspace document failed."""


class WriteFailure(ReviverError):
    """Persisting the workspace to the remote document failed."""


__all__ = [
    "IdentityFailure",
    "ReviverError",
    "SubscriptionFailure",
    "WriteFailure",
]
