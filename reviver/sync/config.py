from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_APP_ID = "project-reviver-pro"


class WritePolicy(str, Enum):
    """How concurrent remote writes are ordered."""

    # Every write runs independently; the last one to complete wins remotely.
    LAST_WRITE_WINS = "last-write-wins"
    # Writes are serialized, so the remote value follows local intent order.
    SEQUENTIAL = "sequential"


@dataclass(slots=True)
class SyncConfig:
    """Configuration for the workspace synchronizer."""

    app_id: str = DEFAULT_APP_ID
    write_policy: WritePolicy = WritePolicy.LAST_WRITE_WINS

    def workspace_path(self, session_id: str) -> str:
        return f"artifacts/{self.app_id}/users/{session_id}/settings/workspace"


__all__ = ["DEFAULT_APP_ID", "SyncConfig", "WritePolicy"]
