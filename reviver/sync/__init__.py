"""Workspace synchronization between the local store and a remote document."""

from .adapters import DocumentSnapshot, DocumentStore, IdentityProvider
from .config import SyncConfig, WritePolicy
from .identity import LocalIdentityProvider
from .memory import InMemoryDocumentStore
from .redis_store import RedisDocumentStore
from .synchronizer import SyncState, SyncStatus, WorkspaceSynchronizer

__all__ = [
    "DocumentSnapshot",
    "DocumentStore",
    "IdentityProvider",
    "InMemoryDocumentStore",
    "LocalIdentityProvider",
    "RedisDocumentStore",
    "SyncConfig",
    "SyncState",
    "SyncStatus",
    "WorkspaceSynchronizer",
    "WritePolicy",
]
