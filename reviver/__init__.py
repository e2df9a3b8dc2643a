"""Core package for the snippet workspace synchronizer and scaffold analyzer."""

from .analysis import ProjectAnalyzer, ScaffoldReport, analyze, extract_dependencies
from .snippet import Snippet, SnippetStorage
from .sync import (
    InMemoryDocumentStore,
    LocalIdentityProvider,
    RedisDocumentStore,
    SyncConfig,
    SyncState,
    WorkspaceSynchronizer,
    WritePolicy,
)

__all__ = [
    "InMemoryDocumentStore",
    "LocalIdentityProvider",
    "ProjectAnalyzer",
    "RedisDocumentStore",
    "ScaffoldReport",
    "Snippet",
    "SnippetStorage",
    "SyncConfig",
    "SyncState",
    "WorkspaceSynchronizer",
    "WritePolicy",
    "analyze",
    "extract_dependencies",
]
