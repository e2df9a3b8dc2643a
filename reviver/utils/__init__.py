"""Shared utility modules for the reviver project."""

from .file_loader import FileData, FileLoader, load_workspace_document

__all__ = [
    "FileData",
    "FileLoader",
    "load_workspace_document",
]
