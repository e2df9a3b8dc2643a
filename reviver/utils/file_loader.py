import json
import logging
import os
from pathlib import Path
from typing import List, NamedTuple

from pydantic import ValidationError

from ..snippet import LANGUAGES, Snippet, language_for_extension


class FileData(NamedTuple):
    """Pre-loaded source file ready to become a snippet."""
    path: str
    relative_path: str
    content: str
    size: int
    extension: str


class FileLoader:
    """Discover source files in the supported languages and load them as snippets."""

    logger = logging.getLogger("reviver")

    # Directories to exclude from search
    EXCLUDE_DIRS = {
        '__pycache__', '.venv', 'venv', 'node_modules', 'target', 'dist',
        'build', '.git', '.svn', '.hg', 'coverage', '.pytest_cache',
        '.tox', 'htmlcov', '.mypy_cache',
    }

    # Files to exclude (patterns)
    EXCLUDE_PATTERNS = {
        'test_', '_test.', '.test.', '.spec.', '_spec.',
        '.min.', '-min.', '.bundle.', '.chunk.'
    }

    DEFAULT_MAX_FILE_SIZE = 500 * 1024

    def __init__(self, max_file_size=None, exclude_tests=True):
        """Initialize file loader.

        Args:
            max_file_size: Optional maximum file size in bytes. Defaults to ~500 KB;
                pass 0 to disable the size cap.
            exclude_tests: Whether to exclude test files (default: True)
        """
        if max_file_size is None:
            max_file_size = self.DEFAULT_MAX_FILE_SIZE
        self.max_file_size = max_file_size or None
        self.exclude_tests = exclude_tests
        self.extensions = {info.extension for info in LANGUAGES}

    def detect_files(self, path: str) -> List[Path]:
        """Return qualifying files under ``path`` (a file or directory), sorted.

        Raises:
            FileNotFoundError: If path doesn't exist
            ValueError: If path is neither file nor directory
        """
        path_obj = Path(path)

        if not path_obj.exists():
            raise FileNotFoundError(f"Path not found: {path}")

        if path_obj.is_file():
            return [path_obj] if self._should_include_file(path_obj) else []
        if not path_obj.is_dir():
            raise ValueError(f"Path is neither file nor directory: {path}")

        files = []
        for root, dirs, filenames in os.walk(path_obj):
            dirs[:] = sorted(d for d in dirs if d not in self.EXCLUDE_DIRS)
            for filename in sorted(filenames):
                file_path = Path(root) / filename
                if self._should_include_file(file_path):
                    files.append(file_path)
        return sorted(files, key=lambda p: p.relative_to(path_obj).as_posix())

    def load_files(self, path: str) -> List[FileData]:
        """Detect and load all files into memory."""
        base_input = Path(path).resolve()
        base_dir = base_input.parent if base_input.is_file() else base_input

        files_data = []
        for file_path in self.detect_files(path):
            try:
                content = file_path.read_text(encoding='utf-8')
            except (UnicodeDecodeError, OSError) as e:
                self.logger.warning("Failed to load %s: %s", file_path, e)
                continue
            files_data.append(FileData(
                path=str(file_path.resolve()),
                relative_path=Path(os.path.relpath(file_path.resolve(), start=base_dir)).as_posix(),
                content=content,
                size=len(content),
                extension=file_path.suffix.lower(),
            ))
        return files_data

    def load_snippets(self, path: str) -> List[Snippet]:
        """Load files under ``path`` as snippets titled after their file stem."""
        snippets = []
        for file_data in self.load_files(path):
            language = language_for_extension(file_data.extension)
            if language is None:
                continue
            title = Path(file_data.relative_path).with_suffix("").as_posix()
            snippets.append(Snippet(title=title, content=file_data.content, language=language))
        self.logger.info("Loaded %d snippets from %s", len(snippets), path)
        return snippets

    def _should_include_file(self, file_path: Path) -> bool:
        if file_path.suffix.lower() not in self.extensions:
            return False

        if self.max_file_size is not None:
            try:
                if file_path.stat().st_size > self.max_file_size:
                    return False
            except OSError:
                return False

        if self.exclude_tests:
            filename_lower = file_path.name.lower()
            if any(pattern in filename_lower for pattern in self.EXCLUDE_PATTERNS):
                return False

        return True


def load_workspace_document(path: str) -> List[Snippet]:
    """Read a workspace JSON document (``{"snippets": [...]}``) from disk."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    raw_snippets = data.get("snippets", []) if isinstance(data, dict) else data
    if not isinstance(raw_snippets, list):
        raise ValueError(f"Workspace document {path} has no snippet list")

    try:
        return [Snippet.model_validate(item) for item in raw_snippets]
    except ValidationError as exc:
        raise ValueError(f"Invalid snippet in {path}: {exc}") from exc
