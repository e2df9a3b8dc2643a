import logging
import traceback
from collections import deque
from typing import Any, Deque, Dict

from .errors import ReviverError


MAX_RECORDED_ERRORS = 100


class ErrorHandler:
    """Centralized logging and bookkeeping for synchronization failures.

    Only the most recent ``max_errors`` records are kept; ``error_count`` and
    the per-type totals cover every failure seen since the last clear.
    """

    def __init__(self, log_level: str = "INFO", max_errors: int = MAX_RECORDED_ERRORS):
        self.logger = self._setup_logging(log_level)
        self.errors: Deque[Dict[str, Any]] = deque(maxlen=max_errors)
        self.error_count = 0
        self._error_types: Dict[str, int] = {}

    def _setup_logging(self, level: str) -> logging.Logger:
        """Configure the shared ``reviver`` logger once."""
        logger = logging.getLogger("reviver")
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def handle_error(self, error: Exception, context: Dict[str, Any] | None = None) -> Dict[str, Any]:
        """Log ``error`` with its context and keep it for the summary."""
        merged: Dict[str, Any] = {}
        if isinstance(error, ReviverError):
            merged.update(error.context)
        if context:
            merged.update(context)

        cause = error.__cause__
        error_info = {
            "type": type(error).__name__,
            "message": str(error),
            "cause": f"{type(cause).__name__}: {cause}" if cause is not None else None,
            "context": merged,
            "traceback": traceback.format_exc() if self.logger.isEnabledFor(logging.DEBUG) else None,
        }

        self.logger.error(
            "%s: %s | Context: %s", error_info["type"], error_info["message"], merged
        )
        self.errors.append(error_info)
        self.error_count += 1
        self._error_types[error_info["type"]] = self._error_types.get(error_info["type"], 0) + 1
        return error_info

    def get_error_summary(self) -> Dict[str, Any]:
        """Generate summary of all collected errors."""
        return {
            "total_errors": self.error_count,
            "error_types": dict(self._error_types),
            "last_error": self.errors[-1]["message"] if self.errors else None,
        }

    def clear_errors(self) -> None:
        self.errors.clear()
        self.error_count = 0
        self._error_types.clear()

    def format_error_report(self) -> str:
        """Format a short human-readable error report."""
        summary = self.get_error_summary()

        if summary["total_errors"] == 0:
            return ""

        lines = [f"Error Summary: {summary['total_errors']} errors occurred", ""]
        for error_type, count in summary["error_types"].items():
            lines.append(f"  • {error_type}: {count}")

        recent = list(self.errors)[-5:]
        if recent:
            lines.append("")
            lines.append("Most recent:")
            for error in recent:
                lines.append(f"  • {error['type']}: {error['message']}")

        return "\n".join(lines)
