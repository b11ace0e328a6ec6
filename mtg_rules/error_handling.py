"""
Error taxonomy and common error handling utilities for the MTG rules package.

Strategy-level failures (SourceError and its subclasses, ValidationFailure)
are recovered locally by the source resolver. Only AllSourcesExhausted and
EmptyParseResult ever reach the caller of a load cycle.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Any, Callable, List
from functools import wraps

logger = logging.getLogger(__name__)


class RulesError(Exception):
    """Base class for every error raised by the rules pipeline."""


class ValidationFailure(RulesError):
    """Fetched or cached text failed the structural sanity check."""


class SourceError(RulesError):
    """A single retrieval attempt failed."""


class SourceTimeout(SourceError):
    """A retrieval attempt exceeded its time bound."""

    def __init__(self, seconds: float, message: Optional[str] = None):
        self.seconds = seconds
        super().__init__(message or f"Timed out after {seconds:g}s")


class HttpStatusError(SourceError):
    """The server (or proxy) answered with a non-success status."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        super().__init__(message or f"HTTP status {status_code}")


class NetworkFailure(SourceError):
    """Transport, connection or local file failure."""


class AllSourcesExhausted(RulesError):
    """Every retrieval strategy failed or returned invalid content."""

    def __init__(self, last_error: Optional[str], attempts: Optional[List[Any]] = None):
        self.last_error = last_error
        self.attempts = list(attempts or [])
        super().__init__(
            f"Failed to fetch rules from all {len(self.attempts)} sources. "
            f"Last error: {last_error or 'no strategies configured'}"
        )


class EmptyParseResult(RulesError):
    """Parsing finished without producing a single entry; the document format likely changed."""

    def __init__(self, source: Optional[str] = None):
        self.source = source
        suffix = f" (source: {source})" if source else ""
        super().__init__(f"Rules text parsed into zero entries{suffix}")


@dataclass(frozen=True)
class WriteOutcome:
    """Result of a best-effort write. Callers log it and move on."""
    ok: bool
    error: Optional[str] = None


def handle_errors(default_return: Any = None, log_error: bool = True):
    """
    Decorator to handle common exceptions and provide consistent error logging.

    Args:
        default_return: Value to return on error
        log_error: Whether to log the error
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if log_error:
                    logger.error(f"Error in {func.__name__}: {e}")
                return default_return
        return wrapper
    return decorator


def best_effort(func: Callable, *args, error_msg: Optional[str] = None, **kwargs) -> WriteOutcome:
    """
    Run a side-effecting call whose failure must never fail the caller.

    Args:
        func: Function to execute
        *args: Arguments for the function
        error_msg: Custom error message prefix
        **kwargs: Keyword arguments for the function

    Returns:
        WriteOutcome describing whether the call went through
    """
    try:
        func(*args, **kwargs)
        return WriteOutcome(ok=True)
    except Exception as e:
        prefix = error_msg or f"Error in {getattr(func, '__name__', 'call')}"
        logger.warning(f"{prefix}: {e}")
        return WriteOutcome(ok=False, error=str(e))
