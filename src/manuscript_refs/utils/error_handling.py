"""Error types and error handling utilities."""
import logging
from functools import wraps
from typing import Any, Callable, Optional


class ReferenceEngineError(Exception):
    """Base exception for the reference engine."""


class UnsupportedStyleError(ReferenceEngineError, ValueError):
    """Raised when a citation style identifier is not recognised."""

    def __init__(self, style: Any):
        self.style = style
        super().__init__(f"Unsupported citation style: {style}")


class ExternalServiceError(ReferenceEngineError):
    """A collaborator (HTTP API, store, search) failed or timed out."""

    def __init__(self, message: str, status_code: Optional[int] = None, response_text: Optional[str] = None):
        self.message = message
        self.status_code = status_code
        self.response_text = response_text
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.status_code:
            return f"{self.message} (Status: {self.status_code})"
        return self.message


class ArticleNotFoundError(ReferenceEngineError, LookupError):
    """The article store has no article with the requested id."""

    def __init__(self, article_id: str):
        self.article_id = article_id
        super().__init__(f"Article {article_id} not found")


def api_error_handler(fallback: Any = None) -> Callable:
    """Decorator for handling API-related errors.

    The wrapped call is logged and replaced by ``fallback`` when it raises.
    A list fallback is copied so callers never share it.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logging.getLogger(func.__module__).error(f"API error in {func.__name__}: {str(e)}")
                return list(fallback) if isinstance(fallback, list) else fallback
        return wrapper
    return decorator
