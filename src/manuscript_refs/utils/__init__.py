"""Shared utilities: logging, errors, HTTP helpers and rate limiting."""
from .error_handling import (
    ReferenceEngineError,
    UnsupportedStyleError,
    ExternalServiceError,
    ArticleNotFoundError,
    api_error_handler,
)
from .logging_setup import setup_logging, log_operation, log_api_call

__all__ = [
    'ReferenceEngineError',
    'UnsupportedStyleError',
    'ExternalServiceError',
    'ArticleNotFoundError',
    'api_error_handler',
    'setup_logging',
    'log_operation',
    'log_api_call',
]
