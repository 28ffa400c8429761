"""API utilities with retry and error handling."""
import logging
import time
from functools import wraps
from typing import Any, Callable, TypeVar, Optional, Dict, List, cast

import requests
from requests import Response
from requests.exceptions import RequestException

from ..config import Config
from .error_handling import ExternalServiceError
from .logging_setup import log_api_call
from .rate_limiter import CROSSREF_RATE_LIMITER, SEMANTIC_SCHOLAR_RATE_LIMITER, RateLimiter

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def retry(
    max_retries: int = 3,
    backoff_factor: float = 0.5,
    status_codes: Optional[List[int]] = None,
) -> Callable[[F], F]:
    """
    Retry decorator with exponential backoff.

    Args:
        max_retries: Maximum number of retries
        backoff_factor: Backoff multiplier (e.g., 0.5 = 0.5, 1, 2, 4, ... seconds)
        status_codes: HTTP status codes to retry on. Defaults to [429, 500, 502, 503, 504]
    """
    if status_codes is None:
        status_codes = [429, 500, 502, 503, 504]

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            retries = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except (RequestException, ExternalServiceError) as e:
                    # Client errors other than rate limiting are final
                    if isinstance(e, ExternalServiceError) and e.status_code not in status_codes:
                        raise
                    retries += 1
                    if retries > max_retries:
                        logger.error(
                            f"Max retries ({max_retries}) exceeded for {func.__name__}: {str(e)}"
                        )
                        raise

                    wait_time = backoff_factor * (2 ** (retries - 1))
                    logger.warning(
                        f"Retry {retries}/{max_retries} for {func.__name__} "
                        f"after error: {str(e)}. Waiting {wait_time:.2f} seconds..."
                    )
                    time.sleep(wait_time)
                except Exception as e:
                    logger.error(f"Unexpected error in {func.__name__}: {str(e)}")
                    raise

        return cast(F, wrapper)
    return decorator


def handle_api_response(response: Response, api_name: str = "API") -> Dict[str, Any]:
    """
    Handle API response and raise appropriate exceptions.

    Args:
        response: The response object from requests
        api_name: Name of the API for error messages

    Returns:
        Parsed JSON response

    Raises:
        ExternalServiceError: If the response indicates an error
    """
    try:
        response.raise_for_status()
    except requests.exceptions.HTTPError as e:
        status_code = response.status_code
        error_msg = f"{api_name} request failed"
        logger.error(f"{error_msg} (Status: {status_code}): {str(e)}")
        raise ExternalServiceError(error_msg, status_code, str(e)) from e

    try:
        return response.json()
    except ValueError as e:
        error_msg = f"{api_name} returned invalid JSON"
        logger.error(f"{error_msg}: {str(response.text)[:200]}...")
        raise ExternalServiceError(error_msg, response.status_code, response.text) from e


def _rate_limited_get(
    url: str,
    params: Dict[str, Any],
    api_name: str,
    limiter: RateLimiter,
) -> Dict[str, Any]:
    with limiter:
        start_time = time.time()
        response = requests.get(url, params=params, timeout=Config.REQUEST_TIMEOUT)
        elapsed = time.time() - start_time

    logger.info(f"{api_name} request completed in {elapsed:.2f}s - Status: {response.status_code}")
    if response.status_code != 200:
        logger.error(f"Error response from {api_name}: {response.status_code} - {str(response.text)[:500]}")

    return handle_api_response(response, api_name)


@retry()
def safe_crossref_request(url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Make a safe request to the Crossref API with rate limiting and retries.

    Args:
        url: The URL to request
        params: Query parameters

    Returns:
        Parsed JSON response
    """
    params = dict(params or {})

    # Add mailto parameter if not present
    if 'mailto' not in params and Config.CROSSREF_MAILTO:
        params['mailto'] = Config.CROSSREF_MAILTO

    log_api_call("Crossref", "get", {"url": url, **params})
    return _rate_limited_get(url, params, "Crossref API", CROSSREF_RATE_LIMITER)


@retry()
def safe_semantic_scholar_request(url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Make a safe request to the Semantic Scholar API with rate limiting and retries.

    Args:
        url: The URL to request
        params: Query parameters

    Returns:
        Parsed JSON response
    """
    params = dict(params or {})
    log_api_call("SemanticScholar", "get", {"url": url, **params})
    return _rate_limited_get(url, params, "Semantic Scholar API", SEMANTIC_SCHOLAR_RATE_LIMITER)
