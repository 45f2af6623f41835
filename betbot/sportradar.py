"""Server-side Sportradar passthrough; the API key never reaches the browser."""

from __future__ import annotations

from typing import Any, Optional

import requests

from . import settings
from .config import API_TIMEOUT, setup_logger
from .errors import APIError
from .utils import sanitize_error_message

logger = setup_logger(__name__)

SOURCE = "Sportradar"


def build_sportradar_url(endpoint: str, api_key: str, base_url: Optional[str] = None) -> str:
    base = (base_url or settings.SPORTRADAR_BASE).rstrip("/")
    return f"{base}/{endpoint.lstrip('/')}?api_key={api_key}"


def fetch_sportradar(
    endpoint: str,
    *,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout: float = API_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> Any:
    """GET a Sportradar endpoint path and return the decoded JSON body."""

    key = api_key if api_key is not None else settings.SPORTRADAR_API_KEY
    if not key:
        logger.error("Missing SPORTRADAR_API_KEY environment variable.")
        raise APIError(SOURCE, "CONFIG_ERROR", "Server configuration error (missing API key)")

    url = build_sportradar_url(endpoint, key, base_url)
    logger.info("Fetching Sportradar URL: %s", sanitize_error_message(url, mask="***HIDDEN***"))

    http = session or requests
    try:
        response = http.get(url, timeout=timeout)
    except requests.Timeout as exc:
        logger.error("Sportradar request timed out: %s", endpoint)
        raise APIError(SOURCE, "TIMEOUT", "Sportradar did not respond in time.") from exc
    except requests.RequestException as exc:
        logger.error("Proxy fetch error for %s: %s", endpoint, type(exc).__name__)
        raise APIError(SOURCE, "NETWORK_ERROR", "Server fetch error") from exc

    if not response.ok:
        error_text = response.text
        logger.error("Sportradar error (%s): %s", response.status_code, error_text)
        raise APIError(
            SOURCE,
            "HTTP_ERROR",
            f"Sportradar API error: {response.reason}",
            details=error_text,
            status_code=response.status_code,
        )

    try:
        return response.json()
    except ValueError as exc:
        raise APIError(SOURCE, "PARSE_ERROR", "Failed to parse Sportradar response.") from exc
