"""Logging of outgoing tracker requests when BUS_LIVETIMES_LOG_REQUESTS is enabled."""

import logging
import os
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

REDACTED = "***REDACTED***"
_SENSITIVE_PARAMS = frozenset({"key", "apikey", "api_key", "appkey", "token"})
_SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "x-api-key"})


def should_log_requests() -> bool:
    """Check if request logging is enabled via BUS_LIVETIMES_LOG_REQUESTS."""
    return os.getenv("BUS_LIVETIMES_LOG_REQUESTS", "").lower() == "true"


def redact_params(params: Mapping[str, Any] | None) -> dict[str, Any]:
    """Replace API keys and tokens in query parameters."""
    if not params:
        return {}
    return {k: REDACTED if k.lower() in _SENSITIVE_PARAMS else v for k, v in params.items()}


def redact_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    """Replace credentials in request headers."""
    if not headers:
        return {}
    return {k: REDACTED if k.lower() in _SENSITIVE_HEADERS else v for k, v in headers.items()}


def build_url_with_params(url: str, params: Mapping[str, Any] | None) -> str:
    """Build the full URL with (already redacted) query parameters."""
    if not params:
        return url
    param_str = "&".join(f"{k}={v}" for k, v in sorted(params.items()))
    return f"{url}?{param_str}" if "?" not in url else f"{url}&{param_str}"


def log_api_request(
    method: str,
    url: str,
    params: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
) -> None:
    """Log request details if BUS_LIVETIMES_LOG_REQUESTS is enabled.

    Args:
        method: HTTP method.
        url: Request URL without query string.
        params: Query parameters. Sensitive values are redacted.
        headers: Request headers. Sensitive values are redacted.
    """
    if not should_log_requests():
        return

    log_parts = [f"{method} {build_url_with_params(url, redact_params(params))}"]
    safe_headers = redact_headers(headers)
    if safe_headers:
        log_parts.append(f"Headers: {safe_headers}")

    logger.info("API Request:\n" + "\n".join(log_parts))
