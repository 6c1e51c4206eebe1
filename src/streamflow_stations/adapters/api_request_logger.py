"""Utility for logging mirror requests when STREAMFLOW_LOG_REQUESTS is enabled."""

import json
import logging
import os

logger = logging.getLogger(__name__)

LOG_REQUESTS_ENV = "STREAMFLOW_LOG_REQUESTS"


def should_log_requests() -> bool:
    """Check if request logging is enabled via the STREAMFLOW_LOG_REQUESTS environment variable."""
    return os.getenv(LOG_REQUESTS_ENV, "").lower() == "true"


def _redact_sensitive_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers from logging."""
    sensitive_keys = {"authorization", "cookie", "x-api-key"}
    return {k: "***REDACTED***" if k.lower() in sensitive_keys else v for k, v in headers.items()}


def log_api_request(method: str, url: str, headers: dict[str, str] | None = None) -> None:
    """Log an outgoing request if STREAMFLOW_LOG_REQUESTS is enabled.

    Args:
        method: HTTP method.
        url: Full request URL including the query string.
        headers: Request headers (sensitive ones are redacted).
    """
    if not should_log_requests():
        return

    log_parts = [f"{method} {url}"]
    if headers:
        log_parts.append(f"Headers: {json.dumps(_redact_sensitive_headers(headers), indent=2)}")

    logger.info("API Request:\n" + "\n".join(log_parts))
