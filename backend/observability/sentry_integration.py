"""Sentry integration for error monitoring.

Provides:
- Error capture for generation and ingestion failures
- Retrieval breadcrumbs and performance spans
"""

import logging
import os

import sentry_sdk
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = ("authorization", "x-api-key", "cookie")


def init_sentry(
    dsn: str | None = None,
    environment: str = "development",
    release: str | None = None,
    traces_sample_rate: float = 0.1,
) -> bool:
    """
    Initialize Sentry error monitoring.

    Args:
        dsn: Sentry DSN; monitoring stays off when empty
        environment: Environment name (development, staging, production)
        release: Release version
        traces_sample_rate: Fraction of transactions to trace (0-1)

    Returns:
        True if successfully initialized
    """
    if not dsn:
        logger.info("Sentry DSN not configured, error monitoring disabled")
        return False

    try:
        sentry_sdk.init(
            dsn=dsn,
            environment=environment,
            release=release or os.getenv("APP_VERSION", "0.1.0"),
            traces_sample_rate=traces_sample_rate,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                StarletteIntegration(transaction_style="endpoint"),
                AsyncioIntegration(),
                LoggingIntegration(
                    level=logging.INFO,
                    event_level=logging.ERROR,
                ),
            ],
            send_default_pii=False,
            attach_stacktrace=True,
            max_breadcrumbs=50,
            before_send=_filter_events,
            before_send_transaction=_filter_transactions,
        )

        logger.info(f"Sentry initialized (environment: {environment})")
        return True

    except Exception as e:
        logger.error(f"Failed to initialize Sentry: {e}")
        return False


def _filter_events(event: dict, hint: dict) -> dict | None:
    """Drop health check noise and scrub credentials from requests."""
    for exc in event.get("exception", {}).get("values", []):
        if "health" in str(exc.get("value", "")).lower():
            return None

    headers = event.get("request", {}).get("headers")
    if headers:
        for key in list(headers):
            if key.lower() in SENSITIVE_HEADERS:
                headers[key] = "[Filtered]"

    return event


def _filter_transactions(event: dict, hint: dict) -> dict | None:
    """Filter out health check transactions."""
    if "/health" in event.get("transaction", ""):
        return None
    return event


def capture_exception(
    exception: Exception,
    extra: dict | None = None,
    tags: dict | None = None,
) -> str | None:
    """
    Send an exception to Sentry.

    Returns:
        Event ID, or None when nothing was sent
    """
    try:
        with sentry_sdk.new_scope() as scope:
            for key, value in (extra or {}).items():
                scope.set_extra(key, value)
            for key, value in (tags or {}).items():
                scope.set_tag(key, value)
            return sentry_sdk.capture_exception(exception)

    except Exception as e:
        logger.error(f"Failed to capture exception in Sentry: {e}")
        return None


def add_breadcrumb(
    message: str,
    category: str = "retrieval",
    level: str = "info",
    data: dict | None = None,
):
    """Record a breadcrumb (no-op until Sentry is initialized)."""
    sentry_sdk.add_breadcrumb(
        message=message,
        category=category,
        level=level,
        data=data or {},
    )


def span(operation: str, description: str, data: dict | None = None):
    """
    Start a performance span, used as a context manager.

    Args:
        operation: Operation type (e.g. "retrieval.search", "llm.stream")
        description: Human-readable description
        data: Additional span data
    """
    sentry_span = sentry_sdk.start_span(op=operation, name=description)
    for key, value in (data or {}).items():
        sentry_span.set_data(key, value)
    return sentry_span
