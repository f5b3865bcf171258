"""Observability module for the F1 chatbot.

Provides Sentry integration for error monitoring, retrieval breadcrumbs
and performance spans.
"""

from observability.sentry_integration import (
    init_sentry,
    capture_exception,
    add_breadcrumb,
    span,
)

__all__ = [
    "init_sentry",
    "capture_exception",
    "add_breadcrumb",
    "span",
]
