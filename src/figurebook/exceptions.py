"""Custom exception hierarchy for figurebook.

All domain-specific exceptions inherit from ``FigurebookError``, enabling
callers to catch broad categories or specific error types.

Example::

    from figurebook.exceptions import RenderError

    try:
        fig = render_chart(spec)
    except RenderError as exc:
        logger.error("Failed to draw chart: %s", exc)
"""

from __future__ import annotations


class FigurebookError(Exception):
    """Base exception for all figurebook domain errors."""


class ConfigError(FigurebookError):
    """Raised for invalid or unreadable chart configuration."""


class DataValidationError(FigurebookError):
    """Raised when a tidy dataset does not fit the requested chart."""


class RenderError(FigurebookError):
    """Raised when a chart cannot be drawn."""


class ExportError(FigurebookError):
    """Raised when a rendered figure cannot be written to disk."""
