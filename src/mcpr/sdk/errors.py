"""SDK error types."""

from __future__ import annotations


class ConfigValidationError(Exception):
    """Raised when a server config file fails parsing or validation."""


class TargetLoadError(Exception):
    """Raised when a ``module:attr`` or ``file.py:attr`` target cannot be loaded."""
