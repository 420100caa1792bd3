"""\
Errors
======

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, October 17 2026
Last updated on: Saturday, October 17 2026

This module provides the error classes raised by this library itself.
They only signal misconfiguration; building or inspecting an error
chain never raises.
"""

from __future__ import annotations


__all__: tuple[str, ...] = (
    "BaseError",
    "ConfigValidationError",
    "ValidationError",
)

Error = Exception


class BaseError(Error):
    """Base error class for all library exceptions."""


class ValidationError(BaseError):
    """Errors related to validation check failure."""


class ConfigValidationError(ValidationError):
    """Errors related to configuration validation failure."""
