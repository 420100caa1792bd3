"""\
Utilities
=========

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, October 17 2026
Last updated on: Saturday, October 17 2026

This module acts as an entry point for combining various utilities used
throughout the library. The `OpenTelemetry` integration is imported
explicitly from `errchain.utils.opentelemetry`.
"""

from __future__ import annotations

from .filesystem import *
from .logging import *


__all__: tuple[str, ...] = filesystem.__all__ + tuple(logging.__all__)
