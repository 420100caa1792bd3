"""\
Core
====

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, October 17 2026
Last updated on: Saturday, October 17 2026

This module acts as an entry point for combining the error chain model,
the operations building and inspecting chains, stack capturing, and the
configurations used throughout this library.
"""

from __future__ import annotations

from .error import *
from .config import *
from .stacktrace import *
from .chain import *
from .unwrap import *
from .wrap import *
from .factory import *


__all__: tuple[str, ...] = (
    error.__all__
    + config.__all__
    + stacktrace.__all__
    + chain.__all__
    + unwrap.__all__
    + wrap.__all__
    + factory.__all__
)
