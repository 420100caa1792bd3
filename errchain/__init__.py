"""\
errchain
========

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, October 17 2026
Last updated on: Sunday, October 18 2026

Annotated error chains for Python

This package (errchain) replaces raw, opaque exceptions with chains of
annotated ones. Callers attach, in any order, a classification code, a
user-facing message, developer notes and a captured call stack, and
later recover any of them from the head of the chain, whichever link
actually carries it.

.. code-block:: python

    import errchain

    error = errchain.with_stack(None)
    error = errchain.with_code(error, errchain.CODE_USER)
    error = errchain.with_message(error, "try again")
    error = errchain.with_dev_message(error, "db timeout")

    errchain.code(error)         # "USER"
    errchain.message(error)      # "try again"
    errchain.dev_message(error)  # "db timeout"

The code drives branching, the message is shown to end users, while the
developer message and the stack are for diagnostics only.
"""

from __future__ import annotations

from .core import *
from .utils import *


__all__: tuple[str, ...] = ("__version__",)
__all__ += core.__all__
__all__ += utils.__all__

__version__: str = "18.10.2026"
