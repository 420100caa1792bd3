"""\
Factory
=======

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, October 17 2026
Last updated on: Saturday, October 17 2026

This module provides the constructors that start a new error chain: a
root `StackedLink` capturing the caller's stack, wrapped in a
`DevMessagedLink` holding the given text.
"""

from __future__ import annotations

import typing as t

from errchain.core.chain import DevMessagedLink
from errchain.core.wrap import _root

if t.TYPE_CHECKING:
    from errchain.core.config import Config

__all__: tuple[str, ...] = (
    "new",
    "new_with_code",
    "new_with_codef",
    "newf",
)


def new(*parts: str, config: Config | None = None) -> DevMessagedLink:
    """Create an error with the default code and developer notes.

    .. code-block:: python

        error = errchain.new("connection refused", host)
        raise errchain.with_message(error, "Service unavailable")

    :param parts: Developer notes.
    :param config: Configuration providing the default code, defaults
        to `settings`.
    :return: The new chain head.
    """
    return DevMessagedLink(parts, _root(None, config))


def newf(
    format: str,
    *args: t.Any,
    config: Config | None = None,
    **kwargs: t.Any,
) -> DevMessagedLink:
    """Create an error with a developer note built with `str.format`."""
    return DevMessagedLink(
        (format.format(*args, **kwargs),), _root(None, config)
    )


def new_with_code(
    code: str,
    *parts: str,
    config: Config | None = None,
) -> DevMessagedLink:
    """Create an error with the given code and developer notes."""
    return DevMessagedLink(parts, _root(code, config))


def new_with_codef(
    code: str,
    format: str,
    *args: t.Any,
    config: Config | None = None,
    **kwargs: t.Any,
) -> DevMessagedLink:
    """Create an error with the given code and a formatted note."""
    return DevMessagedLink(
        (format.format(*args, **kwargs),), _root(code, config)
    )
