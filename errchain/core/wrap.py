"""\
Wrapping
========

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, October 17 2026
Last updated on: Sunday, October 18 2026

This module provides the operations that attach information to an
error. Each takes an existing error (or `None`) and returns a new chain
head owning it, so the wrapped error is never modified and can be shared
by several chains at once.

When there is no error to wrap yet, a root `StackedLink` capturing the
caller's stack and holding the default code is created first.
"""

from __future__ import annotations

import typing as t

from errchain.core.chain import CodedLink
from errchain.core.chain import DevMessagedLink
from errchain.core.chain import MessagedLink
from errchain.core.chain import StackedLink
from errchain.core.config import resolve
from errchain.core.stacktrace import capture

if t.TYPE_CHECKING:
    from errchain.core.config import Config

__all__: tuple[str, ...] = (
    "with_code",
    "with_dev_message",
    "with_dev_messagef",
    "with_message",
    "with_messagef",
    "with_stack",
)


def _root(code: str | None, config: Config | None) -> StackedLink:
    """Create a chain root capturing the stack of the public caller.

    Must be called directly from the public operation, the skip offset
    accounts for exactly that one frame.
    """
    config = resolve(config)
    if code is None:
        code = config.errors.default_code
    return StackedLink(capture(skip=2, config=config), code=code)


def with_code(
    error: t.Any,
    code: str,
    *,
    config: Config | None = None,
) -> CodedLink:
    """Attach a classification code to an error.

    :param error: The error to wrap, `None` to start a new chain.
    :param code: The classification code.
    :param config: Configuration used when a root has to be created,
        defaults to `settings`.
    :return: The new chain head.
    """
    if error is None:
        error = _root(None, config)
    return CodedLink(code, error)


def with_stack(error: t.Any, *, config: Config | None = None) -> StackedLink:
    """Attach the caller's call stack to an error.

    Every call captures a new stack, earlier captures are kept in the
    chain untouched.

    :param error: The error to wrap, `None` to start a new chain.
    :param config: Configuration used for capturing, defaults to
        `settings`.
    :return: The new chain head.
    """
    return StackedLink(capture(skip=1, config=config), error)


def with_message(
    error: t.Any,
    *parts: str,
    config: Config | None = None,
) -> MessagedLink:
    """Attach a user-facing message to an error.

    :param error: The error to wrap, `None` to start a new chain.
    :param parts: Message parts, joined with `": "`.
    :param config: Configuration used when a root has to be created,
        defaults to `settings`.
    :return: The new chain head.
    """
    if error is None:
        error = _root(None, config)
    return MessagedLink(": ".join(parts), error)


def with_messagef(
    error: t.Any,
    format: str,
    *args: t.Any,
    config: Config | None = None,
    **kwargs: t.Any,
) -> MessagedLink:
    """Attach a user-facing message built with `str.format`."""
    if error is None:
        error = _root(None, config)
    return MessagedLink(format.format(*args, **kwargs), error)


def with_dev_message(
    error: t.Any,
    *parts: str,
    config: Config | None = None,
) -> DevMessagedLink:
    """Attach developer notes to an error.

    :param error: The error to wrap, `None` to start a new chain.
    :param parts: Developer notes, kept verbatim and in order.
    :param config: Configuration used when a root has to be created,
        defaults to `settings`.
    :return: The new chain head.
    """
    if error is None:
        error = _root(None, config)
    return DevMessagedLink(parts, error)


def with_dev_messagef(
    error: t.Any,
    format: str,
    *args: t.Any,
    config: Config | None = None,
    **kwargs: t.Any,
) -> DevMessagedLink:
    """Attach a developer note built with `str.format`."""
    if error is None:
        error = _root(None, config)
    return DevMessagedLink((format.format(*args, **kwargs),), error)
