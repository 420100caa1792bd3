"""\
Unwrapping
==========

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, October 17 2026
Last updated on: Sunday, October 18 2026

This module provides the accessors that recover information from an
error chain, whichever link actually carries it.

All accessors walk the chain from the queried error toward its root and
never modify it. They are total: a chain without the requested piece of
information yields an empty or default result, never an exception.
Anything that is not a link (a plain `ValueError`, for instance) is an
opaque leaf with no capabilities and no predecessor, and `None` is the
empty error.

The walk is iterative, so arbitrarily long chains are inspected without
running into the interpreter's recursion limit.
"""

from __future__ import annotations

import typing as t

from errchain.core.chain import Link
from errchain.core.chain import LinkKind
from errchain.core.config import resolve

if t.TYPE_CHECKING:
    from collections.abc import Callable
    from collections.abc import Iterator

    from errchain.core.config import Config
    from errchain.core.stacktrace import StackFrame

__all__: tuple[str, ...] = (
    "cause",
    "code",
    "dev_message",
    "dev_messages",
    "error_string",
    "fallback_message",
    "message",
    "messages",
    "stack",
    "stack_trace",
)

_CODED: t.Final[frozenset[LinkKind]] = frozenset(
    {LinkKind.CODED, LinkKind.STACKED}
)


def _kind(error: t.Any) -> LinkKind | None:
    """Return the variant tag of `error`, `None` for a foreign leaf."""
    return error.kind if isinstance(error, Link) else None


def _walk(error: t.Any) -> Iterator[t.Any]:
    """Yield `error` and every predecessor down to the root."""
    while error is not None:
        yield error
        if _kind(error) is None:
            return
        error = error.cause


def _fold(
    error: t.Any,
    extract: Callable[[t.Any], str],
    separator: str,
) -> str:
    """Join the non-empty fragments of a chain, newest first."""
    return separator.join(
        fragment for fragment in map(extract, _walk(error)) if fragment
    )


def _message_of(error: t.Any) -> str:
    return error.text if _kind(error) is LinkKind.MESSAGED else ""


def _dev_message_of(error: t.Any) -> str:
    kind = _kind(error)
    if kind is LinkKind.DEV_MESSAGED:
        return error.dev_message
    if kind is None:
        return str(error)
    return ""


def cause(error: t.Any) -> t.Any:
    """Return the root cause of an error chain.

    The root is the oldest link, the one without a predecessor, or the
    foreign error the oldest link wraps. A foreign error is its own
    cause.

    :param error: Head of the chain.
    :return: The root cause, `None` for the empty error.
    """
    root = None
    for root in _walk(error):
        pass
    return root


def code(error: t.Any, *, config: Config | None = None) -> str:
    """Return the classification code of an error chain.

    The first non-empty code met walking from `error` toward the root
    wins, so a code attached later shadows any code attached earlier.

    :param error: Head of the chain.
    :param config: Configuration providing the default code, defaults
        to `settings`.
    :return: The effective code, or the default code if no link of the
        chain carries one.
    """
    for link in _walk(error):
        if _kind(link) in _CODED and link.code:
            return link.code
    return resolve(config).errors.default_code


def message(error: t.Any, *defaults: str) -> str:
    """Return the user-facing message of an error chain.

    Message fragments are joined with `": "`, the most recently
    attached first.

    :param error: Head of the chain.
    :param defaults: Fallback texts used when the chain carries no
        message at all. Non-empty fallbacks are joined with a space.
    :return: The composed message, the fallback, or an empty string.
    """
    return _fold(error, _message_of, ": ") or " ".join(
        default for default in defaults if default
    )


def fallback_message(error: t.Any, *, config: Config | None = None) -> str:
    """Return the user-facing message or the configured default one."""
    return message(error, resolve(config).errors.default_message)


def messages(error: t.Any) -> list[str]:
    """Return the non-empty message fragments, most recent first."""
    return [text for text in map(_message_of, _walk(error)) if text]


def dev_message(error: t.Any) -> str:
    """Return the developer message of an error chain.

    Each link's notes read as one fragment (notes joined with `": "`)
    and fragments are joined with `", "`, the most recently attached
    first. A foreign error contributes its own text, so wrapping a
    third-party exception still yields a diagnostic.

    :param error: Head of the chain.
    :return: The composed developer message, or an empty string.
    """
    return _fold(error, _dev_message_of, ", ")


def dev_messages(error: t.Any) -> list[str]:
    """Return every developer note of an error chain, most recent first.

    Notes are returned verbatim. A foreign error contributes its own
    text as a single note.

    :param error: Head of the chain.
    :return: The flattened list of notes.
    """
    notes: list[str] = []
    for link in _walk(error):
        kind = _kind(link)
        if kind is LinkKind.DEV_MESSAGED:
            notes.extend(link.notes)
        elif kind is None:
            notes.append(str(link))
    return notes


def _stacked(error: t.Any) -> t.Any:
    """Return the outermost stacked link of a chain, if any."""
    for link in _walk(error):
        if _kind(link) is LinkKind.STACKED:
            return link
    return None


def stack(error: t.Any) -> str:
    """Return the outermost captured stack rendered as text."""
    link = _stacked(error)
    return "" if link is None else link.stack


def stack_trace(error: t.Any) -> tuple[StackFrame, ...]:
    """Return the frames of the outermost captured stack.

    :param error: Head of the chain.
    :return: Frames ordered from the outermost caller to the capture
        site, or an empty tuple if the chain captured no stack.
    """
    link = _stacked(error)
    return () if link is None else link.frames


def error_string(error: t.Any, *, config: Config | None = None) -> str:
    """Return the display text of an error chain.

    The text reads `[<code>] <dev message> (<message>)`. Empty parts are
    left out along with their brackets.

    :param error: Head of the chain.
    :param config: Configuration providing the default code, defaults
        to `settings`.
    :return: The display text.
    """
    parts = []
    if value := code(error, config=config):
        parts.append(f"[{value}]")
    if value := dev_message(error):
        parts.append(value)
    if value := message(error):
        parts.append(f"({value})")
    return " ".join(parts)
