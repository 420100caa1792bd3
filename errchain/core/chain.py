"""\
Error chain
===========

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, October 17 2026
Last updated on: Sunday, October 18 2026

This module defines the links an error chain is made of. Every link is
an exception that owns exactly one predecessor, its `cause`, and carries
a single extra piece of information:

- `CodedLink` carries a classification code.
- `StackedLink` carries a captured call stack and, optionally, a code.
- `MessagedLink` carries a user-facing message fragment.
- `DevMessagedLink` carries one or more developer notes.

The oldest link of a chain has no cause, or a foreign error (any object
that is not a link) which is treated as an opaque leaf. Links are never
modified once built: wrapping an error always allocates a new head and
leaves the wrapped chain untouched, so one chain may be shared between
threads and wrapped by each of them independently.

Every link carries its variant as the `kind` tag, `caused` for links
that only wrap a predecessor. The accessors in `errchain.core.unwrap`
dispatch on that tag to find out which capabilities a link exposes.
"""

from __future__ import annotations

import enum
import typing as t

from errchain.core.stacktrace import format_stack

if t.TYPE_CHECKING:
    from collections.abc import Iterable

    from errchain.core.stacktrace import StackFrame

__all__: tuple[str, ...] = (
    "CodedLink",
    "DevMessagedLink",
    "Link",
    "LinkKind",
    "MessagedLink",
    "StackedLink",
)


class LinkKind(enum.StrEnum):
    """Variants of error chain links."""

    CODED = "coded"
    STACKED = "stacked"
    MESSAGED = "messaged"
    DEV_MESSAGED = "dev_messaged"
    CAUSED = "caused"


class Link(Exception):
    """Base class for all error chain links.

    A link renders as `[<code>] <dev message> (<message>)`, computed
    over the whole chain it heads, so any link can be raised or logged
    directly. A plain `Link`, or a subclass adding no capability of its
    own, only passes its cause on.

    :param cause: The wrapped predecessor, `None` at the root of a
        chain.
    """

    kind: t.ClassVar[LinkKind] = LinkKind.CAUSED

    def __init__(self, cause: t.Any = None) -> None:
        """Initialise the link with its predecessor."""
        super().__init__()
        self._cause = cause

    @property
    def cause(self) -> t.Any:
        """Return the predecessor of this link."""
        return self._cause

    def __str__(self) -> str:
        """Return the display text of the chain headed by this link."""
        from errchain.core.unwrap import error_string

        return error_string(self)

    def __repr__(self) -> str:
        """Return a string representation of the link."""
        fields = ", ".join(f"{k}={v!r}" for k, v in self.__inspect_attrs__())
        return f"<{type(self).__name__}({fields})>"

    def __reduce__(self) -> tuple[t.Any, ...]:
        """Support pickling by rebuilding the link from its fields."""
        return type(self), tuple(v for _, v in self.__inspect_attrs__())

    def __inspect_attrs__(self) -> Iterable[tuple[str, t.Any]]:
        """Yield constructor arguments of the link, in order."""
        yield "cause", self._cause


class CodedLink(Link):
    """Link carrying a classification code.

    :param code: The classification code.
    :param cause: The wrapped predecessor.
    """

    kind = LinkKind.CODED

    def __init__(self, code: str, cause: t.Any = None) -> None:
        """Initialise the link with a code."""
        super().__init__(cause)
        self._code = code

    @property
    def code(self) -> str:
        """Return the classification code."""
        return self._code

    def __inspect_attrs__(self) -> Iterable[tuple[str, t.Any]]:
        """Yield constructor arguments of the link, in order."""
        yield "code", self._code
        yield "cause", self._cause


class StackedLink(Link):
    """Link carrying a captured call stack and an optional code.

    Roots of chains built by this library are stacked links holding the
    default code.

    :param frames: The captured frames, outermost caller first.
    :param cause: The wrapped predecessor.
    :param code: Classification code, defaults to an empty string which
        means the link carries no code.
    """

    kind = LinkKind.STACKED

    def __init__(
        self,
        frames: Iterable[StackFrame],
        cause: t.Any = None,
        code: str = "",
    ) -> None:
        """Initialise the link with a captured stack."""
        super().__init__(cause)
        self._frames = tuple(frames)
        self._code = code

    @property
    def code(self) -> str:
        """Return the classification code, possibly empty."""
        return self._code

    @property
    def frames(self) -> tuple[StackFrame, ...]:
        """Return the captured frames."""
        return self._frames

    @property
    def stack(self) -> str:
        """Return the captured frames rendered as text."""
        return format_stack(self._frames)

    def __repr__(self) -> str:
        """Return a string representation without the frames."""
        return (
            f"<{type(self).__name__}(code={self._code!r}, "
            f"frames={len(self._frames)}, cause={self._cause!r})>"
        )

    def __inspect_attrs__(self) -> Iterable[tuple[str, t.Any]]:
        """Yield constructor arguments of the link, in order."""
        yield "frames", self._frames
        yield "cause", self._cause
        yield "code", self._code


class MessagedLink(Link):
    """Link carrying a user-facing message fragment.

    :param text: The message fragment.
    :param cause: The wrapped predecessor.
    """

    kind = LinkKind.MESSAGED

    def __init__(self, text: str, cause: t.Any = None) -> None:
        """Initialise the link with a message fragment."""
        super().__init__(cause)
        self._text = text

    @property
    def text(self) -> str:
        """Return the message fragment."""
        return self._text

    def __inspect_attrs__(self) -> Iterable[tuple[str, t.Any]]:
        """Yield constructor arguments of the link, in order."""
        yield "text", self._text
        yield "cause", self._cause


class DevMessagedLink(Link):
    """Link carrying developer notes.

    Notes are kept verbatim and in order. Joined together they read as
    a single developer message.

    :param notes: The developer notes.
    :param cause: The wrapped predecessor.
    """

    kind = LinkKind.DEV_MESSAGED

    def __init__(self, notes: Iterable[str], cause: t.Any = None) -> None:
        """Initialise the link with developer notes."""
        super().__init__(cause)
        self._notes = tuple(notes)

    @property
    def notes(self) -> tuple[str, ...]:
        """Return the developer notes."""
        return self._notes

    @property
    def dev_message(self) -> str:
        """Return the notes joined with `": "`."""
        return ": ".join(self._notes)

    def __inspect_attrs__(self) -> Iterable[tuple[str, t.Any]]:
        """Yield constructor arguments of the link, in order."""
        yield "notes", self._notes
        yield "cause", self._cause
