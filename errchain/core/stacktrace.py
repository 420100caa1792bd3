"""\
Stack traces
============

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, October 17 2026
Last updated on: Sunday, October 18 2026

This module captures the call stack at the moment an error is built and
turns it into a sequence of `StackFrame` objects.

Capturing walks the interpreter frames above the capture point (bounded
by the configured maximum depth), resolves each into a symbolic frame
(file, line, function, module and instruction offset), orders them from
the outermost caller down to the capture site, drops the frames that
belong to the interpreter machinery, the test harness, or this library
itself, and finally classifies every remaining frame as in-application
or external.

Capturing never fails. A walk that yields nothing produces an empty
tuple, and reading source lines for display degrades to a placeholder.
"""

from __future__ import annotations

import json
import os
import sys
import sysconfig
import typing as t
from dataclasses import dataclass
from dataclasses import fields

from errchain.core.config import resolve
from errchain.utils.filesystem import read_line
from errchain.utils.logging import get_logger

if t.TYPE_CHECKING:
    from collections.abc import Iterable
    from types import FrameType

    from errchain.core.config import Config

__all__: tuple[str, ...] = (
    "StackFrame",
    "capture",
    "dumps",
    "format_stack",
    "loads",
)

logger = get_logger(__name__)

_LIBRARY: t.Final[str] = __name__.partition(".")[0]
_PATHS: t.Final[dict[str, str]] = sysconfig.get_paths()
_STDLIB: t.Final[str] = os.path.normcase(_PATHS["stdlib"])
_INSTALLED: t.Final[frozenset[str]] = frozenset(
    os.path.normcase(_PATHS[key]) for key in ("purelib", "platlib")
)
_PLACEHOLDER: t.Final[str] = "..."
_THIRD_PARTY_SEGMENTS: t.Final[frozenset[str]] = frozenset(
    {"vendor", "_vendor", "third_party"}
)


@dataclass(frozen=True, slots=True)
class StackFrame:
    """A single resolved frame of a captured call stack.

    Frames are created once by `capture` and never change afterwards.
    The `in_app` flag is computed at creation time from the configured
    application module prefix.

    :param file: Path of the source file executing in the frame.
    :param line_number: The 1-based line being executed, `0` if unknown.
    :param function: Qualified name of the function of the frame.
    :param package: Name of the module the function belongs to.
    :param in_app: Whether the frame belongs to the application.
    :param address: Offset of the last instruction executed in the
        frame. It is opaque and only meaningful for display.
    """

    file: str = ""
    line_number: int = 0
    function: str = ""
    package: str = ""
    in_app: bool = False
    address: int = 0

    def __str__(self) -> str:
        """Render the frame as a location line and a source line."""
        if self.is_empty():
            return ""
        return (
            f"{self.file}:{self.line_number} (0x{self.address:x})\n"
            f"\t{self.function}: {self.source_line()}\n"
        )

    def is_empty(self) -> bool:
        """Return `True` if every field holds its zero value."""
        return self == _EMPTY

    def source_line(self) -> str:
        """Return the source code executed by the frame.

        The file is read on demand. A non-positive line number, a line
        past the end of the file, or a file that cannot be read all
        yield the `...` placeholder.

        :return: The stripped source line or the placeholder.
        """
        if self.line_number <= 0:
            return _PLACEHOLDER
        try:
            line = read_line(self.file, self.line_number)
        except (OSError, UnicodeDecodeError) as error:
            logger.debug(f"Could not read source of {self.file!r}: {error}")
            return _PLACEHOLDER
        return _PLACEHOLDER if line is None else line

    def as_dict(self) -> dict[str, t.Any]:
        """Return the frame as a mapping, omitting zero-valued fields."""
        payload = {}
        for field in fields(self):
            value = getattr(self, field.name)
            if value != field.default:
                payload[field.name] = value
        return payload

    @classmethod
    def from_dict(cls, payload: t.Mapping[str, t.Any]) -> StackFrame:
        """Build a frame from a mapping produced by `as_dict`.

        Missing fields are restored as zero values and unknown keys are
        ignored.

        :param payload: The serialised frame.
        :return: The restored frame.
        """
        names = {field.name for field in fields(cls)}
        return cls(**{k: v for k, v in payload.items() if k in names})


_EMPTY: t.Final[StackFrame] = StackFrame()


def dumps(frames: Iterable[StackFrame], **kwargs: t.Any) -> str:
    """Serialise a sequence of frames to JSON.

    :param frames: Frames to serialise.
    :param kwargs: Extra keyword arguments passed to `json.dumps`.
    :return: A JSON array of frame objects.
    """
    return json.dumps([frame.as_dict() for frame in frames], **kwargs)


def loads(text: str | bytes) -> tuple[StackFrame, ...]:
    """Deserialise a JSON array produced by `dumps`."""
    return tuple(StackFrame.from_dict(item) for item in json.loads(text))


def format_stack(frames: Iterable[StackFrame]) -> str:
    """Render frames the way a captured stack is displayed."""
    return "".join(str(frame) for frame in frames)


def capture(
    skip: int = 0,
    *,
    config: Config | None = None,
) -> tuple[StackFrame, ...]:
    """Capture the call stack of the caller.

    :param skip: Number of additional frames to skip above the caller
        of this function, defaults to `0`.
    :param config: Configuration providing the maximum depth, skipped
        modules and application prefix, defaults to `settings`.
    :return: Frames ordered from the outermost caller to the innermost
        one, filtered and classified.
    """
    config = resolve(config)
    symbols = _resolve(_callers(skip + 1, config.stack.max_depth))
    skipped = config.stack.skip_modules
    prefix = config.stack.app_prefix
    frames = tuple(
        _new_frame(*symbol, prefix=prefix)
        for symbol in symbols
        if not _should_skip(symbol[3], skipped)
    )
    logger.debug(f"Captured {len(frames)} of {len(symbols)} frames")
    return frames


def _callers(skip: int, depth: int) -> list[FrameType]:
    """Walk at most `depth` frames, innermost first."""
    try:
        frame = sys._getframe(skip + 1)
    except ValueError:
        return []
    callers = []
    while frame is not None and len(callers) < depth:
        callers.append(frame)
        frame = frame.f_back
    return callers


def _resolve(
    frames: list[FrameType],
) -> list[tuple[str, int, str, str, int]]:
    """Resolve raw frames to symbols, outermost first."""
    symbols = []
    for frame in reversed(frames):
        code = frame.f_code
        module = frame.f_globals.get("__name__")
        symbols.append(
            (
                code.co_filename,
                frame.f_lineno or 0,
                code.co_qualname,
                module if isinstance(module, str) else "",
                frame.f_lasti,
            )
        )
    return symbols


def _matches(module: str, prefix: str) -> bool:
    return module == prefix or module.startswith(f"{prefix}.")


def _should_skip(module: str, skipped: tuple[str, ...]) -> bool:
    """Check whether a frame of `module` is dropped from the stack.

    Frames of this library are dropped too, except for modules named
    like test doubles (`*_test`).
    """
    if any(_matches(module, prefix) for prefix in skipped):
        return True
    if _matches(module, _LIBRARY):
        return not module.rpartition(".")[2].endswith("_test")
    return False


def _is_within(path: str, root: str) -> bool:
    return path == root or path.startswith(root.rstrip(os.sep) + os.sep)


def _is_external(file: str, module: str) -> bool:
    """Check whether a frame is standard library or vendored code.

    Installed packages (`purelib` and `platlib`) may sit below the
    standard library root. They are classified by module prefix only.
    """
    path = os.path.normcase(file)
    if _is_within(path, _STDLIB) and not any(
        _is_within(path, root) for root in _INSTALLED
    ):
        return True
    return bool(_THIRD_PARTY_SEGMENTS.intersection(module.split(".")))


def _new_frame(
    file: str,
    line_number: int,
    function: str,
    package: str,
    address: int,
    *,
    prefix: str,
) -> StackFrame:
    """Create a classified frame from a resolved symbol."""
    file = file or "unknown"
    in_app = (
        not _is_external(file, package)
        and bool(prefix)
        and _matches(package, prefix)
    )
    return StackFrame(
        file=file,
        line_number=line_number,
        function=function,
        package=package,
        in_app=in_app,
        address=address,
    )
