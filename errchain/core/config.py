"""\
Configurations
==============

Author: Akshay Mestry <xa@mes3.dev>
Created on: Saturday, October 17 2026
Last updated on: Sunday, October 18 2026

This module provides the configurations used throughout this library:
the default classification code and user-facing message, the stack
capture knobs, logging, and telemetry.

Every constructor and accessor accepts an explicit `config` object. When
none is passed, the process-wide `settings` instance is used. Settings
are expected to be finalised at start-up, before errors are built
concurrently. Mutating them while other threads build or inspect chains
is a data race this library does not guard against.
"""

from __future__ import annotations

import threading
import typing as t
import weakref

from errchain.core.error import ConfigValidationError


if t.TYPE_CHECKING:
    from collections.abc import Iterable

__all__: tuple[str, ...] = (
    "CODE_CRITICAL",
    "CODE_PANIC",
    "CODE_USER",
    "Config",
    "ConsoleLoggerConfig",
    "ErrorConfig",
    "FileLoggerConfig",
    "LoggerConfig",
    "StackConfig",
    "TTYLoggerConfig",
    "TelemetryConfig",
    "config_property",
    "resolve",
    "settings",
)

CODE_PANIC: t.Final[str] = "PANIC"
CODE_CRITICAL: t.Final[str] = "CRITICAL"
CODE_USER: t.Final[str] = "USER"

_ALLOWED_LOG_LEVELS: tuple[str, ...] = (
    "DEBUG",
    "INFO",
    "WARNING",
    "ERROR",
    "CRITICAL",
)
_DEFAULT_LOG_FMT: t.Final[str] = (
    "%(asctime)s %(levelname)s %(qualName)s:%(lineno)d %(extra)s: %(message)s"
)
_DEFAULT_LOG_DATEFMT: t.Final[str] = "%Y-%m-%dT%H:%M:%SZ"
_DEFAULT_USER_MESSAGE: t.Final[str] = (
    "Oops, something went wrong. Please try again later..."
)
# NOTE(xames3): Module prefixes of the interpreter machinery and the
# test harnesses. Frames from these modules never describe where an
# error was actually raised, so the capturer drops them.
_DEFAULT_SKIP_MODULES: t.Final[tuple[str, ...]] = (
    "_pytest",
    "pytest",
    "pluggy",
    "unittest",
    "runpy",
    "threading",
    "concurrent.futures",
    "asyncio",
    "importlib._bootstrap",
)


T = t.TypeVar("T")


class config_property(t.Generic[T]):  # noqa: N801
    """Descriptor for configuration properties.

    This descriptor class creates and provides functionalities like
    Python's built-in `property` object decorator, but with additional
    features for configuration management such as allowed values,
    custom checks, numeric bounds and immutability.
    """

    __slots__: tuple[str, ...] = (
        "allowed",
        "between",
        "check",
        "default",
        "description",
        "frozen",
        "locks",
        "property",
        "validate",
    )

    _global_lock: threading.RLock = threading.RLock()

    def __init__(
        self,
        default: T,
        *,
        frozen: bool = False,
        description: str | None = None,
        allowed: Iterable[T] | None = None,
        check: t.Callable[[T], bool] | None = None,
        between: tuple[int | float, ...] | None = None,
    ) -> None:
        """Initialise configuration property."""
        self.default = default
        self.frozen = frozen
        self.description = description
        self.allowed = allowed
        self.check = check
        self.between = between
        self.property: str = ""
        self.validate: bool = any([self.between, self.check, self.allowed])
        self.locks: weakref.WeakKeyDictionary[object, threading.RLock] = (
            weakref.WeakKeyDictionary()
        )

    def __set_name__(self, instance: type, value: str) -> None:
        """Configure and set the property value on the owner class.

        :param instance: The class where the property is being set.
        :param value: The name of the property to be set.
        :raises ConfigValidationError: If the default value does not
            satisfy the constraints of the property.
        """
        self.property = f"_{value}"
        if self.default is not None and self.validate:
            try:
                self.__validate__(self.default)
            except ConfigValidationError as error:
                raise ConfigValidationError(
                    f"got invalid value for {value!r}: {error}"
                ) from error
        setattr(instance, self.property, self.default)

    @t.overload
    def __get__(self, instance: None, owner: type) -> config_property[T]: ...

    @t.overload
    def __get__(self, instance: object, owner: type) -> T: ...

    def __get__(
        self,
        instance: object | None,
        owner: type,
    ) -> config_property[T] | T:
        """Get and return the property value from the instance.

        :param instance: The instance where the property is accessed.
        :param owner: The owner class of the property (not used).
        :return: The value of the property from the instance.
        """
        if instance is None:
            return self
        return getattr(instance, self.property, self.default)

    def __set__(self, instance: object, value: T) -> None:
        """Set the property with validation & immutability checks.

        :param instance: The instance where the property is being set.
        :param value: The value to be set for the property.
        :raises ConfigValidationError: If the property is frozen or the
            value fails validation.
        """
        if self.frozen:
            raise ConfigValidationError(
                f"cannot modify frozen property: {self.property[1:]!r}",
            )
        if self.validate:
            with self._acquire_lock(instance):
                self.__validate__(value)
        setattr(instance, self.property, value)

    def __validate__(self, value: t.Any) -> None:
        """Validate the property value based on constraints.

        :param value: The value to be validated.
        :raises ConfigValidationError: If the value does not meet the
            validation criteria.
        """
        if self.allowed is not None and value not in self.allowed:
            raise ConfigValidationError(
                f"{value!r} is not one of the allowed values "
                f"({', '.join(str(item) for item in self.allowed)})"
            )
        if self.check is not None:
            try:
                if not self.check(value):
                    raise ConfigValidationError("property validation failed")
            except ConfigValidationError:
                raise
            except Exception as error:
                raise ConfigValidationError(
                    f"property validation failed for {value!r} with "
                    f"message: {error}"
                ) from error
        if self.between is not None and len(self.between) == 2:
            minimum, maximum = self.between
            if not all(
                isinstance(num, int | float) for num in (minimum, maximum)
            ):
                raise ConfigValidationError("must be a tuple of two numbers")
            if not (minimum <= value <= maximum):
                raise ConfigValidationError(
                    f"{value} is not between {minimum} and {maximum}"
                )

    def _acquire_lock(self, instance: object) -> threading.RLock:
        """Return the validation lock of an instance, creating it once.

        :param instance: The instance where the property is accessed.
        :return: A reentrant lock dedicated to the instance. It is
            released along with the instance.
        """
        with self._global_lock:
            lock = self.locks.get(instance)
            if lock is None:
                lock = self.locks[instance] = threading.RLock()
            return lock


def _is_code(value: t.Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _is_prefixes(value: t.Any) -> bool:
    return isinstance(value, tuple) and all(
        isinstance(item, str) and item for item in value
    )


class ErrorConfig:
    """Error chain defaults.

    The default code is substituted whenever no link of a chain carries
    a classification code. The default message is the user-facing text
    shown when a chain carries no user message at all.
    """

    default_code: config_property[str] = config_property(
        CODE_CRITICAL,
        check=_is_code,
        description="Classification code used when a chain has none",
    )
    default_message: config_property[str] = config_property(
        _DEFAULT_USER_MESSAGE,
        check=lambda x: isinstance(x, str),
    )


class StackConfig:
    """Stack capture configuration.

    Controls how deep the capturer walks, which frames are dropped as
    interpreter or harness machinery, and which module prefix marks a
    frame as part of the application.
    """

    max_depth: config_property[int] = config_property(50, between=(1, 1024))
    app_prefix: config_property[str] = config_property(
        "",
        check=lambda x: isinstance(x, str),
    )
    skip_modules: config_property[tuple[str, ...]] = config_property(
        _DEFAULT_SKIP_MODULES,
        check=_is_prefixes,
    )


class FileLoggerConfig:
    """File logger configuration.

    This class provides configuration options for logging to a file with
    options for log rotation and backup retention.
    """

    enable: config_property[bool] = config_property(
        False,
        allowed=[True, False],
    )
    level: config_property[str] = config_property(
        "INFO",
        allowed=_ALLOWED_LOG_LEVELS,
    )
    fmt: config_property[str] = config_property(_DEFAULT_LOG_FMT)
    datefmt: config_property[str] = config_property(_DEFAULT_LOG_DATEFMT)
    path: config_property[str] = config_property(
        "logs",
        check=lambda x: isinstance(x, str) and bool(x),
    )
    output: config_property[str] = config_property("errchain.log")
    encoding: config_property[str] = config_property("utf-8", frozen=True)
    max_bytes: config_property[int] = config_property(10485760)
    backups: config_property[int] = config_property(5, check=lambda x: x >= 0)


class ConsoleLoggerConfig:
    """Console logger configuration.

    This class provides configuration options for logging to the console
    or the tty.
    """

    enable: config_property[bool] = config_property(
        True,
        allowed=[True, False],
    )
    level: config_property[str] = config_property(
        "DEBUG",
        allowed=_ALLOWED_LOG_LEVELS,
    )
    fmt: config_property[str] = config_property(_DEFAULT_LOG_FMT)
    datefmt: config_property[str] = config_property(_DEFAULT_LOG_DATEFMT)
    colour: config_property[bool] = config_property(
        True,
        allowed=[True, False],
    )


TTYLoggerConfig = ConsoleLoggerConfig


class LoggerConfig:
    """Logger configuration.

    This class combines the file and console logger configurations into
    one logging setup.
    """

    level: config_property[str] = config_property(
        "DEBUG",
        allowed=_ALLOWED_LOG_LEVELS,
    )
    fmt: config_property[str] = config_property(_DEFAULT_LOG_FMT)
    datefmt: config_property[str] = config_property(_DEFAULT_LOG_DATEFMT)
    as_json: config_property[bool] = config_property(
        False,
        allowed=[True, False],
    )

    def __init__(self) -> None:
        """Initialise nested logger configurations."""
        self.file = FileLoggerConfig()
        self.tty = TTYLoggerConfig()


class TelemetryConfig:
    """Telemetry configuration for the `OpenTelemetry` integration."""

    enabled: config_property[bool] = config_property(
        False,
        allowed=[True, False],
    )
    name: config_property[str] = config_property("")


class Config:
    """Configuration.

    This class serves as the main configuration object for the library.
    Each instance owns its own nested configurations, so a `Config`
    built for one component can be tuned without touching `settings`.
    """

    name: config_property[str] = config_property("errchain", frozen=True)
    version: config_property[str] = config_property("18.10.2026", frozen=True)
    debug: config_property[bool] = config_property(
        False,
        allowed=[True, False],
    )

    def __init__(self) -> None:
        """Initialise nested configurations."""
        self.errors = ErrorConfig()
        self.stack = StackConfig()
        self.logger = LoggerConfig()
        self.telemetry = TelemetryConfig()


settings: Config = Config()


def resolve(config: Config | None) -> Config:
    """Return `config` or the process-wide `settings` if it is `None`."""
    return settings if config is None else config
