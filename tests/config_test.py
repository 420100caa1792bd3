import gc
from concurrent.futures import ThreadPoolExecutor

import pytest

from errchain.core.config import _ALLOWED_LOG_LEVELS
from errchain.core.config import _DEFAULT_LOG_DATEFMT
from errchain.core.config import _DEFAULT_LOG_FMT
from errchain.core.config import _DEFAULT_SKIP_MODULES
from errchain.core.config import CODE_CRITICAL
from errchain.core.config import Config
from errchain.core.config import ConsoleLoggerConfig
from errchain.core.config import ErrorConfig
from errchain.core.config import FileLoggerConfig
from errchain.core.config import LoggerConfig
from errchain.core.config import StackConfig
from errchain.core.config import TelemetryConfig
from errchain.core.config import config_property
from errchain.core.config import resolve
from errchain.core.config import settings
from errchain.core.error import ConfigValidationError as Error


@pytest.fixture
def factory():
    def _create_test_class(name="internal", default=None, **kwargs):
        class TestClass:
            pass

        _property = config_property(default, **kwargs)
        _property.__set_name__(TestClass, name)
        setattr(TestClass, name, _property)
        return TestClass

    return _create_test_class


@pytest.mark.unit
class TestConfigProperty:
    def test_init_with_defaults(self):
        _property = config_property(None)
        assert _property.default is None
        assert _property.frozen is False
        assert _property.description is None
        assert _property.allowed is None
        assert _property.check is None
        assert _property.between is None
        assert _property.property == ""
        assert _property.validate is False
        assert len(_property.locks) == 0

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("default_code", "_default_code"),
            ("max_depth", "_max_depth"),
            ("app_prefix", "_app_prefix"),
        ],
    )
    def test_set_name_configures_name(self, name, expected, factory):
        TestClass = factory(name, "PANIC")
        descriptor = getattr(TestClass, name)
        assert descriptor.property == expected
        assert descriptor.default == "PANIC"

    @pytest.mark.parametrize(
        "allowed, valid, invalid",
        [
            (("PANIC", "CRITICAL", "USER"), "USER", "FATAL"),
            ((True, False), False, None),
            (("DEBUG", "INFO", "ERROR"), "INFO", "TRACE"),
        ],
    )
    def test_set_value_with_validation(self, allowed, valid, invalid, factory):
        TestClass = factory("code", valid, allowed=allowed)
        instance = TestClass()
        instance.code = valid
        assert instance.code == valid
        with pytest.raises(Error, match="not one of the allowed values"):
            instance.code = invalid

    @pytest.mark.parametrize(
        "between, valids, invalids",
        [
            ((1, 10), [1, 5, 10], [0, 11]),
            ((0.0, 1.0), [0.0, 0.5, 1.0], [-0.1, 1.1]),
        ],
    )
    def test_validate_between(self, between, valids, invalids):
        _property = config_property(None, between=between)
        for value in valids:
            _property.__validate__(value)
        for value in invalids:
            with pytest.raises(Error, match="is not between"):
                _property.__validate__(value)

    def test_validate_between_invalid_range(self):
        _property = config_property(None, between=("a", "z"))
        with pytest.raises(Error, match="must be a tuple of two numbers"):
            _property.__validate__(5)

    def test_check_failure_wraps_exceptions(self):
        _property = config_property(None, check=lambda x: x.upper())
        with pytest.raises(Error, match="property validation failed for 5"):
            _property.__validate__(5)

    def test_invalid_default_rejected_at_class_creation(self):
        with pytest.raises(Error, match="got invalid value for 'depth'"):

            class Broken:
                depth = config_property(0, between=(1, 10))

    def test_frozen(self, factory):
        TestClass = factory("name", "errchain", frozen=True)
        instance = TestClass()
        assert instance.name == "errchain"
        with pytest.raises(Error, match="cannot modify frozen property"):
            instance.name = "other"

    def test_lock_is_reused_per_instance(self, factory):
        TestClass = factory("level", "INFO", allowed=_ALLOWED_LOG_LEVELS)
        instance = TestClass()
        descriptor = TestClass.level
        assert descriptor._acquire_lock(instance) is descriptor._acquire_lock(
            instance
        )

    def test_lock_is_released_with_instance(self, factory):
        TestClass = factory("level", "INFO", allowed=_ALLOWED_LOG_LEVELS)
        descriptor = TestClass.level
        instances = [TestClass() for _ in range(10)]
        for instance in instances:
            instance.level = "DEBUG"
        assert len(descriptor.locks) == 10
        del instance, instances
        gc.collect()
        assert len(descriptor.locks) == 0

    def test_distinct_instances_get_distinct_locks(self, factory):
        TestClass = factory("level", "INFO", allowed=_ALLOWED_LOG_LEVELS)
        descriptor = TestClass.level
        first, second = TestClass(), TestClass()
        assert descriptor._acquire_lock(first) is not (
            descriptor._acquire_lock(second)
        )

    @pytest.mark.slow
    @pytest.mark.parametrize("threads, iterations", [(5, 100), (20, 500)])
    def test_thread_safety(self, threads, iterations, factory):
        codes = ["PANIC", "CRITICAL", "USER"]
        TestClass = factory("code", "USER", allowed=set(codes))
        instance = TestClass()
        errors = []

        def worker(wid):
            for index in range(iterations):
                instance.code = codes[(wid + index) % len(codes)]
                if instance.code not in codes:
                    errors.append(f"Invalid value from worker {wid}")

        with ThreadPoolExecutor(max_workers=threads) as executor:
            futures = [executor.submit(worker, i) for i in range(threads)]
            for future in futures:
                future.result()
        assert errors == []


@pytest.mark.unit
class TestErrorConfig:
    @pytest.fixture
    def config(self):
        return ErrorConfig()

    def test_defaults(self, config):
        assert config.default_code == CODE_CRITICAL
        assert config.default_message.startswith("Oops")

    @pytest.mark.parametrize("invalid", ["", "   ", None, 42])
    def test_default_code_must_be_non_empty(self, config, invalid):
        with pytest.raises(Error):
            config.default_code = invalid

    def test_default_code_override(self, config):
        config.default_code = "INTERNAL"
        assert config.default_code == "INTERNAL"
        assert ErrorConfig().default_code == CODE_CRITICAL


@pytest.mark.unit
class TestStackConfig:
    @pytest.fixture
    def config(self):
        return StackConfig()

    def test_defaults(self, config):
        assert config.max_depth == 50
        assert config.app_prefix == ""
        assert config.skip_modules == _DEFAULT_SKIP_MODULES

    @pytest.mark.parametrize("invalid", [0, -1, 1025])
    def test_max_depth_bounds(self, config, invalid):
        with pytest.raises(Error, match="is not between"):
            config.max_depth = invalid

    @pytest.mark.parametrize("invalid", [["pytest"], ("pytest", ""), (1,)])
    def test_skip_modules_must_be_tuple_of_names(self, config, invalid):
        with pytest.raises(Error, match="property validation failed"):
            config.skip_modules = invalid

    def test_app_prefix(self, config):
        config.app_prefix = "billing"
        assert config.app_prefix == "billing"
        with pytest.raises(Error):
            config.app_prefix = None


@pytest.mark.integration
class TestLoggerConfig:
    def test_file_defaults(self):
        config = FileLoggerConfig()
        assert config.enable is False
        assert config.level == "INFO"
        assert config.fmt == _DEFAULT_LOG_FMT
        assert config.datefmt == _DEFAULT_LOG_DATEFMT
        assert config.path == "logs"
        assert config.output == "errchain.log"
        assert config.encoding == "utf-8"
        assert config.max_bytes == 10485760
        assert config.backups == 5

    def test_console_defaults(self):
        config = ConsoleLoggerConfig()
        assert config.enable is True
        assert config.level == "DEBUG"
        assert config.colour is True

    @pytest.mark.parametrize("invalid", ["debug", "Info", "trace"])
    def test_level_invalids(self, invalid):
        with pytest.raises(Error):
            ConsoleLoggerConfig().level = invalid

    def test_encoding_frozen(self):
        with pytest.raises(Error, match="cannot modify frozen property"):
            FileLoggerConfig().encoding = "latin-1"

    def test_nested_configurations_are_per_instance(self):
        first = LoggerConfig()
        second = LoggerConfig()
        first.file.level = "ERROR"
        first.as_json = True
        assert second.file.level == "INFO"
        assert second.as_json is False
        assert isinstance(first.tty, ConsoleLoggerConfig)


@pytest.mark.integration
class TestConfig:
    @pytest.fixture
    def config(self):
        return Config()

    def test_defaults(self, config):
        assert config.name == "errchain"
        assert config.version == "18.10.2026"
        assert config.debug is False
        assert isinstance(config.errors, ErrorConfig)
        assert isinstance(config.stack, StackConfig)
        assert isinstance(config.logger, LoggerConfig)
        assert isinstance(config.telemetry, TelemetryConfig)
        assert config.telemetry.enabled is False

    @pytest.mark.parametrize("frozen", ["name", "version"])
    def test_frozen_properties(self, config, frozen):
        with pytest.raises(Error, match="cannot modify frozen property"):
            setattr(config, frozen, "changed")

    def test_instances_do_not_share_nested_configurations(self, config):
        config.errors.default_code = "PANIC"
        config.stack.app_prefix = "billing"
        config.logger.level = "WARNING"
        other = Config()
        assert other.errors.default_code == CODE_CRITICAL
        assert other.stack.app_prefix == ""
        assert other.logger.level == "DEBUG"
        assert settings.errors.default_code == CODE_CRITICAL

    def test_resolve(self, config):
        assert resolve(None) is settings
        assert resolve(config) is config
