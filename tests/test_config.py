"""
Tests for settings and logging configuration
"""
import json
import logging
from pathlib import Path

import pytest

from remembear.config import (
    ConfigError,
    ConfigFileReadError,
    ConfigSyntaxError,
    JSONFormatter,
    Settings,
    get_logger,
    is_enabled,
    log_error,
    setup_logging,
)


def write_config(tmp_path, content) -> Path:
    path = tmp_path / "config.json"
    path.write_text(content if isinstance(content, str) else json.dumps(content), encoding="utf-8")
    return path


class TestIsEnabled:

    @pytest.mark.parametrize("value", [True, "true", "TRUE", " yes ", "1", "on"])
    def test_truthy(self, value):
        assert is_enabled(value)

    @pytest.mark.parametrize("value", [False, "false", "0", "", "enabled", None])
    def test_falsy(self, value):
        assert not is_enabled(value)


class TestSettingsLoad:

    def test_defaults(self):
        settings = Settings()

        assert settings.log_level == "INFO"
        assert settings.json_logs is False
        assert settings.snapshot_path == Path("data/remembear.json")
        assert settings.integrations == {}

    def test_valid_file(self, tmp_path):
        path = write_config(tmp_path, {
            "log_level": "DEBUG",
            "snapshot_path": "reminders.json",
            "integrations": {
                "console": {"enabled": "true"},
                "pager": {"enabled": "false"},
            },
        })

        settings = Settings.load(path)

        assert settings.log_level == "DEBUG"
        assert settings.snapshot_path == Path("reminders.json")
        assert list(settings.enabled_integrations()) == ["console"]

    def test_missing_file(self, tmp_path):
        path = tmp_path / "missing.json"

        with pytest.raises(ConfigFileReadError) as exc:
            Settings.load(path)

        assert exc.value.filename == str(path)
        assert isinstance(exc.value, ConfigError)

    def test_invalid_json(self, tmp_path):
        path = write_config(tmp_path, "{not json")

        with pytest.raises(ConfigSyntaxError) as exc:
            Settings.load(path)

        assert "Invalid syntax" in str(exc.value)

    def test_top_level_must_be_object(self, tmp_path):
        with pytest.raises(ConfigSyntaxError):
            Settings.load(write_config(tmp_path, [1, 2]))

    def test_unknown_setting(self, tmp_path):
        with pytest.raises(ConfigSyntaxError) as exc:
            Settings.load(write_config(tmp_path, {"colour": "red"}))

        assert "'colour'" in str(exc.value)

    @pytest.mark.parametrize("value,expected", [("false", False), ("true", True), (True, True)])
    def test_json_logs_flag(self, tmp_path, value, expected):
        settings = Settings.load(write_config(tmp_path, {"json_logs": value}))

        assert settings.json_logs is expected

    def test_log_level_is_uppercased(self, tmp_path):
        assert Settings.load(write_config(tmp_path, {"log_level": "debug"})).log_level == "DEBUG"

    def test_log_file_may_be_null(self, tmp_path):
        assert Settings.load(write_config(tmp_path, {"log_file": None})).log_file is None

    @pytest.mark.parametrize("data", [
        {"log_level": 10},
        {"log_file": 1},
        {"snapshot_path": ["a.json"]},
        {"json_logs": 1},
    ])
    def test_wrong_value_types(self, tmp_path, data):
        with pytest.raises(ConfigSyntaxError):
            Settings.load(write_config(tmp_path, data))

    @pytest.mark.parametrize("integrations", [["console"], {"console": "true"}])
    def test_integrations_must_be_objects(self, tmp_path, integrations):
        with pytest.raises(ConfigSyntaxError):
            Settings.load(write_config(tmp_path, {"integrations": integrations}))


class TestSettingsEnv:

    def test_apply_env(self):
        settings = Settings()

        settings.apply_env({
            "REMEMBEAR_LOG_LEVEL": "debug",
            "REMEMBEAR_JSON_LOGS": "yes",
            "REMEMBEAR_SNAPSHOT": "/tmp/snap.json",
            "REMEMBEAR_INTEGRATIONS": "console, ,pager",
        })

        assert settings.log_level == "DEBUG"
        assert settings.json_logs is True
        assert settings.snapshot_path == Path("/tmp/snap.json")
        assert settings.integrations == {
            "console": {"enabled": True},
            "pager": {"enabled": True},
        }

    def test_empty_values_are_ignored(self):
        settings = Settings()
        settings.apply_env({"REMEMBEAR_LOG_LEVEL": "", "REMEMBEAR_INTEGRATIONS": ""})

        assert settings.log_level == "INFO"
        assert settings.integrations == {}

    def test_env_overrides_file_options(self, tmp_path):
        settings = Settings.load(write_config(tmp_path, {
            "integrations": {"console": {"enabled": "false", "extra": 1}},
        }))

        settings.apply_env({"REMEMBEAR_INTEGRATIONS": "console"})

        assert settings.integrations["console"] == {"enabled": True, "extra": 1}

    def test_from_dotenv_file(self, tmp_path, clean_env):
        dotenv = tmp_path / ".env"
        dotenv.write_text(
            "REMEMBEAR_LOG_LEVEL=warning\nREMEMBEAR_INTEGRATIONS=console\n",
            encoding="utf-8",
        )

        settings = Settings.from_env(dotenv)

        assert settings.log_level == "WARNING"
        assert list(settings.enabled_integrations()) == ["console"]

    def test_dotenv_found_in_working_directory(self, tmp_path, monkeypatch, clean_env):
        (tmp_path / ".env").write_text("REMEMBEAR_LOG_LEVEL=DEBUG\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        settings = Settings.from_env()

        assert settings.log_level == "DEBUG"

    def test_set_variables_win_over_dotenv(self, tmp_path, monkeypatch, clean_env):
        (tmp_path / ".env").write_text("REMEMBEAR_LOG_LEVEL=DEBUG\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("REMEMBEAR_LOG_LEVEL", "error")

        assert Settings.from_env().log_level == "ERROR"


class TestLogging:

    def test_setup_logging_replaces_handlers(self, reset_package_logger):
        setup_logging("DEBUG")
        logger = setup_logging("WARNING")

        assert logger.name == "remembear"
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_log_file_gets_json(self, tmp_path, reset_package_logger):
        log_file = tmp_path / "logs" / "remembear.log"
        setup_logging("INFO", log_file=str(log_file))

        get_logger("tests", reminder_uid=7).info("hello")
        for handler in logging.getLogger("remembear").handlers:
            handler.flush()

        record = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert record["message"] == "hello"
        assert record["logger"] == "remembear.tests"
        assert record["data"] == {"reminder_uid": 7}

    def test_log_error_includes_traceback(self, caplog):
        logger = get_logger("tests")

        try:
            raise RuntimeError("broken")
        except RuntimeError as e:
            with caplog.at_level(logging.ERROR, logger="remembear"):
                log_error(logger, e, context="test", reminder_uid=3)

        record = caplog.records[-1]
        assert record.getMessage() == "Error in test: RuntimeError: broken"
        assert record.exc_info[1].args == ("broken",)
        assert record.extra_data == {"reminder_uid": 3}

    def test_json_formatter(self):
        record = logging.makeLogRecord({
            "name": "remembear.x",
            "levelname": "INFO",
            "msg": "value %s",
            "args": (1,),
        })

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "value 1"
        assert data["level"] == "INFO"
        assert "data" not in data
