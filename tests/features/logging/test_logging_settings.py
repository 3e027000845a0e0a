"""Tests for logging settings models and log line formatting."""

from datetime import datetime, timezone

import pytest

from ddd_commons.core.exceptions import ConfigurationError, InvalidSettingsError
from ddd_commons.features.logging.entities.config import (
    FileLogStreamSettings,
    LoggerCallback,
    LoggerSettings,
    LogLevel,
    PendingTasksSettings,
    build_settings,
)
from ddd_commons.features.logging.utils.formatting import format_log_line


class TestFileLogStreamSettings:
    """Test file log stream settings validation."""
    
    def test_defaults(self, log_dir):
        settings = FileLogStreamSettings(abspath=str(log_dir))
        
        assert settings.abspath == log_dir.resolve()
        assert settings.levels == [LogLevel.ERROR, LogLevel.FATAL]
        assert settings.stream_limit == 10000
        assert settings.kill_on_limit is False
        assert settings.error_threshold == 10
    
    def test_expands_user_home(self, log_dir, monkeypatch):
        monkeypatch.setenv("HOME", str(log_dir.parent))
        
        settings = FileLogStreamSettings(abspath=f"~/{log_dir.name}")
        
        assert settings.abspath == log_dir.resolve()
    
    def test_rejects_file_path(self, tmp_path):
        target = tmp_path / "app.log"
        target.write_text("")
        
        with pytest.raises(ValueError):
            FileLogStreamSettings(abspath=str(target))
    
    def test_rejects_empty_path(self):
        with pytest.raises(InvalidSettingsError) as exc_info:
            build_settings(FileLogStreamSettings, {"abspath": "  "})
        
        assert "empty path" in exc_info.value.message
    
    def test_rejects_unknown_level(self, log_dir):
        with pytest.raises(InvalidSettingsError):
            build_settings(FileLogStreamSettings, {"abspath": str(log_dir), "levels": ["trace"]})


class TestBuildSettings:
    """Test building settings from instances, mappings and overrides."""
    
    def test_returns_instance_unchanged(self):
        settings = PendingTasksSettings(limit=5)
        
        assert build_settings(PendingTasksSettings, settings) is settings
    
    def test_overrides_take_precedence(self):
        settings = build_settings(PendingTasksSettings, {"limit": 5, "kill_on_limit": True}, limit=8)
        
        assert settings.limit == 8
        assert settings.kill_on_limit is True
    
    def test_overrides_apply_to_instances(self):
        settings = build_settings(PendingTasksSettings, PendingTasksSettings(limit=5), kill_on_limit=True)
        
        assert settings.limit == 5
        assert settings.kill_on_limit is True
    
    def test_invalid_settings_carry_errors(self):
        with pytest.raises(InvalidSettingsError) as exc_info:
            build_settings(PendingTasksSettings, {"limit": 0})
        
        error = exc_info.value
        assert isinstance(error, ConfigurationError)
        assert error.details["errors"][0]["loc"] == ["limit"]
    
    def test_logger_settings_defaults(self):
        settings = build_settings(LoggerSettings)
        
        assert settings.ignore_unset is True
        assert settings.file is None
        assert settings.tasks.track == [LoggerCallback.ON_ERROR, LoggerCallback.ON_FATAL]


class TestFormatLogLine:
    """Test log line rendering."""
    
    timestamp = datetime(2024, 5, 17, 8, 30, 0, tzinfo=timezone.utc)
    
    def test_message_only(self):
        line = format_log_line(LogLevel.INFO, "service started", timestamp=self.timestamp)
        
        assert line == "2024-05-17T08:30:00+00:00 [INFO] service started\n"
    
    def test_args_are_appended_as_json(self):
        line = format_log_line(LogLevel.ERROR, "failed", [{"code": 7}, "retry"], timestamp=self.timestamp)
        
        assert line == '2024-05-17T08:30:00+00:00 [ERROR] failed [{"code": 7}, "retry"]\n'
    
    def test_missing_message(self):
        line = format_log_line(LogLevel.WARN, None, timestamp=self.timestamp)
        
        assert line == "2024-05-17T08:30:00+00:00 [WARN] Unknown log\n"
    
    def test_embedded_newlines_stay_on_one_line(self):
        line = format_log_line(LogLevel.FATAL, "first\nsecond", timestamp=self.timestamp)
        
        assert line.count("\n") == 1
        assert "first\\nsecond" in line
    
    def test_defaults_to_current_utc_time(self):
        line = format_log_line(LogLevel.DEBUG, "now")
        
        moment = datetime.fromisoformat(line.split(" ")[0])
        assert moment.tzinfo is not None
        assert moment.utcoffset().total_seconds() == 0
