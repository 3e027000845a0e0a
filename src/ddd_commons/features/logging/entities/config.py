"""Logging configuration for ddd-commons.

Settings models for the file log stream service, the pending tasks service
and the logger service. Invalid input is reported as InvalidSettingsError.
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ....core.exceptions import InvalidSettingsError

SettingsT = TypeVar("SettingsT", bound=BaseModel)

LoggerFn = Callable[..., Awaitable[Any]]
FlushFn = Callable[[], Awaitable[Any]]
ErrorHandlerFn = Callable[[BaseException], Any]


class LogLevel(str, Enum):
    """Severity levels accepted by the logging services."""
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


class LoggerCallback(str, Enum):
    """Names of the callbacks a LoggerService can fire."""
    ON_DEBUG = "on_debug"
    ON_INFO = "on_info"
    ON_WARN = "on_warn"
    ON_ERROR = "on_error"
    ON_FATAL = "on_fatal"
    ON_FLUSH = "on_flush"


LEVEL_CALLBACKS: Dict[LogLevel, LoggerCallback] = {
    LogLevel.DEBUG: LoggerCallback.ON_DEBUG,
    LogLevel.INFO: LoggerCallback.ON_INFO,
    LogLevel.WARN: LoggerCallback.ON_WARN,
    LogLevel.ERROR: LoggerCallback.ON_ERROR,
    LogLevel.FATAL: LoggerCallback.ON_FATAL,
}


class FileLogStreamSettings(BaseSettings):
    """Settings for FileLogStreamService.
    
    - abspath: directory holding one ``<level>.log`` file per level.
    - levels: levels written to files; other levels are ignored.
    - stream_limit: max pending messages per level while a stream is busy.
    - kill_on_limit: terminate the process when a message is discarded.
    - error_threshold: stream errors tolerated before terminating the process.
    """
    
    model_config = SettingsConfigDict(
        env_prefix="DDD_LOG_FILE_",
        case_sensitive=False,
        extra="ignore",
    )
    
    abspath: Path = Field(description="Existing, writable directory for log files")
    levels: List[LogLevel] = Field(
        default_factory=lambda: [LogLevel.ERROR, LogLevel.FATAL],
        description="Levels written to files",
    )
    stream_limit: int = Field(default=10000, ge=1, description="Pending messages allowed per level")
    kill_on_limit: bool = Field(default=False, description="Terminate when the pending limit is hit")
    error_threshold: int = Field(default=10, ge=1, description="Stream errors before terminating")
    
    @field_validator("abspath", mode="before")
    @classmethod
    def resolve_abspath(cls, value: Any) -> Path:
        """Expand and resolve the path, then require an accessible directory."""
        if value is None or str(value).strip() == "":
            raise ValueError("Invalid abspath: empty path")
        
        path = Path(os.path.expanduser(str(value))).resolve()
        
        if not path.is_dir():
            raise ValueError(f"Invalid abspath: {path} is not an existing directory")
        if not os.access(path, os.W_OK | os.X_OK):
            raise ValueError(f"Invalid abspath: {path} is not writable")
        
        return path
    
    @field_validator("levels")
    @classmethod
    def dedupe_levels(cls, value: List[LogLevel]) -> List[LogLevel]:
        """Drop repeated levels keeping the first occurrence."""
        return list(dict.fromkeys(value))


class PendingTasksSettings(BaseModel):
    """Settings for PendingTasksService.
    
    - limit: max in-flight tasks tracked at once.
    - kill_on_limit: terminate the process when a task is discarded.
    - track: logger callbacks whose tasks are tracked and awaited on cleanup.
    """
    
    limit: int = Field(default=10000, ge=1)
    kill_on_limit: bool = False
    track: List[LoggerCallback] = Field(
        default_factory=lambda: [LoggerCallback.ON_ERROR, LoggerCallback.ON_FATAL]
    )


class LoggerCallbacks(BaseModel):
    """Async callbacks fired by LoggerService, one per level."""
    
    model_config = ConfigDict(extra="forbid")
    
    on_debug: Optional[LoggerFn] = None
    on_info: Optional[LoggerFn] = None
    on_warn: Optional[LoggerFn] = None
    on_error: Optional[LoggerFn] = None
    on_fatal: Optional[LoggerFn] = None


class LoggerSettings(BaseModel):
    """Settings for LoggerService.
    
    - always_on_console: echo every dispatched entry to the module logger.
    - callbacks: per-level async callbacks.
    - ignore_levels: levels dropped before reaching files or callbacks.
    - ignore_unset: when False, a level without callback raises.
    - on_error: handler for exceptions raised by callbacks.
    - on_flush: async callback fired by ``flush()``.
    - file: optional file log stream settings.
    - tasks: pending tasks tracking settings.
    """
    
    always_on_console: bool = False
    callbacks: LoggerCallbacks = Field(default_factory=LoggerCallbacks)
    ignore_levels: List[LogLevel] = Field(default_factory=list)
    ignore_unset: bool = True
    on_error: Optional[ErrorHandlerFn] = None
    on_flush: Optional[FlushFn] = None
    file: Optional[FileLogStreamSettings] = None
    tasks: PendingTasksSettings = Field(default_factory=PendingTasksSettings)


def build_settings(
    settings_cls: Type[SettingsT],
    settings: Optional[Any] = None,
    **overrides: Any
) -> SettingsT:
    """Build a settings model from an instance, a mapping or keyword overrides.
    
    Args:
        settings_cls: Settings model to build
        settings: Existing instance or mapping of field values
        **overrides: Field values taking precedence over ``settings``
        
    Returns:
        Validated settings instance
        
    Raises:
        InvalidSettingsError: If validation fails
    """
    if isinstance(settings, settings_cls) and not overrides:
        return settings
    
    if isinstance(settings, BaseModel):
        values = settings.model_dump(exclude_unset=True)
    else:
        values = dict(settings or {})
    values.update(overrides)
    
    try:
        return settings_cls(**values)
    except ValidationError as e:
        errors = [
            {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
            for error in e.errors()
        ]
        raise InvalidSettingsError(
            f"Invalid {settings_cls.__name__}: {errors[0]['msg'] if errors else e}",
            details={"errors": errors},
        ) from e
