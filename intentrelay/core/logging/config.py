"""
Logging configuration for IntentRelay
"""

from pydantic import BaseModel


class FileLogConfig(BaseModel):
    """Rotating files under log_dir: app.log at the root level, errors.log at ERROR"""

    enabled: bool = False
    log_dir: str = "logs"
    max_file_size: int = 10 * 1024 * 1024
    backup_count: int = 5
    app_log_enabled: bool = True
    error_log_enabled: bool = True


class ConsoleLogConfig(BaseModel):
    enabled: bool = True
    level: str = "INFO"


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "console"
    file: FileLogConfig = FileLogConfig()
    console: ConsoleLogConfig = ConsoleLogConfig()

    @classmethod
    def from_settings(cls, logging_settings) -> "LoggingConfig":
        """Build from LOG_LEVEL, LOG_FORMAT and the nested LOGGING dict"""
        handlers = logging_settings.LOGGING or {}
        return cls(
            level=logging_settings.LOG_LEVEL,
            format=logging_settings.LOG_FORMAT,
            file=FileLogConfig(**handlers.get("file", {})),
            console=ConsoleLogConfig(**handlers.get("console", {})),
        )
