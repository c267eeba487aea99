"""
Mood Analyst Logging Configuration

Structured logging for the Mood Analyst agent:
- structlog processors feeding stdlib handlers
- Rotating main and error log files
- Colored console output for development
- Request-scoped context variables
"""

import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

NOISY_MODULES = ["aiohttp.access", "aiohttp.client", "urllib3", "httpx"]


class MoodAnalystLogger:
    """
    Centralized logging configuration for Mood Analyst.

    Log events are rendered by structlog's ConsoleRenderer; files get the
    uncolored variant.
    """

    def __init__(
        self,
        log_dir: str = "logs",
        log_level: str = "INFO",
        enable_console: bool = True,
        enable_files: bool = True,
        max_file_size: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5
    ):
        """
        Initialize the logging system.

        Args:
            log_dir: Directory to store log files
            log_level: Default log level
            enable_console: Whether to enable console logging
            enable_files: Whether to write rotating log files
            max_file_size: Maximum size per log file before rotation
            backup_count: Number of backup files to keep
        """
        self.log_dir = Path(log_dir)
        self.log_level = getattr(logging, log_level.upper(), logging.INFO)
        self.enable_console = enable_console
        self.enable_files = enable_files
        self.max_file_size = max_file_size
        self.backup_count = backup_count

        if self.enable_files:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self._setup_logging()

    def _setup_logging(self):
        root_logger = logging.getLogger()
        root_logger.handlers.clear()

        self._configure_structlog()

        if self.enable_files:
            self._setup_file_handlers()

        if self.enable_console:
            self._setup_console_handler()

        self._quiet_external_loggers()

        root_logger.setLevel(self.log_level)

    def _configure_structlog(self):
        shared_processors = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        structlog.configure(
            processors=shared_processors + [
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def _setup_file_handlers(self):
        """Main log captures everything at the configured level; errors.log only errors."""
        main_handler = self._create_rotating_file_handler(
            filename="mood_analyst.log",
            level=self.log_level
        )
        error_handler = self._create_rotating_file_handler(
            filename="errors.log",
            level=logging.ERROR
        )

        root_logger = logging.getLogger()
        for handler in [main_handler, error_handler]:
            root_logger.addHandler(handler)

    def _create_rotating_file_handler(
        self,
        filename: str,
        level: int
    ) -> logging.handlers.RotatingFileHandler:
        handler = logging.handlers.RotatingFileHandler(
            filename=self.log_dir / filename,
            maxBytes=self.max_file_size,
            backupCount=self.backup_count,
            encoding='utf-8'
        )
        handler.setLevel(level)
        handler.setFormatter(structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=False),
        ))
        return handler

    def _setup_console_handler(self):
        # stderr keeps stdout free for one-shot CLI responses
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=True),
        ))
        logging.getLogger().addHandler(console_handler)

    def _quiet_external_loggers(self):
        for module in NOISY_MODULES:
            logging.getLogger(module).setLevel(logging.WARNING)

    def get_logger(self, name: str) -> structlog.stdlib.BoundLogger:
        """Get a structured logger for a specific component."""
        return structlog.get_logger(name)

    def set_request_context(self, request_id: str, **kwargs):
        """Set context for the current request."""
        clear_contextvars()
        bind_contextvars(
            request_id=request_id,
            timestamp=datetime.now(timezone.utc).isoformat(),
            **kwargs
        )

    def log_api_request(
        self,
        method: str,
        url: str,
        status_code: int,
        duration: float,
        **kwargs
    ):
        """Log API request details."""
        self.get_logger("api").info(
            "api_request",
            method=method,
            url=url,
            status_code=status_code,
            duration_seconds=duration,
            **kwargs
        )


# Global logger instance
_logger_instance: Optional[MoodAnalystLogger] = None


def setup_logging(
    log_dir: str = "logs",
    log_level: str = "INFO",
    enable_console: bool = True,
    **kwargs
) -> MoodAnalystLogger:
    """
    Setup the global logging configuration.

    Args:
        log_dir: Directory to store log files
        log_level: Default log level
        enable_console: Whether to enable console logging
        **kwargs: Additional arguments for MoodAnalystLogger

    Returns:
        Configured logger instance
    """
    global _logger_instance

    _logger_instance = MoodAnalystLogger(
        log_dir=log_dir,
        log_level=log_level,
        enable_console=enable_console,
        **kwargs
    )

    return _logger_instance


def log_api_request(method: str, url: str, status_code: int, duration: float, **kwargs):
    if _logger_instance:
        _logger_instance.log_api_request(method, url, status_code, duration, **kwargs)


def set_request_context(request_id: str, **kwargs):
    if _logger_instance:
        _logger_instance.set_request_context(request_id, **kwargs)
