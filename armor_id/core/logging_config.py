"""Logging configuration with frame-scoped context and structured output.

Every record emitted while a frame is being processed carries that frame's id,
so warnings about a dropped candidate can be traced back to the frame that
produced it. File logging is off by default since the core is embedded in a
larger perception process that usually owns the handlers.
"""
import logging
import logging.handlers
import sys
import json
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional, Union
from pathlib import Path
from contextvars import ContextVar

# Context variable for the frame currently being processed
frame_id: ContextVar[Optional[str]] = ContextVar('frame_id', default=None)

_RESERVED_RECORD_KEYS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'frame_id', 'taskName', 'message', 'asctime'
}


class FrameIDFilter(logging.Filter):
    """Filter to add the current frame id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.frame_id = frame_id.get() or 'no-frame'
        return True


class StructuredFormatter(logging.Formatter):
    """Structured JSON formatter for production logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'frame_id': getattr(record, 'frame_id', 'no-frame'),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info:
            log_entry['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': self.formatException(record.exc_info)
            }

        extra_fields = {k: v for k, v in record.__dict__.items() if k not in _RESERVED_RECORD_KEYS}
        if extra_fields:
            log_entry['extra'] = extra_fields

        return json.dumps(log_entry, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Human-readable formatter for development and console output."""

    def __init__(self, include_frame_id: bool = True):
        self.include_frame_id = include_frame_id
        format_string = (
            '%(asctime)s - %(name)s - %(levelname)s'
            + (' - %(frame_id)s' if include_frame_id else '')
            + ' - %(message)s'
        )
        super().__init__(format_string)


class LoggingManager:
    """Central logging manager for the identification core."""

    def __init__(self):
        self._configured = False
        self._log_dir: Optional[Path] = None
        self._handlers: Dict[str, logging.Handler] = {}

    @property
    def configured(self) -> bool:
        return self._configured

    def configure(
        self,
        log_level: str = 'INFO',
        log_dir: Optional[Union[str, Path]] = None,
        enable_file_logging: bool = False,
        enable_console_logging: bool = True,
        structured_logging: bool = False,
        max_file_size: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
        application_name: str = 'armor-number-id'
    ) -> None:
        """Configure logging for the application.

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_dir: Directory for log files
            enable_file_logging: Enable logging to rotating files
            enable_console_logging: Enable console logging
            structured_logging: Use structured JSON logging
            max_file_size: Maximum size of log files before rotation
            backup_count: Number of backup files to keep
            application_name: Name used for log files
        """
        if self._configured:
            return

        level = getattr(logging, log_level.upper())

        if enable_file_logging:
            self._log_dir = Path(log_dir or 'logs')
            self._log_dir.mkdir(parents=True, exist_ok=True)

        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        frame_filter = FrameIDFilter()
        if structured_logging:
            formatter: logging.Formatter = StructuredFormatter()
        else:
            formatter = HumanReadableFormatter(include_frame_id=True)

        if enable_console_logging:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(level)
            console_handler.setFormatter(formatter)
            console_handler.addFilter(frame_filter)
            root_logger.addHandler(console_handler)
            self._handlers['console'] = console_handler

        if enable_file_logging and self._log_dir:
            app_handler = logging.handlers.RotatingFileHandler(
                self._log_dir / f'{application_name}.log',
                maxBytes=max_file_size,
                backupCount=backup_count,
                encoding='utf-8'
            )
            app_handler.setLevel(level)
            app_handler.setFormatter(formatter)
            app_handler.addFilter(frame_filter)
            root_logger.addHandler(app_handler)
            self._handlers['application'] = app_handler

            # Error log file (only ERROR and CRITICAL)
            error_handler = logging.handlers.RotatingFileHandler(
                self._log_dir / f'{application_name}-errors.log',
                maxBytes=max_file_size,
                backupCount=backup_count,
                encoding='utf-8'
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(formatter)
            error_handler.addFilter(frame_filter)
            root_logger.addHandler(error_handler)
            self._handlers['errors'] = error_handler

        self._configure_specific_loggers(level)

        self._configured = True
        logging.info(f"Logging configured - Level: {log_level}, File: {enable_file_logging}, Console: {enable_console_logging}")

    def _configure_specific_loggers(self, level: int) -> None:
        """Configure specific loggers with appropriate levels."""
        logging.getLogger('armor_id').setLevel(level)

    def get_logger(self, name: str) -> logging.Logger:
        """Get a logger with the specified name."""
        return logging.getLogger(name)

    def set_frame_id(self, fid: Optional[str] = None) -> str:
        """Set frame id for the current context."""
        if fid is None:
            fid = uuid.uuid4().hex[:12]
        frame_id.set(fid)
        return fid

    def get_frame_id(self) -> Optional[str]:
        return frame_id.get()

    def clear_frame_id(self) -> None:
        frame_id.set(None)

    def shutdown(self) -> None:
        """Detach and close every handler installed by configure()."""
        root_logger = logging.getLogger()
        for handler in self._handlers.values():
            root_logger.removeHandler(handler)
            handler.close()
        self._handlers.clear()
        self._configured = False


# Global logging manager instance
logging_manager = LoggingManager()


def configure_logging(**kwargs) -> None:
    """Configure application logging."""
    logging_manager.configure(**kwargs)


def configure_from_config(cfg) -> None:
    """Configure logging from a Config object."""
    logging_manager.configure(
        log_level=cfg.log_level,
        log_dir=cfg.log_dir,
        enable_file_logging=cfg.enable_file_logging,
        structured_logging=cfg.structured_logging,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging_manager.get_logger(name)


def set_frame_id(fid: Optional[str] = None) -> str:
    return logging_manager.set_frame_id(fid)


def get_frame_id() -> Optional[str]:
    return logging_manager.get_frame_id()


class FrameContext:
    """Context manager binding log records to one camera frame."""

    def __init__(self, fid: Optional[str] = None):
        self.fid = fid
        self.previous_fid: Optional[str] = None

    def __enter__(self) -> str:
        self.previous_fid = get_frame_id()
        return set_frame_id(self.fid)

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.previous_fid is not None:
            set_frame_id(self.previous_fid)
        else:
            logging_manager.clear_frame_id()
