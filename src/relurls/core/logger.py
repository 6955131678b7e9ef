"""
Logging and Error Handling System

This module provides centralized logging configuration and error tracking
for relurls runs. Library modules log through ``logging.getLogger(__name__)``;
handlers are only attached here, by the command line host.
"""

import logging
import logging.handlers
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional


APP_NAME = "relurls"


class RelUrlsLogger:
    """
    Centralized logging setup.

    Console output always; when a log directory is given, a rotating full
    log and a rotating errors-only log are written there as well.
    """

    def __init__(self, log_dir: Optional[str] = None, app_name: str = APP_NAME):
        """
        Args:
            log_dir: Directory to store log files (None for console only)
            app_name: Name of the root application logger
        """
        self.log_dir = Path(log_dir) if log_dir else None
        self.app_name = app_name

        if self.log_dir:
            self.log_dir.mkdir(parents=True, exist_ok=True)

    def setup_logger(self, level: int = logging.INFO) -> logging.Logger:
        """
        Set up the application logger with console and (optional) file handlers.

        Args:
            level: Console logging level (default: INFO)

        Returns:
            Configured logger instance
        """
        logger = logging.getLogger(self.app_name)
        logger.setLevel(logging.DEBUG)

        # Prevent duplicate handlers when logging is initialized again
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        detailed_formatter = logging.Formatter(
            '%(asctime)s | %(name)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        console_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s',
            datefmt='%H:%M:%S'
        )

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

        if self.log_dir:
            file_handler = logging.handlers.RotatingFileHandler(
                self.log_dir / f"{self.app_name}.log",
                maxBytes=10*1024*1024,  # 10MB
                backupCount=5,
                encoding='utf-8'
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(detailed_formatter)

            error_handler = logging.handlers.RotatingFileHandler(
                self.log_dir / f"{self.app_name}_errors.log",
                maxBytes=5*1024*1024,  # 5MB
                backupCount=3,
                encoding='utf-8'
            )
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(detailed_formatter)

            logger.addHandler(file_handler)
            logger.addHandler(error_handler)

        return logger


class ErrorTracker:
    """
    Tracks errors and warnings that occur during a run.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.errors: list = []
        self.warnings: list = []

    def log_error(self,
                  error: Exception,
                  context: str = None,
                  path: str = None) -> str:
        """
        Log an error with context information.

        Args:
            error: The exception that occurred
            context: Context where the error occurred
            path: File being processed when the error occurred

        Returns:
            Error ID for tracking
        """
        error_id = f"ERR_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{len(self.errors):03d}"

        error_data = {
            'id': error_id,
            'timestamp': datetime.now(),
            'type': type(error).__name__,
            'message': str(error),
            'context': context,
            'path': path,
            'traceback': ''.join(traceback.format_exception(type(error), error, error.__traceback__)),
        }
        self.errors.append(error_data)

        log_message = f"[{error_id}] {error_data['type']}: {error_data['message']}"
        if context:
            log_message += f" (Context: {context})"
        if path:
            log_message += f" (File: {path})"

        self.logger.error(log_message)
        self.logger.debug(f"[{error_id}] Full traceback:\n{error_data['traceback']}")

        return error_id

    def log_warning(self,
                    message: str,
                    context: str = None,
                    path: str = None) -> str:
        """
        Log a warning with context information.

        Returns:
            Warning ID for tracking
        """
        warning_id = f"WARN_{datetime.now().strftime('%Y%m%d_%H%M%S')}_{len(self.warnings):03d}"

        self.warnings.append({
            'id': warning_id,
            'timestamp': datetime.now(),
            'message': message,
            'context': context,
            'path': path
        })

        log_message = f"[{warning_id}] {message}"
        if context:
            log_message += f" (Context: {context})"
        if path:
            log_message += f" (File: {path})"

        self.logger.warning(log_message)

        return warning_id

    def get_error_summary(self) -> Dict[str, Any]:
        """
        Get a summary of all errors and warnings.
        """
        return {
            'total_errors': len(self.errors),
            'total_warnings': len(self.warnings),
            'error_types': self._count_error_types(),
            'recent_errors': self.errors[-5:] if self.errors else [],
            'recent_warnings': self.warnings[-5:] if self.warnings else []
        }

    def _count_error_types(self) -> Dict[str, int]:
        """Count errors by type."""
        type_counts = {}
        for error in self.errors:
            error_type = error['type']
            type_counts[error_type] = type_counts.get(error_type, 0) + 1
        return type_counts


def initialize_logging(log_dir: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    """
    Set up the relurls application logger.

    Args:
        log_dir: Directory for log files (None for console only)
        level: Console logging level
    """
    logging_setup = RelUrlsLogger(log_dir)
    logger = logging_setup.setup_logger(level)
    logger.debug(f"Python version: {sys.version}")
    if logging_setup.log_dir:
        logger.debug(f"Log directory: {logging_setup.log_dir.absolute()}")
    return logger
