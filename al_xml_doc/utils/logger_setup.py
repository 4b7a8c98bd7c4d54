"""
Centralized logging configuration for al-xml-doc.

Provides a simple, consistent logging interface across all modules.
"""

import logging
import sys
from pathlib import Path
from typing import Optional


class LoggerManager:
    """Manages logging configuration for the application."""

    _initialized = False
    _log_file = None

    @classmethod
    def setup_logging(cls, log_file: Optional[str] = None, level: str = "INFO", console: bool = False,
                      force: bool = False):
        """
        Setup logging configuration.

        Args:
            log_file (Optional[str]): Path to log file. If None, keeps the current one or uses default location.
            level (str): Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            console (bool): Enable console logging (default: False, only file logging)
            force (bool): Replace an existing configuration instead of keeping it
        """
        if cls._initialized and not force:
            return

        numeric_level = getattr(logging, level.upper(), logging.INFO)

        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        root_logger = logging.getLogger('al_xml_doc')
        root_logger.setLevel(numeric_level)
        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)

        # Console handler (optional, disabled by default)
        if console:
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(numeric_level)
            console_handler.setFormatter(formatter)
            root_logger.addHandler(console_handler)

        # File handler (always enabled, use default location if not specified)
        if log_file is None:
            log_file = cls._log_file or Path.cwd() / '.al-xml-doc' / 'al_xml_doc.log'

        cls._log_file = Path(log_file)
        cls._log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(cls._log_file, encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

        cls._initialized = True

    @classmethod
    def get_log_file(cls) -> Optional[Path]:
        return cls._log_file

    @classmethod
    def shutdown(cls):
        """Close all handlers so the log file can be removed."""
        root_logger = logging.getLogger('al_xml_doc')
        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)
        cls._initialized = False
        cls._log_file = None

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Get a logger for a specific module.

        Args:
            name (str): Module name (usually __name__)

        Returns:
            logging.Logger: Logger namespaced under 'al_xml_doc'
        """
        if not cls._initialized:
            cls.setup_logging()

        if name.startswith('al_xml_doc.'):
            return logging.getLogger(name)
        return logging.getLogger(f'al_xml_doc.{name}')


def get_logger(name: str) -> logging.Logger:
    """
    Convenience function to get a logger.

    Args:
        name (str): Module name (usually __name__)

    Returns:
        logging.Logger: Configured logger instance
    """
    return LoggerManager.get_logger(name)
