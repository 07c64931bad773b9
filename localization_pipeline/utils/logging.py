"""Structured logging for the localization pipeline."""

import logging
import sys
from typing import Optional
from pathlib import Path
from .colors import Colors

ROOT_LOGGER_NAME = 'localization_pipeline'


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colors console output by log level.

    File handlers use a plain formatter so log files stay free of
    escape sequences.
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.OKCYAN,
        logging.INFO: Colors.OKGREEN,
        logging.WARNING: Colors.WARNING,
        logging.ERROR: Colors.FAIL,
        logging.CRITICAL: Colors.FAIL + Colors.BOLD,
    }

    LEVEL_PREFIXES = {
        logging.WARNING: 'warning:',
        logging.ERROR: 'error:',
        logging.CRITICAL: 'critical:',
    }

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = True, use_prefixes: bool = True):
        """
        Initialize the formatter.

        Args:
            fmt: Format string for log messages
            use_colors: Whether to use ANSI colors
            use_prefixes: Whether to prefix warnings and errors with their level
        """
        super().__init__(fmt)
        self.use_colors = use_colors
        self.use_prefixes = use_prefixes

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)

        if self.use_prefixes:
            prefix = self.LEVEL_PREFIXES.get(record.levelno, '')
            if prefix:
                message = f"{prefix} {message}"

        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelno, '')
            message = f"{color}{message}{Colors.ENDC}"

        return message


class Logger:
    """
    Main logger for the pipeline.

    Owns the handlers of the ``localization_pipeline`` logger:
    - console output (stderr) with optional colors
    - optional file output with timestamps
    - module-specific child loggers that propagate to it
    """

    _instance: Optional['Logger'] = None
    _initialized: bool = False

    def __new__(cls) -> 'Logger':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if Logger._initialized:
            return

        self._logger = logging.getLogger(ROOT_LOGGER_NAME)
        self._logger.setLevel(logging.DEBUG)
        self._logger.handlers = []

        self._console_handler = self._create_console_handler()
        self._logger.addHandler(self._console_handler)

        self._file_handler: Optional[logging.FileHandler] = None

        Logger._initialized = True

    def _create_console_handler(
        self,
        level: int = logging.WARNING,
        use_colors: Optional[bool] = None
    ) -> logging.StreamHandler:
        """
        Create a console handler.

        Args:
            level: Minimum log level for console output
            use_colors: Force colors on or off; autodetected from the stream when None

        Returns:
            Configured StreamHandler
        """
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)

        if use_colors is None:
            use_colors = Colors.supported(sys.stderr)

        handler.setFormatter(ColoredFormatter(fmt='%(message)s', use_colors=use_colors))
        return handler

    def _create_file_handler(
        self,
        file_path: Path,
        level: int = logging.DEBUG
    ) -> logging.FileHandler:
        """
        Create a file handler for logging to file.

        Args:
            file_path: Path to log file
            level: Minimum log level for file output

        Returns:
            Configured FileHandler
        """
        file_path.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.FileHandler(file_path, encoding='utf-8')
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        return handler

    def configure(
        self,
        verbose: bool = False,
        quiet: bool = False,
        log_file: Optional[Path] = None,
        use_colors: Optional[bool] = None
    ) -> None:
        """
        Configure the logger settings.

        Args:
            verbose: Enable DEBUG console output
            quiet: Only show errors on the console
            log_file: Optional file path for logging
            use_colors: Whether to use colors in console
        """
        if quiet:
            console_level = logging.ERROR
        elif verbose:
            console_level = logging.DEBUG
        else:
            console_level = logging.WARNING

        self._logger.removeHandler(self._console_handler)
        self._console_handler = self._create_console_handler(
            level=console_level,
            use_colors=use_colors
        )
        self._logger.addHandler(self._console_handler)

        if log_file:
            if self._file_handler:
                self._logger.removeHandler(self._file_handler)
                self._file_handler.close()
            self._file_handler = self._create_file_handler(log_file)
            self._logger.addHandler(self._file_handler)

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """
        Get a logger instance.

        Args:
            name: Optional module name for hierarchical logging

        Returns:
            ``localization_pipeline.<name>`` or the root pipeline logger
        """
        if name:
            return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')
        return self._logger


_logger: Optional[Logger] = None


def get_logger() -> Logger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = Logger()
    return _logger


def configure_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
    use_colors: Optional[bool] = None
) -> None:
    """
    Configure the global logger.

    Args:
        verbose: Enable DEBUG console output
        quiet: Only show errors on the console
        log_file: Optional file path for logging
        use_colors: Whether to use colors in console
    """
    get_logger().configure(
        verbose=verbose,
        quiet=quiet,
        log_file=log_file,
        use_colors=use_colors
    )


def reset_logger() -> None:
    """Reset the global logger (mainly for testing)."""
    global _logger
    if _logger is not None:
        for handler in _logger._logger.handlers[:]:
            handler.close()
            _logger._logger.removeHandler(handler)
    _logger = None
    Logger._instance = None
    Logger._initialized = False
