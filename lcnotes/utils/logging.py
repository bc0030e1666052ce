"""
Logging for the lcnotes package.

The examples report what they obtain from the language models through
a small logger interface that delegates to Python's logging module.
The interface allows tests to swap in a logger that keeps the messages
in memory.

Usage:
    ```python
    from lcnotes.utils.logging import get_logger, LoglistLogger

    logger = get_logger(__name__)
    logger.info("invoke chat: ...")

    # capture messages instead of printing them
    capture = LoglistLogger()
    capture.warning("skipped file")
    capture.get_logs()  # ['WARNING - skipped file']
    ```
"""

import logging
import sys
from abc import ABC, abstractmethod

LOG_FORMAT = '%(levelname)s - %(message)s'


class LoggerBase(ABC):
    """
    Abstract interface for logging functionality.
    """

    @abstractmethod
    def set_level(self, level: int) -> None:
        """Set the logging level for the logger."""
        pass

    @abstractmethod
    def get_level(self) -> int:
        """Get the current logging level"""
        pass

    @abstractmethod
    def info(self, msg: str) -> None:
        pass

    @abstractmethod
    def warning(self, msg: str) -> None:
        pass

    @abstractmethod
    def error(self, msg: str) -> None:
        pass


class ConsoleLogger(LoggerBase):
    """
    Logs messages to stdout through a logging.Logger delegate.
    """

    def __init__(self, name: str | None = None) -> None:
        """
        Args:
            name: the logger name, typically __name__. The root
                logger is used if no name is given.
        """
        self.logger = logging.getLogger(name or None)
        self.logger.setLevel(logging.INFO)

        if not self.logger.hasHandlers():
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            self.logger.addHandler(handler)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def get_level(self) -> int:
        return self.logger.level

    def info(self, msg: str) -> None:
        self.logger.info(msg)

    def warning(self, msg: str) -> None:
        self.logger.warning(msg)

    def error(self, msg: str) -> None:
        self.logger.error(msg)


class LoglistLogger(LoggerBase):
    """
    Keeps logged messages in a list that the creator of the object
    can inspect, for example in tests.
    """

    def __init__(self) -> None:
        self.logs: list[tuple[str, str]] = []

    def set_level(self, level: int) -> None:
        pass

    def get_level(self) -> int:
        return 0

    def info(self, msg: str) -> None:
        self.logs.append(('INFO', msg))

    def warning(self, msg: str) -> None:
        self.logs.append(('WARNING', msg))

    def error(self, msg: str) -> None:
        self.logs.append(('ERROR', msg))

    def get_logs(self, level: int = 0) -> list[str]:
        """
        Returns the logged messages as strings.

        Args:
            level: filter on the messages.
                0 or less: all messages
                1: omit info
                2 or more: errors only
        """
        logs: list[str] = []
        for severity, msg in self.logs:
            match severity:
                case 'INFO' if level >= 1:
                    continue
                case 'WARNING' if level >= 2:
                    continue
                case _:
                    logs.append(f"{severity} - {msg}")
        return logs

    def count_logs(self, level: int = 0) -> int:
        return len(self.get_logs(level))

    def clear_logs(self) -> None:
        self.logs.clear()


class ExceptionConsoleLogger(ConsoleLogger):
    """
    A console logger that raises a RuntimeError after logging an
    error. Useful in scripts that should stop at the first failure.
    """

    def error(self, msg: str) -> None:
        self.logger.error(msg)
        raise RuntimeError(f"Error: {msg}")


def get_logger(name: str) -> LoggerBase:
    """
    Get a console logger with the specified name.

    Args:
        name: the logger name, typically __name__

    Returns:
        A configured logger instance
    """
    return ConsoleLogger(name)


def set_log_level(level: int) -> None:
    """Set the log level of the root logger."""
    logging.getLogger().setLevel(level)
