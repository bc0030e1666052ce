# pyright: reportUnusedImport=false
# flake8: noqa

from .logging import (
    LoggerBase,
    ConsoleLogger,
    LoglistLogger,
    ExceptionConsoleLogger,
    get_logger,
)
