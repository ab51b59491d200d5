from __future__ import annotations

import logging
from abc import abstractmethod
from logging import LogRecord
from logging.handlers import QueueHandler, QueueListener
from multiprocessing.managers import SyncManager
from typing import Protocol

from rich.logging import RichHandler

LOGGER = logging.getLogger()
"""
Logger to be used across the codebase.

:meta hide-value:
"""


class LogQueue(Protocol):
    """A minimal protocol for queue-like objects used by logging handlers."""

    @abstractmethod
    def put_nowait(self, item: LogRecord, /) -> None:
        """Put item."""

    @abstractmethod
    def get(self) -> LogRecord:
        """Get item."""


def start_logger(log_level: int = logging.INFO) -> None:
    """Configure the default logger of the current process to render messages at *log_level* or above with rich."""
    LOGGER.handlers.clear()
    LOGGER.addHandler(RichHandler(level=log_level))
    LOGGER.setLevel(log_level)


def start_log_listener(manager: SyncManager, log_level: int) -> QueueListener:
    """
    Start listener thread which can receive log messages from worker processes through a queue.

    Messages are passed on to the handlers of the current process, or to a new rich handler if none is configured.

    Args:
        manager: used to create a log queue that can be shared across processes
        log_level: minimum level to log, e.g. :data:`logging.INFO`

    Returns:
        `QueueListener` which can be used to access the log queue and to stop the listener
        thread

    """
    log_queue = manager.Queue()
    handlers = LOGGER.handlers or [RichHandler(level=log_level)]
    log_listener = QueueListener(log_queue, *handlers, respect_handler_level=True)
    log_listener.start()
    return log_listener


def start_queue_logger(queue: LogQueue) -> None:
    """Configure the default logger for the current process to put log messages in the *queue*."""
    LOGGER.handlers.clear()
    LOGGER.addHandler(QueueHandler(queue))
    LOGGER.setLevel(logging.NOTSET)
