"""
Task Runner für Hintergrund-Imports

Führt einen Import-Lauf außerhalb des Requests aus:
- ThreadedTaskRunner: ein Daemon-Thread pro Job (Standard)
- InlineTaskRunner: synchron im aufrufenden Thread (Tests, Management Command)

Es gibt weder Abbruch noch Timeout noch automatische Wiederholung.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable

from django.db import connections
from django.utils.module_loading import import_string

from .job_store import import_setting

logger = logging.getLogger(__name__)


class TaskRunner(ABC):
    @abstractmethod
    def submit(self, fn: Callable[..., Any], *args: Any, name: str = "task") -> None:
        ...

    def _execute(self, fn: Callable[..., Any], args: tuple, name: str) -> None:
        try:
            fn(*args)
        except Exception:
            # Der Task selbst markiert seinen Job als fehlgeschlagen
            logger.exception(f"Hintergrund-Task {name} mit Fehler beendet")


class ThreadedTaskRunner(TaskRunner):
    """Startet jeden Task in einem eigenen Daemon-Thread."""

    def submit(self, fn: Callable[..., Any], *args: Any, name: str = "task") -> None:
        thread = threading.Thread(
            target=self._run,
            args=(fn, args, name),
            name=f"agenda-import-{name}",
            daemon=True,
        )
        thread.start()
        logger.debug(f"Hintergrund-Task {name} gestartet ({thread.name})")

    def _run(self, fn: Callable[..., Any], args: tuple, name: str) -> None:
        try:
            self._execute(fn, args, name)
        finally:
            # Jeder Thread hat eigene DB-Verbindungen
            connections.close_all()


class InlineTaskRunner(TaskRunner):
    """Führt den Task sofort aus, bevor ``submit`` zurückkehrt."""

    def submit(self, fn: Callable[..., Any], *args: Any, name: str = "task") -> None:
        self._execute(fn, args, name)


def get_task_runner() -> TaskRunner:
    return import_string(import_setting("TASK_RUNNER"))()
