"""
Import Job Store für den Agenda-Import

Verwaltet den Fortschritt der Import-Jobs:
- ImportJob: Zustand eines Laufs (Zähler, Status, Warnungen, Events)
- JobStore: Schnittstelle mit create / get / update
- InMemoryJobStore: Prozesslokaler Speicher (Standard)
- CacheJobStore: Django-Cache, geteilt zwischen Worker-Prozessen (z.B. Redis)

Gelesene Jobs sind immer Kopien: der Status-Endpoint sieht nie eine halb
angewendete Änderung.

Author: DSP Development Team
Version: 1.0.0
"""

import copy
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from functools import lru_cache
from threading import Lock
from typing import Any, Callable, Dict, List, Optional

from django.conf import settings
from django.core.cache import cache
from django.utils import timezone
from django.utils.module_loading import import_string

from ...exceptions import JobNotFoundError, JobStateError

logger = logging.getLogger(__name__)


class JobStatus:
    STARTING = "starting"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    FAILED = "failed"

    TERMINAL = frozenset({COMPLETED, FAILED})
    TRANSITIONS = {
        STARTING: frozenset({IN_PROGRESS, FAILED}),
        IN_PROGRESS: frozenset({COMPLETED, FAILED}),
        COMPLETED: frozenset(),
        FAILED: frozenset(),
    }


def _now_iso() -> str:
    return timezone.now().isoformat()


@dataclass
class ImportJob:
    """Fortschritt eines Agenda-Import-Laufs."""

    job_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    processed: int = 0
    total: int = 0
    status: str = JobStatus.STARTING
    message: str = "Initializing import process..."
    events: List[Dict[str, Any]] = field(default_factory=list)
    warning_messages: List[str] = field(default_factory=list)
    started_at: str = field(default_factory=_now_iso)
    completed_at: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in JobStatus.TERMINAL

    @property
    def warnings(self) -> int:
        return len(self.warning_messages)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-Darstellung für den Status-Endpoint."""
        return {
            "jobId": self.job_id,
            "processed": self.processed,
            "total": self.total,
            "status": self.status,
            "message": self.message,
            "warnings": self.warnings,
            "warningMessages": list(self.warning_messages),
            "events": list(self.events),
            "startedAt": self.started_at,
            "completedAt": self.completed_at,
            "error": self.error,
        }


def apply_changes(job: ImportJob, changes: Dict[str, Any]) -> ImportJob:
    """
    Wendet ``changes`` auf eine Kopie von ``job`` an und prüft die Invarianten.

    Raises:
        JobStateError: Bei unzulässigem Statuswechsel oder unbekanntem Feld
    """
    unknown = set(changes) - set(ImportJob.__dataclass_fields__)
    if unknown:
        raise JobStateError(f"Unknown job fields: {', '.join(sorted(unknown))}")

    new_status = changes.get("status", job.status)
    if new_status != job.status and new_status not in JobStatus.TRANSITIONS.get(job.status, ()):
        raise JobStateError(
            f"Invalid job transition {job.status} -> {new_status}",
            {"job_id": job.job_id},
        )
    if job.is_terminal and changes:
        raise JobStateError(f"Job {job.job_id} is already {job.status}", {"job_id": job.job_id})

    updated = replace(job, **copy.deepcopy(changes))
    if updated.total and updated.processed > updated.total:
        raise JobStateError(
            f"Processed count {updated.processed} exceeds total {updated.total}",
            {"job_id": job.job_id},
        )
    if updated.is_terminal and updated.completed_at is None:
        updated.completed_at = _now_iso()
    return updated


class JobStore(ABC):
    """Schnittstelle für die Speicherung von Import-Jobs."""

    @abstractmethod
    def create(self, job: Optional[ImportJob] = None) -> ImportJob:
        ...

    @abstractmethod
    def get(self, job_id: str) -> Optional[ImportJob]:
        ...

    @abstractmethod
    def mutate(self, job_id: str, mutator: Callable[[ImportJob], Dict[str, Any]]) -> ImportJob:
        """Liest den Job, berechnet Änderungen mit ``mutator`` und speichert atomar."""

    def update(self, job_id: str, **changes: Any) -> ImportJob:
        return self.mutate(job_id, lambda job: changes)


class InMemoryJobStore(JobStore):
    """
    Prozesslokaler Job-Store.

    Nicht persistent: nach einem Neustart sind alle Jobs verloren.
    """

    def __init__(self) -> None:
        self._jobs: Dict[str, ImportJob] = {}
        self._lock = Lock()

    def create(self, job: Optional[ImportJob] = None) -> ImportJob:
        job = job or ImportJob()
        with self._lock:
            self._jobs[job.job_id] = copy.deepcopy(job)
        return copy.deepcopy(job)

    def get(self, job_id: str) -> Optional[ImportJob]:
        with self._lock:
            job = self._jobs.get(job_id)
            return copy.deepcopy(job) if job else None

    def mutate(self, job_id: str, mutator: Callable[[ImportJob], Dict[str, Any]]) -> ImportJob:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                raise JobNotFoundError(job_id)
            updated = apply_changes(job, mutator(job))
            self._jobs[job_id] = updated
            return copy.deepcopy(updated)


class CacheJobStore(JobStore):
    """
    Job-Store auf Basis des Django-Caches.

    Mit Redis als Cache-Backend sehen alle Worker-Prozesse denselben
    Job-Zustand. Schreibzugriffe pro Job kommen nur vom eigenen
    Hintergrund-Task, der Lock schützt nur innerhalb des Prozesses.
    """

    CACHE_PREFIX = "agenda_import_job"

    def __init__(self, timeout: Optional[int] = None) -> None:
        self.timeout = timeout or import_setting("JOB_CACHE_TIMEOUT")
        self._lock = Lock()

    def _key(self, job_id: str) -> str:
        return f"{self.CACHE_PREFIX}:{job_id}"

    def create(self, job: Optional[ImportJob] = None) -> ImportJob:
        job = job or ImportJob()
        cache.set(self._key(job.job_id), job, self.timeout)
        return copy.deepcopy(job)

    def get(self, job_id: str) -> Optional[ImportJob]:
        return cache.get(self._key(job_id))

    def mutate(self, job_id: str, mutator: Callable[[ImportJob], Dict[str, Any]]) -> ImportJob:
        with self._lock:
            job = cache.get(self._key(job_id))
            if job is None:
                raise JobNotFoundError(job_id)
            updated = apply_changes(job, mutator(job))
            cache.set(self._key(job_id), updated, self.timeout)
            return updated


DEFAULTS = {
    "JOB_STORE": "training_planner.services.jobs.job_store.InMemoryJobStore",
    "TASK_RUNNER": "training_planner.services.jobs.task_runner.ThreadedTaskRunner",
    "JOB_CACHE_TIMEOUT": 60 * 60 * 24,
}


def import_setting(name: str) -> Any:
    """Liest einen Wert aus ``settings.AGENDA_IMPORT`` mit Fallback auf DEFAULTS."""
    return getattr(settings, "AGENDA_IMPORT", {}).get(name, DEFAULTS[name])


@lru_cache(maxsize=None)
def _build_job_store(path: str) -> JobStore:
    logger.info(f"Agenda-Import Job-Store: {path}")
    return import_string(path)()


def get_job_store() -> JobStore:
    """
    Liefert den konfigurierten Job-Store (eine Instanz pro Prozess und Klasse).

    Der Store muss prozessweit geteilt werden, damit der Status-Endpoint die
    Jobs der Hintergrund-Tasks sieht.
    """
    return _build_job_store(import_setting("JOB_STORE"))
