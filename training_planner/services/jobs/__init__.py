"""
Job Services Package für den Agenda-Import

- job_store: Fortschritt und Status der Import-Jobs
- task_runner: Ausführung der Import-Läufe im Hintergrund

Author: DSP Development Team
Version: 1.0.0
"""

from .job_store import (
    JobStatus,
    ImportJob,
    JobStore,
    InMemoryJobStore,
    CacheJobStore,
    get_job_store,
)
from .task_runner import TaskRunner, ThreadedTaskRunner, InlineTaskRunner, get_task_runner

__all__ = [
    "JobStatus",
    "ImportJob",
    "JobStore",
    "InMemoryJobStore",
    "CacheJobStore",
    "get_job_store",
    "TaskRunner",
    "ThreadedTaskRunner",
    "InlineTaskRunner",
    "get_task_runner",
]
