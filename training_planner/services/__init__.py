"""
Training Planner Services Package für DSP (Digital Solutions Platform)

Dieses Paket enthält alle Services für den Import von Trainingsplänen
in die Projekt-Agenda:
- Scheduling Services (reine Planungslogik)
- Job Services (Fortschritt und Hintergrundausführung)
- Database Services (Laden der Daten, Anlegen der Termine)
- Agenda Import Services (Orchestrierung)

Struktur:
├── scheduling/        # Arbeitskalender, Sequenzierung, Gruppenplanung, Mittagspause
├── jobs/              # Job-Store und Task-Runner
├── database/          # Datenbank-Operationen
└── agenda_import/     # Import-Orchestrierung

Author: DSP Development Team
Version: 1.0.0
"""

# Job Services
from .jobs import ImportJob, JobStatus, get_job_store, get_task_runner

# Database Services
from .database import AgendaRepository, ProjectEventWriter

# Agenda Import Services
from .agenda_import import AgendaImportService, ImportOptions

__all__ = [
    # Jobs
    "ImportJob",
    "JobStatus",
    "get_job_store",
    "get_task_runner",
    # Database
    "AgendaRepository",
    "ProjectEventWriter",
    # Agenda Import
    "AgendaImportService",
    "ImportOptions",
]
