"""
Database Services Package für den Agenda-Import

Dieses Paket enthält alle Datenbankoperationen des Imports.

Author: DSP Development Team
Version: 1.0.0
"""

from .agenda_repository import (
    AgendaRepository,
    ProjectEventWriter,
    ProjectSnapshot,
    TrainingPlanSnapshot,
    PlanDaySnapshot,
    build_planned_entry,
)

__all__ = [
    "AgendaRepository",
    "ProjectEventWriter",
    "ProjectSnapshot",
    "TrainingPlanSnapshot",
    "PlanDaySnapshot",
    "build_planned_entry",
]
