"""
Agenda Import Package

- agenda_import_service: Start und Ausführung der Import-Läufe

Author: DSP Development Team
Version: 1.0.0
"""

from .agenda_import_service import AgendaImportService, ImportOptions, select_target_groups

__all__ = [
    "AgendaImportService",
    "ImportOptions",
    "select_target_groups",
]
