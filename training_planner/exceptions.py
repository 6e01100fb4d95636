"""
Training Planner Exceptions - DSP (Digital Solutions Platform)

Dieses Modul enthält die Exception-Hierarchie für den Agenda-Import.
Die Klassen erlauben eine feingranulare Fehlerbehandlung:

- Konfigurationsfehler des Arbeitskalenders
- Fehler beim Einplanen einzelner Termine
- Ungültige Trainingsplan-Einträge
- Fehlende Stammdaten (Projekt, Trainingsplan, Gruppen)
- Fehlbedienung des Job-Stores

Author: DSP Development Team
Version: 1.0.0
"""

from typing import Optional, Dict, Any


class AgendaImportException(Exception):
    """
    Basisklasse für alle Fehler des Agenda-Imports.

    Attributes:
        message (str): Lesbare Fehlermeldung (wird im Job als ``error`` gespeichert)
        details (Dict[str, Any]): Zusätzlicher Kontext für Logging und Debugging
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Wandelt die Exception in ein serialisierbares Dictionary um.

        Returns:
            Dictionary mit Meldung, Details und Exception-Typ
        """
        return {
            "message": self.message,
            "details": self.details,
            "exception_type": self.__class__.__name__,
        }


class CalendarConfigurationError(AgendaImportException):
    """Ungültige Arbeitszeit-, Arbeitstag-, Mittagspausen- oder Zeitzonen-Konfiguration."""


class SchedulingError(AgendaImportException):
    """Ein Termin konnte nicht im Arbeitskalender platziert werden."""


class InvalidPlanEntryError(AgendaImportException):
    """
    Trainingsplan-Eintrag, der keiner bekannten Variante entspricht.

    Ein Eintrag muss genau eine der Formen Kurs, Modul, Support-Aktivität oder
    freier Titel erfüllen.
    """

    def __init__(self, message: str, entry_id: Optional[int] = None) -> None:
        self.entry_id = entry_id
        super().__init__(message, {"entry_id": entry_id})


class DataNotFoundError(AgendaImportException):
    """Benötigte Stammdaten für den Import fehlen."""


class ProjectNotFoundError(DataNotFoundError):
    def __init__(self, project_id: Any) -> None:
        super().__init__("Project not found", {"project_id": project_id})


class TrainingPlanNotFoundError(DataNotFoundError):
    def __init__(self, training_plan_id: Any) -> None:
        super().__init__("Training plan not found", {"training_plan_id": training_plan_id})


class NoTargetGroupsError(DataNotFoundError):
    def __init__(self, project_id: Any) -> None:
        super().__init__("No valid groups found for assignment", {"project_id": project_id})


class JobNotFoundError(AgendaImportException):
    def __init__(self, job_id: str) -> None:
        super().__init__(f"Import job {job_id} not found", {"job_id": job_id})


class JobStateError(AgendaImportException):
    """Unzulässiger Statuswechsel eines Import-Jobs (z.B. nach Abschluss)."""
