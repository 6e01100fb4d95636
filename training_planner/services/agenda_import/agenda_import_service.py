"""
Agenda Import Service für den Training Planner

Hauptservice, der den Import eines Trainingsplans in die Projekt-Agenda
koordiniert:
- AgendaRepository: Projekt, Gruppen und Trainingsplan laden
- Curriculum Sequencer: Elemente pro Tag zusammenfassen und sortieren
- GroupScheduler: Termine pro Gruppe einplanen
- LunchBreakInjector: Mittagspause pro Trainingstag
- JobStore / TaskRunner: Fortschritt und Hintergrundausführung

Pipeline:
1. Job anlegen und Hintergrund-Task starten (start_import)
2. Projekt und Trainingsplan laden, Zielgruppen bestimmen
3. Tage aufsteigend verarbeiten, Termine und Mittagspausen anlegen
4. Job als completed oder failed abschließen

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ...exceptions import AgendaImportException, NoTargetGroupsError
from ..database import AgendaRepository, ProjectEventWriter, ProjectSnapshot
from ..jobs import ImportJob, JobStatus, JobStore, TaskRunner, get_job_store, get_task_runner
from ..scheduling import (
    GroupInfo,
    GroupScheduler,
    LunchBreakInjector,
    SequenceItem,
    plan_day_date,
    sequence_day,
)
from ..scheduling.working_calendar import at_minute

logger = logging.getLogger(__name__)


@dataclass
class ImportOptions:
    """Parameter eines Import-Laufs (entspricht dem Request-Body)."""

    project_id: int
    training_plan_id: int
    selected_groups: List[int] = field(default_factory=list)
    include_all_participants: bool = False
    follow_project_hours: bool = True
    assign_by_role: bool = False
    selected_roles: List[int] = field(default_factory=list)
    preserve_existing_events: bool = True

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "ImportOptions":
        """Baut die Optionen aus validierten Request-Daten (camelCase)."""
        return cls(
            project_id=data["projectId"],
            training_plan_id=data["trainingPlanId"],
            selected_groups=list(data.get("selectedGroups") or []),
            include_all_participants=data.get("includeAllParticipants", False),
            follow_project_hours=data.get("followProjectHours", True),
            assign_by_role=data.get("assignByRole", False),
            selected_roles=list(data.get("selectedRoles") or []),
            preserve_existing_events=data.get("preserveExistingEvents", True),
        )


def select_target_groups(project: ProjectSnapshot, options: ImportOptions) -> List[GroupInfo]:
    """
    Zielgruppen des Imports in Projekt-Reihenfolge.

    Alle Gruppen, wenn ``include_all_participants`` gesetzt ist oder keine
    Auswahl übergeben wurde, sonst nur die ausgewählten.

    Raises:
        NoTargetGroupsError: Wenn keine Gruppe übrig bleibt
    """
    if options.include_all_participants or not options.selected_groups:
        groups = list(project.groups)
    else:
        selected = set(options.selected_groups)
        groups = [group for group in project.groups if group.id in selected]

    if not groups:
        raise NoTargetGroupsError(project.id)
    return groups


class AgendaImportService:
    """
    Startet Import-Läufe und führt sie aus.

    Args:
        job_store: Speicher für den Job-Fortschritt (Standard: konfigurierter Store)
        task_runner: Ausführung im Hintergrund (Standard: konfigurierter Runner)
        repository: Datenzugriff (Standard: AgendaRepository)
    """

    def __init__(
        self,
        job_store: Optional[JobStore] = None,
        task_runner: Optional[TaskRunner] = None,
        repository: Optional[AgendaRepository] = None,
    ):
        self.job_store = job_store or get_job_store()
        self.task_runner = task_runner or get_task_runner()
        self.repository = repository or AgendaRepository()
        self.logger = logger

    def start_import(self, options: ImportOptions) -> ImportJob:
        """
        Legt einen Job an und startet den Import im Hintergrund.

        Returns:
            Der Job im Zustand ``starting`` (bzw. der Endzustand beim Inline-Runner)
        """
        job = self.job_store.create()
        self.logger.info(
            f"Agenda-Import {job.job_id} angefordert: Projekt {options.project_id}, "
            f"Trainingsplan {options.training_plan_id}"
        )
        self.task_runner.submit(self.run_import, job.job_id, options, name=job.job_id)
        return self.job_store.get(job.job_id) or job

    def get_job(self, job_id: str) -> Optional[ImportJob]:
        return self.job_store.get(job_id)

    def run_import(self, job_id: str, options: ImportOptions) -> None:
        """
        Führt einen Import-Lauf aus und schreibt den Fortschritt in den Job.

        Fehler beim Laden oder Vorbereiten beenden den Job mit ``failed``.
        Fehler bei einzelnen Elementen landen als Warnung im Job.
        """
        try:
            self._run(job_id, options)
        except Exception as e:
            if isinstance(e, AgendaImportException):
                self.logger.warning(f"Agenda-Import {job_id} fehlgeschlagen: {e.message}")
                error = e.message
            else:
                self.logger.exception(f"Agenda-Import {job_id} mit unerwartetem Fehler abgebrochen")
                error = str(e)
            self._fail(job_id, error)

    def _run(self, job_id: str, options: ImportOptions) -> None:
        self.job_store.update(
            job_id,
            status=JobStatus.IN_PROGRESS,
            message="Fetching project and training plan data...",
        )

        project = self.repository.load_project(options.project_id)
        training_plan = self.repository.load_training_plan(options.training_plan_id)
        config = project.schedule_config(options.follow_project_hours)
        groups = select_target_groups(project, options)

        setup_warnings: List[str] = []
        sequences: List[tuple] = []
        for day in training_plan.days:
            for rejected in day.rejected:
                setup_warnings.append(
                    f"Skipping invalid training plan entry {rejected.entry_id} "
                    f"on day {day.day_number}: {rejected.message}"
                )
            sequences.append((day.day_number, sequence_day(day.entries)))

        booked = (
            self.repository.existing_intervals(project.id, config.tzinfo)
            if options.preserve_existing_events
            else []
        )
        writer = ProjectEventWriter(project.id, training_plan, config.tzinfo)
        scheduler = GroupScheduler(
            config,
            groups,
            writer,
            booked_intervals=booked,
            preserve_existing=options.preserve_existing_events,
            assign_by_role=options.assign_by_role,
            selected_roles=options.selected_roles,
        )
        scheduler.warnings.extend(setup_warnings)
        scheduler.on_progress = lambda: self._sync_progress(job_id, scheduler)
        lunch_injector = LunchBreakInjector(
            config, writer, scheduler.booked_intervals, options.preserve_existing_events
        )

        total = sum(scheduler.units_for(items) for _, items in sequences)
        self.logger.info(
            f"Agenda-Import {job_id}: {total} Einheiten, {len(groups)} Gruppen, "
            f"{len(booked)} belegte Intervalle"
        )
        self.job_store.update(
            job_id,
            total=total,
            message=f"Processing {total} training items...",
            warning_messages=list(scheduler.warnings),
        )

        for day_number, items in sequences:
            self._process_day(
                job_id, day_number, items, training_plan.total_days, project, scheduler, lunch_injector
            )

        message = (
            f"Import completed. Created {len(scheduler.events)} events "
            f"with {len(scheduler.warnings)} warnings."
        )
        self.job_store.update(
            job_id,
            status=JobStatus.COMPLETED,
            message=message,
            processed=scheduler.processed,
            events=list(scheduler.events),
            warning_messages=list(scheduler.warnings),
        )
        self.logger.info(f"Agenda-Import {job_id}: {message}")

    def _process_day(
        self,
        job_id: str,
        day_number: int,
        items: Sequence[SequenceItem],
        total_days: int,
        project: ProjectSnapshot,
        scheduler: GroupScheduler,
        lunch_injector: LunchBreakInjector,
    ) -> None:
        self.job_store.update(job_id, message=f"Processing day {day_number} of {total_days}...")

        config = scheduler.config
        day_date = plan_day_date(project.start_date, day_number, config.working_days)
        events_before = len(scheduler.events)
        scheduler.schedule_items(items, at_minute(day_date, config.start_of_day), day_number)

        try:
            lunch_event = lunch_injector.inject(
                day_number, project.start_date, len(scheduler.events) > events_before
            )
            if lunch_event is not None:
                scheduler.events.append(lunch_event)
        except Exception as e:
            self.logger.exception(f"Mittagspause für Tag {day_number} fehlgeschlagen")
            scheduler.warnings.append(f"Failed to create lunch break for day {day_number}: {e}")

        self._sync_progress(job_id, scheduler)

    def _sync_progress(self, job_id: str, scheduler: GroupScheduler) -> None:
        self.job_store.update(
            job_id,
            processed=scheduler.processed,
            events=list(scheduler.events),
            warning_messages=list(scheduler.warnings),
        )

    def _fail(self, job_id: str, error: str) -> None:
        job = self.job_store.get(job_id)
        if job is None or job.is_terminal:
            return
        self.job_store.update(
            job_id,
            status=JobStatus.FAILED,
            message=f"Import failed: {error}",
            error=error,
        )
