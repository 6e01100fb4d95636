"""
Import Agenda Management Command - DSP (Digital Solutions Platform)

Importiert einen Trainingsplan synchron in die Agenda eines Projekts.
Nutzt denselben Service wie der API-Endpoint, aber mit dem Inline-Runner.

Beispiel:
    python manage.py import_agenda 1 2 --groups 3 4 --assign-by-role --roles 5

Author: DSP Development Team
Version: 1.0.0
"""

import logging

from django.core.management.base import BaseCommand, CommandError

from training_planner.services.agenda_import import AgendaImportService, ImportOptions
from training_planner.services.jobs import InlineTaskRunner, JobStatus

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Importiert einen Trainingsplan als Termine in die Agenda eines Projekts."

    def add_arguments(self, parser):
        parser.add_argument("project_id", type=int, help="ID des Projekts")
        parser.add_argument("training_plan_id", type=int, help="ID des Trainingsplans")
        parser.add_argument(
            "--groups", nargs="*", type=int, default=[], help="IDs der Zielgruppen (Standard: alle)"
        )
        parser.add_argument(
            "--all-participants",
            action="store_true",
            help="Alle Gruppen des Projekts einplanen, unabhängig von --groups",
        )
        parser.add_argument(
            "--ignore-project-hours",
            action="store_true",
            help="Standard-Arbeitszeiten (09:00-17:00, Mo-Fr) statt der Projektzeiten verwenden",
        )
        parser.add_argument(
            "--assign-by-role",
            action="store_true",
            help="Teilnehmer nach den Rollen der Kurse filtern",
        )
        parser.add_argument("--roles", nargs="*", type=int, default=[], help="IDs der Rollen")
        parser.add_argument(
            "--ignore-existing",
            action="store_true",
            help="Vorhandene Termine nicht als belegt behandeln",
        )

    def handle(self, *args, **options):
        import_options = ImportOptions(
            project_id=options["project_id"],
            training_plan_id=options["training_plan_id"],
            selected_groups=options["groups"],
            include_all_participants=options["all_participants"],
            follow_project_hours=not options["ignore_project_hours"],
            assign_by_role=options["assign_by_role"],
            selected_roles=options["roles"],
            preserve_existing_events=not options["ignore_existing"],
        )

        self.stdout.write(
            f"Importiere Trainingsplan {import_options.training_plan_id} "
            f"in Projekt {import_options.project_id}..."
        )

        service = AgendaImportService(task_runner=InlineTaskRunner())
        job = service.start_import(import_options)

        for warning in job.warning_messages:
            self.stdout.write(self.style.WARNING(f"  Warnung: {warning}"))

        if job.status != JobStatus.COMPLETED:
            raise CommandError(f"Import fehlgeschlagen: {job.error or job.message}")

        self.stdout.write(
            self.style.SUCCESS(
                f"Import abgeschlossen: {len(job.events)} Termine, "
                f"{job.processed}/{job.total} Einheiten, {job.warnings} Warnungen."
            )
        )
