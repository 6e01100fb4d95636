"""
Tests für den kompletten Import-Lauf (Datenbank, Gruppen, Mittagspause, Fehler)
"""

from datetime import datetime
from zoneinfo import ZoneInfo

from django.test import TestCase

from training_planner.models import (
    Event,
    EventAttendee,
    EventGroup,
    Project,
    ProjectSettings,
    TrainingPlanEntry,
)
from training_planner.services.agenda_import import AgendaImportService, ImportOptions
from training_planner.services.jobs import InlineTaskRunner, InMemoryJobStore, JobStatus
from training_planner.tests.fixtures import PROJECT_TIMEZONE, create_training_setup

BERLIN = ZoneInfo(PROJECT_TIMEZONE)


def berlin(day, hour, minute=0):
    return datetime(2025, 1, day, hour, minute, tzinfo=BERLIN)


class AgendaImportServiceTests(TestCase):
    def setUp(self):
        self.data = create_training_setup()
        self.service = AgendaImportService(
            job_store=InMemoryJobStore(), task_runner=InlineTaskRunner()
        )

    def run_import(self, **kwargs):
        options = ImportOptions(
            project_id=kwargs.pop("project_id", self.data.project.id),
            training_plan_id=kwargs.pop("training_plan_id", self.data.plan.id),
            **kwargs,
        )
        return self.service.start_import(options)

    def event(self, title):
        return Event.objects.get(project=self.data.project, title=title)

    def testImportMitAllenGruppen(self):
        job = self.run_import()

        self.assertEqual(job.status, JobStatus.COMPLETED)
        self.assertEqual(job.total, 4)
        self.assertEqual(job.processed, 4)
        self.assertEqual(job.message, "Import completed. Created 7 events with 0 warnings.")
        self.assertEqual(len(job.events), 7)
        self.assertEqual(Event.objects.filter(project=self.data.project).count(), 7)

        # Gruppe A 09-11, Gruppe B 11-12 und 13-14 (Mittagspause), dann Q&A
        group_a = self.event("Excel - Gruppe A")
        self.assertEqual((group_a.start, group_a.end), (berlin(6, 9), berlin(6, 11)))
        group_b = Event.objects.filter(title="Excel - Gruppe B").order_by("start")
        self.assertEqual(
            [(e.start, e.end) for e in group_b],
            [(berlin(6, 11), berlin(6, 12)), (berlin(6, 13), berlin(6, 14))],
        )
        qa = self.event("Q&A")
        self.assertEqual((qa.start, qa.end), (berlin(6, 14), berlin(6, 14, 30)))

        wrap_up = self.event("Wrap-up")
        self.assertEqual((wrap_up.start, wrap_up.end), (berlin(7, 9), berlin(7, 10)))
        self.assertFalse(Event.objects.filter(title="Lernzeit").exists())

        lunches = Event.objects.filter(title="Lunch Break").order_by("start")
        self.assertEqual(
            [(e.start, e.end) for e in lunches],
            [(berlin(6, 12), berlin(6, 13)), (berlin(7, 12), berlin(7, 13))],
        )

    def testTerminDetails(self):
        self.run_import()

        group_a = self.event("Excel - Gruppe A")
        self.assertEqual(group_a.event_type, Event.COURSE)
        self.assertEqual(group_a.course, self.data.excel)
        self.assertEqual(group_a.color, "#4CAF50")
        self.assertEqual(group_a.extended_props["trainingPlanId"], self.data.plan.id)
        self.assertEqual(group_a.extended_props["itemType"], "course")
        self.assertEqual(group_a.extended_props["groupName"], "Gruppe A")
        self.assertEqual(group_a.extended_props["dayNumber"], 1)
        self.assertEqual(group_a.extended_props["audit"][0]["source"], "training_plan_import")
        self.assertTrue(EventGroup.objects.filter(event=group_a, group=self.data.group_a).exists())
        self.assertEqual(
            set(EventAttendee.objects.filter(event=group_a).values_list("participant", flat=True)),
            {self.data.anna.id, self.data.ben.id},
        )

        qa = self.event("Q&A")
        self.assertEqual(qa.event_type, Event.OTHER)
        self.assertTrue(qa.extended_props["isSupportActivity"])
        self.assertFalse(qa.attendees.exists())

        lunch = Event.objects.filter(title="Lunch Break").first()
        self.assertTrue(lunch.extended_props["isLunchBreak"])
        self.assertEqual(lunch.color, "#9E9E9E")

    def testFreieAktivitaetErzeugtKeinenTermin(self):
        job = self.run_import()

        self.assertFalse(Event.objects.filter(title="Lernzeit").exists())
        self.assertNotIn("Lernzeit", [event["title"] for event in job.events])
        self.assertEqual(job.processed, job.total)
        # Lernzeit verbraucht keine Zeit nach dem Wrap-up
        self.assertEqual(
            Event.objects.filter(start__gte=berlin(7, 10), start__lt=berlin(7, 12)).count(), 0
        )

    def testNurAusgewaehlteGruppen(self):
        job = self.run_import(selected_groups=[self.data.group_b.id])

        self.assertEqual(job.total, 3)
        self.assertFalse(Event.objects.filter(title="Excel - Gruppe A").exists())
        group_b = Event.objects.filter(title="Excel - Gruppe B").order_by("start").first()
        self.assertEqual(group_b.start, berlin(6, 9))

    def testAlleTeilnehmerIgnoriertAuswahl(self):
        job = self.run_import(
            selected_groups=[self.data.group_b.id], include_all_participants=True
        )
        self.assertEqual(job.total, 4)
        self.assertTrue(Event.objects.filter(title="Excel - Gruppe A").exists())

    def testRollenzuordnung(self):
        job = self.run_import(assign_by_role=True, selected_roles=[self.data.developer.id])

        self.assertEqual(job.status, JobStatus.COMPLETED)
        self.assertEqual(job.processed, 4)
        self.assertEqual(
            job.warning_messages,
            [
                'No participants in group "Gruppe B" match required roles for "Excel" '
                "- skipping group"
            ],
        )
        self.assertEqual(job.message, "Import completed. Created 5 events with 1 warnings.")

        group_a = self.event("Excel - Gruppe A")
        self.assertEqual(
            list(group_a.attendees.values_list("participant", flat=True)), [self.data.anna.id]
        )
        self.assertFalse(Event.objects.filter(title="Excel - Gruppe B").exists())
        # Gruppe B verbraucht keine Zeit, Q&A folgt direkt auf Gruppe A
        self.assertEqual(self.event("Q&A").start, berlin(6, 11))

    def testVorhandeneTermineWerdenUmgangen(self):
        Event.objects.create(
            project=self.data.project, title="Kick-off", start=berlin(6, 9), end=berlin(6, 10)
        )
        self.run_import()
        self.assertEqual(self.event("Excel - Gruppe A").start, berlin(6, 10))

    def testVorhandeneTermineOhnePreserve(self):
        Event.objects.create(
            project=self.data.project, title="Kick-off", start=berlin(6, 9), end=berlin(6, 10)
        )
        self.run_import(preserve_existing_events=False)
        self.assertEqual(self.event("Excel - Gruppe A").start, berlin(6, 9))

    def testMittagspauseEntfaelltBeiKonflikt(self):
        Event.objects.create(
            project=self.data.project, title="Vortrag", start=berlin(7, 11), end=berlin(7, 13)
        )
        self.run_import()
        lunches = Event.objects.filter(title="Lunch Break")
        self.assertEqual([e.start for e in lunches], [berlin(6, 12)])

    def testProjektzeitenIgnorieren(self):
        ProjectSettings.objects.filter(project=self.data.project).update(
            start_of_day_time="07:00", end_of_day_time="15:00"
        )
        self.run_import(follow_project_hours=False)
        self.assertEqual(self.event("Excel - Gruppe A").start, berlin(6, 9))

    def testProjektzeitenBefolgen(self):
        ProjectSettings.objects.filter(project=self.data.project).update(
            start_of_day_time="07:00", end_of_day_time="15:00"
        )
        self.run_import()
        self.assertEqual(self.event("Excel - Gruppe A").start, berlin(6, 7))

    def testUmgedrehteMittagspauseStopptImportNicht(self):
        ProjectSettings.objects.filter(project=self.data.project).update(lunch_time="13:00-12:00")

        with self.assertLogs("training_planner.services.scheduling.working_calendar", "WARNING"):
            job = self.run_import()

        self.assertEqual(job.status, JobStatus.COMPLETED)
        self.assertFalse(Event.objects.filter(title="Lunch Break").exists())
        group_b = self.event("Excel - Gruppe B")
        self.assertEqual((group_b.start, group_b.end), (berlin(6, 11), berlin(6, 13)))

    def testUngueltigerEintragWirdUebersprungen(self):
        invalid = TrainingPlanEntry.objects.create(day=self.data.day_2, entry_order=3)
        job = self.run_import()

        self.assertEqual(job.status, JobStatus.COMPLETED)
        self.assertEqual(job.total, 4)
        self.assertEqual(
            job.warning_messages,
            [
                f"Skipping invalid training plan entry {invalid.id} on day 2: "
                "entry has no course, module, support activity or custom title"
            ],
        )

    def testProjektNichtGefunden(self):
        job = self.run_import(project_id=999999)

        self.assertEqual(job.status, JobStatus.FAILED)
        self.assertEqual(job.error, "Project not found")
        self.assertIsNotNone(job.completed_at)
        self.assertFalse(Event.objects.exists())

    def testTrainingsplanNichtGefunden(self):
        job = self.run_import(training_plan_id=999999)
        self.assertEqual(job.status, JobStatus.FAILED)
        self.assertEqual(job.error, "Training plan not found")

    def testKeineGueltigenGruppen(self):
        job = self.run_import(selected_groups=[999999])
        self.assertEqual(job.status, JobStatus.FAILED)
        self.assertEqual(job.error, "No valid groups found for assignment")


class MissingProjectSettingsTests(TestCase):
    def setUp(self):
        self.data = create_training_setup(with_settings=False)

    def testStandardeinstellungenWerdenAngelegt(self):
        service = AgendaImportService(job_store=InMemoryJobStore(), task_runner=InlineTaskRunner())
        job = service.start_import(ImportOptions(self.data.project.id, self.data.plan.id))

        self.assertEqual(job.status, JobStatus.COMPLETED)
        project = Project.objects.get(pk=self.data.project.pk)
        settings = project.project_settings
        self.assertEqual(settings.start_date, self.data.project.start_date)
        self.assertEqual((settings.start_of_day_time, settings.end_of_day_time), ("09:00", "17:00"))
        self.assertEqual(settings.timezone, "UTC")
        self.assertEqual(settings.created_by, "system")

        first = Event.objects.order_by("start").first()
        self.assertEqual(first.start, datetime(2025, 1, 6, 9, 0, tzinfo=ZoneInfo("UTC")))
