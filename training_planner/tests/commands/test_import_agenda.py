"""
Tests für das Management Command import_agenda
"""

from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from training_planner.models import Event
from training_planner.tests.fixtures import create_training_setup


class ImportAgendaCommandTests(TestCase):
    def setUp(self):
        self.data = create_training_setup()

    def testImportUeberCommand(self):
        out = StringIO()
        call_command("import_agenda", self.data.project.id, self.data.plan.id, stdout=out)

        self.assertIn("Import abgeschlossen: 7 Termine, 4/4 Einheiten, 0 Warnungen.", out.getvalue())
        self.assertEqual(Event.objects.count(), 7)

    def testWarnungenWerdenAusgegeben(self):
        out = StringIO()
        call_command(
            "import_agenda",
            self.data.project.id,
            self.data.plan.id,
            "--assign-by-role",
            "--roles",
            str(self.data.developer.id),
            stdout=out,
        )
        self.assertIn('No participants in group "Gruppe B"', out.getvalue())

    def testFehlerWirdAlsCommandErrorGemeldet(self):
        with self.assertRaisesMessage(CommandError, "Project not found"):
            call_command("import_agenda", 999999, self.data.plan.id, stdout=StringIO())
