"""
Tests für die Einplanung pro Gruppe (Reihenfolge, Rollenfilter, Fehlerisolation)
"""

from datetime import datetime

from django.test import SimpleTestCase

from training_planner.services.scheduling import (
    CourseRef,
    GroupInfo,
    GroupScheduler,
    ItemKind,
    ParticipantInfo,
    ScheduleConfig,
    SequenceItem,
    SupportActivityRef,
    TimeSlot,
    required_roles,
    resolve_duration,
)

MONDAY = datetime(2025, 1, 6, 9, 0)
DEVELOPER, MANAGER = 1, 2

ANNA = ParticipantInfo(1, "Anna Schmidt", DEVELOPER)
BEN = ParticipantInfo(2, "Ben Weber", MANAGER)
CLARA = ParticipantInfo(3, "Clara Meyer", MANAGER)

GROUP_A = GroupInfo(10, "Gruppe A", (ANNA, BEN))
GROUP_B = GroupInfo(20, "Gruppe B", (CLARA,))
GROUP_C = GroupInfo(30, "Gruppe C", (BEN,))


class RecordingMaterializer:
    """Merkt sich alle Entwürfe, optional mit Fehler für bestimmte Titel."""

    def __init__(self, fail_on=()):
        self.drafts = []
        self.fail_on = set(fail_on)

    def materialize(self, draft):
        if any(draft.title.startswith(title) for title in self.fail_on):
            raise RuntimeError("kaputt")
        self.drafts.append(draft)
        return {"title": draft.title, "start": draft.slot.start, "end": draft.slot.end}


def course(title="Excel", duration=60, roles=(), course_id=1):
    return SequenceItem(
        kind=ItemKind.COURSE,
        order=1,
        course=CourseRef(course_id, title, duration, tuple(roles)),
        custom_title=title,
    )


def support(title="Q&A", duration=30):
    return SequenceItem(
        kind=ItemKind.SUPPORT_ACTIVITY,
        order=2,
        support_activity=SupportActivityRef(5, title, duration),
    )


def custom(title="Lernzeit", duration=45):
    return SequenceItem(
        kind=ItemKind.CUSTOM, order=3, custom_title=title, custom_duration=duration
    )


def at(hour, minute=0):
    return datetime(2025, 1, 6, hour, minute)


class HelperTests(SimpleTestCase):
    def testStandarddauer(self):
        self.assertEqual(resolve_duration(course(duration=None)), 60)

    def testRollenNurBeiAktiverZuordnung(self):
        item = course(roles=(DEVELOPER, MANAGER))
        self.assertEqual(required_roles(item, False, [DEVELOPER]), frozenset())
        self.assertEqual(required_roles(item, True, []), frozenset())

    def testRollenSindSchnittmenge(self):
        item = course(roles=(DEVELOPER, MANAGER))
        self.assertEqual(required_roles(item, True, [MANAGER, 99]), frozenset({MANAGER}))

    def testSupportAktivitaetHatKeineRollen(self):
        self.assertEqual(required_roles(support(), True, [DEVELOPER]), frozenset())


class GroupSchedulerTests(SimpleTestCase):
    def setUp(self):
        self.config = ScheduleConfig()
        self.materializer = RecordingMaterializer()

    def scheduler(self, groups=(GROUP_A, GROUP_B), **kwargs):
        return GroupScheduler(self.config, groups, self.materializer, **kwargs)

    def testGruppenWerdenHintereinanderEingeplant(self):
        scheduler = self.scheduler()
        clock = scheduler.schedule_items([course()], MONDAY, day_number=1)

        drafts = self.materializer.drafts
        self.assertEqual([d.title for d in drafts], ["Excel - Gruppe A", "Excel - Gruppe B"])
        self.assertEqual(drafts[0].slot, TimeSlot(at(9), at(10)))
        self.assertEqual(drafts[1].slot, TimeSlot(at(10), at(11)))
        self.assertEqual(clock, at(11))
        self.assertEqual(scheduler.processed, 2)
        self.assertEqual(len(scheduler.events), 2)

    def testElementeFolgenAufeinander(self):
        scheduler = self.scheduler(groups=[GROUP_A])
        scheduler.schedule_items([course(duration=90), support()], MONDAY)

        drafts = self.materializer.drafts
        self.assertEqual(drafts[1].title, "Q&A")
        self.assertEqual(drafts[1].slot, TimeSlot(at(10, 30), at(11)))
        self.assertFalse(drafts[1].is_group_event)

    def testKursUeberMittagspauseErzeugtZweiAbschnitte(self):
        scheduler = self.scheduler(groups=[GROUP_A])
        scheduler.schedule_items([course(duration=240)], at(10))

        slots = [d.slot for d in self.materializer.drafts]
        self.assertEqual(slots, [TimeSlot(at(10), at(12)), TimeSlot(at(13), at(15))])
        self.assertEqual(scheduler.processed, 1)

    def testGruppeOhnePassendeRolleWirdUebersprungen(self):
        scheduler = self.scheduler(
            groups=[GROUP_B, GROUP_A], assign_by_role=True, selected_roles=[DEVELOPER]
        )
        scheduler.schedule_items([course(roles=(DEVELOPER,))], MONDAY)

        self.assertEqual(
            scheduler.warnings,
            [
                'No participants in group "Gruppe B" match required roles for "Excel" '
                "- skipping group"
            ],
        )
        # Die übersprungene Gruppe verbraucht keine Zeit
        draft = self.materializer.drafts[0]
        self.assertEqual(draft.slot.start, at(9))
        self.assertEqual(draft.participants, [ANNA])
        self.assertEqual(scheduler.processed, 2)

    def testOhneRollenzuordnungAlleTeilnehmer(self):
        scheduler = self.scheduler(groups=[GROUP_A])
        scheduler.schedule_items([course(roles=(DEVELOPER,))], MONDAY)
        self.assertEqual(self.materializer.drafts[0].participants, [ANNA, BEN])

    def testFehlerWirdZurWarnungUndImportLaeuftWeiter(self):
        self.materializer = RecordingMaterializer(fail_on=["Boom"])
        scheduler = self.scheduler(groups=[GROUP_A])

        with self.assertLogs("training_planner.services.scheduling.group_scheduler", "ERROR"):
            scheduler.schedule_items([course(title="Boom"), support()], MONDAY)

        self.assertEqual(scheduler.warnings, ['Failed to process course "Boom": kaputt'])
        self.assertEqual([d.title for d in self.materializer.drafts], ["Q&A"])
        self.assertEqual(scheduler.processed, 2)

    def testBelegteIntervalleWachsenMit(self):
        booked = [TimeSlot(at(9), at(10))]
        scheduler = self.scheduler(groups=[GROUP_A], booked_intervals=booked)
        scheduler.schedule_items([course()], MONDAY)

        self.assertEqual(self.materializer.drafts[0].slot, TimeSlot(at(10), at(11)))
        self.assertEqual(booked[-1], TimeSlot(at(10), at(11)))

    def testOhnePreserveKeineKonfliktpruefung(self):
        booked = [TimeSlot(at(9), at(10))]
        scheduler = self.scheduler(
            groups=[GROUP_A], booked_intervals=booked, preserve_existing=False
        )
        scheduler.schedule_items([course()], MONDAY)

        self.assertEqual(self.materializer.drafts[0].slot, TimeSlot(at(9), at(10)))
        self.assertEqual(len(booked), 1)

    def testArbeitseinheiten(self):
        scheduler = self.scheduler()
        self.assertEqual(scheduler.units_for([course(), support(), custom()]), 3)

    def testFreieAktivitaetWirdNichtEingeplant(self):
        scheduler = self.scheduler(groups=[GROUP_A])
        clock = scheduler.schedule_items([custom(), support()], MONDAY)

        self.assertEqual([d.title for d in self.materializer.drafts], ["Q&A"])
        self.assertEqual(self.materializer.drafts[0].slot, TimeSlot(at(9), at(9, 30)))
        self.assertEqual(clock, at(9, 30))
        self.assertEqual(scheduler.processed, 1)
        self.assertEqual(scheduler.warnings, [])

    def testFehlerInMittlererGruppeBrichtKursAb(self):
        self.materializer = RecordingMaterializer(fail_on=["Excel - Gruppe B"])
        scheduler = self.scheduler(groups=[GROUP_A, GROUP_B, GROUP_C])
        items = [course(), support()]

        with self.assertLogs("training_planner.services.scheduling.group_scheduler", "ERROR"):
            scheduler.schedule_items(items, MONDAY)

        # Gruppe A bleibt erhalten, Gruppe C wird nicht mehr eingeplant
        drafts = self.materializer.drafts
        self.assertEqual([d.title for d in drafts], ["Excel - Gruppe A", "Q&A"])
        self.assertEqual(drafts[1].slot, TimeSlot(at(10), at(10, 30)))
        self.assertEqual(scheduler.warnings, ['Failed to process course "Excel": kaputt'])
        self.assertEqual(scheduler.processed, 3)
        self.assertLess(scheduler.processed, scheduler.units_for(items))

    def testFortschrittProEinheit(self):
        calls = []
        scheduler = self.scheduler(on_progress=lambda: calls.append(scheduler.processed))
        scheduler.schedule_items([course(), support()], MONDAY)
        self.assertEqual(calls, [1, 2, 3])
