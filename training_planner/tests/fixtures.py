"""
Testdaten für den Agenda-Import

Ein Projekt (Start Montag 06.01.2025, 09:00-17:00, Mittagspause 12:00-13:00,
Europe/Berlin) mit zwei Gruppen und einem Trainingsplan über zwei Tage:

- Tag 1: Kurs "Excel" (120 min, Rolle Developer), Support "Q&A" (30 min)
- Tag 2: Support "Wrap-up" (60 min), freie Aktivität "Lernzeit" (ohne Termin)
"""

from datetime import date
from types import SimpleNamespace

from training_planner.models import (
    Course,
    Participant,
    ParticipantRole,
    Project,
    ProjectGroup,
    ProjectSettings,
    SupportActivity,
    TrainingPlan,
    TrainingPlanDay,
    TrainingPlanEntry,
)

PROJECT_START = date(2025, 1, 6)
PROJECT_TIMEZONE = "Europe/Berlin"


def create_training_setup(with_settings=True):
    developer = ParticipantRole.objects.create(name="Developer")
    manager = ParticipantRole.objects.create(name="Manager")

    anna = Participant.objects.create(first_name="Anna", last_name="Schmidt", role=developer)
    ben = Participant.objects.create(first_name="Ben", last_name="Weber", role=manager)
    clara = Participant.objects.create(first_name="Clara", last_name="Meyer", role=manager)

    project = Project.objects.create(title="Onboarding 2025", start_date=PROJECT_START)
    if with_settings:
        ProjectSettings.objects.create(
            project=project,
            start_date=PROJECT_START,
            start_of_day_time="09:00",
            end_of_day_time="17:00",
            lunch_time="12:00-13:00",
            timezone=PROJECT_TIMEZONE,
            working_days=["monday", "tuesday", "wednesday", "thursday", "friday"],
        )

    group_a = ProjectGroup.objects.create(project=project, group_name="Gruppe A", chip_color="#4CAF50")
    group_a.participants.set([anna, ben])
    group_b = ProjectGroup.objects.create(project=project, group_name="Gruppe B")
    group_b.participants.set([clara])

    excel = Course.objects.create(title="Excel", duration=120)
    excel.participant_roles.set([developer])
    qa = SupportActivity.objects.create(title="Q&A", duration=30)
    wrap_up = SupportActivity.objects.create(title="Wrap-up", duration=60)

    plan = TrainingPlan.objects.create(title="Grundlagen", total_days=2)
    day_1 = TrainingPlanDay.objects.create(training_plan=plan, day_number=1)
    day_2 = TrainingPlanDay.objects.create(training_plan=plan, day_number=2)
    TrainingPlanEntry.objects.create(day=day_1, entry_order=1, course=excel)
    TrainingPlanEntry.objects.create(day=day_1, entry_order=2, support_activity=qa)
    TrainingPlanEntry.objects.create(day=day_2, entry_order=1, support_activity=wrap_up)
    TrainingPlanEntry.objects.create(
        day=day_2, entry_order=2, custom_title="Lernzeit", custom_duration=45
    )

    return SimpleNamespace(
        developer=developer,
        manager=manager,
        anna=anna,
        ben=ben,
        clara=clara,
        project=project,
        group_a=group_a,
        group_b=group_b,
        excel=excel,
        qa=qa,
        wrap_up=wrap_up,
        plan=plan,
        day_1=day_1,
        day_2=day_2,
    )
