"""
Agenda Repository für den Agenda-Import

Kapselt alle Datenbankzugriffe des Imports:
- Laden von Projekt, Projekteinstellungen, Gruppen und Teilnehmern
- Laden des Trainingsplans mit Tagen und Einträgen
- Laden bereits vorhandener Termine als belegte Intervalle
- Anlegen der Termine inkl. Gruppen- und Teilnehmer-Zuordnung

Die Planungslogik arbeitet ausschließlich auf den hier erzeugten
Snapshots (Dataclasses) und nie direkt auf Django Models.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from django.core.exceptions import ObjectDoesNotExist
from django.db import transaction
from django.db.models import Prefetch
from django.utils import timezone

from ...exceptions import InvalidPlanEntryError, ProjectNotFoundError, TrainingPlanNotFoundError
from ...models import (
    Event,
    EventAttendee,
    EventGroup,
    Project,
    ProjectSettings,
    TrainingPlan,
    TrainingPlanDay,
    TrainingPlanEntry,
)
from ...serializers import EventSerializer
from ..scheduling import (
    CourseEntry,
    CourseRef,
    CustomEntry,
    EventDraft,
    GroupInfo,
    ItemKind,
    ModuleRef,
    ParticipantInfo,
    PlannedEntry,
    ScheduleConfig,
    SupportActivityEntry,
    SupportActivityRef,
    TimeSlot,
)
from ..scheduling.lunch_break import LUNCH_BREAK_ITEM_TYPE
from ..scheduling.working_calendar import (
    DEFAULT_END_OF_DAY_TIME,
    DEFAULT_LUNCH_TIME,
    DEFAULT_START_OF_DAY_TIME,
    DEFAULT_TIMEZONE,
    DEFAULT_WORKING_DAYS,
)

logger = logging.getLogger(__name__)

DEFAULT_GROUP_COLOR = "#2196F3"
UNGROUPED_COLOR = "#FFA726"
LUNCH_BREAK_COLOR = "#9E9E9E"
DEFAULT_PROJECT_LENGTH_DAYS = 30
SYSTEM_USER = "system"


@dataclass
class ProjectSnapshot:
    id: int
    title: str
    start_date: date
    start_of_day_time: str
    end_of_day_time: str
    lunch_time: Optional[str]
    working_days: List[str]
    timezone: str
    groups: List[GroupInfo] = field(default_factory=list)

    def schedule_config(self, follow_project_hours: bool = True) -> ScheduleConfig:
        """
        Arbeitskalender für den Import.

        Ohne ``follow_project_hours`` gelten die Standardzeiten
        (09:00-17:00, Mo-Fr, Mittagspause 12:00-13:00), Zeitzone und
        Startdatum bleiben die des Projekts.
        """
        if not follow_project_hours:
            return ScheduleConfig.from_settings(
                DEFAULT_START_OF_DAY_TIME,
                DEFAULT_END_OF_DAY_TIME,
                DEFAULT_LUNCH_TIME,
                DEFAULT_WORKING_DAYS,
                self.timezone,
            )
        return ScheduleConfig.from_settings(
            self.start_of_day_time,
            self.end_of_day_time,
            self.lunch_time,
            self.working_days,
            self.timezone,
        )


@dataclass
class PlanDaySnapshot:
    day_number: int
    entries: List[PlannedEntry] = field(default_factory=list)
    rejected: List[InvalidPlanEntryError] = field(default_factory=list)


@dataclass
class TrainingPlanSnapshot:
    id: int
    title: str
    total_days: int
    days: List[PlanDaySnapshot] = field(default_factory=list)


def _course_ref(course) -> CourseRef:
    return CourseRef(
        id=course.id,
        title=course.title,
        duration=course.duration,
        required_role_ids=tuple(role.id for role in course.participant_roles.all()),
    )


def build_planned_entry(row: TrainingPlanEntry) -> PlannedEntry:
    """
    Wandelt eine Eintragszeile in die passende PlannedEntry-Variante um.

    Raises:
        InvalidPlanEntryError: Wenn die Zeile keiner Variante entspricht
    """
    custom_title = row.custom_title or None

    if row.support_activity_id:
        activity = row.support_activity
        return SupportActivityEntry(
            order=row.entry_order,
            activity=SupportActivityRef(activity.id, activity.title, activity.duration),
            custom_title=custom_title,
            custom_duration=row.custom_duration,
            entry_id=row.id,
        )
    if row.course_id:
        return CourseEntry(
            order=row.entry_order,
            course=_course_ref(row.course),
            custom_title=custom_title,
            custom_duration=row.custom_duration,
            entry_id=row.id,
        )
    if row.module_id:
        module = row.module
        course = _course_ref(module.course)
        return CourseEntry(
            order=row.entry_order,
            course=course,
            module=ModuleRef(module.id, module.title, course),
            custom_title=custom_title,
            custom_duration=row.custom_duration,
            entry_id=row.id,
        )
    if custom_title:
        return CustomEntry(
            order=row.entry_order,
            title=custom_title,
            duration=row.custom_duration,
            entry_id=row.id,
        )
    raise InvalidPlanEntryError(
        "entry has no course, module, support activity or custom title", row.id
    )


def to_local_naive(value: datetime, tz: ZoneInfo) -> datetime:
    """Gespeicherten Zeitpunkt in naive Projekt-Lokalzeit umrechnen."""
    if timezone.is_naive(value):
        return value
    return timezone.localtime(value, tz).replace(tzinfo=None)


def to_aware(value: datetime, tz: ZoneInfo) -> datetime:
    """Naive Projekt-Lokalzeit mit der Projekt-Zeitzone versehen."""
    if timezone.is_aware(value):
        return value
    return value.replace(tzinfo=tz)


class AgendaRepository:
    """
    Lesender Zugriff auf die Import-Daten.

    Wandelt Django Models in Snapshots für die Planungslogik um.
    """

    def __init__(self):
        self.logger = logger

    def load_project(self, project_id: Any) -> ProjectSnapshot:
        """
        Lädt ein Projekt mit Einstellungen, Gruppen und Teilnehmern.

        Fehlen die Projekteinstellungen, werden sie mit Standardwerten angelegt.

        Raises:
            ProjectNotFoundError: Wenn das Projekt nicht existiert
        """
        try:
            project = Project.objects.prefetch_related("groups__participants").get(
                pk=int(project_id)
            )
        except (Project.DoesNotExist, TypeError, ValueError):
            raise ProjectNotFoundError(project_id)

        project_settings = self.get_or_create_settings(project)
        groups = [
            GroupInfo(
                id=group.id,
                name=group.group_name,
                participants=tuple(
                    ParticipantInfo(p.id, p.full_name, p.role_id)
                    for p in group.participants.all()
                ),
                chip_color=group.chip_color or None,
            )
            for group in project.groups.all()
        ]

        return ProjectSnapshot(
            id=project.id,
            title=project.title,
            start_date=project_settings.start_date,
            start_of_day_time=project_settings.start_of_day_time,
            end_of_day_time=project_settings.end_of_day_time,
            lunch_time=project_settings.lunch_time or None,
            working_days=list(project_settings.working_days or []),
            timezone=project_settings.timezone or DEFAULT_TIMEZONE,
            groups=groups,
        )

    def get_or_create_settings(self, project: Project) -> ProjectSettings:
        try:
            return project.project_settings
        except ObjectDoesNotExist:
            start_date = project.start_date or timezone.localdate()
            end_date = project.end_date or start_date + timedelta(days=DEFAULT_PROJECT_LENGTH_DAYS)
            project_settings = ProjectSettings.objects.create(
                project=project,
                start_date=start_date,
                end_date=end_date,
                start_of_day_time=DEFAULT_START_OF_DAY_TIME,
                end_of_day_time=DEFAULT_END_OF_DAY_TIME,
                lunch_time=DEFAULT_LUNCH_TIME,
                timezone=DEFAULT_TIMEZONE,
                working_days=list(DEFAULT_WORKING_DAYS),
                created_by=SYSTEM_USER,
            )
            self.logger.info(f"Standard-Projekteinstellungen für Projekt {project.id} angelegt")
            return project_settings

    def load_training_plan(self, training_plan_id: Any) -> TrainingPlanSnapshot:
        """
        Lädt einen Trainingsplan mit Tagen (aufsteigend) und Einträgen.

        Ungültige Einträge werden nicht übernommen, sondern pro Tag in
        ``rejected`` gesammelt.

        Raises:
            TrainingPlanNotFoundError: Wenn der Trainingsplan nicht existiert
        """
        entries = TrainingPlanEntry.objects.select_related(
            "course", "module__course", "support_activity"
        ).prefetch_related(
            "course__participant_roles", "module__course__participant_roles"
        ).order_by("entry_order", "id")
        days = TrainingPlanDay.objects.order_by("day_number").prefetch_related(
            Prefetch("entries", queryset=entries)
        )

        try:
            plan = TrainingPlan.objects.prefetch_related(Prefetch("days", queryset=days)).get(
                pk=int(training_plan_id)
            )
        except (TrainingPlan.DoesNotExist, TypeError, ValueError):
            raise TrainingPlanNotFoundError(training_plan_id)

        snapshot = TrainingPlanSnapshot(id=plan.id, title=plan.title, total_days=plan.total_days)
        for day in plan.days.all():
            day_snapshot = PlanDaySnapshot(day_number=day.day_number)
            for row in day.entries.all():
                try:
                    day_snapshot.entries.append(build_planned_entry(row))
                except InvalidPlanEntryError as e:
                    day_snapshot.rejected.append(e)
            snapshot.days.append(day_snapshot)
        return snapshot

    def existing_intervals(self, project_id: int, tz: ZoneInfo) -> List[TimeSlot]:
        """Vorhandene Termine des Projekts als naive Intervalle in Projekt-Lokalzeit."""
        rows = Event.objects.filter(project_id=project_id).order_by("start").values_list(
            "start", "end"
        )
        return [TimeSlot(to_local_naive(start, tz), to_local_naive(end, tz)) for start, end in rows]


class ProjectEventWriter:
    """
    Legt die Termine eines Import-Laufs an (EventMaterializer).

    Args:
        project_id: Projekt, zu dem die Termine gehören
        training_plan: Quelle des Imports (für Notizen und Audit-Trail)
        tz: Zeitzone des Projekts
    """

    def __init__(self, project_id: int, training_plan: TrainingPlanSnapshot, tz: ZoneInfo):
        self.project_id = project_id
        self.training_plan = training_plan
        self.tz = tz

    def materialize(self, draft: EventDraft) -> Dict[str, Any]:
        with transaction.atomic():
            event = Event.objects.create(
                project_id=self.project_id,
                title=draft.title,
                start=to_aware(draft.slot.start, self.tz),
                end=to_aware(draft.slot.end, self.tz),
                event_type=Event.COURSE if draft.item_type == ItemKind.COURSE else Event.OTHER,
                course_id=draft.course_id if draft.item_type == ItemKind.COURSE else None,
                extended_props=self._extended_props(draft),
                event_status=Event.SCHEDULED,
                all_day=False,
                color=self._color(draft),
                background_color=self._color(draft),
                editable=True,
            )

            if draft.is_group_event:
                EventGroup.objects.create(event=event, group_id=draft.group.id)
                EventAttendee.objects.bulk_create(
                    [
                        EventAttendee(
                            event=event,
                            participant_id=participant.id,
                            attendance_status="scheduled",
                            created_by=SYSTEM_USER,
                        )
                        for participant in draft.participants
                    ]
                )

        logger.debug(
            f"Termin {event.id} angelegt: '{event.title}' {draft.slot.start:%Y-%m-%d %H:%M}"
            f"-{draft.slot.end:%H:%M} ({len(draft.participants)} Teilnehmer)"
        )
        return dict(EventSerializer(event).data)

    def _color(self, draft: EventDraft) -> str:
        if draft.item_type == LUNCH_BREAK_ITEM_TYPE:
            return LUNCH_BREAK_COLOR
        if not draft.is_group_event:
            return UNGROUPED_COLOR
        return draft.group.chip_color or DEFAULT_GROUP_COLOR

    def _extended_props(self, draft: EventDraft) -> Dict[str, Any]:
        timestamp = timezone.now().isoformat()
        if draft.item_type == LUNCH_BREAK_ITEM_TYPE:
            return {
                "notes": f"Auto-created lunch break for training day {draft.day_number}",
                "trainingPlanId": self.training_plan.id,
                "itemType": LUNCH_BREAK_ITEM_TYPE,
                "dayNumber": draft.day_number,
                "isLunchBreak": True,
                "audit": [
                    {
                        "action": "created",
                        "timestamp": timestamp,
                        "source": "training_plan_import_lunch",
                        "trainingPlanId": self.training_plan.id,
                    }
                ],
            }

        return {
            "notes": f'Auto-imported from training plan "{self.training_plan.title}"',
            "trainingPlanId": self.training_plan.id,
            "itemType": draft.item_type,
            "itemId": draft.item_id,
            "dayNumber": draft.day_number,
            "groupId": draft.group.id if draft.is_group_event else None,
            "groupName": draft.group.name if draft.is_group_event else None,
            "isSupportActivity": not draft.is_group_event,
            "audit": [
                {
                    "action": "created",
                    "timestamp": timestamp,
                    "source": "training_plan_import",
                    "trainingPlanId": self.training_plan.id,
                }
            ],
        }
