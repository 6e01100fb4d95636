"""
Scheduling Services Package für den Agenda-Import

Reine Planungslogik ohne Datenbankzugriff:
- working_calendar: Arbeitstage, Arbeitszeiten, Mittagspause, Konflikte
- curriculum_sequencer: Abfolge der Elemente eines Trainingstages
- group_scheduler: Einplanung pro Gruppe und Rollenfilter
- lunch_break: Mittagspause pro Trainingstag

Author: DSP Development Team
Version: 1.0.0
"""

from .working_calendar import (
    ScheduleConfig,
    LunchWindow,
    TimeSlot,
    BookedInterval,
    ScheduledSlot,
    parse_clock,
    parse_lunch_window,
    ensure_working_day,
    ensure_working_hours,
    next_working_day,
    find_next_available_slot,
    avoid_lunch_time,
    calculate_available_time,
    schedule_event,
)
from .curriculum_sequencer import (
    ItemKind,
    CourseRef,
    ModuleRef,
    SupportActivityRef,
    CourseEntry,
    SupportActivityEntry,
    CustomEntry,
    PlannedEntry,
    SequenceItem,
    sequence_day,
)
from .group_scheduler import (
    DEFAULT_DURATION_MINUTES,
    ParticipantInfo,
    GroupInfo,
    EventDraft,
    EventMaterializer,
    GroupScheduler,
    resolve_duration,
    required_roles,
    eligible_participants,
)
from .lunch_break import LunchBreakInjector, lunch_break_slot, plan_day_date

__all__ = [
    # Working Calendar
    "ScheduleConfig",
    "LunchWindow",
    "TimeSlot",
    "BookedInterval",
    "ScheduledSlot",
    "parse_clock",
    "parse_lunch_window",
    "ensure_working_day",
    "ensure_working_hours",
    "next_working_day",
    "find_next_available_slot",
    "avoid_lunch_time",
    "calculate_available_time",
    "schedule_event",
    # Curriculum Sequencer
    "ItemKind",
    "CourseRef",
    "ModuleRef",
    "SupportActivityRef",
    "CourseEntry",
    "SupportActivityEntry",
    "CustomEntry",
    "PlannedEntry",
    "SequenceItem",
    "sequence_day",
    # Group Scheduler
    "DEFAULT_DURATION_MINUTES",
    "ParticipantInfo",
    "GroupInfo",
    "EventDraft",
    "EventMaterializer",
    "GroupScheduler",
    "resolve_duration",
    "required_roles",
    "eligible_participants",
    # Lunch Break
    "LunchBreakInjector",
    "lunch_break_slot",
    "plan_day_date",
]
