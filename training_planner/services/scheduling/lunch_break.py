"""
Lunch-Break Injector für den Agenda-Import

Legt nach der Planung eines Trainingstages eine Mittagspause an, wenn an
diesem Tag Termine erzeugt wurden und die bevorzugte Pausenzeit frei ist.
Anders als reguläre Termine wird die Pause nicht verschoben: bei einem
Konflikt entfällt sie für diesen Tag.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence

from .group_scheduler import EventDraft, EventMaterializer
from .working_calendar import ScheduleConfig, TimeSlot, at_minute, ensure_working_day

logger = logging.getLogger(__name__)

LUNCH_BREAK_TITLE = "Lunch Break"
LUNCH_BREAK_ITEM_TYPE = "lunchBreak"


def plan_day_date(start_date: date, day_number: int, working_days) -> date:
    """
    Kalendertag eines Trainingsplan-Tages.

    Tag 1 ist das Startdatum des Projekts, Tag n liegt n-1 Kalendertage
    später und wird bei Bedarf auf den nächsten Arbeitstag verschoben.
    """
    target = at_minute(start_date, 0) + timedelta(days=day_number - 1)
    return ensure_working_day(target, working_days).date()


def lunch_break_slot(
    day_date: date, config: ScheduleConfig, booked_intervals: Sequence[TimeSlot]
) -> Optional[TimeSlot]:
    """
    Bevorzugte Mittagspause am ``day_date``.

    Returns:
        Das Pausen-Intervall oder ``None``, wenn keine Pause konfiguriert ist
        oder ein Intervall desselben Tages mit ihr kollidiert
    """
    lunch = config.lunch_window
    if lunch is None:
        return None

    slot = TimeSlot(at_minute(day_date, lunch.start), at_minute(day_date, lunch.end))
    same_day = [iv for iv in booked_intervals if iv.start.date() == day_date]
    if any(iv.overlaps(slot.start, slot.end) for iv in same_day):
        logger.info(
            f"Mittagspause am {day_date} kollidiert mit {len(same_day)} Terminen des Tages, wird übersprungen"
        )
        return None
    return slot


class LunchBreakInjector:
    """
    Legt pro Trainingstag höchstens eine Mittagspause an.

    Teilt sich ``booked_intervals`` mit dem GroupScheduler, damit die Pause
    nachfolgende Tage als belegtes Intervall sieht.
    """

    def __init__(
        self,
        config: ScheduleConfig,
        materializer: EventMaterializer,
        booked_intervals: List[TimeSlot],
        preserve_existing: bool = True,
    ) -> None:
        self.config = config
        self.materializer = materializer
        self.booked_intervals = booked_intervals
        self.preserve_existing = preserve_existing

    def inject(
        self, day_number: int, start_date: date, had_events: bool
    ) -> Optional[Dict[str, Any]]:
        """
        Legt die Mittagspause für ``day_number`` an.

        Returns:
            Das erzeugte Event oder ``None``, wenn keine Pause angelegt wurde
        """
        if not had_events or self.config.lunch_window is None:
            logger.debug(f"Keine Mittagspause für Tag {day_number} (Termine: {had_events})")
            return None

        day_date = plan_day_date(start_date, day_number, self.config.working_days)
        slot = lunch_break_slot(day_date, self.config, self.booked_intervals)
        if slot is None:
            return None

        event = self.materializer.materialize(
            EventDraft(
                title=LUNCH_BREAK_TITLE,
                slot=slot,
                item_type=LUNCH_BREAK_ITEM_TYPE,
                day_number=day_number,
            )
        )
        if self.preserve_existing:
            self.booked_intervals.append(slot)

        logger.info(f"Mittagspause für Tag {day_number} angelegt: {slot.start:%Y-%m-%d %H:%M}")
        return event
