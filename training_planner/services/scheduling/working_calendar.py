"""
Working Calendar Resolver für den Agenda-Import

Reine Funktionen für die Zeitberechnung im Arbeitskalender eines Projekts:
- Arbeitstage und Arbeitszeiten einhalten
- Mittagspause aussparen
- Konflikte mit bereits gebuchten Terminen vermeiden
- Lange Termine auf mehrere Arbeitstage aufteilen

Alle Zeitpunkte sind naive ``datetime``-Objekte in der lokalen Zeit des Projekts.
Keine Funktion verändert ihre Argumente, es werden immer neue Werte zurückgegeben.

Author: DSP Development Team
Version: 1.0.0
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, date, timedelta
from typing import FrozenSet, Iterable, List, Optional, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ...exceptions import CalendarConfigurationError, SchedulingError

logger = logging.getLogger(__name__)

# Index entspricht datetime.weekday()
WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

DEFAULT_WORKING_DAYS = ("monday", "tuesday", "wednesday", "thursday", "friday")
DEFAULT_START_OF_DAY_TIME = "09:00"
DEFAULT_END_OF_DAY_TIME = "17:00"
DEFAULT_LUNCH_TIME = "12:00-13:00"
DEFAULT_TIMEZONE = "UTC"

MINUTES_PER_DAY = 24 * 60

# Obergrenze für Verschiebungen pro Tagesabschnitt
MAX_SETTLE_ROUNDS = 1000
MAX_SCHEDULING_ROUNDS = 10000

_CLOCK_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")
_LUNCH_PATTERN = re.compile(r"(\d{1,2}):(\d{2})\s*-\s*(\d{1,2}):(\d{2})")


@dataclass(frozen=True)
class LunchWindow:
    """Mittagspause als Minuten seit Mitternacht."""

    start: int
    end: int


@dataclass(frozen=True)
class TimeSlot:
    """
    Zeitintervall ``[start, end)``.

    Wird sowohl für bereits gebuchte Intervalle (BookedInterval) als auch für
    erzeugte Termin-Abschnitte (ScheduledSlot) verwendet.
    """

    start: datetime
    end: datetime

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return start < self.end and end > self.start


BookedInterval = TimeSlot
ScheduledSlot = TimeSlot


@dataclass(frozen=True)
class ScheduleConfig:
    """
    Arbeitskalender eines Projekts.

    Attributes:
        start_of_day: Arbeitsbeginn in Minuten seit Mitternacht
        end_of_day: Arbeitsende in Minuten seit Mitternacht
        working_days: Menge der Wochentagsnamen (``"monday"`` ...)
        lunch_window: Optionale Mittagspause
        timezone: IANA-Zeitzone des Projekts

    Raises:
        CalendarConfigurationError: Bei einer Konfiguration, mit der sich kein
            Termin einplanen lässt (z.B. keine Arbeitstage)
    """

    start_of_day: int = 9 * 60
    end_of_day: int = 17 * 60
    working_days: FrozenSet[str] = frozenset(DEFAULT_WORKING_DAYS)
    lunch_window: Optional[LunchWindow] = LunchWindow(12 * 60, 13 * 60)
    timezone: str = DEFAULT_TIMEZONE

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "working_days", frozenset(day.lower() for day in self.working_days)
        )
        if not self.working_days:
            raise CalendarConfigurationError("At least one working day is required")

        unknown_days = sorted(self.working_days - set(WEEKDAY_NAMES))
        if unknown_days:
            raise CalendarConfigurationError(
                f"Unknown working days: {', '.join(unknown_days)}",
                {"working_days": unknown_days},
            )

        if not 0 <= self.start_of_day < self.end_of_day <= MINUTES_PER_DAY:
            raise CalendarConfigurationError(
                "Start of day must be before end of day",
                {"start_of_day": self.start_of_day, "end_of_day": self.end_of_day},
            )

        lunch = self.lunch_window
        if lunch is not None:
            if lunch.start >= lunch.end:
                raise CalendarConfigurationError("Lunch start must be before lunch end")
            if lunch.start <= self.start_of_day and lunch.end >= self.end_of_day:
                raise CalendarConfigurationError(
                    "Lunch window must not cover the whole working day"
                )

        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise CalendarConfigurationError(
                f"Unknown timezone: {self.timezone}", {"timezone": self.timezone}
            ) from e

    @classmethod
    def from_settings(
        cls,
        start_of_day_time: Optional[str] = None,
        end_of_day_time: Optional[str] = None,
        lunch_time: Optional[str] = None,
        working_days: Optional[Iterable[str]] = None,
        timezone: Optional[str] = None,
    ) -> "ScheduleConfig":
        """
        Baut die Konfiguration aus den Projekt-Einstellungen (``HH:MM`` Strings).

        Fehlende Werte werden mit den Standardwerten (09:00-17:00, Mo-Fr, UTC)
        belegt. Ein leerer ``lunch_time`` bedeutet: keine Mittagspause. Eine
        Mittagspause, die nicht lesbar, umgedreht oder so lang wie der ganze
        Arbeitstag ist, wird mit einer Warnung verworfen.
        """
        start_of_day = parse_clock(start_of_day_time or DEFAULT_START_OF_DAY_TIME)
        end_of_day = parse_clock(end_of_day_time or DEFAULT_END_OF_DAY_TIME)

        lunch_window = parse_lunch_window(lunch_time)
        if lunch_window is not None and (
            lunch_window.start >= lunch_window.end
            or (lunch_window.start <= start_of_day and lunch_window.end >= end_of_day)
        ):
            logger.warning(f"Unbrauchbare Mittagspause ignoriert: {lunch_time!r}")
            lunch_window = None

        return cls(
            start_of_day=start_of_day,
            end_of_day=end_of_day,
            working_days=frozenset(
                working_days if working_days is not None else DEFAULT_WORKING_DAYS
            ),
            lunch_window=lunch_window,
            timezone=timezone or DEFAULT_TIMEZONE,
        )

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def parse_clock(value: str) -> int:
    """Wandelt ``"HH:MM"`` in Minuten seit Mitternacht um."""
    match = _CLOCK_PATTERN.match(value or "")
    if not match:
        raise CalendarConfigurationError(f"Invalid time of day: {value!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 24 or minutes > 59 or (hours == 24 and minutes):
        raise CalendarConfigurationError(f"Invalid time of day: {value!r}")
    return hours * 60 + minutes


def parse_lunch_window(value: Optional[str]) -> Optional[LunchWindow]:
    """
    Wandelt ``"HH:MM-HH:MM"`` in ein LunchWindow um.

    Ein leerer oder nicht lesbarer Wert ergibt ``None`` (keine Mittagspause).
    """
    if not value:
        return None
    match = _LUNCH_PATTERN.search(value)
    if not match:
        logger.warning(f"Ungültiges Mittagspausen-Format ignoriert: {value!r}")
        return None
    start_h, start_m, end_h, end_m = (int(part) for part in match.groups())
    return LunchWindow(start_h * 60 + start_m, end_h * 60 + end_m)


def minute_of_day(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def at_minute(day: date, minutes: int) -> datetime:
    """Zeitpunkt ``minutes`` Minuten nach Mitternacht am Kalendertag von ``day``."""
    midnight = datetime(day.year, day.month, day.day)
    return midnight + timedelta(minutes=minutes)


def is_working_day(day: date, working_days: Iterable[str]) -> bool:
    return WEEKDAY_NAMES[day.weekday()] in working_days


def _require_working_days(working_days: Iterable[str]) -> FrozenSet[str]:
    days = frozenset(working_days)
    if not days & set(WEEKDAY_NAMES):
        raise CalendarConfigurationError("At least one working day is required")
    return days


def ensure_working_day(moment: datetime, working_days: Iterable[str]) -> datetime:
    """
    Schiebt ``moment`` tageweise vor, bis sein Wochentag ein Arbeitstag ist.

    Die Uhrzeit bleibt erhalten.

    Raises:
        CalendarConfigurationError: Wenn ``working_days`` keinen gültigen Wochentag enthält
    """
    days = _require_working_days(working_days)
    current = moment
    while not is_working_day(current, days):
        current += timedelta(days=1)
    return current


def next_working_day(moment: datetime, working_days: Iterable[str]) -> datetime:
    """Erster Arbeitstag strikt nach dem Kalendertag von ``moment`` (gleiche Uhrzeit)."""
    return ensure_working_day(moment + timedelta(days=1), working_days)


def ensure_working_hours(moment: datetime, config: ScheduleConfig) -> datetime:
    """
    Bringt ``moment`` in die Arbeitszeit.

    - Vor Arbeitsbeginn: Arbeitsbeginn am selben Tag
    - Ab Arbeitsende: Arbeitsbeginn am nächsten Arbeitstag
    """
    current_minutes = minute_of_day(moment)
    if current_minutes < config.start_of_day:
        return at_minute(moment, config.start_of_day)
    if current_minutes >= config.end_of_day:
        next_day = at_minute(moment + timedelta(days=1), config.start_of_day)
        return ensure_working_day(next_day, config.working_days)
    return moment


def find_next_available_slot(
    start: datetime,
    duration: int,
    booked_intervals: Sequence[TimeSlot],
    config: ScheduleConfig,
) -> datetime:
    """
    Verschiebt ``start`` hinter gebuchte Intervalle, mit denen ``[start, start+duration)``
    kollidiert.

    Die Intervalle werden einmal in Listenreihenfolge geprüft. Nach einer
    Verschiebung werden frühere Intervalle nicht erneut geprüft.
    """
    current = start
    for interval in booked_intervals:
        proposed_end = current + timedelta(minutes=duration)
        if interval.overlaps(current, proposed_end):
            current = ensure_working_hours(interval.end, config)
    return current


def avoid_lunch_time(start: datetime, duration: int, config: ScheduleConfig) -> datetime:
    """Verschiebt ``start`` auf das Ende der Mittagspause, falls der Termin sie überlappt."""
    lunch = config.lunch_window
    if lunch is None:
        return start

    lunch_start = at_minute(start, lunch.start)
    lunch_end = at_minute(start, lunch.end)
    proposed_end = start + timedelta(minutes=duration)

    if start < lunch_end and proposed_end > lunch_start:
        logger.debug(f"Termin um {start:%Y-%m-%d %H:%M} überlappt Mittagspause, verschiebe")
        return lunch_end
    return start


def calculate_available_time(start: datetime, remaining: int, config: ScheduleConfig) -> int:
    """
    Minuten, die ab ``start`` heute noch verplant werden können.

    Liegt die Mittagspause zwischen ``start`` und Arbeitsende, endet der
    verfügbare Abschnitt bei Beginn der Mittagspause.

    Returns:
        ``min(remaining, verfügbare Minuten)``
    """
    day_end = at_minute(start, config.end_of_day)
    available = max(0, int((day_end - start).total_seconds() // 60))

    lunch = config.lunch_window
    if lunch is not None:
        lunch_start = at_minute(start, lunch.start)
        if start < lunch_start < day_end:
            until_lunch = int((lunch_start - start).total_seconds() // 60)
            available = min(available, until_lunch)

    return min(remaining, available)


def _settle_start(
    start: datetime,
    remaining: int,
    config: ScheduleConfig,
    booked_intervals: Sequence[TimeSlot],
    preserve_existing: bool,
) -> datetime:
    # Wiederholt Normalisierung, Konfliktprüfung und Mittagspause, bis sich der
    # Startzeitpunkt nicht mehr bewegt.
    current = start
    for _ in range(MAX_SETTLE_ROUNDS):
        candidate = ensure_working_day(current, config.working_days)
        candidate = ensure_working_hours(candidate, config)
        if preserve_existing:
            candidate = find_next_available_slot(
                candidate,
                calculate_available_time(candidate, remaining, config),
                booked_intervals,
                config,
            )
        candidate = avoid_lunch_time(
            candidate, calculate_available_time(candidate, remaining, config), config
        )
        if candidate == current:
            return candidate
        current = candidate

    raise SchedulingError(
        f"Could not find a free slot starting from {start.isoformat()}",
        {"start": start.isoformat(), "remaining": remaining},
    )


def schedule_event(
    start: datetime,
    duration: int,
    config: ScheduleConfig,
    booked_intervals: Sequence[TimeSlot] = (),
    preserve_existing: bool = False,
) -> List[TimeSlot]:
    """
    Plant einen Termin mit ``duration`` Minuten ab ``start`` ein.

    Der Termin wird bei Bedarf in mehrere Abschnitte geteilt: an der
    Mittagspause (Fortsetzung nach der Pause) und am Arbeitsende
    (Fortsetzung am nächsten Arbeitstag zu Arbeitsbeginn).

    Args:
        start: Frühester Startzeitpunkt
        duration: Dauer in Minuten
        config: Arbeitskalender des Projekts
        booked_intervals: Bereits belegte Intervalle
        preserve_existing: Belegte Intervalle als Hindernisse behandeln

    Returns:
        Chronologische Liste der erzeugten Abschnitte

    Raises:
        SchedulingError: Bei nicht positiver Dauer oder wenn kein Platz gefunden wird
    """
    if duration is None or duration <= 0:
        raise SchedulingError(f"Duration must be positive, got {duration}")

    slots: List[TimeSlot] = []
    remaining = int(duration)
    current = start
    rounds = 0

    while remaining > 0:
        rounds += 1
        if rounds > MAX_SCHEDULING_ROUNDS:
            raise SchedulingError(
                f"Could not schedule {duration} minutes starting from {start.isoformat()}",
                {"start": start.isoformat(), "duration": duration},
            )

        current = _settle_start(current, remaining, config, booked_intervals, preserve_existing)
        today = calculate_available_time(current, remaining, config)

        if today > 0:
            end = current + timedelta(minutes=today)
            slots.append(TimeSlot(current, end))
            remaining -= today
            current = end
        else:
            current = at_minute(
                next_working_day(current, config.working_days), config.start_of_day
            )

    return slots
