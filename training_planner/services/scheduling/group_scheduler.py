"""
Group Scheduler für den Agenda-Import

Plant die Elemente eines Trainingstages für die Zielgruppen ein:
- Jeder Kurs wird für alle Gruppen direkt hintereinander eingeplant
- Teilnehmer werden nach den geforderten Rollen gefiltert
- Gruppen ohne passende Teilnehmer werden mit Warnung übersprungen
- Fehler bei einem Element werden als Warnung erfasst, der Import läuft weiter
- Freie Aktivitäten bleiben Teil der Abfolge, erzeugen aber keine Termine

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import (
    Any,
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
    Protocol,
    Sequence,
    Tuple,
)

from .curriculum_sequencer import ItemKind, SequenceItem
from .working_calendar import ScheduleConfig, TimeSlot, schedule_event

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 60

ITEM_KIND_LABELS = {
    ItemKind.COURSE: "course",
    ItemKind.SUPPORT_ACTIVITY: "support activity",
}


@dataclass(frozen=True)
class ParticipantInfo:
    id: int
    name: str = ""
    role_id: Optional[int] = None


@dataclass(frozen=True)
class GroupInfo:
    id: int
    name: str
    participants: Tuple[ParticipantInfo, ...] = ()
    chip_color: Optional[str] = None


@dataclass
class EventDraft:
    """Alle Angaben, die der Materializer zum Anlegen eines Termins braucht."""

    title: str
    slot: TimeSlot
    item_type: str
    item_id: Optional[int] = None
    course_id: Optional[int] = None
    group: Optional[GroupInfo] = None
    participants: List[ParticipantInfo] = field(default_factory=list)
    day_number: Optional[int] = None

    @property
    def is_group_event(self) -> bool:
        return self.group is not None


class EventMaterializer(Protocol):
    def materialize(self, draft: EventDraft) -> Dict[str, Any]:
        ...


def resolve_duration(item: SequenceItem) -> int:
    """Dauer des Elements in Minuten, sonst 60 Minuten."""
    return item.duration or DEFAULT_DURATION_MINUTES


def required_roles(
    item: SequenceItem, assign_by_role: bool, selected_roles: Iterable[int]
) -> FrozenSet[int]:
    """
    Rollen, die ein Teilnehmer für das Element haben muss.

    Nur Kurse haben Rollenanforderungen, und nur wenn die Zuordnung nach Rolle
    aktiv ist und Rollen ausgewählt wurden. Ergebnis ist die Schnittmenge aus
    Kurs-Rollen und ausgewählten Rollen.
    """
    selected = frozenset(selected_roles)
    if not assign_by_role or not selected:
        return frozenset()
    if item.kind != ItemKind.COURSE or item.course is None:
        return frozenset()
    return frozenset(item.course.required_role_ids) & selected


def eligible_participants(
    group: GroupInfo, roles: FrozenSet[int]
) -> List[ParticipantInfo]:
    if not roles:
        return list(group.participants)
    return [p for p in group.participants if p.role_id is not None and p.role_id in roles]


class GroupScheduler:
    """
    Plant SequenceItems für eine feste Liste von Gruppen ein.

    Die Instanz lebt für einen Import-Lauf: ``booked_intervals`` wächst mit
    jedem erzeugten Abschnitt (wenn ``preserve_existing`` gesetzt ist),
    ``events`` und ``warnings`` sammeln die Ergebnisse über alle Tage.

    Args:
        config: Arbeitskalender des Projekts
        groups: Zielgruppen in der Reihenfolge, in der sie eingeplant werden
        materializer: Speichert erzeugte Termine
        booked_intervals: Bereits belegte Intervalle (wird erweitert)
        preserve_existing: Belegte Intervalle als Hindernisse behandeln
        assign_by_role: Teilnehmer nach Kursrollen filtern
        selected_roles: Für die Filterung ausgewählte Rollen-IDs
        on_progress: Wird nach jeder Arbeitseinheit aufgerufen
    """

    def __init__(
        self,
        config: ScheduleConfig,
        groups: Sequence[GroupInfo],
        materializer: EventMaterializer,
        booked_intervals: Optional[List[TimeSlot]] = None,
        preserve_existing: bool = True,
        assign_by_role: bool = False,
        selected_roles: Iterable[int] = (),
        on_progress: Optional[Callable[[], None]] = None,
    ) -> None:
        self.config = config
        self.groups = list(groups)
        self.materializer = materializer
        self.booked_intervals = booked_intervals if booked_intervals is not None else []
        self.preserve_existing = preserve_existing
        self.assign_by_role = assign_by_role
        self.selected_roles = frozenset(selected_roles)
        self.on_progress = on_progress

        self.events: List[Dict[str, Any]] = []
        self.warnings: List[str] = []
        self.processed = 0
        self.clock: Optional[datetime] = None

    def units_for(self, items: Iterable[SequenceItem]) -> int:
        """Anzahl der Arbeitseinheiten: Kurs x Gruppe plus eine pro Support-Aktivität."""
        units = 0
        for item in items:
            if item.kind == ItemKind.COURSE:
                units += len(self.groups)
            elif item.kind == ItemKind.SUPPORT_ACTIVITY:
                units += 1
        return units

    def schedule_items(
        self, items: Iterable[SequenceItem], start: datetime, day_number: Optional[int] = None
    ) -> datetime:
        """
        Plant die Elemente eines Tages ab ``start`` ein.

        Returns:
            Stand der Planungsuhr nach dem letzten Element
        """
        self.clock = start
        for item in items:
            if item.kind not in ITEM_KIND_LABELS:
                logger.debug(f"Überspringe {item.kind} '{item.title}': kein planbares Element")
                continue
            try:
                if item.kind == ItemKind.COURSE:
                    self._schedule_course(item, day_number)
                else:
                    self._schedule_ungrouped(item, day_number)
            except Exception as e:
                kind = ITEM_KIND_LABELS[item.kind]
                logger.exception(f"Fehler beim Verarbeiten von {kind} '{item.title}'")
                self.warnings.append(f'Failed to process {kind} "{item.title}": {e}')
                self._advance()
        return self.clock

    def _schedule_course(self, item: SequenceItem, day_number: Optional[int]) -> None:
        duration = resolve_duration(item)
        roles = required_roles(item, self.assign_by_role, self.selected_roles)
        logger.info(
            f"Plane '{item.title}' ({duration} min) für {len(self.groups)} Gruppen hintereinander"
        )

        for group in self.groups:
            participants = eligible_participants(group, roles)
            if roles and not participants:
                self.warnings.append(
                    f'No participants in group "{group.name}" match required roles '
                    f'for "{item.title}" - skipping group'
                )
                logger.warning(
                    f"Überspringe '{item.title}' für Gruppe '{group.name}': keine passenden Teilnehmer"
                )
                self._advance()
                continue

            slots = self._book(duration)
            for slot in slots:
                self._emit(
                    EventDraft(
                        title=f"{item.title} - {group.name}",
                        slot=slot,
                        item_type=item.kind,
                        item_id=item.item_id,
                        course_id=item.item_id,
                        group=group,
                        participants=participants,
                        day_number=day_number,
                    )
                )
            if slots:
                self.clock = slots[-1].end
            self._advance()

    def _schedule_ungrouped(self, item: SequenceItem, day_number: Optional[int]) -> None:
        duration = resolve_duration(item)
        logger.info(f"Plane {ITEM_KIND_LABELS[item.kind]} '{item.title}' ({duration} min)")

        slots = self._book(duration)
        for slot in slots:
            self._emit(
                EventDraft(
                    title=item.title,
                    slot=slot,
                    item_type=item.kind,
                    item_id=item.item_id,
                    day_number=day_number,
                )
            )
        if slots:
            self.clock = slots[-1].end
        self._advance()

    def _book(self, duration: int) -> List[TimeSlot]:
        return schedule_event(
            self.clock,
            duration,
            self.config,
            self.booked_intervals,
            self.preserve_existing,
        )

    def _emit(self, draft: EventDraft) -> Dict[str, Any]:
        event = self.materializer.materialize(draft)
        self.events.append(event)
        if self.preserve_existing:
            self.booked_intervals.append(draft.slot)
        return event

    def _advance(self) -> None:
        self.processed += 1
        if self.on_progress is not None:
            self.on_progress()
