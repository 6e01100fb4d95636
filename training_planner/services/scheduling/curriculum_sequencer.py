"""
Curriculum Sequencer für den Agenda-Import

Wandelt die Einträge eines Trainingsplan-Tages in eine geordnete Liste
planbarer Elemente um:
- Kurs-Einträge (direkt oder über ein Modul) werden pro Kurs zusammengefasst
- Support-Aktivitäten und freie Aktivitäten bleiben einzelne Elemente
- Sortierung nach der frühesten Reihenfolge-Nummer (stabil)

Author: DSP Development Team
Version: 1.0.0
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple, Union

from ...exceptions import InvalidPlanEntryError

logger = logging.getLogger(__name__)


class ItemKind:
    """Typen planbarer Elemente (Werte entsprechen ``extendedProps.itemType``)."""

    COURSE = "course"
    SUPPORT_ACTIVITY = "supportActivity"
    CUSTOM = "custom"


@dataclass(frozen=True)
class CourseRef:
    id: int
    title: str
    duration: Optional[int] = None
    required_role_ids: Tuple[int, ...] = ()


@dataclass(frozen=True)
class ModuleRef:
    id: int
    title: str
    course: CourseRef


@dataclass(frozen=True)
class SupportActivityRef:
    id: int
    title: str
    duration: Optional[int] = None


@dataclass(frozen=True)
class CourseEntry:
    """Eintrag mit Kursbezug, direkt (``module is None``) oder über ein Modul."""

    order: int
    course: CourseRef
    module: Optional[ModuleRef] = None
    custom_title: Optional[str] = None
    custom_duration: Optional[int] = None
    entry_id: Optional[int] = None


@dataclass(frozen=True)
class SupportActivityEntry:
    order: int
    activity: SupportActivityRef
    custom_title: Optional[str] = None
    custom_duration: Optional[int] = None
    entry_id: Optional[int] = None


@dataclass(frozen=True)
class CustomEntry:
    """Freie Aktivität ohne Rollen- oder Dauer-Metadaten aus dem Katalog."""

    order: int
    title: str
    duration: Optional[int] = None
    entry_id: Optional[int] = None


PlannedEntry = Union[CourseEntry, SupportActivityEntry, CustomEntry]


@dataclass
class SequenceItem:
    """Ein zusammengefasstes, geordnetes Element eines Trainingstages."""

    kind: str
    order: int
    course: Optional[CourseRef] = None
    modules: List[ModuleRef] = field(default_factory=list)
    support_activity: Optional[SupportActivityRef] = None
    custom_title: Optional[str] = None
    custom_duration: Optional[int] = None

    @property
    def item_id(self) -> Optional[int]:
        if self.kind == ItemKind.COURSE and self.course:
            return self.course.id
        if self.kind == ItemKind.SUPPORT_ACTIVITY and self.support_activity:
            return self.support_activity.id
        return None

    @property
    def title(self) -> str:
        if self.kind == ItemKind.COURSE:
            return self.custom_title or (self.course and self.course.title) or "Course"
        if self.kind == ItemKind.SUPPORT_ACTIVITY:
            return (
                self.custom_title
                or (self.support_activity and self.support_activity.title)
                or "Support Activity"
            )
        return self.custom_title or "Custom Activity"

    @property
    def duration(self) -> Optional[int]:
        if self.custom_duration:
            return self.custom_duration
        if self.kind == ItemKind.COURSE and self.course:
            return self.course.duration
        if self.kind == ItemKind.SUPPORT_ACTIVITY and self.support_activity:
            return self.support_activity.duration
        return None


def sequence_day(entries: Iterable[PlannedEntry]) -> List[SequenceItem]:
    """
    Erzeugt die geordnete Abfolge der Elemente eines Trainingstages.

    Einträge desselben Kurses werden zu einem Element zusammengefasst. Das
    Element erhält die kleinste Reihenfolge-Nummer aller zugehörigen Einträge.
    Bei gleicher Nummer bleibt die ursprüngliche Reihenfolge erhalten.

    Args:
        entries: Einträge des Tages (Reihenfolge beliebig)

    Returns:
        Nach ``order`` sortierte Liste von SequenceItems

    Raises:
        InvalidPlanEntryError: Für Objekte, die keiner Eintrags-Variante entsprechen
    """
    sequence: List[SequenceItem] = []
    course_items: Dict[int, SequenceItem] = {}

    for entry in entries:
        if isinstance(entry, SupportActivityEntry):
            sequence.append(
                SequenceItem(
                    kind=ItemKind.SUPPORT_ACTIVITY,
                    order=entry.order,
                    support_activity=entry.activity,
                    custom_title=entry.custom_title,
                    custom_duration=entry.custom_duration,
                )
            )
        elif isinstance(entry, CustomEntry):
            sequence.append(
                SequenceItem(
                    kind=ItemKind.CUSTOM,
                    order=entry.order,
                    custom_title=entry.title,
                    custom_duration=entry.duration,
                )
            )
        elif isinstance(entry, CourseEntry):
            existing = course_items.get(entry.course.id)
            if existing is None:
                item = _new_course_item(entry)
                course_items[entry.course.id] = item
                sequence.append(item)
            else:
                _merge_course_entry(existing, entry)
        else:
            raise InvalidPlanEntryError(
                f"Unsupported training plan entry: {entry!r}",
                getattr(entry, "entry_id", None),
            )

    ordered = sorted(sequence, key=lambda item: item.order)
    logger.debug(
        "Sequenz: "
        + ", ".join(f"{item.order}:{item.kind}:{item.title}" for item in ordered)
    )
    return ordered


def _new_course_item(entry: CourseEntry) -> SequenceItem:
    if entry.module is None:
        # Direkter Kursbezug: der Kurstitel hat Vorrang
        return SequenceItem(
            kind=ItemKind.COURSE,
            order=entry.order,
            course=entry.course,
            custom_title=entry.course.title or entry.custom_title,
            custom_duration=entry.custom_duration,
        )
    return SequenceItem(
        kind=ItemKind.COURSE,
        order=entry.order,
        course=entry.course,
        modules=[entry.module],
        custom_title=entry.course.title or entry.custom_title,
        custom_duration=entry.custom_duration or entry.course.duration,
    )


def _merge_course_entry(item: SequenceItem, entry: CourseEntry) -> None:
    if entry.module is not None and all(m.id != entry.module.id for m in item.modules):
        item.modules.append(entry.module)
    if entry.module is not None and entry.module.course.title:
        item.custom_title = entry.module.course.title
    if entry.order < item.order:
        item.order = entry.order
