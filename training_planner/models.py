"""
Training Planner Models - DSP (Digital Solutions Platform)

Dieses Modul enthält die Datenmodelle für Trainingsprojekte und den Agenda-Import.

Models:
- Project / ProjectSettings: Trainingsprojekt und Arbeitskalender
- ParticipantRole / Participant / ProjectGroup: Teilnehmerverwaltung
- Course / CourseModule / SupportActivity: Kurskatalog
- TrainingPlan / TrainingPlanDay / TrainingPlanEntry: Curriculum
- Event / EventGroup / EventAttendee: Erzeugte Agenda

Author: DSP Development Team
Version: 1.0.0
"""

from django.db import models
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator


def default_working_days():
    return ["monday", "tuesday", "wednesday", "thursday", "friday"]


class Project(models.Model):
    """Trainingsprojekt mit Gruppen und Agenda."""

    title = models.CharField(max_length=200, verbose_name="Titel")
    start_date = models.DateField(null=True, blank=True, verbose_name="Startdatum")
    end_date = models.DateField(null=True, blank=True, verbose_name="Enddatum")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Projekt"
        verbose_name_plural = "Projekte"
        ordering = ["-created_at"]

    def __str__(self):
        return self.title


class ProjectSettings(models.Model):
    """Arbeitskalender eines Projekts (Zeiten als ``HH:MM``)."""

    project = models.OneToOneField(
        Project,
        on_delete=models.CASCADE,
        related_name="project_settings",
        verbose_name="Projekt",
    )
    start_date = models.DateField(verbose_name="Startdatum")
    end_date = models.DateField(null=True, blank=True, verbose_name="Enddatum")
    start_of_day_time = models.CharField(max_length=5, default="09:00", verbose_name="Arbeitsbeginn")
    end_of_day_time = models.CharField(max_length=5, default="17:00", verbose_name="Arbeitsende")
    lunch_time = models.CharField(
        max_length=11,
        blank=True,
        default="12:00-13:00",
        verbose_name="Mittagspause",
        help_text="Format HH:MM-HH:MM, leer für keine Mittagspause",
    )
    timezone = models.CharField(max_length=64, default="UTC", verbose_name="Zeitzone")
    working_days = models.JSONField(default=default_working_days, verbose_name="Arbeitstage")
    created_by = models.CharField(max_length=100, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Projekteinstellung"
        verbose_name_plural = "Projekteinstellungen"

    def __str__(self):
        return f"{self.project.title}: {self.start_of_day_time}-{self.end_of_day_time}"


class ParticipantRole(models.Model):
    name = models.CharField(max_length=100, unique=True, verbose_name="Rolle")

    class Meta:
        verbose_name = "Teilnehmerrolle"
        verbose_name_plural = "Teilnehmerrollen"
        ordering = ["name"]

    def __str__(self):
        return self.name


class Participant(models.Model):
    first_name = models.CharField(max_length=100, verbose_name="Vorname")
    last_name = models.CharField(max_length=100, verbose_name="Nachname")
    email = models.EmailField(blank=True, verbose_name="E-Mail-Adresse")
    role = models.ForeignKey(
        ParticipantRole,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="participants",
        verbose_name="Rolle",
    )

    class Meta:
        verbose_name = "Teilnehmer"
        verbose_name_plural = "Teilnehmer"
        ordering = ["last_name", "first_name"]

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self):
        return self.full_name


class ProjectGroup(models.Model):
    project = models.ForeignKey(
        Project, on_delete=models.CASCADE, related_name="groups", verbose_name="Projekt"
    )
    group_name = models.CharField(max_length=100, verbose_name="Gruppenname")
    chip_color = models.CharField(max_length=20, blank=True, verbose_name="Farbe")
    participants = models.ManyToManyField(
        Participant, blank=True, related_name="groups", verbose_name="Teilnehmer"
    )

    class Meta:
        verbose_name = "Gruppe"
        verbose_name_plural = "Gruppen"
        ordering = ["id"]

    def __str__(self):
        return f"{self.project.title} - {self.group_name}"


class Course(models.Model):
    title = models.CharField(max_length=200, verbose_name="Titel")
    duration = models.PositiveIntegerField(
        null=True, blank=True, verbose_name="Dauer", help_text="Dauer in Minuten"
    )
    participant_roles = models.ManyToManyField(
        ParticipantRole,
        blank=True,
        related_name="courses",
        verbose_name="Teilnehmerrollen",
        help_text="Rollen, für die dieser Kurs vorgesehen ist",
    )

    class Meta:
        verbose_name = "Kurs"
        verbose_name_plural = "Kurse"
        ordering = ["title"]

    def __str__(self):
        return self.title


class CourseModule(models.Model):
    course = models.ForeignKey(
        Course, on_delete=models.CASCADE, related_name="modules", verbose_name="Kurs"
    )
    title = models.CharField(max_length=200, verbose_name="Titel")
    duration = models.PositiveIntegerField(null=True, blank=True, verbose_name="Dauer")

    class Meta:
        verbose_name = "Kursmodul"
        verbose_name_plural = "Kursmodule"
        ordering = ["course", "id"]

    def __str__(self):
        return f"{self.course.title} - {self.title}"


class SupportActivity(models.Model):
    title = models.CharField(max_length=200, verbose_name="Titel")
    duration = models.PositiveIntegerField(null=True, blank=True, verbose_name="Dauer")

    class Meta:
        verbose_name = "Support-Aktivität"
        verbose_name_plural = "Support-Aktivitäten"
        ordering = ["title"]

    def __str__(self):
        return self.title


class TrainingPlan(models.Model):
    title = models.CharField(max_length=200, verbose_name="Titel")
    total_days = models.PositiveIntegerField(default=1, verbose_name="Anzahl Tage")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Trainingsplan"
        verbose_name_plural = "Trainingspläne"
        ordering = ["title"]

    def __str__(self):
        return self.title


class TrainingPlanDay(models.Model):
    training_plan = models.ForeignKey(
        TrainingPlan, on_delete=models.CASCADE, related_name="days", verbose_name="Trainingsplan"
    )
    day_number = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        verbose_name="Tag",
        help_text="Tag 1 entspricht dem Startdatum des Projekts",
    )

    class Meta:
        verbose_name = "Trainingstag"
        verbose_name_plural = "Trainingstage"
        ordering = ["day_number"]
        unique_together = ("training_plan", "day_number")

    def __str__(self):
        return f"{self.training_plan.title} - Tag {self.day_number}"


class TrainingPlanEntry(models.Model):
    """
    Eintrag eines Trainingstages.

    Genau eine Form ist erlaubt: Kurs, Modul (eines Kurses), Support-Aktivität
    oder freie Aktivität mit ``custom_title``.
    """

    day = models.ForeignKey(
        TrainingPlanDay, on_delete=models.CASCADE, related_name="entries", verbose_name="Tag"
    )
    entry_order = models.IntegerField(default=0, verbose_name="Reihenfolge")
    course = models.ForeignKey(
        Course, on_delete=models.CASCADE, null=True, blank=True, related_name="plan_entries"
    )
    module = models.ForeignKey(
        CourseModule, on_delete=models.CASCADE, null=True, blank=True, related_name="plan_entries"
    )
    support_activity = models.ForeignKey(
        SupportActivity,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="plan_entries",
    )
    custom_title = models.CharField(max_length=200, blank=True, verbose_name="Eigener Titel")
    custom_duration = models.PositiveIntegerField(
        null=True, blank=True, verbose_name="Eigene Dauer", help_text="Dauer in Minuten"
    )

    class Meta:
        verbose_name = "Trainingsplan-Eintrag"
        verbose_name_plural = "Trainingsplan-Einträge"
        ordering = ["entry_order", "id"]

    def clean(self):
        references = [self.course_id, self.module_id, self.support_activity_id]
        if sum(1 for ref in references if ref) > 1:
            raise ValidationError("Nur ein Bezug (Kurs, Modul oder Support-Aktivität) erlaubt.")
        if not any(references) and not self.custom_title:
            raise ValidationError("Eintrag braucht einen Bezug oder einen eigenen Titel.")

    def __str__(self):
        return f"{self.day} #{self.entry_order}"


class Event(models.Model):
    COURSE = "course"
    OTHER = "other"
    EVENT_TYPE_CHOICES = [
        (COURSE, "Kurs"),
        (OTHER, "Sonstiges"),
    ]

    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"
    STATUS_CHOICES = [
        (SCHEDULED, "Geplant"),
        (CANCELLED, "Abgesagt"),
    ]

    project = models.ForeignKey(
        Project, on_delete=models.CASCADE, related_name="events", verbose_name="Projekt"
    )
    title = models.CharField(max_length=300, verbose_name="Titel")
    start = models.DateTimeField(verbose_name="Beginn")
    end = models.DateTimeField(verbose_name="Ende")
    event_type = models.CharField(max_length=10, choices=EVENT_TYPE_CHOICES, default=OTHER)
    course = models.ForeignKey(
        Course, on_delete=models.SET_NULL, null=True, blank=True, related_name="events"
    )
    extended_props = models.JSONField(default=dict, blank=True)
    event_status = models.CharField(max_length=12, choices=STATUS_CHOICES, default=SCHEDULED)
    all_day = models.BooleanField(default=False)
    color = models.CharField(max_length=20, blank=True)
    background_color = models.CharField(max_length=20, blank=True)
    editable = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Termin"
        verbose_name_plural = "Termine"
        ordering = ["start"]
        indexes = [
            models.Index(fields=["project", "start"]),
        ]

    def __str__(self):
        return f"{self.title} ({self.start:%Y-%m-%d %H:%M})"


class EventGroup(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="event_groups")
    group = models.ForeignKey(ProjectGroup, on_delete=models.CASCADE, related_name="event_groups")

    class Meta:
        verbose_name = "Termin-Gruppe"
        verbose_name_plural = "Termin-Gruppen"
        unique_together = ("event", "group")


class EventAttendee(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="attendees")
    participant = models.ForeignKey(
        Participant, on_delete=models.CASCADE, related_name="event_attendances"
    )
    attendance_status = models.CharField(max_length=20, default="scheduled")
    created_by = models.CharField(max_length=100, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Termin-Teilnehmer"
        verbose_name_plural = "Termin-Teilnehmer"
        unique_together = ("event", "participant")
