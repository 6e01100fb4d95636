"""
Training Planner Django Admin Configuration

Admin-Oberfläche für Projekte, Teilnehmer, Kurskatalog, Trainingspläne und
die importierte Agenda.

Author: DSP Development Team
Version: 1.0.0
"""

from django.contrib import admin

from .models import (
    Course,
    CourseModule,
    Event,
    EventAttendee,
    EventGroup,
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

# --- Projekte und Teilnehmer ---


class ProjectSettingsInline(admin.StackedInline):
    model = ProjectSettings
    can_delete = False
    fields = (
        "start_date",
        "end_date",
        "start_of_day_time",
        "end_of_day_time",
        "lunch_time",
        "timezone",
        "working_days",
    )


class ProjectGroupInline(admin.TabularInline):
    model = ProjectGroup
    extra = 0
    fields = ("group_name", "chip_color")
    show_change_link = True


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("title", "start_date", "end_date", "created_at")
    search_fields = ("title",)
    inlines = [ProjectSettingsInline, ProjectGroupInline]


@admin.register(ProjectGroup)
class ProjectGroupAdmin(admin.ModelAdmin):
    list_display = ("group_name", "project", "chip_color")
    list_filter = ("project",)
    search_fields = ("group_name",)
    filter_horizontal = ("participants",)


@admin.register(ParticipantRole)
class ParticipantRoleAdmin(admin.ModelAdmin):
    search_fields = ("name",)


@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    list_display = ("last_name", "first_name", "email", "role")
    list_filter = ("role",)
    search_fields = ("first_name", "last_name", "email")


# --- Kurskatalog ---


class CourseModuleInline(admin.TabularInline):
    model = CourseModule
    extra = 0


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ("title", "duration")
    search_fields = ("title",)
    filter_horizontal = ("participant_roles",)
    inlines = [CourseModuleInline]


@admin.register(SupportActivity)
class SupportActivityAdmin(admin.ModelAdmin):
    list_display = ("title", "duration")
    search_fields = ("title",)


# --- Trainingspläne ---


class TrainingPlanDayInline(admin.TabularInline):
    model = TrainingPlanDay
    extra = 0
    show_change_link = True


class TrainingPlanEntryInline(admin.TabularInline):
    model = TrainingPlanEntry
    extra = 0
    fields = (
        "entry_order",
        "course",
        "module",
        "support_activity",
        "custom_title",
        "custom_duration",
    )


@admin.register(TrainingPlan)
class TrainingPlanAdmin(admin.ModelAdmin):
    list_display = ("title", "total_days", "created_at")
    search_fields = ("title",)
    inlines = [TrainingPlanDayInline]


@admin.register(TrainingPlanDay)
class TrainingPlanDayAdmin(admin.ModelAdmin):
    list_display = ("training_plan", "day_number")
    list_filter = ("training_plan",)
    inlines = [TrainingPlanEntryInline]


# --- Agenda ---


class EventGroupInline(admin.TabularInline):
    model = EventGroup
    extra = 0


class EventAttendeeInline(admin.TabularInline):
    model = EventAttendee
    extra = 0
    readonly_fields = ("created_by", "created_at")


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("title", "project", "start", "end", "event_type", "event_status")
    list_filter = ("project", "event_type", "event_status")
    search_fields = ("title",)
    date_hierarchy = "start"
    readonly_fields = ("extended_props", "created_at")
    inlines = [EventGroupInline, EventAttendeeInline]
