"""
Training Planner Serializers - DSP (Digital Solutions Platform)

Dieses Modul enthält die Django REST Framework Serializer für den Agenda-Import.

Serializer:
- AgendaImportRequestSerializer: Validierung des Import-Requests (camelCase Felder)
- EventSerializer: Darstellung der erzeugten Termine im Job-Status

Author: DSP Development Team
Version: 1.0.0
"""

from rest_framework import serializers

from .models import Event


class AgendaImportRequestSerializer(serializers.Serializer):
    """
    Serializer für den Import-Request

    Feldnamen entsprechen dem JSON-Body des Frontends.
    """

    projectId = serializers.IntegerField()
    trainingPlanId = serializers.IntegerField()
    selectedGroups = serializers.ListField(
        child=serializers.IntegerField(), required=False, default=list
    )
    includeAllParticipants = serializers.BooleanField(required=False, default=False)
    followProjectHours = serializers.BooleanField(required=False, default=True)
    assignByRole = serializers.BooleanField(required=False, default=False)
    selectedRoles = serializers.ListField(
        child=serializers.IntegerField(), required=False, default=list
    )
    preserveExistingEvents = serializers.BooleanField(required=False, default=True)


class EventSerializer(serializers.ModelSerializer):
    groups = serializers.SerializerMethodField()
    attendee_count = serializers.SerializerMethodField()

    class Meta:
        model = Event
        fields = [
            "id",
            "project",
            "title",
            "start",
            "end",
            "event_type",
            "course",
            "extended_props",
            "event_status",
            "all_day",
            "color",
            "background_color",
            "editable",
            "groups",
            "attendee_count",
        ]

    def get_groups(self, obj):
        return [event_group.group_id for event_group in obj.event_groups.all()]

    def get_attendee_count(self, obj):
        return obj.attendees.count()
