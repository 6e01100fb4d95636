"""
Training Planner Application Configuration

Django-Konfiguration für den Training Planner. Die App verwaltet
Trainingsprojekte, Trainingspläne und die daraus importierte Agenda.

Author: DSP Development Team
Version: 1.0.0
"""

from django.apps import AppConfig


class TrainingPlannerConfig(AppConfig):
    """
    Configuration class for the Training Planner Django application.

    Attributes:
        default_auto_field: Default primary key field type for models
        name: Application name for Django registration
        verbose_name: Human-readable application name for admin interface
    """

    default_auto_field: str = "django.db.models.BigAutoField"
    name: str = "training_planner"
    verbose_name: str = "Training Planner"
