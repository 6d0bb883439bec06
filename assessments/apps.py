"""
Assessments Application Configuration

Django application configuration for the quiz engine.

Author: DSP Development Team
Version: 1.0.0
"""

from django.apps import AppConfig


class AssessmentsConfig(AppConfig):
    """
    Configuration class for the Assessments Django application.

    Attributes:
        default_auto_field: Default primary key field type for models
        name: Application name for Django registration
        verbose_name: Human-readable application name for admin interface
    """

    default_auto_field: str = "django.db.models.BigAutoField"
    name: str = "assessments"
    verbose_name: str = "Assessments"
