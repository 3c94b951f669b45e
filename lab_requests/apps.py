# lab_requests/apps.py

from django.apps import AppConfig
import logging

logger = logging.getLogger(__name__)


class LabRequestsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "lab_requests"
    verbose_name = "Lab requests"

    def ready(self):
        # Register Django system checks only
        try:
            from .checks import workflow_consistency  # noqa
        except Exception as exc:
            logger.warning(
                "Lab workflow checks not registered: %s",
                exc,
            )
