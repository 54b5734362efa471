import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class AuthenticationConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"

    def ready(self):
        """
        Initialize OpenTelemetry tracing for the whole API process.
        """
        from django.conf import settings

        from authentication.infra.observability.tracing import setup_tracing

        setup_tracing(
            service_name=getattr(settings, "TRACING_SERVICE_NAME", "rewear-api"),
            console_export=getattr(settings, "TRACING_CONSOLE_EXPORT", False),
            enable=getattr(settings, "TRACING_ENABLED", False),
        )
