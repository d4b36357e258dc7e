from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


def build_store(kind):
    """Return the card store named by the ``SRS_STORE`` setting."""
    if kind == "orm":
        from .data.repos import OrmCardStore
        return OrmCardStore()
    if kind == "memory":
        from .data.memory import InMemoryCardStore
        return InMemoryCardStore()
    raise ImproperlyConfigured(f"SRS_STORE must be 'orm' or 'memory', got {kind!r}")


class SchedulerConfig(AppConfig):
    name = "scheduler"
    default_auto_field = "django.db.models.BigAutoField"

    def ready(self):
        from .domain.schedule import load_schedule

        # Loaded once per process; read-only afterwards
        self.schedule = load_schedule(
            getattr(settings, "SRS_CONFIG_PATH", None),
            getattr(settings, "SRS_PROFILE", None),
        )
        self.store = build_store(getattr(settings, "SRS_STORE", "orm"))
