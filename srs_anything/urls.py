from django.urls import include, path

from .views import health, schedule

urlpatterns = [
    path("health", health, name="health"),
    path("schedule", schedule, name="schedule"),
    path("", include("scheduler.api.urls")),
]
