from django.urls import path

from .views import (
    DashboardView,
    DueCardsView,
    EventView,
    HistoryView,
    ReviewView,
    UpcomingCardsView,
)

urlpatterns = [
    path("events", EventView.as_view(), name="events"),
    path("reviews", ReviewView.as_view(), name="review"),
    path("users/<uuid:user_id>/due-cards", DueCardsView.as_view(), name="due-cards"),
    path("users/<uuid:user_id>/upcoming-cards", UpcomingCardsView.as_view(), name="upcoming-cards"),
    path("users/<uuid:user_id>/reviews", HistoryView.as_view(), name="review-history"),
    path("users/<uuid:user_id>/dashboard", DashboardView.as_view(), name="dashboard"),
]
