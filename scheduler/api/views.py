import uuid

import structlog
from django.apps import apps
from rest_framework import status, views
from rest_framework.response import Response

from ..domain.enums import Grade, ProblemStatus
from ..domain.records import IngestProblemInput
from ..errors import CardNotFound
from ..services.dashboard import DashboardService
from ..services.events import IngestionService
from ..services.reviews import ReviewService
from .serializers import (
    CardOutSerializer,
    DashboardOutSerializer,
    DueQuerySerializer,
    EventInSerializer,
    EventOutSerializer,
    ReviewInSerializer,
    ReviewOutSerializer,
)

base_logger = structlog.get_logger()


def _app():
    return apps.get_app_config("scheduler")


def review_service():
    app = _app()
    return ReviewService(app.store, app.schedule)


def ingestion_service():
    app = _app()
    return IngestionService(app.store, app.schedule)


def _request_logger():
    # Create a unique request_id
    return base_logger.bind(request_id=str(uuid.uuid4()))


class EventView(views.APIView):
    def post(self, request):
        logger = _request_logger()

        s = EventInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        event = ingestion_service().ingest(
            IngestProblemInput(
                user_id=data["user_id"],
                source=data["source"],
                problem_slug=data["problem_slug"],
                title=data["title"],
                url=data["url"],
                status=ProblemStatus(data["status"]),
                occurred_at=data["occurred_at"],
            )
        )

        logger.info("events_ingest_response",
            user_id=str(event.user_id),
            event_id=event.id,
            source=event.source,
            problem_slug=event.problem_slug,
        )
        return Response(EventOutSerializer(event).data, status=status.HTTP_201_CREATED)


class ReviewView(views.APIView):
    def post(self, request):
        logger = _request_logger()

        s = ReviewInSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        user_id = s.validated_data["user_id"]
        card_id = s.validated_data["card_id"]
        grade = Grade(s.validated_data["grade"])

        try:
            review = review_service().grade(user_id, card_id, grade)
        except CardNotFound:
            # Same answer whether the card is missing or belongs to someone else
            return Response({"error": "Card not found"}, status=status.HTTP_404_NOT_FOUND)

        logger.info("review_api_response",
            user_id=str(user_id),
            card_id=card_id,
            grade=grade.value,
            review_id=review.id,
            next_due_at=review.next_due_at.isoformat(),
        )
        return Response(ReviewOutSerializer(review).data, status=status.HTTP_201_CREATED)


class DueCardsView(views.APIView):
    def get(self, request, user_id):
        logger = _request_logger()

        qs = DueQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        until = qs.validated_data.get("until")

        cards = review_service().due_cards(user_id, until)

        logger.info("due_cards_api_response", user_id=str(user_id), card_count=len(cards))
        return Response(CardOutSerializer(cards, many=True).data)


class UpcomingCardsView(views.APIView):
    def get(self, request, user_id):
        cards = review_service().upcoming_cards(user_id)
        return Response(CardOutSerializer(cards, many=True).data)


class HistoryView(views.APIView):
    def get(self, request, user_id):
        reviews = review_service().history(user_id)
        return Response(ReviewOutSerializer(reviews, many=True).data)


class DashboardView(views.APIView):
    def get(self, request, user_id):
        logger = _request_logger()

        summary = DashboardService(review_service(), ingestion_service()).summary(user_id)

        logger.info("dashboard_api_response", user_id=str(user_id), due_count=summary.due_count)
        return Response(DashboardOutSerializer(summary).data)
