import json
import uuid

from django.apps import apps
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from scheduler.domain.enums import ProblemStatus
from scheduler.domain.records import IngestProblemInput
from scheduler.services.events import IngestionService
from scheduler.utils.time import UTC


class Command(BaseCommand):
    help = "Ingest a JSON list of solved/attempted problem events."

    def add_arguments(self, parser):
        parser.add_argument("--file", required=True, help="JSON file with a list of events")
        parser.add_argument(
            "--user-id", default=None, help="User id applied to events that carry none"
        )

    def handle(self, *args, **options):
        file_name = options["file"]
        try:
            with open(file_name, encoding="utf-8") as json_file:
                items = json.load(json_file)
        except (OSError, ValueError) as e:
            raise CommandError(f"Error loading events from {file_name}: {e}")

        if not isinstance(items, list):
            raise CommandError(f"{file_name} must contain a JSON list of events")

        app = apps.get_app_config("scheduler")
        service = IngestionService(app.store, app.schedule)
        seen = set()
        created = duplicates = 0

        for position, item in enumerate(items):
            payload = self._payload(item, options["user_id"], position)
            event = service.ingest(payload)
            if event.id in seen:
                duplicates += 1
            else:
                seen.add(event.id)
                created += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Ingested {len(items)} events from {file_name}: "
                f"{created} distinct, {duplicates} duplicates"
            )
        )

    def _payload(self, item, default_user_id, position):
        try:
            occurred_at = parse_datetime(item["occurred_at"])
            if occurred_at is None:
                raise ValueError(f"bad occurred_at: {item['occurred_at']!r}")
            if timezone.is_naive(occurred_at):
                occurred_at = timezone.make_aware(occurred_at, UTC)
            return IngestProblemInput(
                user_id=uuid.UUID(str(item.get("user_id") or default_user_id)),
                source=item["source"],
                problem_slug=item["problem_slug"],
                title=item.get("title", item["problem_slug"]),
                url=item.get("url", ""),
                status=ProblemStatus(item.get("status", ProblemStatus.SOLVED.value)),
                occurred_at=occurred_at,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise CommandError(f"Invalid event at position {position}: {e}")
