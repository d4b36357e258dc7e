import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ProblemCard",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.UUIDField()),
                ("source", models.CharField(max_length=64)),
                ("problem_slug", models.CharField(max_length=255)),
                ("title", models.CharField(max_length=512)),
                ("url", models.CharField(max_length=1024)),
                ("interval_index", models.PositiveSmallIntegerField(default=0)),
                ("next_due_at", models.DateTimeField()),
            ],
            options={
                "indexes": [models.Index(fields=["user_id", "next_due_at"], name="card_user_due_idx")],
                "unique_together": {("user_id", "source", "problem_slug")},
            },
        ),
        migrations.CreateModel(
            name="ProblemEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.UUIDField()),
                ("source", models.CharField(max_length=64)),
                ("problem_slug", models.CharField(max_length=255)),
                ("title", models.CharField(max_length=512)),
                ("url", models.CharField(max_length=1024)),
                ("status", models.CharField(choices=[("solved", "solved"), ("unsolved", "unsolved")], max_length=16)),
                ("occurred_at", models.DateTimeField()),
                ("dedup_key", models.CharField(max_length=512, unique=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "indexes": [models.Index(fields=["user_id", "occurred_at"], name="event_user_occurred_idx")],
            },
        ),
        migrations.CreateModel(
            name="ReviewEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.UUIDField()),
                (
                    "grade",
                    models.CharField(
                        choices=[("again", "again"), ("hard", "hard"), ("good", "good"), ("easy", "easy")],
                        max_length=8,
                    ),
                ),
                ("reviewed_at", models.DateTimeField()),
                ("next_due_at", models.DateTimeField()),
                (
                    "card",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="reviews",
                        to="scheduler.problemcard",
                    ),
                ),
            ],
            options={
                "indexes": [models.Index(fields=["user_id", "reviewed_at"], name="review_user_reviewed_idx")],
            },
        ),
    ]
