from rest_framework import serializers

from ..domain.enums import GRADE_LABELS, Grade, ProblemStatus


class EventInSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    source = serializers.CharField(max_length=64)
    problem_slug = serializers.CharField(max_length=255)
    title = serializers.CharField(max_length=512)
    url = serializers.CharField(max_length=1024)
    status = serializers.ChoiceField(choices=[s.value for s in ProblemStatus])
    occurred_at = serializers.DateTimeField()  # ISO-8601


class ReviewInSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    card_id = serializers.IntegerField(min_value=1)
    grade = serializers.ChoiceField(choices=[g.value for g in Grade])


class DueQuerySerializer(serializers.Serializer):
    until = serializers.DateTimeField(required=False)


class EnumValueField(serializers.Field):
    def to_representation(self, value):
        return value.value


class EventOutSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    user_id = serializers.UUIDField()
    source = serializers.CharField()
    problem_slug = serializers.CharField()
    title = serializers.CharField()
    url = serializers.CharField()
    status = EnumValueField()
    occurred_at = serializers.DateTimeField()
    dedup_key = serializers.CharField()


class CardOutSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    user_id = serializers.UUIDField()
    source = serializers.CharField()
    problem_slug = serializers.CharField()
    title = serializers.CharField()
    url = serializers.CharField()
    interval_index = serializers.IntegerField()
    next_due_at = serializers.DateTimeField()


class ReviewOutSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    card_id = serializers.IntegerField()
    user_id = serializers.UUIDField()
    grade = EnumValueField()
    reviewed_at = serializers.DateTimeField()
    next_due_at = serializers.DateTimeField()
    grade_label = serializers.SerializerMethodField()

    def get_grade_label(self, obj):
        return GRADE_LABELS[obj.grade]


class DashboardOutSerializer(serializers.Serializer):
    due_count = serializers.IntegerField()
    upcoming_count = serializers.IntegerField()
    source_counts = serializers.DictField(child=serializers.IntegerField())
    latest_ingestion = EventOutSerializer(allow_null=True)
