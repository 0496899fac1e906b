from django.contrib.auth import get_user_model
from rest_framework import serializers

from core.models import (
    AuditEvent,
    Chorus,
    Holiday,
    Hymn,
    ScriptureReading,
    Service,
    ServicePlanEntry,
    ServiceTemplate,
    ServiceType,
)
from core.services.assignments import ROLE_FIELDS, assignment_status
from core.services.readings import Citation


class MemberSerializer(serializers.ModelSerializer):
    class Meta:
        model = get_user_model()
        fields = ["id", "full_name", "email", "role", "pulpit_eligible"]


class ServiceTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = ServiceType
        fields = [
            "id",
            "name",
            "description",
            "color",
            "order",
            "has_intro_reading",
            "has_closing_reading",
            "has_teaching",
            "has_testimonies",
            "has_hymns_and_choruses",
        ]


class ServiceTemplateSerializer(serializers.ModelSerializer):
    class Meta:
        model = ServiceTemplate
        fields = ["id", "weekday", "service_type", "default_time", "affected_by_working_holiday", "active"]


class ServiceSerializer(serializers.ModelSerializer):
    service_type_name = serializers.CharField(source="service_type.name", read_only=True)
    assignment_status = serializers.SerializerMethodField()

    class Meta:
        model = Service
        fields = [
            "id",
            "date",
            "start_time",
            "end_time",
            "service_type",
            "service_type_name",
            "status",
            "is_holiday",
            "is_holiday_adjusted",
            "intro_reader",
            "closing_reader",
            "teaching_leader",
            "testimonies_leader",
            "assignment_status",
        ]

    def get_assignment_status(self, obj):
        return assignment_status(obj)


class HolidaySerializer(serializers.ModelSerializer):
    class Meta:
        model = Holiday
        fields = ["id", "date", "kind", "description"]


class ScriptureReadingSerializer(serializers.ModelSerializer):
    service_date = serializers.DateField(source="service.date", read_only=True)
    reader_name = serializers.StringRelatedField(source="reader")
    citation = serializers.CharField(read_only=True)

    class Meta:
        model = ScriptureReading
        fields = [
            "id",
            "service",
            "service_date",
            "role",
            "book",
            "start_chapter",
            "start_verse",
            "end_chapter",
            "end_verse",
            "citation",
            "reader",
            "reader_name",
            "is_repeat",
            "original_reading",
            "created_at",
        ]


class HymnSerializer(serializers.ModelSerializer):
    class Meta:
        model = Hymn
        fields = ["id", "number", "title", "duration_seconds"]


class ChorusSerializer(serializers.ModelSerializer):
    class Meta:
        model = Chorus
        fields = ["id", "number", "title", "duration_seconds"]


class ServicePlanEntrySerializer(serializers.ModelSerializer):
    title = serializers.CharField(source="item.title", read_only=True)
    number = serializers.IntegerField(source="item.number", read_only=True)

    class Meta:
        model = ServicePlanEntry
        fields = ["id", "service", "kind", "hymn", "chorus", "number", "title", "order"]


class AuditEventSerializer(serializers.ModelSerializer):
    actor_name = serializers.SerializerMethodField()

    class Meta:
        model = AuditEvent
        fields = [
            "id",
            "timestamp",
            "actor_user",
            "actor_name",
            "action_type",
            "entity_type",
            "entity_id",
            "description",
            "service",
        ]

    def get_actor_name(self, obj):
        return str(obj.actor_user) if obj.actor_user_id else ""


class MonthSerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=1900, max_value=9999)
    month = serializers.IntegerField(min_value=1, max_value=12)


class ServiceCreateSerializer(serializers.Serializer):
    date = serializers.DateField()
    start_time = serializers.TimeField()
    service_type = serializers.IntegerField()


class AssignmentInputSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=list(ROLE_FIELDS))
    user = serializers.IntegerField(required=False, allow_null=True, default=None)


class ReadingInputSerializer(serializers.Serializer):
    service = serializers.IntegerField()
    role = serializers.ChoiceField(choices=ScriptureReading.ROLE_CHOICES)
    book = serializers.CharField(max_length=60)
    start_chapter = serializers.IntegerField(min_value=1)
    start_verse = serializers.IntegerField(min_value=1)
    end_chapter = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    end_verse = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    reader = serializers.IntegerField(required=False, allow_null=True)

    def citation(self):
        data = self.validated_data
        return Citation(
            book=data["book"],
            start_chapter=data["start_chapter"],
            start_verse=data["start_verse"],
            end_chapter=data.get("end_chapter"),
            end_verse=data.get("end_verse"),
        )


class ReadingConfirmSerializer(ReadingInputSerializer):
    original_reading = serializers.IntegerField()


class PlanEntryInputSerializer(serializers.Serializer):
    kind = serializers.ChoiceField(choices=ServicePlanEntry.KIND_CHOICES)
    item = serializers.IntegerField()
    order = serializers.IntegerField(min_value=1, default=1)
