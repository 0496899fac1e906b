from django.core.cache import cache
from rest_framework import mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from api.permissions import IsAdministrator, IsAdministratorOrReadOnly, IsEditor
from api.serializers import (
    AssignmentInputSerializer,
    AuditEventSerializer,
    ChorusSerializer,
    HolidaySerializer,
    HymnSerializer,
    MemberSerializer,
    MonthSerializer,
    PlanEntryInputSerializer,
    ReadingConfirmSerializer,
    ReadingInputSerializer,
    ScriptureReadingSerializer,
    ServiceCreateSerializer,
    ServicePlanEntrySerializer,
    ServiceSerializer,
    ServiceTemplateSerializer,
    ServiceTypeSerializer,
)
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
from core.services import calendar_generation, holidays, hymns, readings
from core.services.assignments import update_assignment
from core.services.bible import list_bible_books
from core.services.permissions import pulpit_members
from core.services.stats import participation_stats, reading_stats
from core.signals import month_view_key, service_view_key


def result_response(result, success_status=status.HTTP_200_OK):
    """Translate an ActionResult into an HTTP response."""
    if result.requires_confirmation:
        return Response(result.as_dict(), status=status.HTTP_409_CONFLICT)
    if result.success:
        return Response(result.as_dict(), status=success_status)
    if result.not_found:
        return Response({"error": result.error}, status=status.HTTP_404_NOT_FOUND)
    return Response({"error": result.error}, status=status.HTTP_400_BAD_REQUEST)


def _int_param(request, name):
    value = request.query_params.get(name)
    if value is None or not value.isdigit():
        return None
    return int(value)


class StandardPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "limit"
    max_page_size = 100


class ServiceViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    queryset = Service.objects.select_related("service_type")
    serializer_class = ServiceSerializer
    lookup_value_regex = r"\d+"
    permission_classes = [permissions.IsAuthenticated]

    def get_permissions(self):
        if self.action in ("create", "generate", "toggle_holiday"):
            return [IsAdministrator()]
        if self.action == "assign" or (self.action == "plan" and self.request.method == "POST"):
            return [IsEditor()]
        return super().get_permissions()

    def get_queryset(self):
        qs = super().get_queryset()
        year = _int_param(self.request, "year")
        month = _int_param(self.request, "month")
        if year:
            qs = qs.filter(date__year=year)
        if month:
            qs = qs.filter(date__month=month)
        return qs

    def retrieve(self, request, *args, **kwargs):
        key = service_view_key(int(kwargs["pk"]))
        payload = cache.get(key)
        if payload is None:
            payload = self.get_serializer(self.get_object()).data
            cache.set(key, payload)
        return Response(payload)

    def create(self, request, *args, **kwargs):
        serializer = ServiceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = calendar_generation.create_service(
            serializer.validated_data["date"],
            serializer.validated_data["start_time"],
            serializer.validated_data["service_type"],
            actor=request.user,
        )
        return result_response(result, status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"])
    def generate(self, request):
        serializer = MonthSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = calendar_generation.generate_services_for_month(
            serializer.validated_data["year"], serializer.validated_data["month"], actor=request.user
        )
        return result_response(result)

    @action(detail=False, methods=["get"])
    def month(self, request):
        serializer = MonthSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        year, month = serializer.validated_data["year"], serializer.validated_data["month"]
        key = month_view_key(year, month)
        payload = cache.get(key)
        if payload is None:
            services = Service.objects.select_related("service_type").filter(
                date__year=year, date__month=month
            )
            payload = {
                "year": year,
                "month": month,
                "services": ServiceSerializer(services, many=True).data,
                "holidays": HolidaySerializer(
                    Holiday.objects.filter(date__year=year, date__month=month), many=True
                ).data,
            }
            cache.set(key, payload)
        return Response(payload)

    @action(detail=True, methods=["post"])
    def assign(self, request, pk=None):
        serializer = AssignmentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = update_assignment(
            int(pk), serializer.validated_data["role"], serializer.validated_data["user"], actor=request.user
        )
        return result_response(result)

    @action(detail=True, methods=["post"], url_path="toggle-holiday")
    def toggle_holiday(self, request, pk=None):
        return result_response(holidays.toggle_holiday_adjustment(int(pk), actor=request.user))

    @action(detail=True, methods=["get", "post"])
    def plan(self, request, pk=None):
        if request.method == "GET":
            entries = ServicePlanEntry.objects.filter(service_id=pk).select_related("hymn", "chorus")
            return Response(ServicePlanEntrySerializer(entries, many=True).data)
        serializer = PlanEntryInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = hymns.add_plan_entry(
            int(pk),
            serializer.validated_data["kind"],
            serializer.validated_data["item"],
            order=serializer.validated_data["order"],
            actor=request.user,
        )
        return result_response(result, status.HTTP_201_CREATED)


class ScriptureReadingViewSet(
    mixins.ListModelMixin, mixins.RetrieveModelMixin, mixins.DestroyModelMixin, viewsets.GenericViewSet
):
    queryset = ScriptureReading.objects.select_related("service", "reader")
    serializer_class = ScriptureReadingSerializer
    lookup_value_regex = r"\d+"
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = StandardPagination

    def get_permissions(self):
        if self.action == "destroy":
            return [IsAdministrator()]
        if self.action in ("create", "confirm"):
            return [IsEditor()]
        return super().get_permissions()

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params
        service = _int_param(self.request, "service")
        if service:
            qs = qs.filter(service_id=service)
        service_type = _int_param(self.request, "service_type")
        if service_type:
            qs = qs.filter(service__service_type_id=service_type)
        if params.get("role"):
            qs = qs.filter(role=params["role"])
        if params.get("only_repeats") in ("1", "true"):
            qs = qs.filter(is_repeat=True)
        if params.get("start_date"):
            qs = qs.filter(service__date__gte=params["start_date"])
        if params.get("end_date"):
            qs = qs.filter(service__date__lte=params["end_date"])
        return qs

    def _reader_id(self, serializer):
        return serializer.validated_data.get("reader") or self.request.user.id

    def create(self, request, *args, **kwargs):
        serializer = ReadingInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = readings.record_reading(
            serializer.validated_data["service"],
            serializer.validated_data["role"],
            serializer.citation(),
            self._reader_id(serializer),
            actor=request.user,
        )
        return result_response(result, status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"])
    def confirm(self, request):
        serializer = ReadingConfirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = readings.confirm_repeated_reading(
            serializer.validated_data["service"],
            serializer.validated_data["role"],
            serializer.citation(),
            self._reader_id(serializer),
            serializer.validated_data["original_reading"],
            actor=request.user,
        )
        return result_response(result, status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        return result_response(readings.delete_reading(int(kwargs["pk"]), actor=request.user))


class HolidayViewSet(mixins.ListModelMixin, mixins.DestroyModelMixin, viewsets.GenericViewSet):
    queryset = Holiday.objects.all()
    serializer_class = HolidaySerializer
    lookup_value_regex = r"\d+"
    permission_classes = [IsAdministratorOrReadOnly]

    def get_queryset(self):
        return holidays.holidays_for_year(_int_param(self.request, "year"))

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = holidays.create_holiday(
            serializer.validated_data["date"],
            serializer.validated_data["kind"],
            serializer.validated_data.get("description", ""),
            actor=request.user,
        )
        return result_response(result, status.HTTP_201_CREATED)

    def destroy(self, request, *args, **kwargs):
        return result_response(holidays.delete_holiday(int(kwargs["pk"]), actor=request.user))


class ServiceTemplateViewSet(viewsets.ModelViewSet):
    queryset = ServiceTemplate.objects.select_related("service_type")
    serializer_class = ServiceTemplateSerializer
    lookup_value_regex = r"\d+"
    permission_classes = [IsAdministratorOrReadOnly]


class ServiceTypeViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = ServiceType.objects.all()
    serializer_class = ServiceTypeSerializer
    lookup_value_regex = r"\d+"
    permission_classes = [permissions.IsAuthenticated]


class HymnViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = Hymn.objects.all()
    serializer_class = HymnSerializer
    lookup_value_regex = r"\d+"
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        if self.action == "list":
            return hymns.search_hymns(self.request.query_params.get("q"))
        return super().get_queryset()

    @action(detail=False, methods=["get"])
    def counts(self, request):
        return Response(hymns.hymnal_counts())


class ChorusViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = Chorus.objects.all()
    serializer_class = ChorusSerializer
    lookup_value_regex = r"\d+"
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        if self.action == "list":
            return hymns.search_choruses(self.request.query_params.get("q"))
        return super().get_queryset()


class ServicePlanEntryViewSet(mixins.DestroyModelMixin, viewsets.GenericViewSet):
    queryset = ServicePlanEntry.objects.all()
    serializer_class = ServicePlanEntrySerializer
    lookup_value_regex = r"\d+"
    permission_classes = [IsEditor]

    def destroy(self, request, *args, **kwargs):
        return result_response(hymns.remove_plan_entry(int(kwargs["pk"]), actor=request.user))


class MemberViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = MemberSerializer
    lookup_value_regex = r"\d+"
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        params = self.request.query_params
        return pulpit_members(
            query=params.get("q", "").strip(),
            include_all=params.get("all") in ("1", "true"),
            role=params.get("role"),
        )


class AuditEventViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = AuditEvent.objects.select_related("actor_user")
    serializer_class = AuditEventSerializer
    lookup_value_regex = r"\d+"
    permission_classes = [IsAdministrator]
    pagination_class = StandardPagination

    def get_queryset(self):
        qs = super().get_queryset()
        action_type = self.request.query_params.get("action_type")
        if action_type:
            qs = qs.filter(action_type=action_type)
        return qs

    @action(detail=False, methods=["get"])
    def types(self, request):
        codes = AuditEvent.objects.order_by("action_type").values_list("action_type", flat=True).distinct()
        return Response(list(codes))


class StatsViewSet(viewsets.ViewSet):
    permission_classes = [permissions.IsAuthenticated]

    @action(detail=False, methods=["get"])
    def participation(self, request):
        year = _int_param(request, "year")
        if year is None:
            return Response({"error": "El ano es requerido."}, status=status.HTTP_400_BAD_REQUEST)
        return Response(participation_stats(year))

    @action(detail=False, methods=["get"])
    def readings(self, request):
        return Response(reading_stats())


class BibleViewSet(viewsets.ViewSet):
    permission_classes = [permissions.IsAuthenticated]

    @action(detail=False, methods=["get"])
    def books(self, request):
        return Response(list_bible_books())
