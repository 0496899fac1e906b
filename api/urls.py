from django.urls import include, path
from rest_framework.routers import DefaultRouter

from api.views import (
    AuditEventViewSet,
    BibleViewSet,
    ChorusViewSet,
    HolidayViewSet,
    HymnViewSet,
    MemberViewSet,
    ScriptureReadingViewSet,
    ServicePlanEntryViewSet,
    ServiceTemplateViewSet,
    ServiceTypeViewSet,
    ServiceViewSet,
    StatsViewSet,
)

router = DefaultRouter()
router.register("services", ServiceViewSet)
router.register("readings", ScriptureReadingViewSet)
router.register("holidays", HolidayViewSet)
router.register("templates", ServiceTemplateViewSet)
router.register("service-types", ServiceTypeViewSet)
router.register("hymns", HymnViewSet)
router.register("choruses", ChorusViewSet)
router.register("plan-entries", ServicePlanEntryViewSet)
router.register("members", MemberViewSet, basename="member")
router.register("audit", AuditEventViewSet)
router.register("stats", StatsViewSet, basename="stats")
router.register("bible", BibleViewSet, basename="bible")

urlpatterns = [
    path("", include(router.urls)),
]
