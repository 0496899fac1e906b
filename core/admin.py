from django.contrib import admin

from core.models import (
    AuditEvent,
    BibleChapter,
    Chorus,
    Holiday,
    Hymn,
    ScriptureReading,
    Service,
    ServicePlanEntry,
    ServiceTemplate,
    ServiceType,
)


@admin.register(ServiceType)
class ServiceTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "order", "has_intro_reading", "has_closing_reading", "has_teaching", "has_testimonies")
    ordering = ("order", "name")


@admin.register(ServiceTemplate)
class ServiceTemplateAdmin(admin.ModelAdmin):
    list_display = ("weekday", "service_type", "default_time", "affected_by_working_holiday", "active")
    list_filter = ("active", "weekday")


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("date", "start_time", "service_type", "status", "is_holiday", "is_holiday_adjusted")
    list_filter = ("status", "service_type", "is_holiday_adjusted")
    date_hierarchy = "date"


@admin.register(Holiday)
class HolidayAdmin(admin.ModelAdmin):
    list_display = ("date", "kind", "description")
    list_filter = ("kind",)


@admin.register(ScriptureReading)
class ScriptureReadingAdmin(admin.ModelAdmin):
    list_display = ("service", "role", "book", "start_chapter", "start_verse", "reader", "is_repeat")
    list_filter = ("role", "is_repeat")
    search_fields = ("book",)


admin.site.register(Hymn)
admin.site.register(Chorus)
admin.site.register(ServicePlanEntry)
admin.site.register(BibleChapter)


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "actor_user", "action_type", "entity_type", "entity_id")
    list_filter = ("action_type", "entity_type")
