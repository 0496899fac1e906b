from django.conf import settings
from django.db import models
from django.db.models import Q


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ServiceType(TimeStampedModel):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    color = models.CharField(max_length=20, default="#3b82f6")
    order = models.PositiveSmallIntegerField(default=0)
    has_intro_reading = models.BooleanField(default=True)
    has_closing_reading = models.BooleanField(default=True)
    has_teaching = models.BooleanField(default=False)
    has_testimonies = models.BooleanField(default=False)
    has_hymns_and_choruses = models.BooleanField(default=True)

    class Meta:
        ordering = ["order", "name"]

    def __str__(self):
        return self.name

    def required_roles(self):
        roles = []
        if self.has_intro_reading:
            roles.append("introduction")
        if self.has_closing_reading:
            roles.append("closing")
        if self.has_teaching:
            roles.append("teaching")
        if self.has_testimonies:
            roles.append("testimonies")
        return roles


class ServiceTemplate(TimeStampedModel):
    WEEKDAY_CHOICES = [
        (0, "Lun"),
        (1, "Mar"),
        (2, "Mie"),
        (3, "Jue"),
        (4, "Vie"),
        (5, "Sab"),
        (6, "Dom"),
    ]
    weekday = models.PositiveSmallIntegerField(choices=WEEKDAY_CHOICES)
    service_type = models.ForeignKey(ServiceType, on_delete=models.CASCADE, related_name="templates")
    default_time = models.TimeField()
    affected_by_working_holiday = models.BooleanField(default=True)
    active = models.BooleanField(default=True)

    class Meta:
        ordering = ["weekday", "default_time"]
        unique_together = ("weekday", "service_type")

    def __str__(self):
        return f"{self.get_weekday_display()} {self.default_time:%H:%M} - {self.service_type}"


class Holiday(TimeStampedModel):
    KIND_NATIONAL = "national"
    KIND_REGIONAL = "regional"
    KIND_LOCAL = "local"
    KIND_WORKING = "working_holiday"
    KIND_CHOICES = [
        (KIND_NATIONAL, "Nacional"),
        (KIND_REGIONAL, "Autonomico"),
        (KIND_LOCAL, "Local"),
        (KIND_WORKING, "Laborable festivo"),
    ]
    date = models.DateField(unique=True)
    kind = models.CharField(max_length=20, choices=KIND_CHOICES)
    description = models.CharField(max_length=200, blank=True)

    class Meta:
        ordering = ["date"]

    def __str__(self):
        return f"{self.date} ({self.get_kind_display()})"

    @property
    def shifts_services(self):
        return self.kind == self.KIND_WORKING


class Service(TimeStampedModel):
    STATUS_CHOICES = [
        ("planned", "Planeado"),
        ("done", "Realizado"),
        ("cancelled", "Cancelado"),
    ]
    date = models.DateField()
    service_type = models.ForeignKey(ServiceType, on_delete=models.PROTECT, related_name="services")
    start_time = models.TimeField()
    end_time = models.TimeField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="planned")
    is_holiday = models.BooleanField(default=False)
    is_holiday_adjusted = models.BooleanField(default=False)
    intro_reader = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="intro_services"
    )
    closing_reader = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="closing_services"
    )
    teaching_leader = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="teaching_services"
    )
    testimonies_leader = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="testimonies_services"
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="services_created"
    )

    class Meta:
        ordering = ["date", "start_time"]
        constraints = [
            models.UniqueConstraint(
                fields=["date", "service_type"],
                name="unique_service_per_type_and_date",
            )
        ]

    def __str__(self):
        return f"{self.service_type} - {self.date}"


class ScriptureReading(TimeStampedModel):
    ROLE_CHOICES = [
        ("introduction", "Introduccion"),
        ("closing", "Finalizacion"),
    ]
    service = models.ForeignKey(Service, on_delete=models.CASCADE, related_name="readings")
    role = models.CharField(max_length=20, choices=ROLE_CHOICES)
    book = models.CharField(max_length=60)
    start_chapter = models.PositiveSmallIntegerField()
    start_verse = models.PositiveSmallIntegerField()
    end_chapter = models.PositiveSmallIntegerField()
    end_verse = models.PositiveSmallIntegerField()
    reader = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="readings")
    is_repeat = models.BooleanField(default=False)
    original_reading = models.ForeignKey(
        "self", on_delete=models.SET_NULL, null=True, blank=True, related_name="repeats"
    )

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(
                fields=["service", "role"],
                name="unique_reading_per_service_role",
            ),
            models.UniqueConstraint(
                fields=["book", "start_chapter", "start_verse", "end_chapter", "end_verse"],
                condition=Q(is_repeat=False),
                name="unique_original_citation",
            ),
        ]

    def __str__(self):
        return f"{self.citation} ({self.get_role_display()})"

    @property
    def citation(self):
        from core.services.readings import citation_label

        return citation_label(self.book, self.start_chapter, self.start_verse, self.end_chapter, self.end_verse)


class Hymn(models.Model):
    number = models.PositiveIntegerField(unique=True)
    title = models.CharField(max_length=200)
    duration_seconds = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["number"]

    def __str__(self):
        return f"{self.number}. {self.title}"


class Chorus(models.Model):
    number = models.PositiveIntegerField(unique=True)
    title = models.CharField(max_length=200)
    duration_seconds = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["number"]
        verbose_name_plural = "choruses"

    def __str__(self):
        return f"{self.number}. {self.title}"


class ServicePlanEntry(TimeStampedModel):
    KIND_CHOICES = [
        ("hymn", "Himno"),
        ("chorus", "Coro"),
    ]
    service = models.ForeignKey(Service, on_delete=models.CASCADE, related_name="plan_entries")
    kind = models.CharField(max_length=10, choices=KIND_CHOICES)
    hymn = models.ForeignKey(Hymn, on_delete=models.CASCADE, null=True, blank=True)
    chorus = models.ForeignKey(Chorus, on_delete=models.CASCADE, null=True, blank=True)
    order = models.PositiveSmallIntegerField(default=1)

    class Meta:
        ordering = ["order", "id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(kind="hymn", hymn__isnull=False, chorus__isnull=True)
                | Q(kind="chorus", chorus__isnull=False, hymn__isnull=True),
                name="plan_entry_matches_kind",
            )
        ]

    @property
    def item(self):
        return self.hymn if self.kind == "hymn" else self.chorus


class BibleChapter(models.Model):
    TESTAMENT_CHOICES = [
        ("AT", "Antiguo Testamento"),
        ("NT", "Nuevo Testamento"),
    ]
    book = models.CharField(max_length=60)
    testament = models.CharField(max_length=2, choices=TESTAMENT_CHOICES)
    abbreviation = models.CharField(max_length=10, blank=True)
    book_order = models.PositiveSmallIntegerField()
    chapter = models.PositiveSmallIntegerField()
    verse_count = models.PositiveSmallIntegerField()

    class Meta:
        ordering = ["book_order", "chapter"]
        unique_together = ("book", "chapter")

    def __str__(self):
        return f"{self.book} {self.chapter}"


class AuditEvent(models.Model):
    actor_user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    entity_type = models.CharField(max_length=100)
    entity_id = models.CharField(max_length=100)
    action_type = models.CharField(max_length=50)
    description = models.CharField(max_length=255, blank=True)
    service = models.ForeignKey(Service, on_delete=models.SET_NULL, null=True, blank=True, related_name="audit_events")
    diff_json = models.JSONField(default=dict, blank=True)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-timestamp", "-id"]
        indexes = [
            models.Index(fields=["entity_type", "entity_id"], name="core_audite_entity__idx"),
            models.Index(fields=["action_type", "timestamp"], name="core_audite_action__idx"),
        ]
