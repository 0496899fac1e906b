import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ServiceType",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=100, unique=True)),
                ("description", models.TextField(blank=True)),
                ("color", models.CharField(default="#3b82f6", max_length=20)),
                ("order", models.PositiveSmallIntegerField(default=0)),
                ("has_intro_reading", models.BooleanField(default=True)),
                ("has_closing_reading", models.BooleanField(default=True)),
                ("has_teaching", models.BooleanField(default=False)),
                ("has_testimonies", models.BooleanField(default=False)),
                ("has_hymns_and_choruses", models.BooleanField(default=True)),
            ],
            options={
                "ordering": ["order", "name"],
            },
        ),
        migrations.CreateModel(
            name="Holiday",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("date", models.DateField(unique=True)),
                (
                    "kind",
                    models.CharField(
                        choices=[
                            ("national", "Nacional"),
                            ("regional", "Autonomico"),
                            ("local", "Local"),
                            ("working_holiday", "Laborable festivo"),
                        ],
                        max_length=20,
                    ),
                ),
                ("description", models.CharField(blank=True, max_length=200)),
            ],
            options={
                "ordering": ["date"],
            },
        ),
        migrations.CreateModel(
            name="Hymn",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("number", models.PositiveIntegerField(unique=True)),
                ("title", models.CharField(max_length=200)),
                ("duration_seconds", models.PositiveIntegerField(default=0)),
            ],
            options={
                "ordering": ["number"],
            },
        ),
        migrations.CreateModel(
            name="Chorus",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("number", models.PositiveIntegerField(unique=True)),
                ("title", models.CharField(max_length=200)),
                ("duration_seconds", models.PositiveIntegerField(default=0)),
            ],
            options={
                "ordering": ["number"],
                "verbose_name_plural": "choruses",
            },
        ),
        migrations.CreateModel(
            name="BibleChapter",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("book", models.CharField(max_length=60)),
                (
                    "testament",
                    models.CharField(
                        choices=[("AT", "Antiguo Testamento"), ("NT", "Nuevo Testamento")],
                        max_length=2,
                    ),
                ),
                ("abbreviation", models.CharField(blank=True, max_length=10)),
                ("book_order", models.PositiveSmallIntegerField()),
                ("chapter", models.PositiveSmallIntegerField()),
                ("verse_count", models.PositiveSmallIntegerField()),
            ],
            options={
                "ordering": ["book_order", "chapter"],
                "unique_together": {("book", "chapter")},
            },
        ),
        migrations.CreateModel(
            name="ServiceTemplate",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "weekday",
                    models.PositiveSmallIntegerField(
                        choices=[
                            (0, "Lun"),
                            (1, "Mar"),
                            (2, "Mie"),
                            (3, "Jue"),
                            (4, "Vie"),
                            (5, "Sab"),
                            (6, "Dom"),
                        ]
                    ),
                ),
                ("default_time", models.TimeField()),
                ("affected_by_working_holiday", models.BooleanField(default=True)),
                ("active", models.BooleanField(default=True)),
                (
                    "service_type",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="templates",
                        to="core.servicetype",
                    ),
                ),
            ],
            options={
                "ordering": ["weekday", "default_time"],
                "unique_together": {("weekday", "service_type")},
            },
        ),
        migrations.CreateModel(
            name="Service",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("date", models.DateField()),
                ("start_time", models.TimeField()),
                ("end_time", models.TimeField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("planned", "Planeado"), ("done", "Realizado"), ("cancelled", "Cancelado")],
                        default="planned",
                        max_length=20,
                    ),
                ),
                ("is_holiday", models.BooleanField(default=False)),
                ("is_holiday_adjusted", models.BooleanField(default=False)),
                (
                    "service_type",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="services",
                        to="core.servicetype",
                    ),
                ),
                (
                    "intro_reader",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="intro_services",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "closing_reader",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="closing_services",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "teaching_leader",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="teaching_services",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "testimonies_leader",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="testimonies_services",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="services_created",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["date", "start_time"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("date", "service_type"),
                        name="unique_service_per_type_and_date",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="ScriptureReading",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "role",
                    models.CharField(
                        choices=[("introduction", "Introduccion"), ("closing", "Finalizacion")],
                        max_length=20,
                    ),
                ),
                ("book", models.CharField(max_length=60)),
                ("start_chapter", models.PositiveSmallIntegerField()),
                ("start_verse", models.PositiveSmallIntegerField()),
                ("end_chapter", models.PositiveSmallIntegerField()),
                ("end_verse", models.PositiveSmallIntegerField()),
                ("is_repeat", models.BooleanField(default=False)),
                (
                    "original_reading",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="repeats",
                        to="core.scripturereading",
                    ),
                ),
                (
                    "reader",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="readings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "service",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="readings",
                        to="core.service",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("service", "role"),
                        name="unique_reading_per_service_role",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("is_repeat", False)),
                        fields=("book", "start_chapter", "start_verse", "end_chapter", "end_verse"),
                        name="unique_original_citation",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ServicePlanEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("kind", models.CharField(choices=[("hymn", "Himno"), ("chorus", "Coro")], max_length=10)),
                ("order", models.PositiveSmallIntegerField(default=1)),
                (
                    "chorus",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        to="core.chorus",
                    ),
                ),
                (
                    "hymn",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        to="core.hymn",
                    ),
                ),
                (
                    "service",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="plan_entries",
                        to="core.service",
                    ),
                ),
            ],
            options={
                "ordering": ["order", "id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("chorus__isnull", True), ("hymn__isnull", False), ("kind", "hymn")),
                            models.Q(("chorus__isnull", False), ("hymn__isnull", True), ("kind", "chorus")),
                            _connector="OR",
                        ),
                        name="plan_entry_matches_kind",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="AuditEvent",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("entity_type", models.CharField(max_length=100)),
                ("entity_id", models.CharField(max_length=100)),
                ("action_type", models.CharField(max_length=50)),
                ("description", models.CharField(blank=True, max_length=255)),
                ("diff_json", models.JSONField(blank=True, default=dict)),
                ("timestamp", models.DateTimeField(auto_now_add=True)),
                (
                    "actor_user",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "service",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="audit_events",
                        to="core.service",
                    ),
                ),
            ],
            options={
                "ordering": ["-timestamp", "-id"],
                "indexes": [
                    models.Index(fields=["entity_type", "entity_id"], name="core_audite_entity__idx"),
                    models.Index(fields=["action_type", "timestamp"], name="core_audite_action__idx"),
                ],
            },
        ),
    ]
