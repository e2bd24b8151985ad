import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("exams", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Attempt",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("IN_PROGRESS", "In Progress"),
                            ("SUBMITTED", "Submitted"),
                            ("COMPLETED", "Completed"),
                            ("EVALUATED", "Evaluated"),
                        ],
                        default="IN_PROGRESS",
                        max_length=20,
                    ),
                ),
                ("start_time", models.DateTimeField()),
                ("submit_time", models.DateTimeField(blank=True, null=True)),
                ("end_time", models.DateTimeField(blank=True, null=True)),
                ("time_spent", models.PositiveIntegerField(default=0, help_text="Seconds")),
                ("max_score", models.DecimalField(decimal_places=4, editable=False, max_digits=10)),
                ("score", models.DecimalField(blank=True, decimal_places=4, max_digits=10, null=True)),
                ("percentage", models.DecimalField(blank=True, decimal_places=2, max_digits=7, null=True)),
                ("correct_answers", models.PositiveIntegerField(blank=True, null=True)),
                ("incorrect_answers", models.PositiveIntegerField(blank=True, null=True)),
                ("unattempted", models.PositiveIntegerField(blank=True, null=True)),
                ("accuracy", models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ("rank", models.PositiveIntegerField(blank=True, null=True)),
                ("answer_sheet_url", models.URLField(blank=True, max_length=500)),
                ("evaluation_status", models.CharField(blank=True, max_length=50)),
                ("feedback", models.JSONField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "evaluated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assigned_attempts",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "exam",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attempts",
                        to="exams.exam",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attempts",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("status", "IN_PROGRESS")),
                        fields=("user", "exam"),
                        name="one_in_progress_attempt_per_exam",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="Answer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("selected_option", models.CharField(blank=True, max_length=255, null=True)),
                ("answer_text", models.TextField(blank=True, null=True)),
                ("time_spent", models.PositiveIntegerField(default=0)),
                ("marks", models.DecimalField(blank=True, decimal_places=4, max_digits=10, null=True)),
                ("feedback", models.TextField(blank=True)),
                ("evaluated_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "attempt",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="answers",
                        to="assessments.attempt",
                    ),
                ),
                (
                    "evaluated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="evaluated_answers",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "question",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="answers",
                        to="exams.question",
                    ),
                ),
            ],
            options={
                "unique_together": {("attempt", "question")},
            },
        ),
    ]
