import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("events", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Patient",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("patient_number", models.CharField(blank=True, max_length=32, null=True, unique=True)),
                ("first_name", models.CharField(max_length=100)),
                ("last_name", models.CharField(max_length=100)),
                ("date_of_birth", models.DateField(blank=True, null=True)),
                (
                    "gender",
                    models.CharField(
                        blank=True,
                        choices=[("female", "Female"), ("male", "Male"), ("other", "Other")],
                        default="",
                        max_length=16,
                    ),
                ),
                ("phone", models.CharField(blank=True, default="", max_length=32)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("parish", models.CharField(blank=True, default="", max_length=100)),
                ("town", models.CharField(blank=True, default="", max_length=100)),
                ("emergency_contact_name", models.CharField(blank=True, default="", max_length=200)),
                ("emergency_contact_phone", models.CharField(blank=True, default="", max_length=32)),
                ("medical_conditions", models.TextField(blank=True, default="")),
                ("allergies", models.TextField(blank=True, default="")),
                ("medications", models.TextField(blank=True, default="")),
                ("insurance_provider", models.CharField(blank=True, default="", max_length=200)),
                ("insurance_number", models.CharField(blank=True, default="", max_length=100)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["last_name", "first_name", "id"],
                "indexes": [
                    models.Index(fields=["last_name", "first_name"], name="patients_pa_last_na_5e1c0b_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PatientVisit",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("queue_number", models.PositiveIntegerField()),
                (
                    "status",
                    models.CharField(
                        choices=[("checked_in", "checked_in"), ("completed", "completed")],
                        default="checked_in",
                        max_length=32,
                    ),
                ),
                ("visit_date", models.DateField(auto_now_add=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="visits",
                        to="events.event",
                    ),
                ),
                (
                    "patient",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="visits",
                        to="patients.patient",
                    ),
                ),
            ],
            options={
                "ordering": ["event_id", "queue_number"],
                "constraints": [
                    models.UniqueConstraint(fields=("patient", "event"), name="uniq_visit_patient_event"),
                    models.UniqueConstraint(fields=("event", "queue_number"), name="uniq_visit_event_queue_number"),
                ],
            },
        ),
    ]
