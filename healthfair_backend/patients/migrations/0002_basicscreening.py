import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("events", "0001_initial"),
        ("patients", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="BasicScreening",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("height", models.DecimalField(blank=True, decimal_places=1, max_digits=5, null=True)),
                ("weight", models.DecimalField(blank=True, decimal_places=1, max_digits=5, null=True)),
                ("bmi", models.DecimalField(blank=True, decimal_places=1, max_digits=6, null=True)),
                ("blood_pressure_systolic", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("blood_pressure_diastolic", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("heart_rate", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("temperature", models.DecimalField(blank=True, decimal_places=1, max_digits=4, null=True)),
                ("blood_sugar", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("cholesterol", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("oxygen_saturation", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "patient_visit",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="basic_screening",
                        to="patients.patientvisit",
                    ),
                ),
                (
                    "screened_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="screenings",
                        to="events.nurse",
                    ),
                ),
            ],
        ),
    ]
