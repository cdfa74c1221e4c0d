import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("events", "0001_initial"),
        ("registrations", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Submission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("github_link", models.URLField(blank=True, max_length=500, null=True)),
                ("file_url", models.URLField(blank=True, max_length=500, null=True)),
                ("rating", models.IntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)])),
                ("is_selected_for_next_round", models.BooleanField(default=False)),
                ("result_published", models.BooleanField(default=False)),
                ("evaluation_notes", models.TextField(blank=True, null=True)),
                ("submitted_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("event", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="submissions", to="events.event")),
                ("registration", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="submission", to="registrations.registration")),
            ],
            options={
                "ordering": ["submitted_at"],
            },
        ),
    ]
