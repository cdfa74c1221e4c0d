import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=200)),
                ("organizer", models.CharField(max_length=100)),
                ("location", models.CharField(max_length=300)),
                ("event_type", models.CharField(default="Hackathon", max_length=100)),
                ("event_date", models.DateTimeField()),
                ("registration_deadline", models.DateTimeField()),
                ("team_size_min", models.IntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)], verbose_name="minimum team size")),
                ("team_size_max", models.IntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)], verbose_name="maximum team size")),
                ("total_slots", models.IntegerField(default=100, validators=[django.core.validators.MinValueValidator(1)])),
                ("registered_count", models.IntegerField(default=0)),
                ("registration_fee", models.IntegerField(default=0, validators=[django.core.validators.MinValueValidator(0)])),
                ("prize_money", models.IntegerField(blank=True, null=True)),
                ("poster_url", models.URLField(blank=True, max_length=500, null=True)),
                ("description", models.TextField()),
                ("eligibility", models.TextField(default="Everyone can apply")),
                ("stages", models.TextField(blank=True, null=True)),
                ("details", models.TextField(blank=True, null=True)),
                ("dates_deadlines", models.TextField(blank=True, null=True)),
                ("prizes", models.TextField(blank=True, null=True)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("custom_sections", models.JSONField(blank=True, default=list)),
                ("submission_type", models.CharField(choices=[("none", "No submission"), ("github_link", "GitHub link"), ("zip_file", "Zip file"), ("both", "GitHub link and zip file")], default="none", max_length=20)),
                ("approval_status", models.CharField(choices=[("pending", "Pending"), ("approved", "Approved"), ("rejected", "Rejected")], default="pending", max_length=10)),
                ("rejection_reason", models.TextField(blank=True, null=True)),
                ("impressions", models.IntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("organizer_profile", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="events", to="accounts.organizer")),
            ],
            options={
                "ordering": ["event_date"],
                "indexes": [
                    models.Index(fields=["approval_status", "event_date"], name="event_status_date_idx"),
                    models.Index(fields=["-created_at"], name="event_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="RecentlyViewed",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("viewed_at", models.DateTimeField()),
                ("event", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="viewed_by", to="events.event")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="recently_viewed", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name_plural": "Recently viewed",
                "ordering": ["-viewed_at"],
                "unique_together": {("user", "event")},
            },
        ),
        migrations.CreateModel(
            name="Wishlist",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("event", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="wishlisted_by", to="events.event")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="wishlist", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
                "unique_together": {("user", "event")},
            },
        ),
    ]
