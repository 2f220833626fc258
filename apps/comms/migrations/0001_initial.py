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
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("notification_type", models.CharField(choices=[("GOAL_PLAN_SUBMITTED", "Goal plan submitted"), ("GOAL_PLAN_HR_REVIEW", "Goal plan awaiting HR"), ("GOAL_PLAN_DECIDED", "Goal plan decided"), ("GOAL_SCORING_SUBMITTED", "Goal scoring submitted"), ("GOAL_SCORING_DECIDED", "Goal scoring decided"), ("GOAL_REMINDER", "Goal reminder"), ("SYSTEM", "System")], db_index=True, max_length=32)),
                ("payload", models.JSONField(default=dict)),
                ("dedupe_key", models.CharField(blank=True, db_index=True, max_length=128)),
                ("read_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="notifications", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
