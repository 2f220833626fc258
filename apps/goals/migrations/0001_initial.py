import django.db.models.deletion
import django_fsm
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("users", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="GoalPlan",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("month", models.DateField(db_index=True)),
                ("items", models.JSONField(blank=True, default=list)),
                ("proposed_items", models.JSONField(blank=True, null=True)),
                ("status", django_fsm.FSMField(choices=[("draft", "Draft"), ("pending_approval", "Pending manager approval"), ("pending_hr_approval", "Pending HR approval"), ("approved", "Approved"), ("rejected", "Rejected"), ("pending_edit_approval", "Edit pending approval"), ("pending_score_approval", "Scoring pending approval"), ("completed", "Completed")], db_index=True, default="draft", max_length=50)),
                ("reviewer_notes", models.TextField(blank=True, null=True)),
                ("reviewed_at", models.DateTimeField(blank=True, null=True)),
                ("revision", models.PositiveIntegerField(default=1)),
                ("history", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("profile", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="goal_plans", to="users.employeeprofile")),
                ("reviewed_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="reviewed_goal_plans", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-month"],
                "constraints": [models.UniqueConstraint(fields=("profile", "month"), name="goals_one_plan_per_month")],
            },
        ),
    ]
