# In-app notifications
from django.db import models


class Notification(models.Model):
    """Inbox entry of a user; payload follows core.json_payloads.NOTIFICATION_SCHEMA"""
    class NotificationType(models.TextChoices):
        GOAL_PLAN_SUBMITTED = 'GOAL_PLAN_SUBMITTED', 'Goal plan submitted'
        GOAL_PLAN_HR_REVIEW = 'GOAL_PLAN_HR_REVIEW', 'Goal plan awaiting HR'
        GOAL_PLAN_DECIDED = 'GOAL_PLAN_DECIDED', 'Goal plan decided'
        GOAL_SCORING_SUBMITTED = 'GOAL_SCORING_SUBMITTED', 'Goal scoring submitted'
        GOAL_SCORING_DECIDED = 'GOAL_SCORING_DECIDED', 'Goal scoring decided'
        GOAL_REMINDER = 'GOAL_REMINDER', 'Goal reminder'
        SYSTEM = 'SYSTEM', 'System'

    user = models.ForeignKey('users.CustomUser', on_delete=models.CASCADE, related_name='notifications')
    notification_type = models.CharField(max_length=32, choices=NotificationType.choices, db_index=True)
    payload = models.JSONField(default=dict)
    # set by senders that must not repeat themselves (reminders)
    dedupe_key = models.CharField(max_length=128, blank=True, db_index=True)
    read_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.get_notification_type_display()} → {self.user}"
