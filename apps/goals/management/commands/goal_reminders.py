# apps/goals/management/commands/goal_reminders.py
import calendar

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from django.utils.dateparse import parse_date

from apps.comms.models import Notification
from apps.comms.services import notify
from apps.goals.items import GoalItem
from apps.goals.models import GoalPlan, month_start
from apps.goals.workflow import GoalPlanStatus
from core.json_payloads import NOTIFICATION_TEMPLATES

User = get_user_model()

FIRST_WEEK_LAST_DAY = 7
KIND_CREATE_PLAN = "create_plan"
KIND_SUBMIT_ACTUALS = "submit_actuals"


def reminder_payload(kind, month, message):
    tpl = NOTIFICATION_TEMPLATES["GOAL_REMINDER"]
    payload = {k: v for k, v in tpl.items() if k != "data"}
    payload["message"] = message
    payload["data"] = {"month": month.isoformat(), "kind": kind}
    return payload


def users_without_plan(month):
    planned = GoalPlan.objects.for_month(month).values_list("profile__user_id", flat=True)
    return User.objects.filter(is_active=True).exclude(id__in=planned).order_by("id")


def plans_missing_actuals(month):
    qs = GoalPlan.objects.with_profile().for_month(month).filter(
        status=GoalPlanStatus.APPROVED, profile__user__is_active=True)
    for plan in qs:
        if any(not GoalItem.from_dict(i).has_actual for i in plan.items or ()):
            yield plan


class Command(BaseCommand):
    help = ("Monthly goal reminders: during days 1-7 ask employees without a plan to create one; "
            "on the last day of the month ask owners of approved plans to submit actuals.")

    def add_arguments(self, parser):
        parser.add_argument("--date", help="Run as if today were this date (YYYY-MM-DD)")

    def handle(self, *args, **options):
        today = timezone.localdate()
        if options.get("date"):
            today = parse_date(options["date"])
            if today is None:
                raise CommandError("--date must be YYYY-MM-DD")

        month = month_start(today)
        last_day = calendar.monthrange(today.year, today.month)[1]
        first_week = today.day <= FIRST_WEEK_LAST_DAY
        is_last_day = today.day == last_day

        if not first_week and not is_last_day:
            self.stdout.write(f"{today}: outside the reminder window (days 1-{FIRST_WEEK_LAST_DAY} or {last_day}).")
            return

        sent = 0
        if first_week:
            message = (f"You haven't created your goal plan for {month:%Y-%m} yet. "
                       f"Please submit your targets by the {FIRST_WEEK_LAST_DAY}th.")
            for user in users_without_plan(month):
                if self._remind(user, KIND_CREATE_PLAN, month, today, message):
                    sent += 1
            self.stdout.write(f"- create-plan reminders for {month:%Y-%m}: {sent}")

        if is_last_day:
            count = 0
            message = (f"Your goal plan for {month:%Y-%m} is approved but some actuals are missing. "
                       f"Please submit them today.")
            for plan in plans_missing_actuals(month):
                if self._remind(plan.profile.user, KIND_SUBMIT_ACTUALS, month, today, message):
                    count += 1
            self.stdout.write(f"- actuals reminders for {month:%Y-%m}: {count}")
            sent += count

        self.stdout.write(self.style.SUCCESS(f"Done: {sent} reminders sent for {today}."))

    def _remind(self, user, kind, month, today, message):
        key = f"goal_reminder:{kind}:{today.isoformat()}"
        return notify(user, Notification.NotificationType.GOAL_REMINDER,
                      reminder_payload(kind, month, message), dedupe_key=key) is not None
