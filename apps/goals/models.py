# Monthly goal plans
import datetime

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.dateparse import parse_date
from django_fsm import FSMField, GET_STATE, transition

from . import workflow
from .workflow import Action, GoalPlanStatus
from .weightage import total_weightage


def month_start(value) -> datetime.date:
    """First day of the month of a date, datetime, "YYYY-MM" or "YYYY-MM-DD"."""
    if isinstance(value, datetime.datetime):
        value = value.date()
    if isinstance(value, str):
        raw = value.strip()
        parsed = parse_date(raw if len(raw) > 7 else f"{raw}-01")
        if parsed is None:
            raise ValueError(f"Invalid month: {value!r}")
        value = parsed
    if not isinstance(value, datetime.date):
        raise ValueError(f"Invalid month: {value!r}")
    return value.replace(day=1)


def fsm_transition(field, action):
    """@transition for ``action`` with sources and targets taken from the workflow table"""
    return transition(
        field=field,
        source=workflow.sources_for(action),
        target=GET_STATE(workflow.next_status(action), states=workflow.targets_for(action)),
        permission=workflow.permission_for(action),
    )


class GoalPlanQuerySet(models.QuerySet):
    def with_profile(self):
        return self.select_related("profile", "profile__user", "reviewed_by")

    def owned_by(self, profile):
        return self.filter(profile=profile)

    def for_month(self, month):
        return self.filter(month=month_start(month))

    def pending_for_manager(self, manager_profile):
        return (self.filter(profile__manager=manager_profile, status__in=workflow.MANAGER_QUEUE)
                .order_by("-updated_at"))

    def pending_for_hr(self):
        return self.filter(status__in=workflow.HR_QUEUE).order_by("-updated_at")

    def visible_to(self, user):
        """HR/admin see everything; others their own plans and their direct reports' plans"""
        if getattr(user, "is_hr_or_admin", False):
            return self
        return self.filter(models.Q(profile__user=user) | models.Q(profile__manager__user=user))


class GoalPlanManager(models.Manager.from_queryset(GoalPlanQuerySet)):
    pass


class GoalPlan(models.Model):
    """Goals of one employee for one month, moved through the approval workflow"""
    profile = models.ForeignKey('users.EmployeeProfile', on_delete=models.CASCADE, related_name='goal_plans')
    month = models.DateField(db_index=True)
    items = models.JSONField(default=list, blank=True)
    # edit of an approved plan; items stay authoritative until it is approved
    proposed_items = models.JSONField(null=True, blank=True)
    status = FSMField(default=GoalPlanStatus.DRAFT, choices=GoalPlanStatus.choices, db_index=True)
    reviewer_notes = models.TextField(null=True, blank=True)
    reviewed_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                                    related_name='reviewed_goal_plans')
    reviewed_at = models.DateTimeField(null=True, blank=True)
    revision = models.PositiveIntegerField(default=1)
    history = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = GoalPlanManager()

    class Meta:
        ordering = ['-month']
        constraints = [
            models.UniqueConstraint(fields=['profile', 'month'], name='goals_one_plan_per_month'),
        ]

    def __str__(self):
        owner = self.profile.full_name or self.profile.user.email
        return f"{owner} {self.month:%Y-%m} [{self.status}]"

    def save(self, *args, **kwargs):
        if self.month:
            self.month = month_start(self.month)
        super().save(*args, **kwargs)

    @property
    def total_weightage(self) -> int:
        return total_weightage(self.items)

    @property
    def is_terminal(self) -> bool:
        return self.status in workflow.TERMINAL_STATES

    # ---- transitions ----
    @fsm_transition(status, Action.SAVE_DRAFT)
    def save_draft(self, by_user, items=None):
        if items is not None:
            self.items = items
        self._log(by_user, Action.SAVE_DRAFT)

    @fsm_transition(status, Action.SUBMIT)
    def submit(self, by_user, items=None):
        if items is not None:
            self.items = items
        self.reviewer_notes = None
        self._log(by_user, Action.SUBMIT)

    @fsm_transition(status, Action.APPROVE)
    def approve(self, by_user, items=None, notes=None):
        if self.status == GoalPlanStatus.PENDING_EDIT_APPROVAL:
            if items is None:
                items = self.proposed_items if self.proposed_items is not None else self.items
            self.items = items
            self.proposed_items = None
        elif self.status == GoalPlanStatus.PENDING_APPROVAL and items is not None:
            self.items = items
        self._review(by_user, notes)
        self._log(by_user, Action.APPROVE, notes)

    @fsm_transition(status, Action.REJECT)
    def reject(self, by_user, notes=None):
        if self.status == GoalPlanStatus.PENDING_EDIT_APPROVAL:
            self.proposed_items = None
        self._review(by_user, notes)
        self._log(by_user, Action.REJECT, notes)

    @fsm_transition(status, Action.REQUEST_EDIT)
    def request_edit(self, by_user, items):
        self.proposed_items = items
        self._log(by_user, Action.REQUEST_EDIT)

    @fsm_transition(status, Action.SUBMIT_ACTUALS)
    def submit_actuals(self, by_user, items):
        self.items = items
        self._log(by_user, Action.SUBMIT_ACTUALS)

    def _review(self, by_user, notes):
        self.reviewer_notes = notes or None
        self.reviewed_by = by_user
        self.reviewed_at = timezone.now()

    def _log(self, by_user, action, notes=None):
        # runs before django-fsm moves the status
        target = workflow.lookup(self.status, action).target
        self.history.append({
            'actor': getattr(by_user, 'email', ''),
            'action': str(action),
            'from': str(self.status),
            'to': str(target),
            'at': timezone.now().isoformat(),
            'notes': notes or '',
        })
