import logging

from django.contrib.auth import get_user_model
from django.dispatch import receiver
from django_fsm.signals import post_transition

from apps.comms.models import Notification
from apps.comms.services import notify, notify_many
from core.json_payloads import NOTIFICATION_TEMPLATES
from .models import GoalPlan
from .workflow import Action, GoalPlanStatus

logger = logging.getLogger(__name__)
User = get_user_model()

T = Notification.NotificationType


def owner_name(plan) -> str:
    profile = plan.profile
    return profile.full_name or getattr(profile.user, "email", "") or "Unknown employee"


def build_payload(kind, plan, **data):
    """Fill the notification template of ``kind`` for ``plan``"""
    tpl = NOTIFICATION_TEMPLATES[kind]
    payload = {k: v for k, v in tpl.items() if k != "data"}
    payload["link"] = tpl["link"].format(goal_plan_id=plan.pk)
    payload["data"] = {"goal_plan_id": plan.pk, "month": plan.month.isoformat(), "status": str(plan.status), **data}
    return payload


def _manager_user(plan):
    manager = plan.profile.manager
    return manager.user if manager else None


def _hr_users():
    return User.objects.filter(is_active=True, role__in=(User.UserRole.HR, User.UserRole.ADMIN))


@receiver(post_transition, sender=GoalPlan)
def notify_on_transition(sender, instance, name, source, target, **kwargs):
    plan = instance
    if name == Action.SAVE_DRAFT:
        return
    employee = owner_name(plan)

    if name in (Action.SUBMIT, Action.REQUEST_EDIT):
        manager = _manager_user(plan)
        if manager is None:
            logger.debug("goal plan %s: owner has no manager, nobody to notify", plan.pk)
            return
        notify(manager, T.GOAL_PLAN_SUBMITTED,
               build_payload(T.GOAL_PLAN_SUBMITTED, plan, employee=employee, is_edit=name == Action.REQUEST_EDIT))
        return

    if name == Action.SUBMIT_ACTUALS:
        manager = _manager_user(plan)
        if manager is not None:
            notify(manager, T.GOAL_SCORING_SUBMITTED, build_payload(T.GOAL_SCORING_SUBMITTED, plan, employee=employee))
        return

    decision = "approved" if name == Action.APPROVE else "rejected"
    # the HR step has its own queue; the owner hears about the final outcome
    if target == GoalPlanStatus.PENDING_HR_APPROVAL:
        hr = _hr_users().exclude(pk=plan.profile.user_id)
        sent = notify_many(hr, T.GOAL_PLAN_HR_REVIEW, build_payload(T.GOAL_PLAN_HR_REVIEW, plan, employee=employee))
        logger.debug("goal plan %s: %d HR users notified", plan.pk, len(sent))
        return

    owner = plan.profile.user
    notes = plan.reviewer_notes or ""
    if source == GoalPlanStatus.PENDING_SCORE_APPROVAL:
        notify(owner, T.GOAL_SCORING_DECIDED,
               build_payload(T.GOAL_SCORING_DECIDED, plan, decision=decision, notes=notes))
    else:
        notify(owner, T.GOAL_PLAN_DECIDED,
               build_payload(T.GOAL_PLAN_DECIDED, plan, decision=decision, notes=notes,
                             is_edit=source == GoalPlanStatus.PENDING_EDIT_APPROVAL))
