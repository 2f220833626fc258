"""
Goal plan operations. Every write runs in one transaction on a locked row
and bumps ``GoalPlan.revision``.
"""
import logging

from django.db import IntegrityError, transaction
from django_fsm import can_proceed, has_transition_perm

from . import workflow
from .exceptions import (
    AuthorizationError, InvalidTransitionError, PlanValidationError, StaleRevisionError,
)
from .items import (
    clear_actuals, merge_actuals, missing_actual_errors, normalize_items, required_field_errors,
    schema_errors,
)
from .models import GoalPlan, month_start
from .weightage import WEIGHTAGE_LIMIT, total_weightage
from .workflow import Action

logger = logging.getLogger(__name__)


# ---- reads ----
def get_plan(profile, month):
    return GoalPlan.objects.with_profile().owned_by(profile).for_month(month).first()


def list_plans(profile):
    return GoalPlan.objects.with_profile().owned_by(profile).order_by("-month")


# ---- validation ----
def clean_items(items) -> list:
    """Schema-checked, id-normalised copy of ``items``."""
    if items is None:
        items = []
    if not isinstance(items, (list, tuple)):
        raise PlanValidationError({"items": "Expected a list of goal items"})
    items = normalize_items(items)
    errors = schema_errors(items)
    if errors:
        raise PlanValidationError(errors, total=total_weightage(items))
    return items


def check_gate(items, *, require_actuals=False):
    """Weightage limit, required fields and (optionally) actuals; values are never clamped."""
    errors = required_field_errors(items)
    if require_actuals:
        errors.update(missing_actual_errors(items))
    total = total_weightage(items)
    if total > WEIGHTAGE_LIMIT:
        errors["weightage"] = f"Total weightage is {total}%, the limit is {WEIGHTAGE_LIMIT}%"
    if errors:
        raise PlanValidationError(errors, total=total)


# ---- writes ----
def create_plan(profile, month, items=None):
    """
    Draft plan for (profile, month). Returns (plan, created); an existing plan
    for the month is returned unchanged instead of a duplicate.
    """
    month = month_start(month)
    existing = get_plan(profile, month)
    if existing:
        return existing, False
    items = clear_actuals(clean_items(items))
    try:
        with transaction.atomic():
            plan = GoalPlan.objects.create(profile=profile, month=month, items=items)
    except IntegrityError:
        # lost a race with a concurrent create
        existing = get_plan(profile, month)
        if existing is None:
            raise
        return existing, False
    logger.info("goal plan %s created for profile %s, month %s", plan.pk, profile.pk, month)
    return plan, True


def update_status(plan, actor, action, items=None, notes=None, expected_revision=None):
    """
    Apply ``action`` to ``plan`` on behalf of ``actor``.

    Raises InvalidTransitionError, AuthorizationError, PlanValidationError or
    StaleRevisionError; nothing is written when any of them is raised.
    """
    action = Action(action)
    if action == Action.DELETE:
        delete_plan(plan, actor, expected_revision=expected_revision)
        return None

    with transaction.atomic():
        locked = GoalPlan.objects.select_for_update().get(pk=plan.pk)
        _check_revision(locked, expected_revision)
        step = _authorize(locked, actor, action)
        method = getattr(locked, action.value)

        kwargs = {}
        if step.edits == workflow.EDITS_ACTUALS:
            if items is None:
                raise PlanValidationError({"items": "Actuals are required"})
            merged = merge_actuals(locked.items, clean_items(items))
            check_gate(merged, require_actuals=True)
            kwargs["items"] = merged
        elif step.edits in (workflow.EDITS_ITEMS, workflow.EDITS_PROPOSED):
            if items is None and action == Action.REQUEST_EDIT:
                raise PlanValidationError({"items": "Proposed items are required"})
            if items is not None:
                # actuals are only taken at scoring
                kwargs["items"] = clear_actuals(clean_items(items))
            if step.gated:
                check_gate(kwargs.get("items", _content_of(locked, step)))
        elif items is not None:
            raise PlanValidationError({"items": "Items cannot be changed at this stage"})

        if action in (Action.APPROVE, Action.REJECT):
            kwargs["notes"] = notes

        if not can_proceed(method):
            raise InvalidTransitionError(locked.status, action.value)
        source = locked.status
        method(actor.user, **kwargs)
        locked.revision += 1
        locked.save()

    logger.info("goal plan %s: %s -> %s (%s by %s)",
                locked.pk, source, locked.status, action.value, getattr(actor.user, "pk", None))
    return locked


def delete_plan(plan, actor, expected_revision=None):
    with transaction.atomic():
        locked = GoalPlan.objects.select_for_update().get(pk=plan.pk)
        _check_revision(locked, expected_revision)
        _authorize(locked, actor, Action.DELETE)
        pk, status = locked.pk, locked.status
        locked.delete()
    logger.info("goal plan %s deleted from %s by %s", pk, status, getattr(actor.user, "pk", None))


# thin wrappers, one per action
def save_draft(plan, actor, items=None, **kwargs):
    return update_status(plan, actor, Action.SAVE_DRAFT, items=items, **kwargs)


def submit(plan, actor, items=None, **kwargs):
    return update_status(plan, actor, Action.SUBMIT, items=items, **kwargs)


def approve(plan, actor, items=None, notes=None, **kwargs):
    return update_status(plan, actor, Action.APPROVE, items=items, notes=notes, **kwargs)


def reject(plan, actor, notes=None, **kwargs):
    return update_status(plan, actor, Action.REJECT, notes=notes, **kwargs)


def request_edit(plan, actor, items, **kwargs):
    return update_status(plan, actor, Action.REQUEST_EDIT, items=items, **kwargs)


def submit_actuals(plan, actor, items, **kwargs):
    return update_status(plan, actor, Action.SUBMIT_ACTUALS, items=items, **kwargs)


# ---- helpers ----
def _check_revision(plan, expected_revision):
    if expected_revision is not None and int(expected_revision) != plan.revision:
        logger.warning("goal plan %s: stale revision %s (current %s)",
                       plan.pk, expected_revision, plan.revision)
        raise StaleRevisionError(expected_revision, plan.revision)


def _authorize(plan, actor, action):
    step = workflow.lookup(plan.status, action)
    if step is None:
        logger.warning("goal plan %s: %s not allowed from %s", plan.pk, action, plan.status)
        raise InvalidTransitionError(plan.status, str(action))
    allowed = actor.can(step.capability)
    if allowed and action != Action.DELETE:
        allowed = has_transition_perm(getattr(plan, str(action)), actor)
    if not allowed:
        logger.warning("goal plan %s: user %s may not %s (needs %s)",
                       plan.pk, getattr(actor.user, "pk", None), action, step.capability)
        raise AuthorizationError()
    return step


def _content_of(plan, step):
    if step.edits == workflow.EDITS_PROPOSED and plan.status == workflow.GoalPlanStatus.PENDING_EDIT_APPROVAL:
        return plan.proposed_items if plan.proposed_items is not None else plan.items
    return plan.items
