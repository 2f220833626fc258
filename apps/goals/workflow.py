"""
Goal plan state machine.

``TRANSITIONS`` is the only place where the lifecycle is described: the
django-fsm decorators on ``GoalPlan`` and the service layer both read it.
"""
from dataclasses import dataclass
from typing import Any, Optional

from django.db import models

from apps.users.models import EmployeeProfile


class GoalPlanStatus(models.TextChoices):
    DRAFT = 'draft', 'Draft'
    PENDING_APPROVAL = 'pending_approval', 'Pending manager approval'
    PENDING_HR_APPROVAL = 'pending_hr_approval', 'Pending HR approval'
    APPROVED = 'approved', 'Approved'
    REJECTED = 'rejected', 'Rejected'
    PENDING_EDIT_APPROVAL = 'pending_edit_approval', 'Edit pending approval'
    PENDING_SCORE_APPROVAL = 'pending_score_approval', 'Scoring pending approval'
    COMPLETED = 'completed', 'Completed'


class Action(models.TextChoices):
    SAVE_DRAFT = 'save_draft', 'Save draft'
    SUBMIT = 'submit', 'Submit for approval'
    APPROVE = 'approve', 'Approve'
    REJECT = 'reject', 'Reject'
    REQUEST_EDIT = 'request_edit', 'Request edit'
    SUBMIT_ACTUALS = 'submit_actuals', 'Submit actuals'
    DELETE = 'delete', 'Delete'


STATUS_DESCRIPTIONS = {
    GoalPlanStatus.DRAFT: "Being prepared by the employee; not yet submitted.",
    GoalPlanStatus.PENDING_APPROVAL: "Submitted; waiting for the manager to review the goals.",
    GoalPlanStatus.PENDING_HR_APPROVAL: "Approved by the manager; waiting for HR sign-off.",
    GoalPlanStatus.APPROVED: "Goals are agreed. Actuals can be submitted at month end.",
    GoalPlanStatus.REJECTED: "Sent back for changes. Edit and resubmit, or delete the plan.",
    GoalPlanStatus.PENDING_EDIT_APPROVAL: "A change to the approved goals is waiting for the manager.",
    GoalPlanStatus.PENDING_SCORE_APPROVAL: "Actuals submitted; waiting for the manager to approve the scoring.",
    GoalPlanStatus.COMPLETED: "Scoring approved. The plan is closed.",
}

# capabilities of an Actor
OWNER = 'owns_plan'
MANAGER = 'manages_owner'
HR = 'is_hr'

# what a transition may change on the plan
EDITS_NONE = ''
EDITS_ITEMS = 'items'
EDITS_PROPOSED = 'proposed_items'
EDITS_ACTUALS = 'actuals'


@dataclass(frozen=True)
class Transition:
    source: str
    action: str
    target: Optional[str]  # None: the row is removed
    capability: str
    edits: str = EDITS_NONE
    gated: bool = False  # weightage limit and required fields are checked


S, A = GoalPlanStatus, Action

_TABLE = (
    Transition(S.DRAFT, A.SAVE_DRAFT, S.DRAFT, OWNER, EDITS_ITEMS),
    Transition(S.REJECTED, A.SAVE_DRAFT, S.REJECTED, OWNER, EDITS_ITEMS),
    Transition(S.DRAFT, A.SUBMIT, S.PENDING_APPROVAL, OWNER, EDITS_ITEMS, gated=True),
    Transition(S.REJECTED, A.SUBMIT, S.PENDING_APPROVAL, OWNER, EDITS_ITEMS, gated=True),
    Transition(S.PENDING_APPROVAL, A.APPROVE, S.PENDING_HR_APPROVAL, MANAGER, EDITS_ITEMS, gated=True),
    Transition(S.PENDING_APPROVAL, A.REJECT, S.REJECTED, MANAGER),
    Transition(S.PENDING_HR_APPROVAL, A.APPROVE, S.APPROVED, HR),
    Transition(S.PENDING_HR_APPROVAL, A.REJECT, S.REJECTED, HR),
    Transition(S.APPROVED, A.REQUEST_EDIT, S.PENDING_EDIT_APPROVAL, OWNER, EDITS_PROPOSED, gated=True),
    Transition(S.PENDING_EDIT_APPROVAL, A.APPROVE, S.PENDING_HR_APPROVAL, MANAGER, EDITS_PROPOSED, gated=True),
    Transition(S.PENDING_EDIT_APPROVAL, A.REJECT, S.APPROVED, MANAGER),
    Transition(S.APPROVED, A.SUBMIT_ACTUALS, S.PENDING_SCORE_APPROVAL, OWNER, EDITS_ACTUALS, gated=True),
    Transition(S.PENDING_SCORE_APPROVAL, A.APPROVE, S.COMPLETED, MANAGER),
    Transition(S.PENDING_SCORE_APPROVAL, A.REJECT, S.APPROVED, MANAGER),
    Transition(S.DRAFT, A.DELETE, None, OWNER),
    Transition(S.REJECTED, A.DELETE, None, OWNER),
)

TRANSITIONS = {(t.source, t.action): t for t in _TABLE}

TERMINAL_STATES = frozenset(
    s for s in GoalPlanStatus.values if not any(t.source == s for t in _TABLE)
)
# statuses waiting on the owner's manager
MANAGER_QUEUE = tuple(sorted({t.source for t in _TABLE if t.capability == MANAGER}))
HR_QUEUE = tuple(sorted({t.source for t in _TABLE if t.capability == HR}))
DELETABLE_STATES = tuple(t.source for t in _TABLE if t.action == Action.DELETE)


def lookup(status, action) -> Optional[Transition]:
    return TRANSITIONS.get((status, action))


def sources_for(action) -> list:
    return [t.source for t in _TABLE if t.action == action]


def targets_for(action) -> list:
    return sorted({t.target for t in _TABLE if t.action == action and t.target})


def next_status(action):
    """django-fsm GET_STATE callback: target of ``action`` from the plan's current status."""
    def _target(plan, *args, **kwargs):
        return TRANSITIONS[(plan.status, action)].target
    return _target


def permission_for(action):
    """django-fsm permission callback; the "user" passed in is an Actor."""
    def _allowed(plan, actor):
        t = TRANSITIONS.get((plan.status, action))
        return bool(t and isinstance(actor, Actor) and actor.can(t.capability))
    return _allowed


@dataclass(frozen=True)
class Actor:
    """Capabilities of one user towards one plan, resolved once per request."""
    user: Any
    owns_plan: bool = False
    manages_owner: bool = False
    is_hr: bool = False

    def can(self, capability) -> bool:
        return bool(getattr(self, capability, False))

    @property
    def capabilities(self) -> frozenset:
        return frozenset(c for c in (OWNER, MANAGER, HR) if self.can(c))


def resolve_actor(user, plan) -> Actor:
    """
    owns_plan: the plan belongs to the user's profile.
    manages_owner: the user is the owner's manager, or HR/admin acting for one.
    is_hr: HR or admin role.
    Nobody reviews their own plan.
    """
    if user is None or not user.is_authenticated:
        return Actor(user=user)
    owner = plan.profile
    owns = owner.user_id == user.id
    hr = bool(getattr(user, "is_hr_or_admin", False))
    if owns:
        return Actor(user=user, owns_plan=True)
    me = EmployeeProfile.objects.filter(user=user).only("id").first()
    is_manager = bool(me and owner.manager_id == me.id)
    return Actor(user=user, owns_plan=False, manages_owner=is_manager or hr, is_hr=hr)


def available_actions(plan, actor) -> list:
    return [t.action for t in _TABLE if t.source == plan.status and actor.can(t.capability)]


def editable_fields(plan, actor) -> list:
    """What the actor may edit right now, any of: items, proposed_items, actuals."""
    edits = []
    for t in _TABLE:
        if t.source == plan.status and t.edits and actor.can(t.capability) and t.edits not in edits:
            edits.append(t.edits)
    return edits
