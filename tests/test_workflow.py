import pytest

from apps.goals import workflow
from apps.goals.workflow import Action, Actor, GoalPlanStatus as S


def test_every_status_but_completed_has_a_way_out():
    assert workflow.TERMINAL_STATES == {S.COMPLETED}
    for status in S.values:
        outgoing = [t for t in workflow.TRANSITIONS.values() if t.source == status]
        assert bool(outgoing) == (status != S.COMPLETED)


def test_targets_are_known_statuses():
    for t in workflow.TRANSITIONS.values():
        assert t.target is None or t.target in S.values
        assert t.capability in (workflow.OWNER, workflow.MANAGER, workflow.HR)


def test_only_draft_and_rejected_are_deletable():
    assert set(workflow.DELETABLE_STATES) == {S.DRAFT, S.REJECTED}


def test_queues():
    assert set(workflow.MANAGER_QUEUE) == {S.PENDING_APPROVAL, S.PENDING_EDIT_APPROVAL, S.PENDING_SCORE_APPROVAL}
    assert workflow.HR_QUEUE == (S.PENDING_HR_APPROVAL,)


@pytest.mark.parametrize("source, action, target", [
    (S.DRAFT, Action.SUBMIT, S.PENDING_APPROVAL),
    (S.REJECTED, Action.SUBMIT, S.PENDING_APPROVAL),
    (S.PENDING_APPROVAL, Action.APPROVE, S.PENDING_HR_APPROVAL),
    (S.PENDING_HR_APPROVAL, Action.APPROVE, S.APPROVED),
    (S.PENDING_EDIT_APPROVAL, Action.APPROVE, S.PENDING_HR_APPROVAL),
    (S.PENDING_EDIT_APPROVAL, Action.REJECT, S.APPROVED),
    (S.PENDING_SCORE_APPROVAL, Action.APPROVE, S.COMPLETED),
    (S.PENDING_SCORE_APPROVAL, Action.REJECT, S.APPROVED),
])
def test_lookup(source, action, target):
    assert workflow.lookup(source, action).target == target


def test_unknown_pairs_have_no_transition():
    assert workflow.lookup(S.DRAFT, Action.SUBMIT_ACTUALS) is None
    assert workflow.lookup(S.COMPLETED, Action.APPROVE) is None
    assert workflow.lookup(S.PENDING_APPROVAL, Action.DELETE) is None


class FakePlan:
    def __init__(self, status):
        self.status = status


def test_available_actions_follow_capabilities():
    owner = Actor(user=None, owns_plan=True)
    manager = Actor(user=None, manages_owner=True)
    hr = Actor(user=None, manages_owner=True, is_hr=True)

    assert workflow.available_actions(FakePlan(S.DRAFT), owner) == [Action.SAVE_DRAFT, Action.SUBMIT, Action.DELETE]
    assert workflow.available_actions(FakePlan(S.DRAFT), manager) == []
    assert workflow.available_actions(FakePlan(S.PENDING_APPROVAL), manager) == [Action.APPROVE, Action.REJECT]
    assert workflow.available_actions(FakePlan(S.PENDING_HR_APPROVAL), manager) == []
    assert workflow.available_actions(FakePlan(S.PENDING_HR_APPROVAL), hr) == [Action.APPROVE, Action.REJECT]
    assert workflow.available_actions(FakePlan(S.APPROVED), owner) == [Action.REQUEST_EDIT, Action.SUBMIT_ACTUALS]
    assert workflow.available_actions(FakePlan(S.COMPLETED), hr) == []


def test_editable_fields():
    owner = Actor(user=None, owns_plan=True)
    assert workflow.editable_fields(FakePlan(S.DRAFT), owner) == [workflow.EDITS_ITEMS]
    assert workflow.editable_fields(FakePlan(S.APPROVED), owner) == [workflow.EDITS_PROPOSED, workflow.EDITS_ACTUALS]
    assert workflow.editable_fields(FakePlan(S.PENDING_APPROVAL), owner) == []


def test_resolve_actor_owner(employee, make_plan):
    plan = make_plan(employee.profile)
    actor = workflow.resolve_actor(employee, plan)
    assert actor.capabilities == {workflow.OWNER}


def test_resolve_actor_manager(employee, manager, make_plan):
    actor = workflow.resolve_actor(manager, make_plan(employee.profile))
    assert actor.manages_owner and not actor.owns_plan and not actor.is_hr


def test_resolve_actor_hr_acts_as_manager(employee, hr, make_plan):
    actor = workflow.resolve_actor(hr, make_plan(employee.profile))
    assert actor.capabilities == {workflow.MANAGER, workflow.HR}


def test_resolve_actor_unrelated_user(employee, outsider, make_plan):
    assert workflow.resolve_actor(outsider, make_plan(employee.profile)).capabilities == frozenset()


def test_nobody_reviews_their_own_plan(hr, make_plan):
    actor = workflow.resolve_actor(hr, make_plan(hr.profile))
    assert actor.capabilities == {workflow.OWNER}
