import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from apps.goals.models import GoalPlan
from apps.goals.workflow import resolve_actor
from .factories import MONTH, goal_item

User = get_user_model()


@pytest.fixture
def make_user(db):
    def _make(email, role=User.UserRole.EMPLOYEE, manager=None, full_name="", department="", **extra):
        user = User.objects.create_user(email=email, password="pass12345", role=role, **extra)
        profile = user.profile
        profile.full_name = full_name
        profile.department = department
        profile.manager = manager.profile if manager else None
        profile.save()
        return user
    return _make


@pytest.fixture
def manager(make_user):
    return make_user("manager@example.com", role=User.UserRole.MANAGER, full_name="Maria Manager",
                     department="Sales")


@pytest.fixture
def employee(make_user, manager):
    return make_user("employee@example.com", manager=manager, full_name="Eli Employee", department="Sales")


@pytest.fixture
def hr(make_user):
    return make_user("hr@example.com", role=User.UserRole.HR, full_name="Hana HR", department="People")


@pytest.fixture
def outsider(make_user):
    return make_user("outsider@example.com", full_name="Otto Outsider", department="Ops")


@pytest.fixture
def make_plan(db):
    def _make(profile, status="draft", items=None, month=MONTH, **fields):
        if items is None:
            items = [goal_item(60, id="a"), goal_item(40, id="b", client="Globex")]
        return GoalPlan.objects.create(profile=profile, month=month, status=status, items=items, **fields)
    return _make


@pytest.fixture
def actor_for():
    def _actor(user, plan):
        return resolve_actor(user, plan)
    return _actor


@pytest.fixture
def client_for():
    def _client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return _client
