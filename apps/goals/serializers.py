from rest_framework import serializers

from core.json_payloads import GOAL_ITEMS_SCHEMA
from core.validators import validate_json_payload
from .models import GoalPlan, month_start
from .weightage import WEIGHTAGE_LIMIT
from . import workflow

UNKNOWN_EMPLOYEE = "Unknown employee"
NO_DEPARTMENT = "—"


class GoalItemSerializer(serializers.Serializer):
    id = serializers.CharField(required=False, allow_blank=True, max_length=64)
    client = serializers.CharField(allow_blank=True, default="")
    bucket = serializers.CharField(allow_blank=True, default="")
    line_item = serializers.CharField(allow_blank=True, default="")
    weightage = serializers.IntegerField(min_value=0, max_value=WEIGHTAGE_LIMIT, default=0)
    target = serializers.CharField(allow_blank=True, default="")
    actual = serializers.CharField(allow_blank=True, allow_null=True, default=None)


class ItemsField(serializers.ListField):
    child = GoalItemSerializer()

    def to_internal_value(self, data):
        items = super().to_internal_value(data)
        validate_json_payload(GOAL_ITEMS_SCHEMA, [dict(i) for i in items], path="items")
        return [dict(i) for i in items]


def owner_placeholder(profile) -> dict:
    """Display data of the plan owner; never fails on missing profile data"""
    if profile is None:
        return {"profile_id": None, "full_name": UNKNOWN_EMPLOYEE, "department": NO_DEPARTMENT}
    user = getattr(profile, "user", None)
    return {
        "profile_id": profile.pk,
        "full_name": profile.full_name or getattr(user, "email", "") or UNKNOWN_EMPLOYEE,
        "department": profile.department or NO_DEPARTMENT,
    }


class GoalPlanSerializer(serializers.ModelSerializer):
    owner = serializers.SerializerMethodField()
    status_label = serializers.CharField(source="get_status_display", read_only=True)
    status_description = serializers.SerializerMethodField()
    total_weightage = serializers.IntegerField(read_only=True)
    is_over_limit = serializers.SerializerMethodField()
    is_terminal = serializers.BooleanField(read_only=True)
    reviewed_by_email = serializers.EmailField(source="reviewed_by.email", read_only=True, default=None)
    editable = serializers.SerializerMethodField()
    editable_fields = serializers.SerializerMethodField()
    available_actions = serializers.SerializerMethodField()

    class Meta:
        model = GoalPlan
        fields = ["id", "owner", "month", "status", "status_label", "status_description",
                  "items", "proposed_items", "total_weightage", "is_over_limit", "is_terminal",
                  "reviewer_notes", "reviewed_by", "reviewed_by_email", "reviewed_at",
                  "revision", "history", "editable", "editable_fields", "available_actions",
                  "created_at", "updated_at"]
        read_only_fields = fields

    def _actor(self, obj):
        req = self.context.get("request")
        if req is None:
            return workflow.Actor(user=None)
        cache = self.context.setdefault("_actors", {})
        if obj.pk not in cache:
            cache[obj.pk] = workflow.resolve_actor(req.user, obj)
        return cache[obj.pk]

    def get_owner(self, obj):
        return owner_placeholder(obj.profile)

    def get_status_description(self, obj):
        return workflow.STATUS_DESCRIPTIONS.get(obj.status, "")

    def get_is_over_limit(self, obj):
        return obj.total_weightage > WEIGHTAGE_LIMIT

    def get_editable(self, obj):
        edits = workflow.editable_fields(obj, self._actor(obj))
        return workflow.EDITS_ITEMS in edits or workflow.EDITS_PROPOSED in edits

    def get_editable_fields(self, obj):
        return workflow.editable_fields(obj, self._actor(obj))

    def get_available_actions(self, obj):
        return [str(a) for a in workflow.available_actions(obj, self._actor(obj))]


# ---- request payloads ----
class MonthQuerySerializer(serializers.Serializer):
    month = serializers.CharField()

    def validate_month(self, value):
        try:
            return month_start(value)
        except ValueError:
            raise serializers.ValidationError("Use YYYY-MM or YYYY-MM-DD")


class GoalPlanCreateSerializer(MonthQuerySerializer):
    items = ItemsField(required=False, default=list)


class PlanActionSerializer(serializers.Serializer):
    expected_revision = serializers.IntegerField(required=False, min_value=1)


class ItemsActionSerializer(PlanActionSerializer):
    """save-draft, submit: items optional, current items are used when omitted"""
    items = ItemsField(required=False)


class RequiredItemsActionSerializer(PlanActionSerializer):
    """request-edit, submit-actuals"""
    items = ItemsField(allow_empty=False)


class ReviewActionSerializer(PlanActionSerializer):
    items = ItemsField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class RejectActionSerializer(PlanActionSerializer):
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class WeightageCheckSerializer(serializers.Serializer):
    # rows as typed; unusable weightages count as 0
    items = serializers.ListField(child=serializers.DictField(), allow_empty=True)
