from django_filters.rest_framework import DjangoFilterBackend
from django_fsm import TransitionNotAllowed
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample
from rest_framework import viewsets, mixins, filters, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from core.permissions import IsHROrAdmin
from core.responses import APIResponse
from core.schemas import WeightageSummarySerializer
from apps.users.models import EmployeeProfile
from . import services
from .exceptions import (
    AuthorizationError, GoalPlanError, InvalidTransitionError, PlanValidationError, StaleRevisionError,
)
from .models import GoalPlan
from .serializers import (
    GoalPlanSerializer, GoalPlanCreateSerializer, MonthQuerySerializer, ItemsActionSerializer,
    RequiredItemsActionSerializer, ReviewActionSerializer, RejectActionSerializer, WeightageCheckSerializer,
)
from .weightage import summary
from .workflow import Action, resolve_actor

SUCCESS_MESSAGES = {
    Action.SAVE_DRAFT: "Draft saved",
    Action.SUBMIT: "Goal plan submitted for approval",
    Action.APPROVE: "Goal plan approved",
    Action.REJECT: "Goal plan returned",
    Action.REQUEST_EDIT: "Edit submitted for approval",
    Action.SUBMIT_ACTUALS: "Actuals submitted for approval",
}


def error_response(exc):
    """Envelope for a workflow error"""
    if isinstance(exc, PlanValidationError):
        data = {"total_weightage": exc.total} if exc.total is not None else None
        return APIResponse.validation_error(exc.errors, exc.message, data=data)
    if isinstance(exc, AuthorizationError):
        return APIResponse.forbidden(exc.message)
    if isinstance(exc, StaleRevisionError):
        return APIResponse.conflict(exc.message, {"revision": exc.actual})
    if isinstance(exc, InvalidTransitionError):
        return APIResponse.error(exc.message, code=status.HTTP_400_BAD_REQUEST)
    return APIResponse.error(exc.message, code=exc.status_code)


def _my_profile(user):
    return EmployeeProfile.objects.filter(user=user).first()


class GoalPlanViewSet(mixins.ListModelMixin,
                      mixins.RetrieveModelMixin,
                      mixins.DestroyModelMixin,
                      viewsets.GenericViewSet):
    """
    Monthly goal plans.

    list: plans of the current user; retrieve: any plan the user may see
    (own, direct reports', or any for HR/admin). Workflow steps are POST
    actions on a plan.
    """
    serializer_class = GoalPlanSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ["status", "month"]
    ordering_fields = ["month", "updated_at"]
    ordering = ["-month"]

    def get_queryset(self):
        qs = GoalPlan.objects.with_profile()
        if self.action == "list":
            return qs.filter(profile__user=self.request.user)
        return qs.visible_to(self.request.user)

    def list(self, request, *args, **kwargs):
        qs = self.filter_queryset(self.get_queryset())
        return APIResponse.success(self.get_serializer(qs, many=True).data)

    def retrieve(self, request, *args, **kwargs):
        return APIResponse.success(self.get_serializer(self.get_object()).data)

    @extend_schema(
        request=GoalPlanCreateSerializer,
        responses={201: GoalPlanSerializer, 200: GoalPlanSerializer},
        examples=[OpenApiExample("New plan", value={
            "month": "2025-04",
            "items": [{"client": "Acme", "bucket": "Revenue", "line_item": "Renewals",
                       "weightage": 60, "target": "12 renewals"}],
        }, request_only=True)],
    )
    def create(self, request, *args, **kwargs):
        ser = GoalPlanCreateSerializer(data=request.data)
        if not ser.is_valid():
            return APIResponse.validation_error(ser.errors)
        profile, _ = EmployeeProfile.objects.get_or_create(user=request.user)
        try:
            plan, created = services.create_plan(profile, ser.validated_data["month"], ser.validated_data["items"])
        except GoalPlanError as exc:
            return error_response(exc)
        data = self.get_serializer(plan).data
        if created:
            return APIResponse.created(data, "Goal plan created as draft")
        return APIResponse.success(data, "Goal plan already exists for this month")

    def destroy(self, request, *args, **kwargs):
        plan = self.get_object()
        pk = plan.pk
        try:
            services.delete_plan(plan, resolve_actor(request.user, plan))
        except GoalPlanError as exc:
            return error_response(exc)
        return APIResponse.success({"id": pk}, "Goal plan deleted")

    # ---- projections ----
    @extend_schema(parameters=[OpenApiParameter("month", str, description="YYYY-MM or YYYY-MM-DD")],
                   responses={200: GoalPlanSerializer})
    @action(detail=False, methods=["get"])
    def month(self, request):
        ser = MonthQuerySerializer(data=request.query_params)
        if not ser.is_valid():
            return APIResponse.validation_error(ser.errors)
        profile = _my_profile(request.user)
        plan = services.get_plan(profile, ser.validated_data["month"]) if profile else None
        return APIResponse.success(self.get_serializer(plan).data if plan else None)

    @extend_schema(responses={200: GoalPlanSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="team-pending")
    def team_pending(self, request):
        profile = _my_profile(request.user)
        if not profile:
            return APIResponse.success([])
        qs = GoalPlan.objects.with_profile().pending_for_manager(profile)
        return APIResponse.success(self.get_serializer(qs, many=True).data)

    @extend_schema(responses={200: GoalPlanSerializer(many=True)})
    @action(detail=False, methods=["get"], url_path="hr-pending",
            permission_classes=[IsAuthenticated, IsHROrAdmin])
    def hr_pending(self, request):
        qs = GoalPlan.objects.with_profile().pending_for_hr()
        return APIResponse.success(self.get_serializer(qs, many=True).data)

    @extend_schema(request=WeightageCheckSerializer, responses={200: WeightageSummarySerializer})
    @action(detail=False, methods=["post"], url_path="weightage-check")
    def weightage_check(self, request):
        ser = WeightageCheckSerializer(data=request.data)
        if not ser.is_valid():
            return APIResponse.validation_error(ser.errors)
        return APIResponse.success(WeightageSummarySerializer(summary(ser.validated_data["items"])).data)

    # ---- workflow ----
    def _transition(self, request, action_name, payload_class):
        plan = self.get_object()
        ser = payload_class(data=request.data)
        if not ser.is_valid():
            return APIResponse.validation_error(ser.errors)
        data = ser.validated_data
        actor = resolve_actor(request.user, plan)
        try:
            plan = services.update_status(
                plan, actor, action_name,
                items=data.get("items"),
                notes=data.get("notes"),
                expected_revision=data.get("expected_revision"),
            )
        except GoalPlanError as exc:
            return error_response(exc)
        except TransitionNotAllowed as exc:
            return APIResponse.error(str(exc), code=status.HTTP_400_BAD_REQUEST)
        plan = GoalPlan.objects.with_profile().get(pk=plan.pk)
        return APIResponse.success(self.get_serializer(plan).data, SUCCESS_MESSAGES[action_name])

    @extend_schema(request=ItemsActionSerializer, responses={200: GoalPlanSerializer})
    @action(detail=True, methods=["post"], url_path="save-draft")
    def save_draft(self, request, pk=None):
        return self._transition(request, Action.SAVE_DRAFT, ItemsActionSerializer)

    @extend_schema(request=ItemsActionSerializer, responses={200: GoalPlanSerializer})
    @action(detail=True, methods=["post"])
    def submit(self, request, pk=None):
        return self._transition(request, Action.SUBMIT, ItemsActionSerializer)

    @extend_schema(request=ReviewActionSerializer, responses={200: GoalPlanSerializer})
    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        return self._transition(request, Action.APPROVE, ReviewActionSerializer)

    @extend_schema(request=RejectActionSerializer, responses={200: GoalPlanSerializer})
    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        return self._transition(request, Action.REJECT, RejectActionSerializer)

    @extend_schema(request=RequiredItemsActionSerializer, responses={200: GoalPlanSerializer})
    @action(detail=True, methods=["post"], url_path="request-edit")
    def request_edit(self, request, pk=None):
        return self._transition(request, Action.REQUEST_EDIT, RequiredItemsActionSerializer)

    @extend_schema(request=RequiredItemsActionSerializer, responses={200: GoalPlanSerializer})
    @action(detail=True, methods=["post"], url_path="submit-actuals")
    def submit_actuals(self, request, pk=None):
        return self._transition(request, Action.SUBMIT_ACTUALS, RequiredItemsActionSerializer)
