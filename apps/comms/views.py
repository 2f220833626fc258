from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets, filters
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiExample

from core.schemas import PayloadTemplatesResponseSerializer
from core.json_payloads import NOTIFICATION_TEMPLATES, NOTIFICATION_SCHEMA
from core.responses import APIResponse
from .models import Notification
from .serializers import NotificationSerializer


# ---------- Notifications ----------
class NotificationViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Inbox of the current user plus actions:
    - mark_read(id)
    - mark_all_read()
    - unread_count()
    """
    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.OrderingFilter]
    filterset_fields = ["notification_type"]
    ordering = ["-created_at"]

    def get_queryset(self):
        return Notification.objects.filter(user=self.request.user).order_by("-created_at")

    @action(detail=True, methods=["post"])
    def mark_read(self, request, pk=None):
        obj = self.get_object()
        if not obj.read_at:
            obj.read_at = timezone.now()
            obj.save(update_fields=["read_at"])
        return APIResponse.success(NotificationSerializer(obj).data, "Marked as read")

    @action(detail=False, methods=["post"])
    def mark_all_read(self, request):
        updated = self.get_queryset().filter(read_at__isnull=True).update(read_at=timezone.now())
        return APIResponse.success({"updated": updated}, "All notifications marked as read")

    @action(detail=False, methods=["get"])
    def unread_count(self, request):
        count = self.get_queryset().filter(read_at__isnull=True).count()
        return APIResponse.success({"count": count})

    @extend_schema(
        summary="JSON schema and payload templates for notifications",
        responses={200: PayloadTemplatesResponseSerializer},
        examples=[
            OpenApiExample(
                "GOAL_PLAN_SUBMITTED payload template",
                value={
                    "version": 1,
                    "schema": {"type": "object", "required": ["title"]},
                    "templates": {
                        "GOAL_PLAN_SUBMITTED": {
                            "title": "Goal plan awaiting your approval",
                            "link": "/performance/goals/{goal_plan_id}/",
                            "data": {"goal_plan_id": 0, "employee": "", "month": "YYYY-MM-DD", "is_edit": False},
                            "payload_version": 1,
                        }
                    },
                },
                response_only=True,
            )
        ],
    )
    @action(detail=False, methods=["get"], url_path="payload-templates")
    def payload_templates(self, request):
        return Response({"version": 1, "schema": NOTIFICATION_SCHEMA, "templates": NOTIFICATION_TEMPLATES})
