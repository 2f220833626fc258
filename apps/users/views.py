from django.contrib.auth import get_user_model
from django_filters.rest_framework import DjangoFilterBackend

from rest_framework import viewsets, mixins, filters
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.permissions import IsHROrAdmin, IsOwnProfile
from core.responses import APIResponse
from .models import EmployeeProfile
from .serializers import UserSerializer, EmployeeProfileSerializer

User = get_user_model()


# -------- Users --------
class UserViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = User.objects.all().order_by("id")
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, IsHROrAdmin]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ["role", "is_active"]
    search_fields = ["email"]

    @action(detail=False, methods=["get"], permission_classes=[IsAuthenticated])
    def me(self, request):
        return Response(UserSerializer(request.user).data)


# -------- Profiles --------
class EmployeeProfileViewSet(mixins.ListModelMixin,
                             mixins.RetrieveModelMixin,
                             mixins.UpdateModelMixin,
                             viewsets.GenericViewSet):
    queryset = EmployeeProfile.objects.select_related("user", "manager", "manager__user").all()
    serializer_class = EmployeeProfileSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_fields = ["department", "manager"]
    search_fields = ["full_name", "user__email", "department"]
    ordering = ["full_name"]

    def get_queryset(self):
        qs = super().get_queryset()
        u = self.request.user
        if getattr(u, "is_hr_or_admin", False):
            return qs
        # everybody else sees self + direct reports
        me = EmployeeProfile.objects.filter(user=u).first()
        if not me:
            return qs.filter(user=u)
        return qs.filter(id__in=[me.id, *me.direct_reports.values_list("id", flat=True)])

    def get_permissions(self):
        if self.action in ("update", "partial_update"):
            if getattr(self.request.user, "is_hr_or_admin", False):
                return [IsAuthenticated()]
            return [IsAuthenticated(), IsOwnProfile()]
        return super().get_permissions()

    @action(detail=False, methods=["get"])
    def me(self, request):
        obj = EmployeeProfile.objects.filter(user=request.user).select_related("manager").first()
        if not obj:
            return APIResponse.not_found("Employee profile not found")
        return APIResponse.success(self.get_serializer(obj).data)

    @action(detail=False, methods=["get"], url_path="direct-reports")
    def direct_reports(self, request):
        me = EmployeeProfile.objects.filter(user=request.user).first()
        if not me:
            return APIResponse.success([])
        qs = me.direct_reports.select_related("user").order_by("full_name")
        return APIResponse.success(self.get_serializer(qs, many=True).data)
