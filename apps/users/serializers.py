from rest_framework import serializers
from django.contrib.auth import get_user_model

from .models import EmployeeProfile

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "email", "role", "is_active", "date_joined", "last_login"]
        read_only_fields = fields


class EmployeeProfileSerializer(serializers.ModelSerializer):
    user = UserSerializer(read_only=True)
    manager_name = serializers.SerializerMethodField()
    direct_reports_count = serializers.SerializerMethodField()

    class Meta:
        model = EmployeeProfile
        fields = ["id", "user", "full_name", "department", "job_title",
                  "manager", "manager_name", "direct_reports_count"]
        read_only_fields = ["id", "user"]

    def get_manager_name(self, obj):
        m = obj.manager
        if not m:
            return None
        return m.full_name or m.user.email

    def get_direct_reports_count(self, obj):
        return obj.direct_reports.count()

    def get_fields(self):
        fields = super().get_fields()
        req = self.context.get("request")
        # reporting line and department are maintained by HR
        if req and not getattr(req.user, "is_hr_or_admin", False):
            for f in ("manager", "department"):
                if f in fields:
                    fields[f].read_only = True
        return fields
