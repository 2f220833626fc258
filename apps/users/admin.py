from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import CustomUser, EmployeeProfile


@admin.register(CustomUser)
class UserAdmin(DjangoUserAdmin):
    model = CustomUser
    list_display = ("id", "email", "role", "is_active", "is_staff", "last_login")
    list_filter = ("role", "is_active", "is_staff")
    ordering = ("id",)
    search_fields = ("email",)
    fieldsets = (
        (None, {"fields": ("email", "password", "role")}),
        ("Permissions", {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")}),
        ("Important dates", {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (None, {"classes": ("wide",),
                "fields": ("email", "password1", "password2", "role", "is_staff", "is_superuser")}),
    )
    # no username field
    readonly_fields = ("last_login", "date_joined")


@admin.register(EmployeeProfile)
class EmployeeProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "full_name", "department", "job_title", "manager")
    search_fields = ("user__email", "full_name", "department")
    list_filter = ("department",)
    autocomplete_fields = ("manager",)
    fieldsets = (
        ("User", {"fields": ("user",)}),
        ("Profile", {"fields": ("full_name", "department", "job_title")}),
        ("Reporting line", {"fields": ("manager",)}),
    )

    def get_readonly_fields(self, request, obj=None):
        # user is editable only while adding
        return ('user',) if obj else ()
