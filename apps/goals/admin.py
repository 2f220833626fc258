from django import forms
from django.contrib import admin
from django_json_widget.widgets import JSONEditorWidget

from .models import GoalPlan
from .workflow import Action, DELETABLE_STATES, sources_for


class GoalPlanForm(forms.ModelForm):
    class Meta:
        model = GoalPlan
        fields = "__all__"
        widgets = {
            "items": JSONEditorWidget(options={"mode": "tree", "modes": ["tree", "code"]}),
            "proposed_items": JSONEditorWidget(options={"mode": "tree", "modes": ["tree", "code"]}),
        }


@admin.register(GoalPlan)
class GoalPlanAdmin(admin.ModelAdmin):
    form = GoalPlanForm
    list_display = ("id", "profile", "month", "status", "total_weightage", "reviewed_by", "updated_at")
    list_filter = ("status", "month")
    search_fields = ("profile__full_name", "profile__user__email", "profile__department")
    autocomplete_fields = ("profile",)
    date_hierarchy = "month"
    # status only moves through the workflow
    readonly_fields = ("status", "revision", "history", "reviewed_by", "reviewed_at", "created_at", "updated_at")
    fieldsets = (
        ("Employee and month", {
            "fields": ("profile", "month")
        }),
        ("Goals", {
            "fields": ("items", "proposed_items")
        }),
        ("Status and history", {
            "fields": ("status", "reviewer_notes", "reviewed_by", "reviewed_at", "revision", "history")
        }),
        ("Timestamps", {
            "fields": ("created_at", "updated_at")
        }),
    )

    def get_readonly_fields(self, request, obj=None):
        fields = super().get_readonly_fields(request, obj)
        # content changes after submission go through the workflow
        if obj is not None and obj.status not in sources_for(Action.SAVE_DRAFT):
            fields = (*fields, "items", "proposed_items")
        return fields

    @admin.display(description="Weightage %")
    def total_weightage(self, obj):
        return obj.total_weightage

    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.status not in DELETABLE_STATES:
            return False
        return super().has_delete_permission(request, obj)

    def save_model(self, request, obj, form, change):
        if change:
            obj.revision += 1
        super().save_model(request, obj, form, change)
