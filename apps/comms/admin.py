from django import forms
from django.contrib import admin
from django_json_widget.widgets import JSONEditorWidget

from core.json_payloads import NOTIFICATION_TEMPLATES
from .models import Notification


class NotificationForm(forms.ModelForm):
    class Meta:
        model = Notification
        fields = "__all__"
        widgets = {
            "payload": JSONEditorWidget(options={"mode": "tree", "modes": ["tree", "code"]}),
        }


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    form = NotificationForm
    list_display = ("id", "user", "notification_type", "created_at", "read_at")
    list_filter = ("notification_type", "created_at")
    search_fields = ("user__email", "dedupe_key")
    autocomplete_fields = ("user",)

    def get_changeform_initial_data(self, request):
        initial = super().get_changeform_initial_data(request)
        initial["payload"] = NOTIFICATION_TEMPLATES.get("SYSTEM", {})
        return initial
