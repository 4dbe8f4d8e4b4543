from django.contrib import admin
from unfold.admin import ModelAdmin

from .models import NotificationLog


@admin.register(NotificationLog)
class NotificationLogAdmin(ModelAdmin):
    list_display = ("sent_at", "alert_code", "item", "recipient", "success")
    list_filter = ("alert_code", "success")
    search_fields = ("item__model_code", "recipient", "error_message")
    readonly_fields = ("item", "alert_code", "recipient", "sent_at", "success", "error_message")
