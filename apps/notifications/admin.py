from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import EmailNotification, Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """Admin interface for Notification model"""

    list_display = ["title", "user", "notification_type", "is_read", "created_at"]
    list_filter = ["notification_type", "is_read", "created_at"]
    search_fields = ["title", "message", "user__username", "user__email"]
    readonly_fields = ["created_at", "read_at"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    fieldsets = (
        (_("Basic Information"), {"fields": ("user", "title", "message", "notification_type")}),
        (_("Status"), {"fields": ("is_read", "read_at")}),
        (_("Action"), {"fields": ("action_url",), "classes": ("collapse",)}),
        (_("Timestamps"), {"fields": ("created_at",), "classes": ("collapse",)}),
    )

    def get_queryset(self, request):
        """Optimize queryset with select_related"""
        return super().get_queryset(request).select_related("user")


@admin.register(EmailNotification)
class EmailNotificationAdmin(admin.ModelAdmin):
    """Admin interface for EmailNotification model"""

    list_display = ["subject", "to_email", "status_badge", "email_type", "created_at", "sent_at"]
    list_filter = ["status", "email_type", "created_at"]
    search_fields = ["subject", "to_email", "user__username"]
    readonly_fields = ["created_at", "sent_at", "failed_at", "error_message"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    fieldsets = (
        (
            _("Email Details"),
            {"fields": ("subject", "to_email", "from_email", "template_name", "email_type")},
        ),
        (_("Status"), {"fields": ("status", "error_message")}),
        (
            _("Timestamps"),
            {"fields": ("created_at", "sent_at", "failed_at"), "classes": ("collapse",)},
        ),
    )

    STATUS_COLORS = {
        EmailNotification.PENDING: "#6c757d",
        EmailNotification.SENT: "#28a745",
        EmailNotification.FAILED: "#dc3545",
    }

    def status_badge(self, obj):
        return format_html(
            '<span style="color: {};">{}</span>',
            self.STATUS_COLORS.get(obj.status, "#6c757d"),
            obj.get_status_display(),
        )

    status_badge.short_description = _("Status")
