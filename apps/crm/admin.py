"""
Django admin configuration for CRM models.
"""

from django.contrib import admin

from .models import FarewellMessage, Feedback


@admin.register(Feedback)
class FeedbackAdmin(admin.ModelAdmin):
    """Admin interface for Feedback model."""

    list_display = [
        "transaction",
        "rating",
        "would_recommend",
        "is_anonymous",
        "created_at",
    ]
    list_filter = ["rating", "would_recommend", "is_anonymous", "created_at"]
    search_fields = ["transaction__transaction_number", "customer_name", "customer_email"]
    readonly_fields = ["transaction", "created_at", "updated_at"]
    fieldsets = [
        (
            "Customer",
            {
                "fields": ["transaction", "customer_name", "customer_email", "is_anonymous"],
            },
        ),
        (
            "Ratings",
            {
                "fields": [
                    "rating",
                    "service_quality_rating",
                    "product_quality_rating",
                    "cleanliness_rating",
                    "staff_friendliness_rating",
                    "would_recommend",
                ],
            },
        ),
        (
            "Comments",
            {
                "fields": ["areas_of_improvement", "comment"],
            },
        ),
        (
            "Timestamps",
            {
                "fields": ["created_at", "updated_at"],
                "classes": ["collapse"],
            },
        ),
    ]


@admin.register(FarewellMessage)
class FarewellMessageAdmin(admin.ModelAdmin):
    """Admin interface for FarewellMessage model."""

    list_display = [
        "message",
        "language",
        "occasion",
        "is_active",
        "display_order",
        "start_date",
        "end_date",
    ]
    list_filter = ["language", "occasion", "is_active"]
    list_editable = ["is_active", "display_order"]
    search_fields = ["message"]
    readonly_fields = ["created_by", "created_at", "updated_at"]

    def save_model(self, request, obj, form, change):
        if not change and obj.created_by_id is None:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)
