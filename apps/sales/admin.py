"""
Django admin configuration for sales models.
"""

from django.contrib import admin

from .models import Transaction, TransactionItem


class TransactionItemInline(admin.TabularInline):
    """Inline admin for TransactionItem model."""

    model = TransactionItem
    extra = 0
    can_delete = False
    readonly_fields = ["product", "quantity", "price", "subtotal"]
    fields = ["product", "quantity", "price", "subtotal"]

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """
    Admin interface for Transaction model.

    Transactions are read-only here; stock is only consistent when sales are
    created and cancelled through the API.
    """

    list_display = [
        "transaction_number",
        "customer_name",
        "user",
        "total",
        "payment_method",
        "status",
        "created_at",
    ]
    list_filter = ["status", "payment_method", "created_at"]
    search_fields = ["transaction_number", "customer_name", "customer_email"]
    readonly_fields = [
        "transaction_number",
        "user",
        "customer_name",
        "customer_email",
        "customer_phone",
        "subtotal",
        "tax",
        "total",
        "payment_method",
        "payment_amount",
        "change_amount",
        "status",
        "created_at",
        "updated_at",
        "completed_at",
        "cancelled_at",
        "cancelled_by",
        "cancellation_reason",
    ]
    inlines = [TransactionItemInline]
    fieldsets = [
        (
            "Transaction Information",
            {
                "fields": ["transaction_number", "user", "status"],
            },
        ),
        (
            "Customer",
            {
                "fields": ["customer_name", "customer_email", "customer_phone"],
            },
        ),
        (
            "Financial Details",
            {
                "fields": [
                    "subtotal",
                    "tax",
                    "total",
                    "payment_method",
                    "payment_amount",
                    "change_amount",
                ],
            },
        ),
        (
            "Cancellation",
            {
                "fields": ["cancelled_at", "cancelled_by", "cancellation_reason"],
                "classes": ["collapse"],
            },
        ),
        (
            "Timestamps",
            {
                "fields": ["created_at", "updated_at", "completed_at"],
            },
        ),
    ]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
