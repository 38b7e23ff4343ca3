"""
Admin configuration for inventory models.
"""

from django.contrib import admin

from .models import Category, InventoryMovement, Product


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    """Admin interface for Category."""

    list_display = ["name", "created_at"]
    search_fields = ["name", "description"]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """
    Admin interface for Product.

    Stock is read-only here; it changes only through recorded movements.
    """

    list_display = [
        "sku",
        "name",
        "category",
        "price",
        "stock",
        "low_stock_threshold",
        "reorder_point",
        "is_active",
    ]
    list_filter = ["is_active", "category", "created_at"]
    search_fields = ["sku", "name", "barcode"]
    readonly_fields = ["stock", "created_at", "updated_at"]
    fieldsets = (
        (
            "Basic Information",
            {"fields": ("sku", "barcode", "name", "description", "category", "unit")},
        ),
        ("Pricing", {"fields": ("price",)}),
        ("Stock", {"fields": ("stock", "low_stock_threshold", "reorder_point")}),
        ("Status", {"fields": ("is_active",)}),
        (
            "Timestamps",
            {"fields": ("created_at", "updated_at"), "classes": ("collapse",)},
        ),
    )


@admin.register(InventoryMovement)
class InventoryMovementAdmin(admin.ModelAdmin):
    """Read-only admin for the append-only movement log."""

    list_display = [
        "created_at",
        "product",
        "quantity",
        "movement_type",
        "reference_type",
        "reference_id",
        "stock_after",
        "user",
    ]
    list_filter = ["movement_type", "reference_type", "created_at"]
    search_fields = ["product__sku", "product__name", "notes"]
    list_select_related = ["product", "user"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
