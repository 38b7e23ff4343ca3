"""
Serializers for inventory models.
"""

from django.conf import settings
from django.db import transaction

from rest_framework import serializers

from .models import Category, InventoryMovement, Product
from .services import record_initial_stock


class CategorySerializer(serializers.ModelSerializer):
    """Serializer for Category model."""

    products_count = serializers.SerializerMethodField()

    class Meta:
        model = Category
        fields = [
            "id",
            "name",
            "description",
            "products_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def get_products_count(self, obj):
        """Get count of active products in the category."""
        return obj.products.filter(is_active=True).count()


class ProductListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for product lists and the register screen."""

    category_name = serializers.CharField(source="category.name", read_only=True, default=None)
    stock_status = serializers.CharField(read_only=True)
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "sku",
            "barcode",
            "price",
            "unit",
            "category",
            "category_name",
            "stock",
            "low_stock_threshold",
            "stock_status",
            "is_low_stock",
            "is_active",
        ]


class ProductSerializer(serializers.ModelSerializer):
    """
    Full product serializer used for create/update/retrieve.

    ``stock`` can be supplied on create as the opening stock; afterwards it
    is read-only and changes go through the adjust and restock endpoints.
    """

    category_name = serializers.CharField(source="category.name", read_only=True, default=None)
    category = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(),
        required=False,
        allow_null=True,
    )
    stock = serializers.IntegerField(min_value=0, required=False, default=0)
    stock_status = serializers.CharField(read_only=True)
    is_low_stock = serializers.BooleanField(read_only=True)
    needs_reorder = serializers.BooleanField(read_only=True)
    stock_value = serializers.DecimalField(
        source="calculate_stock_value", max_digits=14, decimal_places=2, read_only=True
    )

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "sku",
            "description",
            "price",
            "category",
            "category_name",
            "barcode",
            "unit",
            "is_active",
            "stock",
            "low_stock_threshold",
            "reorder_point",
            "stock_status",
            "is_low_stock",
            "needs_reorder",
            "stock_value",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]
        extra_kwargs = {
            "barcode": {"required": False, "allow_null": True, "allow_blank": True},
        }

    def validate_barcode(self, value):
        return value or None

    def validate(self, data):
        threshold = data.get(
            "low_stock_threshold", getattr(self.instance, "low_stock_threshold", None)
        )
        reorder_point = data.get("reorder_point", getattr(self.instance, "reorder_point", None))
        if threshold is not None and reorder_point is not None and reorder_point < threshold:
            raise serializers.ValidationError(
                {"reorder_point": "Reorder point must not be below the low stock threshold."}
            )
        return data

    @transaction.atomic
    def create(self, validated_data):
        validated_data.setdefault("low_stock_threshold", settings.LOW_STOCK_DEFAULT_THRESHOLD)
        product = super().create(validated_data)
        request = self.context.get("request")
        record_initial_stock(product, user=getattr(request, "user", None))
        return product

    def update(self, instance, validated_data):
        # Stock is only changed through the movement log
        validated_data.pop("stock", None)
        return super().update(instance, validated_data)


class InventoryMovementSerializer(serializers.ModelSerializer):
    """Serializer for movement log entries."""

    product_name = serializers.CharField(source="product.name", read_only=True)
    product_sku = serializers.CharField(source="product.sku", read_only=True)
    user_name = serializers.CharField(source="user.username", read_only=True, default=None)

    class Meta:
        model = InventoryMovement
        fields = [
            "id",
            "product",
            "product_name",
            "product_sku",
            "quantity",
            "movement_type",
            "reference_type",
            "reference_id",
            "stock_after",
            "notes",
            "user",
            "user_name",
            "created_at",
        ]
        read_only_fields = fields


class StockAdjustmentSerializer(serializers.Serializer):
    """
    Serializer for manual stock adjustments.

    ``quantity`` is a signed delta; notes explaining the correction are required.
    """

    quantity = serializers.IntegerField()
    notes = serializers.CharField(max_length=500)

    def validate_quantity(self, value):
        if value == 0:
            raise serializers.ValidationError("Quantity must not be zero.")
        return value


class RestockSerializer(serializers.Serializer):
    """Serializer for receiving stock."""

    quantity = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)
