"""
Serializers for sales app.

- Transaction creation at the register
- Transaction list and detail
- Cancellation
"""

from decimal import Decimal

from rest_framework import serializers

from apps.inventory.models import Product

from .models import Transaction, TransactionItem
from .services import StockShortageError, create_transaction


class TransactionItemCreateSerializer(serializers.Serializer):
    """Serializer for one line of a new transaction."""

    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)

    def validate_product_id(self, value):
        """Validate that the product exists and is on sale."""
        if not Product.objects.filter(pk=value, is_active=True).exists():
            raise serializers.ValidationError("Product not found or inactive.")
        return value


class TransactionCreateSerializer(serializers.Serializer):
    """
    Serializer for creating a new transaction through the register.

    ``payment_amount`` is optional and defaults to the amount due.
    Stock is checked again under lock when the sale is saved; a shortage on
    any line rejects the whole sale with a per-line error under ``items``.
    """

    customer_name = serializers.CharField(max_length=255)
    customer_email = serializers.EmailField()
    customer_phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    items = TransactionItemCreateSerializer(many=True)
    payment_method = serializers.ChoiceField(choices=Transaction.PAYMENT_METHOD_CHOICES)
    payment_amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal("0.00"),
        required=False,
        allow_null=True,
    )

    def validate_items(self, value):
        """Validate that at least one item is provided."""
        if not value:
            raise serializers.ValidationError("At least one item is required.")
        return value

    def create(self, validated_data):
        request = self.context["request"]
        items_data = validated_data["items"]

        products = Product.objects.in_bulk([item["product_id"] for item in items_data])
        lines = [(products[item["product_id"]], item["quantity"]) for item in items_data]

        try:
            return create_transaction(
                user=request.user,
                items=lines,
                customer_name=validated_data["customer_name"],
                customer_email=validated_data["customer_email"],
                customer_phone=validated_data.get("customer_phone", ""),
                payment_method=validated_data["payment_method"],
                payment_amount=validated_data.get("payment_amount"),
            )
        except StockShortageError as e:
            raise serializers.ValidationError(
                {"items": self._shortage_errors(items_data, e.shortages)}
            )
        except ValueError as e:
            raise serializers.ValidationError({"items": [str(e)]})

    def _shortage_errors(self, items_data, shortages):
        errors = []
        for item in items_data:
            shortage = shortages.get(item["product_id"])
            if shortage is None:
                errors.append({})
                continue
            errors.append(
                {
                    "quantity": [
                        f"Insufficient stock. Available: {shortage['available']}, "
                        f"Requested: {shortage['requested']}"
                    ]
                }
            )
        return errors


class TransactionItemSerializer(serializers.ModelSerializer):
    """Serializer for transaction item details."""

    product_name = serializers.CharField(source="product.name", read_only=True)
    product_sku = serializers.CharField(source="product.sku", read_only=True)

    class Meta:
        model = TransactionItem
        fields = [
            "id",
            "product",
            "product_name",
            "product_sku",
            "quantity",
            "price",
            "subtotal",
        ]


class TransactionDetailSerializer(serializers.ModelSerializer):
    """Serializer for transaction details."""

    items = TransactionItemSerializer(many=True, read_only=True)
    cashier_name = serializers.CharField(source="user.get_full_name", read_only=True)
    cashier_username = serializers.CharField(source="user.username", read_only=True)
    cancelled_by_name = serializers.CharField(
        source="cancelled_by.username", read_only=True, default=None
    )
    has_feedback = serializers.SerializerMethodField()

    class Meta:
        model = Transaction
        fields = [
            "id",
            "transaction_number",
            "user",
            "cashier_name",
            "cashier_username",
            "customer_name",
            "customer_email",
            "customer_phone",
            "items",
            "subtotal",
            "tax",
            "total",
            "payment_method",
            "payment_amount",
            "change_amount",
            "status",
            "created_at",
            "completed_at",
            "cancelled_at",
            "cancelled_by",
            "cancelled_by_name",
            "cancellation_reason",
            "has_feedback",
        ]
        read_only_fields = fields

    def get_has_feedback(self, obj):
        return hasattr(obj, "feedback")


class TransactionListSerializer(serializers.ModelSerializer):
    """Serializer for transaction list."""

    cashier_username = serializers.CharField(source="user.username", read_only=True)
    items_count = serializers.SerializerMethodField()

    class Meta:
        model = Transaction
        fields = [
            "id",
            "transaction_number",
            "customer_name",
            "customer_email",
            "cashier_username",
            "total",
            "payment_method",
            "status",
            "items_count",
            "created_at",
        ]

    def get_items_count(self, obj):
        """Get count of lines in the transaction."""
        return obj.items.count()


class TransactionCancelSerializer(serializers.Serializer):
    """Serializer for cancelling a transaction."""

    reason = serializers.CharField(max_length=500, required=False, allow_blank=True)


class TransactionFilterSerializer(serializers.Serializer):
    """Validates the date range query parameters of the transaction list."""

    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def validate(self, data):
        date_from = data.get("date_from")
        date_to = data.get("date_to")
        if date_from and date_to and date_to < date_from:
            raise serializers.ValidationError(
                {"date_to": "End date must not be before start date."}
            )
        return data
