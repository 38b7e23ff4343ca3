"""
Inventory models for the retail POS platform.

- Product catalogue with categories, barcodes and stock thresholds
- Current stock level held on the product row
- Append-only movement log recording every stock delta
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.core.models import User


class Category(models.Model):
    """
    Product categories for organizing the catalogue.
    """

    name = models.CharField(
        max_length=100,
        unique=True,
        help_text="Category name (e.g., Beverages, Snacks, Household)",
    )

    description = models.TextField(
        blank=True,
        help_text="Optional description of the category",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "inventory_categories"
        ordering = ["name"]
        verbose_name = "Category"
        verbose_name_plural = "Categories"

    def __str__(self):
        return self.name


class Product(models.Model):
    """
    A sellable product and its current stock level.

    ``stock`` is only ever changed through
    ``apps.inventory.services.apply_stock_change`` so that every delta is
    row-locked, checked against going negative and written to the
    movement log.
    """

    # Stock status values
    STATUS_OUT_OF_STOCK = "out_of_stock"
    STATUS_LOW_STOCK = "low_stock"
    STATUS_REORDER = "reorder"
    STATUS_IN_STOCK = "in_stock"

    STOCK_STATUS_CHOICES = [
        (STATUS_OUT_OF_STOCK, "Out of Stock"),
        (STATUS_LOW_STOCK, "Low Stock"),
        (STATUS_REORDER, "Reorder"),
        (STATUS_IN_STOCK, "In Stock"),
    ]

    name = models.CharField(
        max_length=255,
        help_text="Product name",
    )

    sku = models.CharField(
        max_length=100,
        unique=True,
        help_text="Stock Keeping Unit - unique product code",
    )

    description = models.TextField(
        blank=True,
        help_text="Detailed description of the product",
    )

    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Selling price per unit",
    )

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
        help_text="Product category",
    )

    barcode = models.CharField(
        max_length=100,
        unique=True,
        null=True,
        blank=True,
        help_text="Barcode for scanning at the register",
    )

    unit = models.CharField(
        max_length=20,
        default="piece",
        help_text="Unit of sale (e.g., piece, kg, box)",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Inactive products cannot be sold",
    )

    stock = models.PositiveIntegerField(
        default=0,
        help_text="Quantity currently in stock",
    )

    low_stock_threshold = models.PositiveIntegerField(
        default=5,
        help_text="Stock at or below this level triggers a low stock alert",
    )

    reorder_point = models.PositiveIntegerField(
        default=10,
        help_text="Stock at or below this level should be reordered",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "inventory_products"
        ordering = ["name"]
        verbose_name = "Product"
        verbose_name_plural = "Products"
        indexes = [
            models.Index(fields=["is_active", "name"], name="product_active_name_idx"),
            models.Index(fields=["category", "is_active"], name="product_category_idx"),
            models.Index(fields=["stock"], name="product_stock_idx"),
        ]
        constraints = [
            models.CheckConstraint(check=models.Q(stock__gte=0), name="product_stock_non_negative"),
        ]

    def __str__(self):
        return f"{self.sku} - {self.name}"

    def save(self, *args, **kwargs):
        """Normalise empty barcodes to NULL so the unique index allows many."""
        if not self.barcode:
            self.barcode = None
        super().save(*args, **kwargs)

    def is_low_stock(self):
        """Check if stock is at or below the low stock threshold."""
        return self.stock <= self.low_stock_threshold

    def is_out_of_stock(self):
        return self.stock == 0

    def needs_reorder(self):
        """Check if stock is at or below the reorder point."""
        return self.stock <= self.reorder_point

    @property
    def stock_status(self):
        if self.is_out_of_stock():
            return self.STATUS_OUT_OF_STOCK
        if self.is_low_stock():
            return self.STATUS_LOW_STOCK
        if self.needs_reorder():
            return self.STATUS_REORDER
        return self.STATUS_IN_STOCK

    def calculate_stock_value(self):
        """Calculate total value of stock on hand at the selling price."""
        return self.price * self.stock

    def can_deduct_quantity(self, quantity):
        """Check if the requested quantity is available."""
        return self.stock >= quantity


class InventoryMovementQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise TypeError("Inventory movements are append-only and cannot be updated.")

    def delete(self):
        raise TypeError("Inventory movements are append-only and cannot be deleted.")


class InventoryMovement(models.Model):
    """
    Append-only audit trail of stock deltas.

    ``quantity`` is signed: positive for stock coming in, negative for stock
    going out. ``stock_after`` records the product stock once the delta was
    applied, so the log can be replayed to reconstruct stock at any point.
    """

    # Movement types
    TYPE_IN = "in"
    TYPE_OUT = "out"
    TYPE_ADJUSTMENT = "adjustment"

    MOVEMENT_TYPE_CHOICES = [
        (TYPE_IN, "Stock In"),
        (TYPE_OUT, "Stock Out"),
        (TYPE_ADJUSTMENT, "Adjustment"),
    ]

    # What caused the movement
    REF_SALE = "sale"
    REF_CANCELLATION = "cancellation"
    REF_RESTOCK = "restock"
    REF_ADJUSTMENT = "adjustment"
    REF_INITIAL = "initial"

    REFERENCE_TYPE_CHOICES = [
        (REF_SALE, "Sale"),
        (REF_CANCELLATION, "Sale Cancellation"),
        (REF_RESTOCK, "Restock"),
        (REF_ADJUSTMENT, "Manual Adjustment"),
        (REF_INITIAL, "Initial Stock"),
    ]

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="movements",
        help_text="Product whose stock changed",
    )

    quantity = models.IntegerField(
        help_text="Signed stock delta (negative for stock leaving the shelf)",
    )

    movement_type = models.CharField(
        max_length=20,
        choices=MOVEMENT_TYPE_CHOICES,
        help_text="Direction of the movement",
    )

    reference_type = models.CharField(
        max_length=20,
        choices=REFERENCE_TYPE_CHOICES,
        help_text="Business event that caused the movement",
    )

    reference_id = models.PositiveBigIntegerField(
        null=True,
        blank=True,
        help_text="ID of the record that caused the movement (e.g. transaction ID)",
    )

    stock_after = models.PositiveIntegerField(
        help_text="Product stock once this movement was applied",
    )

    notes = models.TextField(
        blank=True,
        help_text="Free text explanation, required for manual adjustments",
    )

    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="inventory_movements",
        help_text="User who made the change",
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    objects = InventoryMovementQuerySet.as_manager()

    class Meta:
        db_table = "inventory_movements"
        ordering = ["-created_at", "-id"]
        verbose_name = "Inventory Movement"
        verbose_name_plural = "Inventory Movements"
        indexes = [
            models.Index(fields=["product", "-created_at"], name="movement_product_idx"),
            models.Index(fields=["reference_type", "reference_id"], name="movement_reference_idx"),
        ]

    def __str__(self):
        sign = "+" if self.quantity > 0 else ""
        return f"{self.product.sku} {sign}{self.quantity} ({self.get_reference_type_display()})"

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise TypeError("Inventory movements are append-only and cannot be updated.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise TypeError("Inventory movements are append-only and cannot be deleted.")
