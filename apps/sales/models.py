"""
Sales models for the point of sale.

A Transaction is one checkout at the register. It is created pending,
completed once every line has been priced and its stock deducted, and can
later be cancelled, which puts the stock back.
"""

from decimal import ROUND_HALF_UP, Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from django_fsm import FSMField, transition

from apps.core.models import User
from apps.inventory.models import Product

CENT = Decimal("0.01")


def round_money(value):
    """Round a Decimal amount to cents, half up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


class Transaction(models.Model):
    """
    A sales transaction processed at the register.

    Totals:
    - subtotal = sum of item subtotals
    - tax = subtotal * POS_TAX_RATE
    - total = subtotal + tax
    - change_amount = max(0, payment_amount - total)
    """

    # Payment method choices
    CASH = "cash"
    CARD = "card"

    PAYMENT_METHOD_CHOICES = [
        (CASH, "Cash"),
        (CARD, "Card"),
    ]

    # Status choices
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (PENDING, "Pending"),
        (COMPLETED, "Completed"),
        (CANCELLED, "Cancelled"),
    ]

    NUMBER_PREFIX = "TXN"

    transaction_number = models.CharField(
        max_length=20,
        unique=True,
        null=True,
        blank=True,
        editable=False,
        help_text="Human readable transaction number (e.g. TXN-00000042)",
    )

    user = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name="transactions",
        help_text="Cashier who processed the sale",
    )

    # Customer details
    customer_name = models.CharField(
        max_length=255,
        help_text="Customer name printed on the receipt",
    )

    customer_email = models.EmailField(
        blank=True,
        help_text="Customer email for the receipt",
    )

    customer_phone = models.CharField(
        max_length=30,
        blank=True,
        help_text="Customer phone number",
    )

    # Financial details
    subtotal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Sum of item subtotals before tax",
    )

    tax = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Tax amount",
    )

    total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Amount due (subtotal + tax)",
    )

    payment_method = models.CharField(
        max_length=10,
        choices=PAYMENT_METHOD_CHOICES,
        default=CASH,
        help_text="Payment method used",
    )

    payment_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Amount tendered by the customer",
    )

    change_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Change returned to the customer",
    )

    status = FSMField(
        default=PENDING,
        choices=STATUS_CHOICES,
        protected=True,
        help_text="Current status of the transaction",
    )

    # Lifecycle tracking
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cancelled_transactions",
        help_text="User who cancelled the transaction",
    )
    cancellation_reason = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "sales_transactions"
        ordering = ["-created_at", "-id"]
        verbose_name = "Transaction"
        verbose_name_plural = "Transactions"
        indexes = [
            models.Index(fields=["status", "-created_at"], name="txn_status_created_idx"),
            models.Index(fields=["user", "-created_at"], name="txn_user_created_idx"),
            models.Index(fields=["customer_email"], name="txn_customer_email_idx"),
        ]

    def __str__(self):
        return f"{self.transaction_number or 'TXN-?'} - {self.customer_name}"

    @classmethod
    def format_number(cls, pk):
        return f"{cls.NUMBER_PREFIX}-{pk:08d}"

    def save(self, *args, **kwargs):
        """Assign the transaction number from the primary key after the first insert."""
        super().save(*args, **kwargs)
        if not self.transaction_number:
            self.transaction_number = self.format_number(self.pk)
            type(self).objects.filter(pk=self.pk).update(
                transaction_number=self.transaction_number
            )

    def calculate_totals(self, tax_rate):
        """
        Recalculate subtotal, tax, total and change from the item rows.

        Args:
            tax_rate: Decimal fraction, e.g. Decimal("0.10")
        """
        subtotal = sum((item.subtotal for item in self.items.all()), Decimal("0.00"))
        self.subtotal = round_money(subtotal)
        self.tax = round_money(self.subtotal * Decimal(tax_rate))
        self.total = self.subtotal + self.tax
        self.change_amount = max(Decimal("0.00"), round_money(self.payment_amount - self.total))

    def can_be_cancelled(self):
        """Check if this transaction can be cancelled."""
        return self.status in [self.PENDING, self.COMPLETED]

    @transition(field=status, source=PENDING, target=COMPLETED)
    def complete(self):
        """Mark the transaction as completed."""
        self.completed_at = timezone.now()

    @transition(field=status, source=[PENDING, COMPLETED], target=CANCELLED)
    def cancel(self, user=None, reason=""):
        """
        Mark the transaction as cancelled.

        Args:
            user: User cancelling the transaction
            reason: Reason for cancellation
        """
        self.cancelled_at = timezone.now()
        self.cancelled_by = user
        self.cancellation_reason = reason


class TransactionItem(models.Model):
    """
    One line of a transaction.

    ``price`` is the product price at the time of sale, so later price
    changes do not alter past receipts.
    """

    transaction = models.ForeignKey(
        Transaction,
        on_delete=models.CASCADE,
        related_name="items",
        help_text="Transaction that this item belongs to",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="transaction_items",
        help_text="Product that was sold",
    )

    quantity = models.PositiveIntegerField(
        validators=[MinValueValidator(1)],
        help_text="Quantity sold",
    )

    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Unit price at time of sale",
    )

    subtotal = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Line total (price * quantity)",
    )

    class Meta:
        db_table = "sales_transaction_items"
        ordering = ["id"]
        verbose_name = "Transaction Item"
        verbose_name_plural = "Transaction Items"
        indexes = [
            models.Index(fields=["product"], name="txnitem_product_idx"),
        ]

    def __str__(self):
        return f"{self.product.name} x {self.quantity}"

    def save(self, *args, **kwargs):
        """
        Override save to calculate subtotal if not provided.
        """
        if self.subtotal is None:
            self.subtotal = self.calculate_subtotal()
        super().save(*args, **kwargs)

    def calculate_subtotal(self):
        """Calculate and return the subtotal for this item."""
        return round_money(self.price * self.quantity)
