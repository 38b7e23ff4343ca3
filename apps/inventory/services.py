"""
Stock mutation service.

Every change to ``Product.stock`` goes through ``apply_stock_change`` so the
row lock, the non-negative check, the movement log and the low stock signal
are never skipped.
"""

import logging

from django.db import transaction

from .models import InventoryMovement, Product
from .signals import low_stock_detected

logger = logging.getLogger(__name__)


class InsufficientStockError(Exception):
    """Raised when a stock change would take a product below zero."""

    def __init__(self, product, requested, available):
        self.product = product
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {product.name}. "
            f"Available: {available}, Requested: {requested}"
        )


def _movement_type_for(quantity, reference_type):
    if reference_type == InventoryMovement.REF_ADJUSTMENT:
        return InventoryMovement.TYPE_ADJUSTMENT
    return InventoryMovement.TYPE_IN if quantity > 0 else InventoryMovement.TYPE_OUT


@transaction.atomic
def apply_stock_change(
    product,
    quantity,
    reference_type,
    user=None,
    reference_id=None,
    notes="",
):
    """
    Apply a signed stock delta to a product.

    Args:
        product: Product instance or primary key
        quantity: Signed delta, negative to take stock out
        reference_type: One of InventoryMovement.REFERENCE_TYPE_CHOICES
        user: User responsible for the change
        reference_id: ID of the causing record (e.g. transaction ID)
        notes: Free text stored on the movement

    Returns:
        The created InventoryMovement

    Raises:
        ValueError: If quantity is zero
        InsufficientStockError: If the result would be negative
    """
    if quantity == 0:
        raise ValueError("Stock change quantity must not be zero.")

    product_id = product.pk if isinstance(product, Product) else product
    locked = Product.objects.select_for_update().get(pk=product_id)

    previous_stock = locked.stock
    new_stock = previous_stock + quantity
    if new_stock < 0:
        raise InsufficientStockError(locked, -quantity, previous_stock)

    locked.stock = new_stock
    locked.save(update_fields=["stock", "updated_at"])

    movement = InventoryMovement.objects.create(
        product=locked,
        quantity=quantity,
        movement_type=_movement_type_for(quantity, reference_type),
        reference_type=reference_type,
        reference_id=reference_id,
        stock_after=new_stock,
        notes=notes,
        user=user,
    )

    # Keep the caller's instance in step with the database
    if isinstance(product, Product):
        product.stock = new_stock

    logger.info(
        f"Stock for {locked.sku} changed {previous_stock} -> {new_stock} "
        f"({reference_type}, ref={reference_id})"
    )

    if locked.is_low_stock():
        low_stock_detected.send(
            sender=Product,
            product=locked,
            previous_stock=previous_stock,
            current_stock=new_stock,
        )

    return movement


def restock_product(product, quantity, user=None, notes=""):
    """Add received stock to a product."""
    if quantity < 1:
        raise ValueError("Restock quantity must be at least 1.")
    return apply_stock_change(
        product,
        quantity,
        InventoryMovement.REF_RESTOCK,
        user=user,
        notes=notes or "Restock",
    )


def adjust_product_stock(product, quantity, user=None, notes=""):
    """Manual stock correction (count differences, damage, shrinkage)."""
    return apply_stock_change(
        product,
        quantity,
        InventoryMovement.REF_ADJUSTMENT,
        user=user,
        notes=notes,
    )


def record_initial_stock(product, user=None):
    """
    Log the opening stock of a newly created product.

    The product row already carries the stock, so only the movement is written.
    """
    if product.stock <= 0:
        return None
    movement = InventoryMovement.objects.create(
        product=product,
        quantity=product.stock,
        movement_type=InventoryMovement.TYPE_IN,
        reference_type=InventoryMovement.REF_INITIAL,
        stock_after=product.stock,
        notes="Initial stock",
        user=user,
    )
    logger.info(f"Recorded initial stock of {product.stock} for {product.sku}")
    return movement
