"""
Sale creation and cancellation.

Both operations run inside a single database transaction: either every
item row, stock movement and status change is written, or none is.
"""

import logging
from collections import OrderedDict
from decimal import Decimal

from django.conf import settings
from django.db import transaction as db_transaction

from apps.inventory.models import InventoryMovement, Product
from apps.inventory.services import apply_stock_change
from apps.notifications.tasks import send_transaction_receipt_task

from .models import Transaction, TransactionItem, round_money

logger = logging.getLogger(__name__)


class TransactionStateError(Exception):
    """Raised when a transaction is not in a state that allows the operation."""


class StockShortageError(Exception):
    """
    Raised when one or more lines of a sale exceed available stock.

    ``shortages`` maps product ID to a dict with ``requested`` and ``available``.
    """

    def __init__(self, shortages):
        self.shortages = shortages
        names = ", ".join(str(pk) for pk in shortages)
        super().__init__(f"Insufficient stock for product(s): {names}")


def merge_lines(items):
    """
    Collapse repeated products into one line each, keeping first-seen order.

    Args:
        items: iterable of (product, quantity) pairs

    Returns:
        OrderedDict mapping product ID to [product, total quantity]
    """
    merged = OrderedDict()
    for product, quantity in items:
        if product.pk in merged:
            merged[product.pk][1] += quantity
        else:
            merged[product.pk] = [product, quantity]
    return merged


def get_tax_rate():
    return Decimal(str(getattr(settings, "POS_TAX_RATE", "0.10")))


@db_transaction.atomic
def create_transaction(
    user,
    items,
    customer_name,
    customer_email="",
    customer_phone="",
    payment_method=Transaction.CASH,
    payment_amount=None,
):
    """
    Record a completed sale and deduct its stock.

    Args:
        user: Cashier processing the sale
        items: list of (Product, quantity) pairs
        customer_name: Customer name for the receipt
        customer_email: Receipt address, a receipt e-mail is queued when set
        customer_phone: Optional phone number
        payment_method: Transaction.CASH or Transaction.CARD
        payment_amount: Amount tendered, defaults to the total

    Returns:
        The completed Transaction

    Raises:
        StockShortageError: If any merged line exceeds available stock
        ValueError: If there are no items or a product is inactive
    """
    if not items:
        raise ValueError("A transaction needs at least one item.")

    lines = merge_lines(items)

    # Lock in primary key order so concurrent sales cannot deadlock
    products = Product.objects.select_for_update().filter(pk__in=lines.keys()).order_by("pk")
    locked = {product.pk: product for product in products}

    shortages = {}
    for product_id, (_, quantity) in lines.items():
        product = locked.get(product_id)
        if product is None or not product.is_active:
            raise ValueError(f"Product {product_id} is not available for sale.")
        if not product.can_deduct_quantity(quantity):
            shortages[product_id] = {"requested": quantity, "available": product.stock}

    if shortages:
        logger.warning(f"Sale by {user.username} rejected, insufficient stock: {shortages}")
        raise StockShortageError(shortages)

    txn = Transaction.objects.create(
        user=user,
        customer_name=customer_name,
        customer_email=customer_email or "",
        customer_phone=customer_phone or "",
        payment_method=payment_method,
        payment_amount=Decimal("0.00") if payment_amount is None else round_money(payment_amount),
    )

    for product_id, (_, quantity) in lines.items():
        product = locked[product_id]
        TransactionItem.objects.create(
            transaction=txn,
            product=product,
            quantity=quantity,
            price=product.price,
            subtotal=round_money(product.price * quantity),
        )
        apply_stock_change(
            product,
            -quantity,
            InventoryMovement.REF_SALE,
            user=user,
            reference_id=txn.pk,
            notes=f"Sale {txn.transaction_number}",
        )

    txn.calculate_totals(get_tax_rate())
    if payment_amount is None:
        txn.payment_amount = txn.total
        txn.change_amount = Decimal("0.00")

    txn.complete()
    txn.save()

    logger.info(
        f"Transaction {txn.transaction_number} completed by {user.username}: "
        f"total={txn.total} items={len(lines)}"
    )

    if txn.customer_email:
        transaction_id = txn.pk
        db_transaction.on_commit(lambda: send_transaction_receipt_task.delay(transaction_id))

    return txn


@db_transaction.atomic
def cancel_transaction(txn, user, reason=""):
    """
    Cancel a sale and put its stock back.

    Stock is only restored for completed sales; a pending sale never
    deducted any.

    Raises:
        TransactionStateError: If the transaction is already cancelled
    """
    locked = Transaction.objects.select_for_update().get(pk=txn.pk)

    if not locked.can_be_cancelled():
        raise TransactionStateError(
            f"Transaction {locked.transaction_number} is already {locked.status}."
        )

    if locked.status == Transaction.COMPLETED:
        for item in locked.items.select_related("product").order_by("product_id"):
            apply_stock_change(
                item.product,
                item.quantity,
                InventoryMovement.REF_CANCELLATION,
                user=user,
                reference_id=locked.pk,
                notes=f"Cancelled {locked.transaction_number}",
            )

    locked.cancel(user=user, reason=reason)
    locked.save()

    logger.info(f"Transaction {locked.transaction_number} cancelled by {user.username}")
    return locked
