"""
Celery tasks for low stock alerts and receipt emails.
"""

import logging

from django.db.models import F

from celery import shared_task

from apps.inventory.models import Product
from apps.sales.models import Transaction

from .services import cleanup_read_notifications as cleanup_read
from .services import notify_low_stock, send_transaction_receipt

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3)
def send_low_stock_alert_task(self, product_id: int):
    """
    Celery task to alert staff that a product is running low.

    The stock level is re-read when the task runs; if the product was
    restocked in the meantime no alert is sent.

    Args:
        product_id: ID of the Product that crossed its threshold
    """
    try:
        product = Product.objects.get(pk=product_id)
    except Product.DoesNotExist:
        logger.error(f"Product {product_id} not found for low stock alert")
        return 0

    if not product.is_low_stock():
        logger.info(f"Product {product.sku} no longer low on stock, alert skipped")
        return 0

    try:
        return notify_low_stock([product])
    except Exception as exc:
        logger.error(f"Failed to send low stock alert for {product.sku}: {exc}")
        # Retry with exponential backoff
        raise self.retry(exc=exc, countdown=60 * (2**self.request.retries))


@shared_task(bind=True, max_retries=3)
def send_transaction_receipt_task(self, transaction_id: int):
    """
    Celery task to email a receipt to the customer.

    Args:
        transaction_id: ID of the Transaction
    """
    try:
        txn = Transaction.objects.select_related("user").get(pk=transaction_id)
    except Transaction.DoesNotExist:
        logger.error(f"Transaction {transaction_id} not found for receipt email")
        return None

    try:
        email_notification = send_transaction_receipt(txn)
    except Exception as exc:
        logger.error(f"Failed to send receipt for {txn.transaction_number}: {exc}")
        # Retry with exponential backoff
        raise self.retry(exc=exc, countdown=60 * (2**self.request.retries))

    if email_notification is None:
        return None

    logger.info(f"Receipt for {txn.transaction_number} sent to {txn.customer_email}")
    return email_notification.pk


@shared_task
def check_low_stock_products():
    """
    Periodic task to send one digest alert for every active low stock product.

    Scheduled daily through Celery beat.
    """
    products = list(
        Product.objects.filter(is_active=True, stock__lte=F("low_stock_threshold")).order_by(
            "stock", "name"
        )
    )

    if not products:
        logger.info("Low stock sweep found no products below threshold")
        return 0

    notified = notify_low_stock(products)
    logger.info(f"Low stock sweep: {len(products)} products, {notified} staff notified")
    return len(products)


@shared_task
def cleanup_read_notifications(days: int = 30):
    """
    Periodic task to delete notifications read more than ``days`` ago.
    """
    return cleanup_read(days=days)
